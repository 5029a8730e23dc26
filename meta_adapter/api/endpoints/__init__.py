"""
API endpoints package
"""

from . import health
from . import meta_adapter
from . import web3
