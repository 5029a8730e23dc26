"""
Meta-Adapter - discovers public APIs, catalogs them and executes endpoints
and flows against them.
"""

__version__ = "1.0.0"
