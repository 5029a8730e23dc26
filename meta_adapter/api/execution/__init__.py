"""
Execution Package

Outbound calls for auto-registered endpoints, multi-step flows and the
chain-data provider extension.
"""

from .executor import ExecutionResult, Executor, FlowExecutionResult
from .web3 import Web3ExecutionResult, Web3Executor

__all__ = [
    "ExecutionResult",
    "Executor",
    "FlowExecutionResult",
    "Web3ExecutionResult",
    "Web3Executor",
]
