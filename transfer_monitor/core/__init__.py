"""
Core utilities — exception taxonomy shared by the listener, walker and CLI.
"""

from transfer_monitor.core.exceptions import (
    FormatError,
    MalformedInputError,
    MintMismatchError,
    RpcError,
    TransferMonitorError,
)

__all__ = [
    "FormatError",
    "MalformedInputError",
    "MintMismatchError",
    "RpcError",
    "TransferMonitorError",
]
