"""
Application-level exceptions.

Malformed input and mint mismatches are hard errors: they propagate through
the walker and the poller and stop the run. Expected absences (untracked
accounts, failed transactions, empty slot lists) never raise.
"""

from __future__ import annotations

from typing import Any


class TransferMonitorError(Exception):
    """Base class for every error raised by transfer_monitor."""


class MalformedInputError(TransferMonitorError, ValueError):
    """An RPC payload is missing an expected field or has an unexpected shape."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class MintMismatchError(TransferMonitorError):
    """Source and destination token accounts resolve to different mints."""

    def __init__(self, source_mint: str, destination_mint: str) -> None:
        super().__init__(
            f"source and destination mint do not match: {source_mint} != {destination_mint}"
        )
        self.source_mint = source_mint
        self.destination_mint = destination_mint


class FormatError(TransferMonitorError, ValueError):
    """A raw token amount cannot be rendered for display."""


class RpcError(TransferMonitorError):
    """Raised when the Solana node returns an error or cannot be reached."""

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        status_code: int | None = None,
        data: Any = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.data = data
