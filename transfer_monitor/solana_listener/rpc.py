"""
Solana JSON-RPC client — slot and block fetches over HTTP.

Responsibilities:
- Build JSON-RPC 2.0 request bodies for getSlot, getBlocks and getBlock.
- Raise RpcError on transport failures, HTTP errors and RPC error objects.
- Return blocks already parsed into Block models.
"""

from __future__ import annotations

import itertools
from typing import Any

import httpx

from transfer_monitor.core.exceptions import RpcError
from transfer_monitor.monitor_logging import get_logger
from transfer_monitor.solana_listener.models import Block
from transfer_monitor.solana_listener.parser import parse_block

logger = get_logger(__name__)

DEFAULT_COMMITMENT = "finalized"
DEFAULT_TIMEOUT_SEC = 30.0

# getBlock and getBlocks reject "processed"
SUPPORTED_COMMITMENTS = frozenset({"confirmed", "finalized"})


def make_block_config(commitment: str = DEFAULT_COMMITMENT) -> dict[str, Any]:
    """getBlock options: full transactions, parsed instructions, v0 transactions."""
    return {
        "encoding": "jsonParsed",
        "transactionDetails": "full",
        "maxSupportedTransactionVersion": 0,
        "rewards": False,
        "commitment": commitment,
    }


def _is_slot(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class SolanaRpcClient:
    """
    Minimal synchronous Solana JSON-RPC client.

    Owns an httpx.Client unless one is passed in; use as a context manager
    or call close() when done.
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        commitment: str = DEFAULT_COMMITMENT,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        http_client: httpx.Client | None = None,
    ) -> None:
        if not rpc_url.strip():
            raise ValueError("rpc_url must be non-empty")
        if commitment not in SUPPORTED_COMMITMENTS:
            raise ValueError(f"unsupported commitment for block queries: {commitment!r}")
        self._rpc_url = rpc_url.rstrip("/")
        self._commitment = commitment
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=httpx.Timeout(timeout_sec))
        self._ids = itertools.count(1)

    def __enter__(self) -> "SolanaRpcClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _build_rpc_body(self, method: str, params: list[Any]) -> dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }

    def call(self, method: str, params: list[Any]) -> Any:
        """Perform one JSON-RPC call; raise RpcError on transport or RPC error."""
        body = self._build_rpc_body(method, params)
        logger.debug("rpc_request", method=method, request_id=body["id"])
        try:
            resp = self._client.post(self._rpc_url, json=body)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            raise RpcError(
                f"Solana RPC {method} failed with HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise RpcError(f"Solana RPC {method} request failed: {e}") from e
        except ValueError as e:
            raise RpcError(f"Solana RPC {method} returned invalid JSON") from e

        if not isinstance(data, dict):
            raise RpcError(f"Solana RPC {method} returned a non-object response")
        if "error" in data:
            err = data["error"] or {}
            message = err.get("message", err) if isinstance(err, dict) else err
            code = err.get("code") if isinstance(err, dict) else None
            raise RpcError(
                f"Solana RPC error: {message} (code={code})",
                code=code,
                data=err.get("data") if isinstance(err, dict) else None,
            )
        if "result" not in data:
            raise RpcError(f"Solana RPC {method} returned no result")
        return data["result"]

    def get_current_slot(self) -> int:
        """Latest slot at the configured commitment (getSlot)."""
        result = self.call("getSlot", [{"commitment": self._commitment}])
        if not _is_slot(result):
            raise RpcError(f"Solana RPC getSlot returned a non-integer result: {result!r}")
        return result

    def get_slots(self, from_slot: int) -> list[int]:
        """Slots with a produced block at or after `from_slot` (getBlocks)."""
        result = self.call("getBlocks", [from_slot, {"commitment": self._commitment}])
        if not isinstance(result, list):
            raise RpcError("Solana RPC getBlocks returned a non-list result")
        if not all(_is_slot(s) for s in result):
            raise RpcError("Solana RPC getBlocks returned a non-integer slot")
        return result

    def get_block_raw(self, slot: int) -> dict[str, Any]:
        """Raw getBlock result with parsed instructions and token balances."""
        result = self.call("getBlock", [slot, make_block_config(self._commitment)])
        if result is None:
            raise RpcError(f"Solana RPC getBlock returned no block for slot {slot}")
        return result

    def get_block(self, slot: int) -> Block:
        """getBlock for `slot`, parsed into a Block."""
        return parse_block(self.get_block_raw(slot), slot)
