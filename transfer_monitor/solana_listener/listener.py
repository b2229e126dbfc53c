"""
Rate-limited slot poller — drives the walker over new blocks in real time.

Responsibilities:
- Seed a slot cursor from the node's current slot.
- Poll getBlocks from the cursor, back off briefly when nothing is new.
- Fetch each new block in slot order and stream its transfers to a sink.
- Charge every RPC request against a sliding rate window.

Malformed payloads and mint mismatches propagate out of run(); only the
rate window and empty slot lists are retried.
"""

from __future__ import annotations

import signal
import threading
import time
from collections.abc import Callable
from typing import Any, Protocol, TextIO

from transfer_monitor.core.exceptions import TransferMonitorError
from transfer_monitor.monitor_logging import bind_slot, get_logger
from transfer_monitor.solana_listener.models import DEFAULT_TOKEN_SYMBOL, Block
from transfer_monitor.solana_listener.rate_limit import RateWindow
from transfer_monitor.solana_listener.walker import write_block_transfers

logger = get_logger(__name__)

DEFAULT_EMPTY_SLOTS_BACKOFF_SEC = 0.4


class SlotSource(Protocol):
    """The three node calls the poller depends on."""

    def get_current_slot(self) -> int: ...

    def get_slots(self, from_slot: int) -> list[int]: ...

    def get_block(self, slot: int) -> Block: ...


class SlotPoller:
    """
    Polling-based block follower for one tracked mint.

    Single-threaded: the only suspension points are the rate-window wait and
    the empty-slot backoff. next_slot only moves forward.
    """

    def __init__(
        self,
        client: SlotSource,
        sink: TextIO,
        *,
        mint: str,
        rate_window: RateWindow,
        token_symbol: str = DEFAULT_TOKEN_SYMBOL,
        empty_backoff_sec: float = DEFAULT_EMPTY_SLOTS_BACKOFF_SEC,
        start_slot: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Args:
            client: Node client providing get_current_slot / get_slots / get_block.
            sink: Text stream receiving block headers and transfer lines.
            mint: Base58 mint of the tracked token.
            rate_window: Sliding window every RPC request is charged against.
            token_symbol: Symbol printed in transfer lines.
            empty_backoff_sec: Sleep when getBlocks returns no new slots.
            start_slot: First slot to process; defaults to the node's current slot.
            sleep: Sleep function (injectable for tests).
        """
        if not mint:
            raise ValueError("mint must be non-empty")
        if empty_backoff_sec <= 0:
            raise ValueError("empty_backoff_sec must be positive")
        if start_slot is not None and start_slot < 0:
            raise ValueError("start_slot must be non-negative")

        self._client = client
        self._sink = sink
        self._mint = mint
        self._rate_window = rate_window
        self._token_symbol = token_symbol
        self._empty_backoff_sec = empty_backoff_sec
        self._sleep = sleep
        self._next_slot = start_slot
        self._stop_event = threading.Event()

    @property
    def next_slot(self) -> int | None:
        return self._next_slot

    def stop(self) -> None:
        """Request shutdown; run() returns after the current iteration."""
        self._stop_event.set()

    def install_signal_handlers(self) -> None:
        """Stop on SIGINT/SIGTERM where the platform and thread allow it."""

        def _handle_sig(signum: int, frame: Any) -> None:
            sig = "SIGINT" if signum == signal.SIGINT else "SIGTERM"
            logger.info("poller_shutdown_signal", signal=sig)
            self.stop()

        try:
            signal.signal(signal.SIGINT, _handle_sig)
            if hasattr(signal, "SIGTERM"):
                signal.signal(signal.SIGTERM, _handle_sig)
        except (ValueError, OSError):
            # Signal only valid in main thread / not supported on this platform
            pass

    def start(self) -> int:
        """Seed the cursor from the node unless a start slot was given."""
        if self._next_slot is None:
            self._rate_window.acquire()
            self._next_slot = self._client.get_current_slot()
        logger.info(
            "poller_started",
            next_slot=self._next_slot,
            mint=self._mint,
            max_requests=self._rate_window.max_requests,
            window_sec=self._rate_window.window_sec,
        )
        return self._next_slot

    def poll_once(self) -> int:
        """
        Run one iteration: fetch new slots, then process each block in order.

        Returns:
            Number of transfer lines written.
        """
        if self._next_slot is None:
            self.start()

        self._rate_window.acquire()
        slots = self._client.get_slots(self._next_slot)
        if not slots:
            logger.debug("poller_slots_empty", next_slot=self._next_slot)
            self._sleep(self._empty_backoff_sec)
            return 0

        slots = sorted(set(s for s in slots if s >= self._next_slot))
        if not slots:
            logger.debug("poller_slots_stale", next_slot=self._next_slot)
            self._sleep(self._empty_backoff_sec)
            return 0
        self._next_slot = slots[-1] + 1

        written = 0
        for slot in slots:
            self._rate_window.acquire()
            slot_logger = bind_slot(slot)
            try:
                block = self._client.get_block(slot)
                slot_logger.debug("poller_block_fetched", block_time=block.block_time)
                written += write_block_transfers(
                    block,
                    self._sink,
                    mint=self._mint,
                    token_symbol=self._token_symbol,
                )
            except TransferMonitorError as e:
                slot_logger.error("poller_block_failed", error=str(e), error_type=type(e).__name__)
                raise
        return written

    def run(self) -> None:
        """Poll until stop() is called. Hard errors propagate to the caller."""
        self.start()
        try:
            while not self._stop_event.is_set():
                self.poll_once()
        finally:
            logger.info("poller_stopped", next_slot=self._next_slot)
