"""
Sliding-window request limiter for the Solana RPC node.

Public nodes enforce a per-window request budget without telling the
client; exceeding it shows up only as failed or slow requests. RateWindow
keeps the timestamps of recent requests and blocks before a new one while
the trailing window is full.
"""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable

from transfer_monitor.monitor_logging import get_logger

logger = get_logger(__name__)

DEFAULT_POLL_SEC = 0.1


class RateWindow:
    """At most `max_requests` acquisitions per trailing `window_sec` seconds."""

    def __init__(
        self,
        max_requests: int,
        window_sec: float,
        *,
        poll_sec: float = DEFAULT_POLL_SEC,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_requests <= 0:
            raise ValueError("max_requests must be positive")
        if window_sec <= 0:
            raise ValueError("window_sec must be positive")
        if poll_sec <= 0:
            raise ValueError("poll_sec must be positive")
        self._max_requests = max_requests
        self._window_sec = window_sec
        self._poll_sec = poll_sec
        self._clock = clock
        self._sleep = sleep
        self._timestamps: deque[float] = deque()

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window_sec(self) -> float:
        return self._window_sec

    def __len__(self) -> int:
        return len(self._timestamps)

    def _prune(self, now: float) -> None:
        cutoff = now - self._window_sec
        while self._timestamps and self._timestamps[0] <= cutoff:
            self._timestamps.popleft()

    def acquire(self) -> None:
        """Block until the window has room, then record one request."""
        self._prune(self._clock())
        waited = 0
        while len(self._timestamps) >= self._max_requests:
            if waited == 0:
                logger.debug(
                    "rate_window_wait",
                    in_window=len(self._timestamps),
                    max_requests=self._max_requests,
                    window_sec=self._window_sec,
                )
            self._sleep(self._poll_sec)
            waited += 1
            self._prune(self._clock())
        self._timestamps.append(self._clock())
