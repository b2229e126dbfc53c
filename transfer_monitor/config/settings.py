"""
Application settings and environment configuration.

Responsibilities:
- Load configuration from environment variables and .env files.
- Validate required settings and provide defaults for optional ones.
- Expose typed settings (RPC URL, tracked mint, rate-limit budget, etc.)
  for use across the poller, RPC client and CLI.
"""

from __future__ import annotations

from dataclasses import dataclass

from transfer_monitor.config.env import get_env, get_solana_rpc_url, mask_rpc_url
from transfer_monitor.monitor_logging import get_logger
from transfer_monitor.solana_listener.listener import DEFAULT_EMPTY_SLOTS_BACKOFF_SEC
from transfer_monitor.solana_listener.models import DEFAULT_TOKEN_SYMBOL
from transfer_monitor.solana_listener.rate_limit import (
    DEFAULT_POLL_SEC as DEFAULT_RATE_LIMIT_POLL_SEC,
)
from transfer_monitor.solana_listener.rpc import (
    DEFAULT_COMMITMENT,
    SUPPORTED_COMMITMENTS,
)
from transfer_monitor.solana_listener.rpc import DEFAULT_TIMEOUT_SEC as DEFAULT_RPC_TIMEOUT_SEC

logger = get_logger(__name__)

USDC_MINT_ADDRESS = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"

DEFAULT_RATE_LIMIT_MAX_REQUESTS = 100
DEFAULT_RATE_LIMIT_WINDOW_SEC = 10.0


@dataclass(frozen=True)
class MonitorSettings:
    """
    Runtime settings for the transfer monitor.

    Attributes:
        rpc_url: Solana JSON-RPC HTTP endpoint.
        mint_address: Base58 mint of the tracked token.
        token_symbol: Symbol printed in transfer lines.
        rate_limit_max_requests: Request budget per rate window.
        rate_limit_window_sec: Length of the trailing rate window.
        rate_limit_poll_sec: Sleep between re-checks while over budget.
        empty_slots_backoff_sec: Sleep when no new slots are available.
        rpc_timeout_sec: HTTP timeout per RPC request.
        commitment: Commitment level for slot and block queries.
    """

    rpc_url: str
    mint_address: str = USDC_MINT_ADDRESS
    token_symbol: str = DEFAULT_TOKEN_SYMBOL
    rate_limit_max_requests: int = DEFAULT_RATE_LIMIT_MAX_REQUESTS
    rate_limit_window_sec: float = DEFAULT_RATE_LIMIT_WINDOW_SEC
    rate_limit_poll_sec: float = DEFAULT_RATE_LIMIT_POLL_SEC
    empty_slots_backoff_sec: float = DEFAULT_EMPTY_SLOTS_BACKOFF_SEC
    rpc_timeout_sec: float = DEFAULT_RPC_TIMEOUT_SEC
    commitment: str = DEFAULT_COMMITMENT

    def __post_init__(self) -> None:
        if not self.rpc_url:
            raise ValueError("RPC URL is required (SOLANA_RPC_URL)")
        if not self.rpc_url.startswith(("http://", "https://")):
            raise ValueError(f"Invalid RPC URL scheme: {self.rpc_url!r}. Expected http or https")
        if not self.mint_address:
            raise ValueError("Mint address is required (TOKEN_MINT_ADDRESS)")
        if not self.token_symbol:
            raise ValueError("Token symbol must be non-empty (TOKEN_SYMBOL)")
        if self.rate_limit_max_requests <= 0:
            raise ValueError(
                f"Rate limit budget must be positive, got {self.rate_limit_max_requests}"
            )
        if self.rate_limit_window_sec <= 0:
            raise ValueError(
                f"Rate limit window must be positive, got {self.rate_limit_window_sec}"
            )
        if self.rate_limit_poll_sec <= 0:
            raise ValueError(
                f"Rate limit poll interval must be positive, got {self.rate_limit_poll_sec}"
            )
        if self.empty_slots_backoff_sec <= 0:
            raise ValueError(
                f"Empty slot backoff must be positive, got {self.empty_slots_backoff_sec}"
            )
        if self.rpc_timeout_sec <= 0:
            raise ValueError(f"RPC timeout must be positive, got {self.rpc_timeout_sec}")
        if self.commitment not in SUPPORTED_COMMITMENTS:
            raise ValueError(
                f"Unsupported commitment: {self.commitment}. "
                f"Supported: {', '.join(sorted(SUPPORTED_COMMITMENTS))}"
            )

    @classmethod
    def from_env(cls) -> "MonitorSettings":
        """Load settings from environment variables (and .env).

        Raises:
            ValueError: If a variable is present but invalid.
        """
        return cls(
            rpc_url=get_solana_rpc_url(),
            mint_address=get_env("TOKEN_MINT_ADDRESS", USDC_MINT_ADDRESS),
            token_symbol=get_env("TOKEN_SYMBOL", DEFAULT_TOKEN_SYMBOL),
            rate_limit_max_requests=_env_int(
                "RATE_LIMIT_MAX_REQUESTS", DEFAULT_RATE_LIMIT_MAX_REQUESTS
            ),
            rate_limit_window_sec=_env_float("RATE_LIMIT_WINDOW_SEC", DEFAULT_RATE_LIMIT_WINDOW_SEC),
            rate_limit_poll_sec=_env_float("RATE_LIMIT_POLL_SEC", DEFAULT_RATE_LIMIT_POLL_SEC),
            empty_slots_backoff_sec=_env_float(
                "EMPTY_SLOTS_BACKOFF_SEC", DEFAULT_EMPTY_SLOTS_BACKOFF_SEC
            ),
            rpc_timeout_sec=_env_float("RPC_TIMEOUT_SEC", DEFAULT_RPC_TIMEOUT_SEC),
            commitment=get_env("RPC_COMMITMENT", DEFAULT_COMMITMENT).lower(),
        )

    def log_settings(self) -> None:
        """Log the settings for debugging; the RPC API key is masked."""
        logger.info(
            "settings_loaded",
            rpc_url=mask_rpc_url(self.rpc_url),
            mint_address=self.mint_address,
            token_symbol=self.token_symbol,
            rate_limit_max_requests=self.rate_limit_max_requests,
            rate_limit_window_sec=self.rate_limit_window_sec,
            empty_slots_backoff_sec=self.empty_slots_backoff_sec,
            commitment=self.commitment,
        )


def _env_int(name: str, default: int) -> int:
    raw = get_env(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = get_env(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def get_settings() -> MonitorSettings:
    """
    Return the current application settings.

    Returns:
        MonitorSettings built from the environment.
    """
    return MonitorSettings.from_env()
