"""
Environment variable loading for Transfer Monitor.

- SOLANA_NETWORK: devnet | mainnet (default: mainnet)
- SOLANA_RPC_URL: RPC endpoint (read from .env)
- HELIUS_API_KEY: Helius API key (fallback for RPC URL when SOLANA_RPC_URL is unset)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is transfer_monitor/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEVNET_RPC_URL = "https://api.devnet.solana.com"
MAINNET_RPC_URL = "https://api.mainnet-beta.solana.com"
HELIUS_MAINNET_URL_TEMPLATE = "https://mainnet.helius-rpc.com/?api-key={key}"
HELIUS_DEVNET_URL_TEMPLATE = "https://devnet.helius-rpc.com/?api-key={key}"


def load_monitor_env() -> None:
    """Load .env from project root. Existing variables win; safe to call multiple times."""
    load_dotenv(_ENV_PATH, override=False)


def get_env(name: str, default: str = "") -> str:
    """Return a stripped env value, or default when unset or blank."""
    load_monitor_env()
    value = (os.getenv(name) or "").strip()
    return value or default


def get_solana_network() -> str:
    """
    Return SOLANA_NETWORK from env: devnet | mainnet.
    Default: mainnet.
    """
    raw = get_env("SOLANA_NETWORK", "mainnet").lower()
    if raw == "devnet":
        return "devnet"
    return "mainnet"


def get_solana_rpc_url() -> str:
    """
    Resolve Solana RPC URL from env.
    Order: SOLANA_RPC_URL > HELIUS_API_KEY (network-specific) > devnet/mainnet default.
    """
    url = get_env("SOLANA_RPC_URL")
    if url:
        return url
    network = get_solana_network()
    key = get_env("HELIUS_API_KEY")
    if key:
        if network == "devnet":
            return HELIUS_DEVNET_URL_TEMPLATE.format(key=key)
        return HELIUS_MAINNET_URL_TEMPLATE.format(key=key)
    return DEVNET_RPC_URL if network == "devnet" else MAINNET_RPC_URL


def mask_rpc_url(url: str) -> str:
    """Hide the API key in a Helius-style RPC URL."""
    if "api-key=" in url:
        return url.split("api-key=")[0] + "api-key=***"
    return url
