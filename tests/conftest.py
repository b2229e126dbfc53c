"""
Pytest fixtures for transfer_monitor tests. No network: blocks are built
from jsonParsed payload builders and time is driven by a fake clock.
"""

from __future__ import annotations

import pytest

from tests.payloads import (
    TOKEN_ACCOUNT_A,
    TOKEN_ACCOUNT_B,
    TOKEN_ACCOUNT_C,
    make_block,
    make_tx,
    transfer_checked_ix,
    transfer_ix,
)


class FakeClock:
    """Monotonic clock that only moves when sleep() is called."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep developer env vars from leaking into settings tests."""
    for name in (
        "SOLANA_RPC_URL",
        "SOLANA_NETWORK",
        "HELIUS_API_KEY",
        "TOKEN_MINT_ADDRESS",
        "TOKEN_SYMBOL",
        "RATE_LIMIT_MAX_REQUESTS",
        "RATE_LIMIT_WINDOW_SEC",
        "RATE_LIMIT_POLL_SEC",
        "EMPTY_SLOTS_BACKOFF_SEC",
        "RPC_TIMEOUT_SEC",
        "RPC_COMMITMENT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("transfer_monitor.config.env.load_monitor_env", lambda: None)


@pytest.fixture
def usdc_block_payload():
    """
    One successful transaction with a transferChecked A -> B of 1,400.01 USDC
    and a transfer C -> A of 70 USDC; one failed transaction with a transfer.
    """
    ok_tx = make_tx(
        [
            [transfer_checked_ix(TOKEN_ACCOUNT_A, TOKEN_ACCOUNT_B, "1400010000")],
            [transfer_ix(TOKEN_ACCOUNT_C, TOKEN_ACCOUNT_A, "70000000")],
        ],
        signature="3Tf9PsFsv3MDmr5UEviSGGkAwDXRbgYpN3vQrnSwgFHX",
    )
    failed_tx = make_tx(
        [[transfer_ix(TOKEN_ACCOUNT_A, TOKEN_ACCOUNT_C, "260044")]],
        err={"InstructionError": [0, {"Custom": 1}]},
        signature="3CLSS7DNxNxZjWYqwfTyF65LBZdWjFVSrvMC7cjy8zVE",
    )
    return make_block([ok_tx, failed_tx])
