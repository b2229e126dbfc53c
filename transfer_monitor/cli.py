"""
Command-line entry point for the transfer monitor.

    transfer-monitor watch [--start-slot N]   follow new blocks forever (default)
    transfer-monitor block --slot N           print the transfers of one block
    transfer-monitor audit --slot N           list transactions mentioning the mint

Env: SOLANA_RPC_URL, TOKEN_MINT_ADDRESS, TOKEN_SYMBOL, RATE_LIMIT_MAX_REQUESTS,
RATE_LIMIT_WINDOW_SEC, EMPTY_SLOTS_BACKOFF_SEC, RPC_COMMITMENT, LOG_LEVEL, LOG_FORMAT.
"""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Sequence
from typing import TextIO

from transfer_monitor import __version__
from transfer_monitor.config import MonitorSettings, get_settings
from transfer_monitor.core.exceptions import TransferMonitorError
from transfer_monitor.monitor_logging import configure_structlog, get_logger
from transfer_monitor.solana_listener.audit import find_mint_transaction_signatures
from transfer_monitor.solana_listener.listener import SlotPoller
from transfer_monitor.solana_listener.rate_limit import RateWindow
from transfer_monitor.solana_listener.rpc import SolanaRpcClient
from transfer_monitor.solana_listener.walker import write_block_transfers

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transfer-monitor",
        description="Print SPL token transfers of one mint from new Solana blocks",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: INFO)",
    )
    sub = parser.add_subparsers(dest="command")

    watch = sub.add_parser("watch", help="Follow new blocks and print transfers (default)")
    watch.add_argument(
        "--start-slot",
        type=int,
        default=None,
        help="Slot to start from (default: the node's current slot)",
    )

    block = sub.add_parser("block", help="Print the transfers of a single block")
    block.add_argument("--slot", type=int, required=True)

    audit = sub.add_parser(
        "audit", help="List successful transactions whose payload mentions the mint"
    )
    audit.add_argument("--slot", type=int, required=True)
    return parser


def _make_client(settings: MonitorSettings) -> SolanaRpcClient:
    return SolanaRpcClient(
        settings.rpc_url,
        commitment=settings.commitment,
        timeout_sec=settings.rpc_timeout_sec,
    )


def run_watch(settings: MonitorSettings, start_slot: int | None, out: TextIO) -> None:
    rate_window = RateWindow(
        settings.rate_limit_max_requests,
        settings.rate_limit_window_sec,
        poll_sec=settings.rate_limit_poll_sec,
    )
    with _make_client(settings) as client:
        poller = SlotPoller(
            client,
            out,
            mint=settings.mint_address,
            token_symbol=settings.token_symbol,
            rate_window=rate_window,
            empty_backoff_sec=settings.empty_slots_backoff_sec,
            start_slot=start_slot,
        )
        poller.install_signal_handlers()
        poller.run()


def run_block(settings: MonitorSettings, slot: int, out: TextIO) -> int:
    with _make_client(settings) as client:
        block = client.get_block(slot)
    return write_block_transfers(
        block, out, mint=settings.mint_address, token_symbol=settings.token_symbol
    )


def run_audit(settings: MonitorSettings, slot: int, out: TextIO) -> list[str]:
    with _make_client(settings) as client:
        block = client.get_block(slot)
    signatures = find_mint_transaction_signatures(block, settings.mint_address)
    for signature in signatures:
        out.write(signature + "\n")
    out.flush()
    return signatures


def main(argv: Sequence[str] | None = None, out: TextIO | None = None) -> int:
    """Parse arguments, load settings and run the selected command.

    Returns:
        Process exit code: 0 on success or clean shutdown, 1 on error.
    """
    args = build_parser().parse_args(argv)
    configure_structlog(level=args.log_level)
    out = out or sys.stdout
    command = args.command or "watch"

    try:
        settings = get_settings()
    except ValueError as e:
        logger.error("cli_config_error", error=str(e))
        return 1
    settings.log_settings()

    try:
        if command == "block":
            run_block(settings, args.slot, out)
        elif command == "audit":
            run_audit(settings, args.slot, out)
        else:
            run_watch(settings, getattr(args, "start_slot", None), out)
    except KeyboardInterrupt:
        logger.info("cli_interrupted")
        return 0
    except TransferMonitorError as e:
        logger.error("cli_fatal_error", command=command, error=str(e), error_type=type(e).__name__)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
