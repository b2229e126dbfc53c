"""
Solana listener package.

Polls finalized slots via JSON-RPC, parses jsonParsed blocks, resolves token
accounts to owners and emits one Transfer per tracked-mint transfer.
"""

from transfer_monitor.solana_listener.amount import format_amount
from transfer_monitor.solana_listener.listener import SlotPoller
from transfer_monitor.solana_listener.models import Block, Transaction, Transfer
from transfer_monitor.solana_listener.parser import parse_block
from transfer_monitor.solana_listener.rate_limit import RateWindow
from transfer_monitor.solana_listener.rpc import SolanaRpcClient
from transfer_monitor.solana_listener.walker import iter_block_transfers, write_block_transfers

__all__ = [
    "Block",
    "RateWindow",
    "SlotPoller",
    "SolanaRpcClient",
    "Transaction",
    "Transfer",
    "format_amount",
    "iter_block_transfers",
    "parse_block",
    "write_block_transfers",
]
