"""
Block audit — text search for transactions that mention the tracked mint.

Cross-checks the walker: every successful transaction whose raw payload
contains the mint address anywhere is listed by its first signature. A
transaction can show up here without producing a transfer line (the mint
appears in its balance table but no tracked transfer instruction ran).
"""

from __future__ import annotations

import json

from transfer_monitor.monitor_logging import get_logger
from transfer_monitor.solana_listener.models import Block

logger = get_logger(__name__)


def find_mint_transaction_signatures(block: Block, mint: str) -> list[str]:
    """First signature of each successful transaction whose payload mentions `mint`."""
    if block.transactions is None:
        logger.warning("audit_block_no_transactions", slot=block.slot)
        return []
    signatures: list[str] = []
    for transaction in block.transactions:
        if not transaction.succeeded or transaction.signature is None:
            continue
        if mint in json.dumps(transaction.raw):
            signatures.append(transaction.signature)
    return signatures
