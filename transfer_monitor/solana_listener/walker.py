"""
Block walker — runs the resolver and extractor over every transaction.

Failed transactions are skipped. For each successful one the account
mapping is built from preTokenBalances, then every inner instruction that
targets the SPL Token program is parsed and extracted. Transfers come out in
transaction order, then instruction order.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TextIO

from transfer_monitor.monitor_logging import get_logger
from transfer_monitor.solana_listener.accounts import build_account_mapping
from transfer_monitor.solana_listener.instructions import (
    extract_transfer,
    is_token_program,
    parse_instruction,
)
from transfer_monitor.solana_listener.models import (
    DEFAULT_TOKEN_SYMBOL,
    Block,
    Transaction,
    Transfer,
)

logger = get_logger(__name__)


def iter_transaction_transfers(transaction: Transaction, mint: str) -> Iterator[Transfer]:
    """Yield the tracked-mint transfers of one transaction (none if it failed)."""
    if not transaction.succeeded:
        return
    meta = transaction.meta
    accounts = build_account_mapping(meta.pre_token_balances, transaction.account_keys, mint)

    for group in meta.inner_instructions:
        for raw in group.instructions:
            if not is_token_program(raw):
                continue
            transfer = extract_transfer(parse_instruction(raw), accounts, mint)
            if transfer is None:
                continue
            logger.debug(
                "walker_transfer",
                signature=transaction.signature,
                instruction_index=group.index,
                **transfer.to_dict(),
            )
            yield transfer


def iter_block_transfers(block: Block, mint: str) -> Iterator[Transfer]:
    """Yield the tracked-mint transfers of a block in encounter order."""
    if block.transactions is None:
        logger.warning("walker_block_no_transactions", slot=block.slot)
        return
    for transaction in block.transactions:
        if not transaction.succeeded:
            logger.debug(
                "walker_transaction_skipped",
                slot=block.slot,
                signature=transaction.signature,
                reason="failed" if transaction.meta is not None else "no_meta",
            )
            continue
        yield from iter_transaction_transfers(transaction, mint)


def write_block_transfers(
    block: Block,
    sink: TextIO,
    *,
    mint: str,
    token_symbol: str = DEFAULT_TOKEN_SYMBOL,
) -> int:
    """
    Write the block header and one line per transfer to `sink`.

    Transfers are collected before anything is written, so a hard error in
    the middle of a block leaves no partial output for it.

    Returns:
        Number of transfer lines written.
    """
    transfers = list(iter_block_transfers(block, mint))
    sink.write(f"Latest block: {block.slot}\n")
    for transfer in transfers:
        sink.write(transfer.to_line(token_symbol) + "\n")
    sink.flush()
    if transfers:
        logger.info("walker_block_transfers", slot=block.slot, transfer_count=len(transfers))
    return len(transfers)
