"""
Solana block parser — raw getBlock payloads to typed models.

Parses jsonParsed getBlock results into Block / Transaction / TokenBalance
models. Purely structural; no mint filtering or transfer logic. Instruction
bodies are kept as raw mappings and parsed by the extractor only for
successful transactions.
"""

from __future__ import annotations

from typing import Any

from transfer_monitor.core.exceptions import MalformedInputError
from transfer_monitor.monitor_logging import get_logger
from transfer_monitor.solana_listener.models import (
    Block,
    InstructionGroup,
    TokenBalance,
    Transaction,
    TransactionMeta,
)

logger = get_logger(__name__)


def _require_dict(container: dict[str, Any], key: str, where: str) -> dict[str, Any]:
    value = container.get(key)
    if not isinstance(value, dict):
        raise MalformedInputError(f"{key} not found in {where} JSON", field=key)
    return value


def _require_list(container: dict[str, Any], key: str, where: str) -> list[Any]:
    value = container.get(key)
    if not isinstance(value, list):
        raise MalformedInputError(f"{key} not found in {where} JSON", field=key)
    return value


def _get_account_keys(
    message: dict[str, Any],
    meta: dict[str, Any] | None = None,
) -> tuple[str, ...]:
    """
    Resolve accountKeys to base58 strings (handles json vs jsonParsed).

    jsonParsed already lists lookup-table addresses in accountKeys; for plain
    json encoding meta.loadedAddresses (writable + readonly) are appended so
    balance indexes line up either way.
    """
    keys = _require_list(message, "accountKeys", "message")
    out: list[str] = []
    for key in keys:
        if isinstance(key, str):
            out.append(key)
        elif isinstance(key, dict) and isinstance(key.get("pubkey"), str):
            out.append(key["pubkey"])
        else:
            raise MalformedInputError("pubkey not found in accountKeys JSON", field="pubkey")
    if keys and isinstance(keys[0], str):
        loaded = (meta or {}).get("loadedAddresses") or {}
        for role in ("writable", "readonly"):
            out.extend(addr for addr in loaded.get(role) or [] if isinstance(addr, str))
    return tuple(out)


def _parse_token_balance(item: Any) -> TokenBalance:
    if not isinstance(item, dict):
        raise MalformedInputError("token balance entry is not an object")
    index = item.get("accountIndex")
    if not isinstance(index, int) or isinstance(index, bool):
        raise MalformedInputError("accountIndex not found in token balance JSON", field="accountIndex")
    mint = item.get("mint")
    if not isinstance(mint, str):
        raise MalformedInputError("mint not found in token balance JSON", field="mint")
    owner = item.get("owner")
    ui_amount = item.get("uiTokenAmount") or {}
    amount = ui_amount.get("amount") if isinstance(ui_amount, dict) else None
    return TokenBalance(
        account_index=index,
        mint=mint,
        owner=owner if isinstance(owner, str) else None,
        amount=amount if isinstance(amount, str) else None,
    )


def _parse_inner_instructions(items: list[Any]) -> tuple[InstructionGroup, ...]:
    groups: list[InstructionGroup] = []
    for item in items:
        if not isinstance(item, dict):
            raise MalformedInputError("inner instruction group is not an object")
        index = item.get("index")
        if not isinstance(index, int) or isinstance(index, bool):
            raise MalformedInputError("index not found in innerInstructions JSON", field="index")
        instructions = _require_list(item, "instructions", "innerInstructions")
        for ix in instructions:
            if not isinstance(ix, dict):
                raise MalformedInputError("inner instruction is not an object")
        groups.append(InstructionGroup(index=index, instructions=tuple(instructions)))
    return tuple(groups)


def _parse_meta(meta: dict[str, Any]) -> TransactionMeta:
    err = meta.get("err")
    if err is not None:
        # Failed transactions contribute nothing; their bodies are not read
        return TransactionMeta(err=err)
    # null balance / inner lists happen for slots recorded before they existed
    balances = meta.get("preTokenBalances") or []
    inner = meta.get("innerInstructions") or []
    return TransactionMeta(
        err=None,
        pre_token_balances=tuple(_parse_token_balance(b) for b in balances),
        inner_instructions=_parse_inner_instructions(inner),
    )


def parse_transaction(raw: dict[str, Any]) -> Transaction:
    """
    Parse one entry of getBlock result.transactions.

    Raises:
        MalformedInputError: transaction, message or accountKeys is missing,
            or a nested entry has an unexpected shape.
    """
    if not isinstance(raw, dict):
        raise MalformedInputError("transaction entry is not an object")
    tx_obj = _require_dict(raw, "transaction", "block transaction")
    message = _require_dict(tx_obj, "message", "transaction")
    meta_raw = raw.get("meta")
    if meta_raw is not None and not isinstance(meta_raw, dict):
        raise MalformedInputError("meta is not an object", field="meta")

    signatures = tx_obj.get("signatures") or []
    return Transaction(
        signatures=tuple(s for s in signatures if isinstance(s, str)),
        account_keys=_get_account_keys(message, meta_raw),
        meta=_parse_meta(meta_raw) if meta_raw is not None else None,
        raw=raw,
    )


def parse_block(raw: dict[str, Any], slot: int) -> Block:
    """
    Parse a getBlock result (jsonParsed, transactionDetails=full) for a slot.

    A result without a transactions list yields Block.transactions = None;
    the walker logs and skips it.
    """
    if not isinstance(raw, dict):
        raise MalformedInputError(f"block result for slot {slot} is not an object")
    raw_txs = raw.get("transactions")
    transactions: tuple[Transaction, ...] | None
    if raw_txs is None:
        transactions = None
    elif isinstance(raw_txs, list):
        transactions = tuple(parse_transaction(tx) for tx in raw_txs)
    else:
        raise MalformedInputError("transactions is not a list", field="transactions")

    block_time = raw.get("blockTime")
    if block_time is not None and not isinstance(block_time, int):
        try:
            block_time = int(block_time)
        except (TypeError, ValueError):
            block_time = None

    logger.debug(
        "parser_block_parsed",
        slot=slot,
        tx_count=len(transactions) if transactions is not None else None,
    )
    return Block(
        slot=int(slot),
        transactions=transactions,
        block_time=block_time,
        blockhash=raw.get("blockhash"),
    )
