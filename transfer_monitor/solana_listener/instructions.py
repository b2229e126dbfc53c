"""
SPL Token instruction parsing and transfer extraction.

parse_instruction() is the fallible boundary from the node's jsonParsed
mapping to a closed set of instruction variants; extract_transfer() works on
those variants only.

A jsonParsed token instruction looks like:

    {"program": "spl-token", "programId": "Tokenkeg...",
     "parsed": {"type": "transferChecked",
                "info": {"source": "...", "destination": "...", "mint": "...",
                         "tokenAmount": {"amount": "1400010000", ...}}}}
"""

from __future__ import annotations

from typing import Any

from transfer_monitor.core.exceptions import MalformedInputError, MintMismatchError
from transfer_monitor.solana_listener.amount import format_amount
from transfer_monitor.solana_listener.models import (
    TOKEN_PROGRAM_ID,
    TOKEN_PROGRAM_NAME,
    AccountMapping,
    OtherTokenInstruction,
    ParsedInstruction,
    Transfer,
    TransferCheckedInstruction,
    TransferInstruction,
    UnparsedInstruction,
)


def is_token_program(raw: dict[str, Any]) -> bool:
    """True when the instruction targets the SPL Token program."""
    return raw.get("program") == TOKEN_PROGRAM_NAME or raw.get("programId") == TOKEN_PROGRAM_ID


def _require_str(info: dict[str, Any], key: str, where: str = "instruction") -> str:
    value = info.get(key)
    if not isinstance(value, str):
        raise MalformedInputError(f"{key} not found in {where} JSON", field=key)
    return value


def parse_instruction(raw: dict[str, Any]) -> ParsedInstruction:
    """
    Parse one token-program instruction mapping into its variant.

    Partially decoded instructions (no "parsed" key) become
    UnparsedInstruction and are ignored downstream.

    Raises:
        MalformedInputError: parsed.type is missing, or a transfer kind lacks
            source, destination or its amount field.
    """
    if "parsed" not in raw:
        return UnparsedInstruction(program_id=raw.get("programId"))
    parsed = raw["parsed"]
    if not isinstance(parsed, dict):
        raise MalformedInputError("parsed is not an object in instruction JSON", field="parsed")
    kind = parsed.get("type")
    if not isinstance(kind, str):
        raise MalformedInputError("type not found in instruction JSON", field="type")

    if kind not in (TransferInstruction.kind, TransferCheckedInstruction.kind):
        return OtherTokenInstruction(kind=kind)

    info = parsed.get("info")
    if not isinstance(info, dict):
        raise MalformedInputError("info not found in instruction JSON", field="info")
    source = _require_str(info, "source")
    destination = _require_str(info, "destination")

    if kind == TransferInstruction.kind:
        return TransferInstruction(
            source=source,
            destination=destination,
            amount=_require_str(info, "amount"),
        )

    token_amount = info.get("tokenAmount")
    if not isinstance(token_amount, dict):
        raise MalformedInputError("tokenAmount not found in instruction JSON", field="tokenAmount")
    mint = info.get("mint")
    return TransferCheckedInstruction(
        source=source,
        destination=destination,
        amount=_require_str(token_amount, "amount", "tokenAmount"),
        mint=mint if isinstance(mint, str) else None,
    )


def extract_transfer(
    instruction: ParsedInstruction,
    accounts: AccountMapping,
    mint: str,
) -> Transfer | None:
    """
    Turn a parsed instruction into a Transfer of `mint`, if it is one.

    Accounts missing from the mapping mean the instruction moves some other
    mint, so it is skipped rather than treated as an error.

    Raises:
        MintMismatchError: both accounts are mapped but to different mints.
        MalformedInputError: a transferChecked names a mint other than the
            one its mapped accounts hold.
        FormatError: the raw amount is not a digit string.
    """
    if not isinstance(instruction, (TransferInstruction, TransferCheckedInstruction)):
        return None

    source = accounts.get(instruction.source)
    if source is None:
        return None
    destination = accounts.get(instruction.destination)
    if destination is None:
        return None

    if source.mint != destination.mint:
        raise MintMismatchError(source.mint, destination.mint)
    if isinstance(instruction, TransferCheckedInstruction) and instruction.mint is not None:
        if instruction.mint != source.mint:
            raise MalformedInputError(
                f"transferChecked mint {instruction.mint} does not match "
                f"token account mint {source.mint}",
                field="mint",
            )
    if source.mint != mint:
        return None

    return Transfer(
        source_owner=source.owner,
        destination_owner=destination.owner,
        formatted_amount=format_amount(instruction.amount),
    )
