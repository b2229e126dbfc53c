"""
Data models for Solana listener input and output.

Responsibilities:
- Define frozen dataclasses for blocks, transactions and token balances as
  returned by getBlock with jsonParsed encoding.
- Define the closed set of token instruction variants the extractor handles.
- Define the Transfer record emitted for every tracked-mint transfer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

# SPL Token program
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
# Program name used by jsonParsed for the SPL Token program
TOKEN_PROGRAM_NAME = "spl-token"

DEFAULT_TOKEN_SYMBOL = "USDC"


@dataclass(frozen=True)
class TokenBalance:
    """One entry of meta.preTokenBalances."""

    account_index: int
    mint: str
    owner: str | None  # Older ledger entries may omit it
    amount: str | None  # uiTokenAmount.amount, raw digits


@dataclass(frozen=True)
class TransactionMeta:
    """Execution outcome and the parts of meta the walker reads."""

    err: Any  # None if success; dict/str from RPC if failed
    pre_token_balances: tuple[TokenBalance, ...] = ()
    inner_instructions: tuple["InstructionGroup", ...] = ()


@dataclass(frozen=True)
class InstructionGroup:
    """Inner instructions issued by one top-level instruction."""

    index: int
    instructions: tuple[dict[str, Any], ...]
    """Raw jsonParsed instruction mappings; parsed lazily by the extractor."""


@dataclass(frozen=True)
class Transaction:
    """A transaction from a jsonParsed block."""

    signatures: tuple[str, ...]
    account_keys: tuple[str, ...]
    meta: TransactionMeta | None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def signature(self) -> str | None:
        """First signature; identifies the transaction in explorers."""
        return self.signatures[0] if self.signatures else None

    @property
    def succeeded(self) -> bool:
        return self.meta is not None and self.meta.err is None


@dataclass(frozen=True)
class Block:
    """A confirmed block; transactions is None when the node returned no list."""

    slot: int
    transactions: tuple[Transaction, ...] | None
    block_time: int | None = None
    blockhash: str | None = None


@dataclass(frozen=True)
class AccountOwner:
    """Owner wallet and mint of a token account."""

    owner: str
    mint: str


AccountMapping = dict[str, AccountOwner]


@dataclass(frozen=True)
class TransferInstruction:
    """SPL Token `transfer`: amount is a flat raw digit string."""

    kind: ClassVar[str] = "transfer"

    source: str
    destination: str
    amount: str


@dataclass(frozen=True)
class TransferCheckedInstruction:
    """SPL Token `transferChecked`: amount comes from tokenAmount.amount."""

    kind: ClassVar[str] = "transferChecked"

    source: str
    destination: str
    amount: str
    mint: str | None = None


@dataclass(frozen=True)
class OtherTokenInstruction:
    """Any other token-program instruction (mintTo, burn, closeAccount, ...)."""

    kind: str


@dataclass(frozen=True)
class UnparsedInstruction:
    """Instruction the node returned without a parsed representation."""

    program_id: str | None


ParsedInstruction = (
    TransferInstruction
    | TransferCheckedInstruction
    | OtherTokenInstruction
    | UnparsedInstruction
)


@dataclass(frozen=True)
class Transfer:
    """
    A transfer of the tracked mint between two owners.

    The originating signature is deliberately not part of the record; it is
    only attached to log events.
    """

    source_owner: str
    """Owner wallet of the source token account."""
    destination_owner: str
    """Owner wallet of the destination token account."""
    formatted_amount: str
    """Display amount, e.g. "1,400.01"."""

    def to_line(self, token_symbol: str = DEFAULT_TOKEN_SYMBOL) -> str:
        return (
            f"TX detected: {self.source_owner} sent {self.formatted_amount} "
            f"{token_symbol} to {self.destination_owner}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_owner": self.source_owner,
            "destination_owner": self.destination_owner,
            "formatted_amount": self.formatted_amount,
        }

    def __str__(self) -> str:
        return self.to_line()
