"""
Token account resolution from a transaction's pre-transfer balance snapshot.

Instructions name token accounts, not wallets. meta.preTokenBalances maps
each token account (by index into accountKeys) to its owner wallet and mint;
only entries for the tracked mint are kept so later mint checks are a plain
presence lookup.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from transfer_monitor.core.exceptions import MalformedInputError
from transfer_monitor.solana_listener.models import AccountMapping, AccountOwner, TokenBalance


def build_account_mapping(
    balances: Iterable[TokenBalance],
    account_keys: Sequence[str],
    mint: str,
) -> AccountMapping:
    """
    Map token-account address -> (owner, mint) for balances of `mint`.

    The mapping is valid for one transaction only.

    Raises:
        MalformedInputError: a tracked-mint entry has no owner, or its
            accountIndex is outside accountKeys.
    """
    mapping: AccountMapping = {}
    for balance in balances:
        if balance.mint != mint:
            continue
        if not 0 <= balance.account_index < len(account_keys):
            raise MalformedInputError(
                f"accountIndex {balance.account_index} out of range for "
                f"{len(account_keys)} account keys",
                field="accountIndex",
            )
        if balance.owner is None:
            raise MalformedInputError("owner not found in token balance JSON", field="owner")
        address = account_keys[balance.account_index]
        mapping[address] = AccountOwner(owner=balance.owner, mint=balance.mint)
    return mapping
