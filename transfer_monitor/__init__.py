"""
Transfer Monitor — real-time SPL token transfer tracking for one Solana mint.

Polls finalized slots, fetches each block with parsed instructions, resolves
token accounts to their owners from the pre-transaction balance snapshot,
and writes one human-readable line per transfer of the tracked mint.
"""

__version__ = "0.1.0"
