"""
Token amount formatting for a 6-decimal mint.

Raw amounts arrive as base-10 digit strings in the smallest unit and stay
strings throughout; nothing is converted to float.

    len > 7  -> x,xxx,xxx.xx  (fraction dropped when "00")
    len == 7 -> x.xxxx
    len == 6 -> 0.xxxxxx
    len < 6  -> 0.000xxx      (left-padded to 6 fractional digits)

Fractional digits beyond the shown ones are truncated, never rounded.
"""

from __future__ import annotations

from transfer_monitor.core.exceptions import FormatError

TOKEN_DECIMALS = 6


def _group_thousands(digits: str) -> str:
    """Insert a comma between runs of three digits, counting from the right."""
    head = len(digits) % 3 or 3
    chunks = [digits[:head]]
    chunks.extend(digits[i : i + 3] for i in range(head, len(digits), 3))
    return ",".join(chunks)


def format_amount(raw_amount: str) -> str:
    """
    Render a raw token amount for display.

    Args:
        raw_amount: Unsigned base-10 digits, already normalized (no leading
            zero stripping is done here).

    Returns:
        Display string, e.g. "1400010000" -> "1,400.01", "70000000" -> "70".

    Raises:
        FormatError: raw_amount is empty or contains anything but ASCII digits.
    """
    if not isinstance(raw_amount, str) or not raw_amount:
        raise FormatError(f"amount must be a non-empty digit string, got {raw_amount!r}")
    if not (raw_amount.isascii() and raw_amount.isdigit()):
        raise FormatError(f"amount contains non-digit characters: {raw_amount!r}")

    length = len(raw_amount)
    if length < TOKEN_DECIMALS:
        return "0." + raw_amount.rjust(TOKEN_DECIMALS, "0")
    if length == TOKEN_DECIMALS:
        return "0." + raw_amount
    if length == TOKEN_DECIMALS + 1:
        return f"{raw_amount[:1]}.{raw_amount[1:5]}"

    integer_part = _group_thousands(raw_amount[: length - TOKEN_DECIMALS])
    fraction = raw_amount[length - TOKEN_DECIMALS : length - TOKEN_DECIMALS + 2]
    if fraction == "00":
        return integer_part
    return f"{integer_part}.{fraction}"
