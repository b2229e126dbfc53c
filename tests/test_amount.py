"""
Tests for format_amount: 6-decimal display with truncation and grouping.
"""

from __future__ import annotations

import pytest

from transfer_monitor.core.exceptions import FormatError
from transfer_monitor.solana_listener.amount import format_amount


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1", "0.000001"),
        ("12", "0.000012"),
        ("123", "0.000123"),
        ("1234", "0.001234"),
        ("12345", "0.012345"),
        ("0", "0.000000"),
    ],
)
def test_short_amounts_are_left_padded_to_six_decimals(raw, expected):
    assert format_amount(raw) == expected


def test_six_digits_is_all_fraction():
    assert format_amount("260044") == "0.260044"


def test_seven_digits_shows_four_fractional_digits():
    """Exactly 7 digits keeps 4 decimals and drops the low 2 (no rounding)."""
    assert format_amount("2340399") == "2.3403"
    assert format_amount("1000799") == "1.0007"
    assert format_amount("8260499") == "8.2604"


def test_longer_amounts_show_two_fractional_digits():
    assert format_amount("1400010000") == "1,400.01"
    assert format_amount("222689999") == "222.68"
    assert format_amount("34772530000") == "34,772.53"


def test_zero_fraction_is_omitted():
    assert format_amount("70000000") == "70"
    assert format_amount("1400000000") == "1,400"
    assert format_amount("12009999") == "12"


def test_integer_part_grouped_in_threes_from_the_right():
    assert format_amount("1234567890123456") == "1,234,567,890.12"
    assert format_amount("123456000000") == "123,456"
    assert format_amount("1000000000000000000") == "1,000,000,000,000"


def test_amounts_beyond_u64_stay_exact():
    raw = "340282366920938463463374607431768211455"
    assert format_amount(raw) == "340,282,366,920,938,463,463,374,607,431,768.21"


def test_no_leading_zero_stripping():
    assert format_amount("00000100") == "00"
    assert format_amount("0000001") == "0.0000"


def test_formatting_is_stable():
    raw = "19842140000"
    assert format_amount(raw) == format_amount(raw) == "19,842.14"


@pytest.mark.parametrize("raw", ["", "12a4", "-100", "1.5", " 100", "１２３"])
def test_invalid_amounts_raise_format_error(raw):
    with pytest.raises(FormatError):
        format_amount(raw)


def test_format_error_is_a_value_error():
    with pytest.raises(ValueError):
        format_amount("abc")
