"""
Unit tests — display formatting helpers (utils.py).
"""
from __future__ import annotations

from decimal import Decimal

import pytest

from expo_bot.utils import (
    escape_md,
    format_amount,
    format_currency,
    format_phone_number,
    price_to_string,
    to_decimal,
)


class TestFormatCurrency:

    def test_integer_price_has_no_decimals(self) -> None:
        assert format_currency(1234567, "KES") == "KES 1,234,567"

    def test_string_price_keeps_significant_fraction(self) -> None:
        assert format_currency("1000.5", "USD") == "USD 1,000.5"

    def test_decimal_trailing_zeros_dropped(self) -> None:
        assert format_currency(Decimal("100000.00"), "KES") == "KES 100,000"

    def test_rounded_to_two_places(self) -> None:
        assert format_amount("2.345") == "2.35"

    def test_zero(self) -> None:
        assert format_amount(0) == "0"

    def test_small_number_no_grouping(self) -> None:
        assert format_amount(999) == "999"

    def test_non_numeric_string_rejected(self) -> None:
        with pytest.raises(ValueError):
            format_currency("free", "KES")


class TestPriceToString:

    def test_whole_number(self) -> None:
        assert price_to_string(Decimal("100000.00")) == "100000"

    def test_fraction_kept(self) -> None:
        assert price_to_string(Decimal("1000.50")) == "1000.5"

    def test_string_with_separators(self) -> None:
        assert to_decimal("1,000.5") == Decimal("1000.5")


class TestPhoneNumber:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("0712 345 678", "254712345678"),
            ("+254712345678", "254712345678"),
            ("712345678", "254712345678"),
        ],
    )
    def test_normalised_to_254(self, raw: str, expected: str) -> None:
        assert format_phone_number(raw) == expected


def test_escape_md() -> None:
    assert escape_md("acme_corp *best*") == "acme\\_corp \\*best\\*"
