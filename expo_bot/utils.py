"""
Display formatting helpers shared by keyboards, handlers and services.
"""
from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

Number = Union[int, float, Decimal, str]

_CENTS = Decimal("0.01")
_NON_DIGITS = re.compile(r"\D")


def to_decimal(value: Number) -> Decimal:
    """
    Coerce a price-like value to Decimal.
    Strings may carry thousands separators: "1,000.5" → Decimal("1000.5").
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, str):
        try:
            return Decimal(value.replace(",", "").strip())
        except InvalidOperation as exc:
            raise ValueError(f"Not a number: {value!r}") from exc
    # str() first so that 0.1 stays 0.1 instead of its binary expansion
    return Decimal(str(value))


def format_amount(value: Number) -> str:
    """Group thousands with commas, keep 0–2 fraction digits: 1000.5 → '1,000.5'."""
    amount = to_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)
    text = f"{amount:,.2f}"
    return text.rstrip("0").rstrip(".")


def format_currency(value: Number, currency: str) -> str:
    """
    Format a price for display.

    >>> format_currency(1234567, "KES")
    'KES 1,234,567'
    >>> format_currency("1000.5", "USD")
    'USD 1,000.5'
    """
    return f"{currency} {format_amount(value)}"


def price_to_string(value: Number) -> str:
    """Plain string form of a stored price, without trailing zero decimals."""
    d = to_decimal(value)
    if d == d.to_integral_value():
        return str(d.quantize(Decimal(1)))
    return format(d.normalize(), "f")


def format_phone_number(phone: str) -> str:
    """
    Normalise a Kenyan phone number to the 254XXXXXXXXX form.
    Non-digits are dropped; a leading 0 becomes 254.
    """
    cleaned = _NON_DIGITS.sub("", phone)
    if cleaned.startswith("0"):
        return "254" + cleaned[1:]
    if not cleaned.startswith("254"):
        return "254" + cleaned
    return cleaned


def escape_md(text: str) -> str:
    """Escape characters that break legacy Telegram Markdown."""
    for ch in ("_", "*", "`", "["):
        text = text.replace(ch, f"\\{ch}")
    return text
