"""
currency.py — Money helpers. All amounts are stored as integer cents (USD).

Usage:
    from poolcrm_shared.currency import format_cents, calculate_tax

    format_cents(123456)            # "$1,234.56"
    format_cents_compact(150_000)   # "$1.5K"
    calculate_tax(10_000, 0.0825)   # 825
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_CURRENCY_NOISE = re.compile(r"[$,\s]")
_PERCENT_NOISE = re.compile(r"[%\s]")


def round_half_up(value: float | Decimal) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_cents(cents: int, *, show_symbol: bool = True) -> str:
    dollars = Decimal(cents) / 100
    sign = "-" if dollars < 0 else ""
    body = f"{abs(dollars):,.2f}"
    return f"{sign}${body}" if show_symbol else f"{sign}{body}"


def format_cents_compact(cents: int) -> str:
    dollars = cents / 100
    if dollars >= 1_000_000:
        return f"${dollars / 1_000_000:.1f}M"
    if dollars >= 1_000:
        return f"${dollars / 1_000:.1f}K"
    return format_cents(cents)


def dollars_to_cents(dollars: float | Decimal) -> int:
    return round_half_up(Decimal(str(dollars)) * 100)


def cents_to_dollars(cents: int) -> Decimal:
    return Decimal(cents) / 100


def parse_currency_to_cents(value: str) -> int | None:
    """Parse "$1,234.50" style input. Returns None for blank or garbage."""
    cleaned = _CURRENCY_NOISE.sub("", value or "")
    if not cleaned:
        return None
    try:
        return dollars_to_cents(Decimal(cleaned))
    except InvalidOperation:
        return None


def format_tax_rate(rate: float) -> str:
    pct = rate * 100
    return f"{pct:.0f}%" if pct == int(pct) else f"{pct:.2f}%"


def parse_tax_rate(value: str) -> float | None:
    """
    Parse a tax rate typed as a fraction or a percentage.

    "8.25", "8.25%" and "0.0825" all yield 0.0825.
    """
    cleaned = _PERCENT_NOISE.sub("", value or "")
    if not cleaned:
        return None
    try:
        parsed = float(cleaned)
    except ValueError:
        return None
    return parsed / 100 if parsed > 1 else parsed


def is_valid_tax_rate(rate: float) -> bool:
    return isinstance(rate, (int, float)) and 0 <= rate <= 1


def calculate_tax(subtotal_cents: int, tax_rate: float) -> int:
    return round_half_up(Decimal(subtotal_cents) * Decimal(str(tax_rate)))
