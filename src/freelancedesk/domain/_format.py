"""Text helpers shared by the calculators that build human-readable messages."""

from __future__ import annotations

import math


def format_amount(amount: float) -> str:
    """Plain amount as it appears in titles: no grouping, no trailing ``.0``.

    Examples:
        >>> format_amount(100.0)
        '100'
        >>> format_amount(99.5)
        '99.5'
    """
    if float(amount).is_integer():
        return str(int(amount))
    return str(amount)


def format_money(amount: float) -> str:
    """Grouped amount with up to three decimals (``1,234.5``)."""
    text = f"{amount:,.3f}".rstrip("0").rstrip(".")
    return text or "0"


def plural(count: int, noun: str) -> str:
    """``"1 client"`` / ``"3 clients"``."""
    return f"{count} {noun}{'s' if count > 1 else ''}"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (``2.5 -> 3``, not 2)."""
    return math.floor(value + 0.5)
