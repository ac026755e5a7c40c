"""
Utility functions for PayOptimizer: money conversion between
decimal amounts and minor units (cents)
"""
from __future__ import annotations
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

Number = Union[int, float, str, Decimal]

CENT = Decimal("0.01")


def D(value: Number) -> Decimal:
    """Convert to Decimal via str to avoid the Decimal(float) trap"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value).strip())


def to_cents(value: Number) -> int:
    """
    Parse an amount with at most 2 decimal places into cents.
    Raises ValueError for non-numeric, non-finite or over-precise amounts.
    """
    try:
        d = D(value)
    except (InvalidOperation, ValueError):
        raise ValueError(f"not a valid amount: {value!r}")
    if not d.is_finite():
        raise ValueError(f"not a valid amount: {value!r}")
    if d != d.quantize(CENT, rounding=ROUND_HALF_UP):
        raise ValueError(f"amount has more than 2 decimal places: {value!r}")
    return int(d * 100)


def from_cents(cents: int) -> Decimal:
    """cents -> Decimal with 2 decimal places"""
    return (Decimal(cents) / 100).quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(cents: int) -> str:
    return f"{from_cents(cents):.2f}"


def round_half_up_div(numerator: int, denominator: int) -> int:
    """Integer division rounding half away from zero"""
    if denominator == 0:
        raise ZeroDivisionError("division by zero")
    sign = -1 if (numerator < 0) != (denominator < 0) else 1
    q, r = divmod(abs(numerator), abs(denominator))
    if 2 * r >= abs(denominator):
        q += 1
    return sign * q
