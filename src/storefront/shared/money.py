"""Decimal helpers for monetary arithmetic.

Aggregates store amounts in ``Float`` fields. Every computation goes through
``Decimal`` quantized to cents before the result is written back.
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Convert a float, int, str or Decimal into a cent-quantized Decimal."""
    if isinstance(value, Decimal):
        amount = value
    else:
        amount = Decimal(str(value))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def line_subtotal(unit_price, quantity: int) -> Decimal:
    return (to_money(unit_price) * quantity).quantize(CENT, rounding=ROUND_HALF_UP)


def money_sum(amounts: Iterable) -> Decimal:
    total = Decimal("0.00")
    for amount in amounts:
        total += to_money(amount)
    return total.quantize(CENT, rounding=ROUND_HALF_UP)


def as_float(amount: Decimal) -> float:
    return float(to_money(amount))
