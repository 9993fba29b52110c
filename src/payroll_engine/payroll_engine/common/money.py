from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
WHOLE = Decimal("1")
CENTS = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Coerce DB/JSON numeric values into Decimal; None/garbage -> 0."""
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ZERO


def round_unit(value: Decimal) -> Decimal:
    """Round half-up to a whole currency unit."""
    return value.quantize(WHOLE, rounding=ROUND_HALF_UP)


def round_cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)
