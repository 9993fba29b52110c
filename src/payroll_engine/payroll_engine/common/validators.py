from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from ..core.exceptions import InvalidAdjustmentError, ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} không hợp lệ")
    return value.strip()


def require_amount(value: Any, field_name: str) -> Decimal:
    """Parse a manual money amount; must be a finite number >= 0."""
    if isinstance(value, bool) or value is None:
        raise InvalidAdjustmentError(f"{field_name} không hợp lệ")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidAdjustmentError(f"{field_name} không hợp lệ")
    if not amount.is_finite():
        raise InvalidAdjustmentError(f"{field_name} không hợp lệ")
    if amount < 0:
        raise InvalidAdjustmentError(f"{field_name} không được âm")
    return amount
