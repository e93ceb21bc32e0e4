from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from ..core.constants import HALF_DAY
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_month(month: int, year: int) -> tuple[int, int]:
    try:
        month, year = int(month), int(year)
    except (TypeError, ValueError):
        raise ValidationError("Month and year are required")
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")
    if year < 1900:
        raise ValidationError("Year is invalid")
    return month, year


def to_decimal(value: Any, field_name: str) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    return amount


def require_non_negative_amount(value: Any, field_name: str) -> Decimal:
    amount = to_decimal(value, field_name)
    if amount < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return amount


def require_leave_balance(value: Any, field_name: str) -> Decimal:
    """Balances are non-negative and move in half-day steps."""
    amount = require_non_negative_amount(value, field_name)
    if amount % HALF_DAY != 0:
        raise ValidationError(f"{field_name} must be a multiple of 0.5")
    return amount
