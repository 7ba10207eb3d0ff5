"""Monetary input coercion shared by the request models and calculators."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from numbers import Real
from typing import Any

ZERO = Decimal("0")
# Keeps products and cent rounding inside the default 28-digit context.
MAX_MONEY = Decimal("1000000000000")


class InvalidInputError(ValueError):
    """Raised when a monetary input is missing, non-numeric, non-finite or negative."""


def to_money(value: Any, field_name: str, *, allow_negative: bool = False) -> Decimal:
    """Return ``value`` as an exact :class:`~decimal.Decimal`.

    Text, booleans and ``None`` are rejected rather than coerced to zero. Floats
    are converted through their shortest ``repr`` so ``0.1`` stays ``0.1``.
    """

    if value is None:
        raise InvalidInputError(f"Field '{field_name}' is required")
    if isinstance(value, bool) or not isinstance(value, (Decimal, Real)):
        raise InvalidInputError(f"Field '{field_name}' must be a number")

    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as exc:
        raise InvalidInputError(f"Field '{field_name}' must be a number") from exc

    if not amount.is_finite():
        raise InvalidInputError(f"Field '{field_name}' must be a finite number")
    if not allow_negative and amount < ZERO:
        raise InvalidInputError(f"Field '{field_name}' cannot be negative")
    if abs(amount) > MAX_MONEY:
        raise InvalidInputError(
            f"Field '{field_name}' must not exceed {MAX_MONEY:,.0f}"
        )
    return amount


__all__ = ["InvalidInputError", "MAX_MONEY", "ZERO", "to_money"]
