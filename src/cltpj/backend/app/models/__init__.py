"""Typed inputs and results shared across the calculation services.

Request payloads are validated by the Pydantic models in :mod:`.api`; the
engine itself consumes the frozen :class:`PjInputs` model and produces plain
frozen dataclasses holding exact, unrounded decimals. Rounding to cents is left
to the response layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from .api import (
    CltCalculationRequest,
    CltInput,
    CltSummary,
    ComparisonRequest,
    ComparisonResponse,
    ComparisonSummary,
    DetailEntry,
    PjCalculationRequest,
    PjCostsInput,
    PjInput,
    PjSummary,
    ResponseMeta,
    format_validation_error,
)
from .money import MAX_MONEY, ZERO, InvalidInputError, to_money

__all__ = [
    "CltCalculationRequest",
    "CltInput",
    "CltResult",
    "CltSummary",
    "ComparisonRequest",
    "ComparisonResponse",
    "ComparisonResult",
    "ComparisonSummary",
    "DetailEntry",
    "InvalidInputError",
    "MAX_MONEY",
    "PjCalculationRequest",
    "PjCostsInput",
    "PjInput",
    "PjInputs",
    "PjResult",
    "PjSummary",
    "ResponseMeta",
    "ZERO",
    "format_validation_error",
    "to_money",
]


class PjInputs(BaseModel):
    """Monthly contractor billing and the recurring costs it must cover."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    gross_monthly: Decimal
    health_plan_monthly: Decimal = ZERO
    meal_allowance_monthly: Decimal = ZERO
    accounting_fee_monthly: Decimal = ZERO

    @field_validator(
        "gross_monthly",
        "health_plan_monthly",
        "meal_allowance_monthly",
        "accounting_fee_monthly",
        mode="before",
    )
    @classmethod
    def _require_money(cls, value: Any, info: ValidationInfo) -> Decimal:
        return to_money(value, info.field_name)

    @property
    def total_fixed_costs(self) -> Decimal:
        return (
            self.health_plan_monthly
            + self.meal_allowance_monthly
            + self.accounting_fee_monthly
        )


@dataclass(frozen=True)
class CltResult:
    """Monthly and annual figures for salaried employment."""

    gross_monthly: Decimal
    social_security_withheld: Decimal
    income_tax_base: Decimal
    income_tax_withheld: Decimal
    net_monthly: Decimal
    thirteenth_salary: Decimal
    vacation_bonus: Decimal
    profit_share_estimate: Decimal
    annual_net: Decimal
    severance_fund_annual: Decimal


@dataclass(frozen=True)
class PjResult:
    """Monthly and annual figures for contractor invoicing."""

    gross_monthly: Decimal
    tax_withheld: Decimal
    total_fixed_costs: Decimal
    net_monthly: Decimal
    annual_net: Decimal

    @property
    def net_billing_monthly(self) -> Decimal:
        """Billing left after tax, before operating costs."""

        return self.gross_monthly - self.tax_withheld


@dataclass(frozen=True)
class ComparisonResult:
    """Signed annual difference between the two models and the verdict."""

    annual_difference: Decimal
    pj_is_better: bool
    zero_billing_month_annual_net: Decimal

    @property
    def absolute_difference(self) -> Decimal:
        return abs(self.annual_difference)
