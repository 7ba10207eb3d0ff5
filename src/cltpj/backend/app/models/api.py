"""Pydantic models describing the public API surface."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from .money import ZERO, to_money

__all__ = [
    "CltInput",
    "PjCostsInput",
    "PjInput",
    "ComparisonRequest",
    "CltCalculationRequest",
    "PjCalculationRequest",
    "DetailEntry",
    "CltSummary",
    "PjSummary",
    "ComparisonSummary",
    "ResponseMeta",
    "ComparisonResponse",
    "format_validation_error",
]


class CltInput(BaseModel):
    """Gross monthly salary under a CLT contract."""

    model_config = ConfigDict(extra="forbid")

    gross_monthly: Decimal

    @field_validator("gross_monthly", mode="before")
    @classmethod
    def _require_money(cls, value: Any, info: ValidationInfo) -> Decimal:
        return to_money(value, info.field_name)


class PjCostsInput(BaseModel):
    """Recurring monthly costs a contractor pays out of billing."""

    model_config = ConfigDict(extra="forbid")

    health_plan: Decimal = ZERO
    meal_allowance: Decimal = ZERO
    accounting_fee: Decimal = ZERO

    @field_validator("health_plan", "meal_allowance", "accounting_fee", mode="before")
    @classmethod
    def _require_money(cls, value: Any, info: ValidationInfo) -> Decimal:
        return to_money(value, info.field_name)


class PjInput(BaseModel):
    """Gross monthly invoicing and costs under a PJ arrangement."""

    model_config = ConfigDict(extra="forbid")

    gross_monthly: Decimal
    costs: PjCostsInput = Field(default_factory=PjCostsInput)

    @field_validator("gross_monthly", mode="before")
    @classmethod
    def _require_money(cls, value: Any, info: ValidationInfo) -> Decimal:
        return to_money(value, info.field_name)

    @field_validator("costs", mode="before")
    @classmethod
    def _default_costs(cls, value: Any) -> Any:
        if value is None:
            return {}
        return value


class _YearScopedRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    year: int | None = Field(default=None, ge=2000, le=2100)
    locale: str | None = None


class ComparisonRequest(_YearScopedRequest):
    """Payload accepted by the comparison endpoint."""

    clt: CltInput
    pj: PjInput


class CltCalculationRequest(_YearScopedRequest):
    """Payload accepted by the CLT-only endpoint."""

    clt: CltInput


class PjCalculationRequest(_YearScopedRequest):
    """Payload accepted by the PJ-only endpoint."""

    pj: PjInput


class DetailEntry(BaseModel):
    """Labelled line item for the breakdown shown next to each model."""

    model_config = ConfigDict(extra="forbid")

    key: str
    label: str
    value: float


class CltSummary(BaseModel):
    """Rounded CLT figures."""

    model_config = ConfigDict(extra="forbid")

    gross_monthly: float
    social_security_withheld: float
    income_tax_base: float
    income_tax_withheld: float
    net_monthly: float
    thirteenth_salary: float
    vacation_bonus: float
    profit_share_estimate: float
    annual_net: float
    severance_fund_annual: float
    details: list[DetailEntry] = Field(default_factory=list)


class PjSummary(BaseModel):
    """Rounded PJ figures."""

    model_config = ConfigDict(extra="forbid")

    gross_monthly: float
    tax_rate: float
    tax_withheld: float
    total_fixed_costs: float
    net_billing_monthly: float
    net_monthly: float
    annual_net: float
    details: list[DetailEntry] = Field(default_factory=list)


class ComparisonSummary(BaseModel):
    """Rounded comparison figures and the localized verdict."""

    model_config = ConfigDict(extra="forbid")

    annual_difference: float
    absolute_difference: float
    pj_is_better: bool
    zero_billing_month_annual_net: float
    verdict: str
    suggested_pj_billing_min: float
    suggested_pj_billing_max: float
    insight: str


class ResponseMeta(BaseModel):
    """Metadata returned alongside the calculation output."""

    model_config = ConfigDict(extra="forbid")

    year: int
    locale: str


class ComparisonResponse(BaseModel):
    """Full response payload produced by the comparison service."""

    model_config = ConfigDict(extra="forbid")

    clt: CltSummary
    pj: PjSummary
    comparison: ComparisonSummary
    meta: ResponseMeta


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"
