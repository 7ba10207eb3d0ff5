"""Orchestrate request validation, configuration lookup, and calculations.

The calculation service ties the request models, the translation layer and the
year-based configuration together so the calculators can stay pure arithmetic.
Profiling hooks and rounding to cents live here, giving routes a simple set of
``calculate_*`` entry points.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from decimal import Decimal
from time import perf_counter
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from cltpj.backend.app.localization import Translator, get_translator
from cltpj.backend.app.models import (
    CltCalculationRequest,
    CltResult,
    CltSummary,
    ComparisonRequest,
    ComparisonResponse,
    ComparisonResult,
    ComparisonSummary,
    DetailEntry,
    PjCalculationRequest,
    PjInput,
    PjInputs,
    PjResult,
    PjSummary,
    ResponseMeta,
    format_validation_error,
)
from cltpj.backend.config.year_config import (
    CltConfig,
    PjConfig,
    YearConfiguration,
    default_year,
    load_year_configuration,
)

from .calculators import (
    calculate_clt,
    calculate_pj,
    compare_models,
    format_percentage,
    round_currency,
    round_rate,
)

_LOGGER = logging.getLogger(__name__)

RequestModel = TypeVar("RequestModel", bound=BaseModel)

# PJ billing range worth negotiating for, as multiples of the CLT gross.
NEGOTIATION_MULTIPLIERS = (Decimal("1.8"), Decimal("2.0"))


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("CLTPJ_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def _log_timings(operation: str, timings: dict[str, float] | None, start: float | None) -> None:
    if timings is None or start is None:
        return
    timings["total"] = perf_counter() - start
    _LOGGER.debug(
        "%s timings (ms): %s",
        operation,
        {name: round(duration * 1000, 3) for name, duration in timings.items()},
    )


def _validate_request(
    model: type[RequestModel], payload: Mapping[str, Any] | RequestModel
) -> RequestModel:
    if isinstance(payload, model):
        return payload
    if not isinstance(payload, Mapping):
        raise ValueError("Payload must be a mapping")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc


def _resolve_configuration(year: int | None) -> YearConfiguration:
    return load_year_configuration(year if year is not None else default_year())


def _money(value: Decimal) -> float:
    return float(round_currency(value))


def _pj_inputs(pj: PjInput) -> PjInputs:
    return PjInputs(
        gross_monthly=pj.gross_monthly,
        health_plan_monthly=pj.costs.health_plan,
        meal_allowance_monthly=pj.costs.meal_allowance,
        accounting_fee_monthly=pj.costs.accounting_fee,
    )


def _clt_summary(result: CltResult, config: CltConfig, translator: Translator) -> CltSummary:
    multiplier = config.profit_share_multiplier
    months = int(multiplier) if multiplier == multiplier.to_integral_value() else multiplier
    details = [
        DetailEntry(
            key="social_security",
            label=translator("clt.social_security"),
            value=-_money(result.social_security_withheld),
        ),
        DetailEntry(
            key="income_tax",
            label=translator("clt.income_tax"),
            value=-_money(result.income_tax_withheld),
        ),
        DetailEntry(
            key="net_monthly",
            label=translator("clt.net_monthly"),
            value=_money(result.net_monthly),
        ),
        DetailEntry(
            key="thirteenth_salary",
            label=translator("clt.thirteenth_salary"),
            value=_money(result.thirteenth_salary),
        ),
        DetailEntry(
            key="vacation_bonus",
            label=translator("clt.vacation_bonus"),
            value=_money(result.vacation_bonus),
        ),
        DetailEntry(
            key="profit_share",
            label=translator("clt.profit_share", months=months),
            value=_money(result.profit_share_estimate),
        ),
        DetailEntry(
            key="severance_fund",
            label=translator("clt.severance_fund"),
            value=_money(result.severance_fund_annual),
        ),
    ]
    return CltSummary(
        gross_monthly=_money(result.gross_monthly),
        social_security_withheld=_money(result.social_security_withheld),
        income_tax_base=_money(result.income_tax_base),
        income_tax_withheld=_money(result.income_tax_withheld),
        net_monthly=_money(result.net_monthly),
        thirteenth_salary=_money(result.thirteenth_salary),
        vacation_bonus=_money(result.vacation_bonus),
        profit_share_estimate=_money(result.profit_share_estimate),
        annual_net=_money(result.annual_net),
        severance_fund_annual=_money(result.severance_fund_annual),
        details=details,
    )


def _pj_summary(result: PjResult, config: PjConfig, translator: Translator) -> PjSummary:
    details = [
        DetailEntry(
            key="gross_monthly",
            label=translator("pj.gross_monthly"),
            value=_money(result.gross_monthly),
        ),
        DetailEntry(
            key="tax",
            label=translator("pj.tax", rate=format_percentage(config.flat_tax_rate)),
            value=-_money(result.tax_withheld),
        ),
        DetailEntry(
            key="fixed_costs",
            label=translator("pj.fixed_costs"),
            value=-_money(result.total_fixed_costs),
        ),
    ]
    return PjSummary(
        gross_monthly=_money(result.gross_monthly),
        tax_rate=float(round_rate(config.flat_tax_rate)),
        tax_withheld=_money(result.tax_withheld),
        total_fixed_costs=_money(result.total_fixed_costs),
        net_billing_monthly=_money(result.net_billing_monthly),
        net_monthly=_money(result.net_monthly),
        annual_net=_money(result.annual_net),
        details=details,
    )


def _comparison_summary(
    result: ComparisonResult, clt_gross: Decimal, translator: Translator
) -> ComparisonSummary:
    verdict_key = "verdict.pj_better" if result.pj_is_better else "verdict.clt_better"
    low, high = NEGOTIATION_MULTIPLIERS
    billing_min = round_currency(clt_gross * low)
    billing_max = round_currency(clt_gross * high)
    zero_billing = round_currency(result.zero_billing_month_annual_net)
    insight = translator(
        "insight.zero_billing_month",
        amount=f"{zero_billing:,.2f}",
        low=f"{low}",
        high=f"{high}",
        billing_min=f"{billing_min:,.2f}",
        billing_max=f"{billing_max:,.2f}",
    )
    return ComparisonSummary(
        annual_difference=_money(result.annual_difference),
        absolute_difference=_money(result.absolute_difference),
        pj_is_better=result.pj_is_better,
        zero_billing_month_annual_net=float(zero_billing),
        verdict=translator(verdict_key),
        suggested_pj_billing_min=float(billing_min),
        suggested_pj_billing_max=float(billing_max),
        insight=insight,
    )


def calculate_comparison(payload: Mapping[str, Any] | ComparisonRequest) -> dict[str, Any]:
    """Compute both compensation models and compare their annual net values."""

    request_model = _validate_request(ComparisonRequest, payload)

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    config = _resolve_configuration(request_model.year)
    translator = get_translator(request_model.locale)

    with _profile_section("clt", timings):
        clt_result = calculate_clt(request_model.clt.gross_monthly, config.clt)

    with _profile_section("pj", timings):
        pj_result = calculate_pj(_pj_inputs(request_model.pj), config.pj)

    with _profile_section("comparison", timings):
        comparison = compare_models(clt_result, pj_result)

    _log_timings("calculate_comparison", timings, overall_start)

    response_model = ComparisonResponse(
        clt=_clt_summary(clt_result, config.clt, translator),
        pj=_pj_summary(pj_result, config.pj, translator),
        comparison=_comparison_summary(comparison, clt_result.gross_monthly, translator),
        meta=ResponseMeta(year=config.year, locale=translator.locale),
    )
    return response_model.model_dump(mode="json")


def calculate_clt_summary(payload: Mapping[str, Any] | CltCalculationRequest) -> dict[str, Any]:
    """Compute the CLT model alone."""

    request_model = _validate_request(CltCalculationRequest, payload)
    config = _resolve_configuration(request_model.year)
    translator = get_translator(request_model.locale)

    result = calculate_clt(request_model.clt.gross_monthly, config.clt)
    return {
        "clt": _clt_summary(result, config.clt, translator).model_dump(mode="json"),
        "meta": ResponseMeta(year=config.year, locale=translator.locale).model_dump(),
    }


def calculate_pj_summary(payload: Mapping[str, Any] | PjCalculationRequest) -> dict[str, Any]:
    """Compute the PJ model alone."""

    request_model = _validate_request(PjCalculationRequest, payload)
    config = _resolve_configuration(request_model.year)
    translator = get_translator(request_model.locale)

    result = calculate_pj(_pj_inputs(request_model.pj), config.pj)
    return {
        "pj": _pj_summary(result, config.pj, translator).model_dump(mode="json"),
        "meta": ResponseMeta(year=config.year, locale=translator.locale).model_dump(),
    }


__all__ = ["calculate_clt_summary", "calculate_comparison", "calculate_pj_summary"]
