"""Contractor (PJ) compensation calculator."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from cltpj.backend.app.models import (
    InvalidInputError,
    PjInputs,
    PjResult,
    format_validation_error,
)
from cltpj.backend.config.year_config import PjConfig


def calculate_pj(inputs: PjInputs | Mapping[str, Any], config: PjConfig) -> PjResult:
    """Return net monthly and annual figures for contractor invoicing.

    Tax is a flat presumed rate on gross billing. Net monthly may be negative
    when costs exceed billing; that is a valid outcome. The annual figure
    assumes every month of the year is billed in full.
    """

    if not isinstance(inputs, PjInputs):
        try:
            inputs = PjInputs.model_validate(inputs)
        except ValidationError as exc:
            raise InvalidInputError(format_validation_error(exc)) from exc

    gross = inputs.gross_monthly
    tax = gross * config.flat_tax_rate
    fixed_costs = inputs.total_fixed_costs
    net_monthly = gross - tax - fixed_costs

    return PjResult(
        gross_monthly=gross,
        tax_withheld=tax,
        total_fixed_costs=fixed_costs,
        net_monthly=net_monthly,
        annual_net=net_monthly * config.months_per_year,
    )


__all__ = ["calculate_pj"]
