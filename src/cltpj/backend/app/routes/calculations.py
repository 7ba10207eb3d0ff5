"""REST endpoints for compensation calculations."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request

from cltpj.backend.services import (
    build_calculation_response,
    calculate_clt_summary,
    calculate_comparison,
    calculate_pj_summary,
    parse_calculation_payload,
)

blueprint = Blueprint("calculations", __name__, url_prefix="/api/v1")


@blueprint.post("/comparisons")
def create_comparison() -> tuple[Any, int]:
    """Compare CLT and PJ take-home pay for the submitted JSON payload."""

    payload = parse_calculation_payload(request)
    result = calculate_comparison(payload)

    return build_calculation_response(result)


@blueprint.post("/calculations/clt")
def create_clt_calculation() -> tuple[Any, int]:
    """Compute net CLT pay for the submitted gross salary."""

    payload = parse_calculation_payload(request)
    return build_calculation_response(calculate_clt_summary(payload))


@blueprint.post("/calculations/pj")
def create_pj_calculation() -> tuple[Any, int]:
    """Compute net PJ income for the submitted billing and costs."""

    payload = parse_calculation_payload(request)
    return build_calculation_response(calculate_pj_summary(payload))
