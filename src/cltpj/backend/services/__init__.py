"""Service-layer helpers for the CLT vs PJ backend."""

from cltpj.backend.app.services.calculation_service import (
    calculate_clt_summary,
    calculate_comparison,
    calculate_pj_summary,
)

from .request_parser import parse_calculation_payload
from .response_builder import build_calculation_response

__all__ = [
    "build_calculation_response",
    "calculate_clt_summary",
    "calculate_comparison",
    "calculate_pj_summary",
    "parse_calculation_payload",
]
