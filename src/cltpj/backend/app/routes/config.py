"""Expose configuration metadata consumed by the decoupled front-end.

These endpoints publish the YAML-backed year configuration so UI forms can
show the bracket tables and rates in use without duplicating business rules.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

from flask import Blueprint, jsonify

from cltpj.backend.app.http import problem_response
from cltpj.backend.config.year_config import (
    BracketTable,
    YearConfiguration,
    load_manifest,
    load_year_configuration,
)
from cltpj.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    manifest = load_manifest()
    supported_years = list(manifest.supported_years)
    default_year = supported_years[-1] if supported_years else None
    return {
        "version": get_project_version(),
        "supported_years": supported_years,
        "default_year": default_year,
    }


def _serialise_value(value: Any) -> Any:
    """Convert decimals and nested containers into JSON-ready structures."""

    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Mapping):
        return {str(key): _serialise_value(item) for key, item in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, str | bytes | bytearray):
        return [_serialise_value(item) for item in value]
    return value


def _serialise_bracket_table(table: BracketTable) -> dict[str, Any]:
    brackets = []
    for bracket in table.brackets:
        entry: dict[str, Any] = {
            "upper": _serialise_value(bracket.upper_bound),
            "rate": _serialise_value(bracket.rate),
        }
        if table.policy == "deduction":
            entry["deduction"] = _serialise_value(bracket.deduction)
        brackets.append(entry)

    payload: dict[str, Any] = {"policy": table.policy, "brackets": brackets}
    if table.ceiling is not None:
        payload["ceiling"] = _serialise_value(table.ceiling)
    return payload


def _serialise_year(config: YearConfiguration) -> dict[str, Any]:
    clt = config.clt
    pj = config.pj
    return {
        "year": config.year,
        "meta": _serialise_value(dict(config.meta)),
        "clt": {
            "social_security": _serialise_bracket_table(clt.social_security),
            "income_tax": _serialise_bracket_table(clt.income_tax),
            "severance_fund_rate": _serialise_value(clt.severance_fund_rate),
            "profit_share_multiplier": _serialise_value(clt.profit_share_multiplier),
            "vacation_bonus_divisor": _serialise_value(clt.vacation_bonus_divisor),
            "months_per_year": clt.months_per_year,
        },
        "pj": {
            "flat_tax_rate": _serialise_value(pj.flat_tax_rate),
            "months_per_year": pj.months_per_year,
        },
    }


@blueprint.get("/years")
def list_years():
    """Return the supported tax years and the default selection."""

    metadata = get_configuration_metadata()
    return jsonify(
        {
            "years": metadata["supported_years"],
            "default_year": metadata["default_year"],
        }
    )


@blueprint.get("/<int:year>")
def get_year_configuration(year: int):
    """Return the bracket tables and rates configured for ``year``."""

    try:
        configuration = load_year_configuration(year)
    except FileNotFoundError as exc:
        return problem_response("not_found", status=404, message=str(exc)).to_response()

    return jsonify(_serialise_year(configuration))
