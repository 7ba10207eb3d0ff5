"""Helpers for normalising incoming calculation requests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Request
from werkzeug.exceptions import BadRequest

from cltpj.backend.app.localization import normalise_locale


def _resolve_locale(req: Request, payload: dict[str, Any]) -> None:
    """Populate ``payload['locale']`` from the body, query string or headers."""

    locale = payload.get("locale")
    if isinstance(locale, str) and locale.strip():
        payload["locale"] = normalise_locale(locale)
        return

    locale_param = req.args.get("locale")
    if locale_param:
        payload["locale"] = normalise_locale(locale_param)
        return

    if req.accept_languages:
        primary = req.accept_languages.best
        if primary:
            payload["locale"] = normalise_locale(primary)


def _resolve_year(req: Request, payload: dict[str, Any]) -> None:
    """Fall back to a ``?year=`` query parameter when the body omits it."""

    if payload.get("year") is not None:
        return

    year_param = req.args.get("year")
    if not year_param:
        return
    try:
        payload["year"] = int(year_param)
    except ValueError as exc:
        raise BadRequest("Query parameter 'year' must be an integer") from exc


def parse_calculation_payload(req: Request) -> dict[str, Any]:
    """Extract a JSON object from ``req`` and fill in locale and year hints."""

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")

    payload = dict(data)
    _resolve_locale(req, payload)
    _resolve_year(req, payload)

    return payload
