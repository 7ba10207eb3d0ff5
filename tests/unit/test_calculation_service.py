"""Unit tests for the calculation service."""
from __future__ import annotations

import logging
from typing import Any

import pytest

from cltpj.backend.app.models import ComparisonRequest
from cltpj.backend.app.services.calculation_service import (
    calculate_clt_summary,
    calculate_comparison,
    calculate_pj_summary,
)

SAMPLE_PAYLOAD: dict[str, Any] = {
    "year": 2024,
    "clt": {"gross_monthly": 7500},
    "pj": {
        "gross_monthly": 10000,
        "costs": {"health_plan": 450, "meal_allowance": 1000, "accounting_fee": 250},
    },
}


def test_calculate_comparison_rounds_to_cents() -> None:
    result = calculate_comparison(SAMPLE_PAYLOAD)

    clt = result["clt"]
    assert clt["social_security_withheld"] == pytest.approx(868.82)
    assert clt["income_tax_base"] == pytest.approx(6631.18)
    assert clt["income_tax_withheld"] == pytest.approx(927.57)
    assert clt["net_monthly"] == pytest.approx(5703.61)
    assert clt["annual_net"] == pytest.approx(83548.08)
    assert clt["severance_fund_annual"] == pytest.approx(7200.0)

    pj = result["pj"]
    assert pj["tax_rate"] == pytest.approx(0.11)
    assert pj["tax_withheld"] == pytest.approx(1100.0)
    assert pj["total_fixed_costs"] == pytest.approx(1700.0)
    assert pj["net_monthly"] == pytest.approx(7200.0)
    assert pj["annual_net"] == pytest.approx(86400.0)

    comparison = result["comparison"]
    assert comparison["annual_difference"] == pytest.approx(2851.92)
    assert comparison["absolute_difference"] == pytest.approx(2851.92)
    assert comparison["pj_is_better"] is True
    assert comparison["zero_billing_month_annual_net"] == pytest.approx(77500.0)

    assert result["meta"] == {"year": 2024, "locale": "pt"}


def test_calculate_comparison_defaults_to_latest_year() -> None:
    payload = {key: value for key, value in SAMPLE_PAYLOAD.items() if key != "year"}

    result = calculate_comparison(payload)

    assert result["meta"]["year"] == 2024


def test_calculate_comparison_accepts_request_models() -> None:
    request_model = ComparisonRequest.model_validate(SAMPLE_PAYLOAD)

    assert calculate_comparison(request_model) == calculate_comparison(SAMPLE_PAYLOAD)


def test_calculate_comparison_localizes_details_and_verdict() -> None:
    result = calculate_comparison({**SAMPLE_PAYLOAD, "locale": "en"})

    assert result["meta"]["locale"] == "en"
    assert result["comparison"]["verdict"] == "The PJ model is financially better"
    pj_labels = {item["key"]: item["label"] for item in result["pj"]["details"]}
    assert pj_labels["tax"] == "Estimated tax (11%)"


def test_calculate_comparison_includes_negotiation_insight() -> None:
    result = calculate_comparison({**SAMPLE_PAYLOAD, "locale": "en"})

    comparison = result["comparison"]
    assert comparison["suggested_pj_billing_min"] == pytest.approx(13500.0)
    assert comparison["suggested_pj_billing_max"] == pytest.approx(15000.0)
    assert "R$ 77,500.00" in comparison["insight"]
    assert "1.8x to 2.0x" in comparison["insight"]
    assert "R$ 13,500.00 to R$ 15,000.00" in comparison["insight"]

    portuguese = calculate_comparison(SAMPLE_PAYLOAD)["comparison"]["insight"]
    assert "multiplicador de 1.8x a 2.0x" in portuguese


def test_calculate_comparison_breakdown_matches_original_lines() -> None:
    result = calculate_comparison(SAMPLE_PAYLOAD)

    clt_details = {item["key"]: item for item in result["clt"]["details"]}
    assert clt_details["net_monthly"]["label"] == "Salário Líquido (após INSS/IRRF)"
    assert clt_details["profit_share"]["label"] == "PLR (est. 1 sal.)"
    assert clt_details["social_security"]["value"] == pytest.approx(-868.82)

    pj_details = [(item["key"], item["value"]) for item in result["pj"]["details"]]
    assert pj_details == [
        ("gross_monthly", pytest.approx(10000.0)),
        ("tax", pytest.approx(-1100.0)),
        ("fixed_costs", pytest.approx(-1700.0)),
    ]


def test_calculate_comparison_verdict_for_clt() -> None:
    payload = {**SAMPLE_PAYLOAD, "clt": {"gross_monthly": 12000}}

    result = calculate_comparison(payload)

    assert result["comparison"]["pj_is_better"] is False
    assert result["comparison"]["annual_difference"] < 0
    assert result["comparison"]["absolute_difference"] > 0
    assert result["comparison"]["verdict"] == "A CLT protege melhor sua renda"


def test_calculate_comparison_is_idempotent() -> None:
    assert calculate_comparison(SAMPLE_PAYLOAD) == calculate_comparison(SAMPLE_PAYLOAD)


@pytest.mark.parametrize(
    ("payload", "fragment"),
    [
        ({**SAMPLE_PAYLOAD, "clt": {"gross_monthly": -1}}, "cannot be negative"),
        ({**SAMPLE_PAYLOAD, "clt": {"gross_monthly": "7500"}}, "must be a number"),
        ({**SAMPLE_PAYLOAD, "clt": {}}, "clt.gross_monthly"),
        (
            {**SAMPLE_PAYLOAD, "pj": {"gross_monthly": 100, "costs": {"health_plan": -5}}},
            "pj.costs.health_plan",
        ),
        ({**SAMPLE_PAYLOAD, "unexpected": True}, "unexpected"),
    ],
)
def test_calculate_comparison_rejects_invalid_payloads(
    payload: dict[str, Any], fragment: str
) -> None:
    with pytest.raises(ValueError) as excinfo:
        calculate_comparison(payload)

    message = str(excinfo.value)
    assert message.startswith("Invalid calculation payload")
    assert fragment in message


def test_calculate_comparison_rejects_non_mapping_payload() -> None:
    with pytest.raises(ValueError, match="mapping"):
        calculate_comparison(["not", "a", "mapping"])  # type: ignore[arg-type]


def test_calculate_comparison_unknown_year() -> None:
    with pytest.raises(FileNotFoundError):
        calculate_comparison({**SAMPLE_PAYLOAD, "year": 2031})


def test_calculate_clt_summary_only_returns_clt_block() -> None:
    result = calculate_clt_summary({"clt": {"gross_monthly": 7500}})

    assert set(result) == {"clt", "meta"}
    assert result["clt"]["net_monthly"] == pytest.approx(5703.61)


def test_calculate_pj_summary_without_costs() -> None:
    result = calculate_pj_summary({"pj": {"gross_monthly": 10000}})

    assert set(result) == {"pj", "meta"}
    assert result["pj"]["total_fixed_costs"] == 0
    assert result["pj"]["net_monthly"] == pytest.approx(8900.0)


def test_profiling_logs_section_timings(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("CLTPJ_PROFILE_CALCULATIONS", "true")
    caplog.set_level(
        logging.DEBUG, logger="cltpj.backend.app.services.calculation_service"
    )

    calculate_comparison(SAMPLE_PAYLOAD)

    messages = [record.getMessage() for record in caplog.records]
    assert any("calculate_comparison timings" in message for message in messages)
    assert any("'clt'" in message and "'total'" in message for message in messages)
