"""Unit tests for the generic bracket evaluator."""

from __future__ import annotations

from decimal import Decimal

import pytest

from cltpj.backend.app.models import InvalidInputError
from cltpj.backend.app.services.calculators import (
    evaluate_bracket_table,
    select_bracket,
)
from cltpj.backend.config.year_config import (
    ConfigurationError,
    YearConfiguration,
    build_bracket_table,
)

CENT = Decimal("0.01")


def _amounts(stop: int, step: str) -> list[Decimal]:
    amounts = []
    current = Decimal("0")
    increment = Decimal(step)
    while current <= stop:
        amounts.append(current)
        current += increment
    return amounts


@pytest.mark.parametrize("amount", [0, Decimal("0"), -1, Decimal("-2500.50")])
def test_non_positive_amounts_yield_zero(
    config_2024: YearConfiguration, amount: Decimal
) -> None:
    assert evaluate_bracket_table(amount, config_2024.clt.social_security) == 0
    assert evaluate_bracket_table(amount, config_2024.clt.income_tax) == 0


def test_stacking_sums_each_slice_at_its_rate(config_2024: YearConfiguration) -> None:
    table = config_2024.clt.social_security

    assert evaluate_bracket_table(Decimal("1000"), table) == Decimal("75.000")
    assert evaluate_bracket_table(Decimal("1412.00"), table) == Decimal("105.900")
    # 1412 * 7.5% + (2000 - 1412) * 9%
    assert evaluate_bracket_table(Decimal("2000"), table) == Decimal("158.82")
    assert evaluate_bracket_table(Decimal("7500"), table) == Decimal("868.819")


@pytest.mark.parametrize("amount", ["7786.03", "8000", "15000", "1000000"])
def test_stacking_saturates_at_ceiling(config_2024: YearConfiguration, amount: str) -> None:
    table = config_2024.clt.social_security

    assert evaluate_bracket_table(Decimal(amount), table) == Decimal("908.85")


def test_stacking_never_exceeds_rounded_ceiling(config_2024: YearConfiguration) -> None:
    table = config_2024.clt.social_security

    # The raw stacked sum at the final bound is 908.8618.
    assert evaluate_bracket_table(Decimal("7786.02"), table) == Decimal("908.85")


def test_deduction_uses_only_containing_bracket(config_2024: YearConfiguration) -> None:
    table = config_2024.clt.income_tax

    assert evaluate_bracket_table(Decimal("2000"), table) == 0
    assert evaluate_bracket_table(Decimal("2259.20"), table) == 0
    assert evaluate_bracket_table(Decimal("3000"), table) == Decimal("68.56")
    assert evaluate_bracket_table(Decimal("6631.181"), table) == Decimal("927.574775")


def test_deduction_floors_at_zero() -> None:
    table = build_bracket_table(
        [
            {"upper": 1000, "rate": 0.10, "deduction": 500},
            {"rate": 0.20, "deduction": 600},
        ],
        policy="deduction",
    )

    assert evaluate_bracket_table(Decimal("100"), table) == 0
    assert evaluate_bracket_table(Decimal("5000"), table) == Decimal("400.00")


@pytest.mark.parametrize("section", ["social_security", "income_tax"])
def test_evaluation_is_monotonic(config_2024: YearConfiguration, section: str) -> None:
    table = getattr(config_2024.clt, section)
    previous = Decimal("0")

    for amount in _amounts(12000, "37.35"):
        tax = evaluate_bracket_table(amount, table)
        assert tax >= previous, f"tax decreased at {amount}"
        previous = tax


def test_deduction_table_is_continuous_at_boundaries(
    config_2024: YearConfiguration,
) -> None:
    brackets = list(config_2024.clt.income_tax.brackets)

    for lower, upper in zip(brackets, brackets[1:]):
        boundary = lower.upper_bound
        below = boundary * lower.rate - lower.deduction
        above = boundary * upper.rate - upper.deduction
        assert abs(below - above) < CENT, f"jump at {boundary}"


def test_stacking_table_is_continuous_at_boundaries(
    config_2024: YearConfiguration,
) -> None:
    table = config_2024.clt.social_security

    for bracket in table.brackets[:-1]:
        boundary = bracket.upper_bound
        at_bound = evaluate_bracket_table(boundary, table)
        just_above = evaluate_bracket_table(boundary + CENT, table)
        assert Decimal("0") <= just_above - at_bound <= CENT


def test_select_bracket_is_inclusive_of_upper_bound(
    config_2024: YearConfiguration,
) -> None:
    brackets = config_2024.clt.income_tax.brackets

    assert select_bracket(Decimal("2826.65"), brackets).rate == Decimal("0.075")
    assert select_bracket(Decimal("2826.66"), brackets).rate == Decimal("0.15")
    assert select_bracket(Decimal("99999"), brackets) is brackets[-1]


def test_evaluation_is_idempotent(config_2024: YearConfiguration) -> None:
    table = config_2024.clt.social_security

    first = evaluate_bracket_table(Decimal("5432.10"), table)
    second = evaluate_bracket_table(Decimal("5432.10"), table)

    assert first == second
    assert str(first) == str(second)


def test_float_amounts_are_converted_exactly(config_2024: YearConfiguration) -> None:
    table = config_2024.clt.social_security

    assert evaluate_bracket_table(0.1, table) == Decimal("0.0075")


@pytest.mark.parametrize("amount", ["1000", None, True, float("nan"), float("inf")])
def test_non_numeric_amounts_are_rejected(
    config_2024: YearConfiguration, amount: object
) -> None:
    with pytest.raises(InvalidInputError):
        evaluate_bracket_table(amount, config_2024.clt.social_security)


@pytest.mark.parametrize(
    ("brackets", "policy", "ceiling"),
    [
        ([{"upper": 2000, "rate": 0.1}, {"upper": 1000, "rate": 0.2}, {"rate": 0.3}], "stacking", None),
        ([{"upper": 1000, "rate": 0.1}, {"upper": 1000, "rate": 0.2}, {"rate": 0.3}], "stacking", None),
        ([{"upper": 1000, "rate": 1.5}, {"rate": 0.2}], "stacking", None),
        ([{"upper": 1000, "rate": -0.1}, {"rate": 0.2}], "deduction", None),
        ([{"upper": 1000, "rate": 0.1}, {"upper": 2000, "rate": 0.2}], "stacking", None),
        ([{"upper": 1000, "rate": 0.1}, {"rate": 0.2}], "deduction", 500),
        ([{"upper": 1000, "rate": 0.1, "deduction": 10}, {"rate": 0.2}], "stacking", None),
        ([], "stacking", None),
    ],
    ids=[
        "decreasing-bounds",
        "repeated-bounds",
        "rate-above-one",
        "negative-rate",
        "bounded-final-bracket",
        "ceiling-on-deduction-table",
        "deduction-on-stacking-table",
        "empty-table",
    ],
)
def test_malformed_tables_fail_at_construction(
    brackets: list[dict[str, float]], policy: str, ceiling: float | None
) -> None:
    with pytest.raises(ConfigurationError):
        build_bracket_table(brackets, policy=policy, ceiling=ceiling)


def test_unknown_policy_fails_at_construction() -> None:
    with pytest.raises(ConfigurationError):
        build_bracket_table([{"rate": 0.1}], policy="flat")  # type: ignore[arg-type]
