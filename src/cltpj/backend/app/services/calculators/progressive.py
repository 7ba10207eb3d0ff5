"""Generic evaluator for marginal-bracket tax schedules."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from decimal import Decimal
from types import MappingProxyType
from typing import Any

from cltpj.backend.app.models import ZERO, to_money
from cltpj.backend.config.year_config import BracketTable, TaxBracket

PolicyEvaluator = Callable[[Decimal, BracketTable], Decimal]


def select_bracket(amount: Decimal, brackets: Sequence[TaxBracket]) -> TaxBracket:
    """Return the first bracket whose upper bound covers ``amount``."""

    for bracket in brackets:
        if bracket.upper_bound is None or amount <= bracket.upper_bound:
            return bracket
    return brackets[-1]


def _evaluate_stacking(amount: Decimal, table: BracketTable) -> Decimal:
    ceiling = table.ceiling
    last_bound = table.last_finite_bound
    if ceiling is not None and last_bound is not None and amount > last_bound:
        return ceiling

    total = ZERO
    lower_bound = ZERO

    for bracket in table.brackets:
        upper = bracket.upper_bound
        if upper is None or amount <= upper:
            total += (amount - lower_bound) * bracket.rate
            break

        total += (upper - lower_bound) * bracket.rate
        lower_bound = upper

    # Published ceilings are rounded; never let the raw sum overshoot them.
    if ceiling is not None and total > ceiling:
        return ceiling
    return total


def _evaluate_deduction(amount: Decimal, table: BracketTable) -> Decimal:
    bracket = select_bracket(amount, table.brackets)
    tax = amount * bracket.rate - bracket.deduction
    return tax if tax > ZERO else ZERO


POLICY_EVALUATORS: Mapping[str, PolicyEvaluator] = MappingProxyType(
    {
        "stacking": _evaluate_stacking,
        "deduction": _evaluate_deduction,
    }
)


def evaluate_bracket_table(amount: Any, table: BracketTable) -> Decimal:
    """Evaluate ``amount`` against ``table`` using the table's policy.

    Zero and negative amounts yield zero tax. The result is exact; callers
    round only when presenting it.
    """

    value = to_money(amount, "amount", allow_negative=True)
    if value <= ZERO:
        return ZERO

    evaluator = POLICY_EVALUATORS[table.policy]
    return evaluator(value, table)


__all__ = ["POLICY_EVALUATORS", "evaluate_bracket_table", "select_bracket"]
