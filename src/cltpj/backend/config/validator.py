"""Utilities for validating year configuration data and surfacing issues.

Schema validation already rejects structurally broken tables. The checks here
catch values that load fine but would produce surprising results, such as a
contribution ceiling above what the brackets can ever reach.
"""

from __future__ import annotations

import argparse
import logging
from decimal import Decimal
from typing import Sequence

from .year_config import (
    BracketTable,
    CltConfig,
    ConfigurationError,
    PjConfig,
    YearConfiguration,
    available_years,
    load_year_configuration,
)

_LOGGER = logging.getLogger(__name__)

CONTINUITY_TOLERANCE = Decimal("0.01")
EXPECTED_MONTHS_PER_YEAR = 12


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _stacked_total(table: BracketTable, amount: Decimal) -> Decimal:
    total = Decimal("0")
    lower_bound = Decimal("0")
    for bracket in table.brackets:
        upper = bracket.upper_bound
        if upper is None or amount <= upper:
            return total + (amount - lower_bound) * bracket.rate
        total += (upper - lower_bound) * bracket.rate
        lower_bound = upper
    return total


def _validate_rates(scope: str, table: BracketTable) -> list[str]:
    errors: list[str] = []
    for index, bracket in enumerate(table.brackets):
        if bracket.rate < 0 or bracket.rate > 1:
            errors.append(
                _format_scope(
                    f"{scope}.brackets[{index}]",
                    f"rate {bracket.rate} must be between 0 and 1",
                )
            )
    return errors


def _validate_stacking_table(scope: str, table: BracketTable) -> list[str]:
    errors = _validate_rates(scope, table)

    if table.policy != "stacking":
        errors.append(_format_scope(scope, "expected a stacking table"))
        return errors

    last_bound = table.last_finite_bound
    if table.ceiling is not None and last_bound is not None:
        reachable = _stacked_total(table, last_bound)
        if table.ceiling > reachable + CONTINUITY_TOLERANCE:
            errors.append(
                _format_scope(
                    scope,
                    (
                        f"ceiling {table.ceiling} exceeds the stacked contribution "
                        f"{reachable} at the final bound {last_bound}"
                    ),
                )
            )
    if table.ceiling is None and table.brackets[-1].rate == 0:
        errors.append(
            _format_scope(scope, "zero-rate open bracket without a contribution ceiling")
        )

    return errors


def _validate_deduction_table(scope: str, table: BracketTable) -> list[str]:
    errors = _validate_rates(scope, table)

    if table.policy != "deduction":
        errors.append(_format_scope(scope, "expected a deduction table"))
        return errors

    brackets = list(table.brackets)
    for index, (lower, upper) in enumerate(zip(brackets, brackets[1:])):
        boundary = lower.upper_bound
        if boundary is None:
            continue
        below = boundary * lower.rate - lower.deduction
        above = boundary * upper.rate - upper.deduction
        gap = abs(below - above)
        if gap > CONTINUITY_TOLERANCE:
            errors.append(
                _format_scope(
                    f"{scope}.brackets[{index + 1}]",
                    (
                        f"deduction is discontinuous at {boundary} "
                        f"(jump of {gap} between adjacent brackets)"
                    ),
                )
            )

    for index, (lower, upper) in enumerate(zip(brackets, brackets[1:])):
        if upper.rate < lower.rate:
            errors.append(
                _format_scope(
                    f"{scope}.brackets[{index + 1}]",
                    "marginal rates must not decrease",
                )
            )

    return errors


def _validate_clt(config: CltConfig) -> list[str]:
    errors: list[str] = []
    errors.extend(_validate_stacking_table("clt.social_security", config.social_security))
    errors.extend(_validate_deduction_table("clt.income_tax", config.income_tax))

    if config.severance_fund_rate < 0 or config.severance_fund_rate > 1:
        errors.append(
            _format_scope(
                "clt.severance_fund_rate",
                f"rate {config.severance_fund_rate} must be between 0 and 1",
            )
        )
    if config.months_per_year != EXPECTED_MONTHS_PER_YEAR:
        errors.append(
            _format_scope(
                "clt.months_per_year",
                f"expected {EXPECTED_MONTHS_PER_YEAR}, found {config.months_per_year}",
            )
        )
    return errors


def _validate_pj(config: PjConfig) -> list[str]:
    errors: list[str] = []
    if config.flat_tax_rate < 0 or config.flat_tax_rate > 1:
        errors.append(
            _format_scope(
                "pj.flat_tax_rate",
                f"rate {config.flat_tax_rate} must be between 0 and 1",
            )
        )
    if config.months_per_year != EXPECTED_MONTHS_PER_YEAR:
        errors.append(
            _format_scope(
                "pj.months_per_year",
                f"expected {EXPECTED_MONTHS_PER_YEAR}, found {config.months_per_year}",
            )
        )
    return errors


def validate_year_configuration(config: YearConfiguration) -> list[str]:
    """Return a list of validation issues for the provided configuration."""

    errors: list[str] = []
    errors.extend(_validate_clt(config.clt))
    errors.extend(_validate_pj(config.pj))
    return errors


def validate_all_years(years: Sequence[int] | None = None) -> dict[int, list[str]]:
    """Validate all configured years and return issues keyed by year."""

    targets = years or available_years()
    results: dict[int, list[str]] = {}

    for year in targets:
        config = load_year_configuration(year)
        results[int(year)] = validate_year_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured tax years and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific years to validate (defaults to all configured years)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            config = load_year_configuration(year)
        except (FileNotFoundError, ConfigurationError) as error:
            _LOGGER.debug("Configuration load failed for %s", year, exc_info=True)
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_year_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
