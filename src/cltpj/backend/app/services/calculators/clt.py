"""Salaried (CLT) compensation calculator."""

from __future__ import annotations

from typing import Any

from cltpj.backend.app.models import ZERO, CltResult, to_money
from cltpj.backend.config.year_config import CltConfig

from .progressive import evaluate_bracket_table


def calculate_clt(gross_monthly: Any, config: CltConfig) -> CltResult:
    """Return net monthly pay and the annual projection for ``gross_monthly``.

    The 13th salary and the one-third vacation bonus are approximated from the
    net monthly pay rather than taxed independently, and the profit share is a
    multiple of the gross salary. The severance fund (FGTS) is an employer-side
    deposit and is reported without being added to ``annual_net``.
    """

    gross = to_money(gross_monthly, "gross_monthly")
    if gross == ZERO:
        return CltResult(
            gross_monthly=ZERO,
            social_security_withheld=ZERO,
            income_tax_base=ZERO,
            income_tax_withheld=ZERO,
            net_monthly=ZERO,
            thirteenth_salary=ZERO,
            vacation_bonus=ZERO,
            profit_share_estimate=ZERO,
            annual_net=ZERO,
            severance_fund_annual=ZERO,
        )

    social_security = evaluate_bracket_table(gross, config.social_security)
    income_tax_base = gross - social_security
    income_tax = evaluate_bracket_table(income_tax_base, config.income_tax)
    net_monthly = gross - social_security - income_tax

    thirteenth_salary = net_monthly
    vacation_bonus = net_monthly / config.vacation_bonus_divisor
    profit_share = gross * config.profit_share_multiplier
    months = config.months_per_year

    annual_net = net_monthly * months + thirteenth_salary + vacation_bonus + profit_share
    severance_fund_annual = gross * config.severance_fund_rate * months

    return CltResult(
        gross_monthly=gross,
        social_security_withheld=social_security,
        income_tax_base=income_tax_base,
        income_tax_withheld=income_tax,
        net_monthly=net_monthly,
        thirteenth_salary=thirteenth_salary,
        vacation_bonus=vacation_bonus,
        profit_share_estimate=profit_share,
        annual_net=annual_net,
        severance_fund_annual=severance_fund_annual,
    )


__all__ = ["calculate_clt"]
