"""Annual comparison between the CLT and PJ results."""

from __future__ import annotations

from cltpj.backend.app.models import ZERO, CltResult, ComparisonResult, PjResult


def compare_models(clt: CltResult, pj: PjResult) -> ComparisonResult:
    """Return the signed PJ-minus-CLT annual difference and the verdict.

    A tie favours CLT. The zero-billing figure drops one month of post-tax
    billing from the PJ annual net without recomputing costs or taxes.
    """

    difference = pj.annual_net - clt.annual_net
    return ComparisonResult(
        annual_difference=difference,
        pj_is_better=difference > ZERO,
        zero_billing_month_annual_net=pj.annual_net - pj.net_billing_monthly,
    )


__all__ = ["compare_models"]
