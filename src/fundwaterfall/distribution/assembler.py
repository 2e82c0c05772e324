# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Result assembler.

Shapes waterfall and apportionment output into the `Distribution` record and
performance metrics into a `PerformanceReport`. Apart from the reconciliation
check, no business logic lives here.
"""

from __future__ import annotations

import datetime
import logging
from decimal import Decimal
from typing import Mapping, Optional, Sequence

import pandas as pd

from ..core.exceptions import ValidationError
from ..performance.results import GrossNetPerformance, MetricsResult, PerformanceReport
from .results import Distribution, DistributionRequest, InvestorAllocation, TierResult

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


def _reconcile(
    amount: Decimal,
    tier_results: Sequence[TierResult],
    allocations: Sequence[InvestorAllocation],
) -> None:
    """Both sums must equal the distribution amount to the cent."""
    if tier_results:
        tier_total = sum((t.lp_amount + t.gp_amount for t in tier_results), ZERO)
        if tier_total != amount:
            raise ValidationError(
                f"Waterfall tiers total {tier_total}, expected {amount}"
            )
    allocation_total = sum((a.final_allocation for a in allocations), ZERO)
    if allocation_total != amount:
        raise ValidationError(
            f"Investor allocations total {allocation_total}, expected {amount}"
        )


def assemble_distribution(
    request: DistributionRequest,
    tier_results: Sequence[TierResult],
    allocations: Sequence[InvestorAllocation],
    revision: int = 1,
    supersedes_revision: Optional[int] = None,
) -> Distribution:
    """
    Build the immutable `Distribution` record.

    `waterfall_applied` is True exactly when the breakdown has tiers.

    Raises:
        ValidationError: If the tier or allocation totals do not reconcile
            to `request.amount`
    """
    _reconcile(request.amount, tier_results, allocations)
    distribution = Distribution(
        id=request.id,
        fund_id=request.fund_id,
        amount=request.amount,
        currency=request.currency,
        distribution_date=request.distribution_date,
        is_return_of_capital=request.is_return_of_capital,
        is_income=request.is_income,
        is_capital_gain=request.is_capital_gain,
        waterfall_applied=len(tier_results) > 0,
        waterfall_breakdown=tuple(tier_results),
        investor_allocations=tuple(allocations),
        revision=revision,
        supersedes_revision=supersedes_revision,
    )
    logger.info(
        f"Distribution {distribution.id} rev {distribution.revision}: "
        f"{distribution.amount} {distribution.currency}, "
        f"LP {distribution.lp_total}, GP {distribution.gp_total}, "
        f"{len(distribution.waterfall_breakdown)} tiers"
    )
    return distribution


def supersede(
    previous: Distribution,
    request: DistributionRequest,
    tier_results: Sequence[TierResult],
    allocations: Sequence[InvestorAllocation],
) -> Distribution:
    """
    Build a recalculated record that supersedes `previous`.

    The new record keeps the distribution id, increments the revision and
    points back at the revision it replaces. `previous` is left untouched.

    Raises:
        ValidationError: If `request` is for a different distribution or fund
    """
    if request.id != previous.id or request.fund_id != previous.fund_id:
        raise ValidationError(
            f"Cannot supersede distribution {previous.id} (fund {previous.fund_id}) "
            f"with request {request.id} (fund {request.fund_id})"
        )
    return assemble_distribution(
        request,
        tier_results,
        allocations,
        revision=previous.revision + 1,
        supersedes_revision=previous.revision,
    )


def assemble_performance_report(
    fund_id: str,
    as_of: datetime.date,
    fund_metrics: MetricsResult,
    investor_metrics: Mapping[str, MetricsResult],
    gross_net: Optional[GrossNetPerformance] = None,
) -> PerformanceReport:
    """Attach fund and investor metrics to a report keyed by investor id."""
    report = PerformanceReport(
        fund_id=fund_id,
        as_of=as_of,
        period_start=fund_metrics.period_start,
        fund=fund_metrics,
        investors={k: investor_metrics[k] for k in sorted(investor_metrics)},
        gross_net=gross_net,
    )
    window = f"{report.period_start} to {as_of}" if report.period_start else f"as of {as_of}"
    logger.info(
        f"Performance report for {fund_id} {window}: "
        f"IRR {fund_metrics.irr}, TVPI {fund_metrics.tvpi}, "
        f"{len(report.investors)} investors"
    )
    return report


def allocations_frame(distribution: Distribution) -> pd.DataFrame:
    """
    Allocation table for reporting, one row per recipient.

    Returns:
        DataFrame indexed by investor_id
    """
    rows = [
        {
            "investor_id": a.investor_id,
            "partner_kind": a.partner_kind.value,
            "ownership_percent": a.ownership_percent,
            "base_allocation": a.base_allocation,
            "final_allocation": a.final_allocation,
            "return_of_capital": a.return_of_capital_amount,
            "income": a.income_amount,
            "capital_gain": a.capital_gain_amount,
            "tax_withheld": a.tax_withheld,
            "net_allocation": a.net_allocation,
        }
        for a in distribution.investor_allocations
    ]
    columns = [
        "investor_id",
        "partner_kind",
        "ownership_percent",
        "base_allocation",
        "final_allocation",
        "return_of_capital",
        "income",
        "capital_gain",
        "tax_withheld",
        "net_allocation",
    ]
    return pd.DataFrame(rows, columns=columns).set_index("investor_id")


def breakdown_frame(distribution: Distribution) -> pd.DataFrame:
    """
    Tier-by-tier breakdown with one column per recipient.

    Rows follow the waterfall order; recipient columns hold each investor's
    (and the GP's) share of the tier.
    """
    recipients = [a.investor_id for a in distribution.investor_allocations]
    rows = []
    for position, tier in enumerate(distribution.waterfall_breakdown):
        row = {
            "tier_name": tier.tier_name,
            "amount": tier.amount,
            "lp_amount": tier.lp_amount,
            "gp_amount": tier.gp_amount,
        }
        # Tier shares are recorded in breakdown order for every recipient
        for allocation in distribution.investor_allocations:
            shares = allocation.tier_allocations
            row[allocation.investor_id] = (
                shares[position].amount if position < len(shares) else ZERO
            )
        rows.append(row)
    columns = ["tier_name", "amount", "lp_amount", "gp_amount"] + recipients
    return pd.DataFrame(rows, columns=columns)


__all__ = [
    "allocations_frame",
    "assemble_distribution",
    "assemble_performance_report",
    "breakdown_frame",
    "supersede",
]
