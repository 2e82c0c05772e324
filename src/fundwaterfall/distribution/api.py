# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Distribution API

Public entry points for computing a distribution end to end: waterfall,
apportionment, tax character and assembly into an immutable `Distribution`.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from fundwaterfall.core.exceptions import ValidationError
from fundwaterfall.core.primitives import EngineSettings
from fundwaterfall.fund import FundStructure, Investor

from .apportioner import apportion, classify_proceeds
from .assembler import assemble_distribution, supersede
from .results import Distribution, DistributionRequest, InvestorAllocation, TierResult
from .waterfall import CashFlows, compute_waterfall

logger = logging.getLogger(__name__)


def _compute(
    fund: FundStructure,
    investors: Sequence[Investor],
    request: DistributionRequest,
    cash_flows: Optional[CashFlows],
    settings: EngineSettings,
) -> tuple[List[TierResult], List[InvestorAllocation]]:
    if request.fund_id != fund.id:
        raise ValidationError(
            f"Distribution {request.id} is for fund {request.fund_id}, not {fund.id}"
        )
    if request.currency != fund.currency:
        raise ValidationError(
            f"Distribution currency {request.currency} does not match fund currency "
            f"{fund.currency}; convert amounts before calling"
        )

    tier_results = compute_waterfall(
        fund,
        investors,
        request.amount,
        as_of=request.distribution_date,
        cash_flows=cash_flows,
        settings=settings,
    )
    allocations = apportion(tier_results, investors, request.amount, settings=settings)
    allocations = [classify_proceeds(a, request) for a in allocations]
    return tier_results, allocations


def distribute(
    fund: FundStructure,
    investors: Sequence[Investor],
    request: DistributionRequest,
    cash_flows: Optional[CashFlows] = None,
    settings: Optional[EngineSettings] = None,
) -> Distribution:
    """
    Compute a distribution and return the assembled record.

    Workflow:
      1) Run the fund's waterfall over `request.amount` as of the distribution date
      2) Apportion each tier's LP amount across investors by ownership
      3) Characterise each allocation as return of capital, income or capital gain
      4) Assemble and reconcile the `Distribution`

    Args:
        fund: Fund terms and waterfall configuration
        investors: Investor snapshots at the distribution date (100% ownership)
        request: Distribution amount, date and tax character
        cash_flows: Ledger used to accrue preferred return where investors
            carry no explicit accrued amount
        settings: Engine settings; defaults to `EngineSettings()`

    Returns:
        Distribution with revision 1

    Raises:
        ValidationError: On invalid configuration, a fund/currency mismatch, or
            a cash-flow ledger kept in another currency

    Example:
        ```python
        distribution = distribute(fund, investors, request, cash_flows=ledger)
        distribution.waterfall_breakdown[0].tier_name  # "Return of Capital"
        ```
    """
    settings = settings or EngineSettings()
    tier_results, allocations = _compute(fund, investors, request, cash_flows, settings)
    return assemble_distribution(request, tier_results, allocations)


def recalculate(
    previous: Distribution,
    fund: FundStructure,
    investors: Sequence[Investor],
    request: DistributionRequest,
    cash_flows: Optional[CashFlows] = None,
    settings: Optional[EngineSettings] = None,
) -> Distribution:
    """
    Recompute a distribution as a new revision superseding `previous`.

    `previous` is not modified; the caller decides whether to persist the new
    revision in its place. Callers should keep at most one recalculation of a
    given distribution in flight.

    Returns:
        Distribution with `revision = previous.revision + 1`
    """
    settings = settings or EngineSettings()
    tier_results, allocations = _compute(fund, investors, request, cash_flows, settings)
    logger.info(f"Recalculating distribution {previous.id} (revision {previous.revision})")
    return supersede(previous, request, tier_results, allocations)


__all__ = [
    "distribute",
    "recalculate",
]
