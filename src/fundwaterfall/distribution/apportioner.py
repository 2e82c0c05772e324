# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Allocation apportioner.

Splits each tier's LP amount across investors by ownership using the
largest-remainder method in integer cents:

1. compute each investor's exact share as a `Fraction`
2. floor every share to whole cents
3. hand the leftover cents out one at a time, largest fractional remainder
   first, ties broken by ascending investor id

The per-tier investor shares therefore always add up to the tier's LP amount,
and identical inputs always produce identical allocations.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from fractions import Fraction
from typing import Dict, List, Mapping, Optional, Sequence

from ..core.exceptions import ValidationError
from ..core.primitives import (
    EngineSettings,
    PartnerKindEnum,
    TierKindEnum,
    from_cents,
    round_half_even,
    to_cents,
)
from ..fund import Investor
from .results import DistributionRequest, InvestorAllocation, TierResult, TierShare

logger = logging.getLogger(__name__)


def largest_remainder(total_cents: int, weights: Mapping[str, Decimal]) -> Dict[str, int]:
    """
    Apportion `total_cents` across `weights` in whole cents.

    Args:
        total_cents: Non-negative amount to apportion
        weights: Key to non-negative weight (e.g. ownership percent)

    Returns:
        Key to cents, in ascending key order; values sum to `total_cents`

    Raises:
        ValidationError: If weights are empty, negative or all zero while
            `total_cents` is positive

    Example:
        ```python
        largest_remainder(100, {"a": Decimal(1), "b": Decimal(1), "c": Decimal(1)})
        # {'a': 34, 'b': 33, 'c': 33}
        ```
    """
    keys = sorted(weights)
    if total_cents == 0:
        return {k: 0 for k in keys}
    if total_cents < 0:
        raise ValidationError(f"Cannot apportion a negative amount ({total_cents} cents)")

    fractions = {k: Fraction(weights[k]) for k in keys}
    if any(w < 0 for w in fractions.values()):
        raise ValidationError("Apportionment weights must be non-negative")
    weight_total = sum(fractions.values(), Fraction(0))
    if weight_total == 0:
        raise ValidationError("Cannot apportion a positive amount across zero total weight")

    exact = {k: Fraction(total_cents) * fractions[k] / weight_total for k in keys}
    shares = {k: exact[k].numerator // exact[k].denominator for k in keys}
    leftover = total_cents - sum(shares.values())

    # Largest remainder first; ascending key breaks ties
    order = sorted(keys, key=lambda k: (-(exact[k] - shares[k]), k))
    for i in range(leftover):
        shares[order[i % len(order)]] += 1
    return shares


def _ownership_weights(investors: Sequence[Investor]) -> Dict[str, Decimal]:
    return {i.id: i.ownership_percent for i in investors}


def _tax_withheld(investor: Investor, final_cents: int) -> tuple[Optional[Decimal], Optional[Decimal]]:
    rate = investor.withholding_rate_percent
    if rate is None:
        return None, None
    return from_cents(round_half_even(Fraction(final_cents) * Fraction(rate) / 100)), rate


def apportion(
    tier_results: Sequence[TierResult],
    investors: Sequence[Investor],
    pool: Decimal,
    settings: Optional[EngineSettings] = None,
) -> List[InvestorAllocation]:
    """
    Split the tier breakdown into per-investor allocations.

    With an empty `tier_results` (pro-rata fund) the pool is apportioned by
    ownership directly. Otherwise every tier's `lp_amount` is apportioned by
    ownership and the shares are summed into `final_allocation`. When any
    tier pays the GP, a GP row (`partner_kind="GP"`) is appended so that the
    allocations add up to the pool.

    Args:
        tier_results: Ordered waterfall breakdown
        investors: Investor snapshots (ownership sums to 100%)
        pool: Distribution amount
        settings: Engine settings; defaults to `EngineSettings()`

    Returns:
        LP allocations in ascending investor id order, then the GP row if any
    """
    settings = settings or EngineSettings()
    pool_cents = to_cents(pool, field="Distribution amount")
    weights = _ownership_weights(investors)
    by_id = {i.id: i for i in investors}

    base = largest_remainder(pool_cents, weights)

    tier_shares: Dict[str, List[TierShare]] = {k: [] for k in base}
    final: Dict[str, int] = {k: 0 for k in base}
    gp_shares: List[TierShare] = []
    gp_total = 0

    if not tier_results:
        final = dict(base)
    for tier in tier_results:
        lp_cents = to_cents(tier.lp_amount)
        for investor_id, cents in largest_remainder(lp_cents, weights).items():
            final[investor_id] += cents
            tier_shares[investor_id].append(
                TierShare(tier_name=tier.tier_name, tier_kind=tier.tier_kind, amount=from_cents(cents))
            )
        gp_cents = to_cents(tier.gp_amount)
        gp_total += gp_cents
        gp_shares.append(
            TierShare(tier_name=tier.tier_name, tier_kind=tier.tier_kind, amount=from_cents(gp_cents))
        )

    allocations: List[InvestorAllocation] = []
    for investor_id in base:
        investor = by_id[investor_id]
        tax_withheld, tax_rate = _tax_withheld(investor, final[investor_id])
        allocations.append(
            InvestorAllocation(
                investor_id=investor_id,
                partner_kind=PartnerKindEnum.LP,
                ownership_percent=investor.ownership_percent,
                base_allocation=from_cents(base[investor_id]),
                final_allocation=from_cents(final[investor_id]),
                tier_allocations=tuple(tier_shares[investor_id]),
                tax_withheld=tax_withheld,
                tax_rate=tax_rate,
            )
        )

    if gp_total > 0:
        gp_id = settings.allocation.gp_allocation_id
        if gp_id in by_id:
            raise ValidationError(
                f"GP allocation id '{gp_id}' collides with an investor id; "
                "set AllocationSettings.gp_allocation_id"
            )
        allocations.append(
            InvestorAllocation(
                investor_id=gp_id,
                partner_kind=PartnerKindEnum.GP,
                ownership_percent=Decimal(0),
                base_allocation=from_cents(0),
                final_allocation=from_cents(gp_total),
                tier_allocations=tuple(gp_shares),
            )
        )

    logger.debug(
        f"Apportioned {from_cents(pool_cents)} across {len(investors)} investors "
        f"over {len(tier_results)} tiers (GP {from_cents(gp_total)})"
    )
    return allocations


def classify_proceeds(
    allocation: InvestorAllocation, request: DistributionRequest
) -> InvestorAllocation:
    """
    Split an allocation into return of capital, income and capital gain.

    Return of capital is the allocation's share of Return of Capital tiers.
    The rest is characterised by the request flags:

    - only `is_return_of_capital`: everything is return of capital
    - `is_income` and `is_capital_gain`: split by the declared
      `income_amount` / `capital_gain_amount` (largest remainder)
    - only `is_income` or only `is_capital_gain`: all to that bucket
    - neither: capital gain

    Returns:
        A new allocation with the three amounts set
    """
    final_cents = to_cents(allocation.final_allocation)
    roc_cents = to_cents(allocation.amount_for_tier(TierKindEnum.RETURN_OF_CAPITAL))
    rest = final_cents - roc_cents
    income = 0
    gain = 0

    if request.is_income and request.is_capital_gain:
        if request.income_amount is None or request.capital_gain_amount is None:
            raise ValidationError(
                "income_amount and capital_gain_amount are required to split mixed proceeds"
            )
        declared = {
            "capital_gain": request.capital_gain_amount,
            "income": request.income_amount,
        }
        if sum(declared.values()) == 0:
            gain = rest
        else:
            split = largest_remainder(rest, declared)
            income, gain = split["income"], split["capital_gain"]
    elif request.is_income:
        income = rest
    elif request.is_capital_gain:
        gain = rest
    elif request.is_return_of_capital:
        roc_cents = final_cents
    else:
        gain = rest

    return allocation.model_copy(
        update={
            "return_of_capital_amount": from_cents(roc_cents),
            "income_amount": from_cents(income),
            "capital_gain_amount": from_cents(gain),
        }
    )


__all__ = [
    "apportion",
    "classify_proceeds",
    "largest_remainder",
]
