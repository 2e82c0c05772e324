# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Distribution result models.

Type-safe containers for a distribution request and the computed breakdown:
tier-by-tier results, per-investor allocations, and the assembled
`Distribution` record handed to reporting and persistence layers.

All money fields are `Decimal` with two decimal places. Result models are
frozen; re-computation produces a new `Distribution` with a higher revision.
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Dict, Optional, Tuple

from pydantic import Field, computed_field, model_validator

from ..core.primitives import Model, Money, PartnerKindEnum, Percent, TierKindEnum

ZERO = Decimal("0.00")


class DistributionRequest(Model):
    """
    A distribution event to compute: the pool, its date and its tax character.

    When both `is_income` and `is_capital_gain` are set, the declared
    `income_amount` and `capital_gain_amount` describe how the non-capital
    part of the pool divides between the two.
    """

    id: str = Field(..., min_length=1, description="Distribution identifier")
    fund_id: str = Field(..., min_length=1)
    amount: Money = Field(..., description="Pool to distribute")
    currency: str = Field(default="USD", min_length=3, max_length=3)
    distribution_date: datetime.date
    description: Optional[str] = None

    # Tax character flags
    is_return_of_capital: bool = False
    is_income: bool = False
    is_capital_gain: bool = False
    income_amount: Optional[Money] = Field(
        None, description="Declared income portion when income and capital gain are mixed"
    )
    capital_gain_amount: Optional[Money] = Field(
        None, description="Declared capital-gain portion when income and capital gain are mixed"
    )

    @model_validator(mode="after")
    def validate_character(self) -> "DistributionRequest":
        """Mixed income/capital-gain distributions must declare both portions."""
        if self.is_income and self.is_capital_gain:
            if self.income_amount is None or self.capital_gain_amount is None:
                raise ValueError(
                    "income_amount and capital_gain_amount are required when a "
                    "distribution is both income and capital gain"
                )
            if self.income_amount + self.capital_gain_amount > self.amount:
                raise ValueError(
                    f"Declared income ({self.income_amount}) and capital gain "
                    f"({self.capital_gain_amount}) exceed the distribution amount ({self.amount})"
                )
        return self


class TierResult(Model):
    """Amount consumed by one waterfall tier and its LP/GP split."""

    tier_name: str
    tier_kind: TierKindEnum
    amount: Money = Field(..., description="Total consumed by this tier")
    lp_amount: Money
    gp_amount: Money
    lp_percent: Percent
    gp_percent: Percent
    remaining_after: Money = Field(..., description="Pool left after this tier")

    @model_validator(mode="after")
    def validate_split(self) -> "TierResult":
        if self.lp_amount + self.gp_amount != self.amount:
            raise ValueError(
                f"Tier '{self.tier_name}' LP ({self.lp_amount}) + GP ({self.gp_amount}) "
                f"does not equal the tier amount ({self.amount})"
            )
        return self


class TierShare(Model):
    """One investor's share of a single tier."""

    tier_name: str
    tier_kind: TierKindEnum
    amount: Money


class InvestorAllocation(Model):
    """
    One recipient's share of a distribution.

    `base_allocation` is the naive pro-rata share (pool x ownership) kept for
    comparison; `final_allocation` is what the waterfall actually pays.
    The GP appears as a row with `partner_kind="GP"` whenever any tier pays it.
    """

    investor_id: str
    partner_kind: PartnerKindEnum = PartnerKindEnum.LP
    ownership_percent: Percent = Field(..., description="Ownership at the distribution date")
    base_allocation: Money
    final_allocation: Money
    tier_allocations: Tuple[TierShare, ...] = ()

    # Tax character of final_allocation
    return_of_capital_amount: Money = ZERO
    income_amount: Money = ZERO
    capital_gain_amount: Money = ZERO

    tax_withheld: Optional[Money] = None
    tax_rate: Optional[Percent] = None

    @computed_field
    @property
    def net_allocation(self) -> Decimal:
        """Cash paid after withholding."""
        return self.final_allocation - (self.tax_withheld or ZERO)

    def amount_for_tier(self, tier_kind: TierKindEnum) -> Decimal:
        """Sum of this recipient's shares of tiers of the given kind."""
        return sum(
            (share.amount for share in self.tier_allocations if share.tier_kind == tier_kind),
            ZERO,
        )


class Distribution(Model):
    """
    Computed distribution record.

    Created once per distribution event and immutable afterwards. A
    recalculation yields a new record with the same `id`, `revision + 1` and
    `supersedes_revision` pointing at the record it replaces.
    """

    id: str
    fund_id: str
    amount: Money
    currency: str
    distribution_date: datetime.date
    is_return_of_capital: bool = False
    is_income: bool = False
    is_capital_gain: bool = False

    waterfall_applied: bool
    waterfall_breakdown: Tuple[TierResult, ...] = ()
    investor_allocations: Tuple[InvestorAllocation, ...] = ()

    # Audit trail
    revision: int = Field(default=1, ge=1)
    supersedes_revision: Optional[int] = Field(default=None, ge=1)

    @property
    def lp_total(self) -> Decimal:
        return sum(
            (
                a.final_allocation
                for a in self.investor_allocations
                if a.partner_kind == PartnerKindEnum.LP
            ),
            ZERO,
        )

    @property
    def gp_total(self) -> Decimal:
        return sum(
            (
                a.final_allocation
                for a in self.investor_allocations
                if a.partner_kind == PartnerKindEnum.GP
            ),
            ZERO,
        )

    @property
    def allocations_by_investor(self) -> Dict[str, InvestorAllocation]:
        return {a.investor_id: a for a in self.investor_allocations}

    def allocation_for(self, investor_id: str) -> Optional[InvestorAllocation]:
        """Allocation row for an investor (or the GP row), if present."""
        return self.allocations_by_investor.get(investor_id)

    def tier(self, tier_kind: TierKindEnum) -> Optional[TierResult]:
        """First tier of the given kind in the breakdown."""
        for result in self.waterfall_breakdown:
            if result.tier_kind == tier_kind:
                return result
        return None


__all__ = [
    "Distribution",
    "DistributionRequest",
    "InvestorAllocation",
    "TierResult",
    "TierShare",
]
