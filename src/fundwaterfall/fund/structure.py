# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Fund Structure Models for Capital Distribution Waterfalls

This module defines the fund-level economic terms that drive the distribution
waterfall: the waterfall style, carried interest, hurdle rate, and (for custom
structures) the ordered list of admin-configured tiers.

Key Features:
- European (with GP catch-up), American (no catch-up), hybrid and custom styles
- Ordered custom tiers with LP/GP splits validated to sum to 100%
- Optional per-tier dollar targets so multi-tier custom waterfalls are usable
- Pro-rata mode (`apply_waterfall=False`) for vehicles that do not tier proceeds
- Industry-standard defaults (8% hurdle, 20% carry)

Example:
    ```python
    fund = FundStructure(
        id="fund-i",
        name="Fund I",
        total_commitment=Decimal("10000000"),
        waterfall_structure="european",
        carried_interest_percent=Decimal("20"),
        hurdle_rate=Decimal("8"),
    )
    ```
"""

from decimal import Decimal
from fractions import Fraction
from typing import Literal, Optional, Tuple

from pydantic import Field, model_validator

from ..core.primitives import (
    Model,
    Money,
    Percent,
    WaterfallStructureEnum,
    validate_custom_tiers,
    validate_tier_split,
)

# =============================================================================
# CUSTOM TIERS
# =============================================================================


class Tier(Model):
    """
    One admin-configured tier of a custom waterfall.

    Tiers are consumed strictly in the order they appear on the fund. A tier
    with `target_amount` consumes at most that amount; a tier without one
    consumes whatever remains of the pool.
    """

    description: str = Field(..., min_length=1, description="Tier label, e.g. 'Preferred Return'")
    lp_percent: Percent = Field(..., description="Share of this tier paid to LPs (0-100)")
    gp_percent: Percent = Field(..., description="Share of this tier paid to the GP (0-100)")
    notes: Optional[str] = Field(None, description="Free-text notes from the tier editor")
    target_amount: Optional[Money] = Field(
        None,
        description="Maximum amount this tier consumes; None consumes the remaining pool",
    )

    @model_validator(mode="after")
    def validate_split(self) -> "Tier":
        """Ensure the LP/GP split sums to exactly 100."""
        validate_tier_split(self.lp_percent, self.gp_percent, self.description)
        return self

    @property
    def is_terminal(self) -> bool:
        """True when the tier absorbs the entire remaining pool."""
        return self.target_amount is None


# =============================================================================
# FUND STRUCTURE
# =============================================================================


class FundStructure(Model):
    """
    Economic terms of a fund, SPV or other vehicle.

    Percentages use a 0-100 scale (`hurdle_rate=8` is an 8% annual preferred
    return). The structure is a read-only snapshot for the duration of a
    distribution calculation.
    """

    # Core Identity
    id: str = Field(..., min_length=1, description="Fund identifier")
    name: Optional[str] = Field(None, description="Display name")
    total_commitment: Money = Field(..., description="Sum of investor commitments")
    currency: str = Field(
        default="USD", min_length=3, max_length=3, description="ISO 4217 ledger currency"
    )

    # Economic Terms
    waterfall_structure: WaterfallStructureEnum = Field(
        default=WaterfallStructureEnum.EUROPEAN, description="Waterfall style"
    )
    management_fee_percent: Percent = Field(
        default=Decimal("2"), description="Annual management fee; estimates fees for gross-up performance"
    )
    carried_interest_percent: Percent = Field(
        default=Decimal("20"), description="GP carried interest on profit"
    )
    hurdle_rate: Percent = Field(
        default=Decimal("8"), description="Annual preferred return, compounded annually"
    )
    custom_tiers: Tuple[Tier, ...] = Field(
        default=(), description="Ordered tiers, only used by custom structures"
    )

    # Distribution Settings
    apply_waterfall: bool = Field(
        default=True,
        description="False distributes pro-rata by ownership without tiering",
    )
    hybrid_logic: Literal["min", "max"] = Field(
        default="min",
        description=(
            "Hybrid selection: 'min' keeps the sequence least favourable to the GP, "
            "'max' the most favourable"
        ),
    )
    gp_catch_up_paid_to_date: Money = Field(
        default=Decimal("0"), description="Catch-up already paid to the GP in prior distributions"
    )

    @model_validator(mode="after")
    def validate_structure(self) -> "FundStructure":
        """Validate custom tiers and catch-up compatibility with the carry rate."""
        if self.waterfall_structure == WaterfallStructureEnum.CUSTOM:
            validate_custom_tiers(self.custom_tiers)
        elif self.custom_tiers:
            raise ValueError(
                f"custom_tiers are only allowed for custom waterfalls, "
                f"not '{self.waterfall_structure.value}'"
            )

        if self.has_catch_up and self.carried_interest_percent >= 100:
            raise ValueError(
                "GP catch-up requires carried_interest_percent below 100, "
                f"got {self.carried_interest_percent}"
            )
        return self

    @property
    def has_catch_up(self) -> bool:
        """Whether a GP catch-up tier can apply (European or hybrid)."""
        return self.waterfall_structure in (
            WaterfallStructureEnum.EUROPEAN,
            WaterfallStructureEnum.HYBRID,
        )

    @property
    def carry(self) -> Fraction:
        """Carried interest as an exact fraction (0.2 for 20%)."""
        return Fraction(self.carried_interest_percent) / 100

    @property
    def hurdle(self) -> Decimal:
        """Hurdle rate as a decimal (0.08 for 8%)."""
        return self.hurdle_rate / 100

    def __str__(self) -> str:
        label = self.name or self.id
        return (
            f"{label}: {self.waterfall_structure.value} waterfall, "
            f"{self.hurdle_rate}% hurdle, {self.carried_interest_percent}% carry"
        )


__all__ = [
    "FundStructure",
    "Tier",
]
