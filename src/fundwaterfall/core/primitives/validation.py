# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Shared validators for fund configuration and engine inputs.

These functions are used both by pydantic field validators (at model
construction time) and by the engine entry points (at call time), so a
snapshot that bypassed model validation is still rejected before any money
is allocated. All of them raise `ValidationError` and never correct a value.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence

from ..exceptions import ValidationError

ONE_HUNDRED = Decimal(100)


def validate_tier_split(
    lp_percent: Decimal, gp_percent: Decimal, description: Optional[str] = None
) -> None:
    """
    Validate that a tier's LP and GP percentages sum to exactly 100.

    Raises:
        ValidationError: If either side is negative or the sum is not 100
    """
    label = f"Tier '{description}'" if description else "Tier"
    if lp_percent < 0 or gp_percent < 0:
        raise ValidationError(f"{label} percentages must be non-negative")
    total = lp_percent + gp_percent
    if total != ONE_HUNDRED:
        raise ValidationError(
            f"{label} LP/GP split must sum to 100, got {lp_percent} + {gp_percent} = {total}"
        )


def validate_ownership_total(
    ownership: Mapping[str, Decimal], tolerance: float = 1e-6
) -> None:
    """
    Validate that ownership percentages over active investors sum to 100.

    Args:
        ownership: Investor id to ownership percent (0-100 scale)
        tolerance: Allowed absolute deviation in percentage points

    Raises:
        ValidationError: If there are no investors, any ownership is negative,
            or the total deviates from 100 by more than `tolerance`
    """
    if not ownership:
        raise ValidationError("At least one investor is required")
    negative = sorted(k for k, v in ownership.items() if v < 0)
    if negative:
        raise ValidationError(f"Ownership must be non-negative, got negative for {negative}")
    total = sum(ownership.values(), Decimal(0))
    if abs(total - ONE_HUNDRED) > Decimal(str(tolerance)):
        raise ValidationError(f"Investor ownership must sum to 100%, got {total}%")


def validate_non_negative(value: Decimal, field: str) -> None:
    """Reject negative pools and amounts."""
    if value < 0:
        raise ValidationError(f"{field} must be non-negative, got {value}")


def validate_unique_ids(ids: Iterable[str], label: str = "Investor") -> None:
    """Reject duplicate identifiers."""
    seen = set()
    duplicates = set()
    for item in ids:
        if item in seen:
            duplicates.add(item)
        seen.add(item)
    if duplicates:
        raise ValidationError(f"{label} ids must be unique, duplicated: {sorted(duplicates)}")


def validate_custom_tiers(tiers: Sequence) -> None:
    """
    Validate a custom tier list: at least one tier, each split summing to 100.

    Raises:
        ValidationError: If `tiers` is empty or any split is invalid
    """
    if not tiers:
        raise ValidationError("Custom waterfall requires at least one tier")
    for tier in tiers:
        validate_tier_split(tier.lp_percent, tier.gp_percent, tier.description)
