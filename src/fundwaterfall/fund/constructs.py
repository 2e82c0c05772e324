# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Fund Constructs - Fund Structure and Investor Builders

Constructs compose the primitive models (`FundStructure`, `Tier`, `Investor`)
into ready-to-use fund set-ups with industry-standard defaults, while leaving
every output a plain model that can be inspected or copied with changes.

## Available Constructs

#### `create_european_fund()`
Whole-fund waterfall: return of capital, preferred return, 100% GP catch-up,
then the carried-interest split. Defaults: 8% hurdle, 20% carry.

#### `create_american_fund()`
Deal-by-deal style without catch-up: return of capital, preferred return,
then the carried-interest split.

#### `create_custom_fund()`
Admin-configured tiers consumed strictly in order. Tiers may be given as
`Tier` models or as `(description, lp_percent, gp_percent)` /
`(description, lp_percent, gp_percent, target_amount)` tuples.

#### `investors_from_commitments()`
Builds `Investor` snapshots with commitment-based ownership, honouring
side-letter overrides.

## Usage

```python
fund = create_european_fund("fund-i", total_commitment=Decimal("10000000"))
investors = investors_from_commitments(
    {"lp-1": Decimal("6000000"), "lp-2": Decimal("4000000")},
    called_capital={"lp-1": Decimal("3600000"), "lp-2": Decimal("2400000")},
)
```
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Mapping, Optional, Sequence, Tuple, Union

from ..core.exceptions import ValidationError
from ..core.primitives import WaterfallStructureEnum, to_decimal
from .entities import Investor
from .ownership import ownership_from_commitments
from .structure import FundStructure, Tier

TierSpec = Union[Tier, Tuple]


def _standard_fund(
    structure: WaterfallStructureEnum,
    fund_id: str,
    total_commitment: Decimal,
    carried_interest_percent: Decimal,
    hurdle_rate: Decimal,
    **kwargs,
) -> FundStructure:
    return FundStructure(
        id=fund_id,
        total_commitment=to_decimal(total_commitment),
        waterfall_structure=structure,
        carried_interest_percent=to_decimal(carried_interest_percent),
        hurdle_rate=to_decimal(hurdle_rate),
        **kwargs,
    )


def create_european_fund(
    fund_id: str,
    total_commitment: Decimal,
    carried_interest_percent: Decimal = Decimal("20"),
    hurdle_rate: Decimal = Decimal("8"),
    **kwargs,
) -> FundStructure:
    """
    Creates a fund with a European (whole-fund) waterfall.

    Args:
        fund_id: Fund identifier
        total_commitment: Sum of investor commitments
        carried_interest_percent: GP carry on profit (0-100, below 100)
        hurdle_rate: Annual preferred return (0-100)
        **kwargs: Any other `FundStructure` field (name, currency, ...)

    Returns:
        FundStructure with `waterfall_structure="european"`
    """
    return _standard_fund(
        WaterfallStructureEnum.EUROPEAN,
        fund_id,
        total_commitment,
        carried_interest_percent,
        hurdle_rate,
        **kwargs,
    )


def create_american_fund(
    fund_id: str,
    total_commitment: Decimal,
    carried_interest_percent: Decimal = Decimal("20"),
    hurdle_rate: Decimal = Decimal("8"),
    **kwargs,
) -> FundStructure:
    """
    Creates a fund with an American waterfall (no GP catch-up).

    Same arguments as `create_european_fund`.
    """
    return _standard_fund(
        WaterfallStructureEnum.AMERICAN,
        fund_id,
        total_commitment,
        carried_interest_percent,
        hurdle_rate,
        **kwargs,
    )


def _as_tier(spec: TierSpec) -> Tier:
    if isinstance(spec, Tier):
        return spec
    if len(spec) == 3:
        description, lp_percent, gp_percent = spec
        target_amount = None
    elif len(spec) == 4:
        description, lp_percent, gp_percent, target_amount = spec
    else:
        raise ValidationError(
            "Tier tuples must be (description, lp_percent, gp_percent[, target_amount]), "
            f"got {spec!r}"
        )
    return Tier(
        description=description,
        lp_percent=to_decimal(lp_percent),
        gp_percent=to_decimal(gp_percent),
        target_amount=None if target_amount is None else to_decimal(target_amount),
    )


def create_custom_fund(
    fund_id: str,
    total_commitment: Decimal,
    tiers: Sequence[TierSpec],
    **kwargs,
) -> FundStructure:
    """
    Creates a fund with admin-configured custom tiers.

    Args:
        fund_id: Fund identifier
        total_commitment: Sum of investor commitments
        tiers: Ordered tiers as `Tier` models or tuples
        **kwargs: Any other `FundStructure` field

    Returns:
        FundStructure with `waterfall_structure="custom"`

    Raises:
        ValidationError: If `tiers` is empty or a tier tuple is malformed

    Example:
        ```python
        fund = create_custom_fund(
            "spv-7",
            Decimal("5000000"),
            tiers=[
                ("Return of Capital", 100, 0, Decimal("2500000")),
                ("Promote", 70, 30),
            ],
        )
        ```
    """
    if not tiers:
        raise ValidationError("Custom waterfall requires at least one tier")
    return FundStructure(
        id=fund_id,
        total_commitment=to_decimal(total_commitment),
        waterfall_structure=WaterfallStructureEnum.CUSTOM,
        custom_tiers=tuple(_as_tier(t) for t in tiers),
        **kwargs,
    )


def investors_from_commitments(
    commitments: Mapping[str, Decimal],
    called_capital: Optional[Mapping[str, Decimal]] = None,
    distributions: Optional[Mapping[str, Decimal]] = None,
    ownership_overrides: Optional[Mapping[str, Decimal]] = None,
    names: Optional[Mapping[str, str]] = None,
) -> List[Investor]:
    """
    Create investor snapshots with ownership proportional to commitment.

    Args:
        commitments: Investor id to commitment
        called_capital: Investor id to capital called to date (default 0)
        distributions: Investor id to distributions received to date (default 0)
        ownership_overrides: Side-letter ownership percentages (0-100)
        names: Investor id to display name

    Returns:
        Investors sorted by id

    Raises:
        ValidationError: If ownership cannot be resolved to 100%
    """
    commitments = {k: to_decimal(v) for k, v in commitments.items()}
    ownership = ownership_from_commitments(
        {k: v for k, v in commitments.items() if v > 0},
        overrides={k: to_decimal(v) for k, v in (ownership_overrides or {}).items()},
    )
    called_capital = called_capital or {}
    distributions = distributions or {}
    names = names or {}

    return [
        Investor(
            id=investor_id,
            name=names.get(investor_id),
            commitment=commitments[investor_id],
            called_capital_to_date=to_decimal(called_capital.get(investor_id, Decimal("0"))),
            distributions_to_date=to_decimal(distributions.get(investor_id, Decimal("0"))),
            ownership_percent=percent,
        )
        for investor_id, percent in ownership.items()
    ]


__all__ = [
    "create_american_fund",
    "create_custom_fund",
    "create_european_fund",
    "investors_from_commitments",
]
