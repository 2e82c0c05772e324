# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Ownership snapshot resolution.

Ownership changes over a fund's life as investors are admitted or increase
their commitments. Rather than reading "current" ownership, callers resolve a
snapshot at the distribution date from a versioned commitment history and
pass the result into the engines.

Example:
    ```python
    history = [
        CommitmentRecord(investor_id="lp-1", effective_date=date(2022, 1, 1), commitment=Decimal("6000000")),
        CommitmentRecord(investor_id="lp-2", effective_date=date(2022, 1, 1), commitment=Decimal("4000000")),
        CommitmentRecord(investor_id="lp-3", effective_date=date(2023, 7, 1), commitment=Decimal("5000000")),
    ]
    resolve_ownership(history, as_of=date(2023, 1, 1))
    # {'lp-1': Decimal('60'), 'lp-2': Decimal('40')}
    ```
"""

from __future__ import annotations

import datetime
import logging
from decimal import Decimal
from typing import Dict, Iterable, Mapping, Optional

from pydantic import Field

from ..core.exceptions import ValidationError
from ..core.primitives import Model, Money, validate_ownership_total
from ..core.primitives.validation import ONE_HUNDRED

logger = logging.getLogger(__name__)


class CommitmentRecord(Model):
    """
    One version of an investor's commitment.

    The record states the investor's total commitment from `effective_date`
    onward; a later record for the same investor replaces it. A zero
    commitment marks a withdrawn or fully transferred position.
    """

    investor_id: str = Field(..., min_length=1)
    effective_date: datetime.date
    commitment: Money


def commitments_as_of(
    history: Iterable[CommitmentRecord], as_of: datetime.date
) -> Dict[str, Decimal]:
    """
    Latest commitment per investor effective on or before `as_of`.

    Records sharing an effective date are applied in the order given.
    Investors whose latest commitment is zero are not active and are omitted.
    """
    latest: Dict[str, CommitmentRecord] = {}
    for record in sorted(history, key=lambda r: r.effective_date):
        if record.effective_date <= as_of:
            latest[record.investor_id] = record
    return {
        investor_id: record.commitment
        for investor_id, record in sorted(latest.items())
        if record.commitment > 0
    }


def ownership_from_commitments(
    commitments: Mapping[str, Decimal],
    overrides: Optional[Mapping[str, Decimal]] = None,
    tolerance: float = 1e-6,
) -> Dict[str, Decimal]:
    """
    Ownership percentages (0-100) from commitments, with side-letter overrides.

    Investors named in `overrides` receive exactly the overridden percentage.
    The remaining percentage is shared among the other investors pro-rata by
    commitment.

    Raises:
        ValidationError: If there are no commitments, an override names an
            unknown investor, overrides exceed 100%, or the result does not
            sum to 100% within `tolerance`
    """
    if not commitments:
        raise ValidationError("Cannot resolve ownership without any active commitments")

    overrides = dict(overrides or {})
    unknown = sorted(set(overrides) - set(commitments))
    if unknown:
        raise ValidationError(f"Ownership overrides reference unknown investors: {unknown}")

    overridden_total = sum(overrides.values(), Decimal("0"))
    if overridden_total > ONE_HUNDRED:
        raise ValidationError(
            f"Ownership overrides sum to {overridden_total}%, which exceeds 100%"
        )

    remaining_percent = ONE_HUNDRED - overridden_total
    pro_rata = {k: v for k, v in commitments.items() if k not in overrides}
    pro_rata_total = sum(pro_rata.values(), Decimal("0"))

    ownership: Dict[str, Decimal] = {}
    for investor_id in sorted(commitments):
        if investor_id in overrides:
            ownership[investor_id] = Decimal(overrides[investor_id])
        elif pro_rata_total > 0:
            ownership[investor_id] = remaining_percent * pro_rata[investor_id] / pro_rata_total
        else:
            ownership[investor_id] = Decimal("0")

    validate_ownership_total(ownership, tolerance)
    if overrides:
        logger.debug(f"Applied side-letter ownership overrides for {sorted(overrides)}")
    return ownership


def resolve_ownership(
    history: Iterable[CommitmentRecord],
    as_of: datetime.date,
    overrides: Optional[Mapping[str, Decimal]] = None,
    tolerance: float = 1e-6,
) -> Dict[str, Decimal]:
    """
    Resolve the ownership snapshot at `as_of` from a commitment history.

    Args:
        history: Versioned commitment records, in any order
        as_of: Snapshot date (usually the distribution date)
        overrides: Side-letter ownership percentages keyed by investor id
        tolerance: Allowed deviation of the total from 100 (percentage points)

    Returns:
        Investor id to ownership percent, sorted by investor id
    """
    return ownership_from_commitments(
        commitments_as_of(history, as_of), overrides=overrides, tolerance=tolerance
    )


__all__ = [
    "CommitmentRecord",
    "commitments_as_of",
    "ownership_from_commitments",
    "resolve_ownership",
]
