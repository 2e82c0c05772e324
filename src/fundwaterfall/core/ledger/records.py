# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Core record structure for the cash-flow ledger.

Capital calls and distributions are recorded as non-negative magnitudes; the
event kind carries the direction. `signed_amount` applies the investor-side
sign convention used by the IRR solver.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..exceptions import ValidationError
from ..primitives.enums import CashFlowKindEnum, CashFlowPurposeEnum
from ..primitives.money import to_cents, to_decimal


@dataclass(frozen=True, slots=True)
class CashFlowEvent:
    """
    Immutable record of a single capital call or distribution.

    Attributes:
        investor_id: Investor the cash moved to or from; None for fund-level events
        date: Value date of the cash movement
        amount: Magnitude in the ledger currency (whole cents, non-negative)
        kind: CapitalCall (into the fund) or Distribution (out of the fund)
        description: Optional free text, e.g. "Capital Call #3"
        purpose: What a capital call funds (investment, management fee,
            expense); None when calls are not tracked in detail
    """

    investor_id: Optional[str]
    date: datetime.date
    amount: Decimal
    kind: CashFlowKindEnum
    description: Optional[str] = None
    purpose: Optional[CashFlowPurposeEnum] = None

    def __post_init__(self):
        amount = to_decimal(self.amount)
        if amount < 0:
            raise ValidationError(
                f"Cash-flow amounts must be non-negative magnitudes, got {amount} "
                f"on {self.date} ({self.kind})"
            )
        to_cents(amount, field="Cash-flow amount")
        # Frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "kind", CashFlowKindEnum(self.kind))
        if self.purpose is not None:
            if self.kind != CashFlowKindEnum.CAPITAL_CALL:
                raise ValidationError(
                    f"Only capital calls carry a purpose, got {self.purpose} on a "
                    f"{self.kind.value} dated {self.date}"
                )
            object.__setattr__(self, "purpose", CashFlowPurposeEnum(self.purpose))
        if isinstance(self.date, datetime.datetime):
            object.__setattr__(self, "date", self.date.date())

    @property
    def is_capital_call(self) -> bool:
        return self.kind == CashFlowKindEnum.CAPITAL_CALL

    @property
    def is_distribution(self) -> bool:
        return self.kind == CashFlowKindEnum.DISTRIBUTION

    @property
    def is_fund_level(self) -> bool:
        return self.investor_id is None

    @property
    def signed_amount(self) -> Decimal:
        """Investor-perspective amount: calls negative, distributions positive."""
        return -self.amount if self.is_capital_call else self.amount
