# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Entity models for fund investors.

An `Investor` is a resolved snapshot: ownership has already been computed at
the distribution date (see `fundwaterfall.fund.ownership`) and capital account
balances are as of the same date.
"""

from decimal import Decimal
from typing import Optional

from pydantic import Field, model_validator

from ..core.primitives import Model, Money, Percent


class Investor(Model):
    """Limited partner capital account snapshot with ownership share."""

    # Core Identity
    id: str = Field(..., min_length=1, description="Investor identifier")
    name: Optional[str] = Field(None, description="Investor name")

    # Capital Account
    commitment: Money = Field(..., description="Total capital commitment")
    called_capital_to_date: Money = Field(
        default=Decimal("0"), description="Capital called as of the snapshot date"
    )
    distributions_to_date: Money = Field(
        default=Decimal("0"), description="Cumulative distributions received"
    )

    # Equity ownership percentage (0-100)
    ownership_percent: Percent = Field(
        ..., description="Ownership at the snapshot date, commitment-based or side-letter override"
    )

    # Optional capital account detail; derived from the balances above when omitted
    capital_returned_to_date: Optional[Money] = Field(
        None, description="Portion of distributions that returned capital"
    )
    preferred_return_accrued: Optional[Money] = Field(
        None, description="Cumulative preferred return accrued to date"
    )
    preferred_return_paid_to_date: Optional[Money] = Field(
        None, description="Cumulative preferred return already paid"
    )
    withholding_rate_percent: Optional[Percent] = Field(
        None, description="Tax withholding rate applied to this investor's allocation"
    )

    @model_validator(mode="after")
    def validate_capital_account(self) -> "Investor":
        """Returned capital can never exceed called capital."""
        if (
            self.capital_returned_to_date is not None
            and self.capital_returned_to_date > self.called_capital_to_date
        ):
            raise ValueError(
                f"Investor '{self.id}' capital_returned_to_date "
                f"({self.capital_returned_to_date}) exceeds called capital "
                f"({self.called_capital_to_date})"
            )
        return self

    @property
    def returned_capital(self) -> Decimal:
        """Capital returned so far; defaults to distributions capped at called capital."""
        if self.capital_returned_to_date is not None:
            return self.capital_returned_to_date
        return min(self.distributions_to_date, self.called_capital_to_date)

    @property
    def unreturned_capital(self) -> Decimal:
        """Called capital not yet returned."""
        return self.called_capital_to_date - self.returned_capital

    @property
    def uncalled_commitment(self) -> Decimal:
        return max(self.commitment - self.called_capital_to_date, Decimal("0"))

    def preferred_paid(self, accrued: Decimal) -> Decimal:
        """
        Preferred return already paid.

        Uses `preferred_return_paid_to_date` when supplied, otherwise treats
        distributions in excess of returned capital as preferred return, up to
        the accrued amount.
        """
        if self.preferred_return_paid_to_date is not None:
            return self.preferred_return_paid_to_date
        excess = self.distributions_to_date - self.returned_capital
        return min(max(excess, Decimal("0")), accrued)

    def __str__(self) -> str:
        label = self.name or self.id
        return f"{label} (LP): {self.ownership_percent}% ownership"


__all__ = [
    "Investor",
]
