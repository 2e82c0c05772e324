# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Performance result models.

Every multiple and the IRR are nullable: an undefined metric (zero paid-in
capital, IRR without a root) is reported as None, never raised. Non-fatal
numerical problems are attached as `ComputationWarning` entries.
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Dict, Optional, Tuple

from pydantic import Field

from ..core.primitives import (
    ComputationWarningCode,
    Model,
    Money,
    PerformanceMethodologyEnum,
    SignedMoney,
)


class ComputationWarning(Model):
    """Non-fatal problem attached to a specific metric."""

    metric: str = Field(..., description="Name of the affected metric, e.g. 'irr'")
    code: ComputationWarningCode
    message: str


class MetricsResult(Model):
    """
    Fund- or investor-level performance metrics.

    Attributes:
        irr: Annualised internal rate of return (0.15 for 15%)
        moic: (distributions + residual value) / paid-in
        tvpi: dpi + rvpi
        dpi: distributions / paid-in
        rvpi: residual value / paid-in
        paid_in: Sum of capital calls in the measurement window
        distributed: Sum of distributions in the measurement window
        residual_value: Terminal value (NAV) at the as-of date
        period_start: First day of the measurement window; None since inception
        warnings: Non-fatal computation warnings
    """

    irr: Optional[float] = None
    moic: Optional[float] = None
    tvpi: Optional[float] = None
    dpi: Optional[float] = None
    rvpi: Optional[float] = None

    paid_in: Money
    distributed: Money
    residual_value: Money

    period_start: Optional[datetime.date] = None
    warnings: Tuple[ComputationWarning, ...] = ()

    @property
    def total_value(self) -> Decimal:
        return self.distributed + self.residual_value

    @property
    def realized_gain(self) -> Decimal:
        """Distributions in excess of paid-in capital."""
        return self.distributed - min(self.distributed, self.paid_in)

    @property
    def total_gain(self) -> Decimal:
        """Total value less paid-in capital; negative for a loss."""
        return self.total_value - self.paid_in

    @property
    def unrealized_gain(self) -> Decimal:
        """Residual value less capital not yet returned; negative for a loss."""
        return self.total_gain - self.realized_gain

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


class GrossNetPerformance(Model):
    """
    Performance before (gross) and after (net) management fees.

    Gross figures measure total value against invested capital, which is
    paid-in capital less management fees. Net figures measure it against all
    paid-in capital. Under `granular` the fees are the capital calls tagged as
    management fees; under `grossup` they are estimated.

    Attributes:
        methodology: How management fees were determined
        paid_in: All capital called up to the as-of date
        management_fees: Fee calls (granular) or estimated fees (gross-up)
        invested_capital: Paid-in capital less management fees, floored at zero
        total_value: Distributions plus terminal value
        gross_gain: total_value - invested_capital
        gross_multiple: total_value / invested_capital
        gross_return_percent: gross_gain / invested_capital * 100
        net_gain: total_value - paid_in
        net_multiple: total_value / paid_in
        net_return_percent: net_gain / paid_in * 100
    """

    methodology: PerformanceMethodologyEnum

    paid_in: Money
    management_fees: Money
    invested_capital: Money
    total_value: Money

    gross_gain: SignedMoney
    gross_multiple: Optional[float] = None
    gross_return_percent: Optional[float] = None

    net_gain: SignedMoney
    net_multiple: Optional[float] = None
    net_return_percent: Optional[float] = None


class PerformanceReport(Model):
    """Fund metrics plus per-investor metrics at one as-of date."""

    fund_id: str
    as_of: datetime.date
    period_start: Optional[datetime.date] = None
    fund: MetricsResult
    investors: Dict[str, MetricsResult] = Field(default_factory=dict)
    gross_net: Optional[GrossNetPerformance] = None

    def for_investor(self, investor_id: str) -> Optional[MetricsResult]:
        return self.investors.get(investor_id)


__all__ = [
    "ComputationWarning",
    "GrossNetPerformance",
    "MetricsResult",
    "PerformanceReport",
]
