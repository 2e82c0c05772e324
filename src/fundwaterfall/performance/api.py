# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Performance Analysis API

Public entry point for fund and investor performance reporting over the
cash-flow ledger.
"""

from __future__ import annotations

import datetime
import logging
from decimal import Decimal
from typing import Dict, Mapping, Optional, Sequence

from fundwaterfall.core.exceptions import ValidationError
from fundwaterfall.core.ledger import CashFlowLedger, LedgerQueries
from fundwaterfall.core.primitives import (
    EngineSettings,
    PerformanceMethodologyEnum,
    from_cents,
    to_cents,
    to_decimal,
)
from fundwaterfall.fund import FundStructure, Investor

from .metrics import (
    CashFlows,
    compute_fund_metrics,
    compute_gross_net,
    compute_investor_metrics,
)
from .results import PerformanceReport

logger = logging.getLogger(__name__)


def apportion_terminal_value(
    terminal_value: Decimal,
    ledger: CashFlowLedger,
    as_of: datetime.date,
    investors: Optional[Sequence[Investor]] = None,
) -> Dict[str, Decimal]:
    """
    Split a fund NAV across investors in whole cents (largest remainder).

    Weights are ownership when `investors` are given, otherwise each
    investor's paid-in capital as of `as_of`.
    """
    from fundwaterfall.distribution.apportioner import largest_remainder

    if investors:
        weights = {i.id: i.ownership_percent for i in investors}
    else:
        weights = {
            investor_id: LedgerQueries(ledger).total_called(investor_id, as_of)
            for investor_id in ledger.investor_ids
        }
    if not weights or sum(weights.values()) == 0:
        return {k: Decimal("0.00") for k in weights}
    shares = largest_remainder(to_cents(terminal_value, field="Terminal value"), weights)
    return {k: from_cents(v) for k, v in shares.items()}


def analyze_performance(
    fund: FundStructure,
    ledger: CashFlows,
    terminal_value: Decimal,
    as_of: datetime.date,
    investor_terminal_values: Optional[Mapping[str, Decimal]] = None,
    investors: Optional[Sequence[Investor]] = None,
    settings: Optional[EngineSettings] = None,
    start: Optional[datetime.date] = None,
    methodology: Optional[PerformanceMethodologyEnum] = None,
    average_aum: Optional[Decimal] = None,
) -> PerformanceReport:
    """
    Compute fund-level and investor-level metrics as of a valuation date.

    Args:
        fund: Fund whose ledger is analysed
        ledger: Capital-call and distribution events (investor and fund-level)
        terminal_value: Fund NAV at `as_of`
        as_of: Valuation date; later events are ignored
        investor_terminal_values: Per-investor NAV; when omitted the fund NAV
            is apportioned by ownership (or by paid-in capital without `investors`)
        investors: Investor snapshots supplying ownership for the NAV split
        settings: Engine settings; defaults to `EngineSettings()`
        start: First day of a measurement period; None measures since inception
        methodology: Gross/net methodology; chosen from the ledger when omitted
        average_aum: AUM for the gross-up fee estimate; defaults to `terminal_value`

    Returns:
        PerformanceReport with fund metrics, metrics per investor and
        since-inception gross/net performance at the fund's management fee

    Raises:
        ValidationError: On a negative terminal value, a ledger in another
            currency, or a period start after `as_of`
    """
    settings = settings or EngineSettings()
    if not isinstance(ledger, CashFlowLedger):
        ledger = CashFlowLedger.from_events(ledger, currency=fund.currency)
    if ledger.currency != fund.currency:
        raise ValidationError(
            f"Ledger currency {ledger.currency} does not match fund currency {fund.currency}"
        )

    terminal = to_decimal(terminal_value)
    fund_metrics = compute_fund_metrics(ledger, terminal, as_of, settings=settings, start=start)

    if investor_terminal_values is None:
        investor_terminal_values = apportion_terminal_value(terminal, ledger, as_of, investors)
    investor_metrics = compute_investor_metrics(
        ledger, investor_terminal_values, as_of, settings=settings, start=start
    )
    gross_net = compute_gross_net(
        ledger,
        terminal,
        as_of,
        fund.management_fee_percent,
        methodology=methodology,
        average_aum=average_aum,
        settings=settings,
    )

    from fundwaterfall.distribution.assembler import assemble_performance_report

    return assemble_performance_report(
        fund.id, as_of, fund_metrics, investor_metrics, gross_net=gross_net
    )


__all__ = [
    "analyze_performance",
    "apportion_terminal_value",
]
