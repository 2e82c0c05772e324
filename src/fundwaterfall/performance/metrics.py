# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Performance metrics calculator.

Computes IRR, MOIC, TVPI, DPI and RVPI from a cash-flow series plus a terminal
value (NAV) at the as-of date:

- `DPI = distributions / paid-in`
- `RVPI = terminal value / paid-in`
- `TVPI = DPI + RVPI`, derived so the identity always holds
- `MOIC = (distributions + terminal value) / paid-in`
- IRR solves `sum(CF_i / (1 + r) ** (t_i / 365)) = 0` over calls (negative),
  distributions (positive) and a synthetic `+terminal value` dated `as_of`

Events dated after `as_of` are ignored. With a `start` date only events in
`[start, as_of]` are measured (period performance). Zero paid-in capital
leaves every multiple undefined (None). An IRR without a root is reported as
None with a `NonConvergent` warning, while the multiples are still returned.

Gross and net performance (`compute_gross_net`) separate management fees
from invested capital, either from purpose-tagged capital calls (granular) or
from an estimate based on AUM, the fee rate and fund age (gross-up).
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Union

from ..core.calculations import FinancialCalculations
from ..core.exceptions import ValidationError
from ..core.ledger import CashFlowEvent, CashFlowLedger, LedgerQueries
from ..core.primitives import (
    CashFlowPurposeEnum,
    ComputationWarningCode,
    EngineSettings,
    PerformanceMethodologyEnum,
    from_cents,
    round_half_even,
    to_cents,
    to_decimal,
)
from .results import ComputationWarning, GrossNetPerformance, MetricsResult

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")

CashFlows = Union[CashFlowLedger, Iterable[CashFlowEvent]]


def _as_ledger(cash_flows: CashFlows) -> CashFlowLedger:
    if isinstance(cash_flows, CashFlowLedger):
        return cash_flows
    return CashFlowLedger.from_events(cash_flows)


def _terminal(terminal_value: Decimal) -> Decimal:
    terminal = to_decimal(terminal_value)
    if terminal < 0:
        raise ValidationError(f"Terminal value must be non-negative, got {terminal}")
    return from_cents(to_cents(terminal, field="Terminal value"))


def _percent(numerator: Decimal, denominator: Decimal) -> Optional[float]:
    ratio = FinancialCalculations.calculate_ratio(numerator, denominator)
    return ratio * 100 if ratio is not None else None


@dataclass
class PerformanceMetricsCalculator:
    """
    Metrics over one cash-flow series.

    Example:
        ```python
        calculator = PerformanceMetricsCalculator()
        metrics = calculator.calculate(ledger.for_investor("lp-1"), Decimal("250000"), date(2024, 12, 31))
        metrics.tvpi, metrics.irr
        ```
    """

    settings: EngineSettings = field(default_factory=EngineSettings)

    def calculate(
        self,
        cash_flows: CashFlows,
        terminal_value: Decimal,
        as_of: datetime.date,
        label: str = "series",
        start: Optional[datetime.date] = None,
    ) -> MetricsResult:
        """
        Compute metrics for `cash_flows` as of `as_of`.

        Args:
            cash_flows: Capital-call and distribution events (any order)
            terminal_value: NAV at `as_of`
            as_of: Valuation date; later events are ignored
            label: Series name used in log messages
            start: First day of a measurement period; earlier events are ignored

        Raises:
            ValidationError: If `terminal_value` is negative or not in whole
                cents, or `start` falls after `as_of`
        """
        terminal = _terminal(terminal_value)
        if start is not None and start > as_of:
            raise ValidationError(f"Period start {start} is after the as-of date {as_of}")

        queries = LedgerQueries(_as_ledger(cash_flows))
        paid_in = from_cents(to_cents(queries.total_called(as_of=as_of, start=start)))
        distributed = from_cents(to_cents(queries.total_distributed(as_of=as_of, start=start)))

        dpi = FinancialCalculations.calculate_ratio(distributed, paid_in)
        rvpi = FinancialCalculations.calculate_ratio(terminal, paid_in)
        tvpi = dpi + rvpi if dpi is not None and rvpi is not None else None
        moic = FinancialCalculations.calculate_ratio(distributed + terminal, paid_in)

        flows = queries.signed_flows(as_of=as_of, start=start)
        dates = [day for day, _ in flows] + [as_of]
        amounts = [amount for _, amount in flows] + [terminal]
        solution = FinancialCalculations.solve_irr(dates, amounts, self.settings.irr)

        warnings: List[ComputationWarning] = []
        if not solution.converged:
            logger.warning(f"IRR for {label} as of {as_of} is undefined: {solution.message}")
            warnings.append(
                ComputationWarning(
                    metric="irr",
                    code=ComputationWarningCode.NON_CONVERGENT,
                    message=solution.message,
                )
            )
        else:
            logger.debug(
                f"IRR for {label}: {solution.rate:.6f} via {solution.method} "
                f"in {solution.iterations} iterations"
            )

        return MetricsResult(
            irr=solution.rate,
            moic=moic,
            tvpi=tvpi,
            dpi=dpi,
            rvpi=rvpi,
            paid_in=paid_in,
            distributed=distributed,
            residual_value=terminal,
            period_start=start,
            warnings=tuple(warnings),
        )


def compute_metrics(
    cash_flows: CashFlows,
    terminal_value: Decimal,
    as_of: datetime.date,
    settings: Optional[EngineSettings] = None,
) -> MetricsResult:
    """
    Compute IRR, MOIC, TVPI, DPI and RVPI for one cash-flow series.

    Args:
        cash_flows: Capital-call and distribution events (any order)
        terminal_value: NAV at `as_of` (non-negative)
        as_of: Valuation date; later events are ignored
        settings: Engine settings; defaults to `EngineSettings()`

    Returns:
        MetricsResult with nullable metrics and any computation warnings
    """
    return PerformanceMetricsCalculator(settings=settings or EngineSettings()).calculate(
        cash_flows, terminal_value, as_of
    )


def compute_period_metrics(
    cash_flows: CashFlows,
    end_value: Decimal,
    start: datetime.date,
    end: datetime.date,
    settings: Optional[EngineSettings] = None,
) -> MetricsResult:
    """
    Metrics for the flows dated within `[start, end]`, valued at `end_value` on `end`.

    The opening NAV is not treated as a contribution: paid-in capital and
    distributions are the period's own flows.
    """
    return PerformanceMetricsCalculator(settings=settings or EngineSettings()).calculate(
        cash_flows, end_value, end, label=f"period {start} to {end}", start=start
    )


def compute_fund_metrics(
    ledger: CashFlows,
    terminal_value: Decimal,
    as_of: datetime.date,
    settings: Optional[EngineSettings] = None,
    start: Optional[datetime.date] = None,
) -> MetricsResult:
    """Fund-level metrics over every event in the ledger, investor and fund-level alike."""
    calculator = PerformanceMetricsCalculator(settings=settings or EngineSettings())
    return calculator.calculate(_as_ledger(ledger), terminal_value, as_of, label="fund", start=start)


def compute_investor_metrics(
    ledger: CashFlows,
    investor_terminal_values: Mapping[str, Decimal],
    as_of: datetime.date,
    settings: Optional[EngineSettings] = None,
    start: Optional[datetime.date] = None,
) -> Dict[str, MetricsResult]:
    """
    Investor-level metrics for every investor in the ledger or in `investor_terminal_values`.

    Investors without a terminal value are valued at zero.

    Returns:
        Investor id to MetricsResult, in ascending investor id order
    """
    ledger = _as_ledger(ledger)
    calculator = PerformanceMetricsCalculator(settings=settings or EngineSettings())
    investor_ids = sorted(set(ledger.investor_ids) | set(investor_terminal_values))
    return {
        investor_id: calculator.calculate(
            ledger.for_investor(investor_id),
            investor_terminal_values.get(investor_id, ZERO),
            as_of,
            label=f"investor {investor_id}",
            start=start,
        )
        for investor_id in investor_ids
    }


def determine_methodology(ledger: CashFlows) -> PerformanceMethodologyEnum:
    """Granular when capital calls carry purpose tags, otherwise gross-up."""
    if LedgerQueries(_as_ledger(ledger)).tracks_call_purpose():
        return PerformanceMethodologyEnum.GRANULAR
    return PerformanceMethodologyEnum.GROSS_UP


def estimate_management_fees(
    management_fee_percent: Decimal,
    aum: Decimal,
    fund_age_years: Decimal,
) -> Decimal:
    """`aum * fee% / 100 * fund age`, in whole cents."""
    fees = to_decimal(aum) * to_decimal(management_fee_percent) / 100 * fund_age_years
    return from_cents(round_half_even(fees * 100))


def compute_gross_net(
    ledger: CashFlows,
    terminal_value: Decimal,
    as_of: datetime.date,
    management_fee_percent: Decimal,
    methodology: Optional[PerformanceMethodologyEnum] = None,
    average_aum: Optional[Decimal] = None,
    inception: Optional[datetime.date] = None,
    settings: Optional[EngineSettings] = None,
) -> GrossNetPerformance:
    """
    Gross (before management fees) and net performance as of `as_of`.

    Args:
        ledger: Capital-call and distribution events; later events are ignored
        terminal_value: NAV at `as_of`
        as_of: Valuation date
        management_fee_percent: Annual fee rate on a 0-100 scale (gross-up only)
        methodology: Forces a methodology; by default granular when the
            ledger's capital calls carry purpose tags, otherwise gross-up
        average_aum: AUM the fee estimate is charged on; defaults to `terminal_value`
        inception: Start of the fee-charging period; defaults to the first ledger event
        settings: Engine settings; the IRR day-count basis measures fund age

    Raises:
        ValidationError: On a negative terminal value, or granular requested
            for a ledger without purpose-tagged capital calls
    """
    settings = settings or EngineSettings()
    ledger = _as_ledger(ledger)
    queries = LedgerQueries(ledger)
    terminal = _terminal(terminal_value)
    methodology = PerformanceMethodologyEnum(methodology or determine_methodology(ledger))

    paid_in = from_cents(to_cents(queries.total_called(as_of=as_of)))
    total_value = from_cents(to_cents(queries.total_distributed(as_of=as_of))) + terminal

    if methodology == PerformanceMethodologyEnum.GRANULAR:
        if not queries.tracks_call_purpose():
            raise ValidationError(
                "Granular performance needs capital calls tagged with a purpose; "
                "use the gross-up methodology for untagged ledgers"
            )
        fees = from_cents(
            to_cents(
                queries.total_called(as_of=as_of, purpose=CashFlowPurposeEnum.MANAGEMENT_FEE)
            )
        )
    else:
        inception = inception or ledger.first_date
        days = max((as_of - inception).days, 0) if inception is not None else 0
        age = Decimal(days) / Decimal(settings.irr.day_count_basis)
        aum = terminal if average_aum is None else to_decimal(average_aum)
        fees = estimate_management_fees(management_fee_percent, aum, age)

    invested = max(paid_in - fees, ZERO)
    logger.debug(
        f"Gross/net as of {as_of} ({methodology.value}): paid-in {paid_in}, "
        f"management fees {fees}, invested {invested}"
    )
    return GrossNetPerformance(
        methodology=methodology,
        paid_in=paid_in,
        management_fees=fees,
        invested_capital=invested,
        total_value=total_value,
        gross_gain=total_value - invested,
        gross_multiple=FinancialCalculations.calculate_ratio(total_value, invested),
        gross_return_percent=_percent(total_value - invested, invested),
        net_gain=total_value - paid_in,
        net_multiple=FinancialCalculations.calculate_ratio(total_value, paid_in),
        net_return_percent=_percent(total_value - paid_in, paid_in),
    )


__all__ = [
    "PerformanceMetricsCalculator",
    "compute_fund_metrics",
    "compute_gross_net",
    "compute_investor_metrics",
    "compute_metrics",
    "compute_period_metrics",
    "determine_methodology",
    "estimate_management_fees",
]
