# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Waterfall calculator for fund distributions.

Consumes a distribution pool through the fund's tiers strictly in order, each
tier receiving `min(remaining_pool, tier_target)`:

1. Return of Capital: unreturned called capital across all LPs (100% LP)
2. Preferred Return: accrued, unpaid preferred return (100% LP)
3. GP Catch-Up (European only): brings the GP to its carry share of profit (100% GP)
4. Residual Split: whatever remains, `(100 - carry)% LP / carry% GP`

Hybrid funds evaluate both the European and American sequences and keep one
according to `FundStructure.hybrid_logic`. Custom funds replace the sequence
with their admin-configured tiers.

All arithmetic is in integer cents. The GP side of each split is rounded half
to even and the LP side takes the exact remainder, so the tier amounts always
add up to the pool.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Union

from ..core.exceptions import ValidationError
from ..core.ledger import CashFlowEvent, CashFlowLedger
from ..core.primitives import (
    CashFlowKindEnum,
    EngineSettings,
    TierKindEnum,
    WaterfallStructureEnum,
    from_cents,
    percent_of,
    round_half_even,
    to_cents,
    validate_custom_tiers,
    validate_non_negative,
    validate_ownership_total,
    validate_unique_ids,
)
from ..core.primitives.validation import ONE_HUNDRED
from ..fund import FundStructure, Investor
from .results import TierResult

logger = logging.getLogger(__name__)

CashFlows = Union[CashFlowLedger, Iterable[CashFlowEvent]]


def _as_ledger(cash_flows: Optional[CashFlows], currency: str) -> Optional[CashFlowLedger]:
    if cash_flows is None:
        return None
    if not isinstance(cash_flows, CashFlowLedger):
        return CashFlowLedger.from_events(cash_flows, currency=currency)
    if cash_flows.currency != currency:
        raise ValidationError(
            f"Ledger currency {cash_flows.currency} does not match fund currency "
            f"{currency}; convert amounts before calling"
        )
    return cash_flows


@dataclass
class WaterfallCalculator:
    """
    Tier-by-tier waterfall for one fund snapshot.

    Example:
        ```python
        calculator = WaterfallCalculator(fund, investors, as_of=date(2024, 12, 31))
        tiers = calculator.calculate(Decimal("1000000"))
        ```
    """

    fund: FundStructure
    investors: Sequence[Investor]
    as_of: datetime.date
    cash_flows: Optional[CashFlowLedger] = None
    settings: EngineSettings = field(default_factory=EngineSettings)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_inputs(self, pool: Decimal) -> int:
        """
        Check the pool, investors and tier configuration.

        Returns:
            The pool in integer cents

        Raises:
            ValidationError: On a negative pool, duplicate investor ids,
                ownership not summing to 100%, or invalid custom tiers
        """
        pool_cents = to_cents(pool, field="Distribution amount")
        validate_non_negative(Decimal(pool_cents), "Distribution amount")
        validate_unique_ids(i.id for i in self.investors)
        validate_ownership_total(
            {i.id: i.ownership_percent for i in self.investors},
            tolerance=self.settings.allocation.ownership_tolerance,
        )
        if self.fund.waterfall_structure == WaterfallStructureEnum.CUSTOM:
            validate_custom_tiers(self.fund.custom_tiers)
        return pool_cents

    # ------------------------------------------------------------------
    # Tier targets
    # ------------------------------------------------------------------

    def return_of_capital_target(self) -> int:
        """Called-but-unreturned capital across all LPs, in cents."""
        return sum(to_cents(i.unreturned_capital) for i in self.investors)

    def preferred_return_accrued(self, investor: Investor) -> int:
        """
        Cumulative preferred return accrued by `investor` as of the snapshot, in cents.

        Uses `Investor.preferred_return_accrued` when supplied. Otherwise the
        investor's ledger events dated on or before `as_of` are walked in date
        order. Outstanding capital plus unpaid preferred return compounds at
        the hurdle (`(1 + hurdle) ** (days / 365)`) between events. A capital
        call adds to outstanding capital; a distribution first returns
        outstanding capital and then pays down unpaid preferred return, so
        returned capital stops accruing from the distribution date onward.

        Returns:
            Cumulative accrual, including any part already paid

        Raises:
            ValidationError: If the investor has called capital and a non-zero
                hurdle applies but neither an accrued amount nor ledger calls
                are available
        """
        if investor.preferred_return_accrued is not None:
            return to_cents(investor.preferred_return_accrued)
        hurdle = self.fund.hurdle
        if hurdle == 0 or investor.called_capital_to_date == 0:
            return 0

        events = CashFlowLedger()
        if self.cash_flows is not None:
            events = self.cash_flows.for_investor(investor.id).up_to(self.as_of)
        if not events.of_kind(CashFlowKindEnum.CAPITAL_CALL):
            raise ValidationError(
                f"Investor '{investor.id}' has called capital but no preferred_return_accrued "
                f"and no capital calls on or before {self.as_of} to accrue the "
                f"{self.fund.hurdle_rate}% preferred return from"
            )

        basis = Decimal(self.settings.irr.day_count_basis)
        growth = Decimal(1) + hurdle
        outstanding = Decimal(0)
        unpaid = Decimal(0)
        accrued = Decimal(0)
        previous = events.first_date

        def accrue_until(day: datetime.date) -> None:
            nonlocal unpaid, accrued, previous
            years = Decimal((day - previous).days) / basis
            increment = (outstanding + unpaid) * (growth**years - 1)
            unpaid += increment
            accrued += increment
            previous = day

        for event in events:
            accrue_until(event.date)
            if event.is_capital_call:
                outstanding += event.amount
            else:
                returned = min(event.amount, outstanding)
                outstanding -= returned
                unpaid -= min(event.amount - returned, unpaid)
        accrue_until(self.as_of)
        return round_half_even(accrued * 100)

    def preferred_return_balances(self) -> tuple[int, int]:
        """
        Unpaid preferred return and preferred return already paid, in cents.

        Returns:
            Tuple of (unpaid target for this distribution, paid to date)
        """
        unpaid = 0
        paid_to_date = 0
        for investor in self.investors:
            accrued = self.preferred_return_accrued(investor)
            paid = to_cents(investor.preferred_paid(from_cents(accrued)))
            paid_to_date += paid
            unpaid += max(accrued - paid, 0)
        return unpaid, paid_to_date

    def catch_up_target(self, preferred_paid_total: int) -> int:
        """
        GP catch-up needed for the GP to hold `carry` of all profit paid so far.

        `carry / (1 - carry) * preferred paid` less catch-up already paid,
        floored at zero.
        """
        carry = self.fund.carry
        if carry == 0:
            return 0
        target = carry / (1 - carry) * preferred_paid_total
        target -= to_cents(self.fund.gp_catch_up_paid_to_date)
        return max(round_half_even(target), 0)

    # ------------------------------------------------------------------
    # Sequences
    # ------------------------------------------------------------------

    def _tier(
        self,
        name: str,
        kind: TierKindEnum,
        amount: int,
        gp_percent: Decimal,
        remaining_after: int,
    ) -> TierResult:
        gp_amount = percent_of(amount, gp_percent)
        logger.debug(
            f"{name}: consumed {from_cents(amount)} "
            f"(LP {from_cents(amount - gp_amount)}, GP {from_cents(gp_amount)}), "
            f"remaining {from_cents(remaining_after)}"
        )
        return TierResult(
            tier_name=name,
            tier_kind=kind,
            amount=from_cents(amount),
            lp_amount=from_cents(amount - gp_amount),
            gp_amount=from_cents(gp_amount),
            lp_percent=ONE_HUNDRED - gp_percent,
            gp_percent=gp_percent,
            remaining_after=from_cents(remaining_after),
        )

    def _standard_sequence(self, pool_cents: int, with_catch_up: bool) -> List[TierResult]:
        results: List[TierResult] = []
        remaining = pool_cents

        # Tier 1: Return of Capital
        roc = min(remaining, self.return_of_capital_target())
        remaining -= roc
        results.append(
            self._tier(
                TierKindEnum.RETURN_OF_CAPITAL.value,
                TierKindEnum.RETURN_OF_CAPITAL,
                roc,
                Decimal(0),
                remaining,
            )
        )

        # Tier 2: Preferred Return
        pref_unpaid, pref_paid_to_date = self.preferred_return_balances()
        pref = min(remaining, pref_unpaid)
        remaining -= pref
        results.append(
            self._tier(
                TierKindEnum.PREFERRED_RETURN.value,
                TierKindEnum.PREFERRED_RETURN,
                pref,
                Decimal(0),
                remaining,
            )
        )

        # Tier 3: GP Catch-Up
        if with_catch_up:
            catch_up = min(remaining, self.catch_up_target(pref_paid_to_date + pref))
            remaining -= catch_up
            results.append(
                self._tier(
                    TierKindEnum.CATCH_UP.value,
                    TierKindEnum.CATCH_UP,
                    catch_up,
                    ONE_HUNDRED,
                    remaining,
                )
            )

        # Tier 4: Residual Split
        results.append(self._residual(remaining))
        return results

    def _residual(self, remaining: int) -> TierResult:
        return self._tier(
            TierKindEnum.RESIDUAL_SPLIT.value,
            TierKindEnum.RESIDUAL_SPLIT,
            remaining,
            self.fund.carried_interest_percent,
            0,
        )

    def _custom_sequence(self, pool_cents: int) -> List[TierResult]:
        results: List[TierResult] = []
        remaining = pool_cents
        for tier in self.fund.custom_tiers:
            if tier.target_amount is None:
                amount = remaining
            else:
                amount = min(remaining, to_cents(tier.target_amount))
            remaining -= amount
            results.append(
                self._tier(tier.description, TierKindEnum.CUSTOM, amount, tier.gp_percent, remaining)
            )
        if remaining > 0:
            # Every tier carried a target and the pool outlasted them
            results.append(self._residual(remaining))
        return results

    def _hybrid_sequence(self, pool_cents: int) -> List[TierResult]:
        european = self._standard_sequence(pool_cents, with_catch_up=True)
        american = self._standard_sequence(pool_cents, with_catch_up=False)
        european_gp = sum(t.gp_amount for t in european)
        american_gp = sum(t.gp_amount for t in american)

        if self.fund.hybrid_logic == "min":
            # Keep the sequence that leaves LPs with more
            selected = american if american_gp < european_gp else european
        else:
            selected = american if american_gp > european_gp else european

        logger.debug(
            f"Hybrid ({self.fund.hybrid_logic}): European GP {european_gp}, "
            f"American GP {american_gp}; using "
            f"{'American' if selected is american else 'European'} sequence"
        )
        return selected

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def calculate(self, pool: Decimal) -> List[TierResult]:
        """
        Run the waterfall for `pool`.

        Returns:
            Ordered tier results; empty when the fund distributes pro-rata
            (`apply_waterfall=False`)
        """
        pool_cents = self.validate_inputs(pool)

        if not self.fund.apply_waterfall:
            logger.debug(f"Fund {self.fund.id} distributes pro-rata; no tiers applied")
            return []

        structure = self.fund.waterfall_structure
        if structure == WaterfallStructureEnum.EUROPEAN:
            results = self._standard_sequence(pool_cents, with_catch_up=True)
        elif structure == WaterfallStructureEnum.AMERICAN:
            results = self._standard_sequence(pool_cents, with_catch_up=False)
        elif structure == WaterfallStructureEnum.HYBRID:
            results = self._hybrid_sequence(pool_cents)
        else:
            results = self._custom_sequence(pool_cents)

        if not self.settings.allocation.include_zero_tiers:
            results = [t for t in results if t.amount > 0]
        return results


def compute_waterfall(
    fund: FundStructure,
    investors: Sequence[Investor],
    pool: Decimal,
    as_of: datetime.date,
    cash_flows: Optional[CashFlows] = None,
    settings: Optional[EngineSettings] = None,
) -> List[TierResult]:
    """
    Compute the tier-by-tier breakdown of a distribution pool.

    Args:
        fund: Fund terms and waterfall configuration
        investors: Investor snapshots covering 100% ownership
        pool: Amount to distribute (non-negative, whole cents)
        as_of: Snapshot date; preferred return accrues up to this date
        cash_flows: Ledger (or events) used to accrue preferred return for
            investors without an explicit `preferred_return_accrued`
        settings: Engine settings; defaults to `EngineSettings()`

    Returns:
        Ordered list of `TierResult`; `lp_amount + gp_amount` over all tiers
        equals `pool` exactly

    Raises:
        ValidationError: On invalid input; configuration is never corrected
    """
    calculator = WaterfallCalculator(
        fund=fund,
        investors=investors,
        as_of=as_of,
        cash_flows=_as_ledger(cash_flows, fund.currency),
        settings=settings or EngineSettings(),
    )
    return calculator.calculate(pool)


__all__ = [
    "WaterfallCalculator",
    "compute_waterfall",
]
