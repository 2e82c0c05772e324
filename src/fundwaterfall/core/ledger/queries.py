# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Read-only queries over a `CashFlowLedger`.

Totals are returned as exact `Decimal` values; per-investor summaries are
returned as pandas DataFrames for reporting consumers.
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import List, Optional, Tuple

import pandas as pd

from ..primitives.enums import CashFlowKindEnum, CashFlowPurposeEnum
from .ledger import CashFlowLedger

ZERO = Decimal(0)


def _decimal_sum(values) -> Decimal:
    return sum(values, ZERO)


class LedgerQueries:
    """
    Query helpers for a cash-flow ledger.

    Example:
        ```python
        queries = LedgerQueries(ledger)
        paid_in = queries.total_called(investor_id="lp-1")
        summary = queries.totals_by_investor()
        ```
    """

    def __init__(self, ledger: CashFlowLedger):
        self.ledger = ledger

    def _scoped(
        self,
        investor_id: Optional[str],
        as_of: Optional[datetime.date],
        start: Optional[datetime.date] = None,
    ) -> CashFlowLedger:
        scoped = self.ledger
        if investor_id is not None:
            scoped = scoped.for_investor(investor_id)
        if start is not None:
            scoped = scoped.between(start, as_of or datetime.date.max)
        elif as_of is not None:
            scoped = scoped.up_to(as_of)
        return scoped

    def total_called(
        self,
        investor_id: Optional[str] = None,
        as_of: Optional[datetime.date] = None,
        start: Optional[datetime.date] = None,
        purpose: Optional[CashFlowPurposeEnum] = None,
    ) -> Decimal:
        """
        Sum of capital calls (positive magnitude).

        Args:
            investor_id: Restrict to one investor; None covers every event
            as_of: Ignore calls dated after this date
            start: Ignore calls dated before this date
            purpose: Restrict to calls tagged with this purpose
        """
        scoped = self._scoped(investor_id, as_of, start)
        if purpose is not None:
            purpose = CashFlowPurposeEnum(purpose)
        return _decimal_sum(
            e.amount
            for e in scoped
            if e.is_capital_call and (purpose is None or e.purpose == purpose)
        )

    def total_distributed(
        self,
        investor_id: Optional[str] = None,
        as_of: Optional[datetime.date] = None,
        start: Optional[datetime.date] = None,
    ) -> Decimal:
        """Sum of distributions (positive magnitude)."""
        scoped = self._scoped(investor_id, as_of, start)
        return _decimal_sum(e.amount for e in scoped if e.is_distribution)

    def signed_flows(
        self,
        investor_id: Optional[str] = None,
        as_of: Optional[datetime.date] = None,
        start: Optional[datetime.date] = None,
    ) -> List[Tuple[datetime.date, Decimal]]:
        """Dated investor-perspective flows (calls negative, distributions positive)."""
        scoped = self._scoped(investor_id, as_of, start)
        return [(e.date, e.signed_amount) for e in scoped]

    def tracks_call_purpose(self) -> bool:
        """True when any capital call in the ledger carries a purpose tag."""
        return any(e.purpose is not None for e in self.ledger if e.is_capital_call)

    def totals_by_investor(self, as_of: Optional[datetime.date] = None) -> pd.DataFrame:
        """
        Called and distributed totals per investor.

        Returns:
            DataFrame indexed by investor_id with columns `called`,
            `distributed` and `net` (distributed - called). Fund-level events
            are excluded.
        """
        frame = self._scoped(None, as_of).to_dataframe()
        frame = frame[frame["investor_id"].notna()]
        if frame.empty:
            return pd.DataFrame(
                columns=["called", "distributed", "net"],
                index=pd.Index([], name="investor_id"),
            )

        called = (
            frame[frame["kind"] == CashFlowKindEnum.CAPITAL_CALL.value]
            .groupby("investor_id", sort=True)["amount"]
            .agg(_decimal_sum)
        )
        distributed = (
            frame[frame["kind"] == CashFlowKindEnum.DISTRIBUTION.value]
            .groupby("investor_id", sort=True)["amount"]
            .agg(_decimal_sum)
        )
        index = pd.Index(sorted(frame["investor_id"].unique()), name="investor_id")
        summary = pd.DataFrame(index=index)
        summary["called"] = [called.get(i, ZERO) for i in index]
        summary["distributed"] = [distributed.get(i, ZERO) for i in index]
        summary["net"] = [d - c for c, d in zip(summary["called"], summary["distributed"])]
        return summary
