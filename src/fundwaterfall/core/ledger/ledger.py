# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Immutable cash-flow ledger.

The ledger is supplied by the caller (payment and capital-call flows own its
contents) and is never mutated by the engines. Filters return new ledgers that
share the same event objects. A pandas DataFrame view is materialised on
demand for reporting and for the aggregate queries in
`fundwaterfall.core.ledger.queries`.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

import pandas as pd

from ..primitives.enums import CashFlowKindEnum
from .records import CashFlowEvent

logger = logging.getLogger(__name__)

LEDGER_COLUMNS = [
    "investor_id",
    "date",
    "amount",
    "kind",
    "signed_amount",
    "description",
    "purpose",
]


@dataclass(frozen=True)
class CashFlowLedger:
    """
    Ordered, immutable sequence of capital-call and distribution events.

    Events are kept in date order; events sharing a date keep the order in
    which the caller supplied them.

    Example:
        ```python
        ledger = CashFlowLedger.from_events(
            [
                CashFlowEvent("lp-1", date(2022, 1, 15), Decimal("600000"), "CapitalCall"),
                CashFlowEvent("lp-1", date(2024, 6, 30), Decimal("150000"), "Distribution"),
            ],
            currency="USD",
        )
        ledger.for_investor("lp-1").to_dataframe()
        ```
    """

    events: Tuple[CashFlowEvent, ...] = ()
    currency: str = "USD"

    @classmethod
    def from_events(
        cls, events: Iterable[CashFlowEvent], currency: str = "USD"
    ) -> "CashFlowLedger":
        """Build a ledger from events in any order (stable sort by date)."""
        ordered = sorted(events, key=lambda event: event.date)
        return cls(events=tuple(ordered), currency=currency)

    def __post_init__(self):
        dates = [event.date for event in self.events]
        if dates != sorted(dates):
            # Direct construction with unsorted events; normalise once
            object.__setattr__(
                self, "events", tuple(sorted(self.events, key=lambda e: e.date))
            )

    def __iter__(self) -> Iterator[CashFlowEvent]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)

    def __bool__(self) -> bool:
        return bool(self.events)

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def _derive(self, events: Iterable[CashFlowEvent]) -> "CashFlowLedger":
        return CashFlowLedger(events=tuple(events), currency=self.currency)

    def for_investor(self, investor_id: str) -> "CashFlowLedger":
        """Events booked against a single investor."""
        return self._derive(e for e in self.events if e.investor_id == investor_id)

    def fund_level(self) -> "CashFlowLedger":
        """Events not attributed to an individual investor."""
        return self._derive(e for e in self.events if e.investor_id is None)

    def up_to(self, as_of: datetime.date) -> "CashFlowLedger":
        """Events dated on or before `as_of`."""
        return self._derive(e for e in self.events if e.date <= as_of)

    def between(self, start: datetime.date, end: datetime.date) -> "CashFlowLedger":
        """Events dated within `[start, end]`, both ends inclusive."""
        return self._derive(e for e in self.events if start <= e.date <= end)

    def of_kind(self, kind: CashFlowKindEnum) -> "CashFlowLedger":
        kind = CashFlowKindEnum(kind)
        return self._derive(e for e in self.events if e.kind == kind)

    @property
    def investor_ids(self) -> List[str]:
        """Distinct investor ids in first-appearance order."""
        seen: List[str] = []
        for event in self.events:
            if event.investor_id is not None and event.investor_id not in seen:
                seen.append(event.investor_id)
        return seen

    @property
    def first_date(self) -> Optional[datetime.date]:
        return self.events[0].date if self.events else None

    # ------------------------------------------------------------------
    # DataFrame view
    # ------------------------------------------------------------------

    def to_dataframe(self) -> pd.DataFrame:
        """
        Materialise the ledger as a new DataFrame (one row per event).

        Amount columns hold `Decimal` objects so that aggregates stay exact.
        """
        if not self.events:
            return pd.DataFrame(columns=LEDGER_COLUMNS)

        frame = pd.DataFrame(
            {
                "investor_id": [e.investor_id for e in self.events],
                "date": [e.date for e in self.events],
                "amount": [e.amount for e in self.events],
                "kind": [e.kind.value for e in self.events],
                "signed_amount": [e.signed_amount for e in self.events],
                "description": [e.description for e in self.events],
                "purpose": [e.purpose.value if e.purpose else None for e in self.events],
            },
            columns=LEDGER_COLUMNS,
        )
        logger.debug(f"Materialised ledger frame with {len(frame)} events")
        return frame
