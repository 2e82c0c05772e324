# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the cash-flow ledger, its records and LedgerQueries.
"""

from datetime import date, datetime
from decimal import Decimal

import pandas as pd
import pytest

from fundwaterfall.core.exceptions import ValidationError
from fundwaterfall.core.ledger import CashFlowEvent, CashFlowLedger, LedgerQueries
from fundwaterfall.core.ledger.ledger import LEDGER_COLUMNS
from fundwaterfall.core.primitives import CashFlowKindEnum, CashFlowPurposeEnum
from tests.conftest import call, dist


class TestCashFlowEvent:
    def test_signed_amount_convention(self):
        """Calls are negative from the investor's perspective, distributions positive."""
        assert call("lp-1", date(2024, 1, 1), "100").signed_amount == Decimal("-100")
        assert dist("lp-1", date(2024, 1, 1), "100").signed_amount == Decimal("100")

    def test_kind_is_coerced_from_string(self):
        event = CashFlowEvent("lp-1", date(2024, 1, 1), Decimal("10"), "Distribution")
        assert event.kind == CashFlowKindEnum.DISTRIBUTION
        assert event.is_distribution
        assert not event.is_capital_call

    def test_datetime_is_normalised_to_date(self):
        event = CashFlowEvent("lp-1", datetime(2024, 1, 1, 15, 30), Decimal("10"), "CapitalCall")
        assert event.date == date(2024, 1, 1)

    def test_fund_level_event(self):
        assert call(None, date(2024, 1, 1), "10").is_fund_level

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="non-negative"):
            CashFlowEvent("lp-1", date(2024, 1, 1), Decimal("-5"), "CapitalCall")

    def test_fraction_of_cent_rejected(self):
        with pytest.raises(ValidationError, match="whole cents"):
            CashFlowEvent("lp-1", date(2024, 1, 1), Decimal("1.001"), "CapitalCall")

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError):
            CashFlowEvent("lp-1", date(2024, 1, 1), Decimal("1"), "Transfer")

    def test_purpose_is_coerced_from_string(self):
        event = call("lp-1", date(2024, 1, 1), "10", "Management Fee")
        assert event.purpose == CashFlowPurposeEnum.MANAGEMENT_FEE
        assert call("lp-1", date(2024, 1, 1), "10").purpose is None

    def test_purpose_only_on_capital_calls(self):
        with pytest.raises(ValidationError, match="Only capital calls carry a purpose"):
            CashFlowEvent(
                "lp-1", date(2024, 1, 1), Decimal("10"), "Distribution", purpose="Investment"
            )

    def test_event_is_immutable(self):
        event = call("lp-1", date(2024, 1, 1), "10")
        with pytest.raises(AttributeError):
            event.amount = Decimal("20")


class TestCashFlowLedger:
    def test_from_events_sorts_by_date_stably(self):
        first = call("lp-1", date(2024, 3, 1), "1")
        second = dist("lp-1", date(2024, 3, 1), "2")
        earlier = call("lp-2", date(2024, 1, 1), "3")
        ledger = CashFlowLedger.from_events([first, second, earlier])
        assert ledger.events == (earlier, first, second)

    def test_direct_construction_is_normalised(self):
        late = call("lp-1", date(2024, 3, 1), "1")
        early = call("lp-1", date(2024, 1, 1), "1")
        ledger = CashFlowLedger(events=(late, early))
        assert ledger.events == (early, late)

    def test_filters_return_new_ledgers(self, sample_ledger):
        lp1 = sample_ledger.for_investor("lp-1")
        assert len(lp1) == 3
        assert all(e.investor_id == "lp-1" for e in lp1)
        assert len(sample_ledger) == 7

        assert len(sample_ledger.fund_level()) == 1
        assert len(sample_ledger.up_to(date(2022, 12, 31))) == 2
        assert len(sample_ledger.between(date(2023, 1, 1), date(2023, 6, 30))) == 3
        assert len(sample_ledger.of_kind(CashFlowKindEnum.DISTRIBUTION)) == 2
        assert lp1.currency == sample_ledger.currency

    def test_investor_ids_and_dates(self, sample_ledger):
        assert sample_ledger.investor_ids == ["lp-1", "lp-2"]
        assert sample_ledger.first_date == date(2022, 1, 1)
        assert sample_ledger.fund_level().first_date == date(2023, 6, 30)

    def test_empty_ledger(self):
        ledger = CashFlowLedger()
        assert not ledger
        assert ledger.first_date is None
        assert list(ledger.to_dataframe().columns) == LEDGER_COLUMNS

    def test_to_dataframe(self, sample_ledger):
        frame = sample_ledger.to_dataframe()
        assert isinstance(frame, pd.DataFrame)
        assert list(frame.columns) == LEDGER_COLUMNS
        assert len(frame) == 7
        assert frame["signed_amount"].iloc[0] == Decimal("-300000")
        assert frame["kind"].iloc[-1] == "Distribution"


class TestLedgerQueries:
    def test_totals(self, sample_ledger):
        queries = LedgerQueries(sample_ledger)
        assert queries.total_called() == Decimal("605000")
        assert queries.total_called("lp-1") == Decimal("360000")
        assert queries.total_distributed("lp-2") == Decimal("20000")
        assert queries.total_called("lp-1", as_of=date(2022, 6, 30)) == Decimal("300000")
        assert queries.total_distributed(as_of=date(2024, 1, 1)) == Decimal("0")

    def test_period_totals(self, sample_ledger):
        queries = LedgerQueries(sample_ledger)
        # Both bounds inclusive
        assert queries.total_called(start=date(2023, 1, 1), as_of=date(2023, 6, 30)) == Decimal("105000")
        assert queries.total_distributed("lp-1", start=date(2024, 1, 1)) == Decimal("30000")
        assert queries.signed_flows("lp-2", start=date(2022, 6, 1), as_of=date(2023, 12, 31)) == [
            (date(2023, 1, 1), Decimal("-40000")),
        ]

    def test_totals_by_purpose(self):
        ledger = CashFlowLedger.from_events(
            [
                call("lp-1", date(2022, 1, 1), "90000", CashFlowPurposeEnum.INVESTMENT),
                call("lp-1", date(2022, 1, 1), "10000", CashFlowPurposeEnum.MANAGEMENT_FEE),
                call("lp-1", date(2023, 1, 1), "10000", "Management Fee"),
            ]
        )
        queries = LedgerQueries(ledger)
        assert queries.tracks_call_purpose()
        assert queries.total_called(purpose=CashFlowPurposeEnum.MANAGEMENT_FEE) == Decimal("20000")
        assert queries.total_called(
            purpose=CashFlowPurposeEnum.MANAGEMENT_FEE, as_of=date(2022, 12, 31)
        ) == Decimal("10000")
        assert queries.total_called() == Decimal("110000")

    def test_untagged_ledger_does_not_track_purpose(self, sample_ledger):
        assert not LedgerQueries(sample_ledger).tracks_call_purpose()

    def test_signed_flows(self, sample_ledger):
        flows = LedgerQueries(sample_ledger).signed_flows("lp-1")
        assert [amount for _, amount in flows] == [
            Decimal("-300000"),
            Decimal("-60000"),
            Decimal("30000"),
        ]

    def test_totals_by_investor(self, sample_ledger):
        summary = LedgerQueries(sample_ledger).totals_by_investor()
        assert list(summary.index) == ["lp-1", "lp-2"]
        assert summary.loc["lp-1", "called"] == Decimal("360000")
        assert summary.loc["lp-1", "distributed"] == Decimal("30000")
        assert summary.loc["lp-2", "net"] == Decimal("-220000")

    def test_totals_by_investor_empty(self):
        summary = LedgerQueries(CashFlowLedger()).totals_by_investor()
        assert summary.empty
        assert list(summary.columns) == ["called", "distributed", "net"]
