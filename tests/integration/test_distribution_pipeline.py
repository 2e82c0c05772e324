# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
End-to-end fund lifecycle: commitments, capital calls, a waterfall
distribution booked back into the ledger, and performance reporting.
"""

from datetime import date
from decimal import Decimal

import pytest

from fundwaterfall.core.ledger import CashFlowEvent, CashFlowLedger, LedgerQueries
from fundwaterfall.core.primitives import CashFlowKindEnum, PartnerKindEnum, TierKindEnum
from fundwaterfall.distribution import (
    DistributionRequest,
    allocations_frame,
    breakdown_frame,
    distribute,
    recalculate,
)
from fundwaterfall.fund import (
    CommitmentRecord,
    commitments_as_of,
    create_custom_fund,
    create_european_fund,
    investors_from_commitments,
)
from fundwaterfall.performance import analyze_performance
from tests.conftest import call

D = Decimal

DISTRIBUTION_DATE = date(2024, 12, 31)


@pytest.fixture
def fund():
    return create_european_fund("fund-i", D("10000000"), name="Fund I")


@pytest.fixture
def commitment_history():
    return [
        CommitmentRecord(investor_id="lp-1", effective_date=date(2022, 1, 1), commitment=D("6000000")),
        CommitmentRecord(investor_id="lp-2", effective_date=date(2022, 1, 1), commitment=D("4000000")),
    ]


@pytest.fixture
def calls_ledger():
    return CashFlowLedger.from_events(
        [
            call("lp-1", date(2022, 1, 1), "300000"),
            call("lp-2", date(2022, 1, 1), "200000"),
            call("lp-1", date(2023, 1, 1), "60000"),
            call("lp-2", date(2023, 1, 1), "40000"),
        ]
    )


def snapshot_investors(history, ledger, as_of):
    queries = LedgerQueries(ledger)
    commitments = commitments_as_of(history, as_of)
    return investors_from_commitments(
        commitments,
        called_capital={i: queries.total_called(i, as_of) for i in commitments},
        distributions={i: queries.total_distributed(i, as_of) for i in commitments},
    )


def book_distribution(ledger, distribution):
    """Append LP allocations to the ledger as distribution events."""
    events = list(ledger) + [
        CashFlowEvent(
            a.investor_id,
            distribution.distribution_date,
            a.final_allocation,
            CashFlowKindEnum.DISTRIBUTION,
            description=f"Distribution {distribution.id}",
        )
        for a in distribution.investor_allocations
        if a.partner_kind == PartnerKindEnum.LP
    ]
    return CashFlowLedger.from_events(events, currency=ledger.currency)


def test_distribution_lifecycle(fund, commitment_history, calls_ledger):
    investors = snapshot_investors(commitment_history, calls_ledger, DISTRIBUTION_DATE)
    assert [(i.id, i.ownership_percent) for i in investors] == [("lp-1", D("60")), ("lp-2", D("40"))]

    request = DistributionRequest(
        id="dist-1",
        fund_id="fund-i",
        amount=D("1000000"),
        distribution_date=DISTRIBUTION_DATE,
    )
    distribution = distribute(fund, investors, request, cash_flows=calls_ledger)

    # Tier amounts and allocations both reconcile to the pool
    assert sum(t.amount for t in distribution.waterfall_breakdown) == D("1000000")
    assert distribution.lp_total + distribution.gp_total == D("1000000")
    assert distribution.tier(TierKindEnum.RETURN_OF_CAPITAL).amount == D("600000")

    # Preferred return accrued from the dated calls
    pref = distribution.tier(TierKindEnum.PREFERRED_RETURN).amount
    assert D("140000") < pref < D("150000")

    # GP holds its 20% carry of profit once the catch-up is paid in full
    catch_up = distribution.tier(TierKindEnum.CATCH_UP).amount
    assert catch_up == (pref / 4).quantize(D("0.01"))
    profit = D("1000000") - D("600000")
    assert distribution.gp_total == (profit * D("0.2")).quantize(D("0.01"))

    lp1 = distribution.allocation_for("lp-1")
    assert lp1.return_of_capital_amount == D("360000")
    assert lp1.capital_gain_amount == lp1.final_allocation - D("360000")

    frame = allocations_frame(distribution)
    assert frame["final_allocation"].sum() == D("1000000")
    assert list(breakdown_frame(distribution).columns[-3:]) == ["lp-1", "lp-2", "GP"]

    # Book the LP proceeds and report performance with no remaining NAV
    ledger = book_distribution(calls_ledger, distribution)
    report = analyze_performance(
        fund, ledger, D("0"), DISTRIBUTION_DATE, investors=investors
    )
    assert report.fund.paid_in == D("600000")
    assert report.fund.distributed == distribution.lp_total
    assert report.fund.dpi == pytest.approx(float(distribution.lp_total / D("600000")))
    assert report.fund.rvpi == 0.0
    assert report.fund.irr > 0
    assert report.for_investor("lp-1").dpi == pytest.approx(float(lp1.final_allocation / D("360000")))

    # A corrected pool supersedes the first record
    corrected = request.model_copy(update={"amount": D("1200000")})
    revised = recalculate(distribution, fund, investors, corrected, cash_flows=calls_ledger)
    assert revised.revision == 2
    assert revised.supersedes_revision == 1
    assert revised.lp_total + revised.gp_total == D("1200000")
    assert distribution.amount == D("1000000")


def test_custom_fund_lifecycle(commitment_history, calls_ledger):
    fund = create_custom_fund(
        "fund-i",
        D("10000000"),
        tiers=[
            ("Return of Capital", 100, 0, D("600000")),
            ("Hurdle", 100, 0, D("60000")),
            ("Promote", 70, 30),
        ],
    )
    investors = snapshot_investors(commitment_history, calls_ledger, DISTRIBUTION_DATE)
    request = DistributionRequest(
        id="dist-7",
        fund_id="fund-i",
        amount=D("760000"),
        distribution_date=DISTRIBUTION_DATE,
        is_return_of_capital=True,
    )
    distribution = distribute(fund, investors, request)

    assert [t.tier_name for t in distribution.waterfall_breakdown] == [
        "Return of Capital",
        "Hurdle",
        "Promote",
    ]
    assert distribution.gp_total == D("30000")
    assert distribution.allocation_for("lp-1").final_allocation == D("438000")
    assert distribution.allocation_for("lp-2").final_allocation == D("292000")
    # Return-of-capital distributions carry no gain
    assert distribution.allocation_for("lp-1").return_of_capital_amount == D("438000")
