# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Test utilities and fixtures for fundwaterfall testing.

Builders create valid fund, investor, request and ledger objects with
sensible defaults so that each test only spells out what it exercises.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

import pytest

from fundwaterfall.core.ledger import CashFlowEvent, CashFlowLedger
from fundwaterfall.core.primitives import CashFlowKindEnum, CashFlowPurposeEnum, EngineSettings
from fundwaterfall.distribution import DistributionRequest
from fundwaterfall.fund import FundStructure, Investor

D = Decimal

DISTRIBUTION_DATE = date(2024, 12, 31)


# Fund Utilities
def create_test_fund(
    waterfall_structure: str = "european",
    carried_interest_percent: Decimal = D("20"),
    hurdle_rate: Decimal = D("8"),
    **kwargs,
) -> FundStructure:
    """
    Create a fund for testing.

    Example:
        >>> fund = create_test_fund("american")
        >>> fund.has_catch_up
        False
    """
    kwargs.setdefault("id", "fund-i")
    kwargs.setdefault("total_commitment", D("10000000"))
    return FundStructure(
        waterfall_structure=waterfall_structure,
        carried_interest_percent=carried_interest_percent,
        hurdle_rate=hurdle_rate,
        **kwargs,
    )


# Investor Utilities
def create_test_investor(
    investor_id: str,
    ownership_percent: Decimal,
    called: Decimal = D("0"),
    distributed: Decimal = D("0"),
    **kwargs,
) -> Investor:
    """Create an investor snapshot; commitment defaults to 10x called capital or 1,000,000."""
    kwargs.setdefault("commitment", max(D(called) * 10, D("1000000")))
    return Investor(
        id=investor_id,
        ownership_percent=D(ownership_percent),
        called_capital_to_date=D(called),
        distributions_to_date=D(distributed),
        **kwargs,
    )


def create_two_lp_investors(
    preferred_accrued: Optional[Sequence[Decimal]] = (D("60000"), D("40000")),
) -> list[Investor]:
    """
    Two LPs at 60% / 40% with $600,000 of unreturned capital between them.

    With the default accrued preferred return ($100,000 in total) and a
    European 8% / 20% fund, a $1,000,000 distribution pays ROC $600,000,
    preferred $100,000, catch-up $25,000 and a $275,000 residual.
    """
    accrued = preferred_accrued or (None, None)
    return [
        create_test_investor(
            "lp-1", D("60"), called=D("360000"), preferred_return_accrued=accrued[0]
        ),
        create_test_investor(
            "lp-2", D("40"), called=D("240000"), preferred_return_accrued=accrued[1]
        ),
    ]


# Request Utilities
def create_test_request(
    amount: Decimal = D("1000000"),
    distribution_date: date = DISTRIBUTION_DATE,
    **kwargs,
) -> DistributionRequest:
    kwargs.setdefault("id", "dist-1")
    kwargs.setdefault("fund_id", "fund-i")
    return DistributionRequest(amount=D(amount), distribution_date=distribution_date, **kwargs)


# Ledger Utilities
def call(
    investor_id: Optional[str],
    on: date,
    amount: str,
    purpose: Optional[CashFlowPurposeEnum] = None,
) -> CashFlowEvent:
    return CashFlowEvent(
        investor_id, on, D(amount), CashFlowKindEnum.CAPITAL_CALL, purpose=purpose
    )


def dist(investor_id: Optional[str], on: date, amount: str) -> CashFlowEvent:
    return CashFlowEvent(investor_id, on, D(amount), CashFlowKindEnum.DISTRIBUTION)


def create_test_ledger() -> CashFlowLedger:
    """
    Two-investor ledger: calls in 2022/2023, one distribution in 2024, plus
    a fund-level expense call.
    """
    return CashFlowLedger.from_events(
        [
            call("lp-1", date(2022, 1, 1), "300000"),
            call("lp-2", date(2022, 1, 1), "200000"),
            call("lp-1", date(2023, 1, 1), "60000"),
            call("lp-2", date(2023, 1, 1), "40000"),
            dist("lp-1", date(2024, 6, 30), "30000"),
            dist("lp-2", date(2024, 6, 30), "20000"),
            call(None, date(2023, 6, 30), "5000"),
        ],
        currency="USD",
    )


# Pytest Fixtures
@pytest.fixture
def european_fund() -> FundStructure:
    """European 8% hurdle / 20% carry fund."""
    return create_test_fund("european")


@pytest.fixture
def american_fund() -> FundStructure:
    """American 8% hurdle / 20% carry fund."""
    return create_test_fund("american")


@pytest.fixture
def two_lp_investors() -> list[Investor]:
    return create_two_lp_investors()


@pytest.fixture
def distribution_request() -> DistributionRequest:
    """$1,000,000 distribution on 2024-12-31."""
    return create_test_request()


@pytest.fixture
def sample_ledger() -> CashFlowLedger:
    return create_test_ledger()


@pytest.fixture
def sample_settings() -> EngineSettings:
    return EngineSettings()


__all__ = [
    "D",
    "DISTRIBUTION_DATE",
    "call",
    "create_test_fund",
    "create_test_investor",
    "create_test_ledger",
    "create_test_request",
    "create_two_lp_investors",
    "dist",
    # Fixtures
    "american_fund",
    "distribution_request",
    "european_fund",
    "sample_ledger",
    "sample_settings",
    "two_lp_investors",
]
