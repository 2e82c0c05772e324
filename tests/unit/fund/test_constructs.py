# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from decimal import Decimal

import pytest

from fundwaterfall.core.exceptions import ValidationError
from fundwaterfall.core.primitives import WaterfallStructureEnum
from fundwaterfall.fund import (
    Tier,
    create_american_fund,
    create_custom_fund,
    create_european_fund,
    investors_from_commitments,
)

D = Decimal


def test_create_european_fund_defaults():
    fund = create_european_fund("fund-i", D("10000000"), name="Fund I")
    assert fund.waterfall_structure == WaterfallStructureEnum.EUROPEAN
    assert fund.hurdle_rate == D("8")
    assert fund.carried_interest_percent == D("20")
    assert fund.name == "Fund I"


def test_create_american_fund():
    fund = create_american_fund("fund-ii", 5_000_000, carried_interest_percent=25, hurdle_rate=6)
    assert fund.waterfall_structure == WaterfallStructureEnum.AMERICAN
    assert fund.carried_interest_percent == D("25")
    assert fund.hurdle_rate == D("6")
    assert not fund.has_catch_up


def test_create_custom_fund_from_tuples():
    fund = create_custom_fund(
        "spv-7",
        D("5000000"),
        tiers=[
            ("Return of Capital", 100, 0, D("2500000")),
            Tier(description="Hurdle", lp_percent=90, gp_percent=10, target_amount=D("500000")),
            ("Promote", 70, 30),
        ],
    )
    assert fund.waterfall_structure == WaterfallStructureEnum.CUSTOM
    assert [t.description for t in fund.custom_tiers] == ["Return of Capital", "Hurdle", "Promote"]
    assert fund.custom_tiers[0].target_amount == D("2500000")
    assert fund.custom_tiers[2].is_terminal


def test_create_custom_fund_requires_tiers():
    with pytest.raises(ValidationError, match="at least one tier"):
        create_custom_fund("spv-7", D("5000000"), tiers=[])


def test_create_custom_fund_malformed_tuple():
    with pytest.raises(ValidationError, match="Tier tuples"):
        create_custom_fund("spv-7", D("5000000"), tiers=[("Promote", 70)])


def test_investors_from_commitments():
    investors = investors_from_commitments(
        {"lp-2": D("4000000"), "lp-1": D("6000000")},
        called_capital={"lp-1": D("360000"), "lp-2": D("240000")},
        names={"lp-1": "Pension Fund A"},
    )
    assert [i.id for i in investors] == ["lp-1", "lp-2"]
    assert investors[0].ownership_percent == D("60")
    assert investors[1].ownership_percent == D("40")
    assert investors[0].called_capital_to_date == D("360000")
    assert investors[0].name == "Pension Fund A"
    assert investors[1].distributions_to_date == D("0")


def test_investors_from_commitments_with_override():
    investors = investors_from_commitments(
        {"lp-1": D("6000000"), "lp-2": D("2000000"), "lp-3": D("2000000")},
        ownership_overrides={"lp-3": D("40")},
    )
    ownership = {i.id: i.ownership_percent for i in investors}
    assert ownership == {"lp-1": D("45"), "lp-2": D("15"), "lp-3": D("40")}
