# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

import importlib
import logging

"""
fundwaterfall - Capital Distribution Waterfall and Performance Metrics for Private Funds

Splits distribution proceeds between Limited Partners and the General Partner
through European, American, hybrid or custom waterfalls, and reports IRR,
MOIC, TVPI, DPI and RVPI at fund and investor level.

Key Entry Points:
- fundwaterfall.distribution.distribute() - Tiered distribution with per-investor allocations
- fundwaterfall.distribution.recalculate() - New revision superseding a prior result
- fundwaterfall.performance.analyze_performance() - Fund and investor metrics
- fundwaterfall.fund.* - Fund terms, investors and ownership snapshots

Example Usage:
    ```python
    from datetime import date
    from decimal import Decimal

    from fundwaterfall.core.ledger import CashFlowEvent, CashFlowLedger
    from fundwaterfall.distribution import DistributionRequest, distribute
    from fundwaterfall.fund import create_european_fund, investors_from_commitments

    fund = create_european_fund("fund-i", Decimal("10000000"))
    ledger = CashFlowLedger.from_events(
        [
            CashFlowEvent("lp-1", date(2023, 1, 1), Decimal("360000"), "CapitalCall"),
            CashFlowEvent("lp-2", date(2023, 1, 1), Decimal("240000"), "CapitalCall"),
        ]
    )
    investors = investors_from_commitments(
        {"lp-1": Decimal("6000000"), "lp-2": Decimal("4000000")},
        called_capital={"lp-1": Decimal("360000"), "lp-2": Decimal("240000")},
    )
    request = DistributionRequest(
        id="dist-1",
        fund_id="fund-i",
        amount=Decimal("1000000"),
        distribution_date=date(2024, 12, 31),
    )
    distribution = distribute(fund, investors, request, cash_flows=ledger)
    print(distribution.gp_total)
    ```
"""

# Library logging: no handlers are configured here, applications add their own.
logging.getLogger(__name__).addHandler(logging.NullHandler())


# Public API surface (lazy-loaded on first attribute access)
__all__ = [  # noqa: F822 - lazy loading
    "core",
    "distribution",
    "fund",
    "performance",
]


_LAZY_MODULES = {
    "core": "fundwaterfall.core",
    "distribution": "fundwaterfall.distribution",
    "fund": "fundwaterfall.fund",
    "performance": "fundwaterfall.performance",
}


def __getattr__(name: str):
    module_path = _LAZY_MODULES.get(name)
    if module_path is None:
        raise AttributeError(f"module 'fundwaterfall' has no attribute '{name}'")
    module = importlib.import_module(module_path)
    globals()[name] = module
    return module
