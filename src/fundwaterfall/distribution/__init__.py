# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Capital distribution waterfall: tier calculation, apportionment across
investors and assembly of `Distribution` records.
"""

from .api import distribute, recalculate
from .apportioner import apportion, classify_proceeds, largest_remainder
from .assembler import (
    allocations_frame,
    assemble_distribution,
    assemble_performance_report,
    breakdown_frame,
    supersede,
)
from .results import (
    Distribution,
    DistributionRequest,
    InvestorAllocation,
    TierResult,
    TierShare,
)
from .waterfall import WaterfallCalculator, compute_waterfall

__all__ = [
    # API
    "distribute",
    "recalculate",
    # Waterfall
    "WaterfallCalculator",
    "compute_waterfall",
    # Apportionment
    "apportion",
    "classify_proceeds",
    "largest_remainder",
    # Assembly
    "allocations_frame",
    "assemble_distribution",
    "assemble_performance_report",
    "breakdown_frame",
    "supersede",
    # Results
    "Distribution",
    "DistributionRequest",
    "InvestorAllocation",
    "TierResult",
    "TierShare",
]
