# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Fund and investor performance metrics: IRR, MOIC, TVPI, DPI, RVPI, gains and
gross versus net performance.
"""

from .results import ComputationWarning, GrossNetPerformance, MetricsResult, PerformanceReport
from .metrics import (
    PerformanceMetricsCalculator,
    compute_fund_metrics,
    compute_gross_net,
    compute_investor_metrics,
    compute_metrics,
    compute_period_metrics,
    determine_methodology,
    estimate_management_fees,
)
from .api import analyze_performance, apportion_terminal_value

__all__ = [
    # API
    "analyze_performance",
    "apportion_terminal_value",
    # Calculator
    "PerformanceMetricsCalculator",
    "compute_fund_metrics",
    "compute_gross_net",
    "compute_investor_metrics",
    "compute_metrics",
    "compute_period_metrics",
    "determine_methodology",
    "estimate_management_fees",
    # Results
    "ComputationWarning",
    "GrossNetPerformance",
    "MetricsResult",
    "PerformanceReport",
]
