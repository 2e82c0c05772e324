# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for FinancialCalculations: NPV, the IRR solver and paid-in multiples.
"""

from datetime import date
from decimal import Decimal

import numpy as np
import pytest

from fundwaterfall.core.calculations import FinancialCalculations
from fundwaterfall.core.primitives import IRRSolverSettings

D = Decimal


class TestNPV:
    def test_npv_zero_at_irr(self):
        amounts = np.array([-1000.0, 1100.0])
        years = np.array([0.0, 1.0])
        assert FinancialCalculations.npv(0.1, amounts, years) == pytest.approx(0.0, abs=1e-9)

    def test_npv_undefined_below_minus_one(self):
        amounts = np.array([-1000.0, 1100.0])
        years = np.array([0.0, 1.0])
        assert np.isnan(FinancialCalculations.npv(-1.0, amounts, years))

    def test_npv_derivative_matches_finite_difference(self):
        amounts = np.array([-1000.0, 300.0, 900.0])
        years = np.array([0.0, 0.5, 2.0])
        h = 1e-6
        numeric = (
            FinancialCalculations.npv(0.12 + h, amounts, years)
            - FinancialCalculations.npv(0.12 - h, amounts, years)
        ) / (2 * h)
        analytic = FinancialCalculations.npv_derivative(0.12, amounts, years)
        assert analytic == pytest.approx(numeric, rel=1e-5)

    def test_year_fractions(self):
        fractions = FinancialCalculations.year_fractions(
            [date(2021, 1, 1), date(2022, 1, 1), date(2021, 7, 2)]
        )
        assert fractions.tolist() == pytest.approx([0.0, 1.0, 182 / 365])


class TestSolveIRR:
    def test_one_year_ten_percent(self):
        solution = FinancialCalculations.solve_irr(
            [date(2021, 1, 1), date(2022, 1, 1)], [D("-1000"), D("1100")]
        )
        assert solution.converged
        assert solution.method == "newton"
        assert solution.rate == pytest.approx(0.10, abs=1e-6)

    def test_multi_period_root_zeroes_npv(self):
        dates = [date(2020, 1, 1), date(2021, 3, 15), date(2022, 6, 30), date(2023, 12, 31)]
        amounts = [D("-1000000"), D("-250000"), D("400000"), D("1300000")]
        solution = FinancialCalculations.solve_irr(dates, amounts)
        assert solution.converged

        flows = np.array([float(a) for a in amounts])
        years = FinancialCalculations.year_fractions(dates)
        assert FinancialCalculations.npv(solution.rate, flows, years) == pytest.approx(0.0, abs=1.0)

    def test_negative_irr(self):
        solution = FinancialCalculations.solve_irr(
            [date(2021, 1, 1), date(2022, 1, 1)], [D("-1000"), D("800")]
        )
        assert solution.rate == pytest.approx(-0.20, abs=1e-6)

    def test_bisection_fallback(self):
        """A starting guess that sends Newton below -100% falls back to bisection."""
        settings = IRRSolverSettings(initial_guess=9.0)
        solution = FinancialCalculations.solve_irr(
            [date(2021, 1, 1), date(2022, 1, 1)], [D("-1000"), D("1100")], settings
        )
        assert solution.converged
        assert solution.method == "bisection"
        assert solution.rate == pytest.approx(0.10, abs=1e-6)

    def test_all_positive_flows_have_no_root(self):
        solution = FinancialCalculations.solve_irr(
            [date(2021, 1, 1), date(2022, 1, 1)], [D("1000"), D("1100")]
        )
        assert solution.rate is None
        assert not solution.converged
        assert solution.message

    def test_single_date_has_no_root(self):
        solution = FinancialCalculations.solve_irr(
            [date(2021, 1, 1), date(2021, 1, 1)], [D("-1000"), D("1100")]
        )
        assert solution.rate is None
        assert "single date" in solution.message

    def test_no_sign_change_in_bracket(self):
        """Root above the bracket's upper end is reported as undefined."""
        settings = IRRSolverSettings(initial_guess=0.1, upper_bound=0.5, max_iterations=3)
        solution = FinancialCalculations.solve_irr(
            [date(2021, 1, 1), date(2022, 1, 1)], [D("-1000"), D("5000")], settings
        )
        assert solution.rate is None
        assert "No sign change" in solution.message

    def test_mismatched_lengths(self):
        with pytest.raises(ValueError):
            FinancialCalculations.solve_irr([date(2021, 1, 1)], [D("-1"), D("2")])

    def test_deterministic(self):
        dates = [date(2020, 1, 1), date(2022, 6, 30), date(2024, 12, 31)]
        amounts = [D("-500000"), D("120000"), D("610000")]
        assert FinancialCalculations.solve_irr(dates, amounts) == FinancialCalculations.solve_irr(
            dates, amounts
        )


def test_calculate_ratio():
    assert FinancialCalculations.calculate_ratio(D("500000"), D("1000000")) == 0.5
    assert FinancialCalculations.calculate_ratio(D("1"), D("0")) is None
