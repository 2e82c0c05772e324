# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Financial calculation functions.

Contains static methods for core financial metrics. These functions are pure
(math-only) and independent of ledger structure; the performance engine
delegates to them so there is a single source of truth for NPV, IRR and the
paid-in multiples.
"""

from __future__ import annotations

import datetime
import logging
import warnings
from dataclasses import dataclass
from decimal import Decimal
from typing import Literal, Optional, Sequence

import numpy as np
from scipy import optimize

from .primitives.settings import IRRSolverSettings

logger = logging.getLogger(__name__)

# Scipy exceptions and numpy domain errors the solver treats as non-convergence
SOLVER_ERRORS = (RuntimeError, ValueError, OverflowError, ZeroDivisionError)


@dataclass(frozen=True)
class IRRSolution:
    """
    Outcome of an IRR solve.

    Attributes:
        rate: Annualised IRR as a decimal (0.15 for 15%), or None if no root was found
        method: Stage that produced the root ("newton" or "bisection")
        converged: Whether a root was found within tolerance
        iterations: Iterations spent in the last stage that ran
        message: Reason for failure when `converged` is False
    """

    rate: Optional[float]
    method: Optional[Literal["newton", "bisection"]]
    converged: bool
    iterations: int = 0
    message: str = ""


class FinancialCalculations:
    """
    Pure mathematical functions for fund performance calculations.

    Static methods for NPV, IRR and paid-in multiples, independent of the
    ledger or any business logic.
    """

    @staticmethod
    def year_fractions(
        dates: Sequence[datetime.date], day_count_basis: int = 365
    ) -> np.ndarray:
        """Years elapsed from the earliest date, as `days / day_count_basis`."""
        if not dates:
            return np.array([], dtype=np.float64)
        origin = min(dates)
        return np.array(
            [(d - origin).days / day_count_basis for d in dates], dtype=np.float64
        )

    @staticmethod
    def npv(rate: float, amounts: np.ndarray, years: np.ndarray) -> float:
        """
        Net present value `sum(CF_i / (1 + rate) ** t_i)`.

        Returns NaN for rates at or below -100%, where the discount factor is
        undefined for fractional years.
        """
        if rate <= -1.0:
            return float("nan")
        return float(np.sum(amounts / (1.0 + rate) ** years))

    @staticmethod
    def npv_derivative(rate: float, amounts: np.ndarray, years: np.ndarray) -> float:
        """First derivative of `npv` with respect to the rate."""
        if rate <= -1.0:
            return float("nan")
        return float(np.sum(-years * amounts / (1.0 + rate) ** (years + 1.0)))

    @staticmethod
    def solve_irr(
        dates: Sequence[datetime.date],
        amounts: Sequence[Decimal],
        settings: Optional[IRRSolverSettings] = None,
    ) -> IRRSolution:
        """
        Solve `sum(CF_i / (1 + r) ** (t_i / 365)) = 0` for r.

        Newton-Raphson starts at `settings.initial_guess`. If it does not
        converge within `settings.max_iterations` to `settings.tolerance`, the
        solver falls back to bisection on `[lower_bound, upper_bound]`. Without
        a sign change on that bracket no root is reported.

        Args:
            dates: Cash-flow dates
            amounts: Investor-perspective amounts (calls negative, distributions positive)
            settings: Solver configuration; defaults to `IRRSolverSettings()`

        Returns:
            IRRSolution; `rate` is None when no root could be found

        Example:
            ```python
            solution = FinancialCalculations.solve_irr(
                [date(2020, 1, 1), date(2021, 1, 1)],
                [Decimal("-1000"), Decimal("1100")],
            )
            solution.rate  # ~0.10
            ```
        """
        settings = settings or IRRSolverSettings()
        if len(dates) != len(amounts):
            raise ValueError("dates and amounts must have the same length")

        flows = np.array([float(a) for a in amounts], dtype=np.float64)
        if not (np.any(flows < 0) and np.any(flows > 0)):
            return IRRSolution(
                rate=None,
                method=None,
                converged=False,
                message="Cash flows need at least one negative and one positive amount",
            )

        years = FinancialCalculations.year_fractions(list(dates), settings.day_count_basis)
        if not np.any(years > 0):
            return IRRSolution(
                rate=None,
                method=None,
                converged=False,
                message="All cash flows fall on a single date",
            )

        def f(rate: float) -> float:
            return FinancialCalculations.npv(rate, flows, years)

        def fprime(rate: float) -> float:
            return FinancialCalculations.npv_derivative(rate, flows, years)

        with np.errstate(all="ignore"), warnings.catch_warnings():
            warnings.simplefilter("ignore", RuntimeWarning)

            newton_iterations = 0
            try:
                root, info = optimize.newton(
                    f,
                    x0=settings.initial_guess,
                    fprime=fprime,
                    tol=settings.tolerance,
                    maxiter=settings.max_iterations,
                    full_output=True,
                    disp=False,
                )
                newton_iterations = info.iterations
                if info.converged and np.isfinite(root) and root > -1.0:
                    return IRRSolution(
                        rate=float(root),
                        method="newton",
                        converged=True,
                        iterations=info.iterations,
                    )
            except SOLVER_ERRORS as exc:
                logger.debug(f"Newton-Raphson failed: {exc}")

            logger.debug(
                f"Newton-Raphson did not converge after {newton_iterations} iterations; "
                f"bisecting on [{settings.lower_bound}, {settings.upper_bound}]"
            )

            lower, upper = settings.lower_bound, settings.upper_bound
            f_lower, f_upper = f(lower), f(upper)
            if not (np.isfinite(f_lower) and np.isfinite(f_upper)) or f_lower * f_upper > 0:
                return IRRSolution(
                    rate=None,
                    method=None,
                    converged=False,
                    iterations=newton_iterations,
                    message=(
                        f"No sign change in NPV on [{lower}, {upper}]; IRR is undefined "
                        "for this cash-flow series"
                    ),
                )

            try:
                root, info = optimize.bisect(
                    f,
                    lower,
                    upper,
                    xtol=settings.tolerance,
                    maxiter=settings.max_iterations,
                    full_output=True,
                    disp=False,
                )
            except SOLVER_ERRORS as exc:
                return IRRSolution(
                    rate=None,
                    method=None,
                    converged=False,
                    message=f"Bisection failed: {exc}",
                )

        if info.converged:
            return IRRSolution(
                rate=float(root),
                method="bisection",
                converged=True,
                iterations=info.iterations,
            )
        return IRRSolution(
            rate=None,
            method=None,
            converged=False,
            iterations=info.iterations,
            message=f"Bisection did not converge after {info.iterations} iterations",
        )

    @staticmethod
    def calculate_ratio(numerator: Decimal, denominator: Decimal) -> Optional[float]:
        """
        Paid-in multiple `numerator / denominator`.

        Returns:
            Ratio as float, or None when the denominator is zero (undefined)
        """
        if denominator == 0:
            return None
        return float(Decimal(numerator) / Decimal(denominator))
