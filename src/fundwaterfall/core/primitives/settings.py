# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pydantic import Field, model_validator

from .model import Model
from .types import PositiveFloat, PositiveInt


class IRRSolverSettings(Model):
    """
    Configuration for the IRR root finder.

    The solver runs Newton-Raphson from `initial_guess` and falls back to
    bisection on `[lower_bound, upper_bound]` when Newton does not converge
    within `max_iterations` to `tolerance`. The iteration cap bounds the
    worst-case latency of a metrics call.
    """

    initial_guess: float = Field(
        default=0.1, gt=-1.0, description="Starting rate for Newton-Raphson."
    )
    lower_bound: float = Field(
        default=-0.99, gt=-1.0, description="Lower end of the bisection bracket."
    )
    upper_bound: float = Field(
        default=10.0, description="Upper end of the bisection bracket."
    )
    max_iterations: PositiveInt = Field(
        default=100, description="Iteration cap for each solver stage."
    )
    tolerance: PositiveFloat = Field(
        default=1e-7, description="Convergence tolerance on the rate."
    )
    day_count_basis: PositiveInt = Field(
        default=365, description="Days per year when converting dates to year fractions."
    )

    @model_validator(mode="after")
    def validate_bracket(self) -> "IRRSolverSettings":
        if self.upper_bound <= self.lower_bound:
            raise ValueError("upper_bound must be greater than lower_bound")
        return self


class AllocationSettings(Model):
    """Settings for ownership checks and allocation output shape."""

    ownership_tolerance: PositiveFloat = Field(
        default=1e-6,
        description="Allowed deviation of summed ownership from 100 (percentage points).",
    )
    gp_allocation_id: str = Field(
        default="GP",
        min_length=1,
        description="Identifier used for the General Partner allocation row.",
    )
    include_zero_tiers: bool = Field(
        default=True,
        description=(
            "Keep tiers that received nothing in the breakdown. Standard tiers "
            "are always listed in sequence so that reports show where the pool ran out."
        ),
    )


class EngineSettings(Model):
    """
    Top-level configuration passed to every engine entry point.

    Usage Examples:
        # Defaults: Newton from 10%, bisection on [-99%, 1000%]
        settings = EngineSettings()

        # Tighter solver for reporting runs
        settings = EngineSettings(irr=IRRSolverSettings(tolerance=1e-9))
    """

    irr: IRRSolverSettings = Field(default_factory=IRRSolverSettings)
    allocation: AllocationSettings = Field(default_factory=AllocationSettings)
