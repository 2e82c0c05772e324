# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Exceptions raised by the distribution and performance engines.

Only malformed input is fatal. Numerical trouble while solving for IRR is
reported as a `ComputationWarning` on the affected metric instead (see
`fundwaterfall.performance.results`).
"""


class FundWaterfallError(Exception):
    """Base class for all fundwaterfall errors."""


class ValidationError(FundWaterfallError, ValueError):
    """
    Input configuration or amounts are invalid.

    Raised for ownership that does not sum to 100%, tier splits that do not
    sum to 100%, negative pools or amounts, amounts with fractions of a cent,
    and missing custom tiers. The engine never substitutes a corrected value;
    the caller must fix the input and call again.

    Subclasses `ValueError` so that pydantic field validators delegating to the
    shared checks in `fundwaterfall.core.primitives.validation` surface as
    `pydantic.ValidationError` during model construction.
    """


__all__ = [
    "FundWaterfallError",
    "ValidationError",
]
