# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Fixed-point money helpers.

All waterfall and allocation arithmetic is carried out in integer minor units
(cents). `Decimal` is only used at the model boundary; conversion to display
precision happens outside this package.
"""

from __future__ import annotations

from decimal import Decimal
from fractions import Fraction
from typing import Union

from ..exceptions import ValidationError

CENT = Decimal("0.01")
CENTS_PER_UNIT = 100

Numeric = Union[Decimal, Fraction, int]


def to_decimal(value: Union[Decimal, int, float, str]) -> Decimal:
    """Coerce a caller-supplied number to `Decimal` without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def to_cents(amount: Union[Decimal, int, float, str], field: str = "amount") -> int:
    """
    Convert an amount to integer cents.

    Raises:
        ValidationError: If the amount is not a finite number of whole cents.
    """
    value = to_decimal(amount)
    if not value.is_finite():
        raise ValidationError(f"{field} must be a finite amount, got {value}")
    cents = value * CENTS_PER_UNIT
    if cents != cents.to_integral_value():
        raise ValidationError(f"{field} must be expressed in whole cents, got {value}")
    return int(cents)


def from_cents(cents: int) -> Decimal:
    """Convert integer cents back to a `Decimal` amount with two places."""
    return (Decimal(cents) / CENTS_PER_UNIT).quantize(CENT)


def round_half_even(value: Numeric) -> int:
    """Round an exact cent quantity to whole cents, ties to even."""
    # round() on Decimal and Fraction is banker's rounding and returns int
    return int(round(value))


def percent_of(cents: int, percent: Numeric) -> int:
    """Whole-cent share of `cents` at `percent` (0-100), ties to even."""
    return round_half_even(Fraction(cents) * Fraction(percent) / 100)
