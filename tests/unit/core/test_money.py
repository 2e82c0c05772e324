# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from decimal import Decimal
from fractions import Fraction

import pytest

from fundwaterfall.core.exceptions import ValidationError
from fundwaterfall.core.primitives import (
    from_cents,
    percent_of,
    round_half_even,
    to_cents,
    to_decimal,
)


def test_to_decimal_avoids_binary_float_noise():
    """Floats are converted through their shortest repr."""
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal("12.34") == Decimal("12.34")
    assert to_decimal(5) == Decimal(5)


def test_to_cents_whole_cents():
    assert to_cents(Decimal("12.34")) == 1234
    assert to_cents("1000000") == 100_000_000
    assert to_cents(Decimal("0.10")) == 10


def test_to_cents_rejects_fractions_of_a_cent():
    with pytest.raises(ValidationError, match="whole cents"):
        to_cents(Decimal("1.005"), field="Distribution amount")


def test_to_cents_rejects_non_finite():
    with pytest.raises(ValidationError, match="finite"):
        to_cents("NaN")


def test_from_cents_has_two_places():
    assert from_cents(1234) == Decimal("12.34")
    assert str(from_cents(100)) == "1.00"
    assert str(from_cents(0)) == "0.00"


@pytest.mark.parametrize(
    "value, expected",
    [
        (Fraction(5, 2), 2),
        (Fraction(7, 2), 4),
        (Fraction(-5, 2), -2),
        (Decimal("2000.2"), 2000),
        (Decimal("2000.5"), 2000),
        (Decimal("2001.5"), 2002),
    ],
)
def test_round_half_even(value, expected):
    """Ties round to the even neighbour."""
    assert round_half_even(value) == expected


def test_percent_of():
    assert percent_of(10001, Decimal("20")) == 2000
    assert percent_of(27_500_000, Decimal("20")) == 5_500_000
    assert percent_of(100, Decimal("0")) == 0
    assert percent_of(100, Decimal("100")) == 100
