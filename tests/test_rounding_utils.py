from decimal import Decimal
from fractions import Fraction

import pytest

from tilecost.services.utils import loose_equals, round_half_up


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (2.5, 3),
        (-2.5, -3),
        (0.5, 1),
        (1.4999, 1),
        (10.000000000000002, 10),
        (9.999999999999998, 10),
        (Decimal("7.5"), 8),
        (Fraction(20, 13), 2),
        ("4.5", 5),
    ],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_round_half_up_rejects_text():
    with pytest.raises(ValueError):
        round_half_up("ten")


def test_loose_equals():
    assert loose_equals(10, 10)
    assert loose_equals("10", 10)
    assert loose_equals("10.0", 10)
    assert loose_equals(10.0, 10)
    assert not loose_equals(None, 0)
    assert not loose_equals("", 0)
    assert not loose_equals("abc", 0)
    assert not loose_equals(True, 1)
    assert not loose_equals(11, 10)
