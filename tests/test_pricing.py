# tests/test_pricing.py
from decimal import Decimal

import pytest

from core.model import UnknownItem
from core.pricing import OUT_ONLY_FACTOR, compute_totals, format_money, round_money


@pytest.mark.parametrize("value, expected", [
    (Decimal("0.125"), "0.13"),
    (Decimal("2.675"), "2.68"),
    (Decimal("1.005"), "1.01"),
    (Decimal("17.0706"), "17.07"),
    (Decimal("1.7018"), "1.70"),
    (0, "0.00"),
])
def test_round_money_half_up(value, expected):
    assert round_money(value) == Decimal(expected)
    assert format_money(value) == f"${expected}"


def test_format_money_has_no_thousands_separator():
    assert format_money(Decimal("1234.5")) == "$1234.50"


def test_screens_are_not_discounted(catalog):
    t = compute_totals(catalog, {"UPPER_WOODEN_SCREEN": 2})
    assert t.in_out == t.out_only == Decimal("28")


def test_windows_are_discounted(catalog):
    t = compute_totals(catalog, {"XL_LOWER_WINDOW": 1})
    assert t.out_only == Decimal("17.98") * OUT_ONLY_FACTOR


def test_gutters_stay_out_of_window_totals(catalog):
    t = compute_totals(catalog, {"SECOND_STORY_GUTTER": 30, "FIRST_STORY_GUTTER": 5})
    assert t.gutters == Decimal("65")
    assert t.in_out == 0 and t.out_only == 0


def test_unknown_key_in_quantities(catalog):
    with pytest.raises(UnknownItem):
        compute_totals(catalog, {"SKYLIGHT": 1})
