# tests/test_engine.py
from decimal import Decimal

import pytest

from core.model import UnknownItem
from core.pricing import round_money
from engine import QuoteEngine


def test_starts_with_every_item_at_zero(engine, catalog):
    q = engine.quantities()
    assert set(q) == set(catalog.keys())
    assert all(v == 0 for v in q.values())
    assert engine.is_empty()


def test_toggle_selects_and_deselects(engine):
    assert engine.toggle("SOLAR_SCREEN") == 1
    assert engine.toggle("SOLAR_SCREEN") == 0


def test_toggle_on_multi_quantity_loses_the_count(engine):
    engine.toggle("M_UPPER_WINDOW")
    engine.increment("M_UPPER_WINDOW")
    engine.increment("M_UPPER_WINDOW")
    assert engine.quantity("M_UPPER_WINDOW") == 3
    assert engine.toggle("M_UPPER_WINDOW") == 0
    assert engine.toggle("M_UPPER_WINDOW") == 1


def test_increment_has_no_upper_bound(engine):
    for _ in range(250):
        engine.increment("FIRST_STORY_GUTTER")
    assert engine.quantity("FIRST_STORY_GUTTER") == 250


def test_decrement_floors_at_one(engine):
    engine.increment("L_LOWER_WINDOW")
    engine.increment("L_LOWER_WINDOW")
    assert engine.decrement("L_LOWER_WINDOW") == 1
    assert engine.decrement("L_LOWER_WINDOW") == 1


def test_decrement_from_zero_jumps_to_one(engine):
    # pinned behavior: decrement never yields zero, even from zero
    assert engine.quantity("XS_UPPER_WINDOW") == 0
    assert engine.decrement("XS_UPPER_WINDOW") == 1


def test_reset_clears_everything(engine, catalog):
    for key in catalog.keys():
        engine.increment(key)
    engine.reset()
    assert all(engine.quantity(k) == 0 for k in catalog.keys())
    assert engine.render_quote() == ""


@pytest.mark.parametrize("op", ["toggle", "increment", "decrement", "quantity"])
def test_unknown_item_fails_loudly(engine, op):
    with pytest.raises(UnknownItem):
        getattr(engine, op)("BAY_WINDOW")
    assert "BAY_WINDOW" not in engine.quantities()


def test_quantities_snapshot_is_read_only(engine):
    q = engine.quantities()
    with pytest.raises(TypeError):
        q["SOLAR_SCREEN"] = 4
    engine.increment("SOLAR_SCREEN")
    assert q["SOLAR_SCREEN"] == 0


def test_totals_example_windows_and_screens(engine):
    engine.increment("M_UPPER_WINDOW")
    engine.increment("M_UPPER_WINDOW")
    engine.toggle("SOLAR_SCREEN")
    t = engine.totals()
    assert t.in_out == Decimal("22.74")
    assert round_money(t.out_only) == Decimal("17.07")
    assert t.gutters == 0


def test_totals_example_single_small_window(engine):
    engine.toggle("XS_LOWER_WINDOW")
    t = engine.totals()
    assert t.in_out == Decimal("2.54")
    assert round_money(t.out_only) == Decimal("1.70")


def test_totals_are_recomputed_not_cached(engine):
    engine.toggle("SOLAR_SCREEN")
    first = engine.totals()
    assert engine.totals() == first
    engine.increment("SOLAR_SCREEN")
    assert engine.totals().in_out == Decimal("11.12")


def test_empty_quote_is_empty_string(engine):
    assert engine.render_quote() == ""


def test_gutter_only_quote(engine):
    for _ in range(50):
        engine.increment("FIRST_STORY_GUTTER")
    text = engine.render_quote()
    assert text == "First Story Gutter: 50 ft\n\nGutter Cleaning: $50.00"
    assert "In/Out" not in text
    assert "Out Only" not in text


def test_quote_lines_follow_section_order(engine):
    # selection order should not matter
    for _ in range(20):
        engine.increment("SECOND_STORY_GUTTER")
    engine.toggle("EXTERIOR_HALF_SCREEN_INTERIOR")
    engine.increment("XS_LOWER_WINDOW")
    engine.increment("XS_LOWER_WINDOW")
    engine.increment("XS_LOWER_WINDOW")
    engine.toggle("L_UPPER_WINDOW")
    assert engine.render_quote().split("\n") == [
        "L Upper: 1",
        "XS Lower: 3",
        "Half Screens: 1",
        "Second Story Gutter: 20 ft",
        "",
        "In/Out: $27.68",
        "Out Only: $19.87",
        "Gutter Cleaning: $40.00",
    ]


def test_quote_windows_and_screens(engine):
    engine.increment("M_UPPER_WINDOW")
    engine.increment("M_UPPER_WINDOW")
    engine.toggle("SOLAR_SCREEN")
    assert engine.render_quote() == (
        "M Upper: 2\nSolar Screens: 1\n\nIn/Out: $22.74\nOut Only: $17.07"
    )


def test_selected_lists_entries_in_display_order(engine):
    engine.toggle("SECOND_STORY_GUTTER")
    engine.toggle("XL_UPPER_WINDOW")
    assert [e.key for e in engine.selected()] == ["XL_UPPER_WINDOW", "SECOND_STORY_GUTTER"]
    assert not engine.is_empty()


def test_replace_catalog_keeps_counts(engine, catalog):
    from core.catalog import apply_increase

    engine.increment("M_UPPER_WINDOW")
    engine.increment("M_UPPER_WINDOW")
    engine.replace_catalog(apply_increase(catalog, ["M_UPPER_WINDOW"], 10))
    assert engine.quantity("M_UPPER_WINDOW") == 2
    assert engine.totals().in_out == Decimal("18.90")
    assert set(engine.quantities()) == set(catalog.keys())


def test_engine_takes_injected_catalog(tiny_catalog):
    eng = QuoteEngine(tiny_catalog)
    assert eng.quantities() == {"W": 0, "S": 0, "G": 0}
    eng.toggle("W")
    # 0.67 * 1.50 = 1.005 rounds half up
    assert eng.render_quote() == "Test Window: 1\n\nIn/Out: $1.50\nOut Only: $1.01"
