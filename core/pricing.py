# core/pricing.py — totals rollup + money helpers

from decimal import Decimal, ROUND_HALF_UP
from typing import Mapping

from core.catalog import Catalog
from core.model import Kind, Totals

CENT = Decimal("0.01")

# Exterior-only service bills windows at 67% of the full rate; screens unaffected.
OUT_ONLY_FACTOR = Decimal("0.67")

ZERO = Decimal("0")


def _subtotal(catalog: Catalog, quantities: Mapping[str, int], kind: Kind) -> Decimal:
    total = ZERO
    for e in catalog:
        if e.kind is kind:
            total += quantities.get(e.key, 0) * e.price
    return total


def compute_totals(catalog: Catalog, quantities: Mapping[str, int]) -> Totals:
    """
    In/Out    = windows + screens
    Out Only  = 0.67 * windows + screens
    Gutters   = sum of gutter footage * price per foot
    Unrounded; round only when presenting.
    """
    for key in quantities:
        catalog.entry(key)  # raises UnknownItem

    windows = _subtotal(catalog, quantities, Kind.WINDOW)
    screens = _subtotal(catalog, quantities, Kind.SCREEN)
    gutters = _subtotal(catalog, quantities, Kind.GUTTER)

    return Totals(
        in_out=windows + screens,
        out_only=windows * OUT_ONLY_FACTOR + screens,
        gutters=gutters,
    )


def round_money(value) -> Decimal:
    """Two places, half away from zero."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value) -> str:
    return f"${round_money(value):.2f}"
