# engine.py — bidonsite quote engine
# ---------------------------------------------------------------------
# - Quantity map over every catalog item (always the full key set, >= 0)
# - Select/deselect, increment, decrement (floors at 1), reset
# - Totals recomputed from scratch on every read
# - Plain-text quote for pasting into a bid document

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, List, Mapping

from core.catalog import Catalog, load_catalog
from core.model import CatalogEntry, Kind, Totals
from core.pricing import compute_totals, format_money


class QuoteEngine:
    def __init__(self, catalog: Catalog | None = None):
        self.catalog = catalog if catalog is not None else load_catalog()
        self._qty: Dict[str, int] = self._blank()

    def _blank(self) -> Dict[str, int]:
        return {key: 0 for key in self.catalog.keys()}

    def _check(self, key: str) -> None:
        self.catalog.entry(key)  # raises UnknownItem

    # ============================ MUTATIONS ============================

    def toggle(self, key: str) -> int:
        self._check(key)
        self._qty[key] = 0 if self._qty[key] > 0 else 1
        return self._qty[key]

    def increment(self, key: str) -> int:
        self._check(key)
        self._qty[key] += 1
        return self._qty[key]

    def decrement(self, key: str) -> int:
        # Floors at 1, also from 0: only toggle() or reset() clears an item.
        self._check(key)
        self._qty[key] = max(1, self._qty[key] - 1)
        return self._qty[key]

    def reset(self) -> None:
        self._qty = self._blank()

    def replace_catalog(self, catalog: Catalog) -> None:
        """Swap in a repriced catalog; counts carry over for keys it still has."""
        old = self._qty
        self.catalog = catalog
        self._qty = {key: old.get(key, 0) for key in catalog.keys()}

    # ============================== READS ==============================

    def quantity(self, key: str) -> int:
        self._check(key)
        return self._qty[key]

    def quantities(self) -> Mapping[str, int]:
        return MappingProxyType(dict(self._qty))

    def selected(self) -> List[CatalogEntry]:
        return [e for e in self.catalog if self._qty[e.key] > 0]

    def is_empty(self) -> bool:
        return all(q == 0 for q in self._qty.values())

    def totals(self) -> Totals:
        return compute_totals(self.catalog, self._qty)

    # ============================== QUOTE ==============================

    def _line_for(self, e: CatalogEntry) -> str:
        qty = self._qty[e.key]
        if e.kind is Kind.GUTTER:
            return f"{e.label} Gutter: {qty} ft"
        return f"{e.label}: {qty}"

    def render_quote(self) -> str:
        """
        One line per selected item, grouped by section in display order,
        then a blank line and whichever totals are above zero.
        Empty string when nothing is selected.
        """
        lines = [self._line_for(e) for e in self.selected()]
        if not lines:
            return ""

        t = self.totals()
        lines.append("")
        if t.in_out > 0:
            lines.append(f"In/Out: {format_money(t.in_out)}")
        if t.out_only > 0:
            lines.append(f"Out Only: {format_money(t.out_only)}")
        if t.gutters > 0:
            lines.append(f"Gutter Cleaning: {format_money(t.gutters)}")
        return "\n".join(lines)
