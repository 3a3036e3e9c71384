# core/catalog.py — price catalog loader + helpers

import json, os
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Tuple

from core.model import CatalogEntry, CatalogError, Section, UnknownItem

APP_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CATALOG_PATH = os.path.join(APP_DIR, "config", "catalog.json")
CATALOG_PATH = os.environ.get("BIDONSITE_CATALOG") or DEFAULT_CATALOG_PATH

CENT = Decimal("0.01")

# ---------- simple in-process cache ----------
_CATALOG_CACHE = None
_CATALOG_MTIME = None
_CATALOG_CACHE_PATH = None


class Catalog:
    """
    Immutable price table. Entries keep the order they were given in, which
    is the display order within each section.
    """

    def __init__(self, entries: Iterable[CatalogEntry], version: str = "0.0.0"):
        by_key: Dict[str, CatalogEntry] = {}
        for e in entries:
            if not isinstance(e.section, Section):
                raise CatalogError(f"Item '{e.key}' has no valid section")
            if e.key in by_key:
                raise CatalogError(f"Duplicate item '{e.key}' in catalog")
            if e.price < 0:
                raise CatalogError(f"Item '{e.key}' has a negative price")
            by_key[e.key] = e
        # group by section order, stable within a section
        ordered = sorted(by_key.values(), key=lambda e: list(Section).index(e.section))
        self._entries: Mapping[str, CatalogEntry] = MappingProxyType({e.key: e for e in ordered})
        self._version = str(version)

    @property
    def version(self) -> str:
        return self._version

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries.values())

    def __repr__(self) -> str:
        return f"Catalog(version={self._version!r}, items={len(self)})"

    def entry(self, key: str) -> CatalogEntry:
        try:
            return self._entries[key]
        except KeyError:
            raise UnknownItem(key) from None

    def price_of(self, key: str) -> Decimal:
        return self.entry(key).price

    def section_of(self, key: str) -> Section:
        return self.entry(key).section

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def items_in(self, section: Section) -> Tuple[CatalogEntry, ...]:
        return tuple(e for e in self._entries.values() if e.section is section)

    def sections(self) -> List[Tuple[Section, Tuple[CatalogEntry, ...]]]:
        return [(s, self.items_in(s)) for s in Section]


def _to_price(key: str, value: Any) -> Decimal:
    if isinstance(value, bool):
        raise CatalogError(f"Item '{key}' has a non-numeric price")
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise CatalogError(f"Item '{key}' has a non-numeric price: {value!r}") from None
    if not price.is_finite():
        raise CatalogError(f"Item '{key}' has a non-numeric price: {value!r}")
    return price


def catalog_from_dict(raw: Dict[str, Any]) -> Catalog:
    """
    Build a Catalog from the JSON shape:
      {"version": ..., "sections": {"upperWindows": [keys...], ...},
       "items": {KEY: {"price": n, "label": s, "desc": s, "uom": s}}}
    Every item must be listed in exactly one section and vice versa.
    """
    if not isinstance(raw, dict):
        raise CatalogError(f"Catalog root is not an object (got {type(raw).__name__}).")
    items = raw.get("items")
    sections = raw.get("sections")
    if not isinstance(items, dict):
        raise CatalogError("Catalog 'items' is not a dict.")
    if not isinstance(sections, dict):
        raise CatalogError("Catalog 'sections' is not a dict.")

    entries: List[CatalogEntry] = []
    seen: Dict[str, str] = {}
    for sec_name, keys in sections.items():
        try:
            section = Section(sec_name)
        except ValueError:
            raise CatalogError(f"Unknown section '{sec_name}' in catalog") from None
        if keys is None:
            keys = []
        if not isinstance(keys, list) or not all(isinstance(k, str) for k in keys):
            raise CatalogError(f"Section '{sec_name}' must be a list of item keys")
        for key in keys:
            if key in seen:
                raise CatalogError(f"Item '{key}' listed in both '{seen[key]}' and '{sec_name}'")
            seen[key] = sec_name
            rec = items.get(key)
            if not isinstance(rec, dict):
                raise CatalogError(f"Section '{sec_name}' lists '{key}' but it has no item record")
            entries.append(CatalogEntry(
                key=key,
                price=_to_price(key, rec.get("price")),
                label=str(rec.get("label") or key),
                section=section,
                desc=str(rec.get("desc", "") or ""),
                uom=str(rec.get("uom", "EA") or "EA"),
            ))

    orphans = sorted(set(items) - set(seen))
    if orphans:
        raise CatalogError(f"Items without a section: {', '.join(orphans)}")

    return Catalog(entries, version=raw.get("version", "0.0.0"))


def _price_for_json(price: Decimal) -> float:
    return float(price)


def catalog_to_dict(cat: Catalog) -> Dict[str, Any]:
    items: Dict[str, Any] = {}
    for e in cat:
        rec: Dict[str, Any] = {"price": _price_for_json(e.price), "label": e.label}
        if e.desc:
            rec["desc"] = e.desc
        rec["uom"] = e.uom
        items[e.key] = rec
    return {
        "version": cat.version,
        "sections": {s.value: [e.key for e in entries] for s, entries in cat.sections()},
        "items": items,
    }


def apply_increase(cat: Catalog, keys: Iterable[str], pct: Any) -> Catalog:
    """
    Raise the price of each selected item by pct percent, rounded to cents.
    Returns a new Catalog; the input is left untouched.
    """
    try:
        pct_d = Decimal(str(pct).strip())
    except (InvalidOperation, ValueError):
        raise ValueError("Please enter a valid positive number.") from None
    if not pct_d.is_finite() or pct_d < 0:
        raise ValueError("Please enter a valid positive number.")

    selected = set(keys)
    if not selected:
        raise ValueError("Select at least one item to reprice.")
    for key in selected:
        cat.entry(key)  # raises UnknownItem

    multiplier = 1 + pct_d / 100
    out = []
    for e in cat:
        if e.key in selected:
            try:
                new_price = (e.price * multiplier).quantize(CENT, rounding=ROUND_HALF_UP)
            except InvalidOperation:
                # result too large to hold to the cent
                raise ValueError("Please enter a valid positive number.") from None
            e = CatalogEntry(e.key, new_price, e.label, e.section, e.desc, e.uom)
        out.append(e)
    return Catalog(out, version=cat.version)


def _read_catalog_from_disk(path: str) -> Catalog:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Missing catalog at {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise CatalogError(f"Catalog at {path} is not valid JSON: {e}") from e
    return catalog_from_dict(data)


def load_catalog(path: str | None = None) -> Catalog:
    global _CATALOG_CACHE, _CATALOG_MTIME, _CATALOG_CACHE_PATH
    path = path or CATALOG_PATH
    try:
        mtime = os.path.getmtime(path)
    except OSError:
        mtime = None

    if _CATALOG_CACHE is None or _CATALOG_MTIME != mtime or _CATALOG_CACHE_PATH != path:
        _CATALOG_CACHE = _read_catalog_from_disk(path)
        _CATALOG_MTIME = mtime
        _CATALOG_CACHE_PATH = path
    return _CATALOG_CACHE


def reload_catalog(path: str | None = None) -> Catalog:
    """
    Force cache invalidation + re-read from disk.
    """
    global _CATALOG_CACHE, _CATALOG_MTIME, _CATALOG_CACHE_PATH
    _CATALOG_CACHE = None
    _CATALOG_MTIME = None
    _CATALOG_CACHE_PATH = None
    return load_catalog(path)


def save_catalog(cat: Catalog, path: str | None = None) -> str:
    global _CATALOG_CACHE, _CATALOG_MTIME, _CATALOG_CACHE_PATH
    path = path or CATALOG_PATH
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    tmp = path + ".tmp"
    with open(tmp, "w", encoding="utf-8", newline="\n") as f:
        json.dump(catalog_to_dict(cat), f, indent=2)
        f.write("\n")
    os.replace(tmp, path)
    # mtime granularity can hide a fast rewrite; drop the cache outright
    _CATALOG_CACHE = None
    _CATALOG_MTIME = None
    _CATALOG_CACHE_PATH = None
    return path
