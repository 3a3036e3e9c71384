# core/model.py — catalog entry, sections, totals, error types
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class UnknownItem(KeyError):
    """Identifier is not in the catalog. Always a caller bug."""

    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Unknown item '{self.key}' in catalog"


class CatalogError(ValueError):
    pass


class ClipboardUnavailable(RuntimeError):
    pass


class Kind(Enum):
    WINDOW = "window"
    SCREEN = "screen"
    GUTTER = "gutter"


class Section(Enum):
    # declaration order is display order
    UPPER_WINDOWS = "upperWindows"
    LOWER_WINDOWS = "lowerWindows"
    SCREENS = "screens"
    GUTTERS = "gutters"

    @property
    def kind(self) -> Kind:
        return _SECTION_KIND[self]

    @property
    def title(self) -> str:
        return _SECTION_TITLE[self]


_SECTION_KIND = {
    Section.UPPER_WINDOWS: Kind.WINDOW,
    Section.LOWER_WINDOWS: Kind.WINDOW,
    Section.SCREENS: Kind.SCREEN,
    Section.GUTTERS: Kind.GUTTER,
}

_SECTION_TITLE = {
    Section.UPPER_WINDOWS: "Upper Windows",
    Section.LOWER_WINDOWS: "Lower Windows",
    Section.SCREENS: "Screens",
    Section.GUTTERS: "Gutters",
}


@dataclass(frozen=True)
class CatalogEntry:
    key: str
    price: Decimal
    label: str
    section: Section
    desc: str = ""
    uom: str = "EA"

    @property
    def kind(self) -> Kind:
        return self.section.kind


@dataclass(frozen=True)
class Totals:
    in_out: Decimal
    out_only: Decimal
    gutters: Decimal
