import pytest

from core.catalog import DEFAULT_CATALOG_PATH, reload_catalog
from engine import QuoteEngine


@pytest.fixture(autouse=True)
def _data_dir(tmp_path, monkeypatch):
    # keep chronicle/debug logs out of the real home dir
    monkeypatch.setenv("BIDONSITE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("BIDONSITE_DEBUG", raising=False)


@pytest.fixture
def catalog():
    return reload_catalog(DEFAULT_CATALOG_PATH)


@pytest.fixture
def engine(catalog):
    return QuoteEngine(catalog)


@pytest.fixture
def tiny_catalog():
    from decimal import Decimal

    from core.catalog import Catalog
    from core.model import CatalogEntry, Section

    return Catalog([
        CatalogEntry("W", Decimal("1.50"), "Test Window", Section.LOWER_WINDOWS),
        CatalogEntry("S", Decimal("2.00"), "Test Screen", Section.SCREENS),
        CatalogEntry("G", Decimal("0.75"), "Test", Section.GUTTERS, desc="Linear feet", uom="LF"),
    ], version="test")
