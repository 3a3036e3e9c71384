# core/price_editor.py — headless price editor (percentage increase on selected items)

import argparse
import sys
from typing import List

from core.catalog import CATALOG_PATH, apply_increase, reload_catalog, save_catalog
from core.model import CatalogError, UnknownItem
from core.pricing import format_money
from lore import lorekeeper


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="bidonsite-prices",
        description="Apply a percentage increase to selected catalog prices.",
    )
    p.add_argument("keys", nargs="*", metavar="KEY", help="catalog item keys to reprice")
    p.add_argument("--pct", help="percentage increase, e.g. 10.5")
    p.add_argument("--all", action="store_true", help="reprice every item")
    p.add_argument("--list", action="store_true", help="print current prices and exit")
    p.add_argument("--catalog", default=None, help=f"catalog JSON (default {CATALOG_PATH})")
    return p


def format_price_rows(cat) -> List[str]:
    return [f"{e.key:<32}{format_money(e.price):>20}" for e in cat]


def main(argv: List[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    path = args.catalog or CATALOG_PATH

    try:
        cat = reload_catalog(path)
    except (FileNotFoundError, CatalogError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.list:
        print("\n".join(format_price_rows(cat)))
        return 0

    if args.pct is None:
        print("Error: --pct is required unless --list is given.", file=sys.stderr)
        return 1

    keys = list(cat.keys()) if args.all else args.keys
    try:
        updated = apply_increase(cat, keys, args.pct)
    except (UnknownItem, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        save_catalog(updated, path)
    except OSError as e:
        lorekeeper.log_error("price editor save failed", e)
        print(f"Failed to write file: {e}", file=sys.stderr)
        return 1

    lorekeeper.log_app_event("prices_updated", [f"pct={args.pct}", f"items={len(set(keys))}", f"path={path}"])
    print(f"Wrote updated prices to {path}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
