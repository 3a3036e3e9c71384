# scripts/price_editor.py — run the price editor from a source checkout
import os, sys

APP_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if APP_DIR not in sys.path:
    sys.path.insert(0, APP_DIR)

from core.price_editor import main

if __name__ == "__main__":
    sys.exit(main())
