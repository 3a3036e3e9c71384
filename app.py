# ============================================================================
#  BIDONSITE — window cleaning bid calculator
#
#  app.py                 PySide6 window (sections | current bid | totals)
#  engine.py              QuoteEngine: quantities, totals, quote text
#  config/catalog.json    price table
#  core/                  catalog, pricing, clipboard, price editor
#  lore/                  append-only chronicle + debug log
#  tests/
# ============================================================================

import sys
from pathlib import Path
try:
    APP_DIR = str(Path(__file__).resolve().parent)
except NameError:
    APP_DIR = str(Path.cwd())
if APP_DIR not in sys.path:
    sys.path.insert(0, APP_DIR)

from PySide6.QtCore import Qt, QSettings
from PySide6.QtGui import QAction, QFont, QKeySequence
from PySide6.QtWidgets import (QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QLabel, QPushButton, QListWidget, QListWidgetItem, QTableWidget, QTableWidgetItem,
    QHeaderView, QDialog, QLineEdit, QGroupBox, QSplitter, QMessageBox, QScrollArea,
    QAbstractItemView)

from lore import lorekeeper
from core.catalog import CATALOG_PATH, apply_increase, load_catalog, reload_catalog, save_catalog
from core.clipboard import copy_text
from core.model import CatalogError, ClipboardUnavailable, Kind, Section
from core.pricing import format_money
from engine import QuoteEngine

APP_TITLE = "Do bids hella fast"
TOAST_MS = 3000

SELECTED_DOT = "●"
UNSELECTED_DOT = "○"


def _item_text(entry, selected: bool) -> str:
    mark = SELECTED_DOT if selected else UNSELECTED_DOT
    text = f"{mark}  {entry.label}"
    if entry.desc:
        text += f"\n     {entry.desc}"
    return text


# -------------------------- Price Editor --------------------------
class PriceEditorDialog(QDialog):
    """
    Pick items, enter a percentage, apply. Prices are rounded to cents and the
    catalog file is rewritten; bad input keeps the dialog open.
    """
    def __init__(self, parent, catalog, path: str):
        super().__init__(parent)
        self.setWindowTitle("Price Editor")
        self._catalog = catalog
        self._path = path
        self.updated = None

        lay = QVBoxLayout(self)
        lay.addWidget(QLabel("Select items, then enter a percentage increase."))

        self.items = QListWidget()
        for e in catalog:
            it = QListWidgetItem(f"{e.key:<32} {format_money(e.price):>10}")
            it.setData(Qt.UserRole, e.key)
            it.setFlags(it.flags() | Qt.ItemIsUserCheckable)
            it.setCheckState(Qt.Unchecked)
            self.items.addItem(it)
        mono = QFont("Menlo")
        mono.setStyleHint(QFont.Monospace)
        self.items.setFont(mono)
        lay.addWidget(self.items, 1)

        row = QHBoxLayout()
        self.all_btn = QPushButton("Select All")
        self.all_btn.clicked.connect(self._toggle_all)
        row.addWidget(self.all_btn)
        row.addStretch(1)
        row.addWidget(QLabel("Increase (%):"))
        self.pct = QLineEdit()
        self.pct.setPlaceholderText("e.g. 10.5")
        self.pct.setMaxLength(10)
        row.addWidget(self.pct)
        lay.addLayout(row)

        self.error = QLabel("")
        self.error.setStyleSheet("color:#c62828;")
        lay.addWidget(self.error)

        btns = QHBoxLayout()
        apply_btn = QPushButton("Apply")
        apply_btn.setDefault(True)
        apply_btn.clicked.connect(self._apply)
        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        btns.addStretch(1)
        btns.addWidget(cancel_btn)
        btns.addWidget(apply_btn)
        lay.addLayout(btns)

        self.resize(520, 560)

    def checked_keys(self) -> list[str]:
        keys = []
        for i in range(self.items.count()):
            it = self.items.item(i)
            if it.checkState() == Qt.Checked:
                keys.append(it.data(Qt.UserRole))
        return keys

    def _toggle_all(self):
        # all checked -> clear, otherwise check everything
        target = Qt.Unchecked if len(self.checked_keys()) == self.items.count() else Qt.Checked
        for i in range(self.items.count()):
            self.items.item(i).setCheckState(target)

    def _apply(self):
        keys = self.checked_keys()
        try:
            updated = apply_increase(self._catalog, keys, self.pct.text())
        except ValueError as e:
            self.error.setText(str(e))
            return
        try:
            save_catalog(updated, self._path)
        except OSError as e:
            lorekeeper.log_error("price editor save failed", e)
            QMessageBox.critical(self, "Save Failed", f"Failed to write file: {e}")
            return
        lorekeeper.log_app_event("prices_updated", [f"pct={self.pct.text().strip()}", f"items={len(keys)}"])
        self.updated = updated
        self.accept()


# -------------------------- Main window --------------------------
class Main(QMainWindow):
    def __init__(self, catalog=None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.setWindowTitle(APP_TITLE)
        self.resize(1100, 760)

        self.engine = QuoteEngine(catalog if catalog is not None else load_catalog())

        self.sections_box = QWidget()
        self.sections_layout = QVBoxLayout(self.sections_box)
        self.sections_layout.setContentsMargins(6, 6, 6, 6)
        self.sections_layout.setSpacing(12)
        self.section_lists: dict[Section, QListWidget] = {}

        left = QScrollArea()
        left.setWidgetResizable(True)
        left.setWidget(self.sections_box)

        # ---- current bid ----
        self.bid = QTableWidget(0, 2)
        self.bid.setHorizontalHeaderLabels(["Item", "Qty"])
        self.bid.verticalHeader().setVisible(False)
        self.bid.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.bid.setSelectionMode(QAbstractItemView.NoSelection)
        hdr = self.bid.horizontalHeader()
        hdr.setSectionResizeMode(0, QHeaderView.Stretch)
        hdr.setSectionResizeMode(1, QHeaderView.ResizeToContents)
        self.bid.cellClicked.connect(self._on_bid_clicked)
        self.bid.setToolTip("Click an item to add one; click its quantity to remove one.")

        self.empty_hint = QLabel("Select items from the left to get started")
        self.empty_hint.setAlignment(Qt.AlignCenter)
        self.empty_hint.setStyleSheet("color:#888; padding:32px;")

        mid = QWidget()
        mid_col = QVBoxLayout(mid)
        mid_col.setContentsMargins(6, 6, 6, 6)
        mid_col.addWidget(QLabel("Current Bid"))
        mid_col.addWidget(self.empty_hint)
        mid_col.addWidget(self.bid, 1)

        # ---- totals ----
        self.lbl_in_out = QLabel()
        self.lbl_out_only = QLabel()
        self.lbl_gutters = QLabel()
        totals_box = QGroupBox("Totals")
        tl = QVBoxLayout(totals_box)
        for name, lbl in (("In/Out", self.lbl_in_out),
                          ("Out Only", self.lbl_out_only),
                          ("Gutter Cleaning", self.lbl_gutters)):
            row = QHBoxLayout()
            row.addWidget(QLabel(name), 1)
            lbl.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
            row.addWidget(lbl)
            tl.addLayout(row)

        reset_btn = QPushButton("Reset")
        reset_btn.setAccessibleName("Reset all")
        reset_btn.clicked.connect(self.on_reset)
        copy_btn = QPushButton("Copy")
        copy_btn.setAccessibleName("Copy bid")
        copy_btn.clicked.connect(self.on_copy)
        btn_row = QHBoxLayout()
        btn_row.addWidget(reset_btn)
        btn_row.addWidget(copy_btn)

        right = QWidget()
        right_col = QVBoxLayout(right)
        right_col.setContentsMargins(6, 6, 6, 6)
        right_col.addWidget(totals_box)
        right_col.addLayout(btn_row)
        right_col.addStretch(1)

        split = QSplitter(Qt.Horizontal)
        split.setChildrenCollapsible(False)
        split.addWidget(left)
        split.addWidget(mid)
        split.addWidget(right)
        split.setStretchFactor(0, 1)
        split.setStretchFactor(1, 3)
        split.setStretchFactor(2, 1)
        split.setSizes([240, 600, 240])
        self.setCentralWidget(split)

        self._build_menu()
        self._build_sections()
        self.refresh()

        try:
            s = QSettings("bidonsite", "bidonsite")
            if (geo := s.value("main/geometry", None)) is not None:
                self.restoreGeometry(geo)
        except (TypeError, ValueError) as e:
            lorekeeper.debug(e, "restore geometry")

    def closeEvent(self, ev):
        QSettings("bidonsite", "bidonsite").setValue("main/geometry", self.saveGeometry())
        lorekeeper.log_app_event("app_closed")
        super().closeEvent(ev)

    # ---------- building ----------
    def _build_menu(self):
        m = self.menuBar().addMenu("Catalog")

        act_view = QAction("Catalog Viewer…", self)
        act_view.triggered.connect(self.open_catalog_dialog)
        m.addAction(act_view)

        act_edit = QAction("Price Editor…", self)
        act_edit.triggered.connect(self.open_price_editor)
        m.addAction(act_edit)

        act_reload = QAction("Reload Catalog", self)
        act_reload.triggered.connect(self.on_reload_catalog)
        m.addAction(act_reload)

        bid = self.menuBar().addMenu("Bid")
        act_copy = QAction("Copy Bid", self)
        act_copy.setShortcut(QKeySequence.Copy)
        act_copy.triggered.connect(self.on_copy)
        bid.addAction(act_copy)
        act_reset = QAction("Reset", self)
        act_reset.triggered.connect(self.on_reset)
        bid.addAction(act_reset)

    def _build_sections(self):
        while self.sections_layout.count():
            w = self.sections_layout.takeAt(0).widget()
            if w is not None:
                w.deleteLater()
        self.section_lists.clear()

        for section, entries in self.engine.catalog.sections():
            if not entries:
                continue
            box = QGroupBox(section.title)
            bl = QVBoxLayout(box)
            bl.setContentsMargins(4, 4, 4, 4)
            lst = QListWidget()
            for e in entries:
                it = QListWidgetItem()
                it.setData(Qt.UserRole, e.key)
                lst.addItem(it)
            lst.setFixedHeight(max(60, 44 * len(entries)))
            lst.itemClicked.connect(self._on_section_clicked)
            bl.addWidget(lst)
            self.sections_layout.addWidget(box)
            self.section_lists[section] = lst
        self.sections_layout.addStretch(1)

    # ---------- interactions ----------
    def _on_section_clicked(self, item: QListWidgetItem):
        self.engine.toggle(item.data(Qt.UserRole))
        self.refresh()

    def _on_bid_clicked(self, row: int, col: int):
        cell = self.bid.item(row, 0)
        if cell is None:
            return
        key = cell.data(Qt.UserRole)
        if col == 0:
            self.engine.increment(key)
        else:
            self.engine.decrement(key)
        self.refresh()

    def on_reset(self):
        self.engine.reset()
        self.refresh()

    def on_copy(self):
        text = self.engine.render_quote()
        try:
            copy_text(text)
        except ClipboardUnavailable as e:
            lorekeeper.log_error("clipboard write failed", e)
            self._status("Could not copy to clipboard")
            return
        self._status("Bid copied to clipboard")

    # ---------- rendering ----------
    def refresh(self):
        eng = self.engine
        qty = eng.quantities()

        for section, lst in self.section_lists.items():
            for i in range(lst.count()):
                it = lst.item(i)
                entry = eng.catalog.entry(it.data(Qt.UserRole))
                it.setText(_item_text(entry, qty[entry.key] > 0))

        selected = eng.selected()
        self.bid.setRowCount(len(selected))
        for r, e in enumerate(selected):
            name = QTableWidgetItem(e.label if e.kind is not Kind.GUTTER else f"{e.label} Gutter")
            name.setData(Qt.UserRole, e.key)
            shown = f"{qty[e.key]} ft" if e.kind is Kind.GUTTER else str(qty[e.key])
            count = QTableWidgetItem(shown)
            count.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
            self.bid.setItem(r, 0, name)
            self.bid.setItem(r, 1, count)
        self.empty_hint.setVisible(eng.is_empty())
        self.bid.setVisible(not eng.is_empty())

        t = eng.totals()
        self.lbl_in_out.setText(format_money(t.in_out))
        self.lbl_out_only.setText(format_money(t.out_only))
        self.lbl_gutters.setText(format_money(t.gutters))

    def _status(self, msg: str):
        """Transient status bar message, mirrored to the console."""
        self.statusBar().showMessage(msg, TOAST_MS)
        print(f"DEBUG: {msg}")

    # ---------- catalog ----------
    def on_reload_catalog(self):
        try:
            cat = reload_catalog()
        except (FileNotFoundError, CatalogError) as e:
            lorekeeper.log_error("catalog reload failed", e)
            QMessageBox.critical(self, "Catalog Load Error", str(e))
            return
        self._use_catalog(cat)
        self._status(f"Catalog reloaded (v{cat.version})")

    def _use_catalog(self, cat):
        self.engine.replace_catalog(cat)
        self._build_sections()
        self.refresh()

    def open_catalog_dialog(self):
        cat = self.engine.catalog
        dlg = QDialog(self)
        dlg.setWindowTitle(f"Catalog Viewer — v{cat.version}")
        lay = QVBoxLayout(dlg)

        meta = QLabel(f"Version: {cat.version}   •   Path: {CATALOG_PATH}")
        meta.setStyleSheet("color:#555;")
        lay.addWidget(meta)

        tbl = QTableWidget(len(cat), 6)
        tbl.setHorizontalHeaderLabels(["Key", "Item", "Section", "Description", "Unit", "Price"])
        tbl.setEditTriggers(QAbstractItemView.NoEditTriggers)
        hdr = tbl.horizontalHeader()
        for col in range(6):
            hdr.setSectionResizeMode(col, QHeaderView.Stretch if col == 3 else QHeaderView.ResizeToContents)
        for r, e in enumerate(cat):
            for col, text in enumerate((e.key, e.label, e.section.title, e.desc, e.uom, format_money(e.price))):
                tbl.setItem(r, col, QTableWidgetItem(text))
        lay.addWidget(tbl)

        reload_btn = QPushButton("Reload Catalog")
        reload_btn.clicked.connect(self.on_reload_catalog)
        close_btn = QPushButton("Close")
        close_btn.clicked.connect(dlg.accept)
        lay.addWidget(reload_btn)
        lay.addWidget(close_btn)

        dlg.resize(760, 560)
        dlg.exec()

    def open_price_editor(self):
        dlg = PriceEditorDialog(self, self.engine.catalog, CATALOG_PATH)
        if dlg.exec() == QDialog.Accepted and dlg.updated is not None:
            self._use_catalog(dlg.updated)
            self._status(f"Wrote updated prices to {CATALOG_PATH}")


def main() -> int:
    app = QApplication.instance() or QApplication(sys.argv)
    try:
        cat = load_catalog()
    except (FileNotFoundError, CatalogError) as e:
        lorekeeper.log_error("catalog load failed", e)
        QMessageBox.critical(None, "Catalog Load Error", str(e))
        return 1

    lorekeeper.log_app_event("app_started", [f"catalog=v{cat.version}", f"items={len(cat)}"])
    w = Main(cat)
    w.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
