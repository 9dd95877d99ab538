"""
PrefsEditorPage — property-grid editor for a PrefsStore.

Layout
──────
  ┌──────────────────────────────────────────────┐
  │ ┌──────────────────────────────────────────┐ │
  │ │ Key              │ Type    │ Value       │ │
  │ │ editor.show_grid │ [Bool▾] │ true        │ │
  │ │ recent_scenes    │ [Set ▾] │ intro;outro │ │
  │ └──────────────────────────────────────────┘ │
  │ [↑] [↓] [-] [+]              [Sort] [Save]   │
  │ status line                                  │
  └──────────────────────────────────────────────┘

Key and Value cells are edited in place; the Type column is a drop-down.
Edits mark the store dirty and are written only by Save (or on close).
"""

import logging
from functools import partial

from PyQt6.QtCore import QTimer
from PyQt6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from project_prefs.gui.viewmodels import TYPE_NAMES, PrefsEditorViewModel
from project_prefs.store.prefs_store import PrefsStore

__all__ = ["PrefsEditorPage"]

logger = logging.getLogger(__name__)

# Column indices
_COL_KEY   = 0
_COL_TYPE  = 1
_COL_VALUE = 2
_HEADERS = ["Key", "Type", "Value"]

_SMALL_BUTTON_WIDTH = 28


class PrefsEditorPage(QWidget):
    """Table of records plus reorder / delete / add / sort / save buttons."""

    def __init__(self, store: PrefsStore, parent: QWidget = None) -> None:
        super().__init__(parent)
        self._vm = PrefsEditorViewModel(store)
        self._refreshing = False
        self._build_ui()
        self._refresh_table()

    @property
    def view_model(self) -> PrefsEditorViewModel:
        return self._vm

    # ── UI construction ────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        self._table = QTableWidget(0, len(_HEADERS))
        self._table.setHorizontalHeaderLabels(_HEADERS)
        self._table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self._table.setSelectionMode(QTableWidget.SelectionMode.SingleSelection)
        self._table.horizontalHeader().setStretchLastSection(True)
        self._table.itemChanged.connect(self._on_item_changed)
        layout.addWidget(self._table)

        btn_row = QHBoxLayout()
        self._up_btn     = self._small_button("↑", self._on_move_up)
        self._down_btn   = self._small_button("↓", self._on_move_down)
        self._delete_btn = self._small_button("-", self._on_delete)
        self._add_btn    = self._small_button("+", self._on_add)
        for btn in (self._up_btn, self._down_btn, self._delete_btn, self._add_btn):
            btn_row.addWidget(btn)
        btn_row.addStretch()
        self._sort_btn = QPushButton("Sort")
        self._sort_btn.clicked.connect(self._on_sort)
        self._save_btn = QPushButton("Save")
        self._save_btn.clicked.connect(self._on_save)
        btn_row.addWidget(self._sort_btn)
        btn_row.addWidget(self._save_btn)
        layout.addLayout(btn_row)

        self._status = QLabel("")
        layout.addWidget(self._status)

    def _small_button(self, text: str, slot) -> QPushButton:
        btn = QPushButton(text)
        btn.setFixedWidth(_SMALL_BUTTON_WIDTH)
        btn.clicked.connect(slot)
        return btn

    # ── Rendering ──────────────────────────────────────────────────────────

    def refresh(self) -> None:
        """Re-render rows and the status line from the view model."""
        self._refresh_table()

    def _refresh_table(self) -> None:
        records = self._vm.records
        self._refreshing = True
        try:
            self._table.setRowCount(len(records))
            for row, rec in enumerate(records):
                self._table.setItem(row, _COL_KEY,   QTableWidgetItem(rec.key))
                self._table.setItem(row, _COL_VALUE, QTableWidgetItem(rec.value))
                combo = QComboBox()
                combo.addItems(TYPE_NAMES)
                combo.setCurrentText(rec.type.value)
                combo.currentTextChanged.connect(partial(self._on_type_changed, row))
                self._table.setCellWidget(row, _COL_TYPE, combo)
            if self._vm.selected_index is not None:
                self._table.setCurrentCell(self._vm.selected_index, _COL_KEY)
        finally:
            self._refreshing = False
        self._status.setText(self._vm.status)

    def _schedule_refresh(self) -> None:
        # Cell widgets may be the signal sender; rebuild after the slot returns
        QTimer.singleShot(0, self._refresh_table)

    def _current_row(self) -> int:
        return self._table.currentRow()

    # ── Slots ──────────────────────────────────────────────────────────────

    def _on_item_changed(self, item: QTableWidgetItem) -> None:
        if self._refreshing:
            return
        row, col = item.row(), item.column()
        if col == _COL_KEY:
            self._vm.rename(row, item.text())
        elif col == _COL_VALUE:
            self._vm.set_value(row, item.text())
        self._schedule_refresh()

    def _on_type_changed(self, row: int, type_name: str) -> None:
        if self._refreshing:
            return
        self._vm.set_type(row, type_name)
        self._schedule_refresh()

    def _on_move_up(self) -> None:
        row = self._current_row()
        if row >= 0:
            self._vm.move_up(row)
            self._refresh_table()

    def _on_move_down(self) -> None:
        row = self._current_row()
        if row >= 0:
            self._vm.move_down(row)
            self._refresh_table()

    def _on_delete(self) -> None:
        row = self._current_row()
        if row >= 0:
            self._vm.delete(row)
            self._refresh_table()

    def _on_add(self) -> None:
        self._vm.add_record()
        self._refresh_table()

    def _on_sort(self) -> None:
        self._vm.sort_all()
        self._refresh_table()

    def _on_save(self) -> None:
        self._vm.save()
        self._refresh_table()
