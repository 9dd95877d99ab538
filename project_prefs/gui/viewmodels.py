"""
GUI ViewModels — pure-Python state containers for the preference editor.

No Qt imports here; every class is testable without a display.
Qt widgets read these objects and re-render after each call.

Public API
──────────
PrefsEditorViewModel — row list, selection and edit commands over a PrefsStore
"""

import logging
from typing import Optional

from project_prefs.exceptions import PrefsBaseError, StoreError
from project_prefs.store.models import Record, RecordType
from project_prefs.store.prefs_store import PrefsStore

__all__ = ["PrefsEditorViewModel", "TYPE_NAMES"]

logger = logging.getLogger(__name__)

# Order of entries in the type drop-down
TYPE_NAMES = [t.value for t in RecordType]


class PrefsEditorViewModel:
    """
    Backs the property-grid editor.

    Every edit is forwarded to the store's editing surface, which only marks
    the store dirty; nothing reaches the disk until save() is called.

    Attributes
    ──────────
    selected_index — row the user last acted on, or None
    status         — last user-facing message (errors from rejected edits)
    records        — derived: the store's records in display order
    dirty          — derived: unsaved edits exist
    """

    def __init__(self, store: PrefsStore) -> None:
        self._store = store
        self.selected_index: Optional[int] = None
        self.status:         str           = ""

    @property
    def store(self) -> PrefsStore:
        return self._store

    @property
    def records(self) -> list[Record]:
        return self._store.records

    @property
    def dirty(self) -> bool:
        return self._store.dirty

    # ── Row commands ──────────────────────────────────────────────────────

    def add_record(self) -> Record:
        """Append a blank record with a unique 'NewRecord…' key and select it."""
        record = self._store.add_blank_record()
        self.selected_index = len(self._store) - 1
        self.status = f"Added {record.key}"
        return record

    def move_up(self, index: int) -> None:
        self.selected_index = self._store.move_record(index, -1)
        self.status = ""

    def move_down(self, index: int) -> None:
        self.selected_index = self._store.move_record(index, 1)
        self.status = ""

    def delete(self, index: int) -> None:
        """Remove the row at *index*; the selection stays on the same record."""
        record = self._store.remove_record_at(index)
        self.status = f"Deleted {record.key}"
        if not len(self._store):
            self.selected_index = None
        elif self.selected_index is not None:
            if index < self.selected_index:
                self.selected_index -= 1
            self.selected_index = min(self.selected_index, len(self._store) - 1)

    def sort_all(self) -> None:
        self._store.sort_records()
        self.selected_index = None
        self.status = "Sorted"

    # ── Cell edits ────────────────────────────────────────────────────────

    def rename(self, index: int, key: str) -> bool:
        """Rename the record at *index*. Returns False (and sets status) if rejected."""
        try:
            self._store.rename_record(index, key)
        except PrefsBaseError as exc:
            self.status = str(exc)
            return False
        self.selected_index = index
        self.status = ""
        return True

    def set_type(self, index: int, type_name: str) -> None:
        self._store.retype_record(index, RecordType(type_name))
        self.selected_index = index
        self.status = ""

    def set_value(self, index: int, text: str) -> bool:
        """Store *text* as the value at *index*. Returns False (and sets status) if invalid."""
        record = self._store.records[index]
        try:
            self._store.edit_record_value(index, text)
        except ValueError as exc:
            self.status = f"Invalid {record.type.value} value for {record.key}: {exc}"
            logger.debug("Rejected value %r for %s", text, record.key)
            return False
        self.selected_index = index
        self.status = ""
        return True

    # ── Persistence ───────────────────────────────────────────────────────

    def save(self) -> bool:
        """Flush all pending edits to disk. Returns False (and sets status) on failure."""
        try:
            self._store.save()
        except StoreError as exc:
            logger.error("Saving preferences failed: %s", exc)
            self.status = f"Save failed: {exc}"
            return False
        self.status = f"Saved {len(self._store)} preferences"
        return True
