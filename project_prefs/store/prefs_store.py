"""
PrefsStore — JSON-file-backed store of typed preference records.

Usage::

    with PrefsStore.open("~/.project-prefs/prefs.json", default_revision=3) as prefs:
        if prefs.get_bool("show_grid", True):
            draw_grid()

        prefs.set_int("window_width", 1280)
        prefs.add_to_set("recent_scenes", "intro")

        # Several writes, one flush
        with prefs.batch():
            prefs.set_string("theme", "dark")
            prefs.set_float("zoom", 1.25)

Every mutating accessor (set_*, add_to_set, remove_from_set, delete_key)
writes the file before returning unless a batch() is open.  The editing
surface used by the editor and CLI (move/rename/retype/sort ...) only marks
the store dirty; call save() when the edits are done.
"""

import json
import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Union

from project_prefs.exceptions import (
    DuplicateKeyError,
    InvalidKeyError,
    RecordTypeError,
    StoreError,
)
from project_prefs.store import codec
from project_prefs.store.models import Record, RecordType

__all__ = ["PrefsStore"]

logger = logging.getLogger(__name__)

# Revision written by stores that predate revision stamping
_UNSET_REVISION = -1


def _check_key(key: str) -> None:
    if not isinstance(key, str) or not key:
        raise InvalidKeyError(f"Preference keys must be non-empty strings, got {key!r}")


def _assert_type(record: Record, expected: RecordType) -> None:
    if record.type is not expected:
        raise RecordTypeError(
            f"Preference {record.key!r} is stored as {record.type.value}, "
            f"not {expected.value}"
        )


def _read_file(path: Path) -> tuple[int, list[Record]]:
    """Parse the backing file. Raises StoreError on any structural problem."""
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise StoreError(f"Cannot read preference store {path}: {exc}") from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise StoreError(f"Preference store {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise StoreError(f"Preference store {path}: root is not an object")

    revision = data.get("revision", _UNSET_REVISION)
    if isinstance(revision, bool) or not isinstance(revision, int):
        raise StoreError(f"Preference store {path}: revision must be an integer")

    entries = data.get("records", [])
    if not isinstance(entries, list):
        raise StoreError(f"Preference store {path}: records must be a list")

    records: list[Record] = []
    for index, entry in enumerate(entries):
        try:
            records.append(Record.from_dict(entry))
        except ValueError as exc:
            raise StoreError(f"Preference store {path}: record #{index}: {exc}") from exc
    return revision, records


def _merge_duplicates(records: list[Record]) -> tuple[list[Record], int]:
    """Keep the first record for each key. Returns (records, dropped_count)."""
    seen: set[str] = set()
    kept: list[Record] = []
    for record in records:
        if record.key in seen:
            logger.warning(
                "Dropping duplicate preference %r (type=%s, value=%r); "
                "the first entry for this key is kept",
                record.key, record.type.value, record.value,
            )
            continue
        seen.add(record.key)
        kept.append(record)
    return kept, len(records) - len(kept)


class PrefsStore:
    """
    Ordered collection of typed records plus a revision tag, persisted to
    one JSON file.

    Obtain instances through PrefsStore.open(); the constructor only builds
    the in-memory state and never touches the disk.
    """

    def __init__(
        self,
        path: Union[str, Path],
        revision: int = _UNSET_REVISION,
        records: Optional[Iterable[Record]] = None,
    ) -> None:
        self._path = Path(path).expanduser()
        self._revision = revision
        self._records, dropped = _merge_duplicates(list(records or []))
        self._dirty = dropped > 0
        self._batch_depth = 0
        self._flush_count = 0

    # ── Lifecycle ─────────────────────────────────────────────────────────

    @classmethod
    def open(cls, path: Union[str, Path], default_revision: int = 0) -> "PrefsStore":
        """
        Load the store at *path*, creating it if it does not exist.

        A new store is stamped with *default_revision* and written straight
        away so that later opens find it.

        Raises:
            StoreError: the file exists but cannot be read or is malformed.
        """
        file_path = Path(path).expanduser()
        if not file_path.exists():
            store = cls(file_path, revision=default_revision)
            store._flush()
            logger.info("Created preference store %s (revision %d)",
                        file_path, default_revision)
            return store

        revision, records = _read_file(file_path)
        store = cls(file_path, revision=revision, records=records)
        logger.debug("Loaded %d preference(s) from %s", len(store), file_path)
        return store

    def save(self) -> None:
        """Write pending changes to disk (no-op when nothing changed)."""
        if self._dirty:
            self._flush()

    def close(self) -> None:
        """Flush pending changes. The handle stays usable afterwards."""
        self.save()

    def __enter__(self) -> "PrefsStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @contextmanager
    def batch(self) -> Iterator["PrefsStore"]:
        """
        Defer flushing until the outermost batch exits.

        The flush also happens when the block raises, so writes applied
        before the error are kept.  A flush failure in that case is logged
        and the block's own exception propagates.
        """
        self._batch_depth += 1
        try:
            yield self
        except BaseException:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                try:
                    self.save()
                except StoreError:
                    logger.exception("Could not save batched preference changes")
            raise
        else:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                self.save()

    # ── Internal helpers ──────────────────────────────────────────────────

    def _flush(self) -> None:
        payload = {
            "revision": self._revision,
            "records": [record.to_dict() for record in self._records],
        }
        text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(text, encoding="utf-8")
            os.replace(tmp, self._path)
        except OSError as exc:
            raise StoreError(f"Cannot write preference store {self._path}: {exc}") from exc
        self._dirty = False
        self._flush_count += 1
        logger.debug("Flushed %d preference(s) to %s", len(self._records), self._path)

    def _commit(self) -> None:
        """Single exit point for every mutating accessor."""
        self._dirty = True
        if self._batch_depth == 0:
            self._flush()

    def _typed_get(self, key: str, expected: RecordType, default: Any) -> Any:
        record = self.get_record(key)
        if record is None:
            return default
        _assert_type(record, expected)
        try:
            return expected.parse_value(record.value)
        except ValueError:
            logger.warning(
                "Cannot parse %r as %s for preference %r; using default %r",
                record.value, expected.value, key, default,
            )
            return default

    def _typed_set(self, key: str, record_type: RecordType, value: Any) -> None:
        self.set_record(key, record_type, record_type.format_value(value))

    def _record_at(self, index: int) -> Record:
        if not 0 <= index < len(self._records):
            raise IndexError(f"No preference at index {index}")
        return self._records[index]

    # ── Properties ────────────────────────────────────────────────────────

    @property
    def path(self) -> Path:
        return self._path

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def records(self) -> list[Record]:
        """Snapshot of the ordered record list. Mutate through the store."""
        return list(self._records)

    @property
    def dirty(self) -> bool:
        """True when there are changes not yet written to disk."""
        return self._dirty

    @property
    def flush_count(self) -> int:
        """Number of times this handle has written the file."""
        return self._flush_count

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has_key(key)

    def __iter__(self) -> Iterator[Record]:
        return iter(list(self._records))

    def __repr__(self) -> str:
        return (
            f"PrefsStore(path={str(self._path)!r}, revision={self._revision}, "
            f"records={len(self._records)})"
        )

    # ── Record access ─────────────────────────────────────────────────────

    def get_record(self, key: str) -> Optional[Record]:
        """Return the record stored under *key*, or None on a miss."""
        return next((r for r in self._records if r.key == key), None)

    def set_record(self, key: str, record_type: RecordType, value: str) -> None:
        """
        Store an already-encoded *value* under *key*.

        Overwrites the type and value of an existing record in place, or
        appends a new record.  Writing the same type and value again does
        nothing (no dirty marking, no flush).
        """
        _check_key(key)
        record_type = RecordType(record_type)
        if not isinstance(value, str):
            raise TypeError(f"Encoded value must be a str, got {type(value).__name__}")

        record = self.get_record(key)
        if record is not None:
            if record.type is record_type and record.value == value:
                return
            record.type = record_type
            record.value = value
        else:
            self._records.append(Record(key=key, type=record_type, value=value))
        self._commit()

    def has_key(self, key: str) -> bool:
        return any(r.key == key for r in self._records)

    def delete_key(self, key: str) -> None:
        """Remove the record(s) stored under *key*; a miss is a no-op."""
        remaining = [r for r in self._records if r.key != key]
        if len(remaining) == len(self._records):
            return
        self._records = remaining
        self._commit()

    # ── Typed accessors ───────────────────────────────────────────────────

    def get_bool(self, key: str, default: bool) -> bool:
        return self._typed_get(key, RecordType.BOOL, default)

    def set_bool(self, key: str, value: bool) -> None:
        self._typed_set(key, RecordType.BOOL, value)

    def get_int(self, key: str, default: int) -> int:
        return self._typed_get(key, RecordType.INT, default)

    def set_int(self, key: str, value: int) -> None:
        self._typed_set(key, RecordType.INT, value)

    def get_float(self, key: str, default: float) -> float:
        return self._typed_get(key, RecordType.FLOAT, default)

    def set_float(self, key: str, value: float) -> None:
        self._typed_set(key, RecordType.FLOAT, value)

    def get_string(self, key: str, default: str) -> str:
        return self._typed_get(key, RecordType.STRING, default)

    def set_string(self, key: str, value: str) -> None:
        self._typed_set(key, RecordType.STRING, value)

    def get_value(self, key: str, default: Any = None) -> Any:
        """Decode the record under *key* according to whatever type it has."""
        record = self.get_record(key)
        if record is None:
            return default
        try:
            return record.type.parse_value(record.value)
        except ValueError:
            logger.warning(
                "Cannot parse %r as %s for preference %r; using default %r",
                record.value, record.type.value, key, default,
            )
            return default

    def set_value(self, key: str, value: Any) -> None:
        """Store *value*, picking the record type from its Python type."""
        self._typed_set(key, RecordType.for_value(value), value)

    # ── Sets ──────────────────────────────────────────────────────────────

    def get_set(self, key: str, default: Optional[list[str]]) -> Optional[list[str]]:
        return self._typed_get(key, RecordType.SET, default)

    def set_set(self, key: str, values: Iterable[str]) -> None:
        """Replace the whole set; duplicates collapse to their first occurrence."""
        self._typed_set(key, RecordType.SET, values)

    def set_contains(self, key: str, value: str) -> bool:
        elements = self.get_set(key, None)
        return elements is not None and value in elements

    def add_to_set(self, key: str, value: str) -> None:
        """Append *value* to the set under *key*, creating the set if needed."""
        codec.validate_set_element(value)
        record = self.get_record(key)
        if record is None:
            self.set_record(key, RecordType.SET, value)
            return

        _assert_type(record, RecordType.SET)
        elements = codec.decode_set(record.value)
        if value in elements:
            return
        elements.append(value)
        self.set_record(key, RecordType.SET, codec.encode_set(elements))

    def remove_from_set(self, key: str, value: str) -> None:
        """Remove every occurrence of *value*; a missing key is a no-op."""
        record = self.get_record(key)
        if record is None:
            return

        _assert_type(record, RecordType.SET)
        elements = [e for e in codec.decode_set(record.value) if e != value]
        self.set_record(key, RecordType.SET, codec.encode_set(elements))

    # ── Editing surface (marks dirty; caller saves) ───────────────────────

    def unique_key(self, base_key: str = "NewRecord") -> str:
        """Return *base_key*, suffixed with '+' until no record uses it."""
        key = base_key
        while self.has_key(key):
            key += "+"
        return key

    def add_blank_record(self, base_key: str = "NewRecord") -> Record:
        """Append a Bool record under a fresh key derived from *base_key*."""
        _check_key(base_key)
        record = Record(key=self.unique_key(base_key))
        self._records.append(record)
        self._dirty = True
        return record

    def move_record(self, index: int, offset: int) -> int:
        """
        Swap the record at *index* with its neighbour (*offset* is -1 or +1).

        Moving past either end leaves the order unchanged.

        Returns:
            The record's index after the move.
        """
        if offset not in (-1, 1):
            raise ValueError(f"offset must be -1 or 1, got {offset}")
        self._record_at(index)
        target = index + offset
        if not 0 <= target < len(self._records):
            return index
        records = self._records
        records[index], records[target] = records[target], records[index]
        self._dirty = True
        return target

    def remove_record_at(self, index: int) -> Record:
        record = self._record_at(index)
        del self._records[index]
        self._dirty = True
        return record

    def rename_record(self, index: int, new_key: str) -> None:
        """
        Change the key of the record at *index*.

        Raises:
            InvalidKeyError:   *new_key* is empty.
            DuplicateKeyError: another record already uses *new_key*.
        """
        _check_key(new_key)
        record = self._record_at(index)
        if record.key == new_key:
            return
        if self.has_key(new_key):
            raise DuplicateKeyError(f"A preference named {new_key!r} already exists")
        record.key = new_key
        self._dirty = True

    def retype_record(self, index: int, new_type: RecordType) -> None:
        """
        Change the type of the record at *index*.

        The value is kept (re-encoded) if it parses as *new_type*; otherwise
        it is reset to that type's zero value.
        """
        new_type = RecordType(new_type)
        record = self._record_at(index)
        if record.type is new_type:
            return
        try:
            value = new_type.format_value(new_type.parse_value(record.value))
        except ValueError:
            value = new_type.zero_value
        record.type = new_type
        record.value = value
        self._dirty = True

    def edit_record_value(self, index: int, text: str) -> None:
        """
        Replace the value of the record at *index* with *text*, normalised
        to the record's canonical encoding.

        Raises:
            ValueError: *text* does not parse as the record's type.
        """
        record = self._record_at(index)
        value = record.type.format_value(record.type.parse_value(text))
        if value == record.value:
            return
        record.value = value
        self._dirty = True

    def sort_records(self) -> None:
        """Order records by key and sort the elements of every Set record."""
        before = [r.to_dict() for r in self._records]
        self._records.sort(key=lambda r: r.key)
        for record in self._records:
            record.sort()
        if [r.to_dict() for r in self._records] != before:
            self._dirty = True
