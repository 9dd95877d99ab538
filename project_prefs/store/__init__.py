"""
store — typed preference records persisted to a single JSON file.

Public API
──────────
RecordType  — tag of a stored value (Bool, Int, Float, String, Set)
Record      — dataclass for one key / type / encoded value
PrefsStore  — typed accessors, set helpers, editing surface, persistence
"""

from project_prefs.store.models import Record, RecordType
from project_prefs.store.prefs_store import PrefsStore

__all__ = ["Record", "RecordType", "PrefsStore"]
