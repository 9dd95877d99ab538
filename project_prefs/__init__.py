"""
project_prefs — typed key/value preferences stored in one JSON file.

    from project_prefs import PrefsStore

    with PrefsStore.open("prefs.json", default_revision=1) as prefs:
        prefs.set_bool("show_grid", True)
        width = prefs.get_int("window_width", 1024)
"""

from project_prefs.config import PrefsConfig, open_store
from project_prefs.store import PrefsStore, Record, RecordType

__all__ = ["PrefsConfig", "PrefsStore", "Record", "RecordType", "open_store"]

__version__ = "0.1.0"
