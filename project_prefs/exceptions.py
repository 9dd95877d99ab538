"""
Project-wide custom exception hierarchy.
All modules raise subclasses of PrefsBaseError — never bare Exception.
"""

__all__ = [
    "PrefsBaseError",
    "StoreError",
    "RecordTypeError",
    "InvalidKeyError",
    "DuplicateKeyError",
    "InvalidSetElementError",
]


class PrefsBaseError(Exception):
    """Root exception for all project-prefs errors."""


# ── Store ─────────────────────────────────────────────────────────────────────

class StoreError(PrefsBaseError):
    """Raised when the backing file cannot be read, parsed or written."""


# ── Records ───────────────────────────────────────────────────────────────────

class RecordTypeError(PrefsBaseError, AssertionError):
    """
    Raised when a typed accessor is used on a record of another type.

    This is a programming error (asking for the wrong type for a key), so it
    derives from AssertionError and is not meant to be handled by callers.
    """


class InvalidKeyError(PrefsBaseError, ValueError):
    """Raised when a record key is empty or not a string."""


class DuplicateKeyError(PrefsBaseError, ValueError):
    """Raised when a rename would give two records the same key."""


class InvalidSetElementError(PrefsBaseError, ValueError):
    """Raised when a set element is empty or contains the ';' separator."""
