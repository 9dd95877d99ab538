"""
Canonical string encodings for stored preference values.

Every record value is persisted as a single string.  Scalars use their
canonical text form; sets are ';'-joined element lists with no escaping,
so elements may not be empty or contain the separator.
"""

import operator
import re
from typing import Iterable

from project_prefs.exceptions import InvalidSetElementError

__all__ = [
    "SET_SEPARATOR",
    "validate_set_element",
    "decode_set",
    "encode_set",
    "format_bool",
    "parse_bool",
    "format_int",
    "parse_int",
    "format_float",
    "parse_float",
    "format_string",
    "parse_string",
]

SET_SEPARATOR = ";"

# Canonical decimal forms; [0-9] keeps digits ASCII-only
_INT_RE = re.compile(r"\s*[+-]?[0-9]+\s*")
_FLOAT_RE = re.compile(
    r"\s*[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)\s*",
    re.IGNORECASE,
)


# ── Sets ──────────────────────────────────────────────────────────────────────

def validate_set_element(element: str) -> str:
    """Return *element* unchanged, or raise InvalidSetElementError."""
    if not isinstance(element, str):
        raise InvalidSetElementError(
            f"Set elements must be strings, got {type(element).__name__}"
        )
    if not element:
        raise InvalidSetElementError("Set elements must not be empty")
    if SET_SEPARATOR in element:
        raise InvalidSetElementError(
            f"Set element {element!r} contains the separator {SET_SEPARATOR!r}"
        )
    return element


def decode_set(text: str) -> list[str]:
    """Split an encoded set into its elements, dropping empty segments."""
    return [part for part in text.split(SET_SEPARATOR) if part]


def encode_set(elements: Iterable[str]) -> str:
    """
    Join *elements* into the stored form.

    Duplicates are dropped (first occurrence wins) and every element is
    validated first, so a bad element never produces a half-written value.
    """
    if isinstance(elements, str):
        raise TypeError("Set value must be an iterable of strings, not a str")
    unique: list[str] = []
    for element in elements:
        validate_set_element(element)
        if element not in unique:
            unique.append(element)
    return SET_SEPARATOR.join(unique)


# ── Scalars ───────────────────────────────────────────────────────────────────

def format_bool(value: bool) -> str:
    return "true" if value else "false"


def parse_bool(text: str) -> bool:
    """Accept 'true' / 'false' in any case, ignoring surrounding whitespace."""
    word = text.strip().lower()
    if word == "true":
        return True
    if word == "false":
        return False
    raise ValueError(f"Not a boolean: {text!r}")


def format_int(value: int) -> str:
    # operator.index rejects floats and numeric strings instead of truncating
    return str(operator.index(value))


def parse_int(text: str) -> int:
    """Accept plain ASCII decimal only ('1_000' and non-ASCII digits are rejected)."""
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"Not a decimal integer: {text!r}")
    return int(text)


def format_float(value: float) -> str:
    return repr(float(value))


def parse_float(text: str) -> float:
    if not _FLOAT_RE.fullmatch(text):
        raise ValueError(f"Not a decimal number: {text!r}")
    return float(text)


def format_string(value: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"Expected str, got {type(value).__name__}")
    return value


def parse_string(text: str) -> str:
    return text
