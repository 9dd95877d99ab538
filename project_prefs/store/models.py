"""Data models for the store module."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from project_prefs.store import codec

__all__ = ["RecordType", "Record"]


class RecordType(str, Enum):
    """
    Type tag of a stored value.

    The enum values are the tags written to the backing file.  Each member
    knows how to turn a Python value into its canonical string and back.
    """
    BOOL   = "Bool"
    INT    = "Int"
    FLOAT  = "Float"
    STRING = "String"
    SET    = "Set"

    @classmethod
    def for_value(cls, value: Any) -> "RecordType":
        """Infer the tag for a Python value (bool is checked before int)."""
        if isinstance(value, bool):
            return cls.BOOL
        if isinstance(value, int):
            return cls.INT
        if isinstance(value, float):
            return cls.FLOAT
        if isinstance(value, str):
            return cls.STRING
        if isinstance(value, (list, tuple, set, frozenset)):
            return cls.SET
        raise TypeError(f"No record type for values of type {type(value).__name__}")

    def format_value(self, value: Any) -> str:
        """Encode *value* as this type's canonical string."""
        return _FORMATTERS[self](value)

    def parse_value(self, text: str) -> Any:
        """
        Decode a stored string.

        Raises:
            ValueError: *text* is not a valid encoding for this type.
        """
        return _PARSERS[self](text)

    @property
    def zero_value(self) -> str:
        """Encoded value of a freshly created record of this type."""
        return _ZERO_VALUES[self]

    def __str__(self) -> str:
        return self.value


_FORMATTERS = {
    RecordType.BOOL:   codec.format_bool,
    RecordType.INT:    codec.format_int,
    RecordType.FLOAT:  codec.format_float,
    RecordType.STRING: codec.format_string,
    RecordType.SET:    codec.encode_set,
}

_PARSERS = {
    RecordType.BOOL:   codec.parse_bool,
    RecordType.INT:    codec.parse_int,
    RecordType.FLOAT:  codec.parse_float,
    RecordType.STRING: codec.parse_string,
    RecordType.SET:    codec.decode_set,
}

_ZERO_VALUES = {
    RecordType.BOOL:   "false",
    RecordType.INT:    "0",
    RecordType.FLOAT:  "0.0",
    RecordType.STRING: "",
    RecordType.SET:    "",
}


@dataclass
class Record:
    """
    One persisted preference.

    Fields
    ──────
    key    — identifier, unique within a store
    type   — RecordType tag; changes only through an explicit overwrite
    value  — canonical string encoding of the value (see codec)
    """
    key:   str
    type:  RecordType = RecordType.BOOL
    value: str        = "false"

    def sort(self) -> None:
        """Sort a Set record's elements; other types are left untouched."""
        if self.type is not RecordType.SET:
            return
        self.value = codec.SET_SEPARATOR.join(sorted(codec.decode_set(self.value)))

    def to_dict(self) -> dict:
        return {"key": self.key, "type": self.type.value, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict) -> "Record":
        """
        Build a Record from its persisted form.

        Raises:
            ValueError: missing/empty key, unknown type tag, or non-string value.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Record entry must be an object, got {type(data).__name__}")
        key = data.get("key")
        if not isinstance(key, str) or not key:
            raise ValueError(f"Record has a missing or empty key: {data!r}")
        record_type = RecordType(data.get("type"))
        value = data.get("value", "")
        if not isinstance(value, str):
            raise ValueError(f"Record {key!r} has a non-string value: {value!r}")
        return cls(key=key, type=record_type, value=value)

    def __str__(self) -> str:
        return f"Record(key={self.key!r}, type={self.type.value}, value={self.value!r})"
