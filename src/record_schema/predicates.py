"""Type identity checks shared by casters, rules and both engines."""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any


class _Missing:
    """Marker for an absent value (a key not present on the data)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


MISSING = _Missing()


def is_object(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_number(value: Any) -> bool:
    """True for int/float (never bool, never NaN)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def is_integer(value: Any) -> bool:
    if not is_number(value):
        return False
    return isinstance(value, int) or (math.isfinite(value) and float(value).is_integer())


def is_date(value: Any) -> bool:
    if isinstance(value, (date, datetime)):
        return True
    if not isinstance(value, str) or not value:
        return False
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    try:
        datetime.fromisoformat(value)
        return True
    except ValueError:
        return False


def type_of(value: Any) -> str:
    """Classify `value` into a type tag."""
    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if is_array(value):
        return "array"
    if is_object(value):
        return "object"
    if isinstance(value, (date, datetime)):
        return "date"
    if callable(value):
        return "function"
    return type(value).__name__.lower()


_TYPE_CHECKS = {
    "string": lambda v: isinstance(v, str),
    "boolean": lambda v: isinstance(v, bool),
    "number": is_number,
    "integer": is_integer,
    "float": is_number,
    "array": is_array,
    "object": is_object,
    "date": is_date,
}

PRIMITIVE_TYPES = tuple(_TYPE_CHECKS)


def is_type(value: Any, tag: str) -> bool:
    """Check `value` against a primitive type tag. Unknown tags raise KeyError."""
    return _TYPE_CHECKS[tag](value)


def is_empty(value: Any) -> bool:
    """MISSING, None, '' and empty arrays/objects are empty. 0 and False are not."""
    if value is MISSING or value is None:
        return True
    if isinstance(value, (str, list, tuple, Mapping)):
        return len(value) == 0
    return False
