"""Best-effort casters to the primitive types.

Casters never raise. A numeric cast that cannot produce a number returns NaN and a
date cast returns ``INVALID_DATE``; turning those into errors is left to validation.

Exports
-------
CASTERS
    Dictionary mapping ``to<Type>`` names to caster functions. Every entry is also
    registered as a transform.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict

from .predicates import MISSING, is_number

NAN = float("nan")
INVALID_DATE = "Invalid Date"

_FALSE_STRINGS = {"false", "0", "no", "off", ""}


def to_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None or value is MISSING:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def to_number(value: Any) -> float:
    """Numeric strings become int or float; booleans become 1/0; else NaN."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return NAN
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return NAN
    return NAN


def to_float(value: Any) -> float:
    number = to_number(value)
    return float(number)


def to_integer(value: Any) -> int:
    """Truncates toward zero. Non-numeric and infinite values give NaN."""
    number = to_number(value)
    if not is_number(number) or not math.isfinite(number):
        return NAN
    return int(number)


def to_boolean(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    if value is MISSING:
        return False
    return bool(value)


def to_date(value: Any) -> str:
    """ISO-8601 string for dates, epoch seconds and ISO strings; else INVALID_DATE."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if is_number(value):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc).isoformat()
        except (OverflowError, OSError, ValueError):
            return INVALID_DATE
    if isinstance(value, str) and value.strip():
        text = value.strip()
        # Replace 'Z' with '+00:00' to use datetime.fromisoformat
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            return datetime.fromisoformat(text).isoformat()
        except ValueError:
            return INVALID_DATE
    return INVALID_DATE


CASTERS: Dict[str, Callable[[Any], Any]] = {
    "toString": to_string,
    "toNumber": to_number,
    "toFloat": to_float,
    "toInteger": to_integer,
    "toBoolean": to_boolean,
    "toDate": to_date,
}
