"""Remove fields whose value matches a sentinel."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, List


def _values(values: Any) -> List[Any]:
    return list(values) if isinstance(values, (list, tuple)) else [values]


def matches(value: Any, sentinel: Any) -> bool:
    """Strict match: same type and equal, so 0 never matches False."""
    if value is sentinel:
        return True
    return type(value) is type(sentinel) and value == sentinel


def strip(values: Any, data: Mapping) -> Dict[str, Any]:
    """Return a copy of `data` without the keys whose value matches one of `values`.

    `values` is a single sentinel or a list of them. `data` is not modified.
    """
    sentinels = _values(values)
    return {
        key: value for key, value in data.items()
        if not any(matches(value, sentinel) for sentinel in sentinels)
    }
