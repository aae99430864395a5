"""Computed field values.

A ``generate`` declaration is either a zero-argument callable, or a mapping:

```python
{
    "ops": [normalize, {"fn": pad, "args": [8]}],  # one op or a sequence of ops
    "preserve": True,   # keep an existing non-empty value
    "require": True,    # only run when the key is present on the input data
    "once": True,       # only run when the format call enables once-gated generators
}
```

The first op receives the field's current value (``None`` when absent) and every later
op receives the previous op's output, followed by that op's declared ``args``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, List, Tuple

from .errors import SchemaError
from .predicates import MISSING, is_array, is_empty


def _ops(config: Mapping) -> List[Tuple[Any, list]]:
    ops = config.get("ops")
    if ops is None:
        return []
    if callable(ops) or isinstance(ops, Mapping):
        ops = [ops]

    chain = []
    for op in ops:
        if callable(op):
            chain.append((op, []))
        elif isinstance(op, Mapping) and callable(op.get("fn")):
            args = op.get("args", [])
            chain.append((op["fn"], list(args) if is_array(args) else [args]))
        else:
            raise SchemaError(f"Invalid generator op: {op!r}")
    return chain


def run_generator(config: Any, value: Any, *, present: bool, run_once: bool) -> Any:
    """Compute a field's value from its `generate` declaration.

    Args:
        config: The field's `generate` declaration.
        value: The field's current value (MISSING when absent).
        present: Whether the field key is on the input data.
        run_once: Whether once-gated generators should run on this call.

    Returns:
        The generated value, or `value` unchanged when the generator is gated off.
    """
    if callable(config):
        return config()
    if not isinstance(config, Mapping):
        raise SchemaError(f"Invalid generate declaration: {config!r}")

    if config.get("preserve") and not is_empty(value):
        return value
    if config.get("require") and not present:
        return value
    if config.get("once") and not run_once:
        return value

    chain = _ops(config)
    if not chain:
        return value

    result = None if value is MISSING else value
    for fn, args in chain:
        result = fn(result, *args)
    return result
