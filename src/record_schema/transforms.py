"""Named value transforms applied during formatting.

Built-in transforms are collected into a module-level registry by a decorator, and every
``TransformRegistry`` instance starts from a copy of it. Registering on an instance never
leaks into other instances.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, List, Sequence, Union

from .casters import CASTERS
from .predicates import MISSING

logger = logging.getLogger(__name__)

Transform = Callable[[Any], Any]

_builtin_transforms: Dict[str, Transform] = {}


def _register_transform(name: str):
    """Decorator to register a built-in transform."""
    def decorator(func: Transform):
        _builtin_transforms[name] = func
        return func
    return decorator


class TransformRegistry:
    """Registry of named transforms, pre-populated with the built-ins."""

    def __init__(self) -> None:
        self.__transforms: Dict[str, Transform] = dict(_builtin_transforms)

    def register(self, name: str, fn: Transform) -> None:
        """Register (or replace) the transform `name`."""
        if not callable(fn):
            raise TypeError(f"Transform '{name}' must be callable, got {type(fn).__name__}")
        if name in self.__transforms:
            logger.info("Replacing transform '%s'", name)
        self.__transforms[name] = fn
        logger.debug("Registered transform '%s'", name)

    def get(self, name: str):
        return self.__transforms.get(name)

    def list(self) -> List[str]:
        return list(self.__transforms)

    # Alias used by older callers
    available = list

    def __contains__(self, name: object) -> bool:
        return name in self.__transforms

    def apply(self, value: Any, names: Union[str, Sequence[str], None]) -> Any:
        """Apply the named transforms to `value` in order.

        MISSING values pass through untouched. Unknown names are skipped.
        """
        if not names or value is MISSING:
            return value
        if isinstance(names, str):
            names = [names]

        for name in names:
            fn = self.__transforms.get(name)
            if fn is None:
                logger.debug("Skipping unknown transform '%s'", name)
                continue
            value = fn(value)
        return value


# ----------------------------- Built-in transforms -----------------------------

@_register_transform("trim")
def _trim(value: Any) -> Any:
    """Remove whitespace from start and end of a string."""
    return value.strip() if isinstance(value, str) else value


@_register_transform("nowhite")
def _nowhite(value: Any) -> Any:
    """Remove all whitespace from a string."""
    return re.sub(r"\s+", "", value) if isinstance(value, str) else value


@_register_transform("uppercase")
def _uppercase(value: Any) -> Any:
    return value.upper() if isinstance(value, str) else value


@_register_transform("lowercase")
def _lowercase(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


# Casters are exposed as 'to<Type>' transforms
for _name, _caster in CASTERS.items():
    _register_transform(_name)(_caster)
