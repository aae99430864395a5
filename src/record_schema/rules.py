"""
Rule predicates used by validation.

Every predicate is called as ``fn(value, *args, context=context)`` and returns a bool.
``context`` is the full sibling record being validated (or ``None`` for a standalone
value), which lets a rule look at other fields:

```python
def below_ceiling(value, context=None):
    return value < (context or {}).get("ceiling", 0)

validate({"level": {"rules": {"belowCeiling": below_ceiling}}, "ceiling": {}},
         {"level": 3, "ceiling": 5})
```

Rule configuration in a field spec (``rules: {name: config}``) is normalized into the
argument list by ``normalize_args``:

- a mapping supplies ``limits`` (checked first) or ``args``
- a list or tuple is the argument list itself
- any other value is wrapped as a single argument (``{"min": 5}`` -> ``min(v, 5)``)

Built-ins never raise on a value of the wrong kind; they fail instead. Custom predicates
are not guarded and their exceptions reach the caller. A config that does not supply the
arguments a rule takes (``{"min": {}}``) raises ``SchemaError``.
"""

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Sequence

from .config import FAILED_MESSAGE, UNKNOWN_MESSAGE
from .errors import SchemaError
from .predicates import is_array, is_empty, is_number

logger = logging.getLogger(__name__)

Rule = Callable[..., bool]

_builtin_rules: Dict[str, Rule] = {}

# Loose format checks, not RFC parsers
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
URL_PATTERN = re.compile(r"^(https?|ftp)://[^\s/$.?#].[^\s]*$", re.IGNORECASE)

_REGEX_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE}


def _register_rule(name: str):
    """Decorator to register a built-in rule predicate."""
    def decorator(func: Rule):
        _builtin_rules[name] = func
        return func
    return decorator


def normalize_args(config: Any) -> List[Any]:
    """Turn a rule configuration into the positional argument list for the rule."""
    if isinstance(config, Mapping):
        for key in ("limits", "args"):
            if key in config:
                return normalize_args(config[key])
        return []
    if is_array(config):
        return list(config)
    return [config]


def rule_message(errors: Any, rule: str, fallback: str) -> str:
    """Resolve the message for a failing `rule` from a field's `errors` config."""
    if isinstance(errors, Mapping):
        if errors.get(rule) is not None:
            return errors[rule]
        if errors.get("default") is not None:
            return errors["default"]
    elif isinstance(errors, str):
        return errors
    return fallback


def _check_arguments(name: str, rule: Rule, args: List[Any]) -> None:
    """Raise SchemaError when a rule config does not supply the arguments `rule` takes."""
    try:
        signature = inspect.signature(rule)
    except (TypeError, ValueError):
        return
    try:
        signature.bind(None, *args, context=None)
    except TypeError as err:
        raise SchemaError(f"Invalid arguments for rule '{name}': {args!r} ({err})") from err


class RuleRegistry:
    """Registry of named rule predicates, pre-populated with the built-ins."""

    def __init__(self) -> None:
        self.__rules: Dict[str, Rule] = dict(_builtin_rules)

    def add(self, name: str, fn: Rule) -> None:
        """Register (or replace) the rule `name`."""
        if not callable(fn):
            raise TypeError(f"Rule '{name}' must be callable, got {type(fn).__name__}")
        if name in self.__rules:
            logger.info("Replacing rule '%s'", name)
        self.__rules[name] = fn
        logger.debug("Registered rule '%s'", name)

    def get(self, name: str) -> Optional[Rule]:
        return self.__rules.get(name)

    def available(self) -> List[str]:
        return list(self.__rules)

    def __contains__(self, name: object) -> bool:
        return name in self.__rules

    def check(self, value: Any, rules: Optional[Mapping], errors: Any = None, context: Any = None) -> List[str]:
        """Run every rule in `rules` against `value`, returning failure messages in order."""
        messages: List[str] = []
        for name, config in (rules or {}).items():
            if callable(config):
                passed = config(value, context=context)
            else:
                rule = self.__rules.get(name)
                if rule is None:
                    messages.append(rule_message(errors, name, UNKNOWN_MESSAGE.format(rule=name)))
                    continue
                args = normalize_args(config)
                _check_arguments(name, rule, args)
                passed = rule(value, *args, context=context)

            if not passed:
                messages.append(rule_message(errors, name, FAILED_MESSAGE.format(rule=name)))
        return messages


# ----------------------------- Built-in rules -----------------------------

def _choices(args: Sequence[Any]) -> Sequence[Any]:
    # oneOf: ['a', 'b'] and oneOf: [['a', 'b']] mean the same thing
    if len(args) == 1 and isinstance(args[0], (list, tuple, set, frozenset)):
        return args[0]
    return args


def _compare(value: Any, limit: Any, op: Callable[[Any, Any], bool]) -> bool:
    if not is_number(value) or not is_number(limit):
        return False
    return op(value, limit)


def _length(value: Any) -> Optional[int]:
    try:
        return len(value)
    except TypeError:
        return None


@_register_rule("min")
def _min(value: Any, limit: Any, context: Any = None) -> bool:
    """Value is greater than or equal to `limit`."""
    return _compare(value, limit, lambda a, b: a >= b)


@_register_rule("max")
def _max(value: Any, limit: Any, context: Any = None) -> bool:
    """Value is less than or equal to `limit`."""
    return _compare(value, limit, lambda a, b: a <= b)


@_register_rule("minLength")
def _min_length(value: Any, limit: int, context: Any = None) -> bool:
    length = _length(value)
    return length is not None and is_number(limit) and length >= limit


@_register_rule("maxLength")
def _max_length(value: Any, limit: int, context: Any = None) -> bool:
    length = _length(value)
    return length is not None and is_number(limit) and length <= limit


@_register_rule("eq")
def _eq(value: Any, expected: Any, context: Any = None) -> bool:
    return value == expected


@_register_rule("neq")
def _neq(value: Any, expected: Any, context: Any = None) -> bool:
    return value != expected


@_register_rule("oneOf")
def _one_of(value: Any, *choices: Any, context: Any = None) -> bool:
    """Value is one of the given choices."""
    try:
        return value in _choices(choices)
    except TypeError:
        return False


@_register_rule("notOneOf")
def _not_one_of(value: Any, *choices: Any, context: Any = None) -> bool:
    try:
        return value not in _choices(choices)
    except TypeError:
        return False


@_register_rule("has")
def _has(value: Any, *items: Any, context: Any = None) -> bool:
    """Value (a string, array or object) contains every one of `items`."""
    if not isinstance(value, (str, list, tuple, Mapping)):
        return False
    try:
        return all(item in value for item in _choices(items))
    except TypeError:
        return False


@_register_rule("hasNot")
def _has_not(value: Any, *items: Any, context: Any = None) -> bool:
    """Value (a string, array or object) contains none of `items`."""
    if not isinstance(value, (str, list, tuple, Mapping)):
        return False
    try:
        return not any(item in value for item in _choices(items))
    except TypeError:
        return False


def _search(value: Any, pattern: Any, flags: str) -> bool:
    if not isinstance(value, str):
        return False
    compiled = 0
    for flag in flags or "":
        compiled |= _REGEX_FLAGS.get(flag, 0)
    if isinstance(pattern, re.Pattern):
        return pattern.search(value) is not None
    return re.search(pattern, value, compiled) is not None


@_register_rule("match")
def _match(value: Any, pattern: Any, flags: str = "", context: Any = None) -> bool:
    return _search(value, pattern, flags)


@_register_rule("notMatch")
def _not_match(value: Any, pattern: Any, flags: str = "", context: Any = None) -> bool:
    return isinstance(value, str) and not _search(value, pattern, flags)


@_register_rule("empty")
def _empty(value: Any, expected: bool = True, context: Any = None) -> bool:
    """``empty: true`` requires an empty value, ``empty: false`` a non-empty one."""
    return is_empty(value) == bool(expected)


@_register_rule("notEmpty")
def _not_empty(value: Any, expected: bool = True, context: Any = None) -> bool:
    return is_empty(value) != bool(expected)


@_register_rule("isEmail")
def _is_email(value: Any, *_: Any, context: Any = None) -> bool:
    return isinstance(value, str) and EMAIL_PATTERN.match(value) is not None


@_register_rule("isUrl")
def _is_url(value: Any, *_: Any, context: Any = None) -> bool:
    return isinstance(value, str) and URL_PATTERN.match(value) is not None


@_register_rule("isAlpha")
def _is_alpha(value: Any, *_: Any, context: Any = None) -> bool:
    return isinstance(value, str) and value.isalpha()


@_register_rule("isAlphaNum")
def _is_alpha_num(value: Any, *_: Any, context: Any = None) -> bool:
    return isinstance(value, str) and value.isalnum()


@_register_rule("isNumeric")
def _is_numeric(value: Any, *_: Any, context: Any = None) -> bool:
    """A number, or a string that parses as one."""
    if is_number(value):
        return True
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        float(value)
        return True
    except ValueError:
        return False
