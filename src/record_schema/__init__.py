"""
record_schema: declarative schemas that validate records and format them.

```python
from record_schema import validate, format

user = {
    "name": {"type": "string", "required": True, "transforms": ["trim"]},
    "age": {"type": "integer", "rules": {"min": 0}},
    "role": {"default": "member", "rules": {"oneOf": ["member", "admin"]}},
}

validate(user, {"name": "Zim", "age": -1}).errors    # {"age": ["Failed: min"]}
format(user, {"name": "  Zim "})                     # {"name": "Zim", "role": "member"}
```
"""

from .casters import CASTERS, INVALID_DATE
from .errors import SchemaError, SchemaResolutionError
from .formatting import Formatter, format
from .log import create_logger
from .model import (
    InlineSchema,
    Primitive,
    SchemaRef,
    SchemaResolver,
    apply_default,
    field_type,
)
from .predicates import MISSING, is_empty, is_type, type_of
from .registry import Registry, default_registry
from .rules import RuleRegistry
from .strip import strip
from .transforms import TransformRegistry
from .validation import ValidationResult, Validator, check_keys, check_value, validate

logger = create_logger(__name__)


def add_rule(name, fn):
    """Register a rule on the shared registry."""
    default_registry.rules.add(name, fn)


def available_rules():
    return default_registry.rules.available()


def register_transform(name, fn):
    """Register a transform on the shared registry."""
    default_registry.transforms.register(name, fn)


def available_transforms():
    return default_registry.transforms.list()


def apply_transforms(value, names):
    return default_registry.transforms.apply(value, names)


__all__ = [
    "CASTERS",
    "INVALID_DATE",
    "MISSING",
    "Formatter",
    "InlineSchema",
    "Primitive",
    "Registry",
    "RuleRegistry",
    "SchemaError",
    "SchemaRef",
    "SchemaResolutionError",
    "SchemaResolver",
    "TransformRegistry",
    "ValidationResult",
    "Validator",
    "add_rule",
    "apply_default",
    "apply_transforms",
    "available_rules",
    "available_transforms",
    "check_keys",
    "check_value",
    "default_registry",
    "field_type",
    "format",
    "is_empty",
    "is_type",
    "register_transform",
    "strip",
    "type_of",
    "validate",
]
