"""
Schema model: field spec shape checks, the tagged `type` variant and sub-schema lookup.

A Schema is an ordered mapping of field name -> field spec, and every field spec is a
mapping. That is what tells the two apart: a mapping whose values are all mappings is a
Schema, anything else is a single field spec. A mapping that only uses field spec
attribute names (``FIELD_SPEC_KEYS``) is always a field spec. For example:

```python
{"name": {"type": "string"}, "tags": {"type": "array", "schema": {"type": "string"}}}  # Schema
{"type": "string", "rules": {"maxLength": 3}}                                           # field spec
```

Field spec attributes and their shapes are described by ``FIELD_SPEC_META_SCHEMA`` and
checked with jsonschema. The meta-schema uses an extra ``function`` type for callables
(generators, custom rules, default factories) and treats any Mapping as an ``object`` and
any list or tuple as an ``array``.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any, Callable, NamedTuple, Optional, Union

from jsonschema import Draft202012Validator, validators
from jsonschema.exceptions import ValidationError, best_match

from .errors import SchemaError, SchemaResolutionError
from .predicates import PRIMITIVE_TYPES, is_empty

logger = logging.getLogger(__name__)

SchemaResolver = Callable[[str], Mapping]

_GENERATOR_OP = {
    "anyOf": [
        {"type": "function"},
        {
            "type": "object",
            "required": ["fn"],
            "properties": {"fn": {"type": "function"}},
        },
    ]
}

FIELD_SPEC_META_SCHEMA = {
    "type": "object",
    "properties": {
        "type": {"type": ["string", "object"]},
        "required": {"type": "boolean"},
        "allowNull": {"type": "boolean"},
        "protect": {"type": "boolean"},
        "primaryKey": {"type": "boolean"},
        "transforms": {
            "anyOf": [
                {"type": "string"},
                {"type": "array", "items": {"type": "string"}},
            ]
        },
        "rules": {"type": "object"},
        "errors": {
            "anyOf": [
                {"type": "string"},
                {"type": "object", "additionalProperties": {"type": "string"}},
            ]
        },
        "generate": {
            "anyOf": [
                {"type": "function"},
                {
                    "type": "object",
                    "properties": {
                        "ops": {"anyOf": [_GENERATOR_OP, {"type": "array", "items": _GENERATOR_OP}]},
                        "preserve": {"type": "boolean"},
                        "require": {"type": "boolean"},
                        "once": {"type": "boolean"},
                    },
                },
            ]
        },
        "schema": {"type": ["string", "object"]},
    },
}

# Attribute names a field spec may carry
FIELD_SPEC_KEYS = frozenset(FIELD_SPEC_META_SCHEMA["properties"]) | {"default"}


def _is_function(checker, instance) -> bool:
    return callable(instance)


def _is_object(checker, instance) -> bool:
    return isinstance(instance, Mapping)


def _is_array(checker, instance) -> bool:
    return isinstance(instance, (list, tuple))


_type_checker = Draft202012Validator.TYPE_CHECKER.redefine_many(
    {"function": _is_function, "object": _is_object, "array": _is_array}
)
FieldSpecValidator = validators.extend(Draft202012Validator, type_checker=_type_checker)
_field_spec_validator = FieldSpecValidator(FIELD_SPEC_META_SCHEMA)


# ----------------------------- Tagged type variant -----------------------------

class Primitive(NamedTuple):
    tag: str


class InlineSchema(NamedTuple):
    schema: Mapping


class SchemaRef(NamedTuple):
    name: str


FieldType = Union[Primitive, InlineSchema, SchemaRef]


def field_type(spec: Mapping) -> Optional[FieldType]:
    """Classify a field spec's `type`: primitive tag, inline schema or schema reference."""
    declared = spec.get("type")
    if declared is None:
        return None
    if isinstance(declared, str):
        return Primitive(declared) if declared in PRIMITIVE_TYPES else SchemaRef(declared)
    if isinstance(declared, Mapping):
        return InlineSchema(declared)
    raise SchemaError(f"Invalid type: {declared!r}")


# ----------------------------- Shape checks -----------------------------

def _format_validation_error(err: ValidationError) -> str:
    loc = ".".join([str(p) for p in err.path])
    if loc:
        return f"{loc}: {err.message}"
    return err.message


def check_field_spec(spec: Any, key: Optional[str] = None) -> Mapping:
    """Return `spec` if it is a well-formed field spec, else raise SchemaError."""
    where = f" for '{key}'" if key is not None else ""
    if not isinstance(spec, Mapping):
        raise SchemaError(f"Invalid field spec{where}: expected a mapping, got {type(spec).__name__}")

    error = best_match(_field_spec_validator.iter_errors(spec))
    if error is not None:
        raise SchemaError(f"Invalid field spec{where}: {_format_validation_error(error)}")
    return spec


def is_field_spec(schema: Any) -> bool:
    """True unless `schema` is a mapping of names to mappings (a Schema).

    A non-empty mapping whose keys are all field spec attributes is a field spec even
    when every value is a mapping, e.g. `{"rules": {"minLength": 2}}`.
    """
    if not isinstance(schema, Mapping):
        return True
    if schema and all(key in FIELD_SPEC_KEYS for key in schema):
        return True
    return not all(isinstance(spec, Mapping) for spec in schema.values())


# ----------------------------- Resolution -----------------------------

def resolve_schema(schema: Any, resolver: Optional[SchemaResolver] = None) -> Mapping:
    """Return an inline schema as is, or resolve a string reference through `resolver`."""
    if isinstance(schema, Mapping):
        return schema
    if isinstance(schema, str):
        if resolver is None:
            raise SchemaResolutionError(f"No schema resolver configured for reference '{schema}'")
        logger.debug("Resolving schema reference '%s'", schema)
        resolved = resolver(schema)
        if not isinstance(resolved, Mapping):
            raise SchemaResolutionError(
                f"Schema reference '{schema}' resolved to {type(resolved).__name__}, expected a mapping"
            )
        return resolved
    raise SchemaError(f"Invalid schema: {schema!r}")


def sub_schema(spec: Mapping, resolver: Optional[SchemaResolver] = None) -> Optional[Mapping]:
    """The nested schema a field declares through `schema` or an inline/reference `type`."""
    if spec.get("schema") is not None:
        return resolve_schema(spec["schema"], resolver)
    declared = field_type(spec)
    if isinstance(declared, InlineSchema):
        return declared.schema
    if isinstance(declared, SchemaRef):
        return resolve_schema(declared.name, resolver)
    return None


def is_array_field(spec: Mapping, value: Any) -> bool:
    return spec.get("type") == "array" or isinstance(value, (list, tuple))


# ----------------------------- Record helpers -----------------------------

def apply_default(value: Any, spec: Mapping) -> Any:
    """Fill an empty `value` from the field's `default` (called if callable)."""
    if "default" not in spec or not is_empty(value):
        return value
    default = spec["default"]
    if callable(default):
        return default()
    return copy.deepcopy(default)


def primary_key(schema: Mapping) -> Optional[str]:
    """Name of the schema's `primaryKey` field, if any. More than one is a SchemaError."""
    keys = [
        key for key, spec in schema.items()
        if isinstance(spec, Mapping) and spec.get("primaryKey")
    ]
    if len(keys) > 1:
        raise SchemaError(f"Schema declares more than one primaryKey: {keys}")
    return keys[0] if keys else None
