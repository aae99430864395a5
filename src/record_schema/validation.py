"""
Validation of scalars, records and nested sub-records against a schema.

```python
hero = {
    "name": {"type": "string", "required": True},
    "power": {"type": "integer", "rules": {"min": 1}},
    "sidekicks": {"type": "array", "schema": {"name": {"type": "string"}}},
}

validate(hero, {"name": "Zim", "power": 0, "sidekicks": [{"name": "Gir"}, {"name": 7}]})
# -> ValidationResult(valid=False,
#                     errors={"power": ["Failed: min"], "sidekicks": {"1": {"name": ["Not of type: string"]}}})
```

Validation never casts: ``"1"`` is not an integer. Data problems are collected into the
returned ``ValidationResult``; only malformed schemas (``SchemaError``) and exceptions
from user supplied rules are raised.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, NamedTuple, Optional, Union

from .config import (
    INVALID_KEY,
    INVALID_OBJECT,
    MAX_KEY_LENGTH,
    NOT_NULL_MESSAGE,
    REQUIRED_MESSAGE,
    TYPE_MESSAGE,
)
from .model import (
    Primitive,
    SchemaRef,
    SchemaResolver,
    apply_default,
    check_field_spec,
    field_type,
    is_array_field,
    is_field_spec,
    resolve_schema,
    sub_schema,
)
from .predicates import MISSING, is_array, is_empty, is_object, is_type
from .registry import Registry, default_registry
from .rules import rule_message

logger = logging.getLogger(__name__)

ErrorTree = Union[List[str], Dict[str, Any]]


class ValidationResult(NamedTuple):
    valid: bool
    errors: Optional[ErrorTree]


def _result(errors: Optional[ErrorTree]) -> ValidationResult:
    if errors:
        return ValidationResult(False, errors)
    return ValidationResult(True, None)


def _short_key(key: Any) -> str:
    key = str(key)
    if len(key) > MAX_KEY_LENGTH:
        return key[:MAX_KEY_LENGTH - 3] + "..."
    return key


def check_keys(schema: Mapping, data: Any) -> ValidationResult:
    """Check that every key on `data` is declared on `schema`."""
    if not is_object(data):
        return ValidationResult(False, {"data": [INVALID_OBJECT]})

    errors = {_short_key(key): [INVALID_KEY] for key in data if key not in schema}
    return _result(errors)


class Validator:
    """Validates data against schemas using one registry and one schema resolver."""

    def __init__(self, registry: Optional[Registry] = None, resolver: Optional[SchemaResolver] = None) -> None:
        self.registry = registry or default_registry
        self.resolver = resolver

    # ----------------------------- Public API ---------------------------------

    def validate(
        self,
        schema: Any,
        data: Any,
        *,
        sparse: bool = False,
        strict: bool = False,
        key_check_only: bool = False,
    ) -> ValidationResult:
        """Validate `data` against `schema`.

        Args:
            schema: A Schema, a single field spec, or a schema reference string.
            data: A record (mapping) or a scalar.
            sparse: Only validate the keys present on `data`.
            strict: Reject keys on `data` that `schema` does not declare, before
                running any other check.
            key_check_only: Only run the `strict` key check.

        Returns:
            ValidationResult with `errors` None when valid, a list of messages for a
            scalar subject, or a mapping of field name to errors for a record.
        """
        schema = resolve_schema(schema, self.resolver)

        if key_check_only:
            return check_keys(schema, data)

        if strict:
            checked = check_keys(schema, data)
            if not checked.valid:
                logger.debug("Strict key check failed for keys %s", list(checked.errors))
                return checked

        if sparse:
            return self._sparse(data, schema)
        return self._validate(data, schema)

    def check_value(self, value: Any, spec: Optional[Mapping] = None, context: Any = None) -> List[str]:
        """Check a single value against a field spec, returning error messages.

        `context` is the record the value belongs to and is handed to every rule. A `type`
        naming a schema is resolved, and a mapping value that fails it is reported as
        not being of that type.
        """
        if not spec:
            return []
        spec = check_field_spec(spec)
        errors = spec.get("errors")

        if spec.get("allowNull") is False and (value is None or value is MISSING):
            return [rule_message(errors, "allowNull", NOT_NULL_MESSAGE)]

        # Nulls skip every other check unless disallowed above
        if value is None:
            return []

        if spec.get("required") and is_empty(value):
            return [rule_message(errors, "required", REQUIRED_MESSAGE)]

        if value is MISSING:
            return []

        declared = field_type(spec)
        if isinstance(declared, Primitive):
            if not is_type(value, declared.tag):
                return [rule_message(errors, "type", TYPE_MESSAGE.format(type=declared.tag))]
        elif declared is not None:
            if isinstance(declared, SchemaRef):
                tag, sub = declared.name, resolve_schema(declared.name, self.resolver)
            else:
                tag, sub = "object", declared.schema
            if is_field_spec(sub):
                failed = bool(self.check_value(value, sub, context))
            else:
                failed = not is_object(value) or bool(self._record_errors(sub, value))
            if failed:
                return [rule_message(errors, "type", TYPE_MESSAGE.format(type=tag))]

        return self.registry.rules.check(value, spec.get("rules"), errors, context)

    # ----------------------------- Walkers ------------------------------------

    def _validate(self, data: Any, schema: Mapping, context: Any = None) -> ValidationResult:
        if is_field_spec(schema):
            return _result(self._validate_value(check_field_spec(schema), data, context))

        if not is_object(data):
            return ValidationResult(False, [INVALID_OBJECT])

        errors: Dict[str, Any] = {}
        for key, spec in schema.items():
            field_errors = self._validate_field(key, spec, data.get(key, MISSING), data)
            if field_errors:
                errors[key] = field_errors
        return _result(errors)

    def _sparse(self, data: Any, schema: Mapping) -> ValidationResult:
        """Validate only the keys on `data`; keys unknown to `schema` are ignored."""
        if is_field_spec(schema) or not is_object(data):
            return self._validate(data, schema)

        errors: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in schema:
                continue
            field_errors = self._validate_field(key, schema[key], value, data)
            if field_errors:
                errors[key] = field_errors
        return _result(errors)

    def _validate_field(self, key: str, spec: Any, value: Any, data: Mapping) -> Optional[ErrorTree]:
        spec = check_field_spec(spec, key)

        # Optional, ruleless fields with nothing to check are skipped.
        # Note: 'allowNull: False' counts as required.
        is_required = spec.get("required") or spec.get("allowNull") is False
        has_rules = bool(spec.get("rules"))
        if not has_rules and not is_required and is_empty(apply_default(value, spec)):
            return None

        return self._validate_value(spec, value, data)

    def _validate_value(self, spec: Mapping, value: Any, context: Any) -> Optional[ErrorTree]:
        """Errors for `value` against `spec`, recursing into the schema the spec nests."""
        sub = sub_schema(spec, self.resolver)
        if sub is None or value is None or value is MISSING:
            return self.check_value(value, spec, context) or None

        if is_array_field(spec, value):
            if not is_array(value):
                return self.check_value(value, spec, context) or None
            return self._validate_items(value, sub, context) or None

        if is_field_spec(sub):
            return self._validate_value(check_field_spec(sub), value, context)

        return self._record_errors(sub, value)

    def _record_errors(self, schema: Mapping, value: Any) -> Optional[ErrorTree]:
        # Sub-records are always strict about their keys
        checked = check_keys(schema, value)
        if not checked.valid:
            return checked.errors
        return self._validate(value, schema).errors

    def _validate_items(self, items: Any, sub: Mapping, context: Any) -> Dict[str, Any]:
        """Validate each array element, keying failures by string index."""
        errors: Dict[str, Any] = {}
        for idx, item in enumerate(items):
            if is_field_spec(sub):
                item_errors = self._validate_value(check_field_spec(sub), item, context)
            else:
                item_errors = self._validate(item, sub, context=context).errors
            if item_errors:
                errors[str(idx)] = item_errors
        return errors


def validate(
    schema: Any,
    data: Any,
    *,
    sparse: bool = False,
    strict: bool = False,
    key_check_only: bool = False,
    registry: Optional[Registry] = None,
    resolver: Optional[SchemaResolver] = None,
) -> ValidationResult:
    """Validate `data` against `schema`. See `Validator.validate`."""
    return Validator(registry, resolver).validate(
        schema, data, sparse=sparse, strict=strict, key_check_only=key_check_only
    )


def check_value(
    value: Any,
    spec: Optional[Mapping] = None,
    context: Any = None,
    *,
    registry: Optional[Registry] = None,
    resolver: Optional[SchemaResolver] = None,
) -> List[str]:
    """Check one value against a field spec. See `Validator.check_value`."""
    return Validator(registry, resolver).check_value(value, spec, context)
