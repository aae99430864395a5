"""
Formatting: build a new record from a schema and (optional) data.

Each field goes through, in this order: default, generate, sub-schema recursion,
transforms. Each record then drops protected fields and stripped values, and the
top-level record finally has its primary key remapped.

```python
schema = {
    "id": {"primaryKey": True},
    "name": {"type": "string", "transforms": ["trim"]},
    "slug": {"generate": {"ops": [lambda v: v or "new"], "once": True}, "transforms": ["uppercase"]},
    "secret": {"protect": True},
}

format(schema, {"_id": "123", "name": "  Zim ", "secret": "x"}, generate="once", map_id_from="_id")
# -> {"id": "123", "name": "Zim", "slug": "NEW"}
```

The input data is never modified. Values that end up absent are left out of the output
rather than written as None.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from .generators import run_generator
from .model import (
    SchemaResolver,
    apply_default,
    check_field_spec,
    is_field_spec,
    primary_key,
    resolve_schema,
    sub_schema,
)
from .predicates import MISSING, is_array, is_object
from .registry import Registry, default_registry
from .strip import strip as strip_values

logger = logging.getLogger(__name__)

_NOT_SET = object()


@dataclass(frozen=True)
class FormatOptions:
    strict: bool = False
    sparse: bool = False
    defaults: bool = True
    generate: bool = True
    run_once: bool = False
    transform: bool = True
    protect: bool = False
    strip: Any = _NOT_SET
    map_id_from: Optional[str] = None


class Formatter:
    """Formats data against schemas using one registry and one schema resolver."""

    def __init__(self, registry: Optional[Registry] = None, resolver: Optional[SchemaResolver] = None) -> None:
        self.registry = registry or default_registry
        self.resolver = resolver

    def format(
        self,
        schema: Any,
        data: Any = None,
        *,
        strict: bool = False,
        sparse: bool = False,
        defaults: bool = True,
        generate: Union[bool, str] = True,
        once: bool = False,
        transform: bool = True,
        protect: bool = False,
        strip: Any = _NOT_SET,
        map_id_from: Optional[str] = None,
    ) -> Any:
        """Return a new record built from `schema` and `data`.

        Args:
            schema: A Schema, a single field spec, or a schema reference string.
            data: The input record or scalar. None mints a record from defaults and
                generators alone.
            strict: Drop keys that `schema` does not declare.
            sparse: Only format the schema fields present on `data`.
            defaults: Fill empty values from `default`.
            generate: Run generators. "once" also runs once-gated generators.
            once: Run once-gated generators.
            transform: Apply each field's transforms.
            protect: Keep fields declared `protect: True` (they are removed otherwise).
            strip: A value, or list of values, whose fields are removed from the output.
            map_id_from: Move `data[map_id_from]` onto the schema's primaryKey field. This
                runs after stripping, so `strip` is applied again to the remapped record.
        """
        schema = resolve_schema(schema, self.resolver)
        options = FormatOptions(
            strict=strict,
            sparse=sparse,
            defaults=defaults,
            generate=bool(generate),
            run_once=once or generate == "once",
            transform=transform,
            protect=protect,
            strip=strip,
            map_id_from=map_id_from,
        )

        source = MISSING if data is None else copy.deepcopy(data)

        if is_field_spec(schema):
            value = self._format_field(schema, source, data is not None, options)
            return None if value is MISSING else value

        if source is MISSING:
            source = {}
        if not is_object(source):
            return source

        record = self._format_record(schema, source, options)
        if options.map_id_from is not None:
            record = self._map_id(schema, source, record, options.map_id_from)
            if options.strip is not _NOT_SET:
                record = strip_values(options.strip, record)
        return record

    # ----------------------------- Walkers ------------------------------------

    def _format_record(self, schema: Mapping, data: Mapping, options: FormatOptions) -> Dict[str, Any]:
        record: Dict[str, Any] = {}
        for key, spec in schema.items():
            if options.sparse and key not in data:
                continue
            spec = check_field_spec(spec, key)
            value = self._format_field(spec, data.get(key, MISSING), key in data, options)
            if value is not MISSING:
                record[key] = value

        if not options.strict:
            for key, value in data.items():
                if key not in schema:
                    record[key] = value

        if not options.protect:
            record = {
                key: value for key, value in record.items()
                if not (key in schema and schema[key].get("protect"))
            }

        if options.strip is not _NOT_SET:
            record = strip_values(options.strip, record)

        return record

    def _format_field(self, spec: Mapping, value: Any, present: bool, options: FormatOptions) -> Any:
        if options.defaults:
            value = apply_default(value, spec)

        if options.generate and spec.get("generate") is not None:
            value = run_generator(spec["generate"], value, present=present, run_once=options.run_once)

        sub = sub_schema(spec, self.resolver)
        if sub is not None:
            if is_array(value):
                value = [self._format_item(sub, item, options) for item in value]
            elif is_object(value):
                value = self._format_item(sub, value, options)

        if options.transform and spec.get("transforms"):
            value = self.registry.transforms.apply(value, spec["transforms"])

        return value

    def _format_item(self, sub: Mapping, item: Any, options: FormatOptions) -> Any:
        if is_field_spec(sub):
            return self._format_field(check_field_spec(sub), item, True, options)
        if is_object(item):
            return self._format_record(sub, item, options)
        return item

    def _map_id(self, schema: Mapping, data: Mapping, record: Dict[str, Any], source_key: str) -> Dict[str, Any]:
        """Copy `data[source_key]` onto the primary key field and drop `source_key`."""
        key = primary_key(schema)
        if key is None:
            logger.debug("map_id_from='%s' ignored: schema has no primaryKey", source_key)
            return record
        if key == source_key:
            return record

        record = dict(record)
        if source_key in data:
            record[key] = data[source_key]
        record.pop(source_key, None)
        return record


def format(
    schema: Any,
    data: Any = None,
    *,
    registry: Optional[Registry] = None,
    resolver: Optional[SchemaResolver] = None,
    **options: Any,
) -> Any:
    """Build a new record from `schema` and `data`. See `Formatter.format`."""
    return Formatter(registry, resolver).format(schema, data, **options)
