"""
Tests for the schema model: field spec checks, type variants, resolution.
"""

import unittest

from record_schema import InlineSchema, Primitive, SchemaError, SchemaRef, SchemaResolutionError
from record_schema.model import (
    apply_default,
    check_field_spec,
    field_type,
    is_field_spec,
    primary_key,
    resolve_schema,
    sub_schema,
)


class TestCheckFieldSpec(unittest.TestCase):
    """Field spec shape checks."""

    def test_accepts_full_spec(self):
        spec = {
            "type": "string",
            "default": "x",
            "required": True,
            "allowNull": False,
            "protect": False,
            "transforms": ["trim", "uppercase"],
            "rules": {"minLength": 1, "custom": lambda v, context=None: True},
            "errors": {"default": "Bad", "minLength": "Too short"},
            "generate": {"ops": [lambda v: v, {"fn": lambda v, n: v, "args": [1]}], "once": True},
            "primaryKey": False,
            "filters": ["legacy attributes are allowed"],
        }
        self.assertIs(check_field_spec(spec), spec)

    def test_accepts_callable_generate_and_string_transforms(self):
        check_field_spec({"generate": lambda: 1, "transforms": "trim", "errors": "Bad"})

    def test_rejects_invalid_type(self):
        with self.assertRaises(SchemaError) as ctx:
            check_field_spec({"type": True}, "name")
        self.assertIn("Invalid field spec for 'name'", str(ctx.exception))

    def test_rejects_bad_shapes(self):
        for spec in (
            {"required": "yes"},
            {"transforms": [1]},
            {"rules": ["min"]},
            {"errors": {"min": 5}},
            {"generate": "now"},
            {"generate": {"ops": ["now"]}},
            {"schema": 5},
            "string",
        ):
            with self.assertRaises(SchemaError, msg=repr(spec)):
                check_field_spec(spec)

    def test_schema_error_is_value_error(self):
        with self.assertRaises(ValueError):
            check_field_spec({"type": 1})


class TestFieldType(unittest.TestCase):
    """The tagged `type` variant."""

    def test_primitive(self):
        self.assertEqual(field_type({"type": "integer"}), Primitive("integer"))

    def test_inline_schema(self):
        inline = {"name": {"type": "string"}}
        self.assertEqual(field_type({"type": inline}), InlineSchema(inline))

    def test_reference(self):
        self.assertEqual(field_type({"type": "hero"}), SchemaRef("hero"))

    def test_absent(self):
        self.assertIsNone(field_type({}))

    def test_invalid(self):
        with self.assertRaises(SchemaError):
            field_type({"type": 3})


class TestSchemaShapes(unittest.TestCase):

    def test_is_field_spec(self):
        self.assertTrue(is_field_spec({"type": "string"}))
        self.assertTrue(is_field_spec({"type": "string", "rules": {"min": 1}}))
        self.assertFalse(is_field_spec({"name": {"type": "string"}}))
        self.assertFalse(is_field_spec({}))

    def test_attribute_only_mappings_are_field_specs(self):
        self.assertTrue(is_field_spec({"rules": {"minLength": 2}}))
        self.assertTrue(is_field_spec({"generate": {"ops": []}, "errors": {"default": "Bad"}}))
        self.assertTrue(is_field_spec({"type": {"name": {"type": "string"}}}))
        self.assertFalse(is_field_spec({"type": {"type": "string"}, "name": {"type": "string"}}))

    def test_resolve_inline(self):
        schema = {"a": {}}
        self.assertIs(resolve_schema(schema), schema)

    def test_resolve_reference_without_resolver(self):
        with self.assertRaises(SchemaResolutionError):
            resolve_schema("hero")

    def test_resolve_reference(self):
        hero = {"name": {"type": "string"}}
        calls = []

        def resolver(name):
            calls.append(name)
            return hero

        self.assertIs(resolve_schema("hero", resolver), hero)
        self.assertEqual(calls, ["hero"])

    def test_resolver_must_return_mapping(self):
        with self.assertRaises(SchemaResolutionError):
            resolve_schema("hero", lambda name: "woo!")

    def test_resolve_invalid(self):
        with self.assertRaises(SchemaError):
            resolve_schema(42)

    def test_sub_schema(self):
        inline = {"age": {"type": "integer"}}
        self.assertIs(sub_schema({"schema": inline}), inline)
        self.assertIs(sub_schema({"type": inline}), inline)
        self.assertIs(sub_schema({"type": "hero"}, lambda name: inline), inline)
        self.assertIsNone(sub_schema({"type": "string"}))


class TestRecordHelpers(unittest.TestCase):

    def test_apply_default(self):
        self.assertEqual(apply_default(None, {"default": "x"}), "x")
        self.assertEqual(apply_default("", {"default": "x"}), "x")
        self.assertEqual(apply_default("y", {"default": "x"}), "y")
        self.assertEqual(apply_default(0, {"default": 5}), 0)
        self.assertEqual(apply_default(None, {"default": lambda: 7}), 7)
        self.assertIsNone(apply_default(None, {}))

    def test_apply_default_copies_static_values(self):
        spec = {"default": {"tags": []}}
        value = apply_default(None, spec)
        value["tags"].append("x")
        self.assertEqual(spec["default"], {"tags": []})

    def test_primary_key(self):
        self.assertEqual(primary_key({"id": {"primaryKey": True}, "name": {}}), "id")
        self.assertIsNone(primary_key({"name": {}}))

    def test_multiple_primary_keys(self):
        with self.assertRaises(SchemaError):
            primary_key({"a": {"primaryKey": True}, "b": {"primaryKey": True}})


if __name__ == "__main__":
    unittest.main()
