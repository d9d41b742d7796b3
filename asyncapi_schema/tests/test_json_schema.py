import json
from pathlib import Path
from unittest import TestCase

from asyncapi_schema import Schema, SchemaParser
from asyncapi_schema.model import Reference
from asyncapi_schema.transforms import JsonSchemaExporter, components_to_json_schema, to_json_schema

TEST_DATA = Path(__file__).parent / "test_data"


def convert(value, **kwargs):
    return to_json_schema(SchemaParser().parse_reference_or(value), **kwargs)


class TestJsonSchemaExport(TestCase):
    def test_plain_types_are_unchanged(self):
        self.assertEqual(convert({"type": "string", "format": "date", "maxLength": 10}), {"type": "string", "format": "date", "maxLength": 10})
        self.assertEqual(convert({"type": "number", "exclusiveMinimum": 3.5}), {"type": "number", "exclusiveMinimum": 3.5})

    def test_nullable_type(self):
        self.assertEqual(convert({"type": "integer", "nullable": True}), {"type": ["integer", "null"]})

    def test_nullable_enum_gets_null_member(self):
        self.assertEqual(
            convert({"type": "string", "enum": ["a"], "nullable": True}),
            {"type": ["string", "null"], "enum": ["a", None]},
        )

    def test_enum_with_null_member_accepts_null(self):
        self.assertEqual(
            convert({"type": "string", "enum": ["a", None]}),
            {"type": ["string", "null"], "enum": ["a", None]},
        )
        self.assertEqual(
            convert({"type": "string", "enum": ["a", None], "nullable": True}),
            {"type": ["string", "null"], "enum": ["a", None]},
        )

    def test_example_and_default_are_copied(self):
        schema = SchemaParser().parse({"type": "object", "example": {"a": 1}, "default": {"a": 0}})
        out = to_json_schema(schema)
        out["examples"][0]["a"] = 2
        out["default"]["a"] = 5
        self.assertEqual(schema.schema_data.example, {"a": 1})
        self.assertEqual(schema.schema_data.default, {"a": 0})

    def test_nullable_composition(self):
        self.assertEqual(
            convert({"oneOf": [{"type": "string"}], "nullable": True, "title": "T"}),
            {"anyOf": [{"oneOf": [{"type": "string"}]}, {"type": "null"}], "title": "T"},
        )

    def test_legacy_exclusive_bounds(self):
        self.assertEqual(
            convert({"minimum": 0, "exclusiveMinimum": True, "maximum": 1, "exclusiveMaximum": False}),
            {"exclusiveMinimum": 0, "maximum": 1},
        )

    def test_example_becomes_examples(self):
        self.assertEqual(convert({"type": "boolean", "example": True}), {"type": "boolean", "examples": [True]})

    def test_references_are_rewritten(self):
        self.assertEqual(convert({"$ref": "#/components/schemas/Foo"}), {"$ref": "#/$defs/Foo"})
        self.assertEqual(
            convert({"$ref": "#/components/schemas/Foo"}, ref_prefix="#/definitions/"),
            {"$ref": "#/definitions/Foo"},
        )
        self.assertEqual(convert({"$ref": "other.json#/Bar"}), {"$ref": "other.json#/Bar"})

    def test_nested_references(self):
        result = convert(
            {
                "type": "object",
                "properties": {"a": {"$ref": "#/components/schemas/A"}},
                "additionalProperties": {"$ref": "#/components/schemas/B"},
            }
        )
        self.assertEqual(result["properties"]["a"], {"$ref": "#/$defs/A"})
        self.assertEqual(result["additionalProperties"], {"$ref": "#/$defs/B"})

    def test_extension_keywords(self):
        result = convert(
            {
                "allOf": [],
                "discriminator": "kind",
                "externalDocs": {"url": "https://example.com"},
            }
        )
        self.assertEqual(result["x-discriminator"], "kind")
        self.assertEqual(result["x-externalDocs"], {"url": "https://example.com"})

    def test_reference_helper(self):
        exporter = JsonSchemaExporter("#/defs/")
        self.assertEqual(exporter.export_reference_or(Reference.component("X")), {"$ref": "#/defs/X"})
        self.assertEqual(exporter.export(Schema()), {})

    def test_components_document(self):
        with open(TEST_DATA / "streetlights.json") as f:
            schemas = SchemaParser().parse_components(json.load(f))

        result = components_to_json_schema(schemas)
        self.assertEqual(result["$schema"], "https://json-schema.org/draft/2020-12/schema")
        self.assertEqual(list(result["$defs"]), list(schemas))
        self.assertEqual(
            result["$defs"]["turnOnOffPayload"]["properties"]["command"],
            {
                "type": ["string", "null"],
                "enum": ["on", "off", None],
                "description": "Whether to turn on or off the light.",
            },
        )
        self.assertEqual(
            result["$defs"]["lightEvent"]["oneOf"],
            [{"$ref": "#/$defs/lightMeasuredPayload"}, {"$ref": "#/$defs/dimLightPayload"}],
        )
        self.assertEqual(
            result["$defs"]["legacyBrightness"],
            {"format": "ratio", "exclusiveMinimum": 0, "maximum": 1, "deprecated": True},
        )
