import json
from pathlib import Path
from unittest import TestCase

from asyncapi_schema import (
    AllOf,
    AnyOf,
    AnySchema,
    ArrayType,
    BooleanType,
    ExternalDocumentation,
    IntegerFormat,
    IntegerType,
    NumberFormat,
    NumberType,
    ObjectType,
    OneOf,
    Reference,
    Schema,
    SchemaData,
    SchemaParser,
    SchemaSerializer,
    StringFormat,
    StringType,
)
from asyncapi_schema.model import Known, Unknown

TEST_DATA = Path(__file__).parent / "test_data"


def _payload_schema() -> Schema:
    """A tree touching every kind, built through the API."""
    return Schema(
        schema_data=SchemaData(title="Payload", description="Everything at once", discriminator="kind"),
        schema_kind=ObjectType(
            properties={
                "kind": Schema(schema_kind=StringType(enumeration=["a", "b", None]), schema_data=SchemaData(nullable=True)),
                "when": Schema(schema_kind=StringType(format=Known(StringFormat.DATE_TIME))),
                "code": Schema(schema_kind=StringType(format=Unknown("custom-unknown"), pattern="^[A-Z]+$")),
                "ratio": Schema(schema_kind=NumberType(format=Known(NumberFormat.FLOAT), exclusive_minimum=3.5, maximum=10.0)),
                "count": Schema(
                    schema_kind=IntegerType(format=Known(IntegerFormat.UINT64), minimum=0, enumeration=[1, 2, 3]),
                    schema_data=SchemaData(example=2, default=1),
                ),
                "flags": Schema(
                    schema_kind=ArrayType(items=Schema(schema_kind=BooleanType()), min_items=1, unique_items=True)
                ),
                "any": Schema(
                    schema_kind=OneOf(one_of=[Reference.component("A"), Schema(schema_kind=IntegerType())])
                ),
                "both": Schema(schema_kind=AllOf(all_of=[Reference.component("A"), Reference.component("B")])),
                "either": Schema(schema_kind=AnyOf(any_of=[Schema(schema_kind=StringType())])),
                "legacy": Schema(
                    schema_kind=AnySchema(minimum=0, exclusive_minimum=True, format="ratio", unique_items=False),
                    schema_data=SchemaData(deprecated=True, read_only=True, write_only=False),
                ),
                "ref": Reference("#/components/schemas/Other"),
            },
            required=["kind", "when"],
            additional_properties=Schema(schema_kind=StringType()),
            min_properties=1,
            max_properties=20,
        ),
    )


class TestRoundTrip(TestCase):
    """parse(serialize(s)) == s for constructed trees"""

    def setUp(self):
        self.parser = SchemaParser()
        self.serializer = SchemaSerializer()

    def assertRoundTrips(self, schema):
        data = self.serializer.serialize(schema)
        # Must survive text encoding, not just dict identity
        data = json.loads(json.dumps(data))
        self.assertEqual(self.parser.parse(data), schema)

    def test_default_schema(self):
        self.assertRoundTrips(Schema())

    def test_each_primitive(self):
        for kind in [StringType(), NumberType(), IntegerType(), ObjectType(), ArrayType(), BooleanType()]:
            with self.subTest(kind=type(kind).__name__):
                self.assertRoundTrips(Schema(schema_kind=kind))

    def test_empty_compositions(self):
        for kind in [OneOf(), AllOf(), AnyOf()]:
            with self.subTest(kind=type(kind).__name__):
                self.assertRoundTrips(Schema(schema_kind=kind))

    def test_full_tree(self):
        self.assertRoundTrips(_payload_schema())

    def test_metadata(self):
        schema = Schema(
            schema_data=SchemaData(
                nullable=False,
                external_docs=ExternalDocumentation(url="https://example.com"),
                example=[1, "two"],
                default={"a": None},
            ),
            schema_kind=BooleanType(),
        )
        self.assertRoundTrips(schema)

    def test_to_dict_and_from_dict(self):
        schema = _payload_schema()
        self.assertEqual(Schema.from_dict(schema.to_dict()), schema)

    def test_unknown_spelling_a_known_format(self):
        schema = Schema(schema_kind=StringType(format=Unknown("date")))
        self.assertEqual(schema.schema_kind.format, Known(StringFormat.DATE))
        self.assertRoundTrips(schema)

        for kind in [NumberType(format=Unknown("double")), IntegerType(format=Unknown("uint32"))]:
            with self.subTest(kind=type(kind).__name__):
                self.assertIsInstance(kind.format, Known)
                self.assertRoundTrips(Schema(schema_kind=kind))


class TestSerialization(TestCase):
    """Wire shape of serialized schemas"""

    def setUp(self):
        self.serializer = SchemaSerializer()

    def test_fields_are_flattened(self):
        schema = Schema(
            schema_data=SchemaData(title="Name", nullable=True),
            schema_kind=StringType(max_length=3),
        )
        self.assertEqual(
            self.serializer.serialize(schema),
            {"type": "string", "maxLength": 3, "nullable": True, "title": "Name"},
        )

    def test_absent_format_is_omitted(self):
        data = SchemaParser().parse({"type": "string"}).to_dict()
        self.assertEqual(data, {"type": "string"})
        self.assertNotIn("format", data)

    def test_unknown_format_is_written_verbatim(self):
        data = SchemaParser().parse({"type": "string", "format": "custom-unknown"}).to_dict()
        self.assertEqual(data["format"], "custom-unknown")

    def test_enum_keyword_name(self):
        data = Schema(schema_kind=IntegerType(enumeration=[1, 2])).to_dict()
        self.assertEqual(data, {"type": "integer", "enum": [1, 2]})

    def test_unique_items_only_when_true(self):
        self.assertEqual(Schema(schema_kind=ArrayType()).to_dict(), {"type": "array"})
        self.assertEqual(Schema(schema_kind=ArrayType(unique_items=True)).to_dict(), {"type": "array", "uniqueItems": True})

    def test_exclusive_bounds_keep_their_types(self):
        number = SchemaParser().parse({"type": "number", "exclusiveMinimum": 3.5})
        self.assertEqual(number.to_dict(), {"type": "number", "exclusiveMinimum": 3.5})

        legacy = SchemaParser().parse({"minimum": 3.5, "exclusiveMinimum": True})
        self.assertEqual(legacy.to_dict(), {"minimum": 3.5, "exclusiveMinimum": True})

    def test_discrimination_is_reproduced(self):
        schema = SchemaParser().parse({"type": "object", "anyOf": [{"type": "string"}]})
        self.assertEqual(schema.to_dict(), {"type": "object"})

    def test_reference_output_has_only_pointer(self):
        self.assertEqual(self.serializer.serialize_reference_or(Reference("#/a")), {"$ref": "#/a"})

    def test_property_order(self):
        schema = SchemaParser().parse(
            {"type": "object", "properties": {"b": {"type": "string"}, "a": {"type": "string"}, "c": {"type": "string"}}}
        )
        self.assertEqual(list(schema.to_dict()["properties"]), ["b", "a", "c"])
        text = json.dumps(schema.to_dict())
        self.assertLess(text.index('"b"'), text.index('"a"'))


class TestDocumentRoundTrip(TestCase):
    """A full document reproduces its components section exactly"""

    def test_streetlights(self):
        with open(TEST_DATA / "streetlights.json") as f:
            document = json.load(f)

        schemas = SchemaParser().parse_components(document)
        out = SchemaSerializer().serialize_components(schemas)

        self.assertEqual(out["components"]["schemas"], document["components"]["schemas"])
        self.assertEqual(list(out["components"]["schemas"]), list(document["components"]["schemas"]))

    def test_streetlights_kinds(self):
        with open(TEST_DATA / "streetlights.json") as f:
            schemas = SchemaParser().parse_components(json.load(f))

        kinds = {name: schema.kind_name for name, schema in schemas.items() if isinstance(schema, Schema)}
        self.assertEqual(
            kinds,
            {
                "lightMeasuredPayload": "object",
                "turnOnOffPayload": "object",
                "dimLightPayload": "object",
                "sentAt": "string",
                "legacyBrightness": "any",
                "lightEvent": "oneOf",
                "taggedMeasurement": "allOf",
                "switchState": "anyOf",
            },
        )
        self.assertEqual(schemas["streetlightRef"], Reference("#/components/schemas/lightMeasuredPayload"))
        lumens = schemas["lightMeasuredPayload"].schema_kind.properties["lumens"]
        self.assertEqual(lumens.schema_kind.format, Known(IntegerFormat.UINT32))
