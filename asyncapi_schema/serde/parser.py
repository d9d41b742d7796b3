"""
Schema parser that builds a `Schema` tree from a JSON-compatible value.

The value is expected to be already materialized (e.g. by `json.load`).
Every node is read in two steps: the shape-independent metadata keys are
collected into `SchemaData`, then the remaining keys are handed to the kind
resolver, which picks exactly one `SchemaKind` using a fixed precedence:

1. a recognized `type` tag
2. `oneOf`
3. `allOf`
4. `anyOf`
5. the open `AnySchema` fallback

A document author may legally combine a `type` tag with composition
keywords, so this order is what makes parsing deterministic.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from typing import Any

from ..config import SchemaConfig
from ..errors import SchemaParseError
from ..model.formats import SIGNED_INTEGER_FORMATS, IntegerFormat, NumberFormat, StringFormat
from ..model.nodes import (
    AdditionalProperties,
    AllOf,
    AnyOf,
    AnySchema,
    ArrayType,
    BooleanType,
    ExternalDocumentation,
    IntegerType,
    NumberType,
    ObjectType,
    OneOf,
    Schema,
    SchemaData,
    SchemaKind,
    StringType,
    Type,
)
from ..model.reference import REF_KEY, Reference, ReferenceOr
from ..model.variant_or import Known, VariantOrUnknownOrEmpty, parse_variant_or_empty

logger = logging.getLogger(__name__)


def escape_pointer(name: str) -> str:
    """Escape a key for use as a JSON pointer segment."""
    return name.replace("~", "~0").replace("/", "~1")


class SchemaParser:
    """Parses JSON-compatible values into `Schema` trees."""

    SCHEMA_DATA_KEYS = frozenset(
        {
            "nullable",
            "readOnly",
            "writeOnly",
            "deprecated",
            "externalDocs",
            "example",
            "title",
            "description",
            "discriminator",
            "default",
        }
    )

    # Keys accepted by each kind, besides the `type` tag
    STRING_KEYS = frozenset({"format", "pattern", "enum", "minLength", "maxLength"})
    NUMBER_KEYS = frozenset({"format", "multipleOf", "exclusiveMinimum", "exclusiveMaximum", "minimum", "maximum", "enum"})
    INTEGER_KEYS = NUMBER_KEYS
    OBJECT_KEYS = frozenset({"properties", "required", "additionalProperties", "minProperties", "maxProperties"})
    ARRAY_KEYS = frozenset({"items", "minItems", "maxItems", "uniqueItems"})
    BOOLEAN_KEYS: frozenset[str] = frozenset()
    ANY_KEYS = frozenset(
        {
            "pattern",
            "multipleOf",
            "exclusiveMinimum",
            "exclusiveMaximum",
            "minimum",
            "maximum",
            "format",
        }
    ) | OBJECT_KEYS | ARRAY_KEYS

    COMPOSITION_KEYWORDS = ("oneOf", "allOf", "anyOf")

    def __init__(self, config: SchemaConfig | None = None):
        """
        Initialize the parser.

        Args:
            config: Parsing configuration (strictness, accepted integer formats)
        """
        self.config = config or SchemaConfig()
        self._type_parsers: dict[str, tuple[frozenset[str], Callable[[dict[str, Any], str], Type]]] = {
            "string": (self.STRING_KEYS, self._parse_string_type),
            "number": (self.NUMBER_KEYS, self._parse_number_type),
            "integer": (self.INTEGER_KEYS, self._parse_integer_type),
            "object": (self.OBJECT_KEYS, self._parse_object_type),
            "array": (self.ARRAY_KEYS, self._parse_array_type),
            "boolean": (self.BOOLEAN_KEYS, self._parse_boolean_type),
        }

    def parse(self, value: Any, path: str = "#") -> Schema:
        """
        Parse a schema node recursively.

        Args:
            value: The schema as a JSON-compatible value
            path: Current path in the document (for error messages)

        Returns:
            The parsed schema

        Raises:
            SchemaParseError: If the value or any nested member is malformed
        """
        obj = self._expect_object(value, path)
        schema_data = self._parse_schema_data(obj, path)
        schema_kind = self._parse_schema_kind(obj, path)
        return Schema(schema_data=schema_data, schema_kind=schema_kind)

    def parse_reference_or(self, value: Any, path: str = "#") -> ReferenceOr[Schema]:
        """Parse either a `{"$ref": ...}` object or an inline schema."""
        if isinstance(value, dict) and REF_KEY in value:
            reference = value[REF_KEY]
            if not isinstance(reference, str):
                raise SchemaParseError(f"{path}/{escape_pointer(REF_KEY)}", "reference must be a string")
            return Reference(reference)
        return self.parse(value, path)

    def parse_components(self, document: Any) -> dict[str, ReferenceOr[Schema]]:
        """
        Parse the named schemas of a document's `components.schemas` section.

        Args:
            document: The whole document as a JSON-compatible value

        Returns:
            Mapping of schema name to parsed schema, in document order
        """
        obj = self._expect_object(document, "#")
        components = self._expect_object(obj.get("components", {}), "#/components")
        schemas = components.get("schemas", {})
        schemas = self._expect_object(schemas, "#/components/schemas")

        return {
            name: self.parse_reference_or(schema, f"#/components/schemas/{escape_pointer(name)}")
            for name, schema in schemas.items()
        }

    def _parse_schema_data(self, obj: dict[str, Any], path: str) -> SchemaData:
        """Extract the metadata shared by every kind."""
        return SchemaData(
            nullable=self._get_bool(obj, "nullable", path),
            read_only=self._get_bool(obj, "readOnly", path),
            write_only=self._get_bool(obj, "writeOnly", path),
            deprecated=self._get_bool(obj, "deprecated", path),
            external_docs=self._parse_external_docs(obj.get("externalDocs"), f"{path}/externalDocs"),
            example=copy.deepcopy(obj.get("example")),
            title=self._get_str(obj, "title", path),
            description=self._get_str(obj, "description", path),
            discriminator=self._get_str(obj, "discriminator", path),
            default=copy.deepcopy(obj.get("default")),
        )

    def _parse_external_docs(self, value: Any, path: str) -> ExternalDocumentation | None:
        if value is None:
            return None
        obj = self._expect_object(value, path)
        url = self._get_str(obj, "url", path)
        if url is None:
            raise SchemaParseError(path, "missing required field 'url'")
        return ExternalDocumentation(url=url, description=self._get_str(obj, "description", path))

    def _parse_schema_kind(self, obj: dict[str, Any], path: str) -> SchemaKind:
        """
        Decide which kind a flattened schema object represents.

        The first matching rule wins; see the module docstring for the order.
        """
        type_name = obj.get("type")
        if isinstance(type_name, str) and type_name in self._type_parsers:
            accepted, parse_type = self._type_parsers[type_name]
            logger.debug("%s: parsing as type %r", path, type_name)
            self._check_leftover_keys(obj, accepted | {"type"}, path)
            return parse_type(obj, path)

        if "oneOf" in obj:
            logger.debug("%s: parsing as oneOf", path)
            self._check_leftover_keys(obj, {"oneOf"}, path)
            return OneOf(one_of=self._parse_composition(obj, "oneOf", path))

        if "allOf" in obj:
            logger.debug("%s: parsing as allOf", path)
            self._check_leftover_keys(obj, {"allOf"}, path)
            return AllOf(all_of=self._parse_composition(obj, "allOf", path))

        if "anyOf" in obj:
            logger.debug("%s: parsing as anyOf", path)
            self._check_leftover_keys(obj, {"anyOf"}, path)
            return AnyOf(any_of=self._parse_composition(obj, "anyOf", path))

        logger.debug("%s: parsing as any schema", path)
        self._check_leftover_keys(obj, self.ANY_KEYS, path)
        return self._parse_any_schema(obj, path)

    def _check_leftover_keys(self, obj: dict[str, Any], accepted: frozenset[str] | set[str], path: str) -> None:
        """Reject (strict) or log (lenient) keys the chosen kind does not accept."""
        leftover = [key for key in obj if key not in accepted and key not in self.SCHEMA_DATA_KEYS]
        if not leftover:
            return
        if self.config.strict:
            raise SchemaParseError(path, f"unexpected keys: {', '.join(leftover)}")
        logger.debug("%s: ignoring keys %s", path, leftover)

    def _parse_composition(self, obj: dict[str, Any], keyword: str, path: str) -> list[ReferenceOr[Schema]]:
        members = obj[keyword]
        if not isinstance(members, list):
            raise SchemaParseError(f"{path}/{keyword}", "expected a list of schemas")
        return [self.parse_reference_or(member, f"{path}/{keyword}/{i}") for i, member in enumerate(members)]

    def _parse_string_type(self, obj: dict[str, Any], path: str) -> StringType:
        enumeration = self._get_list(obj, "enum", path)
        for i, member in enumerate(enumeration):
            if member is not None and not isinstance(member, str):
                raise SchemaParseError(f"{path}/enum/{i}", "expected a string or null")

        return StringType(
            format=parse_variant_or_empty(StringFormat, obj.get("format"), f"{path}/format"),
            pattern=self._get_str(obj, "pattern", path),
            enumeration=enumeration,
            min_length=self._get_count(obj, "minLength", path),
            max_length=self._get_count(obj, "maxLength", path),
        )

    def _parse_number_type(self, obj: dict[str, Any], path: str) -> NumberType:
        enumeration = self._get_list(obj, "enum", path)
        for i, member in enumerate(enumeration):
            if not _is_number(member):
                raise SchemaParseError(f"{path}/enum/{i}", "expected a number")

        return NumberType(
            format=parse_variant_or_empty(NumberFormat, obj.get("format"), f"{path}/format"),
            multiple_of=self._get_number(obj, "multipleOf", path),
            exclusive_minimum=self._get_number(obj, "exclusiveMinimum", path),
            exclusive_maximum=self._get_number(obj, "exclusiveMaximum", path),
            minimum=self._get_number(obj, "minimum", path),
            maximum=self._get_number(obj, "maximum", path),
            enumeration=enumeration,
        )

    def _parse_integer_type(self, obj: dict[str, Any], path: str) -> IntegerType:
        enumeration = self._get_list(obj, "enum", path)
        for i, member in enumerate(enumeration):
            if not _is_integer(member):
                raise SchemaParseError(f"{path}/enum/{i}", "expected an integer")

        return IntegerType(
            format=self._parse_integer_format(obj.get("format"), f"{path}/format"),
            multiple_of=self._get_int(obj, "multipleOf", path),
            exclusive_minimum=self._get_int(obj, "exclusiveMinimum", path),
            exclusive_maximum=self._get_int(obj, "exclusiveMaximum", path),
            minimum=self._get_int(obj, "minimum", path),
            maximum=self._get_int(obj, "maximum", path),
            enumeration=enumeration,
        )

    def _parse_integer_format(self, raw: Any, path: str) -> VariantOrUnknownOrEmpty[IntegerFormat]:
        """Read an integer format; unsigned ones are rejected (strict) or logged when disabled."""
        value = parse_variant_or_empty(IntegerFormat, raw, path)
        if self.config.unsigned_integer_formats:
            return value
        if isinstance(value, Known) and value.variant not in SIGNED_INTEGER_FORMATS:
            if self.config.strict:
                raise SchemaParseError(path, f"unsigned format '{value.variant.value}' is disabled")
            logger.debug("%s: keeping disabled unsigned format %r", path, value.variant.value)
        return value

    def _parse_object_type(self, obj: dict[str, Any], path: str) -> ObjectType:
        return ObjectType(
            properties=self._parse_properties(obj, path),
            required=self._get_str_list(obj, "required", path),
            additional_properties=self._parse_additional_properties(obj, path),
            min_properties=self._get_count(obj, "minProperties", path),
            max_properties=self._get_count(obj, "maxProperties", path),
        )

    def _parse_array_type(self, obj: dict[str, Any], path: str) -> ArrayType:
        unique_items = self._get_bool(obj, "uniqueItems", path)
        return ArrayType(
            items=self._parse_items(obj, path),
            min_items=self._get_count(obj, "minItems", path),
            max_items=self._get_count(obj, "maxItems", path),
            unique_items=bool(unique_items),
        )

    def _parse_boolean_type(self, obj: dict[str, Any], path: str) -> BooleanType:
        return BooleanType()

    def _parse_any_schema(self, obj: dict[str, Any], path: str) -> AnySchema:
        """Parse the fallback shape; every field is optional."""
        return AnySchema(
            pattern=self._get_str(obj, "pattern", path),
            multiple_of=self._get_number(obj, "multipleOf", path),
            exclusive_minimum=self._get_bool(obj, "exclusiveMinimum", path),
            exclusive_maximum=self._get_bool(obj, "exclusiveMaximum", path),
            minimum=self._get_number(obj, "minimum", path),
            maximum=self._get_number(obj, "maximum", path),
            properties=self._parse_properties(obj, path),
            required=self._get_str_list(obj, "required", path),
            additional_properties=self._parse_additional_properties(obj, path),
            min_properties=self._get_count(obj, "minProperties", path),
            max_properties=self._get_count(obj, "maxProperties", path),
            items=self._parse_items(obj, path),
            min_items=self._get_count(obj, "minItems", path),
            max_items=self._get_count(obj, "maxItems", path),
            unique_items=self._get_bool(obj, "uniqueItems", path),
            format=self._get_str(obj, "format", path),
        )

    def _parse_properties(self, obj: dict[str, Any], path: str) -> dict[str, ReferenceOr[Schema]]:
        """Parse the `properties` map, keeping the document's order."""
        value = obj.get("properties")
        if value is None:
            return {}
        properties = self._expect_object(value, f"{path}/properties")
        return {
            name: self.parse_reference_or(prop, f"{path}/properties/{escape_pointer(name)}")
            for name, prop in properties.items()
        }

    def _parse_additional_properties(self, obj: dict[str, Any], path: str) -> AdditionalProperties | None:
        value = obj.get("additionalProperties")
        if value is None or isinstance(value, bool):
            return value
        return self.parse_reference_or(value, f"{path}/additionalProperties")

    def _parse_items(self, obj: dict[str, Any], path: str) -> ReferenceOr[Schema] | None:
        value = obj.get("items")
        if value is None:
            return None
        return self.parse_reference_or(value, f"{path}/items")

    # Scalar readers. An explicit null reads the same as an absent key.

    def _expect_object(self, value: Any, path: str) -> dict[str, Any]:
        if not isinstance(value, dict):
            raise SchemaParseError(path, f"expected an object, got {_json_type(value)}")
        return value

    def _get_bool(self, obj: dict[str, Any], key: str, path: str) -> bool | None:
        value = obj.get(key)
        if value is not None and not isinstance(value, bool):
            raise SchemaParseError(f"{path}/{key}", f"expected a boolean, got {_json_type(value)}")
        return value

    def _get_str(self, obj: dict[str, Any], key: str, path: str) -> str | None:
        value = obj.get(key)
        if value is not None and not isinstance(value, str):
            raise SchemaParseError(f"{path}/{key}", f"expected a string, got {_json_type(value)}")
        return value

    def _get_number(self, obj: dict[str, Any], key: str, path: str) -> float | None:
        value = obj.get(key)
        if value is not None and not _is_number(value):
            raise SchemaParseError(f"{path}/{key}", f"expected a number, got {_json_type(value)}")
        return value

    def _get_int(self, obj: dict[str, Any], key: str, path: str) -> int | None:
        value = obj.get(key)
        if value is not None and not _is_integer(value):
            raise SchemaParseError(f"{path}/{key}", f"expected an integer, got {_json_type(value)}")
        return value

    def _get_count(self, obj: dict[str, Any], key: str, path: str) -> int | None:
        value = self._get_int(obj, key, path)
        if value is not None and value < 0:
            raise SchemaParseError(f"{path}/{key}", "expected a non-negative integer")
        return value

    def _get_list(self, obj: dict[str, Any], key: str, path: str) -> list[Any]:
        value = obj.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise SchemaParseError(f"{path}/{key}", f"expected a list, got {_json_type(value)}")
        return list(value)

    def _get_str_list(self, obj: dict[str, Any], key: str, path: str) -> list[str]:
        values = self._get_list(obj, key, path)
        for i, value in enumerate(values):
            if not isinstance(value, str):
                raise SchemaParseError(f"{path}/{key}/{i}", f"expected a string, got {_json_type(value)}")
        return values


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _json_type(value: Any) -> str:
    """Name a Python value by its JSON type."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
