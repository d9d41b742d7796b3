"""
Schema serializer, the inverse of `SchemaParser`.

Each node becomes a single flat dictionary: the kind's keys (starting with
the `type` tag for primitive types) followed by the metadata keys. Absent
fields are omitted rather than written as null.
"""

from __future__ import annotations

import copy
from typing import Any

from ..model.nodes import (
    TYPE_NAMES,
    AdditionalProperties,
    AllOf,
    AnyOf,
    AnySchema,
    ArrayType,
    BooleanType,
    IntegerType,
    NumberType,
    ObjectType,
    OneOf,
    Schema,
    SchemaData,
    SchemaKind,
    StringType,
)
from ..model.reference import REF_KEY, Reference, ReferenceOr
from ..model.variant_or import dump_variant


def _put(out: dict[str, Any], key: str, value: Any) -> None:
    """Set `key` unless the value is absent."""
    if value is not None:
        out[key] = value


class SchemaSerializer:
    """Serializes `Schema` trees to JSON-compatible dictionaries."""

    def serialize(self, schema: Schema) -> dict[str, Any]:
        out = self._serialize_kind(schema.schema_kind)
        out.update(self._serialize_schema_data(schema.schema_data))
        return out

    def serialize_reference_or(self, value: ReferenceOr[Schema]) -> dict[str, Any]:
        if isinstance(value, Reference):
            return {REF_KEY: value.reference}
        return self.serialize(value)

    def serialize_components(self, schemas: dict[str, ReferenceOr[Schema]]) -> dict[str, Any]:
        """Serialize named schemas back into a `components.schemas` document."""
        return {"components": {"schemas": {name: self.serialize_reference_or(schema) for name, schema in schemas.items()}}}

    def _serialize_schema_data(self, data: SchemaData) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "nullable", data.nullable)
        _put(out, "readOnly", data.read_only)
        _put(out, "writeOnly", data.write_only)
        _put(out, "deprecated", data.deprecated)
        if data.external_docs is not None:
            docs: dict[str, Any] = {}
            _put(docs, "description", data.external_docs.description)
            docs["url"] = data.external_docs.url
            out["externalDocs"] = docs
        _put(out, "example", copy.deepcopy(data.example))
        _put(out, "title", data.title)
        _put(out, "description", data.description)
        _put(out, "discriminator", data.discriminator)
        _put(out, "default", copy.deepcopy(data.default))
        return out

    def _serialize_kind(self, kind: SchemaKind) -> dict[str, Any]:
        if isinstance(kind, OneOf):
            return {"oneOf": self._serialize_members(kind.one_of)}
        if isinstance(kind, AllOf):
            return {"allOf": self._serialize_members(kind.all_of)}
        if isinstance(kind, AnyOf):
            return {"anyOf": self._serialize_members(kind.any_of)}
        if isinstance(kind, AnySchema):
            return self._serialize_any_schema(kind)

        out: dict[str, Any] = {"type": TYPE_NAMES[type(kind)]}
        if isinstance(kind, StringType):
            _put(out, "format", dump_variant(kind.format))
            _put(out, "pattern", kind.pattern)
            if kind.enumeration:
                out["enum"] = list(kind.enumeration)
            _put(out, "minLength", kind.min_length)
            _put(out, "maxLength", kind.max_length)
        elif isinstance(kind, (NumberType, IntegerType)):
            _put(out, "format", dump_variant(kind.format))
            _put(out, "multipleOf", kind.multiple_of)
            _put(out, "exclusiveMinimum", kind.exclusive_minimum)
            _put(out, "exclusiveMaximum", kind.exclusive_maximum)
            _put(out, "minimum", kind.minimum)
            _put(out, "maximum", kind.maximum)
            if kind.enumeration:
                out["enum"] = list(kind.enumeration)
        elif isinstance(kind, ObjectType):
            self._serialize_object_fields(out, kind)
        elif isinstance(kind, ArrayType):
            if kind.items is not None:
                out["items"] = self.serialize_reference_or(kind.items)
            _put(out, "minItems", kind.min_items)
            _put(out, "maxItems", kind.max_items)
            if kind.unique_items:
                out["uniqueItems"] = True
        elif not isinstance(kind, BooleanType):
            raise TypeError(f"Unsupported schema kind: {type(kind).__name__}")
        return out

    def _serialize_any_schema(self, kind: AnySchema) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "pattern", kind.pattern)
        _put(out, "multipleOf", kind.multiple_of)
        _put(out, "exclusiveMinimum", kind.exclusive_minimum)
        _put(out, "exclusiveMaximum", kind.exclusive_maximum)
        _put(out, "minimum", kind.minimum)
        _put(out, "maximum", kind.maximum)
        self._serialize_object_fields(out, kind)
        if kind.items is not None:
            out["items"] = self.serialize_reference_or(kind.items)
        _put(out, "minItems", kind.min_items)
        _put(out, "maxItems", kind.max_items)
        _put(out, "uniqueItems", kind.unique_items)
        _put(out, "format", kind.format)
        return out

    def _serialize_object_fields(self, out: dict[str, Any], kind: ObjectType | AnySchema) -> None:
        if kind.properties:
            out["properties"] = {name: self.serialize_reference_or(prop) for name, prop in kind.properties.items()}
        if kind.required:
            out["required"] = list(kind.required)
        if kind.additional_properties is not None:
            out["additionalProperties"] = self._serialize_additional_properties(kind.additional_properties)
        _put(out, "minProperties", kind.min_properties)
        _put(out, "maxProperties", kind.max_properties)

    def _serialize_additional_properties(self, value: AdditionalProperties) -> Any:
        if isinstance(value, bool):
            return value
        return self.serialize_reference_or(value)

    def _serialize_members(self, members: list[ReferenceOr[Schema]]) -> list[dict[str, Any]]:
        return [self.serialize_reference_or(member) for member in members]
