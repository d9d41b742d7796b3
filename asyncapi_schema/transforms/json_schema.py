"""
Export schema trees to JSON Schema (draft 2020-12).

The differences handled here:
- `nullable: true` becomes a `type` list containing "null" (or an `anyOf`
  with a null branch when the node has no `type` tag); a string `enum`
  holding null gets the same `type` list
- the boolean `exclusiveMinimum`/`exclusiveMaximum` flags of untyped
  schemas become numeric bounds taken from `minimum`/`maximum`
- `example` becomes a one-element `examples` list
- references to `#/components/schemas/<name>` are rewritten to `<prefix><name>`
- `discriminator` and `externalDocs` have no JSON Schema keyword and are
  kept as `x-discriminator` and `x-externalDocs`
"""

from __future__ import annotations

import copy
from typing import Any

from ..model.nodes import (
    TYPE_NAMES,
    AllOf,
    AnyOf,
    AnySchema,
    ArrayType,
    IntegerType,
    NumberType,
    ObjectType,
    OneOf,
    Schema,
    SchemaData,
    StringType,
)
from ..model.reference import COMPONENTS_SCHEMAS_PREFIX, REF_KEY, Reference, ReferenceOr
from ..model.variant_or import dump_variant

JSON_SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"


class JsonSchemaExporter:
    """Converts `Schema` trees to JSON Schema dictionaries."""

    def __init__(self, ref_prefix: str = "#/$defs/"):
        """
        Initialize the exporter.

        Args:
            ref_prefix: Replacement for the `#/components/schemas/` prefix
        """
        self.ref_prefix = ref_prefix

    def export(self, schema: Schema) -> dict[str, Any]:
        out = self._export_kind(schema)
        if schema.schema_data.nullable:
            out = self._make_nullable(out)
        out.update(self._export_schema_data(schema.schema_data))
        return out

    def export_reference_or(self, value: ReferenceOr[Schema]) -> dict[str, Any]:
        if isinstance(value, Reference):
            return {REF_KEY: self.rewrite_reference(value.reference)}
        return self.export(value)

    def rewrite_reference(self, reference: str) -> str:
        if reference.startswith(COMPONENTS_SCHEMAS_PREFIX):
            return self.ref_prefix + reference[len(COMPONENTS_SCHEMAS_PREFIX) :]
        return reference

    def _make_nullable(self, out: dict[str, Any]) -> dict[str, Any]:
        if "type" not in out:
            return {"anyOf": [out, {"type": "null"}]}
        if not isinstance(out["type"], list):
            out["type"] = [out["type"], "null"]
        if "enum" in out and None not in out["enum"]:
            out["enum"].append(None)
        return out

    def _export_schema_data(self, data: SchemaData) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if data.title is not None:
            out["title"] = data.title
        if data.description is not None:
            out["description"] = data.description
        if data.default is not None:
            out["default"] = copy.deepcopy(data.default)
        if data.example is not None:
            out["examples"] = [copy.deepcopy(data.example)]
        if data.deprecated is not None:
            out["deprecated"] = data.deprecated
        if data.read_only is not None:
            out["readOnly"] = data.read_only
        if data.write_only is not None:
            out["writeOnly"] = data.write_only
        if data.discriminator is not None:
            out["x-discriminator"] = data.discriminator
        if data.external_docs is not None:
            docs = {"url": data.external_docs.url}
            if data.external_docs.description is not None:
                docs["description"] = data.external_docs.description
            out["x-externalDocs"] = docs
        return out

    def _export_kind(self, schema: Schema) -> dict[str, Any]:
        kind = schema.schema_kind
        if isinstance(kind, OneOf):
            return {"oneOf": [self.export_reference_or(m) for m in kind.one_of]}
        if isinstance(kind, AllOf):
            return {"allOf": [self.export_reference_or(m) for m in kind.all_of]}
        if isinstance(kind, AnyOf):
            return {"anyOf": [self.export_reference_or(m) for m in kind.any_of]}
        if isinstance(kind, AnySchema):
            return self._export_any_schema(kind)

        out: dict[str, Any] = {"type": TYPE_NAMES[type(kind)]}
        if isinstance(kind, StringType):
            _copy(out, "format", dump_variant(kind.format))
            _copy(out, "pattern", kind.pattern)
            _copy(out, "minLength", kind.min_length)
            _copy(out, "maxLength", kind.max_length)
            if kind.enumeration:
                out["enum"] = list(kind.enumeration)
                # A null member only matches when "null" is an accepted type
                if None in kind.enumeration:
                    out["type"] = [out["type"], "null"]
        elif isinstance(kind, (NumberType, IntegerType)):
            _copy(out, "format", dump_variant(kind.format))
            _copy(out, "multipleOf", kind.multiple_of)
            _copy(out, "minimum", kind.minimum)
            _copy(out, "maximum", kind.maximum)
            _copy(out, "exclusiveMinimum", kind.exclusive_minimum)
            _copy(out, "exclusiveMaximum", kind.exclusive_maximum)
            if kind.enumeration:
                out["enum"] = list(kind.enumeration)
        elif isinstance(kind, ObjectType):
            self._export_object_fields(out, kind)
        elif isinstance(kind, ArrayType):
            if kind.items is not None:
                out["items"] = self.export_reference_or(kind.items)
            _copy(out, "minItems", kind.min_items)
            _copy(out, "maxItems", kind.max_items)
            if kind.unique_items:
                out["uniqueItems"] = True
        return out

    def _export_any_schema(self, kind: AnySchema) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _copy(out, "format", kind.format)
        _copy(out, "pattern", kind.pattern)
        _copy(out, "multipleOf", kind.multiple_of)

        # Legacy boolean flags turn the plain bound into an exclusive one
        if kind.minimum is not None:
            out["exclusiveMinimum" if kind.exclusive_minimum else "minimum"] = kind.minimum
        if kind.maximum is not None:
            out["exclusiveMaximum" if kind.exclusive_maximum else "maximum"] = kind.maximum

        self._export_object_fields(out, kind)
        if kind.items is not None:
            out["items"] = self.export_reference_or(kind.items)
        _copy(out, "minItems", kind.min_items)
        _copy(out, "maxItems", kind.max_items)
        _copy(out, "uniqueItems", kind.unique_items)
        return out

    def _export_object_fields(self, out: dict[str, Any], kind: ObjectType | AnySchema) -> None:
        if kind.properties:
            out["properties"] = {name: self.export_reference_or(prop) for name, prop in kind.properties.items()}
        if kind.required:
            out["required"] = list(kind.required)
        if isinstance(kind.additional_properties, bool):
            out["additionalProperties"] = kind.additional_properties
        elif kind.additional_properties is not None:
            out["additionalProperties"] = self.export_reference_or(kind.additional_properties)
        _copy(out, "minProperties", kind.min_properties)
        _copy(out, "maxProperties", kind.max_properties)


def _copy(out: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        out[key] = value


def to_json_schema(schema: ReferenceOr[Schema], ref_prefix: str = "#/$defs/") -> dict[str, Any]:
    """Convert a single schema (or reference) to JSON Schema."""
    return JsonSchemaExporter(ref_prefix).export_reference_or(schema)


def components_to_json_schema(components: dict[str, ReferenceOr[Schema]], ref_prefix: str = "#/$defs/") -> dict[str, Any]:
    """
    Convert named schemas to a JSON Schema document with one `$defs` entry each.

    Args:
        components: Mapping of schema name to schema, e.g. from
            `SchemaParser.parse_components`
        ref_prefix: Replacement for the `#/components/schemas/` prefix

    Returns:
        A JSON Schema document
    """
    exporter = JsonSchemaExporter(ref_prefix)
    return {
        "$schema": JSON_SCHEMA_DIALECT,
        "$defs": {name: exporter.export_reference_or(schema) for name, schema in components.items()},
    }
