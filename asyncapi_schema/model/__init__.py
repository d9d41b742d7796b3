"""
In-memory model of the schema sub-document.
"""

from __future__ import annotations

from .formats import SIGNED_INTEGER_FORMATS, IntegerFormat, NumberFormat, StringFormat
from .nodes import (
    TYPE_NAMES,
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
from .reference import Reference, ReferenceOr, is_reference
from .variant_or import (
    EMPTY,
    Empty,
    Known,
    Unknown,
    VariantOrUnknown,
    VariantOrUnknownOrEmpty,
    dump_variant,
    is_empty,
    make_variant,
    normalize_variant,
    parse_variant,
    parse_variant_or_empty,
)

__all__ = [
    "Schema",
    "SchemaData",
    "SchemaKind",
    "Type",
    "StringType",
    "NumberType",
    "IntegerType",
    "ObjectType",
    "ArrayType",
    "BooleanType",
    "OneOf",
    "AllOf",
    "AnyOf",
    "AnySchema",
    "AdditionalProperties",
    "ExternalDocumentation",
    "TYPE_NAMES",
    "StringFormat",
    "NumberFormat",
    "IntegerFormat",
    "SIGNED_INTEGER_FORMATS",
    "Reference",
    "ReferenceOr",
    "is_reference",
    "Known",
    "Unknown",
    "Empty",
    "EMPTY",
    "VariantOrUnknown",
    "VariantOrUnknownOrEmpty",
    "parse_variant",
    "parse_variant_or_empty",
    "dump_variant",
    "is_empty",
    "make_variant",
    "normalize_variant",
]
