"""AsyncAPI Schema Model

A Python package for reading, writing and transforming the schema
sub-document of AsyncAPI descriptions: a recursive tree of typed value
descriptors with lossless round-trips, plus JSON Schema export and
Markdown documentation.
"""

import logging

__version__ = "0.1.0"

from .config import DocsConfig, SchemaConfig
from .errors import RoundTripMismatchError, SchemaError, SchemaParseError
from .model import (
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
    ReferenceOr,
    Schema,
    SchemaData,
    SchemaKind,
    StringFormat,
    StringType,
    Type,
)
from .serde import SchemaParser, SchemaSerializer

logging.getLogger(__name__).addHandler(logging.NullHandler())

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
    "ExternalDocumentation",
    "StringFormat",
    "NumberFormat",
    "IntegerFormat",
    "Reference",
    "ReferenceOr",
    "SchemaParser",
    "SchemaSerializer",
    "SchemaConfig",
    "DocsConfig",
    "SchemaError",
    "SchemaParseError",
    "RoundTripMismatchError",
]
