"""
Schema tree node definitions.

A `Schema` pairs shape-independent metadata (`SchemaData`) with exactly one
`SchemaKind`: a primitive `Type`, a composition (`OneOf`, `AllOf`, `AnyOf`)
or the open `AnySchema` fallback. On the wire both parts are flattened into
a single object.

Attribute names are snake_case; the serde layer maps them to the
lowerCamelCase keywords of the format. The `enum` keyword is stored as
`enumeration`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from .formats import IntegerFormat, NumberFormat, StringFormat
from .reference import ReferenceOr
from .variant_or import EMPTY, VariantOrUnknownOrEmpty, normalize_variant

if TYPE_CHECKING:
    from ..config import SchemaConfig


@dataclass
class ExternalDocumentation:
    """Link to additional documentation for a schema."""

    url: str = ""
    description: str | None = None


@dataclass
class SchemaData:
    """Metadata shared by every schema node. None means unspecified."""

    nullable: bool | None = None
    read_only: bool | None = None
    write_only: bool | None = None
    deprecated: bool | None = None
    external_docs: ExternalDocumentation | None = None
    example: Any = None
    title: str | None = None
    description: str | None = None

    # Name of the required property used to tell subtypes apart
    discriminator: str | None = None

    default: Any = None


@dataclass
class StringType:
    format: VariantOrUnknownOrEmpty[StringFormat] = EMPTY
    pattern: str | None = None

    # None is a legal member (nullable string enums)
    enumeration: list[str | None] = field(default_factory=list)

    min_length: int | None = None
    max_length: int | None = None

    def __post_init__(self):
        self.format = normalize_variant(StringFormat, self.format)


@dataclass
class NumberType:
    format: VariantOrUnknownOrEmpty[NumberFormat] = EMPTY
    multiple_of: float | None = None

    # Numeric bounds, unlike the boolean flags of AnySchema
    exclusive_minimum: float | None = None
    exclusive_maximum: float | None = None

    minimum: float | None = None
    maximum: float | None = None
    enumeration: list[float] = field(default_factory=list)

    def __post_init__(self):
        self.format = normalize_variant(NumberFormat, self.format)


@dataclass
class IntegerType:
    format: VariantOrUnknownOrEmpty[IntegerFormat] = EMPTY
    multiple_of: int | None = None
    exclusive_minimum: int | None = None
    exclusive_maximum: int | None = None
    minimum: int | None = None
    maximum: int | None = None
    enumeration: list[int] = field(default_factory=list)

    def __post_init__(self):
        self.format = normalize_variant(IntegerFormat, self.format)


@dataclass
class ObjectType:
    # Insertion order is significant
    properties: dict[str, ReferenceOr[Schema]] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    additional_properties: AdditionalProperties | None = None
    min_properties: int | None = None
    max_properties: int | None = None


@dataclass
class ArrayType:
    items: ReferenceOr[Schema] | None = None
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool = False


@dataclass
class BooleanType:
    pass


@dataclass
class OneOf:
    one_of: list[ReferenceOr[Schema]] = field(default_factory=list)


@dataclass
class AllOf:
    all_of: list[ReferenceOr[Schema]] = field(default_factory=list)


@dataclass
class AnyOf:
    any_of: list[ReferenceOr[Schema]] = field(default_factory=list)


@dataclass
class AnySchema:
    """Fallback shape for schemas without a recognized `type` tag.

    Carries the constraint keywords of every primitive shape. The exclusive
    bounds are the legacy boolean flags that modify `minimum`/`maximum`.
    """

    pattern: str | None = None
    multiple_of: float | None = None
    exclusive_minimum: bool | None = None
    exclusive_maximum: bool | None = None
    minimum: float | None = None
    maximum: float | None = None
    properties: dict[str, ReferenceOr[Schema]] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    additional_properties: AdditionalProperties | None = None
    min_properties: int | None = None
    max_properties: int | None = None
    items: ReferenceOr[Schema] | None = None
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool | None = None
    format: str | None = None


Type = Union[StringType, NumberType, IntegerType, ObjectType, ArrayType, BooleanType]

SchemaKind = Union[Type, OneOf, AllOf, AnyOf, AnySchema]

# `true`/`false`, or a schema every extra property must match
AdditionalProperties = Union[bool, ReferenceOr["Schema"]]

# Value of the `type` tag for each primitive shape
TYPE_NAMES: dict[type, str] = {
    StringType: "string",
    NumberType: "number",
    IntegerType: "integer",
    ObjectType: "object",
    ArrayType: "array",
    BooleanType: "boolean",
}


@dataclass
class Schema:
    """A node of the schema tree."""

    schema_data: SchemaData = field(default_factory=SchemaData)
    schema_kind: SchemaKind = field(default_factory=AnySchema)

    @property
    def kind_name(self) -> str:
        """Short name of the kind: a `type` value, a composition keyword or `any`."""
        kind = self.schema_kind
        if type(kind) in TYPE_NAMES:
            return TYPE_NAMES[type(kind)]
        if isinstance(kind, OneOf):
            return "oneOf"
        if isinstance(kind, AllOf):
            return "allOf"
        if isinstance(kind, AnyOf):
            return "anyOf"
        return "any"

    @staticmethod
    def from_dict(value: Any, config: SchemaConfig | None = None) -> Schema:
        """Parse a schema from a JSON-compatible value."""
        from ..serde.parser import SchemaParser

        return SchemaParser(config).parse(value)

    def to_dict(self) -> dict[str, Any]:
        """Serialize this schema to a JSON-compatible dictionary."""
        from ..serde.serializer import SchemaSerializer

        return SchemaSerializer().serialize(self)
