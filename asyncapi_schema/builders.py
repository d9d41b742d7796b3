"""
Factories that build property schemas from Python type annotations.

Typical use is describing a message payload next to the code that
produces it:

    payload = schema_for_type(SensorReading, description="One reading")

Formats default to the widest variant (`int64`, `double`) and can be
narrowed with `Annotated`, e.g. `Annotated[int, IntegerFormat.UINT32]`.
A plain string inside `Annotated` becomes the description.
"""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Sequence
from types import NoneType, UnionType
from typing import (
    Annotated,
    Any,
    Literal,
    Union,
    get_args,
    get_origin,
    get_type_hints,
    is_typeddict,
)

from .model.formats import IntegerFormat, NumberFormat, StringFormat
from .model.nodes import (
    ArrayType,
    BooleanType,
    IntegerType,
    NumberType,
    ObjectType,
    Schema,
    SchemaData,
    StringType,
)
from .model.reference import ReferenceOr
from .model.variant_or import Known


def _is_union(annotation: Any) -> bool:
    """Check if a type annotation is Union."""
    origin = get_origin(annotation)
    return origin is Union or origin is UnionType


def _is_array(annotation: Any) -> bool:
    """Check if a type annotation is a homogeneous sequence."""
    origin = get_origin(annotation)
    return origin in (list, set, frozenset, tuple, Sequence)


def _is_enum(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, enum.Enum)


def _is_record(annotation: Any) -> bool:
    return is_typeddict(annotation) or (isinstance(annotation, type) and dataclasses.is_dataclass(annotation))


class _Builder:
    def __init__(self) -> None:
        self._format: enum.Enum | None = None

    def build(self, annotation: Any) -> Schema:
        """Convert an annotation to a schema."""
        if get_origin(annotation) is Annotated:
            return self._build_annotated(annotation)

        if _is_union(annotation):
            return self._build_union(annotation)

        if _is_array(annotation):
            return self._build_array(annotation)

        if get_origin(annotation) is Literal:
            return self._build_literal(annotation)

        if _is_enum(annotation):
            return self._build_enum(annotation)

        if _is_record(annotation):
            return self._build_record(annotation)

        # bool before int: bool is an int subclass
        if annotation is bool:
            return Schema(schema_kind=BooleanType())
        if annotation is int:
            return Schema(schema_kind=IntegerType(format=Known(self._take_format(IntegerFormat, IntegerFormat.INT64))))
        if annotation is float:
            return Schema(schema_kind=NumberType(format=Known(self._take_format(NumberFormat, NumberFormat.DOUBLE))))
        if annotation is str:
            return Schema(schema_kind=StringType(format=Known(self._take_format(StringFormat, StringFormat.BYTE))))
        if annotation is bytes:
            return Schema(schema_kind=StringType(format=Known(StringFormat.BINARY)))
        if annotation is dict or get_origin(annotation) is dict:
            return Schema(schema_kind=ObjectType(additional_properties=True))

        raise TypeError(f"Unsupported type: {annotation!r}")

    def _take_format(self, enum_cls: type[enum.Enum], fallback: enum.Enum) -> enum.Enum:
        """Use the pending `Annotated` format if it belongs to `enum_cls`."""
        fmt, self._format = self._format, None
        if fmt is None:
            return fallback
        if not isinstance(fmt, enum_cls):
            raise TypeError(f"{fmt!r} is not a {enum_cls.__name__}")
        return fmt

    def _build_annotated(self, annotation: Any) -> Schema:
        base, *extras = get_args(annotation)
        description = None
        for extra in extras:
            if isinstance(extra, (StringFormat, NumberFormat, IntegerFormat)):
                self._format = extra
            elif isinstance(extra, str) and description is None:
                description = extra

        schema = self.build(base)
        if self._format is not None:
            fmt, self._format = self._format, None
            raise TypeError(f"{fmt!r} does not apply to {base!r}")
        if description is not None and schema.schema_data.description is None:
            schema.schema_data.description = description
        return schema

    def _build_union(self, annotation: Any) -> Schema:
        members = [arg for arg in get_args(annotation) if arg is not NoneType]
        if len(members) != 1:
            raise TypeError(f"Only Optional[X] unions are supported, got {annotation!r}")
        schema = self.build(members[0])
        schema.schema_data.nullable = True
        return schema

    def _build_array(self, annotation: Any) -> Schema:
        args = [arg for arg in get_args(annotation) if arg is not Ellipsis]
        if get_origin(annotation) is tuple and len(set(args)) > 1:
            raise TypeError(f"Only homogeneous tuples are supported, got {annotation!r}")

        items = self.build(args[0]) if args else None
        unique = get_origin(annotation) in (set, frozenset)
        return Schema(schema_kind=ArrayType(items=items, unique_items=unique))

    def _build_literal(self, annotation: Any) -> Schema:
        values = list(get_args(annotation))
        if not all(isinstance(v, str) or v is None for v in values):
            raise TypeError(f"Only string literals are supported, got {annotation!r}")
        return Schema(schema_kind=StringType(enumeration=values))

    def _build_enum(self, annotation: type[enum.Enum]) -> Schema:
        values = [member.value for member in annotation]
        if not all(isinstance(v, str) for v in values):
            raise TypeError(f"Only enums with string values are supported, got {annotation!r}")
        return Schema(
            schema_data=SchemaData(title=annotation.__name__),
            schema_kind=StringType(enumeration=values),
        )

    def _build_record(self, annotation: type) -> Schema:
        """Build an object schema from a dataclass or TypedDict."""
        hints = get_type_hints(annotation, include_extras=True)
        properties: dict[str, ReferenceOr[Schema]] = {}
        required: list[str] = []

        if is_typeddict(annotation):
            names = list(hints)
            required_keys = getattr(annotation, "__required_keys__", frozenset(names))
            required = [name for name in names if name in required_keys]
        else:
            names = []
            for f in dataclasses.fields(annotation):
                names.append(f.name)
                if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
                    required.append(f.name)

        for name in names:
            properties[name] = self.build(hints[name])

        schema_data = SchemaData(title=annotation.__name__)
        doc = annotation.__doc__
        # dataclasses synthesize a signature docstring when none is given
        if doc and not doc.startswith(f"{annotation.__name__}("):
            schema_data.description = doc.strip()

        return Schema(
            schema_data=schema_data,
            schema_kind=ObjectType(properties=properties, required=required),
        )


def schema_for_type(annotation: Any, description: str | None = None, example: Any = None) -> Schema:
    """
    Build a schema describing values of a Python type.

    Args:
        annotation: A type or typing annotation (`int`, `list[str]`,
            `Optional[float]`, `Annotated[...]`, an Enum, a dataclass or a
            TypedDict)
        description: Optional description stored on the schema
        example: Optional example value stored on the schema

    Returns:
        The schema for the annotation

    Raises:
        TypeError: If the annotation (or a nested one) is not supported
    """
    schema = _Builder().build(annotation)
    if description is not None:
        schema.schema_data.description = description
    if example is not None:
        schema.schema_data.example = example
    return schema


def property_for(annotation: Any, description: str | None = None, example: Any = None) -> ReferenceOr[Schema]:
    """Build an inline property schema for use in `ObjectType.properties`."""
    return schema_for_type(annotation, description=description, example=example)


def string_property(example: str, description: str | None = None) -> ReferenceOr[Schema]:
    """A `byte` formatted string property carrying an example value."""
    return Schema(
        schema_data=SchemaData(example=example, description=description),
        schema_kind=StringType(format=Known(StringFormat.BYTE)),
    )


def vector_property(
    component: Any,
    description: str | None = None,
    names: Sequence[str] = ("x", "y"),
) -> ReferenceOr[Schema]:
    """
    An object property with one numeric member per vector component.

    Args:
        component: Component type, e.g. `int` or `Annotated[float, NumberFormat.FLOAT]`
        description: Optional description of the whole vector
        names: Component names, in order

    Returns:
        An inline object schema
    """
    properties: dict[str, ReferenceOr[Schema]] = {name: schema_for_type(component) for name in names}
    return Schema(
        schema_data=SchemaData(description=description),
        schema_kind=ObjectType(properties=properties),
    )
