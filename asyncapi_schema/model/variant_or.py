"""
Open enumerations: a closed set of known string variants that also
preserves any value outside that set.

An unrecognized string is never rejected or coerced; it is kept verbatim
so that it serializes back to exactly the same text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

from ..errors import SchemaParseError

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


@dataclass(frozen=True)
class Known(Generic[E]):
    """A value that matched one of the enum's variants."""

    variant: E


@dataclass(frozen=True)
class Unknown:
    """A string that matched no known variant, kept verbatim.

    Node constructors turn an `Unknown` spelling out a variant into `Known`.
    """

    value: str


@dataclass(frozen=True)
class Empty:
    """The field was absent."""


EMPTY = Empty()

VariantOrUnknown = Union[Known[E], Unknown]
VariantOrUnknownOrEmpty = Union[Known[E], Unknown, Empty]


def make_variant(enum_cls: type[E], text: str) -> VariantOrUnknown[E]:
    """Wrap `text` as `Known` when it names a variant of `enum_cls`, else as `Unknown`."""
    for member in enum_cls:
        if member.value == text:
            return Known(member)
    return Unknown(text)


def normalize_variant(enum_cls: type[E], value: VariantOrUnknownOrEmpty[E]) -> VariantOrUnknownOrEmpty[E]:
    """Replace an `Unknown` that spells out a variant of `enum_cls` by that `Known` variant."""
    if isinstance(value, Unknown):
        return make_variant(enum_cls, value.value)
    return value


def parse_variant(enum_cls: type[E], raw: Any, path: str = "#") -> VariantOrUnknown[E]:
    """
    Interpret a raw value as a known variant of `enum_cls`.

    Args:
        enum_cls: Enum whose member values are the canonical texts
        raw: Raw value from the document
        path: Location of the value (for error messages)

    Returns:
        `Known` when the text matches a variant exactly, `Unknown` otherwise

    Raises:
        SchemaParseError: If the value is not a string
    """
    if not isinstance(raw, str):
        raise SchemaParseError(path, f"expected a string, got {type(raw).__name__}")

    value = make_variant(enum_cls, raw)
    if isinstance(value, Unknown):
        logger.debug("%s: keeping unknown %s value %r", path, enum_cls.__name__, raw)
    return value


def parse_variant_or_empty(enum_cls: type[E], raw: Any, path: str = "#") -> VariantOrUnknownOrEmpty[E]:
    """Like `parse_variant`, but an absent (or null) value gives `EMPTY`."""
    if raw is None:
        return EMPTY
    return parse_variant(enum_cls, raw, path)


def dump_variant(value: VariantOrUnknownOrEmpty[Any]) -> str | None:
    """Return the wire text of an open enum value, or None to omit the field."""
    if isinstance(value, Known):
        return value.variant.value
    if isinstance(value, Unknown):
        return value.value
    return None


def is_empty(value: VariantOrUnknownOrEmpty[Any]) -> bool:
    return isinstance(value, Empty)
