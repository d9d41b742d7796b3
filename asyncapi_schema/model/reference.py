"""
Reference-or-inline values.

A `ReferenceOr[T]` is either a `Reference` holding an opaque pointer string
or an inline `T`. References are never resolved here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeVar, Union

T = TypeVar("T")

# Reserved key holding the pointer on the wire
REF_KEY = "$ref"

COMPONENTS_SCHEMAS_PREFIX = "#/components/schemas/"


@dataclass(frozen=True)
class Reference:
    """An unresolved `$ref` pointer."""

    reference: str

    @staticmethod
    def component(name: str) -> Reference:
        """Reference a schema declared under `components.schemas`."""
        return Reference(f"{COMPONENTS_SCHEMAS_PREFIX}{name}")

    @property
    def target_name(self) -> str:
        """Last segment of the pointer (e.g. `Foo` for `#/components/schemas/Foo`)."""
        return self.reference.rstrip("/").split("/")[-1]


ReferenceOr = Union[Reference, T]


def is_reference(value: Any) -> bool:
    return isinstance(value, Reference)
