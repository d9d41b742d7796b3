"""
Exceptions raised while reading or writing schema trees.
"""

from __future__ import annotations


class SchemaError(Exception):
    """Base class for all errors raised by this package."""

    pass


class SchemaParseError(SchemaError, ValueError):
    """Raised when a structured value cannot be read as a schema.

    This can happen when:
    - A node that must be an object is not one
    - A composition keyword does not hold a list
    - A numeric, boolean or string field holds a value of the wrong type
    - Strict parsing finds keys no schema variant accepts

    Attributes:
        path: Location of the offending node (e.g. ``#/properties/id``)
        message: Human readable description of the problem
    """

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class RoundTripMismatchError(SchemaError):
    """Raised when re-serializing a parsed document does not reproduce it."""

    def __init__(self, name: str, expected: object, actual: object):
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(f"Round-trip mismatch for '{name}'")
