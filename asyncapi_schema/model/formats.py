"""
Known values of the `format` keyword for each primitive type.
"""

from __future__ import annotations

from enum import Enum


class StringFormat(Enum):
    DATE = "date"
    DATE_TIME = "date-time"
    PASSWORD = "password"
    BYTE = "byte"
    BINARY = "binary"


class NumberFormat(Enum):
    FLOAT = "float"
    DOUBLE = "double"


class IntegerFormat(Enum):
    UINT32 = "uint32"
    UINT64 = "uint64"
    INT32 = "int32"
    INT64 = "int64"


# Integer formats known to every revision of the format
SIGNED_INTEGER_FORMATS = frozenset({IntegerFormat.INT32, IntegerFormat.INT64})
