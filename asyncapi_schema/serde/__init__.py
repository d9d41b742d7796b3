"""
Reading and writing schema trees from and to JSON-compatible values.
"""

from __future__ import annotations

from .parser import SchemaParser
from .serializer import SchemaSerializer

__all__ = [
    "SchemaParser",
    "SchemaSerializer",
]
