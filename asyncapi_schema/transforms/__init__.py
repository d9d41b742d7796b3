"""
Conversions from the schema model to other schema dialects.
"""

from __future__ import annotations

from .json_schema import JsonSchemaExporter, components_to_json_schema, to_json_schema

__all__ = [
    "JsonSchemaExporter",
    "to_json_schema",
    "components_to_json_schema",
]
