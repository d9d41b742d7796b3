"""
Markdown rendering of named schemas.

Each schema gets a section with its type, description and a property table.
Properties are listed in declaration order; inline objects nested under a
property are flattened into dotted paths (`address.city`, `items[].id`).
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jinja2

from ..config import SchemaConfig
from ..model.nodes import (
    AllOf,
    AnyOf,
    AnySchema,
    ArrayType,
    IntegerType,
    NumberType,
    ObjectType,
    OneOf,
    Schema,
    StringType,
)
from ..model.reference import Reference, ReferenceOr
from ..model.variant_or import dump_variant


@dataclass
class PropertyRow:
    """One line of a property table."""

    path: str
    type: str
    format: str = ""
    required: bool = False
    description: str = ""
    example: Any = None


def anchor(name: str) -> str:
    """GitHub style heading anchor for a schema name."""
    return re.sub(r"[^a-z0-9_-]", "", name.lower().replace(" ", "-"))


def _cell(text: str) -> str:
    """Make text safe for a single table cell."""
    return text.replace("|", "\\|").replace("\n", " ").strip()


class MarkdownRenderer:
    """Renders schemas to Markdown using Jinja2 templates."""

    TEMPLATE_LANG = "markdown"

    def __init__(self, config: SchemaConfig | None = None):
        """
        Initialize the renderer.

        Args:
            config: Configuration; only the `docs` section is used
        """
        self.config = config or SchemaConfig()
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
        )
        self.jinja_env.filters["rule"] = lambda _: "---"
        self.jinja_env.filters["code"] = lambda value: f"`{json.dumps(value)}`"

        self.document_template = self.jinja_env.get_template("document.md.jinja2")
        self.schema_template = self.jinja_env.get_template("schema.md.jinja2")

    def render(
        self,
        schemas: dict[str, ReferenceOr[Schema]],
        title: str | None = None,
        header: str | None = None,
    ) -> str:
        """
        Render a whole document.

        Args:
            schemas: Named schemas, rendered in mapping order
            title: Optional document title
            header: Optional generator command line, emitted as a comment

        Returns:
            The Markdown text
        """
        level = self.config.docs.title_level
        section_level = level + 1 if title else level
        sections = [self.render_schema(name, schema, section_level) for name, schema in schemas.items()]
        return self.document_template.render(
            header=header,
            title=title,
            title_level=level,
            sections=sections,
        )

    def render_schema(self, name: str, schema: ReferenceOr[Schema], level: int | None = None) -> str:
        """Render the section of a single named schema."""
        if level is None:
            level = self.config.docs.title_level

        context: dict[str, Any] = {
            "name": name,
            "level": level,
            "type": self.describe_type(schema),
            "columns": self._columns(),
            "rows": [],
        }
        if isinstance(schema, Schema):
            data = schema.schema_data
            context.update(
                description=data.description or data.title,
                deprecated=data.deprecated,
                external_docs=data.external_docs,
                format=self._format_of(schema),
                enum=self._enum_of(schema),
                rows=[self._cells(row) for row in self.collect_rows(schema)],
            )
        return self.schema_template.render(**context)

    def collect_rows(self, schema: Schema, prefix: str = "") -> list[PropertyRow]:
        """
        List the properties of an object schema, nested inline objects included.

        Args:
            schema: The schema whose properties are listed
            prefix: Path prefix of the enclosing property

        Returns:
            Rows in declaration order
        """
        kind = schema.schema_kind
        if not isinstance(kind, (ObjectType, AnySchema)):
            return []

        rows = []
        for name, prop in kind.properties.items():
            path = f"{prefix}{name}"
            row = PropertyRow(path=path, type=self.describe_type(prop), required=name in kind.required)
            if isinstance(prop, Schema):
                row.format = self._format_of(prop)
                row.description = prop.schema_data.description or prop.schema_data.title or ""
                row.example = prop.schema_data.example
            rows.append(row)

            if isinstance(prop, Schema):
                rows.extend(self.collect_rows(prop, f"{path}."))
                items = getattr(prop.schema_kind, "items", None)
                if isinstance(items, Schema):
                    rows.extend(self.collect_rows(items, f"{path}[]."))
        return rows

    def describe_type(self, value: ReferenceOr[Schema] | None) -> str:
        """Short type label, e.g. `array of string` or a link to a referenced schema."""
        if value is None:
            return "any"
        if isinstance(value, Reference):
            return f"[{value.target_name}](#{anchor(value.target_name)})"

        kind = value.schema_kind
        if isinstance(kind, ArrayType) or (isinstance(kind, AnySchema) and kind.items is not None):
            label = f"array of {self.describe_type(kind.items)}"
        elif isinstance(kind, (OneOf, AnyOf)):
            members = kind.one_of if isinstance(kind, OneOf) else kind.any_of
            label = f"{value.kind_name}({', '.join(self.describe_type(m) for m in members)})"
        elif isinstance(kind, AllOf):
            label = f"allOf({', '.join(self.describe_type(m) for m in kind.all_of)})"
        elif isinstance(kind, AnySchema) and kind.properties:
            label = "object"
        else:
            label = value.kind_name

        if value.schema_data.nullable:
            label += " (nullable)"
        return label

    def _format_of(self, schema: Schema) -> str:
        kind = schema.schema_kind
        if isinstance(kind, (StringType, NumberType, IntegerType)):
            return dump_variant(kind.format) or ""
        if isinstance(kind, AnySchema):
            return kind.format or ""
        return ""

    def _enum_of(self, schema: Schema) -> list[Any]:
        kind = schema.schema_kind
        if isinstance(kind, (StringType, NumberType, IntegerType)):
            return list(kind.enumeration)
        return []

    def _columns(self) -> list[str]:
        columns = ["Property", "Type", "Format", "Required", "Description"]
        if self.config.docs.include_examples:
            columns.append("Example")
        return columns

    def _cells(self, row: PropertyRow) -> list[str]:
        cells = [
            f"`{row.path}`",
            _cell(row.type),
            f"`{row.format}`" if row.format else "",
            "yes" if row.required else "no",
            _cell(row.description),
        ]
        if self.config.docs.include_examples:
            cells.append("" if row.example is None else f"`{_cell(json.dumps(row.example))}`")
        return cells
