"""
Configuration for schema parsing, export and documentation rendering.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class DocsConfig:
    """Configuration for Markdown rendering."""

    # Heading level used for each top-level schema
    title_level: int = 1

    # Whether to render the `example` column
    include_examples: bool = True


@dataclass
class SchemaConfig:
    """Configuration options for reading and writing schemas."""

    # Reject keys that the chosen schema variant does not accept
    strict: bool = False

    # Accept uint32/uint64 integer formats; when off they are logged, or rejected in strict mode
    unsigned_integer_formats: bool = True

    # JSON indentation used by the command line
    indent: int = 2

    # Prefix for rewritten references in JSON Schema exports
    ref_prefix: str = "#/$defs/"

    docs: DocsConfig = field(default_factory=DocsConfig)

    @staticmethod
    def from_dict(d: dict) -> SchemaConfig:
        """Create a config from a dictionary."""
        config = SchemaConfig()
        for k, v in d.items():
            if k == "docs" and isinstance(v, dict):
                config.docs = DocsConfig(**v)
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "strict": self.strict,
            "unsigned_integer_formats": self.unsigned_integer_formats,
            "indent": self.indent,
            "ref_prefix": self.ref_prefix,
            "docs": {
                "title_level": self.docs.title_level,
                "include_examples": self.docs.include_examples,
            },
        }
