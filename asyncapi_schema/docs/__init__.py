"""
Human readable documentation for schema trees.
"""

from __future__ import annotations

from .markdown import MarkdownRenderer, PropertyRow

__all__ = [
    "MarkdownRenderer",
    "PropertyRow",
]
