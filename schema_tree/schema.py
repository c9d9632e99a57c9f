"""
schema.py - High-level API for loading a schema and validating values.
"""

from __future__ import annotations

from typing import Any

from . import evaluator
from .loader import decode_document
from .nodes import Group, Node
from .output import BasicOutput, DetailedOutput
from .parser import Parser

__all__ = ["Schema", "OUTPUT_FORMATS"]

OUTPUT_FORMATS = ("flag", "basic", "detailed")


class Schema:
    """A parsed validator tree plus convenience validation methods."""

    def __init__(self, root: Node, parser: Parser | None = None):
        self.root = root
        self.parser = parser

    @classmethod
    def load(cls, source: Any, parser: Parser | None = None) -> "Schema":
        """Parse *source* (mapping, bool, Path, file name, URI or JSON text)."""
        parser = parser or Parser()
        return cls(parser.parse(source), parser)

    @classmethod
    def parse(cls, text: str, base_uri: str | None = None, parser: Parser | None = None) -> "Schema":
        parser = parser or Parser()
        return cls(parser.parse_string(text, base_uri), parser)

    # ------------------------------------------------------------------ #
    # Metadata                                                           #
    # ------------------------------------------------------------------ #

    @property
    def title(self) -> str | None:
        return self.root.title if isinstance(self.root, Group) else None

    @property
    def description(self) -> str | None:
        return self.root.description if isinstance(self.root, Group) else None

    @property
    def uri(self) -> str | None:
        return self.root.source_uri

    # ------------------------------------------------------------------ #
    # Validation                                                         #
    # ------------------------------------------------------------------ #

    def validate(self, value: Any) -> bool:
        return evaluator.validate(self.root, value)

    def validate_basic(self, value: Any) -> BasicOutput:
        return evaluator.validate_basic(self.root, value)

    def validate_detailed(self, value: Any) -> DetailedOutput:
        return evaluator.validate_detailed(self.root, value)

    def validate_json(self, text: str, output: str = "basic") -> bool | BasicOutput | DetailedOutput:
        """Decode *text* (JSON, decimals preserved) and validate it."""
        return self.evaluate(decode_document(text), output)

    def evaluate(self, value: Any, output: str = "basic") -> bool | BasicOutput | DetailedOutput:
        if output == "flag":
            return self.validate(value)
        if output == "basic":
            return self.validate_basic(value)
        if output == "detailed":
            return self.validate_detailed(value)
        raise ValueError(f"Unknown output format '{output}'; expected one of {OUTPUT_FORMATS}")

    def __repr__(self) -> str:
        return f"Schema(uri={self.uri!r}, title={self.title!r})"