"""
errors.py - exceptions raised while turning a schema document into a tree.

Public API
----------
SchemaError
    Fatal parse-time error; carries the offending ``(uri, pointer)``.
SchemaReferenceError
    A ``$ref`` resolved back to a location that is still being parsed.
ResolutionError
    The loader could not produce a document for a URI.

Validation failures are never raised; they are reported through
:pymod:`schema_tree.output`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .pointer import Pointer

__all__ = [
    "SchemaError",
    "SchemaReferenceError",
    "ResolutionError",
    "render_location",
]


def render_location(uri: str | None, pointer: "Pointer | None") -> str:
    """Render ``uri#pointer``, or ``root`` / the bare pointer without a URI."""
    if uri is not None:
        if pointer is None:
            return uri
        return f"{uri}{pointer.schema_fragment()}"
    if pointer is None or pointer.is_root:
        return "root"
    return str(pointer)


class SchemaError(ValueError):
    """Raised when a schema document cannot be turned into a validator tree."""

    def __init__(self, message: str, uri: str | None = None, pointer: "Pointer | None" = None):
        self.message = message
        self.uri = uri
        self.pointer = pointer
        super().__init__(f"{message} - {render_location(uri, pointer)}")


class SchemaReferenceError(SchemaError):
    """Raised when a ``$ref`` cycle is found during parsing."""


class ResolutionError(SchemaError):
    """Raised when a referenced document cannot be loaded."""
