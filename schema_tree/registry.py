"""
registry.py - parse-time cache of schema nodes keyed by document and pointer.

Public API
----------
SchemaRegistry(loader)
    ``resolve(uri)``, ``get(uri, pointer)``, ``mark_in_progress(uri, pointer)``,
    ``store(uri, pointer, node)``, ``get_or_create(uri, pointer, builder)``.
IN_PROGRESS
    Typed sentinel stored while a location is being built.

A registry belongs to one parser and is written by one thread at a time.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Union

from .errors import ResolutionError, SchemaError, SchemaReferenceError
from .nodes import Node
from .pointer import Pointer

__all__ = ["SchemaRegistry", "InProgress", "IN_PROGRESS", "ANONYMOUS_PREFIX"]

LOGGER = logging.getLogger(__name__)

ANONYMOUS_PREFIX = "urn:anonymous:"


class InProgress:
    """Marker for a location whose node is still under construction."""

    _instance: "InProgress | None" = None

    def __new__(cls) -> "InProgress":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "IN_PROGRESS"


IN_PROGRESS = InProgress()

Entry = Union[Node, InProgress]


class SchemaRegistry:
    """URI + pointer keyed cache with cycle detection."""

    def __init__(self, loader: Any):
        self._loader = loader
        self._entries: dict[tuple[str, Pointer], Entry] = {}
        self._anonymous = itertools.count(1)

    # ------------------------------------------------------------------ #
    # Documents                                                          #
    # ------------------------------------------------------------------ #

    @property
    def loader(self) -> Any:
        return self._loader

    def resolve(self, uri: str) -> Any:
        """Fetch the document at *uri* through the loader."""
        try:
            return self._loader.fetch(uri)
        except SchemaError:
            raise
        except (OSError, ValueError, LookupError) as exc:
            raise ResolutionError(f"Can't resolve {uri}: {exc}", uri) from exc

    def anonymous_key(self) -> str:
        """Identity for an in-memory document without a URI (never reported)."""
        return f"{ANONYMOUS_PREFIX}{next(self._anonymous)}"

    # ------------------------------------------------------------------ #
    # Nodes                                                              #
    # ------------------------------------------------------------------ #

    def get(self, uri: str, pointer: Pointer) -> Node | None:
        entry = self._entries.get((uri, pointer))
        if entry is IN_PROGRESS:
            raise SchemaReferenceError("Recursive $ref", None if uri.startswith(ANONYMOUS_PREFIX) else uri, pointer)
        if entry is not None:
            LOGGER.debug("Registry hit %s%s", uri, pointer.to_uri_fragment())
        return entry  # type: ignore[return-value]

    def mark_in_progress(self, uri: str, pointer: Pointer) -> None:
        self._entries[(uri, pointer)] = IN_PROGRESS

    def store(self, uri: str, pointer: Pointer, node: Node) -> Node:
        self._entries[(uri, pointer)] = node
        return node

    def discard(self, uri: str, pointer: Pointer) -> None:
        self._entries.pop((uri, pointer), None)

    def get_or_create(self, uri: str, pointer: Pointer, builder: Callable[[], Node]) -> Node:
        """Return the cached node or build it once; cycles raise on re-entry."""
        cached = self.get(uri, pointer)
        if cached is not None:
            return cached
        self.mark_in_progress(uri, pointer)
        try:
            node = builder()
        except BaseException:
            self.discard(uri, pointer)
            raise
        return self.store(uri, pointer, node)

    def __contains__(self, key: tuple[str, Pointer]) -> bool:
        entry = self._entries.get(key)
        return entry is not None and entry is not IN_PROGRESS

    def __len__(self) -> int:
        return sum(1 for e in self._entries.values() if e is not IN_PROGRESS)
