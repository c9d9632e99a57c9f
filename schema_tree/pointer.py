"""
pointer.py - RFC 6901 JSON Pointer used for schema and instance locations.

Public API
----------
Pointer
    Immutable sequence of reference tokens with ``child`` / ``parent`` /
    ``eval`` helpers and the two URI-fragment renderings used in outputs.
PointerError
    Raised by :pymeth:`Pointer.eval` when the location does not exist.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence
from urllib.parse import quote, unquote

__all__ = ["Pointer", "PointerError"]


class PointerError(LookupError):
    """Raised when a pointer does not address a value in a document."""


def _escape(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def _unescape(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


class Pointer:
    """An immutable, hashable JSON Pointer."""

    __slots__ = ("_tokens",)

    ROOT: "Pointer"

    def __init__(self, tokens: Iterable[str | int] = ()):
        object.__setattr__(self, "_tokens", tuple(str(t) for t in tokens))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Pointer is immutable")

    # ------------------------------------------------------------------ #
    # Construction                                                       #
    # ------------------------------------------------------------------ #

    @classmethod
    def parse(cls, text: str) -> "Pointer":
        """Parse the string form ``/a/b~1c``."""
        if text == "":
            return cls.ROOT
        if not text.startswith("/"):
            raise ValueError(f"Invalid JSON pointer: {text!r}")
        return cls(_unescape(t) for t in text[1:].split("/"))

    @classmethod
    def from_uri_fragment(cls, fragment: str) -> "Pointer":
        """Parse a URI fragment (with or without the leading ``#``)."""
        if fragment.startswith("#"):
            fragment = fragment[1:]
        return cls.parse(unquote(fragment))

    def child(self, token: str | int) -> "Pointer":
        return Pointer(self._tokens + (str(token),))

    def parent(self) -> "Pointer":
        if not self._tokens:
            raise PointerError("Root pointer has no parent")
        return Pointer(self._tokens[:-1])

    # ------------------------------------------------------------------ #
    # Inspection                                                         #
    # ------------------------------------------------------------------ #

    @property
    def tokens(self) -> tuple[str, ...]:
        return self._tokens

    @property
    def is_root(self) -> bool:
        return not self._tokens

    @property
    def last(self) -> str | None:
        return self._tokens[-1] if self._tokens else None

    def eval(self, document: Any) -> Any:
        """Return the value addressed by this pointer within *document*."""
        current = document
        for depth, token in enumerate(self._tokens):
            if isinstance(current, Mapping):
                if token not in current:
                    raise PointerError(f"Pointer not found: {Pointer(self._tokens[:depth + 1])}")
                current = current[token]
            elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
                if not token.isdigit() or (len(token) > 1 and token.startswith("0")):
                    raise PointerError(f"Invalid array index in pointer: {token}")
                index = int(token)
                if index >= len(current):
                    raise PointerError(f"Pointer not found: {Pointer(self._tokens[:depth + 1])}")
                current = current[index]
            else:
                raise PointerError(f"Pointer not found: {Pointer(self._tokens[:depth + 1])}")
        return current

    def exists(self, document: Any) -> bool:
        try:
            self.eval(document)
        except PointerError:
            return False
        return True

    # ------------------------------------------------------------------ #
    # Rendering                                                          #
    # ------------------------------------------------------------------ #

    def __str__(self) -> str:
        return "".join("/" + _escape(t) for t in self._tokens)

    def to_uri_fragment(self) -> str:
        return "#" + "".join("/" + quote(_escape(t), safe="") for t in self._tokens)

    def schema_fragment(self) -> str:
        """URI fragment with ``$`` left readable (``#/$defs/x``)."""
        return self.to_uri_fragment().replace("%24", "$")

    def __repr__(self) -> str:
        return f"Pointer({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Pointer) and self._tokens == other._tokens

    def __hash__(self) -> int:
        return hash(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self):
        return iter(self._tokens)


Pointer.ROOT = Pointer()
