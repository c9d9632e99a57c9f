"""
loader.py - fetches and decodes schema documents (JSON or YAML).

Public API
----------
Resource
    Raw document text plus an optional content-type hint.
SchemaLoader(resolver=None)
    ``fetch(uri)``, ``fetch_extended(uri)``, ``read_text(uri)``,
    ``load_file(path)``, ``pre_load(path)``.
default_resolver(uri) -> Resource | None
    ``file:`` URIs from disk, ``http(s):`` URIs through :pymod:`urllib.request`.

Decoded documents keep every non-integer number as :class:`decimal.Decimal`.
Documents are cached by absolute URI and, when the root declares ``$id``,
by that identifier too.
"""

from __future__ import annotations

import json
import logging
import urllib.request
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Callable, Mapping, NamedTuple, Optional, Union
from urllib.parse import urlsplit
from urllib.request import url2pathname

import yaml

from .utils import drop_fragment

__all__ = ["Resource", "SchemaLoader", "default_resolver", "decode_document", "path_to_uri"]

LOGGER = logging.getLogger(__name__)

SCHEMA_SUFFIXES = (".json", ".yaml", ".yml")


class Resource(NamedTuple):
    text: Union[str, bytes]
    content_type: Optional[str] = None


Resolver = Callable[[str], Union[Resource, str, bytes, None]]


# --------------------------------------------------------------------------- #
# Decoding                                                                    #
# --------------------------------------------------------------------------- #

class _DecimalSafeLoader(yaml.SafeLoader):
    """SafeLoader that yields JSON-compatible values with exact decimals."""


def _construct_decimal(loader: yaml.SafeLoader, node: yaml.Node) -> Any:
    text = loader.construct_scalar(node).replace("_", "")
    try:
        return Decimal(text)
    except InvalidOperation:
        return loader.construct_yaml_float(node)


def _construct_timestamp(loader: yaml.SafeLoader, node: yaml.Node) -> str:
    return loader.construct_scalar(node)


_DecimalSafeLoader.add_constructor("tag:yaml.org,2002:float", _construct_decimal)
_DecimalSafeLoader.add_constructor("tag:yaml.org,2002:timestamp", _construct_timestamp)


def _is_yaml(uri: str, content_type: str | None) -> bool:
    if content_type and "yaml" in content_type.lower():
        return True
    path = urlsplit(uri).path.lower()
    return path.endswith((".yaml", ".yml"))


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name} is not allowed")


def decode_document(text: str | bytes, uri: str = "", content_type: str | None = None) -> Any:
    """Decode JSON or YAML *text*, raising crisp ``ValueError`` on failure."""
    if isinstance(text, bytes):
        text = text.decode("utf-8-sig")
    if _is_yaml(uri, content_type):
        try:
            return yaml.load(text, Loader=_DecimalSafeLoader)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {uri or 'document'}: {exc}") from exc
    try:
        return json.loads(text, parse_float=Decimal, parse_constant=_reject_constant)
    except ValueError as exc:
        raise ValueError(f"Invalid JSON in {uri or 'document'}: {exc}") from exc


# --------------------------------------------------------------------------- #
# Resolution                                                                  #
# --------------------------------------------------------------------------- #

def path_to_uri(path: str | Path) -> str:
    return Path(path).resolve().as_uri()


def default_resolver(uri: str) -> Resource | None:
    """Read ``file:`` and ``http(s):`` URIs; other schemes are not handled."""
    parts = urlsplit(uri)
    if parts.scheme == "file":
        path = Path(url2pathname(parts.path))
        if not path.is_file():
            return None
        return Resource(path.read_bytes())
    if parts.scheme in ("http", "https"):
        with urllib.request.urlopen(uri) as response:
            return Resource(response.read(), response.headers.get("Content-Type"))
    return None


class SchemaLoader:
    """Caching front-end over a resolver callable."""

    def __init__(self, resolver: Resolver | None = None):
        self._resolver = resolver or default_resolver
        self._cache: dict[str, tuple[Any, Optional[str]]] = {}

    # ------------------------------------------------------------------ #
    # Helpers                                                            #
    # ------------------------------------------------------------------ #

    def _read(self, uri: str) -> Resource:
        """Run the resolver, raising crisp errors on failure."""
        result = self._resolver(uri)
        if result is None:
            raise FileNotFoundError(f"Schema not found: {uri}")
        if isinstance(result, (str, bytes)):
            return Resource(result)
        return result

    def _remember(self, uri: str, value: Any, content_type: str | None) -> None:
        self._cache[uri] = (value, content_type)
        if isinstance(value, Mapping) and isinstance(value.get("$id"), str):
            self._cache.setdefault(drop_fragment(value["$id"]), (value, content_type))

    # ------------------------------------------------------------------ #
    # Public API                                                         #
    # ------------------------------------------------------------------ #

    def fetch(self, uri: str) -> Any:
        return self.fetch_extended(uri)[0]

    def fetch_extended(self, uri: str) -> tuple[Any, Optional[str]]:
        """Return ``(document, content_type)`` for *uri* (fragment ignored)."""
        uri = drop_fragment(uri)
        if uri in self._cache:
            LOGGER.debug("Loader cache hit %s", uri)
            return self._cache[uri]
        resource = self._read(uri)
        value = decode_document(resource.text, uri, resource.content_type)
        LOGGER.debug("Loaded %s", uri)
        self._remember(uri, value, resource.content_type)
        return value, resource.content_type

    def read_text(self, uri: str) -> str:
        """Raw text at *uri* (used for external descriptions)."""
        text = self._read(uri).text
        return text.decode("utf-8-sig") if isinstance(text, bytes) else text

    def load_file(self, path: str | Path) -> tuple[str, Any]:
        """Read and decode a file, returning ``(uri, document)``."""
        p = Path(path)
        try:
            text = p.read_bytes()
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"Schema not found: {p}") from exc
        uri = path_to_uri(p)
        value = decode_document(text, uri)
        self._remember(uri, value, None)
        return uri, value

    def pre_load(self, path: str | Path) -> list[str]:
        """Warm the cache from a file or directory tree; returns loaded URIs."""
        p = Path(path)
        if p.is_file():
            return [self.load_file(p)[0]]
        if not p.is_dir():
            raise FileNotFoundError(f"Schema not found: {p}")
        loaded = []
        for child in sorted(p.rglob("*")):
            relative = child.relative_to(p)
            if any(part.startswith(".") for part in relative.parts):
                continue
            if child.is_file() and child.suffix.lower() in SCHEMA_SUFFIXES:
                loaded.append(self.load_file(child)[0])
        LOGGER.debug("Pre-loaded %d document(s) from %s", len(loaded), p)
        return loaded

    def __contains__(self, uri: str) -> bool:
        return drop_fragment(uri) in self._cache
