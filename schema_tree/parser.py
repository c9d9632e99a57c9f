"""
parser.py - turns schema documents into validator trees
=======================================================

Recursive-descent keyword dispatcher.  Every schema location becomes one
:class:`~schema_tree.nodes.Group` holding a node per recognised keyword (or a
``BooleanTrue`` / ``BooleanFalse`` for boolean schemas).  Locations are
memoised in a :class:`~schema_tree.registry.SchemaRegistry`, which is also
how ``$ref`` cycles are caught.

Public API
----------
Parser(loader=None, *, options=None, registry=None,
       custom_validation_handler=None, nonstandard_format_handler=None)

    parse(source)                 Mapping / bool / Path / file name / URI / JSON text
    parse_file(path)
    parse_uri(uri)
    parse_string(text, base_uri=None)
    parse_json(value, base_uri=None)
    pre_load(path)

    examples_validation_errors    diagnostics from ``validate_examples``
    default_validation_errors     diagnostics from ``validate_default``

Hooks
-----
``custom_validation_handler(key, uri, pointer, value) -> Node | None`` is
offered every ``x-`` prefixed keyword; ``nonstandard_format_handler(name)
-> FormatChecker | None`` is consulted before the standard formats.
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence
from urllib.parse import urlsplit

from . import nodes as n
from .errors import ResolutionError, SchemaError
from .evaluator import validate_basic
from .formats import FormatRegistry, NonstandardFormatHandler
from .loader import SchemaLoader, decode_document
from .options import ParserOptions
from .output import BasicErrorEntry
from .pointer import Pointer
from .registry import SchemaRegistry
from .utils import (
    JSON_TYPES,
    drop_fragment,
    exact_number,
    is_array,
    is_finite,
    is_integer,
    is_number,
    is_object,
    resolve_uri,
    split_fragment,
)

__all__ = [
    "Parser",
    "CustomValidationHandler",
    "DRAFT_2019_09",
    "DRAFT_07",
]

LOGGER = logging.getLogger(__name__)

CustomValidationHandler = Callable[[str, Optional[str], Pointer, Any], Optional[n.Node]]

DRAFT_2019_09 = "https://json-schema.org/draft/2019-09/schema"
DRAFT_07 = "http://json-schema.org/draft-07/schema"

_DIALECTS = {
    "http://json-schema.org/draft/2019-09/schema": DRAFT_2019_09,
    "https://json-schema.org/draft/2019-09/schema": DRAFT_2019_09,
    "http://json-schema.org/draft-07/schema": DRAFT_07,
    "https://json-schema.org/draft-07/schema": DRAFT_07,
}

EXTENSION_PREFIX = "x-"

# keywords read elsewhere or carrying no validation
_PASSIVE = frozenset({
    "$schema", "$id", "$defs", "definitions", "$comment", "$anchor",
    "title", "description", "examples", "example", "then", "else",
    "minContains", "maxContains", "deprecated", "readOnly", "writeOnly",
})

_SIZE_KEYWORDS = {
    "minProperties": n.PropertiesSizeConstraint,
    "maxProperties": n.PropertiesSizeConstraint,
    "minItems": n.ArraySizeConstraint,
    "maxItems": n.ArraySizeConstraint,
    "minLength": n.StringLengthConstraint,
    "maxLength": n.StringLengthConstraint,
}


@dataclass(frozen=True)
class _Document:
    """A document being parsed: registry key, reported URI and content."""

    key: str
    uri: Optional[str]
    content: Any


# --------------------------------------------------------------------------- #
# Parser                                                                      #
# --------------------------------------------------------------------------- #

class Parser:
    """Builds validator trees; hooks are fixed at construction."""

    def __init__(
        self,
        loader: SchemaLoader | None = None,
        *,
        options: ParserOptions | None = None,
        registry: SchemaRegistry | None = None,
        custom_validation_handler: CustomValidationHandler | None = None,
        nonstandard_format_handler: NonstandardFormatHandler | None = None,
    ):
        self._loader = loader or SchemaLoader()
        self._options = options or ParserOptions()
        self._registry = registry or SchemaRegistry(self._loader)
        self._custom_validation_handler = custom_validation_handler
        self._nonstandard_format_handler = nonstandard_format_handler
        self._formats = FormatRegistry(nonstandard_format_handler)
        self._documents: dict[str, tuple[_Document, Pointer]] = {}
        self._lock = threading.Lock()
        self._examples_errors: list[BasicErrorEntry] = []
        self._default_errors: list[BasicErrorEntry] = []

    # ------------------------------------------------------------------ #
    # Read-only configuration                                            #
    # ------------------------------------------------------------------ #

    @property
    def loader(self) -> SchemaLoader:
        return self._loader

    @property
    def options(self) -> ParserOptions:
        return self._options

    @property
    def registry(self) -> SchemaRegistry:
        return self._registry

    @property
    def custom_validation_handler(self) -> CustomValidationHandler | None:
        return self._custom_validation_handler

    @property
    def nonstandard_format_handler(self) -> NonstandardFormatHandler | None:
        return self._nonstandard_format_handler

    @property
    def examples_validation_errors(self) -> list[BasicErrorEntry]:
        with self._lock:
            return list(self._examples_errors)

    @property
    def default_validation_errors(self) -> list[BasicErrorEntry]:
        with self._lock:
            return list(self._default_errors)

    # ------------------------------------------------------------------ #
    # Entry points                                                       #
    # ------------------------------------------------------------------ #

    def parse(self, source: Any) -> n.Node:
        """Dispatch on *source*: mapping/bool, Path, file name, URI or JSON text."""
        if isinstance(source, (Mapping, bool)):
            return self.parse_json(source)
        if isinstance(source, Path):
            return self.parse_file(source)
        if isinstance(source, str):
            if _is_file(source):
                return self.parse_file(source)
            if _looks_like_uri(source):
                return self.parse_uri(source)
            return self.parse_string(source)
        raise TypeError(f"Unsupported type for parse: {type(source)}")

    def parse_file(self, path: str | Path) -> n.Node:
        uri, content = self._loader.load_file(path)
        return self._parse_document(_Document(uri, uri, content), Pointer.ROOT)

    def parse_uri(self, uri: str) -> n.Node:
        doc_uri, fragment = split_fragment(uri)
        content = self._registry.resolve(doc_uri)
        return self._parse_document(_Document(doc_uri, doc_uri, content), _fragment_pointer(fragment))

    def parse_string(self, text: str, base_uri: str | None = None) -> n.Node:
        try:
            content = decode_document(text, base_uri or "")
        except ValueError as exc:
            raise SchemaError(str(exc), base_uri) from exc
        return self.parse_json(content, base_uri)

    def parse_json(self, value: Any, base_uri: str | None = None) -> n.Node:
        if base_uri is not None:
            base_uri = drop_fragment(base_uri)
            document = _Document(base_uri, base_uri, value)
        else:
            document = _Document(self._registry.anonymous_key(), None, value)
        return self._parse_document(document, Pointer.ROOT)

    def pre_load(self, path: str | Path) -> list[str]:
        return self._loader.pre_load(path)

    # ------------------------------------------------------------------ #
    # Documents & locations                                              #
    # ------------------------------------------------------------------ #

    def _parse_document(self, document: _Document, pointer: Pointer) -> n.Node:
        LOGGER.debug("Parsing %s", document.uri or "anonymous schema")
        self._register_document(document)
        try:
            value = pointer.eval(document.content)
        except LookupError as exc:
            raise SchemaError("Schema not found", document.uri, pointer) from exc
        dialect = self._document_dialect(document)
        base_uri = _base_uri_at(document, pointer)
        return self._parse_schema(document, value, pointer, base_uri, dialect)

    def _dialect(self, value: Any, uri: str | None) -> str:
        if not isinstance(value, str):
            raise SchemaError("$schema must be a string", uri, Pointer.ROOT.child("$schema"))
        dialect = _DIALECTS.get(value.rstrip("#"))
        if dialect is None:
            LOGGER.debug("Unrecognised $schema %s, using %s", value, DRAFT_2019_09)
            return DRAFT_2019_09
        return dialect

    def _parse_schema(self, document: _Document, value: Any, pointer: Pointer,
                      base_uri: str | None, dialect: str | None) -> n.Node:
        return self._registry.get_or_create(
            document.key, pointer,
            lambda: self._build(document, value, pointer, base_uri, dialect),
        )

    # ------------------------------------------------------------------ #
    # Keyword dispatch                                                   #
    # ------------------------------------------------------------------ #

    def _build(self, document: _Document, value: Any, pointer: Pointer,
               base_uri: str | None, dialect: str | None) -> n.Node:
        if value is True:
            return n.BooleanTrue(base_uri, pointer)
        if value is False:
            return n.BooleanFalse(base_uri, pointer)
        if not is_object(value):
            raise SchemaError("Schema is not boolean or object", base_uri, pointer)

        if "$schema" in value and not pointer.is_root:
            raise SchemaError("$schema only allowed at root", base_uri, pointer.child("$schema"))

        if dialect == DRAFT_07 and "$ref" in value:
            # draft-07: $ref replaces every sibling keyword
            ref = self._parse_ref(document, value["$ref"], pointer, base_uri, dialect)
            return n.Group(base_uri, pointer, (ref,), dialect=dialect)

        if "$id" in value:
            base_uri = self._parse_id(document, value["$id"], pointer, base_uri)

        title = value.get("title")
        if title is not None and not isinstance(title, str):
            raise SchemaError("title must be a string", base_uri, pointer.child("title"))
        description = self._description(value.get("description"), pointer, base_uri)

        children: list[n.Node | None] = []
        deferred: list[tuple[int, str]] = []
        ctx = _Context(self, document, pointer, base_uri, dialect, value)
        for key, item in value.items():
            if key in ("additionalProperties", "additionalItems"):
                deferred.append((len(children), key))
                children.append(None)
                continue
            child = ctx.keyword(key, item)
            if child is not None:
                children.append(child)
        for index, key in deferred:
            children[index] = ctx.additional(key, value[key], children)
        group = n.Group(
            base_uri, pointer, tuple(c for c in children if c is not None),
            title=title, description=description, dialect=dialect,
        )
        self._self_check(group, value, pointer)
        return group

    def _register_document(self, document: _Document) -> None:
        """Record *document* and every embedded ``$id`` resource it declares."""
        if document.uri is not None:
            self._documents.setdefault(document.uri, (document, Pointer.ROOT))
        for location, schema in _schema_objects(document.content, Pointer.ROOT):
            declared = schema.get("$id")
            if not isinstance(declared, str) or declared.startswith("#"):
                continue
            uri = drop_fragment(resolve_uri(_base_uri_at(document, location), declared))
            if uri and uri not in self._documents:
                LOGGER.debug("Embedded resource %s at %s", uri, location)
                self._documents[uri] = (document, location)

    def _parse_id(self, document: _Document, value: Any, pointer: Pointer, base_uri: str | None) -> str:
        if not isinstance(value, str):
            raise SchemaError("$id must be a string", base_uri, pointer.child("$id"))
        uri = drop_fragment(resolve_uri(base_uri, value))
        if not uri:
            return base_uri
        self._documents.setdefault(uri, (document, pointer))
        return uri

    def _description(self, value: Any, pointer: Pointer, base_uri: str | None) -> str | None:
        if value is None or isinstance(value, str):
            return value
        if (self._options.allow_description_ref and is_object(value)
                and set(value) == {"$ref"} and isinstance(value["$ref"], str)):
            uri = resolve_uri(base_uri, value["$ref"])
            try:
                return self._loader.read_text(uri).strip()
            except (OSError, ValueError) as exc:
                raise ResolutionError(f"Can't resolve description {uri}: {exc}", base_uri,
                                      pointer.child("description")) from exc
        raise SchemaError("description must be a string", base_uri, pointer.child("description"))

    # ------------------------------------------------------------------ #
    # $ref                                                               #
    # ------------------------------------------------------------------ #

    def _parse_ref(self, document: _Document, ref: Any, pointer: Pointer,
                   base_uri: str | None, dialect: str | None) -> n.Reference:
        ref_pointer = pointer.child("$ref")
        if not isinstance(ref, str):
            raise SchemaError("$ref must be a string", base_uri, ref_pointer)
        doc_part, fragment = split_fragment(resolve_uri(base_uri, ref))
        if doc_part == "":
            target_doc, origin = document, Pointer.ROOT
        elif doc_part in self._documents:
            target_doc, origin = self._documents[doc_part]
        else:
            content = self._registry.resolve(doc_part)
            target_doc, origin = _Document(doc_part, doc_part, content), Pointer.ROOT
            self._register_document(target_doc)
        target_pointer = self._target_pointer(target_doc, origin, fragment)
        if target_pointer is None or not target_pointer.exists(target_doc.content):
            raise SchemaError(f"$ref not found {ref}", base_uri, ref_pointer)
        target_value = target_pointer.eval(target_doc.content)
        if target_doc is not document:
            dialect = self._document_dialect(target_doc) or dialect
        target = self._parse_schema(
            target_doc, target_value, target_pointer, _base_uri_at(target_doc, target_pointer), dialect,
        )
        return n.Reference(base_uri, ref_pointer, target, fragment)

    def _document_dialect(self, document: _Document) -> str | None:
        content = document.content
        if is_object(content) and "$schema" in content:
            return self._dialect(content["$schema"], document.uri)
        return None

    @staticmethod
    def _target_pointer(document: _Document, origin: Pointer, fragment: str | None) -> Pointer | None:
        if not fragment:
            return origin
        if fragment.startswith("/"):
            return Pointer(origin.tokens + Pointer.from_uri_fragment(fragment).tokens)
        return _find_anchor(document.content, fragment, Pointer.ROOT)

    # ------------------------------------------------------------------ #
    # examples / default self-check                                      #
    # ------------------------------------------------------------------ #

    def _self_check(self, group: n.Group, value: Mapping[str, Any], pointer: Pointer) -> None:
        if self._options.validate_examples:
            samples: list[tuple[Pointer, Any]] = []
            if "example" in value:
                samples.append((pointer.child("example"), value["example"]))
            if is_array(value.get("examples")):
                samples.extend((pointer.child("examples").child(i), v) for i, v in enumerate(value["examples"]))
            for location, sample in samples:
                self._check_sample(group, sample, location, self._examples_errors)
        if self._options.validate_default and "default" in value:
            self._check_sample(group, value["default"], pointer.child("default"), self._default_errors)

    def _check_sample(self, group: n.Group, sample: Any, location: Pointer,
                      sink: list[BasicErrorEntry]) -> None:
        result = validate_basic(group, sample, group.schema_path, location)
        if result.valid:
            return
        LOGGER.debug("Self-check failed at %s", location)
        with self._lock:
            sink.extend(result.errors or ())


# --------------------------------------------------------------------------- #
# Per-location keyword builders                                               #
# --------------------------------------------------------------------------- #

class _Context:
    """Build context for one schema object; discarded once its Group exists."""

    def __init__(self, parser: Parser, document: _Document, pointer: Pointer,
                 base_uri: str | None, dialect: str | None, value: Mapping[str, Any]):
        self.parser = parser
        self.document = document
        self.pointer = pointer
        self.base_uri = base_uri
        self.dialect = dialect
        self.value = value

    def fail(self, message: str, pointer: Pointer) -> SchemaError:
        return SchemaError(message, self.base_uri, pointer)

    def schema(self, value: Any, pointer: Pointer) -> n.Node:
        return self.parser._parse_schema(self.document, value, pointer, self.base_uri, self.dialect)

    def keyword(self, key: str, value: Any) -> n.Node | None:
        path = self.pointer.child(key)
        uri = self.base_uri
        if key in _PASSIVE:
            return None
        if key == "$ref":
            return self.parser._parse_ref(self.document, value, self.pointer, uri, self.dialect)
        if key in n.COMBINATOR_KINDS:
            if not is_array(value) or not value:
                raise self.fail(f"{key} must be a non-empty array", path)
            return n.Combinator(uri, path, key, tuple(self.schema(v, path.child(i)) for i, v in enumerate(value)))
        if key == "not":
            return n.Not(uri, path, self.schema(value, path))
        if key == "if":
            return self.conditional(value)
        if key == "type":
            return n.TypeConstraint(uri, path, self.types(value, path))
        if key == "enum":
            if not is_array(value):
                raise self.fail("enum must be an array", path)
            return n.EnumConstraint(uri, path, tuple(value))
        if key == "const":
            return n.ConstConstraint(uri, path, value)
        if key == "properties":
            return n.PropertiesConstraint(uri, path, tuple(
                (name, self.schema(v, path.child(name))) for name, v in self.mapping(value, path).items()
            ))
        if key == "patternProperties":
            return n.PatternPropertiesConstraint(uri, path, tuple(
                (self.regex(name, path.child(name)), self.schema(v, path.child(name)))
                for name, v in self.mapping(value, path).items()
            ))
        if key == "propertyNames":
            return n.PropertyNamesConstraint(uri, path, self.schema(value, path))
        if key == "required":
            if not is_array(value) or not all(isinstance(v, str) for v in value):
                raise self.fail("required must be an array of strings", path)
            return n.RequiredConstraint(uri, path, tuple(value))
        if key == "items":
            if is_array(value):
                return n.ItemsTupleConstraint(uri, path, tuple(
                    self.schema(v, path.child(i)) for i, v in enumerate(value)
                ))
            return n.ItemsConstraint(uri, path, self.schema(value, path))
        if key == "uniqueItems":
            if not isinstance(value, bool):
                raise self.fail("uniqueItems must be a boolean", path)
            return n.UniqueItemsConstraint(uri, path) if value else None
        if key == "contains":
            return n.ContainsConstraint(
                uri, path, self.schema(value, path),
                self.optional_size("minContains"), self.optional_size("maxContains"),
            )
        if key in n.NUMBER_KINDS:
            return n.NumberConstraint(uri, path, key, self.number(key, value, path))
        if key in _SIZE_KEYWORDS:
            return _SIZE_KEYWORDS[key](uri, path, key, self.size(key, value, path))
        if key == "pattern":
            if not isinstance(value, str):
                raise self.fail("pattern must be a string", path)
            return n.PatternConstraint(uri, path, self.regex(value, path))
        if key == "format":
            return self.format(value, path)
        if key == "default":
            return n.DefaultAnnotation(uri, path, value)
        if key.startswith(EXTENSION_PREFIX):
            return self.extension(key, value, path)
        return None

    # -- helpers ------------------------------------------------------------

    def mapping(self, value: Any, path: Pointer) -> Mapping[str, Any]:
        if not is_object(value):
            raise self.fail(f"{path.last} must be an object", path)
        return value

    def regex(self, text: str, path: Pointer) -> re.Pattern:
        try:
            return re.compile(text)
        except re.error as exc:
            raise self.fail(f"Invalid regex {text}: {exc}", path) from exc

    def types(self, value: Any, path: Pointer) -> tuple[str, ...]:
        names: Sequence[Any] = [value] if isinstance(value, str) else value
        if not is_array(names) or not names:
            raise self.fail("Invalid type", path)
        for i, name in enumerate(names):
            if name not in JSON_TYPES:
                raise self.fail(f"Invalid type {name}", path if isinstance(value, str) else path.child(i))
        return tuple(names)

    def size(self, key: str, value: Any, path: Pointer) -> int:
        if not is_integer(value) or value < 0:
            raise self.fail(f"{key} must be a non-negative integer", path)
        return int(value)

    def optional_size(self, key: str) -> int | None:
        if key not in self.value:
            return None
        return self.size(key, self.value[key], self.pointer.child(key))

    def number(self, key: str, value: Any, path: Pointer):
        if not is_number(value) or not is_finite(value):
            raise self.fail(f"{key} must be a number", path)
        number = exact_number(value)
        if key == "multipleOf" and number <= 0:
            raise self.fail("multipleOf must be greater than zero", path)
        return number

    def format(self, value: Any, path: Pointer) -> n.Node | None:
        if not isinstance(value, str):
            raise self.fail("format must be a string", path)
        checker = self.parser._formats.lookup(value)
        if checker is None:
            LOGGER.debug("Unknown format %r ignored", value)
            return None
        return n.FormatConstraint(self.base_uri, path, value, checker)

    def extension(self, key: str, value: Any, path: Pointer) -> n.Node:
        handler = self.parser.custom_validation_handler
        inner = handler(key, self.base_uri, path, value) if handler is not None else None
        if inner is None:
            return n.ExtensionAnnotation(self.base_uri, path, key, value)
        return n.DelegatingConstraint(self.base_uri, path, key, inner)

    def conditional(self, value: Any) -> n.Conditional:
        then_schema = else_schema = None
        if "then" in self.value:
            then_schema = self.schema(self.value["then"], self.pointer.child("then"))
        if "else" in self.value:
            else_schema = self.schema(self.value["else"], self.pointer.child("else"))
        return n.Conditional(
            self.base_uri, self.pointer, self.schema(value, self.pointer.child("if")), then_schema, else_schema,
        )

    def additional(self, key: str, value: Any, siblings: Sequence[n.Node | None]) -> n.Node:
        """Build additionalProperties / additionalItems with sibling links fixed."""
        path = self.pointer.child(key)
        schema = self.schema(value, path)
        if key == "additionalProperties":
            names: tuple[str, ...] = ()
            patterns: tuple[re.Pattern, ...] = ()
            for sibling in siblings:
                if isinstance(sibling, n.PropertiesConstraint) and not names:
                    names = tuple(name for name, _ in sibling.properties)
                elif isinstance(sibling, n.PatternPropertiesConstraint) and not patterns:
                    patterns = tuple(regex for regex, _ in sibling.properties)
            return n.AdditionalPropertiesConstraint(self.base_uri, path, schema, names, patterns)
        for sibling in siblings:
            if isinstance(sibling, n.ItemsTupleConstraint):
                return n.AdditionalItemsConstraint(self.base_uri, path, schema, len(sibling.schemas), True)
        return n.AdditionalItemsConstraint(self.base_uri, path, schema, 0, False)


# --------------------------------------------------------------------------- #
# Module helpers                                                              #
# --------------------------------------------------------------------------- #

def _is_file(text: str) -> bool:
    try:
        return Path(text).is_file()
    except (OSError, ValueError):
        return False


def _looks_like_uri(text: str) -> bool:
    text = text.strip()
    if not text or text[0] in "{[\"" or any(c.isspace() for c in text):
        return False
    try:
        scheme = urlsplit(text).scheme
    except ValueError:
        return False
    return len(scheme) > 1


def _fragment_pointer(fragment: str | None) -> Pointer:
    if not fragment:
        return Pointer.ROOT
    return Pointer.from_uri_fragment(fragment)


def _base_uri_at(document: _Document, pointer: Pointer) -> str | None:
    """Base URI in force just above *pointer* (the location's own ``$id`` excluded)."""
    base = document.uri
    current = document.content
    for token in pointer.tokens:
        if is_object(current) and isinstance(current.get("$id"), str):
            base = drop_fragment(resolve_uri(base, current["$id"])) or base
        if is_object(current):
            current = current.get(token)
        elif is_array(current) and token.isdigit() and int(token) < len(current):
            current = current[int(token)]
        else:
            break
    return base


_DATA_KEYWORDS = ("enum", "const", "examples", "example", "default")
_SCHEMA_MAPS = ("properties", "patternProperties", "$defs", "definitions", "dependentSchemas")


def _schema_objects(content: Any, pointer: Pointer):
    """Yield ``(pointer, object)`` for every schema object below *content*.

    Keyword values holding instance data are not descended into; the entries
    of name-to-schema maps are schemas whatever their names.
    """
    if is_array(content):
        for i, value in enumerate(content):
            yield from _schema_objects(value, pointer.child(i))
        return
    if not is_object(content):
        return
    yield pointer, content
    for key, value in content.items():
        if key in _DATA_KEYWORDS:
            continue
        if key in _SCHEMA_MAPS and is_object(value):
            for name, schema in value.items():
                yield from _schema_objects(schema, pointer.child(key).child(name))
        else:
            yield from _schema_objects(value, pointer.child(key))


def _find_anchor(content: Any, name: str, pointer: Pointer) -> Pointer | None:
    """Locate a plain-name fragment declared by ``$anchor`` or ``$id: "#name"``."""
    for location, schema in _schema_objects(content, pointer):
        if schema.get("$anchor") == name or schema.get("$id") == f"#{name}":
            return location
    return None
