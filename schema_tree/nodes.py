"""
nodes.py - the closed set of validator-tree node variants.

Every node is an immutable dataclass carrying its location identity
(``source_uri`` + ``schema_path``) and the keyword payload.  Nodes contain no
evaluation logic; :pymod:`schema_tree.evaluator` dispatches on their type.

Location rule
-------------
A parent passes ``child.child_location(relative)`` to each child it
evaluates: keyword nodes append their keyword, while ``BooleanTrue``,
``BooleanFalse``, ``Group`` and ``Conditional`` report at the location they
were given.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, ClassVar, Optional

from .pointer import Pointer

__all__ = [
    "Node",
    "BooleanTrue",
    "BooleanFalse",
    "Not",
    "Combinator",
    "Group",
    "Conditional",
    "Reference",
    "PropertiesConstraint",
    "PatternPropertiesConstraint",
    "AdditionalPropertiesConstraint",
    "PropertyNamesConstraint",
    "RequiredConstraint",
    "PropertiesSizeConstraint",
    "ItemsConstraint",
    "ItemsTupleConstraint",
    "AdditionalItemsConstraint",
    "ArraySizeConstraint",
    "UniqueItemsConstraint",
    "ContainsConstraint",
    "TypeConstraint",
    "EnumConstraint",
    "ConstConstraint",
    "NumberConstraint",
    "StringLengthConstraint",
    "PatternConstraint",
    "FormatConstraint",
    "DefaultAnnotation",
    "ExtensionAnnotation",
    "DelegatingConstraint",
    "COMBINATOR_KINDS",
    "NUMBER_KINDS",
]

COMBINATOR_KINDS = ("allOf", "anyOf", "oneOf")
NUMBER_KINDS = ("multipleOf", "maximum", "exclusiveMaximum", "minimum", "exclusiveMinimum")


# --------------------------------------------------------------------------- #
# Base                                                                        #
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class Node:
    source_uri: Optional[str]
    schema_path: Pointer

    keyword: ClassVar[Optional[str]] = None

    def child_location(self, pointer: Pointer) -> Pointer:
        keyword = self.location_keyword
        return pointer if keyword is None else pointer.child(keyword)

    @property
    def location_keyword(self) -> Optional[str]:
        return self.keyword

    @property
    def absolute_location(self) -> Optional[str]:
        return self.absolute_location_of(self.schema_path)

    def absolute_location_of(self, path: Pointer) -> Optional[str]:
        if self.source_uri is None:
            return None
        return f"{self.source_uri}{path.schema_fragment()}"


# --------------------------------------------------------------------------- #
# Structural nodes                                                            #
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class BooleanTrue(Node):
    pass


@dataclass(frozen=True)
class BooleanFalse(Node):
    pass


@dataclass(frozen=True)
class Not(Node):
    child: Node
    keyword: ClassVar[str] = "not"


@dataclass(frozen=True)
class Combinator(Node):
    kind: str
    children: tuple[Node, ...]

    @property
    def location_keyword(self) -> str:
        return self.kind


@dataclass(frozen=True)
class Group(Node):
    """Conjunction of every keyword found at one schema location."""

    children: tuple[Node, ...]
    title: Optional[str] = None
    description: Optional[str] = None
    dialect: Optional[str] = None


@dataclass(frozen=True)
class Conditional(Node):
    if_schema: Node
    then_schema: Optional[Node] = None
    else_schema: Optional[Node] = None


@dataclass(frozen=True)
class Reference(Node):
    target: Node
    fragment: Optional[str] = None
    keyword: ClassVar[str] = "$ref"


# --------------------------------------------------------------------------- #
# Object keywords                                                             #
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class PropertiesConstraint(Node):
    properties: tuple[tuple[str, Node], ...]
    keyword: ClassVar[str] = "properties"


@dataclass(frozen=True)
class PatternPropertiesConstraint(Node):
    properties: tuple[tuple[re.Pattern, Node], ...]
    keyword: ClassVar[str] = "patternProperties"


@dataclass(frozen=True)
class AdditionalPropertiesConstraint(Node):
    """``additionalProperties`` with its sibling names/patterns linked in."""

    schema: Node
    known_names: tuple[str, ...] = ()
    known_patterns: tuple[re.Pattern, ...] = ()
    keyword: ClassVar[str] = "additionalProperties"

    def is_additional(self, name: str) -> bool:
        if name in self.known_names:
            return False
        return not any(p.search(name) for p in self.known_patterns)


@dataclass(frozen=True)
class PropertyNamesConstraint(Node):
    schema: Node
    keyword: ClassVar[str] = "propertyNames"


@dataclass(frozen=True)
class RequiredConstraint(Node):
    names: tuple[str, ...]
    keyword: ClassVar[str] = "required"


@dataclass(frozen=True)
class PropertiesSizeConstraint(Node):
    kind: str
    value: int

    @property
    def location_keyword(self) -> str:
        return self.kind


# --------------------------------------------------------------------------- #
# Array keywords                                                              #
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class ItemsConstraint(Node):
    schema: Node
    keyword: ClassVar[str] = "items"


@dataclass(frozen=True)
class ItemsTupleConstraint(Node):
    schemas: tuple[Node, ...]
    keyword: ClassVar[str] = "items"


@dataclass(frozen=True)
class AdditionalItemsConstraint(Node):
    """``additionalItems``; applies only beside a tuple-form ``items``."""

    schema: Node
    tuple_size: int = 0
    applies: bool = False
    keyword: ClassVar[str] = "additionalItems"


@dataclass(frozen=True)
class ArraySizeConstraint(Node):
    kind: str
    value: int

    @property
    def location_keyword(self) -> str:
        return self.kind


@dataclass(frozen=True)
class UniqueItemsConstraint(Node):
    keyword: ClassVar[str] = "uniqueItems"


@dataclass(frozen=True)
class ContainsConstraint(Node):
    schema: Node
    min_contains: Optional[int] = None
    max_contains: Optional[int] = None
    keyword: ClassVar[str] = "contains"


# --------------------------------------------------------------------------- #
# Scalar keywords                                                             #
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class TypeConstraint(Node):
    types: tuple[str, ...]
    keyword: ClassVar[str] = "type"


@dataclass(frozen=True)
class EnumConstraint(Node):
    values: tuple[Any, ...]
    keyword: ClassVar[str] = "enum"


@dataclass(frozen=True)
class ConstConstraint(Node):
    value: Any
    keyword: ClassVar[str] = "const"


@dataclass(frozen=True)
class NumberConstraint(Node):
    kind: str
    value: Any

    @property
    def location_keyword(self) -> str:
        return self.kind


@dataclass(frozen=True)
class StringLengthConstraint(Node):
    kind: str
    value: int

    @property
    def location_keyword(self) -> str:
        return self.kind


@dataclass(frozen=True)
class PatternConstraint(Node):
    regex: re.Pattern
    keyword: ClassVar[str] = "pattern"


@dataclass(frozen=True)
class FormatConstraint(Node):
    name: str
    checker: Any
    keyword: ClassVar[str] = "format"


@dataclass(frozen=True)
class DefaultAnnotation(Node):
    value: Any
    keyword: ClassVar[str] = "default"


@dataclass(frozen=True)
class ExtensionAnnotation(Node):
    key: str
    value: Any

    @property
    def location_keyword(self) -> str:
        return self.key


@dataclass(frozen=True)
class DelegatingConstraint(Node):
    """Wraps a node returned by a custom keyword handler."""

    key: str
    inner: Node

    @property
    def location_keyword(self) -> str:
        return self.key
