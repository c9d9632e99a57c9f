"""
output.py - result objects produced by the basic and detailed strategies.

Public API
----------
BasicErrorEntry
    One flat error record (``keywordLocation`` / ``absoluteKeywordLocation`` /
    ``instanceLocation`` / ``error``).
BasicOutput
    ``valid`` plus an ordered list of :class:`BasicErrorEntry`.
DetailedOutput
    Recursive annotated outcome tree.

Every class exposes ``to_dict()`` (the camelCase wire shape) and
``to_json()``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Sequence

__all__ = ["BasicErrorEntry", "BasicOutput", "DetailedOutput"]


@dataclass(frozen=True)
class BasicErrorEntry:
    keyword_location: str
    absolute_keyword_location: Optional[str]
    instance_location: str
    error: str

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"keywordLocation": self.keyword_location}
        if self.absolute_keyword_location is not None:
            out["absoluteKeywordLocation"] = self.absolute_keyword_location
        out["instanceLocation"] = self.instance_location
        out["error"] = self.error
        return out


@dataclass(frozen=True)
class BasicOutput:
    valid: bool
    errors: Optional[tuple[BasicErrorEntry, ...]] = None

    TRUE: ClassVar["BasicOutput"]

    @classmethod
    def failure(cls, errors: Sequence[BasicErrorEntry]) -> "BasicOutput":
        return cls(False, tuple(errors))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"valid": self.valid}
        if self.errors:
            out["errors"] = [e.to_dict() for e in self.errors]
        return out

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps(self.to_dict(), **kwargs)


BasicOutput.TRUE = BasicOutput(True)


@dataclass(frozen=True)
class DetailedOutput:
    valid: bool
    keyword_location: str
    absolute_keyword_location: Optional[str]
    instance_location: str
    error: Optional[str] = None
    annotation: Optional[str] = None
    errors: Optional[tuple["DetailedOutput", ...]] = None
    annotations: Optional[tuple["DetailedOutput", ...]] = None

    @classmethod
    def create_error(
        cls,
        keyword_location: str,
        absolute_keyword_location: Optional[str],
        instance_location: str,
        error: str,
        errors: Sequence["DetailedOutput"] | None = None,
        annotations: Sequence["DetailedOutput"] | None = None,
    ) -> "DetailedOutput":
        return cls(
            False,
            keyword_location,
            absolute_keyword_location,
            instance_location,
            error=error,
            errors=tuple(errors) if errors else None,
            annotations=tuple(annotations) if annotations else None,
        )

    @classmethod
    def create_annotation(
        cls,
        keyword_location: str,
        absolute_keyword_location: Optional[str],
        instance_location: str,
        annotation: str,
        errors: Sequence["DetailedOutput"] | None = None,
        annotations: Sequence["DetailedOutput"] | None = None,
    ) -> "DetailedOutput":
        return cls(
            True,
            keyword_location,
            absolute_keyword_location,
            instance_location,
            annotation=annotation,
            errors=tuple(errors) if errors else None,
            annotations=tuple(annotations) if annotations else None,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"valid": self.valid, "keywordLocation": self.keyword_location}
        if self.absolute_keyword_location is not None:
            out["absoluteKeywordLocation"] = self.absolute_keyword_location
        out["instanceLocation"] = self.instance_location
        if self.error is not None:
            out["error"] = self.error
        if self.annotation is not None:
            out["annotation"] = self.annotation
        if self.errors:
            out["errors"] = [e.to_dict() for e in self.errors]
        if self.annotations:
            out["annotations"] = [a.to_dict() for a in self.annotations]
        return out

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps(self.to_dict(), **kwargs)
