"""
options.py - parser configuration.

Public API
----------
ParserOptions
    ``allow_description_ref`` / ``validate_examples`` / ``validate_default``.
    Build one directly, from a mapping (``from_mapping``) or from a JSON file
    (``load``).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

__all__ = ["ParserOptions"]


@dataclass(frozen=True)
class ParserOptions:
    allow_description_ref: bool = False
    validate_examples: bool = False
    validate_default: bool = False

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "ParserOptions":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise ValueError(f"Unknown parser option(s): {unknown}")
        for name, value in mapping.items():
            if not isinstance(value, bool):
                raise ValueError(f"Parser option '{name}' must be a boolean")
        return cls(**mapping)

    @classmethod
    def load(cls, path: str | Path) -> "ParserOptions":
        p = Path(path)
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"Options file not found: {p}") from exc
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {p}: {exc}") from exc
        if not isinstance(data, Mapping):
            raise ValueError(f"Options file {p} must contain a JSON object")
        return cls.from_mapping(data)
