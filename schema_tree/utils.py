"""
utils.py - shared, low-level helpers for the schema-tree package.

This module consolidates common helpers for:
- JSON kind detection over plain Python values
- Exact numeric handling (int / Decimal, never silent float downcasts)
- Deep structural equality used by enum / const / uniqueItems
- Short value rendering used inside error messages
- URI resolution
"""

from __future__ import annotations

import json
import math
from decimal import Decimal
from typing import Any, Mapping, Sequence, Union
from urllib.parse import urldefrag, urljoin

Number = Union[int, Decimal]

# --------------------------------------------------------------------------- #
# JSON kinds                                                                  #
# --------------------------------------------------------------------------- #

JSON_TYPES = ("null", "boolean", "object", "array", "number", "string", "integer")


def is_object(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_array(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def is_number(value: Any) -> bool:
    """True for JSON numbers; ``bool`` is not a number here."""
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    """True for integers, including integral decimals such as ``1.0``."""
    if not is_number(value):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value.is_integer()
    return value.is_finite() and value == value.to_integral_value()


def is_finite(value: Any) -> bool:
    """False for NaN and the infinities, which JSON cannot express."""
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    return value.is_finite()


def json_type(value: Any) -> str:
    """Name of the JSON kind of *value* (``integer`` is reported as ``number``)."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if is_object(value):
        return "object"
    if is_array(value):
        return "array"
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


# --------------------------------------------------------------------------- #
# Numbers & equality                                                          #
# --------------------------------------------------------------------------- #

def exact_number(value: Any) -> Number:
    """Most exact representation of a JSON number: int stays int, else Decimal."""
    if isinstance(value, bool) or not is_number(value):
        raise TypeError(f"Not a JSON number: {value!r}")
    if isinstance(value, float):
        return Decimal(repr(value))
    return value


def json_equal(a: Any, b: Any) -> bool:
    """Deep JSON equality; numbers compare by value, booleans never equal numbers."""
    if is_number(a) and is_number(b):
        return exact_number(a) == exact_number(b)
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, str) or isinstance(b, str):
        return isinstance(a, str) and isinstance(b, str) and a == b
    if a is None or b is None:
        return a is None and b is None
    if is_object(a) and is_object(b):
        if set(a) != set(b):
            return False
        return all(json_equal(a[k], b[k]) for k in a)
    if is_array(a) and is_array(b):
        return len(a) == len(b) and all(json_equal(x, y) for x, y in zip(a, b))
    return False


def _number_text(value: Number | float) -> str:
    if isinstance(value, float):
        return repr(value)
    return str(value)


def error_display(value: Any) -> str:
    """Short rendering of *value* for use inside error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return _number_text(value)
    if isinstance(value, str):
        text = json.dumps(value, ensure_ascii=False)
        if len(text) > 40:
            return f"{text[:16]} ... {text[-16:]}"
        return text
    if is_object(value):
        return "object"
    if is_array(value):
        return "array"
    return "unknown"


# --------------------------------------------------------------------------- #
# URIs                                                                        #
# --------------------------------------------------------------------------- #

def drop_fragment(uri: str) -> str:
    return urldefrag(uri)[0]


def resolve_uri(base: str | None, ref: str) -> str:
    """Resolve *ref* against *base* (RFC 3986); without a base return *ref*."""
    if not base:
        return ref
    return urljoin(base, ref)


def split_fragment(uri: str) -> tuple[str, str | None]:
    """Split ``doc#frag`` into ``("doc", "frag")``; fragment is None when absent."""
    if "#" not in uri:
        return uri, None
    doc, _, fragment = uri.partition("#")
    return doc, fragment
