"""
frame.py - row-wise validation of pandas DataFrames.

Public API
----------
frame_records(frame) -> list[dict]
    JSON-safe row objects (``NaN`` -> ``null``, timestamps -> ISO-8601,
    non-integer numbers as Decimal).
validate_records(node, records) -> list[BasicOutput]
validate_frame(schema, frame) -> pandas.DataFrame
    One row per input row with ``valid`` and ``errors`` columns, aligned on
    the input index.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Iterable, Union

import pandas as pd

from .evaluator import validate_basic
from .nodes import Node
from .output import BasicOutput
from .schema import Schema

__all__ = ["frame_records", "validate_records", "validate_frame"]


def frame_records(frame: pd.DataFrame) -> list[dict[str, Any]]:
    js = frame.to_json(orient="records", date_format="iso", date_unit="s")
    return json.loads(js, parse_float=Decimal)


def validate_records(node: Node, records: Iterable[Any]) -> list[BasicOutput]:
    return [validate_basic(node, record) for record in records]


def validate_frame(schema: Union[Schema, Node], frame: pd.DataFrame) -> pd.DataFrame:
    """Validate every row of *frame* against *schema*."""
    root = schema.root if isinstance(schema, Schema) else schema
    outputs = validate_records(root, frame_records(frame))
    return pd.DataFrame(
        {
            "valid": [out.valid for out in outputs],
            "errors": [[e.to_dict() for e in out.errors or ()] for out in outputs],
        },
        index=frame.index,
    )
