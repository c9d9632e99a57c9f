"""Shared helpers for the schema-tree test-suite (std-lib only)."""
from __future__ import annotations

import contextlib
import json
import tempfile
from pathlib import Path
from typing import Any

from schema_tree import Parser

# ------------------------------------------------------------------ #
# Repository-relative paths                                           #
# ------------------------------------------------------------------ #
ROOT          = Path(__file__).resolve().parents[1]
RESOURCES     = ROOT / "tests" / "resources"

TEST_SCHEMA   = RESOURCES / "test-schema.json"
CUSTOM_SCHEMA = RESOURCES / "test-custom-validator.schema.json"
FORMAT_SCHEMA = RESOURCES / "test-nonstandard-format.schema.json"
EXAMPLES_J    = RESOURCES / "test-examples.schema.json"
REF_DIR       = RESOURCES / "refs"

# ------------------------------------------------------------------ #
# Tiny helpers                                                       #
# ------------------------------------------------------------------ #
def tmp_json(obj: Any, suffix: str = ".json") -> Path:
    """Write *obj* to a temp file and return its Path (caller must unlink)."""
    fh = tempfile.NamedTemporaryFile(delete=False, suffix=suffix)
    fh.close()
    Path(fh.name).write_text(json.dumps(obj), encoding="utf-8")
    return Path(fh.name)

def tmp_text(text: str, suffix: str = ".json") -> Path:
    fh = tempfile.NamedTemporaryFile(delete=False, suffix=suffix)
    fh.close()
    Path(fh.name).write_text(text, encoding="utf-8")
    return Path(fh.name)

@contextlib.contextmanager
def tmp_dir():
    """Yield a temporary directory Path that auto-cleans on exit."""
    td = tempfile.TemporaryDirectory()
    try:
        yield Path(td.name)
    finally:
        td.cleanup()

def parse(schema: Any, base_uri: str | None = None, **kwargs):
    """Parse an in-memory schema with a fresh Parser."""
    return Parser(**kwargs).parse_json(schema, base_uri)

def messages(output) -> list[str]:
    return [e.error for e in output.errors or ()]

def locations(output) -> list[str]:
    return [e.keyword_location for e in output.errors or ()]
