"""
cli.py - command-line front-end
===============================

Public API
----------
`build_arg_parser() -> argparse.ArgumentParser`
    Flags for the ``schema-tree`` command.

`main(argv=None) -> int`
    Parse a schema, validate each instance (file path or JSON literal) or
    each row of a CSV file, print one JSON result per instance and return
    the exit status: 0 all valid, 1 something invalid, 2 schema error.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

import pandas as pd

from .errors import SchemaError
from .frame import validate_frame
from .loader import decode_document
from .options import ParserOptions
from .parser import Parser
from .schema import OUTPUT_FORMATS, Schema

LOGGER = logging.getLogger(__name__)

__all__ = ["build_arg_parser", "main"]

# --------------------------------------------------------------------------- #
# Parser builder                                                              #
# --------------------------------------------------------------------------- #

def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="schema-tree",
        description="Validate JSON / YAML instances against a JSON Schema.",
        fromfile_prefix_chars="@",
    )
    p.add_argument("schema", help="Schema file, URI or JSON literal.")
    p.add_argument("instances", nargs="*", metavar="INSTANCE",
                   help="Instance file or JSON literal (repeatable).")
    p.add_argument("--output", choices=OUTPUT_FORMATS, default="basic",
                   help="Result granularity (default: basic).")
    p.add_argument("--csv", metavar="FILE",
                   help="Validate every row of a CSV file as one object.")
    p.add_argument("--preload", metavar="PATH", action="append", default=[],
                   help="File or directory of schemas to cache before parsing.")
    p.add_argument("--config", metavar="FILE",
                   help="JSON file of parser options; flags below switch options on.")
    p.add_argument("--allow-description-ref", action="store_true",
                   help="Inline descriptions given as {\"$ref\": ...}.")
    p.add_argument("--validate-examples", action="store_true",
                   help="Check the schema's own example/examples values.")
    p.add_argument("--validate-default", action="store_true",
                   help="Check the schema's own default values.")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return p


# --------------------------------------------------------------------------- #
# Helpers                                                                     #
# --------------------------------------------------------------------------- #

def _options(ns: argparse.Namespace) -> ParserOptions:
    options = ParserOptions.load(ns.config) if ns.config else ParserOptions()
    return replace(
        options,
        allow_description_ref=options.allow_description_ref or ns.allow_description_ref,
        validate_examples=options.validate_examples or ns.validate_examples,
        validate_default=options.validate_default or ns.validate_default,
    )


def _read_instance(source: str) -> Any:
    """Existing file path -> load (JSON or YAML); else JSON literal."""
    p = Path(source)
    if p.is_file():
        return decode_document(p.read_bytes(), p.resolve().as_uri())
    return decode_document(source)


def _render(result: Any) -> dict[str, Any]:
    if isinstance(result, bool):
        return {"valid": result}
    return result.to_dict()


# --------------------------------------------------------------------------- #
# Entry point                                                                 #
# --------------------------------------------------------------------------- #

def main(argv: Sequence[str] | None = None) -> int:
    ns = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        parser = Parser(options=_options(ns))
        for path in ns.preload:
            parser.pre_load(path)
        schema = Schema.load(ns.schema, parser)
    except (SchemaError, OSError, ValueError) as exc:
        print(f"Schema error: {exc}", file=sys.stderr)
        return 2

    for entry in parser.examples_validation_errors + parser.default_validation_errors:
        LOGGER.warning("%s %s: %s", entry.instance_location, entry.keyword_location, entry.error)

    all_valid = True
    for source in ns.instances:
        try:
            instance = _read_instance(source)
        except ValueError as exc:
            print(f"Instance error: {exc}", file=sys.stderr)
            return 2
        result = schema.evaluate(instance, ns.output)
        all_valid &= result if isinstance(result, bool) else result.valid
        print(json.dumps(_render(result), indent=2))

    if ns.csv:
        report = validate_frame(schema, pd.read_csv(ns.csv))
        all_valid &= bool(report["valid"].all())
        rows = [
            {"row": i, "valid": bool(row.valid), "errors": row.errors}
            for i, row in enumerate(report.itertuples(index=False))
        ]
        print(json.dumps(rows, indent=2))

    return 0 if all_valid else 1
