"""
schema_tree – JSON Schema documents parsed into immutable validator trees.
"""
from .errors import ResolutionError, SchemaError, SchemaReferenceError
from .evaluator import validate, validate_basic, validate_detailed
from .formats import DelegatingFormatChecker, FormatChecker
from .loader import SchemaLoader
from .options import ParserOptions
from .output import BasicErrorEntry, BasicOutput, DetailedOutput
from .parser import Parser
from .pointer import Pointer
from .schema import Schema

__all__ = [
    "Schema",
    "Parser",
    "ParserOptions",
    "SchemaLoader",
    "SchemaError",
    "SchemaReferenceError",
    "ResolutionError",
    "Pointer",
    "BasicErrorEntry",
    "BasicOutput",
    "DetailedOutput",
    "FormatChecker",
    "DelegatingFormatChecker",
    "validate",
    "validate_basic",
    "validate_detailed",
]
