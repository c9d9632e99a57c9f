"""
formats.py - checkers for the ``format`` keyword.

Public API
----------
FormatChecker
    Base class: ``name`` plus ``check(value) -> bool``.
DelegatingFormatChecker(name, *constraints)
    Nonstandard format expressed as a conjunction of leaf constraints.
lookup_standard(name) -> FormatChecker | None
FormatRegistry(nonstandard_handler=None)
    ``lookup(name)`` consults the nonstandard handler before the standard set.

String formats ignore non-string instances; ``int32`` / ``int64`` ignore
non-numbers.
"""

from __future__ import annotations

import datetime as _dt
import ipaddress
import re
from typing import Any, Callable, Optional

from . import evaluator
from .nodes import Node
from .utils import is_integer, is_number

__all__ = [
    "FormatChecker",
    "StringFormatChecker",
    "IntegerRangeFormatChecker",
    "DelegatingFormatChecker",
    "FormatRegistry",
    "NonstandardFormatHandler",
    "STANDARD_FORMATS",
    "lookup_standard",
]

NonstandardFormatHandler = Callable[[str], Optional["FormatChecker"]]


# --------------------------------------------------------------------------- #
# Checker classes                                                             #
# --------------------------------------------------------------------------- #

class FormatChecker:
    """A named predicate over JSON values."""

    def __init__(self, name: str):
        self.name = name

    def check(self, value: Any) -> bool:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class StringFormatChecker(FormatChecker):
    def __init__(self, name: str, predicate: Callable[[str], bool]):
        super().__init__(name)
        self._predicate = predicate

    def check(self, value: Any) -> bool:
        if not isinstance(value, str):
            return True
        return self._predicate(value)


class IntegerRangeFormatChecker(FormatChecker):
    def __init__(self, name: str, bits: int):
        super().__init__(name)
        self.minimum = -(2 ** (bits - 1))
        self.maximum = 2 ** (bits - 1) - 1

    def check(self, value: Any) -> bool:
        if not is_number(value):
            return True
        return is_integer(value) and self.minimum <= value <= self.maximum


class DelegatingFormatChecker(FormatChecker):
    """Format satisfied when every wrapped constraint accepts the value."""

    def __init__(self, name: str, *constraints: Node):
        super().__init__(name)
        self.constraints = constraints

    def check(self, value: Any) -> bool:
        return all(evaluator.validate(c, value) for c in self.constraints)


# --------------------------------------------------------------------------- #
# Date & time                                                                 #
# --------------------------------------------------------------------------- #

_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_TIME_RE = re.compile(r"^(\d{2}):(\d{2}):(\d{2})(?:\.\d+)?(?:[Zz]|([+-])(\d{2}):(\d{2}))$")
_DURATION_RE = re.compile(
    r"^P(?:\d+W|(?=\d|T\d)(?:\d+Y)?(?:\d+M)?(?:\d+D)?(?:T(?=\d)(?:\d+H)?(?:\d+M)?(?:\d+S)?)?)$"
)


def _is_date(text: str) -> bool:
    m = _DATE_RE.match(text)
    if not m:
        return False
    try:
        _dt.date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return False
    return True


def _is_time(text: str) -> bool:
    m = _TIME_RE.match(text)
    if not m:
        return False
    hour, minute, second = int(m.group(1)), int(m.group(2)), int(m.group(3))
    if hour > 23 or minute > 59 or second > 60:
        return False
    if m.group(4) and (int(m.group(5)) > 23 or int(m.group(6)) > 59):
        return False
    return True


def _is_date_time(text: str) -> bool:
    for sep in ("T", "t"):
        if sep in text:
            date, _, time = text.partition(sep)
            return _is_date(date) and _is_time(time)
    return False


def _is_duration(text: str) -> bool:
    return bool(_DURATION_RE.match(text))


# --------------------------------------------------------------------------- #
# Network names                                                               #
# --------------------------------------------------------------------------- #

_LABEL_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?$")
_LOCAL_RE = re.compile(r"^[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*$")


def _is_hostname(text: str) -> bool:
    if not text or len(text) > 253:
        return False
    if text.endswith("."):
        text = text[:-1]
    return all(_LABEL_RE.match(label) for label in text.split("."))


def _is_idn_hostname(text: str) -> bool:
    try:
        ascii_name = text.encode("idna").decode("ascii")
    except UnicodeError:
        return False
    return _is_hostname(ascii_name)


def _is_ipv4(text: str) -> bool:
    try:
        ipaddress.IPv4Address(text)
    except ValueError:
        return False
    return True


def _is_ipv6(text: str) -> bool:
    if "%" in text:
        return False
    try:
        ipaddress.IPv6Address(text)
    except ValueError:
        return False
    return True


def _is_email(text: str) -> bool:
    local, sep, domain = text.rpartition("@")
    if not sep or not local or len(local) > 64:
        return False
    if domain.startswith("[") and domain.endswith("]"):
        literal = domain[1:-1]
        if literal.lower().startswith("ipv6:"):
            return _is_ipv6(literal[5:])
        return _is_ipv4(literal)
    return bool(_LOCAL_RE.match(local)) and _is_hostname(domain)


def _is_idn_email(text: str) -> bool:
    local, sep, domain = text.rpartition("@")
    if not sep or not local or any(c.isspace() for c in local):
        return False
    return _is_idn_hostname(domain)


# --------------------------------------------------------------------------- #
# URIs, pointers, templates                                                   #
# --------------------------------------------------------------------------- #

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")
_URI_CHARS_RE = re.compile(r"^(?:[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=]|%[0-9A-Fa-f]{2})*$")
_IRI_CHARS_RE = re.compile(r"^(?:[^\x00-\x20<>\"{}|\\^`\x7f]|%[0-9A-Fa-f]{2})*$")
_UUID_RE = re.compile(r"^[0-9A-Fa-f]{8}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{12}$")
_JSON_POINTER_RE = re.compile(r"^(?:/(?:[^~/]|~[01])*)*$")
_RELATIVE_POINTER_RE = re.compile(r"^(?:0|[1-9][0-9]*)(?:#|(?:/(?:[^~/]|~[01])*)*)$")
_TEMPLATE_EXPR_RE = re.compile(r"\{[^{}]*\}")


def _is_uri_reference(text: str) -> bool:
    return bool(_URI_CHARS_RE.match(text)) and text.count("#") <= 1


def _is_uri(text: str) -> bool:
    return bool(_SCHEME_RE.match(text)) and _is_uri_reference(text)


def _is_iri_reference(text: str) -> bool:
    return bool(_IRI_CHARS_RE.match(text)) and text.count("#") <= 1


def _is_iri(text: str) -> bool:
    return bool(_SCHEME_RE.match(text)) and _is_iri_reference(text)


def _is_uri_template(text: str) -> bool:
    stripped = _TEMPLATE_EXPR_RE.sub("", text)
    return "{" not in stripped and "}" not in stripped


def _is_regex(text: str) -> bool:
    try:
        re.compile(text)
    except re.error:
        return False
    return True


# --------------------------------------------------------------------------- #
# Registry                                                                    #
# --------------------------------------------------------------------------- #

STANDARD_FORMATS: dict[str, FormatChecker] = {
    c.name: c
    for c in (
        StringFormatChecker("date-time", _is_date_time),
        StringFormatChecker("date", _is_date),
        StringFormatChecker("time", _is_time),
        StringFormatChecker("duration", _is_duration),
        StringFormatChecker("email", _is_email),
        StringFormatChecker("idn-email", _is_idn_email),
        StringFormatChecker("hostname", _is_hostname),
        StringFormatChecker("idn-hostname", _is_idn_hostname),
        StringFormatChecker("ipv4", _is_ipv4),
        StringFormatChecker("ipv6", _is_ipv6),
        StringFormatChecker("uri", _is_uri),
        StringFormatChecker("uri-reference", _is_uri_reference),
        StringFormatChecker("iri", _is_iri),
        StringFormatChecker("iri-reference", _is_iri_reference),
        StringFormatChecker("uuid", lambda s: bool(_UUID_RE.match(s))),
        StringFormatChecker("uri-template", _is_uri_template),
        StringFormatChecker("json-pointer", lambda s: bool(_JSON_POINTER_RE.match(s))),
        StringFormatChecker("relative-json-pointer", lambda s: bool(_RELATIVE_POINTER_RE.match(s))),
        StringFormatChecker("regex", _is_regex),
        IntegerRangeFormatChecker("int32", 32),
        IntegerRangeFormatChecker("int64", 64),
    )
}


def lookup_standard(name: str) -> FormatChecker | None:
    return STANDARD_FORMATS.get(name)


class FormatRegistry:
    """Resolves format names; the nonstandard handler wins over the standard set."""

    def __init__(self, nonstandard_handler: NonstandardFormatHandler | None = None):
        self._nonstandard_handler = nonstandard_handler

    def lookup_nonstandard(self, name: str) -> FormatChecker | None:
        if self._nonstandard_handler is None:
            return None
        return self._nonstandard_handler(name)

    def lookup(self, name: str) -> FormatChecker | None:
        checker = self.lookup_nonstandard(name)
        if checker is not None:
            return checker
        return lookup_standard(name)
