"""Name and value heuristics shared by repair, schema extraction and generation.

Field names are checked against the last path segment only, so
``contact.validateEmail`` behaves like ``validateEmail``.
"""

import math
import re
from typing import Any

# "is"/"has"/"can" only count as a leading camelCase or snake_case word, so
# names like ``displayName`` or ``history`` stay strings.
BOOLEAN_WORD_RE = re.compile(r"^(?:[Ii]s|[Hh]as|[Cc]an)(?=[A-Z0-9_\-]|$)")
BOOLEAN_FRAGMENT_RE = re.compile(r"enable|allow|unique|flag", re.IGNORECASE)

# Plural heuristic skips -ss/-us endings (address, status).
ARRAY_NAME_RE = re.compile(
    r"(?<![su])s$|list$|array$|items$|collection$|^additional|^relation",
    re.IGNORECASE,
)
OBJECT_NAME_RE = re.compile(
    r"^props|^options|^config|^settings|^attributes|^metadata|^data$",
    re.IGNORECASE,
)
CONTACT_LIST_NAME_RE = re.compile(
    r"^additional.*s$|^contacts$|^relationships$|^relations$",
    re.IGNORECASE,
)
# ``max``/``min`` only count as words, so ``admin`` is not a quantity.
QUANTITY_NAME_RE = re.compile(
    r"(?i:limit|count|num|quantity|total|amount|length|size|value|sum|percent|rate|ratio"
    r"|weight|height|width|depth|distance|duration|interval|order|index|level|priority|score|rank)"
    r"|^(?i:max|min)|(?:Max|Min)(?=[A-Z0-9_]|$)|[_-](?i:max|min)(?![a-z])"
)

INDEXED_KEY_RE = re.compile(r"^(.+?)\.(\d+)(?:\.(.*))?$")

_NUMBER_RE = re.compile(r"^\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?\s*$")
_INT_RE = re.compile(r"^\s*[-+]?\d+\s*$")

TRUTHY_STRINGS = ("true", "1", "yes")


def leaf_name(path: str) -> str:
    return path.rsplit(".", 1)[-1] if path else ""


def is_boolean_name(name: str) -> bool:
    name = leaf_name(name)
    return bool(BOOLEAN_WORD_RE.match(name) or BOOLEAN_FRAGMENT_RE.search(name))


def is_array_name(name: str) -> bool:
    """Array-by-name, with object names taking precedence (``settings``)."""
    name = leaf_name(name)
    return bool(ARRAY_NAME_RE.search(name)) and not OBJECT_NAME_RE.search(name)


def is_object_name(name: str) -> bool:
    return bool(OBJECT_NAME_RE.search(leaf_name(name)))


def is_quantity_name(name: str) -> bool:
    return bool(QUANTITY_NAME_RE.search(leaf_name(name)))


def is_bool_literal(value: Any) -> bool:
    return isinstance(value, str) and value.lower() in ("true", "false")


def looks_numeric(value: Any) -> bool:
    return isinstance(value, str) and bool(_NUMBER_RE.match(value))


def to_number(value: str) -> int | float | None:
    """Parse a numeric-looking string, or return None."""
    if not looks_numeric(value):
        return None
    if _INT_RE.match(value):
        return int(value)
    number = float(value)
    if math.isinf(number) or math.isnan(number):
        return None
    return number


def coerce_scalar(value: Any) -> Any:
    """Turn "true"/"false" into booleans and numeric strings into numbers."""
    if not isinstance(value, str):
        return value
    if is_bool_literal(value):
        return value.lower() == "true"
    number = to_number(value)
    return value if number is None else number


def to_bool(value: Any) -> bool:
    """Boolean coercion used for ``validateEmail``-style flags."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return "@" in value or value.strip().lower() in TRUTHY_STRINGS
    return bool(value)


def coarse_type_of(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return "string"
