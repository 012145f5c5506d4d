"""Schema extractor: flattens a request body into per-field metadata."""

import json
import re
from typing import Any
from urllib.parse import unquote_plus

from curl_data_gen.parser.base import FieldMetadata
from curl_data_gen.parser.heuristics import (
    coarse_type_of,
    is_array_name,
    is_bool_literal,
    is_boolean_name,
    is_object_name,
)

BOOLEANISH_STRINGS = ("true", "false", "1", "0", "yes", "no", "on", "off", "")
TRUE_STRINGS = ("true", "1", "yes", "on")

_TRAILING_INDEX_RE = re.compile(r"^(.+)\.(\d+)$")
# Objects recorded whole as well as flattened, so they can be regenerated as a unit.
WHOLE_OBJECT_KEYS = ("properties", "config", "recurringTask", "rruleOptions")


def extract_fields(body: Any) -> dict[str, FieldMetadata]:
    """Flatten a request body into an ordered ``path -> FieldMetadata`` mapping.

    String bodies are tried as JSON first, then as ``key=value&...`` form data.
    Bodies that are not JSON objects yield no fields.
    """
    if body is None or body == "":
        return {}

    if isinstance(body, str):
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return _extract_form(body)

    fields: dict[str, FieldMetadata] = {}
    if isinstance(body, dict):
        _walk(body, "", fields)
    return fields


def _walk(obj: dict[str, Any], prefix: str, fields: dict[str, FieldMetadata]) -> None:
    for key, value in obj.items():
        path = f"{prefix}.{key}" if prefix else key

        if value is None:
            fields[path] = FieldMetadata(path=path, coarse_type="null", original_value=None)
        elif isinstance(value, list):
            fields[path] = FieldMetadata(path=path, coarse_type="array", original_value=value)
            if key == "relations":
                _flatten_relations(path, value, fields)
        elif isinstance(value, dict):
            if key in WHOLE_OBJECT_KEYS:
                fields[path] = FieldMetadata(path=path, coarse_type="object", original_value=value)
            _walk(value, path, fields)
        else:
            _record_scalar(path, key, value, fields)


def _flatten_relations(path: str, relations: list[Any], fields: dict[str, FieldMetadata]) -> None:
    for index, relation in enumerate(relations):
        if not isinstance(relation, dict):
            continue
        for key, value in relation.items():
            item_path = f"{path}.{index}.{key}"
            fields[item_path] = FieldMetadata(
                path=item_path, coarse_type=coarse_type_of(value), original_value=value
            )


def _record_scalar(path: str, key: str, value: Any, fields: dict[str, FieldMetadata]) -> None:
    if isinstance(value, bool) or is_bool_literal(value):
        fields[path] = FieldMetadata(
            path=path,
            coarse_type="boolean",
            original_value=value if isinstance(value, bool) else value.lower() == "true",
        )
        return

    if isinstance(value, str) and is_boolean_name(key) and value.strip().lower() in BOOLEANISH_STRINGS:
        fields[path] = FieldMetadata(
            path=path,
            coarse_type="boolean",
            original_value=value.strip().lower() in TRUE_STRINGS,
        )
        return

    match = _TRAILING_INDEX_RE.match(path)
    if match:
        _record_indexed(match.group(1), int(match.group(2)), path, value, fields)
    elif isinstance(value, str) and is_object_name(key):
        fields[path] = FieldMetadata(path=path, coarse_type="object", original_value={"value": value})
    elif isinstance(value, str) and is_array_name(key):
        fields[path] = FieldMetadata(path=path, coarse_type="array", original_value=[value])
    else:
        fields[path] = FieldMetadata(path=path, coarse_type=coarse_type_of(value), original_value=value)


def _record_indexed(
    array_path: str, index: int, path: str, value: Any, fields: dict[str, FieldMetadata]
) -> None:
    """Record ``name.<index>`` both as an element of ``name`` and on its own."""
    array = fields.get(array_path)
    if array is None or array.coarse_type != "array" or not isinstance(array.original_value, list):
        array = fields[array_path] = FieldMetadata(path=array_path, coarse_type="array", original_value=[])
    items = array.original_value
    while len(items) <= index:
        items.append({})
    items[index] = value
    fields[path] = FieldMetadata(path=path, coarse_type=coarse_type_of(value), original_value=value)


def _extract_form(body: str) -> dict[str, FieldMetadata]:
    fields: dict[str, FieldMetadata] = {}
    for pair in body.split("&"):
        key, _, value = pair.partition("=")
        key = unquote_plus(key)
        if key:
            _record_scalar(key, key.rsplit(".", 1)[-1], unquote_plus(value), fields)
    return fields
