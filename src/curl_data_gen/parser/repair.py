"""Structural repair of a parsed JSON body.

Fixes the type mismatches typical of hand-written request bodies and
rebuilds arrays that were flattened into ``name.<index>.field`` keys.
The input is never mutated; a repaired copy is returned.
"""

import copy
import json
from typing import Any

from curl_data_gen.generator.random_source import LOWER_ALPHANUMERIC, RandomSource
from curl_data_gen.parser.heuristics import (
    INDEXED_KEY_RE,
    coerce_scalar,
    is_bool_literal,
    is_boolean_name,
    to_bool,
    to_number,
)

CONTACT_LIST_SHAPES = {
    "additionalEmails": lambda item: {"email": item, "isPrimary": False},
    "additionalPhones": lambda item: {"number": item, "type": "mobile"},
}


def repair_body(body: Any, source: RandomSource | None = None) -> Any:
    """Return a repaired copy of ``body``. Non-object bodies pass through."""
    if not isinstance(body, dict):
        return body
    return _repair_object(copy.deepcopy(body), source or RandomSource())


def relation_placeholder(source: RandomSource) -> dict[str, str]:
    return {
        "associationId": association_id(source),
        "recordId": record_id(source),
    }


def association_id(source: RandomSource) -> str:
    return f"TASK_{source.string(8, pool='ABCDEFGHIJKLMNOPQRSTUVWXYZ')}_ASSOCIATION"


def record_id(source: RandomSource) -> str:
    return source.string(20, pool=LOWER_ALPHANUMERIC)


def _repair_object(obj: dict[str, Any], source: RandomSource) -> dict[str, Any]:
    result: dict[str, Any] = {}
    indexed: dict[str, list[Any]] = {}

    for key, value in obj.items():
        match = INDEXED_KEY_RE.match(key)
        if match:
            name, index, rest = match.group(1), int(match.group(2)), match.group(3)
            _place_indexed(indexed.setdefault(name, []), index, rest, value)
            continue

        if key == "validateEmail":
            result[key] = to_bool(value)
        elif key in CONTACT_LIST_SHAPES and isinstance(value, list):
            result[key] = _repair_contact_list(key, value)
        elif isinstance(value, dict):
            result[key] = _repair_object(value, source)
        elif isinstance(value, str) and (is_bool_literal(value) or is_boolean_name(key)):
            result[key] = value.lower() == "true" if is_bool_literal(value) else value
        elif isinstance(value, str) and to_number(value) is not None:
            result[key] = to_number(value)
        else:
            result[key] = value

    for name, items in indexed.items():
        if name == "relations":
            items = [_complete_relation(item, source) for item in items]
        result[name] = items

    if isinstance(result.get("config"), dict):
        result["config"] = _repair_task_config(result["config"])
    return result


def _place_indexed(items: list[Any], index: int, rest: str | None, value: Any) -> None:
    while len(items) <= index:
        items.append({})
    if not rest:
        items[index] = value
        return
    current = items[index]
    if not isinstance(current, dict):
        current = items[index] = {}
    *parents, leaf = rest.split(".")
    for part in parents:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[leaf] = coerce_scalar(value)


def _repair_contact_list(key: str, items: list[Any]) -> list[Any]:
    if not items:
        return []
    if len(items) == 1 and items[0] in ("", None):
        return [{}]
    shape = CONTACT_LIST_SHAPES[key]
    repaired = []
    for item in items:
        if item in ("", None):
            repaired.append({})
        elif isinstance(item, (dict, list)):
            repaired.append(item)
        else:
            repaired.append(shape(str(item)))
    return repaired


def _complete_relation(item: Any, source: RandomSource) -> dict[str, Any]:
    if not isinstance(item, dict):
        return relation_placeholder(source)
    relation = dict(item)
    for key, make in (("associationId", association_id), ("recordId", record_id)):
        value = relation.get(key)
        if value is None or value == "":
            relation[key] = make(source)
        elif not isinstance(value, str):
            relation[key] = json.dumps(value) if isinstance(value, bool) else str(value)
    return relation


def _repair_task_config(config: dict[str, Any]) -> dict[str, Any]:
    task = config.get("recurringTask")
    if not isinstance(task, dict):
        return config
    task = dict(task)
    if "contactIds" in task and task["contactIds"] and not isinstance(task["contactIds"], list):
        task["contactIds"] = [str(task["contactIds"])]
    if "owners" in task and not isinstance(task["owners"], list):
        task["owners"] = []
    return {**config, "recurringTask": task}
