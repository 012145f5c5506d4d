"""Serializers for generated entries: JSON, CSV and YAML."""

import csv
import io
import json
from pathlib import Path
from typing import Any

import yaml

from curl_data_gen.parser.base import ReplayOutcome


def to_json(entries: list[dict[str, Any]]) -> str:
    return json.dumps(entries, indent=2, ensure_ascii=False)


def to_yaml(entries: list[dict[str, Any]]) -> str:
    return yaml.safe_dump(entries, sort_keys=False, allow_unicode=True)


def to_csv(entries: list[dict[str, Any]]) -> str:
    """One row per entry; nested values are JSON-encoded into a single cell.

    Columns are the union of top-level keys in first-seen order.
    """
    if not entries:
        return ""

    columns: list[str] = []
    for entry in entries:
        for key in entry:
            if key not in columns:
                columns.append(key)

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerow(columns)
    for entry in entries:
        writer.writerow([_csv_cell(entry.get(column)) for column in columns])
    return buffer.getvalue()


def _csv_cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return value


FORMATTERS = {
    "json": to_json,
    "csv": to_csv,
    "yaml": to_yaml,
}


def render(entries: list[dict[str, Any]], fmt: str = "json") -> str:
    return FORMATTERS[fmt](entries)


def outcomes_to_json(outcomes: list[ReplayOutcome]) -> str:
    return json.dumps([o.model_dump() for o in outcomes], indent=2, ensure_ascii=False)


def write_output(content: str, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
