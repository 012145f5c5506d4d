"""Field configuration: defaults, config files and command-line overrides.

A config file is YAML (or JSON) mapping field paths to settings::

    email:
      random: email
    quantity:
      static: 42
    isActive:
      is_static: true
      static_value: "true"
"""

import json
from pathlib import Path
from typing import Any

import yaml

from curl_data_gen.generator.classifier import classify
from curl_data_gen.parser.base import Category, FieldConfig, FieldMetadata
from curl_data_gen.parser.heuristics import leaf_name


def static_text(value: Any) -> str:
    """Render an original value the way a user would type it as static text."""
    return value if isinstance(value, str) else json.dumps(value)


def default_field_configs(fields: dict[str, FieldMetadata], randomize: bool = False) -> dict[str, FieldConfig]:
    """One config per field, keeping the original value as a static value.

    With ``randomize`` every field is random instead, using its inferred category.
    """
    return {
        path: FieldConfig(
            coarse_type=meta.coarse_type,
            is_static=not randomize,
            static_value=static_text(meta.original_value),
            semantic_category=_default_category(path, meta.coarse_type),
            field_name=leaf_name(path),
        )
        for path, meta in fields.items()
    }


def _default_category(path: str, coarse_type: str) -> Category:
    # Whole arrays and objects keep their shape when randomized.
    if coarse_type in ("array", "object"):
        return Category(coarse_type)
    return classify(path, coarse_type)


def load_field_configs(file_path: Path) -> dict[str, FieldConfig]:
    """Load field configs from a YAML/JSON file."""
    data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Field config file must map field paths to settings")

    configs = {}
    for path, settings in data.items():
        if not isinstance(settings, dict):
            raise ValueError(f"Settings for {path!r} must be a mapping")
        configs[str(path)] = FieldConfig(**_normalise(str(path), settings))
    return configs


def _normalise(path: str, settings: dict[str, Any]) -> dict[str, Any]:
    """Expand the ``static:`` / ``random:`` shorthands into FieldConfig fields."""
    settings = dict(settings)
    settings.setdefault("field_name", leaf_name(path))
    if "static" in settings:
        settings["is_static"] = True
        settings["static_value"] = static_text(settings.pop("static"))
    if "random" in settings:
        settings["is_static"] = False
        settings["semantic_category"] = settings.pop("random") or Category.AUTO
    return settings


def apply_overrides(
    configs: dict[str, FieldConfig],
    fields: dict[str, FieldMetadata],
    static: tuple[str, ...] = (),
    random: tuple[str, ...] = (),
) -> dict[str, FieldConfig]:
    """Apply ``PATH=VALUE`` static and ``PATH[=CATEGORY]`` random overrides."""
    merged = dict(configs)
    for item in static:
        path, sep, value = item.partition("=")
        if not sep or not path:
            raise ValueError(f"Static override must look like PATH=VALUE, got {item!r}")
        merged[path] = _base_config(merged, fields, path).model_copy(
            update={"is_static": True, "static_value": value}
        )
    for item in random:
        path, _, category = item.partition("=")
        if not path:
            raise ValueError(f"Random override must look like PATH[=CATEGORY], got {item!r}")
        merged[path] = _base_config(merged, fields, path).model_copy(
            update={"is_static": False, "semantic_category": Category(category) if category else Category.AUTO}
        )
    return merged


def _base_config(configs: dict[str, FieldConfig], fields: dict[str, FieldMetadata], path: str) -> FieldConfig:
    if path in configs:
        return configs[path]
    meta = fields.get(path)
    coarse_type = meta.coarse_type if meta else "string"
    return FieldConfig(coarse_type=coarse_type, field_name=leaf_name(path))
