"""Entry assembler: rebuilds one nested record from the flat field schema."""

import copy
from typing import Any

from curl_data_gen.generator.classifier import classify
from curl_data_gen.generator.values import ValueGenerator, coerce_static
from curl_data_gen.parser.base import Category, FieldConfig, FieldMetadata
from curl_data_gen.parser.heuristics import leaf_name


def split_indexed_path(path: str) -> tuple[str, int, list[str]] | None:
    """Split ``name.<index>[.rest]`` at its first numeric segment.

    Returns (array path, index, remaining segments) or None.
    """
    parts = path.split(".")
    for position in range(1, len(parts)):
        if parts[position].isdigit():
            return ".".join(parts[:position]), int(parts[position]), parts[position + 1:]
    return None


def set_path(target: dict[str, Any], segments: list[str], value: Any) -> None:
    """Assign ``value`` at a nested path, creating objects along the way."""
    current = target
    for part in segments[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[segments[-1]] = value


class EntryAssembler:
    """Generates one record shaped like the original request body."""

    def __init__(self, values: ValueGenerator | None = None):
        self.values = values or ValueGenerator()

    def assemble(
        self,
        fields: dict[str, FieldMetadata],
        configs: dict[str, FieldConfig] | None = None,
    ) -> dict[str, Any]:
        configs = configs or {}
        groups = self._group_indexed(fields)
        containers = self._containers(fields)

        entry: dict[str, Any] = {}
        built: set[str] = set()
        whole: list[str] = []
        for path, metadata in fields.items():
            if any(path.startswith(f"{prefix}.") for prefix in whole):
                continue
            if path in containers:
                if self._generates_whole(metadata, configs.get(path)):
                    whole.append(path)
                    set_path(entry, path.split("."), self._leaf(path, metadata, configs[path]))
                continue

            array_path = self._owning_array(path, groups)
            if array_path is None:
                set_path(entry, path.split("."), self._leaf(path, metadata, configs.get(path)))
            elif array_path not in built:
                built.add(array_path)
                array = self._build_array(array_path, groups[array_path], fields, configs)
                set_path(entry, array_path.split("."), array)
        return entry

    # -- partitioning ---------------------------------------------------------

    def _group_indexed(self, fields: dict[str, FieldMetadata]) -> dict[str, dict[int, list[str]]]:
        """Group indexed paths as {array path: {index: [field paths]}}."""
        groups: dict[str, dict[int, list[str]]] = {}
        for path in fields:
            split = split_indexed_path(path)
            if split:
                array_path, index, _ = split
                groups.setdefault(array_path, {}).setdefault(index, []).append(path)
        return groups

    def _owning_array(self, path: str, groups: dict[str, dict[int, list[str]]]) -> str | None:
        if path in groups:
            return path
        split = split_indexed_path(path)
        return split[0] if split else None

    def _containers(self, fields: dict[str, FieldMetadata]) -> set[str]:
        """Object paths recorded whole whose members are also recorded."""
        return {
            path
            for path, metadata in fields.items()
            if metadata.coarse_type == "object" and any(other.startswith(f"{path}.") for other in fields)
        }

    def _generates_whole(self, metadata: FieldMetadata, config: FieldConfig | None) -> bool:
        """A container is generated as a unit when randomized or given a new static value.

        Otherwise its members rebuild it, so per-member configs still apply.
        """
        if config is None:
            return False
        if not config.is_static or config.static_value is None:
            return True
        return coerce_static(config.static_value, Category.OBJECT, config) != metadata.original_value

    # -- generation -----------------------------------------------------------

    def _leaf(self, path: str, metadata: FieldMetadata, config: FieldConfig | None) -> Any:
        if metadata.coarse_type in ("array", "object"):
            category = Category(metadata.coarse_type)
        else:
            category = classify(path, metadata.coarse_type)
        return self.values.generate(category, config, field_name=leaf_name(path))

    def _build_array(
        self,
        array_path: str,
        by_index: dict[int, list[str]],
        fields: dict[str, FieldMetadata],
        configs: dict[str, FieldConfig],
    ) -> Any:
        own = fields.get(array_path)
        if own is not None and own.coarse_type == "array" and array_path in configs:
            return self.values.generate(Category.ARRAY, configs[array_path], field_name=leaf_name(array_path))

        items: list[Any] = []
        for index in sorted(by_index):
            element: Any = {}
            for path in by_index[index]:
                rest = split_indexed_path(path)[2]
                value = self._indexed_leaf(path, fields[path], configs.get(path))
                if not rest:
                    element = value
                elif isinstance(element, dict):
                    set_path(element, rest, value)
            if element == {} and leaf_name(array_path) == "relations":
                element = {"id": self.values.source.next_int(0, 1000), "type": "default"}
            items.append(element)
        return items

    def _indexed_leaf(self, path: str, metadata: FieldMetadata, config: FieldConfig | None) -> Any:
        """Configured leaves are generated; unconfigured ones keep their original value."""
        if config is None:
            return copy.deepcopy(metadata.original_value)
        return self.values.generate(classify(path, metadata.coarse_type), config, field_name=leaf_name(path))
