from __future__ import annotations

from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

from typeforge.registry import RegistryOptions
from typeforge.schema import ForgeSettings

DEFAULT_CONFIG_NAME = "typeforge.toml"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def _section(data: TomlTable, name: str) -> TomlTable:
    section = data.get(name, {})
    return section if isinstance(section, dict) else {}


def forge_defaults(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    return _section(load_config(root=root, config_path=config_path), "forge")


def schema_defaults(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    return _section(load_config(root=root, config_path=config_path), "schema")


def registry_defaults(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    return _section(load_config(root=root, config_path=config_path), "registry")


def _normalize_name_list(value: TomlValue) -> list[str]:
    items: list[str] = []
    if value is None:
        return items
    if isinstance(value, str):
        items = [part.strip() for part in value.split(",") if part.strip()]
    elif isinstance(value, (list, tuple, set)):
        for item in value:
            if isinstance(item, str):
                items.extend([part.strip() for part in item.split(",") if part.strip()])
    return [item for item in items if item]


def schema_exclude_dirs(section: TomlTable | None) -> list[str]:
    if not isinstance(section, dict):
        return []
    return _normalize_name_list(section.get("exclude"))


def registry_options(section: TomlTable | None, type_name: str) -> RegistryOptions:
    """Registration options for ``type_name`` from a ``[registry]`` section.

    ``[registry.UserDTO.allowed_values]`` tables map field names to lists of
    allowed values; anything that is not a list is ignored.
    """
    if not isinstance(section, dict):
        return RegistryOptions()
    table = section.get(type_name)
    if not isinstance(table, dict):
        return RegistryOptions()
    allowed = table.get("allowed_values")
    if not isinstance(allowed, dict):
        return RegistryOptions()
    return RegistryOptions(
        allowed_values={
            str(name): list(values)
            for name, values in allowed.items()
            if isinstance(values, list)
        }
    )


def forge_settings(section: TomlTable | None) -> ForgeSettings:
    return ForgeSettings.model_validate(section or {})


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged
