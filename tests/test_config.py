from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from typeforge import ForgeConfig, RegistryOptions
from typeforge.config import (
    DEFAULT_CONFIG_NAME,
    forge_defaults,
    forge_settings,
    load_config,
    merge_payload,
    registry_defaults,
    registry_options,
    schema_defaults,
    schema_exclude_dirs,
)

_CONFIG = """
[forge]
default_array_count = 2
max_depth = 8
seed = 99
locale = "pt_BR"

[schema]
exclude = ["build", "dist, .venv"]

[registry.UserDTO.allowed_values]
status = ["ACTIVE", "PENDING"]
age = 30
"""


def _write_config(root: Path) -> Path:
    path = root / DEFAULT_CONFIG_NAME
    path.write_text(_CONFIG, encoding="utf-8")
    return path


def test_sections_are_read_from_root(tmp_path: Path) -> None:
    _write_config(tmp_path)
    assert forge_defaults(root=tmp_path)["seed"] == 99
    assert schema_defaults(root=tmp_path)["exclude"] == ["build", "dist, .venv"]
    assert "UserDTO" in registry_defaults(root=tmp_path)


def test_explicit_config_path(tmp_path: Path) -> None:
    path = tmp_path / "custom.toml"
    path.write_text("[forge]\nmax_depth = 5\n", encoding="utf-8")
    assert load_config(config_path=path) == {"forge": {"max_depth": 5}}


def test_missing_or_malformed_config_is_empty(tmp_path: Path) -> None:
    assert load_config(root=tmp_path) == {}
    broken = tmp_path / "broken.toml"
    broken.write_text("[forge\n", encoding="utf-8")
    assert load_config(config_path=broken) == {}


def test_schema_exclude_dirs_accepts_lists_and_commas(tmp_path: Path) -> None:
    _write_config(tmp_path)
    assert schema_exclude_dirs(schema_defaults(root=tmp_path)) == ["build", "dist", ".venv"]
    assert schema_exclude_dirs({"exclude": "a, b"}) == ["a", "b"]
    assert schema_exclude_dirs(None) == []


def test_registry_options_keep_only_lists(tmp_path: Path) -> None:
    _write_config(tmp_path)
    section = registry_defaults(root=tmp_path)
    assert registry_options(section, "UserDTO") == RegistryOptions(
        allowed_values={"status": ["ACTIVE", "PENDING"]}
    )
    assert registry_options(section, "OrderDTO") == RegistryOptions()
    assert registry_options(None, "UserDTO") == RegistryOptions()


def test_forge_config_from_section(tmp_path: Path) -> None:
    _write_config(tmp_path)
    assert forge_settings(forge_defaults(root=tmp_path)).to_forge_config() == ForgeConfig(
        default_array_count=2, max_depth=8
    )
    assert forge_settings(None).to_forge_config() == ForgeConfig()


@pytest.mark.parametrize(
    "section",
    [{"default_array_count": -1}, {"max_depth": 0}, {"seed": "abc"}],
)
def test_forge_config_rejects_invalid_values(section: dict) -> None:
    with pytest.raises(ValidationError):
        forge_settings(section)


def test_merge_payload_prefers_explicit_values() -> None:
    merged = merge_payload({"seed": 1, "locale": None}, {"seed": 2, "locale": "de_DE"})
    assert merged == {"seed": 1, "locale": "de_DE"}
