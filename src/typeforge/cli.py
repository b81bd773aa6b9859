from __future__ import annotations

import enum
import importlib.util
import inspect
import json
import sys
from pathlib import Path
from types import ModuleType
from typing import Optional

import typer
from pydantic import ValidationError

from typeforge.config import (
    forge_defaults,
    forge_settings,
    merge_payload,
    registry_defaults,
    registry_options,
    schema_defaults,
    schema_exclude_dirs,
)
from typeforge.engine import TypeForge
from typeforge.exceptions import TypeForgeError
from typeforge.introspection.source import SourceSchemaProvider
from typeforge.json_types import to_plain_json_value
from typeforge.registry import TypeRegistry
from typeforge.schema import MockRequest, MockResponse
from typeforge.values import FakerValueSynthesizer

app = typer.Typer(add_completion=False)


@app.callback()
def main() -> None:
    """Generate mock instances of Python DTO classes."""


def _parse_target(target: str) -> tuple[Path, str]:
    module_part, _, type_name = target.rpartition(":")
    if not module_part or not type_name:
        raise typer.BadParameter(
            f"expected path/to/module.py:ClassName, got {target!r}", param_hint="TARGET"
        )
    return Path(module_part), type_name


def _load_module(path: Path) -> ModuleType:
    if not path.is_file():
        raise typer.BadParameter(f"module file not found: {path}", param_hint="TARGET")
    module_name = f"_typeforge_target_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise typer.BadParameter(f"cannot import {path}", param_hint="TARGET")
    module = importlib.util.module_from_spec(spec)
    # dataclasses and get_type_hints look the module up by name.
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


def _module_classes(module: ModuleType) -> list[type]:
    return [
        cls
        for _, cls in inspect.getmembers(module, inspect.isclass)
        if cls.__module__ == module.__name__
    ]


def _write_text_to_target(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text + "\n", encoding="utf-8")


@app.command()
def mock(
    target: str = typer.Argument(..., help="path/to/module.py:ClassName"),
    count: int = typer.Option(1, "--count", help="Number of instances to create."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for reproducible values."),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to typeforge.toml."),
    static: bool = typer.Option(
        False,
        "--static/--runtime",
        help="Read field schemas from source text instead of runtime annotations.",
    ),
    output: Optional[Path] = typer.Option(None, "--output", help="Write JSON here instead of stdout."),
) -> None:
    """Create COUNT mock instances of a class and print them as JSON."""
    module_path, type_name = _parse_target(target)
    try:
        request = MockRequest(
            module_path=str(module_path), type_name=type_name, count=count, static=static
        )
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    try:
        settings = forge_settings(
            merge_payload({"seed": seed}, forge_defaults(config_path=config))
        )
    except ValidationError as exc:
        raise typer.BadParameter(f"invalid [forge] configuration: {exc}") from exc

    module = _load_module(Path(request.module_path))
    registry = TypeRegistry()
    registry_section = registry_defaults(config_path=config)
    for cls in _module_classes(module):
        registry.register(cls, registry_options(registry_section, cls.__name__))
    cls = registry.find_by_name(request.type_name)
    if cls is None or issubclass(cls, enum.Enum):
        raise typer.BadParameter(
            f"{request.type_name} is not a class defined in {request.module_path}",
            param_hint="TARGET",
        )

    schema = None
    if request.static:
        schema = SourceSchemaProvider(
            [Path(request.module_path)],
            exclude_dirs=schema_exclude_dirs(schema_defaults(config_path=config)),
        )
    forge = TypeForge(
        registry,
        schema=schema,
        synthesizer=FakerValueSynthesizer(seed=settings.seed, locale=settings.locale),
        config=settings.to_forge_config(),
    )
    try:
        items = forge.create_many(request.count, cls)
    except TypeForgeError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    response = MockResponse(
        type=request.type_name,
        module=request.module_path,
        items=[to_plain_json_value(item) for item in items],
        registered=[registered.__name__ for registered in registry],
    )
    text = json.dumps(response.model_dump(), indent=2, sort_keys=True)
    if output is None:
        typer.echo(text)
    else:
        _write_text_to_target(output, text)
