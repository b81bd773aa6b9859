from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Collection, Mapping, Union

DEFAULT_ARRAY_COUNT = 1
DEFAULT_MAX_DEPTH = 32


@dataclass(frozen=True)
class GenericBinding:
    """Binds a type-parameter field (``T`` or ``list[T]``) to a concrete class.

    ``options`` is applied to every created item; a callable receives the
    item's zero-based index.
    """

    type: type
    count: int | None = None
    options: OptionsSource | None = None


@dataclass(frozen=True)
class CreationOptions:
    overrides: Mapping[str, object] = field(default_factory=dict)
    generics: Mapping[str, GenericBinding] = field(default_factory=dict)
    array_counts: Mapping[str, int] = field(default_factory=dict)
    empty_arrays: Collection[str] = frozenset()


OptionsSource = Union[CreationOptions, Callable[[int], CreationOptions]]


@dataclass(frozen=True)
class ForgeConfig:
    default_array_count: int = DEFAULT_ARRAY_COUNT
    max_depth: int = DEFAULT_MAX_DEPTH


def options_for_index(source: OptionsSource | None, index: int) -> CreationOptions | None:
    if callable(source):
        return source(index)
    return source
