from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Mapping, Sequence


@dataclass(frozen=True)
class RegistryOptions:
    """Per-type generation constraints.

    ``allowed_values`` maps a field name to the values that field may take,
    e.g. ``{"status": ["ACTIVE", "INACTIVE", "PENDING"]}``.
    """

    allowed_values: Mapping[str, Sequence[object]] = field(default_factory=dict)


@dataclass(frozen=True)
class RegistryEntry:
    type: type
    options: RegistryOptions = field(default_factory=RegistryOptions)

    @property
    def allowed_values(self) -> Mapping[str, Sequence[object]]:
        return self.options.allowed_values


class TypeRegistry:
    """Maps DTO classes to their registration entries.

    This is the bridge between runtime classes and the schema providers,
    which only know types by name. Enum classes may be registered too;
    schemas read from source name enums instead of importing them, and the
    engine looks those names up here to return members.
    """

    def __init__(self) -> None:
        self._entries: dict[type, RegistryEntry] = {}

    def register(self, cls: type, options: RegistryOptions | None = None) -> None:
        self._entries[cls] = RegistryEntry(type=cls, options=options or RegistryOptions())

    def get(self, cls: type) -> RegistryEntry | None:
        return self._entries.get(cls)

    def find_by_name(self, name: str) -> type | None:
        for cls in self._entries:
            if cls.__name__ == name:
                return cls
        return None

    def types_by_name(self) -> dict[str, type]:
        names: dict[str, type] = {}
        for cls in self._entries:
            names.setdefault(cls.__name__, cls)
        return names

    def __contains__(self, cls: object) -> bool:
        return cls in self._entries

    def __iter__(self) -> Iterator[type]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
