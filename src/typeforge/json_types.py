"""JSON-like value types used when mocks leave the process (CLI output)."""

from __future__ import annotations

import dataclasses
import enum
from datetime import date, datetime, time
from typing import Any, Mapping, TypeAlias

from pydantic import BaseModel

JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]


def to_plain_json_value(value: Any) -> JSONValue:
    if isinstance(value, enum.Enum):
        return to_plain_json_value(value.value)
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, BaseModel):
        return to_plain_json_value(dict(value))
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            item.name: to_plain_json_value(getattr(value, item.name, None))
            for item in dataclasses.fields(value)
        }
    if isinstance(value, Mapping):
        return {str(key): to_plain_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain_json_value(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return [to_plain_json_value(item) for item in sorted(value, key=repr)]
    if hasattr(value, "__dict__"):
        return {
            str(key): to_plain_json_value(item)
            for key, item in vars(value).items()
            if not str(key).startswith("_")
        }
    return str(value)
