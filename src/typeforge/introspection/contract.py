from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, Sequence, runtime_checkable


class FieldShape(Enum):
    PRIMITIVE = "primitive"
    ARRAY = "array"
    ENUM = "enum"
    CLASS = "class"
    TYPE_PARAMETER = "type_parameter"


class PrimitiveKind(Enum):
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    DATE = "date"
    UUID = "uuid"
    UNKNOWN = "unknown"


# Class-shaped references that are synthesized directly instead of being
# looked up in the registry.
DATE_TYPE_KINDS: dict[str, PrimitiveKind] = {
    "datetime": PrimitiveKind.DATETIME,
    "date": PrimitiveKind.DATE,
}


@dataclass(frozen=True)
class TypeShape:
    """Classification of a single annotation, before it is bound to a field."""

    shape: FieldShape
    kind: PrimitiveKind | None = None
    referenced_type_name: str | None = None
    enum_values: tuple[object, ...] = ()
    enum_type: type | None = field(default=None, compare=False)


@dataclass(frozen=True)
class FieldDescriptor:
    """One field of a type's schema.

    For array fields ``element_shape``/``element_kind`` classify the element
    type, and ``referenced_type_name``/``enum_values`` describe the element
    rather than the list itself.

    Enum-shaped descriptors hold the members' raw values and, for enum
    classes, the class name in ``referenced_type_name``. ``enum_type`` is
    the class itself when the provider could import it; it is not part of
    equality, so runtime and source-derived schemas compare equal.
    """

    name: str
    shape: FieldShape
    kind: PrimitiveKind | None = None
    element_shape: FieldShape | None = None
    element_kind: PrimitiveKind | None = None
    referenced_type_name: str | None = None
    enum_values: tuple[object, ...] = ()
    enum_type: type | None = field(default=None, compare=False)

    @property
    def is_array(self) -> bool:
        return self.shape is FieldShape.ARRAY

    @classmethod
    def scalar(cls, name: str, shape: TypeShape) -> FieldDescriptor:
        return cls(
            name=name,
            shape=shape.shape,
            kind=shape.kind,
            referenced_type_name=shape.referenced_type_name,
            enum_values=shape.enum_values,
            enum_type=shape.enum_type,
        )

    @classmethod
    def array(cls, name: str, element: TypeShape) -> FieldDescriptor:
        return cls(
            name=name,
            shape=FieldShape.ARRAY,
            element_shape=element.shape,
            element_kind=element.kind,
            referenced_type_name=element.referenced_type_name,
            enum_values=element.enum_values,
            enum_type=element.enum_type,
        )


@runtime_checkable
class SchemaProvider(Protocol):
    def fields(self, type_name: str) -> Sequence[FieldDescriptor]: ...
