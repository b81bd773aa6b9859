from __future__ import annotations

import enum
import inspect
import logging
import sys
import types
import typing
import uuid
from collections import abc
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, ClassVar, Mapping, Sequence

from typeforge.introspection.contract import (
    FieldDescriptor,
    FieldShape,
    PrimitiveKind,
    TypeShape,
)
from typeforge.introspection.source import describe_text

logger = logging.getLogger(__name__)

_PRIMITIVE_KINDS: dict[object, PrimitiveKind] = {
    str: PrimitiveKind.STRING,
    bool: PrimitiveKind.BOOLEAN,
    int: PrimitiveKind.INTEGER,
    float: PrimitiveKind.FLOAT,
    Decimal: PrimitiveKind.DECIMAL,
    uuid.UUID: PrimitiveKind.UUID,
    bytes: PrimitiveKind.UNKNOWN,
    object: PrimitiveKind.UNKNOWN,
    Any: PrimitiveKind.UNKNOWN,
}

_ARRAY_ORIGINS = frozenset(
    {
        list,
        set,
        frozenset,
        tuple,
        abc.Sequence,
        abc.MutableSequence,
        abc.Set,
        abc.MutableSet,
        abc.Iterable,
        abc.Collection,
    }
)

_MAPPING_ORIGINS = frozenset({dict, abc.Mapping, abc.MutableMapping})
_UNION_ORIGINS = (typing.Union, types.UnionType)

_UNKNOWN = TypeShape(FieldShape.PRIMITIVE, PrimitiveKind.UNKNOWN)


def _unwrap(hint: object) -> object:
    while True:
        origin = typing.get_origin(hint)
        if origin is typing.Annotated:
            hint = typing.get_args(hint)[0]
            continue
        if origin in _UNION_ORIGINS:
            members = [arg for arg in typing.get_args(hint) if arg is not type(None)]
            if len(members) == 1:
                hint = members[0]
                continue
        return hint


def _array_element(hint: object) -> tuple[bool, object]:
    if hint in (list, set, frozenset, tuple):
        return True, Any
    origin = typing.get_origin(hint)
    if origin not in _ARRAY_ORIGINS:
        return False, None
    args = typing.get_args(hint)
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return True, args[0]
        if len(set(args)) == 1:
            return True, args[0]
        return False, None
    return True, args[0] if args else Any


def shape_of(hint: object) -> TypeShape:
    """Classify a resolved (non-list) annotation."""
    hint = _unwrap(hint)
    if isinstance(hint, typing.TypeVar):
        return TypeShape(FieldShape.TYPE_PARAMETER)
    origin = typing.get_origin(hint)
    if origin is typing.Literal:
        return TypeShape(FieldShape.ENUM, enum_values=typing.get_args(hint))
    if origin in _UNION_ORIGINS:
        return _UNKNOWN
    is_array, _ = _array_element(hint)
    if is_array:
        return _UNKNOWN
    if hint in _MAPPING_ORIGINS or origin in _MAPPING_ORIGINS:
        return TypeShape(FieldShape.CLASS)
    try:
        kind = _PRIMITIVE_KINDS.get(hint)
    except TypeError:
        kind = None
    if kind is not None:
        return TypeShape(FieldShape.PRIMITIVE, kind)
    if hint is datetime or hint is date:
        return TypeShape(FieldShape.CLASS, referenced_type_name=hint.__name__)
    if isinstance(hint, type) and issubclass(hint, enum.Enum):
        return TypeShape(
            FieldShape.ENUM,
            referenced_type_name=hint.__name__,
            enum_values=tuple(member.value for member in hint),
            enum_type=hint,
        )
    target = origin if isinstance(origin, type) else hint
    if isinstance(target, type):
        return TypeShape(FieldShape.CLASS, referenced_type_name=target.__name__)
    if isinstance(hint, str):
        return TypeShape(FieldShape.CLASS, referenced_type_name=hint)
    if isinstance(hint, typing.ForwardRef):
        return TypeShape(FieldShape.CLASS, referenced_type_name=hint.__forward_arg__)
    return _UNKNOWN


def describe(name: str, hint: object) -> FieldDescriptor:
    is_array, element = _array_element(_unwrap(hint))
    if is_array:
        return FieldDescriptor.array(name, shape_of(element))
    return FieldDescriptor.scalar(name, shape_of(hint))


def _is_class_var(hint: object) -> bool:
    if hint is ClassVar or typing.get_origin(hint) is ClassVar:
        return True
    return isinstance(hint, str) and hint.startswith(("ClassVar", "typing.ClassVar"))


def _declared_annotations(cls: type) -> dict[str, tuple[type, object]]:
    """Raw annotations with their owning class, base classes first."""
    declared: dict[str, tuple[type, object]] = {}
    for klass in reversed(cls.__mro__):
        if klass is object or klass.__module__.startswith("pydantic"):
            continue
        for name, hint in inspect.get_annotations(klass).items():
            declared[name] = (klass, hint)
    return declared


def _resolve_hint(owner: type, hint: object, namespace: Mapping[str, type]) -> object:
    """Evaluate one string annotation in its owner's module.

    Fields are resolved one at a time so a single unresolvable reference
    does not hide what the other fields declare. The string comes back
    unchanged when it cannot be evaluated.
    """
    if not isinstance(hint, str):
        return hint
    module = sys.modules.get(owner.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    try:
        return eval(hint, globalns, dict(namespace))
    except (NameError, AttributeError, SyntaxError, TypeError) as exc:
        logger.debug("cannot resolve %r on %s: %s", hint, owner.__name__, exc)
        return hint


class AnnotationSchemaProvider:
    """Schema provider that reads runtime type hints.

    ``namespace`` returns the name -> class mapping used both to find the
    class being described and to resolve forward references; pass
    ``registry.types_by_name`` to describe registered classes.
    """

    def __init__(self, namespace: Callable[[], Mapping[str, type]]) -> None:
        self._namespace = namespace

    def fields(self, type_name: str) -> Sequence[FieldDescriptor]:
        namespace = dict(self._namespace())
        cls = namespace.get(type_name)
        if cls is None:
            logger.warning("no class named %s is registered; it has no fields", type_name)
            return []
        descriptors: list[FieldDescriptor] = []
        for name, (owner, raw) in _declared_annotations(cls).items():
            if _is_class_var(raw):
                continue
            hint = _resolve_hint(owner, raw, namespace)
            if _is_class_var(hint):
                continue
            if isinstance(hint, str):
                descriptors.append(describe_text(name, hint))
                continue
            descriptors.append(describe(name, hint))
        return descriptors
