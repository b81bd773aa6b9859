from __future__ import annotations

import enum
import logging
from typing import Mapping, Sequence, TypeVar

from pydantic import BaseModel

from typeforge.exceptions import RecursionDepthExceededError, TypeNotRegisteredError
from typeforge.introspection.annotations import AnnotationSchemaProvider
from typeforge.introspection.contract import (
    DATE_TYPE_KINDS,
    FieldDescriptor,
    FieldShape,
    PrimitiveKind,
    SchemaProvider,
)
from typeforge.model import CreationOptions, ForgeConfig, OptionsSource, options_for_index
from typeforge.registry import TypeRegistry
from typeforge.values import FakerValueSynthesizer, ValueSynthesizer

logger = logging.getLogger(__name__)

T = TypeVar("T")

_NO_OPTIONS = CreationOptions()
_NO_ALLOWED_VALUES: Mapping[str, Sequence[object]] = {}


def _materialize(cls: type[T], values: dict[str, object]) -> T:
    if issubclass(cls, BaseModel):
        # No validation: overrides are copied verbatim even when they
        # contradict the declared field type.
        return cls.model_construct(**values)
    instance = cls.__new__(cls)
    for name, value in values.items():
        object.__setattr__(instance, name, value)
    return instance


class TypeForge:
    """Creates mock instances of registered DTO classes.

    Fields are resolved in schema order. For each field the first matching
    rule wins: explicit override, allowed values from the registry, forced
    empty list, generic binding, then the field's declared shape (lists,
    enums, nested classes, primitives).

    The schema provider must know the root class. With the default
    provider that means it has to be registered; an unknown class yields an
    instance with no attributes set, and a warning is logged.
    """

    def __init__(
        self,
        registry: TypeRegistry,
        schema: SchemaProvider | None = None,
        synthesizer: ValueSynthesizer | None = None,
        config: ForgeConfig | None = None,
    ) -> None:
        self.registry = registry
        self.schema = schema or AnnotationSchemaProvider(registry.types_by_name)
        self.synthesizer = synthesizer or FakerValueSynthesizer()
        self.config = config or ForgeConfig()

    def create(self, cls: type[T], options: CreationOptions | None = None) -> T:
        return self._create(cls, options or _NO_OPTIONS, depth=0)

    def create_many(
        self, count: int, cls: type[T], options: OptionsSource | None = None
    ) -> list[T]:
        return self._create_many(count, cls, options, depth=0)

    def _create_many(
        self, count: int, cls: type[T], options: OptionsSource | None, *, depth: int
    ) -> list[T]:
        return [
            self._create(cls, options_for_index(options, index) or _NO_OPTIONS, depth=depth)
            for index in range(count)
        ]

    def _create(self, cls: type[T], options: CreationOptions, *, depth: int) -> T:
        if depth > self.config.max_depth:
            raise RecursionDepthExceededError(cls.__name__, self.config.max_depth)
        entry = self.registry.get(cls)
        allowed = entry.allowed_values if entry is not None else _NO_ALLOWED_VALUES
        values: dict[str, object] = {}
        for descriptor in self.schema.fields(cls.__name__):
            values[descriptor.name] = self._resolve(descriptor, options, allowed, depth=depth)
        logger.debug("created %s with %d fields at depth %d", cls.__name__, len(values), depth)
        return _materialize(cls, values)

    def _resolve(
        self,
        descriptor: FieldDescriptor,
        options: CreationOptions,
        allowed: Mapping[str, Sequence[object]],
        *,
        depth: int,
    ) -> object:
        name = descriptor.name
        if name in options.overrides:
            return options.overrides[name]
        choices = allowed.get(name)
        if choices:
            return self.synthesizer.choice(choices)
        if descriptor.is_array:
            return self._resolve_array(descriptor, options, depth=depth)
        if descriptor.shape is FieldShape.ENUM:
            if not descriptor.enum_values:
                return None
            return self._enum_choice(descriptor)
        if descriptor.shape is FieldShape.TYPE_PARAMETER:
            binding = options.generics.get(name)
            if binding is None:
                logger.debug("leaving unbound type parameter field %s unset", name)
                return None
            item_options = options_for_index(binding.options, 0) or _NO_OPTIONS
            return self._create(binding.type, item_options, depth=depth + 1)
        if descriptor.shape is FieldShape.CLASS:
            return self._resolve_nested(descriptor, depth=depth)
        return self.synthesizer.primitive(name, descriptor.kind or PrimitiveKind.UNKNOWN)

    def _resolve_nested(self, descriptor: FieldDescriptor, *, depth: int) -> object:
        name = descriptor.name
        type_name = descriptor.referenced_type_name
        if type_name is None:
            return self.synthesizer.primitive(name, PrimitiveKind.UNKNOWN)
        if type_name in DATE_TYPE_KINDS:
            return self.synthesizer.primitive(name, DATE_TYPE_KINDS[type_name])
        nested = self.registry.find_by_name(type_name)
        if nested is None:
            raise TypeNotRegisteredError(type_name, name, is_array=False)
        return self._create(nested, _NO_OPTIONS, depth=depth + 1)

    def _resolve_array(
        self, descriptor: FieldDescriptor, options: CreationOptions, *, depth: int
    ) -> list[object]:
        name = descriptor.name
        if name in options.empty_arrays:
            return []
        count = options.array_counts.get(name, self.config.default_array_count)
        binding = options.generics.get(name)
        if binding is not None:
            if binding.count is not None:
                count = binding.count
            return self._create_many(count, binding.type, binding.options, depth=depth + 1)
        element = descriptor.element_shape
        if element is FieldShape.TYPE_PARAMETER:
            return []
        if element is FieldShape.CLASS:
            type_name = descriptor.referenced_type_name
            if type_name is None:
                return []
            if type_name in DATE_TYPE_KINDS:
                kind = DATE_TYPE_KINDS[type_name]
                return [self.synthesizer.primitive(name, kind) for _ in range(count)]
            nested = self.registry.find_by_name(type_name)
            if nested is None:
                raise TypeNotRegisteredError(type_name, name, is_array=True)
            return self._create_many(count, nested, None, depth=depth + 1)
        if element is FieldShape.ENUM and descriptor.enum_values:
            return [self._enum_choice(descriptor) for _ in range(count)]
        kind = descriptor.element_kind or PrimitiveKind.UNKNOWN
        return [self.synthesizer.primitive(name, kind) for _ in range(count)]

    def _enum_choice(self, descriptor: FieldDescriptor) -> object:
        """Draw one enum value, returned as a member when the class is known.

        Runtime schemas carry the class itself. Source schemas only name it,
        so the name is looked up in the registry; an unreachable class leaves
        the raw value.
        """
        value = self.synthesizer.choice(descriptor.enum_values)
        enum_type = descriptor.enum_type
        if enum_type is None and descriptor.referenced_type_name is not None:
            enum_type = self.registry.find_by_name(descriptor.referenced_type_name)
        if not (isinstance(enum_type, type) and issubclass(enum_type, enum.Enum)):
            return value
        for member in enum_type:
            if member.value == value:
                return member
        return value
