"""Exceptions raised by typeforge."""

from __future__ import annotations


class TypeForgeError(Exception):
    """Base class for every error raised by typeforge."""


class TypeNotRegisteredError(TypeForgeError):
    """A nested field references a class that the registry does not know.

    Raised the first time generation reaches the unresolved reference. The
    message names the missing class, the field that uses it, and whether the
    field is a list, so the caller can add the missing registration.
    """

    def __init__(self, type_name: str, field_name: str, is_array: bool):
        self.type_name = type_name
        self.field_name = field_name
        self.is_array = is_array
        where = (
            f'for the array field "{field_name}"'
            if is_array
            else f'for the field "{field_name}"'
        )
        super().__init__(
            f'[typeforge] Nested class "{type_name}" ({where}) was not found in the registry. '
            f'Import "{type_name}" and register it with "registry.register({type_name})" in your setup.'
        )


class RecursionDepthExceededError(TypeForgeError):
    """Nested creation went deeper than the configured maximum depth.

    This is what an unbroken cycle in the type graph turns into.
    """

    def __init__(self, type_name: str, depth: int):
        self.type_name = type_name
        self.depth = depth
        super().__init__(
            f'[typeforge] Creating "{type_name}" exceeded the maximum nesting depth of {depth}. '
            "Break the cycle with an override or an empty_arrays entry, or raise max_depth."
        )
