"""typeforge package root."""

from typeforge.engine import TypeForge
from typeforge.exceptions import (
    RecursionDepthExceededError,
    TypeForgeError,
    TypeNotRegisteredError,
)
from typeforge.model import CreationOptions, ForgeConfig, GenericBinding
from typeforge.registry import RegistryEntry, RegistryOptions, TypeRegistry

__all__ = [
    "__version__",
    "CreationOptions",
    "ForgeConfig",
    "GenericBinding",
    "RecursionDepthExceededError",
    "RegistryEntry",
    "RegistryOptions",
    "TypeForge",
    "TypeForgeError",
    "TypeNotRegisteredError",
    "TypeRegistry",
]

__version__ = "0.1.0"
