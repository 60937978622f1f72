"""polytag serializes values behind abstract interfaces and deserializes them
back into the right implementation, using a string tag and a per-interface
registry that implementations contribute to themselves.
"""

__version__ = "0.1.0"

from .core import (
    Adjacent,
    CapabilityDescriptor,
    CapabilityError,
    ConfigConflict,
    DeclarationError,
    DeserializeError,
    DuplicateTagError,
    External,
    GrammarError,
    Internal,
    InvalidPayloadError,
    MissingName,
    MissingTagError,
    PayloadShapeError,
    PolytagError,
    RegistryFrozenError,
    SerializeError,
    ShapeMismatchError,
    TaggingScheme,
    UnknownVariantError,
    UnsupportedDeclaration,
)
from .core.metadata import interface_info
from .declaration import describe, deserialize, serde, serialize
from .registry import Registry, RegistryEntry, aggregate, registry_for, submit
from .serialization import dumps, from_builtins, load, loads, save, to_builtins

__all__ = [
    "__version__",
    "serde",
    "serialize",
    "deserialize",
    "describe",
    "interface_info",
    "to_builtins",
    "from_builtins",
    "dumps",
    "loads",
    "save",
    "load",
    "Registry",
    "RegistryEntry",
    "aggregate",
    "registry_for",
    "submit",
    "TaggingScheme",
    "External",
    "Internal",
    "Adjacent",
    "CapabilityDescriptor",
    "PolytagError",
    "DeclarationError",
    "GrammarError",
    "ConfigConflict",
    "UnsupportedDeclaration",
    "MissingName",
    "DeserializeError",
    "MissingTagError",
    "UnknownVariantError",
    "ShapeMismatchError",
    "DuplicateTagError",
    "InvalidPayloadError",
    "SerializeError",
    "PayloadShapeError",
    "RegistryFrozenError",
    "CapabilityError",
]
