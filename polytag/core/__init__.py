"""Core components of polytag."""

from .exceptions import (
    CapabilityError,
    ConfigConflict,
    DeclarationError,
    DeserializeError,
    DuplicateTagError,
    GrammarError,
    InvalidPayloadError,
    MissingName,
    MissingTagError,
    PayloadShapeError,
    PolytagError,
    RegistryFrozenError,
    SerializeError,
    ShapeMismatchError,
    UnknownVariantError,
    UnsupportedDeclaration,
)
from .types import (
    DESERIALIZE,
    SERDE,
    SERIALIZE,
    Adjacent,
    CapabilityDescriptor,
    External,
    ImplDirective,
    Internal,
    Mode,
    TaggingScheme,
)

__all__ = [
    "Adjacent",
    "CapabilityDescriptor",
    "External",
    "ImplDirective",
    "Internal",
    "Mode",
    "TaggingScheme",
    "SERDE",
    "SERIALIZE",
    "DESERIALIZE",
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
