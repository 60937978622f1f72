"""Declaration transformer: turns decorated classes into tagged declarations."""

from .decorators import declaration_kind, deserialize, serde, serialize
from .implementation import declare_implementation, describe, owning_interface
from .interface import declare_interface
from .members import CAPABILITY_NAMES

__all__ = [
    "CAPABILITY_NAMES",
    "declaration_kind",
    "declare_interface",
    "declare_implementation",
    "describe",
    "owning_interface",
    "serde",
    "serialize",
    "deserialize",
]
