"""Reading and writing values behind tagged interfaces."""

from .base import Serializer, SerializerRegistry
from .dispatch import dec_hook, from_builtins, split_tagged
from .io import dumps, load, loads, save
from .msgspec_serializer import MsgspecSerializer
from .writer import to_builtins, write_tagged

__all__ = [
    "Serializer",
    "SerializerRegistry",
    "MsgspecSerializer",
    "dec_hook",
    "from_builtins",
    "split_tagged",
    "to_builtins",
    "write_tagged",
    "dumps",
    "loads",
    "save",
    "load",
]

SerializerRegistry.register("msgspec", MsgspecSerializer(), default=True)
