"""Shape checks shared by interface and implementation declarations."""

import dataclasses
import functools
import inspect
import typing
from typing import Any, ClassVar, TypeVar, get_origin

import msgspec

from ..core.exceptions import UnsupportedDeclaration
from ..core.types import Mode

CAPABILITY_NAMES = frozenset({"polytag_name", "polytag_deserialize"})

_TYPE_MEMBERS: tuple[type, ...] = tuple(
    t
    for t in (type, TypeVar, getattr(typing, "TypeAliasType", None))
    if t is not None
)
_DESCRIPTORS = (staticmethod, classmethod, property, functools.cached_property)


def _public(name: str) -> bool:
    return not name.startswith("_")


def _is_type_member(value: Any) -> bool:
    return isinstance(value, _TYPE_MEMBERS)


def _is_operation(value: Any) -> bool:
    return callable(value) or isinstance(value, _DESCRIPTORS)


def _is_classvar(annotation: Any) -> bool:
    if annotation is ClassVar or get_origin(annotation) is ClassVar:
        return True
    if isinstance(annotation, str):
        return annotation.strip().startswith(("ClassVar", "typing.ClassVar"))
    return False


def _unsupported_type(kind: str, owner: type, name: str) -> UnsupportedDeclaration:
    return UnsupportedDeclaration(
        f"{kind} {owner.__qualname__} with associated type `{name}` is not supported"
    )


def _unsupported_const(kind: str, owner: type, name: str) -> UnsupportedDeclaration:
    return UnsupportedDeclaration(
        f"{kind} {owner.__qualname__} with associated const `{name}` is not supported"
    )


def check_interface_members(cls: type) -> None:
    """Reject associated constants and types declared by an interface.

    Only operations (functions, properties and other method descriptors)
    may make up an interface's public surface.
    """
    for name, value in vars(cls).items():
        if not _public(name):
            continue
        if _is_type_member(value):
            raise _unsupported_type("interface", cls, name)
        if not _is_operation(value):
            raise _unsupported_const("interface", cls, name)

    for name in inspect.get_annotations(cls):
        if _public(name):
            raise _unsupported_const("interface", cls, name)


def check_impl_members(cls: type) -> None:
    """Reject associated constants and types declared by an implementation.

    Annotated fields are data, not associated constants, unless they are
    ``ClassVar``.
    """
    for name, value in vars(cls).items():
        if _public(name) and _is_type_member(value):
            raise _unsupported_type("implementation", cls, name)

    for name, annotation in inspect.get_annotations(cls).items():
        if _public(name) and _is_classvar(annotation):
            raise _unsupported_const("implementation", cls, name)


def is_generic(cls: type) -> bool:
    """Whether ``cls`` still has unbound type parameters."""
    return bool(
        getattr(cls, "__parameters__", ()) or getattr(cls, "__type_params__", ())
    )


# Builtin bases msgspec encodes as-is
_ENCODABLE_BASES = (dict, list, tuple, set, frozenset, str, bytes, int, float)


def has_fields(cls: type) -> bool:
    """Whether msgspec can build ``cls`` from a map of its fields."""
    return (
        dataclasses.is_dataclass(cls)
        or hasattr(cls, "__attrs_attrs__")
        or issubclass(cls, msgspec.Struct)
    )


def check_payload_shape(cls: type, mode: Mode) -> None:
    """Reject implementations whose payload msgspec cannot write or build."""
    if mode.de and not has_fields(cls):
        raise UnsupportedDeclaration(
            f"implementation {cls.__qualname__} cannot be deserialized from a "
            "payload; declare it as a dataclass or msgspec Struct"
        )
    if mode.ser and not (has_fields(cls) or issubclass(cls, _ENCODABLE_BASES)):
        raise UnsupportedDeclaration(
            f"implementation {cls.__qualname__} has no serializable payload; "
            "declare it as a dataclass or msgspec Struct"
        )
