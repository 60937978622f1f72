"""Implementation declarations.

Decorating a concrete subclass of a tagged interface generates the
capability operations the interface requires:

* ``polytag_name()`` returning the discriminant, when serializing
* ``polytag_deserialize()``, a marker for deserializable implementations,
  plus one registry contribution whose factory rebuilds the class from a
  payload with ``msgspec.convert``
"""

import abc
import functools
import logging
from typing import Any

import msgspec

from ..core.exceptions import UnsupportedDeclaration
from ..core.metadata import (
    implementation_record,
    interface_info,
    record_implementation,
    require_interface,
    tagged_interfaces,
)
from ..core.types import CapabilityDescriptor, ImplDirective, Mode, scheme_write_tag
from ..directive import resolve_discriminant
from ..registry import RegistryEntry
from ..serialization.dispatch import dec_hook, upcast
from .members import check_impl_members, check_payload_shape, is_generic

logger = logging.getLogger(__name__)


def owning_interface(cls: type, interface: type | None = None) -> type:
    """The tagged interface an implementation declaration is for."""
    if interface is not None:
        if interface_info(interface) is None:
            raise UnsupportedDeclaration(f"{interface!r} is not a tagged interface")
        if interface is cls or not issubclass(cls, interface):
            raise UnsupportedDeclaration(
                f"{cls.__qualname__} does not implement {interface.__qualname__}"
            )
        return interface

    candidates = tagged_interfaces(cls)
    if not candidates:
        raise UnsupportedDeclaration(
            f"expected an implementation of a tagged interface, "
            f"{cls.__qualname__} has no tagged interface base"
        )
    if len(candidates) > 1:
        names = ", ".join(c.__qualname__ for c in candidates)
        raise UnsupportedDeclaration(
            f"{cls.__qualname__} implements several tagged interfaces ({names}); "
            "pass interface= to choose one"
        )
    return candidates[0]


def build_from_payload(cls: type, interface: type, payload: Any) -> Any:
    """Factory body: deserialize ``payload`` into ``cls`` and upcast it."""
    value = msgspec.convert(payload, cls, dec_hook=dec_hook)
    return upcast(value, interface)


def _name_accessor(cls: type, discriminant: str):
    def polytag_name(self) -> str:
        return discriminant

    polytag_name.__qualname__ = f"{cls.__qualname__}.polytag_name"
    polytag_name.__module__ = cls.__module__
    polytag_name._polytag_discriminant = discriminant  # type: ignore[attr-defined]
    return polytag_name


def _deserialize_marker(cls: type):
    def polytag_deserialize(self) -> None:
        pass

    polytag_deserialize.__qualname__ = f"{cls.__qualname__}.polytag_deserialize"
    polytag_deserialize.__module__ = cls.__module__
    return polytag_deserialize


def _check_generated(cls: type, name: str, discriminant: str | None = None) -> bool:
    """Whether ``name`` is already generated on ``cls``; raises on a hand-written one."""
    existing = vars(cls).get(name)
    if existing is None:
        return False
    generated = getattr(existing, "_polytag_discriminant", None)
    if name == "polytag_name" and generated is not None:
        if generated != discriminant:
            raise UnsupportedDeclaration(
                f"{cls.__qualname__} is already named `{generated}`, "
                f"cannot also name it `{discriminant}`"
            )
        return True
    if name == "polytag_deserialize" and implementation_record(cls):
        return True
    raise UnsupportedDeclaration(
        f"`{name}` is generated for {cls.__qualname__}; "
        "remove the hand-written definition"
    )


def declare_implementation(
    cls: type,
    directive: ImplDirective,
    mode: Mode,
    interface: type | None = None,
) -> type:
    """Generate capability operations for ``cls`` and contribute its factory.

    All checks run before ``cls`` is changed, so a rejected declaration
    leaves no trace.
    """
    interface = owning_interface(cls, interface)
    info = require_interface(interface)
    if interface in implementation_record(cls):
        raise UnsupportedDeclaration(
            f"{cls.__qualname__} is already declared for {interface.__qualname__}"
        )

    check_impl_members(cls)
    if mode.de and is_generic(cls):
        raise UnsupportedDeclaration(
            f"deserialization of generic implementations is not supported; "
            f"use serialization-only mode for {cls.__qualname__}"
        )
    if mode.ser and not info.mode.ser:
        raise UnsupportedDeclaration(
            f"{interface.__qualname__} was declared without serialization support"
        )
    if mode.de and not info.mode.de:
        raise UnsupportedDeclaration(
            f"{interface.__qualname__} was declared without deserialization support"
        )
    check_payload_shape(cls, mode)

    discriminant = resolve_discriminant(directive, cls)
    has_name = mode.ser and _check_generated(cls, "polytag_name", discriminant)
    has_marker = mode.de and _check_generated(cls, "polytag_deserialize")

    if mode.de:
        info.registry.submit(
            RegistryEntry(
                interface=interface,
                discriminant=discriminant,
                factory=functools.partial(build_from_payload, cls, interface),
                source=f"{cls.__module__}.{cls.__qualname__}",
            )
        )

    if mode.ser and not has_name:
        cls.polytag_name = _name_accessor(cls, discriminant)  # type: ignore[attr-defined]
    if mode.de and not has_marker:
        cls.polytag_deserialize = _deserialize_marker(cls)  # type: ignore[attr-defined]
    abc.update_abstractmethods(cls)

    record_implementation(
        cls,
        interface,
        CapabilityDescriptor(
            discriminant=discriminant,
            write_tag=scheme_write_tag(info.scheme),
            deserialize_enabled=mode.de,
        ),
    )
    logger.debug(
        "Declared %s implementation %s of %s as `%s`",
        mode,
        cls.__qualname__,
        interface.__qualname__,
        discriminant,
    )
    return cls


def describe(cls: type, interface: type | None = None) -> CapabilityDescriptor:
    """Capabilities generated for an implementation."""
    record = implementation_record(cls)
    if interface is None:
        if len(record) != 1:
            raise LookupError(
                f"{cls.__qualname__} has {len(record)} generated implementations; "
                "pass interface= to choose one"
            )
        return next(iter(record.values()))
    try:
        return record[interface]
    except KeyError:
        raise LookupError(
            f"{cls.__qualname__} has no generated implementation of "
            f"{interface.__qualname__}"
        ) from None
