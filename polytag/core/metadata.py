"""Bookkeeping for tagged interfaces and their implementations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .exceptions import CapabilityError
from .types import CapabilityDescriptor, Mode, TaggingScheme

if TYPE_CHECKING:
    from ..registry.core import Registry


@dataclass(frozen=True)
class InterfaceInfo:
    """Metadata recorded for a tagged interface, consumed by the reader and writer."""

    interface: type
    scheme: TaggingScheme
    mode: Mode
    registry: Registry


_interfaces: dict[type, InterfaceInfo] = {}
_implementations: dict[type, dict[type, CapabilityDescriptor]] = {}


def record_interface(info: InterfaceInfo) -> None:
    _interfaces[info.interface] = info


def interface_info(cls: Any) -> InterfaceInfo | None:
    """The recorded metadata of ``cls`` if it is a tagged interface."""
    if not isinstance(cls, type):
        return None
    return _interfaces.get(cls)


def require_interface(cls: Any) -> InterfaceInfo:
    info = interface_info(cls)
    if info is None:
        raise CapabilityError(f"{cls!r} is not a tagged interface")
    return info


def tagged_interfaces(cls: type) -> list[type]:
    """Most-derived tagged interfaces among the strict ancestors of ``cls``."""
    candidates = [base for base in cls.__mro__[1:] if base in _interfaces]
    return [
        c
        for c in candidates
        if not any(d is not c and issubclass(d, c) for d in candidates)
    ]


def record_implementation(
    cls: type, interface: type, descriptor: CapabilityDescriptor
) -> None:
    _implementations.setdefault(cls, {})[interface] = descriptor


def implementation_record(cls: type) -> dict[type, CapabilityDescriptor]:
    """Capabilities generated for ``cls``, keyed by interface."""
    return dict(_implementations.get(cls, {}))
