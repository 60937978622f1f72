"""Write path: lower values behind tagged interfaces into tagged builtins."""

import dataclasses
from typing import Any

import msgspec

from ..core.exceptions import CapabilityError, PayloadShapeError
from ..core.metadata import (
    InterfaceInfo,
    interface_info,
    require_interface,
    tagged_interfaces,
)
from ..core.types import External, Internal


def _writer_for(cls: type, interface: type | None) -> InterfaceInfo | None:
    if interface is not None:
        info = require_interface(interface)
        if not issubclass(cls, interface):
            raise CapabilityError(
                f"{cls.__qualname__} does not implement {interface.__qualname__}"
            )
        if not info.mode.ser:
            raise CapabilityError(
                f"{interface.__qualname__} was declared without serialization support"
            )
        return info

    infos = []
    for candidate in tagged_interfaces(cls):
        info = interface_info(candidate)
        if info is not None and info.mode.ser:
            infos.append(info)
    if not infos:
        return None
    if len(infos) > 1:
        names = ", ".join(i.interface.__qualname__ for i in infos)
        raise CapabilityError(
            f"{cls.__qualname__} implements several tagged interfaces ({names}); "
            "pass interface= to choose one"
        )
    return infos[0]


def _lower_fields(obj: Any) -> Any:
    if isinstance(obj, msgspec.Struct):
        return {
            f.encode_name: _lower(getattr(obj, f.name))
            for f in msgspec.structs.fields(obj)
        }
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: _lower(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    attributes = getattr(type(obj), "__attrs_attrs__", None)
    if attributes is not None:
        return {a.name: _lower(getattr(obj, a.name)) for a in attributes}
    if isinstance(obj, dict):
        return {k: _lower(v) for k, v in obj.items()}
    if isinstance(obj, list | tuple | set | frozenset):
        return [_lower(v) for v in obj]
    return obj


def _lower(obj: Any, interface: type | None = None) -> Any:
    info = _writer_for(type(obj), interface)
    if info is None:
        return _lower_fields(obj)
    return write_tagged(obj, info)


def write_tagged(value: Any, info: InterfaceInfo) -> Any:
    """Wrap the payload of ``value`` in the shape of its interface's scheme."""
    name = value.polytag_name()
    payload = _lower_fields(value)
    scheme = info.scheme

    if isinstance(scheme, External):
        return {name: payload}

    if isinstance(scheme, Internal):
        if not isinstance(payload, dict):
            raise PayloadShapeError(
                f"cannot serialize {type(value).__qualname__} as internally tagged "
                f"{info.interface.__qualname__}: payload is not a map"
            )
        if scheme.tag in payload:
            raise PayloadShapeError(
                f"cannot serialize {type(value).__qualname__}: field "
                f"`{scheme.tag}` collides with the tag of {info.interface.__qualname__}"
            )
        if not scheme.write_tag:
            return payload
        return {scheme.tag: name, **payload}

    return {scheme.tag: name, scheme.content: payload}


def to_builtins(value: Any, interface: type | None = None) -> Any:
    """Convert ``value`` to builtins, tagging every value behind an interface.

    Args:
        value: A tagged implementation, or any container or dataclass/struct
            holding them
        interface: Interface to write ``value`` under, when it implements
            more than one
    """
    return msgspec.to_builtins(_lower(value, interface))
