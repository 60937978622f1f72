"""Read path: dispatch a tagged node to the factory registered for its tag."""

from collections.abc import Mapping
from typing import Any

import msgspec

from ..core.exceptions import (
    CapabilityError,
    InvalidPayloadError,
    MissingTagError,
    ShapeMismatchError,
    UnknownVariantError,
)
from ..core.metadata import interface_info, require_interface
from ..core.types import External, Internal, TaggingScheme


def _kind(node: Any) -> str:
    if isinstance(node, Mapping):
        return f"a map with {len(node)} entries"
    return type(node).__name__


def _tag_value(value: Any, field: str, interface: type) -> str:
    if not isinstance(value, str):
        raise ShapeMismatchError(
            f"expected a string in field `{field}` of {interface.__qualname__}, "
            f"got {type(value).__name__}"
        )
    return value


def split_tagged(node: Any, scheme: TaggingScheme, interface: type) -> tuple[str, Any]:
    """Split a serialized node into its discriminant and payload.

    Raises:
        ShapeMismatchError: The node does not have the scheme's shape
        MissingTagError: The tag field is absent and there is no default variant
    """
    if isinstance(scheme, External):
        if not isinstance(node, Mapping) or len(node) != 1:
            raise ShapeMismatchError(
                f"expected a map with exactly one entry for externally tagged "
                f"{interface.__qualname__}, got {_kind(node)}"
            )
        ((tag, payload),) = node.items()
        if not isinstance(tag, str):
            raise ShapeMismatchError(
                f"expected a string key for {interface.__qualname__}, "
                f"got {type(tag).__name__}"
            )
        return tag, payload

    if not isinstance(node, Mapping):
        raise ShapeMismatchError(
            f"expected a map for {interface.__qualname__}, got {_kind(node)}"
        )

    if isinstance(scheme, Internal):
        if scheme.tag in node:
            tag = _tag_value(node[scheme.tag], scheme.tag, interface)
            payload = {k: v for k, v in node.items() if k != scheme.tag}
        elif scheme.default_variant is not None:
            tag = scheme.default_variant
            payload = dict(node)
        else:
            raise MissingTagError(scheme.tag, interface)
        return tag, payload

    if scheme.deny_unknown_fields:
        for key in node:
            if key != scheme.tag and key != scheme.content:
                raise ShapeMismatchError(
                    f"unknown field `{key}` in {interface.__qualname__}, "
                    f"expected `{scheme.tag}` or `{scheme.content}`"
                )
    if scheme.tag in node:
        tag = _tag_value(node[scheme.tag], scheme.tag, interface)
    elif scheme.default_variant is not None:
        tag = scheme.default_variant
    else:
        raise MissingTagError(scheme.tag, interface)
    if scheme.content not in node:
        raise ShapeMismatchError(
            f"missing field `{scheme.content}` in {interface.__qualname__}"
        )
    return tag, node[scheme.content]


def from_builtins(node: Any, interface: type) -> Any:
    """Deserialize a builtin node into the implementation its tag names."""
    info = require_interface(interface)
    if not info.mode.de:
        raise CapabilityError(
            f"{interface.__qualname__} was declared without deserialization support"
        )

    tag, payload = split_tagged(node, info.scheme, interface)
    factory = info.registry.lookup(tag)
    if factory is None:
        raise UnknownVariantError(tag, interface)

    try:
        return factory(payload)
    except (msgspec.ValidationError, NotImplementedError) as e:
        raise InvalidPayloadError(tag, interface, e) from e


def upcast(value: Any, interface: type) -> Any:
    """Check that a factory produced a value behind ``interface``."""
    if not isinstance(value, interface):
        raise CapabilityError(
            f"{type(value).__qualname__} does not implement {interface.__qualname__}"
        )
    return value


def dec_hook(type_: Any, obj: Any) -> Any:
    """msgspec decode hook for fields typed as a tagged interface."""
    if interface_info(type_) is not None:
        return from_builtins(obj, type_)
    raise NotImplementedError(f"objects of type {type_!r} are not supported")
