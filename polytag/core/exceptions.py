"""Exceptions raised by polytag.

Declaration errors are raised while a class decorator runs and abort that
declaration only. Deserialize errors are raised from the read path and are
always recoverable by the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..directive.tokens import Span


class PolytagError(Exception):
    """Base exception for all polytag errors."""


class DeclarationError(PolytagError):
    """Base exception for errors found while processing a declaration."""

    def __init__(
        self,
        message: str,
        *,
        span: Span | None = None,
        source: str | None = None,
    ):
        self.message = message
        self.span = span
        self.source = source
        super().__init__(message)

    def __str__(self) -> str:
        if self.span is None or self.source is None:
            return self.message
        return f"{self.message} (at {self.span.start}..{self.span.end} in {self.source!r})"


class GrammarError(DeclarationError):
    """Malformed or unknown directive token, or a repeated key."""


class ConfigConflict(DeclarationError):
    """Incompatible combination of directive options."""


class UnsupportedDeclaration(DeclarationError):
    """The decorated declaration has a shape polytag cannot handle."""


class MissingName(DeclarationError):
    """No discriminant can be derived for an implementation and none was given."""


class DeserializeError(PolytagError):
    """Base exception for errors on the read path."""


class MissingTagError(DeserializeError):
    """The tag field is absent and no default variant is configured."""

    def __init__(self, tag: str, interface: type):
        self.tag = tag
        self.interface = interface
        super().__init__(
            f"missing field `{tag}` while deserializing {interface.__qualname__}"
        )


class UnknownVariantError(DeserializeError):
    """The discriminant is not registered for the interface."""

    def __init__(self, tag: str, interface: type):
        self.tag = tag
        self.interface = interface
        super().__init__(
            f"unknown variant `{tag}` for {interface.__qualname__}"
        )


class ShapeMismatchError(DeserializeError):
    """The serialized node does not have the shape the tagging scheme requires."""


class DuplicateTagError(DeserializeError):
    """Two implementations contributed the same discriminant to one interface."""

    def __init__(self, tag: str, interface: type, sources: tuple[str, ...] = ()):
        self.tag = tag
        self.interface = interface
        self.sources = sources
        named = [s for s in sources if s]
        detail = f" ({', '.join(named)})" if named else ""
        super().__init__(
            f"discriminant `{tag}` registered more than once for "
            f"{interface.__qualname__}{detail}"
        )


class InvalidPayloadError(DeserializeError):
    """The factory for a known discriminant rejected its payload."""

    def __init__(self, tag: str, interface: type, reason: Any):
        self.tag = tag
        self.interface = interface
        self.reason = reason
        super().__init__(
            f"invalid payload for variant `{tag}` of {interface.__qualname__}: {reason}"
        )


class SerializeError(PolytagError):
    """Base exception for errors on the write path."""


class PayloadShapeError(SerializeError, ShapeMismatchError):
    """A value cannot be written in the shape its tagging scheme requires."""


class RegistryFrozenError(PolytagError, RuntimeError):
    """A contribution arrived after the registry was constructed."""


class CapabilityError(PolytagError, TypeError):
    """The interface or value lacks the capability an operation needs."""
