"""Core type definitions for polytag."""

from dataclasses import dataclass


@dataclass(frozen=True)
class External:
    """Externally tagged: ``{"<name>": <payload>}``."""


@dataclass(frozen=True)
class Internal:
    """Internally tagged: ``{"<tag>": "<name>", ...payload fields}``."""

    tag: str
    default_variant: str | None = None
    write_tag: bool = True


@dataclass(frozen=True)
class Adjacent:
    """Adjacently tagged: ``{"<tag>": "<name>", "<content>": <payload>}``."""

    tag: str
    content: str
    default_variant: str | None = None
    deny_unknown_fields: bool = False


TaggingScheme = External | Internal | Adjacent


@dataclass(frozen=True)
class ImplDirective:
    """Parsed directive attached to an implementation declaration."""

    explicit_name: str | None = None


@dataclass(frozen=True)
class Mode:
    """Which halves of serde a declaration asks for."""

    ser: bool
    de: bool

    def __str__(self) -> str:
        if self.ser and self.de:
            return "serde"
        return "serialize" if self.ser else "deserialize"


SERDE = Mode(ser=True, de=True)
SERIALIZE = Mode(ser=True, de=False)
DESERIALIZE = Mode(ser=False, de=True)


@dataclass(frozen=True)
class CapabilityDescriptor:
    """Capabilities of one implementation, derived from its interface and directive."""

    discriminant: str
    write_tag: bool
    deserialize_enabled: bool


def scheme_write_tag(scheme: TaggingScheme) -> bool:
    """Whether the writer emits the tag for values under ``scheme``."""
    if isinstance(scheme, Internal):
        return scheme.write_tag
    return True
