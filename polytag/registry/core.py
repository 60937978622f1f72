"""Per-interface registry of discriminant factories."""

import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from ..core.exceptions import CapabilityError, DuplicateTagError, RegistryFrozenError
from ..core.metadata import require_interface

logger = logging.getLogger(__name__)

_contribution_log: list["RegistryEntry"] = []

Factory = Callable[[Any], Any]


@dataclass(frozen=True)
class RegistryEntry:
    """One implementation's contribution to an interface registry."""

    interface: type
    discriminant: str
    factory: Factory
    source: str = ""


class Registry:
    """Registry mapping discriminants to factories for one interface.

    Contributions are appended until the first lookup. The first lookup (or an
    explicit ``seal()``) builds the mapping exactly once; afterwards the
    registry is read-only and reads take no lock.
    """

    def __init__(self, interface: type):
        self.interface = interface
        self._contributions: list[RegistryEntry] = []
        self._mapping: Mapping[str, Factory] | None = None
        self._duplicate: tuple[str, tuple[str, ...]] | None = None
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        state = "sealed" if self.sealed else "open"
        return (
            f"Registry({self.interface.__qualname__}, "
            f"{len(self._contributions)} contributions, {state})"
        )

    @property
    def sealed(self) -> bool:
        return self._mapping is not None or self._duplicate is not None

    def submit(self, entry: RegistryEntry) -> None:
        """Contribute an entry. Fails once the registry has been built."""
        if entry.interface is not self.interface:
            raise ValueError(
                f"entry for {entry.interface.__qualname__} submitted to the "
                f"registry of {self.interface.__qualname__}"
            )
        with self._lock:
            if self.sealed:
                raise RegistryFrozenError(
                    f"cannot register `{entry.discriminant}` for "
                    f"{self.interface.__qualname__}: registry already in use"
                )
            self._contributions.append(entry)
            _contribution_log.append(entry)
        logger.debug(
            "Registered %s as `%s` for %s",
            entry.source or entry.factory,
            entry.discriminant,
            self.interface.__qualname__,
        )

    def contributions(self) -> tuple[RegistryEntry, ...]:
        return tuple(self._contributions)

    def seal(self) -> Mapping[str, Factory]:
        """Build the registry if needed and return its read-only mapping."""
        mapping = self._mapping
        if mapping is not None:
            return mapping
        return self._construct()

    def _construct(self) -> Mapping[str, Factory]:
        with self._lock:
            if self._mapping is None:
                self._mapping = self._build()
            return self._mapping

    def _build(self) -> Mapping[str, Factory]:
        # A duplicate seals the registry without a mapping
        if self._duplicate is not None:
            tag, duplicate_sources = self._duplicate
            raise DuplicateTagError(tag, self.interface, duplicate_sources)

        factories: dict[str, Factory] = {}
        sources: dict[str, str] = {}
        for entry in self._contributions:
            tag = entry.discriminant
            if tag in factories:
                self._duplicate = (tag, (sources[tag], entry.source))
                raise DuplicateTagError(tag, self.interface, self._duplicate[1])
            factories[tag] = entry.factory
            sources[tag] = entry.source

        logger.debug(
            "Built registry for %s with %d variants",
            self.interface.__qualname__,
            len(factories),
        )
        return MappingProxyType(factories)

    def lookup(self, tag: str) -> Factory | None:
        """Factory registered for ``tag``, or None."""
        return self.seal().get(tag)

    def tags(self) -> list[str]:
        return list(self.seal())


def submit(
    interface: type,
    discriminant: str,
    factory: Factory,
    source: str = "",
) -> RegistryEntry:
    """Register a factory for a hand-written implementation."""
    entry = RegistryEntry(interface, discriminant, factory, source)
    submit_entry(entry)
    return entry


def submit_entry(entry: RegistryEntry) -> None:
    """Contribute a prepared entry to its interface's registry."""
    info = require_interface(entry.interface)
    if not info.mode.de:
        raise CapabilityError(
            f"{entry.interface.__qualname__} was declared without "
            "deserialization support"
        )
    info.registry.submit(entry)


def contribution_log() -> list[RegistryEntry]:
    """Every contribution accepted so far, in arrival order."""
    return list(_contribution_log)


def registry_for(interface: type) -> Registry:
    return require_interface(interface).registry
