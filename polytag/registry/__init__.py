"""Registries of deserialization factories, one per tagged interface."""

from .aggregation import DEFAULT_GROUP, aggregate
from .core import (
    Factory,
    Registry,
    RegistryEntry,
    contribution_log,
    registry_for,
    submit,
    submit_entry,
)

__all__ = [
    "Factory",
    "Registry",
    "RegistryEntry",
    "aggregate",
    "DEFAULT_GROUP",
    "contribution_log",
    "registry_for",
    "submit",
    "submit_entry",
]
