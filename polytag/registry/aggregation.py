"""Explicit aggregation of registry contributions.

Implementations living in other modules or distributions contribute their
factories when their module is imported. ``aggregate`` is the link step that
pulls those modules in before the first lookup: it imports the named modules
and loads every entry point of a group, then reports what was contributed.

An entry point may name a module or a declared implementation class, a
``RegistryEntry``, an iterable of entries, or a zero-argument callable
returning any of these.
"""

import importlib
import logging
from collections.abc import Iterable
from importlib.metadata import entry_points
from types import ModuleType
from typing import Any

from .core import RegistryEntry, contribution_log, submit_entry

logger = logging.getLogger(__name__)

DEFAULT_GROUP = "polytag.implementations"


def aggregate(
    *modules: str | ModuleType, group: str | None = None
) -> list[RegistryEntry]:
    """Import implementation modules and entry points.

    Args:
        modules: Module names (or already imported modules) that declare
            implementations
        group: Entry point group to load, e.g. ``DEFAULT_GROUP``

    Returns:
        The contributions accepted while aggregating, in arrival order
    """
    before = len(contribution_log())

    for module in modules:
        if isinstance(module, str):
            importlib.import_module(module)

    if group is not None:
        for entry_point in entry_points(group=group):
            logger.debug("Loading entry point %s from group %s", entry_point.name, group)
            _absorb(entry_point.load())

    contributed = contribution_log()[before:]
    logger.debug("Aggregated %d contributions", len(contributed))
    return contributed


def _absorb(obj: Any) -> None:
    # Loading a module or class already ran its declarations
    if isinstance(obj, ModuleType | type):
        return
    if isinstance(obj, RegistryEntry):
        submit_entry(obj)
    elif isinstance(obj, Iterable) and not isinstance(obj, str | bytes):
        for item in obj:
            _absorb(item)
    elif callable(obj):
        result = obj()
        if result is not None:
            _absorb(result)
    else:
        raise TypeError(f"cannot aggregate contribution {obj!r}")
