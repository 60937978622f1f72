"""Interface declarations."""

import abc
import logging

from ..core.exceptions import UnsupportedDeclaration
from ..core.metadata import InterfaceInfo, interface_info, record_interface
from ..core.types import Mode, TaggingScheme
from ..registry import Registry
from .members import check_interface_members

logger = logging.getLogger(__name__)


def _abstract_name_accessor(cls: type):
    def polytag_name(self) -> str:
        """Discriminant written for this value."""
        raise NotImplementedError

    polytag_name.__qualname__ = f"{cls.__qualname__}.polytag_name"
    polytag_name.__module__ = cls.__module__
    return abc.abstractmethod(polytag_name)


def declare_interface(cls: type, scheme: TaggingScheme, mode: Mode) -> type:
    """Turn an abstract class into a tagged interface.

    Every implementation must provide ``polytag_name()`` when the interface
    serializes; decorated implementations get it generated.
    """
    if interface_info(cls) is not None:
        raise UnsupportedDeclaration(
            f"{cls.__qualname__} is already a tagged interface"
        )
    check_interface_members(cls)

    info = InterfaceInfo(interface=cls, scheme=scheme, mode=mode, registry=Registry(cls))
    if mode.ser and not hasattr(cls, "polytag_name"):
        cls.polytag_name = _abstract_name_accessor(cls)  # type: ignore[attr-defined]
        abc.update_abstractmethods(cls)
    record_interface(info)

    logger.debug("Declared %s interface %s with %r", mode, cls.__qualname__, scheme)
    return cls
