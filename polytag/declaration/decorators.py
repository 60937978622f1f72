"""Class decorators that declare tagged interfaces and their implementations.

The same decorator serves both declarations, like so::

    @polytag.serde(tag="type")
    class Shape(ABC):
        @abstractmethod
        def area(self) -> float: ...

    @polytag.serde
    @dataclass
    class Circle(Shape):
        radius: float

        def area(self) -> float:
            return math.pi * self.radius**2

Directives may be written as a string, ``@polytag.serde('tag = "type"')``,
as keyword options, or both. Apply the polytag decorator outermost so it
sees the final class.
"""

import abc
import dataclasses
from collections.abc import Callable
from typing import Any, TypeVar

from ..core.exceptions import UnsupportedDeclaration
from ..core.metadata import interface_info, tagged_interfaces
from ..core.types import DESERIALIZE, SERDE, SERIALIZE, Mode
from ..directive import directive_tokens, parse_impl_directive, parse_interface_directive
from .implementation import declare_implementation
from .interface import declare_interface
from .members import CAPABILITY_NAMES

T = TypeVar("T", bound=type)

INTERFACE = "interface"
IMPLEMENTATION = "implementation"


def declaration_kind(obj: Any) -> str:
    """Whether ``obj`` declares an interface or an implementation."""
    if not isinstance(obj, type):
        raise UnsupportedDeclaration(
            f"expected an interface or implementation class, got {obj!r}"
        )
    if interface_info(obj) is not None:
        return INTERFACE

    remaining = set(getattr(obj, "__abstractmethods__", ())) - CAPABILITY_NAMES
    bases = tagged_interfaces(obj)
    if bases and not remaining:
        return IMPLEMENTATION
    if bases and dataclasses.is_dataclass(obj):
        # A dataclass under a tagged interface is an unfinished implementation
        missing = ", ".join(f"`{name}`" for name in sorted(remaining))
        raise UnsupportedDeclaration(
            f"implementation {obj.__qualname__} of "
            f"{bases[0].__qualname__} does not define {missing}"
        )
    if isinstance(obj, abc.ABCMeta):
        return INTERFACE
    raise UnsupportedDeclaration(
        f"expected an abstract interface or an implementation of a tagged "
        f"interface, got {obj.__qualname__}"
    )


def _declare(
    mode: Mode,
    directive: str | None,
    interface: type | None,
    options: dict[str, Any],
) -> Callable[[T], T]:
    def decorate(cls: T) -> T:
        kind = IMPLEMENTATION if interface is not None else declaration_kind(cls)
        tokens, source = directive_tokens(directive, options)
        if kind == INTERFACE:
            scheme = parse_interface_directive(tokens, source)
            return declare_interface(cls, scheme, mode)  # type: ignore[return-value]
        parsed = parse_impl_directive(tokens, source)
        return declare_implementation(cls, parsed, mode, interface)  # type: ignore[return-value]

    return decorate


def _make(mode: Mode, doc: str):
    def decorator(directive=None, /, *, interface=None, **options):
        if directive is not None and not isinstance(directive, str):
            return _declare(mode, None, interface, options)(directive)
        return _declare(mode, directive, interface, options)

    decorator.__name__ = decorator.__qualname__ = str(mode)
    decorator.__module__ = __name__
    decorator.__doc__ = doc
    return decorator


serde = _make(
    SERDE,
    """Declare a tagged interface or implementation that serializes and deserializes.

    Args:
        directive: Directive string, e.g. ``'tag = "type", content = "c"'``
        interface: Interface to implement when the class has several
        options: Directive keys as keyword options, e.g. ``tag="type"``
    """,
)
serialize = _make(
    SERIALIZE,
    """Declare a tagged interface or implementation that only serializes.

    Generic implementations may use this mode.
    """,
)
deserialize = _make(
    DESERIALIZE,
    """Declare a tagged interface or implementation that only deserializes.""",
)
