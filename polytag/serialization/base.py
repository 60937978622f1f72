"""Base serialization interfaces and registry."""

import logging
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Serializer(Protocol):
    """Protocol for serializers of tagged values."""

    def serialize(
        self, obj: Any, format: str = "json", interface: type | None = None
    ) -> bytes | str:
        """Serialize an object, writing tagged values under ``interface`` if given."""
        ...

    def deserialize(
        self, data: bytes | str, target_type: Any, format: str = "json"
    ) -> Any:
        """Deserialize data to the target type or tagged interface."""
        ...


class SerializerRegistry:
    """Registry for serializers, with a process-wide default."""

    _serializers: dict[str, Serializer] = {}
    _default: str | None = None

    @classmethod
    def register(cls, name: str, serializer: Serializer, default: bool = False) -> None:
        """Register a serializer under ``name``."""
        if not isinstance(serializer, Serializer):
            raise TypeError(f"Not a serializer: {serializer!r}")
        cls._serializers[name] = serializer
        if default or cls._default is None:
            cls._default = name
        logger.debug("Registered serializer %s (default: %s)", name, cls._default)

    @classmethod
    def get(cls, name: str | None = None) -> Serializer:
        """Get a serializer by name, or the default one."""
        if name is None:
            name = cls._default
        if name is None:
            raise ValueError("No default serializer configured")
        if name not in cls._serializers:
            raise ValueError(f"Unknown serializer: {name}")
        return cls._serializers[name]

    @classmethod
    def list(cls) -> list[str]:
        """List registered serializer names."""
        return list(cls._serializers.keys())
