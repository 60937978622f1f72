"""String and file helpers over the default serializer."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .base import SerializerRegistry


def format_for_path(path: Path) -> str:
    """Serialization format implied by a file extension."""
    extension = path.suffix.lower()
    if extension in (".yaml", ".yml"):
        return "yaml"
    elif extension == ".msgpack":
        return "msgpack"
    return "json"


def dumps(
    value: Any,
    format: str = "json",
    *,
    interface: type | None = None,
    serializer: str | None = None,
) -> bytes | str:
    """Serialize ``value`` with a registered serializer (the default if None)."""
    return SerializerRegistry.get(serializer).serialize(
        value, format=format, interface=interface
    )


def loads(
    data: bytes | str,
    target_type: Any,
    format: str = "json",
    *,
    serializer: str | None = None,
) -> Any:
    """Deserialize ``data`` into ``target_type``, usually a tagged interface."""
    return SerializerRegistry.get(serializer).deserialize(
        data, target_type=target_type, format=format
    )


def save(
    value: Any,
    filepath: str | Path,
    *,
    format: str | None = None,
    interface: type | None = None,
) -> None:
    """Save a value to file.

    Args:
        value: Value to save
        filepath: Path to save file
        format: Serialization format (auto-detected from extension if None)
        interface: Interface to write ``value`` under, if ambiguous
    """
    path = Path(filepath)
    if format is None:
        format = format_for_path(path)

    data = dumps(value, format, interface=interface)
    if isinstance(data, str):
        path.write_text(data)
    else:
        path.write_bytes(data)


def load(filepath: str | Path, target_type: Any, *, format: str | None = None) -> Any:
    """Load a value from file.

    Args:
        filepath: Path to load file
        target_type: Tagged interface or type to load into
        format: Serialization format (auto-detected from extension if None)

    Returns:
        Loaded value
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {filepath}")
    if format is None:
        format = format_for_path(path)

    data = path.read_bytes() if format == "msgpack" else path.read_text()
    return loads(data, target_type, format)
