"""msgspec-based serializer for tagged values."""

from typing import Any

import msgspec
import yaml  # type: ignore[import-untyped]

from ..core.metadata import interface_info
from .base import Serializer
from .dispatch import dec_hook, from_builtins
from .writer import to_builtins

FORMATS = ("json", "msgpack", "yaml")


class MsgspecSerializer(Serializer):
    """Serializer using msgspec for json/msgpack and PyYAML for yaml."""

    def __init__(self):
        self._json_encoder = msgspec.json.Encoder()
        self._json_decoder = msgspec.json.Decoder()
        self._msgpack_encoder = msgspec.msgpack.Encoder()
        self._msgpack_decoder = msgspec.msgpack.Decoder()

    def serialize(
        self, obj: Any, format: str = "json", interface: type | None = None
    ) -> bytes | str:
        """Serialize an object, tagging every value behind an interface.

        Args:
            obj: Tagged value, or a container/struct/dataclass holding them
            format: One of ``json``, ``msgpack`` or ``yaml``
            interface: Interface to write ``obj`` under, if ambiguous
        """
        data = to_builtins(obj, interface)

        if format == "json":
            return self._json_encoder.encode(data).decode("utf-8")
        elif format == "msgpack":
            return self._msgpack_encoder.encode(data)
        elif format == "yaml":
            return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
        else:
            raise ValueError(f"Unknown format: {format}")

    def decode(self, data: bytes | str, format: str = "json") -> Any:
        """Parse serialized data into builtins."""
        if format == "json":
            if isinstance(data, str):
                data = data.encode("utf-8")
            return self._json_decoder.decode(data)
        elif format == "msgpack":
            if isinstance(data, str):
                data = data.encode("utf-8")
            return self._msgpack_decoder.decode(data)
        elif format == "yaml":
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            return yaml.safe_load(data)
        else:
            raise ValueError(f"Unknown format: {format}")

    def deserialize(
        self, data: bytes | str, target_type: Any, format: str = "json"
    ) -> Any:
        """Deserialize data to a tagged interface or any msgspec-convertible type.

        Fields typed as a tagged interface are dispatched on their tag, at
        any depth.
        """
        raw = self.decode(data, format)
        if interface_info(target_type) is not None:
            return from_builtins(raw, target_type)
        return msgspec.convert(raw, target_type, dec_hook=dec_hook)
