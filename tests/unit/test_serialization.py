"""Unit tests for serializers and the file helpers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from unittest.mock import MagicMock

import msgspec
import pytest
import yaml

import polytag
from polytag.core.exceptions import UnknownVariantError
from polytag.serialization import MsgspecSerializer, Serializer, SerializerRegistry
from polytag.serialization.io import format_for_path


@polytag.serde(tag="type")
class Shape(ABC):
    @abstractmethod
    def area(self) -> float: ...


@polytag.serde
@dataclass
class Circle(Shape):
    radius: float

    def area(self) -> float:
        return 3.14159 * self.radius**2


@polytag.serde(name="square")
@dataclass
class Square(Shape):
    side: int

    def area(self) -> float:
        return float(self.side**2)


class Drawing(msgspec.Struct):
    title: str
    shapes: list[Shape]


@pytest.fixture
def serializer_state():
    """Restore the serializer registry after a test changes it."""
    serializers = dict(SerializerRegistry._serializers)
    default = SerializerRegistry._default
    yield
    SerializerRegistry._serializers = serializers
    SerializerRegistry._default = default


class TestMsgspecSerializer:
    """Test the msgspec serializer."""

    def setup_method(self):
        self.serializer = MsgspecSerializer()

    def test_json(self):
        """Test JSON output of a tagged value."""
        data = self.serializer.serialize(Circle(2.0), format="json")
        assert isinstance(data, str)
        assert msgspec.json.decode(data) == {"type": "Circle", "radius": 2.0}
        assert self.serializer.deserialize(data, Shape) == Circle(2.0)

    def test_msgpack(self):
        """Test msgpack output of a tagged value."""
        data = self.serializer.serialize(Square(3), format="msgpack")
        assert isinstance(data, bytes)
        assert self.serializer.deserialize(data, Shape, format="msgpack") == Square(3)

    def test_yaml(self):
        """Test YAML output keeps the tag first."""
        data = self.serializer.serialize(Square(3), format="yaml")
        assert isinstance(data, str)
        assert data.splitlines()[0] == "type: square"
        assert yaml.safe_load(data) == {"type": "square", "side": 3}
        assert self.serializer.deserialize(data, Shape, format="yaml") == Square(3)

    def test_nested_struct(self):
        """Test structs holding tagged values."""
        drawing = Drawing(title="d", shapes=[Circle(1.0), Square(2)])
        data = self.serializer.serialize(drawing)
        assert msgspec.json.decode(data) == {
            "title": "d",
            "shapes": [{"type": "Circle", "radius": 1.0}, {"type": "square", "side": 2}],
        }
        assert self.serializer.deserialize(data, Drawing) == drawing

    def test_list_of_interface(self):
        """Test a bare list typed by the interface."""
        data = self.serializer.serialize([Square(1), Circle(0.5)])
        assert self.serializer.deserialize(data, list[Shape]) == [Square(1), Circle(0.5)]

    def test_unknown_variant(self):
        """Test unknown tags surface as typed errors."""
        with pytest.raises(UnknownVariantError):
            self.serializer.deserialize('{"type": "Blob"}', Shape)

    def test_str_and_bytes_input(self):
        """Test both text and bytes are accepted."""
        assert self.serializer.deserialize(b'{"type": "square", "side": 1}', Shape) == Square(1)
        assert self.serializer.deserialize('{"type": "square", "side": 1}', Shape) == Square(1)

    def test_unknown_format(self):
        """Test unknown formats."""
        with pytest.raises(ValueError, match="Unknown format: xml"):
            self.serializer.serialize(Circle(1.0), format="xml")
        with pytest.raises(ValueError, match="Unknown format: xml"):
            self.serializer.deserialize("<x/>", Shape, format="xml")

    def test_is_a_serializer(self):
        """Test protocol conformance."""
        assert isinstance(self.serializer, Serializer)


class TestSerializerRegistry:
    """Test the serializer registry."""

    def test_default_serializer(self, serializer_state):
        """Test that msgspec is registered as default."""
        assert "msgspec" in SerializerRegistry.list()
        assert isinstance(SerializerRegistry.get(), MsgspecSerializer)

    def test_get_no_default(self, serializer_state):
        """Test get with no default configured."""
        SerializerRegistry._serializers = {}
        SerializerRegistry._default = None

        with pytest.raises(ValueError, match="No default serializer configured"):
            SerializerRegistry.get()

    def test_get_unknown(self, serializer_state):
        """Test get with an unknown name."""
        with pytest.raises(ValueError, match="Unknown serializer: xml"):
            SerializerRegistry.get("xml")

    def test_register_default(self, serializer_state):
        """Test registering a new default."""
        mock_serializer = MagicMock(spec=Serializer)
        SerializerRegistry.register("mock", mock_serializer, default=True)

        assert SerializerRegistry.get() is mock_serializer
        assert SerializerRegistry.get("msgspec") is not mock_serializer

    def test_register_non_serializer(self, serializer_state):
        """Test registering an object without the serializer methods."""
        with pytest.raises(TypeError, match="Not a serializer"):
            SerializerRegistry.register("bad", object())


class TestIO:
    """Test string and file helpers."""

    def test_dumps_loads(self):
        """Test the default serializer round trip."""
        data = polytag.dumps(Square(2))
        assert polytag.loads(data, Shape) == Square(2)

    def test_dumps_with_interface(self):
        """Test writing under an explicit interface."""
        data = polytag.dumps(Circle(1.0), interface=Shape)
        assert msgspec.json.decode(data) == {"type": "Circle", "radius": 1.0}

    def test_dumps_custom_serializer(self, serializer_state):
        """Test choosing a registered serializer by name."""
        mock_serializer = MagicMock(spec=Serializer)
        mock_serializer.serialize.return_value = "mocked"
        SerializerRegistry.register("mock", mock_serializer)

        assert polytag.dumps(Circle(1.0), serializer="mock") == "mocked"
        mock_serializer.serialize.assert_called_once_with(
            Circle(1.0), format="json", interface=None
        )

    def test_protocol_serializer_receives_interface(self, serializer_state):
        """Test a serializer written against the protocol signature."""

        class UpperSerializer:
            def serialize(self, obj, format="json", interface=None):
                return str(polytag.to_builtins(obj, interface)).upper()

            def deserialize(self, data, target_type, format="json"):
                return data

        SerializerRegistry.register("upper", UpperSerializer())

        data = polytag.dumps(Square(2), serializer="upper", interface=Shape)
        assert data == "{'TYPE': 'SQUARE', 'SIDE': 2}"

    @pytest.mark.parametrize("suffix", [".json", ".yaml", ".yml", ".msgpack"])
    def test_save_load(self, tmp_path, suffix):
        """Test saving and loading with format auto-detection."""
        path = tmp_path / f"shape{suffix}"
        polytag.save(Circle(4.0), path)
        assert path.exists()
        assert polytag.load(path, Shape) == Circle(4.0)

    def test_save_explicit_format(self, tmp_path):
        """Test an explicit format overrides the extension."""
        path = tmp_path / "shape.data"
        polytag.save(Square(7), str(path), format="yaml")
        assert "type: square" in path.read_text()
        assert polytag.load(path, Shape, format="yaml") == Square(7)

    def test_load_missing_file(self, tmp_path):
        """Test loading a file that does not exist."""
        with pytest.raises(FileNotFoundError, match="File not found"):
            polytag.load(tmp_path / "missing.json", Shape)

    def test_format_for_path(self, tmp_path):
        """Test extension based format detection."""
        assert format_for_path(tmp_path / "a.YAML") == "yaml"
        assert format_for_path(tmp_path / "a.msgpack") == "msgpack"
        assert format_for_path(tmp_path / "a.txt") == "json"
