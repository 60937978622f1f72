"""Unit tests for aggregating contributions from other modules."""

import textwrap
from abc import ABC, abstractmethod
from dataclasses import dataclass
from types import SimpleNamespace

import pytest

import polytag
from polytag.registry import RegistryEntry, aggregation, registry_for
from polytag.serialization import from_builtins

PLUGIN_SOURCE = """
from dataclasses import dataclass

import polytag
from {interface_module} import Shape


@polytag.serde
@dataclass
class Hexagon(Shape):
    side: float

    def area(self) -> float:
        return 2.598 * self.side**2
"""

INTERFACE_SOURCE = """
from abc import ABC, abstractmethod

import polytag


@polytag.serde(tag="type")
class Shape(ABC):
    @abstractmethod
    def area(self) -> float: ...
"""


def make_interface():
    @polytag.serde(tag="type")
    class Shape(ABC):
        @abstractmethod
        def area(self) -> float: ...

    return Shape


def factory(payload):
    return payload


@pytest.fixture
def plugin_modules(tmp_path, monkeypatch, request):
    """Write an interface module and a plugin module onto sys.path."""
    prefix = f"polytag_agg_{request.node.name.replace('[', '_').replace(']', '_')}"
    interface_module = f"{prefix}_shapes"
    plugin_module = f"{prefix}_hexagon"
    (tmp_path / f"{interface_module}.py").write_text(textwrap.dedent(INTERFACE_SOURCE))
    (tmp_path / f"{plugin_module}.py").write_text(
        textwrap.dedent(PLUGIN_SOURCE.format(interface_module=interface_module))
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    return interface_module, plugin_module


class TestAggregate:
    """Test the aggregation step."""

    def test_import_modules(self, plugin_modules):
        """Importing a plugin module contributes its implementations."""
        interface_module, plugin_module = plugin_modules
        shapes = __import__(interface_module)

        contributed = polytag.aggregate(plugin_module)

        assert [entry.discriminant for entry in contributed] == ["Hexagon"]
        assert contributed[0].interface is shapes.Shape
        assert contributed[0].source.endswith("Hexagon")
        value = from_builtins({"type": "Hexagon", "side": 1.0}, shapes.Shape)
        assert type(value).__name__ == "Hexagon"

    def test_already_imported(self, plugin_modules):
        """Modules imported earlier contribute nothing new."""
        _, plugin_module = plugin_modules
        polytag.aggregate(plugin_module)
        assert polytag.aggregate(plugin_module) == []

    def test_entry_points(self, monkeypatch):
        """Entry points of a group are loaded and absorbed."""
        Shape = make_interface()
        entry = RegistryEntry(Shape, "Circle", factory, source="plugin.Circle")
        points = [SimpleNamespace(name="circle", load=lambda: entry)]

        def fake_entry_points(group):
            assert group == aggregation.DEFAULT_GROUP
            return points

        monkeypatch.setattr(aggregation, "entry_points", fake_entry_points)

        contributed = polytag.aggregate(group=aggregation.DEFAULT_GROUP)
        assert contributed == [entry]
        assert registry_for(Shape).lookup("Circle") is factory

    def test_no_group(self, monkeypatch):
        """Entry points are only read when a group is given."""

        def fail(group):
            raise AssertionError("entry points should not be read")

        monkeypatch.setattr(aggregation, "entry_points", fail)
        assert polytag.aggregate() == []


class TestAbsorb:
    """Test what an entry point may resolve to."""

    def test_entry(self):
        """Entries are submitted."""
        Shape = make_interface()
        aggregation._absorb(RegistryEntry(Shape, "a", factory))
        assert registry_for(Shape).tags() == ["a"]

    def test_iterable(self):
        """Iterables are absorbed element-wise."""
        Shape = make_interface()
        aggregation._absorb(
            [RegistryEntry(Shape, "a", factory), (RegistryEntry(Shape, "b", factory),)]
        )
        assert sorted(registry_for(Shape).tags()) == ["a", "b"]

    def test_callable(self):
        """Callables are called and their result absorbed."""
        Shape = make_interface()
        aggregation._absorb(lambda: [RegistryEntry(Shape, "a", factory)])
        aggregation._absorb(lambda: None)
        assert registry_for(Shape).tags() == ["a"]

    def test_module(self):
        """Modules have already contributed by being imported."""
        aggregation._absorb(textwrap)

    def test_implementation_class(self):
        """Classes are not instantiated; declaring them contributed already."""
        Shape = make_interface()

        @polytag.serde
        @dataclass
        class Circle(Shape):
            radius: float

            def area(self) -> float:
                return 0.0

        aggregation._absorb(Circle)
        aggregation._absorb([Circle])
        assert registry_for(Shape).tags() == ["Circle"]

    @pytest.mark.parametrize("obj", [1, "Circle"])
    def test_unsupported(self, obj):
        """Anything else is rejected."""
        with pytest.raises(TypeError, match="cannot aggregate"):
            aggregation._absorb(obj)
