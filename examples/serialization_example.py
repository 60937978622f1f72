"""Example demonstrating tagged serialization of interface values."""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass

import msgspec

import polytag


# An interface whose implementations are tagged with a `type` field
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
    side: float

    def area(self) -> float:
        return self.side**2


# Adjacently tagged: {"event": ..., "data": {...}}
@polytag.serde(tag="event", content="data")
class Event(ABC):
    @abstractmethod
    def describe(self) -> str: ...


@polytag.serde
@dataclass
class Resized(Event):
    shape: Shape
    factor: float

    def describe(self) -> str:
        return f"resized a {type(self.shape).__name__} by {self.factor}"


class Drawing(msgspec.Struct):
    """Plain struct holding tagged values."""

    title: str
    shapes: list[Shape]
    history: list[Event] = []


def main():
    """Run serialization examples."""
    print("=== Declared Implementations ===")
    for cls in (Circle, Square, Resized):
        print(f"{cls.__name__}: {polytag.describe(cls)}")

    print("\n=== Writing Tagged Values ===")
    print(polytag.dumps(Circle(1.0)))
    print(polytag.dumps(Resized(Square(2.0), 1.5)))

    print("\n=== Reading Tagged Values ===")
    shape = polytag.loads('{"type": "square", "side": 3}', Shape)
    print(f"Loaded {shape!r} with area {shape.area()}")

    try:
        polytag.loads('{"type": "hexagon", "side": 1}', Shape)
    except polytag.UnknownVariantError as e:
        print(f"Rejected: {e}")

    print("\n=== Files ===")
    drawing = Drawing(
        title="sketch",
        shapes=[Circle(0.5), Square(4.0)],
        history=[Resized(Circle(0.25), 2.0)],
    )
    files = ["drawing.json", "drawing.yaml", "drawing.msgpack"]
    for file in files:
        polytag.save(drawing, file)
        loaded = polytag.load(file, Drawing)
        print(f"{file}: round trip {'ok' if loaded == drawing else 'FAILED'}")

    with open("drawing.yaml") as f:
        print(f.read())

    # Clean up
    for file in files:
        if os.path.exists(file):
            os.remove(file)


if __name__ == "__main__":
    main()
