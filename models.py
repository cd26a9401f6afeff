"""
models.py

Geometry and connection models for the BlockCanvas diagram editor.

A ``Block`` owns one ``Rectangle`` and any number of ``ConnectionPoint``s
anchored on its border.  A ``Link`` joins two connection points.  Point
positions are always derived from the owning rectangle, so links follow
their blocks through moves and resizes without any update step.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Set, Tuple


# ----------------------------
# Geometry constants
# ----------------------------

MIN_SIZE = 5                    # smallest width/height a rectangle may have
RESIZE_HANDLE_HALF_WIDTH = 2    # default handle tolerance in pixels
DEFAULT_BLOCK_WIDTH = 50
DEFAULT_BLOCK_HEIGHT = 50


class Handle(Enum):
    """Named resize regions on a rectangle border."""
    LEFT = "left"
    TOP_LEFT = "top_left"
    TOP = "top"
    TOP_RIGHT = "top_right"
    RIGHT = "right"
    BOTTOM_RIGHT = "bottom_right"
    BOTTOM = "bottom"
    BOTTOM_LEFT = "bottom_left"


# Corner handles resize the two adjacent edges independently.
_CORNER_EDGES = {
    Handle.TOP_LEFT: (Handle.TOP, Handle.LEFT),
    Handle.TOP_RIGHT: (Handle.TOP, Handle.RIGHT),
    Handle.BOTTOM_RIGHT: (Handle.BOTTOM, Handle.RIGHT),
    Handle.BOTTOM_LEFT: (Handle.BOTTOM, Handle.LEFT),
}


class Side(Enum):
    """Block border a connection point is anchored to."""
    LEFT = "left"
    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"


# ----------------------------
# Rectangle
# ----------------------------

class Rectangle:
    """Axis-aligned rectangle in integer canvas pixels.

    ``left``/``top``/``right``/``bottom`` are derived from ``x``, ``y``,
    ``width`` and ``height``, so they can never drift out of sync.  Width and
    height never drop below ``MIN_SIZE``.
    """

    def __init__(self, x: int, y: int, width: int, height: int):
        self.x = x
        self.y = y
        self.width = max(width, MIN_SIZE)
        self.height = max(height, MIN_SIZE)

    @property
    def left(self) -> int:
        return self.x

    @property
    def top(self) -> int:
        return self.y

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def contains(self, px: float, py: float) -> bool:
        """Strict interior test; points on the border are not inside."""
        return self.left < px < self.right and self.top < py < self.bottom

    def move_to(self, px: int, py: int) -> None:
        """Place the top-left corner at (px, py) keeping the size."""
        self.x = px
        self.y = py

    def resize_to(self, handle: Handle, px: int, py: int) -> None:
        """Drag the edge(s) named by ``handle`` to the pointer.

        The edge opposite the handle stays fixed.  When the pointer crosses
        past it, the dimension is clamped to ``MIN_SIZE`` and the moving edge
        sits ``MIN_SIZE`` pixels from the anchor.

        Args:
            handle: Which edge or corner is being dragged.
            px: Pointer x in canvas pixels.
            py: Pointer y in canvas pixels.
        """
        if handle == Handle.LEFT:
            right = self.right
            self.width = max(right - px, MIN_SIZE)
            self.x = right - self.width
        elif handle == Handle.TOP:
            bottom = self.bottom
            self.height = max(bottom - py, MIN_SIZE)
            self.y = bottom - self.height
        elif handle == Handle.RIGHT:
            self.width = max(px - self.left, MIN_SIZE)
        elif handle == Handle.BOTTOM:
            self.height = max(py - self.top, MIN_SIZE)
        else:
            first, second = _CORNER_EDGES[handle]
            self.resize_to(first, px, py)
            self.resize_to(second, px, py)

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)

    def copy(self) -> "Rectangle":
        return Rectangle(self.x, self.y, self.width, self.height)

    def __repr__(self) -> str:
        return f"Rectangle(x={self.x}, y={self.y}, width={self.width}, height={self.height})"


# ----------------------------
# Connection model
# ----------------------------

def nearest_side(rect: Rectangle, px: float, py: float) -> Side:
    """Return the border side closest to (px, py).

    Ties go to the first side in the order top, right, bottom, left.
    """
    candidates = (
        (abs(py - rect.top), Side.TOP),
        (abs(px - rect.right), Side.RIGHT),
        (abs(py - rect.bottom), Side.BOTTOM),
        (abs(px - rect.left), Side.LEFT),
    )
    return min(candidates, key=lambda c: c[0])[1]


def _fraction_along(rect: Rectangle, side: Side, px: float, py: float) -> float:
    if side in (Side.TOP, Side.BOTTOM):
        offset, length = px - rect.left, rect.width
    else:
        offset, length = py - rect.top, rect.height
    # (0, 1]: the start corner itself is not representable, use one pixel in
    return min(max(offset / length, 1.0 / length), 1.0)


@dataclass(eq=False)
class ConnectionPoint:
    """Anchor at ``fraction`` of the way along ``side`` of a block.

    Identity-compared: two points at the same spot are still distinct anchors.
    """
    side: Side
    fraction: float

    def __post_init__(self):
        if not 0.0 < self.fraction <= 1.0:
            raise ValueError(f"fraction must be in (0, 1], got {self.fraction!r}")

    @classmethod
    def on_border(cls, rect: Rectangle, px: float, py: float) -> "ConnectionPoint":
        """Project the pointer onto the nearest side of ``rect``."""
        side = nearest_side(rect, px, py)
        return cls(side, _fraction_along(rect, side, px, py))

    def position(self, rect: Rectangle) -> Tuple[int, int]:
        """Canvas position of this point on ``rect``."""
        if self.side == Side.LEFT:
            x = rect.left
        elif self.side == Side.RIGHT:
            x = rect.right
        else:
            x = rect.left + round(self.fraction * rect.width)

        if self.side == Side.TOP:
            y = rect.top
        elif self.side == Side.BOTTOM:
            y = rect.bottom
        else:
            y = rect.top + round(self.fraction * rect.height)
        return x, y


@dataclass(frozen=True, eq=False)
class Link:
    """Undirected link between two connection points."""
    a: ConnectionPoint
    b: ConnectionPoint

    def endpoints(self) -> Tuple[ConnectionPoint, ConnectionPoint]:
        return self.a, self.b

    def involves(self, point: ConnectionPoint) -> bool:
        return point is self.a or point is self.b

    def other(self, point: ConnectionPoint) -> Optional[ConnectionPoint]:
        if point is self.a:
            return self.b
        if point is self.b:
            return self.a
        return None

    def __eq__(self, other) -> bool:
        if not isinstance(other, Link):
            return NotImplemented
        return {id(self.a), id(self.b)} == {id(other.a), id(other.b)}

    def __hash__(self) -> int:
        return hash(frozenset((id(self.a), id(self.b))))


class Block:
    """User-manipulable rectangle carrying connection points."""

    def __init__(self, block_id: str, rectangle: Rectangle):
        self.block_id = block_id
        self.rectangle = rectangle
        self.points: Set[ConnectionPoint] = set()

    def move_to(self, px: int, py: int) -> None:
        self.rectangle.move_to(px, py)

    def resize_to(self, handle: Handle, px: int, py: int) -> None:
        self.rectangle.resize_to(handle, px, py)

    def add_point(self, point: ConnectionPoint) -> ConnectionPoint:
        self.points.add(point)
        return point

    def owns(self, point: ConnectionPoint) -> bool:
        return point in self.points

    def point_position(self, point: ConnectionPoint) -> Tuple[int, int]:
        return point.position(self.rectangle)

    def __repr__(self) -> str:
        return f"Block({self.block_id!r}, {self.rectangle!r}, points={len(self.points)})"
