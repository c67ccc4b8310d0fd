"""
Data models for edge routing.

This module contains the geometric value types shared by every stage of the
routing pipeline, plus the result types handed back to the diagram host.

Classes:
    Point: Canvas-space coordinate.
    Side: Facing direction of a connection endpoint.
    Endpoint: One end of an edge (point plus facing side).
    Rect: Axis-aligned rectangle with float coordinates.
    Obstacle: A normalized diagram element the path must not cross.
    PathCommand: One move/line/quadratic instruction of a drawable path.
    DrawablePath: Renderer-consumable path description.
    RouteResult: Everything produced by a single routing call.
    EdgeRequest: One edge to route in a batch.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple


class Point(NamedTuple):
    """A canvas-space coordinate in pixels (y grows downwards)."""

    x: float
    y: float


class Side(Enum):
    """Which side of its owning shape an endpoint faces."""

    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"

    @property
    def is_horizontal(self) -> bool:
        """True when the approach segment for this side runs along x."""
        return self in (Side.LEFT, Side.RIGHT)

    @property
    def direction(self) -> Tuple[int, int]:
        """Unit vector pointing away from the owning shape."""
        return _SIDE_DIRECTIONS[self]

    @classmethod
    def parse(cls, value) -> Optional["Side"]:
        """
        Coerce a side given as an enum member or string.

        Args:
            value: A Side, a case-insensitive name/value such as "Right",
                or None.

        Returns:
            The matching Side, or None when no side information is available.
        """
        if value is None or isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for side in cls:
                if side.value == key:
                    return side
        return None


_SIDE_DIRECTIONS = {
    Side.TOP: (0, -1),
    Side.BOTTOM: (0, 1),
    Side.LEFT: (-1, 0),
    Side.RIGHT: (1, 0),
}


@dataclass(frozen=True)
class Endpoint:
    """One end of an edge; ``side`` dictates the approach direction."""

    point: Point
    side: Optional[Side] = None


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in canvas coordinates."""

    x: float
    y: float
    width: float
    height: float

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def y2(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    def expand(self, margin: float) -> "Rect":
        """Grow the rectangle by ``margin`` on every side."""
        return Rect(
            self.x - margin,
            self.y - margin,
            self.width + 2 * margin,
            self.height + 2 * margin,
        )

    def union(self, other: "Rect") -> "Rect":
        """Smallest rectangle covering both rectangles."""
        x = min(self.x, other.x)
        y = min(self.y, other.y)
        return Rect(x, y, max(self.x2, other.x2) - x, max(self.y2, other.y2) - y)

    @classmethod
    def around(cls, point: Point) -> "Rect":
        """Zero-size rectangle at ``point``."""
        return cls(point.x, point.y, 0.0, 0.0)

    def contains(self, point: Point) -> bool:
        """Check if a point lies strictly inside the rectangle."""
        return self.x < point.x < self.x2 and self.y < point.y < self.y2

    def intersects_segment(self, a: Point, b: Point) -> bool:
        """
        Check if an axis-aligned segment passes through the interior.

        Touching the border does not count as an intersection.
        """
        if a.x == b.x:
            if self.x < a.x < self.x2:
                return not (max(a.y, b.y) <= self.y or min(a.y, b.y) >= self.y2)
            return False
        if a.y == b.y:
            if self.y < a.y < self.y2:
                return not (max(a.x, b.x) <= self.x or min(a.x, b.x) >= self.x2)
            return False
        raise ValueError(f"Segment {a} -> {b} is not axis-aligned")


@dataclass(frozen=True)
class Obstacle:
    """A diagram element a routed path must not intersect."""

    id: str
    position: Point
    width: float
    height: float

    @property
    def bounds(self) -> Rect:
        return Rect(self.position.x, self.position.y, self.width, self.height)


@dataclass(frozen=True)
class PathCommand:
    """
    A single drawing instruction.

    Attributes:
        op: "M" (move to), "L" (line to) or "Q" (quadratic curve to).
        points: One point for M/L; control point then end point for Q.
    """

    op: str
    points: Tuple[Point, ...]


@dataclass
class DrawablePath:
    """Renderer-agnostic path: an ordered list of drawing commands."""

    commands: List[PathCommand] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.commands

    def to_svg(self) -> str:
        """Serialize to an SVG path ``d`` attribute."""
        parts = []
        for command in self.commands:
            coords = " ".join(
                f"{_format_number(p.x)} {_format_number(p.y)}" for p in command.points
            )
            parts.append(f"{command.op} {coords}")
        return " ".join(parts)

    def __str__(self) -> str:
        return self.to_svg()


def _format_number(value: float) -> str:
    """Format a coordinate: integers bare, others with up to 2 decimals."""
    text = f"{value + 0.0:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


@dataclass
class RouteResult:
    """
    Output of one routing call.

    Attributes:
        path: Smoothed drawable path.
        label: Anchor point for an edge caption.
        waypoints: Axis-aligned polyline before smoothing, from the source
            endpoint to the target endpoint.
        used_fallback: True when the obstacle-unaware fallback was used.
        fallback_reason: Why the fallback was used, if it was.
    """

    path: DrawablePath
    label: Point
    waypoints: List[Point]
    used_fallback: bool = False
    fallback_reason: Optional[str] = None

    def as_tuple(self) -> Tuple[str, float, float]:
        """Return ``(svg_path, label_x, label_y)``."""
        return self.path.to_svg(), self.label.x, self.label.y


@dataclass(frozen=True)
class EdgeRequest:
    """An edge to route as part of a batch."""

    id: str
    source_id: str
    target_id: str
    source: Endpoint
    target: Endpoint
