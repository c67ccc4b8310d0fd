"""
Path smoothing and label placement.

Turns an axis-aligned polyline into drawing commands: straight lines with
each interior corner replaced by a small quadratic curve. The radius is
clamped to half of each adjacent segment so a rounded corner never
overshoots a short segment.
"""

import math
from typing import List, Sequence

from .config import CORNER_RADIUS
from .models import DrawablePath, PathCommand, Point

# Radii below this render as sharp corners
MIN_CURVE_RADIUS = 1.0


def smooth_path(points: Sequence[Point], radius: float = CORNER_RADIUS) -> DrawablePath:
    """
    Build a drawable path with rounded corners.

    Args:
        points: Ordered waypoints (at least two for a non-empty path)
        radius: Maximum corner radius in pixels

    Returns:
        DrawablePath starting with a move to the first point and ending
        with a line to the last point.
    """
    if len(points) < 2:
        return DrawablePath()

    commands: List[PathCommand] = [PathCommand("M", (Point(*points[0]),))]

    for i in range(1, len(points) - 1):
        prev, curr, nxt = points[i - 1], points[i], points[i + 1]
        v1x, v1y = curr[0] - prev[0], curr[1] - prev[1]
        v2x, v2y = nxt[0] - curr[0], nxt[1] - curr[1]
        l1 = math.hypot(v1x, v1y)
        l2 = math.hypot(v2x, v2y)

        r = min(radius, l1 / 2, l2 / 2)
        if r < MIN_CURVE_RADIUS or l1 == 0 or l2 == 0:
            commands.append(PathCommand("L", (Point(*curr),)))
            continue

        start = Point(curr[0] - v1x / l1 * r, curr[1] - v1y / l1 * r)
        end = Point(curr[0] + v2x / l2 * r, curr[1] + v2y / l2 * r)
        commands.append(PathCommand("L", (start,)))
        commands.append(PathCommand("Q", (Point(*curr), end)))

    commands.append(PathCommand("L", (Point(*points[-1]),)))
    return DrawablePath(commands)


def label_point(points: Sequence[Point]) -> Point:
    """
    Anchor for an edge caption: the midpoint of the middle segment.

    For an even number of segments the segment just after the middle
    waypoint is used.
    """
    if not points:
        return Point(0.0, 0.0)
    if len(points) == 1:
        return Point(*points[0])
    k = (len(points) - 1) // 2
    a, b = points[k], points[k + 1]
    return Point(a[0] / 2 + b[0] / 2, a[1] / 2 + b[1] / 2)
