"""
Endpoint stitching.

The lattice path only knows cell centres; the real ports sit at arbitrary
sub-cell coordinates. This module reattaches the literal endpoints to the
lattice path with fixed-length approach segments and right-angle elbows so
that every segment of the final polyline is axis-aligned and the segments
touching the ports run along their facing sides.
"""

from typing import List, Optional, Sequence

from .config import APPROACH_DISTANCE, POINT_TOLERANCE
from .models import Endpoint, Point, Side


def approach_point(endpoint: Endpoint, distance: float = APPROACH_DISTANCE) -> Point:
    """Point ``distance`` pixels out from the endpoint along its facing side."""
    if endpoint.side is None:
        return endpoint.point
    dx, dy = endpoint.side.direction
    return Point(endpoint.point.x + dx * distance, endpoint.point.y + dy * distance)


def orthogonal_elbow(a: Point, b: Point, side: Optional[Side] = None) -> Optional[Point]:
    """
    Elbow point joining ``a`` to ``b`` with two axis-aligned segments.

    Args:
        a: Point the elbow leaves from
        b: Point the elbow leads to
        side: Facing side of the endpoint ``a`` belongs to; LEFT/RIGHT (or
            no side) move horizontally first, TOP/BOTTOM vertically first

    Returns:
        The elbow, or None if ``a`` and ``b`` already share an x or y.
    """
    if a.x == b.x or a.y == b.y:
        return None
    if side is None or side.is_horizontal:
        return Point(b.x, a.y)
    return Point(a.x, b.y)


def _aligned(a: Point, b: Point) -> bool:
    return a.x == b.x or a.y == b.y


def _near(a: Point, b: Point, tolerance: float) -> bool:
    return abs(a.x - b.x) < tolerance and abs(a.y - b.y) < tolerance


def _collinear(a: Point, b: Point, c: Point) -> bool:
    # Only straight runs; a reversal (b beyond both a and c) is kept
    if a.x == b.x == c.x:
        return min(a.y, c.y) <= b.y <= max(a.y, c.y)
    if a.y == b.y == c.y:
        return min(a.x, c.x) <= b.x <= max(a.x, c.x)
    return False


def clean_path(points: Sequence[Point], tolerance: float = POINT_TOLERANCE) -> List[Point]:
    """
    Drop near-duplicate and collinear points from an axis-aligned polyline.

    A point within ``tolerance`` of its predecessor is only removed when its
    neighbours stay axis-aligned without it; at the end of the path the
    predecessor is removed instead, so the first and last points are always
    kept exactly. Middle points of straight collinear runs are then removed;
    a point where the path reverses along its own line is kept.

    Args:
        points: Polyline whose consecutive points share an x or a y
        tolerance: Per-axis distance under which two points are duplicates

    Returns:
        Cleaned polyline with at least two points (when given at least two).
    """
    points = [Point(*p) for p in points]
    if len(points) < 2:
        return points

    deduped = [points[0]]
    last = len(points) - 1
    for idx in range(1, len(points)):
        current = points[idx]
        previous = deduped[-1]
        if current == previous and idx != last:
            continue
        if _near(previous, current, tolerance):
            if idx != last:
                if _aligned(previous, points[idx + 1]):
                    continue
            elif len(deduped) >= 2 and _aligned(deduped[-2], current):
                deduped.pop()
        deduped.append(current)

    simplified = [deduped[0]]
    for point in deduped[1:]:
        while len(simplified) >= 2 and _collinear(simplified[-2], simplified[-1], point):
            simplified.pop()
        if point == simplified[-1] and len(simplified) > 1:
            continue
        simplified.append(point)

    if len(simplified) < 2:
        simplified.append(points[-1])
    return simplified


def connect_endpoints(
    source: Endpoint,
    target: Endpoint,
    lattice_points: Sequence[Point],
    approach_distance: float = APPROACH_DISTANCE,
    tolerance: float = POINT_TOLERANCE,
) -> List[Point]:
    """
    Stitch the literal endpoints onto a lattice path.

    Produces ``[source, approach, elbow?, lattice..., elbow?, approach,
    target]`` and cleans it.

    Args:
        source: Source endpoint
        target: Target endpoint
        lattice_points: Compressed lattice path in canvas coordinates
        approach_distance: Length of the straight approach segments
        tolerance: Duplicate-point tolerance passed to ``clean_path``

    Returns:
        Axis-aligned polyline from ``source.point`` to ``target.point``.
    """
    source_approach = approach_point(source, approach_distance)
    target_approach = approach_point(target, approach_distance)

    points = [source.point, source_approach]
    if lattice_points:
        elbow = orthogonal_elbow(source_approach, lattice_points[0], source.side)
        if elbow is not None:
            points.append(elbow)
        points.extend(lattice_points)
        # Built from the target side so the final legs follow its axis
        elbow = orthogonal_elbow(target_approach, lattice_points[-1], target.side)
        if elbow is not None:
            points.append(elbow)
    else:
        elbow = orthogonal_elbow(source_approach, target_approach, source.side)
        if elbow is not None:
            points.append(elbow)
    points.extend([target_approach, target.point])

    return clean_path(points, tolerance)
