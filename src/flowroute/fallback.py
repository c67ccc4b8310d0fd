"""Obstacle-unaware Manhattan routing used when the lattice search cannot run."""

from typing import List, Optional

from .config import POINT_TOLERANCE
from .connector import clean_path
from .models import Point, Side


def fallback_path(
    source: Point,
    target: Point,
    source_side: Optional[Side] = None,
    target_side: Optional[Side] = None,
    tolerance: float = POINT_TOLERANCE,
) -> List[Point]:
    """
    Route a 1-bend (L) or 2-bend (Z) path straight between two endpoints.

    The shape follows the facing sides: two horizontal sides (or no side
    information) give a Z with a vertical middle leg, two vertical sides a Z
    with a horizontal middle leg, and mixed sides an L whose legs leave each
    endpoint along its own axis.

    Args:
        source: Source endpoint
        target: Target endpoint
        source_side: Facing side of the source, if known
        target_side: Facing side of the target, if known
        tolerance: Duplicate-point tolerance passed to ``clean_path``

    Returns:
        Axis-aligned polyline with at least two points.
    """
    source_h = source_side is None or source_side.is_horizontal
    target_h = target_side is None or target_side.is_horizontal

    if source_h and target_h:
        mid_x = source.x / 2 + target.x / 2
        points = [source, Point(mid_x, source.y), Point(mid_x, target.y), target]
    elif not source_h and not target_h:
        mid_y = source.y / 2 + target.y / 2
        points = [source, Point(source.x, mid_y), Point(target.x, mid_y), target]
    elif source_h:
        points = [source, Point(target.x, source.y), target]
    else:
        points = [source, Point(source.x, target.y), target]

    return clean_path(points, tolerance)
