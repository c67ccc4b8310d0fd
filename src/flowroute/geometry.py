"""
Obstacle normalization.

Diagram hosts describe their shapes in different ways: a node may carry a
measured size, an explicit size, a CSS-style size, or none at all, and its
position may be absolute or relative. ``normalize_obstacles`` turns any of
these into plain ``Obstacle`` records the lattice builder can consume.
"""

import logging
import math
import re
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Tuple

from .config import DEFAULT_OBSTACLE_HEIGHT, DEFAULT_OBSTACLE_WIDTH
from .models import Obstacle, Point

log = logging.getLogger(__name__)

# Lookup order for nested geometry fields
POSITION_PATHS = (
    ("positionAbsolute",),
    ("internals", "positionAbsolute"),
    ("position",),
)
SIZE_PATHS = (
    ("measured",),
    (),
    ("style",),
    ("dimensions",),
)

_NUMBER_RE = re.compile(r"^\s*(-?\d+(?:\.\d*)?|-?\.\d+)\s*(px)?\s*$")


def _lookup(shape: Any, key: str) -> Any:
    """Read ``key`` from a mapping or an object attribute."""
    if isinstance(shape, Mapping):
        return shape.get(key)
    return getattr(shape, key, None)


def _lookup_path(shape: Any, path: Tuple[str, ...]) -> Any:
    current = shape
    for key in path:
        if current is None:
            return None
        current = _lookup(current, key)
    return current


def _to_number(value: Any) -> Optional[float]:
    """Coerce numbers and numeric strings ("120", "120px"); else None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _NUMBER_RE.match(value)
        if match:
            return float(match.group(1))
    return None


def coerce_point(value: Any) -> Optional[Point]:
    """Read a point from an (x, y) sequence, mapping or object; else None."""
    if value is None:
        return None
    if isinstance(value, (tuple, list)):
        if len(value) < 2:
            return None
        x, y = _to_number(value[0]), _to_number(value[1])
    else:
        x, y = _to_number(_lookup(value, "x")), _to_number(_lookup(value, "y"))
    if x is None or y is None:
        return None
    return Point(x, y)


def resolve_position(shape: Any) -> Optional[Point]:
    """Find the top-left corner of a shape, or None if it has none."""
    for path in POSITION_PATHS:
        point = coerce_point(_lookup_path(shape, path))
        if point is not None:
            return point
    return coerce_point(shape)


def resolve_size(shape: Any) -> Tuple[Optional[float], Optional[float]]:
    """
    Find the width and height of a shape.

    Each dimension is resolved independently from the first source that
    provides it, so a node with only a measured width and a style height
    still gets both.
    """
    width = height = None
    for path in SIZE_PATHS:
        source = _lookup_path(shape, path) if path else shape
        if source is None:
            continue
        if width is None:
            width = _to_number(_lookup(source, "width"))
        if height is None:
            height = _to_number(_lookup(source, "height"))
        if width is not None and height is not None:
            break
    return width, height


def _coerce_shape(shape_id: Any, shape: Any) -> Any:
    # Bare (x, y, width, height) tuples
    if isinstance(shape, (tuple, list)) and len(shape) == 4:
        x, y, width, height = shape
        return {"id": shape_id, "position": (x, y), "width": width, "height": height}
    return shape


def _iter_shapes(shapes: Any) -> Iterable[Tuple[Any, Any]]:
    if isinstance(shapes, Mapping):
        for shape_id, shape in shapes.items():
            yield shape_id, _coerce_shape(shape_id, shape)
    else:
        for index, shape in enumerate(shapes):
            if isinstance(shape, (tuple, list)):
                # Sequences carry no id; their list index stands in for one
                yield index, _coerce_shape(index, shape)
            else:
                yield _lookup(shape, "id"), shape


def normalize_obstacles(
    shapes: Any,
    exclude_ids: Iterable[Any] = (),
    default_width: float = DEFAULT_OBSTACLE_WIDTH,
    default_height: float = DEFAULT_OBSTACLE_HEIGHT,
) -> List[Obstacle]:
    """
    Convert heterogeneous shape descriptors into obstacles.

    Args:
        shapes: Iterable of shapes (Obstacle, mapping, object, or an
            (x, y, width, height) tuple identified by its index), or a
            mapping of id to shape or to an (x, y, width, height) tuple.
        exclude_ids: Ids to skip, typically the edge's own source and target.
        default_width: Width used when a shape has no resolvable width.
        default_height: Height used when a shape has no resolvable height.

    Returns:
        Obstacles in input order. Shapes without a finite position, or with
        zero, negative or non-finite dimensions, are dropped.
    """
    if shapes is None:
        return []

    excluded = {str(i) for i in exclude_ids if i is not None}
    obstacles: List[Obstacle] = []

    for shape_id, shape in _iter_shapes(shapes):
        if shape is None:
            continue
        key = "" if shape_id is None else str(shape_id)
        if key in excluded:
            continue

        if isinstance(shape, Obstacle):
            position, width, height = shape.position, shape.width, shape.height
        else:
            position = resolve_position(shape)
            width, height = resolve_size(shape)

        if position is None or not (
            math.isfinite(position.x) and math.isfinite(position.y)
        ):
            log.debug("Dropping shape %r: no finite position", key)
            continue

        if width is None:
            width = default_width
        if height is None:
            height = default_height
        if not (math.isfinite(width) and math.isfinite(height)):
            log.debug("Dropping shape %r: non-finite size", key)
            continue
        if width <= 0 or height <= 0:
            log.debug("Dropping shape %r: empty size %sx%s", key, width, height)
            continue

        obstacles.append(Obstacle(key, Point(position.x, position.y), width, height))

    return obstacles
