"""
Edge routing entry points.

``route()`` computes the drawn path of one edge:

    obstacles -> normalize -> lattice -> A* -> compress -> connect -> smooth

Any step that cannot produce a usable result (endpoints that are not
finite numbers, a routing region larger than the lattice cap, a search that
finds no path) hands over to the Manhattan fallback instead, so a caller
always gets something it can draw.
"""

import logging
import math
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .config import DEFAULT_CONFIG, RouterConfig
from .connector import approach_point, connect_endpoints
from .fallback import fallback_path
from .geometry import coerce_point, normalize_obstacles
from .grid import GridBuilder, LatticeTooLargeError, RoutingError
from .models import EdgeRequest, Endpoint, Point, RouteResult, Side
from .pathfinding import compress_path, find_path
from .smoothing import label_point, smooth_path
from .tracer import RouteTrace

log = logging.getLogger(__name__)

# Fallback reasons reported on RouteResult.fallback_reason
INVALID_ENDPOINTS = "invalid_endpoints"
LATTICE_TOO_LARGE = "lattice_too_large"
LATTICE_ERROR = "lattice_error"
NO_PATH = "no_path"


def _sanitize_point(value: Any) -> Tuple[Point, bool]:
    """Coerce an endpoint, replacing non-finite coordinates with 0."""
    point = coerce_point(value)
    if point is None:
        return Point(0.0, 0.0), False
    finite_x = math.isfinite(point.x)
    finite_y = math.isfinite(point.y)
    if finite_x and finite_y:
        return point, True
    return Point(point.x if finite_x else 0.0, point.y if finite_y else 0.0), False


def _finish(
    waypoints: List[Point],
    config: RouterConfig,
    trace: Optional[RouteTrace],
    fallback_reason: Optional[str] = None,
) -> RouteResult:
    path = smooth_path(waypoints, config.corner_radius)
    label = label_point(waypoints)
    if trace is not None:
        trace.add_stage("smooth", {"commands": len(path.commands), "label": label})
    return RouteResult(
        path=path,
        label=label,
        waypoints=waypoints,
        used_fallback=fallback_reason is not None,
        fallback_reason=fallback_reason,
    )


def _fallback(
    source: Endpoint,
    target: Endpoint,
    reason: str,
    config: RouterConfig,
    trace: Optional[RouteTrace],
) -> RouteResult:
    log.debug("Routing fallback (%s) from %s to %s", reason, source.point, target.point)
    waypoints = fallback_path(
        source.point, target.point, source.side, target.side, config.point_tolerance
    )
    if trace is not None:
        trace.add_stage("fallback", {"reason": reason, "waypoints": waypoints})
    return _finish(waypoints, config, trace, reason)


def route(
    source_point: Any,
    source_side: Any,
    target_point: Any,
    target_side: Any,
    obstacles: Any = (),
    exclude_ids: Iterable[Any] = (),
    config: Optional[RouterConfig] = None,
    trace: Optional[RouteTrace] = None,
) -> RouteResult:
    """
    Route one edge around obstacles.

    Args:
        source_point: Source port position, as a Point, (x, y) or {"x", "y"}
        source_side: Side (or side name) the source port faces
        target_point: Target port position
        target_side: Side (or side name) the target port faces
        obstacles: Shapes to avoid, in any form ``normalize_obstacles`` accepts
        exclude_ids: Shape ids to ignore, usually the edge's own two shapes
        config: Routing parameters; defaults to ``DEFAULT_CONFIG``
        trace: Optional trace that receives one record per pipeline stage

    Returns:
        RouteResult with the drawable path, label point and raw waypoints.

    Raises:
        ValueError: If ``config`` is invalid. Geometry problems never raise.

    Example:
        >>> result = route((0, 0), "right", (200, 0), "left", [])
        >>> result.path.to_svg()
        'M 0 0 L 200 0'
    """
    cfg = (config or DEFAULT_CONFIG).validate()

    src_point, src_ok = _sanitize_point(source_point)
    tgt_point, tgt_ok = _sanitize_point(target_point)
    source = Endpoint(src_point, Side.parse(source_side))
    target = Endpoint(tgt_point, Side.parse(target_side))
    if not (src_ok and tgt_ok):
        return _fallback(source, target, INVALID_ENDPOINTS, cfg, trace)

    shapes = normalize_obstacles(
        obstacles,
        exclude_ids,
        cfg.default_obstacle_width,
        cfg.default_obstacle_height,
    )
    if trace is not None:
        trace.add_stage(
            "normalize", {"obstacles": len(shapes), "ids": [o.id for o in shapes]}
        )

    source_approach = Endpoint(approach_point(source, cfg.approach_distance), source.side)
    target_approach = Endpoint(approach_point(target, cfg.approach_distance), target.side)

    builder = GridBuilder(cfg)
    try:
        lattice = builder.build(
            source_approach,
            target_approach,
            shapes,
            extra_points=(source.point, target.point),
        )
        if trace is not None:
            trace.add_stage(
                "lattice",
                {
                    "cols": lattice.cols,
                    "rows": lattice.rows,
                    "origin": lattice.origin,
                    "blocked": lattice.count_blocked(),
                    "start": builder.start_cell,
                    "goal": builder.goal_cell,
                },
            )
        cells = find_path(
            lattice,
            builder.start_cell,
            builder.goal_cell,
            avoid_corners=cfg.avoid_corners,
            turn_penalty=cfg.turn_penalty,
            heuristic_weight=cfg.heuristic_weight,
        )
    except LatticeTooLargeError as exc:
        log.debug("Lattice too large: %s", exc)
        return _fallback(source, target, LATTICE_TOO_LARGE, cfg, trace)
    except RoutingError as exc:
        log.debug("Lattice error: %s", exc)
        return _fallback(source, target, LATTICE_ERROR, cfg, trace)

    if trace is not None:
        trace.add_stage("search", {"cells": len(cells)})
    if not cells:
        return _fallback(source, target, NO_PATH, cfg, trace)

    compressed = compress_path(cells)
    lattice_points = [lattice.to_point(cell) for cell in compressed]
    if trace is not None:
        trace.add_stage("compress", {"cells": compressed, "points": lattice_points})

    waypoints = connect_endpoints(
        source, target, lattice_points, cfg.approach_distance, cfg.point_tolerance
    )
    if trace is not None:
        trace.add_stage("connect", {"waypoints": waypoints})

    return _finish(waypoints, cfg, trace)


def route_edges(
    edges: Iterable[EdgeRequest],
    obstacles: Any = (),
    config: Optional[RouterConfig] = None,
) -> Dict[str, RouteResult]:
    """
    Route several edges against the same set of shapes.

    Each edge is routed independently with its own source and target
    shapes excluded; the shapes are normalized once for the whole batch.

    Args:
        edges: Edges to route
        obstacles: Shapes to avoid, in any form ``normalize_obstacles`` accepts
        config: Routing parameters; defaults to ``DEFAULT_CONFIG``

    Returns:
        Dict mapping edge id to its RouteResult, in input order.

    Example:
        >>> shapes = {"a": (0, 0, 100, 40), "b": (300, 0, 100, 40)}
        >>> edge = EdgeRequest("e1", "a", "b",
        ...                    Endpoint(Point(100, 20), Side.RIGHT),
        ...                    Endpoint(Point(300, 20), Side.LEFT))
        >>> routes = route_edges([edge], shapes)
    """
    cfg = (config or DEFAULT_CONFIG).validate()
    shapes = normalize_obstacles(
        obstacles, (), cfg.default_obstacle_width, cfg.default_obstacle_height
    )

    results: Dict[str, RouteResult] = {}
    for edge in edges:
        results[edge.id] = route(
            edge.source.point,
            edge.source.side,
            edge.target.point,
            edge.target.side,
            shapes,
            exclude_ids=(edge.source_id, edge.target_id),
            config=cfg,
        )
    return results
