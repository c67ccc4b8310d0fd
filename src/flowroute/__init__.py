"""
flowroute - Orthogonal obstacle-avoiding edge routing for node editors

Computes the drawn path of a connection between two ports on a diagram
canvas: axis-aligned, clear of other nodes, leaving and entering each port
along its facing side, and always renderable.

Example:
    >>> from flowroute import route
    >>> result = route((0, 0), "right", (200, 0), "left", obstacles=[])
    >>> result.path.to_svg()
    'M 0 0 L 200 0'
    >>> result.label
    Point(x=100.0, y=0.0)

Debug Mode Example:
    >>> from flowroute import RouteTrace
    >>> trace = RouteTrace()
    >>> result = route((0, 0), "right", (200, 0), "left", [], trace=trace)
    >>> print(trace.summary())
"""

from .config import DEFAULT_CONFIG, SPACIOUS_CONFIG, RouterConfig
from .connector import approach_point, clean_path, connect_endpoints, orthogonal_elbow
from .fallback import fallback_path
from .geometry import normalize_obstacles
from .grid import (
    CellType,
    GridBuilder,
    Lattice,
    LatticeError,
    LatticeTooLargeError,
    RoutingError,
)
from .models import (
    DrawablePath,
    EdgeRequest,
    Endpoint,
    Obstacle,
    PathCommand,
    Point,
    Rect,
    RouteResult,
    Side,
)
from .pathfinding import compress_path, find_path
from .router import route, route_edges
from .smoothing import label_point, smooth_path
from .tracer import PipelineStage, RouteTrace

__version__ = "0.1.0"

__all__ = [
    # Main API
    "route",
    "route_edges",
    # Models
    "Point",
    "Side",
    "Endpoint",
    "Rect",
    "Obstacle",
    "PathCommand",
    "DrawablePath",
    "RouteResult",
    "EdgeRequest",
    # Configuration
    "RouterConfig",
    "DEFAULT_CONFIG",
    "SPACIOUS_CONFIG",
    # Pipeline stages
    "normalize_obstacles",
    "GridBuilder",
    "Lattice",
    "CellType",
    "find_path",
    "compress_path",
    "approach_point",
    "orthogonal_elbow",
    "connect_endpoints",
    "clean_path",
    "smooth_path",
    "label_point",
    "fallback_path",
    # Errors
    "RoutingError",
    "LatticeTooLargeError",
    "LatticeError",
    # Debug/Tracing
    "RouteTrace",
    "PipelineStage",
]
