"""
Routing lattice construction.

The lattice is a coarse grid laid over the part of the canvas that matters
for one edge: both endpoints, every obstacle, and a margin around them.
Obstacles are rasterized into it as unwalkable cells (hard zone) surrounded
by expensive cells (soft zone), which steers the search into open space
without forbidding tight routes.
"""

import math
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .config import DEFAULT_CONFIG, RouterConfig
from .models import Endpoint, Obstacle, Point, Rect

Cell = Tuple[int, int]


class RoutingError(Exception):
    """Base class for recoverable routing failures."""

    pass


class LatticeTooLargeError(RoutingError):
    """The routing region needs more cells than the configured cap."""

    def __init__(self, cols: float, rows: float, limit: int):
        super().__init__(f"Lattice of {cols}x{rows} cells exceeds cap of {limit}")
        self.cols = cols
        self.rows = rows
        self.limit = limit


class LatticeError(RoutingError):
    """The lattice is in a state the search cannot work with."""

    pass


class CellType(Enum):
    """Classification of a lattice cell."""

    FREE = 0
    WEIGHTED = 1
    BLOCKED = 2


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (no banker's rounding)."""
    return math.floor(value + 0.5)


class Lattice:
    """
    Weighted walkability grid over a rectangular canvas region.

    Cell ``(i, j)`` is centred on canvas point ``origin + (i, j) * cell_size``.
    Storage is flat and row-major.
    """

    def __init__(self, origin: Point, cols: int, rows: int, cell_size: float):
        """
        Initialize an all-walkable lattice with unit weights.

        Args:
            origin: Canvas coordinate of cell (0, 0)
            cols: Number of cells along x
            rows: Number of cells along y
            cell_size: Edge length of a cell in pixels
        """
        if cols < 1 or rows < 1:
            raise LatticeError(f"Lattice must have at least one cell, got {cols}x{rows}")
        self.origin = origin
        self.cols = cols
        self.rows = rows
        self.cell_size = cell_size
        self.walkable: List[bool] = [True] * (cols * rows)
        self.weights: List[float] = [1.0] * (cols * rows)

    def in_bounds(self, i: int, j: int) -> bool:
        return 0 <= i < self.cols and 0 <= j < self.rows

    def index(self, i: int, j: int) -> int:
        return j * self.cols + i

    def is_walkable(self, i: int, j: int) -> bool:
        """Check if a cell can be stepped on; out-of-bounds cells cannot."""
        return self.in_bounds(i, j) and self.walkable[j * self.cols + i]

    def weight(self, i: int, j: int) -> float:
        return self.weights[j * self.cols + i]

    def set_walkable(self, i: int, j: int, walkable: bool) -> None:
        self.walkable[j * self.cols + i] = walkable

    def set_weight(self, i: int, j: int, weight: float) -> None:
        self.weights[j * self.cols + i] = weight

    def cell_type(self, i: int, j: int) -> CellType:
        """Classify a cell for inspection and debugging."""
        if not self.is_walkable(i, j):
            return CellType.BLOCKED
        if self.weight(i, j) > 1:
            return CellType.WEIGHTED
        return CellType.FREE

    def to_cell(self, point: Point) -> Cell:
        """Quantize a canvas point to the nearest cell (may be out of bounds)."""
        return (
            round_half_up((point.x - self.origin.x) / self.cell_size),
            round_half_up((point.y - self.origin.y) / self.cell_size),
        )

    def to_point(self, cell: Cell) -> Point:
        """Canvas coordinate of a cell centre."""
        return Point(
            self.origin.x + cell[0] * self.cell_size,
            self.origin.y + cell[1] * self.cell_size,
        )

    def snap(self, endpoint: Endpoint) -> Cell:
        """
        Quantize an approach point, rounding outward along its facing axis.

        Along the side's axis the coordinate is rounded away from the owning
        shape (ceil or floor); across it, and for endpoints without a side,
        to the nearest cell. When the outward cell is blocked but the
        nearest one is walkable, the nearest cell is used instead.
        """
        fx = (endpoint.point.x - self.origin.x) / self.cell_size
        fy = (endpoint.point.y - self.origin.y) / self.cell_size
        nearest = (round_half_up(fx), round_half_up(fy))
        if endpoint.side is None:
            return nearest
        i, j = nearest
        dx, dy = endpoint.side.direction
        if dx > 0:
            i = math.ceil(fx)
        elif dx < 0:
            i = math.floor(fx)
        if dy > 0:
            j = math.ceil(fy)
        elif dy < 0:
            j = math.floor(fy)
        if (
            self.in_bounds(i, j)
            and not self.is_walkable(i, j)
            and self.is_walkable(*nearest)
        ):
            return nearest
        return (i, j)

    def cell_range(self, rect: Rect) -> Optional[Tuple[int, int, int, int]]:
        """
        Cells covered by a rectangle, inclusive of its rounded edges.

        Returns:
            (i1, j1, i2, j2) clipped to the lattice, or None if the rectangle
            lies entirely outside it.
        """
        i1, j1 = self.to_cell(Point(rect.x, rect.y))
        i2, j2 = self.to_cell(Point(rect.x2, rect.y2))
        i1, j1 = max(0, i1), max(0, j1)
        i2, j2 = min(self.cols - 1, i2), min(self.rows - 1, j2)
        if i1 > i2 or j1 > j2:
            return None
        return i1, j1, i2, j2

    def mark_weighted(self, rect: Rect, weight: float) -> None:
        """Raise the weight of walkable cells under a rectangle."""
        cells = self.cell_range(rect)
        if cells is None:
            return
        i1, j1, i2, j2 = cells
        for j in range(j1, j2 + 1):
            row = j * self.cols
            for i in range(i1, i2 + 1):
                if self.walkable[row + i]:
                    self.weights[row + i] = weight

    def mark_blocked(self, rect: Rect) -> None:
        """Make every cell under a rectangle unwalkable."""
        cells = self.cell_range(rect)
        if cells is None:
            return
        i1, j1, i2, j2 = cells
        for j in range(j1, j2 + 1):
            row = j * self.cols
            for i in range(i1, i2 + 1):
                self.walkable[row + i] = False

    def count_blocked(self) -> int:
        return self.walkable.count(False)

    def __repr__(self) -> str:
        return (
            f"Lattice(origin={tuple(self.origin)}, cols={self.cols}, "
            f"rows={self.rows}, cell_size={self.cell_size})"
        )


class GridBuilder:
    """
    Builds the routing lattice for one edge.

    Usage:
        >>> builder = GridBuilder(config)
        >>> lattice = builder.build(source, target, obstacles)
        >>> start, goal = builder.start_cell, builder.goal_cell
    """

    def __init__(self, config: RouterConfig = DEFAULT_CONFIG):
        self.config = config
        self.start_cell: Optional[Cell] = None
        self.goal_cell: Optional[Cell] = None

    def compute_bounds(
        self, points: Iterable[Point], obstacles: Iterable[Obstacle]
    ) -> Rect:
        """Union of the points and margin-expanded obstacles, plus outer margin."""
        bounds: Optional[Rect] = None
        for point in points:
            rect = Rect.around(point)
            bounds = rect if bounds is None else bounds.union(rect)
        for obstacle in obstacles:
            rect = obstacle.bounds.expand(self.config.obstacle_margin)
            bounds = rect if bounds is None else bounds.union(rect)
        if bounds is None:
            raise LatticeError("Cannot build a lattice without any geometry")
        return bounds.expand(self.config.grid_margin)

    def dimensions(self, bounds: Rect) -> Tuple[int, int]:
        """
        Lattice size in cells for a bounds rectangle.

        Raises:
            LatticeTooLargeError: If the extent overflowed to infinity.
        """
        cell = self.config.cell_size
        width = bounds.width / cell
        height = bounds.height / cell
        if not (math.isfinite(width) and math.isfinite(height)):
            raise LatticeTooLargeError(width, height, self.config.max_grid_cells)
        return max(1, math.ceil(width)), max(1, math.ceil(height))

    def rasterize(self, lattice: Lattice, obstacles: Iterable[Obstacle]) -> None:
        """Mark the soft and hard zones of every obstacle."""
        cfg = self.config
        for obstacle in obstacles:
            bounds = obstacle.bounds
            if cfg.use_soft_zone:
                lattice.mark_weighted(bounds.expand(cfg.soft_padding), cfg.soft_weight)
            lattice.mark_blocked(bounds.expand(cfg.hard_padding))

    def build(
        self,
        source: Endpoint,
        target: Endpoint,
        obstacles: List[Obstacle],
        extra_points: Iterable[Point] = (),
    ) -> Lattice:
        """
        Build the lattice for routing between two approach points.

        Args:
            source: Source approach point with its facing side
            target: Target approach point with its facing side
            obstacles: Normalized obstacles (own shapes already excluded)
            extra_points: Further points the lattice must cover, such as the
                literal endpoints behind the approach points

        Returns:
            Lattice with obstacles rasterized and the start and goal cells
            forced walkable. ``start_cell`` and ``goal_cell`` are set.

        Raises:
            LatticeTooLargeError: If either dimension exceeds the cap.
            LatticeError: If the start or goal cell is outside the lattice.
        """
        points = [source.point, target.point, *extra_points]
        bounds = self.compute_bounds(points, obstacles)
        cols, rows = self.dimensions(bounds)
        limit = self.config.max_grid_cells
        if cols > limit or rows > limit:
            raise LatticeTooLargeError(cols, rows, limit)

        lattice = Lattice(Point(bounds.x, bounds.y), cols, rows, self.config.cell_size)
        self.rasterize(lattice, obstacles)

        self.start_cell = lattice.snap(source)
        self.goal_cell = lattice.snap(target)
        for cell in (self.start_cell, self.goal_cell):
            if not lattice.in_bounds(*cell):
                raise LatticeError(f"Cell {cell} is outside {lattice!r}")
            lattice.set_walkable(cell[0], cell[1], True)

        return lattice
