"""
Routing configuration.

The module-level constants are the defaults for every knob of the router.
``RouterConfig`` bundles them so callers can tune a single routing call
without touching globals, and the presets capture the two tunings the
editor has shipped with.
"""

from dataclasses import dataclass, replace

# =============================================================================
# ROUTING CONFIGURATION - Adjust these values to tune routing behavior
# =============================================================================

# --- Lattice construction (in pixels) ---

# Edge length of one lattice cell
# Smaller cells route tighter but cost quadratically more search time
CELL_SIZE = 40

# Extra space around each obstacle when computing the lattice bounds
OBSTACLE_MARGIN = 50

# Extra space around the whole routing region so paths can go around
# the outermost obstacles
GRID_MARGIN = 200

# Maximum lattice size along either axis; larger regions use the fallback
MAX_GRID_CELLS = 600

# --- Obstacle zones (in pixels) ---

# Padding around an obstacle that is never walkable
HARD_PADDING = 10

# Padding around an obstacle that is walkable but expensive
SOFT_PADDING = 40

# Cost of stepping into a soft-zone cell (open cells cost 1)
SOFT_WEIGHT = 20

# --- Endpoints and drawing (in pixels) ---

# Length of the straight segment leaving/entering each endpoint
APPROACH_DISTANCE = 20

# Corner rounding radius of the drawn path
CORNER_RADIUS = 2

# Points closer than this are treated as duplicates
POINT_TOLERANCE = 1.0

# --- Shapes without measured dimensions ---

DEFAULT_OBSTACLE_WIDTH = 150
DEFAULT_OBSTACLE_HEIGHT = 50

# =============================================================================


@dataclass(frozen=True)
class RouterConfig:
    """All tuneable router parameters in one place."""

    cell_size: float = CELL_SIZE
    obstacle_margin: float = OBSTACLE_MARGIN
    grid_margin: float = GRID_MARGIN
    max_grid_cells: int = MAX_GRID_CELLS

    hard_padding: float = HARD_PADDING
    use_soft_zone: bool = True
    soft_padding: float = SOFT_PADDING
    soft_weight: float = SOFT_WEIGHT

    approach_distance: float = APPROACH_DISTANCE
    corner_radius: float = CORNER_RADIUS
    point_tolerance: float = POINT_TOLERANCE

    default_obstacle_width: float = DEFAULT_OBSTACLE_WIDTH
    default_obstacle_height: float = DEFAULT_OBSTACLE_HEIGHT

    # Search knobs
    avoid_corners: bool = True  # prefer turns that do not graze a blocked corner cell
    turn_penalty: float = 0.0  # added cost for changing direction
    heuristic_weight: float = 1.0  # >1 trades optimality for speed

    def validate(self) -> "RouterConfig":
        """
        Check the configuration for values the router cannot work with.

        Returns:
            The configuration itself, so calls can be chained.

        Raises:
            ValueError: If any parameter is out of range.
        """
        if not self.cell_size > 0:
            raise ValueError(f"cell_size must be positive, got {self.cell_size}")
        if self.max_grid_cells < 1:
            raise ValueError(
                f"max_grid_cells must be at least 1, got {self.max_grid_cells}"
            )
        for name in (
            "obstacle_margin",
            "grid_margin",
            "hard_padding",
            "soft_padding",
            "approach_distance",
            "corner_radius",
            "point_tolerance",
            "turn_penalty",
        ):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must not be negative, got {value}")
        if self.soft_weight < 1:
            raise ValueError(f"soft_weight must be at least 1, got {self.soft_weight}")
        if self.heuristic_weight < 1:
            raise ValueError(
                f"heuristic_weight must be at least 1, got {self.heuristic_weight}"
            )
        if not (self.default_obstacle_width > 0 and self.default_obstacle_height > 0):
            raise ValueError("default obstacle dimensions must be positive")
        return self

    def with_overrides(self, **changes) -> "RouterConfig":
        """Return a validated copy with some fields replaced."""
        return replace(self, **changes).validate()


DEFAULT_CONFIG = RouterConfig()

# Coarser lattice, wider hard clearance and no buffer zone; rounder corners.
SPACIOUS_CONFIG = RouterConfig(
    cell_size=50,
    grid_margin=150,
    max_grid_cells=500,
    hard_padding=25,
    use_soft_zone=False,
    approach_distance=15,
    corner_radius=8,
)
