"""A* search over the routing lattice.

Supports:
  - 4-connected moves only, so every result is axis-aligned
  - Per-cell weights (cost of a move = weight of the destination cell)
  - Corner avoidance: turns that wrap tightly around a blocked cell are
    avoided whenever a path without them exists
  - Optional turn penalty to prefer straight runs
"""

import heapq
from typing import Dict, List, Tuple

from .grid import Cell, Lattice, LatticeError

# Manhattan directions: (dx, dy); order fixes tie-breaking
DIRS = ((1, 0), (-1, 0), (0, 1), (0, -1))
NO_DIRECTION = -1


def find_path(
    lattice: Lattice,
    start: Cell,
    goal: Cell,
    *,
    avoid_corners: bool = True,
    turn_penalty: float = 0.0,
    heuristic_weight: float = 1.0,
) -> List[Cell]:
    """
    Weighted A* from ``start`` to ``goal``.

    The search state is (cell, incoming direction) so that turns can be
    checked and penalized.

    Args:
        lattice: Lattice to search; start and goal should be walkable
        start: Start cell (i, j)
        goal: Goal cell (i, j)
        avoid_corners: Reject a turn when the cell inside the corner is
            blocked. If that leaves the goal unreachable, the search is
            repeated without the restriction, so narrow corridors still
            route.
        turn_penalty: Extra cost added when the direction changes
        heuristic_weight: Multiplier on the Manhattan heuristic

    Returns:
        Cells from start to goal inclusive, ``[start]`` when they coincide,
        or an empty list if the goal is unreachable.

    Raises:
        LatticeError: If start or goal lies outside the lattice.
    """
    for cell in (start, goal):
        if not lattice.in_bounds(*cell):
            raise LatticeError(f"Cell {cell} is outside {lattice!r}")
    if start == goal:
        return [start]

    path = _search(lattice, start, goal, avoid_corners, turn_penalty, heuristic_weight)
    if not path and avoid_corners:
        path = _search(lattice, start, goal, False, turn_penalty, heuristic_weight)
    return path


def _search(
    lattice: Lattice,
    start: Cell,
    goal: Cell,
    avoid_corners: bool,
    turn_penalty: float,
    heuristic_weight: float,
) -> List[Cell]:
    cols = lattice.cols
    rows = lattice.rows
    walkable = lattice.walkable
    weights = lattice.weights
    gx, gy = goal

    def blocked(i: int, j: int) -> bool:
        # Outside the lattice counts as open space for the corner check
        return 0 <= i < cols and 0 <= j < rows and not walkable[j * cols + i]

    sx, sy = start
    start_key = (sy * cols + sx) * 5 + (NO_DIRECTION + 1)
    h0 = (abs(sx - gx) + abs(sy - gy)) * heuristic_weight
    counter = 0
    heap: List[Tuple[float, int, int, int, int]] = [(h0, counter, sx, sy, NO_DIRECTION)]
    g_scores: Dict[int, float] = {start_key: 0.0}
    parents: Dict[int, int] = {}
    closed = set()

    while heap:
        _f, _cnt, cx, cy, direction = heapq.heappop(heap)
        key = (cy * cols + cx) * 5 + (direction + 1)
        if key in closed:
            continue
        closed.add(key)

        if cx == gx and cy == gy:
            return _reconstruct(parents, key, cols)

        cur_g = g_scores[key]

        for d, (dx, dy) in enumerate(DIRS):
            if direction != NO_DIRECTION:
                pdx, pdy = DIRS[direction]
                if dx == -pdx and dy == -pdy:
                    continue
            nx, ny = cx + dx, cy + dy
            if not (0 <= nx < cols and 0 <= ny < rows):
                continue
            nidx = ny * cols + nx
            if not walkable[nidx]:
                continue

            is_turn = direction != NO_DIRECTION and direction != d
            if is_turn and avoid_corners:
                pdx, pdy = DIRS[direction]
                if blocked(cx - pdx + dx, cy - pdy + dy):
                    continue

            nkey = nidx * 5 + (d + 1)
            if nkey in closed:
                continue
            tentative_g = cur_g + weights[nidx] + (turn_penalty if is_turn else 0.0)
            if nkey not in g_scores or tentative_g < g_scores[nkey]:
                g_scores[nkey] = tentative_g
                parents[nkey] = key
                h = (abs(nx - gx) + abs(ny - gy)) * heuristic_weight
                counter += 1
                heapq.heappush(heap, (tentative_g + h, counter, nx, ny, d))

    return []


def _reconstruct(parents: Dict[int, int], key: int, cols: int) -> List[Cell]:
    path = []
    while True:
        idx = key // 5
        path.append((idx % cols, idx // cols))
        if key not in parents:
            break
        key = parents[key]
    path.reverse()
    return path


def compress_path(path: List[Cell]) -> List[Cell]:
    """
    Collapse runs of collinear cells to their two ends.

    Keeps the first and last cells and every cell where the direction of
    travel changes.
    """
    if len(path) < 3:
        return list(path)

    compressed = [path[0]]
    last_dx = path[1][0] - path[0][0]
    last_dy = path[1][1] - path[0][1]

    for i in range(2, len(path)):
        dx = path[i][0] - path[i - 1][0]
        dy = path[i][1] - path[i - 1][1]
        if (dx, dy) != (last_dx, last_dy):
            compressed.append(path[i - 1])
            last_dx, last_dy = dx, dy

    compressed.append(path[-1])
    return compressed
