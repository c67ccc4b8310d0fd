"""
Debug utilities for flowroute.

This module provides tools for understanding why the router produced a
particular path.

Key Components:
- render_lattice: ASCII picture of a lattice, optionally with a path
- lattice_to_graph: The lattice as a networkx graph
- reference_path_cost: Independent shortest-path cost computed by networkx,
  for checking the router's own search
- LatticeInspector: Convenience wrapper bundling the above

Usage:
    >>> from flowroute.debug import LatticeInspector
    >>> inspector = LatticeInspector(lattice)
    >>> print(inspector.render(path_cells, start, goal))
    >>> inspector.reference_cost(start, goal)
"""

from typing import Iterable, Optional, Sequence

import networkx as nx

from .grid import Cell, CellType, Lattice

CELL_CHARS = {
    CellType.FREE: ".",
    CellType.WEIGHTED: "+",
    CellType.BLOCKED: "#",
}
PATH_CHAR = "*"
START_CHAR = "S"
GOAL_CHAR = "G"


def render_lattice(
    lattice: Lattice,
    cells: Optional[Iterable[Cell]] = None,
    start: Optional[Cell] = None,
    goal: Optional[Cell] = None,
) -> str:
    """
    Render a lattice as text, one character per cell.

    Args:
        lattice: Lattice to render
        cells: Optional path cells, drawn with ``*``
        start: Optional start cell, drawn with ``S``
        goal: Optional goal cell, drawn with ``G``

    Returns:
        Multi-line string with ``lattice.rows`` lines.
    """
    overlay = {}
    for cell in cells or ():
        overlay[tuple(cell)] = PATH_CHAR
    if start is not None:
        overlay[tuple(start)] = START_CHAR
    if goal is not None:
        overlay[tuple(goal)] = GOAL_CHAR

    lines = []
    for j in range(lattice.rows):
        row = []
        for i in range(lattice.cols):
            char = overlay.get((i, j))
            if char is None:
                char = CELL_CHARS[lattice.cell_type(i, j)]
            row.append(char)
        lines.append("".join(row))
    return "\n".join(lines)


def lattice_to_graph(lattice: Lattice) -> nx.DiGraph:
    """
    Build a directed graph of the walkable cells.

    Each 4-neighbour move between walkable cells becomes an edge whose
    ``weight`` is the destination cell's weight.
    """
    graph = nx.DiGraph()
    for j in range(lattice.rows):
        for i in range(lattice.cols):
            if lattice.is_walkable(i, j):
                graph.add_node((i, j))

    for i, j in list(graph.nodes):
        for di, dj in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            ni, nj = i + di, j + dj
            if lattice.is_walkable(ni, nj):
                graph.add_edge((i, j), (ni, nj), weight=lattice.weight(ni, nj))
    return graph


def _manhattan(a: Cell, b: Cell) -> float:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def reference_path_cost(lattice: Lattice, start: Cell, goal: Cell) -> Optional[float]:
    """
    Shortest path cost from start to goal computed with networkx A*.

    This ignores corner avoidance and turn penalties, so it is a lower
    bound on (and, on lattices where neither applies, equal to) the cost
    of the router's own path.

    Returns:
        The cost, or None if the goal is unreachable.
    """
    graph = lattice_to_graph(lattice)
    if start not in graph or goal not in graph:
        return None
    try:
        return nx.astar_path_length(
            graph, start, goal, heuristic=_manhattan, weight="weight"
        )
    except nx.NetworkXNoPath:
        return None


def path_cost(lattice: Lattice, cells: Sequence[Cell]) -> float:
    """Sum of destination weights along a cell path."""
    return sum(lattice.weight(i, j) for i, j in cells[1:])


class LatticeInspector:
    """Inspection helpers bound to one lattice."""

    def __init__(self, lattice: Lattice):
        self.lattice = lattice
        self._graph: Optional[nx.DiGraph] = None

    @property
    def graph(self) -> nx.DiGraph:
        if self._graph is None:
            self._graph = lattice_to_graph(self.lattice)
        return self._graph

    def render(
        self,
        cells: Optional[Iterable[Cell]] = None,
        start: Optional[Cell] = None,
        goal: Optional[Cell] = None,
    ) -> str:
        return render_lattice(self.lattice, cells, start, goal)

    def reachable(self, start: Cell, goal: Cell) -> bool:
        """Check if goal can be reached from start at all."""
        if start not in self.graph or goal not in self.graph:
            return False
        return nx.has_path(self.graph, start, goal)

    def reference_cost(self, start: Cell, goal: Cell) -> Optional[float]:
        return reference_path_cost(self.lattice, start, goal)

    def cost(self, cells: Sequence[Cell]) -> float:
        return path_cost(self.lattice, cells)

    def count(self, cell_type: CellType) -> int:
        """Number of cells of the given type."""
        lattice = self.lattice
        return sum(
            1
            for j in range(lattice.rows)
            for i in range(lattice.cols)
            if lattice.cell_type(i, j) == cell_type
        )
