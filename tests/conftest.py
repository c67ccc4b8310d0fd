"""Pytest configuration and shared fixtures for flowroute tests."""

import pytest

from flowroute import Endpoint, Lattice, Obstacle, Point, RouterConfig, Side


@pytest.fixture
def config():
    """Default router configuration."""
    return RouterConfig()


@pytest.fixture
def blocking_obstacle():
    """A tall block standing between (0, 0) and (200, 0)."""
    return Obstacle("block", Point(60, -100), 80, 200)


@pytest.fixture
def open_lattice():
    """5x5 lattice with unit cells and nothing blocked."""
    return Lattice(Point(0, 0), 5, 5, 1)


@pytest.fixture
def walled_lattice():
    """7x5 lattice with a wall in column 3 open only at the bottom row."""
    lattice = Lattice(Point(0, 0), 7, 5, 1)
    for j in range(4):
        lattice.set_walkable(3, j, False)
    return lattice


@pytest.fixture
def enclosed_lattice():
    """7x7 lattice whose centre cell is walled in on all sides."""
    lattice = Lattice(Point(0, 0), 7, 7, 1)
    for i in range(2, 5):
        for j in range(2, 5):
            if (i, j) != (3, 3):
                lattice.set_walkable(i, j, False)
    return lattice


@pytest.fixture
def horizontal_endpoints():
    """Source facing right at the origin, target facing left 200px away."""
    return Endpoint(Point(0, 0), Side.RIGHT), Endpoint(Point(200, 0), Side.LEFT)


@pytest.fixture
def react_flow_nodes():
    """Nodes as a React Flow style editor reports them."""
    return [
        {
            "id": "a",
            "position": {"x": 0, "y": 0},
            "measured": {"width": 100, "height": 40},
        },
        {
            "id": "b",
            "position": {"x": 400, "y": 0},
            "positionAbsolute": {"x": 400, "y": 200},
            "width": 120,
            "height": 60,
        },
        {"id": "c", "position": {"x": 200, "y": 300}},
    ]
