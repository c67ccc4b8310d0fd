"""Tests for the routing entry points."""

import logging
import math

import pytest

from flowroute import (
    SPACIOUS_CONFIG,
    EdgeRequest,
    Endpoint,
    Obstacle,
    Point,
    RouterConfig,
    RouteTrace,
    Side,
    route,
    route_edges,
)
from flowroute.router import INVALID_ENDPOINTS, LATTICE_TOO_LARGE


class TestStraightRoute:
    """Tests for unobstructed routes."""

    def test_straight_horizontal(self):
        """Facing ports on the same line give one straight segment."""
        result = route((0, 0), "right", (200, 0), "left", [])

        assert not result.used_fallback
        assert result.waypoints == [Point(0, 0), Point(200, 0)]
        assert result.path.to_svg() == "M 0 0 L 200 0"
        assert result.label == Point(100.0, 0.0)
        assert result.as_tuple() == ("M 0 0 L 200 0", 100.0, 0.0)

    def test_straight_vertical(self):
        """Vertical ports on the same line give one straight segment."""
        result = route(Point(0, 0), Side.BOTTOM, Point(0, 200), Side.TOP)
        assert result.waypoints == [Point(0, 0), Point(0, 200)]
        assert result.path.to_svg() == "M 0 0 L 0 200"

    def test_spacious_preset(self):
        """The spacious preset routes the same straight edge."""
        result = route((0, 0), "right", (200, 0), "left", [], config=SPACIOUS_CONFIG)
        assert result.waypoints == [Point(0, 0), Point(200, 0)]

    def test_point_forms(self):
        """Endpoints may be tuples, mappings or points."""
        a = route({"x": 0, "y": 0}, "right", [200, 0], "left")
        b = route(Point(0, 0), Side.RIGHT, Point(200, 0), Side.LEFT)
        assert a.waypoints == b.waypoints


class TestObstacleRoute:
    """Tests for routes around obstacles."""

    def test_detours_around_block(self, blocking_obstacle):
        """The path leaves the straight line to get around the block."""
        result = route((0, 0), "right", (200, 0), "left", [blocking_obstacle])

        assert not result.used_fallback
        assert result.waypoints[0] == Point(0, 0)
        assert result.waypoints[-1] == Point(200, 0)
        assert any(abs(p.y) > 100 for p in result.waypoints)
        for a, b in zip(result.waypoints, result.waypoints[1:]):
            assert a.x == b.x or a.y == b.y
            assert not blocking_obstacle.bounds.intersects_segment(a, b)

    def test_excluded_obstacle_ignored(self, blocking_obstacle):
        """Excluded shapes do not affect the path."""
        result = route(
            (0, 0), "right", (200, 0), "left", [blocking_obstacle], exclude_ids=["block"]
        )
        assert result.waypoints == [Point(0, 0), Point(200, 0)]

    def test_node_dicts_match_obstacles(self, blocking_obstacle):
        """Editor node dicts route the same as Obstacle records."""
        node = {
            "id": "block",
            "position": {"x": 60, "y": -100},
            "measured": {"width": 80, "height": 200},
        }
        from_dict = route((0, 0), "right", (200, 0), "left", [node])
        from_obstacle = route((0, 0), "right", (200, 0), "left", [blocking_obstacle])
        assert from_dict.waypoints == from_obstacle.waypoints

    def test_deterministic(self, blocking_obstacle):
        """Repeated calls give identical results."""
        first = route((0, 0), "right", (200, 0), "left", [blocking_obstacle])
        second = route((0, 0), "right", (200, 0), "left", [blocking_obstacle])
        assert first.path.to_svg() == second.path.to_svg()
        assert first.waypoints == second.waypoints
        assert first.label == second.label


class TestTightLayouts:
    """Routes that pass close to obstacles."""

    def test_corridor_routed_instead_of_fallback(self):
        """A one-cell corridor with a bend next to a wall is routed."""
        config = RouterConfig(
            cell_size=10,
            obstacle_margin=0,
            grid_margin=0,
            hard_padding=0,
            use_soft_zone=False,
            approach_distance=0,
        )
        wall = Obstacle("wall", Point(0, 6), 14, 19)
        marker = Obstacle("marker", Point(25, 0), 1, 1)

        result = route((0, 0), "right", (20, 20), "top", [wall, marker], config=config)

        assert not result.used_fallback
        assert result.waypoints == [Point(0, 0), Point(20, 0), Point(20, 20)]
        for a, b in zip(result.waypoints, result.waypoints[1:]):
            assert not wall.bounds.intersects_segment(a, b)

    def test_port_close_to_obstacle(self, config):
        """A port just short of another shape does not enter its clearance."""
        obstacle = Obstacle("o", Point(155, 274), 86, 98)
        clearance = obstacle.bounds.expand(config.hard_padding)

        result = route((102, 360), "right", (-285, -371), "bottom", [obstacle])

        assert not result.used_fallback
        assert result.waypoints[:3] == [Point(102, 360), Point(122, 360), Point(115, 360)]
        assert result.waypoints[-1] == Point(-285, -371)
        for a, b in zip(result.waypoints, result.waypoints[1:]):
            assert a.x == b.x or a.y == b.y
            assert not clearance.intersects_segment(a, b)


class TestFallbacks:
    """Tests for the fallback paths."""

    def test_non_finite_endpoint(self):
        """NaN coordinates are replaced and the fallback used."""
        result = route((float("nan"), 0), "right", (100, 50), "left", [])

        assert result.used_fallback
        assert result.fallback_reason == INVALID_ENDPOINTS
        assert result.waypoints == [
            Point(0, 0),
            Point(50, 0),
            Point(50, 50),
            Point(100, 50),
        ]
        assert all(math.isfinite(v) for p in result.waypoints for v in p)

    def test_missing_endpoint(self):
        """An endpoint that cannot be read falls back from the origin."""
        result = route(None, "right", (100, 0), "left", [])
        assert result.fallback_reason == INVALID_ENDPOINTS
        assert result.waypoints[0] == Point(0, 0)
        assert not result.path.is_empty

    def test_infinite_endpoint(self):
        """Infinite coordinates are replaced too."""
        result = route((0, 0), "bottom", (float("inf"), 100), "top", [])
        assert result.fallback_reason == INVALID_ENDPOINTS
        assert result.waypoints[-1] == Point(0, 100)

    def test_lattice_too_large(self):
        """A huge routing region falls back."""
        far = Obstacle("far", Point(100000, 100000), 100, 100)
        result = route((0, 0), "right", (200, 100), "left", [far])

        assert result.used_fallback
        assert result.fallback_reason == LATTICE_TOO_LARGE
        assert result.waypoints[0] == Point(0, 0)
        assert result.waypoints[-1] == Point(200, 100)
        assert result.path.to_svg().startswith("M 0 0")

    def test_overflowing_coordinates(self):
        """Finite coordinates too large to measure fall back instead of raising."""
        result = route((-1e308, 0), "right", (1e308, 0), "left", [])

        assert result.fallback_reason == LATTICE_TOO_LARGE
        assert result.waypoints == [Point(-1e308, 0), Point(1e308, 0)]
        assert result.label == Point(0.0, 0.0)

    def test_overflowing_obstacle(self):
        """An obstacle reaching past the float range falls back too."""
        huge = Obstacle("huge", Point(1e308, 0), 1e308, 10)
        result = route((0, 0), "right", (200, 0), "left", [huge])

        assert result.fallback_reason == LATTICE_TOO_LARGE
        assert result.waypoints == [Point(0, 0), Point(200, 0)]

    def test_fallback_logged(self, caplog):
        """Falling back is logged at debug level."""
        with caplog.at_level(logging.DEBUG, logger="flowroute"):
            route((float("nan"), 0), "right", (100, 0), "left", [])
        assert "invalid_endpoints" in caplog.text


class TestConfigAndTrace:
    """Tests for configuration and tracing hooks."""

    def test_invalid_config_raises(self):
        """Invalid configurations are rejected up front."""
        with pytest.raises(ValueError):
            route((0, 0), "right", (200, 0), "left", [], config=RouterConfig(cell_size=0))

    def test_trace_stages(self):
        """A successful route records every pipeline stage."""
        trace = RouteTrace()
        route((0, 0), "right", (200, 0), "left", [], trace=trace)

        assert trace.stage_names == [
            "normalize",
            "lattice",
            "search",
            "compress",
            "connect",
            "smooth",
        ]
        lattice = trace.get_stage("lattice").data
        assert (lattice["cols"], lattice["rows"]) == (15, 10)
        assert lattice["start"] == (6, 5)
        assert lattice["goal"] == (9, 5)
        assert not trace.used_fallback

    def test_trace_fallback(self):
        """A fallback route records the reason."""
        trace = RouteTrace()
        route((float("nan"), 0), "right", (100, 0), "left", [], trace=trace)

        assert trace.used_fallback
        assert trace.get_stage("fallback").data["reason"] == INVALID_ENDPOINTS
        assert trace.stage_names[-1] == "smooth"

    def test_trace_does_not_change_result(self, blocking_obstacle):
        """Tracing is observation only."""
        traced = route(
            (0, 0), "right", (200, 0), "left", [blocking_obstacle], trace=RouteTrace()
        )
        plain = route((0, 0), "right", (200, 0), "left", [blocking_obstacle])
        assert traced.waypoints == plain.waypoints


class TestRouteEdges:
    """Tests for batch routing."""

    def test_matches_single_routes(self):
        """Each edge is routed as route() would, with its own shapes excluded."""
        shapes = {
            "a": (-100, -20, 100, 40),
            "b": (200, -20, 100, 40),
            "c": (60, -100, 80, 200),
        }
        edges = [
            EdgeRequest(
                "e1",
                "a",
                "b",
                Endpoint(Point(0, 0), Side.RIGHT),
                Endpoint(Point(200, 0), Side.LEFT),
            ),
            EdgeRequest(
                "e2",
                "c",
                "b",
                Endpoint(Point(100, 100), Side.BOTTOM),
                Endpoint(Point(250, 20), Side.BOTTOM),
            ),
        ]

        results = route_edges(edges, shapes)

        assert list(results) == ["e1", "e2"]
        for edge in edges:
            single = route(
                edge.source.point,
                edge.source.side,
                edge.target.point,
                edge.target.side,
                shapes,
                exclude_ids=[edge.source_id, edge.target_id],
            )
            assert results[edge.id].waypoints == single.waypoints

    def test_empty_batch(self):
        """No edges give no results."""
        assert route_edges([], []) == {}
