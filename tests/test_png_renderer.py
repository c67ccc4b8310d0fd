"""Tests for the PNG renderer module."""

import os
import tempfile

from PIL import Image

from flowroute import GridBuilder, Obstacle, Point, route
from flowroute.connector import approach_point
from flowroute.models import Endpoint, Side
from flowroute.png_renderer import RoutePNGRenderer, label_pixel, render_to_png


def blocked_route():
    block = Obstacle("block", Point(60, -100), 80, 200)
    result = route((0, 0), "right", (200, 0), "left", [block])
    return result, [block]


class TestRoutePNGRenderer:
    """Tests for RoutePNGRenderer class."""

    def test_render_simple(self):
        """Render a straight route to PNG."""
        result = route((0, 0), "right", (200, 0), "left", [])
        renderer = RoutePNGRenderer()

        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            output_path = f.name

        try:
            returned = renderer.render(result, [], output_path)
            assert returned == output_path
            assert os.path.exists(output_path)
            assert os.path.getsize(output_path) > 0
        finally:
            if os.path.exists(output_path):
                os.unlink(output_path)

    def test_image_size_follows_scale(self):
        """Image size is the drawn extent plus margins, times the scale."""
        result = route((0, 0), "right", (200, 0), "left", [])

        img = RoutePNGRenderer(scale=1, margin=10).render_image(result)
        assert img.size == (220, 20)

        img = RoutePNGRenderer(scale=3, margin=10).render_image(result)
        assert img.size == (660, 60)

    def test_obstacles_drawn(self):
        """Obstacle interiors use the obstacle fill colour."""
        result, obstacles = blocked_route()
        renderer = RoutePNGRenderer(scale=1, margin=0, show_lattice=False)
        img = renderer.render_image(result, obstacles)

        # The view starts at the leftmost waypoint and topmost drawn point
        xs = [p.x for p in result.waypoints] + [60, 140]
        ys = [p.y for p in result.waypoints] + [-100, 100]
        px = int(100 - min(xs))
        py = int(0 - min(ys))
        assert img.getpixel((px, py)) == renderer.obstacle_fill

    def test_label_marker(self):
        """The label anchor is marked in the label colour."""
        result, obstacles = blocked_route()
        renderer = RoutePNGRenderer(scale=2, margin=40, show_lattice=False)
        img = renderer.render_image(result, obstacles)

        x, y = label_pixel(result, obstacles, scale=2, margin=40)
        assert img.getpixel((int(x), int(y))) == renderer.label_color

    def test_lattice_shading(self):
        """Blocked lattice cells are shaded when a lattice is given."""
        block = Obstacle("block", Point(60, -100), 80, 200)
        source = Endpoint(Point(0, 0), Side.RIGHT)
        target = Endpoint(Point(200, 0), Side.LEFT)
        lattice = GridBuilder().build(
            Endpoint(approach_point(source), source.side),
            Endpoint(approach_point(target), target.side),
            [block],
        )
        result = route(source.point, source.side, target.point, target.side, [block])

        shaded = RoutePNGRenderer(scale=1).render_image(result, [block], lattice)
        plain = RoutePNGRenderer(scale=1, show_lattice=False).render_image(
            result, [block], lattice
        )
        assert shaded.size[0] > plain.size[0]
        colors = {c for _, c in shaded.getcolors(maxcolors=1 << 16)}
        assert RoutePNGRenderer().blocked_color in colors

    def test_fallback_drawn_in_red(self):
        """Fallback routes use the fallback colour."""
        result = route((float("nan"), 0), "right", (200, 0), "left", [])
        renderer = RoutePNGRenderer(scale=1, margin=10, show_lattice=False)
        img = renderer.render_image(result)
        colors = {c for _, c in img.getcolors(maxcolors=1 << 16)}
        assert renderer.fallback_color in colors
        assert renderer.line_color not in colors


class TestRenderToPng:
    """Tests for render_to_png convenience function."""

    def test_render_to_png(self):
        """Test convenience function."""
        result, obstacles = blocked_route()

        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            output_path = f.name

        try:
            render_to_png(result, obstacles, output_path, scale=1)
            assert os.path.exists(output_path)
            with Image.open(output_path) as img:
                assert img.format == "PNG"
        finally:
            if os.path.exists(output_path):
                os.unlink(output_path)
