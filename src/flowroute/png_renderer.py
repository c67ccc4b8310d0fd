"""
PNG debug renderer.

Draws a single routing call (the obstacles, optionally the lattice zones,
the routed polyline and its label anchor) to an image, so routing
problems can be inspected visually.
"""

import math
from typing import Iterable, List, Optional, Tuple

from PIL import Image, ImageDraw

from .geometry import normalize_obstacles
from .grid import CellType, Lattice
from .models import Obstacle, Point, Rect, RouteResult


class RoutePNGRenderer:
    """Renders a routed edge and its surroundings as a PNG image."""

    def __init__(
        self,
        scale: int = 2,  # For high-resolution output
        margin: int = 40,
        line_width: int = 2,
        show_lattice: bool = True,
    ):
        self.scale = scale
        self.margin = margin
        self.line_width = line_width
        self.show_lattice = show_lattice

        # Colors
        self.bg_color = (255, 255, 255)
        self.obstacle_fill = (235, 235, 235)
        self.obstacle_outline = (0, 0, 0)
        self.blocked_color = (200, 200, 200)
        self.weighted_color = (245, 230, 200)
        self.line_color = (0, 0, 0)
        self.fallback_color = (200, 0, 0)
        self.label_color = (0, 90, 200)

    def _view_bounds(
        self,
        result: RouteResult,
        obstacles: List[Obstacle],
        lattice: Optional[Lattice],
    ) -> Rect:
        """Canvas region covered by everything that gets drawn."""
        bounds = Rect.around(result.waypoints[0]) if result.waypoints else None
        for point in result.waypoints[1:]:
            bounds = bounds.union(Rect.around(point))
        for obstacle in obstacles:
            bounds = obstacle.bounds if bounds is None else bounds.union(obstacle.bounds)
        if lattice is not None and self.show_lattice:
            half = lattice.cell_size / 2
            extent = Rect(
                lattice.origin.x - half,
                lattice.origin.y - half,
                lattice.cols * lattice.cell_size,
                lattice.rows * lattice.cell_size,
            )
            bounds = extent if bounds is None else bounds.union(extent)
        if bounds is None:
            bounds = Rect(0.0, 0.0, 0.0, 0.0)
        return bounds.expand(self.margin)

    def render_image(
        self,
        result: RouteResult,
        obstacles: Iterable = (),
        lattice: Optional[Lattice] = None,
    ) -> Image.Image:
        """
        Draw the route onto a new image.

        Args:
            result: Routing result to draw
            obstacles: Shapes around the edge, in any form the router accepts
            lattice: Optional lattice whose blocked and weighted cells are shaded

        Returns:
            The rendered PIL image
        """
        shapes = normalize_obstacles(obstacles)
        bounds = self._view_bounds(result, shapes, lattice)
        width = max(1, int(math.ceil(bounds.width * self.scale)))
        height = max(1, int(math.ceil(bounds.height * self.scale)))

        img = Image.new("RGB", (width, height), self.bg_color)
        draw = ImageDraw.Draw(img)

        def to_px(x: float, y: float) -> Tuple[float, float]:
            return (x - bounds.x) * self.scale, (y - bounds.y) * self.scale

        if lattice is not None and self.show_lattice:
            self._draw_lattice(draw, lattice, to_px)

        for obstacle in shapes:
            b = obstacle.bounds
            draw.rectangle(
                [to_px(b.x, b.y), to_px(b.x2, b.y2)],
                fill=self.obstacle_fill,
                outline=self.obstacle_outline,
                width=max(1, self.scale),
            )

        color = self.fallback_color if result.used_fallback else self.line_color
        pixels = [to_px(p.x, p.y) for p in result.waypoints]
        if len(pixels) >= 2:
            draw.line(pixels, fill=color, width=self.line_width * self.scale)
            self._draw_arrowhead(draw, pixels[-2], pixels[-1], color)

        lx, ly = to_px(result.label.x, result.label.y)
        r = 3 * self.scale
        draw.ellipse([lx - r, ly - r, lx + r, ly + r], fill=self.label_color)

        return img

    def _draw_lattice(self, draw: ImageDraw.Draw, lattice: Lattice, to_px) -> None:
        """Shade blocked and weighted cells."""
        half = lattice.cell_size / 2
        for j in range(lattice.rows):
            for i in range(lattice.cols):
                cell_type = lattice.cell_type(i, j)
                if cell_type == CellType.FREE:
                    continue
                fill = (
                    self.blocked_color
                    if cell_type == CellType.BLOCKED
                    else self.weighted_color
                )
                center = lattice.to_point((i, j))
                draw.rectangle(
                    [
                        to_px(center.x - half, center.y - half),
                        to_px(center.x + half, center.y + half),
                    ],
                    fill=fill,
                )

    def _draw_arrowhead(
        self,
        draw: ImageDraw.Draw,
        from_point: Tuple[float, float],
        to_point: Tuple[float, float],
        color: Tuple[int, int, int],
    ):
        """Draw an arrowhead at the end of a line."""
        x1, y1 = from_point
        x2, y2 = to_point
        if x1 == x2 and y1 == y2:
            return

        arrow_size = 8 * self.scale

        angle = math.atan2(y2 - y1, x2 - x1)
        angle1 = angle + math.pi * 0.8
        angle2 = angle - math.pi * 0.8

        ax1 = x2 + arrow_size * math.cos(angle1)
        ay1 = y2 + arrow_size * math.sin(angle1)
        ax2 = x2 + arrow_size * math.cos(angle2)
        ay2 = y2 + arrow_size * math.sin(angle2)

        draw.polygon([(x2, y2), (ax1, ay1), (ax2, ay2)], fill=color)

    def render(
        self,
        result: RouteResult,
        obstacles: Iterable = (),
        output_path: str = "route.png",
        lattice: Optional[Lattice] = None,
    ) -> str:
        """
        Render the route and save it as a PNG file.

        Returns:
            Path to the saved PNG file
        """
        img = self.render_image(result, obstacles, lattice)
        img.save(output_path)
        return output_path


def render_to_png(
    result: RouteResult,
    obstacles: Iterable = (),
    output_path: str = "route.png",
    lattice: Optional[Lattice] = None,
    **kwargs,
) -> str:
    """
    Convenience function to render a routing result to PNG.

    Args:
        result: Routing result
        obstacles: Shapes around the edge
        output_path: Path to save the PNG file
        lattice: Optional lattice to shade
        **kwargs: Additional parameters for RoutePNGRenderer

    Returns:
        Path to the saved PNG file
    """
    renderer = RoutePNGRenderer(**kwargs)
    return renderer.render(result, obstacles, output_path, lattice)


def label_pixel(
    result: RouteResult, obstacles: Iterable = (), scale: int = 2, margin: int = 40
) -> Point:
    """Pixel position of the label anchor in an image from ``render_image``."""
    renderer = RoutePNGRenderer(scale=scale, margin=margin, show_lattice=False)
    bounds = renderer._view_bounds(result, normalize_obstacles(obstacles), None)
    return Point(
        (result.label.x - bounds.x) * scale, (result.label.y - bounds.y) * scale
    )
