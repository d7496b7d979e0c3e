"""
PNG renderer for routed graphs.

Draws a GraphViewer with Pillow: edges first (so node bodies cover their
ends), then nodes. Straight edges get an arrowhead and a label along the
line. Self-loops get a circle, an arrowhead where they meet the node and a
label on a line tangent to the loop.
"""

import logging
import math
import os
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .labels import arrowhead, edge_label_placement, loop_arrowhead
from .models import Edge, EdgeId, Loop, Node, NodeId, Segment
from .vector import Point
from .viewer import GraphViewer
from .viewport import Viewport

logger = logging.getLogger(__name__)


@dataclass
class NodeStyle:
    """
    Styling for a node. Widths and radius are in world units.

    A radius of None means the layout's node radius.
    """

    radius: Optional[float] = None
    line_width: float = 3.0 / 1000
    fill_color: str = "white"
    border_color: str = "black"


@dataclass
class EdgeStyle:
    """Styling for an edge. The width is in world units."""

    line_width: float = 3.0 / 1000
    color: str = "black"


class PNGRenderer:
    """Renders a GraphViewer to a PNG image."""

    def __init__(
        self,
        width: int = 1000,
        height: int = 600,
        font_size: int = 18,
        font_path: Optional[str] = None,
        bg_color: str = "white",
        text_color: str = "black",
        draw_node_labels: bool = True,
    ):
        """
        Initialize the renderer.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.
            font_size: Font size for node and edge labels.
            font_path: Optional path to a TrueType font.
            bg_color: Background color.
            text_color: Label color.
            draw_node_labels: Whether node labels are drawn inside the nodes.
        """
        self.width = width
        self.height = height
        self.font_size = font_size
        self.font_path = font_path
        self.bg_color = bg_color
        self.text_color = text_color
        self.draw_node_labels = draw_node_labels
        self.font = None

    def _get_font(self) -> ImageFont.FreeTypeFont:
        """Get a font for rendering labels."""
        if self.font is not None:
            return self.font

        if self.font_path:
            if os.path.exists(self.font_path):
                try:
                    self.font = ImageFont.truetype(self.font_path, self.font_size)
                    return self.font
                except OSError:
                    logger.warning("Could not load font %s, using a system font", self.font_path)
            else:
                logger.warning("Font %s does not exist, using a system font", self.font_path)

        font_options = [
            "DejaVuSansMono",
            "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
            "Menlo",
            "Consolas",
        ]

        for path in font_options:
            try:
                self.font = ImageFont.truetype(path, self.font_size)
                return self.font
            except OSError:
                continue

        self.font = ImageFont.load_default(size=self.font_size)
        return self.font

    def _text_metrics(self, text: str) -> Tuple[int, int, int]:
        """Return (width, height, ascent) of text in pixels."""
        font = self._get_font()
        left, _, right, _ = font.getbbox(text)
        ascent, descent = font.getmetrics()
        return right - left, ascent + descent, ascent

    def render_image(
        self,
        viewer: GraphViewer,
        node_styles: Optional[Dict[NodeId, NodeStyle]] = None,
        edge_styles: Optional[Dict[EdgeId, EdgeStyle]] = None,
    ) -> Image.Image:
        """
        Draw the graph onto a new image.

        Args:
            viewer: Graph to draw. Its routes must be current.
            node_styles: Per-node style overrides.
            edge_styles: Per-edge style overrides.

        Returns:
            The rendered RGB image.
        """
        node_styles = node_styles or {}
        edge_styles = edge_styles or {}

        viewport = Viewport.fit(0, 0, self.width, self.height, viewer.config)
        img = Image.new("RGB", (self.width, self.height), self.bg_color)
        draw = ImageDraw.Draw(img)

        for edge in viewer.all_edges():
            style = edge_styles.get(edge.key, EdgeStyle())
            self._draw_edge(img, draw, viewer, viewport, edge, style)

        for node in viewer.all_nodes():
            style = node_styles.get(node.id, NodeStyle())
            self._draw_node(draw, viewer, viewport, node, style)

        return img

    def render(
        self,
        viewer: GraphViewer,
        output_path: str = "graph.png",
        node_styles: Optional[Dict[NodeId, NodeStyle]] = None,
        edge_styles: Optional[Dict[EdgeId, EdgeStyle]] = None,
    ) -> str:
        """
        Render the graph and save it as a PNG.

        Returns:
            Path to the saved PNG file.
        """
        img = self.render_image(viewer, node_styles, edge_styles)
        img.save(output_path, "PNG")
        return output_path

    def _pixels(self, viewport: Viewport, world_width: float) -> int:
        return max(1, math.ceil(viewport.length_to_device(world_width)))

    def _draw_polyline(self, draw, viewport: Viewport, points, color: str, width: int):
        pixels = [viewport.to_device(p).as_tuple() for p in points]
        draw.line(pixels, fill=color, width=width)

    def _draw_edge(
        self,
        img: Image.Image,
        draw: ImageDraw.ImageDraw,
        viewer: GraphViewer,
        viewport: Viewport,
        edge: Edge,
        style: EdgeStyle,
    ):
        route = edge.route
        if route is None:
            return

        config = viewer.config
        width = self._pixels(viewport, style.line_width)
        node_center = viewer.node(edge.source).position

        if isinstance(route, Segment):
            self._draw_polyline(draw, viewport, [route.start, route.end], style.color, width)
            barbs = arrowhead(route.start, route.end, config)
        elif isinstance(route, Loop):
            center = viewport.to_device(route.center)
            r = viewport.length_to_device(route.radius)
            draw.ellipse(
                [center.x - r, center.y - r, center.x + r, center.y + r],
                outline=style.color,
                width=width,
            )
            barbs = loop_arrowhead(node_center, route, config)
        else:
            raise TypeError(f"Unknown route type: {type(route).__name__}")

        left, tip, right = barbs
        self._draw_polyline(draw, viewport, [left, tip, right], style.color, width)

        if edge.label:
            self._draw_edge_label(img, viewer, viewport, edge, node_center)

    def _draw_edge_label(
        self,
        img: Image.Image,
        viewer: GraphViewer,
        viewport: Viewport,
        edge: Edge,
        node_center: Point,
    ):
        text_width, text_height, ascent = self._text_metrics(edge.label)
        placement = edge_label_placement(
            edge.route,
            node_center,
            viewport.length_to_world(text_width),
            viewport.length_to_world(text_height),
            viewer.config,
        )
        anchor = viewport.to_device(placement.anchor)
        self._draw_rotated_text(img, edge.label, anchor, placement.angle, text_width, text_height, ascent)

    def _draw_rotated_text(
        self,
        img: Image.Image,
        text: str,
        anchor: Point,
        angle: float,
        text_width: int,
        text_height: int,
        ascent: int,
    ):
        """Draw text whose baseline starts at anchor and runs at angle."""
        pad = 2
        layer = Image.new("RGBA", (text_width + 2 * pad, text_height + 2 * pad), (0, 0, 0, 0))
        ImageDraw.Draw(layer).text((pad, pad), text, fill=self.text_color, font=self._get_font())

        # Baseline-left point relative to the layer center.
        ax = pad - layer.width / 2.0
        ay = pad + ascent - layer.height / 2.0

        rotated = layer.rotate(-math.degrees(angle), resample=Image.Resampling.BICUBIC, expand=True)

        # Screen y points down, so this rotation matches the one applied above.
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        rx = cos_a * ax - sin_a * ay
        ry = sin_a * ax + cos_a * ay

        x = round(anchor.x - rotated.width / 2.0 - rx)
        y = round(anchor.y - rotated.height / 2.0 - ry)
        img.paste(rotated, (x, y), rotated)

    def _draw_node(
        self,
        draw: ImageDraw.ImageDraw,
        viewer: GraphViewer,
        viewport: Viewport,
        node: Node,
        style: NodeStyle,
    ):
        radius = style.radius if style.radius is not None else viewer.config.node_radius
        center = viewport.to_device(node.position)
        r = viewport.length_to_device(radius)

        draw.ellipse(
            [center.x - r, center.y - r, center.x + r, center.y + r],
            fill=style.fill_color,
            outline=style.border_color,
            width=self._pixels(viewport, style.line_width),
        )

        if self.draw_node_labels and node.label:
            font = self._get_font()
            left, top, right, bottom = draw.textbbox((0, 0), node.label, font=font)
            text_x = center.x - (right - left) / 2.0 - left
            text_y = center.y - (bottom - top) / 2.0 - top
            draw.text((text_x, text_y), node.label, fill=self.text_color, font=font)


def render_to_png(viewer: GraphViewer, output_path: str = "graph.png", **kwargs) -> str:
    """
    Convenience function to render a graph to PNG.

    Args:
        viewer: Graph to render
        output_path: Path to save the PNG file
        **kwargs: Additional parameters for PNGRenderer

    Returns:
        Path to the saved PNG file
    """
    renderer = PNGRenderer(**kwargs)
    return renderer.render(viewer, output_path)
