"""
Label and arrowhead placement for routed edges.

Labels sit on a baseline running along their edge. For a self-loop the
baseline is an invisible line tangent to the far side of the loop circle.
Text is never drawn upside-down: a line pointing leftward is flipped before
the label is placed.

All functions work in whatever coordinate space their inputs are in, as
long as text metrics are given in that same space.
"""

import math
from typing import Tuple

from .config import LayoutConfig
from .models import LabelPlacement, Loop, Route, Segment
from .vector import Point, angle_of, magnitude, normalize, rotate


def place_label(
    p0: Point,
    p1: Point,
    text_width: float,
    text_height: float,
    offset: float,
    hug_line: bool = False,
) -> LabelPlacement:
    """
    Place a label along the line p0 -> p1.

    Args:
        p0: Start of the line.
        p1: End of the line.
        text_width: Rendered width of the label.
        text_height: Rendered height of the label.
        offset: Gap between the line and the text baseline.
        hug_line: Whether a flipped label should stay on the same side of the
            line. Without it, flipping also moves the text across the line.

    Returns:
        LabelPlacement with the baseline anchor and rotation.
    """
    start, end = p0, p1
    length = magnitude(end - start)
    flipped = False

    theta = angle_of(end - start)
    if theta < -math.pi / 2 or theta > math.pi / 2:
        start, end = end, start
        flipped = True

        if hug_line:
            normal = rotate(normalize(end - start), math.pi / 2) * text_height
            start = start + normal
            end = end + normal

        theta = angle_of(end - start)

    direction = normalize(end - start)

    # Walk to the midpoint, backed off by half the label width.
    anchor = start + direction * ((length - text_width) / 2.0)
    anchor = anchor + rotate(direction, -math.pi / 2) * offset

    return LabelPlacement(anchor, theta, flipped)


def loop_label_line(node_center: Point, loop: Loop, config: LayoutConfig) -> Tuple[Point, Point]:
    """
    Build the invisible line a self-loop's label is drawn on.

    The line is perpendicular to the node -> loop direction, centered just
    beyond the far side of the loop circle.
    """
    out = normalize(loop.center - node_center)
    tangent_point = loop.center + out * (loop.radius + config.loop_label_offset)
    tangent = rotate(out, math.pi / 2)
    half = config.loop_label_length / 2
    return tangent_point + tangent * half, tangent_point - tangent * half


def edge_label_placement(
    route: Route,
    node_center: Point,
    text_width: float,
    text_height: float,
    config: LayoutConfig,
) -> LabelPlacement:
    """
    Place the label of a routed edge.

    Args:
        route: The edge's Segment or Loop.
        node_center: Center of the source node (used by loops only).
        text_width: Rendered label width in world units.
        text_height: Rendered label height in world units.
        config: Layout configuration.
    """
    if isinstance(route, Segment):
        return place_label(
            route.start, route.end, text_width, text_height, config.edge_label_offset
        )

    p0, p1 = loop_label_line(node_center, route, config)
    return place_label(
        p0, p1, text_width, text_height, config.edge_label_offset, hug_line=True
    )


def arrowhead(from_pt: Point, to_pt: Point, config: LayoutConfig) -> Tuple[Point, Point, Point]:
    """
    Points of an arrowhead at to_pt for a line arriving from from_pt.

    Returns:
        (left barb end, tip, right barb end)
    """
    back = normalize(from_pt - to_pt)
    left = to_pt + rotate(back, config.arrowhead_rotation) * config.arrowhead_size
    right = to_pt + rotate(back, -config.arrowhead_rotation) * config.arrowhead_size
    return left, to_pt, right


def loop_arrowhead(node_center: Point, loop: Loop, config: LayoutConfig) -> Tuple[Point, Point, Point]:
    """
    Arrowhead for a self-loop.

    It enters the arrow point parallel to the node -> loop center line,
    not normal to the circle.
    """
    exterior = loop.arrow_point + (loop.center - node_center)
    return arrowhead(exterior, loop.arrow_point, config)
