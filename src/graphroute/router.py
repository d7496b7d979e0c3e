"""
Edge routing for graphs drawn as circles and arrows.

Routes are computed for the whole graph at once because edges depend on
each other:
- Straight edges start and end on node boundaries, not centers.
- When both A -> B and B -> A exist, their endpoints are rotated off the
  center line so the two arrows run side by side instead of overlapping.
- Self-loops are placed at the angle around their node that collides with
  the fewest already-placed lines (and, optionally, circles).

Recomputation is wholesale: any node move or any change to the node or edge
set re-routes every edge.
"""

import logging
import math
from typing import Dict, List, Sequence, Tuple

from .config import LayoutConfig
from .models import EdgeId, Loop, Route, Segment
from .vector import Point, distance, dot, normalize, rotate, unit_toward

logger = logging.getLogger(__name__)

Line = Tuple[Point, Point]
Circle = Tuple[Point, float]


def world_boundaries(config: LayoutConfig) -> List[Line]:
    """The four borders of the world as line segments."""
    left, right = 0.0, config.world_width
    top, bottom = 0.0, config.world_height
    return [
        (Point(left, top), Point(right, top)),
        (Point(left, bottom), Point(right, bottom)),
        (Point(left, top), Point(left, bottom)),
        (Point(right, top), Point(right, bottom)),
    ]


def segment_endpoints(
    c0: Point, c1: Point, anti_parallel: bool, config: LayoutConfig
) -> Line:
    """
    Compute where a straight edge between two node centers meets their borders.

    Args:
        c0: Center of the source node.
        c1: Center of the target node.
        anti_parallel: Whether the reverse edge also exists.
        config: Layout configuration.

    Returns:
        (start, end) points on the source and target boundaries.
    """
    forward = normalize(c1 - c0)
    backward = normalize(c0 - c1)

    if anti_parallel:
        forward = rotate(forward, config.avoidance_rotation)
        backward = rotate(backward, -config.avoidance_rotation)

    return c0 + forward * config.node_radius, c1 + backward * config.node_radius


def quadratic_has_root_in_unit_interval(a: float, b: float, c: float) -> bool:
    """
    Check whether a*t^2 + b*t + c = 0 describes a hit on a segment.

    True when real roots exist and they are neither both below 0 nor both
    above 1, which covers a root inside [0, 1] as well as roots straddling
    the interval (segment entirely inside the circle).
    """
    if a == 0:
        return False

    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        return False

    root = math.sqrt(discriminant)
    t1 = (-b + root) / (2 * a)
    t2 = (-b - root) / (2 * a)
    return not ((t1 < 0 and t2 < 0) or (t1 > 1 and t2 > 1))


def count_line_collisions(center: Point, radius: float, lines: Sequence[Line]) -> int:
    """
    Count the lines that touch the circle (center, radius).

    Substituting the segment p0 + t(p1 - p0) into the circle equation gives
    dot(d, d) t^2 + 2 dot(d, s) t + (dot(s, s) - r^2) = 0 with d = p1 - p0
    and s = p0 - center.
    """
    hits = 0
    for p0, p1 in lines:
        d = p1 - p0
        s = p0 - center
        if quadratic_has_root_in_unit_interval(
            dot(d, d), 2 * dot(d, s), dot(s, s) - radius * radius
        ):
            hits += 1
    return hits


def count_circle_collisions(
    center: Point, radius: float, circles: Sequence[Circle]
) -> int:
    """Count the circles whose disks overlap the disk (center, radius)."""
    return sum(
        1 for other, other_radius in circles if distance(center, other) < radius + other_radius
    )


def longest_minimum_run(counts: Sequence[int]) -> Tuple[int, int]:
    """
    Find the longest circular run of entries equal to the minimum.

    The run may wrap from the end of the sequence back to its start, in
    which case the returned start index is negative (it counts back from
    index 0). When every entry ties, the wrapped scan and the forward scan
    both cover the whole sequence, so the run starts at index 0 with length
    2 * len(counts) and its midpoint falls between the last entry and the
    first. Among equally long runs the first one found wins, scanning the
    wrapped run first and then by increasing index.

    Returns:
        (start, length) of the run.
    """
    if not counts:
        raise ValueError("counts must not be empty")

    minimum = min(counts)
    if all(count == minimum for count in counts):
        return 0, 2 * len(counts)

    trailing = 0
    for count in reversed(counts):
        if count != minimum:
            break
        trailing += 1

    best_start, best_length = 0, 0
    run_start, run_length = -trailing, trailing
    for index, count in enumerate(counts):
        if count == minimum:
            run_length += 1
            continue
        if run_length > best_length:
            best_start, best_length = run_start, run_length
        run_start, run_length = index + 1, 0

    # The run still open here is the trailing one, already scored via wraparound.
    return best_start, best_length


def best_loop_angle(
    node_center: Point,
    lines: Sequence[Line],
    circles: Sequence[Circle],
    config: LayoutConfig,
) -> float:
    """
    Choose the angle (radians) at which to hang a self-loop off its node.

    Every candidate angle places the loop center node_radius away from the
    node center. Candidates are scored by collisions, and the midpoint of
    the widest run of least-colliding candidates is returned, which gives
    the largest margin on either side.
    """
    counts = []
    for degrees in config.angle_candidates:
        loop_center = node_center + unit_toward(math.radians(degrees)) * config.node_radius
        collisions = count_line_collisions(loop_center, config.loop_radius, lines)
        if config.count_circle_collisions:
            collisions += count_circle_collisions(loop_center, config.loop_radius, circles)
        counts.append(collisions)

    start, length = longest_minimum_run(counts)
    low = config.angle_low + start * config.angle_step
    high = config.angle_low + (start + length - 1) * config.angle_step
    return math.radians((low + high) / 2.0)


def loop_arrow_point(node_center: Point, loop_center: Point, config: LayoutConfig) -> Point:
    """
    Find where a self-loop circle crosses its node's boundary.

    The node center, the loop center and the crossing form a triangle with
    sides node_radius, node_radius and loop_radius, so by the law of cosines
    the angle at the node center is arccos(1 - loop_radius^2 / (2 node_radius^2)).
    """
    ratio = config.loop_radius * config.loop_radius / (2 * config.node_radius * config.node_radius)
    theta = math.acos(max(-1.0, min(1.0, 1 - ratio)))
    return node_center + rotate(loop_center - node_center, theta)


class RouteSynthesizer:
    """
    Computes the route of every edge in a graph.

    Attributes:
        config: Layout configuration.
        lines: Occupied lines from the last recompute (borders and straight edges).
        circles: Occupied circles from the last recompute (node bodies and loops).
    """

    def __init__(self, config: LayoutConfig):
        self.config = config
        self.lines: List[Line] = []
        self.circles: List[Circle] = []

    def recompute_all(self, nodes, edges) -> Dict[EdgeId, Route]:
        """
        Route every edge and store each route on its Edge.

        Args:
            nodes: NodeRegistry holding the node positions.
            edges: EdgeRegistry holding the edges to route.

        Returns:
            Dictionary mapping (source, target) to the edge's new route.
        """
        config = self.config
        all_edges = edges.all()
        routes: Dict[EdgeId, Route] = {}

        lines: List[Line] = world_boundaries(config) if config.include_world_boundaries else []

        # Pass 1: straight edges.
        for edge in all_edges:
            if edge.is_self_loop:
                continue

            c0 = nodes.get(edge.source).position
            c1 = nodes.get(edge.target).position
            anti_parallel = edges.exists(edge.target, edge.source)

            start, end = segment_endpoints(c0, c1, anti_parallel, config)
            edge.route = routes[edge.key] = Segment(start, end)
            lines.append((start, end))

        # Pass 2: self-loops, each avoiding everything placed before it.
        circles: List[Circle] = [(node.position, config.node_radius) for node in nodes.all()]
        loops = 0
        for edge in all_edges:
            if not edge.is_self_loop:
                continue

            node_center = nodes.get(edge.source).position
            theta = best_loop_angle(node_center, lines, circles, config)

            loop_center = node_center + unit_toward(theta) * config.node_radius
            arrow_point = loop_arrow_point(node_center, loop_center, config)

            edge.route = routes[edge.key] = Loop(loop_center, arrow_point, config.loop_radius)
            circles.append((loop_center, config.loop_radius))
            loops += 1
            logger.debug(
                "Placed self-loop on node %d at %.1f degrees", edge.source, math.degrees(theta)
            )

        self.lines = lines
        self.circles = circles
        logger.debug("Routed %d edges (%d self-loops)", len(routes), loops)
        return routes
