"""
Layout configuration.

All geometric constants used by the router, the hit tests and the label
placement live in a single LayoutConfig that callers pass in explicitly.
Distances are in world units: the world spans x in [0, 1] and
y in [0, 1 / aspect_ratio], so 0.001 is one pixel on a 1000px-wide window.
"""

import math
from dataclasses import dataclass
from typing import List, Tuple

from .errors import ConfigError


@dataclass(frozen=True)
class LayoutConfig:
    """
    Geometry parameters for routing and rendering a graph.

    Attributes:
        aspect_ratio: Width / height of the world.
        node_radius: Radius of every node body.
        edge_width: Stroke width of rendered edges.
        edge_tolerance: Width of the band around an edge that counts as a hit.
        avoidance_rotation: Angle (radians) by which the endpoints of an
            anti-parallel pair are rotated away from the center line.
        loop_radius_ratio: Self-loop radius as a fraction of node_radius.
        angle_low: First candidate self-loop angle, in degrees.
        angle_high: Candidate angles stop before this value, in degrees.
        angle_step: Spacing between candidate angles, in degrees.
        loop_label_length: Length of the invisible line loop labels sit on.
        edge_label_offset: Gap between a straight edge and its label.
        loop_label_offset: Gap between a loop arc and its label line.
        text_height: Nominal height of edge label text.
        arrowhead_rotation: Half-angle between the two arrowhead barbs.
        arrowhead_size: Length of each arrowhead barb.
        count_circle_collisions: Whether self-loop placement also counts
            overlaps with node bodies and earlier loops. Off by default,
            which only scores candidates against lines.
        include_world_boundaries: Whether the four world borders are treated
            as occupied lines during self-loop placement.
    """

    aspect_ratio: float = 5.0 / 3.0
    node_radius: float = 0.035
    edge_width: float = 3.0 / 1000
    edge_tolerance: float = 16.0 / 1000
    avoidance_rotation: float = -math.pi / 6
    loop_radius_ratio: float = 0.75
    angle_low: int = -5
    angle_high: int = 355
    angle_step: int = 10
    loop_label_length: float = 150.0 / 1000
    edge_label_offset: float = 8.0 / 1000
    loop_label_offset: float = 30.0 / 1000
    text_height: float = 48.0 / 1000
    arrowhead_rotation: float = math.pi / 8
    arrowhead_size: float = 0.02
    count_circle_collisions: bool = False
    include_world_boundaries: bool = True

    def __post_init__(self):
        if self.aspect_ratio <= 0:
            raise ConfigError("aspect_ratio must be positive")
        if self.node_radius <= 0:
            raise ConfigError("node_radius must be positive")
        if 2 * self.node_radius >= min(1.0, 1.0 / self.aspect_ratio):
            raise ConfigError("node_radius is too large for the world")
        if not 0 < self.loop_radius_ratio <= 2:
            # Beyond 2 the loop circle no longer meets the node boundary.
            raise ConfigError("loop_radius_ratio must be in (0, 2]")
        if self.angle_step <= 0:
            raise ConfigError("angle_step must be positive")
        if self.angle_high <= self.angle_low:
            raise ConfigError("angle_high must be greater than angle_low")
        if self.edge_tolerance < 0:
            raise ConfigError("edge_tolerance must not be negative")

    @property
    def world_width(self) -> float:
        return 1.0

    @property
    def world_height(self) -> float:
        return 1.0 / self.aspect_ratio

    @property
    def loop_radius(self) -> float:
        """Radius of the circle drawn for a self-loop."""
        return self.node_radius * self.loop_radius_ratio

    @property
    def angle_candidates(self) -> List[int]:
        """Candidate self-loop angles in degrees, low to high."""
        return list(range(self.angle_low, self.angle_high, self.angle_step))

    def position_bounds(self) -> Tuple[float, float, float, float]:
        """
        Return (min_x, max_x, min_y, max_y) for node centers.

        A node centered inside these bounds keeps its whole body in the world.
        """
        r = self.node_radius
        return r, self.world_width - r, r, self.world_height - r
