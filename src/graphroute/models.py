"""
Data models for graph layout.

Classes:
    Node: A node with a stable integer id, a position and a label.
    Edge: A directed edge keyed by (from, to) with its cached route.
    Segment: Route of a straight edge, between two node boundaries.
    Loop: Route of a self-loop, a circle next to its node.
    EdgeInsertion: Result of inserting an edge (created or already present).
    EntityKind / Hit: What lies under a query point.
    LabelPlacement: Baseline anchor and rotation for an edge label.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple, Optional, Tuple, Union

from .hit_test import loop_contains, segment_contains
from .vector import Basis, Point

NodeId = int
EdgeId = Tuple[int, int]


@dataclass
class Node:
    """
    A graph node.

    Attributes:
        id: Unique id. Ids of removed nodes are recycled.
        position: Center of the node body in world coordinates. Always
            clamped so the whole body stays inside the world.
        label: Display label, empty by default.
        aux: Opaque payload attached by an AuxCodec. Never read by routing.
    """

    id: NodeId
    position: Point
    label: str = ""
    aux: Any = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class Segment:
    """
    Route of a straight edge.

    Attributes:
        start: Rendered start point on the source node's boundary.
        end: Rendered end point on the target node's boundary.
    """

    start: Point
    end: Point

    def contains(self, point: Point, tolerance: float) -> bool:
        return segment_contains(self.start, self.end, point, tolerance)

    @property
    def midpoint(self) -> Point:
        return (self.start + self.end) * 0.5


@dataclass(frozen=True)
class Loop:
    """
    Route of a self-loop.

    Attributes:
        center: Center of the loop circle, node_radius away from the node.
        arrow_point: Where the arrowhead meets the node boundary.
        radius: Radius of the loop circle.
    """

    center: Point
    arrow_point: Point
    radius: float

    def contains(self, point: Point, tolerance: float) -> bool:
        return loop_contains(self.center, self.radius, point, tolerance)


Route = Union[Segment, Loop]


@dataclass
class Edge:
    """
    A directed edge.

    Attributes:
        source: Id of the node the edge leaves.
        target: Id of the node the edge enters. Equal to source for a self-loop.
        label: Display label, empty by default.
        route: Cached geometry, recomputed on every structural or positional
            change. None until the first recompute.
        aux: Opaque payload attached by an AuxCodec. Never read by routing.
    """

    source: NodeId
    target: NodeId
    label: str = ""
    route: Optional[Route] = field(default=None, compare=False)
    aux: Any = field(default=None, repr=False, compare=False)

    @property
    def key(self) -> EdgeId:
        return (self.source, self.target)

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target

    def contains(self, point: Point, tolerance: float) -> bool:
        """Hit-test against the current route; unrouted edges never hit."""
        if self.route is None:
            return False
        return self.route.contains(point, tolerance)


class EdgeInsertion(NamedTuple):
    """Outcome of EdgeRegistry.insert: the edge and whether it is new."""

    edge: Edge
    created: bool


class EntityKind(Enum):
    """Kinds of entity a point query can find."""

    NODE = "node"
    EDGE = "edge"
    NONE = "none"


@dataclass(frozen=True)
class Hit:
    """
    Result of a point query.

    Exactly one of node_id / edge_id is set, matching kind; both are None
    when nothing was hit.
    """

    kind: EntityKind
    node_id: Optional[NodeId] = None
    edge_id: Optional[EdgeId] = None

    @classmethod
    def nothing(cls) -> "Hit":
        return cls(EntityKind.NONE)

    @classmethod
    def node(cls, node_id: NodeId) -> "Hit":
        return cls(EntityKind.NODE, node_id=node_id)

    @classmethod
    def edge(cls, edge_id: EdgeId) -> "Hit":
        return cls(EntityKind.EDGE, edge_id=edge_id)

    def __bool__(self) -> bool:
        return self.kind is not EntityKind.NONE


@dataclass(frozen=True)
class LabelPlacement:
    """
    Where and how to draw an edge label.

    Attributes:
        anchor: Left end of the text baseline, in the same space as the input.
        angle: Rotation of the text in radians (never upside-down).
        flipped: Whether the line direction was reversed to keep text upright.
    """

    anchor: Point
    angle: float
    flipped: bool = False

    def origin_for_rotating_canvas(self) -> Point:
        """
        Position to give text on a canvas that rotates about its own origin.

        Such a canvas draws text placed at p at rotation(angle) * p, so the
        text has to be placed at rotation(-angle) * anchor.
        """
        return Basis.rotation(-self.angle).transform(self.anchor)
