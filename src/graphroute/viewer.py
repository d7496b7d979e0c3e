"""
GraphViewer: the owner of a graph's nodes, edges and routes.

Every mutating call runs to completion, including a full re-route, before
it returns, so callers never observe stale routes. GraphViewer is not
thread-safe; embedding applications must serialize mutations themselves.

Example:
    >>> viewer = GraphViewer()
    >>> a = viewer.add_node(Point(0.2, 0.3))
    >>> b = viewer.add_node(Point(0.7, 0.3))
    >>> edge, created = viewer.add_edge(a, b)
    >>> loop, _ = viewer.add_edge(a, a)
    >>> viewer.edge_at(edge.route.midpoint)
    (0, 1)
"""

import logging
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from .config import LayoutConfig
from .edges import EdgeRegistry
from .errors import EdgeNotFoundError
from .models import Edge, EdgeId, EdgeInsertion, Hit, Node, NodeId, Route
from .nodes import NodeRegistry
from .router import RouteSynthesizer
from .vector import Point, distance

if TYPE_CHECKING:
    from .serialization import AuxCodec

logger = logging.getLogger(__name__)


class GraphViewer:
    """
    A routed, hit-testable directed graph.

    Attributes:
        config: Layout configuration shared by routing and queries.
        nodes: Node registry.
        edges: Edge registry.
        router: Route synthesizer used after every mutation.
        aux: Optional AuxCodec that builds payloads for new nodes and edges.
        aux_data: Graph-wide payload read and written by the AuxCodec.
    """

    def __init__(self, config: Optional[LayoutConfig] = None, aux: Optional["AuxCodec"] = None):
        """
        Initialize an empty graph.

        Args:
            config: Layout configuration (default: LayoutConfig()).
            aux: Optional AuxCodec for per-node and per-edge payloads.
        """
        self.config = config if config is not None else LayoutConfig()
        self.nodes = NodeRegistry(self.config)
        self.edges = EdgeRegistry()
        self.router = RouteSynthesizer(self.config)
        self.aux = aux
        self.aux_data: Any = None

    # -- routing -------------------------------------------------------------

    def recompute_routes(self) -> Dict[EdgeId, Route]:
        """Re-route every edge. Safe to call any number of times."""
        return self.router.recompute_all(self.nodes, self.edges)

    def route(self, source: NodeId, target: NodeId) -> Optional[Route]:
        edge = self.edges.get(source, target)
        return edge.route if edge is not None else None

    def routes(self) -> Dict[EdgeId, Route]:
        return {edge.key: edge.route for edge in self.edges.all()}

    # -- nodes ---------------------------------------------------------------

    def add_node(self, point: Point, label: str = "") -> NodeId:
        node_id = self.nodes.insert(point, label)
        if self.aux is not None and self.aux.new_node is not None:
            self.nodes.get(node_id).aux = self.aux.new_node(self.nodes.get(node_id))
        logger.debug("Added node %d at %s", node_id, self.nodes.get(node_id).position)
        self.recompute_routes()
        return node_id

    def remove_node(self, node_id: NodeId) -> Node:
        """
        Remove a node together with every edge into or out of it.

        Raises:
            InvalidReferenceError: If no node has this id.
        """
        node = self.nodes.remove(node_id)
        dropped = self.edges.remove_all_touching(node_id)
        logger.debug("Removed node %d and %d edges", node_id, len(dropped))
        self.recompute_routes()
        return node

    def move_node(self, node_id: NodeId, point: Point) -> Point:
        """Move a node (clamped into the world) and re-route. Returns the new position."""
        position = self.nodes.set_position(node_id, point)
        self.recompute_routes()
        return position

    def set_node_label(self, node_id: NodeId, label: str) -> None:
        self.nodes.set_label(node_id, label)

    def node(self, node_id: NodeId) -> Node:
        return self.nodes.get(node_id)

    def all_nodes(self) -> List[Node]:
        return self.nodes.all()

    def node_labeled(self, label: str) -> Optional[NodeId]:
        return self.nodes.find_by_label(label)

    # -- edges ---------------------------------------------------------------

    def add_edge(self, source: NodeId, target: NodeId, label: str = "") -> EdgeInsertion:
        """
        Add the edge source -> target.

        If it already exists the existing edge is returned unchanged with
        created=False and nothing is re-routed.

        Raises:
            InvalidReferenceError: If either node does not exist.
        """
        self.nodes.get(source)
        self.nodes.get(target)

        result = self.edges.insert(source, target, label)
        if not result.created:
            return result

        if self.aux is not None and self.aux.new_edge is not None:
            result.edge.aux = self.aux.new_edge(result.edge)
        self.recompute_routes()
        return result

    def remove_edge(self, source: NodeId, target: NodeId) -> bool:
        """
        Remove the edge source -> target. Absent edges are ignored.

        Raises:
            InvalidReferenceError: If either node does not exist.
        """
        self.nodes.get(source)
        self.nodes.get(target)

        removed = self.edges.remove(source, target)
        self.recompute_routes()
        return removed

    def set_edge_label(self, source: NodeId, target: NodeId, label: str) -> None:
        """
        Relabel the edge source -> target.

        Raises:
            InvalidReferenceError: If either node does not exist.
            EdgeNotFoundError: If both nodes exist but the edge does not.
        """
        self.nodes.get(source)
        self.nodes.get(target)

        edge = self.edges.get(source, target)
        if edge is None:
            raise EdgeNotFoundError(source, target)
        edge.label = label

    def edge(self, source: NodeId, target: NodeId) -> Optional[Edge]:
        return self.edges.get(source, target)

    edge_between = edge

    def has_edge(self, source: NodeId, target: NodeId) -> bool:
        return self.edges.exists(source, target)

    def all_edges(self) -> List[Edge]:
        return self.edges.all()

    # -- queries -------------------------------------------------------------

    def node_at(self, point: Point) -> Optional[NodeId]:
        """First node (in id order) whose body contains point."""
        for node in self.nodes.all():
            if distance(point, node.position) <= self.config.node_radius:
                return node.id
        return None

    def edge_at(self, point: Point, tolerance: Optional[float] = None) -> Optional[EdgeId]:
        """First edge (in (source, target) order) whose route contains point."""
        if tolerance is None:
            tolerance = self.config.edge_tolerance
        for edge in self.edges.all():
            if edge.contains(point, tolerance):
                return edge.key
        return None

    def entity_at(self, point: Point) -> Hit:
        """What lies under point: a node first, else an edge, else nothing."""
        node_id = self.node_at(point)
        if node_id is not None:
            return Hit.node(node_id)

        edge_id = self.edge_at(point)
        if edge_id is not None:
            return Hit.edge(edge_id)

        return Hit.nothing()
