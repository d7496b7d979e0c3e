"""
Node registry.

Owns node identity, position and label. Ids are small integers: a new node
takes the lowest id freed by an earlier removal, or the next sequential id
when nothing has been freed.
"""

import math
from typing import Dict, Iterator, List, Optional, Set

from .config import LayoutConfig
from .errors import InvalidReferenceError
from .models import Node, NodeId
from .vector import Point


class NodeRegistry:
    """
    Mapping of node id -> Node with id recycling and position clamping.

    The registry does not route edges itself; GraphViewer re-routes after
    every mutation.
    """

    def __init__(self, config: LayoutConfig):
        self.config = config
        self._nodes: Dict[NodeId, Node] = {}
        self._free_ids: Set[NodeId] = set()

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: NodeId) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(self.all())

    def clamp(self, point: Point) -> Point:
        """
        Clamp a point so a node centered there stays inside the world.

        Raises:
            ValueError: If either coordinate is NaN or infinite.
        """
        if not (math.isfinite(point.x) and math.isfinite(point.y)):
            raise ValueError(f"Node position must be finite, got {point}")
        min_x, max_x, min_y, max_y = self.config.position_bounds()
        x = min(max(point.x, min_x), max_x)
        y = min(max(point.y, min_y), max_y)
        return Point(x, y)

    def _next_id(self) -> NodeId:
        if self._free_ids:
            node_id = min(self._free_ids)
            self._free_ids.remove(node_id)
            return node_id
        return len(self._nodes)

    def insert(self, point: Point, label: str = "") -> NodeId:
        """
        Create a node at point.

        Args:
            point: Requested center; clamped into the world.
            label: Initial label.

        Returns:
            The id of the new node.
        """
        position = self.clamp(point)
        node_id = self._next_id()
        self._nodes[node_id] = Node(node_id, position, label)
        return node_id

    def restore(self, node_id: NodeId, point: Point, label: str = "") -> Node:
        """
        Re-create a node under a known id, as done when loading a saved graph.

        Call rebuild_free_ids() once every node has been restored.

        Raises:
            ValueError: If the id is negative or already in use.
        """
        if node_id < 0:
            raise ValueError(f"Node id must not be negative: {node_id}")
        if node_id in self._nodes:
            raise ValueError(f"Duplicate node id: {node_id}")
        node = Node(node_id, self.clamp(point), label)
        self._nodes[node_id] = node
        self._free_ids.discard(node_id)
        return node

    def rebuild_free_ids(self) -> None:
        """Mark every unused id below the largest id in use as free."""
        if not self._nodes:
            self._free_ids = set()
            return
        max_id = max(self._nodes)
        self._free_ids = set(range(max_id)) - set(self._nodes)

    def remove(self, node_id: NodeId) -> Node:
        """Remove a node and free its id. Returns the removed node."""
        node = self.get(node_id)
        del self._nodes[node_id]
        self._free_ids.add(node_id)
        return node

    def set_position(self, node_id: NodeId, point: Point) -> Point:
        """Move a node, clamping into the world. Returns the stored position."""
        node = self.get(node_id)
        node.position = self.clamp(point)
        return node.position

    def set_label(self, node_id: NodeId, label: str) -> None:
        self.get(node_id).label = label

    def get(self, node_id: NodeId) -> Node:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise InvalidReferenceError(node_id) from None

    def all(self) -> List[Node]:
        """All nodes in ascending id order."""
        return [self._nodes[node_id] for node_id in sorted(self._nodes)]

    def ids(self) -> List[NodeId]:
        return sorted(self._nodes)

    def find_by_label(self, label: str) -> Optional[NodeId]:
        """Id of the first node (in id order) with this label, or None."""
        for node in self.all():
            if node.label == label:
                return node.id
        return None

    @property
    def free_ids(self) -> Set[NodeId]:
        return set(self._free_ids)
