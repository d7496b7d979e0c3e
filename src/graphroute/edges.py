"""
Edge registry backed by networkx.

Edges are directed and keyed by (source, target); there is at most one edge
per ordered pair, so A -> B and B -> A are distinct. The DiGraph adjacency
gives the source -> target -> edge mapping, and node removal in networkx
drops every incident edge in one step.
"""

from typing import Iterator, List, Optional

import networkx as nx

from .models import Edge, EdgeInsertion, NodeId


class EdgeRegistry:
    """Directed edges stored as `edge` attributes on a networkx.DiGraph."""

    def __init__(self):
        self.graph: nx.DiGraph = nx.DiGraph()

    def __len__(self) -> int:
        return self.graph.number_of_edges()

    def __iter__(self) -> Iterator[Edge]:
        return iter(self.all())

    def insert(self, source: NodeId, target: NodeId, label: str = "") -> EdgeInsertion:
        """
        Add the edge source -> target unless it already exists.

        Args:
            source: Id of the node the edge leaves.
            target: Id of the node the edge enters.
            label: Label for a newly created edge. An existing edge keeps
                its own label.

        Returns:
            EdgeInsertion holding the edge and whether it was just created.
        """
        existing = self.get(source, target)
        if existing is not None:
            return EdgeInsertion(existing, False)

        edge = Edge(source, target, label)
        self.graph.add_edge(source, target, edge=edge)
        return EdgeInsertion(edge, True)

    def remove(self, source: NodeId, target: NodeId) -> bool:
        """Remove source -> target. Returns False if there was no such edge."""
        if not self.graph.has_edge(source, target):
            return False
        self.graph.remove_edge(source, target)
        return True

    def exists(self, source: NodeId, target: NodeId) -> bool:
        return self.graph.has_edge(source, target)

    def get(self, source: NodeId, target: NodeId) -> Optional[Edge]:
        data = self.graph.get_edge_data(source, target)
        if data is None:
            return None
        return data["edge"]

    def all(self) -> List[Edge]:
        """All edges ordered by source id, then target id."""
        return [
            edge
            for _, _, edge in sorted(
                self.graph.edges(data="edge"), key=lambda item: (item[0], item[1])
            )
        ]

    def remove_all_touching(self, node_id: NodeId) -> List[Edge]:
        """
        Drop every edge whose source or target is node_id.

        Returns:
            The removed edges, in (source, target) order.
        """
        if node_id not in self.graph:
            return []

        removed = [
            data["edge"] for _, _, data in self.graph.out_edges(node_id, data=True)
        ]
        removed.extend(
            data["edge"]
            for source, _, data in self.graph.in_edges(node_id, data=True)
            if source != node_id
        )
        self.graph.remove_node(node_id)
        return sorted(removed, key=lambda edge: edge.key)

    def clear(self) -> None:
        self.graph.clear()
