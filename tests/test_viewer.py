"""Tests for GraphViewer: mutations, routing invariants and queries."""

import math
import random

import pytest

from graphroute import (
    AuxCodec,
    EdgeNotFoundError,
    EntityKind,
    GraphError,
    GraphViewer,
    InvalidReferenceError,
    Loop,
    Point,
    Segment,
)
from graphroute.vector import distance


def random_graph(seed, node_count=8, edge_count=14):
    """Build a reproducible graph with straight edges, pairs and loops."""
    rng = random.Random(seed)
    viewer = GraphViewer()
    ids = [
        viewer.add_node(Point(rng.random(), rng.random() * 0.6), f"n{i}")
        for i in range(node_count)
    ]
    for _ in range(edge_count):
        viewer.add_edge(rng.choice(ids), rng.choice(ids), rng.choice(["", "a", "b|c"]))
    return viewer


class TestNodes:
    """Tests for node operations through the viewer."""

    def test_add_node_clamps(self, viewer):
        """Nodes placed outside the world end up one radius inside it."""
        a = viewer.add_node(Point(0.0, 0.0))
        b = viewer.add_node(Point(1.0, 0.0))
        assert viewer.node(a).position.x == pytest.approx(0.035)
        assert viewer.node(a).position.y == pytest.approx(0.035)
        assert viewer.node(b).position.x == pytest.approx(0.965)
        assert viewer.node(b).position.y == pytest.approx(0.035)

    def test_move_node_clamps_and_reroutes(self, two_node_viewer):
        viewer = two_node_viewer
        edge, _ = viewer.add_edge(0, 1)
        before = edge.route

        position = viewer.move_node(1, Point(0.7, 5.0))
        assert position.y == pytest.approx(0.565)
        assert viewer.node(1).position == position
        assert edge.route != before
        assert distance(edge.route.end, position) == pytest.approx(viewer.config.node_radius)

    def test_ids_reused_lowest_first(self, viewer):
        for _ in range(4):
            viewer.add_node(Point(0.5, 0.3))
        viewer.remove_node(1)
        viewer.remove_node(2)
        assert viewer.add_node(Point(0.5, 0.3)) == 1
        assert viewer.add_node(Point(0.5, 0.3)) == 2
        assert viewer.add_node(Point(0.5, 0.3)) == 4

    def test_labels(self, two_node_viewer):
        two_node_viewer.set_node_label(1, "end")
        assert two_node_viewer.node(1).label == "end"
        assert two_node_viewer.node_labeled("end") == 1
        assert two_node_viewer.node_labeled("b") is None

    def test_remove_node_cascades(self, viewer):
        """Removing a node removes every edge that touches it."""
        a = viewer.add_node(Point(0.2, 0.2))
        b = viewer.add_node(Point(0.5, 0.2))
        c = viewer.add_node(Point(0.8, 0.2))
        for source, target in [(a, b), (b, c), (b, b), (a, c)]:
            viewer.add_edge(source, target)

        removed = viewer.remove_node(b)
        assert removed.id == b
        assert [edge.key for edge in viewer.all_edges()] == [(a, c)]
        assert [node.id for node in viewer.all_nodes()] == [a, c]
        assert viewer.route(a, c) is not None


class TestEdges:
    """Tests for edge operations through the viewer."""

    def test_add_edge_routes(self, two_node_viewer):
        edge, created = two_node_viewer.add_edge(0, 1, "x")
        assert created
        assert isinstance(edge.route, Segment)
        assert two_node_viewer.has_edge(0, 1)
        assert not two_node_viewer.has_edge(1, 0)
        assert two_node_viewer.edge_between(0, 1) is edge

    def test_duplicate_edge_unchanged(self, two_node_viewer):
        first, _ = two_node_viewer.add_edge(0, 1, "x")
        again, created = two_node_viewer.add_edge(0, 1, "y")
        assert created is False
        assert again is first
        assert again.label == "x"
        assert len(two_node_viewer.all_edges()) == 1

    def test_remove_edge(self, two_node_viewer):
        two_node_viewer.add_edge(0, 1)
        assert two_node_viewer.remove_edge(0, 1) is True
        assert two_node_viewer.remove_edge(0, 1) is False
        assert two_node_viewer.route(0, 1) is None

    def test_set_edge_label(self, two_node_viewer):
        two_node_viewer.add_edge(0, 1, "x")
        two_node_viewer.set_edge_label(0, 1, "y")
        assert two_node_viewer.edge(0, 1).label == "y"
        with pytest.raises(KeyError):
            two_node_viewer.set_edge_label(1, 0, "z")

    def test_set_edge_label_errors(self, two_node_viewer):
        """Missing edges and unknown nodes raise package errors."""
        with pytest.raises(EdgeNotFoundError, match="No edge 1 -> 0") as excinfo:
            two_node_viewer.set_edge_label(1, 0, "z")
        assert isinstance(excinfo.value, GraphError)
        assert (excinfo.value.source, excinfo.value.target) == (1, 0)
        with pytest.raises(InvalidReferenceError):
            two_node_viewer.set_edge_label(0, 9, "z")

    def test_self_loop_route(self, two_node_viewer):
        edge, _ = two_node_viewer.add_edge(0, 0)
        assert isinstance(edge.route, Loop)
        center = two_node_viewer.node(0).position
        assert distance(edge.route.center, center) == pytest.approx(
            two_node_viewer.config.node_radius
        )

    def test_isolated_self_loop_side(self, two_node_viewer):
        """With nothing nearby a loop hangs just above the +x side of its node."""
        edge, _ = two_node_viewer.add_edge(0, 0)
        node = two_node_viewer.node(0).position
        angle = math.radians(350)
        radius = two_node_viewer.config.node_radius
        assert edge.route.center.x == pytest.approx(node.x + radius * math.cos(angle))
        assert edge.route.center.y == pytest.approx(node.y + radius * math.sin(angle))
        assert edge.route.center.x > node.x

    def test_removing_reverse_edge_straightens(self, two_node_viewer):
        """A lone edge runs along the center line again once its partner is gone."""
        two_node_viewer.add_edge(0, 1)
        two_node_viewer.add_edge(1, 0)
        two_node_viewer.remove_edge(1, 0)
        route = two_node_viewer.route(0, 1)
        assert route.start.y == pytest.approx(0.3)
        assert route.end.y == pytest.approx(0.3)


class TestNonFinitePositions:
    """NaN and infinite coordinates are rejected before anything changes."""

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
    def test_add_node(self, two_node_viewer, bad):
        with pytest.raises(ValueError):
            two_node_viewer.add_node(Point(bad, 0.3))
        with pytest.raises(ValueError):
            two_node_viewer.add_node(Point(0.5, bad))
        assert len(two_node_viewer.all_nodes()) == 2
        assert two_node_viewer.add_node(Point(0.5, 0.3)) == 2

    def test_move_node(self, two_node_viewer):
        two_node_viewer.add_edge(0, 1)
        before = two_node_viewer.route(0, 1)
        with pytest.raises(ValueError):
            two_node_viewer.move_node(1, Point(float("nan"), 0.3))
        assert two_node_viewer.node(1).position == Point(0.7, 0.3)
        assert two_node_viewer.route(0, 1) == before


class TestInvalidReferences:
    """Operations on unknown node ids raise and change nothing."""

    def test_unknown_nodes(self, two_node_viewer):
        with pytest.raises(InvalidReferenceError):
            two_node_viewer.add_edge(0, 9)
        with pytest.raises(InvalidReferenceError):
            two_node_viewer.remove_edge(9, 0)
        with pytest.raises(InvalidReferenceError):
            two_node_viewer.remove_node(9)
        with pytest.raises(InvalidReferenceError):
            two_node_viewer.move_node(9, Point(0.5, 0.3))
        with pytest.raises(InvalidReferenceError):
            two_node_viewer.node(9)
        assert two_node_viewer.all_edges() == []
        assert len(two_node_viewer.all_nodes()) == 2


class TestRoutingInvariants:
    """Properties that hold for every graph."""

    @pytest.mark.parametrize("seed", [1, 7, 42])
    def test_recompute_is_idempotent(self, seed):
        viewer = random_graph(seed)
        first = viewer.recompute_routes()
        second = viewer.recompute_routes()
        assert first == second

    @pytest.mark.parametrize("seed", [1, 7, 42])
    def test_every_edge_routed(self, seed):
        viewer = random_graph(seed)
        radius = viewer.config.node_radius
        for edge in viewer.all_edges():
            source = viewer.node(edge.source).position
            target = viewer.node(edge.target).position
            if edge.is_self_loop:
                assert isinstance(edge.route, Loop)
                assert distance(edge.route.center, source) == pytest.approx(radius)
            else:
                assert isinstance(edge.route, Segment)
                assert distance(edge.route.start, source) == pytest.approx(radius)
                assert distance(edge.route.end, target) == pytest.approx(radius)

    @pytest.mark.parametrize("seed", [1, 7, 42])
    def test_nodes_stay_in_world(self, seed):
        viewer = random_graph(seed)
        min_x, max_x, min_y, max_y = viewer.config.position_bounds()
        for node in viewer.all_nodes():
            assert min_x <= node.position.x <= max_x
            assert min_y <= node.position.y <= max_y

    def test_self_loop_placement_deterministic(self):
        """The same graph always gets the same loops."""
        assert random_graph(3).routes() == random_graph(3).routes()

    def test_anti_parallel_edges_separate(self, two_node_viewer):
        """Each of a pair of opposite edges is hit at its own midpoint."""
        forward, _ = two_node_viewer.add_edge(0, 1)
        backward, _ = two_node_viewer.add_edge(1, 0)
        assert forward.route != backward.route
        assert two_node_viewer.edge_at(forward.route.midpoint) == (0, 1)
        assert two_node_viewer.edge_at(backward.route.midpoint) == (1, 0)
        tolerance = two_node_viewer.config.edge_tolerance
        assert not backward.route.contains(forward.route.midpoint, tolerance)
        assert not forward.route.contains(backward.route.midpoint, tolerance)
        gap = abs(forward.route.midpoint.y - backward.route.midpoint.y)
        assert gap > two_node_viewer.config.edge_tolerance / 2

    def test_identical_positions(self, viewer):
        """Nodes on top of each other still get finite routes."""
        a = viewer.add_node(Point(0.5, 0.3))
        b = viewer.add_node(Point(0.5, 0.3))
        viewer.add_edge(a, b)
        viewer.add_edge(b, a)
        for edge in viewer.all_edges():
            assert math.isfinite(edge.route.start.x)
            assert math.isfinite(edge.route.end.y)


class TestQueries:
    """Tests for hit-testing queries."""

    def test_edge_at_clamped_segment(self, viewer):
        a = viewer.add_node(Point(0.0, 0.0))
        b = viewer.add_node(Point(1.0, 0.0))
        edge, _ = viewer.add_edge(a, b)
        assert viewer.edge_at(edge.route.midpoint) == (a, b)
        assert viewer.edge_at(Point(0.5, 1.035)) is None

    def test_edge_at_custom_tolerance(self, two_node_viewer):
        two_node_viewer.add_edge(0, 1)
        assert two_node_viewer.edge_at(Point(0.45, 0.31)) is None
        assert two_node_viewer.edge_at(Point(0.45, 0.31), tolerance=0.05) == (0, 1)

    def test_node_at(self, two_node_viewer):
        assert two_node_viewer.node_at(Point(0.21, 0.3)) == 0
        assert two_node_viewer.node_at(Point(0.45, 0.3)) is None

    def test_entity_at_prefers_nodes(self, two_node_viewer):
        """A point on both a node body and its loop reports the node."""
        edge, _ = two_node_viewer.add_edge(0, 0)
        loop = edge.route
        node = two_node_viewer.node(0).position
        ratio = loop.radius / two_node_viewer.config.node_radius
        inner = loop.center - (loop.center - node) * ratio
        assert two_node_viewer.edge_at(inner) == (0, 0)
        hit = two_node_viewer.entity_at(inner)
        assert hit.kind is EntityKind.NODE
        assert hit.node_id == 0
        assert hit.edge_id is None

    def test_entity_at_edge_and_nothing(self, two_node_viewer):
        edge, _ = two_node_viewer.add_edge(0, 1)
        hit = two_node_viewer.entity_at(edge.route.midpoint)
        assert hit.kind is EntityKind.EDGE
        assert hit.edge_id == (0, 1)

        miss = two_node_viewer.entity_at(Point(0.9, 0.55))
        assert miss.kind is EntityKind.NONE
        assert not miss

    def test_loop_hit(self, two_node_viewer):
        edge, _ = two_node_viewer.add_edge(1, 1)
        loop = edge.route
        on_ring = loop.center + (loop.center - two_node_viewer.node(1).position) * (
            loop.radius / two_node_viewer.config.node_radius
        )
        assert two_node_viewer.entity_at(on_ring).edge_id == (1, 1)


class TestAuxPayloads:
    """Tests for the new-node and new-edge hooks."""

    def test_hooks_called_on_creation(self):
        codec = AuxCodec(
            new_node=lambda node: {"created": node.id},
            new_edge=lambda edge: list(edge.key),
        )
        viewer = GraphViewer(aux=codec)
        a = viewer.add_node(Point(0.2, 0.3))
        b = viewer.add_node(Point(0.6, 0.3))
        edge, _ = viewer.add_edge(a, b)

        assert viewer.node(b).aux == {"created": b}
        assert edge.aux == [a, b]

    def test_hook_not_called_for_existing_edge(self):
        calls = []
        viewer = GraphViewer(aux=AuxCodec(new_edge=calls.append))
        a = viewer.add_node(Point(0.2, 0.3))
        viewer.add_edge(a, a)
        viewer.add_edge(a, a)
        assert len(calls) == 1
