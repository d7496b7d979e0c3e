"""Pytest configuration and shared fixtures for graphroute tests."""

import pytest

from graphroute import GraphViewer, LayoutConfig, Point


@pytest.fixture
def config():
    """Default layout configuration."""
    return LayoutConfig()


@pytest.fixture
def viewer():
    """Empty graph with the default configuration."""
    return GraphViewer()


@pytest.fixture
def two_node_viewer():
    """Two nodes on a horizontal line, no edges."""
    graph = GraphViewer()
    graph.add_node(Point(0.2, 0.3), "a")
    graph.add_node(Point(0.7, 0.3), "b")
    return graph


@pytest.fixture
def triangle_viewer():
    """Three nodes with a cycle, an anti-parallel pair and a self-loop."""
    graph = GraphViewer()
    a = graph.add_node(Point(0.2, 0.2), "a")
    b = graph.add_node(Point(0.6, 0.2), "b")
    c = graph.add_node(Point(0.4, 0.45), "c")
    graph.add_edge(a, b, "ab")
    graph.add_edge(b, a, "ba")
    graph.add_edge(b, c, "bc")
    graph.add_edge(c, a, "ca")
    graph.add_edge(c, c, "loop")
    return graph
