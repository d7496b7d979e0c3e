"""
graphroute - Edge routing and hit-testing for editable directed graphs

Lays out the edges of a graph whose nodes are circles placed by hand:
straight edges meet node boundaries, anti-parallel pairs run side by side,
self-loops hang off their node where they collide with the least, and every
route can be hit-tested for pointer interaction.

Example:
    >>> from graphroute import GraphViewer, Point
    >>> viewer = GraphViewer()
    >>> a = viewer.add_node(Point(0.2, 0.3))
    >>> b = viewer.add_node(Point(0.7, 0.3))
    >>> edge, created = viewer.add_edge(a, b, "x")
    >>> loop, _ = viewer.add_edge(b, b)
    >>> viewer.entity_at(edge.route.midpoint).kind
    <EntityKind.EDGE: 'edge'>
"""

from .config import LayoutConfig
from .edges import EdgeRegistry
from .errors import (
    ConfigError,
    EdgeNotFoundError,
    GraphError,
    InvalidReferenceError,
    LoadError,
)
from .hit_test import loop_contains, segment_contains
from .labels import (
    arrowhead,
    edge_label_placement,
    loop_arrowhead,
    loop_label_line,
    place_label,
)
from .models import (
    Edge,
    EdgeInsertion,
    EntityKind,
    Hit,
    LabelPlacement,
    Loop,
    Node,
    Segment,
)
from .nodes import NodeRegistry
from .png_renderer import EdgeStyle, NodeStyle, PNGRenderer, render_to_png
from .router import RouteSynthesizer, best_loop_angle, loop_arrow_point
from .serialization import AuxCodec, dumps, graph_from_dict, graph_to_dict, load, loads, save
from .vector import Point, Vector
from .viewer import GraphViewer
from .viewport import Viewport

__version__ = "0.3.0"

__all__ = [
    # Main API
    "GraphViewer",
    "LayoutConfig",
    "Point",
    "Vector",
    # Registries
    "NodeRegistry",
    "EdgeRegistry",
    # Models
    "Node",
    "Edge",
    "EdgeInsertion",
    "Segment",
    "Loop",
    "EntityKind",
    "Hit",
    "LabelPlacement",
    # Routing
    "RouteSynthesizer",
    "best_loop_angle",
    "loop_arrow_point",
    # Hit testing
    "segment_contains",
    "loop_contains",
    # Labels and arrowheads
    "place_label",
    "loop_label_line",
    "edge_label_placement",
    "arrowhead",
    "loop_arrowhead",
    # Persistence
    "AuxCodec",
    "graph_to_dict",
    "graph_from_dict",
    "dumps",
    "loads",
    "save",
    "load",
    # Rendering
    "Viewport",
    "PNGRenderer",
    "NodeStyle",
    "EdgeStyle",
    "render_to_png",
    # Errors
    "GraphError",
    "InvalidReferenceError",
    "EdgeNotFoundError",
    "LoadError",
    "ConfigError",
]
