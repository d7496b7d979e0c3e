"""
Saving and loading graphs.

Record format:

    {"nodes": [{"index": 0, "label": "q0", "position": [0.2, 0.3]}, ...],
     "edges": [{"from": 0, "to": 1, "label": "a"}, ...]}

When an AuxCodec is in use, every node and edge record also carries an
"aux" entry, and so does the top-level record. Routes are never stored;
they are recomputed once after loading. "pos" is accepted as a legacy
spelling of "position".
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from .config import LayoutConfig
from .errors import LoadError
from .models import Edge, Node
from .vector import Point
from .viewer import GraphViewer

logger = logging.getLogger(__name__)


@dataclass
class AuxCodec:
    """
    Hooks for attaching opaque payloads to nodes, edges and the graph.

    Every hook is optional. Payloads are stored on Node.aux, Edge.aux and
    GraphViewer.aux_data; routing never looks at them.

    Attributes:
        new_node: Builds the payload of a freshly added node.
        new_edge: Builds the payload of a freshly added edge.
        read_node: Rebuilds a node payload from its saved form.
        read_edge: Rebuilds an edge payload from its saved form.
        write_node: Converts a node payload to JSON-compatible data.
        write_edge: Converts an edge payload to JSON-compatible data.
        read_graph: Rebuilds the graph-wide payload.
        write_graph: Converts the graph-wide payload to JSON-compatible data.
    """

    new_node: Optional[Callable[[Node], Any]] = None
    new_edge: Optional[Callable[[Edge], Any]] = None
    read_node: Optional[Callable[[Node, Any], Any]] = None
    read_edge: Optional[Callable[[Edge, Any], Any]] = None
    write_node: Optional[Callable[[Any], Any]] = None
    write_edge: Optional[Callable[[Any], Any]] = None
    read_graph: Optional[Callable[[Any], Any]] = None
    write_graph: Optional[Callable[[Any], Any]] = None


def graph_to_dict(viewer: GraphViewer) -> Dict[str, Any]:
    """Convert a graph to its JSON-compatible record."""
    aux = viewer.aux

    nodes = []
    for node in viewer.nodes.all():
        record = {
            "index": node.id,
            "label": node.label,
            "position": [node.position.x, node.position.y],
        }
        if aux is not None and aux.write_node is not None:
            record["aux"] = aux.write_node(node.aux)
        nodes.append(record)

    edges = []
    for edge in viewer.edges.all():
        record = {"from": edge.source, "to": edge.target, "label": edge.label}
        if aux is not None and aux.write_edge is not None:
            record["aux"] = aux.write_edge(edge.aux)
        edges.append(record)

    data: Dict[str, Any] = {"nodes": nodes, "edges": edges}
    if aux is not None and aux.write_graph is not None:
        data["aux"] = aux.write_graph(viewer.aux_data)
    return data


def _read_label(record: Dict[str, Any]) -> str:
    label = record.get("label", "")
    if not isinstance(label, str):
        raise TypeError(f"label must be a string, got {type(label).__name__}")
    return label


def _read_index(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"node index must be an integer, got {value!r}")
    return value


def graph_from_dict(
    data: Dict[str, Any],
    config: Optional[LayoutConfig] = None,
    aux: Optional[AuxCodec] = None,
) -> GraphViewer:
    """
    Rebuild a graph from its record.

    Nodes are loaded first under their saved ids, then gaps below the
    largest id become free ids, then edges are attached and every route is
    computed once.

    Raises:
        LoadError: If the record is malformed, repeats a node id or an edge,
            or has an edge whose endpoint is not a saved node.
    """
    viewer = GraphViewer(config, aux)

    try:
        if aux is not None and aux.read_graph is not None:
            viewer.aux_data = aux.read_graph(data.get("aux"))

        for record in data["nodes"]:
            index = _read_index(record["index"])
            raw = record["position"] if "position" in record else record["pos"]
            if len(raw) != 2:
                raise ValueError(f"position must have two coordinates, got {raw!r}")
            point = Point(float(raw[0]), float(raw[1]))

            node = viewer.nodes.restore(index, point, _read_label(record))
            if aux is not None and aux.read_node is not None:
                node.aux = aux.read_node(node, record.get("aux"))

        viewer.nodes.rebuild_free_ids()

        for record in data["edges"]:
            source = _read_index(record["from"])
            target = _read_index(record["to"])
            for endpoint in (source, target):
                if endpoint not in viewer.nodes:
                    raise LoadError(
                        f"Edge {source} -> {target} references unknown node {endpoint}"
                    )

            result = viewer.edges.insert(source, target, _read_label(record))
            if not result.created:
                raise LoadError(f"Duplicate edge {source} -> {target}")
            if aux is not None and aux.read_edge is not None:
                result.edge.aux = aux.read_edge(result.edge, record.get("aux"))
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise LoadError(f"Malformed graph data: {exc}") from exc

    viewer.recompute_routes()
    logger.debug(
        "Loaded graph with %d nodes and %d edges", len(viewer.nodes), len(viewer.edges)
    )
    return viewer


def dumps(viewer: GraphViewer, indent: Optional[int] = 2) -> str:
    return json.dumps(graph_to_dict(viewer), indent=indent, ensure_ascii=False)


def loads(
    text: str, config: Optional[LayoutConfig] = None, aux: Optional[AuxCodec] = None
) -> GraphViewer:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LoadError(f"Invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise LoadError("Graph data must be a JSON object")
    return graph_from_dict(data, config, aux)


def save(viewer: GraphViewer, filename: Union[str, Path]) -> None:
    """
    Save a graph to a JSON file.

    Args:
        viewer: Graph to save.
        filename: Output filename.
    """
    output_path = Path(filename)
    output_path.write_text(dumps(viewer), encoding="utf-8")
    logger.debug("Saved graph to %s", output_path)


def load(
    filename: Union[str, Path],
    config: Optional[LayoutConfig] = None,
    aux: Optional[AuxCodec] = None,
) -> GraphViewer:
    """
    Load a graph from a JSON file written by save().

    Raises:
        LoadError: If the file content is not a valid graph.
        OSError: If the file cannot be read.
    """
    return loads(Path(filename).read_text(encoding="utf-8"), config, aux)
