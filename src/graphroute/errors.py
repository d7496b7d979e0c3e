"""
Exceptions raised by graphroute.

Geometry never raises: degenerate vectors fall back to a fixed direction.
Errors are reserved for caller bugs (unknown node ids, bad configuration)
and for persisted data that cannot be loaded.
"""


class GraphError(Exception):
    """Base class for all graphroute errors."""

    pass


class InvalidReferenceError(GraphError, KeyError):
    """Raised when an operation references a node id that does not exist."""

    def __init__(self, node_id):
        self.node_id = node_id
        super().__init__(f"No node with id {node_id!r}")

    def __str__(self) -> str:
        return self.args[0]


class EdgeNotFoundError(GraphError, KeyError):
    """Raised when an operation needs an edge that does not exist."""

    def __init__(self, source, target):
        self.source = source
        self.target = target
        super().__init__(f"No edge {source!r} -> {target!r}")

    def __str__(self) -> str:
        return self.args[0]


class LoadError(GraphError):
    """Raised when a persisted graph cannot be reconstructed."""

    pass


class ConfigError(GraphError, ValueError):
    """Raised when a LayoutConfig holds invalid values."""

    pass
