"""Errors raised by graph construction, import, and playback.

Every error here is local and recoverable: the session only holds state that
can be rebuilt from the graph, so none of them are fatal.
"""


class GraphError(Exception):
    """Base class for visualizer errors."""


class InvalidEdgeReference(GraphError):
    """An edge names a node that is not in the node list."""

    def __init__(self, edge_id: str, node_id: str):
        self.edge_id = edge_id
        self.node_id = node_id
        super().__init__(f"Edge '{edge_id}' references unknown node '{node_id}'")


class InvalidStartState(GraphError):
    """A run or resume was requested without a usable start node or graph."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class ParseError(GraphError):
    """An imported document or custom edge list could not be parsed."""
