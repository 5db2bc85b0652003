"""Adjacency index construction

The index is rebuilt from scratch for every run because edges may change
between runs. Neighbour order is the edge input order and decides the order
in which both BFS and DFS visit neighbours, so it must be preserved exactly.
"""

from collections.abc import Iterable, Sequence

from .enums import GraphType
from .errors import InvalidEdgeReference
from .types import GraphEdge


def validate_edges(node_ids: Iterable[str], edges: Iterable[GraphEdge]) -> None:
    """Raise InvalidEdgeReference for the first edge naming an unknown node."""
    known = set(node_ids)
    for edge in edges:
        for endpoint in (edge.source, edge.target):
            if endpoint not in known:
                raise InvalidEdgeReference(edge.id, endpoint)


def build_adjacency_index(
    node_ids: Sequence[str],
    edges: Sequence[GraphEdge],
    graph_type: GraphType | str = GraphType.UNDIRECTED,
) -> dict[str, list[str]]:
    """Build the ordered per-node neighbour list.

    Args:
        node_ids: Ordered node ids. Every id gets an entry, isolated nodes
            get an empty list.
        edges: Ordered edges. ``target`` is appended to ``source``'s list,
            and for undirected graphs ``source`` to ``target``'s list too.
        graph_type: "directed" or "undirected"

    Returns:
        Mapping of node id to its ordered neighbour ids

    Raises:
        InvalidEdgeReference: If an edge names a node absent from node_ids.
            Validation runs before anything is built.
    """
    validate_edges(node_ids, edges)

    undirected = GraphType(graph_type) == GraphType.UNDIRECTED
    adjacency: dict[str, list[str]] = {node_id: [] for node_id in node_ids}

    for edge in edges:
        adjacency[edge.source].append(edge.target)
        if undirected:
            adjacency[edge.target].append(edge.source)

    return adjacency
