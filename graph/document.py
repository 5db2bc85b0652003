"""Graph document import/export and custom graph generation

This module provides:
- The persisted JSON layout (nodes with position/label, edges with ids)
- Atomic parsing of an imported document into a validated Graph
- Parsing of the "one edge per line" custom edge list
- Circular-layout graph generation for custom mode

No traversal or playback state is ever written to a document.
"""

import json
import math

from pydantic import BaseModel, Field, ValidationError, model_validator

from .adjacency import validate_edges
from .enums import GraphType
from .errors import InvalidEdgeReference, ParseError
from .types import Graph, GraphEdge, GraphNode, Position, edge_id

# Circular layout used for generated graphs
LAYOUT_CENTER = (400.0, 300.0)
LAYOUT_MAX_RADIUS = 150.0


class DocumentEdge(BaseModel):
    """An edge as written in a document. The id is derived when absent."""

    id: str | None = None
    source: str
    target: str

    @model_validator(mode="after")
    def fill_id(self) -> "DocumentEdge":
        if not self.id:
            self.id = edge_id(self.source, self.target)
        return self


class GraphDocument(BaseModel):
    """Persisted document layout: ``{"nodes": [...], "edges": [...]}``."""

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[DocumentEdge] = Field(default_factory=list)


def parse_graph_document(
    raw: str | bytes | dict,
    graph_type: GraphType | str = GraphType.UNDIRECTED,
) -> Graph:
    """Parse and validate an imported document.

    The whole document is validated before a Graph is returned, so callers
    can swap it in atomically.

    Raises:
        ParseError: On invalid JSON, a schema mismatch, duplicate node ids,
            or an edge naming an unknown node.
    """
    try:
        payload = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e

    if not isinstance(payload, dict):
        raise ParseError("Document must be a JSON object with 'nodes' and 'edges'")

    try:
        document = GraphDocument.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ParseError(f"Invalid document at '{location}': {first['msg']}") from e

    seen: set[str] = set()
    for node in document.nodes:
        if node.id in seen:
            raise ParseError(f"Duplicate node id '{node.id}'")
        seen.add(node.id)

    edges = [GraphEdge(id=e.id, source=e.source, target=e.target) for e in document.edges]
    try:
        validate_edges(seen, edges)
    except InvalidEdgeReference as e:
        raise ParseError(str(e)) from e

    return Graph(nodes=document.nodes, edges=edges, graph_type=graph_type)


def dump_graph_document(graph: Graph) -> dict:
    """Export a graph in the persisted document layout."""
    return {
        "nodes": [node.model_dump() for node in graph.nodes],
        "edges": [edge.model_dump() for edge in graph.edges],
    }


def parse_edge_list(
    text: str,
    num_nodes: int,
    num_edges: int,
    graph_type: GraphType | str = GraphType.UNDIRECTED,
) -> list[tuple[str, str]]:
    """Parse a custom edge list with one "source target" pair per line.

    Blank lines are ignored. For undirected graphs "1 2" and "2 1" count as
    the same edge.

    Raises:
        ParseError: On a wrong edge count, a malformed line, a duplicate
            edge, or more distinct nodes than num_nodes.
    """
    lines = [line.strip() for line in text.strip().splitlines() if line.strip()]

    if len(lines) != num_edges:
        raise ParseError(f"Expected {num_edges} edges, but found {len(lines)}")

    directed = GraphType(graph_type) == GraphType.DIRECTED
    node_set: set[str] = set()
    edge_keys: set[str] = set()
    pairs: list[tuple[str, str]] = []

    for i, line in enumerate(lines, 1):
        parts = line.split()
        if len(parts) != 2:
            raise ParseError(f"Line {i}: Expected 2 nodes per edge, found {len(parts)}")

        source, target = parts
        node_set.update(parts)

        key = f"{source}-{target}" if directed else "-".join(sorted(parts))
        if key in edge_keys:
            raise ParseError(f"Duplicate edge found: {source} {target}")
        edge_keys.add(key)
        pairs.append((source, target))

    if len(node_set) > num_nodes:
        raise ParseError(
            f"Found {len(node_set)} unique nodes, but expected maximum {num_nodes}"
        )

    return pairs


def circular_layout(num_nodes: int) -> list[Position]:
    """Place nodes evenly on a circle that grows with the node count."""
    center_x, center_y = LAYOUT_CENTER
    radius = min(LAYOUT_MAX_RADIUS, 50 + num_nodes * 10)
    positions: list[Position] = []
    for i in range(num_nodes):
        angle = (2 * math.pi * i) / num_nodes
        positions.append(
            Position(x=center_x + radius * math.cos(angle), y=center_y + radius * math.sin(angle))
        )
    return positions


def generate_custom_graph(
    num_nodes: int,
    pairs: list[tuple[str, str]],
    graph_type: GraphType | str = GraphType.UNDIRECTED,
) -> Graph:
    """Build a graph with nodes "1".."n" on a circle and the given edges.

    Raises:
        InvalidEdgeReference: If a pair names a node outside "1".."n".
    """
    nodes = [
        GraphNode(id=str(i), position=position, label=f"N{i}")
        for i, position in enumerate(circular_layout(num_nodes), 1)
    ]
    edges = [GraphEdge.between(source, target) for source, target in pairs]
    validate_edges((node.id for node in nodes), edges)
    return Graph(nodes=nodes, edges=edges, graph_type=graph_type)
