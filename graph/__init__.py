"""Graph package for the traversal visualizer

This package provides:
- Graph types (GraphNode, GraphEdge, Graph) for nodes and edges
- Enums (GraphType, Algorithm, PlaybackStatus)
- Errors shared by every layer (InvalidEdgeReference, InvalidStartState, ParseError)
- Adjacency index construction
- Document import/export and custom graph generation
"""

from .adjacency import build_adjacency_index, validate_edges
from .document import (
    DocumentEdge,
    GraphDocument,
    circular_layout,
    dump_graph_document,
    generate_custom_graph,
    parse_edge_list,
    parse_graph_document,
)
from .enums import Algorithm, GraphType, PlaybackStatus
from .errors import GraphError, InvalidEdgeReference, InvalidStartState, ParseError
from .types import Graph, GraphEdge, GraphNode, Position, edge_id

__all__ = [
    # Enums
    "Algorithm",
    "GraphType",
    "PlaybackStatus",
    # Graph types
    "Graph",
    "GraphEdge",
    "GraphNode",
    "Position",
    "edge_id",
    # Errors
    "GraphError",
    "InvalidEdgeReference",
    "InvalidStartState",
    "ParseError",
    # Adjacency
    "build_adjacency_index",
    "validate_edges",
    # Documents
    "DocumentEdge",
    "GraphDocument",
    "circular_layout",
    "dump_graph_document",
    "generate_custom_graph",
    "parse_edge_list",
    "parse_graph_document",
]
