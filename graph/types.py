"""Graph types for the traversal visualizer

These types are the single source of truth for graph nodes and edges,
used across the REST API, the persisted document layout, and the session.

Key feature: ConfigDict(use_enum_values=True) ensures enums serialize
as strings (e.g., "undirected") rather than enum objects.
"""

from pydantic import BaseModel, ConfigDict, Field

from .enums import GraphType


def edge_id(source: str, target: str) -> str:
    """Derive an edge id from its endpoints ("source-target")."""
    return f"{source}-{target}"


class Position(BaseModel):
    """Canvas position of a node. Only the renderer reads it."""

    x: float = 0.0
    y: float = 0.0


class GraphNode(BaseModel):
    """A node in the graph.

    Only ``id`` matters to traversal; position and label belong to the
    rendering side and are carried through import/export untouched.
    """

    id: str
    position: Position = Field(default_factory=Position)
    label: str = ""


class GraphEdge(BaseModel):
    """An edge connecting two nodes.

    For undirected graphs the source/target order only affects the
    adjacency order, never reachability.
    """

    id: str
    source: str
    target: str

    @classmethod
    def between(cls, source: str, target: str) -> "GraphEdge":
        return cls(id=edge_id(source, target), source=source, target=target)


class Graph(BaseModel):
    """A full graph: ordered nodes, ordered edges, and directedness."""

    model_config = ConfigDict(use_enum_values=True)

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)
    graph_type: GraphType = GraphType.UNDIRECTED

    @property
    def node_ids(self) -> list[str]:
        return [node.id for node in self.nodes]
