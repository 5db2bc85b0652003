"""REST API request/response payload types

These types define the contract for the REST API endpoints:
- /api/graph...: Graph editing, import/export, custom graphs
- /api/settings: Algorithm, start node, graph type, speed
- /api/playback...: Playback state machine
- /api/steps, /api/log: Generated steps and traversal log
- /api/traverse, /api/traverse/stream: Stateless step generation
"""

from pydantic import BaseModel, ConfigDict

from graph import Algorithm, DocumentEdge, GraphEdge, GraphNode, GraphType, PlaybackStatus, Position
from traversal import TraversalLog, TraversalStep


class GraphStats(BaseModel):
    """Counts for the current graph."""

    node_count: int
    edge_count: int


class GraphResponse(BaseModel):
    """Response for /api/graph endpoints."""

    model_config = ConfigDict(use_enum_values=True)

    nodes: list[GraphNode]
    edges: list[GraphEdge]
    graph_type: GraphType
    start_node: str | None
    stats: GraphStats


class NodeRequest(BaseModel):
    """Request body for adding a node. Id and label are generated when omitted."""

    id: str | None = None
    label: str | None = None
    position: Position | None = None


class EdgeRequest(BaseModel):
    """Request body for adding an edge; its id is "source-target"."""

    source: str
    target: str


class CustomGraphRequest(BaseModel):
    """Request body for generating a custom graph from an edge list.

    ``edge_list`` holds one "source target" pair per line, e.g. "1 2\\n2 3".
    """

    num_nodes: int
    edge_list: str
    num_edges: int | None = None  # Defaults to the number of non-blank lines
    graph_type: GraphType | None = None  # Keeps the current type when None


class SettingsRequest(BaseModel):
    """Request body for /api/settings. Omitted fields are left unchanged.

    Sending ``"start_node": null`` explicitly clears the start node.
    """

    algorithm: Algorithm | None = None
    start_node: str | None = None
    graph_type: GraphType | None = None
    speed: float | None = None


class SeekRequest(BaseModel):
    """Request body for /api/playback/seek. Out-of-range indices are clamped."""

    index: int


class PlaybackResponse(BaseModel):
    """Playback state exposed to the renderer."""

    model_config = ConfigDict(use_enum_values=True)

    status: PlaybackStatus
    cursor: int
    total_steps: int
    speed: float
    algorithm: Algorithm
    start_node: str | None
    run_key: str | None
    current_step: TraversalStep | None
    current_edge: str | None


class TraversalRequest(BaseModel):
    """Request body for stateless traversal.

    Used by both /api/traverse and /api/traverse/stream endpoints.
    """

    nodes: list[GraphNode]
    edges: list[DocumentEdge] = []
    graph_type: GraphType = GraphType.UNDIRECTED
    algorithm: Algorithm = Algorithm.BFS
    start_node: str | None = None


class TraversalResponse(BaseModel):
    """Response for /api/traverse: the full step sequence and log."""

    run_key: str
    steps: list[TraversalStep]
    log: TraversalLog
