"""Graph session: graph editing plus the playback state machine

One GraphSession owns everything that changes while the visualizer is open:
the graph, the algorithm/start selections, the generated steps and log, the
cursor, the playback status, and the autoplay timer. All mutation goes
through its methods.

States:
- IDLE: no run
- RUNNING: run exists, autoplay timer armed
- PAUSED: run exists, cursor frozen
- COMPLETED: stepped past the last index. Stepping backward from here moves
  the cursor but keeps COMPLETED; only run, reset or a graph edit leave it.

Every transition away from RUNNING disarms the timer.
"""

from graph import (
    Algorithm,
    Graph,
    GraphEdge,
    GraphNode,
    GraphType,
    InvalidEdgeReference,
    InvalidStartState,
    ParseError,
    PlaybackStatus,
    Position,
    build_adjacency_index,
    dump_graph_document,
    generate_custom_graph,
    parse_edge_list,
    parse_graph_document,
)
from traversal import TraversalLog, TraversalStep, generate_run_key, generate_steps

from .config import PlaybackConfig
from .scheduler import AutoplayTimer, TimerProtocol

# Marks an omitted start node, since None clears it
UNSET = object()


class GraphSession:
    """The single owner of graph, steps, cursor, and playback status.

    Args:
        config: Playback configuration (speed range, base interval)
        timer: Scheduled task driving autoplay; defaults to an asyncio timer
    """

    def __init__(
        self,
        config: PlaybackConfig | None = None,
        timer: TimerProtocol | None = None,
    ) -> None:
        self.config = config or PlaybackConfig()
        self.timer = timer or AutoplayTimer()

        self.graph = Graph()
        self.algorithm = Algorithm.BFS
        self.start_node: str | None = None
        self.speed = self.config.default_speed

        self._status = PlaybackStatus.IDLE
        self._cursor = 0
        self._steps: list[TraversalStep] = []
        self._log = TraversalLog()
        self._node_counter = 0
        self.run_key: str | None = None

    # ------------------------------------------------------------------
    # Read-only views for the renderer
    # ------------------------------------------------------------------

    @property
    def status(self) -> PlaybackStatus:
        return self._status

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def steps(self) -> tuple[TraversalStep, ...]:
        return tuple(self._steps)

    @property
    def log(self) -> TraversalLog:
        return self._log

    @property
    def current_step(self) -> TraversalStep | None:
        return self._steps[self._cursor] if self._steps else None

    @property
    def current_edge(self) -> str | None:
        """Tree edge added by the current step, if any."""
        if not self._steps or self._cursor == 0:
            return None
        previous = set(self._steps[self._cursor - 1].traversed_edges)
        for edge in self._steps[self._cursor].traversed_edges:
            if edge not in previous:
                return edge
        return None

    def step_at(self, index: int) -> TraversalStep | None:
        """Step at ``index`` clamped to the valid range."""
        if not self._steps:
            return None
        return self._steps[self._clamp(index)]

    # ------------------------------------------------------------------
    # Playback transitions
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Generate steps for the current graph and start autoplay.

        Raises:
            InvalidStartState: No nodes, no start node, or an unknown start node
            InvalidEdgeReference: An edge names an unknown node

        On any error the session is left unchanged, including the RuntimeError
        raised when the timer cannot be armed outside a running event loop.
        """
        node_ids = self.graph.node_ids
        if not node_ids:
            self._reject("run", "Graph has no nodes")
        if self.start_node is None:
            self._reject("run", "No start node selected")
        if self.start_node not in node_ids:
            self._reject("run", f"Start node '{self.start_node}' is not in the graph")

        adjacency = build_adjacency_index(node_ids, self.graph.edges, self.graph.graph_type)
        steps, log = generate_steps(self.algorithm, self.start_node, adjacency, node_ids)

        # Nothing is committed until the timer is armed
        self._arm(self.speed)
        self._steps = list(steps)
        self._log = log
        self._cursor = 0
        self.run_key = generate_run_key(self.graph, self.algorithm, self.start_node)
        self._status = PlaybackStatus.RUNNING

        print(
            f"[PLAYBACK] run: algorithm={self.algorithm.value}, start={self.start_node}, "
            f"steps={len(self._steps)}, run_key={self.run_key}"
        )

    def resume(self) -> None:
        """PAUSED -> RUNNING without regenerating steps.

        Raises:
            InvalidStartState: If there is no run to resume
        """
        if self._status == PlaybackStatus.IDLE or not self._steps:
            self._reject("resume", "No run to resume")
        if self._status != PlaybackStatus.PAUSED:
            print(f"[PLAYBACK] resume ignored in {self._status.value}")
            return

        self._arm(self.speed)
        self._status = PlaybackStatus.RUNNING
        print(f"[PLAYBACK] resume at cursor={self._cursor}")

    def pause(self) -> None:
        """RUNNING -> PAUSED. No-op in any other state."""
        if self._status != PlaybackStatus.RUNNING:
            return
        self.timer.disarm()
        self._status = PlaybackStatus.PAUSED
        print(f"[PLAYBACK] pause at cursor={self._cursor}")

    def step_forward(self) -> None:
        """Advance the cursor; at the last index, move to COMPLETED instead."""
        if not self._steps:
            return

        if self._cursor < len(self._steps) - 1:
            self._cursor += 1
        else:
            self.timer.disarm()
            self._status = PlaybackStatus.COMPLETED
            print(f"[PLAYBACK] completed at cursor={self._cursor}")

    def step_backward(self) -> None:
        """Move the cursor back one step. Ignored while RUNNING and at index 0.

        The status is left as is, so a COMPLETED session stays COMPLETED
        with the cursor below the last index.
        """
        if self._status == PlaybackStatus.RUNNING:
            print("[PLAYBACK] step_backward ignored while RUNNING")
            return
        if self._cursor > 0:
            self._cursor -= 1

    def seek(self, index: int) -> None:
        """Jump to ``index``, clamped to [0, last]. No-op without steps."""
        if not self._steps:
            return
        self._cursor = self._clamp(index)

    def reset(self) -> None:
        """Any state -> IDLE; clears steps, log, and cursor."""
        self.timer.disarm()
        was = self._status
        self._status = PlaybackStatus.IDLE
        self._steps = []
        self._log = TraversalLog()
        self._cursor = 0
        self.run_key = None
        if was != PlaybackStatus.IDLE:
            print(f"[PLAYBACK] reset from {was.value}")

    def set_speed(self, speed: float) -> float:
        """Set the speed multiplier (clamped). Re-arms the timer while RUNNING.

        Returns:
            The clamped speed actually applied
        """
        speed = self.config.clamp_speed(speed)
        if self._status == PlaybackStatus.RUNNING:
            self._arm(speed)
        self.speed = speed
        return self.speed

    def tick(self) -> None:
        """One autoplay tick: a single step_forward while RUNNING."""
        if self._status == PlaybackStatus.RUNNING:
            self.step_forward()

    # ------------------------------------------------------------------
    # Selections
    # ------------------------------------------------------------------

    def set_algorithm(self, algorithm: Algorithm | str) -> None:
        self.algorithm = Algorithm(algorithm)

    def set_start_node(self, node_id: str | None) -> None:
        """Select the start node for the next run.

        Raises:
            InvalidStartState: If node_id is not in the graph
        """
        if node_id is not None and node_id not in self.graph.node_ids:
            raise InvalidStartState(f"Start node '{node_id}' is not in the graph")
        self.start_node = node_id

    def set_graph_type(self, graph_type: GraphType | str) -> None:
        graph_type = GraphType(graph_type)
        if graph_type.value != self.graph.graph_type:
            self._replace_graph(self.graph.model_copy(update={"graph_type": graph_type.value}))

    def apply_settings(
        self,
        algorithm: Algorithm | str | None = None,
        start_node: str | None | object = UNSET,
        graph_type: GraphType | str | None = None,
        speed: float | None = None,
    ) -> None:
        """Apply several selections at once. Omitted values are left unchanged.

        Every value is validated before any is applied, so a rejected call
        changes nothing.

        Raises:
            InvalidStartState: If start_node is not in the graph
            ValueError: If the algorithm or graph type is unknown
        """
        algorithm = Algorithm(algorithm) if algorithm is not None else None
        graph_type = GraphType(graph_type) if graph_type is not None else None
        if start_node not in (UNSET, None) and start_node not in self.graph.node_ids:
            raise InvalidStartState(f"Start node '{start_node}' is not in the graph")

        if speed is not None:
            self.set_speed(speed)
        if graph_type is not None:
            self.set_graph_type(graph_type)
        if algorithm is not None:
            self.algorithm = algorithm
        if start_node is not UNSET:
            self.start_node = start_node

    # ------------------------------------------------------------------
    # Graph editing
    # ------------------------------------------------------------------

    def add_node(
        self,
        position: Position | None = None,
        node_id: str | None = None,
        label: str | None = None,
    ) -> GraphNode:
        """Add a node. Ids default to "node-<k>" and labels to "N<count>".

        Raises:
            ValueError: If node_id is already in the graph
        """
        existing = set(self.graph.node_ids)
        if node_id is None:
            self._node_counter += 1
            while f"node-{self._node_counter}" in existing:
                self._node_counter += 1
            node_id = f"node-{self._node_counter}"
        elif node_id in existing:
            raise ValueError(f"Node '{node_id}' already exists")

        node = GraphNode(
            id=node_id,
            position=position or Position(),
            label=label if label is not None else f"N{len(self.graph.nodes) + 1}",
        )
        self._replace_graph(self.graph.model_copy(update={"nodes": [*self.graph.nodes, node]}))
        return node

    def remove_node(self, node_id: str) -> None:
        """Remove a node and every edge touching it.

        Raises:
            KeyError: If the node is not in the graph
        """
        if node_id not in self.graph.node_ids:
            raise KeyError(f"Node '{node_id}' not found")

        nodes = [node for node in self.graph.nodes if node.id != node_id]
        edges = [
            edge for edge in self.graph.edges
            if edge.source != node_id and edge.target != node_id
        ]
        if self.start_node == node_id:
            self.start_node = None
        self._replace_graph(self.graph.model_copy(update={"nodes": nodes, "edges": edges}))

    def add_edge(self, source: str, target: str) -> GraphEdge:
        """Add edge "source-target"; an edge with the same id is reused.

        Raises:
            InvalidEdgeReference: If either endpoint is not in the graph
        """
        edge = GraphEdge.between(source, target)
        node_ids = set(self.graph.node_ids)
        for endpoint in (source, target):
            if endpoint not in node_ids:
                raise InvalidEdgeReference(edge.id, endpoint)

        for existing in self.graph.edges:
            if existing.id == edge.id:
                return existing

        self._replace_graph(self.graph.model_copy(update={"edges": [*self.graph.edges, edge]}))
        return edge

    def remove_edge(self, edge_id: str) -> None:
        """Remove an edge by id.

        Raises:
            KeyError: If no edge has that id
        """
        edges = [edge for edge in self.graph.edges if edge.id != edge_id]
        if len(edges) == len(self.graph.edges):
            raise KeyError(f"Edge '{edge_id}' not found")
        self._replace_graph(self.graph.model_copy(update={"edges": edges}))

    def clear_graph(self) -> None:
        self.start_node = None
        self._node_counter = 0
        self._replace_graph(Graph(graph_type=self.graph.graph_type))

    def import_graph(self, raw: str | bytes | dict) -> Graph:
        """Replace the graph with an imported document, atomically.

        Raises:
            ParseError: If the document is malformed; nothing is changed
        """
        graph = parse_graph_document(raw, graph_type=self.graph.graph_type)
        self.start_node = None
        self._replace_graph(graph)
        print(f"[PLAYBACK] import_graph: nodes={len(graph.nodes)}, edges={len(graph.edges)}")
        return graph

    def export_graph(self) -> dict:
        return dump_graph_document(self.graph)

    def generate_custom_graph(
        self,
        num_nodes: int,
        edge_list: str,
        num_edges: int | None = None,
        graph_type: GraphType | str | None = None,
    ) -> Graph:
        """Replace the graph with nodes "1".."n" on a circle plus a parsed edge list.

        ``num_edges`` defaults to the number of non-blank lines and
        ``graph_type`` to the current type. The first node becomes the start
        node. Nothing changes unless the whole edge list is valid.

        Raises:
            ParseError: If the edge list is malformed or names a node outside 1..n
        """
        if num_nodes < 1:
            raise ParseError(f"Number of nodes must be at least 1, got {num_nodes}")
        if num_edges is None:
            num_edges = len([line for line in edge_list.splitlines() if line.strip()])
        graph_type = GraphType(graph_type if graph_type is not None else self.graph.graph_type)

        pairs = parse_edge_list(edge_list, num_nodes, num_edges, graph_type)
        try:
            graph = generate_custom_graph(num_nodes, pairs, graph_type)
        except InvalidEdgeReference as e:
            raise ParseError(f"Node '{e.node_id}' is outside 1..{num_nodes}") from e

        self.start_node = graph.nodes[0].id
        self._replace_graph(graph)
        return graph

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _replace_graph(self, graph: Graph) -> None:
        self.graph = graph
        if self._status != PlaybackStatus.IDLE:
            self.reset()

    def _arm(self, speed: float) -> None:
        self.timer.arm(self.config.interval_seconds(speed), self.tick)

    def _clamp(self, index: int) -> int:
        return min(max(index, 0), len(self._steps) - 1)

    def _reject(self, operation: str, reason: str) -> None:
        print(f"[PLAYBACK] {operation} rejected: {reason}")
        raise InvalidStartState(reason)
