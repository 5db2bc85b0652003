"""Burr application for BFS/DFS step generation

Provides:
- build_traversal_app(): Creates the Burr application for one run
- generate_steps(): Runs it and returns (steps, log)
- generate_bfs_steps() / generate_dfs_steps(): Algorithm-specific entry points
- generate_run_key(): Deterministic identifier for a (graph, algorithm, start) run

Usage:
    from graph import build_adjacency_index
    from traversal import generate_bfs_steps

    adjacency = build_adjacency_index(["1", "2"], edges, "undirected")
    steps, log = generate_bfs_steps("1", adjacency, ["1", "2"])

The run is synchronous and bounded by the graph size, so it is safe to
call inline from a request handler.
"""

import hashlib
import json
from collections.abc import Mapping, Sequence

from burr.core import Application, ApplicationBuilder, expr

from graph import Algorithm, Graph, InvalidStartState

from .actions import close_component, expand_frontier, finish, seed_component, select_root, visit_node
from .frontier import get_frontier
from .state_types import TraversalLog, TraversalStep


def generate_run_key(graph: Graph, algorithm: Algorithm | str, start_node: str) -> str:
    """Generate a deterministic key for a run.

    Identical graph/algorithm/start produce identical step sequences, so they
    also share a key. Node positions and labels do not affect traversal and
    are left out.

    Returns:
        A hash string (e.g., "bfs_a1b2c3d4e5f6a7b8")
    """
    algorithm = get_frontier(algorithm).algorithm
    normalized = {
        "graph_type": str(getattr(graph.graph_type, "value", graph.graph_type)),
        "nodes": graph.node_ids,
        "edges": [[edge.source, edge.target] for edge in graph.edges],
        "start": start_node,
    }
    key_str = json.dumps(normalized, separators=(",", ":"))
    key_hash = hashlib.sha256(key_str.encode()).hexdigest()[:16]

    return f"{algorithm.value.lower()}_{key_hash}"


def build_traversal_app(
    start_node: str,
    adjacency: Mapping[str, Sequence[str]],
    node_ids: Sequence[str],
    algorithm: Algorithm | str = Algorithm.BFS,
) -> Application:
    """Build the Burr application that generates one run's steps.

    The multi-component driver lives in the transitions: each component is
    seeded, visited/expanded until its frontier empties, then closed, after
    which select_root picks the next unvisited node in node-list order.

    Args:
        start_node: Root of the first component
        adjacency: Ordered neighbour lists (see graph.build_adjacency_index)
        node_ids: Full ordered node list, scanned for further components
        algorithm: "BFS" or "DFS"

    Returns:
        A Burr Application; drive it with ``app.iterate(halt_after=["finish"])``
        and collect the ``step`` each action returns

    Raises:
        InvalidStartState: If start_node is not in the adjacency index
        ValueError: If the algorithm is unknown
    """
    frontier = get_frontier(algorithm)

    if start_node not in adjacency:
        raise InvalidStartState(f"Start node '{start_node}' is not in the graph")

    return (
        ApplicationBuilder()
        .with_actions(
            seed_component=seed_component,
            visit_node=visit_node,
            expand_frontier=expand_frontier,
            close_component=close_component,
            select_root=select_root,
            finish=finish,
        )
        .with_transitions(
            ("seed_component", "visit_node"),
            # Fresh node -> push its neighbours
            ("visit_node", "expand_frontier", expr("newly_visited")),
            # Stale pop with more to pop -> pop again
            ("visit_node", "visit_node", expr("len(frontier) > 0")),
            ("visit_node", "close_component"),
            ("expand_frontier", "visit_node", expr("len(frontier) > 0")),
            # Frontier empty -> component complete
            ("expand_frontier", "close_component"),
            ("close_component", "select_root"),
            ("select_root", "seed_component", expr("next_root is not None")),
            ("select_root", "finish"),
        )
        .with_entrypoint("seed_component")
        .with_state(
            algorithm=frontier.algorithm.value,
            adjacency={node: list(neighbors) for node, neighbors in adjacency.items()},
            node_ids=list(node_ids),
            next_root=start_node,
            scan_index=0,
            frontier=[],
            visited=[],
            node_order={},
            parent_map={},
            level={},
            discovery_time={},
            finish_time={},
            clock=0,
            traversed_edges=[],
            component=[],
            components=[],
            current_node=None,
            newly_visited=False,
            step_count=0,
        )
        .build()
    )


def generate_steps(
    algorithm: Algorithm | str,
    start_node: str,
    adjacency: Mapping[str, Sequence[str]],
    node_ids: Sequence[str],
) -> tuple[list[TraversalStep], TraversalLog]:
    """Run a traversal to completion.

    Pure and deterministic: the same inputs always produce the same steps.

    Returns:
        Tuple of (steps, log)
    """
    app = build_traversal_app(start_node, adjacency, node_ids, algorithm=algorithm)

    steps: list[TraversalStep] = []
    log = TraversalLog()
    for action_, result, _ in app.iterate(halt_after=["finish"]):
        if action_.name == "finish":
            log = result["log"]
        elif result.get("step") is not None:
            steps.append(result["step"])

    total = len(steps)
    return [step.model_copy(update={"total_steps": total}) for step in steps], log


def generate_bfs_steps(
    start_node: str,
    adjacency: Mapping[str, Sequence[str]],
    node_ids: Sequence[str],
) -> tuple[list[TraversalStep], TraversalLog]:
    """Breadth-first steps: FIFO frontier, ``level`` populated."""
    return generate_steps(Algorithm.BFS, start_node, adjacency, node_ids)


def generate_dfs_steps(
    start_node: str,
    adjacency: Mapping[str, Sequence[str]],
    node_ids: Sequence[str],
) -> tuple[list[TraversalStep], TraversalLog]:
    """Depth-first steps: LIFO frontier, discovery/finish clocks populated."""
    return generate_steps(Algorithm.DFS, start_node, adjacency, node_ids)
