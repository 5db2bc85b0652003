"""Step generation module for BFS/DFS traversal playback

Provides a Burr-based step generator that turns a graph, an algorithm, and a
start node into an immutable sequence of TraversalSteps plus a TraversalLog.
BFS and DFS share the same actions and multi-component driver; they differ
only in the frontier discipline picked from FRONTIER_REGISTRY.

## Example usage

    from graph import build_adjacency_index
    from traversal import generate_steps

    adjacency = build_adjacency_index(node_ids, edges, "undirected")
    steps, log = generate_steps("DFS", "1", adjacency, node_ids)
    print(log.components)
"""

from .actions import (
    close_component,
    expand_frontier,
    finish,
    seed_component,
    select_root,
    snapshot,
    visit_node,
)
from .frontier import (
    FRONTIER_REGISTRY,
    BreadthFirstFrontier,
    DepthFirstFrontier,
    FrontierProtocol,
    get_frontier,
)
from .generator import (
    build_traversal_app,
    generate_bfs_steps,
    generate_dfs_steps,
    generate_run_key,
    generate_steps,
)
from .state_types import TraversalLog, TraversalStep

__all__ = [
    # State Types
    "TraversalStep",
    "TraversalLog",
    # Actions
    "seed_component",
    "visit_node",
    "expand_frontier",
    "close_component",
    "select_root",
    "finish",
    "snapshot",
    # Frontier
    "FrontierProtocol",
    "BreadthFirstFrontier",
    "DepthFirstFrontier",
    "FRONTIER_REGISTRY",
    "get_frontier",
    # Generator
    "build_traversal_app",
    "generate_steps",
    "generate_bfs_steps",
    "generate_dfs_steps",
    "generate_run_key",
]
