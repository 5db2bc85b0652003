"""Burr actions for BFS/DFS step generation

Core actions:
- seed_component: Put a component root on the frontier, emit the initial step
- visit_node: Pop the frontier, mark the node visited, emit the visit step
- expand_frontier: Push unvisited neighbours, emit the frontier echo step
- close_component: Record the finished component (and DFS finish times)
- select_root: Find the next unvisited node in node-list order
- finish: Build the TraversalLog

Every action copies the collections it changes, so each emitted step owns
its own snapshot. Steps are returned in the action result, never kept in
state; only the working set and counters live there.
"""

from burr.core import State, action

from graph import edge_id

from .frontier import get_frontier
from .state_types import TraversalLog, TraversalStep

# State keys read when taking a step snapshot
SNAPSHOT_READS = [
    "algorithm",
    "current_node",
    "visited",
    "frontier",
    "traversed_edges",
    "node_order",
    "parent_map",
    "level",
    "discovery_time",
    "finish_time",
    "step_count",
]


# ============================================================================
# Helper Functions
# ============================================================================


def snapshot(state: State, **current) -> TraversalStep:
    """Build a step from the state, with ``current`` overriding stale keys.

    Actions pass the values they just computed (e.g., the popped frontier)
    since the state they were handed predates them.
    """
    values = {key: current[key] if key in current else state[key] for key in SNAPSHOT_READS}
    frontier = get_frontier(values["algorithm"])

    return TraversalStep(
        current_node=values["current_node"],
        visited_nodes=list(values["visited"]),
        frontier=list(values["frontier"]),
        traversed_edges=list(values["traversed_edges"]),
        step_index=values["step_count"],
        node_order=dict(values["node_order"]),
        parent_map=dict(values["parent_map"]),
        level=dict(values["level"]) if frontier.tracks_level else None,
        discovery_time=dict(values["discovery_time"]) if frontier.tracks_timing else None,
        finish_time=dict(values["finish_time"]) if frontier.tracks_timing else None,
    )


# ============================================================================
# Actions
# ============================================================================


@action(
    reads=SNAPSHOT_READS + ["next_root"],
    writes=["frontier", "component", "current_node", "parent_map", "level", "step_count"],
)
def seed_component(state: State) -> tuple[dict, State]:
    """SOURCE: Starts a component at ``next_root``.

    The root gets no parent (and level 0 for BFS). The initial step shows
    the frontier ``[root]`` before anything is popped.
    """
    root = state["next_root"]
    frontier = get_frontier(state["algorithm"])

    parent_map = {**state["parent_map"], root: None}
    level = dict(state["level"])
    if frontier.tracks_level:
        level[root] = 0

    updates = {
        "frontier": [root],
        "component": [],
        "current_node": root,
        "parent_map": parent_map,
        "level": level,
    }
    step = snapshot(state, **updates)

    print(f"[TRAVERSAL] seed_component: root={root}, step={step.step_index}")
    return {"root": root, "step": step}, state.update(step_count=step.step_index + 1, **updates)


@action(
    reads=SNAPSHOT_READS + ["component", "clock"],
    writes=[
        "frontier",
        "visited",
        "node_order",
        "discovery_time",
        "clock",
        "traversed_edges",
        "component",
        "current_node",
        "newly_visited",
        "step_count",
    ],
)
def visit_node(state: State) -> tuple[dict, State]:
    """Pops the frontier and visits the node if it is still unvisited.

    A visit assigns the next global discovery rank (ranks never restart
    between components), the DFS discovery clock, and the tree edge from the
    node's parent, then emits the post-visit step.
    """
    frontier = get_frontier(state["algorithm"])
    node, remaining = frontier.pop(state["frontier"])

    if node in state["visited"]:
        return {"node": node, "visited": False, "step": None}, state.update(
            frontier=remaining, newly_visited=False
        )

    visited = [*state["visited"], node]
    updates = {
        "frontier": remaining,
        "visited": visited,
        "node_order": {**state["node_order"], node: len(visited)},
        "component": [*state["component"], node],
        "current_node": node,
        "newly_visited": True,
    }

    if frontier.tracks_timing:
        clock = state["clock"] + 1
        updates["clock"] = clock
        updates["discovery_time"] = {**state["discovery_time"], node: clock}

    parent = state["parent_map"].get(node)
    traversed_edges = list(state["traversed_edges"])
    if parent is not None:
        traversed_edges.append(edge_id(parent, node))
    updates["traversed_edges"] = traversed_edges

    step = snapshot(state, **updates)
    return {"node": node, "visited": True, "step": step}, state.update(
        step_count=step.step_index + 1, **updates
    )


@action(
    reads=SNAPSHOT_READS + ["adjacency"],
    writes=["frontier", "parent_map", "level", "step_count"],
)
def expand_frontier(state: State) -> tuple[dict, State]:
    """Pushes the current node's unvisited, not-yet-queued neighbours.

    Parent (and BFS level) are assigned on first encounter only. When the
    frontier is non-empty afterwards, a second step for the same node shows
    the updated frontier, separating "visit" from "enqueue".
    """
    frontier = get_frontier(state["algorithm"])
    node = state["current_node"]

    visited = set(state["visited"])
    pending = list(state["frontier"])
    queued = set(pending)
    parent_map = dict(state["parent_map"])
    level = dict(state["level"])
    pushed: list[str] = []

    for neighbor in frontier.push_order(state["adjacency"].get(node, [])):
        if neighbor in visited or neighbor in queued:
            continue
        pending.append(neighbor)
        queued.add(neighbor)
        pushed.append(neighbor)
        if neighbor not in parent_map:
            parent_map[neighbor] = node
            if frontier.tracks_level:
                level[neighbor] = level[node] + 1

    updates = {"frontier": pending, "parent_map": parent_map, "level": level}
    step = None
    if pending:
        step = snapshot(state, **updates)
        updates["step_count"] = step.step_index + 1

    return {"pushed": pushed, "step": step}, state.update(**updates)


@action(
    reads=["algorithm", "component", "components", "finish_time", "clock"],
    writes=["component", "components", "finish_time", "clock"],
)
def close_component(state: State) -> tuple[dict, State]:
    """Appends the finished component to the log.

    For DFS every node discovered in the component is stamped with a finish
    time once the stack has emptied, in discovery order. These are not
    nested (parenthesised) finish times.
    """
    frontier = get_frontier(state["algorithm"])
    component = list(state["component"])

    components = [*state["components"], component] if component else list(state["components"])
    updates = {"component": [], "components": components}

    if frontier.tracks_timing:
        clock = state["clock"]
        finish_time = dict(state["finish_time"])
        for node in component:
            clock += 1
            finish_time[node] = clock
        updates["clock"] = clock
        updates["finish_time"] = finish_time

    print(f"[TRAVERSAL] close_component: #{len(components)} size={len(component)}")
    return {"component": component}, state.update(**updates)


@action(reads=["node_ids", "visited", "scan_index"], writes=["next_root", "scan_index"])
def select_root(state: State) -> tuple[dict, State]:
    """Scans the node list for the next node not yet globally visited.

    ``scan_index`` only moves forward, so the whole scan is linear over a run.
    """
    node_ids = state["node_ids"]
    visited = set(state["visited"])
    index = state["scan_index"]

    while index < len(node_ids) and node_ids[index] in visited:
        index += 1

    next_root = node_ids[index] if index < len(node_ids) else None
    return {"next_root": next_root}, state.update(next_root=next_root, scan_index=index)


@action(
    reads=["algorithm", "step_count", "visited", "traversed_edges", "components", "discovery_time", "finish_time"],
    writes=[],
)
def finish(state: State) -> tuple[dict, State]:
    """Terminal state - aggregates the log. The caller stamps total_steps."""
    frontier = get_frontier(state["algorithm"])
    total = state["step_count"]

    log = TraversalLog(
        visited_nodes=list(state["visited"]),
        traversed_edges=list(state["traversed_edges"]),
        components=[list(component) for component in state["components"]],
        discovery_time=dict(state["discovery_time"]) if frontier.tracks_timing else None,
        finish_time=dict(state["finish_time"]) if frontier.tracks_timing else None,
    )

    print(
        f"[TRAVERSAL] finish: algorithm={state['algorithm']}, steps={total}, "
        f"visited={len(log.visited_nodes)}, components={len(log.components)}"
    )
    return {"total_steps": total, "log": log}, state
