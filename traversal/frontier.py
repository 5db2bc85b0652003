"""Frontier disciplines for the step generator.

BFS and DFS share one driver and differ only in how the frontier is popped,
in which order neighbours are pushed, and which timing fields are tracked.
"""

from typing import Protocol

from graph import Algorithm


# ============================================================================
# Frontier Protocol
# ============================================================================


class FrontierProtocol(Protocol):
    """Protocol for frontier disciplines used by the traversal actions.

    Implementations must provide:
    - pop(frontier): next node and the remaining frontier (never mutates)
    - push_order(neighbors): neighbours in the order they are pushed
    - tracks_level / tracks_timing: which algorithm-specific fields to fill
    """

    algorithm: Algorithm
    tracks_level: bool
    tracks_timing: bool

    def pop(self, frontier: list[str]) -> tuple[str, list[str]]: ...

    def push_order(self, neighbors: list[str]) -> list[str]: ...


class BreadthFirstFrontier:
    """FIFO queue. Records BFS levels."""

    algorithm = Algorithm.BFS
    tracks_level = True
    tracks_timing = False

    def pop(self, frontier: list[str]) -> tuple[str, list[str]]:
        return frontier[0], frontier[1:]

    def push_order(self, neighbors: list[str]) -> list[str]:
        return list(neighbors)


class DepthFirstFrontier:
    """LIFO stack. Records discovery and finish clocks.

    Neighbours are pushed in reverse adjacency order so that popping still
    visits them in adjacency order.
    """

    algorithm = Algorithm.DFS
    tracks_level = False
    tracks_timing = True

    def pop(self, frontier: list[str]) -> tuple[str, list[str]]:
        return frontier[-1], frontier[:-1]

    def push_order(self, neighbors: list[str]) -> list[str]:
        return list(reversed(neighbors))


# ============================================================================
# Frontier Registry
# ============================================================================


FRONTIER_REGISTRY: dict[Algorithm, FrontierProtocol] = {
    Algorithm.BFS: BreadthFirstFrontier(),
    Algorithm.DFS: DepthFirstFrontier(),
}


def get_frontier(name: Algorithm | str) -> FrontierProtocol:
    """Get a frontier discipline by algorithm name.

    Args:
        name: Algorithm name ("BFS" or "DFS")

    Returns:
        Frontier discipline conforming to FrontierProtocol

    Raises:
        ValueError: If the algorithm name is unknown
    """
    if name not in FRONTIER_REGISTRY:
        raise ValueError(
            f"Unknown algorithm: {name}. "
            f"Available: {', '.join(a.value for a in FRONTIER_REGISTRY)}"
        )
    return FRONTIER_REGISTRY[name]
