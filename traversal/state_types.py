"""Step and log types for traversal playback

These types define what the renderer replays:
- TraversalStep: One immutable snapshot of the traversal
- TraversalLog: Aggregate visited order, tree edges, and components of a run
"""

from pydantic import BaseModel, ConfigDict, Field


class TraversalStep(BaseModel):
    """An immutable snapshot emitted by the step generator.

    Every collection is a fresh copy taken when the step is appended, so
    later changes to the generator's working state never leak into earlier
    steps.

    BFS runs populate ``level``; DFS runs populate ``discovery_time`` and
    ``finish_time``. The fields of the other algorithm stay None.
    """

    model_config = ConfigDict(frozen=True)

    current_node: str
    visited_nodes: list[str]  # Global discovery order so far
    frontier: list[str]  # Queue (BFS, head first) or stack (DFS, top last)
    traversed_edges: list[str]  # Tree edge ids so far, "parent-child"
    step_index: int  # 0-based position in the sequence
    total_steps: int = 0  # Stamped once generation finishes
    node_order: dict[str, int]  # node -> 1-based global discovery rank
    parent_map: dict[str, str | None]  # node -> parent, None for component roots
    level: dict[str, int] | None = None
    discovery_time: dict[str, int] | None = None
    finish_time: dict[str, int] | None = None


class TraversalLog(BaseModel):
    """Aggregate result of a whole run, across every component.

    ``components`` holds one node list per component in completion order,
    each in pop order. DFS runs also carry the final discovery and finish
    clocks, which no step shows for the last component.
    """

    model_config = ConfigDict(frozen=True)

    visited_nodes: list[str] = Field(default_factory=list)
    traversed_edges: list[str] = Field(default_factory=list)
    components: list[list[str]] = Field(default_factory=list)
    discovery_time: dict[str, int] | None = None
    finish_time: dict[str, int] | None = None
