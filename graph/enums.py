"""Graph enums for the traversal visualizer

Provides enums used for graph shape, algorithm selection, and playback status.
These are shared between the session, the step generator, and the server.
"""

from enum import Enum


class GraphType(str, Enum):
    """Directedness of the graph being traversed."""

    DIRECTED = "directed"
    UNDIRECTED = "undirected"


class Algorithm(str, Enum):
    """Traversal algorithm used to generate steps."""

    BFS = "BFS"
    DFS = "DFS"


class PlaybackStatus(str, Enum):
    """Status of the playback state machine."""

    IDLE = "IDLE"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"
