"""Playback module for traversal visualization

Provides the GraphSession state machine (IDLE / RUNNING / PAUSED / COMPLETED),
its configuration, and the cancellable asyncio timer that drives autoplay.

## Example usage

    from playback import GraphSession

    session = GraphSession()
    session.generate_custom_graph(4, "1 2\n2 3\n3 4\n4 1")
    session.run()          # must be called inside a running event loop
    session.pause()
    session.step_forward()
    print(session.current_step)
"""

from .config import PlaybackConfig, configure_playback
from .scheduler import AutoplayTimer, TimerProtocol
from .session import UNSET, GraphSession

__all__ = [
    # Config
    "PlaybackConfig",
    "configure_playback",
    # Scheduler
    "AutoplayTimer",
    "TimerProtocol",
    # Session
    "GraphSession",
    "UNSET",
]
