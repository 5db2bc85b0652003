"""Server-side components for the traversal visualizer

This package contains the FastAPI server, the AG-UI streaming encoder helper,
and REST API payloads. Uses the official ag-ui-protocol package for AG-UI
event types and encoding.
"""

from .app import app, encode_event
from .payloads import (
    CustomGraphRequest,
    EdgeRequest,
    GraphResponse,
    GraphStats,
    NodeRequest,
    PlaybackResponse,
    SeekRequest,
    SettingsRequest,
    TraversalRequest,
    TraversalResponse,
)

# Re-export AG-UI types from official package for convenience
from ag_ui.core import (
    EventType as AGUIEventType,
    RunStartedEvent,
    RunFinishedEvent,
    RunErrorEvent,
    StepStartedEvent,
    StepFinishedEvent,
    StateSnapshotEvent,
    CustomEvent,
)
from ag_ui.encoder import EventEncoder

__all__ = [
    "app",
    "encode_event",
    "AGUIEventType",
    "RunStartedEvent",
    "RunFinishedEvent",
    "RunErrorEvent",
    "StepStartedEvent",
    "StepFinishedEvent",
    "StateSnapshotEvent",
    "CustomEvent",
    "EventEncoder",
    "CustomGraphRequest",
    "EdgeRequest",
    "GraphResponse",
    "GraphStats",
    "NodeRequest",
    "PlaybackResponse",
    "SeekRequest",
    "SettingsRequest",
    "TraversalRequest",
    "TraversalResponse",
]
