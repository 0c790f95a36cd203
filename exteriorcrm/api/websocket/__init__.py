"""WebSocket handling for real-time updates."""

from .broadcaster import BroadcastResult, EventBroadcaster
from .events import CRMEvent, EventType, MalformedEventError, decode_event
from .registry import Connection, ConnectionRegistry, ConnectionState

__all__ = [
    "BroadcastResult",
    "CRMEvent",
    "Connection",
    "ConnectionRegistry",
    "ConnectionState",
    "EventBroadcaster",
    "EventType",
    "MalformedEventError",
    "decode_event",
]
