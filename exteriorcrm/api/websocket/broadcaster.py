"""Best-effort fan-out of events to every registered connection."""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from exteriorcrm.api.websocket.events import BaseEvent
from exteriorcrm.api.websocket.registry import Connection, ConnectionRegistry

logger = structlog.get_logger(__name__)


@dataclass
class BroadcastResult:
    """Outcome of one broadcast call."""

    event_type: str
    queued: int = 0
    failed: list[str] = field(default_factory=list)
    skipped: int = 0


class EventBroadcaster:
    """
    Delivers events to the connections in a registry.

    Delivery is at most once per connection per call: there is no
    acknowledgement or replay. Broadcasting only queues the frame on each
    connection, so a slow or stalled peer never delays the caller or the
    other peers. A frame that cannot be queued, or that the transport
    rejects later, is logged and counted. Connections that register after
    a broadcast never see it; clients refetch state when they (re)connect.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self._registry = registry
        self.delivery_failures = 0
        self.events_broadcast = 0

    @property
    def registry(self) -> ConnectionRegistry:
        return self._registry

    def _delivery_failed(self, conn: Connection, event_type: str, error: str) -> None:
        self.delivery_failures += 1
        logger.warning(
            "Event delivery failed",
            connection_id=conn.id,
            event_type=event_type,
            error=error,
        )

    async def broadcast(self, event: BaseEvent) -> BroadcastResult:
        """
        Queue an event for all currently registered connections.

        Args:
            event: The event to publish

        Returns:
            Per-call queueing counts
        """
        message = event.to_wire()
        result = BroadcastResult(event_type=event.type)

        def on_send_error(conn: Connection, error: Exception) -> None:
            self._delivery_failed(conn, event.type, str(error) or type(error).__name__)

        for conn in self._registry.snapshot():
            if not conn.is_open:
                result.skipped += 1
                continue
            if conn.send(message, on_error=on_send_error):
                result.queued += 1
            else:
                result.failed.append(conn.id)
                self._delivery_failed(conn, event.type, "outbound queue full")

        self.events_broadcast += 1
        logger.debug(
            "Event broadcast",
            event_type=event.type,
            queued=result.queued,
            failed=len(result.failed),
        )
        return result
