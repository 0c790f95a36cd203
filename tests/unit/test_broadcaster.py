"""
Tests for the Event Broadcaster.
"""

import asyncio
import json
from unittest.mock import patch

import pytest

from exteriorcrm.api.websocket.broadcaster import EventBroadcaster
from exteriorcrm.api.websocket.events import LeadCreated, lead_deleted_event
from exteriorcrm.api.websocket.registry import ConnectionRegistry
from exteriorcrm.models.entities import Lead


@pytest.fixture
def lead(lead_fields: dict[str, str]) -> Lead:
    """A stored lead."""
    return Lead(**lead_fields)


class TestEventBroadcaster:
    """Tests for EventBroadcaster."""

    @pytest.mark.asyncio
    async def test_broadcast_without_connections(self, broadcaster: EventBroadcaster) -> None:
        """Test broadcasting to nobody succeeds."""
        result = await broadcaster.broadcast(lead_deleted_event("abc"))

        assert result.queued == 0
        assert result.failed == []
        assert broadcaster.events_broadcast == 1

    @pytest.mark.asyncio
    async def test_every_connection_receives_event(
        self,
        broadcaster: EventBroadcaster,
        connect,
        flush,
        lead: Lead,
    ) -> None:
        """Test all open connections get the same frame."""
        transports = [(await connect())[1] for _ in range(3)]

        result = await broadcaster.broadcast(LeadCreated(data=lead))
        await flush()

        assert result.queued == 3
        frames = [t.sent for t in transports]
        assert all(len(sent) == 1 for sent in frames)
        assert len({sent[0] for sent in frames}) == 1

        message = json.loads(frames[0][0])
        assert set(message) == {"type", "data"}
        assert message["type"] == "lead_created"
        assert message["data"]["id"] == lead.id

    @pytest.mark.asyncio
    async def test_failed_send_does_not_stop_others(
        self,
        broadcaster: EventBroadcaster,
        registry: ConnectionRegistry,
        connect,
        flush,
        lead: Lead,
    ) -> None:
        """Test one dead connection does not prevent delivery to the rest."""
        _, first = await connect()
        broken, _ = await connect(fail_sends=True)
        _, third = await connect()

        await broadcaster.broadcast(LeadCreated(data=lead))
        await flush()

        assert len(first.sent) == 1
        assert len(third.sent) == 1
        assert broadcaster.delivery_failures == 1
        # Cleanup belongs to the disconnect path
        assert broken in registry

    @pytest.mark.asyncio
    async def test_stalled_peer_does_not_block(
        self,
        broadcaster: EventBroadcaster,
        connect,
        stalled_transport,
    ) -> None:
        """Test a peer that never reads delays neither the caller nor the others."""
        await connect(transport=stalled_transport)
        healthy = [await connect() for _ in range(5)]
        await connect(transport=type(stalled_transport)())

        result = await asyncio.wait_for(broadcaster.broadcast(lead_deleted_event("x")), 1.0)
        await asyncio.wait_for(asyncio.gather(*(conn.flush() for conn, _ in healthy)), 1.0)

        assert result.queued == 7
        assert all(len(transport.sent) == 1 for _, transport in healthy)
        assert stalled_transport.sent == []

    @pytest.mark.asyncio
    async def test_stalled_peer_keeps_order_once_released(
        self,
        broadcaster: EventBroadcaster,
        connect,
        stalled_transport,
    ) -> None:
        """Test frames queued behind a slow send arrive in broadcast order."""
        conn, _ = await connect(transport=stalled_transport)
        for lead_id in ("a", "b", "c"):
            await broadcaster.broadcast(lead_deleted_event(lead_id))

        stalled_transport.release.set()
        await asyncio.wait_for(conn.flush(), 1.0)

        assert [json.loads(m)["data"]["id"] for m in stalled_transport.sent] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_full_queue_counts_as_failure(
        self,
        broadcaster: EventBroadcaster,
        connect,
        stalled_transport,
    ) -> None:
        """Test frames beyond a stalled peer's queue limit are dropped and counted."""
        conn, _ = await connect(transport=stalled_transport, max_pending=2)

        results = [await broadcaster.broadcast(lead_deleted_event(str(i))) for i in range(4)]

        assert [r.queued for r in results] == [1, 1, 0, 0]
        assert results[3].failed == [conn.id]
        assert broadcaster.delivery_failures == 2

    @pytest.mark.asyncio
    async def test_close_cancels_stalled_send(
        self,
        registry: ConnectionRegistry,
        broadcaster: EventBroadcaster,
        connect,
        stalled_transport,
    ) -> None:
        """Test shutdown does not wait on a peer that never reads."""
        await connect(transport=stalled_transport)
        await broadcaster.broadcast(lead_deleted_event("x"))
        await asyncio.sleep(0)

        await asyncio.wait_for(registry.close_all(), 1.0)
        await asyncio.sleep(0)

        assert stalled_transport.send_cancelled is True
        assert stalled_transport.closed_with == 1001

    @pytest.mark.asyncio
    async def test_closed_connection_is_skipped(
        self,
        broadcaster: EventBroadcaster,
        connect,
        flush,
    ) -> None:
        """Test connections that already closed are not sent to."""
        closed, closed_transport = await connect()
        _, open_transport = await connect()
        closed.mark_closed()

        result = await broadcaster.broadcast(lead_deleted_event("abc"))
        await flush()

        assert result.skipped == 1
        assert result.queued == 1
        assert closed_transport.sent == []
        assert len(open_transport.sent) == 1

    @pytest.mark.asyncio
    async def test_late_connection_misses_earlier_events(
        self,
        broadcaster: EventBroadcaster,
        connect,
        flush,
    ) -> None:
        """Test there is no replay for connections registered after a broadcast."""
        _, early = await connect()
        await broadcaster.broadcast(lead_deleted_event("first"))
        await flush()
        _, late = await connect()
        await broadcaster.broadcast(lead_deleted_event("second"))
        await flush()

        assert [json.loads(m)["data"]["id"] for m in early.sent] == ["first", "second"]
        assert [json.loads(m)["data"]["id"] for m in late.sent] == ["second"]

    @pytest.mark.asyncio
    async def test_event_serialized_once(
        self,
        broadcaster: EventBroadcaster,
        connect,
        lead: Lead,
    ) -> None:
        """Test the frame is built once per broadcast, not per connection."""
        for _ in range(3):
            await connect()
        event = LeadCreated(data=lead)

        with patch.object(LeadCreated, "to_wire", autospec=True, return_value="{}") as to_wire:
            await broadcaster.broadcast(event)

        to_wire.assert_called_once()
