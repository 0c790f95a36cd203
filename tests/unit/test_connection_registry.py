"""
Tests for the Connection Registry.
"""

from collections.abc import Callable

import pytest

from exteriorcrm.api.websocket.registry import Connection, ConnectionRegistry, ConnectionState


@pytest.fixture
def new_connection(transport_factory) -> Callable[[], Connection]:
    """Build unopened connections over fake transports."""
    return lambda: Connection(transport_factory())


class TestConnection:
    """Tests for Connection lifecycle."""

    @pytest.mark.asyncio
    async def test_open_accepts_transport(self, transport_factory) -> None:
        """Test opening completes the handshake."""
        transport = transport_factory()
        conn = Connection(transport)
        assert conn.state == ConnectionState.CONNECTING
        assert conn.is_open is False

        await conn.open()

        assert transport.accepted is True
        assert conn.is_open is True
        conn.mark_closed()

    @pytest.mark.asyncio
    async def test_open_twice_fails(self, new_connection) -> None:
        """Test a connection can only be opened once."""
        conn = new_connection()
        await conn.open()
        with pytest.raises(RuntimeError):
            await conn.open()
        conn.mark_closed()

    @pytest.mark.asyncio
    async def test_close(self, transport_factory) -> None:
        """Test server-side close reaches the transport."""
        transport = transport_factory()
        conn = Connection(transport)
        await conn.open()

        await conn.close(code=1001)

        assert transport.closed_with == 1001
        assert conn.state == ConnectionState.CLOSED

    @pytest.mark.asyncio
    async def test_close_after_peer_closed_is_noop(self, transport_factory) -> None:
        """Test closing a connection the peer already closed does nothing."""
        transport = transport_factory()
        conn = Connection(transport)
        await conn.open()
        conn.mark_closed()

        await conn.close()

        assert transport.closed_with is None

    @pytest.mark.asyncio
    async def test_send_is_queued_in_order(self, transport_factory) -> None:
        """Test queued frames reach the transport in order."""
        transport = transport_factory()
        conn = Connection(transport)
        await conn.open()

        assert conn.send("one") is True
        assert conn.send("two") is True
        await conn.flush()

        assert transport.sent == ["one", "two"]
        assert conn.pending == 0
        conn.mark_closed()

    @pytest.mark.asyncio
    async def test_send_refused_unless_open(self, new_connection) -> None:
        """Test frames are not queued before open or after close."""
        conn = new_connection()
        assert conn.send("early") is False

        await conn.open()
        conn.mark_closed()

        assert conn.send("late") is False

    @pytest.mark.asyncio
    async def test_send_error_reported(self, transport_factory) -> None:
        """Test transport failures reach the error callback."""
        conn = Connection(transport_factory(fail_sends=True))
        await conn.open()
        errors: list[Exception] = []

        conn.send("frame", on_error=lambda c, e: errors.append(e))
        await conn.flush()

        assert len(errors) == 1
        assert isinstance(errors[0], ConnectionResetError)
        conn.mark_closed()

    def test_ids_are_unique(self, transport_factory) -> None:
        """Test each connection gets its own id."""
        transport = transport_factory()
        assert Connection(transport).id != Connection(transport).id


class TestConnectionRegistry:
    """Tests for ConnectionRegistry."""

    def test_empty_registry(self, registry: ConnectionRegistry) -> None:
        """Test new registry has no members."""
        assert len(registry) == 0
        assert registry.snapshot() == []

    def test_register(self, registry: ConnectionRegistry, new_connection) -> None:
        """Test registering adds the connection."""
        conn = new_connection()
        registry.register(conn)

        assert conn in registry
        assert len(registry) == 1

    def test_register_twice_is_idempotent(self, registry: ConnectionRegistry, new_connection) -> None:
        """Test registering the same connection twice keeps one entry."""
        conn = new_connection()
        registry.register(conn)
        registry.register(conn)

        assert len(registry) == 1

    def test_unregister(self, registry: ConnectionRegistry, new_connection) -> None:
        """Test unregistering removes the connection."""
        conn = new_connection()
        registry.register(conn)
        registry.unregister(conn)

        assert conn not in registry
        assert len(registry) == 0

    def test_unregister_unknown_is_noop(self, registry: ConnectionRegistry, new_connection) -> None:
        """Test removing a connection that was never registered."""
        registry.register(new_connection())
        registry.unregister(new_connection())

        assert len(registry) == 1

    def test_same_transport_is_distinct_connection(
        self,
        registry: ConnectionRegistry,
        transport_factory,
    ) -> None:
        """Test connections are tracked by identity, not transport."""
        transport = transport_factory()
        first = Connection(transport)
        second = Connection(transport)
        registry.register(first)
        registry.register(second)
        registry.unregister(first)

        assert second in registry
        assert first not in registry

    def test_snapshot_is_a_copy(self, registry: ConnectionRegistry, new_connection) -> None:
        """Test the snapshot does not change when the registry does."""
        conn = new_connection()
        registry.register(conn)
        snapshot = registry.snapshot()

        registry.unregister(conn)
        registry.register(new_connection())

        assert snapshot == [conn]

    def test_iter_while_unregistering(self, registry: ConnectionRegistry, new_connection) -> None:
        """Test iteration tolerates removal of members."""
        for _ in range(3):
            registry.register(new_connection())

        for conn in registry:
            registry.unregister(conn)

        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_close_all(self, registry: ConnectionRegistry, connect) -> None:
        """Test shutdown closes and removes every connection."""
        _, first = await connect()
        _, second = await connect()

        await registry.close_all()

        assert len(registry) == 0
        assert first.closed_with == 1001
        assert second.closed_with == 1001
