"""
Tests for the client Event Listener.
"""

import json

import pytest
from websockets.exceptions import ConnectionClosedError, InvalidURI

from exteriorcrm.client import listener as listener_module
from exteriorcrm.client.listener import EventListener
from exteriorcrm.client.router import ClientEventRouter, RoutedMessage


class RecordingCache:
    def __init__(self) -> None:
        self.invalidated: list[str] = []

    def invalidate(self, prefix: str) -> int:
        self.invalidated.append(prefix)
        return 0


class FakeSocket:
    """Async-iterable socket yielding canned frames."""

    def __init__(self, frames: list[str], error: Exception | None = None) -> None:
        self._frames = frames
        self._error = error

    async def __aenter__(self) -> "FakeSocket":
        return self

    async def __aexit__(self, *exc_info) -> None:
        return None

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for frame in self._frames:
            yield frame
        if self._error is not None:
            raise self._error


class FakeConnect:
    """Replacement for websockets.connect serving one scripted session per call."""

    def __init__(self, sessions: list) -> None:
        self._sessions = list(sessions)
        self.urls: list[str] = []

    def __call__(self, url: str):
        self.urls.append(url)
        session = self._sessions.pop(0)
        if isinstance(session, Exception):
            raise session
        return session


def lead_deleted(lead_id: str) -> str:
    return json.dumps({"type": "lead_deleted", "data": {"id": lead_id}})


@pytest.fixture
def cache() -> RecordingCache:
    return RecordingCache()


@pytest.fixture
def router(cache: RecordingCache) -> ClientEventRouter:
    return ClientEventRouter(cache)


class TestEventListener:
    """Tests for EventListener."""

    @pytest.mark.asyncio
    async def test_routes_frames(self, monkeypatch, router: ClientEventRouter, cache) -> None:
        """Test every received frame goes through the router."""
        fake = FakeConnect([FakeSocket([lead_deleted("a"), "garbage", lead_deleted("b")])])
        monkeypatch.setattr(listener_module.websockets, "connect", fake)
        routed: list[RoutedMessage] = []

        async def on_message(message: RoutedMessage) -> None:
            routed.append(message)

        listener = EventListener(
            "ws://crm.test/ws",
            router,
            reconnect_delay=0,
            on_message=on_message,
            max_connections=1,
        )
        await listener.run()

        assert fake.urls == ["ws://crm.test/ws"]
        assert [m.malformed for m in routed] == [False, True, False]
        assert cache.invalidated.count("leads") == 2
        assert listener.connected is False

    @pytest.mark.asyncio
    async def test_reconnects_after_drop(self, monkeypatch, router: ClientEventRouter) -> None:
        """Test the listener reconnects and flags the reconnect to the callback."""
        fake = FakeConnect([
            FakeSocket([lead_deleted("a")], error=ConnectionClosedError(None, None)),
            OSError("connection refused"),
            FakeSocket([lead_deleted("b")]),
        ])
        monkeypatch.setattr(listener_module.websockets, "connect", fake)
        connects: list[bool] = []

        async def on_connect(first: bool) -> None:
            connects.append(first)

        listener = EventListener(
            "ws://crm.test/ws",
            router,
            reconnect_delay=0,
            on_connect=on_connect,
            max_connections=2,
        )
        await listener.run()

        assert len(fake.urls) == 3
        assert connects == [True, False]
        assert listener.connections == 2

    @pytest.mark.asyncio
    async def test_stop_from_callback(self, monkeypatch, router: ClientEventRouter) -> None:
        """Test stop() ends the loop without reconnecting."""
        fake = FakeConnect([FakeSocket([lead_deleted("a"), lead_deleted("b")])])
        monkeypatch.setattr(listener_module.websockets, "connect", fake)
        seen: list[RoutedMessage] = []
        listener: EventListener

        async def on_message(message: RoutedMessage) -> None:
            seen.append(message)
            listener.stop()

        listener = EventListener("ws://crm.test/ws", router, reconnect_delay=0, on_message=on_message)
        await listener.run()

        assert len(seen) == 1
        assert len(fake.urls) == 1

    @pytest.mark.asyncio
    async def test_invalid_uri_is_fatal(self, monkeypatch, router: ClientEventRouter) -> None:
        """Test a bad URL is not retried forever."""
        fake = FakeConnect([InvalidURI("nope", "not a websocket URI")])
        monkeypatch.setattr(listener_module.websockets, "connect", fake)

        listener = EventListener("nope", router, reconnect_delay=0)
        with pytest.raises(InvalidURI):
            await listener.run()
