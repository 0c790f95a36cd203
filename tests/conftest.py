"""
Pytest configuration and shared fixtures.
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable, Iterator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient

from exteriorcrm.api.config import APISettings
from exteriorcrm.api.context import ServerContext
from exteriorcrm.api.main import create_app
from exteriorcrm.api.websocket.broadcaster import EventBroadcaster
from exteriorcrm.api.websocket.registry import Connection, ConnectionRegistry
from exteriorcrm.services.crm import CRMService
from exteriorcrm.services.store import CRMStore


class FakeTransport:
    """In-memory stand-in for a WebSocket."""

    def __init__(self, fail_sends: bool = False) -> None:
        self.fail_sends = fail_sends
        self.accepted = False
        self.closed_with: int | None = None
        self.sent: list[str] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_text(self, data: str) -> None:
        if self.fail_sends:
            raise ConnectionResetError("peer went away")
        self.sent.append(data)

    async def close(self, code: int = 1000) -> None:
        self.closed_with = code


class StalledTransport(FakeTransport):
    """A peer that never finishes reading: every send blocks forever."""

    def __init__(self) -> None:
        super().__init__()
        self.release = asyncio.Event()
        self.send_cancelled = False

    async def send_text(self, data: str) -> None:
        try:
            await self.release.wait()
        except asyncio.CancelledError:
            self.send_cancelled = True
            raise
        self.sent.append(data)


ConnectFactory = Callable[..., Awaitable[tuple[Connection, FakeTransport]]]


@pytest.fixture
def registry() -> ConnectionRegistry:
    """Fresh connection registry for each test."""
    return ConnectionRegistry()


@pytest.fixture
def broadcaster(registry: ConnectionRegistry) -> EventBroadcaster:
    """Broadcaster over the test registry."""
    return EventBroadcaster(registry)


@pytest.fixture
def transport_factory() -> type[FakeTransport]:
    """The fake transport class, for tests that build connections by hand."""
    return FakeTransport


@pytest.fixture
def stalled_transport() -> StalledTransport:
    """Transport whose sends never complete until released."""
    return StalledTransport()


@pytest_asyncio.fixture
async def connect(registry: ConnectionRegistry) -> AsyncIterator[ConnectFactory]:
    """Open connections over fake transports and register them; closes them afterwards."""
    opened: list[Connection] = []

    async def _connect(
        fail_sends: bool = False,
        transport: FakeTransport | None = None,
        max_pending: int = 256,
    ) -> tuple[Connection, FakeTransport]:
        transport = transport or FakeTransport(fail_sends=fail_sends)
        conn = Connection(transport, max_pending=max_pending)
        await conn.open()
        registry.register(conn)
        opened.append(conn)
        return conn, transport

    yield _connect

    for conn in opened:
        conn.mark_closed()
    await asyncio.sleep(0)


@pytest.fixture
def flush(registry: ConnectionRegistry) -> Callable[[], Awaitable[None]]:
    """Wait for every registered connection to hand its queued frames to the transport."""

    async def _flush() -> None:
        await asyncio.gather(*(conn.flush() for conn in registry.snapshot()))

    return _flush


@pytest.fixture
def store() -> CRMStore:
    """Empty in-memory store."""
    return CRMStore()


@pytest.fixture
def crm(store: CRMStore, broadcaster: EventBroadcaster) -> CRMService:
    """CRM service wired to the test store and broadcaster."""
    return CRMService(store, broadcaster)


@pytest.fixture
def lead_fields() -> dict[str, str]:
    """Minimal valid lead."""
    return {
        "customer_name": "Dana Whitfield",
        "address": "12 Orchard Lane",
        "division": "single-family",
        "project_type": "siding",
    }


@pytest.fixture
def context() -> ServerContext:
    """Fresh server state, isolated from other tests."""
    return ServerContext.from_settings(APISettings())


@pytest.fixture
def app(context: ServerContext) -> FastAPI:
    """Application bound to the test context."""
    return create_app(context)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Test client sharing one event loop between HTTP and WebSocket sessions."""
    with TestClient(app) as test_client:
        yield test_client
