"""Connection registry for real-time updates."""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Callable, Iterator, Protocol
from uuid import uuid4

import structlog

logger = structlog.get_logger(__name__)


class Transport(Protocol):
    """The part of a WebSocket a connection needs."""

    async def accept(self) -> None: ...

    async def send_text(self, data: str) -> None: ...

    async def close(self, code: int = 1000) -> None: ...


SendErrorCallback = Callable[["Connection", Exception], None]

DEFAULT_MAX_PENDING = 256


class ConnectionState(str, Enum):
    """Lifecycle of a client connection."""

    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


class Connection:
    """
    One live client transport session.

    Outbound frames go through a bounded queue drained by a single writer
    task, so a peer that stops reading only backs up its own queue and
    frames reach each peer in the order they were queued.

    Compared and hashed by identity: a reconnecting client always gets a
    new Connection, even over the same socket object.
    """

    def __init__(self, transport: Transport, max_pending: int = DEFAULT_MAX_PENDING) -> None:
        self.id = uuid4().hex
        self.state = ConnectionState.CONNECTING
        self._transport = transport
        self._outbox: asyncio.Queue[tuple[str, SendErrorCallback | None]] = asyncio.Queue(
            maxsize=max_pending
        )
        self._writer: asyncio.Task[None] | None = None

    def __repr__(self) -> str:
        return f"<Connection {self.id[:8]} {self.state.value}>"

    @property
    def is_open(self) -> bool:
        return self.state == ConnectionState.OPEN

    @property
    def pending(self) -> int:
        """Frames queued but not yet handed to the transport."""
        return self._outbox.qsize()

    async def open(self) -> None:
        """Complete the handshake and start the writer."""
        if self.state != ConnectionState.CONNECTING:
            raise RuntimeError(f"Cannot open connection in state {self.state.value}")
        await self._transport.accept()
        self.state = ConnectionState.OPEN
        self._writer = asyncio.create_task(self._write_loop(), name=f"ws-writer-{self.id[:8]}")

    def send(self, frame: str, on_error: SendErrorCallback | None = None) -> bool:
        """
        Queue a text frame without waiting for the peer.

        Args:
            frame: Serialized message
            on_error: Called from the writer if the transport rejects the frame

        Returns:
            False if the connection is not open or its queue is full
        """
        if not self.is_open:
            return False
        try:
            self._outbox.put_nowait((frame, on_error))
        except asyncio.QueueFull:
            return False
        return True

    async def flush(self) -> None:
        """Wait until every queued frame has been handed to the transport."""
        if not self.is_open or self._writer is None or self._writer.done():
            return
        await self._outbox.join()

    async def _write_loop(self) -> None:
        while True:
            frame, on_error = await self._outbox.get()
            try:
                await self._transport.send_text(frame)
            except Exception as e:
                if on_error is not None:
                    on_error(self, e)
            finally:
                self._outbox.task_done()

    def _stop_writer(self) -> None:
        if self._writer is not None and not self._writer.done():
            self._writer.cancel()

    def mark_closed(self) -> None:
        """Record that the transport reported closure."""
        self.state = ConnectionState.CLOSED
        self._stop_writer()

    async def close(self, code: int = 1000) -> None:
        """Close from the server side, dropping frames still queued."""
        if self.state in (ConnectionState.CLOSING, ConnectionState.CLOSED):
            return
        self.state = ConnectionState.CLOSING
        self._stop_writer()
        try:
            await self._transport.close(code=code)
        finally:
            self.state = ConnectionState.CLOSED


class ConnectionRegistry:
    """
    Set of currently open client connections.

    Only the connect and disconnect handlers mutate it, always from the
    event loop thread, so no locking is needed.
    """

    def __init__(self) -> None:
        self._connections: set[Connection] = set()

    def register(self, conn: Connection) -> None:
        """Add a connection. Registering twice is a no-op."""
        if conn in self._connections:
            return
        self._connections.add(conn)
        logger.info("Client connected", connection_id=conn.id, active=len(self._connections))

    def unregister(self, conn: Connection) -> None:
        """Remove a connection. Removing an unknown connection is a no-op."""
        if conn not in self._connections:
            return
        self._connections.discard(conn)
        logger.info("Client disconnected", connection_id=conn.id, active=len(self._connections))

    def snapshot(self) -> list[Connection]:
        """Copy of the current members, safe to iterate while the set changes."""
        return list(self._connections)

    async def close_all(self) -> None:
        """Close every connection (used on shutdown)."""
        for conn in self.snapshot():
            try:
                await conn.close(code=1001)
            except Exception as e:
                logger.debug("Error closing connection", connection_id=conn.id, error=str(e))
        self._connections.clear()

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, conn: object) -> bool:
        return conn in self._connections

    def __iter__(self) -> Iterator[Connection]:
        return iter(self.snapshot())
