"""
Event Listener

Keeps a WebSocket open to the server and feeds every frame to a
ClientEventRouter. When the connection drops it waits a fixed delay and
reconnects; each new connection starts with a resync callback because
events sent while disconnected are never replayed.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

import structlog
import websockets
from websockets.exceptions import InvalidURI, WebSocketException

from exteriorcrm.client.router import ClientEventRouter, RoutedMessage

logger = structlog.get_logger(__name__)

MessageCallback = Callable[[RoutedMessage], Awaitable[None]]
ConnectCallback = Callable[[bool], Awaitable[None]]


class EventListener:
    """Receives server events and routes them into the client cache."""

    def __init__(
        self,
        url: str,
        router: ClientEventRouter,
        reconnect_delay: float = 3.0,
        on_message: MessageCallback | None = None,
        on_connect: ConnectCallback | None = None,
        max_connections: int | None = None,
    ) -> None:
        """
        Initialize the listener.

        Args:
            url: WebSocket URL of the server's event endpoint
            router: Router that applies invalidation rules
            reconnect_delay: Seconds to wait before reconnecting
            on_message: Called after each frame has been routed
            on_connect: Called on every successful connect, with True for the first
            max_connections: Stop after this many connections have ended (None = forever)
        """
        self.url = url
        self.router = router
        self.reconnect_delay = reconnect_delay
        self._on_message = on_message
        self._on_connect = on_connect
        self._max_connections = max_connections
        self._stopping = False
        self.connections = 0
        self.connected = False

    def stop(self) -> None:
        """Ask the run loop to finish after the current connection."""
        self._stopping = True

    async def _consume(self) -> None:
        async with websockets.connect(self.url) as ws:
            self.connected = True
            first = self.connections == 0
            self.connections += 1
            logger.info("Connected to event stream", url=self.url, reconnect=not first)
            if self._on_connect is not None:
                await self._on_connect(first)

            async for frame in ws:
                routed = self.router.dispatch(frame)
                if self._on_message is not None:
                    await self._on_message(routed)
                if self._stopping:
                    break

    async def run(self) -> None:
        """Listen until stopped, reconnecting whenever the connection ends."""
        while not self._stopping:
            try:
                await self._consume()
            except InvalidURI:
                raise
            except (OSError, asyncio.TimeoutError, WebSocketException) as e:
                logger.warning("Event stream unavailable", url=self.url, error=str(e))
            finally:
                if self.connected:
                    logger.info("Disconnected from event stream", url=self.url)
                self.connected = False

            if self._max_connections is not None and self.connections >= self._max_connections:
                break
            if self._stopping:
                break
            await asyncio.sleep(self.reconnect_delay)
