"""
Realtime Router

The WebSocket endpoint clients keep open to hear about changes.
Server to client only: frames sent by the client are read and dropped so
that disconnects are noticed.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, WebSocket

from exteriorcrm.api.config import settings
from exteriorcrm.api.context import ServerContext
from exteriorcrm.api.websocket.registry import Connection

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.websocket(settings.ws_path)
async def realtime_websocket(websocket: WebSocket) -> None:
    """
    Register the client for broadcasts until it goes away.

    Lifecycle: connecting -> open (registered) -> closed (unregistered).
    No backlog is replayed; clients fetch current state over HTTP.
    """
    context: ServerContext = websocket.app.state.context
    conn = Connection(websocket)

    await conn.open()
    context.registry.register(conn)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            logger.debug("Ignoring client frame", connection_id=conn.id)
    finally:
        conn.mark_closed()
        context.registry.unregister(conn)
