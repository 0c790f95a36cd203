"""System router - health checks and system info."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from exteriorcrm.api.config import settings
from exteriorcrm.api.context import ServerContext, get_context


router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str


class RealtimeInfo(BaseModel):
    """Broadcast statistics."""

    active_connections: int
    events_broadcast: int
    delivery_failures: int


class SystemInfo(BaseModel):
    """System information response."""

    name: str
    version: str
    description: str
    status: str
    uptime_started: str
    realtime: RealtimeInfo


# Track when the API started
_startup_time = datetime.now(timezone.utc)


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="operational",
        version=settings.version,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.get("/system", response_model=SystemInfo)
async def system_info(context: ServerContext = Depends(get_context)) -> SystemInfo:
    """Get system information."""
    return SystemInfo(
        name=settings.title,
        version=settings.version,
        description=settings.description,
        status="operational",
        uptime_started=_startup_time.isoformat(),
        realtime=RealtimeInfo(
            active_connections=len(context.registry),
            events_broadcast=context.broadcaster.events_broadcast,
            delivery_failures=context.broadcaster.delivery_failures,
        ),
    )
