"""ExteriorCRM API - FastAPI Application."""

from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from exteriorcrm.api.config import settings
from exteriorcrm.api.context import ServerContext
from exteriorcrm.api.routers import (
    communications_router,
    customers_router,
    dashboard_router,
    estimates_router,
    jobs_router,
    leads_router,
    outlook_router,
    realtime_router,
    settings_router,
    system_router,
    team_members_router,
    vendors_router,
    white_label_router,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    context: ServerContext = app.state.context
    logger.info("API starting", version=settings.version, ws_path=settings.ws_path)
    yield
    # Shutdown
    await context.registry.close_all()
    logger.info("API stopped", events_broadcast=context.broadcaster.events_broadcast)


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Invalid record produced by a partial update."""
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(exc.errors(include_url=False, include_context=False))},
    )


def create_app(context: ServerContext | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        context: Shared server state; a fresh one is built from settings if omitted
    """
    app = FastAPI(
        title=settings.title,
        description=settings.description,
        version=settings.version,
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
    )
    app.state.context = context or ServerContext.from_settings(settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ValidationError, _validation_error_handler)

    # Include routers
    app.include_router(system_router, prefix=settings.api_prefix, tags=["System"])
    app.include_router(dashboard_router, prefix=settings.api_prefix, tags=["Dashboard"])
    app.include_router(leads_router, prefix=settings.api_prefix, tags=["Leads"])
    app.include_router(customers_router, prefix=settings.api_prefix, tags=["Customers"])
    app.include_router(estimates_router, prefix=settings.api_prefix, tags=["Estimates"])
    app.include_router(jobs_router, prefix=settings.api_prefix, tags=["Jobs"])
    app.include_router(communications_router, prefix=settings.api_prefix, tags=["Communications"])
    app.include_router(vendors_router, prefix=settings.api_prefix, tags=["Vendors"])
    app.include_router(team_members_router, prefix=settings.api_prefix, tags=["Team"])
    app.include_router(white_label_router, prefix=settings.api_prefix, tags=["White Label"])
    app.include_router(settings_router, prefix=settings.api_prefix, tags=["Settings"])
    app.include_router(outlook_router, prefix=settings.api_prefix, tags=["Outlook"])
    app.include_router(realtime_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "exteriorcrm.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
