"""
Server Context

The objects one API process shares between requests: the store, the
connection registry and broadcaster, and the services built on them.
Built once when the application is created and kept on ``app.state``.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request
from starlette.requests import HTTPConnection

from exteriorcrm.api.config import APISettings
from exteriorcrm.api.websocket.broadcaster import EventBroadcaster
from exteriorcrm.api.websocket.registry import ConnectionRegistry
from exteriorcrm.models.entities import User, WhiteLabelSettings
from exteriorcrm.services.crm import CRMService
from exteriorcrm.services.outlook import OutlookClient
from exteriorcrm.services.store import CRMStore


@dataclass
class ServerContext:
    """Shared state of one API process."""

    store: CRMStore
    registry: ConnectionRegistry
    broadcaster: EventBroadcaster
    crm: CRMService
    outlook: OutlookClient

    @classmethod
    def from_settings(cls, settings: APISettings) -> ServerContext:
        """Wire up a fresh context."""
        store = CRMStore(
            white_label=WhiteLabelSettings(
                company_name=settings.company_name,
                logo=settings.company_logo,
                primary_color=settings.primary_color,
                secondary_color=settings.secondary_color,
                accent_color=settings.accent_color,
            ),
            users=[
                User(
                    id=settings.default_user_id,
                    username=settings.default_user_username,
                    email=settings.default_user_email,
                    first_name=settings.default_user_first_name,
                    last_name=settings.default_user_last_name,
                    role=settings.default_user_role,
                )
            ],
        )
        registry = ConnectionRegistry()
        broadcaster = EventBroadcaster(registry)
        return cls(
            store=store,
            registry=registry,
            broadcaster=broadcaster,
            crm=CRMService(store, broadcaster),
            outlook=OutlookClient(
                access_token=settings.outlook_access_token,
                base_url=settings.outlook_graph_url,
                timeout=settings.outlook_timeout_seconds,
            ),
        )


def _context(conn: HTTPConnection) -> ServerContext:
    return conn.app.state.context


def get_context(request: Request) -> ServerContext:
    return _context(request)


def get_store(request: Request) -> CRMStore:
    return _context(request).store


def get_crm(request: Request) -> CRMService:
    return _context(request).crm


def get_outlook(request: Request) -> OutlookClient:
    return _context(request).outlook
