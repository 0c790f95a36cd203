"""
Client Event Router

Turns wire messages from the server into cache invalidations.
A malformed message is logged and dropped; an event type this build does
not know is ignored so older clients keep working against newer servers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Protocol

import structlog

from exteriorcrm.api.websocket.events import BaseEvent, EventType, MalformedEventError, decode_event

logger = structlog.get_logger(__name__)


class InvalidationTarget(Protocol):
    """Anything that can drop cached queries by key prefix."""

    def invalidate(self, prefix: str) -> Any: ...


LEADS = "leads"
ESTIMATES = "estimates"
JOBS = "jobs"
COMMUNICATIONS = "communications"
WHITE_LABEL = "white_label"
TEAM_MEMBERS = "team_members"
USER_ACCOUNT = "user_account"
USER_SETTINGS = "user_settings"
DASHBOARD_STATS = "dashboard_stats"

INVALIDATION_RULES: Mapping[EventType, frozenset[str]] = MappingProxyType({
    EventType.LEAD_CREATED: frozenset({LEADS, DASHBOARD_STATS}),
    EventType.LEAD_UPDATED: frozenset({LEADS, DASHBOARD_STATS}),
    EventType.LEAD_DELETED: frozenset({LEADS, DASHBOARD_STATS}),
    EventType.ESTIMATE_CREATED: frozenset({ESTIMATES, DASHBOARD_STATS}),
    EventType.ESTIMATE_UPDATED: frozenset({ESTIMATES, DASHBOARD_STATS}),
    EventType.JOB_CREATED: frozenset({JOBS}),
    EventType.JOB_UPDATED: frozenset({JOBS}),
    EventType.COMMUNICATION_CREATED: frozenset({COMMUNICATIONS}),
    EventType.WHITE_LABEL_UPDATED: frozenset({WHITE_LABEL}),
    EventType.TEAM_MEMBER_CREATED: frozenset({TEAM_MEMBERS}),
    EventType.TEAM_MEMBER_UPDATED: frozenset({TEAM_MEMBERS}),
    EventType.TEAM_MEMBER_DELETED: frozenset({TEAM_MEMBERS}),
    EventType.USER_UPDATED: frozenset({USER_ACCOUNT}),
    EventType.USER_SETTINGS_UPDATED: frozenset({USER_SETTINGS}),
})


@dataclass
class RoutedMessage:
    """What happened to one wire message."""

    event: BaseEvent | None
    invalidated: list[str] = field(default_factory=list)
    malformed: bool = False


class ClientEventRouter:
    """Applies invalidation rules to incoming events."""

    def __init__(
        self,
        cache: InvalidationTarget,
        rules: Mapping[EventType, frozenset[str]] = INVALIDATION_RULES,
    ) -> None:
        self._cache = cache
        self._rules = rules
        self.malformed_count = 0

    def dispatch(self, raw: str | bytes) -> RoutedMessage:
        """
        Decode a wire message and invalidate the caches its event affects.

        Never raises for bad input.
        """
        try:
            event = decode_event(raw)
        except MalformedEventError as e:
            self.malformed_count += 1
            logger.warning("Discarding malformed event", error=str(e))
            return RoutedMessage(event=None, malformed=True)

        if event is None:
            logger.debug("Ignoring unknown event type")
            return RoutedMessage(event=None)

        return RoutedMessage(event=event, invalidated=self.apply(event))

    def route(self, raw: str | bytes) -> list[str]:
        """Decode and apply a wire message; returns the invalidated prefixes."""
        return self.dispatch(raw).invalidated

    def apply(self, event: BaseEvent) -> list[str]:
        """Invalidate the prefixes mapped to an already decoded event."""
        prefixes = sorted(self._rules.get(event.kind, frozenset()))
        for prefix in prefixes:
            self._cache.invalidate(prefix)
        return prefixes
