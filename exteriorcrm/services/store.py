"""
CRM Store

In-memory storage for CRM records.
One table per record type, keyed by id. Updates replace the stored record
with a modified copy so that values handed out earlier are never mutated.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, TypeVar

import structlog

from exteriorcrm.models.entities import (
    Communication,
    Customer,
    Estimate,
    EstimateStatus,
    Job,
    Lead,
    LeadStatus,
    Record,
    TeamMember,
    User,
    UserSettings,
    Vendor,
    WhiteLabelSettings,
    utcnow,
)

logger = structlog.get_logger(__name__)

R = TypeVar("R", bound=Record)

GROWTH_WINDOW = timedelta(days=30)


class EntityNotFoundError(Exception):
    """Raised when a record id does not exist."""

    def __init__(self, kind: type[Record], entity_id: str) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind.__name__} not found: {entity_id}")


def growth_percent(timestamps: list[datetime], now: datetime | None = None) -> int:
    """
    Percent change of records created in the last window versus the one before.

    Returns 0 when there is nothing to compare against and 100 when the
    previous window was empty but the current one is not.
    """
    now = now or datetime.now(timezone.utc)
    current_start = now - GROWTH_WINDOW
    previous_start = current_start - GROWTH_WINDOW

    current = sum(1 for ts in timestamps if ts >= current_start)
    previous = sum(1 for ts in timestamps if previous_start <= ts < current_start)

    if previous == 0:
        return 100 if current else 0
    return round((current - previous) / previous * 100)


class CRMStore:
    """
    In-memory CRM store.

    Holds every record type in its own table, the singleton white-label
    settings and one preferences record per user. Safe for concurrent access from the event loop.
    """

    TABLE_TYPES: tuple[type[Record], ...] = (
        Customer,
        Lead,
        Estimate,
        Job,
        Communication,
        Vendor,
        TeamMember,
        User,
    )

    def __init__(
        self,
        white_label: WhiteLabelSettings | None = None,
        users: list[User] | None = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            white_label: Initial branding settings
            users: Accounts present from the start
        """
        self._tables: dict[type[Record], dict[str, Record]] = {
            kind: {} for kind in self.TABLE_TYPES
        }
        for user in users or []:
            self._tables[User][user.id] = user
        self._user_settings: dict[str, UserSettings] = {}
        self._white_label = white_label or WhiteLabelSettings(company_name="Exterior Finishes")
        self._lock = asyncio.Lock()

    def _table(self, kind: type[R]) -> dict[str, R]:
        try:
            return self._tables[kind]  # type: ignore[return-value]
        except KeyError:
            raise TypeError(f"No table for {kind.__name__}") from None

    async def list(self, kind: type[R]) -> list[R]:
        """
        List all records of a type, oldest first.

        Args:
            kind: Record class

        Returns:
            List of records
        """
        async with self._lock:
            records = list(self._table(kind).values())
        records.sort(key=lambda r: r.created_at)
        return records

    async def get(self, kind: type[R], entity_id: str) -> R | None:
        """Get a record by id, or None if it does not exist."""
        async with self._lock:
            return self._table(kind).get(entity_id)

    async def create(self, kind: type[R], fields: dict[str, Any]) -> R:
        """
        Create and store a new record.

        Args:
            kind: Record class
            fields: Validated writable attributes

        Returns:
            The stored record
        """
        record = kind(**fields)
        async with self._lock:
            self._table(kind)[record.id] = record
        logger.debug("Record created", kind=kind.__name__, id=record.id)
        return record

    async def update(self, kind: type[R], entity_id: str, fields: dict[str, Any]) -> R:
        """
        Apply a partial update to a record.

        Args:
            kind: Record class
            entity_id: Record id
            fields: Attributes to change

        Returns:
            The updated record

        Raises:
            EntityNotFoundError: If the record does not exist
            pydantic.ValidationError: If the result is not a valid record
        """
        async with self._lock:
            table = self._table(kind)
            existing = table.get(entity_id)
            if existing is None:
                raise EntityNotFoundError(kind, entity_id)

            changes = dict(fields)
            if "updated_at" in kind.model_fields:
                changes["updated_at"] = utcnow()
            # Revalidate the merged record so a partial update cannot null out required fields
            updated = kind.model_validate({**existing.model_dump(), **changes})
            table[entity_id] = updated

        logger.debug("Record updated", kind=kind.__name__, id=entity_id, fields=sorted(fields))
        return updated

    async def delete(self, kind: type[R], entity_id: str) -> None:
        """
        Delete a record.

        Raises:
            EntityNotFoundError: If the record does not exist
        """
        async with self._lock:
            table = self._table(kind)
            if entity_id not in table:
                raise EntityNotFoundError(kind, entity_id)
            del table[entity_id]
        logger.debug("Record deleted", kind=kind.__name__, id=entity_id)

    async def count(self, kind: type[Record]) -> int:
        """Count records of a type."""
        async with self._lock:
            return len(self._table(kind))

    # Filtered queries

    async def leads_by_division(self, division: str) -> list[Lead]:
        """Leads belonging to one division."""
        return [lead for lead in await self.list(Lead) if lead.division == division]

    async def communications_for(
        self,
        lead_id: str | None = None,
        customer_id: str | None = None,
    ) -> list[Communication]:
        """Communications for a lead or customer (lead takes precedence)."""
        communications = await self.list(Communication)
        if lead_id:
            return [c for c in communications if c.lead_id == lead_id]
        if customer_id:
            return [c for c in communications if c.customer_id == customer_id]
        return communications

    async def team_members_by(
        self,
        division: str | None = None,
        position: str | None = None,
    ) -> list[TeamMember]:
        """Team members filtered by division or position (division takes precedence)."""
        members = await self.list(TeamMember)
        if division:
            return [m for m in members if m.division == division]
        if position:
            return [m for m in members if m.position == position]
        return members

    # White label

    async def get_white_label(self) -> WhiteLabelSettings:
        """Current branding settings."""
        async with self._lock:
            return self._white_label

    async def update_white_label(self, fields: dict[str, Any]) -> WhiteLabelSettings:
        """Apply a partial update to the branding settings."""
        async with self._lock:
            self._white_label = WhiteLabelSettings.model_validate(
                {**self._white_label.model_dump(), **fields, "updated_at": utcnow()}
            )
            return self._white_label

    # User preferences

    def _require_user(self, user_id: str) -> None:
        if user_id not in self._tables[User]:
            raise EntityNotFoundError(User, user_id)

    async def get_user_settings(self, user_id: str) -> UserSettings:
        """
        Preferences of a user, created with defaults on first read.

        Raises:
            EntityNotFoundError: If the user does not exist
        """
        async with self._lock:
            self._require_user(user_id)
            settings = self._user_settings.get(user_id)
            if settings is None:
                settings = UserSettings(user_id=user_id)
                self._user_settings[user_id] = settings
                logger.debug("User settings created", user_id=user_id)
            return settings

    async def update_user_settings(self, user_id: str, fields: dict[str, Any]) -> UserSettings:
        """
        Apply a partial update to a user's preferences, creating them if needed.

        Raises:
            EntityNotFoundError: If the user does not exist
            pydantic.ValidationError: If the result is not valid
        """
        async with self._lock:
            self._require_user(user_id)
            existing = self._user_settings.get(user_id) or UserSettings(user_id=user_id)
            changes = {k: v for k, v in fields.items() if k != "user_id"}
            settings = UserSettings.model_validate(
                {**existing.model_dump(), **changes, "updated_at": utcnow()}
            )
            self._user_settings[user_id] = settings
        logger.debug("User settings updated", user_id=user_id, fields=sorted(changes))
        return settings

    # Dashboard

    async def dashboard_stats(self) -> dict[str, Any]:
        """
        Compute the headline dashboard figures.

        Returns:
            Dict with total_leads, active_estimates, conversion_rate,
            closed_deals, lead_growth and estimate_growth
        """
        leads = await self.list(Lead)
        estimates = await self.list(Estimate)

        total_leads = len(leads)
        won = sum(1 for lead in leads if lead.status == LeadStatus.WON)
        conversion_rate = round(won / total_leads * 100) if total_leads else 0
        closed_deals = sum(
            (e.total_cost for e in estimates if e.status == EstimateStatus.APPROVED),
            Decimal("0"),
        )

        return {
            "total_leads": total_leads,
            "active_estimates": sum(1 for e in estimates if e.status == EstimateStatus.PENDING),
            "conversion_rate": conversion_rate,
            "closed_deals": closed_deals,
            "lead_growth": growth_percent([lead.created_at for lead in leads]),
            "estimate_growth": growth_percent([e.created_at for e in estimates]),
        }
