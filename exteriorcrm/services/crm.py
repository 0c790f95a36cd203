"""
CRM Service

Mutation layer shared by the REST routers.
Every change to a tracked record type is persisted first and then
announced through the broadcaster, so connected clients hear about it
before the HTTP response goes out. Failed mutations announce nothing.
"""

from __future__ import annotations

from typing import Any, TypeVar

import structlog

from exteriorcrm.api.websocket.broadcaster import EventBroadcaster
from exteriorcrm.api.websocket.events import (
    BaseEvent,
    CommunicationCreated,
    EstimateCreated,
    EstimateUpdated,
    JobCreated,
    JobUpdated,
    LeadCreated,
    LeadUpdated,
    TeamMemberCreated,
    TeamMemberUpdated,
    UserSettingsUpdated,
    UserUpdated,
    WhiteLabelUpdated,
    lead_deleted_event,
    team_member_deleted_event,
)
from exteriorcrm.models.entities import (
    Communication,
    Customer,
    Estimate,
    Job,
    Lead,
    Record,
    TeamMember,
    User,
    UserAccount,
    UserSettings,
    Vendor,
    WhiteLabelSettings,
)
from exteriorcrm.services.store import CRMStore

logger = structlog.get_logger(__name__)

R = TypeVar("R", bound=Record)


class CRMService:
    """
    Create, update and delete CRM records.

    Lead, estimate, job, communication, team member, white-label, user
    account and user preference changes emit exactly one event each. Customers and vendors are not
    tracked in real time.
    """

    def __init__(self, store: CRMStore, broadcaster: EventBroadcaster) -> None:
        self.store = store
        self.broadcaster = broadcaster

    async def _announce(self, event: BaseEvent) -> None:
        result = await self.broadcaster.broadcast(event)
        if result.failed:
            logger.info(
                "Event not queued for every connection",
                event_type=event.type,
                queued=result.queued,
                failed=len(result.failed),
            )

    async def _create(
        self,
        kind: type[R],
        fields: dict[str, Any],
        event_cls: type[BaseEvent] | None,
    ) -> R:
        record = await self.store.create(kind, fields)
        if event_cls is not None:
            await self._announce(event_cls(data=record))
        return record

    async def _update(
        self,
        kind: type[R],
        entity_id: str,
        fields: dict[str, Any],
        event_cls: type[BaseEvent] | None,
    ) -> R:
        record = await self.store.update(kind, entity_id, fields)
        if event_cls is not None:
            await self._announce(event_cls(data=record))
        return record

    # Leads

    async def create_lead(self, fields: dict[str, Any]) -> Lead:
        return await self._create(Lead, fields, LeadCreated)

    async def update_lead(self, lead_id: str, fields: dict[str, Any]) -> Lead:
        return await self._update(Lead, lead_id, fields, LeadUpdated)

    async def delete_lead(self, lead_id: str) -> None:
        await self.store.delete(Lead, lead_id)
        await self._announce(lead_deleted_event(lead_id))

    # Estimates

    async def create_estimate(self, fields: dict[str, Any]) -> Estimate:
        return await self._create(Estimate, fields, EstimateCreated)

    async def update_estimate(self, estimate_id: str, fields: dict[str, Any]) -> Estimate:
        return await self._update(Estimate, estimate_id, fields, EstimateUpdated)

    # Jobs

    async def create_job(self, fields: dict[str, Any]) -> Job:
        return await self._create(Job, fields, JobCreated)

    async def update_job(self, job_id: str, fields: dict[str, Any]) -> Job:
        return await self._update(Job, job_id, fields, JobUpdated)

    # Communications

    async def create_communication(self, fields: dict[str, Any]) -> Communication:
        return await self._create(Communication, fields, CommunicationCreated)

    # Team members

    async def create_team_member(self, fields: dict[str, Any]) -> TeamMember:
        return await self._create(TeamMember, fields, TeamMemberCreated)

    async def update_team_member(self, member_id: str, fields: dict[str, Any]) -> TeamMember:
        return await self._update(TeamMember, member_id, fields, TeamMemberUpdated)

    async def delete_team_member(self, member_id: str) -> None:
        await self.store.delete(TeamMember, member_id)
        await self._announce(team_member_deleted_event(member_id))

    # White label

    async def update_white_label(self, fields: dict[str, Any]) -> WhiteLabelSettings:
        settings = await self.store.update_white_label(fields)
        await self._announce(WhiteLabelUpdated(data=settings))
        return settings

    # User account and preferences

    async def update_account(self, user_id: str, fields: dict[str, Any]) -> UserAccount:
        """Change a user's account fields and announce the visible part."""
        user = await self.store.update(User, user_id, fields)
        account = user.account()
        await self._announce(UserUpdated(data=account))
        return account

    async def update_user_settings(self, user_id: str, fields: dict[str, Any]) -> UserSettings:
        settings = await self.store.update_user_settings(user_id, fields)
        await self._announce(UserSettingsUpdated(data=settings))
        return settings

    # Untracked

    async def create_customer(self, fields: dict[str, Any]) -> Customer:
        return await self._create(Customer, fields, None)

    async def update_customer(self, customer_id: str, fields: dict[str, Any]) -> Customer:
        return await self._update(Customer, customer_id, fields, None)

    async def create_vendor(self, fields: dict[str, Any]) -> Vendor:
        return await self._create(Vendor, fields, None)

    async def update_vendor(self, vendor_id: str, fields: dict[str, Any]) -> Vendor:
        return await self._update(Vendor, vendor_id, fields, None)
