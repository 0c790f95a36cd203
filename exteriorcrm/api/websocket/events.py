"""
WebSocket event definitions.

Every event is a text frame carrying a JSON object with exactly two keys,
``type`` and ``data``. The set of event types is closed: each type is its
own model with a fixed payload type, and ``CRMEvent`` is the discriminated
union of all of them.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from exteriorcrm.models.entities import (
    Communication,
    Estimate,
    Job,
    Lead,
    TeamMember,
    UserAccount,
    UserSettings,
    WhiteLabelSettings,
)


class EventType(str, Enum):
    """WebSocket event types."""

    LEAD_CREATED = "lead_created"
    LEAD_UPDATED = "lead_updated"
    LEAD_DELETED = "lead_deleted"

    ESTIMATE_CREATED = "estimate_created"
    ESTIMATE_UPDATED = "estimate_updated"

    JOB_CREATED = "job_created"
    JOB_UPDATED = "job_updated"

    COMMUNICATION_CREATED = "communication_created"

    WHITE_LABEL_UPDATED = "white_label_updated"

    TEAM_MEMBER_CREATED = "team_member_created"
    TEAM_MEMBER_UPDATED = "team_member_updated"
    TEAM_MEMBER_DELETED = "team_member_deleted"

    USER_UPDATED = "user_updated"
    USER_SETTINGS_UPDATED = "user_settings_updated"


class MalformedEventError(ValueError):
    """Raised when a wire message cannot be decoded into an event."""


class EntityRef(BaseModel):
    """Identifier payload for deletions."""

    model_config = ConfigDict(frozen=True)

    id: str


class BaseEvent(BaseModel):
    """Common behaviour of all event variants."""

    model_config = ConfigDict(frozen=True)

    type: str
    data: Any

    @property
    def kind(self) -> EventType:
        """The event type as an enum member."""
        return EventType(self.type)

    def to_wire(self) -> str:
        """Serialize to the text frame sent to clients."""
        return self.model_dump_json(include={"type", "data"})


class LeadCreated(BaseEvent):
    type: Literal["lead_created"] = "lead_created"
    data: Lead


class LeadUpdated(BaseEvent):
    type: Literal["lead_updated"] = "lead_updated"
    data: Lead


class LeadDeleted(BaseEvent):
    type: Literal["lead_deleted"] = "lead_deleted"
    data: EntityRef


class EstimateCreated(BaseEvent):
    type: Literal["estimate_created"] = "estimate_created"
    data: Estimate


class EstimateUpdated(BaseEvent):
    type: Literal["estimate_updated"] = "estimate_updated"
    data: Estimate


class JobCreated(BaseEvent):
    type: Literal["job_created"] = "job_created"
    data: Job


class JobUpdated(BaseEvent):
    type: Literal["job_updated"] = "job_updated"
    data: Job


class CommunicationCreated(BaseEvent):
    type: Literal["communication_created"] = "communication_created"
    data: Communication


class WhiteLabelUpdated(BaseEvent):
    type: Literal["white_label_updated"] = "white_label_updated"
    data: WhiteLabelSettings


class TeamMemberCreated(BaseEvent):
    type: Literal["team_member_created"] = "team_member_created"
    data: TeamMember


class TeamMemberUpdated(BaseEvent):
    type: Literal["team_member_updated"] = "team_member_updated"
    data: TeamMember


class TeamMemberDeleted(BaseEvent):
    type: Literal["team_member_deleted"] = "team_member_deleted"
    data: EntityRef


class UserUpdated(BaseEvent):
    type: Literal["user_updated"] = "user_updated"
    data: UserAccount


class UserSettingsUpdated(BaseEvent):
    type: Literal["user_settings_updated"] = "user_settings_updated"
    data: UserSettings


CRMEvent = Annotated[
    Union[
        LeadCreated,
        LeadUpdated,
        LeadDeleted,
        EstimateCreated,
        EstimateUpdated,
        JobCreated,
        JobUpdated,
        CommunicationCreated,
        WhiteLabelUpdated,
        TeamMemberCreated,
        TeamMemberUpdated,
        TeamMemberDeleted,
        UserUpdated,
        UserSettingsUpdated,
    ],
    Field(discriminator="type"),
]

_event_adapter: TypeAdapter[CRMEvent] = TypeAdapter(CRMEvent)

_KNOWN_TYPES = frozenset(t.value for t in EventType)


class WireMessage(BaseModel):
    """Envelope of a text frame before its payload is interpreted."""

    type: str
    data: Any = None


def decode_event(raw: str | bytes) -> BaseEvent | None:
    """
    Decode a wire message into an event.

    Args:
        raw: Text frame received from the server

    Returns:
        The decoded event, or None if its type is not one this build knows

    Raises:
        MalformedEventError: If the frame is not a valid envelope or the
            payload does not match its declared type
    """
    try:
        envelope = WireMessage.model_validate_json(raw)
    except ValidationError as e:
        raise MalformedEventError(f"Invalid wire message: {e.error_count()} error(s)") from e

    if envelope.type not in _KNOWN_TYPES:
        return None

    try:
        return _event_adapter.validate_python({"type": envelope.type, "data": envelope.data})
    except ValidationError as e:
        raise MalformedEventError(
            f"Invalid payload for {envelope.type}: {e.error_count()} error(s)"
        ) from e


# Pre-built event factories
def lead_deleted_event(lead_id: str) -> LeadDeleted:
    """Create a lead deleted event."""
    return LeadDeleted(data=EntityRef(id=lead_id))


def team_member_deleted_event(member_id: str) -> TeamMemberDeleted:
    """Create a team member deleted event."""
    return TeamMemberDeleted(data=EntityRef(id=member_id))
