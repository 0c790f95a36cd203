"""
Organization API Schemas

Pydantic models for team member and white-label API requests.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from exteriorcrm.models.entities import Division, TeamMemberFields, TeamPosition


class TeamMemberCreate(TeamMemberFields):
    """Request to add a team member."""


class TeamMemberUpdate(BaseModel):
    """Partial update of a team member."""

    user_id: str | None = Field(default=None, min_length=1)
    position: TeamPosition | None = None
    division: Division | None = None
    is_active: bool | None = None
    hire_date: datetime | None = None
    phone: str | None = None
    notes: str | None = None


class WhiteLabelUpdate(BaseModel):
    """Partial update of the branding settings."""

    company_name: str | None = Field(default=None, min_length=1)
    logo: str | None = None
    primary_color: str | None = None
    secondary_color: str | None = None
    accent_color: str | None = None
    domain: str | None = None
    is_active: bool | None = None
