"""
Lead API Schemas

Pydantic models for lead API requests.
"""

from decimal import Decimal

from pydantic import BaseModel, EmailStr, Field

from exteriorcrm.models.entities import Division, LeadFields, LeadStatus, Priority, ProjectType


class LeadCreate(LeadFields):
    """Request to create a lead."""


class LeadUpdate(BaseModel):
    """Partial update of a lead. Only fields present in the body change."""

    customer_id: str | None = None
    customer_name: str | None = Field(default=None, min_length=1)
    email: EmailStr | None = None
    phone: str | None = None
    address: str | None = Field(default=None, min_length=1)
    division: Division | None = None
    project_type: ProjectType | None = None
    priority: Priority | None = None
    status: LeadStatus | None = None
    estimated_value: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    assigned_to: str | None = None
    notes: str | None = None
    source: str | None = None
