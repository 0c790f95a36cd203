"""
Estimate and Job API Schemas

Pydantic models for estimate and job API requests.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from exteriorcrm.models.entities import EstimateFields, EstimateStatus, JobFields, JobStatus


class EstimateCreate(EstimateFields):
    """Request to create an estimate."""


class EstimateUpdate(BaseModel):
    """Partial update of an estimate."""

    lead_id: str | None = None
    customer_id: str | None = None
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    materials_cost: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    labor_cost: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    total_cost: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    status: EstimateStatus | None = None
    valid_until: datetime | None = None
    created_by: str | None = None
    approved_by: str | None = None


class JobCreate(JobFields):
    """Request to create a job."""


class JobUpdate(BaseModel):
    """Partial update of a job."""

    estimate_id: str | None = None
    customer_id: str | None = None
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    status: JobStatus | None = None
    scheduled_start: datetime | None = None
    actual_start: datetime | None = None
    scheduled_end: datetime | None = None
    actual_end: datetime | None = None
    assigned_to: str | None = None
    notes: str | None = None
