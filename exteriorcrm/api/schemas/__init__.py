"""Pydantic schemas for API requests and responses."""

from exteriorcrm.api.schemas.contacts import (
    CommunicationCreate,
    CustomerCreate,
    CustomerUpdate,
    VendorCreate,
    VendorUpdate,
)
from exteriorcrm.api.schemas.dashboard import DashboardStats
from exteriorcrm.api.schemas.leads import LeadCreate, LeadUpdate
from exteriorcrm.api.schemas.organization import (
    TeamMemberCreate,
    TeamMemberUpdate,
    WhiteLabelUpdate,
)
from exteriorcrm.api.schemas.outlook import CalendarEventCreate, MessageResponse, SendEmailRequest
from exteriorcrm.api.schemas.sales import EstimateCreate, EstimateUpdate, JobCreate, JobUpdate
from exteriorcrm.api.schemas.settings import AccountUpdate, UserSettingsUpdate

__all__ = [
    "AccountUpdate",
    "CalendarEventCreate",
    "CommunicationCreate",
    "CustomerCreate",
    "CustomerUpdate",
    "DashboardStats",
    "EstimateCreate",
    "EstimateUpdate",
    "JobCreate",
    "JobUpdate",
    "LeadCreate",
    "LeadUpdate",
    "MessageResponse",
    "SendEmailRequest",
    "TeamMemberCreate",
    "TeamMemberUpdate",
    "UserSettingsUpdate",
    "VendorCreate",
    "VendorUpdate",
    "WhiteLabelUpdate",
]
