"""
Entity Models

Pydantic v2 models for the CRM records held by the store.
Every record carries a string id and creation timestamp; most also track
when they were last updated. The ``*Fields`` classes hold the writable
attributes and double as the request bodies for create endpoints.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, EmailStr, Field


def utcnow() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Generate a record id."""
    return str(uuid4())


class Division(str, Enum):
    """Business divisions."""

    RR = "rr"
    MULTI_FAMILY = "multi-family"
    SINGLE_FAMILY = "single-family"


class Priority(str, Enum):
    """Lead priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class LeadStatus(str, Enum):
    """Position of a lead in the sales pipeline."""

    NEW = "new"
    CONTACTED = "contacted"
    ESTIMATE_REQUESTED = "estimate_requested"
    QUOTE_SENT = "quote_sent"
    WON = "won"
    LOST = "lost"


class ProjectType(str, Enum):
    """Kind of exterior work requested."""

    SIDING = "siding"
    REPAIR = "repair"
    REPLACEMENT = "replacement"
    MAINTENANCE = "maintenance"
    ROOFING = "roofing"
    WINDOWS = "windows"


class EstimateStatus(str, Enum):
    """Estimate approval state."""

    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class JobStatus(str, Enum):
    """Job execution state."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CommunicationType(str, Enum):
    """Channel of a logged communication."""

    EMAIL = "email"
    PHONE = "phone"
    MEETING = "meeting"
    NOTE = "note"


class Theme(str, Enum):
    """UI colour scheme."""

    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class DigestFrequency(str, Enum):
    """How often notification emails are batched."""

    IMMEDIATE = "immediate"
    DAILY = "daily"
    WEEKLY = "weekly"
    NEVER = "never"


class TeamPosition(str, Enum):
    """Team member positions."""

    OWNER = "owner"
    OPERATIONS_MANAGER = "operations-manager"
    SALES_MARKETING_MANAGER = "sales-marketing-manager"
    ESTIMATOR = "estimator"
    FIELD_MANAGEMENT = "field-management"
    ACCOUNTING = "accounting"


class Record(BaseModel):
    """Base class for all stored records."""

    id: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=utcnow)


class TimestampedRecord(Record):
    """A record that tracks its last modification."""

    updated_at: datetime = Field(default_factory=utcnow)


# Customers


class CustomerFields(BaseModel):
    """Writable customer attributes."""

    name: str = Field(..., min_length=1)
    email: EmailStr | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    notes: str | None = None


class Customer(CustomerFields, TimestampedRecord):
    """A customer of the business."""


# Leads


class LeadFields(BaseModel):
    """Writable lead attributes."""

    customer_id: str | None = None
    customer_name: str = Field(..., min_length=1)
    email: EmailStr | None = None
    phone: str | None = None
    address: str = Field(..., min_length=1)
    division: Division
    project_type: ProjectType
    priority: Priority = Priority.MEDIUM
    status: LeadStatus = LeadStatus.NEW
    estimated_value: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    assigned_to: str | None = None
    notes: str | None = None
    source: str | None = None


class Lead(LeadFields, TimestampedRecord):
    """A sales lead."""


# Estimates


class EstimateFields(BaseModel):
    """Writable estimate attributes."""

    lead_id: str | None = None
    customer_id: str | None = None
    title: str = Field(..., min_length=1)
    description: str | None = None
    materials_cost: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    labor_cost: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    total_cost: Decimal = Field(..., ge=0, decimal_places=2)
    status: EstimateStatus = EstimateStatus.DRAFT
    valid_until: datetime | None = None
    created_by: str | None = None
    approved_by: str | None = None


class Estimate(EstimateFields, TimestampedRecord):
    """A priced estimate for a lead or customer."""


# Jobs


class JobFields(BaseModel):
    """Writable job attributes."""

    estimate_id: str | None = None
    customer_id: str | None = None
    title: str = Field(..., min_length=1)
    description: str | None = None
    status: JobStatus = JobStatus.SCHEDULED
    scheduled_start: datetime | None = None
    actual_start: datetime | None = None
    scheduled_end: datetime | None = None
    actual_end: datetime | None = None
    assigned_to: str | None = None
    notes: str | None = None


class Job(JobFields, TimestampedRecord):
    """Scheduled or completed work."""


# Communications


class CommunicationFields(BaseModel):
    """Writable communication attributes."""

    lead_id: str | None = None
    customer_id: str | None = None
    user_id: str | None = None
    type: CommunicationType
    subject: str | None = None
    content: str | None = None
    email_message_id: str | None = None
    scheduled_for: datetime | None = None
    completed_at: datetime | None = None


class Communication(CommunicationFields, Record):
    """A logged email, call, meeting or note."""


# Vendors


class VendorFields(BaseModel):
    """Writable vendor attributes."""

    name: str = Field(..., min_length=1)
    contact_person: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    address: str | None = None
    category: str | None = None  # e.g. "materials", "subcontractor"
    rating: int | None = Field(default=None, ge=1, le=5)
    notes: str | None = None
    is_active: bool = True


class Vendor(VendorFields, TimestampedRecord):
    """A supplier or subcontractor."""


# Team members


class TeamMemberFields(BaseModel):
    """Writable team member attributes."""

    user_id: str = Field(..., min_length=1)
    position: TeamPosition
    division: Division
    is_active: bool = True
    hire_date: datetime | None = None
    phone: str | None = None
    notes: str | None = None


class TeamMember(TeamMemberFields, TimestampedRecord):
    """A member of the company's team."""


# White label


class WhiteLabelFields(BaseModel):
    """Writable white-label branding attributes."""

    company_name: str = Field(..., min_length=1)
    logo: str | None = None
    primary_color: str | None = None
    secondary_color: str | None = None
    accent_color: str | None = None
    domain: str | None = None
    is_active: bool = True


class WhiteLabelSettings(WhiteLabelFields, TimestampedRecord):
    """Branding applied to the UI. There is exactly one instance."""


# Users


class UserAccount(BaseModel):
    """The account fields a user may see and edit. Never carries credentials."""

    id: str
    first_name: str
    last_name: str
    email: EmailStr
    role: str


class UserFields(BaseModel):
    """Writable user attributes."""

    username: str = Field(..., min_length=1)
    email: EmailStr
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    role: str = Field(default="user", min_length=1)
    is_active: bool = True


class User(UserFields, Record):
    """A person who signs in to the CRM."""

    def account(self) -> UserAccount:
        return UserAccount(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            role=self.role,
        )


class UserSettingsFields(BaseModel):
    """Writable per-user preferences."""

    # Display
    theme: Theme = Theme.SYSTEM
    language: str = Field(default="en", min_length=2)
    timezone: str = Field(default="America/New_York", min_length=1)

    # Email
    email_notifications: bool = True
    email_digest_frequency: DigestFrequency = DigestFrequency.DAILY
    new_lead_email: bool = True
    lead_assignment_email: bool = True
    estimate_reminder_email: bool = True
    deadline_alert_email: bool = True
    weekly_report_email: bool = False

    # In-app
    new_lead_in_app: bool = True
    lead_assignment_in_app: bool = True
    estimate_reminder_in_app: bool = True
    deadline_alert_in_app: bool = True

    # SMS
    urgent_lead_sms: bool = False
    deadline_alert_sms: bool = False


class UserSettings(UserSettingsFields, TimestampedRecord):
    """Preferences of one user. Created with defaults on first read."""

    user_id: str
