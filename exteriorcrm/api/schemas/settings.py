"""
Settings API Schemas

Partial updates for a user's account and preferences.
"""

from pydantic import BaseModel, EmailStr, Field

from exteriorcrm.models.entities import DigestFrequency, Theme


class AccountUpdate(BaseModel):
    """Account fields a user may change. Username and credentials are not among them."""

    first_name: str | None = Field(default=None, min_length=2, max_length=50)
    last_name: str | None = Field(default=None, min_length=2, max_length=50)
    email: EmailStr | None = None
    role: str | None = Field(default=None, min_length=1, max_length=100)


class UserSettingsUpdate(BaseModel):
    """Partial update of a user's preferences."""

    theme: Theme | None = None
    language: str | None = Field(default=None, min_length=2)
    timezone: str | None = Field(default=None, min_length=1)

    email_notifications: bool | None = None
    email_digest_frequency: DigestFrequency | None = None
    new_lead_email: bool | None = None
    lead_assignment_email: bool | None = None
    estimate_reminder_email: bool | None = None
    deadline_alert_email: bool | None = None
    weekly_report_email: bool | None = None

    new_lead_in_app: bool | None = None
    lead_assignment_in_app: bool | None = None
    estimate_reminder_in_app: bool | None = None
    deadline_alert_in_app: bool | None = None

    urgent_lead_sms: bool | None = None
    deadline_alert_sms: bool | None = None
