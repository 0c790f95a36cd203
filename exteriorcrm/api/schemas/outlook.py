"""Outlook API Schemas."""

from pydantic import BaseModel, EmailStr, Field


class SendEmailRequest(BaseModel):
    """Request to send an email through the connected mailbox."""

    to: EmailStr
    subject: str = Field(..., min_length=1)
    content: str
    cc: list[EmailStr] = Field(default_factory=list)


class CalendarEventCreate(BaseModel):
    """Request to create a calendar event. Times are ISO 8601 in UTC."""

    subject: str = Field(..., min_length=1)
    start: str
    end: str
    attendees: list[EmailStr] = Field(default_factory=list)
    location: str | None = None


class MessageResponse(BaseModel):
    """Simple acknowledgement."""

    message: str
