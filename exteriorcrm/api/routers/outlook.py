"""
Outlook Router

Pass-through endpoints for the connected Outlook mailbox and calendar.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from exteriorcrm.api.context import get_outlook
from exteriorcrm.api.schemas.outlook import CalendarEventCreate, MessageResponse, SendEmailRequest
from exteriorcrm.services.outlook import (
    OutlookClient,
    OutlookError,
    OutlookNotConnectedError,
)

router = APIRouter(prefix="/outlook")


def _http_error(e: OutlookError) -> HTTPException:
    if isinstance(e, OutlookNotConnectedError):
        return HTTPException(status_code=503, detail="Outlook not connected")
    return HTTPException(status_code=502, detail=str(e))


@router.post("/send-email", response_model=MessageResponse)
async def send_email(
    body: SendEmailRequest,
    outlook: OutlookClient = Depends(get_outlook),
) -> MessageResponse:
    try:
        await outlook.send_email(body.to, body.subject, body.content, cc=list(body.cc))
    except OutlookError as e:
        raise _http_error(e)
    return MessageResponse(message="Email sent successfully")


@router.get("/emails")
async def list_emails(
    folder: str = Query(default="inbox"),
    top: int = Query(default=25, ge=1, le=100),
    outlook: OutlookClient = Depends(get_outlook),
) -> dict[str, Any]:
    try:
        return await outlook.list_emails(folder=folder, top=top)
    except OutlookError as e:
        raise _http_error(e)


@router.get("/calendar")
async def list_calendar_events(
    start_time: str | None = Query(default=None),
    end_time: str | None = Query(default=None),
    outlook: OutlookClient = Depends(get_outlook),
) -> dict[str, Any]:
    try:
        return await outlook.list_calendar_events(start_time=start_time, end_time=end_time)
    except OutlookError as e:
        raise _http_error(e)


@router.post("/calendar")
async def create_calendar_event(
    body: CalendarEventCreate,
    outlook: OutlookClient = Depends(get_outlook),
) -> dict[str, Any]:
    try:
        return await outlook.create_calendar_event(
            subject=body.subject,
            start=body.start,
            end=body.end,
            attendees=list(body.attendees),
            location=body.location,
        )
    except OutlookError as e:
        raise _http_error(e)
