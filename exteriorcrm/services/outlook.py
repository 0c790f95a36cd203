"""
Outlook Integration

Thin Microsoft Graph client for mail and calendar.
Access tokens are short-lived, so a fresh HTTP client is built for every
call rather than kept around.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

logger = structlog.get_logger(__name__)


class OutlookError(Exception):
    """Base error for the Outlook integration."""


class OutlookNotConnectedError(OutlookError):
    """Raised when no access token is configured."""


class OutlookAPIError(OutlookError):
    """Raised when Microsoft Graph rejects a request."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        super().__init__(f"Graph API error {status_code}: {message}")


def _recipients(addresses: list[str] | None) -> list[dict[str, Any]]:
    return [{"emailAddress": {"address": address}} for address in addresses or []]


def _error_message(response: httpx.Response) -> str:
    """Pull the Graph error message out of a failed response, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    if isinstance(error, str):
        return error
    return response.text

class OutlookClient:
    """
    Microsoft Graph client for the signed-in mailbox.

    Covers the operations the CRM uses:
    - Sending mail
    - Listing messages in a folder
    - Listing and creating calendar events
    """

    def __init__(
        self,
        access_token: str | None,
        base_url: str = "https://graph.microsoft.com/v1.0",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._access_token = access_token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def is_connected(self) -> bool:
        return bool(self._access_token)

    def _client(self) -> httpx.AsyncClient:
        if not self._access_token:
            raise OutlookNotConnectedError("Outlook not connected")
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
            headers={
                "Authorization": f"Bearer {self._access_token}",
                "Accept": "application/json",
            },
        )

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        async with self._client() as client:
            try:
                response = await client.request(method, path, params=params, json=json)
            except httpx.HTTPError as e:
                logger.error("Graph request failed", method=method, path=path, error=str(e))
                raise OutlookError(f"Graph request failed: {e}") from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning(
                "Graph API error",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            raise OutlookAPIError(response.status_code, message)

        # sendMail answers 202 with no body
        if not response.content:
            return {}
        return response.json()

    async def send_email(
        self,
        to: str,
        subject: str,
        content: str,
        cc: list[str] | None = None,
    ) -> None:
        """
        Send a plain-text email from the connected mailbox.

        Args:
            to: Recipient address
            subject: Subject line
            content: Plain-text body
            cc: Optional CC addresses
        """
        message = {
            "subject": subject,
            "body": {"contentType": "Text", "content": content},
            "toRecipients": _recipients([to]),
            "ccRecipients": _recipients(cc),
        }
        await self._request("POST", "/me/sendMail", json={"message": message})
        logger.info("Email sent", to=to, cc_count=len(cc or []))

    async def list_emails(self, folder: str = "inbox", top: int = 25) -> dict[str, Any]:
        """Most recent messages in a mail folder."""
        return await self._request(
            "GET",
            f"/me/mailFolders/{folder}/messages",
            params={
                "$top": top,
                "$select": "id,subject,from,receivedDateTime,bodyPreview,isRead",
                "$orderby": "receivedDateTime desc",
            },
        )

    async def list_calendar_events(
        self,
        start_time: str | None = None,
        end_time: str | None = None,
    ) -> dict[str, Any]:
        """Calendar events, optionally restricted to a time range."""
        params: dict[str, Any] = {
            "$select": "id,subject,start,end,attendees,location",
            "$orderby": "start/dateTime",
        }
        if start_time and end_time:
            params["$filter"] = (
                f"start/dateTime ge '{start_time}' and end/dateTime le '{end_time}'"
            )
        return await self._request("GET", "/me/events", params=params)

    async def create_calendar_event(
        self,
        subject: str,
        start: str,
        end: str,
        attendees: list[str] | None = None,
        location: str | None = None,
    ) -> dict[str, Any]:
        """Create a calendar event (times are interpreted as UTC)."""
        event: dict[str, Any] = {
            "subject": subject,
            "start": {"dateTime": start, "timeZone": "UTC"},
            "end": {"dateTime": end, "timeZone": "UTC"},
            "attendees": _recipients(attendees),
        }
        if location:
            event["location"] = {"displayName": location}
        return await self._request("POST", "/me/events", json=event)
