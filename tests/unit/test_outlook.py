"""
Tests for the Outlook (Microsoft Graph) client.
"""

import json
from typing import Any

import httpx
import pytest

from exteriorcrm.services.outlook import (
    OutlookAPIError,
    OutlookClient,
    OutlookError,
    OutlookNotConnectedError,
)


class GraphStub:
    """Records requests and answers with a canned response."""

    def __init__(self, status_code: int = 200, body: Any = None) -> None:
        self.status_code = status_code
        self.body = body
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.body is None:
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json=self.body)


def make_client(stub: GraphStub, token: str | None = "token-123") -> OutlookClient:
    return OutlookClient(
        access_token=token,
        base_url="https://graph.test/v1.0",
        transport=httpx.MockTransport(stub),
    )


class TestOutlookClient:
    """Tests for OutlookClient."""

    def test_is_connected(self) -> None:
        assert OutlookClient(access_token="t").is_connected is True
        assert OutlookClient(access_token=None).is_connected is False

    @pytest.mark.asyncio
    async def test_not_connected(self) -> None:
        """Test calls without a token fail before any request is made."""
        stub = GraphStub()
        client = make_client(stub, token=None)

        with pytest.raises(OutlookNotConnectedError):
            await client.list_emails()
        assert stub.requests == []

    @pytest.mark.asyncio
    async def test_send_email(self) -> None:
        """Test sendMail request shape."""
        stub = GraphStub(status_code=202)
        client = make_client(stub)

        await client.send_email(
            "dana@example.com",
            "Your estimate",
            "Attached is the estimate.",
            cc=["office@example.com"],
        )

        request = stub.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/v1.0/me/sendMail"
        assert request.headers["Authorization"] == "Bearer token-123"
        message = json.loads(request.content)["message"]
        assert message["subject"] == "Your estimate"
        assert message["body"] == {"contentType": "Text", "content": "Attached is the estimate."}
        assert message["toRecipients"] == [{"emailAddress": {"address": "dana@example.com"}}]
        assert message["ccRecipients"] == [{"emailAddress": {"address": "office@example.com"}}]

    @pytest.mark.asyncio
    async def test_list_emails(self) -> None:
        stub = GraphStub(body={"value": [{"id": "m1", "subject": "Hello"}]})
        client = make_client(stub)

        result = await client.list_emails(folder="sentitems", top=5)

        assert result["value"][0]["id"] == "m1"
        request = stub.requests[0]
        assert request.url.path == "/v1.0/me/mailFolders/sentitems/messages"
        assert request.url.params["$top"] == "5"

    @pytest.mark.asyncio
    async def test_calendar_range_filter(self) -> None:
        """Test a time range becomes a $filter expression."""
        stub = GraphStub(body={"value": []})
        client = make_client(stub)

        await client.list_calendar_events("2026-06-01T00:00:00", "2026-06-30T00:00:00")

        params = stub.requests[0].url.params
        assert params["$filter"] == (
            "start/dateTime ge '2026-06-01T00:00:00' and end/dateTime le '2026-06-30T00:00:00'"
        )

    @pytest.mark.asyncio
    async def test_calendar_without_range(self) -> None:
        stub = GraphStub(body={"value": []})
        client = make_client(stub)

        await client.list_calendar_events()

        assert "$filter" not in stub.requests[0].url.params

    @pytest.mark.asyncio
    async def test_create_calendar_event(self) -> None:
        stub = GraphStub(status_code=201, body={"id": "evt-1"})
        client = make_client(stub)

        result = await client.create_calendar_event(
            subject="Site walk",
            start="2026-06-02T15:00:00",
            end="2026-06-02T16:00:00",
            attendees=["dana@example.com"],
            location="12 Orchard Lane",
        )

        assert result == {"id": "evt-1"}
        event = json.loads(stub.requests[0].content)
        assert event["start"] == {"dateTime": "2026-06-02T15:00:00", "timeZone": "UTC"}
        assert event["location"] == {"displayName": "12 Orchard Lane"}

    @pytest.mark.asyncio
    async def test_api_error(self) -> None:
        """Test Graph error responses become OutlookAPIError."""
        stub = GraphStub(status_code=401, body={"error": {"message": "Token expired"}})
        client = make_client(stub)

        with pytest.raises(OutlookAPIError) as exc_info:
            await client.list_emails()

        assert exc_info.value.status_code == 401
        assert "Token expired" in str(exc_info.value)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body,expected",
        [
            (["unexpected", "list"], "unexpected"),
            ({"error": "invalid_grant"}, "invalid_grant"),
            ({"error": {"code": "Throttled"}}, "Throttled"),
            ("plain string body", "plain string body"),
        ],
    )
    async def test_api_error_with_unusual_body(self, body: Any, expected: str) -> None:
        """Test error bodies that are not Graph-shaped still raise OutlookAPIError."""
        stub = GraphStub(status_code=500, body=body)
        client = make_client(stub)

        with pytest.raises(OutlookAPIError) as exc_info:
            await client.list_emails()

        assert exc_info.value.status_code == 500
        assert expected in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        """Test network failures become OutlookError."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = OutlookClient(
            access_token="t",
            base_url="https://graph.test/v1.0",
            transport=httpx.MockTransport(refuse),
        )

        with pytest.raises(OutlookError):
            await client.list_emails()
