"""
Tests for the REST client and query key resolution.
"""

import httpx
import pytest

from exteriorcrm.client.http import CRMClient, query_request


class TestQueryRequest:
    """Tests for query_request."""

    def test_plain_query(self) -> None:
        assert query_request(("leads",)) == ("/leads", {})

    def test_filter_parts_become_params(self) -> None:
        assert query_request(("team_members", "division=rr")) == (
            "/team-members",
            {"division": "rr"},
        )

    def test_user_scoped_query(self) -> None:
        """Test path parts fill the template and are not repeated as params."""
        assert query_request(("user_settings", "user_id=user_1")) == (
            "/settings/preferences/user_1",
            {},
        )
        assert query_request(("user_account", "user_id=user_1")) == (
            "/settings/account/user_1",
            {},
        )

    def test_missing_path_part(self) -> None:
        with pytest.raises(ValueError, match="user_id"):
            query_request(("user_settings",))

    def test_unknown_prefix(self) -> None:
        with pytest.raises(ValueError):
            query_request(("invoices",))


class TestCRMClient:
    """Tests for CRMClient."""

    @pytest.mark.asyncio
    async def test_fetch_query(self) -> None:
        """Test a cache key is fetched from its endpoint."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"theme": "dark"})

        async with CRMClient("http://crm.test/api", transport=httpx.MockTransport(handler)) as client:
            data = await client.fetch_query(("user_settings", "user_id=user_1"))

        assert data == {"theme": "dark"}
        assert requests[0].url.path == "/api/settings/preferences/user_1"
        assert requests[0].url.query == b""

    @pytest.mark.asyncio
    async def test_fetch_query_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        async with CRMClient("http://crm.test/api", transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(httpx.HTTPStatusError):
                await client.fetch_query(("dashboard_stats",))
