"""
HTTP Client

Async httpx client for the REST API, and the mapping from cache query
keys to the endpoints that answer them.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from exteriorcrm.client.cache import QueryKey
from exteriorcrm.client.router import (
    COMMUNICATIONS,
    DASHBOARD_STATS,
    ESTIMATES,
    JOBS,
    LEADS,
    TEAM_MEMBERS,
    USER_ACCOUNT,
    USER_SETTINGS,
    WHITE_LABEL,
)

logger = structlog.get_logger(__name__)

QUERY_PATHS: dict[str, str] = {
    LEADS: "/leads",
    ESTIMATES: "/estimates",
    JOBS: "/jobs",
    COMMUNICATIONS: "/communications",
    WHITE_LABEL: "/white-label",
    TEAM_MEMBERS: "/team-members",
    DASHBOARD_STATS: "/dashboard/stats",
    # Keyed per user, e.g. ("user_settings", "user_id=user_1")
    USER_ACCOUNT: "/settings/account/{user_id}",
    USER_SETTINGS: "/settings/preferences/{user_id}",
}


def query_params(key: QueryKey) -> dict[str, str]:
    """Turn the ``name=value`` parts of a key into query parameters."""
    params = {}
    for part in key[1:]:
        name, sep, value = part.partition("=")
        if not sep:
            raise ValueError(f"Invalid query key part: {part!r}")
        params[name] = value
    return params


def query_request(key: QueryKey) -> tuple[str, dict[str, str]]:
    """
    Resolve a query key to a request path and its query parameters.

    Key parts named in the path template fill it in; the rest are sent
    as query parameters.

    Raises:
        ValueError: If the key has no endpoint or misses a path part
    """
    try:
        template = QUERY_PATHS[key[0]]
    except KeyError:
        raise ValueError(f"No endpoint for query {key[0]!r}") from None
    params = query_params(key)
    try:
        path = template.format_map(params)
    except KeyError as e:
        raise ValueError(f"Query {key[0]!r} needs {e.args[0]!r}") from None
    return path, {k: v for k, v in params.items() if f"{{{k}}}" not in template}


class CRMClient:
    """REST client for a running ExteriorCRM API."""

    def __init__(
        self,
        api_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> CRMClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = await self._client.get(path, params=params)
        response.raise_for_status()
        return response.json()

    async def post(self, path: str, payload: dict[str, Any]) -> Any:
        response = await self._client.post(path, json=payload)
        response.raise_for_status()
        return response.json()

    async def fetch_query(self, key: QueryKey) -> Any:
        """Fetcher for a QueryCache."""
        path, params = query_request(key)
        logger.debug("Fetching query", key=key)
        return await self.get(path, params=params or None)
