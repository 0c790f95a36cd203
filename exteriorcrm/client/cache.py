"""
Query Cache

Client-side store of fetched query results, keyed by tuples whose first
element is the prefix events invalidate (``("leads",)``,
``("leads", "division=rr")``, ``("dashboard_stats",)``).

Invalidation only marks entries stale; refetching is a separate step so
that a burst of invalidations for the same key costs one request.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

import structlog

logger = structlog.get_logger(__name__)

QueryKey = tuple[str, ...]
Fetcher = Callable[[QueryKey], Awaitable[Any]]


@dataclass
class CacheEntry:
    """A cached query result."""

    data: Any
    fetched_at: datetime
    stale: bool = False


class QueryCache:
    """
    Cached query results with prefix invalidation.

    Concurrent fetches of the same key share one in-flight request. A key
    invalidated while its fetch is in flight is stored stale, so the next
    refresh fetches it again.
    """

    def __init__(self, fetcher: Fetcher) -> None:
        self._fetcher = fetcher
        self._entries: dict[QueryKey, CacheEntry] = {}
        self._inflight: dict[QueryKey, asyncio.Future[Any]] = {}
        self._invalidated_inflight: set[QueryKey] = set()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> list[QueryKey]:
        return list(self._entries)

    def peek(self, key: QueryKey) -> Any | None:
        """Cached data for a key, stale or not, without fetching."""
        entry = self._entries.get(key)
        return entry.data if entry else None

    def is_stale(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        return entry is None or entry.stale

    def set(self, key: QueryKey, data: Any) -> None:
        """Store a fresh result."""
        self._entries[key] = CacheEntry(data=data, fetched_at=datetime.now(timezone.utc))

    def invalidate(self, prefix: str) -> int:
        """
        Mark every entry under a prefix stale.

        Args:
            prefix: First element of the keys to invalidate

        Returns:
            Number of cached entries that went from fresh to stale
        """
        changed = 0
        for key, entry in self._entries.items():
            if key[0] == prefix and not entry.stale:
                entry.stale = True
                changed += 1
        for key in self._inflight:
            if key[0] == prefix:
                self._invalidated_inflight.add(key)
        logger.debug("Cache invalidated", prefix=prefix, entries=changed)
        return changed

    def invalidate_all(self) -> int:
        """Mark everything stale, e.g. after reconnecting."""
        return sum(self.invalidate(prefix) for prefix in {key[0] for key in self._entries})

    async def fetch(self, key: QueryKey) -> Any:
        """
        Return fresh data for a key, fetching it if missing or stale.

        Args:
            key: Query key

        Returns:
            The query result
        """
        entry = self._entries.get(key)
        if entry is not None and not entry.stale:
            return entry.data

        pending = self._inflight.get(key)
        if pending is not None:
            try:
                return await asyncio.shield(pending)
            except asyncio.CancelledError:
                # The owning fetch was cancelled, not this waiter: start over
                task = asyncio.current_task()
                if pending.cancelled() and task is not None and not task.cancelling():
                    return await self.fetch(key)
                raise

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._inflight[key] = future
        try:
            data = await self._fetcher(key)
        except Exception as e:
            if not future.done():
                future.set_exception(e)
                # Nobody else may be waiting; mark the exception retrieved
                future.exception()
            raise
        else:
            self.set(key, data)
            if key in self._invalidated_inflight:
                self._entries[key].stale = True
            if not future.done():
                future.set_result(data)
            return data
        finally:
            if not future.done():
                future.cancel()
            del self._inflight[key]
            self._invalidated_inflight.discard(key)

    async def refresh_stale(self) -> list[QueryKey]:
        """
        Refetch every stale entry once.

        Returns:
            Keys that were refetched successfully
        """
        stale = [key for key, entry in self._entries.items() if entry.stale]
        results = await asyncio.gather(*(self.fetch(key) for key in stale), return_exceptions=True)

        refreshed = []
        for key, result in zip(stale, results):
            if isinstance(result, Exception):
                logger.warning("Refetch failed", key=key, error=str(result))
            else:
                refreshed.append(key)
        return refreshed
