"""
Watch Command

Follows the server's event stream and keeps a local query cache current,
printing each change as it arrives.
"""

from __future__ import annotations

import asyncio
from typing import Annotated

import httpx
import structlog
import typer
from rich.console import Console
from rich.table import Table

from exteriorcrm.client.cache import QueryCache, QueryKey
from exteriorcrm.client.config import settings
from exteriorcrm.client.http import CRMClient
from exteriorcrm.client.listener import EventListener
from exteriorcrm.client.router import DASHBOARD_STATS, LEADS, ClientEventRouter, RoutedMessage

logger = structlog.get_logger(__name__)
console = Console()

WATCHED_QUERIES: list[QueryKey] = [(LEADS,), (DASHBOARD_STATS,)]


def stats_table(stats: dict) -> Table:
    """Render dashboard stats."""
    table = Table(title="Dashboard", show_header=False, border_style="cyan")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white", justify="right")

    table.add_row("Total leads", str(stats.get("total_leads", 0)))
    table.add_row("Active estimates", str(stats.get("active_estimates", 0)))
    table.add_row("Conversion rate", f"{stats.get('conversion_rate', 0)}%")
    table.add_row("Closed deals", f"${float(stats.get('closed_deals', 0)):,.2f}")
    table.add_row("Lead growth", f"{stats.get('lead_growth', 0):+d}%")
    table.add_row("Estimate growth", f"{stats.get('estimate_growth', 0):+d}%")
    return table


async def fetch_missing(cache: QueryCache) -> list[QueryKey]:
    """
    Fetch watched queries that have never been loaded.

    A key whose fetch failed has no cache entry, so invalidation never
    marks it stale; it is retried here until it succeeds.

    Returns:
        Keys fetched by this call
    """
    fetched = []
    for key in WATCHED_QUERIES:
        if key in cache:
            continue
        try:
            await cache.fetch(key)
        except httpx.HTTPError as e:
            logger.warning("Fetch failed", key=key, error=str(e))
        else:
            fetched.append(key)
    return fetched


async def _watch(url: str, max_events: int | None) -> None:
    async with CRMClient(settings.api_url, timeout=settings.request_timeout_seconds) as client:
        cache = QueryCache(client.fetch_query)
        router = ClientEventRouter(cache)
        seen = 0

        async def on_connect(first: bool) -> None:
            if not first:
                # Events sent while disconnected are lost
                cache.invalidate_all()
                await cache.refresh_stale()
                console.print("[yellow]Reconnected, cache refreshed[/yellow]")
            await fetch_missing(cache)
            console.print(stats_table(cache.peek((DASHBOARD_STATS,)) or {}))

        listener: EventListener

        async def on_message(routed: RoutedMessage) -> None:
            nonlocal seen
            if routed.event is None:
                return
            seen += 1
            targets = ", ".join(routed.invalidated) or "nothing"
            console.print(f"[bold cyan]{routed.event.kind.value}[/bold cyan] -> invalidated {targets}")
            refreshed = await cache.refresh_stale()
            refreshed += await fetch_missing(cache)
            if (DASHBOARD_STATS,) in refreshed:
                console.print(stats_table(cache.peek((DASHBOARD_STATS,))))
            if max_events is not None and seen >= max_events:
                listener.stop()

        listener = EventListener(
            url,
            router,
            reconnect_delay=settings.reconnect_delay_seconds,
            on_message=on_message,
            on_connect=on_connect,
        )
        await listener.run()


def watch(
    url: Annotated[
        str | None,
        typer.Option("--url", "-u", help="WebSocket URL (defaults to the configured server)"),
    ] = None,
    max_events: Annotated[
        int | None,
        typer.Option("--max-events", "-n", help="Exit after this many events"),
    ] = None,
) -> None:
    """Watch live changes from the server."""
    target = url or settings.ws_url
    console.print(f"[dim]Watching {target} (Ctrl+C to stop)[/dim]")
    try:
        asyncio.run(_watch(target, max_events))
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped.[/dim]")
