"""
Lead CLI Commands

List and create leads on a running API server.
"""

from __future__ import annotations

import asyncio
from typing import Annotated, Any

import httpx
import structlog
import typer
from rich.console import Console
from rich.table import Table

from exteriorcrm.client.config import settings
from exteriorcrm.client.http import CRMClient
from exteriorcrm.models.entities import Division, Priority, ProjectType

logger = structlog.get_logger(__name__)
console = Console()

app = typer.Typer(
    name="leads",
    help="List and create leads",
    no_args_is_help=True,
)

STATUS_STYLES = {
    "new": "cyan",
    "contacted": "blue",
    "estimate_requested": "yellow",
    "quote_sent": "magenta",
    "won": "green",
    "lost": "red",
}


def leads_table(leads: list[dict[str, Any]]) -> Table:
    """Render leads as a rich table."""
    table = Table(title=f"Leads ({len(leads)})", border_style="cyan")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Customer")
    table.add_column("Division")
    table.add_column("Project")
    table.add_column("Priority")
    table.add_column("Status")
    table.add_column("Value", justify="right")

    for lead in leads:
        status = lead.get("status", "")
        style = STATUS_STYLES.get(status, "white")
        value = lead.get("estimated_value")
        table.add_row(
            lead["id"][:8],
            lead.get("customer_name", ""),
            lead.get("division", ""),
            lead.get("project_type", ""),
            lead.get("priority", ""),
            f"[{style}]{status}[/{style}]",
            f"${float(value):,.2f}" if value is not None else "-",
        )
    return table


async def _fetch_leads(division: str | None) -> list[dict[str, Any]]:
    async with CRMClient(settings.api_url, timeout=settings.request_timeout_seconds) as client:
        params = {"division": division} if division else None
        return await client.get("/leads", params=params)


async def _create_lead(payload: dict[str, Any]) -> dict[str, Any]:
    async with CRMClient(settings.api_url, timeout=settings.request_timeout_seconds) as client:
        return await client.post("/leads", payload)


@app.command("list")
def list_leads(
    division: Annotated[
        Division | None,
        typer.Option("--division", "-d", help="Only leads in this division"),
    ] = None,
) -> None:
    """List leads."""
    try:
        leads = asyncio.run(_fetch_leads(division.value if division else None))
    except httpx.HTTPError as e:
        console.print(f"[red]Error:[/red] could not fetch leads: {e}")
        raise typer.Exit(1)

    if not leads:
        console.print("[dim]No leads yet.[/dim]")
        return
    console.print(leads_table(leads))


@app.command("create")
def create_lead(
    customer_name: Annotated[str, typer.Argument(help="Customer name")],
    address: Annotated[str, typer.Option("--address", "-a", help="Job site address")],
    division: Annotated[Division, typer.Option("--division", "-d", help="Division")],
    project_type: Annotated[ProjectType, typer.Option("--project", "-p", help="Project type")],
    priority: Annotated[Priority, typer.Option("--priority", help="Priority")] = Priority.MEDIUM,
    email: Annotated[str | None, typer.Option("--email", help="Contact email")] = None,
    phone: Annotated[str | None, typer.Option("--phone", help="Contact phone")] = None,
    value: Annotated[float | None, typer.Option("--value", help="Estimated value")] = None,
    source: Annotated[str | None, typer.Option("--source", help="Lead source")] = None,
) -> None:
    """Create a lead. Connected clients are notified immediately."""
    payload: dict[str, Any] = {
        "customer_name": customer_name,
        "address": address,
        "division": division.value,
        "project_type": project_type.value,
        "priority": priority.value,
        "email": email,
        "phone": phone,
        "estimated_value": f"{value:.2f}" if value is not None else None,
        "source": source,
    }

    try:
        lead = asyncio.run(_create_lead(payload))
    except httpx.HTTPStatusError as e:
        console.print(f"[red]Error:[/red] server rejected lead ({e.response.status_code})")
        console.print(e.response.text)
        raise typer.Exit(1)
    except httpx.HTTPError as e:
        console.print(f"[red]Error:[/red] could not reach server: {e}")
        raise typer.Exit(1)

    console.print(f"[green]Created lead[/green] {lead['id']}")
    console.print(leads_table([lead]))
