"""
ExteriorCRM CLI Main Entry Point

The main Typer application that assembles all command groups.
"""

from typing import Annotated

import structlog
import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from exteriorcrm import __version__

# Configure structlog
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(colors=True),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)
console = Console()

# Create the main app
app = typer.Typer(
    name="exteriorcrm",
    help="ExteriorCRM - leads, estimates and jobs with live updates",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(
            Panel(
                Text.from_markup(
                    f"[bold cyan]ExteriorCRM[/bold cyan] v{__version__}\n"
                    "[dim]Small-business CRM with real-time updates[/dim]"
                ),
                title="Version",
                border_style="cyan",
            )
        )
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
) -> None:
    """
    ExteriorCRM - CRM backend for exterior finishing contractors

    Serve the API, manage leads, or watch changes arrive in real time.
    """
    import logging

    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")


# Import and register sub-commands
from exteriorcrm.cli.leads import app as leads_app
from exteriorcrm.cli.watch import watch

app.add_typer(leads_app, name="leads", help="List and create leads")
app.command("watch")(watch)


@app.command()
def serve(
    host: Annotated[str | None, typer.Option("--host", help="Bind address")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Port to listen on")] = None,
    reload: Annotated[bool, typer.Option("--reload", help="Reload on code changes")] = False,
) -> None:
    """Run the API server."""
    import uvicorn

    from exteriorcrm.api.config import settings

    uvicorn.run(
        "exteriorcrm.api.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@app.command()
def info() -> None:
    """Show information about ExteriorCRM."""
    from rich.table import Table

    from exteriorcrm.api.config import settings
    from exteriorcrm.api.websocket.events import EventType
    from exteriorcrm.client.config import settings as client_settings

    table = Table(title="ExteriorCRM Information", show_header=False, border_style="cyan")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Version", __version__)
    table.add_row("API Prefix", settings.api_prefix)
    table.add_row("WebSocket Path", settings.ws_path)
    table.add_row("Event Types", str(len(EventType)))
    table.add_row("Outlook", "connected" if settings.outlook_access_token else "not configured")
    table.add_row("Client Server URL", client_settings.server_url)

    console.print(table)


if __name__ == "__main__":
    app()
