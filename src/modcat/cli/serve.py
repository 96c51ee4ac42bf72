"""
Modcat CLI - Serve command.

Start the catalog API server.
"""

import typer
import uvicorn
from rich.console import Console

from modcat.cli._common import is_debug, settings_or_exit
from modcat.core.catalog.api import create_app
from modcat.core.catalog.db import CatalogStore
from modcat.core.catalog.errors import StoreError
from modcat.core.catalog.sync import SyncOrchestrator

console = Console()


def serve(
    ctx: typer.Context,
    host: str | None = typer.Option(
        None,
        "--host",
        help="Address to bind (default: MODCAT_HOST or 0.0.0.0)",
    ),
    port: int | None = typer.Option(
        None,
        "--port",
        "-p",
        help="Port to listen on (default: MODCAT_PORT or 8000)",
    ),
    sync_on_start: bool = typer.Option(
        False,
        "--sync-on-start",
        help="Sync from the remote database before serving",
    ),
) -> None:
    """
    Start the catalog API server.

    This command:
    1. Checks that DB_URL, AUTH and SYNC_AUTH are configured
    2. Creates the local tables if they do not exist
    3. Optionally syncs from the remote database
    4. Starts the FastAPI server

    Examples:
        modcat serve                     # 0.0.0.0:8000
        modcat serve --port 3000         # Different port
        modcat serve --sync-on-start     # Fresh catalog before serving
    """
    debug = is_debug(ctx)
    settings = settings_or_exit(require_remote=True, host=host, port=port)
    store = CatalogStore(settings.db_path)

    if debug:
        console.print(f"[dim]Database: {settings.db_path}[/dim]")
        console.print(f"[dim]Remote: {settings.remote_url}[/dim]")

    try:
        store.initialize()
    except StoreError as e:
        console.print(f"[red]Error:[/red] Could not prepare local catalog: {e}")
        raise typer.Exit(1)

    orchestrator = SyncOrchestrator.from_settings(store, settings)

    if sync_on_start:
        console.print("[cyan]Syncing catalog...[/cyan]")
        result = orchestrator.sync()
        if result.success:
            console.print(
                f"[green]✓[/green] Sync complete: "
                f"{result.mods_synced} mods, {result.versions_synced} versions"
            )
        else:
            console.print("[red]Sync failed:[/red]")
            for error in result.errors:
                console.print(f"  • {error}")
            console.print("\n[yellow]Serving the previous catalog...[/yellow]")

    app = create_app(settings, store=store, orchestrator=orchestrator)

    url = f"http://{settings.host}:{settings.port}"
    console.print("\n[bold cyan]Starting catalog server...[/bold cyan]")
    console.print(f"[dim]API: {url}/api/mod-list[/dim]")
    console.print(f"[dim]Docs: {url}/docs[/dim]")
    console.print("\n[dim]Press Ctrl+C to stop[/dim]\n")

    # Blocks until interrupted
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="debug" if debug else "info",
    )
