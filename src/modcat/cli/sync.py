"""
Modcat CLI - Sync command.

Run one sync cycle against the remote database from the command line.
"""

import typer
from rich.console import Console

from modcat.cli._common import is_debug, settings_or_exit
from modcat.core.catalog.db import CatalogStore
from modcat.core.catalog.errors import StoreError
from modcat.core.catalog.sync import SyncOrchestrator

console = Console()


def sync(ctx: typer.Context) -> None:
    """
    Replace the local catalog with a snapshot of the remote database.

    The operator is trusted, so no sync token is needed. On failure the
    previous local catalog is kept and the command exits with status 1.

    Examples:
        modcat sync
        modcat --debug sync
    """
    settings = settings_or_exit(require_remote=True)
    store = CatalogStore(settings.db_path)

    if is_debug(ctx):
        console.print(f"[dim]Remote: {settings.remote_url}[/dim]")
        console.print(f"[dim]Database: {settings.db_path}[/dim]")

    try:
        store.initialize()
    except StoreError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print("[cyan]Syncing catalog...[/cyan]")
    result = SyncOrchestrator.from_settings(store, settings).sync()

    if result.success:
        console.print("\n[bold green]✓ Sync successful[/bold green]")
        console.print(f"  Mods: {result.mods_synced}")
        console.print(f"  Versions: {result.versions_synced}")
        console.print(f"  Duration: {result.duration_seconds:.2f}s")
        return

    console.print("\n[bold red]✗ Sync failed[/bold red]")
    for error in result.errors:
        console.print(f"  • {error}")
    console.print("[dim]The previous catalog was kept.[/dim]")
    raise typer.Exit(1)
