"""
Modcat CLI - Stats command.

Show row counts of the local catalog replica.
"""

import typer
from rich.console import Console
from rich.table import Table

from modcat.cli._common import is_debug, settings_or_exit
from modcat.core.catalog.db import CatalogStore
from modcat.core.catalog.errors import StoreError

console = Console()


def stats(ctx: typer.Context) -> None:
    """
    Show how many mods and versions the local replica holds.

    Examples:
        modcat stats
        MODCAT_DB_PATH=/srv/mods.db modcat stats
    """
    settings = settings_or_exit(require_remote=False)

    if not settings.db_path.exists():
        console.print(f"[yellow]No local catalog at {settings.db_path}[/yellow]")
        console.print("[dim]Run 'modcat sync' to create it.[/dim]")
        raise typer.Exit(1)

    try:
        counts = CatalogStore(settings.db_path).stats()
    except StoreError as e:
        console.print(f"[red]Error:[/red] {e}")
        if is_debug(ctx):
            import traceback

            console.print(traceback.format_exc())
        raise typer.Exit(1)

    table = Table(title=f"Catalog: {settings.db_path}")
    table.add_column("Table", style="cyan")
    table.add_column("Rows", justify="right")
    table.add_row("info", str(counts["mods"]))
    table.add_row("versions", str(counts["versions"]))
    console.print(table)
