"""Helpers shared by the CLI commands."""

import typer
from rich.console import Console

from modcat.core.config import CatalogSettings, ConfigError, load_settings

err_console = Console(stderr=True)


def settings_or_exit(*, require_remote: bool, **overrides: object) -> CatalogSettings:
    """
    Load settings, exiting with status 1 on configuration errors.

    Args:
        require_remote: Also require DB_URL, AUTH and SYNC_AUTH
        **overrides: Values from CLI options; None means "not given"

    Raises:
        typer.Exit: If the configuration is invalid or incomplete
    """
    try:
        settings = load_settings(**overrides)
        if require_remote:
            settings.require_remote()
    except ConfigError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        err_console.print("[dim]Set it in the environment or in a .env file.[/dim]")
        raise typer.Exit(1)
    return settings


def is_debug(ctx: typer.Context) -> bool:
    return bool(ctx.obj.get("debug", False)) if ctx.obj else False
