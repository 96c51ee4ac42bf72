"""
Modcat CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging

import typer
from rich.console import Console

from modcat import __version__
from modcat.cli import serve, status, sync
from modcat.core.config.env import load_layered_env

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Create the main Typer app
app = typer.Typer(
    name="modcat",
    help="Serve a catalog of mods from a local replica of a remote database",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"modcat version {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show modcat version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Modcat - mod catalog service.

    Serves mods and their version histories over HTTP from a local SQLite
    replica. The replica is refreshed wholesale from the remote database
    named by DB_URL.

    Quick Start:
        modcat sync                  # Pull the remote catalog once
        modcat serve                 # Start the API on 0.0.0.0:8000
        modcat stats                 # Show local row counts

    Configuration (environment or .env):
        DB_URL, AUTH                 Remote database URL and token
        SYNC_AUTH                    Secret for GET /api/run-sync/{token}
        MODCAT_DB_PATH               Local replica file (default mods.db)
        MODCAT_ENV_FILE              Extra .env file loaded after .env/.env.local
    """
    # Precedence: OS env > MODCAT_ENV_FILE > project .env > user .env
    loaded = load_layered_env()

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
    )

    if debug:
        for path in loaded:
            console.print(f"[dim]Loaded {path}[/dim]")

    # Store debug flag in context for subcommands
    ctx.obj = {"debug": debug}


app.command(name="serve")(serve.serve)
app.command(name="sync")(sync.sync)
app.command(name="stats")(status.stats)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
