"""
HQ CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

from pathlib import Path

import typer
from rich.console import Console

from hq import __version__
from hq.cli import migrate, scan, serve, status, task
from hq.cli.common import setup_logging
from hq.core.config.env import load_layered_env

# Help panel names for command grouping
PANEL_SCAN = "Collect Project Data"
PANEL_TASKS = "Work with Tasks"
PANEL_REPOS = "Change Repositories"
PANEL_INSTALL = "About HQ"

# Create the main Typer app
app = typer.Typer(
    name="hq",
    help="Command center for checklist progress across your projects",
    no_args_is_help=True,
    add_completion=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
    data_file: Path | None = typer.Option(
        None,
        "--data-file",
        help="Path to the data store (default: store.data_file from config)",
    ),
) -> None:
    """
    HQ - Command Center.

    Scrapes checklists (PRDs, roadmaps, task lists) out of your repositories
    into one JSON document for the dashboard.

    Common Workflows:
        hq scan                      # Rebuild from local checkouts
        hq scan --remote             # Rebuild from GitHub
        hq status                    # Progress and current focus
        hq done <id>                 # Mark a task done
        hq current <id>              # Move the focus
        hq migrate --repo o/r --dry-run
    """
    setup_logging(debug)
    # Precedence: OS env > project .env > user .env
    load_layered_env()

    ctx.obj = {"debug": debug, "data_file": data_file}


# =============================================================================
# Collect Project Data
# =============================================================================

app.command(name="scan", rich_help_panel=PANEL_SCAN)(scan.scan)
app.command(name="status", rich_help_panel=PANEL_SCAN)(status.status)
app.command(name="serve", rich_help_panel=PANEL_SCAN)(serve.serve)


# =============================================================================
# Work with Tasks
# =============================================================================

app.command(name="done", rich_help_panel=PANEL_TASKS)(task.done)
app.command(name="current", rich_help_panel=PANEL_TASKS)(task.current)


# =============================================================================
# Change Repositories
# =============================================================================

app.command(name="migrate", rich_help_panel=PANEL_REPOS)(migrate.migrate)


# =============================================================================
# About HQ
# =============================================================================


@app.command(rich_help_panel=PANEL_INSTALL)
def version() -> None:
    """Show hq version and exit."""
    console.print(f"hq version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
