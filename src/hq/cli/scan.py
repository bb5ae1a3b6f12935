"""
HQ CLI - Scan command.

Rebuild the dashboard document from checklist files in tracked repositories.
"""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from hq.cli.common import get_config, get_store
from hq.cli.errors import ExitCode, print_error, print_store_error
from hq.core.aggregator import Aggregator, upsert_projects
from hq.core.config import HQConfig
from hq.core.exceptions import HQError, StoreUnreadableError
from hq.core.sources import get_source
from hq.core.store import Document, project_progress

console = Console()


async def _build(config: HQConfig, source_name: str, only: str | None) -> Document:
    source = get_source(source_name, config)
    try:
        return await Aggregator(source, config).build_document(only=only)
    finally:
        await source.aclose()


def _print_summary(document: Document) -> None:
    table = Table(title="Scanned projects", show_header=True, header_style="bold")
    table.add_column("Project")
    table.add_column("Status")
    table.add_column("Sections", justify="right")
    table.add_column("Progress", justify="right")
    table.add_column("Branch")
    for project in document.projects:
        branch = ""
        if project.local is not None:
            branch = project.local.branch or ""
            if project.local.has_changes:
                branch += f" [yellow]({project.local.changed_files} changed)[/yellow]"
        table.add_row(
            f"{project.emoji} {project.name}",
            project.status,
            str(len(project.milestones)),
            f"{project_progress(project)}%",
            branch,
        )
    console.print(table)


def scan(
    ctx: typer.Context,
    project: str | None = typer.Option(
        None,
        "--project",
        "-p",
        help="Rescan a single project by id",
    ),
    remote: bool = typer.Option(
        False,
        "--remote/--local",
        help="Read repositories through the GitHub API instead of local checkouts",
    ),
) -> None:
    """
    Scan tracked repositories and rewrite the data store.

    Examples:
        hq scan                       # Rebuild from local checkouts
        hq scan --remote              # Rebuild from GitHub
        hq scan --project loomiverse  # Refresh one project in place
    """
    config = get_config()
    store = get_store(ctx, config)
    source_name = "github" if remote else "local"

    console.print(f"[cyan]Scanning projects ({source_name})...[/cyan]")
    try:
        document = asyncio.run(_build(config, source_name, project))
    except HQError as e:
        print_error(f"Scan failed: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    if project is not None:
        if not document.projects:
            print_error(
                f"Project not found: {project}",
                reason=f"No tracked repository named '{project}' produced data",
                solution="hq status  # to list project ids",
            )
            raise typer.Exit(ExitCode.GENERAL_ERROR)
        try:
            existing = store.load() if store.exists() else Document()
        except StoreUnreadableError as e:
            print_store_error(e)
            raise typer.Exit(ExitCode.GENERAL_ERROR)
        upsert_projects(existing, document.projects)
        existing.meta.last_scan_type = document.meta.last_scan_type
        for name in document.meta.sources:
            if name not in existing.meta.sources:
                existing.meta.sources.append(name)
        document = existing

    store.save(document)
    _print_summary(document)
    console.print(f"[green]Saved {len(document.projects)} projects to {store.path}[/green]")
