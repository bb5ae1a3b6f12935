"""
HQ CLI - Status command.

Show overall progress and the current focus of every project.
"""

import typer
from rich.console import Console
from rich.table import Table

from hq.cli.common import get_store
from hq.cli.errors import ExitCode, print_store_error
from hq.core.exceptions import StoreUnreadableError
from hq.core.store import (
    Document,
    document_progress,
    focus_chain,
    leaf_counts,
    project_progress,
    walk_nodes,
)

console = Console()


def status_report(document: Document) -> dict[str, object]:
    """Summarize the document for --json output."""
    projects = []
    for project in document.projects:
        done, total = leaf_counts(project)
        projects.append(
            {
                "id": project.id,
                "name": project.name,
                "status": project.status,
                "progress": project_progress(project),
                "done": done,
                "total": total,
                "current": [node.id for node in focus_chain(project)],
                "nodes": [
                    {"id": node.id, "kind": kind, "name": node.name, "done": node.done}
                    for kind, node in walk_nodes(project)
                ],
            }
        )
    focus = document.meta.focus
    return {
        "lastUpdated": document.meta.last_updated,
        "lastScanType": document.meta.last_scan_type,
        "progress": document_progress(document),
        "focus": focus.model_dump(exclude_none=True) if focus else None,
        "projects": projects,
    }


def status(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output status as JSON",
    ),
) -> None:
    """
    Show progress per project and the current focus chain.

    Examples:
        hq status          # Table view
        hq status --json   # Machine-readable summary
    """
    store = get_store(ctx)
    try:
        document = store.load()
    except StoreUnreadableError as e:
        print_store_error(e)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    if json_output:
        console.print_json(data=status_report(document))
        return

    console.print(f"\n[bold]HQ Command Center[/bold] - {document_progress(document)}% overall")
    console.print(
        f"[dim]Last updated: {document.meta.last_updated} ({document.meta.last_scan_type})[/dim]\n"
    )

    table = Table(show_header=True, header_style="bold")
    table.add_column("Project")
    table.add_column("Status")
    table.add_column("Progress", justify="right")
    table.add_column("Current")
    for project in document.projects:
        done, total = leaf_counts(project)
        chain = " > ".join(node.name for node in focus_chain(project))
        table.add_row(
            f"{project.emoji} {project.name}",
            project.status,
            f"{project_progress(project)}% ({done}/{total})",
            chain or "[dim]-[/dim]",
        )
    console.print(table)
