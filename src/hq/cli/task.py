"""
HQ CLI - Task commands.

Mark a task done or move the focus to it in the stored document.
"""

import typer
from rich.console import Console

from hq.cli.common import get_store
from hq.cli.errors import ExitCode, print_store_error, print_task_not_found_error
from hq.core.exceptions import NotFoundError, StoreUnreadableError
from hq.core.store import Document, DocumentStore, mark_done, set_current

console = Console()


def _load(ctx: typer.Context) -> tuple[DocumentStore, Document]:
    store = get_store(ctx)
    try:
        return store, store.load()
    except StoreUnreadableError as e:
        print_store_error(e)
        raise typer.Exit(ExitCode.GENERAL_ERROR)


def done(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Milestone, task or subtask id"),
) -> None:
    """
    Mark a task done.

    Completing a subtask moves the focus to the next subtask.

    Example:
        hq done loomiverse-3f2a9c1e
    """
    store, document = _load(ctx)
    try:
        following = mark_done(document, task_id)
    except NotFoundError:
        print_task_not_found_error(task_id)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    store.save(document)
    console.print(f"[green]✓[/green] Marked done: {task_id}")
    if following is not None:
        console.print(f"[cyan]→ Next:[/cyan] {following.name}")


def current(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Milestone, task or subtask id"),
) -> None:
    """
    Set the current focus.

    Clears every other current flag in the document.

    Example:
        hq current loomiverse-phase-2
    """
    store, document = _load(ctx)
    try:
        ref = set_current(document, task_id)
    except NotFoundError:
        print_task_not_found_error(task_id)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    store.save(document)
    console.print(f"[green]✓[/green] Current {ref.kind} ({ref.project.name}): {ref.name}")
