"""
Standardized error handling and exit codes for the HQ CLI.

This module provides consistent error messaging with actionable guidance
and standardized exit codes across all CLI commands.
"""

from enum import IntEnum

from rich.console import Console

from hq.core.exceptions import HQError

console = Console()


class ExitCode(IntEnum):
    """Standard exit codes for HQ CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Store unreadable, id not found, or upstream failure."""

    USER_ERROR = 2
    """Missing or invalid argument (actionable by user)."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Task not found: loomiverse-3f2a9c1e",
        ...     solution="hq status  # to see current ids",
        ... )
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def print_store_error(error: HQError) -> None:
    """Print error when the data store cannot be read."""
    print_error(
        str(error),
        reason="The data store is missing or is not a valid dashboard document",
        solution="hq scan  # to rebuild it",
    )


def print_task_not_found_error(task_id: str) -> None:
    """Print error when a task id is not in the document."""
    print_error(
        f"Task not found: {task_id}",
        reason="The id may be mistyped or the project may have been rescanned",
        solution="hq status --json  # lists every milestone, task and subtask id",
    )
