"""
HQ CLI - Migrate command.

Split PRD checklists of a repository into per-section task files and push
them to the repository.
"""

import asyncio

import typer
from rich.console import Console

from hq.cli.common import get_config
from hq.cli.errors import ExitCode, print_error
from hq.core.config import HQConfig
from hq.core.exceptions import MigrationError
from hq.core.migrate import MigrationPlan, parse_repo_ref, plan_migration, publish_task_files
from hq.core.sources import get_source

console = Console()


async def _plan_all(config: HQConfig, repos: list[str]) -> list[MigrationPlan]:
    source = get_source("github", config)
    try:
        return [await plan_migration(source, repo) for repo in repos]
    finally:
        await source.aclose()


def migrate(
    repo: str | None = typer.Option(
        None,
        "--repo",
        "-r",
        help="Repository to migrate (OWNER/NAME)",
    ),
    all_repos: bool = typer.Option(
        False,
        "--all",
        help="Migrate every repository listed in migrate.repos",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show the files that would be written without touching git",
    ),
    push_retries: int | None = typer.Option(
        None,
        "--push-retries",
        min=0,
        help="Extra push attempts after a rejected push (default: migrate.push_retries)",
    ),
) -> None:
    """
    Migrate PRD checklists into tasks/NN-section.md files.

    Examples:
        hq migrate --repo octocat/hello --dry-run
        hq migrate --all --push-retries 2
    """
    config = get_config()

    if (repo is None) == (not all_repos):
        print_error(
            "Specify exactly one of --repo or --all",
            solution="hq migrate --repo OWNER/NAME --dry-run",
        )
        raise typer.Exit(ExitCode.USER_ERROR)

    repos = config.migrate.repos if all_repos else [repo or ""]
    if not repos:
        print_error(
            "No repositories to migrate",
            reason="migrate.repos is empty in the configuration",
            solution="hq migrate --repo OWNER/NAME",
        )
        raise typer.Exit(ExitCode.USER_ERROR)
    for name in repos:
        try:
            parse_repo_ref(name)
        except ValueError as e:
            print_error(str(e))
            raise typer.Exit(ExitCode.USER_ERROR)

    retries = config.migrate.push_retries if push_retries is None else push_retries
    plans = asyncio.run(_plan_all(config, repos))

    failures = 0
    for plan in plans:
        console.print(f"\n[bold]Migrating: {plan.repo}[/bold]")
        if not plan.candidates:
            console.print("  [dim]No PRD/roadmap files found. Skipping.[/dim]")
            continue
        for path in plan.candidates:
            console.print(f"  [dim]- {path}[/dim]")
        if not plan.files:
            console.print("  [dim]No checklist sections found. Skipping.[/dim]")
            continue

        console.print(
            f"  Summary: {len(plan.files)} sections, {plan.done}/{plan.total} tasks done"
        )
        prefix = "[yellow][DRY RUN][/yellow] Would create" if dry_run else "Creating"
        console.print(f"  {prefix} {len(plan.files)} files in {plan.repo}/{config.migrate.tasks_dir}/")
        for tf in plan.files:
            console.print(f"    {config.migrate.tasks_dir}/{tf.file_name} ({tf.done}/{tf.total} done)")

        try:
            result = publish_task_files(
                plan.repo,
                plan.files,
                tasks_dir=config.migrate.tasks_dir,
                commit_message=config.migrate.commit_message,
                push_retries=retries,
                dry_run=dry_run,
            )
        except MigrationError as e:
            failures += 1
            print_error(f"Error pushing to {e}")
            continue

        if result.pushed:
            console.print(f"  [green]Pushed to {plan.repo}[/green]")
        elif not dry_run:
            console.print("  [dim]Task files already up to date[/dim]")

    if failures:
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    console.print("\nDone.")
