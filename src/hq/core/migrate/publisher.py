"""
Publishing generated task files to a repository.

The repository is shallow-cloned into a temporary directory that is
always removed, the files are written under the tasks directory, and a
single commit is pushed. Pushing is retried ``push_retries`` times,
rebasing onto the remote between attempts. A dry run never invokes git.
"""

import logging
import subprocess
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from hq.core.exceptions import MigrationError
from hq.core.migrate.generator import TaskFile

logger = logging.getLogger(__name__)


@dataclass
class PublishResult:
    """Outcome of publishing one repository."""

    repo: str
    written: list[str] = field(default_factory=list)
    committed: bool = False
    pushed: bool = False
    dry_run: bool = False
    attempts: int = 0


def default_clone_url(repo: str) -> str:
    return f"https://github.com/{repo}.git"


def _run_git(repo: str, args: list[str], cwd: Path | None = None) -> str:
    """
    Run a git command.

    Raises:
        MigrationError: If git is missing or exits non-zero
    """
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise MigrationError(repo, f"git is not available: {e}") from e
    if result.returncode != 0:
        detail = (result.stderr or result.stdout).strip()
        raise MigrationError(repo, f"git {args[0]} failed: {detail}", returncode=result.returncode)
    return result.stdout


def publish_task_files(
    repo: str,
    files: list[TaskFile],
    *,
    tasks_dir: str = "tasks",
    commit_message: str,
    push_retries: int = 0,
    dry_run: bool = False,
    clone_url: str | None = None,
) -> PublishResult:
    """
    Write task files into a repository and push them.

    Args:
        repo: owner/name of the target repository
        files: Rendered task files
        tasks_dir: Directory inside the repository to write to
        commit_message: Message for the single migration commit
        push_retries: Extra push attempts after a rejected push
        dry_run: Report what would be written without running git
        clone_url: Override the clone URL (defaults to github.com over HTTPS)

    Returns:
        PublishResult describing what happened

    Raises:
        MigrationError: If cloning, committing or every push attempt fails
    """
    result = PublishResult(repo=repo, dry_run=dry_run)
    result.written = [f"{tasks_dir}/{tf.file_name}" for tf in files]
    if dry_run or not files:
        return result

    with tempfile.TemporaryDirectory(prefix="hq-migrate-") as tmp:
        workdir = Path(tmp) / "repo"
        _run_git(repo, ["clone", "--depth", "1", clone_url or default_clone_url(repo), str(workdir)])

        target = workdir / tasks_dir
        target.mkdir(parents=True, exist_ok=True)
        for tf in files:
            (target / tf.file_name).write_text(tf.content, encoding="utf-8")
            logger.debug(f"Wrote {tasks_dir}/{tf.file_name}")

        _run_git(repo, ["add", tasks_dir], cwd=workdir)
        if not _run_git(repo, ["status", "--porcelain"], cwd=workdir).strip():
            logger.info(f"{repo}: task files already up to date")
            return result

        _run_git(repo, ["commit", "-m", commit_message], cwd=workdir)
        result.committed = True

        total = push_retries + 1
        for attempt in range(1, total + 1):
            result.attempts = attempt
            try:
                _run_git(repo, ["push"], cwd=workdir)
            except MigrationError:
                logger.warning(f"{repo}: push attempt {attempt}/{total} failed")
                if attempt == total:
                    raise
                _run_git(repo, ["pull", "--rebase"], cwd=workdir)
                continue
            result.pushed = True
            return result

    return result
