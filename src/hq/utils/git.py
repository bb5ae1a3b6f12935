"""
Git utilities for HQ.

Thin subprocess wrappers used by the filesystem backend to report the
state of a local checkout. Every helper returns None (or an empty list)
when git is missing or the directory is not a repository.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

# hash, committer date, subject; separated by the ASCII unit separator
_FIELD_SEP = "\x1f"
_LOG_FORMAT = "--format=%H%x1f%cI%x1f%s"


def _git(cwd: Path, *args: str) -> str | None:
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        logger.debug(f"git {' '.join(args)} failed in {cwd}: {e}")
        return None
    if result.returncode != 0:
        return None
    return result.stdout


def _parse_log_line(line: str) -> dict[str, str] | None:
    parts = line.split(_FIELD_SEP, 2)
    if len(parts) < 3:
        return None
    return {"hash": parts[0], "date": parts[1], "message": parts[2].strip()}


def get_recent_commits(cwd: Path, count: int = 5) -> list[dict[str, str]]:
    """Get the last `count` commits, newest first.

    Returns:
        List of dicts with keys hash, message (subject line), date (ISO 8601)
    """
    output = _git(cwd, "log", f"--max-count={count}", _LOG_FORMAT)
    if not output:
        return []
    commits = []
    for line in output.splitlines():
        parsed = _parse_log_line(line)
        if parsed:
            commits.append(parsed)
    return commits


def get_branch(cwd: Path) -> str | None:
    """Get the current branch name."""
    output = _git(cwd, "branch", "--show-current")
    if output is None:
        return None
    return output.strip() or None


def get_working_tree_changes(cwd: Path) -> int | None:
    """Count changed files reported by `git status --porcelain`."""
    output = _git(cwd, "status", "--porcelain")
    if output is None:
        return None
    return len([line for line in output.splitlines() if line.strip()])
