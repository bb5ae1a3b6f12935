"""
Data models shared by the content sources.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path


@dataclass
class RepoRef:
    """
    A repository to track.

    Remote repositories carry an owner and API metadata; local checkouts
    carry a filesystem path.
    """

    name: str
    owner: str | None = None
    default_branch: str = "HEAD"
    description: str | None = None
    archived: bool = False
    pushed_at: datetime | None = None
    url: str | None = None
    path: Path | None = None

    @property
    def full_name(self) -> str:
        """owner/name, or just the name for local checkouts."""
        return f"{self.owner}/{self.name}" if self.owner else self.name


@dataclass
class CommitInfo:
    """A single commit summary."""

    sha: str
    message: str
    date: datetime | None = None


@dataclass
class RepoActivity:
    """
    Auxiliary signals probed per repository.

    Fields a backend cannot provide keep their defaults.
    """

    available: bool = True
    """False when the repository itself could not be reached."""

    commits: list[CommitInfo] = field(default_factory=list)
    """Recent commits, newest first."""

    pushed_at: datetime | None = None
    description: str | None = None
    open_issues: int = 0
    open_prs: int = 0
    branch: str | None = None
    has_changes: bool = False
    changed_files: int = 0

    @property
    def last_commit(self) -> CommitInfo | None:
        return self.commits[0] if self.commits else None

    @property
    def last_activity(self) -> datetime | None:
        """Last push, or the last commit date when no push time is known."""
        if self.pushed_at is not None:
            return self.pushed_at
        if self.last_commit is not None:
            return self.last_commit.date
        return None
