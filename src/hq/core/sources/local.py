"""
Filesystem content source.

Reads checklists from local checkouts listed in ``local.project_paths``
and probes them with git. Blocking filesystem and subprocess work runs in
worker threads so batches still fan out on the event loop.
"""

import asyncio
import logging
import os
from datetime import datetime
from pathlib import Path

from hq.core.config.models import HQConfig
from hq.core.exceptions import SourceUnavailableError
from hq.core.sources.base import is_candidate, register_source
from hq.core.sources.models import CommitInfo, RepoActivity, RepoRef
from hq.utils.git import get_branch, get_recent_commits, get_working_tree_changes
from hq.utils.project import expand_path

logger = logging.getLogger(__name__)

SKIP_DIRS = frozenset(
    {".git", "node_modules", ".venv", "venv", "__pycache__", "dist", "build", ".next", "vendor"}
)


def _parse_date(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def walk_candidates(root: Path) -> list[str]:
    """Return POSIX-style relative paths of candidate documents under root."""
    found: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
        for filename in sorted(filenames):
            if is_candidate(filename):
                found.append((Path(dirpath) / filename).relative_to(root).as_posix())
    return found


@register_source("local")
class LocalSource:
    """
    Content source backed by local git checkouts.

    A configured path that does not exist is reported once and then
    treated as "no data".
    """

    def __init__(self, config: HQConfig) -> None:
        self.config = config

    @property
    def name(self) -> str:
        return "local"

    async def discover(self) -> list[RepoRef]:
        repos = []
        for project_id, raw_path in self.config.local.project_paths.items():
            path = expand_path(raw_path)
            repos.append(RepoRef(name=project_id, path=path, url=str(path)))
        return repos

    def _root(self, repo: RepoRef) -> Path:
        if repo.path is None or not repo.path.is_dir():
            raise SourceUnavailableError(self.name, f"Directory not found: {repo.path}", repo=repo.name)
        return repo.path

    async def list_candidates(self, repo: RepoRef) -> list[str]:
        try:
            root = self._root(repo)
        except SourceUnavailableError as e:
            logger.warning(str(e))
            return []
        return await asyncio.to_thread(walk_candidates, root)

    async def fetch_text(self, repo: RepoRef, path: str) -> str | None:
        try:
            root = self._root(repo)
            return await asyncio.to_thread(self._read, root / path)
        except SourceUnavailableError as e:
            logger.debug(str(e))
            return None

    def _read(self, file_path: Path) -> str:
        try:
            return file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceUnavailableError(self.name, f"Cannot read {file_path}: {e}") from e

    async def probe_activity(self, repo: RepoRef) -> RepoActivity:
        try:
            root = self._root(repo)
        except SourceUnavailableError as e:
            logger.warning(str(e))
            return RepoActivity(available=False)

        count = self.config.github.commit_count
        raw_commits, branch, changed = await asyncio.gather(
            asyncio.to_thread(get_recent_commits, root, count),
            asyncio.to_thread(get_branch, root),
            asyncio.to_thread(get_working_tree_changes, root),
        )
        commits = [
            CommitInfo(sha=c["hash"][:7], message=c["message"], date=_parse_date(c["date"]))
            for c in raw_commits
        ]
        return RepoActivity(
            commits=commits,
            branch=branch,
            has_changes=bool(changed),
            changed_files=changed or 0,
        )

    async def aclose(self) -> None:
        return None
