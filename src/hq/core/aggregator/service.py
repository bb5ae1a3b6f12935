"""
Project aggregation.

Runs the shared checklist pipeline over every tracked repository:

    source.list_candidates -> source.fetch_text -> parse_checklist
        -> group_by_section -> merge_sections -> milestones

and attaches repository metadata, status, color and ordering. Repositories
are probed in fixed-size batches; repositories within a batch run
concurrently, batches run one after another.
"""

import asyncio
import logging
from collections.abc import Iterable
from datetime import datetime, timezone

from hq.core.aggregator.colors import pick_color
from hq.core.aggregator.status import days_since, derive_status, status_rank
from hq.core.checklist import (
    Section,
    group_by_section,
    merge_sections,
    milestone_id,
    parse_checklist,
    scoped_id,
    task_id,
)
from hq.core.config.models import HQConfig
from hq.core.sources.base import ContentSource
from hq.core.sources.models import RepoActivity, RepoRef
from hq.core.store.models import (
    Document,
    LastCommit,
    LocalState,
    Meta,
    Milestone,
    Project,
    TaskNode,
)

logger = logging.getLogger(__name__)

ACTIVITY_SECTION = "Recent Activity"
ACTIVITY_NAME_LENGTH = 80

SCAN_TYPES = {"local": "auto", "github": "live-api"}


def section_to_milestone(repo_name: str, section: Section) -> Milestone:
    """Convert a merged section into a stored milestone with stable ids."""
    tasks = [
        TaskNode(
            id=task_id(repo_name, section.slug, item.text),
            name=item.text,
            done=item.done,
            current=index == section.current_index,
        )
        for index, item in enumerate(section.items)
    ]
    return Milestone(
        id=milestone_id(repo_name, section.slug),
        name=section.name,
        done=section.done,
        current=section.current,
        source=section.source,
        tasks=tasks,
    )


def activity_milestone(repo_name: str, activity: RepoActivity, limit: int) -> Milestone | None:
    """Synthesize the 'Recent Activity' section from recent commits."""
    commits = activity.commits[:limit]
    if not commits:
        return None
    return Milestone(
        id=scoped_id(repo_name, "activity"),
        name=ACTIVITY_SECTION,
        done=False,
        current=True,
        tasks=[
            TaskNode(
                id=scoped_id(repo_name, f"commit-{commit.sha[:7]}"),
                name=commit.message[:ACTIVITY_NAME_LENGTH],
                done=True,
            )
            for commit in commits
        ],
    )


def normalize_focus(milestones: list[Milestone]) -> None:
    """
    Keep a single focus per project.

    Only the first current milestone stays current, and only its tasks
    may carry a current flag.
    """
    focus_found = False
    for milestone in milestones:
        if milestone.current and not focus_found:
            focus_found = True
            continue
        milestone.current = False
        for task in milestone.tasks:
            task.current = False


def sort_projects(projects: Iterable[Project]) -> list[Project]:
    """Order by status rank, then source file count (desc), then recency."""

    def key(project: Project) -> tuple[int, int, float]:
        days = project.days_since_update
        return (
            status_rank(project.status),
            -len(project.source_files),
            float("inf") if days is None else days,
        )

    return sorted(projects, key=key)


def upsert_projects(document: Document, projects: Iterable[Project]) -> Document:
    """Replace projects with the same id in place; append new ones."""
    by_id = {project.id: project for project in projects}
    merged = []
    for existing in document.projects:
        merged.append(by_id.pop(existing.id, existing))
    merged.extend(by_id.values())
    document.projects = sort_projects(merged)
    return document


class Aggregator:
    """
    Builds the dashboard document from a content source.

    Args:
        source: Backend used for discovery, file listing and fetching
        config: Active configuration
        now: Reference time for "days since update" (defaults to now, UTC)

    Example:
        >>> source = get_source("local", config)
        >>> document = asyncio.run(Aggregator(source, config).build_document())
    """

    def __init__(
        self,
        source: ContentSource,
        config: HQConfig,
        now: datetime | None = None,
    ) -> None:
        self.source = source
        self.config = config
        self.now = now or datetime.now(timezone.utc)

    async def discover(self) -> list[RepoRef]:
        """Discovered repositories plus statically configured ones."""
        repos = await self.source.discover()
        if self.source.name == "local":
            return repos

        seen = {repo.name.lower() for repo in repos}
        default_owner = self.config.github.accounts[0] if self.config.github.accounts else None
        for name, project_config in self.config.projects.items():
            if name.lower() in seen:
                continue
            owner = project_config.owner or default_owner
            if owner is None:
                logger.warning(f"Skipping configured project {name}: no owner known")
                continue
            seen.add(name.lower())
            repos.append(RepoRef(name=name, owner=owner, url=f"github.com/{owner}/{name}"))
        return repos

    async def _collect_sections(self, repo: RepoRef) -> tuple[list[Section], list[str]]:
        pinned = self.config.project_config(repo.name).prd_files
        paths = list(pinned) if pinned else await self.source.list_candidates(repo)
        texts = await asyncio.gather(*(self.source.fetch_text(repo, path) for path in paths))

        groups = []
        source_files = []
        for path, text in zip(paths, texts):
            if text is None:
                continue
            items = list(parse_checklist(text, path))
            if not items:
                continue
            source_files.append(path)
            groups.extend(group_by_section(items))
        return merge_sections(groups), source_files

    async def build_project(self, repo: RepoRef) -> Project | None:
        """
        Build one project, or None when the repository is unavailable.
        """
        activity = await self.source.probe_activity(repo)
        if not activity.available:
            logger.info(f"No data for {repo.full_name}; skipping")
            return None

        sections, source_files = await self._collect_sections(repo)
        milestones = [section_to_milestone(repo.name, section) for section in sections]
        if not milestones:
            fallback = activity_milestone(repo.name, activity, self.config.github.commit_count)
            if fallback is not None:
                milestones.append(fallback)
        normalize_focus(milestones)

        project_config = self.config.project_config(repo.name)
        days = days_since(activity.last_activity or repo.pushed_at, self.now)
        status = derive_status(
            project_config.status,
            days,
            self.config.aggregation.idle_after_days,
            self.config.aggregation.paused_after_days,
        )

        last = activity.last_commit
        last_commit = None
        if last is not None:
            last_commit = LastCommit(
                sha=last.sha,
                message=last.message,
                date=last.date.isoformat().replace("+00:00", "Z") if last.date else None,
            )

        local = None
        if self.source.name == "local":
            local = LocalState(
                branch=activity.branch,
                has_changes=activity.has_changes,
                changed_files=activity.changed_files,
            )

        project = Project(
            id=repo.name.lower(),
            name=project_config.name or repo.name,
            description=project_config.description or activity.description or repo.description or "",
            color=project_config.color or pick_color(repo.name, self.config.aggregation.palette),
            priority=project_config.priority,
            status=status,
            repo=repo.url or f"github.com/{repo.full_name}",
            owner=repo.owner,
            last_commit=last_commit,
            days_since_update=days,
            open_issues=activity.open_issues,
            open_prs=activity.open_prs,
            source_files=source_files,
            local=local,
            milestones=milestones,
        )
        if project_config.emoji:
            project.emoji = project_config.emoji
        return project

    async def build_projects(self, repos: list[RepoRef]) -> list[Project]:
        """Build projects batch by batch; a failing repository is skipped."""
        batch_size = self.config.aggregation.batch_size
        projects: list[Project] = []
        for start in range(0, len(repos), batch_size):
            batch = repos[start : start + batch_size]
            logger.debug(f"Probing batch {start // batch_size + 1}: {[r.name for r in batch]}")
            results = await asyncio.gather(
                *(self.build_project(repo) for repo in batch),
                return_exceptions=True,
            )
            for repo, result in zip(batch, results):
                if isinstance(result, BaseException):
                    logger.warning(f"Failed to build {repo.full_name}: {result}")
                elif result is not None:
                    projects.append(result)
        return projects

    async def build_document(self, only: str | None = None) -> Document:
        """
        Build the whole document.

        Args:
            only: Restrict to the repository whose id matches
                (case-insensitive)
        """
        repos = await self.discover()
        if only is not None:
            repos = [repo for repo in repos if repo.name.lower() == only.lower()]

        projects = sort_projects(await self.build_projects(repos))
        meta = Meta(
            last_scan_type=SCAN_TYPES.get(self.source.name, "manual"),
            project_count=len(projects),
            sources=[self.source.name],
        )
        logger.info(f"Built document with {len(projects)} projects from {self.source.name}")
        return Document(meta=meta, projects=projects)
