"""
PRD -> task file generation.

Reads every candidate document of a repository through a content source,
parses it with the migration variant of the checklist parser (table rows
enabled, ``#`` titles ignored, items outside a section dropped), merges
same-slug sections, and renders one markdown file per section:

    tasks/01-phase-1-core.md
    tasks/02-audio-engine.md
"""

import asyncio
import logging
from dataclasses import dataclass, field

from hq.core.checklist import Section, group_by_section, merge_sections, parse_checklist
from hq.core.sources.base import ContentSource
from hq.core.sources.models import RepoRef

logger = logging.getLogger(__name__)

MIGRATION_PARSE_OPTIONS = {"tables": True, "min_heading_level": 2, "require_heading": True}


@dataclass
class TaskFile:
    """A rendered task file, relative to the tasks directory."""

    file_name: str
    content: str
    done: int
    total: int


@dataclass
class MigrationPlan:
    """Everything the migration would write for one repository."""

    repo: str
    candidates: list[str] = field(default_factory=list)
    sections: list[Section] = field(default_factory=list)
    files: list[TaskFile] = field(default_factory=list)

    @property
    def done(self) -> int:
        return sum(f.done for f in self.files)

    @property
    def total(self) -> int:
        return sum(f.total for f in self.files)


def parse_repo_ref(full_name: str) -> RepoRef:
    """
    Split 'owner/name' into a RepoRef.

    Raises:
        ValueError: If the value is not of the form owner/name
    """
    owner, _, name = full_name.strip().partition("/")
    if not owner or not name or "/" in name:
        raise ValueError(f"Expected OWNER/NAME, got '{full_name}'")
    return RepoRef(name=name, owner=owner)


def generate_task_file(section: Section, index: int) -> TaskFile:
    """
    Render one section as a task file.

    Example:
        >>> tf = generate_task_file(section, 1)
        >>> tf.file_name
        '01-phase-1-core.md'
    """
    lines = [
        f"# {section.name}",
        "",
        f"> Source: `{section.source}`",
        f"> Progress: {section.done_count}/{len(section.items)} tasks done",
        "",
        "## Tasks",
        "",
    ]
    lines.extend(f"- [{'x' if item.done else ' '}] {item.text}" for item in section.items)
    return TaskFile(
        file_name=f"{index:02d}-{section.slug}.md",
        content="\n".join(lines) + "\n",
        done=section.done_count,
        total=len(section.items),
    )


async def collect_sections(source: ContentSource, repo: RepoRef) -> tuple[list[str], list[Section]]:
    """Fetch and merge the migration sections of every candidate document."""
    candidates = await source.list_candidates(repo)
    texts = await asyncio.gather(*(source.fetch_text(repo, path) for path in candidates))

    groups = []
    for path, text in zip(candidates, texts):
        if text is None:
            logger.warning(f"Could not read {repo.full_name}:{path}")
            continue
        items = parse_checklist(text, path, **MIGRATION_PARSE_OPTIONS)
        file_groups = group_by_section(items)
        logger.info(f"{path}: {len(file_groups)} sections with tasks")
        groups.extend(file_groups)
    return candidates, merge_sections(groups)


async def plan_migration(source: ContentSource, full_name: str) -> MigrationPlan:
    """Build the task files for a repository without touching it."""
    repo = parse_repo_ref(full_name)
    candidates, sections = await collect_sections(source, repo)
    files = [generate_task_file(section, index) for index, section in enumerate(sections, start=1)]
    return MigrationPlan(repo=full_name, candidates=candidates, sections=sections, files=files)
