"""
Stable identifiers for milestones and tasks.

Ids are derived from content (section slug + task text) rather than list
positions, so reordering a document does not reshuffle them.

The repository prefix is joined with ``--``. Slugs never contain a double
dash, so ``foo`` + ``bar-x`` and ``foo-bar`` + ``x`` stay distinct.
"""

import hashlib

from hq.core.checklist.merger import slugify

ID_SEPARATOR = "--"


def repo_prefix(repo_name: str) -> str:
    """Slug used as the id prefix for a repository."""
    return slugify(repo_name, max_length=40) or "repo"


def scoped_id(repo_name: str, local_id: str) -> str:
    """Qualify a repository-local id with the repository prefix."""
    return f"{repo_prefix(repo_name)}{ID_SEPARATOR}{local_id}"


def milestone_id(repo_name: str, section_slug: str) -> str:
    """
    Build a milestone id.

    Example:
        >>> milestone_id("Genesis-Engine", "phase-1")
        'genesis-engine--phase-1'
    """
    return scoped_id(repo_name, section_slug)


def task_id(repo_name: str, section_slug: str, text: str) -> str:
    """Build a task id from the section slug and the exact task text."""
    digest = hashlib.sha1(f"{section_slug}\0{text}".encode()).hexdigest()
    return scoped_id(repo_name, digest[:8])
