"""
Content source protocol and registry.

A content source answers four questions about a repository: which
repositories exist, which files look like checklists, what a file says,
and what the repository has been up to. The checklist pipeline is written
against this protocol only, so the local scanner, the remote aggregator
and the migrator share one implementation.

- ContentSource is a runtime_checkable Protocol
- Sources are registered with a decorator
- Sources are instantiated on demand with the active config
"""

import re
from collections.abc import Callable
from pathlib import PurePosixPath
from typing import Protocol, runtime_checkable

from hq.core.config.models import HQConfig
from hq.core.sources.models import RepoActivity, RepoRef

CANDIDATE_PATTERN = re.compile(r"(?:prd|roadmap|todo|checklist|tasks).*\.md$", re.IGNORECASE)


def is_candidate(path: str) -> bool:
    """
    Check whether a path names a task-tracking markdown document.

    The filename (not the directory) must contain one of the tokens
    prd, roadmap, todo, checklist or tasks and end in .md.

    Example:
        >>> is_candidate("docs/ROADMAP.md")
        True
        >>> is_candidate("tasks/01-core.md")
        False
    """
    return bool(CANDIDATE_PATTERN.search(PurePosixPath(path).name))


@runtime_checkable
class ContentSource(Protocol):
    """
    Protocol for content source implementations.

    Failures for a single unit (repository or file) must not raise: the
    source logs them and returns "no data" (None, empty list, or an
    unavailable RepoActivity).
    """

    @property
    def name(self) -> str:
        """Source name ('local', 'github')."""
        ...

    async def discover(self) -> list[RepoRef]:
        """List repositories to track."""
        ...

    async def list_candidates(self, repo: RepoRef) -> list[str]:
        """List paths of candidate checklist documents in a repository."""
        ...

    async def fetch_text(self, repo: RepoRef, path: str) -> str | None:
        """Fetch a document's text, or None when unavailable."""
        ...

    async def probe_activity(self, repo: RepoRef) -> RepoActivity:
        """Collect commit, issue and working-tree signals for a repository."""
        ...

    async def aclose(self) -> None:
        """Release any held resources (HTTP clients, etc.)."""
        ...


SourceFactory = Callable[[HQConfig], ContentSource]

# Source registry
_sources: dict[str, SourceFactory] = {}


def register_source(name: str) -> Callable[[type], type]:
    """
    Decorator to register a content source implementation.

    Usage:
        @register_source("local")
        class LocalSource:
            def __init__(self, config: HQConfig) -> None: ...

    Raises:
        ValueError: If source name is already registered
    """

    def decorator(source_class: type) -> type:
        if name in _sources:
            raise ValueError(
                f"Source '{name}' is already registered. "
                f"Available sources: {', '.join(_sources.keys())}"
            )
        _sources[name] = source_class
        return source_class

    return decorator


def get_source(name: str, config: HQConfig) -> ContentSource:
    """
    Instantiate a content source by name.

    Raises:
        ValueError: If source name is not registered
    """
    factory = _sources.get(name)
    if factory is None:
        available = ", ".join(sorted(_sources)) if _sources else "none registered"
        raise ValueError(f"Source '{name}' not registered. Available sources: {available}")
    return factory(config)


def list_sources() -> list[str]:
    """List all registered source names in alphabetical order."""
    return sorted(_sources.keys())
