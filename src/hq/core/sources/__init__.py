"""
Content sources for the checklist pipeline.

Importing this package registers the built-in backends ('local', 'github').
"""

from hq.core.sources.base import (
    CANDIDATE_PATTERN,
    ContentSource,
    get_source,
    is_candidate,
    list_sources,
    register_source,
)
from hq.core.sources.models import CommitInfo, RepoActivity, RepoRef

# Import backends to register them
from hq.core.sources import github, local  # noqa: F401

__all__ = [
    "CANDIDATE_PATTERN",
    "CommitInfo",
    "ContentSource",
    "RepoActivity",
    "RepoRef",
    "get_source",
    "is_candidate",
    "list_sources",
    "register_source",
]
