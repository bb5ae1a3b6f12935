"""Utility modules for HQ."""

from .git import get_branch, get_recent_commits, get_working_tree_changes
from .project import expand_path, resolve_data_file

__all__ = [
    "expand_path",
    "get_branch",
    "get_recent_commits",
    "get_working_tree_changes",
    "resolve_data_file",
]
