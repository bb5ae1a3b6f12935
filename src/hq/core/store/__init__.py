"""
Data store for the dashboard document.

Provides the document models, the file-backed store, and the operator
mutations (mark-done, set-current).
"""

from hq.core.store.models import (
    Document,
    FocusPointer,
    LastCommit,
    LocalState,
    Meta,
    Milestone,
    Project,
    TaskNode,
)
from hq.core.store.mutations import (
    NodeRef,
    clear_current_flags,
    find_node,
    focus_chain,
    mark_done,
    set_current,
    sync_focus,
    walk_nodes,
)
from hq.core.store.progress import document_progress, leaf_counts, project_progress
from hq.core.store.store import DocumentStore

__all__ = [
    "Document",
    "DocumentStore",
    "FocusPointer",
    "LastCommit",
    "LocalState",
    "Meta",
    "Milestone",
    "NodeRef",
    "Project",
    "TaskNode",
    "clear_current_flags",
    "document_progress",
    "find_node",
    "focus_chain",
    "leaf_counts",
    "mark_done",
    "project_progress",
    "set_current",
    "sync_focus",
    "walk_nodes",
]
