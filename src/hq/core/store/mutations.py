"""
Operator mutations against the stored document.

Two operations flip flags on a node located by id:

- mark_done: completes a node; a completed subtask hands focus to its
  next sibling. meta.focus is then rebuilt from the flags.
- set_current: clears every current flag in the document, then marks the
  node and its ancestors on the lookup chain, and records the chain in
  meta.focus.

Callers persist the document afterwards (DocumentStore.save).
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Literal

from hq.core.exceptions import NotFoundError
from hq.core.store.models import (
    Document,
    FocusPointer,
    Milestone,
    Project,
    TaskNode,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

NodeKind = Literal["milestone", "task", "subtask"]


@dataclass
class NodeRef:
    """A node found in the document plus its ancestors."""

    kind: NodeKind
    node: Milestone | TaskNode
    project: Project
    milestone: Milestone
    task: TaskNode | None = None
    """Parent task when kind == 'subtask', the node itself when kind == 'task'."""

    @property
    def name(self) -> str:
        return self.node.name


def find_node(document: Document, node_id: str) -> NodeRef:
    """
    Locate a milestone, task or subtask by id (depth-first).

    Raises:
        NotFoundError: If no node carries the id
    """
    for project in document.projects:
        for milestone in project.milestones:
            if milestone.id == node_id:
                return NodeRef("milestone", milestone, project, milestone)
            for task in milestone.tasks:
                if task.id == node_id:
                    return NodeRef("task", task, project, milestone, task)
                for subtask in task.subtasks or []:
                    if subtask.id == node_id:
                        return NodeRef("subtask", subtask, project, milestone, task)
    raise NotFoundError(node_id)


def walk_nodes(project: Project) -> Iterator[tuple[NodeKind, Milestone | TaskNode]]:
    """Yield every milestone, task and subtask of a project in document order."""
    for milestone in project.milestones:
        yield "milestone", milestone
        for task in milestone.tasks:
            yield "task", task
            for subtask in task.subtasks or []:
                yield "subtask", subtask


def clear_current_flags(document: Document) -> None:
    """Reset every current flag in the document."""
    for project in document.projects:
        for milestone in project.milestones:
            milestone.current = False
            for task in milestone.tasks:
                task.current = False
                for subtask in task.subtasks or []:
                    subtask.current = False


def _clear_subtree(node: Milestone | TaskNode) -> None:
    node.current = False
    children = node.tasks if isinstance(node, Milestone) else node.subtasks or []
    for child in children:
        _clear_subtree(child)


def mark_done(document: Document, node_id: str) -> TaskNode | None:
    """
    Mark a node done and stamp its completion time.

    Args:
        document: Document to mutate in place
        node_id: Milestone, task or subtask id

    Returns:
        The subtask that received focus, if the completed node was a subtask
        with a following sibling; otherwise None.

    Raises:
        NotFoundError: If no node carries the id
    """
    ref = find_node(document, node_id)
    ref.node.done = True
    ref.node.completed_at = utc_now_iso()
    _clear_subtree(ref.node)

    following: TaskNode | None = None
    if ref.kind == "subtask" and ref.task is not None:
        siblings = ref.task.subtasks or []
        index = next(i for i, s in enumerate(siblings) if s.id == node_id)
        for sibling in siblings:
            sibling.current = False
        if index + 1 < len(siblings):
            following = siblings[index + 1]
            following.current = True
            logger.debug(f"Focus advanced from {node_id} to {following.id}")

    sync_focus(document, ref.project)
    return following


def sync_focus(document: Document, project: Project) -> None:
    """
    Rebuild meta.focus from the current flags of the focused project.

    Does nothing when the pointer is unset or names another project. A
    project with no current milestone left clears the pointer.
    """
    focus = document.meta.focus
    if focus is None or focus.project != project.id:
        return

    chain = focus_chain(project)
    if not chain:
        document.meta.focus = None
        return
    document.meta.focus = FocusPointer(
        project=project.id,
        milestone=chain[0].id,
        task=chain[1].id if len(chain) > 1 else None,
        subtask=chain[2].id if len(chain) > 2 else None,
    )


def set_current(document: Document, node_id: str) -> NodeRef:
    """
    Make a node the single focus of the document.

    Every current flag is cleared first; then the node and each ancestor on
    its lookup chain (milestone, parent task) are marked current.

    Raises:
        NotFoundError: If no node carries the id
    """
    ref = find_node(document, node_id)
    clear_current_flags(document)

    ref.node.current = True
    ref.milestone.current = True
    if ref.task is not None:
        ref.task.current = True

    document.meta.focus = FocusPointer(
        project=ref.project.id,
        milestone=ref.milestone.id,
        task=ref.task.id if ref.task is not None else None,
        subtask=node_id if ref.kind == "subtask" else None,
    )
    return ref


def focus_chain(project: Project) -> list[Milestone | TaskNode]:
    """Follow current flags down a project: milestone, task, subtask."""
    chain: list[Milestone | TaskNode] = []
    milestone = next((m for m in project.milestones if m.current), None)
    if milestone is None:
        return chain
    chain.append(milestone)
    task = next((t for t in milestone.tasks if t.current), None)
    if task is None:
        return chain
    chain.append(task)
    subtask = next((s for s in task.subtasks or [] if s.current), None)
    if subtask is not None:
        chain.append(subtask)
    return chain
