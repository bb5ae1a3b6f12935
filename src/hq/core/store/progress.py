"""
Completion metrics for projects and the whole document.

Leaves are counted at the deepest level present: subtasks when a task has
them, otherwise tasks, otherwise the milestone itself.
"""

from hq.core.store.models import Document, Project


def leaf_counts(project: Project) -> tuple[int, int]:
    """Return (done, total) leaf counts for a project."""
    total = done = 0
    for milestone in project.milestones:
        if not milestone.tasks:
            total += 1
            done += int(milestone.done)
            continue
        for task in milestone.tasks:
            if task.subtasks:
                total += len(task.subtasks)
                done += sum(1 for s in task.subtasks if s.done)
            else:
                total += 1
                done += int(task.done)
    return done, total


def _percent(done: int, total: int) -> int:
    if total == 0:
        return 0
    return round(done * 100 / total)


def project_progress(project: Project) -> int:
    """Completion percentage (0-100); a project without leaves is 0."""
    return _percent(*leaf_counts(project))


def document_progress(document: Document) -> int:
    """Completion percentage across every project in the document."""
    done = total = 0
    for project in document.projects:
        d, t = leaf_counts(project)
        done += d
        total += t
    return _percent(done, total)
