"""
Tests for mark-done and set-current.
"""

import pytest

from hq.core.exceptions import NotFoundError
from hq.core.store import (
    Document,
    clear_current_flags,
    find_node,
    focus_chain,
    mark_done,
    set_current,
)


def _current_ids(document: Document) -> list[str]:
    ids = []
    for project in document.projects:
        for milestone in project.milestones:
            if milestone.current:
                ids.append(milestone.id)
            for task in milestone.tasks:
                if task.current:
                    ids.append(task.id)
                for subtask in task.subtasks or []:
                    if subtask.current:
                        ids.append(subtask.id)
    return ids


def _focus_ids(document: Document) -> list[str]:
    focus = document.meta.focus
    if focus is None:
        return []
    return [i for i in (focus.milestone, focus.task, focus.subtask) if i is not None]


class TestFindNode:
    """Tests for depth-first lookup."""

    @pytest.mark.parametrize(
        "node_id,kind",
        [
            ("loomiverse-phase-2", "milestone"),
            ("loomiverse-t1", "task"),
            ("loomiverse-s2", "subtask"),
        ],
    )
    def test_kinds(self, sample_document, node_id, kind):
        ref = find_node(sample_document, node_id)
        assert ref.kind == kind
        assert ref.node.id == node_id
        assert ref.project.id == "loomiverse"

    def test_subtask_parent(self, sample_document):
        ref = find_node(sample_document, "loomiverse-s2")
        assert ref.task is not None
        assert ref.task.id == "loomiverse-t2"
        assert ref.milestone.id == "loomiverse-phase-1"

    def test_missing(self, sample_document):
        with pytest.raises(NotFoundError, match="Task not found: nope"):
            find_node(sample_document, "nope")


class TestMarkDone:
    """Tests for mark_done."""

    def test_task(self, sample_document):
        assert mark_done(sample_document, "loomiverse-t3") is None
        task = find_node(sample_document, "loomiverse-t3").node
        assert task.done is True
        assert task.current is False
        assert task.completed_at is not None

    def test_subtask_advances_to_next_sibling(self, sample_document):
        following = mark_done(sample_document, "loomiverse-s1")
        assert following is not None
        assert following.id == "loomiverse-s2"

        subtasks = find_node(sample_document, "loomiverse-t2").node.subtasks
        assert [s.current for s in subtasks] == [False, True, False]

    def test_last_subtask_leaves_no_current(self, sample_document):
        set_current(sample_document, "loomiverse-s3")
        assert mark_done(sample_document, "loomiverse-s3") is None

        subtasks = find_node(sample_document, "loomiverse-t2").node.subtasks
        assert not any(s.current for s in subtasks)

    def test_no_advance_across_tasks(self, sample_document):
        mark_done(sample_document, "loomiverse-t2")
        assert find_node(sample_document, "loomiverse-t3").node.current is False

    def test_focus_pointer_follows(self, sample_document):
        set_current(sample_document, "loomiverse-s1")
        mark_done(sample_document, "loomiverse-s1")
        assert sample_document.meta.focus.subtask == "loomiverse-s2"

    def test_focus_cleared_after_last_subtask(self, sample_document):
        set_current(sample_document, "loomiverse-s3")
        mark_done(sample_document, "loomiverse-s3")

        focus = sample_document.meta.focus
        assert focus.task == "loomiverse-t2"
        assert focus.subtask is None
        assert _focus_ids(sample_document) == _current_ids(sample_document)

    def test_earlier_sibling_moves_focus(self, sample_document):
        set_current(sample_document, "loomiverse-s3")
        mark_done(sample_document, "loomiverse-s1")

        assert sample_document.meta.focus.subtask == "loomiverse-s2"
        assert _focus_ids(sample_document) == _current_ids(sample_document)

    def test_focused_task_leaves_pointer(self, sample_document):
        set_current(sample_document, "loomiverse-t2")
        mark_done(sample_document, "loomiverse-t2")

        focus = sample_document.meta.focus
        assert focus.milestone == "loomiverse-phase-1"
        assert focus.task is None
        assert _focus_ids(sample_document) == _current_ids(sample_document)

    def test_focused_milestone_clears_pointer(self, sample_document):
        set_current(sample_document, "loomiverse-phase-1")
        mark_done(sample_document, "loomiverse-phase-1")
        assert sample_document.meta.focus is None

    def test_other_project_keeps_pointer(self, sample_document):
        set_current(sample_document, "loomiverse-s1")
        before = sample_document.meta.focus.model_copy()
        mark_done(sample_document, "dj-loop-commit-abc1234")
        assert sample_document.meta.focus == before

    def test_pointer_and_flags_agree(self, sample_document):
        for target in ("loomiverse-s1", "loomiverse-s2", "loomiverse-s3", "loomiverse-t2"):
            set_current(sample_document, "loomiverse-s3")
            mark_done(sample_document, target)
            assert _focus_ids(sample_document) == _current_ids(sample_document)

    def test_missing(self, sample_document):
        with pytest.raises(NotFoundError):
            mark_done(sample_document, "nope")


class TestSetCurrent:
    """Tests for set_current."""

    def test_subtask_marks_chain_only(self, sample_document):
        set_current(sample_document, "loomiverse-s3")
        assert _current_ids(sample_document) == [
            "loomiverse-phase-1",
            "loomiverse-t2",
            "loomiverse-s3",
        ]

    def test_task_in_other_milestone(self, sample_document):
        set_current(sample_document, "loomiverse-t3")
        assert _current_ids(sample_document) == ["loomiverse-phase-2", "loomiverse-t3"]

    def test_clears_other_projects(self, sample_document):
        set_current(sample_document, "loomiverse-phase-2")
        assert _current_ids(sample_document) == ["loomiverse-phase-2"]

    def test_writes_focus_pointer(self, sample_document):
        set_current(sample_document, "loomiverse-s2")
        focus = sample_document.meta.focus
        assert focus.project == "loomiverse"
        assert focus.milestone == "loomiverse-phase-1"
        assert focus.task == "loomiverse-t2"
        assert focus.subtask == "loomiverse-s2"

    def test_missing_leaves_document_untouched(self, sample_document):
        before = _current_ids(sample_document)
        with pytest.raises(NotFoundError):
            set_current(sample_document, "nope")
        assert _current_ids(sample_document) == before


class TestFocusChain:
    """Tests for following current flags."""

    def test_chain(self, sample_document):
        chain = focus_chain(sample_document.projects[0])
        assert [n.id for n in chain] == ["loomiverse-phase-1", "loomiverse-t2", "loomiverse-s1"]

    def test_empty_after_clear(self, sample_document):
        clear_current_flags(sample_document)
        assert focus_chain(sample_document.projects[0]) == []
