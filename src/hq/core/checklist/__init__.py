"""
Checklist extraction pipeline.

Parses markdown checklists (bullet and table forms) into items and merges
them into slug-keyed sections with "current" pointers.
"""

from hq.core.checklist.ids import milestone_id, repo_prefix, scoped_id, task_id
from hq.core.checklist.merger import group_by_section, merge_sections, slugify
from hq.core.checklist.models import ChecklistItem, Section
from hq.core.checklist.parser import parse_checklist, parse_checklist_file

__all__ = [
    "ChecklistItem",
    "Section",
    "group_by_section",
    "merge_sections",
    "milestone_id",
    "parse_checklist",
    "parse_checklist_file",
    "repo_prefix",
    "scoped_id",
    "slugify",
    "task_id",
]
