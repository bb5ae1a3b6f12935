"""
PRD -> tasks/ migration: split checklist documents into per-section files.
"""

from hq.core.migrate.generator import (
    MigrationPlan,
    TaskFile,
    collect_sections,
    generate_task_file,
    parse_repo_ref,
    plan_migration,
)
from hq.core.migrate.publisher import PublishResult, publish_task_files

__all__ = [
    "MigrationPlan",
    "PublishResult",
    "TaskFile",
    "collect_sections",
    "generate_task_file",
    "parse_repo_ref",
    "plan_migration",
    "publish_task_files",
]
