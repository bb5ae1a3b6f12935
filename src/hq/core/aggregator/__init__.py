"""
Project aggregation: runs the checklist pipeline over tracked repositories.
"""

from hq.core.aggregator.colors import pick_color
from hq.core.aggregator.service import (
    Aggregator,
    activity_milestone,
    normalize_focus,
    section_to_milestone,
    sort_projects,
    upsert_projects,
)
from hq.core.aggregator.status import STATUS_RANK, days_since, derive_status, status_rank

__all__ = [
    "Aggregator",
    "STATUS_RANK",
    "activity_milestone",
    "days_since",
    "derive_status",
    "normalize_focus",
    "pick_color",
    "section_to_milestone",
    "sort_projects",
    "status_rank",
    "upsert_projects",
]
