"""
Status inference and ordering for projects.
"""

import math
from datetime import datetime

STATUS_RANK = {"active": 0, "live": 1, "idle": 2, "paused": 3}
UNKNOWN_RANK = 99

FIXED_STATUSES = ("live", "paused", "idle")


def days_since(moment: datetime | None, now: datetime) -> int | None:
    """Whole days elapsed since a moment, or None when unknown."""
    if moment is None:
        return None
    return max(0, math.floor((now - moment).total_seconds() / 86400))


def derive_status(
    configured: str | None,
    days: int | None,
    idle_after_days: int = 30,
    paused_after_days: int = 90,
) -> str:
    """
    Decide a project's status.

    A configured live/paused/idle status is kept as is. An active (or
    unconfigured) project is downgraded by inactivity.

    Example:
        >>> derive_status(None, 45)
        'idle'
        >>> derive_status("live", 400)
        'live'
    """
    if configured in FIXED_STATUSES:
        return configured
    if days is not None:
        if days > paused_after_days:
            return "paused"
        if days > idle_after_days:
            return "idle"
    return "active"


def status_rank(status: str | None) -> int:
    return STATUS_RANK.get(status or "", UNKNOWN_RANK)
