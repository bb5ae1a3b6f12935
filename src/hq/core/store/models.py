"""
Pydantic models for the dashboard document (the data store).

The document is the sole persisted artifact:

    {
      "meta": {"lastUpdated": ..., "lastScanType": ..., "version": ...,
               "projectCount": ..., "sources": [...], "focus": {...}},
      "projects": [
        {"id": ..., "name": ..., "status": ..., "milestones": [
          {"id": ..., "name": ..., "done": ..., "current": ..., "tasks": [
            {"id": ..., "name": ..., "done": ..., "current": ..., "subtasks": [...]}
          ]}
        ]}
      ]
    }

Keys are camelCase on disk and snake_case in Python. Unknown keys are kept
so hand-edited fields survive a rewrite.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

_MODEL_CONFIG = ConfigDict(populate_by_name=True, extra="allow")


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TaskNode(BaseModel):
    """A task or subtask. Subtasks share the same shape."""

    model_config = _MODEL_CONFIG

    id: str
    name: str
    done: bool = False
    current: bool = False
    completed_at: str | None = Field(default=None, alias="completedAt")
    subtasks: list[TaskNode] | None = None


class Milestone(BaseModel):
    """An ordered group of tasks sharing a heading."""

    model_config = _MODEL_CONFIG

    id: str
    name: str
    done: bool = False
    current: bool = False
    source: str | None = None
    completed_at: str | None = Field(default=None, alias="completedAt")
    tasks: list[TaskNode] = Field(default_factory=list)


class LastCommit(BaseModel):
    """Most recent commit on the tracked branch."""

    model_config = _MODEL_CONFIG

    sha: str
    message: str
    date: str | None = None


class LocalState(BaseModel):
    """Working-tree details reported by the filesystem backend."""

    model_config = _MODEL_CONFIG

    branch: str | None = None
    has_changes: bool = Field(default=False, alias="hasChanges")
    changed_files: int = Field(default=0, alias="changedFiles")


class Project(BaseModel):
    """One tracked repository and its milestone tree."""

    model_config = _MODEL_CONFIG

    id: str
    name: str
    emoji: str = "\U0001F4C1"
    description: str = ""
    color: str | None = None
    priority: int | None = None
    status: str = "active"
    repo: str | None = None
    owner: str | None = None
    last_commit: LastCommit | None = Field(default=None, alias="lastCommit")
    days_since_update: int | None = Field(default=None, alias="daysSinceUpdate")
    open_issues: int = Field(default=0, alias="openIssues")
    open_prs: int = Field(default=0, alias="openPRs")
    source_files: list[str] = Field(default_factory=list, alias="sourceFiles")
    local: LocalState | None = None
    milestones: list[Milestone] = Field(default_factory=list)


class FocusPointer(BaseModel):
    """The single recorded focus chain (ids from project down to subtask)."""

    model_config = _MODEL_CONFIG

    project: str
    milestone: str | None = None
    task: str | None = None
    subtask: str | None = None


class Meta(BaseModel):
    """Document metadata."""

    model_config = _MODEL_CONFIG

    last_updated: str = Field(default_factory=utc_now_iso, alias="lastUpdated")
    last_scan_type: str = Field(default="manual", alias="lastScanType")
    version: str = "2.0.0"
    project_count: int = Field(default=0, alias="projectCount")
    sources: list[str] = Field(default_factory=list)
    focus: FocusPointer | None = None


class Document(BaseModel):
    """Root of the data store."""

    model_config = _MODEL_CONFIG

    meta: Meta = Field(default_factory=Meta)
    projects: list[Project] = Field(default_factory=list)

    def to_json_dict(self) -> dict[str, object]:
        """Serialize with on-disk (camelCase) keys, dropping unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
