"""
Configuration data models for HQ.

These models define the structure of .hq.json and ~/.config/hq/config.json
files, with validation and type safety via Pydantic.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_PALETTE = [
    "#8b5cf6",
    "#3b82f6",
    "#ef4444",
    "#f59e0b",
    "#06b6d4",
    "#22c55e",
    "#f97316",
    "#ec4899",
    "#a855f7",
]


class GitHubConfig(BaseModel):
    """
    Remote repository API settings.

    The token itself is never stored in config; only the name of the
    environment variable that holds it.
    """
    accounts: list[str] = Field(
        default_factory=list,
        description="Accounts (users or orgs) whose repositories are tracked"
    )
    token_env: str = Field(
        default="GITHUB_TOKEN",
        description="Environment variable holding the bearer token"
    )
    api_url: str = Field(
        default="https://api.github.com",
        description="Base URL of the repository API"
    )
    skip_repos: list[str] = Field(
        default_factory=list,
        description="Repository names excluded from discovery (exact match)"
    )
    timeout: float = Field(
        default=15.0,
        gt=0,
        description="Per-request timeout in seconds"
    )
    commit_count: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Recent commits fetched per repository"
    )


class AggregationConfig(BaseModel):
    """Batching and status-inference settings for the aggregator."""
    batch_size: int = Field(
        default=6,
        ge=1,
        description="Repositories probed concurrently per batch"
    )
    idle_after_days: int = Field(
        default=30,
        ge=0,
        description="Days without a push before an active repo is 'idle'"
    )
    paused_after_days: int = Field(
        default=90,
        ge=0,
        description="Days without a push before an active repo is 'paused'"
    )
    palette: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PALETTE),
        min_length=1,
        description="Colors assigned to repositories without a configured color"
    )


class StoreConfig(BaseModel):
    """Location of the data store document."""
    data_file: str = Field(
        default="public/data.json",
        description="Path to the JSON document (relative to the project dir)"
    )


class LocalConfig(BaseModel):
    """Filesystem backend settings."""
    project_paths: dict[str, str] = Field(
        default_factory=dict,
        description="Project id -> local checkout path ('~' is expanded)"
    )


class ProjectConfig(BaseModel):
    """
    Per-repository display overrides.

    Anything left unset falls back to repository metadata or derived values.
    """
    name: Optional[str] = None
    emoji: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    priority: Optional[int] = None
    status: Optional[str] = Field(
        default=None,
        description="Fixed status: 'active', 'live', 'paused' or 'idle'"
    )
    owner: Optional[str] = Field(
        default=None,
        description="Owning account, when not discovered dynamically"
    )
    prd_files: Optional[list[str]] = Field(
        default=None,
        description="Checklist files to read instead of searching the tree"
    )

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[str]) -> Optional[str]:
        """Restrict status to the known dashboard states."""
        if v is not None and v not in ("active", "live", "paused", "idle"):
            raise ValueError(f"Unknown status '{v}'")
        return v


class MigrateConfig(BaseModel):
    """PRD -> tasks/ migration settings."""
    repos: list[str] = Field(
        default_factory=list,
        description="owner/name repositories processed by 'hq migrate --all'"
    )
    tasks_dir: str = Field(
        default="tasks",
        description="Directory created in the target repository"
    )
    push_retries: int = Field(
        default=0,
        ge=0,
        description="Extra push attempts after a failed push"
    )
    commit_message: str = Field(
        default=(
            "Add organized task files from PRD migration\n\n"
            "Splits PRD checklists into section-based task files.\n"
            "Each file tracks one area of work independently."
        ),
        description="Commit message used when publishing task files"
    )


class HQConfig(BaseModel):
    """
    Top-level HQ configuration.

    Loaded from defaults, user config, project config, and env vars.

    Example:
        >>> config = HQConfig(github=GitHubConfig(accounts=["octocat"]))
        >>> config.aggregation.batch_size
        6
    """
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    aggregation: AggregationConfig = Field(default_factory=AggregationConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    local: LocalConfig = Field(default_factory=LocalConfig)
    projects: dict[str, ProjectConfig] = Field(
        default_factory=dict,
        description="Repository name -> display overrides"
    )
    migrate: MigrateConfig = Field(default_factory=MigrateConfig)

    model_config = ConfigDict(
        extra="allow",  # Allow extra fields for forward compatibility
        validate_assignment=True,
    )

    def project_config(self, repo_name: str) -> ProjectConfig:
        """Return the override block for a repository, matching case-insensitively."""
        if repo_name in self.projects:
            return self.projects[repo_name]
        lowered = repo_name.lower()
        for key, value in self.projects.items():
            if key.lower() == lowered:
                return value
        return ProjectConfig()
