"""
Custom exceptions for HQ.

This module defines the error taxonomy shared by the checklist pipeline,
the data store and the CLI.

Exception Hierarchy:
    HQError (base)
    ├── NotFoundError (task/milestone id absent from the document)
    ├── SourceUnavailableError (missing dir/file, decode or network failure)
    ├── StoreUnreadableError (data store missing or malformed)
    ├── UpstreamFailureError (aggregation failed as a whole)
    ├── MigrationError (PRD migration could not publish task files)
    └── ConfigError (merged configuration failed validation)

SourceUnavailableError is recovered at the prober boundary: the unit is
logged and contributes no data. The others surface to the operator.
"""


class HQError(Exception):
    """
    Base exception for all HQ errors.

    Attributes:
        message: Human-readable error message
        context: Optional dictionary of additional context
    """

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class NotFoundError(HQError):
    """Raised when a task, subtask or milestone id is not in the document."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"Task not found: {node_id}", node_id=node_id)
        self.node_id = node_id


class SourceUnavailableError(HQError):
    """
    Raised when a content source cannot deliver data for one unit.

    Attributes:
        source: Name of the source that failed (e.g., "github", "local")
    """

    def __init__(self, source: str, message: str, **context: object) -> None:
        super().__init__(message, source=source, **context)
        self.source = source

    def __str__(self) -> str:
        return f"[{self.source}] {self.message}"


class StoreUnreadableError(HQError):
    """Raised when the data store is missing or is not a valid document."""

    def __init__(self, path: object, message: str) -> None:
        super().__init__(message, path=str(path))
        self.path = path


class UpstreamFailureError(HQError):
    """Raised when building the whole document fails."""

    pass


class ConfigError(HQError):
    """
    Raised when the merged configuration does not validate.

    Attributes:
        sources: Config files that contributed to the merge
    """

    def __init__(self, message: str, sources: list[str]) -> None:
        super().__init__(message, sources=sources)
        self.sources = sources


class MigrationError(HQError):
    """Raised when task files could not be published to a repository."""

    def __init__(self, repo: str, message: str, **context: object) -> None:
        super().__init__(message, repo=repo, **context)
        self.repo = repo

    def __str__(self) -> str:
        return f"{self.repo}: {self.message}"


__all__ = [
    "HQError",
    "NotFoundError",
    "SourceUnavailableError",
    "StoreUnreadableError",
    "UpstreamFailureError",
    "MigrationError",
    "ConfigError",
]
