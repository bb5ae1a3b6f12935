"""
Path helpers for HQ.
"""

from pathlib import Path


def expand_path(path: str | Path) -> Path:
    """
    Expand a leading ``~`` in a configured path.

    Example:
        >>> expand_path("~/Projects/loomiverse")  # doctest: +SKIP
        PosixPath('/home/me/Projects/loomiverse')
    """
    return Path(path).expanduser()


def resolve_data_file(data_file: str | Path, project_dir: Path | None = None) -> Path:
    """Resolve the data store path relative to the project directory."""
    path = expand_path(data_file)
    if path.is_absolute():
        return path
    return (project_dir or Path.cwd()) / path
