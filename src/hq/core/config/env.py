"""
.env loading for the GitHub token and HQ_* settings.

Two files are read, project first:

    <project>/.env
    $XDG_CONFIG_HOME/hq/.env

Only HQ_* variables and the token variable are taken, so a project .env
shared with other tools does not leak its other entries into the process.
A variable that is already set (exported in the shell, or loaded from the
project file) is never replaced.
"""

import logging
import os
from pathlib import Path

from dotenv import dotenv_values

from .loader import get_xdg_config_home

logger = logging.getLogger(__name__)

ENV_PREFIX = "HQ_"
DEFAULT_TOKEN_ENV = "GITHUB_TOKEN"


def get_user_env_path() -> Path:
    return get_xdg_config_home() / "hq" / ".env"


def load_layered_env(
    *,
    token_env: str = DEFAULT_TOKEN_ENV,
    project_dir: Path | None = None,
    user_env_path: Path | None = None,
) -> dict[str, Path]:
    """
    Load HQ settings and the GitHub token from .env files.

    Args:
        token_env: Name of the variable holding the GitHub token
        project_dir: Directory holding the project .env (defaults to cwd)
        user_env_path: User-level .env (defaults to the XDG location)

    Returns:
        Variable name -> file it was loaded from, for each variable set
    """
    layers = [
        (project_dir or Path.cwd()) / ".env",
        user_env_path or get_user_env_path(),
    ]

    loaded: dict[str, Path] = {}
    for path in layers:
        if not path.is_file():
            continue
        for key, value in dotenv_values(path).items():
            if value is None or key in os.environ:
                continue
            if key != token_env and not key.startswith(ENV_PREFIX):
                continue
            os.environ[key] = value
            loaded[key] = path

    if token_env in loaded:
        logger.debug(f"{token_env} loaded from {loaded[token_env]}")
    return loaded
