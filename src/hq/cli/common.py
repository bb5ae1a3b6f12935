"""
Shared helpers for CLI commands: config, store location, logging.
"""

import logging
import sys
from pathlib import Path

import typer

from hq.cli.errors import ExitCode, print_error
from hq.core.config import HQConfig, load_config, load_layered_env
from hq.core.config.env import DEFAULT_TOKEN_ENV
from hq.core.exceptions import ConfigError
from hq.core.store import DocumentStore
from hq.utils.project import resolve_data_file


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for all commands.

    Args:
        debug: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def get_config() -> HQConfig:
    """
    Load the layered configuration (cached per process).

    When the config names its own token variable, that variable is also
    picked up from the .env files.
    """
    try:
        config = load_config()
    except ConfigError as e:
        print_error(
            "Configuration is invalid",
            reason=str(e),
            solution="edit .hq.json or ~/.config/hq/config.json",
        )
        raise typer.Exit(ExitCode.GENERAL_ERROR) from e
    if config.github.token_env != DEFAULT_TOKEN_ENV:
        load_layered_env(token_env=config.github.token_env)
    return config


def get_store(ctx: typer.Context, config: HQConfig | None = None) -> DocumentStore:
    """Store at --data-file, falling back to store.data_file from config."""
    obj = ctx.obj or {}
    data_file: Path | str | None = obj.get("data_file")
    if data_file is None:
        data_file = (config or get_config()).store.data_file
    return DocumentStore(resolve_data_file(data_file))
