"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from hq.core.exceptions import ConfigError

from .models import HQConfig

logger = logging.getLogger(__name__)

# Global cache to avoid reloading config multiple times per invocation
_config_cache: HQConfig | None = None


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """Get path to ~/.config/hq/config.json (or XDG equivalent)."""
    return get_xdg_config_home() / "hq" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """Get path to .hq.json in the project directory."""
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".hq.json"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`.
    Nested dicts are merged, not replaced.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 30}})
        {'a': 1, 'b': {'x': 10, 'y': 30}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            return None
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Failed to parse config at {path}: {e}")
        return None


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Supported env vars:
        HQ_DATA_FILE - overrides store.data_file
        HQ_BATCH_SIZE - overrides aggregation.batch_size
        HQ_GITHUB_ACCOUNTS - comma-separated list, overrides github.accounts

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    if data_file := os.environ.get("HQ_DATA_FILE"):
        result.setdefault("store", {})
        result["store"] = {**result["store"], "data_file": data_file}

    if batch_str := os.environ.get("HQ_BATCH_SIZE"):
        try:
            batch_size = int(batch_str)
            if batch_size < 1:
                logger.warning(f"HQ_BATCH_SIZE must be >= 1, got {batch_size}, ignoring")
            else:
                result.setdefault("aggregation", {})
                result["aggregation"] = {**result["aggregation"], "batch_size": batch_size}
        except ValueError:
            logger.warning(f"Invalid HQ_BATCH_SIZE value '{batch_str}', ignoring")

    if accounts_str := os.environ.get("HQ_GITHUB_ACCOUNTS"):
        accounts = [a.strip() for a in accounts_str.split(",") if a.strip()]
        result.setdefault("github", {})
        result["github"] = {**result["github"], "accounts": accounts}

    return result


def get_default_config() -> dict[str, Any]:
    """Get hardcoded default configuration."""
    return {
        "aggregation": {"batch_size": 6, "idle_after_days": 30, "paused_after_days": 90},
        "store": {"data_file": "public/data.json"},
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> HQConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (HQ_*)
        2. Project config (.hq.json)
        3. User config (~/.config/hq/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Project directory to load .hq.json from (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated HQConfig instance

    Raises:
        ConfigError: If the merged config fails Pydantic validation
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()
    sources: list[str] = []

    for path in (get_user_config_path(), get_project_config_path(project_dir)):
        if layer := load_json_file(path):
            merged = deep_merge(merged, layer)
            sources.append(str(path))

    merged = apply_env_overrides(merged)

    try:
        config = HQConfig(**merged)
    except ValidationError as e:
        origin = ", ".join(sources) or "defaults and environment"
        raise ConfigError(f"Invalid configuration (from {origin}): {e}", sources) from e
    _config_cache = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
