"""Platform-specific paths for balanceline configuration and cache."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_cache_dir
from platformdirs import user_config_dir

PACKAGE_NAME = "balanceline"


def _get_env_path(env_var: str, fallback: Path) -> Path:
    """Get path from environment variable or fallback."""
    if env_value := os.environ.get(env_var):
        return Path(env_value)
    return fallback


def config_dir() -> Path:
    """Get user config directory.

    Respects BALANCELINE_CONFIG_DIR environment variable.
    """
    base_dir = Path(user_config_dir(PACKAGE_NAME))
    return _get_env_path("BALANCELINE_CONFIG_DIR", base_dir)


def cache_dir() -> Path:
    """Get user cache directory.

    Respects BALANCELINE_CACHE_DIR environment variable.
    """
    base_dir = Path(user_cache_dir(PACKAGE_NAME))
    return _get_env_path("BALANCELINE_CACHE_DIR", base_dir)


def balances_dir() -> Path:
    """Get cached balances directory."""
    return cache_dir() / "balances"


def config_file() -> Path:
    """Get main config.toml path."""
    return config_dir() / "config.toml"


def claude_dir() -> Path:
    """Get the Claude Code settings directory.

    Respects BALANCELINE_CLAUDE_DIR environment variable.
    """
    return _get_env_path("BALANCELINE_CLAUDE_DIR", Path.home() / ".claude")
