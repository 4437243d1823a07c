"""Discovery of the relay API key and base URL.

Claude Code keeps the relay endpoint and key in the ``env`` block of its
settings files. Precedence, highest first:

1. ``~/.claude/settings.local.json``
2. ``~/.claude/settings.json``
3. The process environment
"""

from __future__ import annotations

import json
import logging
import os

import msgspec

from balanceline.config.paths import claude_dir
from balanceline.models import AccountIdentity

logger = logging.getLogger(__name__)

# Later files override earlier ones.
SETTINGS_FILES = ("settings.json", "settings.local.json")

API_KEY_VARS = ("ANTHROPIC_AUTH_TOKEN", "ANTHROPIC_API_KEY")
BASE_URL_VAR = "ANTHROPIC_BASE_URL"


class Credentials(msgspec.Struct, frozen=True):
    """Discovered relay credentials; either field may be missing."""

    api_key: str | None = None
    base_url: str | None = None

    def identity(self) -> AccountIdentity | None:
        """Return the account identity, or None when incomplete."""
        if not self.api_key or not self.base_url:
            return None
        return AccountIdentity(base_url=self.base_url, api_key=self.api_key)


def read_settings_env() -> dict[str, str]:
    """Merge the ``env`` blocks of the Claude Code settings files."""
    merged: dict[str, str] = {}

    for filename in SETTINGS_FILES:
        path = claude_dir() / filename
        if not path.exists():
            continue
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError):
            logger.debug("Ignoring unreadable settings file %s", path)
            continue
        env = data.get("env") if isinstance(data, dict) else None
        if isinstance(env, dict):
            merged.update({k: v for k, v in env.items() if isinstance(v, str)})

    return merged


def _first_value(env: dict[str, str], names: tuple[str, ...]) -> str | None:
    """Return the first non-empty value for names in settings, then os.environ."""
    for source in (env, os.environ):
        for name in names:
            if value := source.get(name):
                return value
    return None


def get_api_key() -> str | None:
    """Get the relay API key."""
    return _first_value(read_settings_env(), API_KEY_VARS)


def get_api_base_url() -> str | None:
    """Get the relay base URL without trailing slashes."""
    value = _first_value(read_settings_env(), (BASE_URL_VAR,))
    if value is None:
        return None
    return value.rstrip("/") or None


def discover_credentials() -> Credentials:
    """Discover both credential fields with a single settings read."""
    env = read_settings_env()
    base_url = _first_value(env, (BASE_URL_VAR,))
    if base_url:
        base_url = base_url.rstrip("/") or None
    return Credentials(api_key=_first_value(env, API_KEY_VARS), base_url=base_url)
