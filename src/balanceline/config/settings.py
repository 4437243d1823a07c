"""Configuration structures and loading for balanceline."""

import os
import tomllib
from pathlib import Path

import msgspec

from balanceline.models import DEFAULT_CURRENCY_SYMBOL
from balanceline.models import DEFAULT_EXCHANGE_RATE
from balanceline.models import DEFAULT_QUOTA_PER_UNIT
from balanceline.models import UNLIMITED_GLYPH

# Default values
DEFAULT_TIMEOUT = 5.0


class DisplayConfig(msgspec.Struct, omit_defaults=True):
    """How the statusline segment is rendered."""

    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    unlimited_glyph: str = UNLIMITED_GLYPH
    dim_stale: bool = True
    show_used: bool = False
    color: bool = True


class FetchConfig(msgspec.Struct, omit_defaults=True):
    """Bounds on remote queries."""

    timeout: float = DEFAULT_TIMEOUT


class CredentialsConfig(msgspec.Struct, omit_defaults=True):
    """Where the account access token may be stored."""

    use_keyring: bool = False


class AccountConfig(msgspec.Struct, omit_defaults=True):
    """Relay user account settings.

    access_token and user_id come from the relay's personal settings page.
    Both must be present for the account quota query to be attempted.
    """

    access_token: str | None = None
    user_id: int | None = None
    exchange_rate: float = DEFAULT_EXCHANGE_RATE
    quota_per_unit: float = DEFAULT_QUOTA_PER_UNIT

    def is_complete(self) -> bool:
        """Check whether the account quota query can be attempted."""
        return bool(self.access_token) and self.user_id is not None


class Config(msgspec.Struct, omit_defaults=True):
    """Top-level contents of config.toml."""

    display: DisplayConfig = msgspec.field(default_factory=DisplayConfig)
    fetch: FetchConfig = msgspec.field(default_factory=FetchConfig)
    credentials: CredentialsConfig = msgspec.field(default_factory=CredentialsConfig)
    account: AccountConfig = msgspec.field(default_factory=AccountConfig)


def _load_from_toml(path: Path) -> dict:
    """Load configuration from TOML file."""
    if not path.exists():
        return {}

    with path.open("rb") as f:
        return tomllib.load(f)


def _save_to_toml(data: dict, path: Path) -> None:
    """Save configuration to TOML file."""
    import tomli_w

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump(data, f)


def convert_config(data: dict) -> Config:
    """Convert raw dict to Config struct."""
    return msgspec.convert(data, type=Config)


def _apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides to config.

    BALANCELINE_TIMEOUT: Request timeout in seconds
    BALANCELINE_NO_COLOR: Disable colored output
    """
    if timeout_str := os.environ.get("BALANCELINE_TIMEOUT"):
        try:
            timeout = float(timeout_str)
        except ValueError:
            timeout = None
        if timeout is not None and timeout > 0:
            fetch = msgspec.structs.replace(config.fetch, timeout=timeout)
            config = msgspec.structs.replace(config, fetch=fetch)

    if "BALANCELINE_NO_COLOR" in os.environ or "NO_COLOR" in os.environ:
        display = msgspec.structs.replace(config.display, color=False)
        config = msgspec.structs.replace(config, display=display)

    return config


def _apply_keyring_token(config: Config) -> Config:
    """Fill the account access token from the system keyring when enabled."""
    if config.account.access_token or not config.credentials.use_keyring:
        return config

    from balanceline.config.keyring import get_access_token

    token = get_access_token()
    if not token:
        return config

    account = msgspec.structs.replace(config.account, access_token=token)
    return msgspec.structs.replace(config, account=account)


# Loaded lazily by get_config()
_config: Config | None = None


def get_config() -> Config:
    """Get the current configuration (singleton)."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def read_config_file(path: Path | None = None) -> Config:
    """Read the config file as written, without env or keyring overrides."""
    from .paths import config_file

    raw_data = _load_from_toml(path or config_file())
    if not raw_data:
        return Config()
    return convert_config(raw_data)


def load_config(path: Path | None = None) -> Config:
    """Load configuration from file with defaults."""
    config = read_config_file(path)
    config = _apply_env_overrides(config)
    config = _apply_keyring_token(config)

    return config


def save_config(config: Config, path: Path | None = None) -> None:
    """Write only non-default settings to the TOML file.

    Unset optional values such as a keyring-held access token are omitted
    by the structs themselves, and sections left at their defaults are
    dropped so the file stays minimal.
    """
    from .paths import config_file

    tables = msgspec.to_builtins(config)
    _save_to_toml(
        {name: table for name, table in tables.items() if table},
        path or config_file(),
    )

    # Later get_config() calls see the saved values
    global _config
    _config = config
