"""Configuration management for balanceline."""

from balanceline.config.cache import CacheStore
from balanceline.config.credentials import (
    Credentials,
    discover_credentials,
    get_api_base_url,
    get_api_key,
    read_settings_env,
)
from balanceline.config.keyring import (
    get_access_token,
    store_access_token,
)
from balanceline.config.paths import (
    balances_dir,
    cache_dir,
    claude_dir,
    config_dir,
    config_file,
)
from balanceline.config.settings import (
    AccountConfig,
    Config,
    CredentialsConfig,
    DisplayConfig,
    FetchConfig,
    get_config,
    load_config,
    read_config_file,
    save_config,
)

__all__ = [
    # paths
    "config_dir",
    "cache_dir",
    "balances_dir",
    "claude_dir",
    "config_file",
    # settings
    "Config",
    "AccountConfig",
    "CredentialsConfig",
    "DisplayConfig",
    "FetchConfig",
    "get_config",
    "load_config",
    "read_config_file",
    "save_config",
    # credentials
    "Credentials",
    "discover_credentials",
    "get_api_key",
    "get_api_base_url",
    "read_settings_env",
    # cache
    "CacheStore",
    # keyring
    "store_access_token",
    "get_access_token",
]
