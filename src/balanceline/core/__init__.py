"""Core orchestration and utilities for balanceline."""

from balanceline.core.client import UpstreamClient
from balanceline.core.http import create_http_client, get_http_client, get_timeout_config
from balanceline.core.resolver import BalanceResolver, resolve_balance

__all__ = [
    # http
    "get_http_client",
    "create_http_client",
    "get_timeout_config",
    # client
    "UpstreamClient",
    # resolver
    "BalanceResolver",
    "resolve_balance",
]
