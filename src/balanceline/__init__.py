"""balanceline: Relay account balance for the Claude Code statusline."""

from __future__ import annotations

__version__ = "0.1.0"

from balanceline.models import AccountIdentity
from balanceline.models import BalanceData
from balanceline.models import CacheEntry
from balanceline.models import balance_from_billing
from balanceline.models import balance_from_quota
from balanceline.models import cache_key
from balanceline.models import format_age
from balanceline.models import format_display

__all__ = [
    "__version__",
    "AccountIdentity",
    "BalanceData",
    "CacheEntry",
    "balance_from_quota",
    "balance_from_billing",
    "cache_key",
    "format_display",
    "format_age",
]


def main() -> None:
    """Entry point for the balanceline CLI."""
    from balanceline.cli.app import run_app

    run_app()
