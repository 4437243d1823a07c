"""Fetch strategies for balanceline."""

from __future__ import annotations

from balanceline.strategies.base import FetchAttempt
from balanceline.strategies.base import FetchResult
from balanceline.strategies.base import FetchStrategy
from balanceline.strategies.base import ResolveOutcome
from balanceline.strategies.billing import BillingStrategy
from balanceline.strategies.quota import AccountQuotaStrategy

__all__ = [
    "FetchStrategy",
    "FetchResult",
    "FetchAttempt",
    "ResolveOutcome",
    "AccountQuotaStrategy",
    "BillingStrategy",
]
