"""Fetch strategy base classes."""

from __future__ import annotations

from abc import ABC, abstractmethod

import msgspec

from balanceline.errors.types import ErrorCategory
from balanceline.models import BalanceData


class FetchResult(msgspec.Struct, frozen=True):
    """Result of a fetch attempt."""

    success: bool
    balance: BalanceData | None = None
    error: str | None = None
    category: ErrorCategory | None = None

    @classmethod
    def ok(cls, balance: BalanceData) -> FetchResult:
        return cls(success=True, balance=balance)

    @classmethod
    def fail(
        cls,
        error: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
    ) -> FetchResult:
        return cls(success=False, error=error, category=category)


class FetchAttempt(msgspec.Struct):
    """Record of a single fetch attempt."""

    strategy: str
    success: bool
    error: str | None = None
    category: ErrorCategory | None = None
    duration_ms: int = 0


class ResolveOutcome(msgspec.Struct):
    """Complete result of resolving a balance.

    ``success`` False is the "unavailable" terminal state: the statusline
    must omit the balance rather than show zero.
    """

    key: str | None  # Account cache key, None when not configured
    success: bool
    balance: BalanceData | None
    source: str | None  # "memo", a strategy name, or "cache"
    attempts: list[FetchAttempt] = msgspec.field(default_factory=list)
    error: str | None = None  # Final error if all tiers failed
    category: ErrorCategory | None = None
    cached: bool = False  # Whether result came from the durable cache
    stale: bool = False  # Whether the value may be out of date
    age_seconds: float | None = None  # Age of the durable record

    @classmethod
    def unavailable(
        cls,
        key: str | None,
        error: str,
        category: ErrorCategory,
        attempts: list[FetchAttempt] | None = None,
    ) -> ResolveOutcome:
        return cls(
            key=key,
            success=False,
            balance=None,
            source=None,
            attempts=attempts or [],
            error=error,
            category=category,
        )


class FetchStrategy(ABC):
    """Base class for fetch strategies."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Strategy identifier (e.g., 'user_self', 'billing')."""
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if this strategy can be attempted.

        Returns True if credentials/requirements exist.
        Should be fast (no network calls).
        """
        ...

    @abstractmethod
    async def fetch(self) -> FetchResult:
        """
        Attempt to fetch the balance.

        Returns FetchResult with balance or error details.
        """
        ...
