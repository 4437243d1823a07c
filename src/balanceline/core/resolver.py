"""Balance resolution pipeline for balanceline.

Tiers, each short-circuiting on success:

1. the memo on the injected CacheStore
2. account quota query (only when an access token and user id are set)
3. billing query
4. the durable record for the account, whatever its age

When every tier fails the outcome is "unavailable" and the statusline
omits the balance.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from datetime import timedelta
from datetime import timezone

import httpx

from balanceline.config.cache import CacheStore
from balanceline.config.credentials import Credentials
from balanceline.config.settings import DEFAULT_TIMEOUT
from balanceline.config.settings import AccountConfig
from balanceline.core.client import UpstreamClient
from balanceline.errors.classify import classify_exception
from balanceline.errors.classify import describe_exception
from balanceline.errors.types import ErrorCategory
from balanceline.models import AccountIdentity
from balanceline.strategies.base import FetchAttempt
from balanceline.strategies.base import FetchResult
from balanceline.strategies.base import FetchStrategy
from balanceline.strategies.base import ResolveOutcome
from balanceline.strategies.billing import BillingStrategy
from balanceline.strategies.quota import AccountQuotaStrategy

logger = logging.getLogger(__name__)


class BalanceResolver:
    """Resolve the balance for the discovered account."""

    def __init__(
        self,
        cache: CacheStore,
        *,
        credentials: Credentials,
        account: AccountConfig | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
        strategies: list[FetchStrategy] | None = None,
    ) -> None:
        self.cache = cache
        self.credentials = credentials
        self.account = account or AccountConfig()
        self.timeout = timeout
        self._http_client = http_client
        self._strategies = strategies

    def fetch_strategies(self, identity: AccountIdentity) -> list[FetchStrategy]:
        """Return the remote strategies to try, in priority order."""
        if self._strategies is not None:
            return list(self._strategies)

        client = UpstreamClient(
            identity.base_url,
            identity.api_key,
            timeout=self.timeout,
            http_client=self._http_client,
        )
        return [
            AccountQuotaStrategy(client, self.account),
            BillingStrategy(client),
        ]

    async def resolve(self) -> ResolveOutcome:
        """Resolve the balance, falling back tier by tier."""
        identity = self.credentials.identity()
        if identity is None:
            logger.debug("No relay API key or base URL configured")
            return ResolveOutcome.unavailable(
                key=None,
                error="No API key or base URL configured",
                category=ErrorCategory.NOT_CONFIGURED,
            )

        key = identity.cache_key()

        memo = self.cache.get_memo(key)
        if memo is not None:
            memo_age = self.cache.memo_age(key)
            if memo_age is None:
                return ResolveOutcome(key=key, success=True, balance=memo, source="memo")
            return ResolveOutcome(
                key=key,
                success=True,
                balance=memo,
                source="memo",
                cached=True,
                stale=True,
                age_seconds=memo_age.total_seconds(),
            )

        attempts: list[FetchAttempt] = []

        for strategy in self.fetch_strategies(identity):
            if not strategy.is_available():
                attempts.append(
                    FetchAttempt(
                        strategy=strategy.name,
                        success=False,
                        error="Strategy not available",
                        category=ErrorCategory.NOT_CONFIGURED,
                    )
                )
                continue

            result, duration_ms = await self._run_strategy(strategy)

            if result.success and result.balance is not None:
                self.cache.set_memo(key, result.balance)
                self.cache.write_durable(key, result.balance)
                return ResolveOutcome(
                    key=key,
                    success=True,
                    balance=result.balance,
                    source=strategy.name,
                    attempts=attempts,
                )

            logger.debug(
                "Strategy %s failed after %dms: %s", strategy.name, duration_ms, result.error
            )
            attempts.append(
                FetchAttempt(
                    strategy=strategy.name,
                    success=False,
                    error=result.error,
                    category=result.category,
                    duration_ms=duration_ms,
                )
            )

        balance, age = self.cache.read_durable(key)
        if balance is not None:
            captured_at = datetime.now(timezone.utc) - (age or timedelta(0))
            self.cache.set_memo(key, balance, captured_at=captured_at)
            return ResolveOutcome(
                key=key,
                success=True,
                balance=balance,
                source="cache",
                attempts=attempts,
                cached=True,
                stale=True,
                age_seconds=age.total_seconds() if age is not None else None,
            )

        last = attempts[-1] if attempts else None
        return ResolveOutcome.unavailable(
            key=key,
            error=last.error if last else "No strategies available",
            category=(last.category if last else None) or ErrorCategory.UNKNOWN,
            attempts=attempts,
        )

    async def _run_strategy(self, strategy: FetchStrategy) -> tuple[FetchResult, int]:
        """Run one strategy within the timeout; errors become failed results."""
        start_time = time.monotonic()
        try:
            result = await asyncio.wait_for(strategy.fetch(), timeout=self.timeout)
        except Exception as e:
            result = FetchResult.fail(describe_exception(e), classify_exception(e))
        duration_ms = int((time.monotonic() - start_time) * 1000)
        return result, duration_ms


async def resolve_balance(
    cache: CacheStore | None = None,
    *,
    credentials: Credentials | None = None,
    account: AccountConfig | None = None,
    timeout: float | None = None,
) -> ResolveOutcome:
    """Resolve using discovered credentials and the loaded configuration."""
    from balanceline.config.credentials import discover_credentials
    from balanceline.config.settings import get_config

    config = get_config()
    resolver = BalanceResolver(
        cache or CacheStore(),
        credentials=credentials or discover_credentials(),
        account=account or config.account,
        timeout=timeout or config.fetch.timeout,
    )
    return await resolver.resolve()
