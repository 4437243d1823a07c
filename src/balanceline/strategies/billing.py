"""Billing strategy: balance from the OpenAI-style dashboard endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from balanceline.errors.types import BalancelineError
from balanceline.models import balance_from_billing
from balanceline.strategies.base import FetchResult
from balanceline.strategies.base import FetchStrategy

if TYPE_CHECKING:
    from balanceline.core.client import UpstreamClient


class BillingStrategy(FetchStrategy):
    """Fetch subscription limit and usage with the API key."""

    name = "billing"

    def __init__(self, client: UpstreamClient) -> None:
        self.client = client

    def is_available(self) -> bool:
        return bool(self.client.api_key)

    async def fetch(self) -> FetchResult:
        try:
            subscription, usage = await self.client.get_billing()
        except BalancelineError as e:
            return FetchResult.fail(str(e), e.category)

        return FetchResult.ok(balance_from_billing(subscription, usage))
