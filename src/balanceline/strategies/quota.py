"""Account quota strategy: balance from the relay user's own quota."""

from __future__ import annotations

from typing import TYPE_CHECKING

from balanceline.config.settings import AccountConfig
from balanceline.errors.types import BalancelineError
from balanceline.errors.types import ErrorCategory
from balanceline.models import balance_from_quota
from balanceline.strategies.base import FetchResult
from balanceline.strategies.base import FetchStrategy

if TYPE_CHECKING:
    from balanceline.core.client import UpstreamClient


class AccountQuotaStrategy(FetchStrategy):
    """Fetch the balance from ``/api/user/self`` with the account token.

    Preferred when configured: an API key with an unlimited quota makes the
    billing endpoints report the unlimited sentinel, while the account
    quota always reflects real money left.
    """

    name = "user_self"

    def __init__(self, client: UpstreamClient, account: AccountConfig) -> None:
        self.client = client
        self.account = account

    def is_available(self) -> bool:
        """Check if an access token and user id are configured."""
        return self.account.is_complete()

    async def fetch(self) -> FetchResult:
        """Fetch and normalize the account quota."""
        if not self.is_available():
            return FetchResult.fail(
                "Account access token or user id not configured",
                ErrorCategory.NOT_CONFIGURED,
            )

        try:
            data = await self.client.get_user_self(
                self.account.access_token, self.account.user_id
            )
        except BalancelineError as e:
            return FetchResult.fail(str(e), e.category)

        try:
            balance = balance_from_quota(
                data,
                quota_per_unit=self.account.quota_per_unit,
                exchange_rate=self.account.exchange_rate,
            )
        except ValueError as e:
            return FetchResult.fail(str(e), ErrorCategory.NOT_CONFIGURED)

        return FetchResult.ok(balance)
