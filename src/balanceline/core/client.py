"""Client for the relay's balance endpoints.

Two query shapes are supported:

- ``/api/user/self`` authenticated with the account access token, which
  reports remaining and used quota in raw quota units;
- ``/v1/dashboard/billing/subscription`` plus ``/v1/dashboard/billing/usage``
  authenticated with the API key, which report a hard limit in currency and
  cumulative usage in hundredths.

Every failure is raised as one of the balanceline error types; callers
never see raw httpx or msgspec exceptions.
"""

from __future__ import annotations

import asyncio
from typing import TypeVar

import httpx
import msgspec

from balanceline.config.settings import DEFAULT_TIMEOUT
from balanceline.core.http import get_http_client
from balanceline.errors.types import REJECTED_STATUS_CODES
from balanceline.errors.types import MissingPayload
from balanceline.errors.types import NotConfigured
from balanceline.errors.types import ParseFailure
from balanceline.errors.types import TransportFailure
from balanceline.errors.types import UpstreamRejected
from balanceline.models import SubscriptionResponse
from balanceline.models import UsageResponse
from balanceline.models import UserSelfData
from balanceline.models import UserSelfResponse

T = TypeVar("T")


class UpstreamClient:
    """Query the relay for balance payloads."""

    USER_SELF_PATH = "/api/user/self"
    SUBSCRIPTION_PATH = "/v1/dashboard/billing/subscription"
    USAGE_PATH = "/v1/dashboard/billing/usage"

    USER_ID_HEADER = "New-Api-User"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not base_url or not api_key:
            raise NotConfigured("Relay base URL and API key are required")
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._http_client = http_client

    def _api_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    async def get_user_self(self, access_token: str, user_id: int) -> UserSelfData:
        """Fetch the account quota block using the account access token."""
        headers = {
            "Authorization": f"Bearer {access_token}",
            self.USER_ID_HEADER: str(user_id),
        }
        async with get_http_client(self._http_client, self.timeout) as client:
            response = await self._get(
                client, self.USER_SELF_PATH, headers, UserSelfResponse
            )

        if not response.success:
            detail = response.message or "success flag missing or false"
            raise UpstreamRejected(f"User query rejected: {detail}")
        if response.data is None:
            raise MissingPayload("User query succeeded but returned no data")
        return response.data

    async def get_subscription(self) -> SubscriptionResponse:
        """Fetch the subscription hard limit."""
        async with get_http_client(self._http_client, self.timeout) as client:
            return await self._get(
                client, self.SUBSCRIPTION_PATH, self._api_headers(), SubscriptionResponse
            )

    async def get_usage(self) -> UsageResponse:
        """Fetch cumulative usage."""
        async with get_http_client(self._http_client, self.timeout) as client:
            return await self._get(
                client, self.USAGE_PATH, self._api_headers(), UsageResponse
            )

    async def get_billing(self) -> tuple[SubscriptionResponse, UsageResponse]:
        """Fetch subscription and usage concurrently.

        Both are required; the first failure is raised once both requests
        have finished.
        """
        headers = self._api_headers()
        async with get_http_client(self._http_client, self.timeout) as client:
            results = await asyncio.gather(
                self._get(client, self.SUBSCRIPTION_PATH, headers, SubscriptionResponse),
                self._get(client, self.USAGE_PATH, headers, UsageResponse),
                return_exceptions=True,
            )

        for result in results:
            if isinstance(result, BaseException):
                raise result
        subscription, usage = results
        return subscription, usage

    async def _get(
        self,
        client: httpx.AsyncClient,
        path: str,
        headers: dict[str, str],
        type_: type[T],
    ) -> T:
        """GET a relay path and decode the body into type_."""
        url = f"{self.base_url}{path}"
        try:
            response = await client.get(url, headers=headers)
        except httpx.TimeoutException as e:
            raise TransportFailure(f"Request to {path} timed out") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportFailure(f"Request to {path} failed: {e}") from e

        status = response.status_code
        if status in REJECTED_STATUS_CODES:
            raise UpstreamRejected(f"{path} rejected the credential (HTTP {status})")
        if not response.is_success:
            raise TransportFailure(f"{path} returned HTTP {status}")

        try:
            return msgspec.json.decode(response.content, type=type_)
        except msgspec.DecodeError as e:
            raise ParseFailure(f"Invalid response from {path}: {e}") from e
