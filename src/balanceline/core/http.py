"""HTTP client construction for balanceline."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx

from balanceline.config.settings import DEFAULT_TIMEOUT

USER_AGENT = "balanceline"


def get_timeout_config(timeout: float = DEFAULT_TIMEOUT) -> httpx.Timeout:
    """Per-phase timeout applied to every relay request."""
    return httpx.Timeout(timeout, connect=timeout)


def create_http_client(timeout: float = DEFAULT_TIMEOUT) -> httpx.AsyncClient:
    """Create a client sized for a handful of requests per invocation."""
    limits = httpx.Limits(
        max_connections=4,
        max_keepalive_connections=2,
    )
    return httpx.AsyncClient(
        timeout=get_timeout_config(timeout),
        limits=limits,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    )


@asynccontextmanager
async def get_http_client(
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the given client, or a fresh one that is closed afterwards.

    Usage:
        async with get_http_client(shared, timeout=5.0) as client:
            response = await client.get(...)
    """
    if client is not None:
        # Owned by the caller - don't close
        yield client
        return

    owned = create_http_client(timeout)
    try:
        yield owned
    finally:
        await owned.aclose()
