"""Pytest configuration and shared fixtures for balanceline tests."""

from __future__ import annotations

import logging
from collections.abc import Callable
from collections.abc import Generator
from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest

from balanceline.config import settings as settings_module
from balanceline.config.cache import CacheStore
from balanceline.config.credentials import Credentials
from balanceline.config.settings import AccountConfig
from balanceline.models import BalanceData

BASE_URL = "https://relay.example.com"
API_KEY = "sk-test-1234567890"


@pytest.fixture
def utc_now() -> datetime:
    """Fixed UTC datetime for consistent testing."""
    return datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_balance() -> BalanceData:
    """Bounded balance with known values."""
    return BalanceData(balance=24.70, used=25.30, total=50.0)


@pytest.fixture
def unlimited_balance() -> BalanceData:
    """Balance reported through the unlimited sentinel."""
    return BalanceData(balance=0.0, used=3.5, total=100_000_000.0, is_unlimited=True)


@pytest.fixture
def credentials() -> Credentials:
    """Complete relay credentials."""
    return Credentials(api_key=API_KEY, base_url=BASE_URL)


@pytest.fixture
def account() -> AccountConfig:
    """Account settings that enable the quota query."""
    return AccountConfig(access_token="access-token", user_id=42)


@pytest.fixture
def cache_store(tmp_path: Path) -> CacheStore:
    """CacheStore writing into a temporary directory."""
    return CacheStore(tmp_path / "balances")


@pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None]:
    """Keep every test away from the real config, cache and Claude settings."""
    monkeypatch.setenv("BALANCELINE_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("BALANCELINE_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("BALANCELINE_CLAUDE_DIR", str(tmp_path / "claude"))
    for name in (
        "ANTHROPIC_AUTH_TOKEN",
        "ANTHROPIC_API_KEY",
        "ANTHROPIC_BASE_URL",
        "BALANCELINE_TIMEOUT",
        "BALANCELINE_NO_COLOR",
        "NO_COLOR",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(settings_module, "_config", None)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    settings_module._config = None


class RelayStub:
    """Request handler standing in for the relay, counting every call."""

    def __init__(self) -> None:
        self.routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def json(self, path: str, payload: object, status_code: int = 200) -> None:
        self.routes[path] = lambda request: httpx.Response(status_code, json=payload)

    def handle(self, path: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[path] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(request.url.path)
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})
        return handler(request)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def relay() -> RelayStub:
    """Routable fake relay."""
    return RelayStub()


@pytest.fixture
def http_client(relay: RelayStub) -> httpx.AsyncClient:
    """AsyncClient whose transport is the fake relay."""
    return httpx.AsyncClient(transport=httpx.MockTransport(relay))
