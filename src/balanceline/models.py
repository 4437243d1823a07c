"""Data models for balanceline.

Defines the normalized balance value and the upstream payload shapes it is
derived from. The relay answers in two different unit systems depending on
which endpoint is queried; both are normalized into BalanceData here.
"""

from __future__ import annotations

import hashlib
from datetime import datetime

import msgspec

# Hard limits at or above this value are the relay's "no ceiling" sentinel.
UNLIMITED_THRESHOLD = 100_000_000.0

# Relay defaults (new-api): quota units per USD and USD->CNY rate.
DEFAULT_QUOTA_PER_UNIT = 500_000.0
DEFAULT_EXCHANGE_RATE = 7.3

DEFAULT_CURRENCY_SYMBOL = "¥"
UNLIMITED_GLYPH = "∞"


class AccountIdentity(msgspec.Struct, frozen=True):
    """The (base URL, API key) pair that scopes a balance."""

    base_url: str
    api_key: str

    def cache_key(self) -> str:
        """Derive a stable hex digest identifying this account."""
        return cache_key(self.base_url, self.api_key)


def cache_key(base_url: str, api_key: str) -> str:
    """Hash an account identity into a cache key.

    Fields are length-prefixed so that no two distinct pairs serialize
    to the same bytes.
    """
    digest = hashlib.sha256()
    for part in (base_url.rstrip("/"), api_key):
        encoded = part.encode("utf-8")
        digest.update(len(encoded).to_bytes(8, "big"))
        digest.update(encoded)
    return digest.hexdigest()


class BalanceData(msgspec.Struct, frozen=True):
    """Normalized account balance in display currency."""

    balance: float  # Remaining spendable amount (0 when unlimited)
    used: float  # Amount already consumed
    total: float  # Total granted amount
    is_unlimited: bool = False

    def format_display(
        self,
        symbol: str = DEFAULT_CURRENCY_SYMBOL,
        glyph: str = UNLIMITED_GLYPH,
    ) -> str:
        """Render the remaining balance for the statusline."""
        return format_display(self, symbol, glyph)

    def utilization(self) -> int | None:
        """Return used/total as a 0-100 percentage, None when unbounded."""
        if self.is_unlimited or self.total <= 0:
            return None
        return max(0, min(100, int(self.used / self.total * 100)))


class CacheEntry(msgspec.Struct, frozen=True):
    """A persisted last-known-good balance."""

    key: str
    balance: BalanceData
    captured_at: datetime


# Upstream payloads. Unknown fields are ignored by msgspec, missing numeric
# fields default to zero the way the relay omits them.


class UserSelfData(msgspec.Struct, frozen=True):
    """Quota block of the /api/user/self response."""

    quota: int = 0  # Remaining quota units
    used_quota: int = 0


class UserSelfResponse(msgspec.Struct, frozen=True):
    """Envelope of the /api/user/self response."""

    success: bool = False
    message: str = ""
    data: UserSelfData | None = None


class SubscriptionResponse(msgspec.Struct, frozen=True):
    """/v1/dashboard/billing/subscription response."""

    object: str = ""
    has_payment_method: bool = False
    hard_limit_usd: float = 0.0
    soft_limit_usd: float = 0.0
    system_hard_limit_usd: float = 0.0
    access_until: int = 0


class UsageResponse(msgspec.Struct, frozen=True):
    """/v1/dashboard/billing/usage response."""

    object: str = ""
    total_usage: float = 0.0  # Hundredths of the display currency


def balance_from_quota(
    data: UserSelfData,
    quota_per_unit: float = DEFAULT_QUOTA_PER_UNIT,
    exchange_rate: float = DEFAULT_EXCHANGE_RATE,
) -> BalanceData:
    """Convert raw quota units into display currency.

    The quota model has no unlimited sentinel, so the result is always bounded.
    """
    if quota_per_unit <= 0:
        raise ValueError(f"quota_per_unit must be positive, got {quota_per_unit}")

    remaining = float(data.quota)
    used = float(data.used_quota)

    return BalanceData(
        balance=remaining / quota_per_unit * exchange_rate,
        used=used / quota_per_unit * exchange_rate,
        total=(remaining + used) / quota_per_unit * exchange_rate,
        is_unlimited=False,
    )


def balance_from_billing(
    subscription: SubscriptionResponse,
    usage: UsageResponse,
) -> BalanceData:
    """Combine the subscription limit and cumulative usage into a balance."""
    total = subscription.hard_limit_usd
    used = usage.total_usage / 100.0
    is_unlimited = total >= UNLIMITED_THRESHOLD

    return BalanceData(
        balance=0.0 if is_unlimited else total - used,
        used=used,
        total=total,
        is_unlimited=is_unlimited,
    )


def format_display(
    data: BalanceData,
    symbol: str = DEFAULT_CURRENCY_SYMBOL,
    glyph: str = UNLIMITED_GLYPH,
) -> str:
    """Format a balance as currency with two decimals, or the infinite glyph."""
    if data.is_unlimited:
        return glyph
    return f"{symbol}{data.balance:.2f}"


def format_age(seconds: float | None) -> str:
    """Format a cache age as a short human string."""
    if seconds is None:
        return ""

    total_seconds = int(seconds)
    if total_seconds < 60:
        return "just now"

    days, remainder = divmod(total_seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes = remainder // 60

    if days > 0:
        return f"{days}d {hours}h ago"
    elif hours > 0:
        return f"{hours}h {minutes}m ago"
    else:
        return f"{minutes}m ago"
