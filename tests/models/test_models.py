"""Tests for balance models and unit normalization."""

from __future__ import annotations

import msgspec
import pytest

from balanceline.models import UNLIMITED_THRESHOLD
from balanceline.models import AccountIdentity
from balanceline.models import BalanceData
from balanceline.models import SubscriptionResponse
from balanceline.models import UsageResponse
from balanceline.models import UserSelfData
from balanceline.models import UserSelfResponse
from balanceline.models import balance_from_billing
from balanceline.models import balance_from_quota
from balanceline.models import cache_key
from balanceline.models import format_age
from balanceline.models import format_display


class TestBalanceFromQuota:
    """Tests for quota unit conversion."""

    def test_converts_quota_units_to_currency(self):
        """Remaining and used quota are scaled by quota_per_unit and rate."""
        data = UserSelfData(quota=1_000_000, used_quota=500_000)

        result = balance_from_quota(data, quota_per_unit=500_000, exchange_rate=7.3)

        assert result.balance == pytest.approx(14.6)
        assert result.used == pytest.approx(7.3)
        assert result.total == pytest.approx(21.9)
        assert result.is_unlimited is False

    def test_total_is_remaining_plus_used(self):
        """Total always equals balance plus used."""
        data = UserSelfData(quota=123_456, used_quota=654_321)

        result = balance_from_quota(data, quota_per_unit=500_000, exchange_rate=1.0)

        assert result.total == pytest.approx(result.balance + result.used)

    def test_never_unlimited(self):
        """Huge quotas stay bounded."""
        data = UserSelfData(quota=10**15, used_quota=0)

        result = balance_from_quota(data)

        assert result.is_unlimited is False
        assert result.balance > UNLIMITED_THRESHOLD

    def test_zero_quota(self):
        """An exhausted account reports a zero balance."""
        result = balance_from_quota(UserSelfData(quota=0, used_quota=0))

        assert result == BalanceData(balance=0.0, used=0.0, total=0.0)

    @pytest.mark.parametrize("quota_per_unit", [0, -1])
    def test_rejects_non_positive_quota_per_unit(self, quota_per_unit):
        """A zero or negative conversion factor is a configuration error."""
        with pytest.raises(ValueError, match="quota_per_unit"):
            balance_from_quota(UserSelfData(quota=1), quota_per_unit=quota_per_unit)


class TestBalanceFromBilling:
    """Tests for billing + usage normalization."""

    def test_bounded_limit(self):
        """Usage in hundredths is converted and subtracted from the limit."""
        result = balance_from_billing(
            SubscriptionResponse(hard_limit_usd=50.0),
            UsageResponse(total_usage=2530),
        )

        assert result.total == pytest.approx(50.0)
        assert result.used == pytest.approx(25.30)
        assert result.balance == pytest.approx(24.70)
        assert result.is_unlimited is False

    def test_unlimited_sentinel(self):
        """A limit at the sentinel marks the account unlimited with zero balance."""
        result = balance_from_billing(
            SubscriptionResponse(hard_limit_usd=UNLIMITED_THRESHOLD),
            UsageResponse(total_usage=1234),
        )

        assert result.is_unlimited is True
        assert result.balance == 0.0
        assert result.used == pytest.approx(12.34)

    def test_just_below_sentinel_is_bounded(self):
        """Limits below the sentinel are real limits."""
        result = balance_from_billing(
            SubscriptionResponse(hard_limit_usd=UNLIMITED_THRESHOLD - 1),
            UsageResponse(total_usage=0),
        )

        assert result.is_unlimited is False
        assert result.balance == pytest.approx(UNLIMITED_THRESHOLD - 1)

    def test_overspent_balance_goes_negative(self):
        """Usage past the limit is reported as is."""
        result = balance_from_billing(
            SubscriptionResponse(hard_limit_usd=10.0),
            UsageResponse(total_usage=1500),
        )

        assert result.balance == pytest.approx(-5.0)


class TestPayloadDecoding:
    """Tests for upstream payload structs."""

    def test_unknown_fields_are_ignored(self):
        """Extra upstream fields do not break decoding."""
        raw = b'{"success": true, "message": "", "data": {"quota": 5, "used_quota": 2, "username": "x"}}'

        response = msgspec.json.decode(raw, type=UserSelfResponse)

        assert response.success is True
        assert response.data == UserSelfData(quota=5, used_quota=2)

    def test_missing_data_decodes_to_none(self):
        """An envelope without data is representable."""
        response = msgspec.json.decode(b'{"success": true}', type=UserSelfResponse)

        assert response.data is None

    def test_wrong_types_fail_validation(self):
        """Non-numeric limits are a validation error."""
        with pytest.raises(msgspec.ValidationError):
            msgspec.json.decode(
                b'{"hard_limit_usd": "lots"}', type=SubscriptionResponse
            )


class TestFormatDisplay:
    """Tests for currency formatting."""

    def test_two_decimals_with_symbol(self, sample_balance):
        """Bounded balances render with the currency symbol."""
        assert format_display(sample_balance) == "¥24.70"

    def test_custom_symbol(self, sample_balance):
        """The symbol is configurable."""
        assert format_display(sample_balance, symbol="$") == "$24.70"

    def test_unlimited_renders_glyph(self, unlimited_balance):
        """Unlimited balances never render a number."""
        assert format_display(unlimited_balance) == "∞"
        assert unlimited_balance.format_display(glyph="inf") == "inf"

    def test_rounding(self):
        """Values round to two decimals."""
        assert format_display(BalanceData(balance=3.14159, used=0, total=0)) == "¥3.14"


class TestUtilization:
    """Tests for BalanceData.utilization."""

    def test_percentage(self, sample_balance):
        """Used over total as an integer percentage."""
        assert sample_balance.utilization() == 50

    def test_unlimited_is_none(self, unlimited_balance):
        """Unlimited accounts have no utilization."""
        assert unlimited_balance.utilization() is None

    def test_zero_total_is_none(self):
        """A zero grant cannot be divided."""
        assert BalanceData(balance=0, used=0, total=0).utilization() is None

    def test_clamped(self):
        """Overspent accounts clamp to 100."""
        assert BalanceData(balance=-5, used=15, total=10).utilization() == 100


class TestCacheKey:
    """Tests for account identity hashing."""

    def test_stable(self):
        """The same pair always derives the same key."""
        assert cache_key("https://a.example", "sk-1") == cache_key("https://a.example", "sk-1")

    def test_different_keys_same_url(self):
        """Two credentials against one relay never share a key."""
        assert cache_key("https://a.example", "sk-1") != cache_key("https://a.example", "sk-2")

    def test_different_urls_same_key(self):
        """One credential against two relays never shares a key."""
        assert cache_key("https://a.example", "sk-1") != cache_key("https://b.example", "sk-1")

    def test_field_boundaries_do_not_collide(self):
        """Moving characters between fields changes the key."""
        assert cache_key("https://a.example/x", "y") != cache_key("https://a.example/", "xy")

    def test_trailing_slash_ignored(self):
        """A trailing slash on the base URL scopes the same account."""
        assert cache_key("https://a.example/", "sk-1") == cache_key("https://a.example", "sk-1")

    def test_hex_digest(self):
        """Keys are safe file names."""
        key = AccountIdentity(base_url="https://a.example", api_key="sk-1").cache_key()

        assert len(key) == 64
        assert all(c in "0123456789abcdef" for c in key)


class TestFormatAge:
    """Tests for format_age."""

    @pytest.mark.parametrize(
        "seconds,expected",
        [
            (None, ""),
            (0, "just now"),
            (59, "just now"),
            (60, "1m ago"),
            (3599, "59m ago"),
            (3600, "1h 0m ago"),
            (5400, "1h 30m ago"),
            (90000, "1d 1h ago"),
        ],
    )
    def test_format_age(self, seconds, expected):
        """Ages render in the largest useful unit."""
        assert format_age(seconds) == expected
