"""
Tests for Redis fixed-window rate limiting.
"""

from unittest.mock import patch

import pytest

from vault.core.rate_limit import check_rate_limit


class TestCheckRateLimit:

    @pytest.mark.asyncio
    async def test_requests_allowed_up_to_limit(self, mock_rate_limit_redis):
        results = [await check_rate_limit("1.2.3.4", "search", limit=2, window_seconds=60) for _ in range(3)]

        assert [r.allowed for r in results] == [True, True, False]
        assert results[0].remaining == 1
        assert results[2].retry_after is not None
        assert "Retry-After" in results[2].headers()

    @pytest.mark.asyncio
    async def test_counters_separate_per_api_and_client(self, mock_rate_limit_redis):
        await check_rate_limit("1.2.3.4", "search", limit=1)

        assert (await check_rate_limit("1.2.3.4", "popular", limit=1)).allowed
        assert (await check_rate_limit("5.6.7.8", "search", limit=1)).allowed
        assert await mock_rate_limit_redis.get("ratelimit:search:1.2.3.4") == "1"

    @pytest.mark.asyncio
    async def test_window_set_on_first_hit(self, mock_rate_limit_redis):
        await check_rate_limit("1.2.3.4", "admin", window_seconds=30)

        ttl = await mock_rate_limit_redis.ttl("ratelimit:admin:1.2.3.4")
        assert 0 < ttl <= 30

    @pytest.mark.asyncio
    async def test_configured_limit_used_by_default(self, fresh_settings):
        result = await check_rate_limit("1.2.3.4", "popular")

        assert result.limit == fresh_settings.rate_limit_popular

    @pytest.mark.asyncio
    async def test_redis_outage_allows_request(self):
        async def broken():
            raise ConnectionError("redis down")

        with patch("vault.core.rate_limit.get_redis_client", side_effect=broken):
            result = await check_rate_limit("1.2.3.4", "search")

        assert result.allowed is True
