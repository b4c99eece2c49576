"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with backend-specific helpers
for testing FastAPI routes and services.
"""

from unittest.mock import AsyncMock, patch

import pytest


# =============================================================================
# Connection Override Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def mock_rate_limit_redis():
    """
    Route the rate limiter to a per-test fakeredis instance.

    Requests are counted exactly as in production, without a server.
    """
    import fakeredis.aioredis

    redis_client = fakeredis.aioredis.FakeRedis(decode_responses=True)

    async def _get():
        return redis_client

    with patch("vault.core.rate_limit.get_redis_client", side_effect=_get):
        yield redis_client


@pytest.fixture
def healthy_connections():
    """Patch readiness probes so MongoDB and Redis answer."""
    ping_mongo = AsyncMock(return_value=None)
    ping_redis = AsyncMock(return_value=None)

    with patch("vault.routers.health.ping_mongo", ping_mongo), \
         patch("vault.routers.health.ping_redis", ping_redis):
        yield ping_mongo, ping_redis


# =============================================================================
# Response Assertion Helpers
# =============================================================================

@pytest.fixture
def assert_error_response():
    """Helper to assert error response structure."""
    def _assert(response, status_code: int, detail_contains: str = None):
        assert response.status_code == status_code
        data = response.json()
        assert "detail" in data
        if detail_contains:
            assert detail_contains.lower() in data["detail"].lower()
    return _assert
