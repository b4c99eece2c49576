"""
Fixed-window rate limiting backed by Redis.

Key pattern: "ratelimit:{api_name}:{identifier}". The first hit in a
window sets the key's TTL; later hits only INCR.
"""
import logging
import time
from dataclasses import dataclass
from typing import Optional

from vault.config import get_settings
from vault.database.connections import get_redis_client

logger = logging.getLogger(__name__)


@dataclass
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_at: int  # unix seconds
    retry_after: Optional[int] = None

    def headers(self) -> dict[str, str]:
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_at),
        }
        if self.retry_after is not None:
            headers["Retry-After"] = str(self.retry_after)
        return headers


async def check_rate_limit(
    identifier: str,
    api_name: str = "default",
    limit: Optional[int] = None,
    window_seconds: Optional[int] = None,
) -> RateLimitResult:
    """
    Count a request and decide whether it is allowed.

    Args:
        identifier: Client IP address or user identifier
        api_name: Which limit to apply ("search", "popular", "favorites", "admin")
        limit: Max requests allowed (defaults to config value)
        window_seconds: Time window in seconds (defaults to config value)

    Returns:
        RateLimitResult; requests are allowed when Redis is unreachable
    """
    settings = get_settings()
    limit = limit or settings.rate_limit_for(api_name)
    window_seconds = window_seconds or settings.rate_limit_window_seconds
    key = f"ratelimit:{api_name}:{identifier}"
    now = int(time.time())

    try:
        redis = await get_redis_client()
        current = await redis.incr(key)
        if current == 1:
            await redis.expire(key, window_seconds)
        ttl = await redis.ttl(key)
    except Exception as e:
        logger.warning(f"Rate limiter unavailable, allowing request: {e}")
        return RateLimitResult(allowed=True, limit=limit, remaining=limit, reset_at=now + window_seconds)

    if ttl is None or ttl < 0:
        ttl = window_seconds
    reset_at = now + ttl

    if current > limit:
        return RateLimitResult(
            allowed=False,
            limit=limit,
            remaining=0,
            reset_at=reset_at,
            retry_after=ttl,
        )
    return RateLimitResult(allowed=True, limit=limit, remaining=limit - current, reset_at=reset_at)
