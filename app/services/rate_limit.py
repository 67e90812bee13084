"""
Fixed-window rate limiting on Redis

Counters live in Redis under "<prefix>:<client ip>" and expire with the
window. The limiter fails open: when Redis is unreachable the request is
allowed and a warning is logged.
"""

import time
from typing import Optional, Tuple

import structlog
from redis import asyncio as aioredis

from app.config import settings

logger = structlog.get_logger()

_redis_client: Optional[aioredis.Redis] = None


def get_redis_client() -> aioredis.Redis:
    """Get or create the shared Redis client"""
    global _redis_client

    if _redis_client is None:
        _redis_client = aioredis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
    return _redis_client


class RateLimiter:
    """INCR + EXPIRE counter per key and window"""

    def __init__(self, client: Optional[aioredis.Redis]):
        self.client = client

    async def hit(self, key: str, limit: int, window_seconds: int) -> Tuple[bool, int, int]:
        """Count one request; returns (allowed, count, retry_after_seconds)"""
        if self.client is None:
            return True, 0, 0

        window = int(time.time()) // window_seconds
        redis_key = f"{key}:{window}"
        try:
            count = await self.client.incr(redis_key)
            if count == 1:
                await self.client.expire(redis_key, window_seconds)
        except Exception as e:
            logger.warning("Rate limit check failed, allowing request", key=key, error=str(e))
            return True, 0, 0

        retry_after = window_seconds - int(time.time()) % window_seconds
        return count <= limit, count, retry_after


def get_rate_limiter() -> RateLimiter:
    """Dependency: the process-wide limiter, or a no-op one when disabled"""
    if not settings.rate_limit_enabled:
        return RateLimiter(None)
    return RateLimiter(get_redis_client())
