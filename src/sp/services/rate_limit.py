"""Fixed-window request rate limiting.

The middleware depends only on the :class:`RateLimiter` interface. The
Redis implementation keeps the counters in a shared store so limits hold
across every process serving the API; the in-memory implementation is for
single-process development and tests.
"""

import time
from dataclasses import dataclass
from typing import Dict, Optional, Protocol, Tuple

from redis import asyncio as aioredis

from sp.config import get_settings


@dataclass
class RateLimitResult:
    """Outcome of a rate-limit check. ``reset_time`` is epoch milliseconds."""

    allowed: bool
    remaining: int
    reset_time: int


class RateLimiter(Protocol):
    limit: int

    async def check(self, key: str) -> RateLimitResult:
        ...


def _now_ms() -> int:
    return int(time.time() * 1000)


class RedisRateLimiter:
    """Rate limiter backed by Redis ``INCR`` + ``PEXPIRE``."""

    def __init__(
        self,
        limit: Optional[int] = None,
        window_seconds: Optional[int] = None,
        redis_url: Optional[str] = None,
    ):
        settings = get_settings()
        self.limit = limit or settings.rate_limit_requests
        self.window_ms = (window_seconds or settings.rate_limit_window) * 1000
        self.redis_url = redis_url or settings.redis_url
        self._redis: Optional[aioredis.Redis] = None

    async def _get_redis(self) -> aioredis.Redis:
        if not self._redis:
            self._redis = aioredis.from_url(self.redis_url)
        return self._redis

    def _key(self, key: str) -> str:
        return f"rate_limit:{key}"

    async def check(self, key: str) -> RateLimitResult:
        redis = await self._get_redis()
        redis_key = self._key(key)

        count = await redis.incr(redis_key)
        if count == 1:
            await redis.pexpire(redis_key, self.window_ms)
            ttl = self.window_ms
        else:
            ttl = await redis.pttl(redis_key)
            if ttl is None or ttl < 0:
                # Key lost its expiry; start a fresh window
                await redis.pexpire(redis_key, self.window_ms)
                ttl = self.window_ms

        reset_time = _now_ms() + ttl
        if count > self.limit:
            return RateLimitResult(allowed=False, remaining=0, reset_time=reset_time)
        return RateLimitResult(
            allowed=True, remaining=self.limit - count, reset_time=reset_time
        )


class InMemoryRateLimiter:
    """Per-process rate limiter."""

    max_entries = 1000

    def __init__(self, limit: Optional[int] = None, window_seconds: Optional[int] = None):
        settings = get_settings()
        self.limit = limit or settings.rate_limit_requests
        self.window_ms = (window_seconds or settings.rate_limit_window) * 1000
        self.windows: Dict[str, Tuple[int, int]] = {}

    async def check(self, key: str) -> RateLimitResult:
        now = _now_ms()
        record = self.windows.get(key)

        if record is None or now > record[1]:
            reset_time = now + self.window_ms
            self.windows[key] = (1, reset_time)
            if len(self.windows) > self.max_entries:
                self._prune(now)
            return RateLimitResult(
                allowed=True, remaining=self.limit - 1, reset_time=reset_time
            )

        count, reset_time = record
        if count >= self.limit:
            return RateLimitResult(allowed=False, remaining=0, reset_time=reset_time)

        count += 1
        self.windows[key] = (count, reset_time)
        return RateLimitResult(
            allowed=True, remaining=self.limit - count, reset_time=reset_time
        )

    def _prune(self, now: int) -> None:
        expired = [k for k, (_, reset) in self.windows.items() if now > reset]
        for k in expired:
            del self.windows[k]


def create_rate_limiter() -> RateLimiter:
    """Build the limiter selected by ``SP_RATE_LIMIT_BACKEND``."""
    settings = get_settings()
    if settings.rate_limit_backend == "memory":
        return InMemoryRateLimiter()
    return RedisRateLimiter()
