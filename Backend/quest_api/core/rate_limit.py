"""
Per-key fixed-window rate limiting for the Apple Health webhook.

One limiter is built per application (see build_rate_limiter) and handed to
request handlers through a dependency, never imported as a global.

InMemoryRateLimiter keeps its counters in process memory: they do not
survive a restart and are not shared between instances. Finished windows
are dropped at most once per window length. Use the Redis backend when
running more than one API process.
"""
import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

import redis

from quest_api.config import (
    WEBHOOK_RATE_LIMIT_BACKEND,
    WEBHOOK_RATE_LIMIT_MAX,
    WEBHOOK_RATE_LIMIT_WINDOW_SECONDS,
)
from quest_api.core.exceptions import RateLimitedError

logger = logging.getLogger(__name__)


class RateLimiter(Protocol):
    max_requests: int
    window_seconds: int

    def hit(self, key: str) -> None:
        """Count one request for key; raise RateLimitedError when over the limit."""


@dataclass
class _Window:
    count: int
    reset_at: float


class InMemoryRateLimiter:
    def __init__(
        self,
        max_requests: int = WEBHOOK_RATE_LIMIT_MAX,
        window_seconds: int = WEBHOOK_RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._next_prune: Optional[float] = None
        self._lock = threading.Lock()

    def hit(self, key: str) -> None:
        with self._lock:
            now = self._clock()
            self._prune_expired(now)
            window = self._windows.get(key)

            if window is None or now > window.reset_at:
                self._windows[key] = _Window(count=1, reset_at=now + self.window_seconds)
                return

            if window.count >= self.max_requests:
                retry_after = max(1, math.ceil(window.reset_at - now))
                logger.warning("Rate limit exceeded for API key %s...", key[:8])
                raise RateLimitedError(
                    retry_after,
                    detail=f"Rate limit exceeded. Maximum {self.max_requests} requests per window.",
                )

            window.count += 1

    def _prune_expired(self, now: float) -> None:
        """Drop finished windows, at most once per window length. Caller holds the lock."""
        if self._next_prune is not None and now < self._next_prune:
            return
        expired = [key for key, window in self._windows.items() if now > window.reset_at]
        for key in expired:
            del self._windows[key]
        self._next_prune = now + self.window_seconds

    def size(self) -> int:
        with self._lock:
            return len(self._windows)

    def count(self, key: str) -> int:
        with self._lock:
            window = self._windows.get(key)
            return window.count if window else 0

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
            self._next_prune = None


class RedisRateLimiter:
    """Same window semantics, counters held in Redis under rate_limit:webhook:<key>."""

    NAMESPACE = "rate_limit:webhook:"

    def __init__(
        self,
        client: redis.Redis,
        max_requests: int = WEBHOOK_RATE_LIMIT_MAX,
        window_seconds: int = WEBHOOK_RATE_LIMIT_WINDOW_SECONDS,
    ):
        self.client = client
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    def _key(self, key: str) -> str:
        return f"{self.NAMESPACE}{key}"

    def hit(self, key: str) -> None:
        redis_key = self._key(key)
        pipe = self.client.pipeline()
        pipe.incr(redis_key)
        pipe.ttl(redis_key)
        count, ttl = pipe.execute()

        if count == 1 or ttl is None or ttl < 0:
            # first hit of a new window (or a key that lost its expiry)
            self.client.expire(redis_key, self.window_seconds)
            ttl = self.window_seconds

        if count > self.max_requests:
            logger.warning("Rate limit exceeded for API key %s...", key[:8])
            raise RateLimitedError(
                max(1, int(ttl)),
                detail=f"Rate limit exceeded. Maximum {self.max_requests} requests per window.",
            )


def build_rate_limiter(backend: Optional[str] = None) -> RateLimiter:
    backend = (backend or WEBHOOK_RATE_LIMIT_BACKEND).lower()
    if backend == "redis":
        from quest_api.core.redis_kv import get_redis
        return RedisRateLimiter(get_redis())
    if backend != "memory":
        raise ValueError(f"Unknown rate limit backend '{backend}'")
    return InMemoryRateLimiter()
