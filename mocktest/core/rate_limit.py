"""Rate limiting behind an injectable interface.

Counters live in Redis so every API instance shares them. Callers depend on
the ``RateLimiter`` protocol and receive the implementation through FastAPI
dependency injection (``get_rate_limiter``), so tests and alternative stores
can be swapped in with ``app.dependency_overrides``.
"""

import time
from dataclasses import dataclass
from typing import Protocol

import redis
from redis.exceptions import RedisError

from mocktest.core.app_exceptions import RateLimitedError
from mocktest.core.config import settings
from mocktest.core.logging import get_logger

logger = get_logger(__name__)

_counter_store: redis.Redis | None = None


def get_counter_store() -> redis.Redis | None:
    """
    Shared Redis connection holding the counters, or None when there is none.

    Without REDIS_REQUIRED a missing URL or a failed ping only disables the
    store; the next call tries to connect again.

    Raises:
        ValueError: REDIS_REQUIRED is set but REDIS_URL is not
        RedisError: REDIS_REQUIRED is set and Redis does not answer
    """
    global _counter_store

    if _counter_store is not None or not settings.REDIS_ENABLED:
        return _counter_store

    if not settings.REDIS_URL:
        if settings.REDIS_REQUIRED:
            raise ValueError("REDIS_URL must be set when REDIS_REQUIRED=true")
        logger.warning(
            "Rate limit store not configured",
            extra={"event": "rate_limit_store_missing"},
        )
        return None

    client = redis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_connect_timeout=1,
        socket_timeout=1,
    )
    try:
        client.ping()
    except RedisError as e:
        if settings.REDIS_REQUIRED:
            raise
        logger.warning(
            "Rate limit store unreachable",
            extra={"event": "rate_limit_store_unreachable", "reason": str(e)},
        )
        return None

    logger.info("Rate limit store connected", extra={"event": "rate_limit_store_connected"})
    _counter_store = client
    return client


def counter_store_healthy() -> bool:
    store = get_counter_store()
    if store is None:
        return False
    try:
        return bool(store.ping())
    except RedisError:
        return False


@dataclass
class RateLimitResult:
    """Result of a rate limit check."""

    allowed: bool
    remaining: int
    reset_at: int  # Unix timestamp when the window resets
    retry_after: int  # Seconds until retry is allowed


class RateLimiter(Protocol):
    def check(self, scope: str, identifier: str, limit: int, window_seconds: int) -> RateLimitResult:
        ...


class RedisRateLimiter:
    """Fixed-window counter using atomic INCR + EXPIRE.

    Key format: rl:{scope}:{identifier}:{window_seconds}
    """

    def __init__(self, client: redis.Redis | None, fail_open: bool = True):
        self.client = client
        self.fail_open = fail_open

    def _unavailable(self, scope: str, identifier: str, limit: int, window_seconds: int) -> RateLimitResult:
        if self.fail_open:
            logger.warning(
                f"Redis unavailable for rate limit {scope}:{identifier}, failing open",
                extra={"scope": scope, "identifier": identifier},
            )
            return RateLimitResult(allowed=True, remaining=limit, reset_at=0, retry_after=0)
        logger.error("Redis unavailable but required for rate limiting")
        return RateLimitResult(
            allowed=False,
            remaining=0,
            reset_at=int(time.time()) + window_seconds,
            retry_after=window_seconds,
        )

    def check(self, scope: str, identifier: str, limit: int, window_seconds: int) -> RateLimitResult:
        if self.client is None:
            return self._unavailable(scope, identifier, limit, window_seconds)

        key = f"rl:{scope}:{identifier}:{window_seconds}"
        try:
            pipe = self.client.pipeline()
            pipe.incr(key)
            pipe.ttl(key)
            current_count, ttl = pipe.execute()
            if ttl is None or int(ttl) < 0:
                # First hit in the window (or a key left without expiry)
                self.client.expire(key, window_seconds)
                ttl = window_seconds
            ttl = int(ttl)
        except RedisError as e:
            logger.error(f"Rate limit check failed: {e}", exc_info=True)
            return self._unavailable(scope, identifier, limit, window_seconds)

        reset_at = int(time.time()) + (ttl or window_seconds)
        if current_count > limit:
            return RateLimitResult(allowed=False, remaining=0, reset_at=reset_at, retry_after=ttl)
        return RateLimitResult(
            allowed=True,
            remaining=max(0, limit - current_count),
            reset_at=reset_at,
            retry_after=0,
        )


def get_rate_limiter() -> RateLimiter:
    """Dependency returning the shared Redis-backed limiter."""
    return RedisRateLimiter(get_counter_store(), fail_open=not settings.REDIS_REQUIRED)


def enforce_rate_limit(
    limiter: RateLimiter,
    scope: str,
    identifier: str,
    limit: int,
    window_seconds: int,
) -> RateLimitResult:
    """Check a limit and raise ``RateLimitedError`` (429) when exceeded."""
    result = limiter.check(scope, identifier, limit, window_seconds)
    if not result.allowed:
        logger.info(
            "rate_limited",
            extra={"event": "rate_limited", "scope": scope, "identifier": identifier},
        )
        raise RateLimitedError(
            "Rate limit exceeded. Please try again later.",
            {"retry_after_seconds": result.retry_after},
        )
    return result
