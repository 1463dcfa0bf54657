"""Rate limiting utilities."""

from datetime import datetime, timezone
from functools import lru_cache
from typing import Annotated

import redis
from fastapi import Depends, HTTPException, status

from wanderer.app.api.auth import get_current_context
from wanderer.app.config import get_settings
from wanderer.app.db.context import RequestContext
from wanderer.app.db.inmemory import InMemoryRateLimiter
from wanderer.app.db.repositories import RateLimiter, RetryAfter

PLAN_BUCKET = "plan"


def make_rate_limit_key(ctx: RequestContext, bucket: str) -> str:
    """Create rate limit key from context and bucket.

    Args:
        ctx: Request context
        bucket: Bucket name (e.g., "plan")

    Returns:
        Rate limit key
    """
    return f"{ctx.user_id}:{bucket}"


class RedisRateLimiter:
    """Fixed-window limiter whose counters live in Redis, shared by all workers."""

    def __init__(self, redis_client: redis.Redis, max_requests: int, window_seconds: int = 60) -> None:
        self._redis = redis_client
        self._max_requests = max_requests
        self._window_seconds = window_seconds

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Count this request in the current window.

        Windows are aligned to the epoch, so every worker agrees on the
        counter key; the key expires with its window.
        """
        window_index = int(now.timestamp()) // self._window_seconds
        counter_key = f"ratelimit:{key}:{window_index}"

        count = self._redis.incr(counter_key)
        if count == 1:
            self._redis.expire(counter_key, self._window_seconds)

        if count <= self._max_requests:
            return None

        window_end = (window_index + 1) * self._window_seconds
        return RetryAfter(seconds=max(1, window_end - int(now.timestamp())))


@lru_cache
def get_plan_rate_limiter() -> RateLimiter:
    """Plan-endpoint limiter: Redis when configured, in-memory otherwise."""
    settings = get_settings()
    if settings.redis_url:
        client = redis.from_url(settings.redis_url, decode_responses=True)  # type: ignore[no-untyped-call]
        return RedisRateLimiter(client, max_requests=settings.plans_per_min)
    return InMemoryRateLimiter(max_requests=settings.plans_per_min)


async def enforce_plan_rate_limit(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    limiter: Annotated[RateLimiter, Depends(get_plan_rate_limiter)],
) -> None:
    """FastAPI dependency rejecting plan requests over quota with 429."""
    retry_after = limiter.check_quota(make_rate_limit_key(ctx, PLAN_BUCKET), datetime.now(timezone.utc))

    if retry_after is not None:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many trip plans requested, please retry later",
            headers={"Retry-After": str(retry_after.seconds)},
        )
