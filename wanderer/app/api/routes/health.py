"""Liveness and readiness probes.

/health answers as long as the process runs. /healthz also pings the
configured database and Redis; backends that are not configured count as
healthy since the service falls back to in-process stores.
"""

import logging

import redis
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from wanderer.app.config import Settings, get_settings
from wanderer.app.db.engine import get_engine

router = APIRouter()
logger = logging.getLogger(__name__)


async def check_db(settings: Settings) -> tuple[bool, str]:
    """Ping the itinerary database.

    Returns:
        (is_ok, component_status)
    """
    if not settings.database_url:
        return (True, "in_memory")

    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"Database health check failed: {e}")
        return (False, f"error: {type(e).__name__}")

    return (True, "ok")


async def check_redis(settings: Settings) -> tuple[bool, str]:
    """Ping the rate limit backend.

    Returns:
        (is_ok, component_status)
    """
    if not settings.redis_url:
        return (True, "not_configured")

    try:
        client = redis.from_url(settings.redis_url, decode_responses=True)  # type: ignore[no-untyped-call]
        client.ping()
    except (redis.RedisError, ValueError) as e:
        logger.warning(f"Redis health check failed: {e}")
        return (False, f"error: {type(e).__name__}")

    return (True, "ok")


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@router.get("/healthz")
async def healthz() -> JSONResponse:
    """Readiness probe: 200 when every configured backend answers, else 503."""
    settings = get_settings()

    db_ok, db_status = await check_db(settings)
    redis_ok, redis_status = await check_redis(settings)

    healthy = db_ok and redis_ok
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ok" if healthy else "degraded",
            "components": {"db": db_status, "redis": redis_status},
        },
    )
