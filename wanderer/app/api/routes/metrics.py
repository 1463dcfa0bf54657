"""Prometheus scrape endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Expose the planning counters and attraction fetch latency histogram."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
