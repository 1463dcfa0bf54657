"""Trip planning pipeline: fetch attractions, build schedule, price it."""

import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from wanderer.app.llm.client import AttractionSource, AttractionSourceError
from wanderer.app.models.attraction import Attraction
from wanderer.app.models.itinerary import Itinerary
from wanderer.app.planning.builder import build_schedule
from wanderer.app.planning.config import PlannerConfig
from wanderer.app.planning.cost import compute_total_cost
from wanderer.app.planning.fallback import fallback_attractions
from wanderer.app.utils.logging import StructuredPlanLogger
from wanderer.app.utils.metrics import PrometheusPlanMetrics

logger = logging.getLogger(__name__)

FALLBACK_SOURCE = "fallback"


class NoAttractionsFoundError(Exception):
    """No attraction candidates exist for the requested location."""

    pass


@dataclass(frozen=True)
class AttractionBatch:
    """Attractions for one planning request and where they came from."""

    attractions: list[Attraction]
    source: str


async def gather_attractions(
    source: AttractionSource,
    location: str,
    start: datetime,
    end: datetime,
    max_count: int,
    metrics: PrometheusPlanMetrics | None = None,
) -> AttractionBatch:
    """Fetch attractions once, substituting the fallback table on failure.

    The upstream call is never retried; a single failure selects the
    static entry for the location, which is returned unchanged.
    """
    metrics = metrics or PrometheusPlanMetrics()
    started = time.perf_counter()

    try:
        attractions = await source.fetch(location, start, end, max_count)
    except AttractionSourceError as e:
        logger.error(f"Attraction fetch failed for {location!r}: {e}")
        metrics.record_fetch_latency(source.name, (time.perf_counter() - started) * 1000)
        metrics.inc_source(FALLBACK_SOURCE)
        return AttractionBatch(attractions=fallback_attractions(location), source=FALLBACK_SOURCE)

    metrics.record_fetch_latency(source.name, (time.perf_counter() - started) * 1000)
    metrics.inc_source(source.name)
    return AttractionBatch(attractions=attractions, source=source.name)


def assemble_itinerary(
    *,
    user_id: uuid.UUID,
    location: str,
    start: datetime,
    end: datetime,
    attractions: list[Attraction],
    config: PlannerConfig,
    created_at: datetime | None = None,
) -> Itinerary:
    """Build and price a schedule, wrapping it in a new Itinerary."""
    visits = build_schedule(attractions, start, end, config)

    return Itinerary(
        id=uuid.uuid4(),
        user_id=user_id,
        location=location,
        start_date=start,
        end_date=end,
        visits=visits,
        total_cost=compute_total_cost(visits, config),
        created_at=created_at or datetime.now(timezone.utc),
    )


async def plan_trip(
    *,
    source: AttractionSource,
    user_id: uuid.UUID,
    location: str,
    start: datetime,
    end: datetime,
    config: PlannerConfig,
    max_attractions: int,
    metrics: PrometheusPlanMetrics | None = None,
    plan_logger: StructuredPlanLogger | None = None,
) -> Itinerary:
    """Plan a trip end to end (without persisting it).

    An empty attraction list is reported as NoAttractionsFoundError. A
    non-empty list where nothing fits the window is a successful plan
    with zero visits.

    Raises:
        NoAttractionsFoundError: If neither the source nor the fallback had candidates
    """
    metrics = metrics or PrometheusPlanMetrics()
    plan_logger = plan_logger or StructuredPlanLogger()
    started = time.perf_counter()

    batch = await gather_attractions(source, location, start, end, max_attractions, metrics)

    if not batch.attractions:
        metrics.inc_plan("not_found")
        plan_logger.log_plan(
            user_id=user_id,
            location=location,
            outcome="not_found",
            source=batch.source,
            attraction_count=0,
            visit_count=0,
            total_cost=None,
            latency_ms=(time.perf_counter() - started) * 1000,
        )
        raise NoAttractionsFoundError("No attractions found near the specified location")

    itinerary = assemble_itinerary(
        user_id=user_id,
        location=location,
        start=start,
        end=end,
        attractions=batch.attractions,
        config=config,
    )

    metrics.inc_plan("success")
    plan_logger.log_plan(
        user_id=user_id,
        location=location,
        outcome="success",
        source=batch.source,
        attraction_count=len(batch.attractions),
        visit_count=len(itinerary.visits),
        total_cost=itinerary.total_cost,
        latency_ms=(time.perf_counter() - started) * 1000,
    )

    return itinerary
