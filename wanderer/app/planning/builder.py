"""Greedy itinerary builder - packs attractions into a time window."""

from collections.abc import Sequence
from datetime import datetime, timedelta

from wanderer.app.models.attraction import Attraction
from wanderer.app.models.itinerary import ScheduledVisit, TransportLeg
from wanderer.app.planning.config import PlannerConfig


def available_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between start and end, floored."""
    return (end - start) // timedelta(minutes=1)


def build_schedule(
    attractions: Sequence[Attraction],
    start: datetime,
    end: datetime,
    config: PlannerConfig,
) -> list[ScheduledVisit]:
    """Schedule attractions first-fit in input order.

    Every attraction after the first costs its visit duration plus the
    transit buffer. Scheduling stops at the first attraction that does not
    fit the remaining time; later (possibly shorter) attractions are never
    tried. The last emitted visit carries no transport leg.

    Args:
        attractions: Ranked attraction candidates (order is preserved)
        start: Window start, caller guarantees start < end
        end: Window end
        config: Transit buffer and default transport constants

    Returns:
        Ordered visits, possibly empty when nothing fits
    """
    buffer = config.transit_buffer_min
    remaining = available_minutes(start, end)
    prev_end: datetime | None = None

    slots: list[tuple[Attraction, datetime, datetime]] = []
    for attraction in attractions:
        time_needed = attraction.estimated_duration + (buffer if prev_end is not None else 0)
        if time_needed > remaining:
            break

        # Never computed past end: the fit check above bounds it.
        visit_start = start if prev_end is None else prev_end + timedelta(minutes=buffer)
        visit_end = visit_start + timedelta(minutes=attraction.estimated_duration)
        slots.append((attraction, visit_start, visit_end))

        prev_end = visit_end
        remaining -= time_needed

    leg = TransportLeg(
        type=config.default_transport_mode,
        duration=buffer,
        distance=config.default_transport_distance_m,
        cost=config.default_transport_cost,
    )

    visits: list[ScheduledVisit] = []
    for i, (attraction, visit_start, visit_end) in enumerate(slots):
        is_last = i == len(slots) - 1
        visits.append(
            ScheduledVisit(
                id=f"visit_{visit_start:%Y%m%d%H%M}_{i}",
                attraction=attraction,
                start_time=visit_start,
                end_time=visit_end,
                transport_to_next=None if is_last else leg,
            )
        )

    return visits
