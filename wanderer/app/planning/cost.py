"""Cost aggregation for a built schedule."""

import math
from collections.abc import Sequence

from wanderer.app.models.itinerary import ScheduledVisit
from wanderer.app.planning.config import PlannerConfig

MEALS_PER_DAY = 2


def estimate_days(visit_count: int, visits_per_day: int) -> int:
    """Estimated trip days from the visit count alone.

    Calendar days spanned by the window are deliberately ignored.
    """
    return math.ceil(visit_count / visits_per_day)


def compute_total_cost(visits: Sequence[ScheduledVisit], config: PlannerConfig) -> float:
    """Sum entry fees, transport costs and the meal allowance.

    Args:
        visits: Visits produced by build_schedule
        config: Meal cost and visits-per-day constants

    Returns:
        Non-negative total in the locale's implicit currency
    """
    total: float = 0
    for visit in visits:
        total += visit.attraction.entry_fee
        if visit.transport_to_next is not None:
            total += visit.transport_to_next.cost

    days = estimate_days(len(visits), config.visits_per_day)
    total += days * MEALS_PER_DAY * config.meal_cost

    return total
