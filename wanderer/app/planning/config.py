"""Planner constants passed explicitly into the pure planning functions."""

from dataclasses import dataclass

from wanderer.app.config import Settings
from wanderer.app.models.common import TransportMode


@dataclass(frozen=True)
class PlannerConfig:
    """Locale-specific scheduling and pricing constants.

    Currency is implicit: callers must know which locale the fees and
    meal cost were quoted in.
    """

    transit_buffer_min: int = 30
    default_transport_mode: TransportMode = TransportMode.walking
    default_transport_distance_m: float = 1000
    default_transport_cost: float = 0
    meal_cost: float = 300
    visits_per_day: int = 4

    @classmethod
    def from_settings(cls, settings: Settings) -> "PlannerConfig":
        """Build planner config from application settings."""
        return cls(
            transit_buffer_min=settings.transit_buffer_min,
            default_transport_mode=TransportMode(settings.default_transport_mode),
            default_transport_distance_m=settings.default_transport_distance_m,
            default_transport_cost=settings.default_transport_cost,
            meal_cost=settings.meal_cost,
            visits_per_day=settings.visits_per_day,
        )
