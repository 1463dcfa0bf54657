"""Itinerary models - final output for user consumption."""

from datetime import datetime, timedelta
from uuid import UUID

from pydantic import ConfigDict, Field, model_validator

from wanderer.app.models.attraction import Attraction
from wanderer.app.models.common import TransportMode, WireModel


class TransportLeg(WireModel):
    """Movement from one scheduled visit to the next."""

    model_config = ConfigDict(frozen=True)

    mode: TransportMode = Field(..., alias="type")
    duration_minutes: int = Field(..., ge=0, alias="duration")
    distance_meters: float = Field(..., ge=0, alias="distance")
    cost: float = Field(0, ge=0)


class ScheduledVisit(WireModel):
    """Attraction placed into a concrete time slot."""

    model_config = ConfigDict(frozen=True)

    id: str
    attraction: Attraction
    start_time: datetime
    end_time: datetime
    transport_to_next: TransportLeg | None = None


class Itinerary(WireModel):
    """Complete trip plan for one planning request."""

    id: UUID
    user_id: UUID
    location: str
    start_date: datetime
    end_date: datetime
    visits: list[ScheduledVisit] = Field(default_factory=list, alias="items")
    total_cost: float = Field(..., ge=0)
    created_at: datetime
    is_favorite: bool = False

    @model_validator(mode="after")
    def _visits_do_not_overlap(self) -> "Itinerary":
        for prev, nxt in zip(self.visits, self.visits[1:]):
            transit = prev.transport_to_next.duration_minutes if prev.transport_to_next else 0
            if nxt.start_time < prev.end_time + timedelta(minutes=transit):
                raise ValueError(
                    f"visit {nxt.id} starts before {prev.id} ends plus transit time"
                )
        return self


class User(WireModel):
    """Public user profile (never carries credentials)."""

    id: UUID
    name: str
    email: str
    created_at: datetime
