"""Models package - re-exports for convenience."""

from wanderer.app.models.attraction import Attraction
from wanderer.app.models.common import Geo, TransportMode, WireModel
from wanderer.app.models.itinerary import Itinerary, ScheduledVisit, TransportLeg, User

__all__ = [
    # Common
    "Geo",
    "TransportMode",
    "WireModel",
    # Attractions
    "Attraction",
    # Itinerary
    "Itinerary",
    "ScheduledVisit",
    "TransportLeg",
    "User",
]
