"""Attraction model - candidate points of interest for a trip."""

from pydantic import ConfigDict, Field

from wanderer.app.models.common import Geo, WireModel

MIN_RATING = 3.0
MAX_RATING = 5.0
MIN_DURATION_MIN = 30
MAX_DURATION_MIN = 480


class Attraction(WireModel):
    """Point of interest returned by an attraction source.

    Rating and duration bounds are enforced here; sources clamp raw values
    into range before constructing the model.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    category: str
    rating: float = Field(..., ge=MIN_RATING, le=MAX_RATING)
    coordinates: Geo
    estimated_duration: int = Field(..., ge=MIN_DURATION_MIN, le=MAX_DURATION_MIN)
    entry_fee: float = Field(0, ge=0)
