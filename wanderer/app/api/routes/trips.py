"""Trip endpoints - plan, list, fetch, favorite and delete itineraries."""

import uuid
from datetime import datetime
from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import StringConstraints, model_validator
from starlette.concurrency import run_in_threadpool

from wanderer.app.api.auth import get_current_context
from wanderer.app.config import Settings, get_settings
from wanderer.app.db.context import RequestContext
from wanderer.app.db.engine import get_itinerary_repository
from wanderer.app.db.repositories import ItineraryRepository
from wanderer.app.llm.client import AttractionSource, get_attraction_source
from wanderer.app.models.common import WireModel
from wanderer.app.models.itinerary import Itinerary, TransportLeg
from wanderer.app.planning.config import PlannerConfig
from wanderer.app.planning.service import NoAttractionsFoundError, plan_trip
from wanderer.app.planning.transport import suggest_transport_options
from wanderer.app.ratelimit import enforce_plan_rate_limit

router = APIRouter(prefix="/trips", tags=["trips"])

NOT_FOUND = "Itinerary not found"


class TripPlanRequest(WireModel):
    """Request body for POST /trips/plan."""

    start_date: datetime
    end_date: datetime
    location: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

    @model_validator(mode="after")
    def _check_window(self) -> "TripPlanRequest":
        if (self.start_date.tzinfo is None) != (self.end_date.tzinfo is None):
            raise ValueError("Start and end date must both include or both omit a timezone")
        if self.start_date >= self.end_date:
            raise ValueError("End date must be after start date")
        return self


class TripPlanResponse(WireModel):
    """Response for POST /trips/plan and GET /trips/{id}."""

    success: bool
    itinerary: Itinerary | None = None
    message: str | None = None


class ItineraryListResponse(WireModel):
    """Response for GET /trips."""

    success: bool
    itineraries: list[Itinerary]
    total: int


class FavoriteRequest(WireModel):
    """Request body for PATCH /trips/{id}/favorite."""

    is_favorite: bool


class DeleteResponse(WireModel):
    """Response for DELETE /trips/{id}."""

    success: bool
    message: str


class TransportOptionsResponse(WireModel):
    """Response for GET /trips/transport-options."""

    success: bool
    options: list[TransportLeg]


@lru_cache
def get_default_attraction_source() -> AttractionSource:
    """Process-wide attraction source built from settings."""
    return get_attraction_source(get_settings())


@router.post(
    "/plan",
    response_model=TripPlanResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(enforce_plan_rate_limit)],
)
async def plan(
    request: TripPlanRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[ItineraryRepository, Depends(get_itinerary_repository)],
    source: Annotated[AttractionSource, Depends(get_default_attraction_source)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TripPlanResponse:
    """Plan a trip for the caller and persist the itinerary.

    Args:
        request: Location and trip window
        ctx: Request context (user_id)
        store: Itinerary store
        source: Attraction source
        settings: Planner constants

    Returns:
        The new itinerary (zero visits is still a success)
    """
    try:
        itinerary = await plan_trip(
            source=source,
            user_id=ctx.user_id,
            location=request.location,
            start=request.start_date,
            end=request.end_date,
            config=PlannerConfig.from_settings(settings),
            max_attractions=settings.max_attractions,
        )
    except NoAttractionsFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    await run_in_threadpool(store.save_itinerary, itinerary, ctx)

    return TripPlanResponse(success=True, itinerary=itinerary, message="Trip planned successfully")


@router.get("", response_model=ItineraryListResponse, response_model_exclude_none=True)
def list_trips(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[ItineraryRepository, Depends(get_itinerary_repository)],
) -> ItineraryListResponse:
    """List the caller's itineraries, newest first."""
    itineraries = store.list_itineraries(ctx)
    return ItineraryListResponse(success=True, itineraries=itineraries, total=len(itineraries))


@router.get("/transport-options", response_model=TransportOptionsResponse)
def transport_options(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    distance_m: Annotated[float, Query(alias="distanceM", ge=0)],
) -> TransportOptionsResponse:
    """Suggest transport modes for a distance in meters."""
    return TransportOptionsResponse(success=True, options=suggest_transport_options(distance_m))


@router.get("/{itinerary_id}", response_model=TripPlanResponse, response_model_exclude_none=True)
def get_trip(
    itinerary_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[ItineraryRepository, Depends(get_itinerary_repository)],
) -> TripPlanResponse:
    """Fetch one of the caller's itineraries."""
    itinerary = store.get_itinerary(itinerary_id, ctx)

    if itinerary is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)

    return TripPlanResponse(success=True, itinerary=itinerary)


@router.patch(
    "/{itinerary_id}/favorite", response_model=TripPlanResponse, response_model_exclude_none=True
)
def set_favorite(
    itinerary_id: uuid.UUID,
    request: FavoriteRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[ItineraryRepository, Depends(get_itinerary_repository)],
) -> TripPlanResponse:
    """Mark or unmark an itinerary as favorite."""
    itinerary = store.set_favorite(itinerary_id, ctx, request.is_favorite)

    if itinerary is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)

    return TripPlanResponse(success=True, itinerary=itinerary)


@router.delete("/{itinerary_id}", response_model=DeleteResponse)
def delete_trip(
    itinerary_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[ItineraryRepository, Depends(get_itinerary_repository)],
) -> DeleteResponse:
    """Delete one of the caller's itineraries."""
    if not store.delete_itinerary(itinerary_id, ctx):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)

    return DeleteResponse(success=True, message="Itinerary deleted")
