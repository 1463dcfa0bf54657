"""Ownership-safe query helpers."""

from sqlalchemy.orm import Query, Session

from wanderer.app.db.context import RequestContext
from wanderer.app.db.models import Itinerary


def query_itineraries(session: Session, ctx: RequestContext) -> Query:
    """Query itinerary table with user scoping enforced.

    Args:
        session: SQLAlchemy session
        ctx: Request context with user_id

    Returns:
        Query filtered by user_id
    """
    return session.query(Itinerary).filter(Itinerary.user_id == ctx.user_id)
