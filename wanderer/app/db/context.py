"""Request context for ownership enforcement."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class RequestContext:
    """Request context carrying the authenticated user identity.

    Used to enforce ownership boundaries in all itinerary store operations.
    """

    user_id: UUID
