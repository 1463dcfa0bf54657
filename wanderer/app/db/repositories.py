"""Repository protocol interfaces for data access."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from wanderer.app.db.context import RequestContext
from wanderer.app.models.itinerary import Itinerary, User


class DuplicateEmailError(Exception):
    """A user with this email already exists."""

    pass


class PersistenceError(Exception):
    """The backing store failed to complete an operation."""

    pass


@dataclass
class UserRecord:
    """Stored user, including the password hash."""

    user_id: UUID
    name: str
    email: str
    password_hash: str
    created_at: datetime

    def to_public(self) -> User:
        """Public profile without credentials."""
        return User(id=self.user_id, name=self.name, email=self.email, created_at=self.created_at)


class UserRepository(Protocol):
    """Repository for user accounts."""

    def create_user(self, *, name: str, email: str, password_hash: str) -> UserRecord:
        """Create a new user.

        Raises:
            DuplicateEmailError: If the email is already registered
        """
        ...

    def get_user_by_email(self, email: str) -> UserRecord | None:
        """Get user by email (case-insensitive)."""
        ...

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Get user by ID."""
        ...


class ItineraryRepository(Protocol):
    """Repository for itinerary operations.

    Every read or write is scoped to ctx.user_id; records owned by other
    users behave as if they did not exist.
    """

    def save_itinerary(self, itinerary: Itinerary, ctx: RequestContext) -> None:
        """Insert a new itinerary owned by the caller."""
        ...

    def get_itinerary(self, itinerary_id: UUID, ctx: RequestContext) -> Itinerary | None:
        """Get itinerary by ID.

        Returns:
            Itinerary or None if not found or not owned
        """
        ...

    def list_itineraries(self, ctx: RequestContext) -> list[Itinerary]:
        """List the caller's itineraries, newest first."""
        ...

    def set_favorite(
        self, itinerary_id: UUID, ctx: RequestContext, is_favorite: bool
    ) -> Itinerary | None:
        """Update the favorite flag.

        Returns:
            Updated itinerary or None if not found or not owned
        """
        ...

    def delete_itinerary(self, itinerary_id: UUID, ctx: RequestContext) -> bool:
        """Delete an itinerary.

        Returns:
            True if deleted, False if not found or not owned
        """
        ...


@dataclass
class RetryAfter:
    """Rate limit retry-after information."""

    seconds: int


class RateLimiter(Protocol):
    """Rate limiter interface."""

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available.

        Args:
            key: Rate limit key
            now: Current timestamp

        Returns:
            RetryAfter if over quota, None if allowed
        """
        ...
