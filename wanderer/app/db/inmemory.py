"""In-memory implementations of repository interfaces."""

import threading
import uuid
from datetime import datetime, timedelta, timezone

from wanderer.app.db.context import RequestContext
from wanderer.app.db.repositories import DuplicateEmailError, RetryAfter, UserRecord
from wanderer.app.models.itinerary import Itinerary


class InMemoryUserRepository:
    """In-memory implementation of UserRepository."""

    def __init__(self) -> None:
        self._users: dict[uuid.UUID, UserRecord] = {}
        self._by_email: dict[str, uuid.UUID] = {}
        self._lock = threading.Lock()

    def create_user(self, *, name: str, email: str, password_hash: str) -> UserRecord:
        """Create a new user."""
        key = email.lower()
        with self._lock:
            if key in self._by_email:
                raise DuplicateEmailError(email)

            record = UserRecord(
                user_id=uuid.uuid4(),
                name=name,
                email=key,
                password_hash=password_hash,
                created_at=datetime.now(timezone.utc),
            )

            self._users[record.user_id] = record
            self._by_email[key] = record.user_id
        return record

    def get_user_by_email(self, email: str) -> UserRecord | None:
        """Get user by email."""
        user_id = self._by_email.get(email.lower())
        return self._users.get(user_id) if user_id else None

    def get_user(self, user_id: uuid.UUID) -> UserRecord | None:
        """Get user by ID."""
        return self._users.get(user_id)


class InMemoryItineraryRepository:
    """In-memory implementation of ItineraryRepository."""

    def __init__(self) -> None:
        self._itineraries: dict[uuid.UUID, Itinerary] = {}
        self._lock = threading.Lock()

    def save_itinerary(self, itinerary: Itinerary, ctx: RequestContext) -> None:
        """Save a new itinerary."""
        # Ownership always comes from the caller
        with self._lock:
            self._itineraries[itinerary.id] = itinerary.model_copy(update={"user_id": ctx.user_id})

    def get_itinerary(self, itinerary_id: uuid.UUID, ctx: RequestContext) -> Itinerary | None:
        """Get itinerary by ID."""
        itinerary = self._itineraries.get(itinerary_id)

        # Enforce ownership
        if itinerary is None or itinerary.user_id != ctx.user_id:
            return None

        return itinerary

    def list_itineraries(self, ctx: RequestContext) -> list[Itinerary]:
        """List itineraries for user, newest first."""
        with self._lock:
            stored = list(reversed(self._itineraries.values()))
        results = [it for it in stored if it.user_id == ctx.user_id]
        results.sort(key=lambda x: x.created_at, reverse=True)
        return results

    def set_favorite(
        self, itinerary_id: uuid.UUID, ctx: RequestContext, is_favorite: bool
    ) -> Itinerary | None:
        """Update the favorite flag."""
        with self._lock:
            itinerary = self.get_itinerary(itinerary_id, ctx)
            if itinerary is None:
                return None

            updated = itinerary.model_copy(update={"is_favorite": is_favorite})
            self._itineraries[itinerary_id] = updated
        return updated

    def delete_itinerary(self, itinerary_id: uuid.UUID, ctx: RequestContext) -> bool:
        """Delete an itinerary."""
        with self._lock:
            if self.get_itinerary(itinerary_id, ctx) is None:
                return False

            del self._itineraries[itinerary_id]
        return True


class InMemoryRateLimiter:
    """In-memory implementation of RateLimiter using fixed window."""

    def __init__(self, max_requests: int, window_seconds: int = 60) -> None:
        """Initialize rate limiter.

        Args:
            max_requests: Maximum requests per window
            window_seconds: Window size in seconds (default 60)
        """
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._windows: dict[str, tuple[datetime, int]] = {}
        self._lock = threading.Lock()

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available.

        Windows that have ended are dropped on every call, so keys for
        callers that went quiet do not accumulate.
        """
        window_length = timedelta(seconds=self._window_seconds)

        with self._lock:
            self._prune_expired(now, window_length)

            window = self._windows.get(key)
            if window is None:
                self._windows[key] = (now, 1)
                return None

            window_start, count = window
            if count >= self._max_requests:
                seconds_remaining = int((window_start + window_length - now).total_seconds())
                return RetryAfter(seconds=max(1, seconds_remaining))

            self._windows[key] = (window_start, count + 1)
        return None

    def _prune_expired(self, now: datetime, window_length: timedelta) -> None:
        expired = [k for k, (start, _) in self._windows.items() if now >= start + window_length]
        for k in expired:
            del self._windows[k]
