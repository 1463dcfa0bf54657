"""Integration tests for the SQL repositories on SQLite."""

import uuid
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import Session

from wanderer.app.db.context import RequestContext
from wanderer.app.db.models import Base
from wanderer.app.db.repositories import DuplicateEmailError, PersistenceError
from wanderer.app.db.sql_repositories import SqlItineraryRepository, SqlUserRepository
from wanderer.app.models.attraction import Attraction
from wanderer.app.models.itinerary import Itinerary
from wanderer.app.planning.config import PlannerConfig
from wanderer.app.planning.service import assemble_itinerary

START = datetime(2025, 6, 14, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def users(sqlite_session: Session) -> SqlUserRepository:
    """User repository on the test database."""
    return SqlUserRepository(sqlite_session)


@pytest.fixture
def itineraries(sqlite_session: Session) -> SqlItineraryRepository:
    """Itinerary repository on the test database."""
    return SqlItineraryRepository(sqlite_session)


@pytest.fixture
def owner(users: SqlUserRepository) -> RequestContext:
    """Context for a stored user."""
    record = users.create_user(name="Asha", email="asha@example.com", password_hash="hash")
    return RequestContext(user_id=record.user_id)


@pytest.fixture
def make_itinerary(
    make_attraction: Callable[..., Attraction], planner_config: PlannerConfig
) -> Callable[..., Itinerary]:
    """Factory for planned itineraries."""

    def _make(user_id: uuid.UUID, created_offset_min: int = 0, location: str = "Chennai") -> Itinerary:
        return assemble_itinerary(
            user_id=user_id,
            location=location,
            start=START,
            end=START + timedelta(hours=6),
            attractions=[make_attraction(90, fee=40), make_attraction(60)],
            config=planner_config,
            created_at=START + timedelta(minutes=created_offset_min),
        )

    return _make


class TestSqlUserRepository:
    """User accounts."""

    def test_create_and_fetch(self, users: SqlUserRepository) -> None:
        """Users are retrievable by id and by email in any case."""
        record = users.create_user(name="Ravi", email="Ravi@Example.com", password_hash="h")

        assert record.email == "ravi@example.com"
        by_id = users.get_user(record.user_id)
        by_email = users.get_user_by_email("RAVI@example.COM")
        assert by_id is not None and by_id.name == "Ravi"
        assert by_email is not None and by_email.user_id == record.user_id

    def test_duplicate_email_raises(self, users: SqlUserRepository) -> None:
        """A second account for the same email is rejected."""
        users.create_user(name="A", email="dup@example.com", password_hash="h")

        with pytest.raises(DuplicateEmailError):
            users.create_user(name="B", email="DUP@example.com", password_hash="h")

        # The session is still usable after the rollback
        assert users.get_user_by_email("dup@example.com") is not None

    def test_missing_user(self, users: SqlUserRepository) -> None:
        """Unknown ids and emails return None."""
        assert users.get_user(uuid.uuid4()) is None
        assert users.get_user_by_email("nobody@example.com") is None


class TestSqlItineraryRepository:
    """Itinerary persistence."""

    def test_save_and_get_round_trip(
        self,
        itineraries: SqlItineraryRepository,
        owner: RequestContext,
        make_itinerary: Callable[..., Itinerary],
    ) -> None:
        """A stored itinerary comes back equal to what was saved."""
        itinerary = make_itinerary(owner.user_id)

        itineraries.save_itinerary(itinerary, owner)
        loaded = itineraries.get_itinerary(itinerary.id, owner)

        assert loaded == itinerary
        assert loaded is not None
        assert loaded.visits[0].transport_to_next is not None
        assert loaded.total_cost == 40 + 600

    def test_list_newest_first(
        self,
        itineraries: SqlItineraryRepository,
        owner: RequestContext,
        make_itinerary: Callable[..., Itinerary],
    ) -> None:
        """Listing is ordered by creation time, newest first."""
        older = make_itinerary(owner.user_id, created_offset_min=0)
        newer = make_itinerary(owner.user_id, created_offset_min=10)
        itineraries.save_itinerary(older, owner)
        itineraries.save_itinerary(newer, owner)

        listed = itineraries.list_itineraries(owner)

        assert [it.id for it in listed] == [newer.id, older.id]

    def test_set_favorite(
        self,
        itineraries: SqlItineraryRepository,
        owner: RequestContext,
        make_itinerary: Callable[..., Itinerary],
    ) -> None:
        """The favorite flag persists."""
        itinerary = make_itinerary(owner.user_id)
        itineraries.save_itinerary(itinerary, owner)

        updated = itineraries.set_favorite(itinerary.id, owner, True)

        assert updated is not None and updated.is_favorite
        reloaded = itineraries.get_itinerary(itinerary.id, owner)
        assert reloaded is not None and reloaded.is_favorite

    def test_delete(
        self,
        itineraries: SqlItineraryRepository,
        owner: RequestContext,
        make_itinerary: Callable[..., Itinerary],
    ) -> None:
        """Deleting removes the record once."""
        itinerary = make_itinerary(owner.user_id)
        itineraries.save_itinerary(itinerary, owner)

        assert itineraries.delete_itinerary(itinerary.id, owner) is True
        assert itineraries.get_itinerary(itinerary.id, owner) is None
        assert itineraries.delete_itinerary(itinerary.id, owner) is False

    def test_other_user_sees_nothing(
        self,
        users: SqlUserRepository,
        itineraries: SqlItineraryRepository,
        owner: RequestContext,
        make_itinerary: Callable[..., Itinerary],
    ) -> None:
        """Records owned by someone else behave as missing."""
        other = RequestContext(
            user_id=users.create_user(name="B", email="b@example.com", password_hash="h").user_id
        )
        itinerary = make_itinerary(owner.user_id)
        itineraries.save_itinerary(itinerary, owner)

        assert itineraries.get_itinerary(itinerary.id, other) is None
        assert itineraries.list_itineraries(other) == []
        assert itineraries.set_favorite(itinerary.id, other, True) is None
        assert itineraries.delete_itinerary(itinerary.id, other) is False

        still_there = itineraries.get_itinerary(itinerary.id, owner)
        assert still_there is not None and not still_there.is_favorite

    def test_save_assigns_caller_as_owner(
        self,
        itineraries: SqlItineraryRepository,
        owner: RequestContext,
        make_itinerary: Callable[..., Itinerary],
    ) -> None:
        """Ownership comes from the context, not the payload."""
        itinerary = make_itinerary(uuid.uuid4())

        itineraries.save_itinerary(itinerary, owner)

        loaded = itineraries.get_itinerary(itinerary.id, owner)
        assert loaded is not None and loaded.user_id == owner.user_id

    def test_store_failure_raises_persistence_error(
        self, sqlite_session: Session, itineraries: SqlItineraryRepository, owner: RequestContext
    ) -> None:
        """Database errors surface as PersistenceError."""
        Base.metadata.drop_all(sqlite_session.get_bind())

        with pytest.raises(PersistenceError):
            itineraries.list_itineraries(owner)
