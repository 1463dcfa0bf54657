"""SQL implementations of repository interfaces."""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from wanderer.app.db.context import RequestContext
from wanderer.app.db.models import Itinerary as ItineraryRow
from wanderer.app.db.models import UserAccount
from wanderer.app.db.queries import query_itineraries
from wanderer.app.db.repositories import DuplicateEmailError, PersistenceError, UserRecord
from wanderer.app.models.itinerary import Itinerary

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(session: Session, operation: str) -> Iterator[None]:
    """Roll back and re-raise database failures as PersistenceError."""
    try:
        yield
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Store operation {operation} failed: {e}")
        raise PersistenceError(operation) from e


def _to_user_record(user: UserAccount) -> UserRecord:
    return UserRecord(
        user_id=user.user_id,
        name=user.name,
        email=user.email,
        password_hash=user.password_hash,
        created_at=user.created_at,
    )


def _to_itinerary(row: ItineraryRow) -> Itinerary:
    return Itinerary.model_validate({**row.data, "isFavorite": row.is_favorite})


class SqlUserRepository:
    """SQL implementation of UserRepository."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create_user(self, *, name: str, email: str, password_hash: str) -> UserRecord:
        """Create a new user."""
        user = UserAccount(
            user_id=uuid.uuid4(),
            name=name,
            email=email.lower(),
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )

        try:
            with _store_errors(self._session, "create_user"):
                self._session.add(user)
                self._session.commit()
        except PersistenceError as e:
            if isinstance(e.__cause__, IntegrityError):
                raise DuplicateEmailError(email) from e.__cause__
            raise

        return _to_user_record(user)

    def get_user_by_email(self, email: str) -> UserRecord | None:
        """Get user by email."""
        with _store_errors(self._session, "get_user_by_email"):
            user = (
                self._session.query(UserAccount)
                .filter(func.lower(UserAccount.email) == email.lower())
                .first()
            )

        return _to_user_record(user) if user else None

    def get_user(self, user_id: uuid.UUID) -> UserRecord | None:
        """Get user by ID."""
        with _store_errors(self._session, "get_user"):
            user = self._session.get(UserAccount, user_id)

        return _to_user_record(user) if user else None


class SqlItineraryRepository:
    """SQL implementation of ItineraryRepository."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def save_itinerary(self, itinerary: Itinerary, ctx: RequestContext) -> None:
        """Save a new itinerary."""
        owned = itinerary.model_copy(update={"user_id": ctx.user_id})

        row = ItineraryRow(
            itinerary_id=owned.id,
            user_id=ctx.user_id,
            location=owned.location,
            is_favorite=owned.is_favorite,
            data=owned.model_dump(mode="json", by_alias=True),
            created_at=owned.created_at,
        )

        with _store_errors(self._session, "save_itinerary"):
            self._session.add(row)
            self._session.commit()

    def get_itinerary(self, itinerary_id: uuid.UUID, ctx: RequestContext) -> Itinerary | None:
        """Get itinerary by ID."""
        with _store_errors(self._session, "get_itinerary"):
            row = (
                query_itineraries(self._session, ctx)
                .filter(ItineraryRow.itinerary_id == itinerary_id)
                .first()
            )

        return _to_itinerary(row) if row else None

    def list_itineraries(self, ctx: RequestContext) -> list[Itinerary]:
        """List itineraries for user, newest first."""
        with _store_errors(self._session, "list_itineraries"):
            rows = query_itineraries(self._session, ctx).order_by(ItineraryRow.created_at.desc()).all()

        return [_to_itinerary(row) for row in rows]

    def set_favorite(
        self, itinerary_id: uuid.UUID, ctx: RequestContext, is_favorite: bool
    ) -> Itinerary | None:
        """Update the favorite flag."""
        with _store_errors(self._session, "set_favorite"):
            row = (
                query_itineraries(self._session, ctx)
                .filter(ItineraryRow.itinerary_id == itinerary_id)
                .first()
            )
            if row is None:
                return None

            row.is_favorite = is_favorite
            self._session.commit()

        return _to_itinerary(row)

    def delete_itinerary(self, itinerary_id: uuid.UUID, ctx: RequestContext) -> bool:
        """Delete an itinerary."""
        with _store_errors(self._session, "delete_itinerary"):
            deleted = (
                query_itineraries(self._session, ctx)
                .filter(ItineraryRow.itinerary_id == itinerary_id)
                .delete(synchronize_session=False)
            )
            self._session.commit()

        return deleted > 0
