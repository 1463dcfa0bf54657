"""Database engine, session factory and store dependencies."""

from collections.abc import Generator
from functools import lru_cache

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from wanderer.app.config import Settings, get_settings
from wanderer.app.db.inmemory import InMemoryItineraryRepository, InMemoryUserRepository
from wanderer.app.db.models import Base
from wanderer.app.db.repositories import ItineraryRepository, UserRepository
from wanderer.app.db.sql_repositories import SqlItineraryRepository, SqlUserRepository


def create_engine_from_settings(settings: Settings) -> Engine:
    """Create SQLAlchemy engine from settings.

    Raises:
        ValueError: If DATABASE_URL is unset or empty.
    """
    if not settings.database_url:
        raise ValueError(
            "DATABASE_URL must be set to a valid connection string. "
            "Please configure the database_url setting."
        )

    return create_engine(settings.database_url, pool_pre_ping=True, echo=False)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create sessionmaker for creating database sessions.

    Args:
        engine: SQLAlchemy engine

    Returns:
        Sessionmaker bound to the engine
    """
    return sessionmaker(bind=engine, expire_on_commit=False)


@lru_cache
def get_engine() -> Engine:
    """Get global engine instance."""
    return create_engine_from_settings(get_settings())


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    """Get global session factory."""
    return create_session_factory(get_engine())


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(engine)


# Process-lifetime stores used when no database is configured
_memory_users = InMemoryUserRepository()
_memory_itineraries = InMemoryItineraryRepository()


def get_user_repository() -> Generator[UserRepository, None, None]:
    """FastAPI dependency selecting the user store from settings."""
    if not get_settings().database_url:
        yield _memory_users
        return

    with get_session_factory()() as session:
        yield SqlUserRepository(session)


def get_itinerary_repository() -> Generator[ItineraryRepository, None, None]:
    """FastAPI dependency selecting the itinerary store from settings."""
    if not get_settings().database_url:
        yield _memory_itineraries
        return

    with get_session_factory()() as session:
        yield SqlItineraryRepository(session)
