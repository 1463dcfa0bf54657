"""Shared pytest fixtures for all test suites."""

from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from wanderer.app.api.routes.trips import get_default_attraction_source
from wanderer.app.db.engine import get_itinerary_repository, get_user_repository
from wanderer.app.db.inmemory import (
    InMemoryItineraryRepository,
    InMemoryRateLimiter,
    InMemoryUserRepository,
)
from wanderer.app.db.models import Base
from wanderer.app.llm.client import StaticAttractionSource
from wanderer.app.main import app
from wanderer.app.models.attraction import Attraction
from wanderer.app.models.common import Geo
from wanderer.app.planning.config import PlannerConfig
from wanderer.app.ratelimit import get_plan_rate_limiter

AttractionFactory = Callable[..., Attraction]
SignupFactory = Callable[..., dict[str, Any]]


@pytest.fixture
def make_attraction() -> AttractionFactory:
    """Factory for attractions with sensible defaults.

    Usage:
        def test_something(make_attraction):
            museum = make_attraction(duration=120, fee=50)
    """
    counter = {"n": 0}

    def _make(
        duration: int = 60,
        fee: float = 0,
        name: str | None = None,
        category: str = "Landmark",
    ) -> Attraction:
        counter["n"] += 1
        n = counter["n"]
        return Attraction(
            id=f"attr_{n}",
            name=name or f"Attraction {n}",
            description=f"Test attraction {n}",
            category=category,
            rating=4.2,
            coordinates=Geo(lat=13.05, lng=80.28),
            estimated_duration=duration,
            entry_fee=fee,
        )

    return _make


@pytest.fixture
def planner_config() -> PlannerConfig:
    """Planner config with the default locale constants."""
    return PlannerConfig()


@pytest.fixture
def sqlite_session() -> Generator[Session, None, None]:
    """Session on a fresh in-memory SQLite database with all tables."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    with session_factory() as session:
        yield session

    engine.dispose()


@pytest.fixture
def user_store() -> InMemoryUserRepository:
    """Fresh user store per test."""
    return InMemoryUserRepository()


@pytest.fixture
def itinerary_store() -> InMemoryItineraryRepository:
    """Fresh itinerary store per test."""
    return InMemoryItineraryRepository()


@pytest.fixture
def client(
    user_store: InMemoryUserRepository, itinerary_store: InMemoryItineraryRepository
) -> Generator[TestClient, None, None]:
    """Test client wired to per-test in-memory stores and the static attraction table."""
    limiter = InMemoryRateLimiter(max_requests=1000)

    app.dependency_overrides[get_user_repository] = lambda: user_store
    app.dependency_overrides[get_itinerary_repository] = lambda: itinerary_store
    app.dependency_overrides[get_default_attraction_source] = StaticAttractionSource
    app.dependency_overrides[get_plan_rate_limiter] = lambda: limiter

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def signup(client: TestClient) -> SignupFactory:
    """Create an account through the API and return the response body.

    Usage:
        def test_something(signup):
            token = signup(email="ravi@example.com")["token"]
    """

    def _signup(
        email: str = "asha@example.com", password: str = "s3cret-pass", name: str = "Asha"
    ) -> dict[str, Any]:
        response = client.post(
            "/api/auth/signup",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _signup


@pytest.fixture
def auth_headers(signup: SignupFactory) -> dict[str, str]:
    """Authorization header for a freshly signed-up user."""
    return {"Authorization": f"Bearer {signup()['token']}"}
