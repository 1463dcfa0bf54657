"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database (unset = in-memory stores)
    database_url: str | None = None

    # Cache
    redis_url: str | None = None

    # Auth
    jwt_secret: SecretStr = SecretStr("weekend-wanderer-dev-secret-change-me")
    jwt_algorithm: str = "HS256"
    access_token_ttl_minutes: int = 7 * 24 * 60

    # Attraction source
    openai_api_key: SecretStr | None = None
    openai_model: str = "gpt-4o-mini"
    attraction_timeout_s: float = 20.0
    attraction_country: str = "India"
    currency_code: str = "INR"
    max_attractions: int = 5

    # Planner constants
    transit_buffer_min: int = 30
    default_transport_mode: str = "walking"
    default_transport_distance_m: int = 1000
    default_transport_cost: float = 0
    meal_cost: float = 300
    visits_per_day: int = 4

    # Rate limiting (requests per minute)
    plans_per_min: int = 10

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
