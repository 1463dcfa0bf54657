"""Attraction sources backed by an LLM or by the static fallback table.

Security: Reads API key from environment only, never hardcoded.
Falls back to the static table when no key is present.
"""

import json
import logging
import re
import uuid
from datetime import datetime
from typing import Any, Protocol

import httpx
from openai import AsyncOpenAI, OpenAIError

from wanderer.app.config import Settings
from wanderer.app.models.attraction import (
    MAX_DURATION_MIN,
    MAX_RATING,
    MIN_DURATION_MIN,
    MIN_RATING,
    Attraction,
)
from wanderer.app.models.common import Geo
from wanderer.app.planning.fallback import fallback_attractions

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$")


class AttractionSourceError(Exception):
    """Attraction fetch failed or returned unusable content."""

    pass


class AttractionSource(Protocol):
    """Protocol for attraction source implementations."""

    name: str

    async def fetch(
        self, location: str, start: datetime, end: datetime, max_count: int
    ) -> list[Attraction]:
        """Fetch ranked attraction candidates for a location.

        Args:
            location: Free-form place name
            start: Trip window start
            end: Trip window end
            max_count: Maximum number of attractions to return

        Returns:
            Ordered attraction list (may be empty)

        Raises:
            AttractionSourceError: On upstream failure or malformed output
        """
        ...


class StaticAttractionSource:
    """Serves the static fallback table (no API key required)."""

    name = "static"

    async def fetch(
        self, location: str, start: datetime, end: datetime, max_count: int
    ) -> list[Attraction]:
        """Return the fallback entry for the location."""
        return fallback_attractions(location)[:max_count]


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    return _FENCE_RE.sub("", text.strip())


def normalize_attraction(raw: dict[str, Any], attraction_id: str) -> Attraction:
    """Build an Attraction from loosely-typed model output.

    Missing fields take defaults; rating and duration are clamped into
    their allowed ranges and negative fees are floored at zero.
    """
    coords = raw.get("coordinates")
    if not isinstance(coords, dict):
        coords = {}
    return Attraction(
        id=attraction_id,
        name=raw.get("name") or "Unknown Attraction",
        description=raw.get("description") or "No description available",
        category=raw.get("category") or "Landmark",
        rating=_clamp(float(raw.get("rating") or 4.0), MIN_RATING, MAX_RATING),
        coordinates=Geo(lat=float(coords.get("lat") or 0), lng=float(coords.get("lng") or 0)),
        estimated_duration=int(
            _clamp(float(raw.get("estimatedDuration") or 90), MIN_DURATION_MIN, MAX_DURATION_MIN)
        ),
        entry_fee=max(float(raw.get("entryFee") or 0), 0),
    )


def parse_attractions(text: str, id_prefix: str) -> list[Attraction]:
    """Parse a JSON array of attractions from model output.

    Raises:
        AttractionSourceError: If the text is not a JSON array of objects
    """
    try:
        data = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        raise AttractionSourceError(f"Attraction response is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise AttractionSourceError(
            f"Attraction response must be a JSON array, got {type(data).__name__}"
        )

    attractions: list[Attraction] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise AttractionSourceError(f"Attraction entry {index} is not an object")
        try:
            attractions.append(normalize_attraction(item, f"{id_prefix}_{index}"))
        except (TypeError, ValueError) as e:
            raise AttractionSourceError(f"Attraction entry {index} is malformed: {e}") from e

    return attractions


class OpenAIAttractionSource:
    """OpenAI-backed attraction source.

    One attempt per call: the client is built with retries disabled and a
    bounded timeout so a slow upstream falls through to the static table.
    """

    name = "llm"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        *,
        country: str = "India",
        currency_code: str = "INR",
        timeout_s: float = 20.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.client = AsyncOpenAI(
            api_key=api_key,
            max_retries=0,
            timeout=httpx.Timeout(timeout_s, connect=5.0),
            http_client=http_client,
        )
        self.model = model
        self.country = country
        self.currency_code = currency_code

    async def fetch(
        self, location: str, start: datetime, end: datetime, max_count: int
    ) -> list[Attraction]:
        """Ask the model for attractions and parse its JSON answer."""
        prompt = self._build_prompt(location, start, end, max_count)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": "You are a travel researcher. Reply with JSON only."},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.4,
                max_tokens=1500,
            )
        except OpenAIError as e:
            raise AttractionSourceError(f"OpenAI API call failed: {e}") from e

        if not response.choices:
            raise AttractionSourceError("OpenAI returned no choices")

        text = response.choices[0].message.content or ""
        if not text.strip():
            raise AttractionSourceError("OpenAI returned empty response")

        logger.debug(f"Attraction response for {location}: {text[:200]}")

        attractions = parse_attractions(text, id_prefix=f"llm_{uuid.uuid4().hex[:8]}")
        return attractions[:max_count]

    def _build_prompt(self, location: str, start: datetime, end: datetime, max_count: int) -> str:
        """Build the attraction prompt."""
        place = f"{location}, {self.country}"
        return f"""Generate a JSON array of {max_count} real tourist attractions in {place}
for a visit between {start.isoformat()} and {end.isoformat()}.

Format (return ONLY this JSON, no other text):
[
  {{
    "name": "Marina Beach",
    "description": "Second longest urban beach in the world, perfect for evening walks",
    "category": "Beach",
    "rating": 4.3,
    "estimatedDuration": 120,
    "entryFee": 0,
    "coordinates": {{"lat": 13.0515, "lng": 80.2825}}
  }}
]

Requirements:
- REAL places in {place} only
- Entry fees in {self.currency_code}
- Duration in minutes (60-240)
- Include temples, monuments, parks, museums
- Accurate coordinates for the city"""


def get_attraction_source(settings: Settings) -> AttractionSource:
    """Factory function to get appropriate attraction source based on config.

    Returns:
        OpenAIAttractionSource if API key is configured, StaticAttractionSource otherwise
    """
    api_key = settings.openai_api_key

    if api_key and api_key.get_secret_value():
        logger.info("Using OpenAI attraction source")
        return OpenAIAttractionSource(
            api_key=api_key.get_secret_value(),
            model=settings.openai_model,
            country=settings.attraction_country,
            currency_code=settings.currency_code,
            timeout_s=settings.attraction_timeout_s,
        )

    logger.warning("No OpenAI API key configured, using static attraction table")
    return StaticAttractionSource()
