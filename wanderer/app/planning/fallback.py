"""Static, location-keyed fallback attraction table."""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from wanderer.app.models.attraction import Attraction

FALLBACK_TABLE_PATH = Path(__file__).with_name("fallback_attractions.yaml")
DEFAULT_KEY = "default"


@lru_cache
def load_fallback_table(path: Path = FALLBACK_TABLE_PATH) -> dict[str, dict[str, Any]]:
    """Load the fallback table from YAML.

    Returns:
        Mapping of city key to {"aliases": [...], "attractions": [Attraction, ...]}
    """
    with path.open(encoding="utf-8") as f:
        raw: dict[str, Any] = yaml.safe_load(f)

    if DEFAULT_KEY not in raw:
        raise ValueError(f"Fallback table {path} has no '{DEFAULT_KEY}' entry")

    return {
        key: {
            "aliases": [alias.lower() for alias in entry.get("aliases", [])],
            "attractions": [Attraction.model_validate(a) for a in entry["attractions"]],
        }
        for key, entry in raw.items()
    }


def resolve_city_key(location: str) -> str:
    """Map a free-form location to a fallback table key."""
    needle = location.lower()
    for key, entry in load_fallback_table().items():
        if any(alias in needle for alias in entry["aliases"]):
            return key
    return DEFAULT_KEY


def fallback_attractions(location: str) -> list[Attraction]:
    """Fallback attractions for a location (default entry when unknown)."""
    return list(load_fallback_table()[resolve_city_key(location)]["attractions"])
