"""Common types and enums shared across all models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base model serialized with camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Geo(WireModel):
    """Geographic coordinates (WGS84)."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class TransportMode(str, Enum):
    """Transport mode between two consecutive visits."""

    walking = "walking"
    auto_rickshaw = "auto_rickshaw"
    taxi = "taxi"
    public_transport = "public_transport"
