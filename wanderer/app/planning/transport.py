"""Distance-based transport suggestions between two stops."""

import math

from wanderer.app.models.common import TransportMode
from wanderer.app.models.itinerary import TransportLeg

WALK_M_PER_MIN = 80
AUTO_M_PER_MIN = 300
TAXI_M_PER_MIN = 400


def _leg(mode: TransportMode, distance_m: float, m_per_min: int, cost: float) -> TransportLeg:
    return TransportLeg(
        type=mode,
        duration=math.ceil(distance_m / m_per_min),
        distance=distance_m,
        cost=cost,
    )


def suggest_transport_options(distance_m: float) -> list[TransportLeg]:
    """Suggest transport options for a distance in meters.

    Under 500 m only walking is offered; up to 2 km walking or an
    auto-rickshaw; beyond that an auto-rickshaw or a taxi.
    """
    if distance_m < 500:
        return [_leg(TransportMode.walking, distance_m, WALK_M_PER_MIN, 0)]

    if distance_m < 2000:
        return [
            _leg(TransportMode.walking, distance_m, WALK_M_PER_MIN, 0),
            _leg(TransportMode.auto_rickshaw, distance_m, AUTO_M_PER_MIN, max(30, distance_m * 0.02)),
        ]

    return [
        _leg(TransportMode.auto_rickshaw, distance_m, AUTO_M_PER_MIN, max(50, distance_m * 0.015)),
        _leg(TransportMode.taxi, distance_m, TAXI_M_PER_MIN, max(100, distance_m * 0.025)),
    ]
