"""Tests for distance-based transport suggestions."""

import pytest

from wanderer.app.models.common import TransportMode
from wanderer.app.planning.transport import suggest_transport_options


def test_short_distance_is_walking_only() -> None:
    """Under 500 m only walking is offered, free of charge."""
    options = suggest_transport_options(400)

    assert [o.mode for o in options] == [TransportMode.walking]
    assert options[0].duration_minutes == 5
    assert options[0].cost == 0


def test_medium_distance_offers_walk_or_auto() -> None:
    """Between 500 m and 2 km walking and auto-rickshaw are offered."""
    options = suggest_transport_options(1200)

    assert [o.mode for o in options] == [TransportMode.walking, TransportMode.auto_rickshaw]
    assert options[0].duration_minutes == 15
    assert options[1].duration_minutes == 4
    # 1200 * 0.02 = 24, floored at 30
    assert options[1].cost == 30


def test_long_distance_offers_auto_or_taxi() -> None:
    """From 2 km on an auto-rickshaw or a taxi is offered."""
    options = suggest_transport_options(10_000)

    assert [o.mode for o in options] == [TransportMode.auto_rickshaw, TransportMode.taxi]
    assert options[0].cost == pytest.approx(150)
    assert options[1].cost == pytest.approx(250)
    assert options[0].duration_minutes == 34
    assert options[1].duration_minutes == 25


def test_minimum_fares_apply() -> None:
    """Short long-range trips still pay the minimum fare."""
    options = suggest_transport_options(2000)

    assert options[0].cost == 50
    assert options[1].cost == 100


def test_options_carry_distance() -> None:
    """Every option reports the requested distance."""
    assert all(o.distance_meters == 750 for o in suggest_transport_options(750))


def test_zero_distance() -> None:
    """Zero meters is a zero-minute walk."""
    options = suggest_transport_options(0)

    assert options[0].duration_minutes == 0
