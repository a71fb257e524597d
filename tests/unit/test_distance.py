"""Unit tests for the distance helpers."""
from __future__ import annotations

import math

import pytest

from src.core.entities import Coordinate
from src.infrastructure.geo.distance import (
    distance_between,
    filter_by_distance,
    format_distance,
    haversine_km,
)

BRUSSELS = (50.8503, 4.3517)
PARIS = (48.8566, 2.3522)


def test_haversine_matches_known_city_distance() -> None:
    assert haversine_km(*BRUSSELS, *PARIS) == pytest.approx(264.0, abs=2.0)


def test_haversine_is_symmetric_and_zero_on_same_point() -> None:
    points = [BRUSSELS, PARIS, (0.0, 0.0), (-33.8688, 151.2093), (89.9, -179.9)]
    for a in points:
        assert haversine_km(*a, *a) == 0.0
        for b in points:
            assert haversine_km(*a, *b) == haversine_km(*b, *a)


def test_haversine_rounds_to_one_decimal() -> None:
    value = haversine_km(50.8467, 4.3525, 50.8224, 4.3661)
    assert value == round(value, 1)


def test_distance_between_treats_missing_or_non_finite_as_absent() -> None:
    origin = Coordinate(*BRUSSELS)

    assert distance_between(origin, None) is None
    assert distance_between(None, origin) is None
    assert distance_between(origin, Coordinate(latitude=math.nan, longitude=4.0)) is None
    assert distance_between(Coordinate(latitude=50.0, longitude=math.inf), origin) is None
    assert distance_between(origin, origin) == 0.0


def test_equator_zero_coordinates_are_usable() -> None:
    assert distance_between(Coordinate(0.0, 0.0), Coordinate(0.0, 1.0)) == pytest.approx(111.2, abs=0.1)


@pytest.mark.parametrize(
    ("distance", "expected"),
    [(0.5, "500 m"), (0.04, "40 m"), (1.0, "1 km"), (12.3, "12.3 km"), (20.0, "20 km")],
)
def test_format_distance(distance: float, expected: str) -> None:
    assert format_distance(distance) == expected


def test_filter_by_distance_keeps_close_activities_nearest_first(make_activity) -> None:
    origin = Coordinate(*BRUSSELS)
    far = make_activity("far", location=Coordinate(*PARIS))
    near = make_activity("near", location=Coordinate(50.8467, 4.3525))
    mid = make_activity("mid", location=Coordinate(50.8224, 4.3661))
    unknown = make_activity("unknown")

    nearby = filter_by_distance([far, mid, unknown, near], origin, max_distance_km=10)

    assert [activity.id for activity, _ in nearby] == ["near", "mid"]
    assert nearby[0][1] <= nearby[1][1] <= 10
