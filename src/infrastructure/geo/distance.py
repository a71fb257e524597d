"""Great-circle distance helpers."""
from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt
from typing import Iterable, Optional

from src.core.entities import ActivityRecord, Coordinate

EARTH_RADIUS_KM = 6371.0
DEFAULT_MAX_DISTANCE_KM = 10.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the haversine distance in kilometres, rounded to one decimal."""

    dlat = radians(lat2 - lat1)
    dlon = radians(lon2 - lon1)
    a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2
    a = min(1.0, a)
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return round(EARTH_RADIUS_KM * c, 1)


def distance_between(origin: Optional[Coordinate], target: Optional[Coordinate]) -> Optional[float]:
    """Distance between two coordinates, or ``None`` when either is unusable."""

    if origin is None or target is None:
        return None
    if not (origin.is_valid and target.is_valid):
        return None
    return haversine_km(origin.latitude, origin.longitude, target.latitude, target.longitude)


def format_distance(distance_km: float) -> str:
    if distance_km < 1:
        return f"{round(distance_km * 1000)} m"
    return f"{distance_km:g} km"


def filter_by_distance(
    activities: Iterable[ActivityRecord],
    origin: Coordinate,
    max_distance_km: float = DEFAULT_MAX_DISTANCE_KM,
) -> list[tuple[ActivityRecord, float]]:
    """Keep activities within ``max_distance_km`` of ``origin``, nearest first."""

    nearby: list[tuple[ActivityRecord, float]] = []
    for activity in activities:
        distance = distance_between(origin, activity.location)
        if distance is None or distance > max_distance_km:
            continue
        nearby.append((activity, distance))

    nearby.sort(key=lambda item: (item[1], item[0].id))
    return nearby


__all__ = [
    "EARTH_RADIUS_KM",
    "distance_between",
    "filter_by_distance",
    "format_distance",
    "haversine_km",
]
