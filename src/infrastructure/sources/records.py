"""Conversion of raw documents and rows into domain entities."""
from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Sequence

from src.core.entities import (
    DEFAULT_CATEGORY,
    DEFAULT_CITY,
    DEFAULT_TITLE,
    ActivityRecord,
    CachedSuggestion,
    Coordinate,
    Group,
    GroupSuggestion,
    PriceTier,
    UserProfile,
)

_LIST_SEPARATOR = re.compile(r"[|,;]")


def is_missing(value: Any) -> bool:
    """``True`` for ``None``, NaN and blank strings."""

    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def coerce_list(value: Any) -> list[str]:
    if is_missing(value):
        return []
    if isinstance(value, str):
        return [part.strip() for part in _LIST_SEPARATOR.split(value) if part.strip()]
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(item).strip() for item in value if not is_missing(item)]
    return [str(value).strip()]


def coerce_text(value: Any, default: str = "") -> str:
    if is_missing(value):
        return default
    return str(value).strip()


def coerce_float(value: Any) -> Optional[float]:
    if is_missing(value) or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def coerce_bool(value: Any) -> bool:
    if is_missing(value):
        return False
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "oui", "y"}
    return bool(value)


def coordinate_from(value: Any) -> Optional[Coordinate]:
    """Read a coordinate from a GeoPoint-like object or a mapping."""

    if is_missing(value):
        return None
    if isinstance(value, Mapping):
        return Coordinate.from_values(value.get("latitude"), value.get("longitude"))
    latitude = getattr(value, "latitude", None)
    longitude = getattr(value, "longitude", None)
    return Coordinate.from_values(latitude, longitude)


def profile_from_mapping(user_id: str, data: Mapping[str, Any]) -> UserProfile:
    return UserProfile(
        user_id=user_id,
        interests=tuple(coerce_list(data.get("interests"))),
        location=coordinate_from(data.get("location")),
        city=coerce_text(data.get("city"), DEFAULT_CITY),
    )


def activity_from_mapping(activity_id: str, data: Mapping[str, Any]) -> ActivityRecord:
    raw_location = data.get("location")
    if isinstance(raw_location, str) or is_missing(raw_location):
        address = coerce_text(raw_location)
        location = Coordinate.from_values(
            coerce_float(data.get("latitude")),
            coerce_float(data.get("longitude")),
        )
    else:
        address = ""
        location = coordinate_from(raw_location)

    return ActivityRecord(
        id=str(activity_id),
        title=coerce_text(data.get("title"), DEFAULT_TITLE),
        description=coerce_text(data.get("description")),
        category=coerce_text(data.get("category"), DEFAULT_CATEGORY),
        interests=tuple(coerce_list(data.get("interests"))),
        price=PriceTier.parse(data.get("price")),
        location=location,
        rating=coerce_float(data.get("rating")),
        is_new=coerce_bool(data.get("isNew")),
        address=address,
        city=coerce_text(data.get("city")),
        tags=tuple(coerce_list(data.get("tags"))),
        date=coerce_text(data.get("date")) or None,
    )


def group_from_mapping(group_id: str, data: Mapping[str, Any]) -> Group:
    return Group(
        group_id=group_id,
        member_ids=tuple(coerce_list(data.get("members"))),
        city=coerce_text(data.get("city"), DEFAULT_CITY),
    )


def cached_suggestions_from_mapping(data: Mapping[str, Any]) -> list[CachedSuggestion]:
    """Read the ``suggestedActivities`` entries of a stored suggestion document."""

    cached: list[CachedSuggestion] = []
    for entry in data.get("suggestedActivities") or []:
        if not isinstance(entry, Mapping) or is_missing(entry.get("id")):
            continue
        score = coerce_float(entry.get("score"))
        cached.append(
            CachedSuggestion(
                activity_id=str(entry["id"]),
                score=int(round(score)) if score is not None else 0,
                matched_interests=tuple(coerce_list(entry.get("matchedInterests"))),
            )
        )
    return cached


def suggestions_to_mapping(
    group_id: str,
    suggestions: Sequence[GroupSuggestion],
    interests: Sequence[str],
    updated_at: Optional[datetime] = None,
) -> dict[str, Any]:
    timestamp = updated_at or datetime.now(timezone.utc)
    return {
        "groupId": group_id,
        "commonInterests": list(interests),
        "suggestedActivities": [
            {
                "id": item.id,
                "title": item.title,
                "score": item.score,
                "matchedInterests": list(item.matched_interests),
                "category": item.activity.category,
            }
            for item in suggestions
        ],
        "totalActivities": len(suggestions),
        "lastUpdated": timestamp.isoformat(),
    }


__all__ = [
    "activity_from_mapping",
    "cached_suggestions_from_mapping",
    "coerce_bool",
    "coerce_float",
    "coerce_list",
    "coerce_text",
    "coordinate_from",
    "group_from_mapping",
    "is_missing",
    "profile_from_mapping",
    "suggestions_to_mapping",
]
