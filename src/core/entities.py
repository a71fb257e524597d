"""Core entities for the activity recommendation domain."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional

DEFAULT_CITY = "Bruxelles"
DEFAULT_TITLE = "Sans titre"
DEFAULT_CATEGORY = "Divers"

_FREE_LABELS = frozenset({"gratuit", "free"})


def normalise_tags(tags: Iterable[object] | None) -> tuple[str, ...]:
    """Trim, lower-case and de-duplicate tags, keeping first appearance order."""

    if not tags:
        return ()

    seen: set[str] = set()
    normalised: list[str] = []
    for tag in tags:
        if tag is None:
            continue
        value = str(tag).strip().lower()
        if not value or value in seen:
            continue
        seen.add(value)
        normalised.append(value)
    return tuple(normalised)


@dataclass(frozen=True)
class Coordinate:
    """Geographic point in decimal degrees."""

    latitude: float
    longitude: float

    @property
    def is_valid(self) -> bool:
        return _is_finite(self.latitude) and _is_finite(self.longitude)

    @classmethod
    def from_values(cls, latitude: Any, longitude: Any) -> Optional["Coordinate"]:
        """Build a coordinate from raw values, returning ``None`` when unusable."""

        if latitude is None or longitude is None:
            return None
        try:
            candidate = cls(latitude=float(latitude), longitude=float(longitude))
        except (TypeError, ValueError):
            return None
        return candidate if candidate.is_valid else None


class PriceTier(str, Enum):
    FREE = "Gratuit"
    PAID = "Payant"

    @classmethod
    def parse(cls, value: Any) -> "PriceTier":
        if isinstance(value, PriceTier):
            return value
        if isinstance(value, str) and value.strip().lower() in _FREE_LABELS:
            return cls.FREE
        return cls.PAID


@dataclass(frozen=True)
class UserProfile:
    """Read-only snapshot of the preferences used to personalise a run."""

    user_id: str
    interests: tuple[str, ...] = ()
    location: Optional[Coordinate] = None
    city: str = DEFAULT_CITY

    def __post_init__(self) -> None:
        object.__setattr__(self, "interests", normalise_tags(self.interests))


@dataclass(frozen=True)
class ActivityRecord:
    """Candidate activity as supplied by the activity source."""

    id: str
    title: str = DEFAULT_TITLE
    description: str = ""
    category: str = DEFAULT_CATEGORY
    interests: tuple[str, ...] = ()
    price: PriceTier = PriceTier.PAID
    location: Optional[Coordinate] = None
    rating: Optional[float] = None
    is_new: bool = False
    address: str = ""
    city: str = ""
    tags: tuple[str, ...] = ()
    date: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "interests", normalise_tags(self.interests))
        object.__setattr__(self, "tags", tuple(str(tag) for tag in self.tags or ()))
        object.__setattr__(self, "price", PriceTier.parse(self.price))


@dataclass(frozen=True)
class ScoreBreakdown:
    """The five sub-scores that make up a personal score."""

    interest: int = 0
    distance: int = 0
    price: int = 0
    popularity: int = 0
    novelty: int = 0

    @property
    def total(self) -> int:
        return int(round(self.interest + self.distance + self.price + self.popularity + self.novelty))

    def to_dict(self) -> dict[str, int]:
        return {
            "interest": self.interest,
            "distance": self.distance,
            "price": self.price,
            "popularity": self.popularity,
            "novelty": self.novelty,
        }


@dataclass(frozen=True)
class ScoredActivity:
    """An activity together with its personal score for one user."""

    activity: ActivityRecord
    personal_score: int
    breakdown: ScoreBreakdown
    distance_km: Optional[float] = None
    matched_interests: tuple[str, ...] = field(default_factory=tuple)

    @property
    def id(self) -> str:
        return self.activity.id

    @property
    def title(self) -> str:
        return self.activity.title

    def to_dict(self) -> dict[str, Any]:
        activity = self.activity
        location = activity.location
        return {
            "id": activity.id,
            "title": activity.title,
            "description": activity.description,
            "category": activity.category,
            "interests": list(activity.interests),
            "tags": list(activity.tags),
            "price": activity.price.value,
            "address": activity.address,
            "city": activity.city,
            "date": activity.date,
            "rating": activity.rating,
            "isNew": activity.is_new,
            "latitude": location.latitude if location else None,
            "longitude": location.longitude if location else None,
            "personalScore": self.personal_score,
            "distanceKm": self.distance_km,
            "matchedInterests": list(self.matched_interests),
            "scoreBreakdown": self.breakdown.to_dict(),
        }


@dataclass(frozen=True)
class Group:
    """A group of users looking for a shared activity."""

    group_id: str
    member_ids: tuple[str, ...] = ()
    city: str = DEFAULT_CITY

    def __post_init__(self) -> None:
        members = tuple(dict.fromkeys(str(member).strip() for member in self.member_ids or ()))
        object.__setattr__(self, "member_ids", tuple(member for member in members if member))


@dataclass(frozen=True)
class GroupSuggestion:
    """An activity suggested to a group, with the reason shown to its members."""

    activity: ActivityRecord
    score: int
    matched_interests: tuple[str, ...] = ()
    explanation: str = ""

    @property
    def id(self) -> str:
        return self.activity.id

    @property
    def title(self) -> str:
        return self.activity.title

    def to_dict(self) -> dict[str, Any]:
        activity = self.activity
        return {
            "id": activity.id,
            "title": activity.title,
            "category": activity.category,
            "interests": list(activity.interests),
            "price": activity.price.value,
            "address": activity.address,
            "city": activity.city,
            "rating": activity.rating,
            "isNew": activity.is_new,
            "score": self.score,
            "matchedInterests": list(self.matched_interests),
            "explanation": self.explanation,
        }


@dataclass(frozen=True)
class CachedSuggestion:
    """Stored reference to a previously suggested activity."""

    activity_id: str
    score: int
    matched_interests: tuple[str, ...] = ()


def _is_finite(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


__all__ = [
    "ActivityRecord",
    "CachedSuggestion",
    "Coordinate",
    "Group",
    "GroupSuggestion",
    "PriceTier",
    "ScoreBreakdown",
    "ScoredActivity",
    "UserProfile",
    "normalise_tags",
]
