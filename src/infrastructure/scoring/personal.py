"""Personal activity scoring combining interests, distance, price, rating and novelty."""
from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

from src.core.entities import (
    ActivityRecord,
    PriceTier,
    ScoreBreakdown,
    ScoredActivity,
    UserProfile,
)
from src.infrastructure.geo.distance import distance_between
from src.utils.logger import logger

INTEREST_CAP = 50
EXACT_MATCH_POINTS = 15
PARTIAL_MATCH_POINTS = 10
TITLE_MATCH_POINTS = 8

# (max distance in km, points), checked in order.
DISTANCE_BANDS: tuple[tuple[float, int], ...] = (
    (1.0, 30),
    (3.0, 25),
    (5.0, 20),
    (10.0, 15),
    (20.0, 10),
)
FAR_DISTANCE_POINTS = 5
NEUTRAL_DISTANCE_POINTS = 15

FREE_PRICE_POINTS = 10

TOP_RATING = 4.5
GOOD_RATING = 4.0
TOP_RATING_POINTS = 5
GOOD_RATING_POINTS = 3

NOVELTY_POINTS = 5


def interest_score(
    user_interests: Sequence[str],
    activity_interests: Sequence[str],
    title: str,
) -> tuple[int, tuple[str, ...]]:
    """Score interest overlap and return the user tags that contributed.

    Each user tag earns points from the first rule it satisfies: an exact tag
    match, a substring match in either direction against an activity tag, then
    a substring match inside the title. Contributions across tags add up and
    the total is clamped to ``INTEREST_CAP``.
    """

    lowered_title = (title or "").lower()
    total = 0
    matched: list[str] = []

    for user_tag in user_interests:
        if user_tag in activity_interests:
            points = EXACT_MATCH_POINTS
        elif any(user_tag in tag or tag in user_tag for tag in activity_interests):
            points = PARTIAL_MATCH_POINTS
        elif user_tag in lowered_title:
            points = TITLE_MATCH_POINTS
        else:
            continue

        total += points
        if user_tag not in matched:
            matched.append(user_tag)

    return min(INTEREST_CAP, total), tuple(matched)


def distance_score(distance_km: Optional[float]) -> int:
    if distance_km is None:
        return NEUTRAL_DISTANCE_POINTS
    for limit, points in DISTANCE_BANDS:
        if distance_km <= limit:
            return points
    return FAR_DISTANCE_POINTS


def price_score(price: PriceTier) -> int:
    return FREE_PRICE_POINTS if price is PriceTier.FREE else 0


def popularity_score(rating: Optional[float]) -> int:
    if rating is None or not math.isfinite(rating):
        return 0
    if rating >= TOP_RATING:
        return TOP_RATING_POINTS
    if rating >= GOOD_RATING:
        return GOOD_RATING_POINTS
    return 0


def novelty_score(is_new: bool) -> int:
    return NOVELTY_POINTS if is_new else 0


class PersonalScorer:
    """Stateless scorer; profiles and activities are passed per call."""

    def score(self, profile: UserProfile, activity: ActivityRecord) -> ScoredActivity:
        interest, matched = interest_score(profile.interests, activity.interests, activity.title)
        distance_km = distance_between(profile.location, activity.location)

        breakdown = ScoreBreakdown(
            interest=interest,
            distance=distance_score(distance_km),
            price=price_score(activity.price),
            popularity=popularity_score(_as_rating(activity.rating)),
            novelty=novelty_score(activity.is_new),
        )
        scored = ScoredActivity(
            activity=activity,
            personal_score=breakdown.total,
            breakdown=breakdown,
            distance_km=distance_km,
            matched_interests=matched,
        )
        logger.debug(
            "Scored {} for {}: {} {}",
            activity.id,
            profile.user_id,
            scored.personal_score,
            breakdown.to_dict(),
        )
        return scored

    def score_all(
        self, profile: UserProfile, activities: Iterable[ActivityRecord]
    ) -> list[ScoredActivity]:
        return [self.score(profile, activity) for activity in activities]


def _as_rating(value: object) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


__all__ = [
    "PersonalScorer",
    "distance_score",
    "interest_score",
    "novelty_score",
    "popularity_score",
    "price_score",
]
