"""Shared-interest scoring used to suggest activities to a whole group."""
from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

from src.core.entities import ActivityRecord, GroupSuggestion, PriceTier, normalise_tags
from src.utils.logger import logger

DEFAULT_GROUP_INTERESTS: tuple[str, ...] = ("culture", "divertissement", "sport")

INTEREST_MATCH_POINTS = 30
TITLE_MATCH_POINTS = 25
# Interests that earn a large bonus when they appear in the activity title.
HIGHLIGHT_INTERESTS: Mapping[str, int] = {"bowling": 60}

CITY_MATCH_POINTS = 10
FREE_PRICE_POINTS = 15
NOVELTY_POINTS = 5
POPULAR_RATING = 4.0
POPULARITY_POINTS = 10

SCORE_CAP = 100

EXPLANATION_SEPARATOR = " • "


def merge_interests(interest_lists: Iterable[Sequence[str]]) -> tuple[str, ...]:
    """Union of the members' interests, falling back to the default set."""

    merged = normalise_tags(tag for interests in interest_lists for tag in interests)
    return merged or DEFAULT_GROUP_INTERESTS


def group_interest_score(
    group_interests: Sequence[str],
    activity_interests: Sequence[str],
    title: str,
) -> tuple[int, tuple[str, ...]]:
    lowered_title = (title or "").lower()
    total = 0
    matched: list[str] = []

    for interest in group_interests:
        highlight = HIGHLIGHT_INTERESTS.get(interest)
        if highlight is not None and interest in lowered_title:
            points = highlight
        elif any(interest in tag or tag in interest for tag in activity_interests):
            points = INTEREST_MATCH_POINTS
        elif interest in lowered_title:
            points = TITLE_MATCH_POINTS
        else:
            continue

        total += points
        if interest not in matched:
            matched.append(interest)

    return total, tuple(matched)


def city_matches(activity: ActivityRecord, city: Optional[str]) -> bool:
    needle = (city or "").strip().lower()
    if not needle:
        return False
    return needle in activity.address.lower() or needle in activity.city.lower()


def explain(score: int, matched_interests: Sequence[str], activity: ActivityRecord) -> str:
    """Short French sentence shown next to a group suggestion."""

    parts: list[str] = []
    if matched_interests:
        parts.append(f"Match avec {len(matched_interests)} intérêt(s)")
    if activity.price is PriceTier.FREE:
        parts.append("Gratuit")
    if activity.is_new:
        parts.append("Nouveauté")
    return EXPLANATION_SEPARATOR.join(parts) or f"Score: {score}"


def explain_cached(score: int, matched_interests: Sequence[str]) -> str:
    return f"Score: {score}{EXPLANATION_SEPARATOR}{', '.join(matched_interests)}"


class GroupScorer:
    """Score activities against the merged interests of a group."""

    def score(
        self,
        interests: Sequence[str],
        city: Optional[str],
        activity: ActivityRecord,
    ) -> GroupSuggestion:
        total, matched = group_interest_score(interests, activity.interests, activity.title)

        if city_matches(activity, city):
            total += CITY_MATCH_POINTS
        if activity.price is PriceTier.FREE:
            total += FREE_PRICE_POINTS
        if activity.is_new:
            total += NOVELTY_POINTS
        if activity.rating is not None and activity.rating > POPULAR_RATING:
            total += POPULARITY_POINTS

        score = min(SCORE_CAP, total)
        logger.debug("Group score for {}: {} (matched {})", activity.id, score, matched)
        return GroupSuggestion(
            activity=activity,
            score=score,
            matched_interests=matched,
            explanation=explain(score, matched, activity),
        )

    def score_all(
        self,
        interests: Sequence[str],
        city: Optional[str],
        activities: Iterable[ActivityRecord],
    ) -> list[GroupSuggestion]:
        return [self.score(interests, city, activity) for activity in activities]


__all__ = [
    "DEFAULT_GROUP_INTERESTS",
    "GroupScorer",
    "city_matches",
    "explain",
    "explain_cached",
    "group_interest_score",
    "merge_interests",
]
