"""Use case for ranking activities for a given user."""
from __future__ import annotations

from dataclasses import replace
from typing import Optional, Protocol, Sequence

from src.core.entities import ActivityRecord, ScoredActivity, UserProfile
from src.core.errors import ActivitySourceUnavailable, ProfileUnavailable
from src.core.ports import ActivitySource, Geocoder, ProfileSource
from src.infrastructure.geo.distance import (
    DEFAULT_MAX_DISTANCE_KM,
    filter_by_distance,
    format_distance,
)
from src.infrastructure.scoring.personal import PersonalScorer
from src.infrastructure.scoring.ranker import DEFAULT_LIMIT, rank_activities
from src.utils.logger import logger

SUMMARY_SIZE = 5


class Scorer(Protocol):
    def score_all(self, profile: UserProfile, activities: Sequence[ActivityRecord]) -> list[ScoredActivity]:
        ...


class RecommendActivitiesUseCase:
    """Fetch a profile and the catalogue, then return the best matches."""

    def __init__(
        self,
        profile_source: ProfileSource,
        activity_source: ActivitySource,
        scorer: Scorer | None = None,
        geocoder: Geocoder | None = None,
        limit: int = DEFAULT_LIMIT,
        raise_errors: bool = False,
    ) -> None:
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")
        self._profile_source = profile_source
        self._activity_source = activity_source
        self._scorer = scorer or PersonalScorer()
        self._geocoder = geocoder
        self._limit = limit
        self._raise_errors = raise_errors

    def execute(self, user_id: str) -> list[ScoredActivity]:
        logger.info("Generating personalised activities for user {}", user_id)
        profile = self._load_profile(user_id)
        if profile is None:
            return []

        logger.info(
            "Interests: {} | position: {}",
            ", ".join(profile.interests) or "none",
            profile.location or profile.city,
        )

        activities = self._load_activities()
        if not activities:
            logger.info("No candidate activities for user {}", user_id)
            return []

        scored = self._scorer.score_all(profile, activities)
        ranked = rank_activities(scored, limit=self._limit)
        self._log_summary(ranked)
        return ranked

    def nearby(
        self, user_id: str, max_distance_km: float = DEFAULT_MAX_DISTANCE_KM
    ) -> list[tuple[ActivityRecord, float]]:
        """Activities within ``max_distance_km`` of the user, nearest first."""

        profile = self._load_profile(user_id)
        if profile is None:
            return []
        if profile.location is None:
            logger.info("User {} has no known position; nothing is nearby", user_id)
            return []

        nearby = filter_by_distance(self._load_activities(), profile.location, max_distance_km)
        logger.info("{} activities within {} of user {}", len(nearby), format_distance(max_distance_km), user_id)
        return nearby

    def _load_profile(self, user_id: str) -> Optional[UserProfile]:
        if not user_id or not str(user_id).strip():
            raise ValueError("A user id is required.")

        try:
            return self._profile_source.fetch_profile(user_id)
        except ProfileUnavailable as error:
            if self._raise_errors:
                raise
            logger.warning("Profile unavailable for {} ({}): {}", user_id, error.code, error)
            return None

    def _load_activities(self) -> list[ActivityRecord]:
        activities = self._activity_source.fetch_activities()
        if activities is None:
            raise ActivitySourceUnavailable("Activity source returned no collection.")

        activities = list(activities)
        if self._geocoder is not None:
            activities = [self._geocode(activity) for activity in activities]
        return activities

    def _geocode(self, activity: ActivityRecord) -> ActivityRecord:
        if activity.location is not None or not activity.address:
            return activity

        coordinate = self._geocoder.resolve(activity.address) if self._geocoder else None
        if coordinate is None:
            return activity

        logger.debug("Geocoded activity {} from '{}'", activity.id, activity.address)
        return replace(activity, location=coordinate)

    @staticmethod
    def _log_summary(ranked: Sequence[ScoredActivity]) -> None:
        logger.info("Top {} personalised activities", len(ranked))
        for index, item in enumerate(ranked[:SUMMARY_SIZE], start=1):
            distance = format_distance(item.distance_km) if item.distance_km is not None else "n/a"
            logger.info("{}. {} - {}pts ({})", index, item.title, item.personal_score, distance)


__all__ = ["RecommendActivitiesUseCase", "Scorer"]
