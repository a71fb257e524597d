"""Use case for suggesting activities that suit a whole group."""
from __future__ import annotations

from typing import Optional, Protocol, Sequence

from src.core.entities import ActivityRecord, Group, GroupSuggestion
from src.core.errors import (
    ActivitySourceUnavailable,
    GroupUnavailable,
    ProfileNotFound,
    ProfileUnavailable,
    SuggestionStoreUnavailable,
)
from src.core.ports import ActivitySource, GroupSource, ProfileSource, SuggestionStore
from src.infrastructure.scoring.group import GroupScorer, explain_cached, merge_interests
from src.infrastructure.scoring.ranker import GROUP_LIMIT, rank_group_suggestions
from src.utils.logger import logger


class GroupActivityScorer(Protocol):
    def score_all(
        self,
        interests: Sequence[str],
        city: Optional[str],
        activities: Sequence[ActivityRecord],
    ) -> list[GroupSuggestion]:
        ...


class RecommendForGroupUseCase:
    """Merge the members' interests and suggest the best shared activities."""

    def __init__(
        self,
        group_source: GroupSource,
        profile_source: ProfileSource,
        activity_source: ActivitySource,
        scorer: GroupActivityScorer | None = None,
        store: SuggestionStore | None = None,
        limit: int = GROUP_LIMIT,
        raise_errors: bool = False,
    ) -> None:
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")
        self._group_source = group_source
        self._profile_source = profile_source
        self._activity_source = activity_source
        self._scorer = scorer or GroupScorer()
        self._store = store
        self._limit = limit
        self._raise_errors = raise_errors

    def execute(self, group_id: str) -> list[GroupSuggestion]:
        """Score the catalogue for ``group_id`` and store the result."""

        if not group_id or not str(group_id).strip():
            raise ValueError("A group id is required.")

        logger.info("Generating suggestions for group {}", group_id)
        try:
            group = self._group_source.fetch_group(group_id)
            interests = self._group_interests(group)
        except (GroupUnavailable, ProfileUnavailable) as error:
            if self._raise_errors:
                raise
            logger.warning("Group {} unavailable ({}): {}", group_id, error.code, error)
            return []

        logger.info("Group interests: {} | city: {}", ", ".join(interests), group.city)

        activities = self._load_activities()
        suggestions = self._scorer.score_all(interests, group.city, activities)
        ranked = rank_group_suggestions(suggestions, limit=self._limit)

        if ranked:
            self._save(group_id, ranked, interests)
        else:
            logger.info("No activity scored high enough for group {}", group_id)

        for index, item in enumerate(ranked, start=1):
            logger.info("{}. {} - {}pts ({})", index, item.title, item.score, item.explanation)
        return ranked

    def cached(self, group_id: str) -> list[GroupSuggestion]:
        """Return stored suggestions, computing them when none are stored."""

        stored = None
        if self._store is not None:
            try:
                stored = self._store.load(group_id)
            except SuggestionStoreUnavailable as error:
                logger.warning("Could not read stored suggestions for {}: {}", group_id, error)

        if stored is None:
            return self.execute(group_id)

        catalogue = {activity.id: activity for activity in self._load_activities()}
        suggestions = [
            GroupSuggestion(
                activity=catalogue[entry.activity_id],
                score=entry.score,
                matched_interests=entry.matched_interests,
                explanation=explain_cached(entry.score, entry.matched_interests),
            )
            for entry in stored
            if entry.activity_id in catalogue
        ]
        dropped = len(stored) - len(suggestions)
        if dropped:
            logger.debug("{} stored suggestions refer to removed activities", dropped)
        return rank_group_suggestions(suggestions, limit=self._limit, min_score=None)

    def _group_interests(self, group: Group) -> tuple[str, ...]:
        interest_lists = []
        for member_id in group.member_ids:
            try:
                profile = self._profile_source.fetch_profile(member_id)
            except ProfileNotFound:
                logger.debug("Member {} of group {} has no profile", member_id, group.group_id)
                continue
            interest_lists.append(profile.interests)
        return merge_interests(interest_lists)

    def _load_activities(self) -> list[ActivityRecord]:
        activities = self._activity_source.fetch_activities()
        if activities is None:
            raise ActivitySourceUnavailable("Activity source returned no collection.")
        return list(activities)

    def _save(self, group_id: str, ranked: Sequence[GroupSuggestion], interests: Sequence[str]) -> None:
        if self._store is None:
            return
        try:
            self._store.save(group_id, ranked, interests)
        except SuggestionStoreUnavailable as error:
            logger.warning("Could not store suggestions for group {}: {}", group_id, error)


__all__ = ["GroupActivityScorer", "RecommendForGroupUseCase"]
