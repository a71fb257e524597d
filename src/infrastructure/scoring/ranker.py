"""Ordering of scored activities."""
from __future__ import annotations

from typing import Iterable, Optional

from src.core.entities import GroupSuggestion, ScoredActivity

DEFAULT_LIMIT = 20
GROUP_LIMIT = 5
# Group suggestions must score strictly above this.
GROUP_MIN_SCORE = 5


def rank_activities(scored: Iterable[ScoredActivity], limit: int = DEFAULT_LIMIT) -> list[ScoredActivity]:
    """Return the ``limit`` best activities, highest score first.

    Equal scores are ordered by activity id so the output does not depend on
    the order in which the source returned its documents.
    """

    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")

    ordered = sorted(scored, key=lambda item: (-item.personal_score, item.id))
    return ordered[:limit]


def rank_group_suggestions(
    suggestions: Iterable[GroupSuggestion],
    limit: int = GROUP_LIMIT,
    min_score: Optional[int] = GROUP_MIN_SCORE,
) -> list[GroupSuggestion]:
    """Drop matches scoring ``min_score`` or less and keep the ``limit`` best.

    Ties are ordered by id. ``min_score=None`` keeps every suggestion.
    """

    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")

    kept = [item for item in suggestions if min_score is None or item.score > min_score]
    kept.sort(key=lambda item: (-item.score, item.id))
    return kept[:limit]


__all__ = ["DEFAULT_LIMIT", "GROUP_LIMIT", "GROUP_MIN_SCORE", "rank_activities", "rank_group_suggestions"]
