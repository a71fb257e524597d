"""Unit tests for group suggestion scoring and ranking."""
from __future__ import annotations

import pytest

from src.core.entities import ActivityRecord, GroupSuggestion, PriceTier
from src.infrastructure.scoring.group import (
    DEFAULT_GROUP_INTERESTS,
    GroupScorer,
    explain,
    explain_cached,
    merge_interests,
)
from src.infrastructure.scoring.ranker import rank_group_suggestions


@pytest.fixture
def scorer() -> GroupScorer:
    return GroupScorer()


def test_merge_interests_deduplicates_across_members() -> None:
    assert merge_interests([("sport", "food"), ("Food", "Jeux ")]) == ("sport", "food", "jeux")


def test_merge_interests_falls_back_to_defaults() -> None:
    assert merge_interests([]) == DEFAULT_GROUP_INTERESTS
    assert merge_interests([(), ("  ",)]) == ("culture", "divertissement", "sport")


def test_every_bonus_applies(scorer: GroupScorer) -> None:
    activity = ActivityRecord(
        id="park-run",
        title="Tournoi de sport",
        interests=("sport", "social"),
        price=PriceTier.FREE,
        address="Parc de Bruxelles",
        rating=4.7,
        is_new=True,
    )

    suggestion = scorer.score(("sport",), "Bruxelles", activity)

    assert suggestion.score == 30 + 10 + 15 + 5 + 10
    assert suggestion.matched_interests == ("sport",)
    assert suggestion.explanation == "Match avec 1 intérêt(s) • Gratuit • Nouveauté"


def test_title_match_and_highlighted_interest(scorer: GroupScorer) -> None:
    concert = ActivityRecord(id="c", title="Soirée music live", interests=("jazz",))
    bowling = ActivityRecord(id="b", title="Bowling de Woluwe", interests=("bowling",))

    assert scorer.score(("music",), None, concert).score == 25
    assert scorer.score(("bowling",), None, bowling).score == 60


def test_city_matches_address_or_city_field(scorer: GroupScorer) -> None:
    by_city = ActivityRecord(id="a", address="Ixelles", city="Bruxelles")
    elsewhere = ActivityRecord(id="b", address="Leuven", city="Leuven")

    assert scorer.score((), "bruxelles", by_city).score == 10
    assert scorer.score((), "Bruxelles", elsewhere).score == 0
    assert scorer.score((), "", by_city).score == 0


def test_rating_bonus_needs_more_than_four(scorer: GroupScorer) -> None:
    assert scorer.score((), None, ActivityRecord(id="a", rating=4.0)).score == 0
    assert scorer.score((), None, ActivityRecord(id="b", rating=4.01)).score == 10
    assert scorer.score((), None, ActivityRecord(id="c")).score == 0


def test_score_is_capped_at_hundred(scorer: GroupScorer) -> None:
    activity = ActivityRecord(
        id="a",
        interests=("sport", "foot", "social", "outdoor"),
        price=PriceTier.FREE,
        rating=5.0,
        is_new=True,
    )

    assert scorer.score(("sport", "foot", "social", "outdoor"), None, activity).score == 100


def test_explanation_falls_back_to_score() -> None:
    activity = ActivityRecord(id="a", rating=4.5)

    assert explain(10, (), activity) == "Score: 10"
    assert explain_cached(70, ("sport", "food")) == "Score: 70 • sport, food"


def _suggestion(activity_id: str, score: int) -> GroupSuggestion:
    return GroupSuggestion(activity=ActivityRecord(id=activity_id), score=score)


def test_group_ranking_drops_scores_of_five_or_less() -> None:
    ranked = rank_group_suggestions([_suggestion("a", 5), _suggestion("b", 6), _suggestion("c", 0)])

    assert [item.id for item in ranked] == ["b"]


def test_group_ranking_keeps_top_five_by_score_then_id() -> None:
    suggestions = [_suggestion(f"act-{index}", score) for index, score in enumerate([40, 10, 70, 40, 25, 55, 15, 90])]

    ranked = rank_group_suggestions(suggestions)

    assert [item.score for item in ranked] == [90, 70, 55, 40, 40]
    assert [item.id for item in ranked][3:] == ["act-0", "act-3"]


def test_group_ranking_without_threshold() -> None:
    ranked = rank_group_suggestions([_suggestion("a", 0), _suggestion("b", 3)], min_score=None)

    assert [item.id for item in ranked] == ["b", "a"]

    with pytest.raises(ValueError):
        rank_group_suggestions([], limit=0)
