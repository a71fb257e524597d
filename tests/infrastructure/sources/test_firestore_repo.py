"""Tests for the Firestore sources using mocked clients."""
from __future__ import annotations

from unittest.mock import Mock

import pytest

pytest.importorskip("google.cloud.firestore")

from google.api_core.exceptions import RetryError, ServiceUnavailable

from src.core.entities import ActivityRecord, CachedSuggestion, Coordinate, GroupSuggestion, PriceTier
from src.core.errors import (
    ActivitySourceUnavailable,
    GroupNotFound,
    GroupSourceUnavailable,
    ProfileNotFound,
    ProfileSourceUnavailable,
    SuggestionStoreUnavailable,
)
from src.infrastructure.sources.firestore_repo import (
    FirestoreActivitySource,
    FirestoreGroupSource,
    FirestoreProfileSource,
    FirestoreSuggestionStore,
)
from src.use_cases.recommend_activities import RecommendActivitiesUseCase


def make_snapshot(doc_id: str, data: dict | None, exists: bool = True) -> Mock:
    return Mock(id=doc_id, exists=exists, to_dict=Mock(return_value=data))


def test_profile_source_reads_user_document() -> None:
    client = Mock()
    client.collection.return_value.document.return_value.get.return_value = make_snapshot(
        "u1",
        {
            "interests": ["Sport", "Jeux"],
            "location": Mock(latitude=50.85, longitude=4.35),
            "city": "Ixelles",
        },
    )

    profile = FirestoreProfileSource(client).fetch_profile("u1")

    client.collection.assert_called_with("users")
    client.collection.return_value.document.assert_called_with("u1")
    assert profile.interests == ("sport", "jeux")
    assert profile.location == Coordinate(50.85, 4.35)
    assert profile.city == "Ixelles"


def test_profile_source_missing_document() -> None:
    client = Mock()
    client.collection.return_value.document.return_value.get.return_value = make_snapshot(
        "ghost", None, exists=False
    )

    with pytest.raises(ProfileNotFound):
        FirestoreProfileSource(client).fetch_profile("ghost")


def test_profile_source_backend_failure() -> None:
    client = Mock()
    client.collection.return_value.document.return_value.get.side_effect = ServiceUnavailable("down")

    with pytest.raises(ProfileSourceUnavailable):
        FirestoreProfileSource(client).fetch_profile("u1")


def test_activity_source_streams_collection() -> None:
    client = Mock()
    client.collection.return_value.stream.return_value = iter(
        [
            make_snapshot("a1", {"title": "Yoga", "price": "Gratuit", "latitude": 50.8, "longitude": 4.3}),
            make_snapshot("a2", None),
        ]
    )

    activities = FirestoreActivitySource(client, collection="events").fetch_activities()

    client.collection.assert_called_with("events")
    assert [activity.id for activity in activities] == ["a1", "a2"]
    assert activities[0].price is PriceTier.FREE
    assert activities[0].location == Coordinate(50.8, 4.3)
    assert activities[1].title == "Sans titre"


def test_activity_source_backend_failure() -> None:
    client = Mock()
    client.collection.return_value.stream.side_effect = ServiceUnavailable("down")

    with pytest.raises(ActivitySourceUnavailable):
        FirestoreActivitySource(client).fetch_activities()


def test_retry_deadline_is_reported_as_unavailable_source() -> None:
    client = Mock()
    client.collection.return_value.document.return_value.get.side_effect = RetryError(
        "deadline exceeded", None
    )
    client.collection.return_value.stream.side_effect = RetryError("deadline exceeded", None)

    with pytest.raises(ProfileSourceUnavailable):
        FirestoreProfileSource(client).fetch_profile("u1")
    with pytest.raises(ActivitySourceUnavailable):
        FirestoreActivitySource(client).fetch_activities()


def test_retry_deadline_on_profile_yields_empty_recommendations() -> None:
    client = Mock()
    client.collection.return_value.document.return_value.get.side_effect = RetryError(
        "deadline exceeded", None
    )
    use_case = RecommendActivitiesUseCase(FirestoreProfileSource(client), FirestoreActivitySource(client))

    assert use_case.execute("u1") == []


def test_group_source_reads_members_and_city() -> None:
    client = Mock()
    client.collection.return_value.document.return_value.get.return_value = make_snapshot(
        "g1", {"members": ["u1", "u2", "u1"]}
    )

    group = FirestoreGroupSource(client).fetch_group("g1")

    client.collection.assert_called_with("groups")
    assert group.member_ids == ("u1", "u2")
    assert group.city == "Bruxelles"


def test_group_source_missing_and_failing() -> None:
    client = Mock()
    document = client.collection.return_value.document.return_value
    document.get.return_value = make_snapshot("g1", None, exists=False)

    with pytest.raises(GroupNotFound):
        FirestoreGroupSource(client).fetch_group("g1")

    document.get.side_effect = RetryError("deadline exceeded", None)
    with pytest.raises(GroupSourceUnavailable):
        FirestoreGroupSource(client).fetch_group("g1")


def test_suggestion_store_saves_merged_document() -> None:
    client = Mock()
    suggestion = GroupSuggestion(
        activity=ActivityRecord(id="a1", title="Yoga", category="Bien-être"),
        score=40,
        matched_interests=("yoga",),
        explanation="Match avec 1 intérêt(s)",
    )

    FirestoreSuggestionStore(client).save("g1", [suggestion], ["yoga", "sport"])

    client.collection.assert_called_with("groupSuggestions")
    document = client.collection.return_value.document
    document.assert_called_with("g1")
    payload = document.return_value.set.call_args.args[0]
    assert document.return_value.set.call_args.kwargs == {"merge": True}
    assert payload["groupId"] == "g1"
    assert payload["commonInterests"] == ["yoga", "sport"]
    assert payload["totalActivities"] == 1
    assert payload["suggestedActivities"] == [
        {"id": "a1", "title": "Yoga", "score": 40, "matchedInterests": ["yoga"], "category": "Bien-être"}
    ]
    assert "lastUpdated" in payload


def test_suggestion_store_load() -> None:
    client = Mock()
    document = client.collection.return_value.document.return_value
    document.get.return_value = make_snapshot(
        "g1", {"suggestedActivities": [{"id": "a1", "score": 40, "matchedInterests": ["yoga"]}, {"title": "x"}]}
    )
    store = FirestoreSuggestionStore(client)

    assert store.load("g1") == [CachedSuggestion("a1", 40, ("yoga",))]

    document.get.return_value = make_snapshot("g1", None, exists=False)
    assert store.load("g1") is None

    document.set.side_effect = ServiceUnavailable("down")
    with pytest.raises(SuggestionStoreUnavailable):
        store.save("g1", [], [])
