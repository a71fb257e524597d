"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.core.entities import ActivityRecord, Coordinate, PriceTier, UserProfile  # noqa: E402

GRAND_PLACE = Coordinate(latitude=50.8467, longitude=4.3525)


@pytest.fixture
def make_activity():
    """Factory producing a neutral activity: paid, unrated, not new, no position."""

    def factory(activity_id: str = "a1", **overrides) -> ActivityRecord:
        values = {
            "id": activity_id,
            "title": "Activité",
            "interests": (),
            "price": PriceTier.PAID,
            "location": None,
            "rating": None,
            "is_new": False,
        }
        values.update(overrides)
        return ActivityRecord(**values)

    return factory


@pytest.fixture
def located_user() -> UserProfile:
    return UserProfile(user_id="located", interests=("sport",), location=GRAND_PLACE)
