"""Interfaces the use cases expect from the infrastructure layer."""
from __future__ import annotations

from typing import Optional, Protocol, Sequence

from src.core.entities import (
    ActivityRecord,
    CachedSuggestion,
    Coordinate,
    Group,
    GroupSuggestion,
    UserProfile,
)


class ProfileSource(Protocol):
    def fetch_profile(self, user_id: str) -> UserProfile:
        ...


class ActivitySource(Protocol):
    def fetch_activities(self) -> list[ActivityRecord]:
        ...


class Geocoder(Protocol):
    def resolve(self, location_text: str) -> Optional[Coordinate]:
        ...


class GroupSource(Protocol):
    def fetch_group(self, group_id: str) -> Group:
        ...


class SuggestionStore(Protocol):
    def load(self, group_id: str) -> Optional[list[CachedSuggestion]]:
        """Return the stored suggestions, or ``None`` when nothing is stored."""
        ...

    def save(
        self,
        group_id: str,
        suggestions: Sequence[GroupSuggestion],
        interests: Sequence[str],
    ) -> None:
        ...


__all__ = ["ActivitySource", "Geocoder", "GroupSource", "ProfileSource", "SuggestionStore"]
