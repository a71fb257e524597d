"""Error taxonomy for the recommendation pipeline."""
from __future__ import annotations


class RecommendationError(Exception):
    code: str = "recommendation_error"

    def __init__(self, message: str = "", *, code: str | None = None) -> None:
        super().__init__(message or self.__class__.__name__)
        if code:
            self.code = code


class ProfileUnavailable(RecommendationError):
    """The user profile could not be obtained; the run is aborted."""

    code = "profile_unavailable"


class ProfileNotFound(ProfileUnavailable):
    code = "not_found"


class ProfileSourceUnavailable(ProfileUnavailable):
    code = "unavailable"


class ActivitySourceUnavailable(RecommendationError):
    """The activity collection could not be obtained at all."""

    code = "activities_unavailable"


class GroupUnavailable(RecommendationError):
    code = "group_unavailable"


class GroupNotFound(GroupUnavailable):
    code = "group_not_found"


class GroupSourceUnavailable(GroupUnavailable):
    code = "group_source_unavailable"


class SuggestionStoreUnavailable(RecommendationError):
    """Stored group suggestions could not be read or written."""

    code = "suggestions_unavailable"


__all__ = [
    "ActivitySourceUnavailable",
    "GroupNotFound",
    "GroupSourceUnavailable",
    "GroupUnavailable",
    "ProfileNotFound",
    "ProfileSourceUnavailable",
    "ProfileUnavailable",
    "RecommendationError",
    "SuggestionStoreUnavailable",
]
