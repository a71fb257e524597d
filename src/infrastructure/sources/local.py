"""File-based sources used for local runs and tests."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

import pandas as pd
import yaml

from src.core.entities import ActivityRecord, CachedSuggestion, Group, GroupSuggestion, UserProfile
from src.core.errors import (
    ActivitySourceUnavailable,
    GroupNotFound,
    GroupSourceUnavailable,
    ProfileNotFound,
    ProfileSourceUnavailable,
    RecommendationError,
    SuggestionStoreUnavailable,
)
from src.infrastructure.sources.records import (
    activity_from_mapping,
    cached_suggestions_from_mapping,
    group_from_mapping,
    profile_from_mapping,
    suggestions_to_mapping,
)
from src.utils.logger import logger


def read_yaml_section(
    path: Path,
    section: str,
    error: type[RecommendationError],
    missing_ok: bool = False,
) -> Mapping[str, Any]:
    """Return ``section`` of a YAML file (or the whole file when the key is absent)."""

    if missing_ok and not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as file:
            data = yaml.safe_load(file) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise error(f"Could not read {path}: {exc}") from exc

    if not isinstance(data, Mapping):
        raise error(f"{path} must contain a mapping")
    entries = data.get(section, data)
    if not isinstance(entries, Mapping):
        raise error(f"Section '{section}' in {path} must be a mapping")
    return {str(key): value for key, value in entries.items()}


class CsvActivitySource:
    """Load the activity catalogue from a CSV file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def fetch_activities(self) -> list[ActivityRecord]:
        logger.info("Loading activities from {}", self._path)
        try:
            catalog = pd.read_csv(self._path, dtype=str)
        except FileNotFoundError as error:
            raise ActivitySourceUnavailable(f"Activity catalogue not found: {self._path}") from error
        except pd.errors.EmptyDataError:
            logger.warning("Activity catalogue {} is empty", self._path)
            return []

        if "id" not in catalog.columns:
            catalog = catalog.assign(id=[str(index) for index in range(len(catalog))])

        activities = [
            activity_from_mapping(str(row["id"]), row.to_dict())
            for _, row in catalog.iterrows()
        ]
        logger.debug("Prepared {} activity records", len(activities))
        return activities


class YamlProfileSource:
    """Load user profiles keyed by user id from a YAML file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def fetch_profile(self, user_id: str) -> UserProfile:
        profiles = read_yaml_section(self._path, "profiles", ProfileSourceUnavailable)
        data = profiles.get(user_id)
        if data is None:
            raise ProfileNotFound(f"User {user_id} not found in {self._path}")
        if not isinstance(data, Mapping):
            raise ProfileSourceUnavailable(f"Profile {user_id} in {self._path} is not a mapping")
        return profile_from_mapping(user_id, data)


class YamlGroupSource:
    """Load groups (``members`` and ``city``) keyed by group id from a YAML file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def fetch_group(self, group_id: str) -> Group:
        groups = read_yaml_section(self._path, "groups", GroupSourceUnavailable)
        data = groups.get(group_id)
        if data is None:
            raise GroupNotFound(f"Group {group_id} not found in {self._path}")
        if not isinstance(data, Mapping):
            raise GroupSourceUnavailable(f"Group {group_id} in {self._path} is not a mapping")
        return group_from_mapping(group_id, data)


class YamlSuggestionStore:
    """Keep the latest suggestions of each group in a YAML file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def load(self, group_id: str) -> Optional[list[CachedSuggestion]]:
        stored = read_yaml_section(self._path, "suggestions", SuggestionStoreUnavailable, missing_ok=True)
        data = stored.get(group_id)
        if not isinstance(data, Mapping):
            return None
        return cached_suggestions_from_mapping(data)

    def save(
        self,
        group_id: str,
        suggestions: Sequence[GroupSuggestion],
        interests: Sequence[str],
    ) -> None:
        stored = dict(read_yaml_section(self._path, "suggestions", SuggestionStoreUnavailable, missing_ok=True))
        previous = stored.get(group_id)
        stored[group_id] = {
            **(previous if isinstance(previous, Mapping) else {}),
            **suggestions_to_mapping(group_id, suggestions, interests),
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("w", encoding="utf-8") as file:
                yaml.safe_dump({"suggestions": stored}, file, allow_unicode=True, sort_keys=False)
        except OSError as error:
            raise SuggestionStoreUnavailable(f"Could not write {self._path}: {error}") from error
        logger.info("Saved {} suggestions for group {}", len(suggestions), group_id)


__all__ = [
    "CsvActivitySource",
    "YamlGroupSource",
    "YamlProfileSource",
    "YamlSuggestionStore",
    "read_yaml_section",
]
