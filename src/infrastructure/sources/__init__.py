"""Profile, activity and group sources."""
from __future__ import annotations

from typing import Optional

from src.core.ports import ActivitySource, GroupSource, ProfileSource, SuggestionStore
from src.utils.config import AppConfig, FirestoreConfig, PathsConfig


def _backend(config: AppConfig) -> str:
    return str(config.get("source") or "csv").strip().lower()


def _required_path(config: AppConfig, key: str) -> str:
    if "paths" not in config:
        raise KeyError("Configuration is missing the 'paths' section.")
    paths: PathsConfig = config["paths"]
    value = paths.get(key)  # type: ignore[misc]
    if value is None:
        raise KeyError(f"Configuration 'paths' is missing the '{key}' entry.")
    return str(value)


def build_sources(config: AppConfig) -> tuple[ProfileSource, ActivitySource]:
    """Create the profile and activity sources selected by ``config['source']``."""

    backend = _backend(config)

    if backend == "csv":
        activities_csv = _required_path(config, "activities_csv")
        profiles = _required_path(config, "profiles")

        from src.infrastructure.sources.local import CsvActivitySource, YamlProfileSource

        return YamlProfileSource(profiles), CsvActivitySource(activities_csv)

    if backend == "firestore":
        from src.infrastructure.sources.firestore_repo import (
            ACTIVITIES_COLLECTION,
            USERS_COLLECTION,
            FirestoreActivitySource,
            FirestoreProfileSource,
            get_firestore_client,
        )

        firestore_config: FirestoreConfig = config.get("firestore", {})
        client = get_firestore_client(firestore_config.get("credentials_path"))
        return (
            FirestoreProfileSource(client, firestore_config.get("users_collection", USERS_COLLECTION)),
            FirestoreActivitySource(
                client, firestore_config.get("activities_collection", ACTIVITIES_COLLECTION)
            ),
        )

    raise ValueError(f"Unknown source backend '{backend}'.")


def build_group_sources(config: AppConfig) -> tuple[GroupSource, Optional[SuggestionStore]]:
    """Create the group source and, when configured, the suggestion store."""

    backend = _backend(config)

    if backend == "csv":
        from src.infrastructure.sources.local import YamlGroupSource, YamlSuggestionStore

        groups = _required_path(config, "groups")
        suggestions = config.get("paths", {}).get("suggestions")
        store = YamlSuggestionStore(suggestions) if suggestions else None
        return YamlGroupSource(groups), store

    if backend == "firestore":
        from src.infrastructure.sources.firestore_repo import (
            GROUPS_COLLECTION,
            SUGGESTIONS_COLLECTION,
            FirestoreGroupSource,
            FirestoreSuggestionStore,
            get_firestore_client,
        )

        firestore_config: FirestoreConfig = config.get("firestore", {})
        client = get_firestore_client(firestore_config.get("credentials_path"))
        return (
            FirestoreGroupSource(client, firestore_config.get("groups_collection", GROUPS_COLLECTION)),
            FirestoreSuggestionStore(
                client, firestore_config.get("suggestions_collection", SUGGESTIONS_COLLECTION)
            ),
        )

    raise ValueError(f"Unknown source backend '{backend}'.")


__all__ = ["build_group_sources", "build_sources"]
