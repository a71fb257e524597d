"""Firestore-backed profile and activity sources."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional, Sequence

from google.api_core.exceptions import GoogleAPIError
from google.cloud import firestore
from google.oauth2 import service_account

from src.core.entities import ActivityRecord, CachedSuggestion, Group, GroupSuggestion, UserProfile
from src.core.errors import (
    ActivitySourceUnavailable,
    GroupNotFound,
    GroupSourceUnavailable,
    ProfileNotFound,
    ProfileSourceUnavailable,
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

DEFAULT_CREDENTIALS_PATH = "/etc/secrets/service-account.json"
USERS_COLLECTION = "users"
ACTIVITIES_COLLECTION = "activities"
GROUPS_COLLECTION = "groups"
SUGGESTIONS_COLLECTION = "groupSuggestions"


def get_firestore_client(credentials_path: Optional[str] = None) -> firestore.Client:
    """Build a client from a service-account file, or from ambient credentials."""

    secret_path = Path(credentials_path or DEFAULT_CREDENTIALS_PATH)
    if secret_path.exists():
        with secret_path.open("r", encoding="utf-8") as file:
            info = json.load(file)
        creds = service_account.Credentials.from_service_account_info(info)
        logger.info("Using Firestore service account from {}", secret_path)
        return firestore.Client(credentials=creds, project=info["project_id"])

    logger.info(
        "No service account at {}; using application default credentials ({})",
        secret_path,
        os.environ.get("GOOGLE_APPLICATION_CREDENTIALS", "unset"),
    )
    return firestore.Client()


class FirestoreProfileSource:
    """Read user profiles from the ``users`` collection."""

    def __init__(self, client: firestore.Client, collection: str = USERS_COLLECTION) -> None:
        self._client = client
        self._collection = collection

    def fetch_profile(self, user_id: str) -> UserProfile:
        try:
            snapshot = self._client.collection(self._collection).document(user_id).get()
        except GoogleAPIError as error:
            raise ProfileSourceUnavailable(f"Could not load profile {user_id}: {error}") from error

        if not snapshot.exists:
            raise ProfileNotFound(f"User {user_id} not found in {self._collection}")

        profile = profile_from_mapping(user_id, snapshot.to_dict() or {})
        logger.debug("Loaded profile {} with interests {}", user_id, profile.interests)
        return profile


class FirestoreActivitySource:
    """Read every activity document from the ``activities`` collection."""

    def __init__(self, client: firestore.Client, collection: str = ACTIVITIES_COLLECTION) -> None:
        self._client = client
        self._collection = collection

    def fetch_activities(self) -> list[ActivityRecord]:
        try:
            snapshots = list(self._client.collection(self._collection).stream())
        except GoogleAPIError as error:
            raise ActivitySourceUnavailable(f"Could not stream {self._collection}: {error}") from error

        activities = [activity_from_mapping(snap.id, snap.to_dict() or {}) for snap in snapshots]
        logger.info("{} activities found in {}", len(activities), self._collection)
        return activities



class FirestoreGroupSource:
    """Read group documents (``members``, ``city``) from the ``groups`` collection."""

    def __init__(self, client: firestore.Client, collection: str = GROUPS_COLLECTION) -> None:
        self._client = client
        self._collection = collection

    def fetch_group(self, group_id: str) -> Group:
        try:
            snapshot = self._client.collection(self._collection).document(group_id).get()
        except GoogleAPIError as error:
            raise GroupSourceUnavailable(f"Could not load group {group_id}: {error}") from error

        if not snapshot.exists:
            raise GroupNotFound(f"Group {group_id} not found in {self._collection}")
        return group_from_mapping(group_id, snapshot.to_dict() or {})


class FirestoreSuggestionStore:
    """Keep the latest suggestions of each group in ``groupSuggestions``."""

    def __init__(self, client: firestore.Client, collection: str = SUGGESTIONS_COLLECTION) -> None:
        self._client = client
        self._collection = collection

    def load(self, group_id: str) -> Optional[list[CachedSuggestion]]:
        try:
            snapshot = self._client.collection(self._collection).document(group_id).get()
        except GoogleAPIError as error:
            raise SuggestionStoreUnavailable(f"Could not read suggestions for {group_id}: {error}") from error

        if not snapshot.exists:
            return None
        return cached_suggestions_from_mapping(snapshot.to_dict() or {})

    def save(
        self,
        group_id: str,
        suggestions: Sequence[GroupSuggestion],
        interests: Sequence[str],
    ) -> None:
        payload = suggestions_to_mapping(group_id, suggestions, interests)
        try:
            self._client.collection(self._collection).document(group_id).set(payload, merge=True)
        except GoogleAPIError as error:
            raise SuggestionStoreUnavailable(f"Could not save suggestions for {group_id}: {error}") from error
        logger.info("Saved {} suggestions for group {}", len(suggestions), group_id)


__all__ = [
    "FirestoreActivitySource",
    "FirestoreGroupSource",
    "FirestoreProfileSource",
    "FirestoreSuggestionStore",
    "get_firestore_client",
]
