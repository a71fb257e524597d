"""YAML configuration loading."""
from __future__ import annotations

from pathlib import Path
from typing import TypedDict, cast

import yaml


class PathsConfig(TypedDict, total=False):
    activities_csv: str
    profiles: str
    groups: str
    suggestions: str


class FirestoreConfig(TypedDict, total=False):
    credentials_path: str
    users_collection: str
    activities_collection: str
    groups_collection: str
    suggestions_collection: str


class GeocodingConfig(TypedDict, total=False):
    provider: str
    user_agent: str
    timeout: int
    country_codes: str
    use_default: bool


class RecommenderConfig(TypedDict, total=False):
    top_n: int
    nearby_km: float
    group_top_n: int


class LoggingConfig(TypedDict, total=False):
    level: str


class AppConfig(TypedDict, total=False):
    source: str
    paths: PathsConfig
    firestore: FirestoreConfig
    geocoding: GeocodingConfig
    recommender: RecommenderConfig
    logging: LoggingConfig


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as file:
        data = yaml.safe_load(file)

    if not isinstance(data, dict):
        raise ValueError("The configuration file must contain a mapping at the top level.")

    return cast(AppConfig, data)


__all__ = [
    "AppConfig",
    "FirestoreConfig",
    "GeocodingConfig",
    "LoggingConfig",
    "PathsConfig",
    "RecommenderConfig",
    "load_config",
]
