"""Rank activities for a user, or suggest activities to a group, from the command line."""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence, cast

import pandas as pd
from google.auth.exceptions import DefaultCredentialsError

if __package__ is None or __package__ == "":
    _SCRIPT_PARENT = Path(__file__).resolve().parents[1]
    _SCRIPT_PARENT_STR = str(_SCRIPT_PARENT)
    if _SCRIPT_PARENT_STR not in sys.path:
        sys.path.insert(0, _SCRIPT_PARENT_STR)

from scripts.bootstrap import bootstrap_project, default_config_path, resolve_path

_PROJECT_ROOT = bootstrap_project()

from src.core.entities import ActivityRecord, GroupSuggestion, ScoredActivity
from src.core.errors import RecommendationError
from src.infrastructure.geo.distance import format_distance
from src.infrastructure.geo.resolver import build_geocoder
from src.infrastructure.sources import build_group_sources, build_sources
from src.infrastructure.scoring.ranker import DEFAULT_LIMIT, GROUP_LIMIT
from src.use_cases.recommend_activities import RecommendActivitiesUseCase
from src.use_cases.recommend_for_group import RecommendForGroupUseCase
from src.utils.config import AppConfig, PathsConfig, RecommenderConfig, load_config
from src.utils.logger import configure_logging, logger


def _resolve_paths(config: AppConfig) -> AppConfig:
    paths = cast(PathsConfig, dict(config.get("paths", {})))
    for key, value in list(paths.items()):
        paths[key] = str(resolve_path(value, _PROJECT_ROOT))  # type: ignore[literal-required]
    return cast(AppConfig, {**config, "paths": paths})


def create_use_case(config: AppConfig, top_n: Optional[int] = None) -> RecommendActivitiesUseCase:
    profile_source, activity_source = build_sources(_resolve_paths(config))
    geocoder = build_geocoder(config.get("geocoding"))
    recommender_config = cast(RecommenderConfig, config.get("recommender", {}))
    limit = top_n if top_n is not None else int(recommender_config.get("top_n", DEFAULT_LIMIT))

    return RecommendActivitiesUseCase(
        profile_source,
        activity_source,
        geocoder=geocoder,
        limit=limit,
    )


def create_group_use_case(config: AppConfig, top_n: Optional[int] = None) -> RecommendForGroupUseCase:
    resolved = _resolve_paths(config)
    profile_source, activity_source = build_sources(resolved)
    group_source, store = build_group_sources(resolved)
    recommender_config = cast(RecommenderConfig, config.get("recommender", {}))
    limit = top_n if top_n is not None else int(recommender_config.get("group_top_n", GROUP_LIMIT))

    return RecommendForGroupUseCase(
        group_source,
        profile_source,
        activity_source,
        store=store,
        limit=limit,
    )


def render_table(ranked: Sequence[ScoredActivity]) -> str:
    if not ranked:
        return "No activities to recommend."

    rows = []
    for position, item in enumerate(ranked, start=1):
        breakdown = item.breakdown
        rows.append(
            {
                "#": position,
                "Activity": item.title,
                "Score": item.personal_score,
                "Distance": format_distance(item.distance_km) if item.distance_km is not None else "-",
                "Interests": ", ".join(item.matched_interests) or "-",
                "I/D/P/R/N": (
                    f"{breakdown.interest}/{breakdown.distance}/{breakdown.price}/"
                    f"{breakdown.popularity}/{breakdown.novelty}"
                ),
            }
        )
    return pd.DataFrame(rows).to_string(index=False)


def render_nearby(nearby: Sequence[tuple[ActivityRecord, float]]) -> str:
    if not nearby:
        return "No activities nearby."

    rows = [
        {"Activity": activity.title, "Distance": format_distance(distance), "Address": activity.address or "-"}
        for activity, distance in nearby
    ]
    return pd.DataFrame(rows).to_string(index=False)


def render_group_table(suggestions: Sequence[GroupSuggestion]) -> str:
    if not suggestions:
        return "No activities to suggest for this group."

    rows = [
        {
            "#": position,
            "Activity": item.title,
            "Score": item.score,
            "Interests": ", ".join(item.matched_interests) or "-",
            "Why": item.explanation,
        }
        for position, item in enumerate(suggestions, start=1)
    ]
    return pd.DataFrame(rows).to_string(index=False)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Personalised activity recommendations")
    parser.add_argument("--config", type=Path, default=default_config_path())
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--user-id", help="Rank activities for one user")
    target.add_argument("--group-id", help="Suggest activities shared by a group's members")
    parser.add_argument("--top-n", type=int, default=None)
    parser.add_argument(
        "--nearby",
        type=float,
        default=None,
        metavar="KM",
        help="List activities within KM of the user instead of ranking them",
    )
    parser.add_argument(
        "--cached",
        action="store_true",
        help="Reuse the group's stored suggestions when available",
    )
    parser.add_argument("--output", choices=("table", "json"), default="table")
    args = parser.parse_args(argv)

    if args.user_id is not None and not args.user_id.strip():
        parser.error("--user-id must not be empty")
    if args.group_id is not None and not args.group_id.strip():
        parser.error("--group-id must not be empty")
    if args.top_n is not None and args.top_n <= 0:
        parser.error("--top-n must be a positive integer")
    if args.nearby is not None and (args.group_id is not None or args.nearby < 0):
        parser.error("--nearby needs --user-id and a non-negative distance")
    if args.cached and args.group_id is None:
        parser.error("--cached only applies to --group-id")
    return args


def _print_json(payload: object) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as error:
        logger.error("Could not load configuration {}: {}", args.config, error)
        return 1

    configure_logging(config.get("logging", {}).get("level"))

    try:
        if args.group_id is not None:
            group_use_case = create_group_use_case(config, top_n=args.top_n)
        else:
            use_case = create_use_case(config, top_n=args.top_n)
    except (KeyError, ValueError) as error:
        logger.error("Invalid configuration: {}", error)
        return 1
    except DefaultCredentialsError as error:
        logger.error("Firestore credentials unavailable: {}", error)
        return 1

    if args.group_id is not None:
        try:
            if args.cached:
                suggestions = group_use_case.cached(args.group_id)
            else:
                suggestions = group_use_case.execute(args.group_id)
        except RecommendationError as error:
            logger.error("Group suggestion failed: {}", error)
            return 1
        if args.output == "json":
            _print_json([item.to_dict() for item in suggestions])
        else:
            print(render_group_table(suggestions))
        return 0

    if args.nearby is not None:
        try:
            nearby = use_case.nearby(args.user_id, max_distance_km=args.nearby)
        except RecommendationError as error:
            logger.error("Nearby search failed: {}", error)
            return 1
        if args.output == "json":
            _print_json(
                [
                    {"id": activity.id, "title": activity.title, "distanceKm": distance}
                    for activity, distance in nearby
                ]
            )
        else:
            print(render_nearby(nearby))
        return 0

    try:
        ranked = use_case.execute(args.user_id)
    except RecommendationError as error:
        logger.error("Recommendation failed: {}", error)
        return 1

    if args.output == "json":
        _print_json([item.to_dict() for item in ranked])
    else:
        print(render_table(ranked))
    return 0


if __name__ == "__main__":
    sys.exit(main())
