"""Path helpers shared by the command-line entry points."""
from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path

CONFIG_RELATIVE_PATH = Path("configs") / "config.yaml"


def _resolve_project_root() -> Path:
    root = Path(__file__).resolve().parents[1]
    if not (root / "src").exists():
        raise RuntimeError(
            "Could not locate the project root. Expected a 'src' directory next to scripts/."
        )
    return root


@lru_cache(maxsize=1)
def bootstrap_project() -> Path:
    """Put the repository root on ``sys.path`` once and return it."""

    project_root = _resolve_project_root()
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        sys.path.insert(0, project_root_str)
    return project_root


def resolve_path(path: str | Path, root: Path | None = None) -> Path:
    """Interpret relative config paths against the project root."""

    candidate = Path(path)
    if candidate.is_absolute() or candidate.exists():
        return candidate
    return (root or bootstrap_project()) / candidate


def default_config_path() -> Path:
    return bootstrap_project() / CONFIG_RELATIVE_PATH


__all__ = ["bootstrap_project", "default_config_path", "resolve_path"]
