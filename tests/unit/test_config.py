from __future__ import annotations

import pytest

from src.utils.config import load_config


def test_load_config_reads_sections(tmp_path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("source: csv\nrecommender:\n  top_n: 5\n", encoding="utf-8")

    config = load_config(path)

    assert config["source"] == "csv"
    assert config["recommender"]["top_n"] == 5


def test_load_config_rejects_non_mapping(tmp_path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(path)
