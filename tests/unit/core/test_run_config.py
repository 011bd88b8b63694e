"""Unit tests for YAML run-config parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import PlaceConfigError
from core.run_config import load_run_config


def test_load_run_config_reads_fields(tmp_path: Path) -> None:
    """A full run config should parse into typed fields."""
    config_path = tmp_path / "run.yaml"
    config_path.write_text(
        "database: out.db\n"
        "tile_batch_size: 500\n"
        "rectangle_batch_size: 4\n"
        "echo: true\n"
        "inputs:\n  - a.csv\n  - b.csv\n",
        encoding="utf-8",
    )

    run_config = load_run_config(str(config_path))

    assert run_config.database == "out.db"
    assert run_config.tile_batch_size == 500
    assert run_config.rectangle_batch_size == 4
    assert run_config.echo is True
    assert run_config.inputs == ("a.csv", "b.csv")


def test_load_run_config_allows_empty_file(tmp_path: Path) -> None:
    """An empty file should leave every field unset."""
    config_path = tmp_path / "run.yaml"
    config_path.write_text("", encoding="utf-8")

    assert load_run_config(str(config_path)).database is None


@pytest.mark.parametrize(
    "body",
    [
        "unknown: 1\n",
        "tile_batch_size: many\n",
        "tile_batch_size: 99999\n",
        "echo: 3\n",
        "inputs: a.csv\n",
        "- not\n- a mapping\n",
        "database: [unclosed\n",
    ],
)
def test_load_run_config_rejects_invalid_content(tmp_path: Path, body: str) -> None:
    """Invalid keys, types, and syntax should raise config errors."""
    config_path = tmp_path / "run.yaml"
    config_path.write_text(body, encoding="utf-8")

    with pytest.raises(PlaceConfigError):
        load_run_config(str(config_path))


def test_load_run_config_requires_existing_file(tmp_path: Path) -> None:
    """A missing config path should fail."""
    with pytest.raises(PlaceConfigError):
        load_run_config(str(tmp_path / "absent.yaml"))
