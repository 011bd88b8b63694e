"""Unit tests for the public SDK surface."""

from __future__ import annotations

from pathlib import Path

import placedb
from tests.fixture_paths import fixture_path


def test_sdk_exports_resolve() -> None:
    """Every exported name should be importable from placedb."""
    missing = [name for name in placedb.__all__ if not hasattr(placedb, name)]

    assert missing == []


def test_sdk_ingest_round_trip(tmp_path: Path) -> None:
    """The SDK entry point should ingest a fixture into the store."""
    options = placedb.IngestOptions(
        input_paths=(str(fixture_path("place_2022.csv")),),
        database_path=str(tmp_path / "sdk.db"),
    )

    summary = placedb.ingest_placements(options)

    with placedb.PlacementStore(options.database_path) as store:
        assert store.count_rows("placements_moderation") == summary.rectangle_rows_written == 1
