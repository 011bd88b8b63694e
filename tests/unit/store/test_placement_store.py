"""Unit tests for SQLite placement store bootstrap."""

from __future__ import annotations

from pathlib import Path
import sqlite3

import pytest

from core.errors import PlaceStoreError
from core.types import PlacementRecord, SchemaYear, Tile
from store.placement_store import PlacementStore


def test_reset_schema_drops_existing_rows(tmp_path: Path) -> None:
    """Each reset should start from empty tables."""
    database_path = tmp_path / "place.db"
    record = PlacementRecord(
        timestamp=1,
        user_hash="u",
        shape=Tile(x=1, y=1),
        color="#FFFFFF",
        schema_year=SchemaYear.GENERATION_2017,
    )
    with PlacementStore(database_path) as store:
        store.reset_schema()
        store.writer().write_batch([record])

    with PlacementStore(database_path) as store:
        assert store.count_rows("placements") == 1
        store.reset_schema()
        assert store.count_rows("placements") == 0


def test_open_fails_for_missing_directory(tmp_path: Path) -> None:
    """Connection failures should raise a store error."""
    store = PlacementStore(tmp_path / "missing" / "place.db")

    with pytest.raises(PlaceStoreError):
        store.open()


def test_connection_requires_open_store() -> None:
    """Accessing the connection before open should fail."""
    with pytest.raises(PlaceStoreError):
        PlacementStore(":memory:").writer()


def test_rectangle_table_only_accepts_2022(tmp_path: Path) -> None:
    """Moderation rows must carry year 2022."""
    with PlacementStore(tmp_path / "place.db") as store:
        store.reset_schema()
        with pytest.raises(sqlite3.IntegrityError):
            store.connection.execute(
                "INSERT INTO placements_moderation VALUES (1, 'm', 0, 0, 1, 1, '#000000', 2017)"
            )
