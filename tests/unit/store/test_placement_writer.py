"""Unit tests for multi-row placement inserts."""

from __future__ import annotations

from typing import Iterator

import pytest

from core.errors import PlaceStoreError, UnknownSchemaYearError
from core.types import Coordinate, PlacementRecord, Rectangle, SchemaYear, Tile
from store.placement_store import PlacementStore
from store.placement_writer import TABLE_LAYOUTS, PlacementWriter, render_insert


@pytest.fixture
def store() -> Iterator[PlacementStore]:
    with PlacementStore(":memory:") as placement_store:
        placement_store.reset_schema()
        yield placement_store


def _tile(x: int, year: SchemaYear = SchemaYear.GENERATION_2022) -> PlacementRecord:
    return PlacementRecord(
        timestamp=1648853631,
        user_hash="user",
        shape=Tile(x=x, y=5),
        color="#FF4500",
        schema_year=year,
    )


def _rectangle() -> PlacementRecord:
    return PlacementRecord(
        timestamp=1648853700,
        user_hash="moderator",
        shape=Rectangle(corner_1=Coordinate(44, 0), corner_2=Coordinate(142, 31)),
        color="#000000",
        schema_year=SchemaYear.GENERATION_2022,
    )


def test_render_insert_has_one_group_per_row() -> None:
    """Insert SQL should bind six parameters per tile row."""
    statement = render_insert(TABLE_LAYOUTS["tile"], 2)

    assert statement == (
        "INSERT INTO placements (ts, user_hash, coordinate_x, coordinate_y, color, year) "
        "VALUES (?, ?, ?, ?, ?, ?), (?, ?, ?, ?, ?, ?)"
    )
    assert render_insert(TABLE_LAYOUTS["rectangle"], 1).count("?") == 8


def test_write_batch_inserts_tiles(store: PlacementStore) -> None:
    """Tile batches should land in the placements table."""
    written = store.writer().write_batch([_tile(1), _tile(2), _tile(3)])

    rows = store.connection.execute(
        "SELECT coordinate_x, year FROM placements ORDER BY rowid"
    ).fetchall()
    assert written == 3
    assert rows == [(1, 2022), (2, 2022), (3, 2022)]


def test_write_batch_inserts_rectangles(store: PlacementStore) -> None:
    """Rectangle batches should land in the moderation table."""
    store.writer().write_batch([_rectangle()])

    row = store.connection.execute("SELECT * FROM placements_moderation").fetchone()
    assert row == (1648853700, "moderator", 44, 0, 142, 31, "#000000", 2022)
    assert store.count_rows("placements") == 0


def test_write_batch_empty_is_noop(store: PlacementStore) -> None:
    """An empty batch should write nothing."""
    assert store.writer().write_batch([]) == 0


def test_write_batch_rejects_unknown_year(store: PlacementStore) -> None:
    """Records without a schema year are a fatal error."""
    with pytest.raises(UnknownSchemaYearError):
        store.writer().write_batch([_tile(1, SchemaYear.UNKNOWN)])

    assert store.count_rows("placements") == 0


def test_write_batch_rejects_mixed_shapes(store: PlacementStore) -> None:
    """A batch must not mix tiles and rectangles."""
    with pytest.raises(PlaceStoreError):
        store.writer().write_batch([_tile(1), _rectangle()])


def test_write_batch_is_atomic_on_constraint_failure(store: PlacementStore) -> None:
    """A rejected row should roll back the whole batch."""
    out_of_range = _tile(1500, SchemaYear.GENERATION_2017)

    with pytest.raises(PlaceStoreError):
        PlacementWriter(store.connection).write_batch(
            [_tile(1, SchemaYear.GENERATION_2017), out_of_range]
        )

    assert store.count_rows("placements") == 0


def test_row_params_reject_record_of_other_shape() -> None:
    """Each layout should refuse records of the other shape."""
    with pytest.raises(PlaceStoreError, match="Tile table"):
        TABLE_LAYOUTS["tile"].row_params(_rectangle(), 2022)
    with pytest.raises(PlaceStoreError, match="Rectangle table"):
        TABLE_LAYOUTS["rectangle"].row_params(_tile(1), 2022)
