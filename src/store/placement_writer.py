"""Multi-row batch inserts for placement records.

Each batch becomes exactly one parameterized INSERT statement executed
inside one transaction. The destination table and column layout are
chosen once per batch from the shape of its records.
"""

from __future__ import annotations

from dataclasses import dataclass
import sqlite3
from typing import Callable, Sequence

from core.constants import (
    RECTANGLE_COLUMNS,
    RECTANGLE_TABLE_NAME,
    TILE_COLUMNS,
    TILE_TABLE_NAME,
)
from core.errors import PlaceStoreError, UnknownSchemaYearError
from core.types import PlacementRecord, Rectangle, ShapeKind, Tile


@dataclass(frozen=True)
class TableLayout:
    """Destination table and row-parameter builder for one shape."""

    table_name: str
    columns: tuple[str, ...]
    row_params: Callable[[PlacementRecord, int], tuple[object, ...]]


def _tile_params(record: PlacementRecord, year: int) -> tuple[object, ...]:
    shape = record.shape
    if not isinstance(shape, Tile):
        raise PlaceStoreError(f"Tile table cannot store a {shape.kind} placement.")
    return (record.timestamp, record.user_hash, shape.x, shape.y, record.color, year)


def _rectangle_params(record: PlacementRecord, year: int) -> tuple[object, ...]:
    shape = record.shape
    if not isinstance(shape, Rectangle):
        raise PlaceStoreError(f"Rectangle table cannot store a {shape.kind} placement.")
    return (
        record.timestamp,
        record.user_hash,
        shape.corner_1.x,
        shape.corner_1.y,
        shape.corner_2.x,
        shape.corner_2.y,
        record.color,
        year,
    )


TABLE_LAYOUTS: dict[ShapeKind, TableLayout] = {
    "tile": TableLayout(TILE_TABLE_NAME, TILE_COLUMNS, _tile_params),
    "rectangle": TableLayout(RECTANGLE_TABLE_NAME, RECTANGLE_COLUMNS, _rectangle_params),
}


def render_insert(layout: TableLayout, row_count: int) -> str:
    """Render a multi-row INSERT with one placeholder group per row.

    Args:
        layout: Destination table layout.
        row_count: Number of rows in the statement.

    Returns:
        SQL text using ``?`` placeholders.
    """
    placeholders = "(" + ", ".join("?" for _ in layout.columns) + ")"
    values = ", ".join(placeholders for _ in range(row_count))
    return f"INSERT INTO {layout.table_name} ({', '.join(layout.columns)}) VALUES {values}"


class PlacementWriter:
    """Write same-shape record batches to a SQLite connection."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    def write_batch(self, records: Sequence[PlacementRecord]) -> int:
        """Insert one batch as a single atomic statement.

        Args:
            records: Non-empty batch of records sharing one shape.

        Returns:
            Number of rows written; zero for an empty batch.

        Raises:
            UnknownSchemaYearError: If a record has no schema year.
            PlaceStoreError: If shapes are mixed or the store rejects the batch.
        """
        if not records:
            return 0
        kind = records[0].shape.kind
        layout = TABLE_LAYOUTS[kind]
        params: list[object] = []
        for record in records:
            if record.shape.kind != kind:
                raise PlaceStoreError(
                    f"Cannot write mixed batch: expected {kind} records, "
                    f"got {record.shape.kind}."
                )
            params.extend(layout.row_params(record, _resolve_year(record)))
        statement = render_insert(layout, len(records))
        try:
            with self._connection:
                self._connection.execute(statement, params)
        except sqlite3.Error as error:
            raise PlaceStoreError(
                f"Failed to write {len(records)} rows to {layout.table_name}: {error}"
            ) from error
        return len(records)


def _resolve_year(record: PlacementRecord) -> int:
    """Translate a record's schema year into its stored integer."""
    year = record.schema_year.year
    if year is None:
        raise UnknownSchemaYearError(
            f"Record at timestamp {record.timestamp} for user '{record.user_hash}' "
            "has no schema year; it carried no generation-specific field."
        )
    return year
