"""Shared typed models.

This module defines immutable data models used by the ingest
and store layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Union

from core.constants import (
    DEFAULT_DATABASE_PATH,
    DEFAULT_RECTANGLE_BATCH_SIZE,
    DEFAULT_TILE_BATCH_SIZE,
)

ShapeKind = Literal["tile", "rectangle"]
SHAPE_KINDS: tuple[ShapeKind, ...] = ("tile", "rectangle")


class SchemaYear(Enum):
    """Dataset generation inferred from the field names of a record."""

    UNKNOWN = "unknown"
    GENERATION_2017 = "2017"
    GENERATION_2022 = "2022"

    @property
    def year(self) -> int | None:
        """Return the calendar year, or None when unknown."""
        if self is SchemaYear.UNKNOWN:
            return None
        return int(self.value)


@dataclass(frozen=True)
class Coordinate:
    """One canvas coordinate pair."""

    x: int
    y: int


@dataclass(frozen=True)
class Tile:
    """Single-pixel placement shape."""

    x: int
    y: int

    @property
    def kind(self) -> ShapeKind:
        return "tile"


@dataclass(frozen=True)
class Rectangle:
    """Rectangular region placement shape used by 2022 moderation.

    Attributes:
        corner_1: First corner in input order.
        corner_2: Second corner in input order.
    """

    corner_1: Coordinate
    corner_2: Coordinate

    @property
    def kind(self) -> ShapeKind:
        return "rectangle"


PlacementShape = Union[Tile, Rectangle]


@dataclass(frozen=True)
class PlacementRecord:
    """Canonical pixel placement record.

    Attributes:
        timestamp: Seconds since the Unix epoch.
        user_hash: Opaque user identifier.
        shape: Tile or rectangle placement shape.
        color: Hex color code in ``#RRGGBB`` form.
        schema_year: Generation inferred from observed fields.
    """

    timestamp: int
    user_hash: str
    shape: PlacementShape
    color: str
    schema_year: SchemaYear


@dataclass(frozen=True)
class SourceRow:
    """Raw CSV data row before normalization.

    Attributes:
        source_uri: File path or ``-`` for stdin.
        line_number: One-based line number of the row in its source.
        header: Field names from the header row.
        values: Raw field values in header order.
    """

    source_uri: str
    line_number: int
    header: tuple[str, ...]
    values: tuple[str, ...]


@dataclass(frozen=True)
class IngestOptions:
    """Ingest run options.

    Attributes:
        input_paths: CSV files to read in order; empty means stdin.
        database_path: SQLite database file to (re)create.
        echo: Print each normalized record to stdout.
        tile_batch_size: Tile rows per insert statement.
        rectangle_batch_size: Rectangle rows per insert statement.
    """

    input_paths: tuple[str, ...] = ()
    database_path: str = str(DEFAULT_DATABASE_PATH)
    echo: bool = False
    tile_batch_size: int = DEFAULT_TILE_BATCH_SIZE
    rectangle_batch_size: int = DEFAULT_RECTANGLE_BATCH_SIZE


@dataclass(frozen=True)
class IngestSummary:
    """Counters reported after an ingest run."""

    rows_read: int
    records_rejected: int
    tile_rows_written: int
    rectangle_rows_written: int
    flush_count: int
