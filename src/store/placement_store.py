"""SQLite placement store bootstrap.

This module owns the destination connection and the table DDL. Every
ingest run drops and recreates both tables before writing.
"""

from __future__ import annotations

from pathlib import Path
import sqlite3
from types import TracebackType

from core.constants import RECTANGLE_TABLE_NAME, TILE_TABLE_NAME
from core.errors import PlaceStoreError
from core.logging_config import get_logger
from store.placement_writer import PlacementWriter

_LOGGER = get_logger(__name__)

_SCHEMA_STATEMENTS = (
    f"DROP TABLE IF EXISTS {TILE_TABLE_NAME}",
    f"DROP TABLE IF EXISTS {RECTANGLE_TABLE_NAME}",
    f"""
    CREATE TABLE {TILE_TABLE_NAME} (
        ts INTEGER NOT NULL,
        user_hash TEXT NOT NULL,
        coordinate_x INTEGER NOT NULL,
        coordinate_y INTEGER NOT NULL,
        color TEXT NOT NULL,
        year INTEGER NOT NULL CHECK (year IN (2017, 2022)),
        CHECK (
            (year = 2017
                AND coordinate_x BETWEEN 0 AND 1000
                AND coordinate_y BETWEEN 0 AND 1000)
            OR (year = 2022
                AND coordinate_x >= 0 AND coordinate_x < 2000
                AND coordinate_y >= 0 AND coordinate_y < 2000)
        )
    )
    """,
    f"""
    CREATE TABLE {RECTANGLE_TABLE_NAME} (
        ts INTEGER NOT NULL,
        user_hash TEXT NOT NULL,
        coordinate_x_1 INTEGER NOT NULL CHECK (coordinate_x_1 >= 0 AND coordinate_x_1 < 2000),
        coordinate_y_1 INTEGER NOT NULL CHECK (coordinate_y_1 >= 0 AND coordinate_y_1 < 2000),
        coordinate_x_2 INTEGER NOT NULL CHECK (coordinate_x_2 >= 0 AND coordinate_x_2 < 2000),
        coordinate_y_2 INTEGER NOT NULL CHECK (coordinate_y_2 >= 0 AND coordinate_y_2 < 2000),
        color TEXT NOT NULL,
        year INTEGER NOT NULL CHECK (year = 2022)
    )
    """,
)


class PlacementStore:
    """Owner of one SQLite connection for an ingest run."""

    def __init__(self, database_path: str | Path) -> None:
        self._database_path = str(database_path)
        self._connection: sqlite3.Connection | None = None

    def __enter__(self) -> "PlacementStore":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def connection(self) -> sqlite3.Connection:
        """Return the open connection.

        Raises:
            PlaceStoreError: If the store is not open.
        """
        if self._connection is None:
            raise PlaceStoreError(
                f"Placement store at {self._database_path} is not open. Call open() first."
            )
        return self._connection

    def open(self) -> None:
        """Connect to the database file.

        Raises:
            PlaceStoreError: If the connection cannot be established.
        """
        if self._connection is not None:
            return
        try:
            self._connection = sqlite3.connect(self._database_path)
        except sqlite3.Error as error:
            raise PlaceStoreError(
                f"Failed to open placement store at {self._database_path}: {error}. "
                "Check the path and its permissions."
            ) from error
        _LOGGER.info("store_opened", database_path=self._database_path)

    def reset_schema(self) -> None:
        """Drop and recreate both placement tables."""
        try:
            with self.connection:
                for statement in _SCHEMA_STATEMENTS:
                    self.connection.execute(statement)
        except sqlite3.Error as error:
            raise PlaceStoreError(
                f"Failed to create schema in {self._database_path}: {error}"
            ) from error
        _LOGGER.info("schema_reset", database_path=self._database_path)

    def writer(self) -> PlacementWriter:
        """Return a batch writer bound to the open connection."""
        return PlacementWriter(self.connection)

    def count_rows(self, table_name: str) -> int:
        """Return the number of rows in a placement table."""
        if table_name not in (TILE_TABLE_NAME, RECTANGLE_TABLE_NAME):
            raise PlaceStoreError(f"Unknown placement table '{table_name}'.")
        row = self.connection.execute(f"SELECT COUNT(*) FROM {table_name}").fetchone()
        return int(row[0])

    def close(self) -> None:
        """Release the connection if one is open."""
        if self._connection is None:
            return
        self._connection.close()
        self._connection = None
