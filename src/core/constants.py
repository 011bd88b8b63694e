"""Core constants used across placedb modules.

This module centralizes palette, sentinel, and batching constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATABASE_PATH = Path("placements.db")
STDIN_INPUT_NAME = "-"

COLOR_PALETTE = (
    "#FFFFFF",
    "#E4E4E4",
    "#888888",
    "#222222",
    "#FFA7D1",
    "#E50000",
    "#E59500",
    "#A06A42",
    "#E5D900",
    "#94E044",
    "#02BE01",
    "#00E5F0",
    "#0083C7",
    "#0000EA",
    "#E04AFF",
    "#820080",
)

COORDINATE_DELIMITER = ","
UINT16_MAX = 65535
INT64_MAX = 2**63 - 1
MISSING_TIMESTAMP = INT64_MAX
MISSING_COORDINATE = UINT16_MAX

# SQLite's default SQLITE_MAX_VARIABLE_NUMBER since 3.32.
SQLITE_MAX_VARIABLES = 32766
TILE_PARAMS_PER_ROW = 6
RECTANGLE_PARAMS_PER_ROW = 8
DEFAULT_TILE_BATCH_SIZE = SQLITE_MAX_VARIABLES // TILE_PARAMS_PER_ROW
DEFAULT_RECTANGLE_BATCH_SIZE = 10

TILE_TABLE_NAME = "placements"
RECTANGLE_TABLE_NAME = "placements_moderation"
TILE_COLUMNS = ("ts", "user_hash", "coordinate_x", "coordinate_y", "color", "year")
RECTANGLE_COLUMNS = (
    "ts",
    "user_hash",
    "coordinate_x_1",
    "coordinate_y_1",
    "coordinate_x_2",
    "coordinate_y_2",
    "color",
    "year",
)
