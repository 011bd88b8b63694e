"""Runtime configuration model for placedb.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_DATABASE_PATH,
    DEFAULT_RECTANGLE_BATCH_SIZE,
    DEFAULT_TILE_BATCH_SIZE,
    RECTANGLE_PARAMS_PER_ROW,
    SQLITE_MAX_VARIABLES,
    TILE_PARAMS_PER_ROW,
)
from core.errors import PlaceConfigError


@dataclass(frozen=True)
class PlaceConfig:
    """Validated runtime configuration.

    Attributes:
        database_path: SQLite database file for ingest output.
        tile_batch_size: Tile rows per multi-row insert.
        rectangle_batch_size: Rectangle rows per multi-row insert.
    """

    database_path: Path
    tile_batch_size: int
    rectangle_batch_size: int

    @classmethod
    def from_env(cls) -> "PlaceConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            PlaceConfigError: If environment values are invalid.
        """
        database_value = os.getenv("PLACEDB_DATABASE", str(DEFAULT_DATABASE_PATH))
        tile_batch_size = validate_batch_size(
            "PLACEDB_TILE_BATCH_SIZE",
            _parse_int_env("PLACEDB_TILE_BATCH_SIZE", DEFAULT_TILE_BATCH_SIZE),
            TILE_PARAMS_PER_ROW,
        )
        rectangle_batch_size = validate_batch_size(
            "PLACEDB_RECTANGLE_BATCH_SIZE",
            _parse_int_env("PLACEDB_RECTANGLE_BATCH_SIZE", DEFAULT_RECTANGLE_BATCH_SIZE),
            RECTANGLE_PARAMS_PER_ROW,
        )
        return cls(
            database_path=Path(database_value).expanduser(),
            tile_batch_size=tile_batch_size,
            rectangle_batch_size=rectangle_batch_size,
        )


def validate_batch_size(setting_name: str, value: int, params_per_row: int) -> int:
    """Check that a batch size fits in one SQLite statement.

    Args:
        setting_name: Name used in error messages.
        value: Candidate rows per batch.
        params_per_row: Bound parameters per inserted row.

    Returns:
        The validated batch size.

    Raises:
        PlaceConfigError: If the size is not positive or too large.
    """
    max_rows = SQLITE_MAX_VARIABLES // params_per_row
    if value < 1 or value > max_rows:
        raise PlaceConfigError(
            f"Invalid {setting_name} value: expected 1..{max_rows}, got {value}. "
            f"Each row binds {params_per_row} parameters and SQLite allows "
            f"{SQLITE_MAX_VARIABLES} per statement."
        )
    return value


def _parse_int_env(variable_name: str, default: int) -> int:
    """Parse an integer environment value.

    Args:
        variable_name: Environment variable name.
        default: Value used when the variable is unset.

    Returns:
        Parsed integer.

    Raises:
        PlaceConfigError: If value cannot be parsed into int.
    """
    raw_value = os.getenv(variable_name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError as error:
        raise PlaceConfigError(
            f"Invalid {variable_name} value: "
            f"expected integer, got '{raw_value}'. "
            f"Set {variable_name} to a numeric value."
        ) from error
