"""placedb CLI entry points.
This module maps argparse options onto one ingest run.
Settings resolve as CLI flag, then YAML run config, then environment.
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence, TypeVar

from core.config import PlaceConfig, validate_batch_size
from core.constants import RECTANGLE_PARAMS_PER_ROW, TILE_PARAMS_PER_ROW
from core.errors import PlaceError
from core.run_config import RunConfig, load_run_config
from core.types import IngestOptions, IngestSummary
from ingest.pipeline import ingest_placements

_T = TypeVar("_T")


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="placedb",
        description="Load r/place 2017 and 2022 placement CSV files into SQLite",
    )
    parser.add_argument("inputs", nargs="*", help="CSV input files; stdin when omitted")
    parser.add_argument("--config", help="Optional YAML run config file")
    parser.add_argument("--database", help="Override PLACEDB_DATABASE for this run")
    parser.add_argument(
        "--echo",
        action="store_true",
        default=None,
        help="Print every normalized record to stdout",
    )
    parser.add_argument("--tile-batch-size", type=int, help="Tile rows per insert")
    parser.add_argument("--rectangle-batch-size", type=int, help="Rectangle rows per insert")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the placedb CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        options = _build_options(args)
        summary = ingest_placements(options)
    except PlaceError as error:
        sys.stderr.write(f"error: {error}\n")
        return 1
    _print_summary(summary)
    return 0


def _build_options(args: argparse.Namespace) -> IngestOptions:
    """Resolve ingest options from flags, run config, and environment.

    Args:
        args: Parsed CLI args.

    Returns:
        Ingest options for this run.
    """
    config = PlaceConfig.from_env()
    run_config = load_run_config(args.config) if args.config else RunConfig()
    tile_batch_size = _first_set(
        args.tile_batch_size, run_config.tile_batch_size, default=config.tile_batch_size
    )
    rectangle_batch_size = _first_set(
        args.rectangle_batch_size,
        run_config.rectangle_batch_size,
        default=config.rectangle_batch_size,
    )
    return IngestOptions(
        input_paths=tuple(args.inputs) or run_config.inputs or (),
        database_path=_first_set(
            args.database, run_config.database, default=str(config.database_path)
        ),
        echo=_first_set(args.echo, run_config.echo, default=False),
        tile_batch_size=validate_batch_size(
            "--tile-batch-size", tile_batch_size, TILE_PARAMS_PER_ROW
        ),
        rectangle_batch_size=validate_batch_size(
            "--rectangle-batch-size", rectangle_batch_size, RECTANGLE_PARAMS_PER_ROW
        ),
    )


def _first_set(*candidates: _T | None, default: _T) -> _T:
    """Return the first candidate that is not None, else ``default``."""
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return default


def _print_summary(summary: IngestSummary) -> None:
    print(
        f"rows_read={summary.rows_read}\t"
        f"rejected={summary.records_rejected}\t"
        f"tiles={summary.tile_rows_written}\t"
        f"rectangles={summary.rectangle_rows_written}\t"
        f"flushes={summary.flush_count}"
    )
