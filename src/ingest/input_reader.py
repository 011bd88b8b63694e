"""CSV source readers for ingestion.

This module streams header-keyed rows from local CSV files or stdin.
Rows are yielded lazily so a run never holds a whole dataset in memory.
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
import sys
from typing import Iterable, Iterator, TextIO

from core.constants import STDIN_INPUT_NAME
from core.errors import PlaceIngestError
from core.types import SourceRow

# Invalid bytes become lone surrogates and are rejected per row by the normalizer.
UNDECODABLE_BYTES_HANDLER = "surrogateescape"


def iter_source_rows(input_paths: Iterable[str]) -> Iterator[SourceRow]:
    """Yield CSV data rows from each input in order.

    Args:
        input_paths: CSV file paths; empty input or ``-`` reads stdin.

    Yields:
        One source row per non-blank data line.

    Raises:
        PlaceIngestError: If an input cannot be opened or parsed as CSV.
    """
    paths = list(input_paths) or [STDIN_INPUT_NAME]
    for input_path in paths:
        if input_path == STDIN_INPUT_NAME:
            yield from _iter_stream_rows(_stdin_stream(), STDIN_INPUT_NAME)
            continue
        yield from _iter_file_rows(Path(input_path).expanduser())


def _iter_file_rows(file_path: Path) -> Iterator[SourceRow]:
    """Yield rows from one local CSV file.

    Raises:
        PlaceIngestError: If the file is missing or unreadable.
    """
    try:
        stream = file_path.open(
            "r", encoding="utf-8", errors=UNDECODABLE_BYTES_HANDLER, newline=""
        )
    except OSError as error:
        raise PlaceIngestError(
            f"Failed to open input at {file_path}: {error.strerror or error}. "
            "Provide an existing, readable CSV file."
        ) from error
    with stream:
        yield from _iter_stream_rows(stream, str(file_path))


def _iter_stream_rows(stream: TextIO, source_uri: str) -> Iterator[SourceRow]:
    """Yield rows from an open text stream whose first row is the header."""
    reader = csv.reader(stream)
    try:
        header = tuple(next(reader, ()))
        for values in reader:
            if not values:
                continue
            yield SourceRow(
                source_uri=source_uri,
                line_number=reader.line_num,
                header=header,
                values=tuple(values),
            )
    except csv.Error as error:
        raise PlaceIngestError(
            f"Failed to read CSV input at {source_uri}:{reader.line_num}: {error}"
        ) from error


def _stdin_stream() -> TextIO:
    """Return stdin decoding invalid bytes the same way as input files."""
    stream = sys.stdin
    if isinstance(stream, io.TextIOWrapper):
        stream.reconfigure(errors=UNDECODABLE_BYTES_HANDLER)
    return stream
