"""Ingest orchestration for placement datasets.

This module runs one ingest stream: it resets the store, reads CSV rows,
normalizes them, and accumulates records into per-shape batches that
are flushed at their threshold and drained at end of stream.
"""

from __future__ import annotations

from typing import Literal

from core.errors import PlaceDecodeError
from core.logging_config import get_logger
from core.types import IngestOptions, IngestSummary, PlacementRecord, ShapeKind, SourceRow
from ingest.batch_accumulator import BatchAccumulator
from ingest.console_reporter import ConsoleReporter
from ingest.input_reader import iter_source_rows
from ingest.record_normalizer import normalize_row
from store.placement_store import PlacementStore

_LOGGER = get_logger(__name__)

PipelineState = Literal[
    "idle",
    "reading",
    "normalizing",
    "accumulating",
    "flushing",
    "draining",
    "closed",
]
# Per-record states are tracked but not logged.
_LOGGED_STATES = frozenset({"reading", "draining", "closed"})


class IngestPipelineRunner:
    """Stateful runner for one ingest stream."""

    def __init__(self, options: IngestOptions, reporter: ConsoleReporter | None = None) -> None:
        self._options = options
        self._reporter = reporter if reporter is not None else ConsoleReporter(echo=options.echo)
        self.state: PipelineState = "idle"
        self._rows_read = 0
        self._records_rejected = 0

    def run(self) -> IngestSummary:
        """Execute the ingest stream and return its summary.

        Raises:
            PlaceIngestError: If an input cannot be read.
            PlaceStoreError: If the store cannot be opened or rejects a batch.
        """
        store = PlacementStore(self._options.database_path)
        try:
            store.open()
            store.reset_schema()
            accumulator = BatchAccumulator(
                store.writer(),
                tile_threshold=self._options.tile_batch_size,
                rectangle_threshold=self._options.rectangle_batch_size,
                on_flush=self._on_flush,
            )
            self._stream_rows(accumulator)
            self._enter("draining")
            accumulator.flush_all(force=True)
        finally:
            store.close()
            self._enter("closed")
        summary = IngestSummary(
            rows_read=self._rows_read,
            records_rejected=self._records_rejected,
            tile_rows_written=accumulator.rows_written["tile"],
            rectangle_rows_written=accumulator.rows_written["rectangle"],
            flush_count=accumulator.flush_count,
        )
        _log_ingest_completion(self._options, summary)
        return summary

    def _stream_rows(self, accumulator: BatchAccumulator) -> None:
        self._enter("reading")
        for row in iter_source_rows(self._options.input_paths):
            self._rows_read += 1
            record = self._normalize(row)
            if record is None:
                continue
            self._enter("accumulating")
            accumulator.append(record)
            self._enter("reading")

    def _normalize(self, row: SourceRow) -> PlacementRecord | None:
        self._enter("normalizing")
        try:
            record = normalize_row(row)
        except PlaceDecodeError as error:
            self._records_rejected += 1
            _LOGGER.warning(
                "record_rejected",
                source_uri=row.source_uri,
                line_number=row.line_number,
                error=str(error),
            )
            self._reporter.record_rejected(row, error)
            return None
        self._reporter.record_accepted(record)
        return record

    def _on_flush(self, kind: ShapeKind) -> None:
        self._enter("flushing")

    def _enter(self, state: PipelineState) -> None:
        if state == self.state:
            return
        self.state = state
        if state in _LOGGED_STATES:
            _LOGGER.debug("pipeline_state_changed", state=state)


def ingest_placements(
    options: IngestOptions, reporter: ConsoleReporter | None = None
) -> IngestSummary:
    """Run one placement ingest and persist records to SQLite.

    Args:
        options: Ingest request options.
        reporter: Console collaborator for echoed and rejected records.

    Returns:
        Counters for the completed run.

    Raises:
        PlaceIngestError: If an input cannot be read.
        PlaceStoreError: If persistence fails.
    """
    runner = IngestPipelineRunner(options, reporter)
    return runner.run()


def _log_ingest_completion(options: IngestOptions, summary: IngestSummary) -> None:
    """Log run completion with contextual metadata."""
    _LOGGER.info(
        "ingest_completed",
        database_path=options.database_path,
        input_count=len(options.input_paths),
        rows_read=summary.rows_read,
        records_rejected=summary.records_rejected,
        tile_rows_written=summary.tile_rows_written,
        rectangle_rows_written=summary.rectangle_rows_written,
        flush_count=summary.flush_count,
    )
