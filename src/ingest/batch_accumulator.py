"""Per-shape batch buffering for placement records.

Tile and rectangle records are buffered separately and each buffer is
flushed on its own once it reaches its threshold. Flushes are inline:
``append`` blocks until a triggered write completes, which bounds memory
by buffer capacity instead of stream length.
"""

from __future__ import annotations

from typing import Callable, Protocol, Sequence

from core.constants import DEFAULT_RECTANGLE_BATCH_SIZE, DEFAULT_TILE_BATCH_SIZE
from core.logging_config import get_logger
from core.types import SHAPE_KINDS, PlacementRecord, ShapeKind

_LOGGER = get_logger(__name__)

OnFlushHook = Callable[[ShapeKind], None]


class BatchWriter(Protocol):
    """Destination for full same-shape batches."""

    def write_batch(self, records: Sequence[PlacementRecord]) -> int:
        """Persist one batch atomically and return the written row count."""


class BatchAccumulator:
    """Shape-keyed record buffers with independent flush thresholds."""

    def __init__(
        self,
        writer: BatchWriter,
        tile_threshold: int = DEFAULT_TILE_BATCH_SIZE,
        rectangle_threshold: int = DEFAULT_RECTANGLE_BATCH_SIZE,
        on_flush: OnFlushHook | None = None,
    ) -> None:
        self._writer = writer
        self._on_flush = on_flush
        self._thresholds: dict[ShapeKind, int] = {
            "tile": tile_threshold,
            "rectangle": rectangle_threshold,
        }
        self._buffers: dict[ShapeKind, list[PlacementRecord]] = {
            kind: [] for kind in SHAPE_KINDS
        }
        self.flush_count = 0
        self.rows_written: dict[ShapeKind, int] = {kind: 0 for kind in SHAPE_KINDS}

    def append(self, record: PlacementRecord) -> bool:
        """Buffer a record and flush its shape's buffer when full.

        Args:
            record: Normalized record.

        Returns:
            True when the append triggered a flush.

        Raises:
            PlaceStoreError: If a triggered flush fails.
        """
        kind = record.shape.kind
        self._buffers[kind].append(record)
        if not self.should_flush(kind):
            return False
        self.flush(kind)
        return True

    def should_flush(self, kind: ShapeKind) -> bool:
        """Return whether the buffer for ``kind`` reached its threshold."""
        return len(self._buffers[kind]) >= self._thresholds[kind]

    def pending(self, kind: ShapeKind) -> int:
        """Return the number of buffered records for ``kind``."""
        return len(self._buffers[kind])

    def flush(self, kind: ShapeKind) -> int:
        """Write the buffer for ``kind`` and reset it on success.

        The buffer is left untouched when the writer raises, so the
        caller decides whether to retry or abort.

        Returns:
            Number of rows written, zero for an empty buffer.
        """
        batch = self._buffers[kind]
        if not batch:
            return 0
        if self._on_flush is not None:
            self._on_flush(kind)
        written = self._writer.write_batch(batch)
        self._buffers[kind] = []
        self.flush_count += 1
        self.rows_written[kind] += written
        _LOGGER.info("batch_flushed", shape=kind, row_count=written)
        return written

    def flush_all(self, force: bool = True) -> int:
        """Flush both buffers, tile first.

        Args:
            force: Flush regardless of threshold; when false only
                buffers that reached their threshold are flushed.

        Returns:
            Total rows written.
        """
        written = 0
        for kind in SHAPE_KINDS:
            if force or self.should_flush(kind):
                written += self.flush(kind)
        return written
