"""Console reporting for accepted and rejected records."""

from __future__ import annotations

import sys
from typing import TextIO

from core.errors import PlaceDecodeError
from core.types import PlacementRecord, SourceRow


class ConsoleReporter:
    """Print echoed records to stdout and record errors to stderr."""

    def __init__(
        self,
        echo: bool = False,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self._echo = echo
        self._out = out if out is not None else sys.stdout
        self._err = err if err is not None else sys.stderr

    def record_accepted(self, record: PlacementRecord) -> None:
        if self._echo:
            self._out.write(f"{record}\n")

    def record_rejected(self, row: SourceRow, error: PlaceDecodeError) -> None:
        self._err.write(f"Error parsing line {row.source_uri}:{row.line_number}: {error}\n")
