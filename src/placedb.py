"""Public SDK surface for placedb.

This module provides a stable import path for library users.
It re-exports the ingest entry point, decoders, and typed models.
"""

from __future__ import annotations

from core.config import PlaceConfig
from core.types import (
    Coordinate,
    IngestOptions,
    IngestSummary,
    PlacementRecord,
    Rectangle,
    SchemaYear,
    Tile,
)
from ingest.batch_accumulator import BatchAccumulator
from ingest.field_decoder import (
    decode_color_index,
    decode_coordinate_list,
    decode_timestamp,
    decode_unsigned_coordinate,
)
from ingest.pipeline import ingest_placements
from ingest.record_normalizer import normalize_record
from store.placement_store import PlacementStore
from store.placement_writer import PlacementWriter

__all__ = [
    "BatchAccumulator",
    "Coordinate",
    "IngestOptions",
    "IngestSummary",
    "PlaceConfig",
    "PlacementRecord",
    "PlacementStore",
    "PlacementWriter",
    "Rectangle",
    "SchemaYear",
    "Tile",
    "decode_color_index",
    "decode_coordinate_list",
    "decode_timestamp",
    "decode_unsigned_coordinate",
    "ingest_placements",
    "normalize_record",
]
