"""Schema-polymorphic normalization of placement records.

One record arrives as ``(field name, raw value)`` pairs from either the
2017 or the 2022 dataset. Field names are aliased onto one canonical
``PlacementRecord``, and the schema year and placement shape are derived
from whichever fields were seen. Pairs are processed in order and the
last value wins for each logical field, shape included.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from core.constants import MISSING_COORDINATE, MISSING_TIMESTAMP
from core.errors import (
    InvalidEncodingError,
    PlaceDecodeError,
    RecordDecodeError,
    RowShapeError,
)
from core.types import (
    Coordinate,
    PlacementRecord,
    PlacementShape,
    Rectangle,
    SchemaYear,
    ShapeKind,
    SourceRow,
    Tile,
)
from ingest.field_decoder import (
    decode_color_index,
    decode_coordinate_list,
    decode_timestamp,
    decode_unsigned_coordinate,
)


@dataclass
class _RecordDraft:
    """Mutable field state for one record while its pairs are applied."""

    timestamp: int = MISSING_TIMESTAMP
    user_hash: str = ""
    x_1: int = MISSING_COORDINATE
    y_1: int = MISSING_COORDINATE
    x_2: int = MISSING_COORDINATE
    y_2: int = MISSING_COORDINATE
    shape_kind: ShapeKind = "tile"
    color: str = ""
    schema_year: SchemaYear = SchemaYear.UNKNOWN

    def build(self) -> PlacementRecord:
        return PlacementRecord(
            timestamp=self.timestamp,
            user_hash=self.user_hash,
            shape=self._build_shape(),
            color=self.color,
            schema_year=self.schema_year,
        )

    def _build_shape(self) -> PlacementShape:
        if self.shape_kind == "rectangle":
            return Rectangle(
                corner_1=Coordinate(x=self.x_1, y=self.y_1),
                corner_2=Coordinate(x=self.x_2, y=self.y_2),
            )
        return Tile(x=self.x_1, y=self.y_1)


def _apply_timestamp(draft: _RecordDraft, raw: str) -> None:
    draft.timestamp = decode_timestamp(raw)


def _apply_user_hash(draft: _RecordDraft, raw: str) -> None:
    draft.user_hash = raw


def _apply_hex_color(draft: _RecordDraft, raw: str) -> None:
    draft.color = raw
    draft.schema_year = SchemaYear.GENERATION_2022


def _apply_color_index(draft: _RecordDraft, raw: str) -> None:
    draft.color = decode_color_index(raw)
    draft.schema_year = SchemaYear.GENERATION_2017


def _apply_coordinate_list(draft: _RecordDraft, raw: str) -> None:
    coordinates = decode_coordinate_list(raw)
    draft.x_1, draft.y_1 = coordinates[0], coordinates[1]
    if len(coordinates) == 4:
        draft.x_2, draft.y_2 = coordinates[2], coordinates[3]
        draft.shape_kind = "rectangle"
    else:
        draft.shape_kind = "tile"
    draft.schema_year = SchemaYear.GENERATION_2022


def _apply_x_coordinate(draft: _RecordDraft, raw: str) -> None:
    draft.x_1 = decode_unsigned_coordinate(raw)
    draft.shape_kind = "tile"
    draft.schema_year = SchemaYear.GENERATION_2017


def _apply_y_coordinate(draft: _RecordDraft, raw: str) -> None:
    draft.y_1 = decode_unsigned_coordinate(raw)
    draft.shape_kind = "tile"
    draft.schema_year = SchemaYear.GENERATION_2017


_FIELD_HANDLERS: dict[str, Callable[[_RecordDraft, str], None]] = {
    "timestamp": _apply_timestamp,
    "ts": _apply_timestamp,
    "user_id": _apply_user_hash,
    "user_hash": _apply_user_hash,
    "pixel_color": _apply_hex_color,
    "color": _apply_color_index,
    "coordinate": _apply_coordinate_list,
    "x_coordinate": _apply_x_coordinate,
    "y_coordinate": _apply_y_coordinate,
}


def normalize_record(fields: Iterable[tuple[str, str]]) -> PlacementRecord:
    """Normalize one record's field pairs into a PlacementRecord.

    Unrecognized field names are ignored and absent fields keep their
    sentinel defaults; only a present but malformed value is an error.

    Args:
        fields: ``(field name, raw value)`` pairs for one source row.

    Returns:
        Immutable normalized record.

    Raises:
        RecordDecodeError: If a recognized field fails to decode.
    """
    draft = _RecordDraft()
    for field_name, raw_value in fields:
        handler = _FIELD_HANDLERS.get(field_name)
        if handler is None:
            continue
        try:
            handler(draft, raw_value)
        except PlaceDecodeError as error:
            raise RecordDecodeError(field_name, raw_value, error) from error
    return draft.build()


def normalize_row(row: SourceRow) -> PlacementRecord:
    """Normalize one CSV row after checking its arity against the header.

    Raises:
        RowShapeError: If the row and header lengths differ.
        InvalidEncodingError: If a value holds bytes that were not valid UTF-8.
        RecordDecodeError: If a recognized field fails to decode.
    """
    if len(row.values) != len(row.header):
        raise RowShapeError(
            f"Row at {row.source_uri}:{row.line_number} has {len(row.values)} fields, "
            f"header has {len(row.header)}."
        )
    for field_name, value in zip(row.header, row.values):
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as error:
            raise InvalidEncodingError(
                f"Field {field_name!r} at {row.source_uri}:{row.line_number} is not valid UTF-8."
            ) from error
    return normalize_record(zip(row.header, row.values))

