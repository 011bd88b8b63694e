"""placedb exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Record-level errors derive from PlaceDecodeError and never abort a run;
every other PlaceError is fatal for the ingest run that raised it.
"""

from __future__ import annotations


class PlaceError(Exception):
    """Base exception for all placedb failures."""


class PlaceConfigError(PlaceError):
    """Raised for invalid runtime configuration."""


class PlaceIngestError(PlaceError):
    """Raised when an input source cannot be opened or read."""


class PlaceDecodeError(PlaceError):
    """Base error for one malformed input record."""


class InvalidTimestampError(PlaceDecodeError):
    """Raised when a timestamp is not an absolute ISO-8601 time."""


class InvalidCoordinateError(PlaceDecodeError):
    """Raised when a coordinate is not an unsigned 16-bit integer."""


class InvalidColorIndexError(PlaceDecodeError):
    """Raised when a palette index is non-numeric or outside [0, 15]."""


class InvalidCoordinateListError(PlaceDecodeError):
    """Raised when a coordinate list has a bad arity or a bad part."""


class RowShapeError(PlaceDecodeError):
    """Raised when a CSV row does not have one value per header field."""


class InvalidEncodingError(PlaceDecodeError):
    """Raised when a CSV row contains bytes that are not valid UTF-8."""


class RecordDecodeError(PlaceDecodeError):
    """Raised when one named field of a record fails to decode.

    Attributes:
        field_name: Source field name that failed.
        raw_value: Raw text value of that field.
        cause: Underlying field decoder error.
    """

    def __init__(self, field_name: str, raw_value: str, cause: PlaceDecodeError) -> None:
        super().__init__(f"Invalid value {raw_value!r} for field '{field_name}': {cause}")
        self.field_name = field_name
        self.raw_value = raw_value
        self.cause = cause


class PlaceStoreError(PlaceError):
    """Raised for store connection and batch write failures."""


class UnknownSchemaYearError(PlaceStoreError):
    """Raised when a record reaches the store without a schema year."""
