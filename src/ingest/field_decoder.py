"""Field decoders for raw placement values.

Each decoder converts one raw CSV text value into a typed value and
raises a PlaceDecodeError subclass when the value is malformed.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import re

from core.constants import COLOR_PALETTE, COORDINATE_DELIMITER, UINT16_MAX
from core.errors import (
    InvalidColorIndexError,
    InvalidCoordinateError,
    InvalidCoordinateListError,
    InvalidTimestampError,
)

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_SECOND = timedelta(seconds=1)
_UNSIGNED_PATTERN = re.compile(r"[0-9]+")
_SIGNED_PATTERN = re.compile(r"[+-]?[0-9]+")
_UTC_SUFFIXES = (" UTC", "Z", "z")
_SUPPORTED_LIST_LENGTHS = (2, 4)
_FRACTION_PATTERN = re.compile(r"(?<=:[0-9]{2})\.([0-9]+)")
_FRACTION_DIGITS = 6
_MAX_COORDINATE_DIGITS = len(str(UINT16_MAX))
_MAX_COLOR_INDEX_DIGITS = len(str(len(COLOR_PALETTE) - 1))


def decode_timestamp(raw: str) -> int:
    """Decode an absolute ISO-8601 timestamp into epoch seconds.

    The published datasets write ``2022-04-04 00:53:51.577 UTC``; explicit
    offsets such as ``+02:00`` and a trailing ``Z`` are accepted too.
    Fractional seconds are floored.

    Args:
        raw: Raw timestamp text.

    Returns:
        Seconds since the Unix epoch.

    Raises:
        InvalidTimestampError: If the value is unparsable or has no zone.
    """
    text = raw.strip()
    for suffix in _UTC_SUFFIXES:
        if text.endswith(suffix):
            text = text[: -len(suffix)] + "+00:00"
            break
    text = _FRACTION_PATTERN.sub(_fixed_width_fraction, text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as error:
        raise InvalidTimestampError(f"Unparsable timestamp {raw!r}: {error}") from error
    if parsed.tzinfo is None:
        raise InvalidTimestampError(
            f"Timestamp {raw!r} has no UTC marker or offset and is ambiguous."
        )
    return (parsed - _UNIX_EPOCH) // _ONE_SECOND


def decode_unsigned_coordinate(raw: str) -> int:
    """Decode an unsigned 16-bit coordinate.

    Raises:
        InvalidCoordinateError: If the value is not digits in [0, 65535].
    """
    if not _UNSIGNED_PATTERN.fullmatch(raw):
        raise InvalidCoordinateError(f"Coordinate {raw!r} is not an unsigned integer.")
    if len(_significant_digits(raw)) > _MAX_COORDINATE_DIGITS:
        raise InvalidCoordinateError(f"Coordinate with {len(raw)} digits exceeds {UINT16_MAX}.")
    value = int(raw)
    if value > UINT16_MAX:
        raise InvalidCoordinateError(f"Coordinate {value} exceeds {UINT16_MAX}.")
    return value


def decode_color_index(raw: str) -> str:
    """Translate a 2017 palette index into its hex color code.

    Args:
        raw: Raw palette index text.

    Returns:
        Hex color string such as ``#A06A42``.

    Raises:
        InvalidColorIndexError: If the index is non-numeric or outside [0, 15].
    """
    if not _SIGNED_PATTERN.fullmatch(raw):
        raise InvalidColorIndexError(f"Color index {raw!r} is not an integer.")
    if len(_significant_digits(raw.lstrip("+-"))) > _MAX_COLOR_INDEX_DIGITS:
        raise InvalidColorIndexError(
            f"Color index with {len(raw)} characters is outside 0..{len(COLOR_PALETTE) - 1}."
        )
    index = int(raw)
    if not 0 <= index < len(COLOR_PALETTE):
        raise InvalidColorIndexError(
            f"Color index {index} is outside 0..{len(COLOR_PALETTE) - 1}."
        )
    return COLOR_PALETTE[index]


def decode_coordinate_list(raw: str) -> list[int]:
    """Decode a comma-separated list of two or four coordinates.

    Args:
        raw: Raw list text such as ``"42,1337"``.

    Returns:
        Decoded coordinates in input order.

    Raises:
        InvalidCoordinateListError: On a bad length or a bad part.
    """
    parts = raw.split(COORDINATE_DELIMITER)
    if len(parts) not in _SUPPORTED_LIST_LENGTHS:
        raise InvalidCoordinateListError(
            f"Coordinate list {raw!r} has {len(parts)} parts; expected 2 or 4."
        )
    coordinates: list[int] = []
    for part in parts:
        try:
            coordinates.append(decode_unsigned_coordinate(part))
        except InvalidCoordinateError as error:
            raise InvalidCoordinateListError(
                f"Coordinate list {raw!r} has an invalid part: {error}"
            ) from error
    return coordinates


def _fixed_width_fraction(match: re.Match[str]) -> str:
    """Pad or truncate a seconds fraction to microseconds.

    Truncation keeps the floor of the value.
    """
    digits = match.group(1)[:_FRACTION_DIGITS].ljust(_FRACTION_DIGITS, "0")
    return f".{digits}"


def _significant_digits(digits: str) -> str:
    """Strip leading zeros so length bounds the numeric value."""
    return digits.lstrip("0") or "0"
