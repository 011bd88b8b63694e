"""Typed YAML run-config parsing for ingest runs.

This module loads optional YAML files that pin the inputs, database,
and batch sizes of an ingest run so repeated loads stay reproducible.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence, cast

import yaml

from core.constants import RECTANGLE_PARAMS_PER_ROW, TILE_PARAMS_PER_ROW
from core.config import validate_batch_size
from core.errors import PlaceConfigError

_ALLOWED_KEYS = frozenset(
    {"database", "tile_batch_size", "rectangle_batch_size", "echo", "inputs"}
)


@dataclass(frozen=True)
class RunConfig:
    """Validated run-config values; None means not set in the file."""

    database: str | None = None
    tile_batch_size: int | None = None
    rectangle_batch_size: int | None = None
    echo: bool | None = None
    inputs: tuple[str, ...] | None = None


def load_run_config(config_path: str) -> RunConfig:
    """Load and validate a YAML run-config from disk.

    Args:
        config_path: File path to the YAML run-config.

    Returns:
        Validated run-config object.

    Raises:
        PlaceConfigError: If the file is missing, unparsable, or invalid.
    """
    payload = _load_yaml_payload(config_path)
    mapping = _expect_mapping(payload)
    unknown_keys = sorted(set(mapping) - _ALLOWED_KEYS)
    if unknown_keys:
        raise PlaceConfigError(
            f"Run config contains unknown fields: {', '.join(unknown_keys)}."
        )
    tile_batch_size = _optional_int(mapping, "tile_batch_size")
    if tile_batch_size is not None:
        validate_batch_size("tile_batch_size", tile_batch_size, TILE_PARAMS_PER_ROW)
    rectangle_batch_size = _optional_int(mapping, "rectangle_batch_size")
    if rectangle_batch_size is not None:
        validate_batch_size(
            "rectangle_batch_size", rectangle_batch_size, RECTANGLE_PARAMS_PER_ROW
        )
    return RunConfig(
        database=_optional_string(mapping, "database"),
        tile_batch_size=tile_batch_size,
        rectangle_batch_size=rectangle_batch_size,
        echo=_optional_bool(mapping, "echo"),
        inputs=_optional_string_list(mapping, "inputs"),
    )


def _load_yaml_payload(config_path: str) -> object:
    config_file = Path(config_path).expanduser().resolve()
    if not config_file.exists():
        raise PlaceConfigError(
            f"Run config file does not exist at {config_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(config_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise PlaceConfigError(
            f"Failed to read run config at {config_file}: {error}. Check file permissions."
        ) from error
    except yaml.YAMLError as error:
        raise PlaceConfigError(
            f"Failed to parse YAML run config at {config_file}: {error}. Fix YAML syntax."
        ) from error
    if payload is None:
        return {}
    return payload


def _expect_mapping(value: object) -> Mapping[str, object]:
    if not isinstance(value, Mapping):
        raise PlaceConfigError(
            f"Invalid run config root: expected mapping, got {type(value).__name__}."
        )
    for key in value:
        if not isinstance(key, str):
            raise PlaceConfigError(
                f"Invalid run config root: expected string keys, got {type(key).__name__}."
            )
    return value


def _optional_string(mapping: Mapping[str, object], field_name: str) -> str | None:
    raw_value = mapping.get(field_name)
    if raw_value is None:
        return None
    if isinstance(raw_value, str) and raw_value.strip():
        return raw_value.strip()
    raise PlaceConfigError(f"Run config field '{field_name}' must be a non-empty string.")


def _optional_int(mapping: Mapping[str, object], field_name: str) -> int | None:
    raw_value = mapping.get(field_name)
    if raw_value is None:
        return None
    # bool is an int subclass; reject it explicitly
    if isinstance(raw_value, int) and not isinstance(raw_value, bool):
        return raw_value
    raise PlaceConfigError(f"Run config field '{field_name}' must be an integer.")


def _optional_bool(mapping: Mapping[str, object], field_name: str) -> bool | None:
    raw_value = mapping.get(field_name)
    if raw_value is None or isinstance(raw_value, bool):
        return raw_value
    raise PlaceConfigError(f"Run config field '{field_name}' must be true or false.")


def _optional_string_list(
    mapping: Mapping[str, object], field_name: str
) -> tuple[str, ...] | None:
    raw_value = mapping.get(field_name)
    if raw_value is None:
        return None
    if isinstance(raw_value, Sequence) and not isinstance(raw_value, (str, bytes)):
        if all(isinstance(item, str) for item in raw_value):
            return tuple(cast(Sequence[str], raw_value))
    raise PlaceConfigError(f"Run config field '{field_name}' must be a list of strings.")
