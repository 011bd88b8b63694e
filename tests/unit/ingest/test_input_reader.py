"""Unit tests for CSV input reader module."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from core.errors import PlaceIngestError
from ingest.input_reader import iter_source_rows
from tests.fixture_paths import fixture_path


def test_iter_source_rows_pairs_header_and_values() -> None:
    """Reader should yield rows carrying the header and line numbers."""
    rows = list(iter_source_rows([str(fixture_path("place_2017.csv"))]))

    assert len(rows) == 4
    assert rows[0].header == ("ts", "user_id", "x_coordinate", "y_coordinate", "color")
    assert rows[0].values[2:] == ("612", "382", "7")
    assert rows[0].line_number == 2


def test_iter_source_rows_reads_inputs_in_order() -> None:
    """Multiple inputs should be read one after another."""
    rows = list(
        iter_source_rows(
            [str(fixture_path("place_2017.csv")), str(fixture_path("place_2022.csv"))]
        )
    )

    assert len(rows) == 8
    assert rows[4].header[0] == "timestamp"
    assert rows[6].values[3] == "44,0,142,31"


def test_iter_source_rows_skips_blank_lines(tmp_path: Path) -> None:
    """Blank lines between rows should be ignored."""
    source = tmp_path / "blank.csv"
    source.write_text("user_id,color\n\na,1\n\n", encoding="utf-8")

    rows = list(iter_source_rows([str(source)]))

    assert [row.values for row in rows] == [("a", "1")]


def test_iter_source_rows_reads_stdin(monkeypatch: pytest.MonkeyPatch) -> None:
    """No input paths should read CSV from stdin."""
    monkeypatch.setattr("sys.stdin", io.StringIO("user_id,color\nabc,3\n"))

    rows = list(iter_source_rows([]))

    assert rows[0].source_uri == "-"
    assert rows[0].values == ("abc", "3")


def test_iter_source_rows_raises_for_missing_path(tmp_path: Path) -> None:
    """Reader should fail when an input file is missing."""
    missing_path = tmp_path / "does-not-exist.csv"

    with pytest.raises(PlaceIngestError):
        list(iter_source_rows([str(missing_path)]))

    assert missing_path.exists() is False


def test_iter_source_rows_keeps_rows_with_invalid_utf8(tmp_path: Path) -> None:
    """Invalid bytes should reach the row values instead of failing the file."""
    source = tmp_path / "bytes.csv"
    source.write_bytes(b"user_id,color\nab\xff\xfe,1\ncd,2\n")

    rows = list(iter_source_rows([str(source)]))

    assert len(rows) == 2
    assert rows[0].values[0] == b"ab\xff\xfe".decode("utf-8", errors="surrogateescape")
    assert rows[1].values == ("cd", "2")
