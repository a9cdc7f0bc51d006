from pathlib import Path

import pytest

from alertmap.common.errors import ParseError
from alertmap.pipeline.coordinates import load_coordinate_table


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_load_coordinate_table_reads_rows(tmp_path: Path):
    csv_path = _write(tmp_path / "coord.csv", "loc,lat,long\nתל אביב - מרכז העיר,32.08,34.78\nSderot ,31.52,34.59\n")

    table = load_coordinate_table(csv_path)

    assert table["תל אביב - מרכז העיר"] == (32.08, 34.78)
    assert table["Sderot"] == (31.52, 34.59)


def test_load_coordinate_table_skips_unusable_rows_and_keeps_last_duplicate(tmp_path: Path):
    csv_path = _write(
        tmp_path / "coord.csv",
        "loc,lat,long\nA,1,2\n,3,4\nB,not-a-number,5\nC,95,5\nD,nan,1\nA,7,8\n",
    )

    table = load_coordinate_table(csv_path)

    assert dict(table) == {"A": (7.0, 8.0)}


def test_load_coordinate_table_is_read_only(tmp_path: Path):
    table = load_coordinate_table(_write(tmp_path / "coord.csv", "loc,lat,long\nA,1,2\n"))
    with pytest.raises(TypeError):
        table["B"] = (0.0, 0.0)


def test_load_coordinate_table_custom_columns(tmp_path: Path):
    csv_path = _write(tmp_path / "coord.csv", "name,y,x\nA,1,2\n")
    table = load_coordinate_table(csv_path, key_column="name", lat_column="y", lon_column="x")
    assert table["A"] == (1.0, 2.0)


def test_load_coordinate_table_rejects_missing_columns(tmp_path: Path):
    with pytest.raises(ParseError):
        load_coordinate_table(_write(tmp_path / "coord.csv", "loc,lat\nA,1\n"))


def test_load_coordinate_table_missing_file(tmp_path: Path):
    with pytest.raises(ParseError):
        load_coordinate_table(tmp_path / "absent.csv")
