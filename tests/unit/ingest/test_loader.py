from __future__ import annotations

from pathlib import Path

import pytest

from csv_records.ingest.loader import CsvLoader
from csv_records.ingest.tokenizer import LoadStrategy
from csv_records.parsing.primitives import GridIndexError
from csv_records.parsing.types import ErrorCode

GRID_TEXT = "h1,h2,h3,h4\na,b,c,d\ne,f,g,h\n"


@pytest.fixture()
def loader() -> CsvLoader:
    return CsvLoader.from_text(GRID_TEXT)


def test_counts(loader: CsvLoader) -> None:
    """R rows and C columns reported."""
    assert loader.has_data is True
    assert loader.row_count == 3
    assert loader.column_count == 4


def test_cell(loader: CsvLoader) -> None:
    assert loader.cell(0, 0) == "h1"
    assert loader.cell(2, 3) == "h"


@pytest.mark.parametrize("row", [3, 10, -1])
def test_cell_row_out_of_bounds(loader: CsvLoader, row: int) -> None:
    """Bad row -> `IndexError` naming the row."""
    with pytest.raises(IndexError) as e:
        loader.cell(row, 0)
    assert isinstance(e.value, GridIndexError)
    assert e.value.code == ErrorCode.row_out_of_bounds
    assert f"row {row}" in str(e.value)


@pytest.mark.parametrize("col", [4, -1])
def test_cell_column_out_of_bounds(loader: CsvLoader, col: int) -> None:
    """Bad column -> `IndexError` naming the column."""
    with pytest.raises(GridIndexError) as e:
        loader.cell(0, col)
    assert e.value.code == ErrorCode.column_out_of_bounds
    assert f"column {col}" in str(e.value)


def test_row_and_column(loader: CsvLoader) -> None:
    assert loader.row(1) == ["a", "b", "c", "d"]
    assert loader.column(2) == ["h3", "c", "g"]


def test_ranged_cells(loader: CsvLoader) -> None:
    """Sub-ranges of a row or a column."""
    assert loader.row_cells(1, 1, 2) == ["b", "c"]
    assert loader.column_cells(0, 1, 2) == ["a", "e"]
    assert loader.row_cells(1, 0, 0) == []


def test_ranged_cells_out_of_bounds(loader: CsvLoader) -> None:
    """Ranges past the edge raise, no partial result."""
    with pytest.raises(GridIndexError):
        loader.row_cells(0, 2, 3)
    with pytest.raises(GridIndexError):
        loader.column_cells(0, 2, 2)
    with pytest.raises(GridIndexError):
        loader.row_cells(0, 0, -1)


def test_row_out_of_bounds_even_when_empty() -> None:
    """`row()` on an empty grid raises instead of returning `[]`."""
    with pytest.raises(GridIndexError) as e:
        CsvLoader([]).row(0)
    assert e.value.code == ErrorCode.row_out_of_bounds


def test_ragged_row_raises_on_missing_cell() -> None:
    """Rectangular is assumed, not enforced: a missing cell is an index error."""
    loader = CsvLoader([["a", "b"], ["c"]])
    assert loader.cell(1, 0) == "c"
    with pytest.raises(GridIndexError) as e:
        loader.cell(1, 1)
    assert e.value.code == ErrorCode.column_out_of_bounds


def test_no_data() -> None:
    loader = CsvLoader()
    assert loader.has_data is False
    assert loader.row_count == 0
    assert loader.column_count == 0
    assert loader.rows() == []


def test_dispose_clears(loader: CsvLoader) -> None:
    """Disposed loader behaves as "no data"."""
    loader.dispose()
    assert loader.has_data is False
    assert loader.row_count == 0
    assert loader.column_count == 0
    with pytest.raises(GridIndexError):
        loader.cell(0, 0)


def test_context_manager_disposes() -> None:
    with CsvLoader.from_text(GRID_TEXT) as loader:
        assert loader.row_count == 3
    assert loader.has_data is False


def test_set_cells_copies_rows() -> None:
    """The caller's lists are not shared with the grid."""
    cells = [["a", "b"]]
    loader = CsvLoader()
    loader.set_cells(cells)
    cells[0][0] = "changed"
    assert loader.cell(0, 0) == "a"

    rows = loader.rows()
    rows[0][1] = "changed"
    assert loader.cell(0, 1) == "b"


def test_from_lines() -> None:
    loader = CsvLoader.from_lines(["x, y", "", "1 ,2"])
    assert loader.rows() == [["x", "y"], ["1", "2"]]


def test_from_file_quoted(sample_dir: Path) -> None:
    """Sample file parses with quoting honoured."""
    loader = CsvLoader.from_file(sample_dir / "player_data_horizontal.csv")
    assert loader.row_count == 4
    assert loader.column_count == 6
    assert loader.cell(1, 5) == "Software, games"
    assert loader.cell(3, 5) == 'The "Best" Studio'


def test_from_file_lines_strategy(sample_dir: Path) -> None:
    """Naive strategy keeps quotes and splits on the quoted comma."""
    loader = CsvLoader.from_file(sample_dir / "player_data_horizontal.csv", strategy=LoadStrategy.lines)
    assert loader.cell(1, 5) == '"Software'


def test_from_file_missing(tmp_path: Path) -> None:
    """I/O failures propagate unchanged."""
    with pytest.raises(FileNotFoundError):
        CsvLoader.from_file(tmp_path / "nope.csv")


def test_from_file_encoding(tmp_path: Path) -> None:
    p = tmp_path / "latin.csv"
    p.write_bytes("name\nJos\xe9\n".encode("latin-1"))
    loader = CsvLoader.from_file(p, encoding="latin-1")
    assert loader.cell(1, 0) == "Jos\xe9"


def test_strategy_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """`CSV_RECORDS_STRATEGY` picks the default strategy."""
    monkeypatch.setenv("CSV_RECORDS_STRATEGY", "lines")
    loader = CsvLoader.from_text('"a,b",c')
    assert loader.cell(0, 0) == '"a'
