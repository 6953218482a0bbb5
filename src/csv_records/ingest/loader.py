from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence

from csv_records import config
from csv_records.ingest.tokenizer import Grid, LoadStrategy, split_lines, tokenize
from csv_records.parsing.primitives import GridIndexError
from csv_records.parsing.types import ErrorCode

logger = logging.getLogger(__name__)


class CsvLoader:
    """
    CSV contents as a string matrix (rows x columns), with bounds-checked accessors.

    The grid is assumed rectangular but that is not enforced: reading a cell that a
    short row does not have raises `GridIndexError` like any other out-of-bounds read.

    `dispose()` (or leaving a `with` block) drops the grid; the loader then reports
    no data, zero rows and zero columns.
    """

    def __init__(self, cells: Optional[Sequence[Sequence[str]]] = None) -> None:
        self._cells: Grid | None = None
        if cells is not None:
            self.set_cells(cells)

    ## -- construction

    @classmethod
    def from_text(cls, text: str, *, strategy: LoadStrategy | str | None = None) -> CsvLoader:
        """Parse CSV `text` with `strategy` (defaults to `CSV_RECORDS_STRATEGY`, else `quoted`)."""
        strategy = config.get_strategy() if strategy is None else LoadStrategy(strategy)
        cells = tokenize(text, strategy)
        logger.debug("Loaded %d row(s) from text with strategy=%s", len(cells), strategy.value)
        return cls(cells)

    @classmethod
    def from_file(
        cls,
        path: Path | str,
        *,
        strategy: LoadStrategy | str | None = None,
        encoding: str | None = None,
    ) -> CsvLoader:
        """
        Read and parse the file at `path`.
        I/O failures (`FileNotFoundError`, ...) propagate unchanged.
        """
        path = Path(path)
        # newline="" keeps `\r` in the text, both strategies drop it themselves.
        with path.open("r", encoding=encoding or config.get_encoding(), newline="") as f:
            text = f.read()
        logger.debug("Read %s (%d chars)", path, len(text))
        return cls.from_text(text, strategy=strategy)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> CsvLoader:
        """Naive strategy over already split lines (no quote handling)."""
        return cls(split_lines(lines))

    def set_cells(self, cells: Sequence[Sequence[str]]) -> None:
        """Replace the grid. Rows are copied, the caller's lists are not shared."""
        self._cells = [list(r) for r in cells]

    ## -- shape

    @property
    def has_data(self) -> bool:
        """Whether a grid is loaded (`False` once disposed)."""
        return self._cells is not None

    @property
    def row_count(self) -> int:
        if self._cells is None:
            return 0
        return len(self._cells)

    @property
    def column_count(self) -> int:
        """Length of the first row, `0` without rows."""
        if not self._cells:
            return 0
        return len(self._cells[0])

    ## -- access

    def _check_row(self, row: int) -> None:
        row_count = self.row_count
        if row < 0 or row >= row_count:
            raise GridIndexError(ErrorCode.row_out_of_bounds, f"requested row {row} out of bounds (row_count={row_count})")

    def _check_column(self, col: int) -> None:
        column_count = self.column_count
        if col < 0 or col >= column_count:
            raise GridIndexError(
                ErrorCode.column_out_of_bounds, f"requested column {col} out of bounds (column_count={column_count})"
            )

    def cell(self, row: int, col: int) -> str:
        """The cell at `(row, col)`. Negative indices are out of bounds, there is no wrap-around."""
        self._check_row(row)
        self._check_column(col)

        cells = self._cells[row]  # type: ignore[index]
        if col >= len(cells):
            # ragged row, shorter than the first one
            raise GridIndexError(
                ErrorCode.column_out_of_bounds, f"requested column {col} out of bounds (row {row} has {len(cells)} cells)"
            )
        return cells[col]

    def row_cells(self, row: int, start_col: int, count: int) -> list[str]:
        """`count` cells of `row`, from `start_col` on."""
        self._check_row(row)
        if count < 0:
            raise GridIndexError(ErrorCode.column_out_of_bounds, f"negative cell count {count} for row {row}")
        return [self.cell(row, start_col + i) for i in range(count)]

    def column_cells(self, col: int, start_row: int, count: int) -> list[str]:
        """`count` cells of `col`, from `start_row` on."""
        self._check_column(col)
        if count < 0:
            raise GridIndexError(ErrorCode.row_out_of_bounds, f"negative cell count {count} for column {col}")
        return [self.cell(start_row + i, col) for i in range(count)]

    def row(self, index: int) -> list[str]:
        return self.row_cells(index, 0, self.column_count)

    def column(self, index: int) -> list[str]:
        return self.column_cells(index, 0, self.row_count)

    def rows(self) -> Grid:
        """A copy of the whole grid, empty without data."""
        return [list(r) for r in self._cells or []]

    ## -- lifetime

    def dispose(self) -> None:
        """Drop the grid."""
        self._cells = None

    def __enter__(self) -> CsvLoader:
        return self

    def __exit__(self, *exc: object) -> None:
        self.dispose()
