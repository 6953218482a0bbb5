from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Generic, Optional, Sequence

from csv_records import config

from .schema import RecordSchema, TRecord


@dataclass(frozen=True)
class CsvData(Generic[TRecord]):
    """A whole file's schema and its deserialized records."""
    schema: tuple[str, ...]
    records: list[TRecord]


def _read_lines(path: Path, encoding: str | None) -> list[str]:
    # only `\r\n`, `\r` and `\n` end a line, form feeds and unicode separators stay in the cell
    with path.open("r", encoding=encoding or config.get_encoding(), newline="") as f:
        text = f.read()
    if not text:
        return []
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    if lines[-1] == "":
        # a final line break does not start another line
        lines.pop()
    return lines


def read_rows(path: Path | str, *, encoding: str | None = None) -> list[list[str]]:
    """
    Every line of the file split on `,`. No trimming, no quote handling, empty
    lines stay as a single empty cell.
    """
    return [line.split(",") for line in _read_lines(Path(path), encoding)]


def read_table(
    path: Path | str,
    record_schema: RecordSchema[TRecord],
    *,
    schema: Optional[Sequence[str]] = None,
    encoding: str | None = None,
) -> CsvData[TRecord]:
    """
    One-shot read of a row-oriented file into records.

    - the first line is the header. Its names are the schema unless `schema` is given,
      which renames the positions (the header line is still skipped).
    - each data line is split on `,` and zipped with the schema, the shorter side wins.
    - bindings whose schema name is missing from a zipped line keep the record type's default.
    - blank lines are skipped.
    """
    lines = _read_lines(Path(path), encoding)

    if not lines:
        return CsvData(schema=tuple(schema or ()), records=[])
    names = tuple(lines[0].split(",")) if schema is None else tuple(schema)

    records: list[TRecord] = []
    for line in lines[1:]:
        if not line:
            continue
        raw = dict(zip(names, line.split(",")))
        records.append(record_schema.deserialize_mapping(raw))
    return CsvData(schema=names, records=records)
