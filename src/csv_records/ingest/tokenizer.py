from __future__ import annotations

from enum import Enum
from typing import Iterable

from csv_records.parsing.primitives import FormatError
from csv_records.parsing.types import ErrorCode

Grid = list[list[str]]


class LoadStrategy(str, Enum):
    """
    How raw CSV text becomes a grid. Both are kept since callers rely on either's quirks.

    - `quoted`: character scan, honours `"` quoting and `""` escapes.
    - `lines`: split on newlines then commas, trim every cell. No quote handling.
    """
    quoted = "quoted"
    lines = "lines"


def tokenize_quoted(text: str) -> Grid:
    """
    Character-scan tokenizer.

    - `"` toggles quoting. `""` inside a quoted field emits one literal quote
      (both characters consumed).
    - `,` outside quotes ends a field, `\\n` outside quotes ends a field and the row.
    - `\\r` is always dropped.

    A trailing newline does not produce an empty last row, but an empty last
    field (`a,` or `a,""`) without one is kept.
    Raises `FormatError` when input ends inside a quoted field.
    """
    rows: Grid = []
    row: list[str] = []
    field: list[str] = []       # accumulator, joined when the field ends
    field_started = False       # a quote was seen, so an empty field is still a field
    inside_quotes = False

    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            if inside_quotes and i + 1 < n and text[i + 1] == '"':
                # escaped quote, quoting state is unchanged
                field.append('"')
                i += 1
            else:
                inside_quotes = not inside_quotes
            field_started = True
        elif ch == "," and not inside_quotes:
            row.append("".join(field))
            field.clear()
            field_started = False
        elif ch == "\n" and not inside_quotes:
            row.append("".join(field))
            field.clear()
            field_started = False
            rows.append(row)
            row = []
        elif ch == "\r":
            pass
        else:
            field.append(ch)
        i += 1

    if inside_quotes:
        raise FormatError(ErrorCode.mismatched_quotes, "mismatched quotes in CSV text (unterminated quoted field)")

    # flush, `a,` and `a,""` both end with an empty field
    if field or row or field_started:
        row.append("".join(field))
    if row:
        rows.append(row)
    return rows


def split_lines(lines: Iterable[str]) -> Grid:
    """
    Naive strategy: skip empty lines, split the rest on `,` and trim every cell.
    Quotes are kept as-is, so `"a,b"` becomes two cells.
    """
    rows: Grid = []
    for line in lines:
        line = line.rstrip("\r")
        if not line:
            continue
        rows.append([cell.strip() for cell in line.split(",")])
    return rows


def split_text(text: str) -> Grid:
    """`split_lines` over raw text."""
    return split_lines(text.split("\n"))


def tokenize(text: str, strategy: LoadStrategy = LoadStrategy.quoted) -> Grid:
    """Parse `text` into a grid with the given strategy."""
    strategy = LoadStrategy(strategy)
    if strategy is LoadStrategy.quoted:
        return tokenize_quoted(text)
    return split_text(text)
