from __future__ import annotations

import re
import struct
from dataclasses import dataclass
from typing import Any, Callable

from .types import ErrorCode, FieldKind


@dataclass(frozen=True)
class CsvError(Exception):
    """Base of every error raised by this package, with the classification that caused it."""
    code: ErrorCode             # used to classify the failure encountered
    detail: str                 # human readable message, names the offending field/index

    def __str__(self) -> str:
        return f"{self.code.value}: {self.detail}"


class FormatError(CsvError):
    """Malformed CSV text, or a cell that cannot be converted to its bound kind."""


class SchemaError(CsvError):
    """Header with an empty entry, or a binding naming a header entry that does not exist."""


class GridIndexError(CsvError, IndexError):
    """Row, column or record index outside the loaded data. Still catchable as `IndexError`."""


Converter = Callable[..., Any]

_INT32 = (-(2**31), 2**31 - 1)
_INT64 = (-(2**63), 2**63 - 1)

# `1.5f` / `2F`: author-style float literals. Only a suffix following a digit or dot,
# so `inf` is left alone.
_FLOAT_SUFFIX = re.compile(r"(?<=[0-9.])[fF]$")


def is_empty(v: Any) -> bool:
    """`None` and `""` are the only "absent" values. Whitespace is not absent."""
    return v is None or v == ""


def strip_quotes(v: str) -> str:
    """
    Remove exactly one leading and one trailing `"` when both are present.
    Values from the naive line strategy keep their quotes, this undoes that.
    """
    if len(v) >= 2 and v[0] == '"' and v[-1] == '"':
        return v[1:-1]
    return v


## -- integer fields

def _parse_integer(v: Any, *, field: str, bounds: tuple[int, int], kind: str) -> int:
    if is_empty(v):
        return 0
    s = str(v).strip()
    try:
        # Python's `int()` also accepts `1_000`; CSV authors never mean that.
        if "_" in s:
            raise ValueError(f"Underscore in {kind} literal")
        n = int(s, 10)
    except ValueError:
        raise FormatError(ErrorCode.invalid_int, f"{field}: invalid {kind} value {v!r}")

    lo, hi = bounds
    if not lo <= n <= hi:
        raise FormatError(ErrorCode.out_of_range, f"{field}: {kind} value {v!r} outside [{lo}, {hi}]")
    return n


def parse_int(v: Any, *, field: str) -> int:
    """Parse a signed 32-bit integer. Empty is `0`. Raise on non-numeric text or overflow."""
    return _parse_integer(v, field=field, bounds=_INT32, kind="int")


def parse_long(v: Any, *, field: str) -> int:
    """Parse a signed 64-bit integer. Empty is `0`. Raise on non-numeric text or overflow."""
    return _parse_integer(v, field=field, bounds=_INT64, kind="long")


## -- floating point fields

def _parse_real(s: str, *, field: str, kind: str) -> float:
    try:
        if "_" in s:
            raise ValueError(f"Underscore in {kind} literal")
        return float(s)
    except ValueError:
        raise FormatError(ErrorCode.invalid_float, f"{field}: invalid {kind} value {s!r}")


def parse_float(v: Any, *, field: str) -> float:
    """
    Parse a single precision float. Empty is `0.0`.

    A trailing `f`/`F` suffix (`1.5f`) is dropped before parsing, and the result is
    narrowed to 32-bit precision, so `0.1` comes back as `0.10000000149011612`.
    """
    if is_empty(v):
        return 0.0
    s = _FLOAT_SUFFIX.sub("", str(v).strip())
    d = _parse_real(s, field=field, kind="float")
    try:
        return struct.unpack("<f", struct.pack("<f", d))[0]
    except OverflowError:
        raise FormatError(ErrorCode.out_of_range, f"{field}: float value {v!r} exceeds single precision")


def parse_double(v: Any, *, field: str) -> float:
    """Parse a double precision float. Empty is `0.0`."""
    if is_empty(v):
        return 0.0
    return _parse_real(str(v).strip(), field=field, kind="double")


## -- text fields

def parse_string(v: Any, *, field: str) -> str:
    """Assigned verbatim. Empty is allowed, `None` becomes `""`."""
    return "" if v is None else str(v)


# kind -> converter, every converter takes `(value, *, field=...)`
CONVERTERS: dict[FieldKind, Converter] = {
    FieldKind.int: parse_int,
    FieldKind.float: parse_float,
    FieldKind.string: parse_string,
    FieldKind.long: parse_long,
    FieldKind.double: parse_double,
}


def convert(v: Any, kind: FieldKind, *, field: str) -> Any:
    """Convert a raw cell to its bound `kind`."""
    return CONVERTERS[kind](v, field=field)
