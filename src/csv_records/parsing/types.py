from __future__ import annotations

from enum import Enum


class DataOrder(str, Enum):
    """
    Direction the cells of one record run in.

    - `along_row`: each record is one row, the header (schema) is row 0.
    - `along_column`: each record is one column, the header is column 0.
    """
    along_row = "along_row"
    along_column = "along_column"


class FieldKind(str, Enum):
    """Scalar kinds a schema entry can be bound as."""
    int = "int"             # signed 32-bit
    float = "float"         # single precision, tolerates a trailing `f`
    string = "string"       # verbatim
    long = "long"           # signed 64-bit
    double = "double"


class ErrorCode(str, Enum):
    """Typed error classifications."""
    mismatched_quotes = "mismatched_quotes"
    invalid_int = "invalid_int"             # also used for `long`
    invalid_float = "invalid_float"         # also used for `double`
    out_of_range = "out_of_range"
    empty_schema_entry = "empty_schema_entry"
    unknown_schema_name = "unknown_schema_name"
    row_out_of_bounds = "row_out_of_bounds"
    column_out_of_bounds = "column_out_of_bounds"
    record_out_of_bounds = "record_out_of_bounds"
