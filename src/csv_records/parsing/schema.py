from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Mapping, Sequence, TypeVar

from csv_records.ingest.loader import CsvLoader

from .primitives import SchemaError, convert, is_empty, strip_quotes
from .types import DataOrder, ErrorCode, FieldKind

TRecord = TypeVar("TRecord")

# Typing:
# Factory builds a record from `{attr: converted value}` keyword arguments.
Factory = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class FieldBinding:
    """One header entry bound to one record attribute."""
    schema_name: str            # header text this field is read from.
    kind: FieldKind             # how the cell is converted.
    attr: str                   # record attribute (constructor keyword) receiving the value.

    def __post_init__(self) -> None:
        if not self.schema_name:
            raise SchemaError(ErrorCode.empty_schema_entry, f"{self.attr}: binding has an empty schema name")
        # accept plain strings, `"int"` -> `FieldKind.int`
        object.__setattr__(self, "kind", FieldKind(self.kind))


@dataclass(frozen=True, slots=True)
class RecordSchema(Generic[TRecord]):
    """
    Static binding table for one record shape, declared once and reused for every record.

    Deserializing a record:
    - for every binding, in declaration order: locate its schema name in the header
      (first exact match), read that cell, drop one pair of surrounding quotes, convert.
    - build the record with `record_type(**{attr: value})`.

    The first failure raises, a partially converted record is never returned.
    """
    record_type: Factory                    # usually the record class itself
    bindings: tuple[FieldBinding, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "bindings", tuple(self.bindings))
        seen: set[str] = set()
        for b in self.bindings:
            if b.attr in seen:
                raise ValueError(f"{b.attr}: bound more than once")
            seen.add(b.attr)

    @classmethod
    def of(cls, record_type: Factory, **bindings: tuple[str, FieldKind | str]) -> RecordSchema[Any]:
        """
        Declare bindings as keywords, `attr=(schema_name, kind)`.

        example:
          `RecordSchema.of(Player, name=("Name", "string"), id=("ID", "int"))`
        """
        return cls(
            record_type=record_type,
            bindings=tuple(FieldBinding(name, FieldKind(kind), attr) for attr, (name, kind) in bindings.items()),
        )

    def deserialize(self, schema: Sequence[str], cells: Sequence[str]) -> TRecord:
        """Convert one record's raw `cells`, laid out per `schema`."""
        values: dict[str, Any] = {}
        for b in self.bindings:
            i = schema_index(schema, b.schema_name)
            raw = cells[i] if i < len(cells) else ""
            values[b.attr] = convert(strip_quotes(raw), b.kind, field=b.schema_name)
        return self.record_type(**values)

    def deserialize_mapping(self, raw: Mapping[str, str]) -> TRecord:
        """
        Convert a `{schema_name: cell}` mapping. Bindings whose name is absent
        are skipped, the record type's default applies.
        """
        values: dict[str, Any] = {}
        for b in self.bindings:
            if b.schema_name not in raw:
                continue
            values[b.attr] = convert(strip_quotes(raw[b.schema_name]), b.kind, field=b.schema_name)
        return self.record_type(**values)


def schema_index(schema: Sequence[str], name: str) -> int:
    """Position of the first entry equal to `name`. Raises `SchemaError` when absent."""
    for i, s in enumerate(schema):
        if s == name:
            return i
    raise SchemaError(ErrorCode.unknown_schema_name, f"{name}: not found in schema {list(schema)}")


def read_schema(loader: CsvLoader, order: DataOrder) -> tuple[str, ...]:
    """
    Header names: row 0 when records run along rows, column 0 when they run along columns.
    Raises `SchemaError` on any empty entry.
    """
    order = DataOrder(order)
    if order is DataOrder.along_row:
        names = [loader.cell(0, i) for i in range(loader.column_count)]
        header = "row"
    else:
        names = [loader.cell(i, 0) for i in range(loader.row_count)]
        header = "column"

    for i, name in enumerate(names):
        if is_empty(name):
            raise SchemaError(
                ErrorCode.empty_schema_entry,
                f"the first {header}, which describes the schema, has an empty cell at index {i}",
            )
    return tuple(names)
