from __future__ import annotations

import logging
from typing import Generic, Iterator, Optional

from csv_records import config
from csv_records.ingest.loader import CsvLoader

from .primitives import GridIndexError
from .schema import RecordSchema, TRecord, read_schema
from .types import DataOrder, ErrorCode

logger = logging.getLogger(__name__)


class CsvReader(Generic[TRecord]):
    """
    Reads the records of a loaded CSV grid, as raw cells or deserialized via a `RecordSchema`.

    Record `i` (0-based, header excluded) is physical row `i + 1` for `DataOrder.along_row`,
    physical column `i + 1` for `DataOrder.along_column`.

    With `use_cache`, each deserialized record is kept per index until `clear_cache()`.
    Nothing is evicted automatically and a cached value always wins over re-parsing.
    Not safe to share across threads: the cache is mutated in place.
    """

    def __init__(
        self,
        loader: CsvLoader,
        record_schema: RecordSchema[TRecord],
        order: DataOrder | str = DataOrder.along_row,
        *,
        use_cache: Optional[bool] = None,
    ) -> None:
        self._loader: CsvLoader | None = loader
        self.record_schema = record_schema
        self.order = DataOrder(order)
        self.use_cache = config.get_use_cache() if use_cache is None else use_cache
        self._cache: dict[int, TRecord] = {}
        # fails fast on an empty header entry
        self._schema: tuple[str, ...] | None = read_schema(loader, self.order)

    @property
    def schema(self) -> tuple[str, ...]:
        """Header names, empty once disposed."""
        return self._schema or ()

    @property
    def record_count(self) -> int:
        """Rows (or columns) minus the header line."""
        if self._loader is None:
            return 0
        if self.order is DataOrder.along_row:
            total = self._loader.row_count
        else:
            total = self._loader.column_count
        return max(total - 1, 0)

    def record_cells(self, index: int) -> list[str]:
        """Raw cells of record `index`."""
        if index < 0 or index >= self.record_count or self._loader is None:
            raise GridIndexError(ErrorCode.record_out_of_bounds, f"requested record {index} out of bounds (record_count={self.record_count})")
        if self.order is DataOrder.along_row:
            return self._loader.row(index + 1)
        return self._loader.column(index + 1)

    def get_record(self, index: int) -> TRecord:
        """Record `index`, from the cache when caching and present."""
        if self.use_cache and index in self._cache:
            return self._cache[index]

        record = self.record_schema.deserialize(self.schema, self.record_cells(index))

        if self.use_cache:
            self.cache_record(index, record)
        return record

    def get_records(self, start: int = 0, count: Optional[int] = None) -> list[TRecord]:
        """
        `count` records from `start` on, in order. `count` defaults to every record from `start`.
        Each record goes through `get_record`, so the cache is used and filled.
        """
        if count is None:
            count = max(self.record_count - start, 0)
        return [self.get_record(start + i) for i in range(count)]

    def __iter__(self) -> Iterator[TRecord]:
        for i in range(self.record_count):
            yield self.get_record(i)

    def __len__(self) -> int:
        return self.record_count

    ## -- cache

    @property
    def cached_indices(self) -> tuple[int, ...]:
        return tuple(sorted(self._cache))

    def cache_record(self, index: int, record: TRecord) -> None:
        """Insert or overwrite the cached record at `index`."""
        self._cache[index] = record

    def clear_cache(self) -> None:
        logger.debug("Clearing %d cached record(s)", len(self._cache))
        self._cache.clear()

    ## -- lifetime

    def dispose(self) -> None:
        """Dispose the loader, forget the schema and the cache."""
        if self._loader is not None:
            self._loader.dispose()
        self._loader = None
        self._schema = None
        self._cache.clear()

    def __enter__(self) -> CsvReader[TRecord]:
        return self

    def __exit__(self, *exc: object) -> None:
        self.dispose()
