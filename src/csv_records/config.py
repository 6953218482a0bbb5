from __future__ import annotations

import os

from csv_records.ingest.tokenizer import LoadStrategy

DEFAULT_ENCODING = "utf-8"
DEFAULT_STRATEGY = LoadStrategy.quoted
DEFAULT_USE_CACHE = True

_TRUE_STRINGS = {"1", "true", "t", "yes", "y"}
_FALSE_STRINGS = {"0", "false", "f", "no", "n"}


def get_encoding() -> str:
    """Encoding used when a loader reads a file itself."""
    return os.getenv("CSV_RECORDS_ENCODING", DEFAULT_ENCODING)


def get_strategy() -> LoadStrategy:
    """Default grid strategy. Raises `ValueError` on an unknown `CSV_RECORDS_STRATEGY`."""
    raw = os.getenv("CSV_RECORDS_STRATEGY")
    if raw is None or raw.strip() == "":
        return DEFAULT_STRATEGY
    try:
        return LoadStrategy(raw.strip().lower())
    except ValueError:
        allowed = [s.value for s in LoadStrategy]
        raise ValueError(f"CSV_RECORDS_STRATEGY: unknown strategy {raw!r} (expected one of {allowed})")


def get_use_cache() -> bool:
    """Default record caching flag for readers."""
    raw = os.getenv("CSV_RECORDS_USE_CACHE")
    if raw is None or raw.strip() == "":
        return DEFAULT_USE_CACHE

    s = raw.strip().lower()
    if s in _TRUE_STRINGS: return True
    if s in _FALSE_STRINGS: return False

    raise ValueError(f"CSV_RECORDS_USE_CACHE: invalid boolean {raw!r} (expected 0/1 or true/false)")
