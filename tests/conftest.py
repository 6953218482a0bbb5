from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest

from csv_records.parsing.schema import RecordSchema


def _find_repo_root(start: Path) -> Path:
    marker = "pyproject.toml"
    cur = start.resolve()
    for p in (cur, *cur.parents):
        if (p / marker).exists():
            return p
    raise RuntimeError(f"Could not find repo root from: {start}")


@pytest.fixture(scope="session")
def repo_root() -> Path:
    """The absolute path to the repo root (finds by walking up to `pyproject.toml`)."""
    return _find_repo_root(Path(__file__))


@pytest.fixture(scope="session")
def sample_dir(repo_root: Path) -> Path:
    return repo_root / "data" / "sample"


@pytest.fixture(autouse=True)
def _clean_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Tests never inherit `CSV_RECORDS_*` settings from the shell running them."""
    for name in ("CSV_RECORDS_ENCODING", "CSV_RECORDS_STRATEGY", "CSV_RECORDS_USE_CACHE"):
        monkeypatch.delenv(name, raising=False)


@dataclass
class Player:
    """Record shape of the sample player files."""
    name: str = ""
    id: int = 0
    country: str = ""
    xp: int = 0
    hours_played: int = 0
    field_of_work: str = ""


PLAYER_SCHEMA = RecordSchema.of(
    Player,
    name=("Name", "string"),
    id=("ID", "int"),
    country=("Country", "string"),
    xp=("XP", "int"),
    hours_played=("hours_played", "int"),
    field_of_work=("Work", "string"),
)


@pytest.fixture()
def player_schema() -> RecordSchema[Player]:
    return PLAYER_SCHEMA


@pytest.fixture()
def player_type() -> type[Player]:
    return Player
