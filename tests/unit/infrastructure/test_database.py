"""Unit tests for engine creation."""

from pathlib import Path

from sqlalchemy.pool import NullPool, StaticPool

from archivist.config import Config, DatabaseConfig
from archivist.infrastructure.persistence.database import create_db_engine


def _engine(url: str):
    return create_db_engine(Config(database=DatabaseConfig(url=url)))


def test_in_memory_sqlite_shares_one_connection():
    engine = _engine("sqlite+aiosqlite:///:memory:")

    assert isinstance(engine.sync_engine.pool, StaticPool)


def test_file_sqlite_gets_a_connection_per_unit_of_work(tmp_path: Path):
    engine = _engine(f"sqlite+aiosqlite:///{tmp_path / 'nested' / 'archive.db'}")

    assert isinstance(engine.sync_engine.pool, NullPool)
    assert (tmp_path / "nested").is_dir()
