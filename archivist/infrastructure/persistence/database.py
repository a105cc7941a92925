"""Database engine and session factory creation."""

import os
from pathlib import Path
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from archivist.config import Config


def _expand_sqlite_path(url: str) -> str:
    """Expand ~ in SQLite URLs and ensure parent directory exists."""
    if not url.startswith("sqlite"):
        return url

    # Extract path from URL (sqlite+aiosqlite:///path or sqlite:///path)
    prefix_end = url.index("///") + 3
    prefix = url[:prefix_end]
    path = url[prefix_end:]
    if not path or path == ":memory:":
        return url

    # Expand ~ and make absolute
    abs_path = os.path.abspath(os.path.expanduser(path))

    # Ensure parent directory exists
    Path(abs_path).parent.mkdir(parents=True, exist_ok=True)

    return f"{prefix}{abs_path}"


def _is_sqlite_memory(url: str) -> bool:
    path = url.split("///", 1)[1] if "///" in url else ""
    return path in ("", ":memory:") or "mode=memory" in path


def _enable_sqlite_savepoints(engine: AsyncEngine, begin: str = "BEGIN") -> None:
    """Let SQLAlchemy own BEGIN so SAVEPOINT works on pysqlite/aiosqlite.

    File databases pass ``BEGIN IMMEDIATE`` so a unit of work takes the write
    lock up front and concurrent ones queue on the busy timeout instead of
    failing to upgrade a read lock. Also turns on foreign keys so sub-records
    follow their parent on delete.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, _connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql(begin)


def create_db_engine(config: Config) -> AsyncEngine:
    """Create async database engine.

    Handles SQLite and PostgreSQL with appropriate settings.
    """
    url = _expand_sqlite_path(config.database.url)
    is_sqlite = url.startswith("sqlite")
    in_memory = is_sqlite and _is_sqlite_memory(url)

    if in_memory:
        engine_kwargs: dict[str, Any] = {
            "echo": config.database.echo,
            # One shared connection; the database lives only as long as it does
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    elif is_sqlite:
        engine_kwargs = {
            "echo": config.database.echo,
            # A connection per unit of work; SQLite serialises the writers
            "poolclass": NullPool,
            "connect_args": {"timeout": config.database.busy_timeout},
        }
    else:
        engine_kwargs = {
            "echo": config.database.echo,
            "pool_pre_ping": True,
            "pool_size": 5,
            "max_overflow": 10,
        }

    engine = create_async_engine(url, **engine_kwargs)
    if is_sqlite:
        _enable_sqlite_savepoints(engine, begin="BEGIN" if in_memory else "BEGIN IMMEDIATE")
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory for dependency injection."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )
