"""Fixtures for SQLite (aiosqlite) integration tests."""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from archivist.config import Config, DatabaseConfig
from archivist.domain.record.model.repository import Repository
from archivist.domain.record.service.record import RecordService
from archivist.domain.record.service.scope import RepositoryScope
from archivist.domain.schema.model.value import STRICT
from archivist.domain.schema.service.validator import SchemaValidator
from archivist.infrastructure.persistence.database import create_db_engine, create_session_factory
from archivist.infrastructure.persistence.repository.record import SqlRecordRepository
from archivist.infrastructure.persistence.repository.repository import SqlRepositoryRegistry
from archivist.infrastructure.persistence.tables import metadata


@pytest.fixture
def sqlite_config() -> Config:
    return Config(database=DatabaseConfig(url="sqlite+aiosqlite:///:memory:"))


@pytest_asyncio.fixture
async def engine(sqlite_config: Config):
    """Per-test in-memory database with all tables created."""
    engine = create_db_engine(sqlite_config)
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine):
    async with create_session_factory(engine)() as session:
        yield session
        await session.rollback()


@pytest.fixture
def record_repo(session: AsyncSession) -> SqlRecordRepository:
    return SqlRecordRepository(session)


@pytest.fixture
def registry(session: AsyncSession) -> SqlRepositoryRegistry:
    return SqlRepositoryRegistry(session)


@pytest_asyncio.fixture
async def repo_a(registry: SqlRepositoryRegistry) -> Repository:
    return await registry.create("main", "Main Reading Room")


@pytest_asyncio.fixture
async def repo_b(registry: SqlRepositoryRegistry) -> Repository:
    return await registry.create("annex", "Annex")


@pytest.fixture
def scope_a(repo_a: Repository) -> RepositoryScope:
    return RepositoryScope(repository_id=repo_a.id)


@pytest.fixture
def scope_b(repo_b: Repository) -> RepositoryScope:
    return RepositoryScope(repository_id=repo_b.id)


@pytest.fixture
def record_service(
    record_repo: SqlRecordRepository,
    registry: SqlRepositoryRegistry,
    validator: SchemaValidator,
) -> RecordService:
    return RecordService(
        record_repo=record_repo,
        repositories=registry,
        validator=validator,
        settings=STRICT,
    )
