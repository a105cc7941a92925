from typing import AsyncIterable

from dishka import from_context, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from archivist.config import Config
from archivist.domain.record.port.repository import RecordRepository, RepositoryRegistry
from archivist.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
)
from archivist.infrastructure.persistence.repository.record import SqlRecordRepository
from archivist.infrastructure.persistence.repository.repository import SqlRepositoryRegistry
from archivist.util.di.base import Provider
from archivist.util.di.scope import Scope


class PersistenceProvider(Provider):
    config = from_context(provides=Config, scope=Scope.APP)

    # APP-scoped factories
    @provide(scope=Scope.APP)
    def get_engine(self, config: Config) -> AsyncEngine:
        return create_db_engine(config)

    @provide(scope=Scope.APP)
    def get_session_factory(self, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    # UOW-scoped session (one per unit of work)
    @provide(scope=Scope.UOW)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterable[AsyncSession]:
        async with session_factory() as session:
            yield session
            await session.commit()

    # UOW-scoped repositories
    record_repo = provide(SqlRecordRepository, scope=Scope.UOW, provides=RecordRepository)
    repository_registry = provide(
        SqlRepositoryRegistry, scope=Scope.UOW, provides=RepositoryRegistry
    )
