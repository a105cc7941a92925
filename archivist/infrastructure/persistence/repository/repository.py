from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from archivist.domain.record.model.repository import Repository
from archivist.domain.record.port.repository import RepositoryRegistry
from archivist.domain.shared.error import ValidationError
from archivist.infrastructure.persistence.mappers.record import row_to_repository
from archivist.infrastructure.persistence.repository.record import storage_errors
from archivist.infrastructure.persistence.tables import repositories_table


class SqlRepositoryRegistry(RepositoryRegistry):
    """SQLAlchemy implementation of RepositoryRegistry."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @storage_errors
    async def create(self, repo_code: str, name: str) -> Repository:
        values = {"repo_code": repo_code, "name": name, "created_at": datetime.now(UTC)}
        try:
            async with self.session.begin_nested():
                result = await self.session.execute(insert(repositories_table).values(**values))
        except IntegrityError:
            raise ValidationError(
                f"Repository code already in use: {repo_code}", field="repo_code"
            ) from None
        return row_to_repository({**values, "id": result.inserted_primary_key[0]})

    @storage_errors
    async def get(self, repository_id: int) -> Repository | None:
        stmt = select(repositories_table).where(repositories_table.c.id == repository_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_repository(dict(row)) if row else None

    @storage_errors
    async def list(self) -> list[Repository]:
        stmt = select(repositories_table).order_by(repositories_table.c.id)
        result = await self.session.execute(stmt)
        return [row_to_repository(dict(r)) for r in result.mappings().all()]
