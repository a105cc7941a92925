from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from functools import wraps
from typing import Any, ParamSpec, TypeVar

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from archivist.domain.record.model.aggregate import Record
from archivist.domain.record.model.outcome import Conflict, Updated, UpdateOutcome
from archivist.domain.record.model.value import RecordFilter, SortField, SubRecord
from archivist.domain.record.port.repository import RecordRepository
from archivist.domain.record.service.linker import ReconcilePlan
from archivist.domain.schema.model.result import RecordDraft
from archivist.domain.shared.error import StorageError
from archivist.domain.shared.model.record_type import RecordType
from archivist.domain.shared.model.uri import RecordURI
from archivist.infrastructure.persistence.mappers.record import (
    draft_to_dict,
    record_uri,
    row_to_record,
    row_to_subrecord,
    subrecord_to_dict,
)
from archivist.infrastructure.persistence.tables import records_table, subrecords_table

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

_SORT_COLUMNS = {
    SortField.ID: records_table.c.id,
    SortField.CREATED_AT: records_table.c.created_at,
    SortField.UPDATED_AT: records_table.c.updated_at,
}


def storage_errors(fn: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
    """Re-raise SQLAlchemy failures as StorageError."""

    @wraps(fn)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            return await fn(*args, **kwargs)
        except SQLAlchemyError as exc:
            logger.error("Storage failure in %s: %s", fn.__qualname__, exc)
            raise StorageError(f"Storage failure in {fn.__name__}: {exc}") from exc

    return wrapper


def _where_uri(uri: RecordURI) -> list[Any]:
    return [
        records_table.c.id == uri.id,
        records_table.c.repository_id == uri.repository_id,
        records_table.c.record_type == uri.record_type.value,
    ]


class SqlRecordRepository(RecordRepository):
    """SQLAlchemy implementation of RecordRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        try:
            async with self.session.begin_nested():
                yield
        except SQLAlchemyError as exc:
            logger.error("Storage failure in atomic block: %s", exc)
            raise StorageError(f"Storage failure in atomic block: {exc}") from exc

    @storage_errors
    async def create(self, repository_id: int, draft: RecordDraft) -> Record:
        now = datetime.now(UTC)
        values = {
            **draft_to_dict(draft),
            "repository_id": repository_id,
            "version": 1,
            "suppressed": False,
            "created_at": now,
            "updated_at": now,
        }
        result = await self.session.execute(insert(records_table).values(**values))
        record_id = result.inserted_primary_key[0]
        await self.session.flush()
        return row_to_record({**values, "id": record_id})

    @storage_errors
    async def update(
        self, uri: RecordURI, expected_version: int, draft: RecordDraft
    ) -> UpdateOutcome | None:
        values = draft_to_dict(draft)
        values.pop("record_type")
        stmt = (
            update(records_table)
            .where(*_where_uri(uri), records_table.c.version == expected_version)
            .values(
                **values,
                version=records_table.c.version + 1,
                updated_at=datetime.now(UTC),
            )
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            current = await self.session.scalar(
                select(records_table.c.version).where(*_where_uri(uri))
            )
            if current is None:
                return None
            return Conflict(expected_version=expected_version, current_version=current)

        record = await self._fetch(uri)
        if record is None:
            raise StorageError(f"Record {uri} vanished after update")
        return Updated(record=record)

    @storage_errors
    async def set_suppressed(self, uri: RecordURI, suppressed: bool) -> Record | None:
        stmt = (
            update(records_table)
            .where(*_where_uri(uri))
            .values(
                suppressed=suppressed,
                version=records_table.c.version + 1,
                updated_at=datetime.now(UTC),
            )
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self.get(uri)

    @storage_errors
    async def get(self, uri: RecordURI) -> Record | None:
        record = await self._fetch(uri)
        if record is None:
            return None
        await self._load_collections([record])
        return record

    @storage_errors
    async def list(
        self, repository_id: int, record_type: RecordType, filter: RecordFilter
    ) -> list[Record]:
        stmt = select(records_table).where(*self._where_listing(repository_id, record_type, filter))

        column = _SORT_COLUMNS[filter.order_by or SortField.ID]
        if filter.descending:
            stmt = stmt.order_by(column.desc(), records_table.c.id.desc())
        else:
            stmt = stmt.order_by(column.asc(), records_table.c.id.asc())
        if filter.offset is not None:
            stmt = stmt.offset(filter.offset)
        if filter.limit is not None:
            stmt = stmt.limit(filter.limit)

        result = await self.session.execute(stmt)
        records = [row_to_record(dict(r)) for r in result.mappings().all()]
        await self._load_collections(records)
        return records

    @storage_errors
    async def count(
        self, repository_id: int, record_type: RecordType, filter: RecordFilter
    ) -> int:
        stmt = (
            select(func.count())
            .select_from(records_table)
            .where(*self._where_listing(repository_id, record_type, filter))
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    @storage_errors
    async def delete(self, uri: RecordURI) -> bool:
        record_id = await self.session.scalar(select(records_table.c.id).where(*_where_uri(uri)))
        if record_id is None:
            return False
        await self.session.execute(
            delete(subrecords_table).where(subrecords_table.c.record_id == record_id)
        )
        await self.session.execute(delete(records_table).where(records_table.c.id == record_id))
        await self.session.flush()
        return True

    @storage_errors
    async def suppression_states(self, uris: Iterable[RecordURI]) -> dict[RecordURI, bool]:
        wanted = set(uris)
        if not wanted:
            return {}
        stmt = select(
            records_table.c.id,
            records_table.c.repository_id,
            records_table.c.record_type,
            records_table.c.suppressed,
        ).where(records_table.c.id.in_(sorted({uri.id for uri in wanted})))
        result = await self.session.execute(stmt)

        states: dict[RecordURI, bool] = {}
        for row in result.mappings().all():
            uri = record_uri(dict(row))
            if uri in wanted:
                states[uri] = bool(row["suppressed"])
        return states

    @storage_errors
    async def subrecords(self, uri: RecordURI, collection: str) -> list[SubRecord]:
        stmt = (
            select(subrecords_table)
            .where(
                subrecords_table.c.record_id == uri.id,
                subrecords_table.c.collection == collection,
            )
            .order_by(subrecords_table.c.position)
        )
        result = await self.session.execute(stmt)
        return [row_to_subrecord(dict(r), uri) for r in result.mappings().all()]

    @storage_errors
    async def apply_subrecords(self, uri: RecordURI, plan: ReconcilePlan[SubRecord]) -> None:
        if not plan.changed:
            return
        now = datetime.now(UTC)

        if plan.deleted:
            await self.session.execute(
                delete(subrecords_table).where(
                    subrecords_table.c.key.in_([s.key for s in plan.deleted])
                )
            )
        for subrecord in plan.updated:
            values = subrecord_to_dict(subrecord)
            key = values.pop("key")
            await self.session.execute(
                update(subrecords_table)
                .where(subrecords_table.c.key == key)
                .values(**values, updated_at=now)
            )
        if plan.created:
            await self.session.execute(
                insert(subrecords_table),
                [
                    {**subrecord_to_dict(s), "created_at": now, "updated_at": now}
                    for s in plan.created
                ],
            )
        await self.session.flush()

    # -- internals ---------------------------------------------------------

    @staticmethod
    def _where_listing(
        repository_id: int, record_type: RecordType, filter: RecordFilter
    ) -> list[Any]:
        clauses = [
            records_table.c.repository_id == repository_id,
            records_table.c.record_type == record_type.value,
        ]
        if filter.suppressed is not None:
            clauses.append(records_table.c.suppressed == filter.suppressed)
        return clauses

    async def _fetch(self, uri: RecordURI) -> Record | None:
        stmt = select(records_table).where(*_where_uri(uri))
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_record(dict(row)) if row else None

    async def _load_collections(self, records: list[Record]) -> None:
        owners = {r.id: r for r in records if r.record_type.collections}
        if not owners:
            return
        stmt = (
            select(subrecords_table)
            .where(subrecords_table.c.record_id.in_(list(owners)))
            .order_by(subrecords_table.c.record_id, subrecords_table.c.position)
        )
        result = await self.session.execute(stmt)

        grouped: dict[int, dict[str, list[SubRecord]]] = {
            record_id: {c.attribute: [] for c in record.record_type.collections}
            for record_id, record in owners.items()
        }
        for row in result.mappings().all():
            owner = owners[row["record_id"]]
            grouped[owner.id].setdefault(row["collection"], []).append(
                row_to_subrecord(dict(row), owner.uri)
            )
        for record_id, record in owners.items():
            record.collections = grouped[record_id]
