from typing import Any

from archivist.domain.auth.model.identity import Identity
from archivist.domain.record.service.record import RecordService
from archivist.domain.record.service.scope import RepositoryScope
from archivist.domain.shared.authorization.gate import public
from archivist.domain.shared.model.uri import RecordURI
from archivist.domain.shared.query import Query, QueryHandler, Result


class GetRecord(Query):
    uri: RecordURI


class RecordDetail(Result):
    uri: RecordURI
    lock_version: int
    suppressed: bool
    representation: dict[str, Any]


class GetRecordHandler(QueryHandler[GetRecord, RecordDetail]):
    __auth__ = public()
    identity: Identity
    scope: RepositoryScope
    record_service: RecordService

    async def run(self, cmd: GetRecord) -> RecordDetail:
        record = await self.record_service.find(self.scope, cmd.uri, self.identity)
        return RecordDetail(
            uri=record.uri,
            lock_version=record.version,
            suppressed=record.suppressed,
            representation=record.to_representation(),
        )
