from archivist.domain.auth.model.identity import Identity
from archivist.domain.record.model.value import RecordFilter
from archivist.domain.record.query.get_record import RecordDetail
from archivist.domain.record.service.record import RecordService
from archivist.domain.record.service.scope import RepositoryScope
from archivist.domain.shared.authorization.gate import public
from archivist.domain.shared.model.record_type import RecordType
from archivist.domain.shared.query import Query, QueryHandler, Result


class ListRecords(Query):
    record_type: RecordType
    filter: RecordFilter = RecordFilter()


class RecordList(Result):
    items: list[RecordDetail]
    total: int


class ListRecordsHandler(QueryHandler[ListRecords, RecordList]):
    __auth__ = public()
    identity: Identity
    scope: RepositoryScope
    record_service: RecordService

    async def run(self, cmd: ListRecords) -> RecordList:
        records = await self.record_service.list(
            self.scope, cmd.record_type, self.identity, cmd.filter
        )
        total = await self.record_service.count(self.scope, cmd.record_type, self.identity)
        return RecordList(
            items=[
                RecordDetail(
                    uri=r.uri,
                    lock_version=r.version,
                    suppressed=r.suppressed,
                    representation=r.to_representation(),
                )
                for r in records
            ],
            total=total,
        )
