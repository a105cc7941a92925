from archivist.domain.auth.model.capability import Capability
from archivist.domain.auth.model.identity import Identity
from archivist.domain.record.service.record import RecordService
from archivist.domain.record.service.scope import RepositoryScope
from archivist.domain.shared.authorization.gate import requires
from archivist.domain.shared.command import Command, CommandHandler, Result
from archivist.domain.shared.model.uri import RecordURI


class DeleteRecord(Command):
    uri: RecordURI


class RecordDeleted(Result):
    uri: RecordURI


class DeleteRecordHandler(CommandHandler[DeleteRecord, RecordDeleted]):
    __auth__ = requires(Capability.UPDATE_RECORDS)
    identity: Identity
    scope: RepositoryScope
    record_service: RecordService

    async def run(self, cmd: DeleteRecord) -> RecordDeleted:
        await self.record_service.delete(self.scope, cmd.uri)
        return RecordDeleted(uri=cmd.uri)
