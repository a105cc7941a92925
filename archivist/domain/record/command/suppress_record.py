from archivist.domain.auth.model.capability import Capability
from archivist.domain.auth.model.identity import Identity
from archivist.domain.record.service.record import RecordService
from archivist.domain.record.service.scope import RepositoryScope
from archivist.domain.shared.authorization.gate import requires
from archivist.domain.shared.command import Command, CommandHandler, Result
from archivist.domain.shared.model.uri import RecordURI


class SuppressRecord(Command):
    uri: RecordURI
    suppressed: bool = True


class SuppressionChanged(Result):
    uri: RecordURI
    suppressed: bool
    lock_version: int


class SuppressRecordHandler(CommandHandler[SuppressRecord, SuppressionChanged]):
    __auth__ = requires(Capability.SUPPRESS_RECORDS)
    identity: Identity
    scope: RepositoryScope
    record_service: RecordService

    async def run(self, cmd: SuppressRecord) -> SuppressionChanged:
        record = await self.record_service.set_suppressed(self.scope, cmd.uri, cmd.suppressed)
        return SuppressionChanged(
            uri=record.uri, suppressed=record.suppressed, lock_version=record.version
        )
