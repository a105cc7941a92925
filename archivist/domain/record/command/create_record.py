from typing import Any

from archivist.domain.auth.model.capability import Capability
from archivist.domain.auth.model.identity import Identity
from archivist.domain.record.service.record import RecordService
from archivist.domain.record.service.scope import RepositoryScope
from archivist.domain.shared.authorization.gate import requires
from archivist.domain.shared.command import Command, CommandHandler, Result
from archivist.domain.shared.model.record_type import RecordType
from archivist.domain.shared.model.uri import RecordURI


class CreateRecord(Command):
    record_type: RecordType
    representation: dict[str, Any]


class RecordCreated(Result):
    uri: RecordURI
    lock_version: int
    warnings: dict[str, str] = {}


class CreateRecordHandler(CommandHandler[CreateRecord, RecordCreated]):
    __auth__ = requires(Capability.UPDATE_RECORDS)
    identity: Identity
    scope: RepositoryScope
    record_service: RecordService

    async def run(self, cmd: CreateRecord) -> RecordCreated:
        draft = self.record_service.draft(cmd.record_type, cmd.representation)
        record = await self.record_service.insert(self.scope, draft)
        return RecordCreated(uri=record.uri, lock_version=record.version, warnings=draft.warnings)
