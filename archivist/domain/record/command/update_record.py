from typing import Any

from pydantic import model_validator

from archivist.domain.auth.model.capability import Capability
from archivist.domain.auth.model.identity import Identity
from archivist.domain.record.service.record import RecordService
from archivist.domain.record.service.scope import RepositoryScope
from archivist.domain.shared.authorization.gate import requires
from archivist.domain.shared.command import Command, CommandHandler, Result
from archivist.domain.shared.model.uri import RecordURI


class UpdateRecord(Command):
    """Replace a record's attributes.

    ``lock_version`` is the version the caller last read. When omitted it is
    taken from the representation's own ``lock_version``.
    """

    uri: RecordURI
    representation: dict[str, Any]
    lock_version: int | None = None

    @model_validator(mode="after")
    def _lock_version_from_representation(self) -> "UpdateRecord":
        if self.lock_version is None:
            value = self.representation.get("lock_version")
            if value is None:
                raise ValueError("lock_version is required to update a record")
            self.lock_version = int(value)
        return self


class RecordUpdated(Result):
    uri: RecordURI
    lock_version: int
    warnings: dict[str, str] = {}


class UpdateRecordHandler(CommandHandler[UpdateRecord, RecordUpdated]):
    __auth__ = requires(Capability.UPDATE_RECORDS)
    identity: Identity
    scope: RepositoryScope
    record_service: RecordService

    async def run(self, cmd: UpdateRecord) -> RecordUpdated:
        self.scope.check(cmd.uri)
        draft = self.record_service.draft(cmd.uri.record_type, cmd.representation)
        record = await self.record_service.replace(self.scope, cmd.uri, cmd.lock_version, draft)
        return RecordUpdated(uri=record.uri, lock_version=record.version, warnings=draft.warnings)
