"""RecordService - validation, scoping, versioned storage and sub-record linking."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from archivist.domain.auth.model.capability import Capability
from archivist.domain.auth.model.identity import Identity
from archivist.domain.auth.model.principal import can
from archivist.domain.record.model.aggregate import Record
from archivist.domain.record.model.outcome import Conflict
from archivist.domain.record.model.value import RecordFilter
from archivist.domain.record.port.repository import RecordRepository, RepositoryRegistry
from archivist.domain.record.service.linker import reconcile
from archivist.domain.record.service.scope import RepositoryScope, not_found_message
from archivist.domain.record.service.visibility import (
    cascade_refs,
    is_visible,
    visible,
)
from archivist.domain.schema.model.result import RecordDraft
from archivist.domain.schema.model.value import ValidationSettings
from archivist.domain.schema.service.validator import SchemaValidator
from archivist.domain.shared.error import ConflictError, NotFoundError, ValidationError
from archivist.domain.shared.model.record_type import RecordType
from archivist.domain.shared.model.uri import RecordURI
from archivist.domain.shared.service import Service

logger = logging.getLogger(__name__)


class RecordService(Service):
    """Write and read paths for records inside one repository scope."""

    record_repo: RecordRepository
    repositories: RepositoryRegistry
    validator: SchemaValidator
    settings: ValidationSettings

    def draft(self, record_type: RecordType, representation: Mapping[str, Any]) -> RecordDraft:
        """Validate a representation with the configured severity."""
        return self.validator.from_representation(record_type, representation, self.settings)

    async def create(
        self,
        scope: RepositoryScope,
        record_type: RecordType,
        representation: Mapping[str, Any],
    ) -> Record:
        return await self.insert(scope, self.draft(record_type, representation))

    async def insert(self, scope: RepositoryScope, draft: RecordDraft) -> Record:
        if await self.repositories.get(scope.repository_id) is None:
            raise NotFoundError(f"Repository not found: {scope.repository_id}")

        async with self.record_repo.atomic():
            record = await self.record_repo.create(scope.repository_id, draft)
            await self._link_subrecords(record, draft)

        logger.info("Created %s (version %d)", record.uri, record.version)
        return record

    async def update(
        self,
        scope: RepositoryScope,
        uri: RecordURI,
        expected_version: int,
        representation: Mapping[str, Any],
    ) -> Record:
        scope.check(uri)
        return await self.replace(
            scope, uri, expected_version, self.draft(uri.record_type, representation)
        )

    async def replace(
        self, scope: RepositoryScope, uri: RecordURI, expected_version: int, draft: RecordDraft
    ) -> Record:
        scope.check(uri)
        if draft.record_type != uri.record_type:
            raise ValidationError(
                f"Cannot store a {draft.record_type} as {uri}", field="jsonmodel_type"
            )

        async with self.record_repo.atomic():
            outcome = await self.record_repo.update(uri, expected_version, draft)
            if outcome is None:
                raise NotFoundError(not_found_message(uri))
            if isinstance(outcome, Conflict):
                logger.warning(
                    "Stale update to %s: expected version %d, current %d",
                    uri,
                    outcome.expected_version,
                    outcome.current_version,
                )
                raise ConflictError(
                    f"The record {uri} was modified by someone else "
                    f"(expected version {outcome.expected_version}, "
                    f"current version {outcome.current_version})",
                    current_version=outcome.current_version,
                )
            record = outcome.record
            await self._link_subrecords(record, draft)

        logger.info("Updated %s to version %d", record.uri, record.version)
        return record

    async def set_suppressed(
        self, scope: RepositoryScope, uri: RecordURI, suppressed: bool
    ) -> Record:
        scope.check(uri)
        record = await self.record_repo.set_suppressed(uri, suppressed)
        if record is None:
            raise NotFoundError(not_found_message(uri))
        logger.info("Set suppressed=%s on %s (version %d)", suppressed, uri, record.version)
        return record

    async def delete(self, scope: RepositoryScope, uri: RecordURI) -> None:
        scope.check(uri)
        if not await self.record_repo.delete(uri):
            raise NotFoundError(not_found_message(uri))
        logger.info("Deleted %s", uri)

    async def find(
        self, scope: RepositoryScope, uri: RecordURI, identity: Identity | None
    ) -> Record:
        """Fetch a record visible to ``identity``; invisible records are not found."""
        scope.check(uri)
        record = await self.record_repo.get(uri)
        if record is None:
            raise NotFoundError(not_found_message(uri))

        states = await self._states(scope, [record], identity)
        if not is_visible(record, identity, states):
            logger.debug("Record %s hidden from %s", uri, identity)
            raise NotFoundError(not_found_message(uri))
        return record

    async def list(
        self,
        scope: RepositoryScope,
        record_type: RecordType,
        identity: Identity | None,
        filter: RecordFilter | None = None,
    ) -> list[Record]:
        filter = filter or RecordFilter()
        if can(identity, Capability.VIEW_SUPPRESSED):
            return await self.record_repo.list(scope.repository_id, record_type, filter)

        if filter.suppressed:
            return []
        filter = filter.model_copy(update={"suppressed": False})
        if not record_type.cascades_from_linked_records:
            return await self.record_repo.list(scope.repository_id, record_type, filter)

        # Cascade is decided in memory, so the page is cut after filtering
        unpaged = filter.model_copy(update={"limit": None, "offset": None})
        records = await self.record_repo.list(scope.repository_id, record_type, unpaged)
        states = await self._states(scope, records, identity)
        page = visible(records, identity, states)[filter.offset or 0 :]
        return page if filter.limit is None else page[: filter.limit]

    async def count(
        self,
        scope: RepositoryScope,
        record_type: RecordType,
        identity: Identity | None,
    ) -> int:
        privileged = can(identity, Capability.VIEW_SUPPRESSED)
        if record_type.cascades_from_linked_records and not privileged:
            return len(await self.list(scope, record_type, identity))
        return await self.record_repo.count(
            scope.repository_id,
            record_type,
            RecordFilter(suppressed=None if privileged else False),
        )

    # -- internals ---------------------------------------------------------

    async def _link_subrecords(self, record: Record, draft: RecordDraft) -> None:
        collections = {}
        for collection in record.record_type.collections:
            name = collection.attribute
            existing = await self.record_repo.subrecords(record.uri, name)
            plan = reconcile(record, name, draft.collections.get(name, []), existing)
            await self.record_repo.apply_subrecords(record.uri, plan)
            collections[name] = plan.applied
        record.collections = collections

    async def _states(
        self, scope: RepositoryScope, records: list[Record], identity: Identity | None
    ) -> dict[RecordURI, bool]:
        if can(identity, Capability.VIEW_SUPPRESSED):
            return {}
        refs = scope.resolvable(cascade_refs(records))
        if not refs:
            return {}
        return await self.record_repo.suppression_states(refs)
