"""Unit tests for RecordService."""

from contextlib import asynccontextmanager
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from archivist.domain.auth.model.capability import Capability
from archivist.domain.auth.model.identity import Anonymous
from archivist.domain.auth.model.principal import Principal
from archivist.domain.record.model.aggregate import Record
from archivist.domain.record.model.outcome import Conflict, Updated
from archivist.domain.record.model.repository import Repository
from archivist.domain.record.model.value import Link, RecordFilter
from archivist.domain.record.port.repository import RecordRepository, RepositoryRegistry
from archivist.domain.record.service.record import RecordService
from archivist.domain.record.service.scope import RepositoryScope
from archivist.domain.schema.model.value import STRICT
from archivist.domain.schema.service.validator import SchemaValidator
from archivist.domain.shared.error import (
    ConflictError,
    CrossRepositoryError,
    NotFoundError,
    ValidationError,
)
from archivist.domain.shared.model.record_type import RecordType
from archivist.domain.shared.model.uri import RecordURI

SCOPE = RepositoryScope(repository_id=1)
NOW = datetime.now(UTC)


def _record(uri: RecordURI, version: int = 1, **kwargs) -> Record:
    return Record(uri=uri, version=version, created_at=NOW, updated_at=NOW, **kwargs)


@pytest.fixture
def mock_record_repo() -> RecordRepository:
    """Create a mock RecordRepository whose atomic() block is a no-op."""
    repo = MagicMock(spec=RecordRepository)

    @asynccontextmanager
    async def atomic():
        yield

    repo.atomic = atomic
    for name in (
        "create",
        "update",
        "set_suppressed",
        "get",
        "list",
        "count",
        "delete",
        "suppression_states",
        "apply_subrecords",
    ):
        setattr(repo, name, AsyncMock())
    repo.subrecords = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def mock_registry() -> RepositoryRegistry:
    registry = MagicMock(spec=RepositoryRegistry)
    registry.get = AsyncMock(
        return_value=Repository(id=1, repo_code="main", name="Main", created_at=NOW)
    )
    return registry


@pytest.fixture
def service(
    mock_record_repo: RecordRepository,
    mock_registry: RepositoryRegistry,
    validator: SchemaValidator,
) -> RecordService:
    return RecordService(
        record_repo=mock_record_repo,
        repositories=mock_registry,
        validator=validator,
        settings=STRICT,
    )


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_validates_then_stores(
        self, service: RecordService, mock_record_repo, accession_rep
    ):
        uri = SCOPE.uri(RecordType.ACCESSION, 1)
        mock_record_repo.create.return_value = _record(uri)

        record = await service.create(SCOPE, RecordType.ACCESSION, accession_rep)

        assert record.uri == uri
        repository_id, draft = mock_record_repo.create.call_args.args
        assert repository_id == 1
        assert draft.attributes["title"] == accession_rep["title"]

    @pytest.mark.asyncio
    async def test_invalid_representation_never_reaches_the_store(
        self, service: RecordService, mock_record_repo
    ):
        with pytest.raises(ValidationError) as exc_info:
            await service.create(SCOPE, RecordType.ACCESSION, {"id_0": "x"})

        assert "title" in exc_info.value.errors
        mock_record_repo.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_repository(self, service: RecordService, mock_registry, accession_rep):
        mock_registry.get.return_value = None

        with pytest.raises(NotFoundError):
            await service.create(SCOPE, RecordType.ACCESSION, accession_rep)

    @pytest.mark.asyncio
    async def test_owned_collections_are_reconciled(
        self, service: RecordService, mock_record_repo, agent_rep
    ):
        uri = SCOPE.uri(RecordType.AGENT_PERSON, 3)
        mock_record_repo.create.return_value = _record(uri)

        record = await service.create(SCOPE, RecordType.AGENT_PERSON, agent_rep)

        mock_record_repo.apply_subrecords.assert_awaited_once()
        _, plan = mock_record_repo.apply_subrecords.call_args.args
        assert len(plan.created) == 1
        assert record.collections["names"][0].data["sort_name"] == "Byron, Ada"


class TestUpdate:
    @pytest.mark.asyncio
    async def test_conflict_becomes_conflict_error(
        self, service: RecordService, mock_record_repo, accession_rep
    ):
        uri = SCOPE.uri(RecordType.ACCESSION, 1)
        mock_record_repo.update.return_value = Conflict(expected_version=1, current_version=2)

        with pytest.raises(ConflictError) as exc_info:
            await service.update(SCOPE, uri, 1, accession_rep)

        assert exc_info.value.current_version == 2

    @pytest.mark.asyncio
    async def test_missing_record(self, service: RecordService, mock_record_repo, accession_rep):
        mock_record_repo.update.return_value = None

        with pytest.raises(NotFoundError):
            await service.update(SCOPE, SCOPE.uri(RecordType.ACCESSION, 9), 1, accession_rep)

    @pytest.mark.asyncio
    async def test_updated_record_is_returned(
        self, service: RecordService, mock_record_repo, accession_rep
    ):
        uri = SCOPE.uri(RecordType.ACCESSION, 1)
        mock_record_repo.update.return_value = Updated(record=_record(uri, version=2))

        record = await service.update(SCOPE, uri, 1, accession_rep)

        assert record.version == 2

    @pytest.mark.asyncio
    async def test_cross_repository_update_is_not_found(
        self, service: RecordService, mock_record_repo, accession_rep
    ):
        foreign = RecordURI(repository_id=2, record_type=RecordType.ACCESSION, id=1)

        with pytest.raises(CrossRepositoryError):
            await service.update(SCOPE, foreign, 1, accession_rep)
        mock_record_repo.update.assert_not_called()


class TestReads:
    @pytest.mark.asyncio
    async def test_find_hides_suppressed_record(self, service: RecordService, mock_record_repo):
        uri = SCOPE.uri(RecordType.ACCESSION, 1)
        mock_record_repo.get.return_value = _record(uri, suppressed=True)

        with pytest.raises(NotFoundError):
            await service.find(SCOPE, uri, Anonymous())

    @pytest.mark.asyncio
    async def test_find_shows_suppressed_record_to_privileged(
        self, service: RecordService, mock_record_repo
    ):
        uri = SCOPE.uri(RecordType.ACCESSION, 1)
        mock_record_repo.get.return_value = _record(uri, suppressed=True)
        manager = Principal(username="m", capabilities=frozenset({Capability.VIEW_SUPPRESSED}))

        record = await service.find(SCOPE, uri, manager)

        assert record.suppressed
        mock_record_repo.suppression_states.assert_not_called()

    @pytest.mark.asyncio
    async def test_find_event_resolves_only_in_scope_refs(
        self, service: RecordService, mock_record_repo
    ):
        own = SCOPE.uri(RecordType.ACCESSION, 1)
        foreign = RecordURI(repository_id=2, record_type=RecordType.ACCESSION, id=1)
        event = _record(
            SCOPE.uri(RecordType.EVENT, 5),
            linked_records=[Link(ref=own, role="source"), Link(ref=foreign, role="source")],
        )
        mock_record_repo.get.return_value = event
        mock_record_repo.suppression_states.return_value = {own: True}

        with pytest.raises(NotFoundError):
            await service.find(SCOPE, event.uri, Anonymous())

        mock_record_repo.suppression_states.assert_awaited_once_with({own})

    @pytest.mark.asyncio
    async def test_list_forces_unsuppressed_filter_for_unprivileged(
        self, service: RecordService, mock_record_repo
    ):
        mock_record_repo.list.return_value = []

        await service.list(SCOPE, RecordType.ACCESSION, Anonymous())

        _, _, record_filter = mock_record_repo.list.call_args.args
        assert record_filter.suppressed is False

    @pytest.mark.asyncio
    async def test_event_page_is_cut_after_cascade(
        self, service: RecordService, mock_record_repo
    ):
        hidden_ref = SCOPE.uri(RecordType.ACCESSION, 1)
        hidden = _record(
            SCOPE.uri(RecordType.EVENT, 1), linked_records=[Link(ref=hidden_ref, role="source")]
        )
        shown = [_record(SCOPE.uri(RecordType.EVENT, i)) for i in (2, 3, 4)]
        mock_record_repo.list.return_value = [hidden, *shown]
        mock_record_repo.suppression_states.return_value = {hidden_ref: True}

        result = await service.list(
            SCOPE, RecordType.EVENT, Anonymous(), RecordFilter(limit=2, offset=1)
        )

        assert [r.id for r in result] == [3, 4]
        _, _, record_filter = mock_record_repo.list.call_args.args
        assert (record_filter.limit, record_filter.offset) == (None, None)
        assert record_filter.suppressed is False

    @pytest.mark.asyncio
    async def test_list_of_suppressed_is_empty_for_unprivileged(
        self, service: RecordService, mock_record_repo
    ):
        result = await service.list(
            SCOPE, RecordType.ACCESSION, Anonymous(), RecordFilter(suppressed=True)
        )

        assert result == []
        mock_record_repo.list.assert_not_called()


class TestSuppressAndDelete:
    @pytest.mark.asyncio
    async def test_set_suppressed_missing(self, service: RecordService, mock_record_repo):
        mock_record_repo.set_suppressed.return_value = None

        with pytest.raises(NotFoundError):
            await service.set_suppressed(SCOPE, SCOPE.uri(RecordType.ACCESSION, 1), True)

    @pytest.mark.asyncio
    async def test_delete_missing(self, service: RecordService, mock_record_repo):
        mock_record_repo.delete.return_value = False

        with pytest.raises(NotFoundError):
            await service.delete(SCOPE, SCOPE.uri(RecordType.ACCESSION, 1))
