"""Integration tests for SqlRecordRepository against in-memory SQLite."""

import pytest
from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from archivist.domain.record.model.outcome import Conflict, Updated
from archivist.domain.record.model.repository import Repository
from archivist.domain.record.model.value import RecordFilter, SortField
from archivist.domain.record.service.linker import reconcile
from archivist.domain.schema.model.result import RecordDraft, SubRecordDraft
from archivist.domain.shared.error import StorageError, ValidationError
from archivist.domain.shared.model.record_type import RecordType
from archivist.domain.shared.model.uri import RecordURI
from archivist.infrastructure.persistence.repository.record import SqlRecordRepository
from archivist.infrastructure.persistence.repository.repository import SqlRepositoryRegistry
from archivist.infrastructure.persistence.tables import subrecords_table


def _draft(title: str = "Papers", **attributes) -> RecordDraft:
    return RecordDraft(
        record_type=RecordType.ACCESSION,
        attributes={"id_0": "1", "title": title, "accession_date": "2024", **attributes},
    )


@pytest.mark.asyncio
class TestCreateAndGet:
    async def test_create_assigns_id_and_version_one(
        self, record_repo: SqlRecordRepository, repo_a: Repository
    ):
        record = await record_repo.create(repo_a.id, _draft())

        assert record.version == 1
        assert record.id > 0
        assert str(record.uri) == f"/repositories/{repo_a.id}/accessions/{record.id}"

        got = await record_repo.get(record.uri)
        assert got is not None
        assert got.attributes["title"] == "Papers"
        assert got.suppressed is False

    async def test_get_with_wrong_repository_or_type_is_none(
        self, record_repo: SqlRecordRepository, repo_a: Repository, repo_b: Repository
    ):
        record = await record_repo.create(repo_a.id, _draft())

        other_repo = record.uri.model_copy(update={"repository_id": repo_b.id})
        other_type = record.uri.model_copy(update={"record_type": RecordType.EVENT})
        assert await record_repo.get(other_repo) is None
        assert await record_repo.get(other_type) is None

    async def test_links_are_stored_separately_from_attributes(
        self, record_repo: SqlRecordRepository, repo_a: Repository
    ):
        ref = f"/repositories/{repo_a.id}/accessions/1"
        draft = RecordDraft(
            record_type=RecordType.EVENT,
            attributes={
                "event_type": "processed",
                "linked_records": [{"ref": ref, "role": "source"}],
            },
        )

        record = await record_repo.create(repo_a.id, draft)
        got = await record_repo.get(record.uri)

        assert "linked_records" not in got.attributes
        assert [str(link.ref) for link in got.linked_records] == [ref]
        assert got.linked_agents == []


@pytest.mark.asyncio
class TestConditionalUpdate:
    async def test_matching_version_increments(
        self, record_repo: SqlRecordRepository, repo_a: Repository
    ):
        record = await record_repo.create(repo_a.id, _draft())

        outcome = await record_repo.update(record.uri, 1, _draft("Renamed"))

        assert isinstance(outcome, Updated)
        assert outcome.record.version == 2
        assert outcome.record.attributes["title"] == "Renamed"

    async def test_stale_version_is_a_conflict_and_writes_nothing(
        self, record_repo: SqlRecordRepository, repo_a: Repository
    ):
        record = await record_repo.create(repo_a.id, _draft())
        await record_repo.update(record.uri, 1, _draft("First"))

        outcome = await record_repo.update(record.uri, 1, _draft("Second"))

        assert outcome == Conflict(expected_version=1, current_version=2)
        got = await record_repo.get(record.uri)
        assert got.version == 2
        assert got.attributes["title"] == "First"

    async def test_missing_record_is_none(self, record_repo: SqlRecordRepository, repo_a: Repository):
        uri = RecordURI(repository_id=repo_a.id, record_type=RecordType.ACCESSION, id=999)

        assert await record_repo.update(uri, 1, _draft()) is None

    async def test_set_suppressed_counts_as_a_write(
        self, record_repo: SqlRecordRepository, repo_a: Repository
    ):
        record = await record_repo.create(repo_a.id, _draft())

        suppressed = await record_repo.set_suppressed(record.uri, True)

        assert suppressed.suppressed is True
        assert suppressed.version == 2


@pytest.mark.asyncio
class TestListing:
    async def test_default_order_is_id_and_scoped_to_repository(
        self, record_repo: SqlRecordRepository, repo_a: Repository, repo_b: Repository
    ):
        first = await record_repo.create(repo_a.id, _draft("a"))
        await record_repo.create(repo_b.id, _draft("elsewhere"))
        second = await record_repo.create(repo_a.id, _draft("b"))

        records = await record_repo.list(repo_a.id, RecordType.ACCESSION, RecordFilter())

        assert [r.id for r in records] == [first.id, second.id]

    async def test_filter_order_and_pagination(
        self, record_repo: SqlRecordRepository, repo_a: Repository
    ):
        created = [await record_repo.create(repo_a.id, _draft(str(i))) for i in range(4)]
        await record_repo.set_suppressed(created[1].uri, True)

        hidden = await record_repo.list(
            repo_a.id, RecordType.ACCESSION, RecordFilter(suppressed=True)
        )
        page = await record_repo.list(
            repo_a.id,
            RecordType.ACCESSION,
            RecordFilter(order_by=SortField.ID, descending=True, limit=2, offset=1),
        )

        assert [r.id for r in hidden] == [created[1].id]
        assert [r.id for r in page] == [created[2].id, created[1].id]
        assert await record_repo.count(
            repo_a.id, RecordType.ACCESSION, RecordFilter(suppressed=False)
        ) == 3

    async def test_suppression_states_only_for_resolvable_uris(
        self, record_repo: SqlRecordRepository, repo_a: Repository, repo_b: Repository
    ):
        record = await record_repo.create(repo_a.id, _draft())
        await record_repo.set_suppressed(record.uri, True)
        dangling = record.uri.model_copy(update={"id": record.id + 100})
        wrong_repo = record.uri.model_copy(update={"repository_id": repo_b.id})

        states = await record_repo.suppression_states([record.uri, dangling, wrong_repo])

        assert states == {record.uri: True}


@pytest.mark.asyncio
class TestSubrecords:
    async def test_apply_and_reload(
        self, record_repo: SqlRecordRepository, repo_a: Repository, session: AsyncSession
    ):
        agent = await record_repo.create(
            repo_a.id, RecordDraft(record_type=RecordType.AGENT_PERSON, attributes={})
        )
        plan = reconcile(
            agent,
            "names",
            [SubRecordDraft(data={"sort_name": "A"}), SubRecordDraft(data={"sort_name": "B"})],
            [],
        )
        await record_repo.apply_subrecords(agent.uri, plan)

        stored = await record_repo.subrecords(agent.uri, "names")
        assert [s.data["sort_name"] for s in stored] == ["A", "B"]
        assert [s.key for s in stored] == [s.key for s in plan.applied]

        got = await record_repo.get(agent.uri)
        assert [s.key for s in got.collections["names"]] == [s.key for s in plan.applied]

        assert await record_repo.delete(agent.uri) is True
        remaining = await session.scalar(select(func.count()).select_from(subrecords_table))
        assert remaining == 0
        assert await record_repo.get(agent.uri) is None


@pytest.mark.asyncio
class TestRepositoryRegistry:
    async def test_repo_code_is_unique(self, registry: SqlRepositoryRegistry, repo_a: Repository):
        with pytest.raises(ValidationError):
            await registry.create(repo_a.repo_code, "Duplicate")

        assert [r.id for r in await registry.list()] == [repo_a.id]


@pytest.mark.asyncio
class TestAtomic:
    async def test_driver_failure_surfaces_as_storage_error(
        self, record_repo: SqlRecordRepository, repo_a: Repository, session: AsyncSession
    ):
        record = await record_repo.create(repo_a.id, _draft())

        with pytest.raises(StorageError):
            async with record_repo.atomic():
                await record_repo.update(record.uri, 1, _draft("Changed"))
                await session.execute(text("SELECT * FROM no_such_table"))

        got = await record_repo.get(record.uri)
        assert got is not None
        assert (got.version, got.attributes["title"]) == (1, "Papers")

    async def test_row_missing_after_update_is_a_storage_error(
        self, session: AsyncSession, repo_a: Repository
    ):
        class ForgetfulRepo(SqlRecordRepository):
            async def _fetch(self, uri: RecordURI):
                return None

        repo = ForgetfulRepo(session)
        record = await repo.create(repo_a.id, _draft())

        with pytest.raises(StorageError):
            await repo.update(record.uri, 1, _draft("Changed"))
