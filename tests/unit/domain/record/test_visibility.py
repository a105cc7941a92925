"""Unit tests for the suppression cascade."""

from datetime import UTC, datetime

import pytest

from archivist.domain.auth.model.capability import Capability
from archivist.domain.auth.model.identity import Anonymous, System
from archivist.domain.auth.model.principal import Principal
from archivist.domain.record.model.aggregate import Record
from archivist.domain.record.model.value import Link
from archivist.domain.record.service.visibility import (
    cascade_refs,
    effective_suppressed,
    is_visible,
    visible,
)
from archivist.domain.shared.model.record_type import RecordType
from archivist.domain.shared.model.uri import RecordURI

ACC_1 = RecordURI(repository_id=1, record_type=RecordType.ACCESSION, id=1)
ACC_2 = RecordURI(repository_id=1, record_type=RecordType.ACCESSION, id=2)
AGENT = RecordURI(repository_id=1, record_type=RecordType.AGENT_PERSON, id=3)

VIEWER = Principal(username="viewer")
MANAGER = Principal(username="manager", capabilities=frozenset({Capability.VIEW_SUPPRESSED}))


def _record(
    uri: RecordURI,
    *,
    suppressed: bool = False,
    linked_records: list[RecordURI] = (),
    linked_agents: list[RecordURI] = (),
) -> Record:
    now = datetime.now(UTC)
    return Record(
        uri=uri,
        version=1,
        suppressed=suppressed,
        linked_records=[Link(ref=r, role="source") for r in linked_records],
        linked_agents=[Link(ref=r, role="implementer") for r in linked_agents],
        created_at=now,
        updated_at=now,
    )


def _event(id: int = 10, **kwargs) -> Record:
    return _record(RecordURI(repository_id=1, record_type=RecordType.EVENT, id=id), **kwargs)


class TestEffectiveSuppressed:
    def test_own_flag(self):
        assert effective_suppressed(_record(ACC_1, suppressed=True), {})
        assert not effective_suppressed(_record(ACC_1), {})

    def test_event_with_only_suppressed_links_is_suppressed(self):
        event = _event(linked_records=[ACC_1], linked_agents=[AGENT])

        assert effective_suppressed(event, {ACC_1: True, AGENT: False})

    def test_event_with_one_visible_link_stays_visible(self):
        event = _event(linked_records=[ACC_1, ACC_2])

        assert not effective_suppressed(event, {ACC_1: True, ACC_2: False})

    def test_event_without_linked_records_uses_own_flag(self):
        assert not effective_suppressed(_event(linked_agents=[AGENT]), {AGENT: True})
        assert effective_suppressed(_event(suppressed=True), {})

    def test_linked_agents_never_keep_an_event_visible(self):
        event = _event(linked_records=[ACC_1], linked_agents=[AGENT])

        assert effective_suppressed(event, {ACC_1: True, AGENT: False})

    def test_dangling_ref_counts_as_suppressed(self):
        assert effective_suppressed(_event(linked_records=[ACC_1]), {})

    def test_non_cascading_types_ignore_links(self):
        accession = _record(ACC_2, linked_records=[ACC_1])

        assert not effective_suppressed(accession, {ACC_1: True})


class TestIsVisible:
    @pytest.mark.parametrize("identity", [None, Anonymous(), VIEWER])
    def test_suppressed_hidden_from_unprivileged(self, identity):
        assert not is_visible(_record(ACC_1, suppressed=True), identity, {})

    @pytest.mark.parametrize("identity", [MANAGER, System()])
    def test_privileged_see_everything(self, identity):
        event = _event(linked_records=[ACC_1])

        assert is_visible(_record(ACC_1, suppressed=True), identity, {})
        assert is_visible(event, identity, {ACC_1: True})

    def test_visible_filters_list_in_order(self):
        records = [_record(ACC_1), _record(ACC_2, suppressed=True), _event(linked_records=[ACC_1])]

        result = visible(records, VIEWER, {ACC_1: False})

        assert [r.uri for r in result] == [ACC_1, records[2].uri]


class TestCascadeRefs:
    def test_only_linked_records_of_unsuppressed_events(self):
        records = [
            _event(1, linked_records=[ACC_1], linked_agents=[AGENT]),
            _event(2, suppressed=True, linked_records=[ACC_2]),
            _record(ACC_2, linked_records=[ACC_1]),
        ]

        assert cascade_refs(records) == {ACC_1}
