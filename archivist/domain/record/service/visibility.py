"""Suppression cascade: effective visibility computed at read time.

Nothing here touches storage. Callers pass a snapshot mapping each resolvable
referenced uri to its stored suppressed flag; a ref missing from the snapshot
(dangling, or in another repository) counts as suppressed.
"""

from collections.abc import Iterable, Mapping

from archivist.domain.auth.model.capability import Capability
from archivist.domain.auth.model.identity import Identity
from archivist.domain.auth.model.principal import can
from archivist.domain.record.model.aggregate import Record
from archivist.domain.shared.model.uri import RecordURI

SuppressionStates = Mapping[RecordURI, bool]


def effective_suppressed(record: Record, states: SuppressionStates) -> bool:
    if record.suppressed:
        return True
    if not record.record_type.cascades_from_linked_records:
        return False
    # linked_agents never keep a record visible, only linked_records count
    if not record.linked_records:
        return False
    return all(states.get(link.ref, True) for link in record.linked_records)


def is_visible(record: Record, identity: Identity | None, states: SuppressionStates) -> bool:
    if can(identity, Capability.VIEW_SUPPRESSED):
        return True
    return not effective_suppressed(record, states)


def cascade_refs(records: Iterable[Record]) -> set[RecordURI]:
    """Refs whose suppression state is needed to judge ``records``."""
    return {
        link.ref
        for record in records
        if record.record_type.cascades_from_linked_records and not record.suppressed
        for link in record.linked_records
    }


def visible(
    records: Iterable[Record], identity: Identity | None, states: SuppressionStates
) -> list[Record]:
    return [r for r in records if is_visible(r, identity, states)]
