"""Record mapper - converts between domain and persistence."""

from datetime import datetime
from typing import Any

from archivist.domain.record.model.aggregate import Record
from archivist.domain.record.model.repository import Repository
from archivist.domain.record.model.value import Link, SubRecord, parse_links
from archivist.domain.schema.model.result import RecordDraft
from archivist.domain.shared.model.record_type import RecordType
from archivist.domain.shared.model.uri import RecordURI


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


def record_uri(row: dict[str, Any]) -> RecordURI:
    return RecordURI(
        repository_id=row["repository_id"],
        record_type=RecordType(row["record_type"]),
        id=row["id"],
    )


def row_to_record(row: dict[str, Any]) -> Record:
    """Convert database row to Record aggregate (sub-records are loaded separately)."""
    return Record(
        uri=record_uri(row),
        version=row["version"],
        suppressed=bool(row["suppressed"]),
        attributes=row.get("attributes") or {},
        linked_records=parse_links(row.get("linked_records")),
        linked_agents=parse_links(row.get("linked_agents")),
        created_at=_as_datetime(row["created_at"]),
        updated_at=_as_datetime(row["updated_at"]),
    )


def _links_to_json(items: list[Any]) -> list[dict[str, str]]:
    return [Link.from_dict(item).to_dict() for item in items]


def draft_to_dict(draft: RecordDraft) -> dict[str, Any]:
    """Columns written from a validated draft. Never includes version or suppressed."""
    attributes = dict(draft.attributes)
    linked_records = attributes.pop("linked_records", None) or []
    linked_agents = attributes.pop("linked_agents", None) or []
    return {
        "record_type": draft.record_type.value,
        "attributes": attributes,
        "linked_records": _links_to_json(linked_records),
        "linked_agents": _links_to_json(linked_agents),
    }


def row_to_subrecord(row: dict[str, Any], owner: RecordURI) -> SubRecord:
    return SubRecord(
        key=row["key"],
        owner=owner,
        collection=row["collection"],
        position=row["position"],
        data=row.get("data") or {},
        version=row["version"],
    )


def subrecord_to_dict(subrecord: SubRecord) -> dict[str, Any]:
    return {
        "key": subrecord.key,
        "record_id": subrecord.owner.id,
        "collection": subrecord.collection,
        "position": subrecord.position,
        "data": subrecord.data,
        "version": subrecord.version,
    }


def row_to_repository(row: dict[str, Any]) -> Repository:
    return Repository(
        id=row["id"],
        repo_code=row["repo_code"],
        name=row["name"],
        created_at=_as_datetime(row["created_at"]),
    )
