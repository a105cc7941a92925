"""Closed set of record-type variants and the metadata each one carries."""

from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True)
class SubRecordCollection:
    """An owned collection of sub-records declared by a record type.

    ``attribute`` is the key the collection appears under in a representation;
    ``schema`` names the schema each member is validated against.
    """

    attribute: str
    schema: str
    min_items: int = 0


@dataclass(frozen=True)
class RecordTypeMeta:
    plural: str
    collections: tuple[SubRecordCollection, ...] = ()
    cascades_from_linked_records: bool = False


class RecordType(StrEnum):
    """Record types known to the store. The value doubles as the schema name."""

    ACCESSION = "accession"
    AGENT_PERSON = "agent_person"
    EVENT = "event"

    @property
    def meta(self) -> RecordTypeMeta:
        return _META[self]

    @property
    def plural(self) -> str:
        return self.meta.plural

    @property
    def collections(self) -> tuple[SubRecordCollection, ...]:
        return self.meta.collections

    @property
    def cascades_from_linked_records(self) -> bool:
        return self.meta.cascades_from_linked_records

    @classmethod
    def from_plural(cls, plural: str) -> "RecordType":
        for record_type in cls:
            if record_type.plural == plural:
                return record_type
        raise ValueError(f"Unknown record type path segment: {plural}")


_META: dict[RecordType, RecordTypeMeta] = {
    RecordType.ACCESSION: RecordTypeMeta(
        plural="accessions",
        collections=(
            SubRecordCollection("rights_statements", "rights_statement"),
            SubRecordCollection("deaccessions", "deaccession"),
        ),
    ),
    RecordType.AGENT_PERSON: RecordTypeMeta(
        plural="agents/people",
        collections=(SubRecordCollection("names", "name_person", min_items=1),),
    ),
    RecordType.EVENT: RecordTypeMeta(
        plural="events",
        cascades_from_linked_records=True,
    ),
}
