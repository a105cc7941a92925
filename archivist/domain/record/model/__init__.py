"""Record domain model."""

from archivist.domain.record.model.aggregate import Record
from archivist.domain.record.model.outcome import Conflict, UpdateOutcome, Updated
from archivist.domain.record.model.repository import Repository
from archivist.domain.record.model.value import Link, RecordFilter, SortField, SubRecord

__all__ = [
    "Conflict",
    "Link",
    "Record",
    "RecordFilter",
    "Repository",
    "SortField",
    "SubRecord",
    "UpdateOutcome",
    "Updated",
]
