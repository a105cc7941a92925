"""Record aggregate - a versioned, repository-scoped archival record."""

from datetime import datetime
from typing import Any

from pydantic import Field

from archivist.domain.record.model.value import Link, SubRecord
from archivist.domain.shared.model.aggregate import Aggregate
from archivist.domain.shared.model.record_type import RecordType
from archivist.domain.shared.model.uri import RecordURI


class Record(Aggregate):
    """A persisted archival record.

    ``version`` and ``suppressed`` are owned by the store; the attribute
    mapping holds everything type-specific.
    """

    uri: RecordURI
    version: int = Field(ge=1)
    suppressed: bool = False
    attributes: dict[str, Any] = {}
    linked_records: list[Link] = []
    linked_agents: list[Link] = []
    collections: dict[str, list[SubRecord]] = {}
    created_at: datetime
    updated_at: datetime

    @property
    def id(self) -> int:
        return self.uri.id

    @property
    def repository_id(self) -> int:
        return self.uri.repository_id

    @property
    def record_type(self) -> RecordType:
        return self.uri.record_type

    def to_representation(self) -> dict[str, Any]:
        """Nested mapping as returned to callers, with ``uri`` and ``lock_version``."""
        rep: dict[str, Any] = {
            **self.attributes,
            "jsonmodel_type": self.record_type.value,
            "uri": str(self.uri),
            "lock_version": self.version,
            "suppressed": self.suppressed,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
        if self.linked_records:
            rep["linked_records"] = [link.to_dict() for link in self.linked_records]
        if self.linked_agents:
            rep["linked_agents"] = [link.to_dict() for link in self.linked_agents]
        for name, members in self.collections.items():
            rep[name] = [m.to_representation() for m in members]
        return rep
