"""Record domain value objects."""

from collections.abc import Iterable, Mapping
from enum import StrEnum
from typing import Any

from pydantic import Field

from archivist.domain.shared.model.uri import RecordURI
from archivist.domain.shared.model.value import ValueObject

LINK_ATTRIBUTES = ("linked_records", "linked_agents")


class Link(ValueObject):
    """A directed edge from the owning record to ``ref`` in the given role.

    Links are not referentially enforced; ``ref`` may dangle.
    """

    ref: RecordURI
    role: str

    def to_dict(self) -> dict[str, str]:
        return {"ref": str(self.ref), "role": self.role}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Link":
        return cls(ref=RecordURI.parse(data["ref"]), role=data["role"])


def parse_links(items: Iterable[Mapping[str, Any]] | None) -> list[Link]:
    return [Link.from_dict(item) for item in items or []]


class SubRecord(ValueObject):
    """A dependent record owned by exactly one parent.

    ``key`` is stable across parent writes and opaque to callers; it is not
    the display position.
    """

    key: str
    owner: RecordURI
    collection: str
    position: int
    data: dict[str, Any]
    version: int = 1

    def to_representation(self) -> dict[str, Any]:
        return {**self.data, "_key": self.key, "lock_version": self.version}


class SortField(StrEnum):
    ID = "id"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class RecordFilter(ValueObject):
    """Listing filter. Without ``order_by`` results are ordered by id."""

    suppressed: bool | None = None
    order_by: SortField | None = None
    descending: bool = False
    limit: int | None = Field(default=None, ge=0)
    offset: int | None = Field(default=None, ge=0)
