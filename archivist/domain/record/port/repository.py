"""Persistence ports for records, their sub-records, and repositories."""

from abc import abstractmethod
from collections.abc import Iterable
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Protocol

from archivist.domain.shared.model.record_type import RecordType
from archivist.domain.shared.model.uri import RecordURI
from archivist.domain.shared.port import Port

if TYPE_CHECKING:
    from archivist.domain.record.model.aggregate import Record
    from archivist.domain.record.model.outcome import UpdateOutcome
    from archivist.domain.record.model.repository import Repository
    from archivist.domain.record.model.value import RecordFilter, SubRecord
    from archivist.domain.record.service.linker import ReconcilePlan
    from archivist.domain.schema.model.result import RecordDraft


class RecordRepository(Port, Protocol):
    """Versioned record store.

    Writes take a validated RecordDraft; the store never validates. Reads
    addressed to a record in another repository behave as if it were missing.
    """

    @abstractmethod
    def atomic(self) -> AbstractAsyncContextManager[None]:
        """All writes inside the block commit together or not at all."""
        ...

    @abstractmethod
    async def create(self, repository_id: int, draft: "RecordDraft") -> "Record": ...

    @abstractmethod
    async def update(
        self, uri: RecordURI, expected_version: int, draft: "RecordDraft"
    ) -> "UpdateOutcome | None":
        """Check-and-increment in one step. None when the record does not exist."""
        ...

    @abstractmethod
    async def set_suppressed(self, uri: RecordURI, suppressed: bool) -> "Record | None": ...

    @abstractmethod
    async def get(self, uri: RecordURI) -> "Record | None": ...

    @abstractmethod
    async def list(
        self, repository_id: int, record_type: RecordType, filter: "RecordFilter"
    ) -> "list[Record]": ...

    @abstractmethod
    async def count(
        self, repository_id: int, record_type: RecordType, filter: "RecordFilter"
    ) -> int: ...

    @abstractmethod
    async def delete(self, uri: RecordURI) -> bool: ...

    @abstractmethod
    async def suppression_states(self, uris: Iterable[RecordURI]) -> dict[RecordURI, bool]:
        """Stored suppressed flag of each uri that resolves; missing uris are absent."""
        ...

    @abstractmethod
    async def subrecords(self, uri: RecordURI, collection: str) -> "list[SubRecord]": ...

    @abstractmethod
    async def apply_subrecords(self, uri: RecordURI, plan: "ReconcilePlan[SubRecord]") -> None: ...


class RepositoryRegistry(Port, Protocol):
    @abstractmethod
    async def create(self, repo_code: str, name: str) -> "Repository": ...

    @abstractmethod
    async def get(self, repository_id: int) -> "Repository | None": ...

    @abstractmethod
    async def list(self) -> "list[Repository]": ...
