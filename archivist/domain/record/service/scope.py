"""Repository scope guard.

Every read, write and ref resolution goes through the scope of the acting
session. A uri that belongs to another repository is rejected with the same
message a missing record gets.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from archivist.domain.shared.error import CrossRepositoryError
from archivist.domain.shared.model.record_type import RecordType
from archivist.domain.shared.model.uri import RecordURI


def not_found_message(uri: RecordURI | str) -> str:
    return f"Record not found: {uri}"


@dataclass(frozen=True)
class RepositoryScope:
    repository_id: int

    def owns(self, uri: RecordURI) -> bool:
        return uri.repository_id == self.repository_id

    def check(self, uri: RecordURI) -> RecordURI:
        if not self.owns(uri):
            raise CrossRepositoryError(not_found_message(uri))
        return uri

    def uri(self, record_type: RecordType, id: int) -> RecordURI:
        return RecordURI(repository_id=self.repository_id, record_type=record_type, id=id)

    def resolvable(self, uris: Iterable[RecordURI]) -> set[RecordURI]:
        """The subset of refs this scope may resolve. Foreign refs never resolve."""
        return {uri for uri in uris if self.owns(uri)}
