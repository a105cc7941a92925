from datetime import datetime

from pydantic import Field

from archivist.domain.shared.model.aggregate import Aggregate
from archivist.domain.shared.model.uri import repository_uri


class Repository(Aggregate):
    """An archival repository; every record lives in exactly one."""

    id: int = Field(gt=0)
    repo_code: str = Field(min_length=1, max_length=64)
    name: str
    created_at: datetime

    @property
    def uri(self) -> str:
        return repository_uri(self.id)
