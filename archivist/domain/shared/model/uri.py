from __future__ import annotations

import re
from typing import Any, ClassVar

from pydantic import Field, model_validator

from archivist.domain.shared.model.record_type import RecordType
from archivist.domain.shared.model.value import ValueObject


class RecordURI(ValueObject):
    """Globally resolvable address of a record.

    Rendered as ``/repositories/{repository_id}/{type_plural}/{id}``.
    Equality and hashing are structural.
    """

    _re: ClassVar[re.Pattern] = re.compile(r"^/repositories/(\d+)/([a-z_/]+)/(\d+)$")

    repository_id: int = Field(gt=0)
    record_type: RecordType
    id: int = Field(gt=0)

    @model_validator(mode="before")
    @classmethod
    def _accept_rendered(cls, data: Any) -> Any:
        if isinstance(data, str):
            return cls._components(data)
        return data

    @classmethod
    def parse(cls, value: str) -> RecordURI:
        return cls(**cls._components(value))

    @classmethod
    def _components(cls, value: str) -> dict[str, Any]:
        m = cls._re.match(value.strip())
        if not m:
            raise ValueError(f"invalid record URI: {value!r}")
        repo_id, plural, record_id = m.groups()
        return {
            "repository_id": int(repo_id),
            "record_type": RecordType.from_plural(plural),
            "id": int(record_id),
        }

    def __str__(self) -> str:
        return f"/repositories/{self.repository_id}/{self.record_type.plural}/{self.id}"


def repository_uri(repository_id: int) -> str:
    return f"/repositories/{repository_id}"
