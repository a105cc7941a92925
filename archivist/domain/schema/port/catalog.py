from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

from archivist.domain.shared.port import Port

if TYPE_CHECKING:
    from archivist.domain.schema.model.schema import RecordSchema


class SchemaCatalog(Port, Protocol):
    """Schema lookup keyed by record type (or sub-record type) name."""

    @abstractmethod
    def get(self, name: str) -> "RecordSchema | None": ...

    @abstractmethod
    def names(self) -> list[str]: ...
