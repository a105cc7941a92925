from typing import Any

from pydantic import Field

from archivist.domain.shared.model.record_type import RecordType
from archivist.domain.shared.model.value import ValueObject


class ValidationResult(ValueObject):
    """Errors block persistence; warnings never do.

    Keys are attribute paths with ``/`` separators, e.g. ``names/0/sort_name``.
    """

    errors: dict[str, str] = Field(default_factory=dict)
    warnings: dict[str, str] = Field(default_factory=dict)
    attributes: dict[str, Any] = Field(default_factory=dict)  # Normalised input

    @property
    def valid(self) -> bool:
        return not self.errors


class SubRecordDraft(ValueObject):
    """A validated sub-record as submitted; ``key`` is None for new members."""

    key: str | None = None
    data: dict[str, Any]


class RecordDraft(ValueObject):
    """Output of a successful validation, ready to hand to the store."""

    record_type: RecordType
    attributes: dict[str, Any]
    collections: dict[str, list[SubRecordDraft]] = Field(default_factory=dict)
    warnings: dict[str, str] = Field(default_factory=dict)
