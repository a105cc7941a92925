"""Typed outcome of an optimistic-concurrency update."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from archivist.domain.record.model.aggregate import Record


@dataclass(frozen=True)
class Updated:
    """The version check passed and the write was applied."""

    record: "Record"


@dataclass(frozen=True)
class Conflict:
    """The stored version did not match the expected one; nothing was written."""

    expected_version: int
    current_version: int


UpdateOutcome = Union[Updated, Conflict]
