from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal, Union

from pydantic import Field

from archivist.domain.shared.model.record_type import RecordType
from archivist.domain.shared.model.value import ValueObject


class FieldType(StrEnum):
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    OBJECT = "object"
    REF = "ref"


class Cardinality(StrEnum):
    EXACTLY_ONE = "exactly_one"
    ONE_OR_MORE = "one_or_more"
    ZERO_OR_MORE = "zero_or_more"


class ValidationMode(StrEnum):
    """Severity mode. Strict rejects loosely typed input; relaxed coerces it."""

    STRICT = "strict"
    RELAXED = "relaxed"


class TextConstraints(ValueObject):
    type: Literal["string"] = "string"
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    choices: list[str] | None = None


class NumberConstraints(ValueObject):
    type: Literal["number"] = "number"
    min_value: float | None = None
    max_value: float | None = None


class RefConstraints(ValueObject):
    type: Literal["ref"] = "ref"
    record_types: list[RecordType] | None = None  # None = any record type


FieldConstraints = Annotated[
    Union[TextConstraints, NumberConstraints, RefConstraints],
    Field(discriminator="type"),
]


class FieldDefinition(ValueObject):
    """A single attribute definition within a record-type schema.

    ``required`` absence is always an error. ``recommended`` absence is a
    warning unless the caller elevates recommended attributes.
    """

    name: str
    type: FieldType
    required: bool = False
    recommended: bool = False
    cardinality: Cardinality = Cardinality.EXACTLY_ONE
    description: str | None = None
    constraints: FieldConstraints | None = None
    fields: list[FieldDefinition] | None = None  # Nested attributes for OBJECT fields
    default: Any = None

    @property
    def is_list(self) -> bool:
        return self.cardinality != Cardinality.EXACTLY_ONE


class ValidationSettings(ValueObject):
    """Explicit severity configuration threaded into every validation call."""

    mode: ValidationMode = ValidationMode.STRICT
    elevate_recommended: bool = False

    @property
    def coerce(self) -> bool:
        return self.mode == ValidationMode.RELAXED


STRICT = ValidationSettings()
RELAXED = ValidationSettings(mode=ValidationMode.RELAXED)


FieldDefinition.model_rebuild()
