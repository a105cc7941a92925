from archivist.domain.schema.model.value import FieldDefinition, FieldType
from archivist.domain.shared.error import ConfigurationError
from archivist.domain.shared.model.value import ValueObject


class RecordSchema(ValueObject):
    """Attribute definitions for one record type or sub-record type."""

    name: str
    fields: list[FieldDefinition]
    description: str | None = None

    def model_post_init(self, __context: object) -> None:
        if len(self.fields) < 1:
            raise ConfigurationError(f"Schema '{self.name}' must have at least one field")
        _check_unique(self.name, self.fields)

    def field(self, name: str) -> FieldDefinition | None:
        return next((f for f in self.fields if f.name == name), None)


def _check_unique(schema_name: str, fields: list[FieldDefinition]) -> None:
    names = [f.name for f in fields]
    if len(names) != len(set(names)):
        raise ConfigurationError(f"Duplicate field names within schema '{schema_name}'")
    for f in fields:
        if f.type == FieldType.OBJECT:
            if not f.fields:
                raise ConfigurationError(
                    f"Object field '{f.name}' in schema '{schema_name}' declares no fields"
                )
            _check_unique(schema_name, f.fields)
