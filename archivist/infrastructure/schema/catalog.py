"""Schema catalog adapters: in-memory and a directory of YAML definitions."""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from archivist.domain.schema.model.schema import RecordSchema
from archivist.domain.schema.port.catalog import SchemaCatalog
from archivist.domain.shared.error import ConfigurationError

logger = logging.getLogger(__name__)

# Definitions shipped with the package, used when no directory is configured.
BUNDLED_SCHEMA_DIR = Path(__file__).parent / "definitions"

_CONSTRAINT_KIND = {
    "string": "string",
    "date": "string",
    "integer": "number",
    "number": "number",
    "ref": "ref",
}


class InMemorySchemaCatalog(SchemaCatalog):
    def __init__(self, schemas: Iterable[RecordSchema] = ()) -> None:
        self._schemas: dict[str, RecordSchema] = {}
        for schema in schemas:
            self.add(schema)

    def add(self, schema: RecordSchema) -> None:
        if schema.name in self._schemas:
            raise ConfigurationError(f"Schema '{schema.name}' is defined twice")
        self._schemas[schema.name] = schema

    def get(self, name: str) -> RecordSchema | None:
        return self._schemas.get(name)

    def names(self) -> list[str]:
        return sorted(self._schemas)


def _with_constraint_kinds(fields: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Fill in the constraints discriminator from the field type when omitted."""
    out = []
    for f in fields:
        f = dict(f)
        constraints = f.get("constraints")
        if isinstance(constraints, dict) and "type" not in constraints:
            kind = _CONSTRAINT_KIND.get(str(f.get("type")))
            if kind is not None:
                f["constraints"] = {**constraints, "type": kind}
        if isinstance(f.get("fields"), list):
            f["fields"] = _with_constraint_kinds(f["fields"])
        out.append(f)
    return out


def load_schema(path: Path) -> RecordSchema:
    """Parse one YAML schema file. The schema name defaults to the file stem."""
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Cannot parse schema file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Schema file {path} must contain a mapping")

    data.setdefault("name", path.stem)
    data["fields"] = _with_constraint_kinds(data.get("fields") or [])
    try:
        return RecordSchema.model_validate(data)
    except PydanticValidationError as exc:
        raise ConfigurationError(f"Invalid schema file {path}: {exc}") from exc


class YamlSchemaCatalog(InMemorySchemaCatalog):
    """Loads every ``*.yaml`` / ``*.yml`` file in a directory once, at construction."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory).expanduser()
        if not self.directory.is_dir():
            raise ConfigurationError(f"Schema directory not found: {self.directory}")

        paths = sorted([*self.directory.glob("*.yaml"), *self.directory.glob("*.yml")])
        super().__init__(load_schema(p) for p in paths)
        logger.info("Loaded %d schema(s) from %s", len(self._schemas), self.directory)
