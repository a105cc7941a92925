"""Validate a record representation file against its schema."""

import json
import sys
from pathlib import Path
from typing import Any

import yaml

from archivist.cli.console import get_console
from archivist.config import Config
from archivist.domain.schema.model.value import ValidationMode, ValidationSettings
from archivist.domain.schema.service.validator import SchemaValidator
from archivist.domain.shared.error import ConfigurationError
from archivist.infrastructure.schema.catalog import BUNDLED_SCHEMA_DIR, YamlSchemaCatalog


def _load(path: Path) -> dict[str, Any]:
    text = path.read_text()
    data = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a record representation")
    return data


def validate(
    record_type: str,
    file: Path,
    /,
    *,
    relaxed: bool = False,
    elevate_recommended: bool = False,
    schemas: Path | None = None,
) -> None:
    """Validate a JSON or YAML record representation.

    Exits non-zero when the representation has errors. Warnings alone pass.

    Args:
        record_type: Record type name, e.g. ``accession`` or ``agent_person``.
        file: Representation to validate.
        relaxed: Coerce loosely typed values instead of rejecting them.
        elevate_recommended: Treat missing recommended attributes as errors.
        schemas: Directory of YAML schema definitions (defaults to configuration).
    """
    console = get_console()
    config = Config()

    try:
        catalog = YamlSchemaCatalog(schemas or config.schemas.directory or BUNDLED_SCHEMA_DIR)
        representation = _load(file)
    except (ConfigurationError, OSError, ValueError, yaml.YAMLError) as exc:
        console.error(str(exc))
        sys.exit(2)

    defaults = config.validation.settings()
    settings = ValidationSettings(
        mode=ValidationMode.RELAXED if relaxed else defaults.mode,
        elevate_recommended=elevate_recommended or defaults.elevate_recommended,
    )
    result = SchemaValidator(catalog=catalog).validate(record_type, representation, settings)

    console.issues(result.errors, result.warnings)
    if not result.valid:
        console.error(f"{file} is not a valid {record_type} ({len(result.errors)} error(s))")
        sys.exit(1)
    console.success(f"{file} is a valid {record_type}")
