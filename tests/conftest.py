"""Global test fixtures."""

from collections.abc import Callable
from typing import Any

import pytest

from archivist.domain.schema.service.validator import SchemaValidator
from archivist.infrastructure.schema.catalog import BUNDLED_SCHEMA_DIR, YamlSchemaCatalog

EventFactory = Callable[..., dict[str, Any]]


@pytest.fixture(scope="session")
def catalog() -> YamlSchemaCatalog:
    return YamlSchemaCatalog(BUNDLED_SCHEMA_DIR)


@pytest.fixture
def validator(catalog: YamlSchemaCatalog) -> SchemaValidator:
    return SchemaValidator(catalog=catalog)


@pytest.fixture
def accession_rep() -> dict[str, Any]:
    return {
        "id_0": "2024.001",
        "title": "Papers of Ada Byron",
        "accession_date": "2024-03-01",
        "content_description": "Correspondence",
        "condition_description": "Good",
    }


@pytest.fixture
def agent_rep() -> dict[str, Any]:
    return {
        "names": [
            {
                "primary_name": "Byron",
                "rest_of_name": "Ada",
                "sort_name": "Byron, Ada",
                "name_order": "inverted",
                "source": "local",
            }
        ]
    }


@pytest.fixture
def make_event_rep() -> EventFactory:
    """Build an event representation linked to the given (uri, role) pairs."""

    def _make(
        linked_records: list[tuple[str, str]] | None = None,
        linked_agents: list[tuple[str, str]] | None = None,
    ) -> dict[str, Any]:
        return {
            "event_type": "custody_transfer",
            "date": {"date_type": "single", "begin": "2024-03-01"},
            "linked_records": [{"ref": r, "role": role} for r, role in linked_records or []],
            "linked_agents": [{"ref": r, "role": role} for r, role in linked_agents or []],
        }

    return _make
