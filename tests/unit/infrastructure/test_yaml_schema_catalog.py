"""Tests for the YAML-directory schema catalog."""

from pathlib import Path

import pytest

from archivist.domain.schema.model.value import FieldType, TextConstraints
from archivist.domain.shared.error import ConfigurationError
from archivist.infrastructure.schema.catalog import YamlSchemaCatalog


class TestBundledSchemas:
    def test_every_record_type_and_collection_has_a_schema(self, catalog: YamlSchemaCatalog):
        assert set(catalog.names()) >= {
            "accession",
            "agent_person",
            "event",
            "name_person",
            "rights_statement",
            "deaccession",
        }

    def test_constraint_kind_is_inferred(self, catalog: YamlSchemaCatalog):
        name_order = catalog.get("name_person").field("name_order")

        assert name_order.type is FieldType.STRING
        assert isinstance(name_order.constraints, TextConstraints)
        assert name_order.constraints.choices == ["inverted", "direct"]


class TestYamlSchemaCatalog:
    def test_name_defaults_to_file_stem(self, tmp_path: Path):
        (tmp_path / "box.yaml").write_text("fields:\n  - name: label\n    type: string\n")

        catalog = YamlSchemaCatalog(tmp_path)

        assert catalog.names() == ["box"]
        assert catalog.get("box").field("label") is not None

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(ConfigurationError):
            YamlSchemaCatalog(tmp_path / "nope")

    def test_invalid_field_type(self, tmp_path: Path):
        (tmp_path / "box.yaml").write_text("fields:\n  - name: label\n    type: colour\n")

        with pytest.raises(ConfigurationError):
            YamlSchemaCatalog(tmp_path)

    def test_duplicate_schema_names(self, tmp_path: Path):
        body = "name: box\nfields:\n  - name: label\n    type: string\n"
        (tmp_path / "a.yaml").write_text(body)
        (tmp_path / "b.yml").write_text(body)

        with pytest.raises(ConfigurationError):
            YamlSchemaCatalog(tmp_path)

    def test_object_field_without_fields(self, tmp_path: Path):
        (tmp_path / "box.yaml").write_text("fields:\n  - name: date\n    type: object\n")

        with pytest.raises(ConfigurationError):
            YamlSchemaCatalog(tmp_path)
