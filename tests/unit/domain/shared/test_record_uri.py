"""Tests for RecordURI."""

import pytest
from pydantic import BaseModel

from archivist.domain.shared.model.record_type import RecordType
from archivist.domain.shared.model.uri import RecordURI


class TestRecordURI:
    @pytest.mark.parametrize(
        "value, record_type",
        [
            ("/repositories/2/accessions/14", RecordType.ACCESSION),
            ("/repositories/2/agents/people/14", RecordType.AGENT_PERSON),
            ("/repositories/2/events/14", RecordType.EVENT),
        ],
    )
    def test_parse_and_render(self, value: str, record_type: RecordType):
        uri = RecordURI.parse(value)

        assert uri.repository_id == 2
        assert uri.record_type is record_type
        assert uri.id == 14
        assert str(uri) == value

    @pytest.mark.parametrize(
        "value",
        ["", "/repositories/x/accessions/1", "/repositories/1/boxes/1", "/repositories/1/accessions/0"],
    )
    def test_invalid(self, value: str):
        with pytest.raises(ValueError):
            RecordURI.parse(value)

    def test_structural_equality(self):
        a = RecordURI.parse("/repositories/1/events/3")
        b = RecordURI(repository_id=1, record_type=RecordType.EVENT, id=3)

        assert a == b
        assert hash(a) == hash(b)

    def test_accepts_rendered_form_as_field(self):
        class Holder(BaseModel):
            uri: RecordURI

        holder = Holder(uri="/repositories/1/accessions/3")

        assert holder.uri.record_type is RecordType.ACCESSION
