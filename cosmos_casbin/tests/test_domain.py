"""
Tests for the stored rule and query spec models.
"""

import pytest
from pydantic import ValidationError

from cosmos_casbin.domain import CasbinRule, P, QueryParameter, SqlQuerySpec, q

from .factories import raw_document


class TestCasbinRule:
    def test_parses_stored_document_ignoring_system_properties(self) -> None:
        record = CasbinRule.model_validate(raw_document())

        assert record.id == "test-rule-1"
        assert record.ptype == "p"
        assert record.values() == ["alice", "data1", "read", "", "", ""]
        assert "_rid" not in record.to_document()

    def test_accepts_field_name_or_alias(self) -> None:
        assert CasbinRule(ptype="g").ptype == "g"
        assert CasbinRule.model_validate({"pType": "g"}).ptype == "g"

    def test_null_values_read_as_empty(self) -> None:
        record = CasbinRule.model_validate(raw_document(v1=None, v2=None))
        assert record.values() == ["alice", "", "", "", "", ""]

    def test_missing_values_serialize_as_empty_strings(self) -> None:
        document = CasbinRule(id="x", ptype="p", v0="alice").to_document()

        assert set(document) == {"id", "pType", "v0", "v1", "v2", "v3", "v4", "v5"}
        assert document["v5"] == ""

    def test_non_string_value_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CasbinRule.model_validate(raw_document(v0=["alice"]))


class TestSqlQuerySpec:
    def test_q_builds_spec(self) -> None:
        spec = q("SELECT * FROM c WHERE c.v0 = @v0", P(name="@v0", value="alice"))

        assert spec == SqlQuerySpec(
            query="SELECT * FROM c WHERE c.v0 = @v0",
            parameters=[QueryParameter(name="@v0", value="alice")],
        )

    def test_spec_from_dict(self) -> None:
        spec = SqlQuerySpec.model_validate(
            {
                "query": "SELECT * FROM c WHERE c.pType = @pType",
                "parameters": [{"name": "@pType", "value": "p"}],
            }
        )
        assert spec.to_cosmos_parameters() == [{"name": "@pType", "value": "p"}]

    def test_no_parameters_renders_none(self) -> None:
        assert q("SELECT * FROM c").to_cosmos_parameters() is None

    def test_parameter_name_needs_placeholder_prefix(self) -> None:
        with pytest.raises(ValidationError, match="@name"):
            QueryParameter(name="v0", value="alice")

    def test_empty_query_is_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Query must not be empty"):
            SqlQuerySpec(query="  ")
