"""
Tests for the rule <-> document codec.
"""

import pytest

from cosmos_casbin.codec import (
    load_policy_record,
    policy_id,
    record_to_rule,
    rule_to_record,
)
from cosmos_casbin.domain import CasbinRule

from .factories import minimal_record, multi_type_model, policy_of, rbac_model


class TestPolicyId:
    def test_same_rule_gives_same_id(self) -> None:
        assert policy_id("p", ["alice", "data1", "read"]) == policy_id(
            "p", ["alice", "data1", "read"]
        )

    def test_id_is_hex_128_bit(self) -> None:
        value = policy_id("p", ["alice", "data1", "read"])
        assert len(value) == 32
        int(value, 16)

    @pytest.mark.parametrize(
        "other",
        [
            ("g", ["alice", "data1", "read"]),
            ("p", ["alice", "data1", "write"]),
            ("p", ["alice", "data1"]),
            ("p", ["data1", "alice", "read"]),
        ],
    )
    def test_different_content_gives_different_id(self, other) -> None:
        assert policy_id("p", ["alice", "data1", "read"]) != policy_id(*other)

    def test_id_covers_joined_text(self) -> None:
        """The id hashes the comma-joined text, so these two collide."""
        assert policy_id("p", ["a,b"]) == policy_id("p", ["a", "b"])


class TestRuleToRecord:
    def test_assigns_slots_positionally(self) -> None:
        record = rule_to_record("p", ["alice", "data1", "read"])

        assert record.ptype == "p"
        assert record.values() == ["alice", "data1", "read", "", "", ""]
        assert record.id == policy_id("p", ["alice", "data1", "read"])

    def test_empty_rule(self) -> None:
        record = rule_to_record("g", [])

        assert record.values() == [""] * 6
        assert record.id == policy_id("g", [])

    def test_full_rule(self) -> None:
        rule = ["a", "b", "c", "d", "e", "f"]
        assert rule_to_record("p", rule).values() == rule

    def test_values_beyond_six_are_not_stored_but_hashed(self) -> None:
        rule = ["a", "b", "c", "d", "e", "f", "g"]
        record = rule_to_record("p", rule)

        assert record.values() == rule[:6]
        assert record.id == policy_id("p", rule)
        assert record.id != policy_id("p", rule[:6])

    def test_encoding_is_deterministic(self) -> None:
        first = rule_to_record("p", ("bob", "data2", "write"))
        second = rule_to_record("p", ["bob", "data2", "write"])
        assert first == second

    def test_document_has_every_key(self) -> None:
        document = rule_to_record("g", ["alice", "admin"]).to_document()

        assert document == {
            "id": policy_id("g", ["alice", "admin"]),
            "pType": "g",
            "v0": "alice",
            "v1": "admin",
            "v2": "",
            "v3": "",
            "v4": "",
            "v5": "",
        }


class TestRecordToRule:
    @pytest.mark.parametrize("length", range(0, 7))
    def test_contiguous_rules_round_trip(self, length: int) -> None:
        rule = [f"value{i}" for i in range(length)]
        assert record_to_rule(rule_to_record("p", rule)) == rule

    def test_stops_at_first_empty_field(self) -> None:
        """Known limitation: values after a gap are dropped without warning."""
        record = minimal_record(v0="a", v1="", v2="b")
        assert record_to_rule(record) == ["a"]

    def test_empty_first_field_gives_empty_rule(self) -> None:
        record = minimal_record(v0="", v1="data1", v2="read")
        assert record_to_rule(record) == []

    def test_missing_fields_read_as_empty(self) -> None:
        record = CasbinRule.model_validate({"id": "x", "pType": "p", "v0": "alice"})
        assert record_to_rule(record) == ["alice"]


class TestLoadPolicyRecord:
    def test_appends_to_section_of_ptype(self) -> None:
        model = rbac_model()

        load_policy_record(rule_to_record("p", ["alice", "data1", "read"]), model)
        load_policy_record(rule_to_record("g", ["alice", "data2_admin"]), model)

        assert policy_of(model, "p") == [["alice", "data1", "read"]]
        assert policy_of(model, "g") == [["alice", "data2_admin"]]

    def test_section_is_first_character_of_ptype(self) -> None:
        model = multi_type_model()

        load_policy_record(rule_to_record("p2", ["alice", "read"]), model)
        load_policy_record(rule_to_record("g2", ["data1", "group1"]), model)

        assert policy_of(model, "p", "p2") == [["alice", "read"]]
        assert policy_of(model, "g", "g2") == [["data1", "group1"]]
        assert policy_of(model, "p") == []

    def test_record_without_values_is_skipped(self) -> None:
        model = rbac_model()

        load_policy_record(minimal_record(v0="", v1="", v2=""), model)

        assert policy_of(model, "p") == []

    def test_unknown_ptype_is_skipped(self) -> None:
        model = rbac_model()

        load_policy_record(rule_to_record("p9", ["alice", "read"]), model)
        load_policy_record(rule_to_record("x", ["alice"]), model)

        assert policy_of(model, "p") == []

    def test_gap_truncates_loaded_rule(self) -> None:
        model = rbac_model()

        load_policy_record(minimal_record(v0="a", v1="", v2="b"), model)

        assert policy_of(model, "p") == [["a"]]
