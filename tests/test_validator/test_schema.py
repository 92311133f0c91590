"""Tests for openapi_flow.validator.schema."""

from __future__ import annotations

from typing import Any

import pytest

from openapi_flow.exceptions import ConfigError
from openapi_flow.models import FlowEntry, FlowFragment
from openapi_flow.validator.schema import (
    FlowSchemaValidator,
    load_flow_schema,
    suggest_fixes,
)


@pytest.fixture(scope="module")
def validator() -> FlowSchemaValidator:
    return FlowSchemaValidator()


def _valid_flow(**overrides: Any) -> dict[str, Any]:
    flow: dict[str, Any] = {
        "version": "1.0",
        "id": "create-order",
        "current_state": "CREATED",
        "transitions": [
            {
                "trigger_type": "synchronous",
                "target_state": "CONFIRMED",
                "next_operation_id": "confirmOrder",
                "prerequisite_operation_ids": ["createOrder"],
            }
        ],
    }
    flow.update(overrides)
    return flow


# ---------------------------------------------------------------------------
# Contract
# ---------------------------------------------------------------------------


class TestContract:
    def test_packaged_schema_loads(self) -> None:
        schema = load_flow_schema()
        assert schema["$schema"].startswith("http://json-schema.org/draft-07")
        assert set(schema["required"]) == {"version", "id", "current_state"}

    def test_schema_id_carries_version(self, validator: FlowSchemaValidator) -> None:
        assert validator.schema_id is not None
        assert validator.schema_id.endswith("/1.0.json")

    def test_invalid_contract_raises(self) -> None:
        with pytest.raises(ConfigError, match="Invalid flow schema contract"):
            FlowSchemaValidator({"type": 12})

    def test_custom_contract(self) -> None:
        custom = FlowSchemaValidator({"type": "object", "required": ["owner"]})
        [err] = custom.validate({})
        assert err.params["missing_property"] == "owner"


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


class TestValidate:
    def test_valid_flow(self, validator: FlowSchemaValidator) -> None:
        assert validator.validate(_valid_flow()) == []

    def test_transitions_are_optional(self, validator: FlowSchemaValidator) -> None:
        flow = _valid_flow()
        del flow["transitions"]
        assert validator.validate(flow) == []

    def test_reports_all_errors(self, validator: FlowSchemaValidator) -> None:
        errors = validator.validate({"version": "2.0", "extra": 1})
        keywords = sorted(e.keyword for e in errors)
        assert keywords == ["additionalProperties", "enum", "required", "required"]

    def test_missing_property_param(self, validator: FlowSchemaValidator) -> None:
        flow = _valid_flow()
        del flow["id"]
        [err] = validator.validate(flow)
        assert err.keyword == "required"
        assert err.path == "(root)"
        assert err.params == {"missing_property": "id"}

    def test_each_missing_property_named_once(self, validator: FlowSchemaValidator) -> None:
        errors = validator.validate({"transitions": []})
        missing = [e.params["missing_property"] for e in errors if e.keyword == "required"]
        assert sorted(missing) == ["current_state", "id", "version"]

    def test_missing_property_does_not_depend_on_message(self) -> None:
        custom = FlowSchemaValidator(
            {"type": "object", "required": ["a", "b"], "properties": {"a": {}, "b": {}}}
        )
        errors = custom.validate({"b": 1})
        assert [e.params for e in errors] == [{"missing_property": "a"}]

    def test_enum_param_and_path(self, validator: FlowSchemaValidator) -> None:
        [err] = validator.validate(_valid_flow(version="2.0"))
        assert err.path == "/version"
        assert err.params == {"allowed_values": ["1.0"]}

    def test_additional_property_param(self, validator: FlowSchemaValidator) -> None:
        [err] = validator.validate(_valid_flow(owner="team"))
        assert err.params == {"additional_properties": ["owner"]}

    def test_transition_errors_have_nested_path(self, validator: FlowSchemaValidator) -> None:
        flow = _valid_flow(transitions=[{"trigger_type": "synchronous"}])
        [err] = validator.validate(flow)
        assert err.path == "/transitions/0"
        assert err.params["missing_property"] == "target_state"

    def test_duplicate_prerequisites_rejected(self, validator: FlowSchemaValidator) -> None:
        flow = _valid_flow(
            transitions=[
                {
                    "trigger_type": "synchronous",
                    "target_state": "CONFIRMED",
                    "prerequisite_operation_ids": ["a", "a"],
                }
            ]
        )
        [err] = validator.validate(flow)
        assert err.keyword == "uniqueItems"
        assert err.path == "/transitions/0/prerequisite_operation_ids"

    def test_non_mapping_fragment(self, validator: FlowSchemaValidator) -> None:
        [err] = validator.validate("CREATED")
        assert err.keyword == "type"

    def test_validate_entries(self, validator: FlowSchemaValidator) -> None:
        good = _valid_flow()
        bad = _valid_flow(version="9")
        entries = [
            FlowEntry(endpoint="POST /a", flow=FlowFragment.coerce(good), raw=good),
            FlowEntry(endpoint="POST /b", flow=FlowFragment.coerce(bad), raw=bad),
        ]
        [failure] = validator.validate_entries(entries)
        assert failure.endpoint == "POST /b"
        assert failure.errors[0].keyword == "enum"


# ---------------------------------------------------------------------------
# suggest_fixes
# ---------------------------------------------------------------------------


class TestSuggestFixes:
    def test_hints_for_common_errors(self, validator: FlowSchemaValidator) -> None:
        errors = validator.validate({"version": "2.0", "owner": "x"})
        hints = suggest_fixes(errors)
        assert any("unique `id`" in h for h in hints)
        assert any("`current_state`" in h for h in hints)
        assert any('`"1.0"`' in h for h in hints)
        assert any("`owner`" in h for h in hints)

    def test_missing_version_hint(self, validator: FlowSchemaValidator) -> None:
        flow = _valid_flow()
        del flow["version"]
        assert suggest_fixes(validator.validate(flow)) == [
            'Add `version: "1.0"` to the x-openapi-flow object.'
        ]

    def test_uses_extension_key(self, validator: FlowSchemaValidator) -> None:
        flow = _valid_flow()
        del flow["id"]
        [hint] = suggest_fixes(validator.validate(flow), "x-flow")
        assert "x-flow" in hint

    def test_hints_are_deduplicated(self, validator: FlowSchemaValidator) -> None:
        errors = validator.validate({"version": "1.0", "id": "x", "current_state": "A"})
        assert suggest_fixes(errors + errors) == []
        flow = _valid_flow(owner="x")
        twice = validator.validate(flow) * 2
        assert len(suggest_fixes(twice)) == 1

    def test_unrelated_errors_have_no_hints(self, validator: FlowSchemaValidator) -> None:
        errors = validator.validate(_valid_flow(id=""))
        assert errors
        assert suggest_fixes(errors) == []
