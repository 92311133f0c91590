"""Structural validation of flow fragments against the flow schema contract.

The contract is a JSON Schema (draft-07) document shipped as package data at
``validator/schemas/flow-schema.json``.  It is plain data so that the
contract can be inspected, versioned and swapped without touching graph
logic: :class:`FlowSchemaValidator` accepts any schema document and compiles
it once at construction.

Validation runs in all-errors mode: every violated constraint of a fragment
is reported, not only the first.  :func:`suggest_fixes` turns common
violations into remediation hints; the hints are advisory and never affect
pass/fail.
"""

from __future__ import annotations

import json
from importlib import resources
from typing import Any, Optional

import jsonschema
from jsonschema import Draft7Validator

from openapi_flow.exceptions import ConfigError
from openapi_flow.models import FLOW_EXTENSION_KEY, FlowEntry, SchemaError, SchemaFailure

SUPPORTED_FLOW_VERSIONS = ("1.0",)


def load_flow_schema() -> dict[str, Any]:
    """Load the packaged flow schema contract.

    Returns:
        The schema document as a dict.
    """
    source = resources.files("openapi_flow.validator") / "schemas" / "flow-schema.json"
    return json.loads(source.read_text(encoding="utf-8"))


class FlowSchemaValidator:
    """Compiled flow schema, constructed once and injected where needed.

    Args:
        schema: Schema document to validate against.  Defaults to the
            packaged contract from :func:`load_flow_schema`.

    Raises:
        ConfigError: If *schema* is not a valid draft-07 JSON Schema.
    """

    def __init__(self, schema: Optional[dict[str, Any]] = None) -> None:
        self._schema = schema if schema is not None else load_flow_schema()
        try:
            Draft7Validator.check_schema(self._schema)
        except jsonschema.exceptions.SchemaError as exc:
            raise ConfigError(f"Invalid flow schema contract: {exc.message}") from exc
        self._validator = Draft7Validator(self._schema)

    @property
    def schema(self) -> dict[str, Any]:
        return self._schema

    @property
    def schema_id(self) -> Optional[str]:
        """The ``$id`` of the contract, which carries its version."""
        return self._schema.get("$id")

    def validate(self, flow: Any) -> list[SchemaError]:
        """Return every schema violation in *flow*; an empty list means valid."""
        errors: list[SchemaError] = []
        # One "required" error is raised per absent name, in the order the
        # schema lists them.
        required_seen: dict[tuple[Any, ...], int] = {}
        for err in self._validator.iter_errors(flow):
            missing: Optional[str] = None
            if err.validator == "required" and isinstance(err.instance, dict):
                absent = [name for name in err.validator_value if name not in err.instance]
                key = (tuple(err.absolute_path), tuple(err.validator_value))
                index = required_seen.get(key, 0)
                required_seen[key] = index + 1
                if index < len(absent):
                    missing = absent[index]
            errors.append(_to_schema_error(err, missing))
        return errors

    def validate_entries(self, entries: list[FlowEntry]) -> list[SchemaFailure]:
        """Validate each entry's raw fragment, returning one failure per invalid entry."""
        failures: list[SchemaFailure] = []
        for entry in entries:
            errors = self.validate(entry.raw)
            if errors:
                failures.append(SchemaFailure(endpoint=entry.endpoint, errors=errors))
        return failures


def _format_path(error: jsonschema.ValidationError) -> str:
    parts = [str(part) for part in error.absolute_path]
    return "/" + "/".join(parts) if parts else "(root)"


def _to_schema_error(
    error: jsonschema.ValidationError, missing_property: Optional[str] = None
) -> SchemaError:
    keyword = str(error.validator)
    params: dict[str, Any] = {}

    if keyword == "required" and missing_property is not None:
        params["missing_property"] = missing_property
    elif keyword == "additionalProperties" and isinstance(error.instance, dict):
        known = error.schema.get("properties", {}) if isinstance(error.schema, dict) else {}
        params["additional_properties"] = [key for key in error.instance if key not in known]
    elif keyword == "enum":
        params["allowed_values"] = list(error.validator_value)

    return SchemaError(
        path=_format_path(error),
        message=error.message,
        keyword=keyword,
        params=params,
    )


def suggest_fixes(
    errors: list[SchemaError],
    extension_key: str = FLOW_EXTENSION_KEY,
) -> list[str]:
    """Map common schema violations to human-readable remediation hints.

    Recognises missing ``version``/``id``/``current_state`` (and other
    required properties), an unsupported ``version`` value, and unexpected
    extra properties.  Duplicate hints are collapsed; order follows the
    errors.
    """
    suggestions: list[str] = []

    def add(hint: str) -> None:
        if hint not in suggestions:
            suggestions.append(hint)

    for err in errors:
        if err.keyword == "required" and "missing_property" in err.params:
            missing = err.params["missing_property"]
            if missing == "version":
                add(f'Add `version: "{SUPPORTED_FLOW_VERSIONS[0]}"` to the {extension_key} object.')
            elif missing == "id":
                add(f"Add a unique `id` to the {extension_key} object.")
            elif missing == "current_state":
                add("Add `current_state` to describe the operation state.")
            else:
                add(f"Add required property `{missing}` in {extension_key}.")

        if err.keyword == "enum" and err.path.endswith("/version"):
            supported = ", ".join(f'`"{v}"`' for v in SUPPORTED_FLOW_VERSIONS)
            add(f"Use supported {extension_key} version: {supported}.")

        if err.keyword == "additionalProperties":
            for prop in err.params.get("additional_properties", []):
                add(f"Remove unsupported property `{prop}` from {extension_key} payload.")

    return suggestions
