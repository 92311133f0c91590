"""Reference integrity checks for transitions.

Transitions can point at other operations and at fields inside their
request or response payloads:

* ``next_operation_id`` and ``prerequisite_operation_ids`` must name an
  ``operationId`` defined somewhere in the document.
* ``prerequisite_field_refs`` and ``propagated_field_refs`` hold strings of
  the form ``<operationId>:<scope>.<dotted.field.path>`` where ``<scope>``
  is ``request.body``, ``request.path`` or ``response.<code>.body``.  Each
  must resolve to a real field of the named operation's schema.

Field resolution follows internal ``$ref`` pointers (capped at
:data:`~openapi_flow.parser.resolver.MAX_REF_DEPTH` hops per walk) and
descends through ``allOf``/``anyOf``/``oneOf`` (any branch may satisfy the
rest of the path), array ``items``, object ``properties`` and schema-valued
``additionalProperties``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Optional

from openapi_flow.exceptions import RefResolutionError
from openapi_flow.models import (
    FieldReference,
    FlowEntry,
    InvalidFieldReference,
    InvalidOperationReference,
    OperationRef,
)
from openapi_flow.parser.resolver import dereference

REASON_INVALID_FORMAT = "invalid_format"
REASON_OPERATION_NOT_FOUND = "operation_not_found"
REASON_REQUEST_SCHEMA_NOT_FOUND = "request_schema_not_found"
REASON_PATH_PARAMETERS_NOT_FOUND = "path_parameters_not_found"
REASON_RESPONSE_SCHEMA_NOT_FOUND = "response_schema_not_found"
REASON_FIELD_NOT_FOUND = "field_not_found"

SCOPE_REQUEST_BODY = "request.body"
SCOPE_REQUEST_PATH = "request.path"
SCOPE_RESPONSE_BODY = "response.body"

_FIELD_REF = re.compile(
    r"^(?P<operation_id>[^:\s]+):"
    r"(?P<scope>request\.body|request\.path|response\.(?P<status>[^.\s]+)\.body)"
    r"\.(?P<field>\S+)$"
)

_COMPOSITION_KEYWORDS = ("allOf", "anyOf", "oneOf")


# ------------------------------------------------------------------ #
# Operation references
# ------------------------------------------------------------------ #


def detect_invalid_operation_references(
    operations: Mapping[str, Any],
    entries: list[FlowEntry],
) -> list[InvalidOperationReference]:
    """Find transition operation ids that are not defined in the document.

    Args:
        operations: Mapping keyed by every defined ``operationId``, as
            returned by :func:`~openapi_flow.parser.extractor.collect_operations`.
        entries: All flow entries.
    """
    invalid: list[InvalidOperationReference] = []

    for entry in entries:
        for transition in entry.flow.transitions:
            next_id = transition.next_operation_id
            if next_id and next_id not in operations:
                invalid.append(
                    InvalidOperationReference(
                        type="next_operation_id",
                        operation_id=next_id,
                        declared_in=entry.endpoint,
                    )
                )
            for prerequisite in transition.prerequisite_operation_ids:
                if prerequisite not in operations:
                    invalid.append(
                        InvalidOperationReference(
                            type="prerequisite_operation_ids",
                            operation_id=prerequisite,
                            declared_in=entry.endpoint,
                        )
                    )

    return invalid


# ------------------------------------------------------------------ #
# Field references
# ------------------------------------------------------------------ #


def parse_field_reference(reference: str) -> Optional[FieldReference]:
    """Parse ``<operationId>:<scope>.<field.path>``; ``None`` if malformed.

    Example::

        ref = parse_field_reference("getOrder:response.200.body.items.sku")
        # ref.status_code == "200", ref.field_path == ["items", "sku"]
    """
    match = _FIELD_REF.match(reference)
    if match is None:
        return None

    segments = match.group("field").split(".")
    if any(not segment for segment in segments):
        return None

    status = match.group("status")
    return FieldReference(
        operation_id=match.group("operation_id"),
        scope=SCOPE_RESPONSE_BODY if status is not None else match.group("scope"),
        status_code=status,
        field_path=segments,
    )


def _json_content_schema(container: Any) -> Optional[Any]:
    """Return the schema of the JSON media type in a requestBody/response object."""
    if not isinstance(container, dict):
        return None
    content = container.get("content")
    if not isinstance(content, dict):
        return None

    media = content.get("application/json")
    if not isinstance(media, dict):
        media = next(
            (
                value
                for key, value in content.items()
                if isinstance(key, str) and "json" in key.lower() and isinstance(value, dict)
            ),
            None,
        )
    if media is None:
        return None
    return media.get("schema")


def _safe_deref(obj: Any, root: dict[str, Any]) -> Any:
    try:
        return dereference(obj, root)[0]
    except RefResolutionError:
        return None


def _lookup_response(responses: Any, status_code: str) -> Any:
    if not isinstance(responses, dict):
        return None
    if status_code in responses:
        return responses[status_code]
    # YAML decodes unquoted status codes as integers.
    for key, value in responses.items():
        if str(key).upper() == status_code.upper():
            return value
    return None


def _path_parameters_schema(op: OperationRef, root: dict[str, Any]) -> Optional[dict[str, Any]]:
    """Synthesize an object schema from the path parameters of *op*.

    Path-item parameters apply first; operation parameters with the same
    name override them.
    """
    properties: dict[str, Any] = {}
    for source in (op.path_item.get("parameters"), op.operation.get("parameters")):
        if not isinstance(source, list):
            continue
        for raw in source:
            param = _safe_deref(raw, root)
            if not isinstance(param, dict) or param.get("in") != "path":
                continue
            name = param.get("name")
            if isinstance(name, str) and name:
                properties[name] = param.get("schema", {})

    if not properties:
        return None
    return {"type": "object", "properties": properties}


def schema_has_field(
    schema: Any,
    field_path: list[str],
    root: dict[str, Any],
    depth: int = 0,
) -> bool:
    """Check whether *field_path* can be walked through *schema*.

    ``depth`` counts ``$ref`` hops taken so far on this walk; once it would
    exceed the cap the branch is treated as unresolved.
    """
    try:
        schema, depth = dereference(schema, root, depth)
    except RefResolutionError:
        return False

    if not field_path:
        return True
    if not isinstance(schema, dict):
        return False

    for keyword in _COMPOSITION_KEYWORDS:
        branches = schema.get(keyword)
        if isinstance(branches, list) and any(
            schema_has_field(branch, field_path, root, depth) for branch in branches
        ):
            return True

    items = schema.get("items")
    if isinstance(items, dict) and schema_has_field(items, field_path, root, depth):
        return True

    head, rest = field_path[0], field_path[1:]
    properties = schema.get("properties")
    if isinstance(properties, dict) and head in properties:
        return schema_has_field(properties[head], rest, root, depth)

    additional = schema.get("additionalProperties")
    if isinstance(additional, dict):
        return schema_has_field(additional, rest, root, depth)

    return False


def resolve_field_reference(
    reference: str,
    document: dict[str, Any],
    operations: Mapping[str, OperationRef],
) -> Optional[str]:
    """Resolve one field reference.

    Returns:
        ``None`` when the reference resolves, otherwise the failure reason
        (one of the ``REASON_*`` constants).
    """
    parsed = parse_field_reference(reference)
    if parsed is None:
        return REASON_INVALID_FORMAT

    op = operations.get(parsed.operation_id)
    if op is None:
        return REASON_OPERATION_NOT_FOUND

    if parsed.scope == SCOPE_REQUEST_BODY:
        body = _safe_deref(op.operation.get("requestBody"), document)
        schema = _json_content_schema(body)
        if schema is None:
            return REASON_REQUEST_SCHEMA_NOT_FOUND
    elif parsed.scope == SCOPE_REQUEST_PATH:
        schema = _path_parameters_schema(op, document)
        if schema is None:
            return REASON_PATH_PARAMETERS_NOT_FOUND
    else:
        response = _lookup_response(op.operation.get("responses"), parsed.status_code or "")
        schema = _json_content_schema(_safe_deref(response, document))
        if schema is None:
            return REASON_RESPONSE_SCHEMA_NOT_FOUND

    if not schema_has_field(schema, parsed.field_path, document):
        return REASON_FIELD_NOT_FOUND
    return None


def detect_invalid_field_references(
    document: Any,
    operations: Mapping[str, OperationRef],
    entries: list[FlowEntry],
) -> list[InvalidFieldReference]:
    """Resolve every prerequisite and propagated field reference in *entries*."""
    root = document if isinstance(document, dict) else {}
    invalid: list[InvalidFieldReference] = []

    for entry in entries:
        for transition in entry.flow.transitions:
            for ref_type, references in (
                ("prerequisite_field_refs", transition.prerequisite_field_refs),
                ("propagated_field_refs", transition.propagated_field_refs),
            ):
                for reference in references:
                    reason = resolve_field_reference(reference, root, operations)
                    if reason is not None:
                        invalid.append(
                            InvalidFieldReference(
                                type=ref_type,
                                reference=reference,
                                reason=reason,
                                declared_in=entry.endpoint,
                            )
                        )

    return invalid
