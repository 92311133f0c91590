"""Extract flow fragments and the ``operationId`` index from OpenAPI documents.

Both public functions walk the ``paths`` object in the same order: paths in
document key order, and within each path item the HTTP methods in the
canonical order of :class:`~openapi_flow.models.HTTPMethod` (get, put, post,
delete, options, head, patch, trace).

* :func:`extract_flows` -- one :class:`~openapi_flow.models.FlowEntry` per
  operation carrying the flow extension.
* :func:`collect_operations` -- ``operationId`` to
  :class:`~openapi_flow.models.OperationRef`, used to check references.

Neither function mutates the document, and neither raises on missing
``paths``, non-mapping path items or operations without the extension; such
entries are skipped.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from openapi_flow.models import (
    FLOW_EXTENSION_KEY,
    FlowEntry,
    FlowFragment,
    HTTPMethod,
    OperationRef,
)


def _iter_operations(
    document: Any,
) -> Iterator[tuple[str, dict[str, Any], HTTPMethod, dict[str, Any]]]:
    """Yield ``(path, path_item, method, operation)`` in traversal order."""
    if not isinstance(document, dict):
        return
    paths = document.get("paths")
    if not isinstance(paths, dict):
        return

    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        for method in HTTPMethod:
            operation = path_item.get(method.value)
            if isinstance(operation, dict):
                yield str(path), path_item, method, operation


def format_endpoint(method: HTTPMethod, path: str) -> str:
    """Return the display name of an operation, e.g. ``"POST /orders"``."""
    return f"{method.value.upper()} {path}"


def extract_flows(
    document: Any,
    extension_key: str = FLOW_EXTENSION_KEY,
) -> list[FlowEntry]:
    """Collect every flow fragment declared on an operation.

    Args:
        document: The parsed OpenAPI document.
        extension_key: Operation key holding the fragment.  Defaults to
            :data:`~openapi_flow.models.FLOW_EXTENSION_KEY`.

    Returns:
        Flow entries in document traversal order.  Operations whose
        extension value is ``None`` (or absent) are skipped.

    Example::

        entries = extract_flows(load_document("openapi.yaml"))
        for entry in entries:
            print(entry.endpoint, entry.flow.current_state)
    """
    entries: list[FlowEntry] = []

    for path, _, method, operation in _iter_operations(document):
        raw = operation.get(extension_key)
        if raw is None:
            continue

        operation_id = operation.get("operationId")
        entries.append(
            FlowEntry(
                endpoint=format_endpoint(method, path),
                operation_id=operation_id if isinstance(operation_id, str) else None,
                flow=FlowFragment.coerce(raw),
                raw=raw,
            )
        )

    return entries


def collect_operations(document: Any) -> dict[str, OperationRef]:
    """Index every operation that declares an ``operationId``.

    When two operations share an ``operationId``, the one visited last
    wins.

    Args:
        document: The parsed OpenAPI document.

    Returns:
        A dict mapping ``operationId`` to its :class:`OperationRef`.
    """
    operations: dict[str, OperationRef] = {}

    for path, path_item, method, operation in _iter_operations(document):
        operation_id = operation.get("operationId")
        if not isinstance(operation_id, str) or not operation_id:
            continue
        operations[operation_id] = OperationRef(
            operation_id=operation_id,
            endpoint=format_endpoint(method, path),
            path=path,
            method=method,
            operation=operation,
            path_item=path_item,
        )

    return operations
