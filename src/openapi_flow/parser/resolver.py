"""Resolve ``$ref`` JSON Reference pointers in OpenAPI documents.

OpenAPI documents commonly use ``$ref`` pointers (e.g.
``{"$ref": "#/components/schemas/Order"}``) to avoid repetition.  The
reference resolver follows them lazily, one hop at a time, while it walks a
schema; the document itself is never copied or modified.

Only **internal** references (those starting with ``#/``) are supported.
External file or URL references raise
:class:`~openapi_flow.exceptions.RefResolutionError`.

Following a chain of references is capped at :data:`MAX_REF_DEPTH` hops.
This is a hard limit on supported schema recursion: a chain that is longer,
including any reference cycle, is treated as unresolved rather than looping
forever.
"""

from __future__ import annotations

from typing import Any

from openapi_flow.exceptions import RefResolutionError

MAX_REF_DEPTH = 10
"""Maximum number of ``$ref`` hops followed along one walk."""


def resolve_pointer(ref: str, root: dict[str, Any]) -> Any:
    """Resolve a single ``$ref`` string against the root document.

    Parses JSON Pointer references like ``#/components/schemas/Order`` and
    navigates the root dict to locate the referenced value.  Handles
    RFC 6901 JSON Pointer escaping (``~0`` for ``~``, ``~1`` for ``/``).

    Args:
        ref: The ``$ref`` string (e.g., ``"#/components/schemas/Order"``).
        root: The root document to resolve against.

    Returns:
        The value found at the referenced path.

    Raises:
        RefResolutionError: If the reference is external (does not start with
            ``#/``), or if any segment in the pointer path does not exist
            in the document.
    """
    if not isinstance(ref, str) or not ref.startswith("#/"):
        raise RefResolutionError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            if segment not in current:
                raise RefResolutionError(
                    f"Cannot resolve $ref '{ref}': "
                    f"key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise RefResolutionError(
                    f"Cannot resolve $ref '{ref}': "
                    f"invalid array index '{segment}'"
                ) from exc
        else:
            raise RefResolutionError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current


def dereference(
    obj: Any,
    root: dict[str, Any],
    depth: int = 0,
) -> tuple[Any, int]:
    """Follow ``$ref`` pointers on *obj* until a non-reference value is reached.

    Args:
        obj: A value that may be a ``{"$ref": ...}`` mapping.
        root: The root document.
        depth: Number of hops already taken on the current walk.

    Returns:
        ``(value, depth)`` where *value* is the first non-reference target
        and *depth* the updated hop count.

    Raises:
        RefResolutionError: If a pointer cannot be followed or the chain
            exceeds :data:`MAX_REF_DEPTH` hops.
    """
    while isinstance(obj, dict) and "$ref" in obj:
        depth += 1
        if depth > MAX_REF_DEPTH:
            raise RefResolutionError(
                f"$ref chain deeper than {MAX_REF_DEPTH} at '{obj['$ref']}'"
            )
        obj = resolve_pointer(obj["$ref"], root)
    return obj, depth
