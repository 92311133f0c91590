"""Export the state graph as JSON data and a Mermaid state diagram.

The export is stable: nodes and edges are sorted, and edges carrying the
same ``from``, ``to`` and label are emitted once.  Edge labels show the
operation to call next (``next:<id>``) and the operations that must have run
before (``requires:<id>,<id>``)::

    stateDiagram-v2
      state CONFIRMED
      state CREATED
      CREATED --> CONFIRMED: next:confirmOrder

States whose names are not plain identifiers (``IN PROGRESS``) are declared
with an alias, ``state "IN PROGRESS" as IN_PROGRESS``, and edges use the alias.
"""

from __future__ import annotations

import re

from openapi_flow.exceptions import FlowError
from openapi_flow.models import FlowEntry, GraphEdge, GraphExport

_MERMAID_ID = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _edge_sort_key(edge: GraphEdge) -> tuple[str, str, str, str]:
    return (
        edge.from_state,
        edge.to_state,
        edge.next_operation_id or "",
        ",".join(edge.prerequisite_operation_ids),
    )


def _mermaid_ids(nodes: list[str]) -> dict[str, str]:
    """Map each state to a Mermaid-safe id, aliasing names that need it."""
    ids: dict[str, str] = {}
    taken = {state for state in nodes if _MERMAID_ID.match(state)}
    for state in nodes:
        if state in taken:
            ids[state] = state
            continue
        base = re.sub(r"[^A-Za-z0-9_]", "_", state)
        if not base or base[0].isdigit():
            base = f"s_{base}"
        alias, n = base, 2
        while alias in taken:
            alias = f"{base}_{n}"
            n += 1
        taken.add(alias)
        ids[state] = alias
    return ids


def render_mermaid(nodes: list[str], edges: list[GraphEdge]) -> str:
    ids = _mermaid_ids(nodes)
    lines = ["stateDiagram-v2"]
    for state in nodes:
        if ids[state] == state:
            lines.append(f"  state {state}")
        else:
            name = state.replace('"', "'")
            lines.append(f'  state "{name}" as {ids[state]}')
    for edge in edges:
        label = edge.label
        source, target = ids[edge.from_state], ids[edge.to_state]
        lines.append(f"  {source} --> {target}{': ' + label if label else ''}")
    return "\n".join(lines)


def build_graph_export(entries: list[FlowEntry]) -> GraphExport:
    """Build the exportable graph from flow entries.

    Raises:
        FlowError: If *entries* contains no usable flow definition.
    """
    usable = [entry for entry in entries if entry.flow.current_state]
    if not usable:
        raise FlowError("No flow definitions found in the OpenAPI document")

    nodes: set[str] = set()
    edges: dict[tuple[str, str, str], GraphEdge] = {}

    for entry in usable:
        source = entry.flow.current_state
        assert source is not None
        nodes.add(source)

        for transition in entry.flow.transitions:
            if not transition.target_state:
                continue
            nodes.add(transition.target_state)

            edge = GraphEdge(
                from_state=source,
                to_state=transition.target_state,
                next_operation_id=transition.next_operation_id,
                prerequisite_operation_ids=list(transition.prerequisite_operation_ids),
            )
            edges.setdefault((edge.from_state, edge.to_state, edge.label), edge)

    sorted_nodes = sorted(nodes)
    sorted_edges = sorted(edges.values(), key=_edge_sort_key)

    return GraphExport(
        flow_count=len(usable),
        nodes=sorted_nodes,
        edges=sorted_edges,
        mermaid=render_mermaid(sorted_nodes, sorted_edges),
    )
