"""State graph construction and structural analyses.

:func:`build_state_graph` stitches every flow entry into one
:class:`~openapi_flow.models.StateGraph` keyed by state name.  The graph is a
pure set-union over entries: the node and edge sets do not depend on entry
order, only the insertion order used to make traversals deterministic does.

The analyses below operate on a built graph (plus, for orphan and duplicate
detection, the raw entries).  Traversals delegate to networkx, which walks
iteratively, so graph depth is never limited by the recursion limit.
"""

from __future__ import annotations

import networkx as nx

from openapi_flow.models import (
    CycleInfo,
    DuplicateTransition,
    FlowEntry,
    OrphanState,
    StateGraph,
)


def build_state_graph(entries: list[FlowEntry]) -> StateGraph:
    """Build the global state graph from all flow entries.

    Every entry's ``current_state`` becomes a node.  Every transition with a
    non-empty ``target_state`` adds the target as a node and the edge
    ``current_state -> target_state`` if it is not already present.
    Entries without a ``current_state`` contribute nothing; the schema
    validator reports them.
    """
    graph = StateGraph()

    for entry in entries:
        source = entry.flow.current_state
        if not source:
            continue
        graph.add_node(source)

        for transition in entry.flow.transitions:
            if not transition.target_state:
                continue
            graph.add_edge(source, transition.target_state)

    return graph


def find_initial_states(graph: StateGraph) -> list[str]:
    """Nodes with no incoming edge."""
    return [state for state in graph.nodes if graph.in_degree(state) == 0]


def find_terminal_states(graph: StateGraph) -> list[str]:
    """Nodes with no outgoing edge."""
    return [state for state in graph.nodes if graph.out_degree(state) == 0]


def detect_orphan_states(entries: list[FlowEntry]) -> list[OrphanState]:
    """Find transition targets that no entry declares as its ``current_state``.

    This is checked against the declared states directly, independent of the
    graph, so a dangling edge is caught even when its target also appears
    as a target elsewhere.
    """
    known_states = {entry.flow.current_state for entry in entries if entry.flow.current_state}
    orphans: list[OrphanState] = []

    for entry in entries:
        for transition in entry.flow.transitions:
            target = transition.target_state
            if target and target not in known_states:
                orphans.append(OrphanState(target_state=target, declared_in=entry.endpoint))

    return orphans


def detect_unreachable_states(graph: StateGraph) -> list[str]:
    """States that cannot be reached from any initial state.

    With no initial state at all, every node is unreachable.
    """
    initial = find_initial_states(graph)
    if not initial:
        return graph.nodes
    reached = set(initial)
    for state in initial:
        reached |= nx.descendants(graph.graph, state)
    return [state for state in graph.nodes if state not in reached]


def detect_non_terminating_states(graph: StateGraph) -> list[str]:
    """States with no path to any terminal state.

    With no terminal state at all, every node is non-terminating.
    """
    terminal = find_terminal_states(graph)
    if not terminal:
        return graph.nodes
    can_terminate = set(terminal)
    for state in terminal:
        can_terminate |= nx.ancestors(graph.graph, state)
    return [state for state in graph.nodes if state not in can_terminate]


def detect_cycle(graph: StateGraph) -> CycleInfo:
    """Report the first directed cycle found by depth-first search.

    Roots are tried in node order and successors in insertion order, so the
    reported cycle is deterministic for a given input order.  It is the
    first cycle the search closes, not necessarily the shortest one.  The
    returned path repeats the cycle-closing state at the end, e.g.
    ``["A", "B", "A"]``.
    """
    try:
        cycle_edges = nx.find_cycle(graph.graph)
    except nx.NetworkXNoCycle:
        return CycleInfo(has_cycle=False)
    path = [source for source, _ in cycle_edges]
    path.append(cycle_edges[-1][1])
    return CycleInfo(has_cycle=True, cycle_path=path)


def detect_duplicate_transitions(entries: list[FlowEntry]) -> list[DuplicateTransition]:
    """Group transitions by (current_state, target_state, trigger_type).

    Any group seen more than once is reported with its count and the
    declaring endpoints in encounter order.  ``condition`` and
    ``next_operation_id`` are not part of the key: two transitions that
    differ only there are still duplicates.
    """
    groups: dict[tuple[str, str, str], list[str]] = {}

    for entry in entries:
        source = entry.flow.current_state
        if not source:
            continue
        for transition in entry.flow.transitions:
            if not transition.target_state or not transition.trigger_type:
                continue
            key = (source, transition.target_state, transition.trigger_type)
            groups.setdefault(key, []).append(entry.endpoint)

    return [
        DuplicateTransition(
            from_state=source,
            to_state=target,
            trigger_type=trigger,
            count=len(endpoints),
            declared_in=endpoints,
        )
        for (source, target, trigger), endpoints in groups.items()
        if len(endpoints) > 1
    ]


def detect_multiple_initial_states(graph: StateGraph) -> list[str]:
    """All initial states when there is more than one, else an empty list."""
    initial = find_initial_states(graph)
    return initial if len(initial) > 1 else []
