"""Rule-based lint over flow definitions.

Lint reuses the extraction, graph and reference machinery of the validator
but reports a flat, per-rule view that can be tuned from the config file::

    {
      "lint": {
        "rules": {
          "duplicate_transitions": false
        }
      }
    }

Unlike validation profiles, every reported lint issue counts as an error.
A disabled rule is still skipped entirely and reports nothing.
"""

from __future__ import annotations

from typing import Any, Optional

from openapi_flow.models import (
    FLOW_EXTENSION_KEY,
    LintIssues,
    LintResult,
    LintRules,
    LintSummary,
    TerminalPathIssues,
)
from openapi_flow.parser.extractor import collect_operations, extract_flows
from openapi_flow.validator.graph import (
    build_state_graph,
    detect_duplicate_transitions,
    detect_non_terminating_states,
    find_terminal_states,
)
from openapi_flow.validator.references import (
    detect_invalid_field_references,
    detect_invalid_operation_references,
)


def lint_document(
    document: Any,
    rules: Optional[LintRules] = None,
    path: Optional[str] = None,
    extension_key: str = FLOW_EXTENSION_KEY,
) -> LintResult:
    """Run the enabled lint rules over *document*.

    Args:
        document: The parsed OpenAPI document.
        rules: Rule switches; all rules are enabled when omitted.
        path: Path reported in the result.
        extension_key: Operation key holding flow fragments.

    Returns:
        A :class:`~openapi_flow.models.LintResult`.  ``ok`` is true when
        no enabled rule reported an issue.
    """
    rules = rules or LintRules()
    entries = extract_flows(document, extension_key)
    operations = collect_operations(document)
    graph = build_state_graph(entries)

    invalid_operations = detect_invalid_operation_references(operations, entries)
    issues = LintIssues(
        next_operation_id_exists=[
            ref for ref in invalid_operations if ref.type == "next_operation_id"
        ]
        if rules.next_operation_id_exists
        else [],
        prerequisite_operation_ids_exist=[
            ref for ref in invalid_operations if ref.type == "prerequisite_operation_ids"
        ]
        if rules.prerequisite_operation_ids_exist
        else [],
        field_refs_exist=detect_invalid_field_references(document, operations, entries)
        if rules.field_refs_exist
        else [],
        duplicate_transitions=detect_duplicate_transitions(entries)
        if rules.duplicate_transitions
        else [],
        terminal_path=TerminalPathIssues(
            terminal_states=find_terminal_states(graph),
            non_terminating_states=detect_non_terminating_states(graph),
        )
        if rules.terminal_path and entries
        else TerminalPathIssues(),
    )

    counts = {
        "next_operation_id_exists": len(issues.next_operation_id_exists),
        "prerequisite_operation_ids_exist": len(issues.prerequisite_operation_ids_exist),
        "field_refs_exist": len(issues.field_refs_exist),
        "duplicate_transitions": len(issues.duplicate_transitions),
        "terminal_path": len(issues.terminal_path.non_terminating_states),
    }
    error_count = sum(counts.values())

    return LintResult(
        ok=error_count == 0,
        path=path,
        flow_count=len(entries),
        rule_config=rules,
        issues=issues,
        summary=LintSummary(
            errors=error_count,
            violated_rules=[rule for rule, count in counts.items() if count > 0],
        ),
    )
