"""Human-readable reports for validation and lint results.

Data (the per-finding tables) goes to stdout through
:mod:`openapi_flow.output`; the pass/fail verdict and per-check status lines
are diagnostics and go to stderr.
"""

from __future__ import annotations

from openapi_flow.models import LintResult, ValidationResult
from openapi_flow.output import emit_table, error, hint, info, success, warning
from openapi_flow.validator.profiles import get_profile_config
from openapi_flow.validator.schema import suggest_fixes


def render_validation_report(result: ValidationResult, extension_key: str) -> None:
    """Print a pretty report for one validation run."""
    info(f"Validating: {result.path}")
    info(f"Profile: {result.profile.value}")

    if result.flow_count == 0:
        warning(f"No {extension_key} extensions found in the API paths.")
        return

    info(f"Found {result.flow_count} {extension_key} definition(s).")

    if not result.schema_failures:
        success("✔ Schema validation passed for all flow definitions.")
    else:
        error("Schema validation FAILED:")
        rows: list[list[str]] = []
        for failure in result.schema_failures:
            for err in failure.errors:
                rows.append([failure.endpoint, err.path, err.message])
        emit_table("Schema failures", ["Endpoint", "Field", "Problem"], rows)
        for failure in result.schema_failures:
            for fix in suggest_fixes(failure.errors, extension_key):
                hint(f"{failure.endpoint}: {fix}")

    if not result.orphans:
        success("✔ No orphan states detected.")
    else:
        rows = [[o.target_state, o.declared_in] for o in result.orphans]
        emit_table("Orphan states", ["Target state", "Declared in"], rows)

    config = get_profile_config(result.profile)
    graph = result.graph_checks
    if config.run_advanced:
        info(f"Initial states: {', '.join(graph.initial_states) or '-'}")
        info(f"Terminal states: {', '.join(graph.terminal_states) or '-'}")

    quality = result.quality_checks
    if config.run_quality:
        if quality.duplicate_transitions:
            rows = [
                [d.from_state, d.to_state, d.trigger_type, str(d.count), ", ".join(d.declared_in)]
                for d in quality.duplicate_transitions
            ]
            emit_table(
                "Duplicate transitions", ["From", "To", "Trigger", "Count", "Declared in"], rows
            )
        references = [
            [r.type, r.operation_id, "operation_not_found", r.declared_in]
            for r in quality.invalid_operation_references
        ] + [
            [r.type, r.reference, r.reason, r.declared_in]
            for r in quality.invalid_field_references
        ]
        if references:
            emit_table(
                "Invalid references", ["Kind", "Reference", "Reason", "Declared in"], references
            )

    for message in result.errors:
        error(message)
    for message in result.warnings:
        warning(message)

    if result.ok:
        success("All validations passed ✔")
    else:
        error("Validation finished with errors.")


def render_lint_report(result: LintResult, extension_key: str) -> None:
    """Print a pretty report for one lint run."""
    info(f"Linting: {result.path}")
    info(f"Found {result.flow_count} {extension_key} definition(s).")
    for rule, enabled in result.rule_config.model_dump().items():
        info(f"- {rule}: {'enabled' if enabled else 'disabled'}")

    if result.flow_count == 0:
        info(f"No {extension_key} definitions found.")
        return

    issues = result.issues
    _rule_line(
        "next_operation_id_exists",
        [f"{r.operation_id} (declared in {r.declared_in})" for r in issues.next_operation_id_exists],
    )
    _rule_line(
        "prerequisite_operation_ids_exist",
        [
            f"{r.operation_id} (declared in {r.declared_in})"
            for r in issues.prerequisite_operation_ids_exist
        ],
    )
    _rule_line(
        "field_refs_exist",
        [f"{r.reference}: {r.reason} (declared in {r.declared_in})" for r in issues.field_refs_exist],
    )
    _rule_line(
        "duplicate_transitions",
        [
            f"{d.from_state} -> {d.to_state} ({d.trigger_type}), count={d.count}"
            for d in issues.duplicate_transitions
        ],
    )
    _rule_line(
        "terminal_path",
        [f"{state} has no path to a terminal state" for state in issues.terminal_path.non_terminating_states],
    )

    if result.ok:
        success("Lint checks passed ✔")
    else:
        error("Lint checks finished with errors.")


def _rule_line(rule: str, problems: list[str]) -> None:
    if not problems:
        success(f"✔ {rule}: no issues.")
        return
    error(f"{rule}: {len(problems)} issue(s).")
    for problem in problems:
        info(f"  - {problem}")
