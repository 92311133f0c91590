"""Validation orchestrator.

:class:`FlowValidator` runs the whole pipeline over one document::

    document -> extract_flows -> schema validation -> orphan detection
             -> (profile permitting) graph analyses + reference checks
             -> ValidationResult

It never raises for validation findings; every finding is collected into the
returned :class:`~openapi_flow.models.ValidationResult` and ``ok`` is
computed from the profile rules in :mod:`openapi_flow.validator.profiles`.
The only exception path is :meth:`FlowValidator.validate_source`, which
raises :class:`~openapi_flow.exceptions.SpecParseError` when the document
cannot be loaded.

A validator holds no per-run state, and nothing it calls mutates the
document, so one instance can serve any number of runs, including
concurrent ones on separate documents.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from openapi_flow.models import (
    FLOW_EXTENSION_KEY,
    FlowEntry,
    GraphChecks,
    QualityChecks,
    ValidationOptions,
    ValidationResult,
)
from openapi_flow.parser.extractor import collect_operations, extract_flows
from openapi_flow.parser.loader import load_document
from openapi_flow.validator.graph import (
    build_state_graph,
    detect_cycle,
    detect_duplicate_transitions,
    detect_multiple_initial_states,
    detect_non_terminating_states,
    detect_orphan_states,
    detect_unreachable_states,
    find_initial_states,
    find_terminal_states,
)
from openapi_flow.validator.profiles import get_profile_config
from openapi_flow.validator.references import (
    detect_invalid_field_references,
    detect_invalid_operation_references,
)
from openapi_flow.validator.schema import FlowSchemaValidator


def resolve_source_path(source: str) -> str:
    """Return the path reported in results: absolute for files, verbatim otherwise."""
    if source == "-" or source.startswith(("http://", "https://")):
        return source
    return str(Path(source).resolve())


class FlowValidator:
    """Run schema, graph and reference checks and assemble one result.

    Args:
        schema_validator: Compiled schema contract.  A validator for the
            packaged contract is built when omitted.
        extension_key: Operation key holding flow fragments.
    """

    def __init__(
        self,
        schema_validator: Optional[FlowSchemaValidator] = None,
        extension_key: str = FLOW_EXTENSION_KEY,
    ) -> None:
        self._schema_validator = schema_validator or FlowSchemaValidator()
        self._extension_key = extension_key

    @property
    def extension_key(self) -> str:
        return self._extension_key

    def extract(self, document: Any) -> list[FlowEntry]:
        return extract_flows(document, self._extension_key)

    def validate_source(
        self,
        source: str,
        options: Optional[ValidationOptions] = None,
    ) -> ValidationResult:
        """Load *source* (file path, URL or ``-``) and validate it.

        Raises:
            SpecParseError: If the document cannot be read or parsed.
        """
        document = load_document(source)
        return self.validate_document(document, options, path=resolve_source_path(source))

    def validate_document(
        self,
        document: Any,
        options: Optional[ValidationOptions] = None,
        path: Optional[str] = None,
    ) -> ValidationResult:
        """Validate an already-parsed document."""
        options = options or ValidationOptions()
        config = get_profile_config(options.profile)
        entries = self.extract(document)

        if not entries:
            return ValidationResult(
                ok=True,
                path=path,
                profile=options.profile,
                strict_quality=options.strict_quality,
            )

        errors: list[str] = []
        warnings: list[str] = []

        schema_failures = self._schema_validator.validate_entries(entries)
        if schema_failures:
            errors.append(
                f"Schema validation failed for {len(schema_failures)} flow definition(s)"
            )

        orphans = detect_orphan_states(entries)
        if orphans:
            states = ", ".join(dict.fromkeys(o.target_state for o in orphans))
            errors.append(f"Orphan state(s) with no matching current_state: {states}")

        graph_checks = GraphChecks()
        quality_checks = QualityChecks()

        if config.run_advanced or config.run_quality:
            graph = build_state_graph(entries)

            if config.run_advanced:
                initial_states = find_initial_states(graph)
                terminal_states = find_terminal_states(graph)
                unreachable = detect_unreachable_states(graph)
                cycle = detect_cycle(graph)
                graph_checks = GraphChecks(
                    initial_states=initial_states,
                    terminal_states=terminal_states,
                    unreachable_states=unreachable,
                    cycle=cycle,
                )

                structural: list[str] = []
                if not initial_states:
                    structural.append("No initial state detected (indegree = 0)")
                if not terminal_states:
                    structural.append("No terminal state detected (outdegree = 0)")
                if unreachable:
                    structural.append(f"Unreachable state(s): {', '.join(unreachable)}")
                if cycle.has_cycle and cycle.cycle_path:
                    structural.append(f"Cycle detected: {' -> '.join(cycle.cycle_path)}")
                (errors if config.fail_advanced else warnings).extend(structural)

            if config.run_quality:
                multiple_initial = detect_multiple_initial_states(graph)
                duplicates = detect_duplicate_transitions(entries)
                non_terminating = detect_non_terminating_states(graph)
                operations = collect_operations(document)
                invalid_operations = detect_invalid_operation_references(operations, entries)
                invalid_fields = detect_invalid_field_references(document, operations, entries)

                quality_warnings: list[str] = []
                if multiple_initial:
                    quality_warnings.append(
                        f"Multiple initial states detected: {', '.join(multiple_initial)}"
                    )
                if duplicates:
                    quality_warnings.append(f"Duplicate transitions detected: {len(duplicates)}")
                if non_terminating:
                    quality_warnings.append(
                        f"States without path to terminal: {', '.join(non_terminating)}"
                    )
                if invalid_operations:
                    quality_warnings.append(
                        f"Invalid operation references detected: {len(invalid_operations)}"
                    )
                if invalid_fields:
                    quality_warnings.append(
                        f"Invalid field references detected: {len(invalid_fields)}"
                    )

                quality_checks = QualityChecks(
                    multiple_initial_states=multiple_initial,
                    duplicate_transitions=duplicates,
                    non_terminating_states=non_terminating,
                    invalid_operation_references=invalid_operations,
                    invalid_field_references=invalid_fields,
                    warnings=quality_warnings,
                )
                if config.quality_is_fatal(options.strict_quality):
                    errors.extend(quality_warnings)
                else:
                    warnings.extend(quality_warnings)

        return ValidationResult(
            ok=not errors,
            path=path,
            profile=options.profile,
            strict_quality=options.strict_quality,
            flow_count=len(entries),
            schema_failures=schema_failures,
            orphans=orphans,
            graph_checks=graph_checks,
            quality_checks=quality_checks,
            errors=errors,
            warnings=warnings,
        )
