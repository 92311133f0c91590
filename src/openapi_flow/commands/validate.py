"""``openapi-flow validate`` -- run the full validation pipeline on one document."""

from __future__ import annotations

from typing import Optional

import typer

from openapi_flow.commands._common import ReportFormat, load_tool_config
from openapi_flow.exceptions import SpecParseError
from openapi_flow.exit_codes import EXIT_SUCCESS, EXIT_VALIDATION_FAILED
from openapi_flow.models import ValidationResult
from openapi_flow.output import debug, emit_json, error
from openapi_flow.report import render_validation_report
from openapi_flow.validator.engine import FlowValidator, resolve_source_path


def validate_command(
    openapi_file: str = typer.Argument(
        ..., help="OpenAPI document: file path, http(s) URL, or '-' for stdin."
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", help="Validation profile: core, relaxed or strict."
    ),
    strict_quality: bool = typer.Option(
        False, "--strict-quality", help="Treat quality findings as errors (strict profile)."
    ),
    config: Optional[str] = typer.Option(
        None, "--config", help="Path to x-openapi-flow.config.json."
    ),
    report_format: ReportFormat = typer.Option(
        ReportFormat.PRETTY, "--format", help="Report format."
    ),
    extension_key: Optional[str] = typer.Option(
        None, "--extension-key", help="Operation key holding flow definitions."
    ),
) -> None:
    """Validate flow definitions and the state graph they form.

    Exits 0 when every check passes, 3 when validation reports errors, and 7
    when the document cannot be loaded.

    Example::

        openapi-flow validate openapi.yaml --profile relaxed
        openapi-flow validate openapi.yaml --strict-quality --format json
    """
    tool_config = load_tool_config(
        config, profile, strict_quality or None, extension_key
    )
    options = tool_config.validation_options()
    validator = FlowValidator(extension_key=tool_config.extension_key)

    try:
        result = validator.validate_source(openapi_file, options)
    except SpecParseError as exc:
        message = f"Could not load API file: {exc}"
        if report_format == ReportFormat.JSON:
            failed = ValidationResult.for_input_error(
                resolve_source_path(openapi_file), options, message
            )
            emit_json(failed.to_dict())
        else:
            error(message)
        raise typer.Exit(code=exc.exit_code) from None

    debug(f"Validated {result.flow_count} flow definition(s); ok={result.ok}")

    if report_format == ReportFormat.JSON:
        emit_json(result.to_dict())
    else:
        render_validation_report(result, tool_config.extension_key)

    raise typer.Exit(code=EXIT_SUCCESS if result.ok else EXIT_VALIDATION_FAILED)
