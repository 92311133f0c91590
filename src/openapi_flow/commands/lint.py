"""``openapi-flow lint`` -- run configurable lint rules on one document."""

from __future__ import annotations

from typing import Optional

import typer

from openapi_flow.commands._common import ReportFormat, load_tool_config
from openapi_flow.exceptions import SpecParseError
from openapi_flow.exit_codes import EXIT_SUCCESS, EXIT_VALIDATION_FAILED
from openapi_flow.lint import lint_document
from openapi_flow.output import emit_json, error
from openapi_flow.parser.loader import load_document
from openapi_flow.report import render_lint_report
from openapi_flow.validator.engine import resolve_source_path


def lint_command(
    openapi_file: str = typer.Argument(
        ..., help="OpenAPI document: file path, http(s) URL, or '-' for stdin."
    ),
    config: Optional[str] = typer.Option(
        None, "--config", help="Path to x-openapi-flow.config.json."
    ),
    report_format: ReportFormat = typer.Option(
        ReportFormat.PRETTY, "--format", help="Report format."
    ),
) -> None:
    """Lint flow definitions with the rules enabled in the config file.

    Example::

        openapi-flow lint openapi.yaml --format json
    """
    tool_config = load_tool_config(config)

    try:
        document = load_document(openapi_file)
    except SpecParseError as exc:
        error(f"Could not parse OpenAPI file: {exc}")
        raise typer.Exit(code=exc.exit_code) from None

    result = lint_document(
        document,
        rules=tool_config.lint.rules,
        path=resolve_source_path(openapi_file),
        extension_key=tool_config.extension_key,
    )

    if report_format == ReportFormat.JSON:
        emit_json(result.to_dict())
    else:
        render_lint_report(result, tool_config.extension_key)

    raise typer.Exit(code=EXIT_SUCCESS if result.ok else EXIT_VALIDATION_FAILED)
