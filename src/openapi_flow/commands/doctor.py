"""``openapi-flow doctor`` -- check the local installation and configuration."""

from __future__ import annotations

import platform
from typing import Optional

import typer

from openapi_flow import __version__
from openapi_flow.config import load_config_file, resolve_config_path
from openapi_flow.exceptions import FlowError
from openapi_flow.exit_codes import EXIT_GENERIC_FAILURE
from openapi_flow.models import ToolConfig
from openapi_flow.output import error, info, success
from openapi_flow.validator.schema import FlowSchemaValidator


def doctor_command(
    config: Optional[str] = typer.Option(
        None, "--config", help="Path to x-openapi-flow.config.json."
    ),
) -> None:
    """Report interpreter, config file and schema contract status."""
    failed = False

    info(f"openapi-flow {__version__}")
    info(f"- Python: {platform.python_version()}")

    path = resolve_config_path(config)
    try:
        _, data = load_config_file(config)
        if data is None:
            info(f"- Config: not found ({path})")
        else:
            ToolConfig.model_validate(data)
            success(f"- Config: OK ({path})")
    except (FlowError, ValueError) as exc:
        error(f"- Config: FAIL ({path})")
        error(f"  {exc}")
        failed = True

    try:
        validator = FlowSchemaValidator()
        success(f"- Schema contract: OK ({validator.schema_id})")
    except FlowError as exc:
        error(f"- Schema contract: FAIL ({exc})")
        failed = True

    if failed:
        raise typer.Exit(code=EXIT_GENERIC_FAILURE)
