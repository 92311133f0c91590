"""Helpers shared by the command modules."""

from __future__ import annotations

from enum import Enum
from typing import Optional

import typer

from openapi_flow.config import resolve_config
from openapi_flow.exceptions import FlowError
from openapi_flow.models import ToolConfig
from openapi_flow.output import debug, error


class ReportFormat(str, Enum):
    PRETTY = "pretty"
    JSON = "json"


def load_tool_config(
    config_path: Optional[str],
    profile: Optional[str] = None,
    strict_quality: Optional[bool] = None,
    extension_key: Optional[str] = None,
) -> ToolConfig:
    """Resolve configuration, turning config errors into a clean exit."""
    try:
        config = resolve_config(
            config_path=config_path,
            cli_profile=profile,
            cli_strict_quality=strict_quality,
            cli_extension_key=extension_key,
        )
    except FlowError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    debug(
        f"Effective config: profile={config.profile.value} "
        f"strict_quality={config.strict_quality} extension_key={config.extension_key}"
    )
    return config
