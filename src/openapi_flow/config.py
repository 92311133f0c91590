"""Configuration loading and precedence resolution.

This module handles the (small) persistent configuration of openapi-flow:

* **Config file** -- ``x-openapi-flow.config.json`` in the working directory,
  or any path passed with ``--config``.  Deserialised into a
  :class:`~openapi_flow.models.ToolConfig`.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, the config file and defaults into the effective
  configuration.
* **Data directory** -- XDG-compliant location for crash logs, see
  :func:`get_data_dir`.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from openapi_flow.exceptions import ConfigError
from openapi_flow.models import ToolConfig, ValidationProfile
from openapi_flow.validator.profiles import parse_profile

_APP_NAME = "openapi-flow"
DEFAULT_CONFIG_NAME = "x-openapi-flow.config.json"

ENV_PROFILE = "OPENAPI_FLOW_PROFILE"
ENV_STRICT_QUALITY = "OPENAPI_FLOW_STRICT_QUALITY"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/openapi-flow/`` (default
    ``~/.local/share/openapi-flow/``).  Elsewhere: ``~/.openapi-flow/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Config file ---


def resolve_config_path(config_path: Optional[str] = None) -> Path:
    """Return the explicit config path, or the default one in the working directory."""
    if config_path:
        return Path(config_path).resolve()
    return Path.cwd() / DEFAULT_CONFIG_NAME


def load_config_file(config_path: Optional[str] = None) -> tuple[Path, Optional[dict[str, Any]]]:
    """Read the config file, if there is one.

    Returns:
        ``(path, data)`` where *data* is ``None`` when the file does not
        exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = resolve_config_path(config_path)
    if not path.is_file():
        if config_path:
            raise ConfigError(f"Config file not found: {path}")
        return path, None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Could not parse config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return path, data


def _env_flag(name: str) -> Optional[bool]:
    value = os.environ.get(name)
    if value is None or value == "":
        return None
    return value.strip().lower() in _TRUTHY


# --- Precedence resolution ---


def resolve_config(
    config_path: Optional[str] = None,
    cli_profile: Optional[str] = None,
    cli_strict_quality: Optional[bool] = None,
    cli_extension_key: Optional[str] = None,
) -> ToolConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``cli_profile``, ``cli_strict_quality``, ``cli_extension_key``)
        2. Environment variables (``OPENAPI_FLOW_PROFILE``, ``OPENAPI_FLOW_STRICT_QUALITY``)
        3. Config file (``./x-openapi-flow.config.json`` or ``--config``)
        4. Defaults

    Raises:
        ConfigError: If the config file is invalid.
        InvalidUsageError: If a profile name from the CLI or environment is
            unknown.
    """
    path, data = load_config_file(config_path)
    try:
        config = ToolConfig.model_validate(data or {})
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file {path}: {exc}") from exc

    profile: ValidationProfile = config.profile
    env_profile = os.environ.get(ENV_PROFILE)
    if env_profile:
        profile = parse_profile(env_profile)
    if cli_profile is not None:
        profile = parse_profile(cli_profile)

    strict_quality = config.strict_quality
    env_strict = _env_flag(ENV_STRICT_QUALITY)
    if env_strict is not None:
        strict_quality = env_strict
    if cli_strict_quality:
        strict_quality = True

    return config.model_copy(
        update={
            "profile": profile,
            "strict_quality": strict_quality,
            "extension_key": cli_extension_key or config.extension_key,
        }
    )
