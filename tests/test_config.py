"""Tests for openapi_flow.config."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from openapi_flow.config import (
    DEFAULT_CONFIG_NAME,
    ENV_PROFILE,
    ENV_STRICT_QUALITY,
    get_data_dir,
    load_config_file,
    resolve_config,
)
from openapi_flow.exceptions import ConfigError, InvalidUsageError
from openapi_flow.models import ToolConfig, ValidationProfile


def _write_json(path: Path, data: Any) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Data directory
# ---------------------------------------------------------------------------


class TestDataDir:
    def test_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("openapi_flow.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_data_dir()
        assert result == tmp_path / ".local" / "share" / "openapi-flow"
        assert result.is_dir()

    def test_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_data"
        monkeypatch.setattr("openapi_flow.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_DATA_HOME", str(custom))

        assert get_data_dir() == custom / "openapi-flow"

    def test_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("openapi_flow.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_data_dir() == tmp_path / ".openapi-flow"


# ---------------------------------------------------------------------------
# Config file
# ---------------------------------------------------------------------------


class TestLoadConfigFile:
    def test_missing_default_file_is_fine(self, isolated_config: Path) -> None:
        path, data = load_config_file()
        assert path == isolated_config / DEFAULT_CONFIG_NAME
        assert data is None

    def test_reads_default_file(self, isolated_config: Path) -> None:
        _write_json(isolated_config / DEFAULT_CONFIG_NAME, {"profile": "relaxed"})
        _, data = load_config_file()
        assert data == {"profile": "relaxed"}

    def test_missing_explicit_file_raises(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config_file(str(isolated_config / "nope.json"))

    def test_invalid_json_raises(self, isolated_config: Path) -> None:
        path = isolated_config / "bad.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(ConfigError, match="Could not parse"):
            load_config_file(str(path))

    def test_non_object_raises(self, isolated_config: Path) -> None:
        path = _write_json(isolated_config / "list.json", ["strict"])
        with pytest.raises(ConfigError, match="JSON object"):
            load_config_file(str(path))


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        config = resolve_config()
        assert config == ToolConfig()
        assert config.profile is ValidationProfile.STRICT
        assert config.strict_quality is False
        assert config.extension_key == "x-openapi-flow"
        assert config.lint.rules.terminal_path is True

    def test_file_values(self, isolated_config: Path) -> None:
        _write_json(
            isolated_config / DEFAULT_CONFIG_NAME,
            {
                "profile": "relaxed",
                "strictQuality": True,
                "extensionKey": "x-flow",
                "lint": {"rules": {"duplicate_transitions": False}},
            },
        )
        config = resolve_config()
        assert config.profile is ValidationProfile.RELAXED
        assert config.strict_quality is True
        assert config.extension_key == "x-flow"
        assert config.lint.rules.duplicate_transitions is False
        assert config.lint.rules.field_refs_exist is True

    def test_env_overrides_file(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_json(isolated_config / DEFAULT_CONFIG_NAME, {"profile": "relaxed", "strictQuality": True})
        monkeypatch.setenv(ENV_PROFILE, "core")
        monkeypatch.setenv(ENV_STRICT_QUALITY, "false")
        config = resolve_config()
        assert config.profile is ValidationProfile.CORE
        assert config.strict_quality is False

    def test_cli_overrides_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_PROFILE, "core")
        config = resolve_config(cli_profile="relaxed", cli_strict_quality=True, cli_extension_key="x-flow")
        assert config.profile is ValidationProfile.RELAXED
        assert config.strict_quality is True
        assert config.extension_key == "x-flow"

    @pytest.mark.parametrize("value", ["1", "true", "YES", "on"])
    def test_env_truthy_values(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch, value: str
    ) -> None:
        monkeypatch.setenv(ENV_STRICT_QUALITY, value)
        assert resolve_config().strict_quality is True

    def test_explicit_config_path(self, isolated_config: Path) -> None:
        path = _write_json(isolated_config / "custom.json", {"profile": "core"})
        assert resolve_config(config_path=str(path)).profile is ValidationProfile.CORE

    def test_unknown_cli_profile(self, isolated_config: Path) -> None:
        with pytest.raises(InvalidUsageError):
            resolve_config(cli_profile="paranoid")

    def test_unknown_env_profile(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_PROFILE, "paranoid")
        with pytest.raises(InvalidUsageError):
            resolve_config()

    def test_invalid_file_values(self, isolated_config: Path) -> None:
        _write_json(isolated_config / DEFAULT_CONFIG_NAME, {"profile": "paranoid"})
        with pytest.raises(ConfigError, match="Invalid config file"):
            resolve_config()

    def test_validation_options(self, isolated_config: Path) -> None:
        options = resolve_config(cli_profile="relaxed", cli_strict_quality=True).validation_options()
        assert options.profile is ValidationProfile.RELAXED
        assert options.strict_quality is True
