"""Shared test fixtures for openapi-flow.

Provides reusable fixtures for loading document fixtures, building small
OpenAPI documents in-line, isolating configuration, managing output state and
running CLI commands.  These fixtures are automatically discovered by pytest
and available to all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

import pytest
import yaml

from openapi_flow.output import reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Output state
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Drop the installed OutputManager after each test.

    A manager built inside ``CliRunner.invoke`` holds the runner's
    temporary streams, which are closed once the invocation returns.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


def load_fixture(name: str) -> dict[str, Any]:
    """Load a YAML document from ``tests/fixtures``."""
    with open(FIXTURES_DIR / name, encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def order_api() -> dict[str, Any]:
    """A complete, valid three-state order lifecycle (CREATED -> CONFIRMED -> SHIPPED)."""
    return load_fixture("order_api.yaml")


@pytest.fixture
def order_api_path() -> Path:
    return FIXTURES_DIR / "order_api.yaml"


@pytest.fixture
def broken_api_path() -> Path:
    """Document with a schema failure and an orphan state."""
    return FIXTURES_DIR / "broken_api.yaml"


@pytest.fixture
def cyclic_api_path() -> Path:
    """Document whose only lifecycle is the cycle A -> B -> A."""
    return FIXTURES_DIR / "cyclic_api.yaml"


# ---------------------------------------------------------------------------
# In-line document builders
# ---------------------------------------------------------------------------


def _transition(target_state: str, trigger_type: str = "synchronous", **extra: Any) -> dict[str, Any]:
    return {"trigger_type": trigger_type, "target_state": target_state, **extra}


def _flow(
    current_state: str,
    *transitions: dict[str, Any],
    flow_id: Optional[str] = None,
) -> dict[str, Any]:
    flow: dict[str, Any] = {
        "version": "1.0",
        "id": flow_id or current_state.lower(),
        "current_state": current_state,
    }
    if transitions:
        flow["transitions"] = list(transitions)
    return flow


def _document(
    *operations: tuple[str, str, Optional[str], Optional[dict[str, Any]]],
    extension_key: str = "x-openapi-flow",
) -> dict[str, Any]:
    """Build a document from ``(method, path, operation_id, flow)`` tuples."""
    paths: dict[str, Any] = {}
    for method, path, operation_id, flow in operations:
        operation: dict[str, Any] = {"responses": {"200": {"description": "OK"}}}
        if operation_id:
            operation["operationId"] = operation_id
        if flow is not None:
            operation[extension_key] = flow
        paths.setdefault(path, {})[method] = operation
    return {
        "openapi": "3.0.3",
        "info": {"title": "Test API", "version": "1.0.0"},
        "paths": paths,
    }


@pytest.fixture
def make_transition() -> Callable[..., dict[str, Any]]:
    """``make_transition("CONFIRMED", next_operation_id="confirmOrder")``."""
    return _transition


@pytest.fixture
def make_flow() -> Callable[..., dict[str, Any]]:
    """``make_flow("CREATED", make_transition("CONFIRMED"))``."""
    return _flow


@pytest.fixture
def make_document() -> Callable[..., dict[str, Any]]:
    """``make_document(("post", "/orders", "createOrder", flow), ...)``."""
    return _document


@pytest.fixture
def write_document(tmp_path: Path) -> Callable[[dict[str, Any], str], Path]:
    """Write a document to ``tmp_path`` as YAML and return the file path."""

    def _write(document: dict[str, Any], name: str = "openapi.yaml") -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(document, sort_keys=False), encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty working directory with no openapi-flow settings.

    No ``x-openapi-flow.config.json`` is picked up, the profile and
    strict-quality variables are unset, and crash logs land under
    ``tmp_path/data``.  Returns ``tmp_path``.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["OPENAPI_FLOW_PROFILE", "OPENAPI_FLOW_STRICT_QUALITY"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """A CliRunner; tests read the report from ``result.stdout``."""
    from typer.testing import CliRunner

    return CliRunner()
