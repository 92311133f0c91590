"""``openapi-flow graph`` -- export the state graph as Mermaid or JSON."""

from __future__ import annotations

from enum import Enum
from typing import Optional

import typer

from openapi_flow.commands._common import load_tool_config
from openapi_flow.exceptions import FlowError
from openapi_flow.export import build_graph_export
from openapi_flow.output import emit, emit_json, error
from openapi_flow.parser.extractor import extract_flows
from openapi_flow.parser.loader import load_document


class GraphFormat(str, Enum):
    MERMAID = "mermaid"
    JSON = "json"


def graph_command(
    openapi_file: str = typer.Argument(
        ..., help="OpenAPI document: file path, http(s) URL, or '-' for stdin."
    ),
    graph_format: GraphFormat = typer.Option(
        GraphFormat.MERMAID, "--format", help="Output format."
    ),
    extension_key: Optional[str] = typer.Option(
        None, "--extension-key", help="Operation key holding flow definitions."
    ),
    config: Optional[str] = typer.Option(
        None, "--config", help="Path to x-openapi-flow.config.json."
    ),
) -> None:
    """Print the global state graph.

    Example::

        openapi-flow graph openapi.yaml > lifecycle.mmd
        openapi-flow graph openapi.yaml --format json
    """
    tool_config = load_tool_config(config, extension_key=extension_key)

    try:
        document = load_document(openapi_file)
        export = build_graph_export(extract_flows(document, tool_config.extension_key))
    except FlowError as exc:
        error(f"Could not build graph: {exc}")
        raise typer.Exit(code=exc.exit_code) from None

    if graph_format == GraphFormat.JSON:
        emit_json(export.to_dict())
    else:
        emit(export.mermaid)
