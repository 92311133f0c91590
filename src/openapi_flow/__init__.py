"""openapi-flow -- Validate lifecycle state machines declared in OpenAPI documents.

Operations in an OpenAPI 3.x document can carry an ``x-openapi-flow``
extension describing the lifecycle state the operation represents and the
transitions that lead out of it.  This package pulls every such fragment out
of a document, stitches them into one global state graph, and checks that the
graph is coherent: no dangling targets, every state reachable, no cycles,
every state able to terminate, and every operation/field reference pointing
at something that exists.

Typical workflow::

    openapi-flow validate openapi.yaml --profile relaxed
    openapi-flow lint openapi.yaml
    openapi-flow graph openapi.yaml --format mermaid

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    config: Config file loading and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: stdout/stderr formatting system with Rich support.
    parser: Document loading, $ref resolution and flow extraction.
    validator: Schema, graph and reference checks plus the orchestrator.
    lint: Configurable rule-based lint over flow definitions.
    export: Graph export as JSON and Mermaid.
    report: Human-readable validation and lint reports.
    commands: CLI command implementations.
"""

__version__ = "1.1.0"
