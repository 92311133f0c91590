"""Canonical Pydantic models shared across all openapi-flow modules.

This is the single source of truth for data shapes in the project.  Every
other module imports from here rather than defining its own models.  The
models fall into three groups:

**Configuration models** -- loaded from ``x-openapi-flow.config.json`` and
CLI flags:
    :class:`LintRules`, :class:`LintConfig`, :class:`ToolConfig`, and
    :class:`ValidationOptions`.

**Extraction models** -- produced by the parser from a raw OpenAPI document:
    :class:`HTTPMethod`, :class:`Transition`, :class:`FlowFragment`,
    :class:`FlowEntry`, :class:`OperationRef`, and :class:`StateGraph`.

**Finding and result models** -- produced by the validator, lint and export
modules and consumed by the CLI renderers:
    :class:`SchemaError`, :class:`SchemaFailure`, :class:`OrphanState`,
    :class:`CycleInfo`, :class:`DuplicateTransition`,
    :class:`InvalidOperationReference`, :class:`FieldReference`,
    :class:`InvalidFieldReference`, :class:`GraphChecks`,
    :class:`QualityChecks`, :class:`ValidationResult`,
    :class:`TerminalPathIssues`, :class:`LintIssues`, :class:`LintSummary`,
    :class:`LintResult`, :class:`GraphEdge`, and :class:`GraphExport`.

Result models are frozen.  Their serialised form uses camelCase keys
(``flowCount``, ``schemaFailures``, ...) via
field aliases, so ``model_dump(mode="json", by_alias=True)`` is the wire
format.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

import networkx as nx
from pydantic import BaseModel, ConfigDict, Field

FLOW_EXTENSION_KEY = "x-openapi-flow"
"""Operation-level key under which a flow fragment lives."""

LEGACY_FLOW_EXTENSION_KEY = "x-flow"
"""Key used by documents written for the first release of the extension."""


# --- Configuration ---


class ValidationProfile(str, enum.Enum):
    """Named strictness configurations for a validation run."""

    CORE = "core"
    RELAXED = "relaxed"
    STRICT = "strict"


class ValidationOptions(BaseModel):
    """Options recognised by :class:`~openapi_flow.validator.engine.FlowValidator`."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    profile: ValidationProfile = ValidationProfile.STRICT
    strict_quality: bool = Field(default=False, alias="strictQuality")


class LintRules(BaseModel):
    """Per-rule switches for ``openapi-flow lint``. Every rule is on by default."""

    next_operation_id_exists: bool = True
    prerequisite_operation_ids_exist: bool = True
    field_refs_exist: bool = True
    duplicate_transitions: bool = True
    terminal_path: bool = True


class LintConfig(BaseModel):
    """The ``lint`` section of the config file."""

    rules: LintRules = Field(default_factory=LintRules)


class ToolConfig(BaseModel):
    """Effective configuration after precedence resolution.

    See :func:`~openapi_flow.config.resolve_config` for the precedence chain.
    """

    model_config = ConfigDict(populate_by_name=True)

    profile: ValidationProfile = ValidationProfile.STRICT
    strict_quality: bool = Field(default=False, alias="strictQuality")
    extension_key: str = Field(default=FLOW_EXTENSION_KEY, alias="extensionKey")
    lint: LintConfig = Field(default_factory=LintConfig)

    def validation_options(self) -> ValidationOptions:
        """Return the subset of this config consumed by the orchestrator."""
        return ValidationOptions(profile=self.profile, strict_quality=self.strict_quality)


# --- Extraction ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised on an OpenAPI path item.

    Declaration order is the canonical traversal order used by the
    extractor, so iterating this enum visits methods in the same order every
    time.
    """

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


def _str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


class Transition(BaseModel):
    """A single outgoing transition declared in a flow fragment.

    ``prerequisite_operation_ids`` is semantically a set; it is kept as a
    list so that reports list ids in the order the author wrote them.
    """

    model_config = ConfigDict(frozen=True)

    trigger_type: Optional[str] = None
    target_state: Optional[str] = None
    condition: Optional[str] = None
    next_operation_id: Optional[str] = None
    prerequisite_operation_ids: list[str] = Field(default_factory=list)
    prerequisite_field_refs: list[str] = Field(default_factory=list)
    propagated_field_refs: list[str] = Field(default_factory=list)

    @classmethod
    def coerce(cls, raw: dict[str, Any]) -> Transition:
        """Build a transition from an arbitrary mapping, dropping ill-typed values."""
        return cls(
            trigger_type=_str_or_none(raw.get("trigger_type")),
            target_state=_str_or_none(raw.get("target_state")),
            condition=_str_or_none(raw.get("condition")),
            next_operation_id=_str_or_none(raw.get("next_operation_id")),
            prerequisite_operation_ids=_str_list(raw.get("prerequisite_operation_ids")),
            prerequisite_field_refs=_str_list(raw.get("prerequisite_field_refs")),
            propagated_field_refs=_str_list(raw.get("propagated_field_refs")),
        )


class FlowFragment(BaseModel):
    """Typed view of one operation's flow declaration.

    Every field is optional because fragments are read before they are
    validated; the schema validator works on the raw mapping and reports
    anything missing.
    """

    model_config = ConfigDict(frozen=True)

    version: Optional[str] = None
    id: Optional[str] = None
    current_state: Optional[str] = None
    transitions: list[Transition] = Field(default_factory=list)

    @classmethod
    def coerce(cls, raw: Any) -> FlowFragment:
        """Build a fragment from whatever was found under the extension key.

        Non-mapping input yields an empty fragment, a non-list
        ``transitions`` yields no transitions, and non-mapping transition
        entries are skipped.
        """
        if not isinstance(raw, dict):
            return cls()
        transitions = raw.get("transitions")
        if not isinstance(transitions, list):
            transitions = []
        return cls(
            version=_str_or_none(raw.get("version")),
            id=_str_or_none(raw.get("id")),
            current_state=_str_or_none(raw.get("current_state")) or None,
            transitions=[Transition.coerce(t) for t in transitions if isinstance(t, dict)],
        )


class FlowEntry(BaseModel):
    """One operation's flow fragment together with the operation's identity."""

    model_config = ConfigDict(frozen=True)

    endpoint: str = Field(description="Method and path, e.g. 'POST /orders'")
    operation_id: Optional[str] = None
    flow: FlowFragment
    raw: Any = Field(default=None, description="The fragment exactly as found")


class OperationRef(BaseModel):
    """Location of an operation in the document, indexed by ``operationId``."""

    model_config = ConfigDict(frozen=True)

    operation_id: str
    endpoint: str
    path: str
    method: HTTPMethod
    operation: dict[str, Any] = Field(default_factory=dict)
    path_item: dict[str, Any] = Field(default_factory=dict)


class StateGraph:
    """Directed graph over state names, backed by :class:`networkx.DiGraph`.

    ``DiGraph`` keeps nodes and successors in first-insertion order, which
    makes every traversal deterministic for a given input order.  Parallel
    edges collapse into one, so degrees count distinct edges only.
    """

    def __init__(self) -> None:
        self.graph: nx.DiGraph = nx.DiGraph()

    @property
    def nodes(self) -> list[str]:
        return list(self.graph.nodes)

    def add_node(self, state: str) -> None:
        self.graph.add_node(state)

    def add_edge(self, source: str, target: str) -> None:
        self.graph.add_edge(source, target)

    def in_degree(self, state: str) -> int:
        return self.graph.in_degree(state)

    def out_degree(self, state: str) -> int:
        return self.graph.out_degree(state)


# --- Findings ---


class SchemaError(BaseModel):
    """A single violated schema constraint inside one fragment."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="JSON-pointer-style path, '(root)' for the fragment itself")
    message: str
    keyword: str = Field(description="The JSON Schema keyword that failed")
    params: dict[str, Any] = Field(default_factory=dict)


class SchemaFailure(BaseModel):
    """All schema violations found in one endpoint's fragment."""

    model_config = ConfigDict(frozen=True)

    endpoint: str
    errors: list[SchemaError] = Field(default_factory=list)


class OrphanState(BaseModel):
    """A transition target that no fragment declares as its ``current_state``."""

    model_config = ConfigDict(frozen=True)

    target_state: str
    declared_in: str


class CycleInfo(BaseModel):
    """Result of cycle detection.

    When a cycle is found, ``cycle_path`` lists its states in traversal
    order with the cycle-closing state repeated at the end.
    """

    model_config = ConfigDict(frozen=True)

    has_cycle: bool = False
    cycle_path: Optional[list[str]] = None


class DuplicateTransition(BaseModel):
    """A (from, to, trigger_type) triple declared more than once."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_state: str = Field(alias="from")
    to_state: str = Field(alias="to")
    trigger_type: str
    count: int
    declared_in: list[str] = Field(default_factory=list)


class InvalidOperationReference(BaseModel):
    """An operation id referenced by a transition that the document does not define."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(description="'next_operation_id' or 'prerequisite_operation_ids'")
    operation_id: str
    declared_in: str


class FieldReference(BaseModel):
    """A parsed ``<operationId>:<scope>.<field.path>`` reference."""

    model_config = ConfigDict(frozen=True)

    operation_id: str
    scope: str = Field(description="'request.body', 'request.path' or 'response.body'")
    status_code: Optional[str] = None
    field_path: list[str] = Field(default_factory=list)


class InvalidFieldReference(BaseModel):
    """A field reference that could not be resolved, with the reason."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(description="'prerequisite_field_refs' or 'propagated_field_refs'")
    reference: str
    reason: str
    declared_in: str


class GraphChecks(BaseModel):
    """Structural analyses of the state graph."""

    model_config = ConfigDict(frozen=True)

    initial_states: list[str] = Field(default_factory=list)
    terminal_states: list[str] = Field(default_factory=list)
    unreachable_states: list[str] = Field(default_factory=list)
    cycle: CycleInfo = Field(default_factory=CycleInfo)


class QualityChecks(BaseModel):
    """Non-structural findings whose fatality is configurable."""

    model_config = ConfigDict(frozen=True)

    multiple_initial_states: list[str] = Field(default_factory=list)
    duplicate_transitions: list[DuplicateTransition] = Field(default_factory=list)
    non_terminating_states: list[str] = Field(default_factory=list)
    invalid_operation_references: list[InvalidOperationReference] = Field(default_factory=list)
    invalid_field_references: list[InvalidFieldReference] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class ValidationResult(BaseModel):
    """Everything one validation run found.

    ``ok`` is the single source of truth for pass/fail.  ``errors`` and
    ``warnings`` hold one summary message per finding kind, split by whether
    the active profile treats that kind as fatal.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ok: bool
    path: Optional[str] = None
    profile: ValidationProfile = ValidationProfile.STRICT
    strict_quality: bool = Field(default=False, alias="strictQuality")
    flow_count: int = Field(default=0, alias="flowCount")
    schema_failures: list[SchemaFailure] = Field(default_factory=list, alias="schemaFailures")
    orphans: list[OrphanState] = Field(default_factory=list)
    graph_checks: GraphChecks = Field(default_factory=GraphChecks, alias="graphChecks")
    quality_checks: QualityChecks = Field(default_factory=QualityChecks, alias="qualityChecks")
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    error: Optional[str] = Field(
        default=None, description="Input error message; set only when the document could not be loaded"
    )

    @classmethod
    def for_input_error(
        cls,
        path: Optional[str],
        options: ValidationOptions,
        message: str,
    ) -> ValidationResult:
        """Build the failed, empty result reported when the document cannot be loaded."""
        return cls(
            ok=False,
            path=path,
            profile=options.profile,
            strict_quality=options.strict_quality,
            error=message,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise using the external camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TerminalPathIssues(BaseModel):
    """Issues reported by the ``terminal_path`` lint rule."""

    model_config = ConfigDict(frozen=True)

    terminal_states: list[str] = Field(default_factory=list)
    non_terminating_states: list[str] = Field(default_factory=list)


class LintIssues(BaseModel):
    """Per-rule issue lists. A disabled rule always reports nothing."""

    model_config = ConfigDict(frozen=True)

    next_operation_id_exists: list[InvalidOperationReference] = Field(default_factory=list)
    prerequisite_operation_ids_exist: list[InvalidOperationReference] = Field(default_factory=list)
    field_refs_exist: list[InvalidFieldReference] = Field(default_factory=list)
    duplicate_transitions: list[DuplicateTransition] = Field(default_factory=list)
    terminal_path: TerminalPathIssues = Field(default_factory=TerminalPathIssues)


class LintSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    errors: int = 0
    violated_rules: list[str] = Field(default_factory=list)


class LintResult(BaseModel):
    """Outcome of ``openapi-flow lint``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ok: bool
    path: Optional[str] = None
    flow_count: int = Field(default=0, alias="flowCount")
    rule_config: LintRules = Field(default_factory=LintRules, alias="ruleConfig")
    issues: LintIssues = Field(default_factory=LintIssues)
    summary: LintSummary = Field(default_factory=LintSummary)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class GraphEdge(BaseModel):
    """One de-duplicated edge in a :class:`GraphExport`."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_state: str = Field(alias="from")
    to_state: str = Field(alias="to")
    next_operation_id: Optional[str] = None
    prerequisite_operation_ids: list[str] = Field(default_factory=list)

    @property
    def label(self) -> str:
        parts: list[str] = []
        if self.next_operation_id:
            parts.append(f"next:{self.next_operation_id}")
        if self.prerequisite_operation_ids:
            parts.append(f"requires:{','.join(self.prerequisite_operation_ids)}")
        return " | ".join(parts)


class GraphExport(BaseModel):
    """Exportable view of the state graph, including a Mermaid diagram."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    format_version: str = "1.0"
    flow_count: int = Field(default=0, alias="flowCount")
    nodes: list[str] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)
    mermaid: str = ""

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
