"""Tests for openapi_flow.export."""

from __future__ import annotations

from typing import Any

import pytest

from openapi_flow.exceptions import FlowError
from openapi_flow.export import build_graph_export, render_mermaid
from openapi_flow.models import GraphEdge
from openapi_flow.parser.extractor import extract_flows


class TestGraphEdge:
    def test_label_parts(self) -> None:
        edge = GraphEdge(
            from_state="A",
            to_state="B",
            next_operation_id="goB",
            prerequisite_operation_ids=["x", "y"],
        )
        assert edge.label == "next:goB | requires:x,y"

    def test_empty_label(self) -> None:
        assert GraphEdge(from_state="A", to_state="B").label == ""


class TestRenderMermaid:
    def test_diagram(self) -> None:
        edges = [
            GraphEdge(from_state="A", to_state="B", next_operation_id="goB"),
            GraphEdge(from_state="B", to_state="C"),
        ]
        assert render_mermaid(["A", "B", "C"], edges) == "\n".join(
            [
                "stateDiagram-v2",
                "  state A",
                "  state B",
                "  state C",
                "  A --> B: next:goB",
                "  B --> C",
            ]
        )

    def test_names_that_are_not_identifiers_get_aliases(self) -> None:
        edges = [
            GraphEdge(from_state="IN PROGRESS", to_state="done:ok"),
            GraphEdge(from_state="NEW", to_state="IN PROGRESS"),
        ]
        assert render_mermaid(["IN PROGRESS", "NEW", "done:ok"], edges) == "\n".join(
            [
                "stateDiagram-v2",
                '  state "IN PROGRESS" as IN_PROGRESS',
                "  state NEW",
                '  state "done:ok" as done_ok',
                "  IN_PROGRESS --> done_ok",
                "  NEW --> IN_PROGRESS",
            ]
        )

    def test_alias_does_not_clash_with_existing_state(self) -> None:
        diagram = render_mermaid(["A B", "A_B", "1st"], [])
        assert "  state A_B" in diagram.splitlines()
        assert '  state "A B" as A_B_2' in diagram.splitlines()
        assert '  state "1st" as s_1st' in diagram.splitlines()


class TestBuildGraphExport:
    def test_order_fixture(self, order_api: dict[str, Any]) -> None:
        export = build_graph_export(extract_flows(order_api))
        assert export.format_version == "1.0"
        assert export.flow_count == 3
        assert export.nodes == ["CONFIRMED", "CREATED", "SHIPPED"]
        assert [(e.from_state, e.to_state) for e in export.edges] == [
            ("CONFIRMED", "SHIPPED"),
            ("CREATED", "CONFIRMED"),
        ]
        assert "  CONFIRMED --> SHIPPED: next:shipOrder | requires:createOrder" in export.mermaid
        assert export.mermaid.startswith("stateDiagram-v2\n")

    def test_identical_edges_collapse(self, make_document, make_flow, make_transition) -> None:
        document = make_document(
            ("post", "/a", "a", make_flow("A", make_transition("B"), make_transition("B", "webhook"))),
            ("post", "/b", "b", make_flow("B")),
        )
        export = build_graph_export(extract_flows(document))
        assert len(export.edges) == 1

    def test_different_labels_stay_separate(self, make_document, make_flow, make_transition) -> None:
        document = make_document(
            (
                "post",
                "/a",
                "a",
                make_flow(
                    "A",
                    make_transition("B", next_operation_id="one"),
                    make_transition("B", next_operation_id="two"),
                ),
            ),
        )
        export = build_graph_export(extract_flows(document))
        assert [e.next_operation_id for e in export.edges] == ["one", "two"]

    def test_no_flows_raises(self, make_document) -> None:
        with pytest.raises(FlowError, match="No flow definitions"):
            build_graph_export(extract_flows(make_document(("get", "/x", "x", None))))

    def test_serialised_edges_use_from_and_to(self, order_api: dict[str, Any]) -> None:
        data = build_graph_export(extract_flows(order_api)).to_dict()
        assert data["flowCount"] == 3
        assert data["edges"][0]["from"] == "CONFIRMED"
        assert data["edges"][0]["to"] == "SHIPPED"

    def test_output_is_stable_under_reordering(self, make_document, make_flow, make_transition) -> None:
        ops = [
            ("post", "/a", "a", make_flow("A", make_transition("B"))),
            ("post", "/b", "b", make_flow("B", make_transition("C"))),
            ("post", "/c", "c", make_flow("C")),
        ]
        forward = build_graph_export(extract_flows(make_document(*ops)))
        backward = build_graph_export(extract_flows(make_document(*reversed(ops))))
        assert forward == backward
