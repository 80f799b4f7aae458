"""
Tests for renderer-facing shapes and connectors.
"""

import pytest

from mindorbit.layout.engine import compute_layout
from mindorbit.layout.geometry import Edge, LayoutNode
from mindorbit.output.shapes import (
    CENTER_COLOR,
    THEME_COLORS,
    CenterNode,
    FindingNode,
    LeafNode,
    RenderKind,
    ThemeNode,
    build_connectors,
    build_render_nodes,
    connector_bend,
    theme_color,
    to_render_document,
)


@pytest.fixture
def research_result(research_tree):
    return compute_layout(research_tree)


class TestRenderNodes:
    """One variant per tier, colours inherited from themes."""

    def test_variant_by_level(self, research_result):
        by_id = {shape.id: shape for shape in build_render_nodes(research_result)}

        assert isinstance(by_id["root"], CenterNode)
        assert isinstance(by_id["t0"], ThemeNode)
        assert isinstance(by_id["t0_f0"], FindingNode)
        assert isinstance(by_id["t0_f0_p0"], LeafNode)
        assert by_id["t0_f0_p0"].kind == RenderKind.LEAF

    def test_top_left_origin(self, research_result):
        shapes = build_render_nodes(research_result)

        for shape in shapes:
            node = research_result.nodes[shape.id]
            assert shape.x == pytest.approx(node.x - node.width / 2)
            assert shape.y == pytest.approx(node.y - node.height / 2)
            assert (shape.width, shape.height) == (node.width, node.height)

    def test_theme_colours_are_inherited(self, research_result):
        by_id = {shape.id: shape for shape in build_render_nodes(research_result)}

        assert by_id["root"].color == CENTER_COLOR
        assert [by_id[f"t{i}"].color for i in range(4)] == list(THEME_COLORS[:4])
        assert by_id["t2_f1"].theme_color == by_id["t2"].color
        assert by_id["t3_f2_p1"].theme_color == by_id["t3"].color

    def test_finding_subtitle(self, research_result):
        by_id = {shape.id: shape for shape in build_render_nodes(research_result)}
        assert by_id["t1_f3"].subtitle == "Doe et al. (2023)"
        assert by_id["t1_f3"].url is None

    def test_palette_wraps(self):
        assert theme_color(len(THEME_COLORS)) == THEME_COLORS[0]


class TestConnectors:
    def test_straight_edges_have_no_bend(self, research_result):
        connectors = build_connectors(research_result)

        assert len(connectors) == len(research_result.edges)
        assert all(c.bend == 0.0 for c in connectors)
        first = connectors[0]
        target = research_result.nodes[first.target_id]
        assert (first.x + first.dx, first.y + first.dy) == pytest.approx((target.x, target.y))

    def test_bend_follows_waypoints(self):
        source = LayoutNode(id="a", x=0.0, y=0.0, width=10.0, height=10.0, level=1)
        target = LayoutNode(id="b", x=1000.0, y=0.0, width=10.0, height=10.0, level=2)
        edge = Edge(source_id="a", target_id="b",
                    waypoints=[(200.0, 0.0), (400.0, 100.0), (600.0, 100.0), (800.0, 0.0)])

        # Middle waypoint (600, 100) is 100 off the line, positive side
        assert connector_bend(source, target, edge) == pytest.approx(50.0)
        assert connector_bend(source, target, Edge(source_id="a", target_id="b")) == 0.0


class TestRenderDocument:
    def test_plain_types(self, tiny_tree):
        document = to_render_document(compute_layout(tiny_tree))

        assert [s["kind"] for s in document["shapes"]] == ["center", "theme", "finding"]
        assert document["connectors"][0]["source_id"] == "root"
        assert set(document["bounds"]) == {"min_x", "min_y", "max_x", "max_y"}
