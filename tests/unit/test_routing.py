"""
Tests for edge routing around node boxes.
"""

import pytest

from mindorbit.layout.config import RoutingConfig
from mindorbit.layout.geometry import Edge, LayoutNode
from mindorbit.layout.routing import EdgeRouter, Obstacle


def _node(node_id, x, y, width=100.0, height=50.0, level=1):
    return LayoutNode(id=node_id, x=x, y=y, width=width, height=height, level=level)


@pytest.fixture
def blocked_line():
    """Horizontal edge passing straight through a third node."""
    return {
        "a": _node("a", 0.0, 0.0),
        "b": _node("b", 1000.0, 0.0),
        "mid": _node("mid", 500.0, 0.0, width=200.0, height=100.0),
    }


class TestObstacle:
    def test_expanded(self):
        box = Obstacle(0.0, 0.0, 10.0, 20.0, node_id="n").expanded(5.0)
        assert (box.min_x, box.min_y, box.max_x, box.max_y) == (-5.0, -5.0, 15.0, 25.0)
        assert box.node_id == "n"

    def test_contains_point_is_strict(self):
        box = Obstacle(0.0, 0.0, 10.0, 10.0)
        assert box.contains_point(5.0, 5.0)
        assert not box.contains_point(10.0, 5.0)
        assert not box.contains_point(5.0, 0.0)

    def test_exit_distance(self):
        box = Obstacle(0.0, 0.0, 10.0, 10.0)
        assert box.exit_distance(5.0, 2.0, 0.0, 1.0) == pytest.approx(8.0)
        assert box.exit_distance(5.0, 2.0, 0.0, -1.0) == pytest.approx(2.0)
        assert box.exit_distance(5.0, 5.0, 0.0, 0.0) == 0.0

    def test_from_node(self):
        box = Obstacle.from_node(_node("n", 100.0, 50.0))
        assert (box.min_x, box.min_y, box.max_x, box.max_y) == (50.0, 25.0, 150.0, 75.0)


class TestEdgeRouter:
    """Tests for EdgeRouter."""

    def test_bends_around_blocking_node(self, blocked_line):
        """Samples inside the expanded box move onto its boundary."""
        router = EdgeRouter(RoutingConfig(segments=5, clearance=50.0))
        nodes = blocked_line
        waypoints = router.route_edge(nodes["a"], nodes["b"], [
            Obstacle.from_node(n).expanded(50.0) for n in nodes.values()
        ])

        assert waypoints == [
            pytest.approx((200.0, 0.0)),
            pytest.approx((400.0, 100.0)),
            pytest.approx((600.0, 100.0)),
            pytest.approx((800.0, 0.0)),
        ]

    def test_clear_edge_stays_straight(self):
        nodes = {"a": _node("a", 0.0, 0.0), "b": _node("b", 1000.0, 0.0)}
        edge = Edge(source_id="a", target_id="b")

        bent = EdgeRouter().route([edge], nodes)

        assert bent == 0
        assert edge.waypoints == []

    def test_endpoints_are_not_obstacles(self):
        nodes = {
            "a": _node("a", 0.0, 0.0, width=900.0, height=300.0),
            "b": _node("b", 600.0, 0.0, width=900.0, height=300.0),
        }
        edge = Edge(source_id="a", target_id="b")
        EdgeRouter().route([edge], nodes)
        assert edge.waypoints == []

    def test_route_fills_edges_in_place(self, blocked_line):
        edges = [Edge(source_id="a", target_id="b"), Edge(source_id="a", target_id="mid")]

        bent = EdgeRouter().route(edges, blocked_line)

        assert bent == 1
        assert len(edges[0].waypoints) == RoutingConfig().segments - 1
        assert edges[1].waypoints == []

    def test_push_side_follows_obstacle(self):
        """A node above the line pushes the route downwards."""
        nodes = {
            "a": _node("a", 0.0, 0.0),
            "b": _node("b", 1000.0, 0.0),
            "above": _node("above", 500.0, 40.0, width=200.0, height=100.0),
        }
        edge = Edge(source_id="a", target_id="b")
        EdgeRouter().route([edge], nodes)

        assert edge.waypoints
        assert all(y <= 0.0 for _, y in edge.waypoints)
        assert min(y for _, y in edge.waypoints) == pytest.approx(40.0 - 50.0 - 50.0)

    def test_zero_length_edge(self):
        a = _node("a", 0.0, 0.0)
        b = _node("b", 0.0, 0.0)
        assert EdgeRouter().route_edge(a, b, []) == []
