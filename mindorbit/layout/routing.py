"""
Edge Routing

Bends connectors around node boxes they would otherwise cross. Each edge is
sampled at evenly spaced interior points; a sample that falls inside a
third-party node (expanded by a clearance) is pushed perpendicular to the
edge, away from that node, onto the expanded box boundary. Edges with no
pushed sample stay straight (empty waypoints).
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .config import RoutingConfig
from .geometry import Edge, LayoutNode

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass(frozen=True)
class Obstacle:
    """Axis-aligned box a connector must not pass through."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float
    node_id: Optional[str] = None

    @classmethod
    def from_node(cls, node: LayoutNode) -> "Obstacle":
        min_x, min_y, max_x, max_y = node.get_bounding_box()
        return cls(min_x, min_y, max_x, max_y, node_id=node.id)

    @property
    def center(self) -> Point:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def expanded(self, margin: float) -> "Obstacle":
        """Return new obstacle expanded by margin on all sides."""
        return Obstacle(
            min_x=self.min_x - margin,
            min_y=self.min_y - margin,
            max_x=self.max_x + margin,
            max_y=self.max_y + margin,
            node_id=self.node_id,
        )

    def contains_point(self, x: float, y: float) -> bool:
        """Strictly inside; points on the boundary are clear."""
        return self.min_x < x < self.max_x and self.min_y < y < self.max_y

    def exit_distance(self, x: float, y: float, ux: float, uy: float) -> float:
        """Distance along unit direction (ux, uy) to leave the box from (x, y)."""
        candidates = []
        if ux > 0:
            candidates.append((self.max_x - x) / ux)
        elif ux < 0:
            candidates.append((self.min_x - x) / ux)
        if uy > 0:
            candidates.append((self.max_y - y) / uy)
        elif uy < 0:
            candidates.append((self.min_y - y) / uy)
        return max(0.0, min(candidates)) if candidates else 0.0


class EdgeRouter:
    """Compute waypoints for edges over a finished node layout."""

    def __init__(self, config: Optional[RoutingConfig] = None):
        self.config = config or RoutingConfig()

    def route(self, edges: Iterable[Edge], nodes: Dict[str, LayoutNode]) -> int:
        """Fill ``waypoints`` on every edge in place.

        Returns:
            Number of edges that needed bending
        """
        obstacles = [
            Obstacle.from_node(nodes[node_id]).expanded(self.config.clearance)
            for node_id in sorted(nodes)
        ]

        bent = 0
        total = 0
        for edge in edges:
            total += 1
            edge.waypoints = self.route_edge(
                nodes[edge.source_id], nodes[edge.target_id], obstacles,
            )
            if edge.waypoints:
                bent += 1

        logger.debug("Routed %d edges, %d bent around obstacles", total, bent)
        return bent

    def route_edge(self, source: LayoutNode, target: LayoutNode,
                   obstacles: List[Obstacle]) -> List[Point]:
        dx = target.x - source.x
        dy = target.y - source.y
        length = math.hypot(dx, dy)
        if length == 0:
            return []

        # Unit normal to the edge
        nx, ny = -dy / length, dx / length
        blockers = [o for o in obstacles if o.node_id not in (source.id, target.id)]

        segments = self.config.segments
        samples = []
        any_pushed = False
        for i in range(1, segments):
            t = i / segments
            point = (source.x + dx * t, source.y + dy * t)
            point, pushed = self._push_clear(point, nx, ny, blockers)
            any_pushed = any_pushed or pushed
            samples.append(point)

        return samples if any_pushed else []

    def _push_clear(self, point: Point, nx: float, ny: float,
                    blockers: List[Obstacle]) -> Tuple[Point, bool]:
        x, y = point
        pushed = False
        for _ in range(self.config.max_passes):
            moved = False
            for obstacle in blockers:
                if not obstacle.contains_point(x, y):
                    continue
                cx, cy = obstacle.center
                side = 1.0 if (x - cx) * nx + (y - cy) * ny >= 0 else -1.0
                ux, uy = nx * side, ny * side
                distance = obstacle.exit_distance(x, y, ux, uy)
                x += ux * distance
                y += uy * distance
                moved = True
            if not moved:
                break
            pushed = True
        return (x, y), pushed
