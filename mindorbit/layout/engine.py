"""
Layout Engine

Single entry point over both strategies. Input is a content tree (plus
optional cross-links); output is a LayoutResult with one positioned box per
node, the edges, a padded bounding rectangle and run diagnostics.
"""

import logging
import warnings
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..tree.abstraction import (
    ContentNode,
    DegenerateInputWarning,
    validate_cross_links,
    validate_tree,
)
from .bounds import Bounds, compute_bounds
from .collision import CollisionResolver, CollisionResult
from .config import DEFAULT_LAYOUT, LayoutConfig
from .dimensions import DimensionEstimator
from .force_directed import ForceDirectedLayout
from .geometry import Edge, EdgeKind, LayoutNode
from .radial import RadialOrbitalLayout
from .routing import EdgeRouter

logger = logging.getLogger(__name__)


class LayoutStrategy(Enum):
    """Which engine positions the nodes."""
    RADIAL = "radial"  # Deterministic sectors and rings
    FORCE = "force"    # Physics simulation, supports cross-links


@dataclass
class LayoutResult:
    """Positions, edges and bounds for one tree."""
    nodes: Dict[str, LayoutNode]
    bounds: Bounds
    edges: List[Edge] = field(default_factory=list)
    strategy: LayoutStrategy = LayoutStrategy.RADIAL
    converged: bool = True
    max_force: float = 0.0
    iterations: int = 0
    collisions: Optional[CollisionResult] = None
    warnings: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)

    def position(self, node_id: str) -> Tuple[float, float]:
        node = self.nodes[node_id]
        return (node.x, node.y)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable output contract for renderers."""
        data: Dict[str, Any] = {
            "strategy": self.strategy.value,
            "nodes": {node_id: node.to_dict() for node_id, node in self.nodes.items()},
            "bounds": self.bounds.to_dict(),
            "edges": [edge.to_dict() for edge in self.edges],
        }
        if self.strategy == LayoutStrategy.FORCE:
            data["converged"] = self.converged
            data["max_force"] = self.max_force
            data["iterations"] = self.iterations
        if self.collisions is not None:
            data["collisions"] = {
                "pushes": self.collisions.pushes,
                "remaining": self.collisions.final_overlaps,
            }
        if self.warnings:
            data["warnings"] = list(self.warnings)
        return data


def structural_edges(root: ContentNode) -> List[Edge]:
    """Parent -> child edges in breadth-first order."""
    return [
        Edge(source_id=node.id, target_id=child.id)
        for node in root.walk()
        for child in node.children
    ]


def compute_layout(
    root: ContentNode,
    strategy: Union[LayoutStrategy, str] = LayoutStrategy.RADIAL,
    config: Optional[LayoutConfig] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    cross_links: Sequence[Tuple[str, str]] = (),
    route_edges: Optional[bool] = None,
) -> LayoutResult:
    """
    Lay out a content tree.

    Args:
        root: Root of the content tree (level 0)
        strategy: LayoutStrategy or its value ("radial" / "force")
        config: Base configuration, defaults to the "default" preset
        overrides: Nested per-call overrides, see LayoutConfig.with_overrides
        cross_links: Extra (source_id, target_id) relations between nodes
        route_edges: Bend edges around node boxes. Defaults to the routing
            config for the force strategy and off for the radial one.

    Returns:
        LayoutResult with exactly one entry per tree node

    Raises:
        MalformedTreeError: If the tree or a cross-link is invalid
        ValueError: If the strategy or an override is unknown
    """
    strategy = LayoutStrategy(strategy)
    config = config or DEFAULT_LAYOUT
    if overrides:
        config = config.with_overrides(overrides)

    index = validate_tree(root)
    links = validate_cross_links(index, cross_links)

    if strategy == LayoutStrategy.RADIAL:
        radial = RadialOrbitalLayout(config).calculate(root, index)
        edges = structural_edges(root)
        edges.extend(Edge(source_id=a, target_id=b, kind=EdgeKind.CROSS_LINK)
                     for a, b in links)
        result = LayoutResult(
            nodes=radial.nodes,
            bounds=compute_bounds(radial.nodes.values(), config.bounds_padding),
            edges=edges,
            strategy=strategy,
            collisions=radial.collisions,
            warnings=list(radial.warnings),
        )
        should_route = bool(route_edges)
    else:
        estimator = DimensionEstimator(config.dimensions)
        forced = ForceDirectedLayout(config.force, estimator).calculate(root, links, index)
        nodes = forced.layout_nodes()
        audit = CollisionResolver(config.collision).audit(nodes.values())
        if audit.final_overlaps:
            logger.warning(
                "Force layout left %d same-level overlaps (first: %s/%s)",
                audit.final_overlaps, *audit.unresolved[0],
            )
        result = LayoutResult(
            nodes=nodes,
            bounds=compute_bounds(nodes.values(), config.bounds_padding),
            edges=forced.edges,
            strategy=strategy,
            converged=forced.converged,
            max_force=forced.max_force,
            iterations=forced.iterations,
            collisions=audit,
        )
        if not root.children:
            message = f"Root {root.id!r} has no branches; only the root is placed"
            result.warnings.append(message)
            logger.warning(message)
            warnings.warn(message, DegenerateInputWarning, stacklevel=2)
        should_route = config.routing.enabled if route_edges is None else route_edges

    if should_route:
        EdgeRouter(config.routing).route(result.edges, result.nodes)

    logger.info(
        "Layout (%s): %d nodes, %d edges, bounds %.0fx%.0f",
        strategy.value, len(result.nodes), len(result.edges),
        result.bounds.width, result.bounds.height,
    )
    return result
