"""
Radial Orbital Layout

Deterministic mind map layout: the root sits at the origin, themes on the
first ring (one sector each), findings arc-packed inside their theme's
sector, and every deeper level arc-packed around its parent's angle.

Rings are built outward one level at a time and each level is collision
resolved before the next is placed, so the next ring's floor can be taken
from the previous ring's actual extent. That keeps ring ordering intact
even when dense levels had to be pushed outward.
"""

import logging
import math
import warnings
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..tree.abstraction import ContentNode, DegenerateInputWarning, TreeIndex, validate_tree
from .collision import CollisionResolver, CollisionResult
from .config import LayoutConfig
from .dimensions import DimensionEstimator
from .geometry import LayoutNode
from .jitter import DeterministicRandom
from .packer import ArcLengthPacker
from .sectors import BranchAllocation, SectorAllocator

logger = logging.getLogger(__name__)


@dataclass
class RadialLayoutState:
    """Output of one radial layout run."""
    nodes: Dict[str, LayoutNode] = field(default_factory=dict)
    allocations: List[BranchAllocation] = field(default_factory=list)
    ring_radii: Dict[int, float] = field(default_factory=dict)  # Max radius per level
    collisions: CollisionResult = field(default_factory=CollisionResult)
    warnings: List[str] = field(default_factory=list)


class RadialOrbitalLayout:
    """Sector allocation + arc-length packing + collision resolution."""

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()
        self.estimator = DimensionEstimator(self.config.dimensions)
        self.allocator = SectorAllocator(self.config.radial)
        self.resolver = CollisionResolver(self.config.collision)

    def calculate(self, root: ContentNode,
                  index: Optional[TreeIndex] = None) -> RadialLayoutState:
        if index is None:
            index = validate_tree(root)
        state = RadialLayoutState()
        # One generator per run, seeded from the root so re-runs are identical
        rng = DeterministicRandom.from_key(root.id)
        packer = ArcLengthPacker(self.config.radial, self.estimator, rng)
        placed: Dict[str, LayoutNode] = {}

        root_size = self.estimator.estimate(0, len(root.text))
        placed[root.id] = LayoutNode(
            id=root.id, x=0.0, y=0.0,
            width=root_size.width, height=root_size.height,
            level=0, source=root,
        )
        state.ring_radii[0] = 0.0

        if not root.children:
            self._warn(state, f"Root {root.id!r} has no branches; only the root is placed")
        else:
            self._place_themes(root, placed, state)
            self._place_findings(placed, state, packer)
            self._place_deeper_levels(index, placed, state, packer)

        # Emit in breadth-first input order for stable iteration downstream
        state.nodes = {node_id: placed[node_id] for node_id in index.order}

        logger.info(
            "Radial layout: %d nodes, %d sectors, %d collision pushes",
            len(state.nodes), len(state.allocations), state.collisions.pushes,
        )
        return state

    def _place_themes(self, root: ContentNode, placed: Dict[str, LayoutNode],
                      state: RadialLayoutState):
        state.allocations = self.allocator.allocate_branches(root)
        angles = self.allocator.branch_angles(state.allocations)
        r1 = self.config.ring_radius(1)

        ring = []
        for theme in root.children:
            theta = angles[theme.id]
            size = self.estimator.estimate(theme.level, len(theme.text))
            node = LayoutNode(
                id=theme.id,
                x=r1 * math.cos(theta),
                y=r1 * math.sin(theta),
                width=size.width,
                height=size.height,
                level=theme.level,
                source=theme,
            )
            placed[theme.id] = node
            ring.append(node)

        self._finish_ring(1, ring, state)

    def _place_findings(self, placed: Dict[str, LayoutNode], state: RadialLayoutState,
                        packer: ArcLengthPacker):
        floor = max(
            self.config.ring_radius(2),
            state.ring_radii[1] + self.config.radial.ring_separation,
        )

        ring = []
        for allocation in state.allocations:
            branch = allocation.branch
            if not branch.children:
                self._warn(state, f"Branch {branch.node.id!r} has no children")
                continue
            packed = packer.pack_sector(allocation.sector, branch.children, floor)
            for node in packed.nodes:
                placed[node.id] = node
                ring.append(node)

        if ring:
            self._finish_ring(2, ring, state)

    def _place_deeper_levels(self, index: TreeIndex, placed: Dict[str, LayoutNode],
                             state: RadialLayoutState, packer: ArcLengthPacker):
        level = 2
        while level in state.ring_radii and level < index.max_level:
            next_level = level + 1
            floor = max(
                self.config.ring_radius(next_level),
                state.ring_radii[level] + self.config.radial.ring_separation,
            )

            ring = []
            for parent_content in index.nodes_at_level(level):
                if not parent_content.children:
                    continue
                parent = placed[parent_content.id]
                clearance = max(
                    parent.radius + parent.width / 2 + self.config.radial.child_clearance,
                    floor,
                )
                packed = packer.pack_around(parent, parent_content.children, clearance)
                for node in packed.nodes:
                    placed[node.id] = node
                    ring.append(node)

            if not ring:
                break
            self._finish_ring(next_level, ring, state)
            level = next_level

    def _finish_ring(self, level: int, ring: List[LayoutNode], state: RadialLayoutState):
        """Resolve collisions for a freshly placed ring and record its extent."""
        state.collisions.merge(self.resolver.resolve_level(ring))
        state.ring_radii[level] = max(node.radius for node in ring)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Ring %d: %d nodes, min_r=%.1f max_r=%.1f",
                level, len(ring), min(n.radius for n in ring), state.ring_radii[level],
            )

    @staticmethod
    def _warn(state: RadialLayoutState, message: str):
        state.warnings.append(message)
        logger.warning(message)
        warnings.warn(message, DegenerateInputWarning, stacklevel=3)

