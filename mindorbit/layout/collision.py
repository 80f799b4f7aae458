"""
Collision Resolution

Deterministic post-pass that removes residual overlaps between nodes of the
same level. It is not a physics solver: for each overlapping pair the node
with the later polar angle is pushed radially outward by a fixed step,
which keeps the orbital structure (angles never change) while opening up
space. Pairs are visited in id order so repeated runs on the same input
produce identical output.

Dense rings can need more passes than the cap allows. Whatever is left is
settled by one sweep in angle order that moves each node outward until it
clears all nodes swept before it.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .config import CollisionConfig
from .geometry import LayoutNode

logger = logging.getLogger(__name__)


@dataclass
class CollisionResult:
    """Statistics of a collision resolution pass."""
    pushes: int = 0  # Radial pushes applied
    iterations_used: int = 0  # Full passes, summed over levels
    final_overlaps: int = 0  # Pairs still overlapping after the cap
    unresolved: List[Tuple[str, str]] = field(default_factory=list)

    def merge(self, other: "CollisionResult") -> "CollisionResult":
        self.pushes += other.pushes
        self.iterations_used += other.iterations_used
        self.final_overlaps += other.final_overlaps
        self.unresolved.extend(other.unresolved)
        return self


def radial_push(node: LayoutNode, delta: float) -> bool:
    """Move a node ``delta`` further from the origin along its own ray."""
    r = node.radius
    if r == 0:
        return False
    scale = (r + delta) / r
    node.x *= scale
    node.y *= scale
    return True


class CollisionResolver:
    """Push overlapping same-level nodes apart, level by level.

    The root (level 0) never moves.
    """

    def __init__(self, config: Optional[CollisionConfig] = None):
        self.config = config or CollisionConfig()

    def resolve(self, nodes: Iterable[LayoutNode]) -> CollisionResult:
        """Resolve overlaps in place, grouping nodes by level."""
        groups: Dict[int, List[LayoutNode]] = {}
        for node in nodes:
            if node.level == 0:
                continue
            groups.setdefault(node.level, []).append(node)

        result = CollisionResult()
        for level in sorted(groups):
            result.merge(self.resolve_level(groups[level]))
        return result

    def audit(self, nodes: Iterable[LayoutNode]) -> CollisionResult:
        """Report same-level overlaps without moving anything."""
        groups: Dict[int, List[LayoutNode]] = {}
        for node in nodes:
            if node.level == 0:
                continue
            groups.setdefault(node.level, []).append(node)

        result = CollisionResult()
        for level in sorted(groups):
            result.unresolved.extend(self.find_overlaps(groups[level]))
        result.final_overlaps = len(result.unresolved)
        return result

    def resolve_level(self, group: List[LayoutNode]) -> CollisionResult:
        """Resolve overlaps inside one group of same-level nodes."""
        result = CollisionResult()
        ordered = sorted(group, key=lambda n: n.id)
        margin = self.config.margin

        any_overlap = True
        for _ in range(self.config.max_iterations):
            result.iterations_used += 1
            any_overlap = False
            for i, a in enumerate(ordered):
                for b in ordered[i + 1:]:
                    if not a.overlaps(b, margin):
                        continue
                    any_overlap = True
                    target = self._push_target(a, b)
                    if radial_push(target, self.config.push_step):
                        result.pushes += 1
            if not any_overlap:
                break

        if any_overlap and self.config.settle_remaining:
            result.pushes += self.settle(ordered)

        result.unresolved = self.find_overlaps(ordered)
        result.final_overlaps = len(result.unresolved)

        if result.final_overlaps:
            logger.warning(
                "Collision resolution left %d overlaps at level %d after %d passes",
                result.final_overlaps, ordered[0].level, result.iterations_used,
            )
        elif logger.isEnabledFor(logging.DEBUG) and ordered:
            logger.debug(
                "Level %d: %d nodes, %d pushes, %d passes",
                ordered[0].level, len(ordered), result.pushes, result.iterations_used,
            )
        return result

    def settle(self, group: List[LayoutNode]) -> int:
        """Sweep the group in angle order, pushing each node outward until it
        clears every node already settled.

        Settled nodes never move again, so the group ends with no overlaps.
        Ties in angle settle the nearer node first, so the farther one moves.

        Returns:
            Number of radial pushes applied
        """
        margin = self.config.margin
        step = self.config.push_step
        pushes = 0
        settled: List[LayoutNode] = []

        for node in sorted(group, key=lambda n: (n.angle, n.radius, n.id)):
            while any(node.overlaps(other, margin) for other in settled):
                if not radial_push(node, step):
                    break
                pushes += 1
            settled.append(node)

        logger.debug("Settled %d nodes with %d extra pushes", len(group), pushes)
        return pushes

    def find_overlaps(self, group: List[LayoutNode]) -> List[Tuple[str, str]]:
        """All overlapping (id, id) pairs in a group, in id order."""
        ordered = sorted(group, key=lambda n: n.id)
        pairs = []
        for i, a in enumerate(ordered):
            for b in ordered[i + 1:]:
                if a.overlaps(b, self.config.margin):
                    pairs.append((a.id, b.id))
        return pairs

    @staticmethod
    def _push_target(a: LayoutNode, b: LayoutNode) -> LayoutNode:
        """The node with the later polar angle; on a tie, the farther one."""
        angle_a, angle_b = a.angle, b.angle
        if angle_a < angle_b:
            target = b
        elif angle_b < angle_a:
            target = a
        else:
            target = b if b.radius > a.radius else a
        if target.radius == 0:
            return a if target is b else b
        return target
