"""
Radial Sector Allocation

Shares the full circle among the root's direct children (the theme tier).
Each branch receives a contiguous angular sector; neighbouring sectors are
separated by a fixed gap. The share is either uniform or proportional to
the size of the branch's subtree.

Dense branches are first split into pseudo-branches (stable chunks in input
order) so no single sector becomes overcrowded. Pseudo-branches only exist
inside the allocator's output: the content tree handed to the renderer is
untouched and the original branch node still gets exactly one position, at
the centre of the angular range covered by its parts.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..tree.abstraction import ContentNode
from .config import RadialConfig, SectorWeighting

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Sector:
    """Angular interval (radians) allocated to one branch."""
    start: float
    end: float
    mid: float
    span: float


@dataclass(frozen=True)
class Branch:
    """A top-level branch as seen by the allocator.

    For a split branch, each part is its own Branch carrying a slice of the
    original children; ``node`` always refers to the original theme node.
    """
    id: str
    label: str
    node: ContentNode
    children: Tuple[ContentNode, ...]
    part: int = 0  # 1-based index for pseudo-branches, 0 when not split
    parts: int = 1

    @property
    def is_pseudo(self) -> bool:
        return self.part > 0

    def weight(self, weighting: SectorWeighting) -> float:
        if weighting == SectorWeighting.UNIFORM:
            return 1.0
        size = sum(1 + child.descendant_count() for child in self.children)
        return float(max(1, size))


@dataclass(frozen=True)
class BranchAllocation:
    branch: Branch
    sector: Sector


def split_branch(node: ContentNode, config: RadialConfig) -> List[Branch]:
    """Split a dense branch into pseudo-branches of at most
    ``max_children_per_branch`` children, keeping input order."""
    children = node.children
    count = len(children)
    if count <= config.split_min_children:
        return [Branch(id=node.id, label=node.text, node=node, children=children)]

    target_parts = math.ceil(count / config.max_children_per_branch)
    chunk_size = math.ceil(count / target_parts)
    chunks = [children[i:i + chunk_size] for i in range(0, count, chunk_size)]

    branches = []
    for part, chunk in enumerate(chunks, start=1):
        branches.append(Branch(
            id=f"{node.id}_part{part}",
            label=f"{node.text} ({part})",
            node=node,
            children=tuple(chunk),
            part=part,
            parts=len(chunks),
        ))

    logger.debug(
        "Split branch %r: %d children -> %d parts of <=%d",
        node.id, count, len(chunks), chunk_size,
    )
    return branches


def balance_branches(root: ContentNode, config: RadialConfig) -> List[Branch]:
    """Top-level branches after auto-balancing."""
    branches: List[Branch] = []
    for theme in root.children:
        branches.extend(split_branch(theme, config))
    return branches


def partition_spans(weights: Sequence[float], available: float,
                    min_span: float) -> List[float]:
    """Share ``available`` radians in proportion to ``weights``.

    Spans below ``min_span`` are raised to it and the remainder is shared
    again among the others. No span is ever below ``min_span``: if the
    minimum cannot be honoured within ``available``, every branch gets
    exactly ``min_span`` and the total overfills.
    """
    n = len(weights)
    if n == 0:
        return []
    if min_span * n >= available:
        return [min_span] * n

    spans = [0.0] * n
    clamped = [False] * n
    while True:
        free = [i for i in range(n) if not clamped[i]]
        remaining = available - min_span * (n - len(free))
        total_weight = sum(weights[i] for i in free)
        for i in free:
            spans[i] = remaining * weights[i] / total_weight

        newly_clamped = [i for i in free if spans[i] < min_span]
        if not newly_clamped:
            return spans
        for i in newly_clamped:
            clamped[i] = True
            spans[i] = min_span


class SectorAllocator:
    """Allocate angular sectors to the root's branches."""

    def __init__(self, config: Optional[RadialConfig] = None):
        self.config = config or RadialConfig()

    def allocate(self, root: ContentNode) -> List[Sector]:
        """One sector per (pseudo-)branch, in placement order."""
        return [a.sector for a in self.allocate_branches(root)]

    def effective_gap(self, count: int) -> float:
        """``sector_gap``, shrunk so ``count`` minimum spans still fit the circle."""
        gap = self.config.sector_gap
        room = 2 * math.pi - count * self.config.min_sector_span
        if count and gap * count > room:
            shrunk = max(0.0, room / count)
            logger.debug("Sector gap %.4f shrunk to %.4f for %d branches", gap, shrunk, count)
            return shrunk
        return gap

    def allocate_branches(self, root: ContentNode) -> List[BranchAllocation]:
        branches = balance_branches(root, self.config)
        if not branches:
            return []

        gap = self.effective_gap(len(branches))
        available = 2 * math.pi - gap * len(branches)
        weights = [b.weight(self.config.weighting) for b in branches]
        spans = partition_spans(weights, available, self.config.min_sector_span)

        allocations = []
        cursor = self.config.start_angle - spans[0] / 2
        for branch, span in zip(branches, spans):
            start = cursor
            end = start + span
            sector = Sector(start=start, end=end, mid=(start + end) / 2, span=span)
            allocations.append(BranchAllocation(branch=branch, sector=sector))
            cursor = end + gap

        if logger.isEnabledFor(logging.DEBUG):
            for a in allocations:
                logger.debug(
                    "Sector %s: start=%.4f end=%.4f span=%.4f children=%d",
                    a.branch.id, a.sector.start, a.sector.end, a.sector.span,
                    len(a.branch.children),
                )
        return allocations

    @staticmethod
    def branch_angles(allocations: Sequence[BranchAllocation]) -> Dict[str, float]:
        """Placement angle per original branch node id.

        Unsplit branches sit at their sector mid; split branches at the
        centre of the range spanned by their parts.
        """
        ranges: Dict[str, Tuple[float, float]] = {}
        for a in allocations:
            node_id = a.branch.node.id
            if node_id in ranges:
                start, _ = ranges[node_id]
                ranges[node_id] = (start, a.sector.end)
            else:
                ranges[node_id] = (a.sector.start, a.sector.end)
        return {node_id: (start + end) / 2 for node_id, (start, end) in ranges.items()}
