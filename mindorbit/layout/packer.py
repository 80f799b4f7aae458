"""
Arc-Length Packing

Places a row of same-level boxes along an arc. Since arc length is
approximately ``radius * angle``, the smallest radius at which ``n`` boxes
of known widths (plus ``n - 1`` linear gaps) fit into an angular budget is

    r = (sum(width_i) + (n - 1) * gap) / budget

The radius is clamped between a base ring and a maximum inflation so very
dense rows cannot push the ring out without bound. A sector row is the
exception: it may grow past the cap so it never spills into a neighbouring
sector. Whatever still collides afterwards is left to the collision
resolver. Box widths are then turned
into angular widths at that radius and the row is laid out contiguously,
centered on an anchor angle, with a little deterministic jitter.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..tree.abstraction import ContentNode
from .config import RadialConfig
from .dimensions import DimensionEstimator
from .geometry import LayoutNode
from .jitter import DeterministicRandom
from .sectors import Sector

logger = logging.getLogger(__name__)


@dataclass
class PackResult:
    """Nodes placed by one packing call."""
    nodes: List[LayoutNode] = field(default_factory=list)
    radius: float = 0.0  # Ring radius before jitter
    angle_used: float = 0.0  # Total angle covered, gaps included


def required_radius(widths: Sequence[float], gap: float, budget: float) -> float:
    """Minimum radius at which the row fits into ``budget`` radians."""
    if not widths or budget <= 0:
        return 0.0
    arc_length = sum(widths) + gap * (len(widths) - 1)
    return arc_length / budget


class ArcLengthPacker:
    """Arc-length packer shared by every ring beyond the first."""

    def __init__(self, config: RadialConfig, estimator: DimensionEstimator,
                 rng: DeterministicRandom):
        self.config = config
        self.estimator = estimator
        self.rng = rng

    def sector_budget(self, sector: Sector) -> float:
        """Angular budget inside a sector, never the full span."""
        utilization = min(
            self.config.max_utilization,
            max(self.config.min_utilization, self.config.sector_utilization),
        )
        return sector.span * utilization

    def pack_sector(self, sector: Sector, children: Sequence[ContentNode],
                    base_radius: float) -> PackResult:
        """Pack a branch's children inside its sector (second ring)."""
        return self.pack(
            anchor_angle=sector.mid,
            budget=self.sector_budget(sector),
            children=children,
            base_radius=base_radius,
            gap=self.config.sibling_gap,
            padding=self.config.radius_padding,
            max_angle=sector.span,
        )

    def pack_around(self, parent: LayoutNode, children: Sequence[ContentNode],
                    clearance: float) -> PackResult:
        """Pack children around their parent's angle, at least ``clearance``
        from the origin (third ring and beyond)."""
        return self.pack(
            anchor_angle=parent.angle,
            budget=math.radians(self.config.child_spread_deg),
            children=children,
            base_radius=clearance,
            gap=self.config.child_gap,
        )

    def pack(self, anchor_angle: float, budget: float,
             children: Sequence[ContentNode], base_radius: float,
             gap: float, padding: float = 0.0,
             max_angle: Optional[float] = None) -> PackResult:
        """Lay ``children`` out on one arc centred on ``anchor_angle``.

        When ``max_angle`` is given the row never covers more than that,
        even if the radius has to grow past the inflation cap.
        """
        if not children:
            return PackResult()

        sizes = [self.estimator.estimate(c.level, len(c.text)) for c in children]
        widths = [s.width for s in sizes]

        radius = required_radius(widths, gap, budget)
        max_radius = base_radius + self.config.max_radius_inflate
        radius = min(max(radius, base_radius), max_radius)
        if max_angle is not None:
            radius = max(radius, required_radius(widths, gap, max_angle))
        radius += padding

        angle_widths = [w / radius for w in widths]
        gap_angle = gap / radius
        total_angle = sum(angle_widths) + gap_angle * (len(children) - 1)

        result = PackResult(radius=radius, angle_used=total_angle)
        cursor = anchor_angle - total_angle / 2
        for child, size, angle_width in zip(children, sizes, angle_widths):
            center = cursor + angle_width / 2
            r = radius * (1.0 + self.config.radial_jitter * self.rng.random())
            theta = center + self.rng.centered(self.config.angular_jitter)
            result.nodes.append(LayoutNode(
                id=child.id,
                x=r * math.cos(theta),
                y=r * math.sin(theta),
                width=size.width,
                height=size.height,
                level=child.level,
                source=child,
            ))
            cursor += angle_width + gap_angle

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Packed %d nodes at r=%.1f (base=%.1f) anchor=%.4f angle=%.4f budget=%.4f",
                len(children), radius, base_radius, anchor_angle, total_angle, budget,
            )
        return result
