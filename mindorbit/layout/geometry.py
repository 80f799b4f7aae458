"""
Layout geometry shared by both strategies.

LayoutNode is the per-node output record: a box of known size centered on
(x, y). Positions are only mutated by the stage that owns them during a
run (packing, collision resolution, simulation); once a LayoutResult is
returned the records are treated as read-only.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..tree.abstraction import ContentNode


@dataclass
class LayoutNode:
    """Placed node: center position, box size and originating content node."""
    id: str
    x: float
    y: float
    width: float
    height: float
    level: int
    source: Optional[ContentNode] = field(default=None, repr=False, compare=False)

    @property
    def radius(self) -> float:
        """Distance from the origin."""
        return math.hypot(self.x, self.y)

    @property
    def angle(self) -> float:
        """Polar angle in (-pi, pi]."""
        return math.atan2(self.y, self.x)

    def get_bounding_box(self, margin: float = 0.0) -> Tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y), optionally inflated by ``margin``."""
        hw = self.width / 2 + margin
        hh = self.height / 2 + margin
        return (self.x - hw, self.y - hh, self.x + hw, self.y + hh)

    def overlap_values(self, other: "LayoutNode",
                       margin: float = 0.0) -> Optional[Tuple[float, float]]:
        """Overlap amounts along x and y, or None if the boxes are apart.

        ``margin`` is the extra separation required between the two boxes.
        Boxes that merely touch do not overlap.
        """
        sep_x = (self.width + other.width) / 2 + margin
        sep_y = (self.height + other.height) / 2 + margin
        overlap_x = sep_x - abs(self.x - other.x)
        overlap_y = sep_y - abs(self.y - other.y)
        if overlap_x > 0 and overlap_y > 0:
            return (overlap_x, overlap_y)
        return None

    def overlaps(self, other: "LayoutNode", margin: float = 0.0) -> bool:
        return self.overlap_values(other, margin) is not None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "level": self.level,
        }
        if self.source is not None and self.source.metadata:
            d["metadata"] = dict(self.source.metadata)
        return d


class EdgeKind(Enum):
    """Why two nodes are connected."""
    STRUCTURAL = "structural"  # parent -> child
    CROSS_LINK = "cross_link"  # extra relation between any two nodes


@dataclass
class Edge:
    """Connector between two nodes; empty waypoints means a straight line."""
    source_id: str
    target_id: str
    waypoints: List[Tuple[float, float]] = field(default_factory=list)
    kind: EdgeKind = EdgeKind.STRUCTURAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_id": self.source_id,
            "target_id": self.target_id,
            "waypoints": [[x, y] for x, y in self.waypoints],
            "kind": self.kind.value,
        }
