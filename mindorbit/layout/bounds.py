"""Axis-aligned extents of a finished layout, for viewport fitting."""

from dataclasses import dataclass
from typing import Dict, Iterable

from .geometry import LayoutNode


@dataclass(frozen=True)
class Bounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self):
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def to_dict(self) -> Dict[str, float]:
        return {
            "min_x": self.min_x,
            "min_y": self.min_y,
            "max_x": self.max_x,
            "max_y": self.max_y,
        }


def compute_bounds(nodes: Iterable[LayoutNode], padding: float = 200.0) -> Bounds:
    """Union of every node box, inflated by ``padding``.

    An empty layout gives a padded box around the origin.
    """
    min_x = min_y = float("inf")
    max_x = max_y = float("-inf")

    for node in nodes:
        half_w = node.width / 2
        half_h = node.height / 2
        min_x = min(min_x, node.x - half_w)
        min_y = min(min_y, node.y - half_h)
        max_x = max(max_x, node.x + half_w)
        max_y = max(max_y, node.y + half_h)

    if min_x == float("inf"):
        min_x = min_y = max_x = max_y = 0.0

    return Bounds(
        min_x=min_x - padding,
        min_y=min_y - padding,
        max_x=max_x + padding,
        max_y=max_y + padding,
    )
