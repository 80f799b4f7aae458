"""Node box estimation from nesting level and label length."""

from dataclasses import dataclass
from typing import Optional

from .config import DimensionConfig, DimensionProfile


@dataclass(frozen=True)
class NodeSize:
    """Width/height of a node box (centered on the node position)."""
    width: float
    height: float

    @property
    def half_width(self) -> float:
        return self.width / 2

    @property
    def half_height(self) -> float:
        return self.height / 2


class DimensionEstimator:
    """Estimate rendered box sizes for every level of the tree.

    Level 0 is a fixed large box; other levels scale with label length
    within per-level bounds. Levels deeper than the table use its last row.
    """

    def __init__(self, config: Optional[DimensionConfig] = None):
        self.config = config or DimensionConfig()

    def profile_for(self, level: int) -> DimensionProfile:
        profiles = self.config.profiles
        index = min(max(level, 1), len(profiles)) - 1
        return profiles[index]

    def estimate(self, level: int, text_length: int) -> NodeSize:
        if level <= 0:
            return NodeSize(self.config.root_width, self.config.root_height)

        profile = self.profile_for(level)
        width = text_length * profile.char_width + profile.padding
        width = min(max(width, profile.min_width), profile.max_width)
        return NodeSize(width, profile.height)


def estimate(level: int, text_length: int,
             config: Optional[DimensionConfig] = None) -> NodeSize:
    """Module-level shortcut for ``DimensionEstimator(config).estimate``."""
    return DimensionEstimator(config).estimate(level, text_length)
