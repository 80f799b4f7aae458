"""Layout engines: radial orbital and force-directed."""

from .bounds import Bounds, compute_bounds
from .collision import CollisionResolver, CollisionResult
from .config import (
    CollisionConfig,
    DimensionConfig,
    DimensionProfile,
    ForceConfig,
    LayoutConfig,
    RadialConfig,
    RoutingConfig,
    SectorWeighting,
    get_preset,
    list_presets,
    load_config,
)
from .dimensions import DimensionEstimator, NodeSize
from .engine import LayoutResult, LayoutStrategy, compute_layout
from .force_directed import ForceDirectedLayout, ForceLayoutState
from .geometry import Edge, EdgeKind, LayoutNode
from .radial import RadialLayoutState, RadialOrbitalLayout
from .routing import EdgeRouter
from .sectors import Sector, SectorAllocator

__all__ = [
    "Bounds",
    "compute_bounds",
    "CollisionResolver",
    "CollisionResult",
    "CollisionConfig",
    "DimensionConfig",
    "DimensionProfile",
    "ForceConfig",
    "LayoutConfig",
    "RadialConfig",
    "RoutingConfig",
    "SectorWeighting",
    "get_preset",
    "list_presets",
    "load_config",
    "DimensionEstimator",
    "NodeSize",
    "LayoutResult",
    "LayoutStrategy",
    "compute_layout",
    "ForceDirectedLayout",
    "ForceLayoutState",
    "Edge",
    "EdgeKind",
    "LayoutNode",
    "RadialLayoutState",
    "RadialOrbitalLayout",
    "EdgeRouter",
    "Sector",
    "SectorAllocator",
]
