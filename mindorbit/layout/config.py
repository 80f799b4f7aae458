"""
Layout Configuration

Every tunable named by the layout stages lives here, grouped per stage, with
the defaults the mind map renderer was tuned against. Configs are frozen so
a preset can be shared between concurrent runs; per-call changes go through
``LayoutConfig.with_overrides`` which returns a new object.

Units are canvas units (the renderer's pixels) and radians unless a field
name says otherwise.
"""

import logging
import math
from dataclasses import dataclass, field, fields, replace, asdict
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple, Union

import yaml

logger = logging.getLogger(__name__)


class SectorWeighting(Enum):
    """How the circle is shared among top-level branches."""
    UNIFORM = "uniform"    # Equal span per branch
    SUBTREE = "subtree"    # Span proportional to descendant count


@dataclass(frozen=True)
class DimensionProfile:
    """Box sizing rule for one tree level."""
    char_width: float
    padding: float
    min_width: float
    max_width: float
    height: float


THEME_PROFILE = DimensionProfile(char_width=10.0, padding=50.0, min_width=300.0,
                                 max_width=550.0, height=140.0)
FINDING_PROFILE = DimensionProfile(char_width=8.0, padding=45.0, min_width=280.0,
                                   max_width=500.0, height=180.0)
LEAF_PROFILE = DimensionProfile(char_width=7.0, padding=35.0, min_width=250.0,
                                max_width=450.0, height=100.0)


@dataclass(frozen=True)
class DimensionConfig:
    """Node box estimation (levels >= 3 share the last profile)."""
    root_width: float = 700.0
    root_height: float = 250.0
    # profiles[0] is level 1, profiles[1] level 2, ...
    profiles: Tuple[DimensionProfile, ...] = (THEME_PROFILE, FINDING_PROFILE, LEAF_PROFILE)


@dataclass(frozen=True)
class RadialConfig:
    """Sector allocation and arc-length packing for the radial strategy."""
    # Ring radii: R1 (themes), R2 (findings), R3 (deeper items)
    ring_radii: Tuple[float, ...] = (650.0, 1100.0, 1600.0)
    ring_step: float = 500.0  # Added per level beyond the last configured ring
    ring_separation: float = 120.0  # Min radial gap between consecutive rings

    # Sector allocation
    start_angle: float = 0.0  # Mid angle of the first sector
    sector_gap: float = 0.08  # Gap between neighbouring sectors
    min_sector_span: float = 0.25  # Avoid razor thin sectors
    weighting: SectorWeighting = SectorWeighting.UNIFORM

    # Auto-balancing of dense branches
    max_children_per_branch: int = 12
    split_min_children: int = 16  # Only split above this many children

    # Second ring (findings) packing inside the sector
    sector_utilization: float = 0.55  # Deliberately under-filled for whitespace
    min_utilization: float = 0.5
    max_utilization: float = 0.8
    sibling_gap: float = 50.0  # Linear gap between neighbouring boxes
    radius_padding: float = 40.0  # Extra outward padding after the radius fit
    max_radius_inflate: float = 900.0  # Cap on growth above the base ring

    # Deeper rings, packed around the parent's angle
    child_gap: float = 30.0
    child_clearance: float = 260.0  # Beyond the parent's outer half-width
    child_spread_deg: float = 50.0  # Total spread for one parent's children

    # Deterministic jitter
    radial_jitter: float = 0.01  # Outward only, fraction of radius
    angular_jitter: float = 0.004  # Total angular wobble


@dataclass(frozen=True)
class CollisionConfig:
    """Per-level overlap removal after packing."""
    margin: float = 34.0  # Extra spacing beyond pure rectangle separation
    push_step: float = 28.0  # Radial push per overlap resolution
    max_iterations: int = 60  # Full passes per level
    settle_remaining: bool = True  # Angle-ordered sweep for overlaps left after the passes


@dataclass(frozen=True)
class ForceConfig:
    """Physics parameters for the force-directed strategy."""
    # Force strengths
    repulsion_strength: float = 30000.0
    attraction_strength: float = 0.05
    centering_strength: float = 0.002
    hierarchy_strength: float = 0.05
    close_repulsion_multiplier: float = 3.0  # Applied inside min_node_distance

    # Physics parameters
    damping: float = 0.85
    time_step: float = 1.0
    max_iterations: int = 400
    convergence_threshold: float = 0.1  # Max per-node force to stop
    child_mass: float = 0.5  # Mass added per child (base mass is 1)

    # Layout parameters
    ideal_link_length: float = 350.0
    level_separation: float = 350.0  # Ideal ring radius per level
    min_node_distance: float = 180.0
    repulsion_cutoff: float = 0.0  # 0 = all pairs; >0 enables the spatial grid

    # Initial placement
    initial_ring_offset: float = 0.8  # Ring = ideal_link_length * (level + offset)
    initial_radius_jitter: float = 0.15  # Fraction of ring radius
    initial_angle_jitter: float = 0.3  # Radians
    zero_distance_nudge: float = 10.0  # Max nudge for coincident nodes


@dataclass(frozen=True)
class RoutingConfig:
    """Obstacle-avoiding edge waypoints."""
    enabled: bool = True
    segments: int = 5  # Interior points = segments - 1
    clearance: float = 50.0  # Kept around third-party node boxes
    max_passes: int = 3


@dataclass(frozen=True)
class LayoutConfig:
    """Complete configuration for one layout run."""
    dimensions: DimensionConfig = field(default_factory=DimensionConfig)
    radial: RadialConfig = field(default_factory=RadialConfig)
    collision: CollisionConfig = field(default_factory=CollisionConfig)
    force: ForceConfig = field(default_factory=ForceConfig)
    routing: RoutingConfig = field(default_factory=RoutingConfig)
    bounds_padding: float = 200.0

    def ring_radius(self, level: int) -> float:
        """Notional ring radius for a level of the radial strategy."""
        radii = self.radial.ring_radii
        if level <= 0:
            return 0.0
        if level <= len(radii):
            return radii[level - 1]
        return radii[-1] + (level - len(radii)) * self.radial.ring_step

    def validate(self) -> "LayoutConfig":
        """Reject settings that would make the geometry degenerate."""
        r = self.radial
        if not r.ring_radii or any(b <= a for a, b in zip(r.ring_radii, r.ring_radii[1:])):
            raise ValueError(f"ring_radii must be non-empty and increasing: {r.ring_radii}")
        if r.ring_radii[0] <= 0:
            raise ValueError("ring_radii must be positive")
        if not 0 < r.min_utilization <= r.max_utilization < 1:
            raise ValueError(
                "Utilization bounds must satisfy 0 < min <= max < 1, got "
                f"{r.min_utilization}..{r.max_utilization}"
            )
        if r.sector_gap < 0 or r.sector_gap >= 2 * math.pi:
            raise ValueError(f"sector_gap out of range: {r.sector_gap}")
        if r.max_children_per_branch < 1:
            raise ValueError("max_children_per_branch must be >= 1")
        if not self.dimensions.profiles:
            raise ValueError("At least one dimension profile is required")
        if self.collision.push_step <= 0:
            raise ValueError("collision push_step must be positive")
        if not 0 < self.force.damping < 1:
            raise ValueError(f"damping must be in (0, 1), got {self.force.damping}")
        if self.routing.segments < 1:
            raise ValueError("routing segments must be >= 1")
        return self

    def with_overrides(self, overrides: Mapping[str, Any]) -> "LayoutConfig":
        """Return a copy with nested overrides applied.

        Example:
            config.with_overrides({"radial": {"ring_radii": [700, 1200, 1700]},
                                   "bounds_padding": 100})
        """
        changes: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in _SECTIONS and key != "bounds_padding":
                raise ValueError(f"Unknown config section '{key}'")
            if key == "bounds_padding":
                changes[key] = float(value)
                continue
            if not isinstance(value, Mapping):
                raise ValueError(f"Config section '{key}' must be a mapping")
            changes[key] = _apply_section(getattr(self, key), value, key)
        return replace(self, **changes).validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain types (for YAML/JSON dumps)."""
        data = asdict(self)
        data["radial"]["weighting"] = self.radial.weighting.value
        data["radial"]["ring_radii"] = list(self.radial.ring_radii)
        data["dimensions"]["profiles"] = [asdict(p) for p in self.dimensions.profiles]
        return data


_SECTIONS = ("dimensions", "radial", "collision", "force", "routing")


def _coerce(section: str, name: str, current: Any, value: Any) -> Any:
    """Convert a plain override value to the type of the field it replaces."""
    if isinstance(current, Enum):
        return type(current)(value) if not isinstance(value, Enum) else value
    if section == "dimensions" and name == "profiles":
        return tuple(p if isinstance(p, DimensionProfile) else DimensionProfile(**p)
                     for p in value)
    if isinstance(current, tuple):
        return tuple(float(v) for v in value)
    if isinstance(current, bool):
        return bool(value)
    if isinstance(current, int):
        return int(value)
    if isinstance(current, float):
        return float(value)
    return value


def _apply_section(obj: Any, values: Mapping[str, Any], section: str) -> Any:
    known = {f.name for f in fields(obj)}
    changes = {}
    for name, value in values.items():
        if name not in known:
            raise ValueError(f"Unknown option '{section}.{name}'")
        changes[name] = _coerce(section, name, getattr(obj, name), value)
    return replace(obj, **changes)


# Pre-defined presets

DEFAULT_LAYOUT = LayoutConfig()

COMPACT_LAYOUT = LayoutConfig(
    radial=RadialConfig(
        ring_radii=(520.0, 900.0, 1300.0),
        ring_step=400.0,
        ring_separation=90.0,
        sibling_gap=35.0,
        radius_padding=25.0,
        max_radius_inflate=700.0,
        child_gap=20.0,
        child_clearance=200.0,
    ),
    collision=CollisionConfig(margin=24.0, push_step=20.0, max_iterations=80),
    force=ForceConfig(ideal_link_length=280.0, level_separation=280.0,
                      min_node_distance=150.0),
    routing=RoutingConfig(clearance=35.0),
    bounds_padding=120.0,
)

SPACIOUS_LAYOUT = LayoutConfig(
    radial=RadialConfig(
        ring_radii=(800.0, 1400.0, 2000.0),
        ring_step=600.0,
        ring_separation=160.0,
        sibling_gap=70.0,
        radius_padding=60.0,
        max_radius_inflate=1200.0,
        child_gap=45.0,
        child_clearance=320.0,
        sector_utilization=0.5,
    ),
    collision=CollisionConfig(margin=48.0, push_step=32.0, max_iterations=60),
    force=ForceConfig(ideal_link_length=450.0, level_separation=450.0,
                      min_node_distance=240.0, repulsion_strength=45000.0),
    routing=RoutingConfig(clearance=70.0),
    bounds_padding=300.0,
)

PRESETS: Dict[str, LayoutConfig] = {
    "default": DEFAULT_LAYOUT,
    "compact": COMPACT_LAYOUT,
    "spacious": SPACIOUS_LAYOUT,
}


def get_preset(name: str) -> LayoutConfig:
    """
    Get a layout preset by name.

    Raises:
        ValueError: If the preset name is not found
    """
    if name not in PRESETS:
        available = ", ".join(sorted(PRESETS.keys()))
        raise ValueError(f"Unknown layout preset '{name}'. Available: {available}")
    return PRESETS[name]


def list_presets() -> List[str]:
    """List all available preset names."""
    return sorted(PRESETS.keys())


def load_config(path: Union[str, Path]) -> LayoutConfig:
    """Load a config from YAML.

    The file holds an optional ``preset`` name plus nested overrides::

        preset: compact
        radial:
          weighting: subtree
        collision:
          max_iterations: 100
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")

    base = get_preset(data.pop("preset", "default"))
    config = base.with_overrides(data)
    logger.debug("Loaded layout config from %s", path)
    return config
