"""
Force-Directed Layout

Alternative strategy for graphs a pure hierarchy cannot express (cross-links)
or as a fallback. A physics simulation balances:
- Repulsion between every pair of nodes (inverse square)
- Spring attraction along edges toward an ideal link length
- A hierarchy force pulling each node back to its level's ideal ring
- A weak centering force

The root is fixed at the origin. Initial positions use the run's seeded
generator, so the same tree always settles in the same place.
"""

import logging
import math
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from ..tree.abstraction import ContentNode, TreeIndex, validate_cross_links, validate_tree
from .config import ForceConfig
from .dimensions import DimensionEstimator
from .geometry import Edge, EdgeKind, LayoutNode
from .jitter import DeterministicRandom

logger = logging.getLogger(__name__)


class ForceType(Enum):
    """Types of forces in the simulation."""
    REPULSION = "repulsion"     # Keeps nodes apart
    ATTRACTION = "attraction"   # Pulls linked nodes to the ideal link length
    HIERARCHY = "hierarchy"     # Pulls nodes back to their level's ring
    CENTERING = "centering"     # Weak pull toward the origin


@dataclass
class Force:
    """A force vector with metadata."""
    fx: float
    fy: float
    force_type: ForceType
    magnitude: float = field(init=False)

    def __post_init__(self):
        self.magnitude = math.hypot(self.fx, self.fy)


@dataclass
class ForceNode:
    """Simulation body for one content node."""
    id: str
    x: float
    y: float
    width: float
    height: float
    level: int
    mass: float
    vx: float = 0.0
    vy: float = 0.0
    fixed: Optional[Tuple[float, float]] = None  # Pinned position, if any
    source: Optional[ContentNode] = field(default=None, repr=False)

    @property
    def is_fixed(self) -> bool:
        return self.fixed is not None

    def to_layout_node(self) -> LayoutNode:
        return LayoutNode(
            id=self.id, x=self.x, y=self.y,
            width=self.width, height=self.height,
            level=self.level, source=self.source,
        )


@dataclass
class ForceLayoutState:
    """State of the simulation; final once ``calculate`` returns."""
    nodes: Dict[str, ForceNode] = field(default_factory=dict)
    edges: List[Edge] = field(default_factory=list)
    adjacency: Dict[str, Set[str]] = field(default_factory=dict)
    iterations: int = 0
    max_force: float = math.inf
    converged: bool = False

    def layout_nodes(self) -> Dict[str, LayoutNode]:
        return {node_id: node.to_layout_node() for node_id, node in self.nodes.items()}


class SpatialGrid:
    """Uniform grid for neighbour lookups when repulsion has a cutoff.

    With cell_size equal to the cutoff, any two nodes close enough to repel
    are in the same or adjacent cells.
    """

    def __init__(self, cell_size: float):
        self.cell_size = cell_size
        self._cells: Dict[Tuple[int, int], List[str]] = {}
        self._positions: Dict[str, Tuple[float, float]] = {}

    def _cell_key(self, x: float, y: float) -> Tuple[int, int]:
        return (int(math.floor(x / self.cell_size)),
                int(math.floor(y / self.cell_size)))

    def clear(self):
        self._cells.clear()
        self._positions.clear()

    def insert(self, node_id: str, x: float, y: float):
        self._cells.setdefault(self._cell_key(x, y), []).append(node_id)
        self._positions[node_id] = (x, y)

    def get_neighbors(self, node_id: str) -> List[str]:
        """Ids in the 3x3 neighbourhood that sort after ``node_id``.

        Each unordered pair is therefore reported exactly once.
        """
        if node_id not in self._positions:
            return []

        cx, cy = self._cell_key(*self._positions[node_id])
        neighbors = []
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for other in self._cells.get((cx + dx, cy + dy), ()):
                    if other > node_id:
                        neighbors.append(other)
        return sorted(neighbors)


class ForceDirectedLayout:
    """
    Lay out a tree (plus optional cross-links) with a force simulation.

    Build Graph -> Initialize Positions -> Simulate. Edge routing and bounds
    are applied by the caller on the returned state.
    """

    def __init__(self, config: Optional[ForceConfig] = None,
                 estimator: Optional[DimensionEstimator] = None):
        self.config = config or ForceConfig()
        self.estimator = estimator or DimensionEstimator()

    def calculate(
        self,
        root: ContentNode,
        cross_links: Sequence[Tuple[str, str]] = (),
        index: Optional[TreeIndex] = None,
        callback: Optional[Callable[[ForceLayoutState], None]] = None,
    ) -> ForceLayoutState:
        """
        Run the simulation.

        Args:
            root: Root of the content tree
            cross_links: Extra (source_id, target_id) relations; they attract
                like structural edges
            index: Pre-validated index of ``root``, if the caller has one
            callback: Optional function called after every iteration

        Returns:
            Final ForceLayoutState. ``converged`` is False when the iteration
            cap was reached first; that is logged, not raised.
        """
        if index is None:
            index = validate_tree(root)
        links = validate_cross_links(index, cross_links)

        rng = DeterministicRandom.from_key(root.id)
        state = self.build_graph(root, links)
        self.initialize_positions(state, rng)
        self.simulate(state, rng, callback)

        if state.converged:
            logger.info(
                "Force layout converged after %d iterations (max force %.3f)",
                state.iterations, state.max_force,
            )
        else:
            logger.warning(
                "Force layout did not converge after %d iterations (max force %.3f > %.3f)",
                state.iterations, state.max_force, self.config.convergence_threshold,
            )
        return state

    def build_graph(self, root: ContentNode,
                    cross_links: Sequence[Tuple[str, str]] = ()) -> ForceLayoutState:
        """One body per node, one structural edge per parent/child pair."""
        state = ForceLayoutState()
        queue = deque([(root, None)])

        while queue:
            node, parent_id = queue.popleft()
            size = self.estimator.estimate(node.level, len(node.text))
            is_root = parent_id is None
            state.nodes[node.id] = ForceNode(
                id=node.id,
                x=0.0,
                y=0.0,
                width=size.width,
                height=size.height,
                level=node.level,
                mass=math.inf if is_root else 1.0 + self.config.child_mass * len(node.children),
                fixed=(0.0, 0.0) if is_root else None,
                source=node,
            )
            state.adjacency.setdefault(node.id, set())

            if parent_id is not None:
                state.edges.append(Edge(source_id=parent_id, target_id=node.id))
                self._link(state, parent_id, node.id)

            for child in node.children:
                queue.append((child, node.id))

        for source_id, target_id in cross_links:
            state.edges.append(Edge(source_id=source_id, target_id=target_id,
                                    kind=EdgeKind.CROSS_LINK))
            self._link(state, source_id, target_id)

        logger.debug("Force graph: %d nodes, %d edges", len(state.nodes), len(state.edges))
        return state

    @staticmethod
    def _link(state: ForceLayoutState, a: str, b: str):
        state.adjacency.setdefault(a, set()).add(b)
        state.adjacency.setdefault(b, set()).add(a)

    def initialize_positions(self, state: ForceLayoutState, rng: DeterministicRandom):
        """Spread each level evenly on its own ring, with seeded variation."""
        levels: Dict[int, List[ForceNode]] = {}
        for node in state.nodes.values():
            levels.setdefault(node.level, []).append(node)

        for level in sorted(levels):
            group = levels[level]
            if level == 0:
                for node in group:
                    if node.fixed is not None:
                        node.x, node.y = node.fixed
                continue

            ring = self.config.ideal_link_length * (level + self.config.initial_ring_offset)
            count = len(group)
            for i, node in enumerate(group):
                if node.is_fixed:
                    continue
                angle = i / count * 2 * math.pi
                radius = ring * (1.0 + rng.centered(self.config.initial_radius_jitter))
                angle += rng.centered(self.config.initial_angle_jitter)
                node.x = radius * math.cos(angle)
                node.y = radius * math.sin(angle)

    def simulate(self, state: ForceLayoutState, rng: DeterministicRandom,
                 callback: Optional[Callable[[ForceLayoutState], None]] = None):
        """Integrate until forces drop below the threshold or the cap is hit.

        Convergence is checked on the forces at the current positions, before
        they are integrated, so a converged layout is left where the forces
        were measured.
        """
        cfg = self.config
        log_every = 100

        for iteration in range(cfg.max_iterations):
            forces = self.calculate_forces(state, rng)
            state.max_force = self._max_force(state, forces)
            state.iterations = iteration + 1

            if state.max_force < cfg.convergence_threshold:
                state.converged = True
                break

            self._apply_forces(state, forces)

            if callback:
                callback(state)

            if logger.isEnabledFor(logging.DEBUG) and state.iterations % log_every == 0:
                counts = self.summarize_forces(forces)
                logger.debug(
                    "Iteration %d/%d: max force %.3f repulsion=%d attraction=%d",
                    state.iterations, cfg.max_iterations, state.max_force,
                    counts.get(ForceType.REPULSION, 0),
                    counts.get(ForceType.ATTRACTION, 0),
                )

    def calculate_forces(self, state: ForceLayoutState,
                         rng: DeterministicRandom) -> Dict[str, List[Force]]:
        """Forces acting on every node at the current positions."""
        forces: Dict[str, List[Force]] = {node_id: [] for node_id in state.nodes}

        self._add_repulsion_forces(state, forces, rng)

        for node in state.nodes.values():
            if node.is_fixed:
                continue
            for neighbor_id in sorted(state.adjacency.get(node.id, ())):
                force = self._attraction(node, state.nodes[neighbor_id])
                if force is not None:
                    forces[node.id].append(force)
            hierarchy = self._hierarchy(node)
            if hierarchy is not None:
                forces[node.id].append(hierarchy)
            forces[node.id].append(Force(
                -node.x * self.config.centering_strength,
                -node.y * self.config.centering_strength,
                ForceType.CENTERING,
            ))

        return forces

    def _add_repulsion_forces(self, state: ForceLayoutState,
                              forces: Dict[str, List[Force]],
                              rng: DeterministicRandom):
        ids = list(state.nodes)
        cutoff = self.config.repulsion_cutoff

        if cutoff > 0:
            grid = SpatialGrid(cutoff)
            for node_id in ids:
                node = state.nodes[node_id]
                grid.insert(node_id, node.x, node.y)
            pairs = ((a, b) for a in ids for b in grid.get_neighbors(a))
        else:
            pairs = ((ids[i], b) for i in range(len(ids)) for b in ids[i + 1:])

        for a_id, b_id in pairs:
            a, b = state.nodes[a_id], state.nodes[b_id]
            dx = a.x - b.x
            dy = a.y - b.y
            distance_sq = dx * dx + dy * dy

            if distance_sq == 0:
                # Coincident nodes: nudge apart in a seeded direction
                fx = rng.centered(self.config.zero_distance_nudge)
                fy = rng.centered(self.config.zero_distance_nudge)
            else:
                distance = math.sqrt(distance_sq)
                if cutoff > 0 and distance > cutoff:
                    continue
                magnitude = self.config.repulsion_strength / distance_sq
                if distance < self.config.min_node_distance:
                    magnitude *= self.config.close_repulsion_multiplier
                fx = dx / distance * magnitude
                fy = dy / distance * magnitude

            forces[a_id].append(Force(fx, fy, ForceType.REPULSION))
            forces[b_id].append(Force(-fx, -fy, ForceType.REPULSION))

    def _attraction(self, node: ForceNode, neighbor: ForceNode) -> Optional[Force]:
        """Spring toward the neighbour: F = k * (d - ideal_length)."""
        dx = neighbor.x - node.x
        dy = neighbor.y - node.y
        distance = math.hypot(dx, dy)
        if distance == 0:
            return None
        magnitude = (distance - self.config.ideal_link_length) * self.config.attraction_strength
        return Force(dx / distance * magnitude, dy / distance * magnitude, ForceType.ATTRACTION)

    def _hierarchy(self, node: ForceNode) -> Optional[Force]:
        """Radial pull toward ``level * level_separation`` from the origin."""
        radius = math.hypot(node.x, node.y)
        if radius == 0:
            return None
        ideal = node.level * self.config.level_separation
        magnitude = (ideal - radius) * self.config.hierarchy_strength
        return Force(node.x / radius * magnitude, node.y / radius * magnitude,
                     ForceType.HIERARCHY)

    @staticmethod
    def _max_force(state: ForceLayoutState, forces: Dict[str, List[Force]]) -> float:
        max_force = 0.0
        for node_id, node_forces in forces.items():
            if state.nodes[node_id].is_fixed:
                continue
            total_fx = sum(f.fx for f in node_forces)
            total_fy = sum(f.fy for f in node_forces)
            max_force = max(max_force, math.hypot(total_fx, total_fy))
        return max_force

    def _apply_forces(self, state: ForceLayoutState, forces: Dict[str, List[Force]]):
        """Explicit Euler step with damping; fixed nodes snap back to their pin."""
        dt = self.config.time_step
        damping = self.config.damping

        for node_id, node in state.nodes.items():
            if node.is_fixed:
                node.x, node.y = node.fixed
                node.vx = node.vy = 0.0
                continue

            total_fx = sum(f.fx for f in forces[node_id])
            total_fy = sum(f.fy for f in forces[node_id])

            # F = ma -> a = F/m; heavier nodes (more children) move less
            node.vx = (node.vx + total_fx / node.mass * dt) * damping
            node.vy = (node.vy + total_fy / node.mass * dt) * damping
            node.x += node.vx * dt
            node.y += node.vy * dt

    def summarize_forces(self, forces: Dict[str, List[Force]]) -> Dict[ForceType, int]:
        """Number of forces of each type (debug aid)."""
        counts: Dict[ForceType, int] = {}
        for node_forces in forces.values():
            for force in node_forces:
                counts[force.force_type] = counts.get(force.force_type, 0) + 1
        return counts
