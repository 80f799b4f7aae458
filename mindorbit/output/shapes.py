"""
Render Variants

Turns a LayoutResult into flat, typed records a canvas renderer can draw
without knowing anything about the layout: one variant per tree tier, box
origin at the top-left corner, and a colour per theme that every node in
that theme's subtree inherits.

Connectors carry a signed ``bend`` derived from the routed waypoints so a
renderer that only supports single-arc arrows can still follow the route.
"""

import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from ..layout.engine import LayoutResult
from ..layout.geometry import Edge, EdgeKind, LayoutNode

THEME_COLORS = (
    "light-green",
    "light-blue",
    "light-red",
    "light-violet",
    "orange",
    "yellow",
)
CENTER_COLOR = "blue"


class RenderKind(Enum):
    CENTER = "center"    # Level 0
    THEME = "theme"      # Level 1
    FINDING = "finding"  # Level 2
    LEAF = "leaf"        # Level 3 and deeper


@dataclass(frozen=True)
class CenterNode:
    id: str
    text: str
    x: float
    y: float
    width: float
    height: float
    color: str = CENTER_COLOR
    kind: RenderKind = RenderKind.CENTER


@dataclass(frozen=True)
class ThemeNode:
    id: str
    text: str
    x: float
    y: float
    width: float
    height: float
    color: str
    kind: RenderKind = RenderKind.THEME


@dataclass(frozen=True)
class FindingNode:
    id: str
    text: str
    x: float
    y: float
    width: float
    height: float
    theme_color: Optional[str]
    subtitle: str = ""  # Authors / year line, when the metadata has them
    url: Optional[str] = None
    kind: RenderKind = RenderKind.FINDING


@dataclass(frozen=True)
class LeafNode:
    id: str
    text: str
    x: float
    y: float
    width: float
    height: float
    theme_color: Optional[str]
    kind: RenderKind = RenderKind.LEAF


RenderNode = Union[CenterNode, ThemeNode, FindingNode, LeafNode]


@dataclass(frozen=True)
class Connector:
    """Arrow from parent to child, relative to the source centre."""
    source_id: str
    target_id: str
    x: float
    y: float
    dx: float
    dy: float
    bend: float
    cross_link: bool = False


def theme_color(index: int) -> str:
    return THEME_COLORS[index % len(THEME_COLORS)]


def _subtitle(metadata: Dict[str, Any]) -> str:
    parts = []
    if metadata.get("authors"):
        parts.append(str(metadata["authors"]))
    if metadata.get("year"):
        parts.append(f"({metadata['year']})")
    return " ".join(parts)


def render_node(node: LayoutNode, color: Optional[str]) -> RenderNode:
    """Variant for a single placed node; ``color`` is its theme's colour."""
    text = node.source.text if node.source is not None else node.id
    metadata = node.source.metadata if node.source is not None else {}
    common = dict(
        id=node.id,
        text=text,
        x=node.x - node.width / 2,
        y=node.y - node.height / 2,
        width=node.width,
        height=node.height,
    )
    if node.level == 0:
        return CenterNode(**common)
    if node.level == 1:
        return ThemeNode(color=color or theme_color(0), **common)
    if node.level == 2:
        return FindingNode(
            theme_color=color,
            subtitle=_subtitle(metadata),
            url=metadata.get("url"),
            **common,
        )
    return LeafNode(theme_color=color, **common)


def build_render_nodes(result: LayoutResult) -> List[RenderNode]:
    """One render record per layout node, in layout order.

    Themes take palette colours in the order they appear; descendants
    inherit the colour of the theme they hang under.
    """
    colors: Dict[str, str] = {}
    parents = {edge.target_id: edge.source_id for edge in result.edges
               if edge.kind == EdgeKind.STRUCTURAL}

    theme_index = 0
    for node_id, node in result.nodes.items():
        if node.level == 1:
            colors[node_id] = theme_color(theme_index)
            theme_index += 1

    rendered = []
    for node_id, node in result.nodes.items():
        color = None
        if node.level >= 1:
            ancestor = node_id
            while ancestor in parents and result.nodes[ancestor].level > 1:
                ancestor = parents[ancestor]
            color = colors.get(ancestor)
        rendered.append(render_node(node, color))
    return rendered


def connector_bend(source: LayoutNode, target: LayoutNode, edge: Edge) -> float:
    """Signed perpendicular offset of the route's middle from the straight line.

    Zero for straight edges; half the offset otherwise, matching how arc
    arrows interpret ``bend``.
    """
    if not edge.waypoints:
        return 0.0
    dx = target.x - source.x
    dy = target.y - source.y
    dist = math.hypot(dx, dy)
    if dist == 0:
        return 0.0
    mid_x, mid_y = edge.waypoints[len(edge.waypoints) // 2]
    offset_x = (mid_x - source.x) - dx / 2
    offset_y = (mid_y - source.y) - dy / 2
    return (offset_x * -dy + offset_y * dx) / dist * 0.5


def build_connectors(result: LayoutResult) -> List[Connector]:
    connectors = []
    for edge in result.edges:
        source = result.nodes[edge.source_id]
        target = result.nodes[edge.target_id]
        connectors.append(Connector(
            source_id=edge.source_id,
            target_id=edge.target_id,
            x=source.x,
            y=source.y,
            dx=target.x - source.x,
            dy=target.y - source.y,
            bend=connector_bend(source, target, edge),
            cross_link=edge.kind == EdgeKind.CROSS_LINK,
        ))
    return connectors


def to_render_document(result: LayoutResult) -> Dict[str, Any]:
    """Plain-dict scene: shapes, connectors and the viewport bounds."""
    shapes = []
    for item in build_render_nodes(result):
        data = asdict(item)
        data["kind"] = item.kind.value
        shapes.append(data)
    return {
        "shapes": shapes,
        "connectors": [asdict(c) for c in build_connectors(result)],
        "bounds": result.bounds.to_dict(),
    }
