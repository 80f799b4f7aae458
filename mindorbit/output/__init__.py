"""Renderer-facing records built from a finished layout."""

from .shapes import (
    THEME_COLORS,
    CenterNode,
    Connector,
    FindingNode,
    LeafNode,
    RenderKind,
    ThemeNode,
    build_connectors,
    build_render_nodes,
    to_render_document,
)

__all__ = [
    "THEME_COLORS",
    "CenterNode",
    "Connector",
    "FindingNode",
    "LeafNode",
    "RenderKind",
    "ThemeNode",
    "build_connectors",
    "build_render_nodes",
    "to_render_document",
]
