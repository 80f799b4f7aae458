"""
MindOrbit - Radial Orbital Mind Map Layout

Positions the nodes of a hierarchical mind map (central topic, themes,
findings, supporting items) on concentric rings so that boxes do not
overlap, siblings stay grouped and the picture reads from the center out.
A force-directed engine is available for graphs with cross-links.
"""

__version__ = "0.1.0"
__author__ = "MindOrbit Team"

from .tree.abstraction import ContentNode, DegenerateInputWarning, MalformedTreeError
from .layout.config import LayoutConfig, get_preset
from .layout.engine import LayoutResult, LayoutStrategy, compute_layout

__all__ = [
    "ContentNode",
    "DegenerateInputWarning",
    "MalformedTreeError",
    "LayoutConfig",
    "get_preset",
    "LayoutResult",
    "LayoutStrategy",
    "compute_layout",
]
