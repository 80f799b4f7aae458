"""Content tree model, validation and loading."""

from .abstraction import (
    ContentNode,
    DegenerateInputWarning,
    MalformedTreeError,
    TreeIndex,
    validate_cross_links,
    validate_tree,
)
from .loader import load_tree, load_tree_document, parse_tree_document

__all__ = [
    "ContentNode",
    "DegenerateInputWarning",
    "MalformedTreeError",
    "TreeIndex",
    "validate_cross_links",
    "validate_tree",
    "load_tree",
    "load_tree_document",
    "parse_tree_document",
]
