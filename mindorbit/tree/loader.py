"""
Content tree loading.

Reads the serializable tree contract ``{id, text, level, children[],
metadata?}`` from JSON or YAML files. Some upstream generators wrap the
tree in a ``{"root": {...}}`` or ``{"tree": {...}}`` envelope, optionally
with ``cross_links`` alongside; both forms are accepted.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Tuple, Union

import yaml

from .abstraction import ContentNode, MalformedTreeError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


def parse_tree_document(data: Any) -> Tuple[ContentNode, List[Tuple[str, str]]]:
    """Split a loaded document into (root, cross_links)."""
    if not isinstance(data, dict):
        raise MalformedTreeError("Tree document must be a mapping")

    raw_links = data.get("cross_links") or []
    if not isinstance(raw_links, (list, tuple)):
        raise MalformedTreeError("'cross_links' must be a list")

    cross_links: List[Tuple[str, str]] = []
    for raw in raw_links:
        if isinstance(raw, dict) and "source" in raw and "target" in raw:
            cross_links.append((str(raw["source"]), str(raw["target"])))
        elif isinstance(raw, (list, tuple)) and len(raw) == 2:
            cross_links.append((str(raw[0]), str(raw[1])))
        else:
            raise MalformedTreeError(
                f"Cannot parse cross-link: {raw!r} (expected {{source, target}} or a pair)"
            )

    for key in ("root", "tree"):
        if key in data and isinstance(data[key], dict):
            return ContentNode.from_dict(data[key]), cross_links

    return ContentNode.from_dict(data), cross_links


def load_tree_document(path: Union[str, Path]) -> Tuple[ContentNode, List[Tuple[str, str]]]:
    """Load a tree (and any cross-links) from a JSON or YAML file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Tree file not found: {path}")

    content = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            data = yaml.safe_load(content)
        else:
            data = json.loads(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise MalformedTreeError(f"Cannot parse {path}: {e}") from e

    root, cross_links = parse_tree_document(data)
    logger.debug("Loaded tree %r from %s (cross_links=%d)", root.id, path, len(cross_links))
    return root, cross_links


def load_tree(path: Union[str, Path]) -> ContentNode:
    """Load only the content tree from a JSON or YAML file."""
    root, _ = load_tree_document(path)
    return root
