"""
Content Tree Abstraction

Immutable model of the mind map content produced upstream (central topic,
themes, findings, supporting items). The layout engines only read ``id``,
``text``, ``level`` and ``children``; ``metadata`` is carried through
untouched so renderers can use it.

Validation walks the tree with an explicit worklist and builds a
``TreeIndex`` arena (nodes by id, parent links, breadth-first order) that
the layout stages share for the duration of a single run.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple


class MalformedTreeError(ValueError):
    """Input violates the tree invariant (cycle, duplicate id, bad level)."""


class DegenerateInputWarning(UserWarning):
    """Non-fatal: part of the tree has nothing to lay out (e.g. empty branch)."""


def _parse_level(raw: Dict[str, Any], depth: int) -> int:
    """``level`` of a raw node as an int, defaulting to its depth."""
    level = raw.get("level", depth)
    if isinstance(level, bool) or isinstance(level, float) and not level.is_integer():
        raise MalformedTreeError(f"Node {raw.get('id')!r} has a non-integer level {level!r}")
    try:
        return int(level)
    except (TypeError, ValueError) as e:
        raise MalformedTreeError(
            f"Node {raw.get('id')!r} has a non-integer level {level!r}"
        ) from e


@dataclass(frozen=True, eq=False)
class ContentNode:
    """A labeled node of the content tree.

    ``level`` is the depth (0 = root). Children are owned by the parent and
    stored as a tuple so a node cannot be re-parented after construction.
    """
    id: str
    text: str
    level: int
    children: Tuple["ContentNode", ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def walk(self) -> Iterator["ContentNode"]:
        """Iterate the subtree breadth-first, starting with this node."""
        queue = deque([self])
        while queue:
            node = queue.popleft()
            yield node
            queue.extend(node.children)

    def descendant_count(self) -> int:
        """Number of nodes below this one."""
        count = 0
        stack = list(self.children)
        while stack:
            node = stack.pop()
            count += 1
            stack.extend(node.children)
        return count

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the serializable input contract."""
        out: Dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "level": self.level,
            "children": [],
        }
        if self.metadata:
            out["metadata"] = dict(self.metadata)

        # Iterative copy so very deep trees don't hit the recursion limit
        stack = [(self, out)]
        while stack:
            node, target = stack.pop()
            for child in node.children:
                child_out: Dict[str, Any] = {
                    "id": child.id,
                    "text": child.text,
                    "level": child.level,
                    "children": [],
                }
                if child.metadata:
                    child_out["metadata"] = dict(child.metadata)
                target["children"].append(child_out)
                stack.append((child, child_out))
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentNode":
        """Build a tree from ``{id, text, level, children[], metadata?}``.

        A missing ``level`` is inferred from depth. Structural problems in
        the raw data raise MalformedTreeError.
        """
        if not isinstance(data, dict):
            raise MalformedTreeError(
                f"Tree node must be a mapping, got {type(data).__name__}"
            )

        # Post-order build: children must exist before their (frozen) parent
        built: Dict[int, ContentNode] = {}
        stack: List[Tuple[Dict[str, Any], int, bool]] = [(data, 0, False)]
        on_path: set = set()
        while stack:
            raw, depth, expanded = stack.pop()
            key = id(raw)
            if expanded:
                on_path.discard(key)
                built[key] = cls(
                    id=str(raw["id"]),
                    text=str(raw.get("text", "")),
                    level=_parse_level(raw, depth),
                    children=tuple(built[id(c)] for c in raw.get("children") or ()),
                    metadata=dict(raw.get("metadata") or {}),
                )
                continue

            if key in on_path:
                raise MalformedTreeError(f"Cycle detected at node {raw.get('id')!r}")
            if "id" not in raw:
                raise MalformedTreeError(f"Tree node at depth {depth} has no 'id'")
            children = raw.get("children") or []
            if not isinstance(children, (list, tuple)):
                raise MalformedTreeError(f"'children' of {raw['id']!r} must be a list")
            for child in children:
                if not isinstance(child, dict):
                    raise MalformedTreeError(
                        f"Child of {raw['id']!r} must be a mapping, got {type(child).__name__}"
                    )
            _parse_level(raw, depth)
            if not isinstance(raw.get("metadata") or {}, dict):
                raise MalformedTreeError(f"'metadata' of {raw['id']!r} must be a mapping")

            on_path.add(key)
            stack.append((raw, depth, True))
            for child in reversed(children):
                stack.append((child, depth + 1, False))

        return built[id(data)]


@dataclass
class TreeIndex:
    """Per-run arena of a validated tree, indexed by node id."""
    root: ContentNode
    nodes: Dict[str, ContentNode] = field(default_factory=dict)
    parents: Dict[str, Optional[str]] = field(default_factory=dict)
    order: List[str] = field(default_factory=list)  # breadth-first
    levels: Dict[int, List[str]] = field(default_factory=dict)

    @property
    def max_level(self) -> int:
        return max(self.levels) if self.levels else 0

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self.nodes

    def parent_of(self, node_id: str) -> Optional[ContentNode]:
        parent_id = self.parents.get(node_id)
        return self.nodes[parent_id] if parent_id is not None else None

    def nodes_at_level(self, level: int) -> List[ContentNode]:
        return [self.nodes[i] for i in self.levels.get(level, [])]


def validate_tree(root: ContentNode) -> TreeIndex:
    """Check the tree invariant and index the tree.

    Raises:
        MalformedTreeError: on the first violation found; no partial index
        is returned.
    """
    if root.level != 0:
        raise MalformedTreeError(f"Root {root.id!r} must have level 0, got {root.level}")

    index = TreeIndex(root=root)
    seen_objects: set = set()
    queue = deque([(root, None)])

    while queue:
        node, parent = queue.popleft()

        if id(node) in seen_objects:
            raise MalformedTreeError(
                f"Node {node.id!r} is reachable more than once (cycle or shared subtree)"
            )
        seen_objects.add(id(node))

        if not isinstance(node.id, str) or not node.id:
            raise MalformedTreeError(f"Node ids must be non-empty strings, got {node.id!r}")
        if node.id in index.nodes:
            raise MalformedTreeError(f"Duplicate node id: {node.id!r}")
        if node.level < 0:
            raise MalformedTreeError(f"Node {node.id!r} has negative level {node.level}")
        if parent is not None and node.level != parent.level + 1:
            raise MalformedTreeError(
                f"Node {node.id!r} has level {node.level}, expected {parent.level + 1} "
                f"(child of {parent.id!r})"
            )

        index.nodes[node.id] = node
        index.parents[node.id] = parent.id if parent is not None else None
        index.order.append(node.id)
        index.levels.setdefault(node.level, []).append(node.id)

        for child in node.children:
            queue.append((child, node))

    return index


def validate_cross_links(index: TreeIndex,
                         cross_links: Sequence[Tuple[str, str]]) -> List[Tuple[str, str]]:
    """Check that every cross-link joins two distinct known nodes."""
    links = []
    for source_id, target_id in cross_links:
        for node_id in (source_id, target_id):
            if node_id not in index:
                raise MalformedTreeError(f"Cross-link references unknown node {node_id!r}")
        if source_id == target_id:
            raise MalformedTreeError(f"Cross-link from {source_id!r} to itself")
        links.append((source_id, target_id))
    return links
