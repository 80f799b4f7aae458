"""
Shared test fixtures for MindOrbit tests.

Provides reusable content trees of different shapes (tiny, typical
research map, dense branch, deep chain) and layout configs.
"""

import pytest
from typing import List

from mindorbit.layout.config import LayoutConfig
from mindorbit.tree.abstraction import ContentNode


def make_node(node_id: str, level: int, children: List[ContentNode] = (),
              text: str = None, **metadata) -> ContentNode:
    """Build a ContentNode with a readable default label."""
    return ContentNode(
        id=node_id,
        text=text if text is not None else f"Node {node_id}",
        level=level,
        children=tuple(children),
        metadata=metadata,
    )


def make_star(branch_count: int, children_per_branch: int = 0,
              root_id: str = "root") -> ContentNode:
    """Root with ``branch_count`` themes of ``children_per_branch`` findings each."""
    themes = []
    for b in range(branch_count):
        findings = [
            make_node(f"t{b}_f{c}", 2, text=f"Finding {c} of theme {b}")
            for c in range(children_per_branch)
        ]
        themes.append(make_node(f"t{b}", 1, findings, text=f"Theme {b}"))
    return make_node(root_id, 0, themes, text="Central research question")


@pytest.fixture
def tiny_tree() -> ContentNode:
    """Root plus a single theme with one finding."""
    finding = make_node("f1", 2, text="Only finding")
    theme = make_node("t1", 1, [finding], text="Only theme")
    return make_node("root", 0, [theme], text="Question")


@pytest.fixture
def three_branch_tree() -> ContentNode:
    """Root with three equally weighted themes."""
    return make_star(3, 2)


@pytest.fixture
def research_tree() -> ContentNode:
    """A typical mind map: 4 themes, 2-5 findings each, some with key points."""
    themes = []
    finding_counts = [3, 5, 2, 4]
    for t, count in enumerate(finding_counts):
        findings = []
        for f in range(count):
            points = []
            if f % 2 == 0:
                points = [
                    make_node(f"t{t}_f{f}_p{p}", 3, text=f"Key point {p}")
                    for p in range(2)
                ]
            findings.append(make_node(
                f"t{t}_f{f}", 2, points,
                text=f"Study {f} on topic {t} with a moderately long title",
                authors="Doe et al.", year=2020 + f,
            ))
        themes.append(make_node(f"t{t}", 1, findings, text=f"Theme number {t}"))
    return make_node("root", 0, themes, text="How do orbital layouts scale?")


@pytest.fixture
def dense_branch_tree() -> ContentNode:
    """One theme with 20 findings (triggers auto-split) and two small ones."""
    dense = make_node(
        "dense", 1,
        [make_node(f"d{i:02d}", 2, text=f"Dense finding {i}") for i in range(20)],
        text="Dense theme",
    )
    small_a = make_node("a", 1, [make_node("a0", 2)], text="Small A")
    small_b = make_node("b", 1, [make_node("b0", 2), make_node("b1", 2)], text="Small B")
    return make_node("root", 0, [dense, small_a, small_b], text="Dense question")


@pytest.fixture
def deep_tree() -> ContentNode:
    """A single chain six levels deep."""
    node = make_node("n6", 6)
    for level in range(5, 0, -1):
        node = make_node(f"n{level}", level, [node])
    return make_node("root", 0, [node])


@pytest.fixture
def root_only() -> ContentNode:
    return make_node("lonely", 0, text="Nothing below")


@pytest.fixture
def default_config() -> LayoutConfig:
    return LayoutConfig()


@pytest.fixture
def tree_dict() -> dict:
    """Serialized input contract as produced upstream."""
    return {
        "id": "root",
        "text": "Question",
        "level": 0,
        "children": [
            {
                "id": "t1",
                "text": "Theme",
                "level": 1,
                "children": [
                    {"id": "f1", "text": "Finding", "level": 2, "children": [],
                     "metadata": {"year": 2021}},
                ],
            },
            {"id": "t2", "text": "Other theme", "level": 1, "children": [
                {"id": "f2", "text": "Another finding", "level": 2, "children": []},
            ]},
        ],
    }


@pytest.fixture
def star_factory():
    """Factory for star-shaped trees: ``star_factory(branches, per_branch)``."""
    return make_star


@pytest.fixture
def node_factory():
    """Factory for single nodes: ``node_factory(id, level, children, text=...)``."""
    return make_node
