"""Deterministic pseudo-randomness for layout jitter.

Layouts must be reproducible: the same tree has to give bit-identical
positions on every run and in every process. Python's ``hash()`` is salted
per process and ``random`` is global state, so neither is usable here.
Instead a 32-bit FNV-1a hash of a stable key seeds a mulberry32 generator
whose state is owned by the caller.
"""

from typing import Tuple

_MASK32 = 0xFFFFFFFF
_FNV_OFFSET = 2166136261
_FNV_PRIME = 16777619


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & _MASK32


def fnv1a_32(text: str) -> int:
    """32-bit FNV-1a hash over the UTF-16 code units of ``text``."""
    h = _FNV_OFFSET
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = _imul(h, _FNV_PRIME)
    return h


def seed(key: str) -> int:
    """Initial generator state for a stable identifier."""
    return fnv1a_32(key)


def next_random(state: int) -> Tuple[float, int]:
    """Advance the generator.

    Returns:
        (value in [0, 1), new state)
    """
    state = (state + 0x6D2B79F5) & _MASK32
    t = _imul(state ^ (state >> 15), 1 | state)
    t = ((t + _imul(t ^ (t >> 7), 61 | t)) & _MASK32) ^ t
    return ((t ^ (t >> 14)) & _MASK32) / 4294967296.0, state


class DeterministicRandom:
    """Stateful wrapper around ``next_random`` for one layout run.

    Each run creates its own instance; nothing is shared between runs.
    """

    def __init__(self, state: int):
        self.state = state & _MASK32

    @classmethod
    def from_key(cls, key: str) -> "DeterministicRandom":
        return cls(seed(key))

    def random(self) -> float:
        value, self.state = next_random(self.state)
        return value

    def centered(self, scale: float = 1.0) -> float:
        """Value in [-scale/2, scale/2)."""
        return (self.random() - 0.5) * scale
