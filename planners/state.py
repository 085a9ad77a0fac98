#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Search states for the incremental planner.

A State couples a grid coordinate (x, y) with a priority key (k1, k2).
Identity and ordering are deliberately separate:
- ``==`` / ``hash`` look at the coordinate only (dict and set membership),
- ``<`` / ``precedes`` look at the key only (open-list ordering).

Keys compare lexicographically: k1 within KEY_EPSILON, then k2 exactly.
"""

from __future__ import annotations
from typing import NamedTuple, Tuple

Coord = Tuple[int, int]

KEY_EPSILON = 1e-6
# Weight of k2 in the scalar fingerprint stored by the open list
FINGERPRINT_FACTOR = 1193.0


class Key(NamedTuple):
    k1: float
    k2: float


def key_precedes(a: Key, b: Key) -> bool:
    """True if key `a` sorts strictly before key `b`."""
    if a.k1 + KEY_EPSILON < b.k1:
        return True
    if a.k1 - KEY_EPSILON > b.k1:
        return False
    return a.k2 < b.k2


def key_fingerprint(key: Key) -> float:
    return key.k1 + FINGERPRINT_FACTOR * key.k2


class State:
    __slots__ = ("x", "y", "key")

    def __init__(self, x: int, y: int, key: Key = Key(0.0, 0.0)):
        self.x = int(x)
        self.y = int(y)
        self.key = key

    @classmethod
    def at(cls, coord: Coord, key: Key = Key(0.0, 0.0)) -> "State":
        return cls(coord[0], coord[1], key)

    @property
    def coord(self) -> Coord:
        return (self.x, self.y)

    # -- identity: coordinates only --
    def __eq__(self, other) -> bool:
        if not isinstance(other, State):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    # -- ordering: key only --
    def precedes(self, other: "State") -> bool:
        return key_precedes(self.key, other.key)

    def __lt__(self, other: "State") -> bool:
        return key_precedes(self.key, other.key)

    def __repr__(self) -> str:
        return f"State(x={self.x}, y={self.y}, key=({self.key.k1:.4f}, {self.key.k2:.4f}))"
