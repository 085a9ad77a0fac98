#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Open list with lazy deletion.

States are pushed again whenever their key changes instead of being updated
in place. A freshness index maps each coordinate to the fingerprint of the
key it was last pushed with; on pop, entries whose key no longer matches are
discarded. Queue size is bounded by the number of pushes.

Equal keys pop first-in-first-out.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Tuple
import heapq
import itertools

from .state import State, key_fingerprint
from .grid_utils import close

Coord = Tuple[int, int]


class _Entry:
    __slots__ = ("state", "seq")

    def __init__(self, state: State, seq: int):
        self.state = state
        self.seq = seq

    def __lt__(self, other: "_Entry") -> bool:
        if self.state.precedes(other.state):
            return True
        if other.state.precedes(self.state):
            return False
        return self.seq < other.seq


class OpenList:
    def __init__(self):
        self._heap: List[_Entry] = []
        self._fresh: Dict[Coord, float] = {}
        self._counter = itertools.count()
        self.discarded = 0

    def __len__(self) -> int:
        """Raw heap size, stale entries included."""
        return len(self._heap)

    def __contains__(self, u: Coord) -> bool:
        return u in self._fresh

    def is_empty(self) -> bool:
        return not self._heap

    def push(self, state: State) -> None:
        self._fresh[state.coord] = key_fingerprint(state.key)
        heapq.heappush(self._heap, _Entry(state, next(self._counter)))

    def peek(self) -> Optional[State]:
        """Smallest raw entry; it may be stale."""
        return self._heap[0].state if self._heap else None

    def is_valid(self, state: State) -> bool:
        fp = self._fresh.get(state.coord)
        if fp is None:
            return False
        return close(key_fingerprint(state.key), fp)

    def pop(self) -> Optional[State]:
        """Pop the smallest valid state, or None once the heap runs dry."""
        while self._heap:
            state = heapq.heappop(self._heap).state
            if self.is_valid(state):
                return state
            self.discarded += 1
        return None

    def remove(self, u: Coord) -> None:
        """Forget `u`; its queued entries become stale."""
        self._fresh.pop(u, None)

    def fresh_coords(self) -> List[Coord]:
        return list(self._fresh)
