#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Sparse per-cell storage for the incremental planner.

Cells are created on first write and never removed. A coordinate without an
entry is free space: traversal cost `default_cost`, and g == rhs == h(u, goal)
where h is supplied by the owner (the planner knows the goal).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

Coord = Tuple[int, int]


@dataclass
class CellInfo:
    g: float
    rhs: float
    cost: float


class CellStore:
    def __init__(self, default_cost: float, default_value: Callable[[Coord], float]):
        self.default_cost = float(default_cost)
        self._default_value = default_value
        self._cells: Dict[Coord, CellInfo] = {}

    def __contains__(self, u: Coord) -> bool:
        return u in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def items(self):
        return self._cells.items()

    def get(self, u: Coord):
        return self._cells.get(u)

    def ensure(self, u: Coord) -> CellInfo:
        """Return the entry for `u`, seeding it with heuristic defaults if absent."""
        cell = self._cells.get(u)
        if cell is None:
            h = self._default_value(u)
            cell = CellInfo(g=h, rhs=h, cost=self.default_cost)
            self._cells[u] = cell
        return cell

    def put(self, u: Coord, cell: CellInfo) -> None:
        self._cells[u] = cell

    # Reads never create entries
    def g(self, u: Coord) -> float:
        cell = self._cells.get(u)
        return self._default_value(u) if cell is None else cell.g

    def rhs(self, u: Coord) -> float:
        cell = self._cells.get(u)
        return self._default_value(u) if cell is None else cell.rhs

    def cost(self, u: Coord) -> float:
        cell = self._cells.get(u)
        return self.default_cost if cell is None else cell.cost

    def occupied(self, u: Coord) -> bool:
        cell = self._cells.get(u)
        return cell is not None and cell.cost < 0

    def set_g(self, u: Coord, value: float) -> None:
        self.ensure(u).g = value

    def set_rhs(self, u: Coord, value: float) -> None:
        self.ensure(u).rhs = value

    def set_cost(self, u: Coord, value: float) -> None:
        self.ensure(u).cost = float(value)
