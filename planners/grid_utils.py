#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Distance functions and 8-connected neighborhood on an unbounded integer grid.
- Octile distance (admissible on 8-connected grids with unit step cost).
- Euclidean distance (used only to break ties between equal-cost moves).
- Step scale: 1 for cardinal moves, sqrt(2) for diagonals.
- Helpers for bounded numpy maps indexed [x, y].
"""

from __future__ import annotations
from typing import List, Tuple
import math
import numpy as np

Coord = Tuple[int, int]

SQRT2 = math.sqrt(2)
CLOSE_EPSILON = 1e-5

# Starts at +x and turns through +y; consumers rely on this fixed order.
NEIGHBOR_DELTAS: Tuple[Coord, ...] = (
    (+1,  0), (+1, +1), ( 0, +1), (-1, +1),
    (-1,  0), (-1, -1), ( 0, -1), (+1, -1),
)


def octile_distance(a: Coord, b: Coord) -> float:
    dx = abs(a[0] - b[0]); dy = abs(a[1] - b[1])
    dmin, dmax = (dx, dy) if dx < dy else (dy, dx)
    return float((SQRT2 - 1) * dmin + dmax)


def euclidean_distance(a: Coord, b: Coord) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def step_scale(a: Coord, b: Coord) -> float:
    """1 for a cardinal step, sqrt(2) for a diagonal one."""
    if abs(a[0] - b[0]) + abs(a[1] - b[1]) > 1:
        return SQRT2
    return 1.0


def neighbors(u: Coord) -> List[Coord]:
    x, y = u
    return [(x + dx, y + dy) for dx, dy in NEIGHBOR_DELTAS]


def close(a: float, b: float, eps: float = CLOSE_EPSILON) -> bool:
    """Approximate equality that treats two infinities as equal."""
    if math.isinf(a) and math.isinf(b):
        return True
    return abs(a - b) < eps


def as_cost_grid(grid: np.ndarray, unit_cost: float = 1.0) -> np.ndarray:
    """
    Normalize a map to a float cost grid indexed [x, y].
    - bool grid: True = occupied (-1), False = free (unit_cost)
    - numeric grid: used as is; negative = occupied
    """
    grid = np.asarray(grid)
    if grid.dtype == bool:
        return np.where(grid, -1.0, float(unit_cost))
    return grid.astype(np.float64)


def border_cells(H: int, W: int) -> List[Coord]:
    """The ring of cells just outside an H x W array."""
    ring = [(x, y) for x in (-1, H) for y in range(-1, W + 1)]
    ring += [(x, y) for y in (-1, W) for x in range(0, H)]
    return ring
