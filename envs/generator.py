#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
generator.py
------------
Seeded 2D occupancy-grid worlds for exercising the incremental planner.

Key design goals:
- Cheap clutter: random rectangles and grown blobs stamped onto a bool grid.
- Clear start/goal: a dilated ring around both endpoints is kept free, so the
  agent never begins boxed in unless the caller asks for it.
- Optional terrain: free cells can carry a traversal cost >= 1 (the planner's
  heuristic assumes unit cost is the cheapest step).
- Reproducibility: explicit np.random.Generator with seed.

Grid convention: grid[x, y] == True means occupied, False means free.

Dependencies:
    numpy
    scipy.ndimage   (binary dilation for the start/goal clearance)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

try:
    from scipy.ndimage import binary_dilation
except Exception as e:
    raise ImportError(
        "scipy.ndimage is required. Install with: pip install scipy"
    ) from e

from planners.grid_utils import NEIGHBOR_DELTAS

Coord = Tuple[int, int]


# ------------------------------- Data classes ------------------------------- #

@dataclass
class GridEnvironment:
    """Occupancy-grid world with optional per-cell traversal costs."""
    grid: np.ndarray            # (H, W) bool array: True = occupied, False = free
    costs: np.ndarray           # (H, W) float array: -1 = occupied, >= 1 otherwise
    start: Coord
    goal: Coord
    settings: Dict              # record of generator settings used (for provenance)
    rng: np.random.Generator

    @property
    def shape(self) -> Tuple[int, int]:
        return self.grid.shape

    def occupied_cells(self) -> List[Coord]:
        return [(int(x), int(y)) for x, y in np.argwhere(self.grid)]


# ------------------------------ Utility helpers ----------------------------- #

def _free_bfs_has_path(grid: np.ndarray, start: Coord, goal: Coord) -> bool:
    """
    Fast boolean reachability test on the free cells of 'grid' (8-connected).
    """
    H, W = grid.shape
    sx, sy = start
    gx, gy = goal

    if grid[sx, sy] or grid[gx, gy]:
        return False  # start or goal is blocked

    visited = np.zeros_like(grid, dtype=bool)
    q = [(sx, sy)]
    visited[sx, sy] = True

    head = 0  # manual queue for speed
    while head < len(q):
        x, y = q[head]
        head += 1
        if (x, y) == (gx, gy):
            return True
        for dx, dy in NEIGHBOR_DELTAS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < H and 0 <= ny < W and (not visited[nx, ny]) and (not grid[nx, ny]):
                visited[nx, ny] = True
                q.append((nx, ny))
    return False


def _dilate_bool(img: np.ndarray, iters: int = 1) -> np.ndarray:
    if iters <= 0:
        return img
    structure = np.ones((3, 3), dtype=bool)
    return binary_dilation(img, structure=structure, iterations=int(iters))


def _random_rectangle_mask(rng: np.random.Generator,
                           min_h: int, max_h: int,
                           min_w: int, max_w: int) -> np.ndarray:
    h = max(1, int(rng.integers(min_h, max_h + 1)))
    w = max(1, int(rng.integers(min_w, max_w + 1)))
    return np.ones((h, w), dtype=bool)


def _random_blob_mask(rng: np.random.Generator, min_cells: int, max_cells: int) -> np.ndarray:
    """
    Grow a small connected blob from a seed cell; returns its tight bounding-box mask.
    """
    n = max(1, int(rng.integers(min_cells, max_cells + 1)))
    side = int(np.ceil(np.sqrt(n))) + 4
    canvas = np.zeros((side, side), dtype=bool)
    x = y = side // 2
    canvas[x, y] = True
    cells = [(x, y)]

    for _ in range(n - 1):
        bx, by = cells[rng.integers(0, len(cells))]
        order = rng.permutation(len(NEIGHBOR_DELTAS))
        for k in order:
            dx, dy = NEIGHBOR_DELTAS[k]
            nx, ny = bx + dx, by + dy
            if 0 <= nx < side and 0 <= ny < side and not canvas[nx, ny]:
                canvas[nx, ny] = True
                cells.append((nx, ny))
                break

    xs, ys = np.where(canvas)
    return canvas[xs.min():xs.max() + 1, ys.min():ys.max() + 1]


# ------------------------------- Core generator ----------------------------- #

def generate_environment(
    H: int = 32,
    W: int = 32,
    *,
    density: float = 0.18,
    start: Coord = (0, 0),
    goal: Optional[Coord] = None,
    clearance: int = 1,
    rect_size: Tuple[Tuple[int, int], Tuple[int, int]] = ((1, 4), (1, 6)),  # (min_h,max_h),(min_w,max_w)
    blob_cells: Tuple[int, int] = (3, 12),   # min,max cells in a blob
    max_cost: float = 1.0,                   # > 1 enables random terrain costs in [1, max_cost]
    ensure_reachable: bool = True,
    rng: Optional[np.random.Generator] = None,
    max_place_tries: int = 5000,
) -> GridEnvironment:
    """
    Create an occupancy grid with random clutter.

    Strategy:
      1) Stamp rectangles and blobs at random positions until the density target
         is met or placement tries run out.
      2) Clear a `clearance`-cell ring around start and goal.
      3) If `ensure_reachable`, clear random occupied cells until the goal is
         reachable from the start.
    """
    if goal is None:
        goal = (H - 1, W - 1)
    rng = rng or np.random.default_rng()

    grid = np.zeros((H, W), dtype=bool)
    settings = dict(
        H=H, W=W, density=density, start=start, goal=goal, clearance=clearance,
        rect_size=rect_size, blob_cells=blob_cells, max_cost=max_cost,
        ensure_reachable=ensure_reachable, max_place_tries=max_place_tries,
        seed=int(rng.integers(0, 2**31-1)),
    )

    # -------------------- 1) Random object placement -------------------- #
    target_cells = int(round(float(np.clip(density, 0.0, 0.9)) * H * W))
    tries = 0
    while tries < max_place_tries and int(grid.sum()) < target_cells:
        tries += 1
        if rng.random() < 0.6:
            (min_h, max_h), (min_w, max_w) = rect_size
            mask = _random_rectangle_mask(rng, min_h, max_h, min_w, max_w)
        else:
            mask = _random_blob_mask(rng, blob_cells[0], blob_cells[1])
        mh, mw = mask.shape
        if mh > H or mw > W:
            continue
        x0 = int(rng.integers(0, H - mh + 1))
        y0 = int(rng.integers(0, W - mw + 1))
        grid[x0:x0 + mh, y0:y0 + mw] |= mask

    # -------------------- 2) Keep endpoints clear ----------------------- #
    seeds = np.zeros((H, W), dtype=bool)
    seeds[start] = True
    seeds[goal] = True
    grid[_dilate_bool(seeds, clearance)] = False

    # -------------------- 3) Reachability ------------------------------- #
    if ensure_reachable:
        while not _free_bfs_has_path(grid, start, goal):
            occ = np.argwhere(grid)
            x, y = occ[rng.integers(0, len(occ))]
            grid[x, y] = False

    costs = np.ones((H, W), dtype=np.float64)
    if max_cost > 1.0:
        costs = rng.uniform(1.0, float(max_cost), size=(H, W))
        costs[start] = 1.0
    costs[grid] = -1.0

    return GridEnvironment(
        grid=grid,
        costs=costs,
        start=start,
        goal=goal,
        settings=settings,
        rng=rng,
    )


# ---------------------------------- Demo ------------------------------------ #

if __name__ == "__main__":
    rng = np.random.default_rng(123)
    env = generate_environment(H=40, W=60, density=0.20, rng=rng)

    print("Environment:", env.shape, "Start:", env.start, "Goal:", env.goal)
    print("#Obstacle cells:", int(env.grid.sum()))
    print("Path exists?", _free_bfs_has_path(env.grid, env.start, env.goal))
