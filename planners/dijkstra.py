#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Dijkstra planner on a bounded 8-connected cost grid.
- Same cost model as the incremental planner: moving a -> b costs
  step(a, b) * cost[a], with step 1 cardinal and sqrt(2) diagonal.
- Occupied cells (True in a bool grid, negative in a cost grid) are never entered.

Used as the from-scratch reference for the incremental planner.
Returns {'success': bool, 'path': list[(x,y)] or None, 'cost': float}.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Tuple
import heapq
import math
import numpy as np

from .grid_utils import NEIGHBOR_DELTAS, as_cost_grid, step_scale

Coord = Tuple[int, int]


def path_cost(path: Sequence[Coord], grid: np.ndarray, unit_cost: float = 1.0) -> float:
    """Cost of following `path` over `grid` under the leave-cell cost model."""
    costs = as_cost_grid(grid, unit_cost)
    total = 0.0
    for a, b in zip(path[:-1], path[1:]):
        total += step_scale(a, b) * float(costs[a])
    return total


class DijkstraPlanner:
    def __init__(self, unit_cost: float = 1.0):
        self.unit_cost = float(unit_cost)
        self.deltas = np.array(NEIGHBOR_DELTAS, dtype=np.int8)
        self.steps = np.array([math.sqrt(2) if dx and dy else 1.0
                               for dx, dy in NEIGHBOR_DELTAS], dtype=np.float64)

    @staticmethod
    def _reconstruct(par_x: np.ndarray, par_y: np.ndarray,
                     start: Coord, goal: Coord) -> Optional[List[Coord]]:
        path = []
        x, y = goal
        while (x, y) != start:
            path.append((int(x), int(y)))
            px, py = int(par_x[x, y]), int(par_y[x, y])
            if px == -1 and py == -1:  # No parent found
                return None
            x, y = px, py
        path.append(start)
        path.reverse()
        return path

    def distances(self, grid: np.ndarray, goal: Coord) -> np.ndarray:
        """
        Cost-to-goal for every cell (inf where the goal is unreachable).
        Runs backwards from the goal over reversed edges.
        """
        costs = as_cost_grid(grid, self.unit_cost)
        H, W = costs.shape
        dist = np.full((H, W), np.inf, dtype=np.float64)
        done = np.zeros((H, W), dtype=bool)
        gx, gy = goal
        dist[gx, gy] = 0.0
        pq: List[Tuple[float, int, int]] = [(0.0, gx, gy)]

        while pq:
            d, x, y = heapq.heappop(pq)
            if done[x, y]:
                continue
            done[x, y] = True
            for k, (dx, dy) in enumerate(self.deltas):
                px, py = x + int(dx), y + int(dy)
                if px < 0 or px >= H or py < 0 or py >= W:
                    continue
                if costs[px, py] < 0 or done[px, py]:
                    continue
                nd = d + self.steps[k] * costs[px, py]
                if nd < dist[px, py]:
                    dist[px, py] = nd
                    heapq.heappush(pq, (nd, px, py))
        return dist

    def plan(self, grid: np.ndarray, start: Coord, goal: Coord) -> Dict:
        costs = as_cost_grid(grid, self.unit_cost)
        H, W = costs.shape
        sx, sy = start; gx, gy = goal

        # Validate bounds
        if not (0 <= sx < H and 0 <= sy < W and 0 <= gx < H and 0 <= gy < W):
            return {'success': False, 'path': None, 'cost': math.inf}

        if costs[sx, sy] < 0 or costs[gx, gy] < 0:
            return {'success': False, 'path': None, 'cost': math.inf}

        # Handle trivial case
        if start == goal:
            return {'success': True, 'path': [start], 'cost': 0.0}

        dist = np.full((H, W), np.inf, dtype=np.float64)
        par_x = np.full((H, W), -1, dtype=np.int32)
        par_y = np.full((H, W), -1, dtype=np.int32)
        visited = np.zeros((H, W), dtype=bool)

        dist[sx, sy] = 0.0
        pq: List[Tuple[float, int, int]] = [(0.0, sx, sy)]

        while pq:
            d, x, y = heapq.heappop(pq)
            if visited[x, y]:
                continue
            visited[x, y] = True
            if (x, y) == (gx, gy):
                path = self._reconstruct(par_x, par_y, start, goal)
                return {'success': path is not None, 'path': path, 'cost': float(d)}
            for k, (dx, dy) in enumerate(self.deltas):
                nx, ny = x + int(dx), y + int(dy)
                if nx < 0 or nx >= H or ny < 0 or ny >= W:
                    continue
                if costs[nx, ny] < 0 or visited[nx, ny]:
                    continue
                nd = d + self.steps[k] * costs[x, y]
                if nd < dist[nx, ny]:
                    dist[nx, ny] = nd
                    par_x[nx, ny] = x
                    par_y[nx, ny] = y
                    heapq.heappush(pq, (nd, nx, ny))

        return {'success': False, 'path': None, 'cost': math.inf}
