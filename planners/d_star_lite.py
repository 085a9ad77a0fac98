#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
D* Lite incremental planner on an unbounded 8-connected grid (Koenig & Likhachev, 2002).

The planner searches backwards from the goal and keeps two estimates per cell:
  g   - best known cost-to-goal
  rhs - one-step lookahead, min over successors s of cost(u, s) + g(s)
A cell is consistent when g == rhs. Cost changes (update_cell) and agent moves
(update_start) only touch the affected cells; replan() re-converges from there.

Modifications to the textbook algorithm:
  1. The search stops after `max_steps` expansions. Without it the planner can
     run for a very long time when the start is walled in.
  2. Stale open-list entries are dropped lazily when popped (see open_list.py).
  3. The goal is never seeded on the open list. Unknown cells default to
     g == rhs == h(u, goal), which is exact in free space, so only reported
     cost changes create work.

Coordinates are (x, y). A cell with cost < 0 is occupied: it has no successors
and is never a predecessor.

DStarLiteGridPlanner wraps the planner in the repo-wide API:
    plan(grid, start, goal) -> {'success': bool, 'path': list[(x, y)] or None}
"""

from __future__ import annotations
from enum import IntEnum
from typing import Dict, List, Optional, Tuple
import logging
import math
import numpy as np

from .state import Key, State, key_precedes
from .cell_store import CellInfo, CellStore
from .open_list import OpenList
from .grid_utils import (close, euclidean_distance, neighbors, octile_distance,
                         step_scale, as_cost_grid, border_cells)

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]

MAX_STEPS = 80000
C1 = 1.0
INF = math.inf


class SearchStatus(IntEnum):
    STEP_LIMIT_EXCEEDED = -1
    CONVERGED = 0
    QUEUE_EXHAUSTED = 1
    EARLY_EXIT = 2


def _as_coord(p, name: str) -> Coord:
    try:
        x, y = p
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an (x, y) pair, got {p!r}")
    if int(x) != x or int(y) != y:
        raise ValueError(f"{name} must have integer coordinates, got {p!r}")
    return (int(x), int(y))


class DStarLitePlanner:
    def __init__(self, start: Coord, goal: Coord, *,
                 max_steps: int = MAX_STEPS, unit_cost: float = C1):
        if int(max_steps) < 1:
            raise ValueError(f"max_steps must be >= 1, got {max_steps}")
        if not unit_cost > 0:
            raise ValueError(f"unit_cost must be positive, got {unit_cost}")
        self.max_steps = int(max_steps)
        self.unit_cost = float(unit_cost)

        self.goal: Coord = _as_coord(goal, "goal")
        self._start = State.at(_as_coord(start, "start"))
        self.k_m = 0.0

        self.cells = CellStore(self.unit_cost, lambda u: self.heuristic(u, self.goal))
        self.open_list = OpenList()
        self.path: List[State] = []

        self.last_status: Optional[SearchStatus] = None
        self.last_steps = 0

        self.cells.put(self.goal, CellInfo(g=0.0, rhs=0.0, cost=self.unit_cost))
        h = self.heuristic(self.start, self.goal)
        self.cells.put(self.start, CellInfo(g=h, rhs=h, cost=self.unit_cost))

        self._start = self._calculate_key(self.start)
        self._last = self._start

    # ------------------------------------------------------------------ #
    # Cell values
    # ------------------------------------------------------------------ #

    @property
    def start(self) -> Coord:
        return self._start.coord

    def heuristic(self, a: Coord, b: Coord) -> float:
        """Octile distance scaled by the unit cost; must not exceed the true step cost."""
        return octile_distance(a, b) * self.unit_cost

    def g(self, u: Coord) -> float:
        return self.cells.g(u)

    def rhs(self, u: Coord) -> float:
        if u == self.goal:
            return 0.0
        return self.cells.rhs(u)

    def cell_cost(self, u: Coord) -> float:
        return self.cells.cost(u)

    def is_occupied(self, u: Coord) -> bool:
        return self.cells.occupied(u)

    def cost(self, a: Coord, b: Coord) -> float:
        """Cost of moving a -> b, charged as the cost of leaving a."""
        return step_scale(a, b) * self.cells.cost(a)

    def successors(self, u: Coord) -> List[Coord]:
        if self.cells.occupied(u):
            return []
        return neighbors(u)

    def predecessors(self, u: Coord) -> List[Coord]:
        return [v for v in neighbors(u) if not self.cells.occupied(v)]

    # ------------------------------------------------------------------ #
    # Core
    # ------------------------------------------------------------------ #

    def _calculate_key(self, u: Coord) -> State:
        val = min(self.g(u), self.rhs(u))
        return State.at(u, Key(val + self.heuristic(u, self.start) + self.k_m, val))

    def _insert(self, u: Coord) -> None:
        self.open_list.push(self._calculate_key(u))

    def _update_vertex(self, u: Coord) -> None:
        if u != self.goal:
            best = INF
            for s in self.successors(u):
                best = min(best, self.cost(u, s) + self.g(s))
            if not close(self.rhs(u), best):
                self.cells.set_rhs(u, best)
        if not close(self.g(u), self.rhs(u)):
            self._insert(u)

    def _start_inconsistent(self) -> bool:
        return not close(self.rhs(self.start), self.g(self.start))

    def compute_shortest_path(self) -> SearchStatus:
        """
        Expand open-list states until the start is consistent and nothing on the
        open list sorts before it.
        """
        self.last_steps = 0
        if self.open_list.is_empty():
            return SearchStatus.QUEUE_EXHAUSTED

        steps = 0
        while not self.open_list.is_empty():
            self._start = self._calculate_key(self.start)
            inconsistent = self._start_inconsistent()
            if not (self.open_list.peek().precedes(self._start) or inconsistent):
                break

            if steps >= self.max_steps:
                logger.debug("search hit the step budget (%d)", self.max_steps)
                return SearchStatus.STEP_LIMIT_EXCEEDED
            steps += 1
            self.last_steps = steps

            u = self.open_list.pop()
            if u is None:
                return SearchStatus.QUEUE_EXHAUSTED
            if not u.precedes(self._start) and not inconsistent:
                # peek() returned a stale entry; keep u queued for later
                self.open_list.push(u)
                return SearchStatus.EARLY_EXIT

            self.open_list.remove(u.coord)
            k_old = u.key
            u = self._calculate_key(u.coord)
            ux = u.coord

            if key_precedes(k_old, u.key):
                # out of date
                self.open_list.push(u)
            elif self.g(ux) > self.rhs(ux):
                # improved
                self.cells.set_g(ux, self.rhs(ux))
                for p in self.predecessors(ux):
                    self._update_vertex(p)
            else:
                # got worse
                self.cells.set_g(ux, INF)
                for p in self.predecessors(ux):
                    self._update_vertex(p)
                self._update_vertex(ux)

            self._start = self._calculate_key(self.start)

        logger.debug("search converged after %d steps", steps)
        return SearchStatus.CONVERGED

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def update_cell(self, x: int, y: int, cost: float) -> None:
        """Report a new traversal cost for cell (x, y); cost < 0 marks it occupied."""
        u = (int(x), int(y))
        if u == self.start or u == self.goal:
            return
        self.cells.set_cost(u, cost)
        self._update_vertex(u)

    def update_start(self, x: int, y: int) -> None:
        """Move the agent. Does not replan."""
        new = (int(x), int(y))
        self.k_m += self.heuristic(self._last.coord, new)
        self._start = State.at(new)
        self._start = self._calculate_key(new)
        self._last = self._start
        logger.debug("start moved to %s, k_m=%.4f", new, self.k_m)

    def update_goal(self, x: int, y: int) -> None:
        raise NotImplementedError(
            "Goal relocation is not supported; create a new planner for a new goal."
        )

    def replan(self) -> bool:
        self.path = []

        status = self.compute_shortest_path()
        self.last_status = status
        if status == SearchStatus.STEP_LIMIT_EXCEEDED:
            logger.warning("No path to goal: step budget of %d exceeded", self.max_steps)
            return False
        if math.isinf(self.g(self.start)):
            logger.warning("No path to goal: start %s cannot reach %s", self.start, self.goal)
            return False
        if self._start_inconsistent():
            logger.warning("No path to goal: search stopped before the start converged")
            return False

        start = self.start
        path: List[State] = []
        cur = start
        while cur != self.goal:
            path.append(State.at(cur))
            if len(path) > self.max_steps:
                logger.warning("No path to goal: extraction exceeded %d cells", self.max_steps)
                return False

            succ = [s for s in self.successors(cur) if not self.cells.occupied(s)]
            if not succ:
                logger.warning("No path to goal: cell %s is enclosed", cur)
                return False

            cmin = INF
            tmin = 0.0
            smin = None
            for s in succ:
                val = self.cost(cur, s) + self.g(s)
                val2 = euclidean_distance(s, self.goal) + euclidean_distance(start, s)
                if close(val, cmin):
                    if tmin > val2:
                        tmin, cmin, smin = val2, val, s
                elif val < cmin:
                    tmin, cmin, smin = val2, val, s

            if smin is None:
                logger.warning("No path to goal: every successor of %s is unreachable", cur)
                return False
            cur = smin

        path.append(State.at(self.goal))
        self.path = path
        return True

    def get_path(self) -> List[Coord]:
        return [s.coord for s in self.path]

    def path_cost(self) -> float:
        coords = self.get_path()
        return float(sum(self.cost(a, b) for a, b in zip(coords[:-1], coords[1:])))


class DStarLiteGridPlanner:
    """
    One-shot adapter for bounded occupancy grids.
    grid[x, y] is True (bool grid) or negative (cost grid) where occupied.
    Cells just outside the array are reported occupied so the path stays inside.
    """

    def __init__(self, max_steps: int = MAX_STEPS, unit_cost: float = C1):
        self.max_steps = max_steps
        self.unit_cost = unit_cost
        self.last: Optional[DStarLitePlanner] = None

    def plan(self, grid: np.ndarray, start: Coord, goal: Coord) -> Dict:
        costs = as_cost_grid(grid, self.unit_cost)
        H, W = costs.shape
        sx, sy = start; gx, gy = goal

        free = costs[costs >= 0]
        if free.size and free.min() < self.unit_cost:
            # The octile heuristic assumes no free cell is cheaper than unit_cost
            raise ValueError(
                f"free cell cost {free.min():g} is below unit_cost={self.unit_cost:g}; "
                "lower unit_cost to the cheapest cell cost"
            )

        if not (0 <= sx < H and 0 <= sy < W and 0 <= gx < H and 0 <= gy < W):
            return {'success': False, 'path': None}
        if costs[sx, sy] < 0 or costs[gx, gy] < 0:
            return {'success': False, 'path': None}

        planner = DStarLitePlanner(start, goal, max_steps=self.max_steps,
                                   unit_cost=self.unit_cost)
        for x, y in np.argwhere(costs != self.unit_cost):
            planner.update_cell(int(x), int(y), float(costs[x, y]))
        for x, y in border_cells(H, W):
            planner.update_cell(x, y, -1.0)

        self.last = planner
        if not planner.replan():
            return {'success': False, 'path': None}
        return {'success': True, 'path': planner.get_path()}
