# -*- coding: utf-8 -*-
"""
Planners on grid maps.

Incremental API (unbounded grid, coordinates (x, y)):
    planner = DStarLitePlanner(start, goal)
    planner.update_cell(x, y, cost); planner.update_start(x, y)
    planner.replan() -> bool; planner.get_path() -> List[(x, y)]

One-shot API shared by every entry in PLANNERS:
    planner.plan(grid: np.ndarray, start: (x,y), goal: (x,y))
      -> {'success': bool, 'path': List[(x,y)] or None}
"""

from __future__ import annotations
from typing import Any, Dict, Type

from .state import Key, State
from .cell_store import CellInfo, CellStore
from .open_list import OpenList
from .d_star_lite import DStarLitePlanner, DStarLiteGridPlanner, SearchStatus
from .dijkstra import DijkstraPlanner, path_cost

# Mapping used by factories/CLIs
PLANNERS: Dict[str, Type] = {
    "d_star_lite": DStarLiteGridPlanner,
    "dijkstra": DijkstraPlanner,
}


def get_planner(name: str, **kwargs) -> Any:
    """
    Factory: instantiate a one-shot grid planner by name.

    Parameters
    ----------
    name : str
        One of: 'd_star_lite', 'dijkstra'
    kwargs : dict
        Passed to the planner constructor (e.g., unit_cost=1.0)
    """
    name = name.strip().lower()
    if name not in PLANNERS:
        raise ValueError(f"Unknown planner '{name}'. Available: {sorted(PLANNERS)}")
    return PLANNERS[name](**kwargs)


__all__ = [
    "Key",
    "State",
    "CellInfo",
    "CellStore",
    "OpenList",
    "DStarLitePlanner",
    "DStarLiteGridPlanner",
    "SearchStatus",
    "DijkstraPlanner",
    "path_cost",
    "PLANNERS",
    "get_planner",
]
