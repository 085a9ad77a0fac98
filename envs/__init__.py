# -*- coding: utf-8 -*-
"""
Environment generation for planner demos and tests.
Exposes:
- GridEnvironment (dataclass from generator.py)
- generate_environment(...)
- has_free_path(...)  (8-connected BFS reachability)

Rendering lives in envs.render and is imported on demand (pulls in matplotlib).
"""

from __future__ import annotations

from .generator import GridEnvironment, generate_environment
from .generator import _free_bfs_has_path as has_free_path

__all__ = [
    "GridEnvironment",
    "generate_environment",
    "has_free_path",
]
