#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
run_navigation.py
-----------------
Navigation under partial knowledge:
- Generates random environments (seeded)
- The agent starts knowing only the map bounds; each move it senses cells within
  `--sensor-radius` (Chebyshev), reports new obstacles/terrain via update_cell,
  advances one cell along the current plan via update_start, and replans
- Compares the travelled cost with the omniscient Dijkstra cost
- Writes one CSV row per environment to --outdir (optional PNG per env)

Example:
    python -m cli.run_navigation \
        --size 40x40 \
        --density 0.20 \
        --num-envs 20 \
        --sensor-radius 2 \
        --seed 0

Grid convention: grid[x, y] == True means occupied, False means free.
"""

from __future__ import annotations
import argparse
import csv
import logging
import os
import time
from typing import Dict, List, Tuple

import numpy as np
from tqdm import tqdm

from envs.generator import GridEnvironment, generate_environment
from planners.d_star_lite import DStarLitePlanner, MAX_STEPS
from planners.dijkstra import DijkstraPlanner
from planners.grid_utils import border_cells, step_scale

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]


# -------------------- helpers -------------------- #

def _parse_size(s: str) -> Tuple[int, int]:
    token = s.strip().lower()
    if "x" not in token:
        raise ValueError(f"Bad size '{token}', expected like 30x30")
    h, w = token.split("x")
    return int(h), int(w)


def _sense(env: GridEnvironment, pos: Coord, radius: int, observed: np.ndarray) -> List[Tuple[int, int, float]]:
    """
    Observe the window around `pos`. Returns (x, y, cost) for newly observed
    cells whose cost differs from free space; marks the window as observed.
    """
    H, W = env.shape
    x, y = pos
    x0, x1 = max(0, x - radius), min(H, x + radius + 1)
    y0, y1 = max(0, y - radius), min(W, y + radius + 1)
    window = env.costs[x0:x1, y0:y1]
    fresh = ~observed[x0:x1, y0:y1] & (window != 1.0)
    observed[x0:x1, y0:y1] = True
    return [(x0 + int(i), y0 + int(j), float(window[i, j])) for i, j in np.argwhere(fresh)]


def simulate_navigation(env: GridEnvironment,
                        sensor_radius: int = 2,
                        max_moves: int = 10_000,
                        max_steps: int = MAX_STEPS) -> Dict:
    """
    Drive one agent from env.start to env.goal, replanning after every move.

    Returns a dict with keys: reached, moves, replans, travelled_cost,
    optimal_cost, cells_stored, time_sec, trajectory, known, plan.
    """
    if sensor_radius < 1:
        raise ValueError(f"sensor_radius must be >= 1, got {sensor_radius}")
    H, W = env.shape
    t0 = time.perf_counter()

    planner = DStarLitePlanner(env.start, env.goal, max_steps=max_steps)
    for x, y in border_cells(H, W):
        planner.update_cell(x, y, -1.0)

    observed = np.zeros((H, W), dtype=bool)
    pos = env.start
    trajectory = [pos]
    travelled = 0.0
    replans = 0

    for x, y, c in _sense(env, pos, sensor_radius, observed):
        planner.update_cell(x, y, c)
    ok = planner.replan()
    replans += 1

    while ok and pos != env.goal and len(trajectory) <= max_moves:
        nxt = planner.get_path()[1]
        travelled += step_scale(pos, nxt) * float(env.costs[pos])
        pos = nxt
        trajectory.append(pos)
        planner.update_start(*pos)

        for x, y, c in _sense(env, pos, sensor_radius, observed):
            planner.update_cell(x, y, c)
        ok = planner.replan()
        replans += 1

    if not ok:
        logger.info("agent stopped at %s after %d moves", pos, len(trajectory) - 1)

    ref = DijkstraPlanner().plan(env.costs, env.start, env.goal)
    return {
        "reached": pos == env.goal,
        "moves": len(trajectory) - 1,
        "replans": replans,
        "travelled_cost": travelled,
        "optimal_cost": float(ref["cost"]),
        "cells_stored": len(planner.cells),
        "time_sec": time.perf_counter() - t0,
        "trajectory": trajectory,
        "known": observed & env.grid,
        "plan": planner.get_path(),
    }


# -------------------- main loop -------------------- #

def main():
    ap = argparse.ArgumentParser(description="Simulate incremental replanning under partial map knowledge.")
    ap.add_argument("--size", type=str, default="32x32", help="Grid size like 32x32")
    ap.add_argument("--density", type=float, default=0.18, help="Obstacle density (0-0.9)")
    ap.add_argument("--num-envs", type=int, default=10, help="Number of environments")
    ap.add_argument("--seed", type=int, default=0, help="Base RNG seed")
    ap.add_argument("--sensor-radius", type=int, default=2, help="Sensing radius in cells (>= 1)")
    ap.add_argument("--max-cost", type=float, default=1.0, help="If > 1, random terrain costs in [1, max-cost]")
    ap.add_argument("--max-steps", type=int, default=MAX_STEPS, help="Search step budget per replan")
    ap.add_argument("--outdir", type=str, default="results/csv", help="Output directory for CSV")
    ap.add_argument("--plot-dir", type=str, default="", help="If set, save one PNG per environment here")
    ap.add_argument("--log-level", type=str, default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ...)")
    args = ap.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    H, W = _parse_size(args.size)

    os.makedirs(args.outdir, exist_ok=True)
    stamp = time.strftime("%Y%m%d_%H%M%S")
    out_csv = os.path.join(args.outdir, f"navigation_s{args.seed}_{stamp}.csv")
    tmp_csv = out_csv + f".tmp_{os.getpid()}"

    fieldnames = [
        "env_id", "seed", "H", "W", "density", "sensor_radius",
        "reached", "moves", "replans", "travelled_cost", "optimal_cost",
        "suboptimality", "cells_stored", "time_sec",
    ]

    reached = 0
    with open(tmp_csv, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for env_id in tqdm(range(args.num_envs), desc="Navigating"):
            seed = int(args.seed) * 1_000_003 + env_id
            env = generate_environment(H=H, W=W, density=args.density, max_cost=args.max_cost,
                                       rng=np.random.default_rng(seed))
            res = simulate_navigation(env, sensor_radius=args.sensor_radius, max_steps=args.max_steps)
            reached += int(res["reached"])

            opt = res["optimal_cost"]
            writer.writerow({
                "env_id": env_id,
                "seed": seed,
                "H": H, "W": W, "density": args.density,
                "sensor_radius": args.sensor_radius,
                "reached": int(res["reached"]),
                "moves": res["moves"],
                "replans": res["replans"],
                "travelled_cost": round(res["travelled_cost"], 6),
                "optimal_cost": round(opt, 6),
                "suboptimality": round(res["travelled_cost"] / opt, 6) if res["reached"] and opt > 0 else "",
                "cells_stored": res["cells_stored"],
                "time_sec": round(res["time_sec"], 6),
            })

            if args.plot_dir:
                from envs.render import save_figure  # lazy import; pulls in matplotlib
                title = f"env {env_id}: {'reached' if res['reached'] else 'stuck'} in {res['moves']} moves"
                save_figure(env, os.path.join(args.plot_dir, f"navigation_{env_id}.png"),
                            known=res["known"], trajectory=res["trajectory"], plan=res["plan"], title=title)

    # Atomic rename to final path
    os.replace(tmp_csv, out_csv)
    print(f"[OK] {reached}/{args.num_envs} reached the goal")
    print(f"[OK] Wrote: {out_csv}")


if __name__ == "__main__":
    main()
