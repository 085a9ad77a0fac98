import os
import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt


def render_env(env, ax=None, known=None, trajectory=None, plan=None, title=None):
    """
    Render a GridEnvironment.

    Layers:
      - background (white), terrain cost shaded in light gray
      - obstacles: dark gray if known to the agent, light red if not yet seen
      - trajectory travelled so far (blue), current plan (lime)
      - start (green star), goal (red star)

    `known` is a bool mask of obstacles the agent has observed; None means all.
    Grid convention is [x, y]; x is drawn down the rows, y across the columns.
    """
    H, W = env.shape
    if ax is None:
        _, ax = plt.subplots(figsize=(max(3, W/5), max(3, H/5)), dpi=120)

    rgb = np.ones((H, W, 3), dtype=float)
    costs = getattr(env, "costs", None)
    if costs is not None:
        free = costs > 0
        top = float(costs[free].max()) if free.any() else 1.0
        if top > 1.0:
            shade = 1.0 - 0.35 * (costs - 1.0) / (top - 1.0)
            rgb[free] = shade[free][:, None]

    if known is None:
        rgb[env.grid] = 0.2
    else:
        rgb[env.grid & ~known] = (1.0, 0.75, 0.75)
        rgb[env.grid & known] = 0.2

    ax.imshow(rgb, interpolation="nearest", origin="upper")
    ax.set_xticks([]); ax.set_yticks([])

    if trajectory:
        xs, ys = zip(*trajectory)
        ax.plot(ys, xs, color="tab:blue", lw=2, alpha=0.8)
    if plan:
        xs, ys = zip(*plan)
        ax.plot(ys, xs, color="lime", lw=2, alpha=0.8, ls="--")

    ax.plot(env.start[1], env.start[0], marker="*", markersize=10, markeredgecolor="k", markerfacecolor="lime", lw=0)
    ax.text(env.start[1]+0.2, env.start[0]-0.2, "S", color="k", fontsize=8)
    ax.plot(env.goal[1], env.goal[0], marker="*", markersize=10, markeredgecolor="k", markerfacecolor="red",  lw=0)
    ax.text(env.goal[1]+0.2, env.goal[0]-0.2, "G", color="k", fontsize=8)

    if title:
        ax.set_title(title, fontsize=10)

    return ax


def save_figure(env, path, **kwargs):
    H, W = env.shape
    fig, ax = plt.subplots(figsize=(max(3, W/5), max(3, H/5)), dpi=120)
    render_env(env, ax=ax, **kwargs)
    fig.tight_layout()
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    fig.savefig(path, bbox_inches="tight")
    plt.close(fig)
    return path
