import os, sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import numpy as np

from envs.generator import generate_environment
from envs.render import save_figure
from cli.run_navigation import simulate_navigation


def test_save_navigation_figure(tmp_path):
    rng = np.random.default_rng(0)
    env = generate_environment(H=16, W=16, density=0.18, max_cost=2.0, rng=rng)
    res = simulate_navigation(env, sensor_radius=2)
    out = save_figure(env, str(tmp_path / "nav.png"), known=res["known"],
                      trajectory=res["trajectory"], plan=res["plan"], title="nav")
    assert os.path.exists(out)
    assert os.path.getsize(out) > 0

def test_save_plain_env_figure(tmp_path):
    env = generate_environment(H=10, W=12, density=0.2, rng=np.random.default_rng(1))
    out = save_figure(env, str(tmp_path / "sub" / "env.png"))
    assert os.path.exists(out)
