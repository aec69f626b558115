# experiments/beta_sweep.py
import argparse
import json
from pathlib import Path
from typing import List

import numpy as np
import matplotlib.pyplot as plt

from drsplit import ConvergenceError, DCConfig
from drsplit.problems.sudoku import SudokuState, is_valid_grid

from experiments.common import PUZZLES, median_or_nan, set_seed, sudoku_solver


def run(puzzle: str, seeds: List[int], beta_min: float, beta_max: float, num_beta: int,
        max_steps: int, epsilon: float, outdir: Path):
    outdir.mkdir(parents=True, exist_ok=True)
    clues = PUZZLES[puzzle]
    betas = np.linspace(beta_min, beta_max, num_beta, dtype=np.float64)

    med_steps, success = [], []
    for b in betas:
        if b == 0.0:
            med_steps.append(float("nan")); success.append(0.0)
            continue
        cfg = DCConfig(beta=float(b), epsilon=epsilon, max_steps=max_steps)
        steps_b, ok = [], 0
        for seed in seeds:
            gen = set_seed(seed)
            x0 = SudokuState.from_clues(clues, generator=gen)
            try:
                state, steps, _ = sudoku_solver(cfg).run(x0)
            except ConvergenceError:
                continue
            if is_valid_grid(state.grid(), clues):
                ok += 1
                steps_b.append(steps)
        med_steps.append(median_or_nan(steps_b))
        success.append(ok / len(seeds))
        print(f"beta={b:.3f}  median steps={med_steps[-1]:.1f}  success={success[-1]:.2f}")

    fig, ax1 = plt.subplots()
    ax1.plot(betas, med_steps, "o-", label="median steps")
    ax1.set_xlabel(r"$\beta$")
    ax1.set_ylabel("steps to convergence")
    ax2 = ax1.twinx()
    ax2.plot(betas, success, "x--", color="tab:orange", label="success rate")
    ax2.set_ylabel("success rate")
    ax2.set_ylim(-0.05, 1.05)
    plt.title(f"β sweep on '{puzzle}'")
    fig.tight_layout()
    f = outdir / f"beta_sweep_{puzzle}.png"
    plt.savefig(f, dpi=180)
    print(f"[saved] {f}")

    meta = {
        "puzzle": puzzle,
        "seeds": seeds,
        "beta_grid": betas.tolist(),
        "median_steps": med_steps,
        "success": success,
    }
    (outdir / f"beta_sweep_{puzzle}.json").write_text(json.dumps(meta, indent=2))


if __name__ == "__main__":
    p = argparse.ArgumentParser()
    p.add_argument("--puzzle", choices=sorted(PUZZLES), default="small")
    p.add_argument("--seeds", type=int, nargs="+", default=[0, 1, 2, 3, 4])
    p.add_argument("--beta-min", type=float, default=0.5)
    p.add_argument("--beta-max", type=float, default=1.5)
    p.add_argument("--num-beta", type=int, default=11)
    p.add_argument("--max-steps", type=int, default=20_000)
    p.add_argument("--epsilon", type=float, default=1e-6)
    p.add_argument("--outdir", type=Path, default=Path("figures/beta_sweep"))
    args = p.parse_args()

    run(args.puzzle, args.seeds, args.beta_min, args.beta_max, args.num_beta,
        args.max_steps, args.epsilon, args.outdir)
