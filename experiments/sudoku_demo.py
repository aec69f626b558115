# experiments/sudoku_demo.py
from __future__ import annotations
import argparse
from pathlib import Path

import matplotlib.pyplot as plt

from drsplit import ConvergenceError, DCConfig
from drsplit.config import add_config_args
from drsplit.logging import History
from drsplit.problems.sudoku import SudokuState, is_valid_grid, render_grid

from experiments.common import PUZZLES, set_seed, sudoku_solver


def main():
    ap = argparse.ArgumentParser()
    add_config_args(ap, DCConfig(beta=0.9, epsilon=1e-6, max_steps=100_000))
    ap.add_argument("--puzzle", choices=sorted(PUZZLES), default="easy")
    ap.add_argument("--clue-weight", type=float, default=1000.0)
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument("--outdir", type=Path, default=Path("figures/sudoku"))
    args = ap.parse_args()
    args.outdir.mkdir(parents=True, exist_ok=True)

    clues = PUZZLES[args.puzzle]
    print(render_grid(clues))
    print()

    gen = set_seed(args.seed)
    x0 = SudokuState.from_clues(clues, weight=args.clue_weight, generator=gen)
    hist = History()
    try:
        state, steps, delta = sudoku_solver(DCConfig.from_args(args), callback=hist).run(x0)
        grid = state.grid()
        print(render_grid(grid))
        print(f"\nsteps={steps} delta={delta:.3g} valid={is_valid_grid(grid, clues)}")
    except ConvergenceError as err:
        print(f"[failed] {err}")

    plt.figure()
    plt.semilogy([d + 1e-18 for d in hist.deltas])
    plt.axhline(args.epsilon, linestyle=":")
    plt.xlabel("step")
    plt.ylabel("delta")
    plt.title(f"Divide-and-Concur on '{args.puzzle}' @ β={args.beta}")
    plt.grid(True, alpha=0.3)
    f = args.outdir / f"delta_{args.puzzle}_seed{args.seed}.png"
    plt.tight_layout(); plt.savefig(f)
    print(f"[saved] {f}")


if __name__ == "__main__":
    main()
