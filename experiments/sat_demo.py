# experiments/sat_demo.py
from __future__ import annotations
import argparse

import torch

from drsplit import ConvergenceError, DCConfig
from drsplit.config import add_config_args
from drsplit.logging import logging_callback
from drsplit.problems.sat import SatState, satisfies

from experiments.common import SAT_INDICES, SAT_NEGATING, SAT_NVARS, sat_solver, set_seed


def main():
    ap = argparse.ArgumentParser()
    add_config_args(ap, DCConfig(beta=1.0, epsilon=0.7, max_steps=5000))
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    gen = set_seed(args.seed)
    variables = torch.rand(SAT_NVARS, generator=gen)
    print(f"initial variables: {variables.tolist()}")
    x0 = SatState.from_variables(variables, SAT_INDICES, SAT_NEGATING)

    cb = logging_callback() if args.verbose else None
    try:
        state, steps, delta = sat_solver(DCConfig.from_args(args), callback=cb).run(x0)
    except ConvergenceError as err:
        print(f"[failed] {err}")
        return

    print(f"Solved in {steps} steps, with delta={delta}")
    assignment = state.assignment()
    for i, x in enumerate(assignment):
        print(f"var #{i} = {x}")
    print(f"satisfies all clauses: {satisfies(assignment, SAT_INDICES, SAT_NEGATING)}")


if __name__ == "__main__":
    main()
