# experiments/common.py
from typing import List

import numpy as np
import torch

from drsplit import DCConfig, DivideAndConcurSolver
from drsplit.state import Solver
from drsplit.problems import sat, sudoku


torch.set_default_dtype(torch.float64)


def set_seed(s: int) -> torch.Generator:
    torch.manual_seed(s)
    np.random.seed(s)
    return torch.Generator().manual_seed(s)


# --------------------------
# Instances
# --------------------------
# (x0 v x0 v x1) ^ (~x0 v ~x1 v ~x1) ^ (~x0 v x1 v x1); unique model x0=F, x1=T
SAT_NVARS = 2
SAT_INDICES = [
    [0, 0, 1],
    [0, 1, 1],
    [0, 1, 1],
]
SAT_NEGATING = [
    [False, False, False],
    [True, True, True],
    [True, False, False],
]

SMALL = [
    [1, 0, 0, 0],
    [0, 0, 1, 0],
    [0, 3, 0, 0],
    [0, 0, 0, 3],
]

EASY = [
    [5, 6, 0, 9, 0, 2, 1, 0, 0],
    [8, 0, 0, 5, 3, 0, 0, 0, 4],
    [9, 7, 0, 0, 0, 1, 2, 5, 6],
    [6, 1, 0, 0, 8, 0, 9, 3, 0],
    [0, 0, 8, 0, 9, 5, 0, 0, 0],
    [0, 0, 0, 0, 0, 3, 0, 7, 2],
    [0, 0, 0, 0, 0, 9, 4, 2, 7],
    [3, 9, 2, 4, 1, 0, 0, 0, 0],
    [0, 0, 5, 6, 0, 0, 0, 0, 9],
]

PUZZLES = {"small": SMALL, "easy": EASY}


# --------------------------
# Solver factories
# --------------------------
def sat_solver(cfg: DCConfig, callback=None) -> Solver:
    return DivideAndConcurSolver(sat.divide_projector, sat.concur_projector, sat.norm,
                                 config=cfg, callback=callback)


def sudoku_solver(cfg: DCConfig, callback=None) -> Solver:
    return DivideAndConcurSolver(sudoku.divide_projector, sudoku.concur_projector, sudoku.norm,
                                 config=cfg, callback=callback)


def median_or_nan(xs: List[float]) -> float:
    return float(np.median(np.array(xs, dtype=np.float64))) if xs else float("nan")
