from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import numpy as np
import torch
from torch import Tensor
from scipy.optimize import linear_sum_assignment

from ..errors import ProjectionError

ROW, COLUMN, BLOCK = 0, 1, 2


def iroot(n: int, p: int) -> int:
    """Integer p-th root of n; n must be a perfect p-th power."""
    root = int(round(n ** (1.0 / p)))
    if root ** p != n:
        raise ValueError(f"invalid puzzle size: expected perfect power of {p}, got {n}")
    return root


# Flat layout of a constraint copy: entry (row r, col c, digit d) lives at r*n^2 + c*n + d.

def row_indices(n: int) -> Tensor:
    """(n, n^2): unit r covers rows r, all columns, all digits."""
    return torch.arange(n ** 3).view(n, n * n)


def column_indices(n: int) -> Tensor:
    """(n, n^2): unit c covers column c in every row."""
    cube = torch.arange(n ** 3).view(n, n, n)
    return cube.permute(1, 0, 2).reshape(n, n * n)


def block_indices(n: int) -> Tensor:
    """(n, n^2): unit b covers the b-th sqrt(n) x sqrt(n) block, row-major."""
    s = iroot(n, 2)
    cube = torch.arange(n ** 3).view(s, s, s, s, n)     # (block_row, r, block_col, c, d)
    return cube.permute(0, 2, 1, 3, 4).reshape(n, n * n)


def unit_indices(n: int) -> Tuple[Tensor, Tensor, Tensor]:
    return row_indices(n), column_indices(n), block_indices(n)


def max_weight_assignment(weights: np.ndarray) -> np.ndarray:
    """
    Maximum-weight perfect matching of a square weight matrix.
    Returns col[r] for every row r. Failures are surfaced as ProjectionError.
    """
    try:
        rows, cols = linear_sum_assignment(weights, maximize=True)
    except ValueError as err:
        raise ProjectionError(err) from err
    if len(rows) != weights.shape[0]:
        raise ProjectionError(f"incomplete matching: {len(rows)} of {weights.shape[0]} rows assigned")
    out = np.empty(len(rows), dtype=np.int64)
    out[rows] = cols
    return out


@dataclass
class SudokuState:
    """
    Three local copies (row, column, block constraints) of an n x n x n
    one-hot "cell has digit" cube, plus the clue weights.

    Shapes:
        given  : (n^3,)   clue weight at clue entries, 0 elsewhere
        states : (3, n^3)
    Arithmetic acts on `states`; `given` is carried from the left operand.
    """
    given: Tensor
    states: Tensor

    @property
    def n(self) -> int:
        return iroot(self.states.shape[-1], 3)

    @classmethod
    def from_clues(cls, grid: Sequence[Sequence[int]], weight: float = 1000.0,
                   generator: Optional[torch.Generator] = None) -> "SudokuState":
        g = torch.as_tensor(grid, dtype=torch.long)
        n = g.shape[0]
        assert g.shape == (n, n), "grid must be square"
        iroot(n, 2)
        assert int(g.min()) >= 0 and int(g.max()) <= n, f"clues must be in [0, {n}]"

        given = torch.zeros(n, n, n, dtype=torch.float64)
        r, c = torch.nonzero(g, as_tuple=True)
        given[r, c, g[r, c] - 1] = 1.0
        states = torch.rand(3, n ** 3, dtype=torch.float64, generator=generator)
        return cls(given=given.flatten() * weight, states=states)

    def __add__(self, other: "SudokuState") -> "SudokuState":
        return SudokuState(given=self.given, states=self.states + other.states)

    def __mul__(self, scalar: float) -> "SudokuState":
        return SudokuState(given=self.given, states=self.states * scalar)

    __rmul__ = __mul__

    def grid(self) -> List[List[int]]:
        """Arg-max digit (1-based) per cell of the averaged copies."""
        n = self.n
        cube = self.states.mean(dim=0).view(n, n, n)
        return (cube.argmax(dim=-1) + 1).tolist()


@torch.no_grad()
def divide_projector(state: SudokuState) -> SudokuState:
    """
    Every unit of every constraint kind independently becomes the 0/1
    permutation (cells x digits) of maximum weight under states[k] + given.

    With β = 1 the iteration can lock into a short cycle (seen on 4x4
    puzzles with a period-3 delta trace); β slightly below 1, e.g. 0.9,
    breaks it.
    """
    n = state.n
    out = torch.zeros_like(state.states)
    for k, units in enumerate(unit_indices(n)):
        weights = (state.states[k] + state.given)[units].view(n, n, n).cpu().numpy()
        for j in range(n):
            cols = max_weight_assignment(weights[j])
            picked = units[j].view(n, n)[torch.arange(n), torch.from_numpy(cols)]
            out[k, picked] = 1.0
    return SudokuState(given=state.given, states=out)


@torch.no_grad()
def concur_projector(state: SudokuState) -> SudokuState:
    """All three copies become their mean."""
    mean = state.states.mean(dim=0, keepdim=True)
    return SudokuState(given=state.given, states=mean.expand_as(state.states).clone())


@torch.no_grad()
def norm(current: SudokuState, previous: SudokuState) -> float:
    d = current.states.shape[0]
    return float(((current.states - previous.states) ** 2).sum().item() / d)


def is_valid_grid(grid: Sequence[Sequence[int]], clues: Optional[Sequence[Sequence[int]]] = None) -> bool:
    """Every row, column and block is a permutation of 1..n, and clues are kept."""
    g = torch.as_tensor(grid, dtype=torch.long)
    n = g.shape[0]
    s = iroot(n, 2)
    full = torch.arange(1, n + 1)

    blocks = g.view(s, s, s, s).permute(0, 2, 1, 3).reshape(n, n)
    for units in (g, g.T, blocks):
        if not torch.equal(units.sort(dim=1).values, full.expand(n, n)):
            return False
    if clues is not None:
        c = torch.as_tensor(clues, dtype=torch.long)
        mask = c > 0
        if not torch.equal(g[mask], c[mask]):
            return False
    return True


def render_grid(grid: Sequence[Sequence[int]]) -> str:
    n = len(grid)
    s = iroot(n, 2)
    width = len(str(n))
    sep = "-+-".join(["-" * ((width + 1) * s - 1)] * s)
    lines = []
    for r, row in enumerate(grid):
        if r and r % s == 0:
            lines.append(sep)
        chunks = [" ".join(str(v if v else "?").rjust(width) for v in row[b * s:(b + 1) * s]) for b in range(s)]
        lines.append(" | ".join(chunks))
    return "\n".join(lines)
