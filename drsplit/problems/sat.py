from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence
import torch
from torch import Tensor


def _as_long(x) -> Tensor:
    return torch.as_tensor(x, dtype=torch.long)


def _as_bool(x) -> Tensor:
    return torch.as_tensor(x, dtype=torch.bool)


@dataclass
class SatState:
    """
    Divide-and-Concur state for k-SAT: one local copy of every variable per
    clause occurrence.

    Shapes:
        values   : (m, k) float, in *variable* space (+1 true, -1 false)
        indices  : (m, k) long, variable index of each occurrence
        negating : (m, k) bool, literal is negated
    Only `values` takes part in the vector-space arithmetic.
    """
    values: Tensor
    indices: Tensor
    negating: Tensor
    nvars: int

    @classmethod
    def from_variables(cls, variables, indices, negating) -> "SatState":
        variables = torch.as_tensor(variables, dtype=torch.float64)
        idx = _as_long(indices)
        neg = _as_bool(negating)
        assert idx.shape == neg.shape, "indices and negating must have the same shape"
        assert idx.dim() == 2, "expected (clauses, literals) layout"
        return cls(values=variables[idx].clone(), indices=idx, negating=neg, nvars=int(variables.numel()))

    @classmethod
    def random(cls, indices, negating, nvars: int, generator: Optional[torch.Generator] = None) -> "SatState":
        variables = torch.rand(nvars, dtype=torch.float64, generator=generator)
        return cls.from_variables(variables, indices, negating)

    def _with_values(self, values: Tensor) -> "SatState":
        return SatState(values=values, indices=self.indices, negating=self.negating, nvars=self.nvars)

    def __add__(self, other: "SatState") -> "SatState":
        return self._with_values(self.values + other.values)

    def __mul__(self, scalar: float) -> "SatState":
        return self._with_values(self.values * scalar)

    __rmul__ = __mul__

    def assignment(self) -> List[bool]:
        """
        Per-variable readout of a snapped state: True iff every occurrence is +1.
        Raises ValueError if occurrences disagree or a variable never occurs.
        """
        out: List[Optional[float]] = [None] * self.nvars
        for i, x in zip(self.indices.flatten().tolist(), self.values.flatten().tolist()):
            if out[i] is not None and out[i] != x:
                raise ValueError(f"inconsistent results for variable {i}: {out[i]} != {x}")
            out[i] = x
        missing = [i for i, v in enumerate(out) if v is None]
        if missing:
            raise ValueError(f"failed to set all variables: {missing}")
        return [v == 1.0 for v in out]


@torch.no_grad()
def solve_clauses(state: SatState) -> SatState:
    """
    Divide projector: closest clause-satisfying ±1 pattern, clause by clause.

    Literals l = ±v are rounded to sign(l) (0 counts as true). A clause with
    every literal false gets the occurrences of its best variable (largest
    summed literal value inside the clause) flipped to true.
    """
    neg = state.negating
    idx = state.indices
    lits = torch.where(neg, -state.values, state.values)
    putative = torch.where(lits < 0, -torch.ones_like(lits), torch.ones_like(lits))

    unsat = (putative < 0).all(dim=1)
    if bool(unsat.any()):
        same = idx[:, :, None] == idx[:, None, :]                  # (m, k, k)
        costs = (lits[:, None, :] * same).sum(dim=-1)              # per-occurrence variable cost
        best = idx.gather(1, costs.argmax(dim=1, keepdim=True))    # (m, 1)
        flip = unsat[:, None] & (idx == best)
        putative = torch.where(flip, torch.ones_like(putative), putative)

    values = torch.where(neg, -putative, putative)
    return SatState(values=values, indices=idx, negating=neg, nvars=state.nvars)


divide_projector = solve_clauses


@torch.no_grad()
def concur_projector(state: SatState) -> SatState:
    """Replace every occurrence with the mean of its variable over all occurrences."""
    flat_idx = state.indices.flatten()
    flat_val = state.values.flatten()
    sums = torch.zeros(state.nvars, dtype=flat_val.dtype).index_add_(0, flat_idx, flat_val)
    counts = torch.zeros(state.nvars, dtype=flat_val.dtype).index_add_(0, flat_idx, torch.ones_like(flat_val))
    means = sums / counts.clamp(min=1.0)
    return SatState(values=means[state.indices], indices=state.indices,
                    negating=state.negating, nvars=state.nvars)


@torch.no_grad()
def norm(current: SatState, previous: SatState) -> float:
    """Mean over clauses of the per-clause L2 distance."""
    per_clause = torch.linalg.norm(current.values - previous.values, dim=1)
    return float(per_clause.mean().item())


def satisfies(assignment: Sequence[bool], indices, negating) -> bool:
    idx = _as_long(indices)
    neg = _as_bool(negating)
    truth = torch.as_tensor(list(assignment), dtype=torch.bool)[idx]
    return bool((truth ^ neg).any(dim=1).all())
