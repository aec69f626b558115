# drsplit/prox.py
from __future__ import annotations
from typing import Callable
import torch
from torch import Tensor

TensorProjector = Callable[[Tensor], Tensor]


@torch.no_grad()
def nonneg_projector(u: Tensor) -> Tensor:
    """
    Projection onto R_+^n, i.e. ReLU.
    u : any shape; returns same shape.
    """
    return torch.relu(u)


def box_projector(lo: float | Tensor, hi: float | Tensor) -> TensorProjector:
    """Projection onto the box [lo, hi] (element-wise clamp)."""
    @torch.no_grad()
    def project(u: Tensor) -> Tensor:
        return torch.clamp(u, min=lo, max=hi)
    return project


def hyperplane_projector(a: Tensor, b: float) -> TensorProjector:
    """
    Projection onto {x : <a, x> = b}:

        P(x) = x - (<a, x> - b) / ||a||^2 * a
    """
    assert a.dim() == 1, "a must be a vector"
    a_sq = float((a @ a).item())
    assert a_sq > 0.0, "a must be nonzero"

    @torch.no_grad()
    def project(u: Tensor) -> Tensor:
        return u - ((u @ a) - b) / a_sq * a
    return project


def average_projector(dim: int = 0) -> TensorProjector:
    """
    Concur map for stacked local copies: replace each slice along `dim`
    with the mean over `dim`. Orthogonal projection onto the consensus set.
    """
    @torch.no_grad()
    def project(u: Tensor) -> Tensor:
        return u.mean(dim=dim, keepdim=True).expand_as(u).clone()
    return project
