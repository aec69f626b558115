from __future__ import annotations
import torch
from torch import Tensor


@torch.no_grad()
def l2_distance(a: Tensor, b: Tensor) -> float:
    return float(torch.linalg.norm(a - b).item())


@torch.no_grad()
def squared_distance(a: Tensor, b: Tensor) -> float:
    return float(((a - b) ** 2).sum().item())


@torch.no_grad()
def relative_residual(a: Tensor, b: Tensor) -> float:
    """||a - b|| / (||b|| + 1e-12), the residual the fixed-point loops track."""
    return float(((a - b).norm() / (b.norm() + 1e-12)).item())
