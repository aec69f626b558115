# drsplit/splitting.py
from __future__ import annotations
from typing import Tuple

from .state import Projector, S


def relaxations(beta: float) -> Tuple[float, float]:
    """(gamma_a, gamma_b) = (-1/beta, 1/beta)."""
    if beta == 0:
        raise ValueError("beta must be nonzero")
    return -1.0 / beta, 1.0 / beta


def step(state: S, divide: Projector, concur: Projector, beta: float) -> S:
    """
    One generalised Douglas–Rachford (Divide-and-Concur) update:

        f_a   = C(x) (1 + γ_a) - γ_a x,     γ_a = -1/β
        f_b   = D(x) (1 + γ_b) - γ_b x,     γ_b =  1/β
        x_new = x + β (C(f_b) - D(f_a))

    Each projector is called exactly twice. Only `+` and scalar `*` are used
    on states, so any vector-space-like value works. Projector exceptions
    propagate untouched and no partial state is produced.
    """
    gamma_a, gamma_b = relaxations(beta)

    fa = concur(state) * (1.0 + gamma_a) + state * -gamma_a
    fb = divide(state) * (1.0 + gamma_b) + state * -gamma_b

    pafb = concur(fb)
    pbfa = divide(fa)

    inner = pafb + pbfa * -1.0
    return state + inner * beta


def solution(state: S, divide: Projector, concur: Projector, beta: float) -> S:
    """
    Snap a (converged) state onto the divide manifold: D(f_a).

    This is the divide half of one more step; with β = 1 it reduces to D(x).
    """
    gamma_a, _ = relaxations(beta)
    fa = concur(state) * (1.0 + gamma_a) + state * -gamma_a
    return divide(fa)
