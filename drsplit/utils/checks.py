from __future__ import annotations
from typing import Any

from ..splitting import step
from ..state import Distance, Projector


def idempotence_gap(projector: Projector, state: Any, distance: Distance) -> float:
    """dist(P(P(x)), P(x)); zero (up to round-off) for a genuine projector."""
    once = projector(state)
    twice = projector(once)
    return float(distance(twice, once))


def step_is_deterministic(state: Any, divide: Projector, concur: Projector, beta: float,
                          distance: Distance, tol: float = 0.0) -> bool:
    """Two evaluations of `step` from the same inputs agree within `tol`."""
    first = step(state, divide, concur, beta)
    second = step(state, divide, concur, beta)
    return float(distance(first, second)) <= tol
