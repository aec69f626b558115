from __future__ import annotations
import argparse
import dataclasses
import math
from dataclasses import dataclass


@dataclass(frozen=True)
class DCConfig:
    """
    Tunables of the Divide-and-Concur iteration.

    Args:
        beta: relaxation step (appears as 1/beta, so must be nonzero)
        epsilon: convergence threshold; converged iff distance < epsilon
        max_steps: iteration budget
    """
    beta: float = 1.0
    epsilon: float = 1e-6
    max_steps: int = 1000

    def __post_init__(self) -> None:
        assert math.isfinite(self.beta), "beta must be finite"
        assert self.beta != 0.0, "beta must be nonzero"
        assert math.isfinite(self.epsilon) and self.epsilon >= 0.0, "epsilon must be finite and >= 0"
        assert int(self.max_steps) == self.max_steps and self.max_steps >= 0, "max_steps must be a non-negative int"

    def replace(self, **changes) -> "DCConfig":
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "DCConfig":
        return cls(beta=float(args.beta), epsilon=float(args.epsilon), max_steps=int(args.max_steps))


def add_config_args(p: argparse.ArgumentParser, defaults: DCConfig | None = None) -> argparse.ArgumentParser:
    d = defaults if defaults is not None else DCConfig()
    p.add_argument("--beta", type=float, default=d.beta)
    p.add_argument("--epsilon", type=float, default=d.epsilon)
    p.add_argument("--max-steps", type=int, default=d.max_steps)
    return p
