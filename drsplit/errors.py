from __future__ import annotations
import math


class DRSError(Exception):
    """Base class for every error surfaced by the splitting engine."""


class ConvergenceError(DRSError):
    """
    The iteration budget ran out before the distance dropped below epsilon.

    Recoverable by the caller (retry with another beta / epsilon / budget);
    never retried internally.
    """

    def __init__(self, steps: int, delta: float):
        self.steps = int(steps)
        self.delta = float(delta) if delta is not None else math.nan
        super().__init__(
            f"convergence error: failed to converge, delta={self.delta}, after {self.steps} steps"
        )


class ProjectionError(DRSError):
    """A projector could not map its input (malformed or infeasible instance)."""

    def __init__(self, cause: BaseException | str):
        self.cause = cause
        super().__init__(f"projection error: {cause}")


class UnknownError(DRSError):
    """Any other failure reaching the solver boundary; the original is kept in ``cause``."""

    def __init__(self, cause: BaseException | str):
        self.cause = cause
        super().__init__(f"unknown error: {cause}")
