from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional
import logging
import math

from ..config import DCConfig
from ..errors import ConvergenceError, DRSError, ProjectionError, UnknownError
from ..splitting import solution, step
from ..state import Distance, Projector, SolverSolution

IterCallback = Callable[[int, Any, float, Dict[str, Any]], None]

logger = logging.getLogger(__name__)


def _guarded(projector: Projector) -> Projector:
    """Surface any non-DRSError raised by a projector as ProjectionError."""
    def project(x: Any) -> Any:
        try:
            return projector(x)
        except DRSError:
            raise
        except Exception as err:
            raise ProjectionError(err) from err
    return project


@dataclass(frozen=True)
class DivideAndConcurSolver:
    """
    Divide-and-Concur iteration with an optional per-iteration callback.

        x_{t+1} = step(x_t, D, C, β)     until  dist(x_{t+1}, x_t) < ε

    On convergence the *pre-update* x_t is snapped with `solution` and
    returned together with t and the measured distance. Exhausting
    `max_steps` raises ConvergenceError(max_steps, last_delta).

    Projector failures surface as ProjectionError; anything else raised
    during the run (e.g. by the distance) as UnknownError.

    The callback sees (t, state, delta, info) with info["event"] in
    {"step", "converged", "exhausted", "failed"}; it never influences control
    flow, and exceptions it raises are logged and dropped.
    """
    divide: Projector
    concur: Projector
    distance: Distance
    config: DCConfig = field(default_factory=DCConfig)
    callback: Optional[IterCallback] = None

    @property
    def beta(self) -> float:
        return self.config.beta

    @property
    def epsilon(self) -> float:
        return self.config.epsilon

    @property
    def max_steps(self) -> int:
        return self.config.max_steps

    def _emit(self, t: int, state: Any, delta: float, event: str, **extra: Any) -> None:
        if self.callback is None:
            return
        info = {"event": event, "beta": self.beta, "epsilon": self.epsilon}
        info.update(extra)
        try:
            self.callback(t, state, delta, info)
        except Exception:
            logger.exception("callback failed on %r event at step %d", event, t)

    def run(self, initial_state: Any) -> SolverSolution:
        divide, concur = _guarded(self.divide), _guarded(self.concur)
        state = initial_state
        delta = math.nan
        t = 0
        try:
            for t in range(self.max_steps):
                update = step(state, divide, concur, self.beta)
                delta = float(self.distance(update, state))
                self._emit(t, update, delta, "step")

                if delta < self.epsilon:
                    snapped = solution(state, divide, concur, self.beta)
                    logger.debug("converged after %d steps, delta=%g", t, delta)
                    self._emit(t, snapped, delta, "converged")
                    return SolverSolution(snapped, t, delta)

                state = update
        except DRSError as err:
            self._emit(t, state, delta, "failed", error=err)
            raise
        except Exception as err:
            wrapped = UnknownError(err)
            self._emit(t, state, delta, "failed", error=wrapped)
            raise wrapped from err

        logger.debug("exhausted %d steps, delta=%g", self.max_steps, delta)
        self._emit(self.max_steps, state, delta, "exhausted")
        raise ConvergenceError(self.max_steps, delta)
