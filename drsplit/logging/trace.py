from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging
import math

from ..solvers.dc import IterCallback

LOGGER_NAME = "drsplit"


def get_logger() -> logging.Logger:
    """Package logger; installs a stream handler only if nobody configured one."""
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] [%(name)s] %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


@dataclass
class History:
    """
    Callback that records the delta trace of a run.

    Usage:
        hist = History()
        DivideAndConcurSolver(D, C, dist, callback=hist).run(x0)
        hist.deltas, hist.final_event
    """
    deltas: List[float] = field(default_factory=list)
    events: List[str] = field(default_factory=list)
    final_event: Optional[str] = None
    final_step: Optional[int] = None

    def __call__(self, t: int, state: Any, delta: float, info: Dict[str, Any]) -> None:
        event = info.get("event", "step")
        self.events.append(event)
        if event == "step":
            self.deltas.append(float(delta))
        else:
            self.final_event = event
            self.final_step = t

    @property
    def steps(self) -> int:
        return len(self.deltas)

    def tail_ratio(self, tail: int = 50) -> float:
        """Mean of d_{k+1}/d_k over the last `tail` deltas (contraction proxy)."""
        r = self.deltas[-tail:] if len(self.deltas) >= tail else self.deltas
        ratios = [r[i + 1] / (r[i] + 1e-18) for i in range(len(r) - 1)]
        return float(sum(ratios) / len(ratios)) if ratios else math.nan


def logging_callback(logger: Optional[logging.Logger] = None, every: int = 1) -> IterCallback:
    """Forward solver events to `logging`: steps at DEBUG, terminal events at INFO/WARNING."""
    assert every >= 1, "every must be >= 1"
    log = logger if logger is not None else get_logger()

    def cb(t: int, state: Any, delta: float, info: Dict[str, Any]) -> None:
        event = info.get("event")
        if event == "step":
            if t % every == 0:
                log.debug("step %d: delta=%.6g", t, delta)
        elif event == "converged":
            log.info("converged at step %d: delta=%.6g", t, delta)
        elif event == "exhausted":
            log.warning("no convergence after %d steps: delta=%.6g", t, delta)
        elif event == "failed":
            log.warning("run failed at step %d: %s", t, info.get("error"))

    return cb
