from __future__ import annotations
from typing import Any, Callable, NamedTuple, Protocol, TypeVar, runtime_checkable


class State(Protocol):
    """
    Abstract problem state: a point in some real vector space.

    The engine only ever needs
        x + y   (component-wise addition)
        x * a   (scaling by a python float)
    and never looks inside. torch tensors and floats satisfy this as-is.
    """
    def __add__(self, other: Any) -> Any: ...
    def __mul__(self, scalar: float) -> Any: ...


S = TypeVar("S", bound=State)

# P(P(x)) == P(x) is a caller obligation. Failure is signalled by raising.
Projector = Callable[[S], S]

# Non-negative; 0 means "no observable change" in the problem's own sense.
Distance = Callable[[S, S], float]


class SolverSolution(NamedTuple):
    solution: Any
    steps: int
    delta: float


@runtime_checkable
class Solver(Protocol):
    def run(self, initial_state: Any) -> SolverSolution: ...
