# drsplit/__init__.py
from .config import DCConfig
from .errors import DRSError, ConvergenceError, ProjectionError, UnknownError
from .splitting import step, solution
from .solvers.dc import DivideAndConcurSolver
from .state import Solver, SolverSolution, State

__all__ = [
    "DCConfig",
    "DRSError",
    "ConvergenceError",
    "ProjectionError",
    "UnknownError",
    "step",
    "solution",
    "DivideAndConcurSolver",
    "Solver",
    "SolverSolution",
    "State",
]
