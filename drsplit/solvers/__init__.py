from .dc import DivideAndConcurSolver

__all__ = ["DivideAndConcurSolver"]
