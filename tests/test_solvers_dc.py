import math
import pytest
import torch

from drsplit import (
    ConvergenceError,
    DCConfig,
    DivideAndConcurSolver,
    Solver,
    ProjectionError,
    UnknownError,
    solution,
)
from drsplit.distance import l2_distance
from drsplit.logging import History
from drsplit.prox import hyperplane_projector, nonneg_projector

torch.set_default_dtype(torch.float64)


def _clamp(lo, hi):
    return lambda x: min(max(x, lo), hi)


def _abs(a, b):
    return abs(a - b)


def test_scalar_intervals_converge_to_intersection():
    # D: [1, 2], C: [0, 1.5]  ->  5 -> 3 -> 2 -> 1.5 -> 1.5
    solver = DivideAndConcurSolver(_clamp(1.0, 2.0), _clamp(0.0, 1.5), _abs,
                                   config=DCConfig(beta=1.0, epsilon=1e-9, max_steps=100))
    x, steps, delta = solver.run(5.0)
    assert x == 1.5
    assert steps == 3
    assert delta == 0.0


def test_simplex_feasibility_converges():
    C = hyperplane_projector(torch.ones(3), 1.0)
    solver = DivideAndConcurSolver(nonneg_projector, C, l2_distance,
                                   config=DCConfig(beta=1.0, epsilon=1e-10, max_steps=200))
    out = solver.run(torch.tensor([0.5, -0.2, 0.9]))
    assert out.steps < 50
    assert out.delta < 1e-10
    assert (out.solution >= 0).all()
    assert abs(float(out.solution.sum()) - 1.0) < 1e-8


def test_zero_distance_stops_at_step_zero():
    C = hyperplane_projector(torch.ones(4), 2.0)
    x0 = torch.tensor([3.0, -1.0, 0.5, 0.0])
    solver = DivideAndConcurSolver(nonneg_projector, C, lambda a, b: 0.0,
                                   config=DCConfig(beta=0.9, epsilon=1e-6, max_steps=10))
    x, steps, delta = solver.run(x0)
    assert steps == 0
    assert delta == 0.0
    assert torch.equal(x, solution(x0, nonneg_projector, C, 0.9))


def test_exhaustion_reports_budget_and_last_delta():
    hist = History()
    solver = DivideAndConcurSolver(_clamp(1.0, 2.0), _clamp(0.0, 1.5), lambda a, b: 1.0,
                                   config=DCConfig(beta=1.0, epsilon=0.5, max_steps=7),
                                   callback=hist)
    with pytest.raises(ConvergenceError) as exc:
        solver.run(5.0)
    assert exc.value.steps == 7
    assert exc.value.delta == 1.0
    assert hist.steps == 7
    assert hist.final_event == "exhausted"


def test_delta_equal_to_epsilon_is_not_converged():
    solver = DivideAndConcurSolver(_clamp(1.0, 2.0), _clamp(0.0, 1.5), lambda a, b: 0.5,
                                   config=DCConfig(epsilon=0.5, max_steps=3))
    with pytest.raises(ConvergenceError):
        solver.run(1.2)


def test_zero_budget_fails_with_nan_delta():
    solver = DivideAndConcurSolver(_clamp(1.0, 2.0), _clamp(0.0, 1.5), _abs,
                                   config=DCConfig(max_steps=0))
    with pytest.raises(ConvergenceError) as exc:
        solver.run(1.2)
    assert exc.value.steps == 0
    assert math.isnan(exc.value.delta)


def test_projection_error_on_first_call_consumes_no_steps():
    def divide(x):
        raise ProjectionError("no matching")

    hist = History()
    solver = DivideAndConcurSolver(divide, _clamp(0.0, 1.5), _abs, callback=hist)
    with pytest.raises(ProjectionError, match="no matching"):
        solver.run(5.0)
    assert hist.steps == 0
    assert hist.final_event == "failed"


def test_projection_error_mid_run_propagates_unchanged():
    calls = []

    def divide(x):
        calls.append(x)
        if len(calls) > 4:
            raise ProjectionError("late failure")
        return min(max(x, 1.0), 2.0)

    solver = DivideAndConcurSolver(divide, _clamp(0.0, 1.5), _abs,
                                   config=DCConfig(epsilon=1e-12, max_steps=100))
    with pytest.raises(ProjectionError, match="late failure"):
        solver.run(5.0)


def test_projector_exceptions_become_projection_errors():
    def concur(x):
        raise RuntimeError("kaboom")

    solver = DivideAndConcurSolver(_clamp(1.0, 2.0), concur, _abs)
    with pytest.raises(ProjectionError) as exc:
        solver.run(5.0)
    assert isinstance(exc.value.cause, RuntimeError)
    assert exc.value.__cause__ is exc.value.cause


def test_plain_divide_failure_on_first_call_is_a_projection_error():
    def divide(x):
        raise ValueError("no perfect matching")

    hist = History()
    solver = DivideAndConcurSolver(divide, _clamp(0.0, 1.5), _abs, callback=hist)
    with pytest.raises(ProjectionError, match="no perfect matching"):
        solver.run(5.0)
    assert hist.steps == 0


def test_failing_callback_does_not_change_the_result():
    def sink(t, state, delta, info):
        raise RuntimeError("sink down")

    solver = DivideAndConcurSolver(_clamp(1.0, 2.0), _clamp(0.0, 1.5), _abs,
                                   config=DCConfig(epsilon=1e-9), callback=sink)
    assert tuple(solver.run(5.0)) == (1.5, 3, 0.0)


def test_failing_callback_does_not_mask_exhaustion_or_failures():
    def sink(t, state, delta, info):
        raise RuntimeError("sink down")

    exhausting = DivideAndConcurSolver(_clamp(1.0, 2.0), _clamp(0.0, 1.5), lambda a, b: 1.0,
                                       config=DCConfig(epsilon=0.5, max_steps=4), callback=sink)
    with pytest.raises(ConvergenceError) as exc:
        exhausting.run(5.0)
    assert exc.value.steps == 4

    def dist(a, b):
        raise ZeroDivisionError("bad norm")

    failing = DivideAndConcurSolver(_clamp(1.0, 2.0), _clamp(0.0, 1.5), dist, callback=sink)
    with pytest.raises(UnknownError, match="bad norm"):
        failing.run(5.0)


def test_distance_failure_is_wrapped():
    def dist(a, b):
        raise ZeroDivisionError("bad norm")

    solver = DivideAndConcurSolver(_clamp(1.0, 2.0), _clamp(0.0, 1.5), dist)
    with pytest.raises(UnknownError, match="bad norm"):
        solver.run(5.0)


def test_callback_sees_every_step_then_convergence():
    hist = History()
    solver = DivideAndConcurSolver(_clamp(1.0, 2.0), _clamp(0.0, 1.5), _abs,
                                   config=DCConfig(epsilon=1e-9), callback=hist)
    solver.run(5.0)
    assert hist.deltas == [2.0, 1.0, 0.5, 0.0]
    assert hist.events == ["step"] * 4 + ["converged"]
    assert hist.final_step == 3


def test_solver_is_immutable_and_exposes_config():
    solver = DivideAndConcurSolver(_clamp(1.0, 2.0), _clamp(0.0, 1.5), _abs,
                                   config=DCConfig(beta=0.8, epsilon=1e-3, max_steps=42))
    assert (solver.beta, solver.epsilon, solver.max_steps) == (0.8, 1e-3, 42)
    with pytest.raises(Exception):
        solver.config = DCConfig()


def test_solver_satisfies_the_solver_protocol():
    solver = DivideAndConcurSolver(_clamp(1.0, 2.0), _clamp(0.0, 1.5), _abs)
    assert isinstance(solver, Solver)
    assert not isinstance(object(), Solver)
