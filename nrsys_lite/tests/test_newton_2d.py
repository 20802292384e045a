import numpy as np
import pytest

from nrsys_lite.core.newton import (
    NewtonSolverError,
    NonConvergenceError,
    SingularJacobianError,
    SolverConfig,
    TraceRecorder,
    newton_2d,
    solve_newton_2d,
)


def _linear_system():
    # unique root at (2, 3)
    return (lambda x, y: x - 2.0, lambda x, y: y - 3.0)


def _nonlinear_system():
    # x^2 + y - 37 = 0, x - y^2 - 5 = 0 with a root at (6, 1)
    return (lambda x, y: x ** 2 + y - 37.0, lambda x, y: x - y ** 2 - 5.0)


@pytest.mark.parametrize("start", [(0.0, 0.0), (-5.0, 10.0), (10.0, -4.0)])
def test_linear_system_is_solved_by_the_first_step(start) -> None:
    rec = TraceRecorder()
    sol = solve_newton_2d(_linear_system(), *start, SolverConfig(verbose=True), trace=rec)

    # first update lands on the root; the second step confirms |dx|, |dy| < eps
    assert np.allclose(rec.points[0], [2.0, 3.0], rtol=0.0, atol=1e-5)
    assert sol.niter == 2
    assert np.allclose([sol.x, sol.y], [2.0, 3.0], rtol=0.0, atol=1e-2)


def test_linear_system_near_root_converges_in_one_iteration() -> None:
    rec = TraceRecorder()
    x, y = newton_2d(_linear_system(), 2.001, 2.999, SolverConfig(verbose=True), trace=rec)

    assert len(rec) == 1
    assert rec.events[0][0] == 1
    assert x == pytest.approx(2.0, abs=1e-6)
    assert y == pytest.approx(3.0, abs=1e-6)


def test_nonlinear_system_fd_jacobian() -> None:
    sol = solve_newton_2d(_nonlinear_system(), 5.0, 2.0, SolverConfig(eps=1e-10, max_iterations=30))

    assert np.allclose([sol.x, sol.y], [6.0, 1.0], rtol=0.0, atol=1e-8)
    assert sol.residual_inf < 1e-8
    assert abs(sol.dx) < 1e-10 and abs(sol.dy) < 1e-10


def test_singular_jacobian_fails_on_first_iteration() -> None:
    system = (lambda x, y: x + y, lambda x, y: 2.0 * x + 2.0 * y)
    rec = TraceRecorder()

    with pytest.raises(SingularJacobianError) as excinfo:
        newton_2d(system, 0.0, 0.0, SolverConfig(verbose=True), trace=rec)

    err = excinfo.value
    assert err.niter == 1
    assert abs(err.det) < 1e-14
    assert (err.x, err.y) == (0.0, 0.0)
    assert len(rec) == 0


def test_no_real_root_exhausts_iteration_budget() -> None:
    # x^2 + 1 and y^2 + 1: every Newton step has |dx|, |dy| >= 1
    system = (lambda x, y: x ** 2 + 1.0, lambda x, y: y ** 2 + 1.0)
    rec = TraceRecorder()

    with pytest.raises(NonConvergenceError) as excinfo:
        newton_2d(system, 0.5, 0.7, SolverConfig(max_iterations=5, verbose=True), trace=rec)

    assert excinfo.value.niter == 5
    assert len(rec) == 5
    assert [it for it, _, _ in rec.events] == [1, 2, 3, 4, 5]
    assert (excinfo.value.x, excinfo.value.y) == rec.events[-1][1:]


def test_solver_errors_are_runtime_errors() -> None:
    assert issubclass(SingularJacobianError, NewtonSolverError)
    assert issubclass(NonConvergenceError, NewtonSolverError)
    assert issubclass(NewtonSolverError, RuntimeError)


def test_repeated_solves_are_bit_identical() -> None:
    cfg = SolverConfig(eps=1e-10)
    a = newton_2d(_nonlinear_system(), 5.0, 2.0, cfg)
    b = newton_2d(_nonlinear_system(), 5.0, 2.0, cfg)

    assert a == b


def test_quiet_solve_does_not_call_sink_or_print(capsys) -> None:
    rec = TraceRecorder()
    newton_2d(_nonlinear_system(), 5.0, 2.0, SolverConfig(verbose=False), trace=rec)

    assert len(rec) == 0
    assert capsys.readouterr().out == ""


def test_verbose_without_sink_prints_trace_lines(capsys) -> None:
    x, y = newton_2d(_linear_system(), 2.001, 2.999, SolverConfig(verbose=True))

    out = capsys.readouterr().out.splitlines()
    assert out == [f"1-iteration: x = {x}, y = {y}"]


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(eps=0.0),
        dict(eps=-1e-3),
        dict(eps=float("nan")),
        dict(h=0.0),
        dict(h=float("inf")),
        dict(max_iterations=0),
        dict(max_iterations=2.5),
    ],
)
def test_config_validation(kwargs) -> None:
    with pytest.raises(ValueError):
        SolverConfig(**kwargs)


def test_config_defaults_and_immutability() -> None:
    cfg = SolverConfig()
    assert (cfg.eps, cfg.h, cfg.max_iterations, cfg.verbose) == (1e-2, 1e-8, 100, False)

    with pytest.raises(AttributeError):
        cfg.eps = 1.0


@pytest.mark.parametrize(
    "system",
    [
        (lambda x, y: x,),
        (lambda x, y: x, lambda x, y: y, lambda x, y: x + y),
        (lambda x, y: x, 1.0),
        None,
    ],
)
def test_system_must_be_a_pair_of_callables(system) -> None:
    with pytest.raises(ValueError):
        newton_2d(system, 0.0, 0.0)


def test_non_finite_start_is_rejected() -> None:
    with pytest.raises(ValueError):
        newton_2d(_linear_system(), float("nan"), 0.0)
