from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple, Union

import numpy as np

__all__ = [
    "Axis",
    "DEFAULT_EPS",
    "DEFAULT_STEP",
    "DEFAULT_MAX_ITERATIONS",
    "DET_TOL",
    "Equation",
    "EquationPair",
    "TraceSink",
    "SolverConfig",
    "Newton2DSolution",
    "TraceRecorder",
    "InvalidAxisError",
    "NewtonSolverError",
    "SingularJacobianError",
    "NonConvergenceError",
    "central_difference",
    "fd_jacobian_2d",
    "residuals",
    "format_trace_line",
    "print_trace",
    "solve_newton_2d",
    "newton_2d",
]


DEFAULT_EPS = 1e-2
DEFAULT_STEP = 1e-8
DEFAULT_MAX_ITERATIONS = 100

# |det J| below this is treated as singular.
DET_TOL = 1e-14


Equation = Callable[[float, float], float]
EquationPair = Tuple[Equation, Equation]
TraceSink = Callable[[int, float, float], None]


class Axis(str, Enum):
    """Differentiation axis of a bivariate function f(x, y)."""

    X = "x"
    Y = "y"


class InvalidAxisError(ValueError):
    """Raised when a derivative is requested along an axis other than x or y."""


class NewtonSolverError(RuntimeError):
    """Base class for terminal Newton2D failures.

    Attributes
    ----------
    niter : int
        1-based iteration at which the solve stopped.
    x, y : float
        Estimate held by the solver when it stopped.
    """

    def __init__(self, message: str, *, niter: int, x: float, y: float) -> None:
        super().__init__(message)
        self.niter = int(niter)
        self.x = float(x)
        self.y = float(y)


class SingularJacobianError(NewtonSolverError):
    def __init__(self, message: str, *, niter: int, x: float, y: float, det: float) -> None:
        super().__init__(message, niter=niter, x=x, y=y)
        self.det = float(det)


class NonConvergenceError(NewtonSolverError):
    pass


@dataclass(frozen=True)
class SolverConfig:
    """
    Parameters of a single Newton2D solve.

    Fields
    ------
    eps            : step-size tolerance; the solve stops once |dx| < eps and |dy| < eps
    h              : central-difference step, fixed for the whole solve
    max_iterations : iteration budget
    verbose        : emit one trace event per iteration

    Notes
    -----
    - Convergence is judged on the Newton step, not on the residual. A point
      returned with eps=1e-2 may leave |f| well above 1e-2 on steep equations.
    - h=1e-8 balances truncation against round-off for double precision.
    """
    eps: float = DEFAULT_EPS
    h: float = DEFAULT_STEP
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    verbose: bool = False

    def __post_init__(self) -> None:
        if not (np.isfinite(self.eps) and self.eps > 0.0):
            raise ValueError("eps must be a positive finite number.")
        if not (np.isfinite(self.h) and self.h > 0.0):
            raise ValueError("h must be a positive finite number.")
        if int(self.max_iterations) != self.max_iterations or self.max_iterations < 1:
            raise ValueError("max_iterations must be a positive integer.")
        object.__setattr__(self, "verbose", bool(self.verbose))


@dataclass
class Newton2DSolution:
    x: float
    y: float

    # diagnostics
    niter: int
    dx: float
    dy: float
    residuals: Tuple[float, float]
    residual_inf: float


class TraceRecorder:
    """Trace sink that keeps every (iteration, x, y) event in memory."""

    def __init__(self) -> None:
        self.events: List[Tuple[int, float, float]] = []

    def __call__(self, iteration: int, x: float, y: float) -> None:
        self.events.append((int(iteration), float(x), float(y)))

    def __len__(self) -> int:
        return len(self.events)

    @property
    def points(self) -> np.ndarray:
        """Iterates as an array of shape (n, 2)."""
        if not self.events:
            return np.empty((0, 2), dtype=float)
        return np.array([(x, y) for _, x, y in self.events], dtype=float)


def format_trace_line(iteration: int, x: float, y: float) -> str:
    return f"{iteration}-iteration: x = {x}, y = {y}"


def print_trace(iteration: int, x: float, y: float) -> None:
    print(format_trace_line(iteration, x, y))


def _as_axis(axis: Any) -> Axis:
    try:
        return Axis(axis)
    except (ValueError, TypeError):
        raise InvalidAxisError(f"Invalid axis {axis!r}; expected one of 'x', 'y'.") from None


def _as_pair(system: Any) -> EquationPair:
    try:
        f1, f2 = system
    except (TypeError, ValueError):
        raise ValueError("system must be a pair (f1, f2) of callables f(x, y) -> float.") from None
    if not (callable(f1) and callable(f2)):
        raise ValueError("system must be a pair (f1, f2) of callables f(x, y) -> float.")
    return f1, f2


def central_difference(
    f: Equation,
    x: float,
    y: float,
    h: float,
    axis: Union[Axis, str],
) -> float:
    """Central-difference partial derivative of f at (x, y), O(h^2).

        axis=x : (f(x+h, y) - f(x-h, y)) / (2h)
        axis=y : (f(x, y+h) - f(x, y-h)) / (2h)
    """
    ax = _as_axis(axis)
    h = float(h)
    if not h > 0.0:
        raise ValueError("h must be positive.")
    x, y = float(x), float(y)

    if ax is Axis.X:
        return (float(f(x + h, y)) - float(f(x - h, y))) / (2.0 * h)
    return (float(f(x, y + h)) - float(f(x, y - h))) / (2.0 * h)


def fd_jacobian_2d(system: EquationPair, x: float, y: float, h: float) -> np.ndarray:
    """FD Jacobian [[df1/dx, df1/dy], [df2/dx, df2/dy]] (8 function evaluations)."""
    f1, f2 = _as_pair(system)
    return np.array(
        [
            [central_difference(f1, x, y, h, Axis.X), central_difference(f1, x, y, h, Axis.Y)],
            [central_difference(f2, x, y, h, Axis.X), central_difference(f2, x, y, h, Axis.Y)],
        ],
        dtype=float,
    )


def residuals(system: EquationPair, x: float, y: float) -> Tuple[float, float]:
    f1, f2 = _as_pair(system)
    return float(f1(x, y)), float(f2(x, y))


def solve_newton_2d(
    system: EquationPair,
    x0: float,
    y0: float,
    config: SolverConfig = SolverConfig(),
    *,
    trace: Optional[TraceSink] = None,
) -> Newton2DSolution:
    """2x2 Newton-Raphson with a central-difference Jacobian and Cramer's rule.

    Parameters
    ----------
    system
        Pair (f1, f2) of scalar equations f(x, y) -> float.
    x0, y0
        Initial guess.
    config
        Tolerance, FD step, iteration budget and verbosity.
    trace
        Sink called as trace(iteration, x, y) after every update when
        config.verbose is set. Defaults to print_trace.

    Returns
    -------
    Newton2DSolution
        The post-update estimate of the first iteration whose step satisfies
        |dx| < eps and |dy| < eps, with residual diagnostics.

    Raises
    ------
    SingularJacobianError
        |det J| < DET_TOL at some iteration.
    NonConvergenceError
        max_iterations exhausted before the step-size test passed.
    """
    f1, f2 = _as_pair(system)
    x, y = float(x0), float(y0)
    if not (np.isfinite(x) and np.isfinite(y)):
        raise ValueError("initial guess (x0, y0) must be finite.")

    eps = float(config.eps)
    h = float(config.h)
    emit = (trace if trace is not None else print_trace) if config.verbose else None

    for it in range(1, int(config.max_iterations) + 1):
        fx1, fx2 = float(f1(x, y)), float(f2(x, y))
        J = fd_jacobian_2d((f1, f2), x, y, h)
        df1x, df1y, df2x, df2y = (float(v) for v in J.ravel())

        det = df1x * df2y - df1y * df2x
        if abs(det) < DET_TOL:
            raise SingularJacobianError(
                f"Newton2D: Jacobian determinant is zero (|det|={abs(det):.3e}) at iter={it} (x={x}, y={y}).",
                niter=it, x=x, y=y, det=det,
            )

        # Cramer's rule for J * (dx, dy) = -(f1, f2)
        dx = (-fx1 * df2y + fx2 * df1y) / det
        dy = (-df1x * fx2 + df2x * fx1) / det

        x, y = x + dx, y + dy

        if emit is not None:
            emit(it, x, y)

        if abs(dx) < eps and abs(dy) < eps:
            r = residuals((f1, f2), x, y)
            return Newton2DSolution(
                x=x,
                y=y,
                niter=it,
                dx=dx,
                dy=dy,
                residuals=r,
                residual_inf=max(abs(r[0]), abs(r[1])),
            )

    raise NonConvergenceError(
        f"Newton2D did not converge in {config.max_iterations} iterations. x={x}, y={y}.",
        niter=int(config.max_iterations), x=x, y=y,
    )


def newton_2d(
    system: EquationPair,
    x0: float,
    y0: float,
    config: SolverConfig = SolverConfig(),
    *,
    trace: Optional[TraceSink] = None,
) -> Tuple[float, float]:
    """Same as solve_newton_2d, returning only the root (x, y)."""
    sol = solve_newton_2d(system, x0, y0, config, trace=trace)
    return sol.x, sol.y
