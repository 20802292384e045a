from __future__ import annotations

import sys

from ..core.newton import SolverConfig, newton_2d, residuals
from ..models.transcendental import start_point, transcendental_system


def _use_utf8_stdout() -> None:
    reconfigure = getattr(sys.stdout, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(encoding="utf-8")


def main() -> None:
    _use_utf8_stdout()

    system = transcendental_system()
    x0, y0 = start_point()

    # Solver failures propagate: the run aborts with the error message.
    x, y = newton_2d(system, x0, y0, SolverConfig(verbose=True))

    print(f"\n[solution] x = {x}, y = {y}")
    for name, r in zip(("f₁", "f₂"), residuals(system, x, y)):
        print(f"[check {name}] f(x, y) = {r} ≈ 0")


if __name__ == "__main__":
    main()
