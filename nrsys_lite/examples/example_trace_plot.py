"""
Example: Newton2D iterate path over the residual field of the transcendental system.

  - solve f1 = sin(x) + sqrt(2y^3) - 4, f2 = tan(x) - y^2 + 4 from (3.17, 2)
  - collect every iterate through a TraceRecorder sink (nothing is printed by the solver)
  - draw the zero contours of f1, f2 and the iterate path

Run:
  python -m nrsys_lite.examples.example_trace_plot --outdir out
"""
from __future__ import annotations

import argparse
import os

import numpy as np

# Non-interactive backend for batch runs
import matplotlib
matplotlib.use("Agg")  # noqa: E402
import matplotlib.pyplot as plt  # noqa: E402

from nrsys_lite.core.newton import SolverConfig, TraceRecorder, solve_newton_2d
from nrsys_lite.models.transcendental import f1, f2, start_point, transcendental_system


def main() -> None:
    ap = argparse.ArgumentParser(description="nrsys_lite - Newton2D iterate path")
    ap.add_argument("--eps", type=float, default=1e-6)
    ap.add_argument("--outdir", type=str, default=".")
    args = ap.parse_args()

    os.makedirs(args.outdir, exist_ok=True)

    x0, y0 = start_point()
    rec = TraceRecorder()
    sol = solve_newton_2d(transcendental_system(), x0, y0, SolverConfig(eps=args.eps, verbose=True), trace=rec)
    print(f"[solution] x={sol.x:.12g}  y={sol.y:.12g}  niter={sol.niter}  residual_inf={sol.residual_inf:.3e}")

    path = np.vstack(([x0, y0], rec.points))

    # window around the path; y > 0 keeps sqrt(2y^3) real
    xs = np.linspace(path[:, 0].min() - 0.2, path[:, 0].max() + 0.2, 301)
    ys = np.linspace(max(path[:, 1].min() - 0.5, 1e-3), path[:, 1].max() + 0.5, 301)
    X, Y = np.meshgrid(xs, ys)
    F1 = np.vectorize(f1)(X, Y)
    F2 = np.vectorize(f2)(X, Y)

    plt.figure()
    plt.contour(X, Y, F1, levels=[0.0], colors="C0")
    plt.contour(X, Y, F2, levels=[0.0], colors="C1")
    plt.plot(path[:, 0], path[:, 1], "k.-", label="iterates")
    plt.plot([sol.x], [sol.y], "r*", ms=12, label=f"root ({sol.x:.4g}, {sol.y:.4g})")
    plt.xlabel("x")
    plt.ylabel("y")
    plt.legend()
    plt.title("Newton2D: f₁ = 0 (C0), f₂ = 0 (C1)")
    plt.tight_layout()
    figpath = os.path.join(args.outdir, "newton2d_path.png")
    plt.savefig(figpath, dpi=200)
    plt.close()

    print(f"[saved] {os.path.abspath(figpath)}")


if __name__ == "__main__":
    main()
