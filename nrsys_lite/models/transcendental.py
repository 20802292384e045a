from __future__ import annotations

from typing import Tuple

import numpy as np

from ..core.newton import EquationPair

__all__ = [
    "X0",
    "Y0",
    "f1",
    "f2",
    "start_point",
    "transcendental_system",
]


# Starting point of the demonstration run; the nearby root is (pi, 2).
X0 = 3.17
Y0 = 2.0


def f1(x: float, y: float) -> float:
    """f1(x, y) = sin(x) + sqrt(2 y^3) - 4"""
    return float(np.sin(x) + np.sqrt(2.0 * y ** 3) - 4.0)


def f2(x: float, y: float) -> float:
    """f2(x, y) = tan(x) - y^2 + 4"""
    return float(np.tan(x) - y ** 2 + 4.0)


def transcendental_system() -> EquationPair:
    return f1, f2


def start_point() -> Tuple[float, float]:
    return X0, Y0
