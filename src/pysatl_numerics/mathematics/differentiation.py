from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from collections.abc import Callable, Sequence
from math import isfinite
from typing import TYPE_CHECKING

import numpy as np

from pysatl_numerics.types import MACHINE_EPSILON

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from pysatl_numerics.types import ScalarFunc


def derivative(f: ScalarFunc, x: float, step: float | None = None) -> float:
    """
    5-point central numerical derivative.

    Parameters
    ----------
    f : Callable[[float], float]
        Scalar function.
    x : float
        Evaluation point.
    step : float, optional
        Stencil step; defaults to ``1e-5 * max(1, |x|)``.

    Returns
    -------
    float
        Approximated derivative ``f'(x)``.
    """
    if not isfinite(x):
        return float("nan")
    h = step if step is not None else 1e-5 * max(1.0, abs(x))
    f1 = float(f(x + h))
    f_1 = float(f(x - h))
    f2 = float(f(x + 2 * h))
    f_2 = float(f(x - 2 * h))
    return float((-f2 + 8 * f1 - 8 * f_1 + f_2) / (12.0 * h))


def gradient(
    f: Callable[[NDArray[np.float64]], float],
    point: Sequence[float] | NDArray[np.float64],
    step: float | None = None,
) -> NDArray[np.float64]:
    """
    Central-difference gradient of a multivariate function.

    Parameters
    ----------
    f : Callable[[ndarray], float]
        Function of a parameter vector.
    point : array_like
        Evaluation point.
    step : float, optional
        Relative step; defaults to ``eps ** (1/3)``.

    Returns
    -------
    ndarray
        Gradient vector with the same length as ``point``.
    """
    x = np.array(point, dtype=float)
    rel = step if step is not None else MACHINE_EPSILON ** (1.0 / 3.0)
    grad = np.empty_like(x)
    for i in range(x.size):
        h = rel * max(1.0, abs(x[i]))
        shifted = x.copy()
        shifted[i] = x[i] + h
        f_plus = float(f(shifted))
        shifted[i] = x[i] - h
        f_minus = float(f(shifted))
        grad[i] = (f_plus - f_minus) / (2.0 * h)
    return grad


__all__ = ["derivative", "gradient"]
