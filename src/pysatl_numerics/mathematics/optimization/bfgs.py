"""
Quasi-Newton minimization with the Broyden-Fletcher-Goldfarb-Shanno update.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import sqrt
from typing import TYPE_CHECKING

import numpy as np

from pysatl_numerics.errors import NumericalError
from pysatl_numerics.mathematics.differentiation import gradient as numerical_gradient
from pysatl_numerics.mathematics.optimization.optimizer import (
    OptimizationStatus,
    Optimizer,
    check_bounds,
)
from pysatl_numerics.types import MACHINE_EPSILON

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from typing import TypeAlias

    from numpy.typing import NDArray

    from pysatl_numerics.types import ObjectiveFunc

    GradientFunc: TypeAlias = Callable[[NDArray[np.float64]], Sequence[float] | NDArray[np.float64]]

MAX_STEP_SCALE = 100.0
SUFFICIENT_DECREASE = 1e-4


class BFGS(Optimizer):
    """
    Bounded BFGS with a backtracking line search.

    Parameters
    ----------
    objective : Callable[[ndarray], float]
        Function to optimize.
    number_of_parameters : int
        Dimension of the search space.
    initial_values, lower_bounds, upper_bounds : Sequence[float]
        Starting point and box constraints; trial points are clamped to the box.
    gradient : Callable[[ndarray], array_like], optional
        Analytical gradient of the objective. A central-difference gradient of
        the (counted) objective is used when omitted.
    """

    def __init__(
        self,
        objective: ObjectiveFunc,
        number_of_parameters: int,
        initial_values: Sequence[float],
        lower_bounds: Sequence[float],
        upper_bounds: Sequence[float],
        gradient: GradientFunc | None = None,
    ) -> None:
        super().__init__(objective, number_of_parameters)
        lower, upper, initial = check_bounds(
            number_of_parameters, lower_bounds, upper_bounds, initial_values
        )
        if initial is None:
            raise ValueError("The initial values are required.")
        self.initial_values = initial
        self.lower_bounds = lower
        self.upper_bounds = upper
        self.gradient = gradient

    def _gradient(self, point: NDArray[np.float64]) -> NDArray[np.float64]:
        if self.gradient is not None:
            return self._scale * np.asarray(self.gradient(point), dtype=float)
        return numerical_gradient(self.evaluate, point)

    def _optimize(self) -> None:
        n = self.number_of_parameters
        p = self.initial_values.copy()
        fp = self.evaluate(p)
        g = self._gradient(p)
        hessian_inverse = np.eye(n)
        xi = -g
        max_step = MAX_STEP_SCALE * max(float(np.sqrt(p @ p)), float(n))

        while self.iterations < self.max_iterations:
            p_new, fp = self._line_search(p, fp, g, xi, max_step)
            p_new = np.clip(p_new, self.lower_bounds, self.upper_bounds)
            xi = p_new - p
            p = p_new

            if np.max(np.abs(xi) / np.maximum(np.abs(p), 1.0)) <= self.relative_tolerance:
                self.update_status(OptimizationStatus.SUCCESS)
                return

            g_old = g
            g = self._gradient(p)
            den = max(abs(fp), 1.0)
            if np.max(np.abs(g) * np.maximum(np.abs(p), 1.0) / den) <= self.absolute_tolerance:
                self.update_status(OptimizationStatus.SUCCESS)
                return

            dg = g - g_old
            hdg = hessian_inverse @ dg
            fac = float(dg @ xi)
            fae = float(dg @ hdg)
            # skip the update unless the curvature condition holds
            if fac > sqrt(MACHINE_EPSILON * float(dg @ dg) * float(xi @ xi)):
                fac = 1.0 / fac
                fad = 1.0 / fae
                u = fac * xi - fad * hdg
                hessian_inverse += (
                    fac * np.outer(xi, xi) - fad * np.outer(hdg, hdg) + fae * np.outer(u, u)
                )
            xi = -(hessian_inverse @ g)
            self.iterations += 1

        self.update_status(OptimizationStatus.MAXIMUM_ITERATIONS_REACHED)

    def _line_search(
        self,
        x_old: NDArray[np.float64],
        f_old: float,
        g: NDArray[np.float64],
        direction: NDArray[np.float64],
        max_step: float,
    ) -> tuple[NDArray[np.float64], float]:
        """Backtracking line search along ``direction`` with cubic interpolation."""
        p = direction.copy()
        norm = float(np.sqrt(p @ p))
        if norm > max_step:
            p *= max_step / norm
        slope = float(g @ p)
        if slope == 0.0:
            return x_old.copy(), f_old
        if slope > 0.0:
            raise NumericalError("Roundoff problem in line search.")

        test = float(np.max(np.abs(p) / np.maximum(np.abs(x_old), 1.0)))
        alam_min = MACHINE_EPSILON / test
        alam, alam2, f2 = 1.0, 0.0, 0.0
        while True:
            x = np.clip(x_old + alam * p, self.lower_bounds, self.upper_bounds)
            f = self.evaluate(x)
            if alam < alam_min:
                return x_old.copy(), f_old
            if f <= f_old + SUFFICIENT_DECREASE * alam * slope:
                return x, f
            if alam == 1.0:
                tmp_lam = -slope / (2.0 * (f - f_old - slope))
            else:
                rhs1 = f - f_old - alam * slope
                rhs2 = f2 - f_old - alam2 * slope
                a = (rhs1 / alam**2 - rhs2 / alam2**2) / (alam - alam2)
                b = (-alam2 * rhs1 / alam**2 + alam * rhs2 / alam2**2) / (alam - alam2)
                if a == 0.0:
                    tmp_lam = -slope / (2.0 * b)
                else:
                    disc = b * b - 3.0 * a * slope
                    if disc < 0.0:
                        tmp_lam = 0.5 * alam
                    elif b <= 0.0:
                        tmp_lam = (-b + sqrt(disc)) / (3.0 * a)
                    else:
                        tmp_lam = -slope / (b + sqrt(disc))
                tmp_lam = min(tmp_lam, 0.5 * alam)
            alam2, f2 = alam, f
            alam = max(tmp_lam, 0.1 * alam)


__all__ = ["BFGS"]
