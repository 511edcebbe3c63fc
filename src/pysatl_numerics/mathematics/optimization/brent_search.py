"""
One-dimensional minimization by Brent's method.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import copysign
from typing import TYPE_CHECKING

from pysatl_numerics.mathematics.optimization.optimizer import OptimizationStatus, Optimizer
from pysatl_numerics.types import MACHINE_EPSILON

if TYPE_CHECKING:
    from pysatl_numerics.types import ScalarFunc

GOLDEN_SECTION = 0.381966
"""Fraction of the interval taken by a golden section step."""


class BrentSearch(Optimizer):
    """
    Brent's parabolic interpolation search on ``[lower_bound, upper_bound]``.

    Parameters
    ----------
    objective : Callable[[float], float]
        Scalar function of one variable.
    lower_bound, upper_bound : float
        Search interval.

    Raises
    ------
    ValueError
        If ``upper_bound < lower_bound``.

    Notes
    -----
    Follows the ``brent`` routine of *Numerical Recipes*: golden section steps
    safeguard a parabolic fit through the three best points.
    """

    def __init__(self, objective: ScalarFunc, lower_bound: float, upper_bound: float) -> None:
        if upper_bound < lower_bound:
            raise ValueError("The upper bound cannot be less than the lower bound.")
        super().__init__(lambda x: objective(float(x[0])), 1)
        self.scalar_objective = objective
        self.lower_bound = float(lower_bound)
        self.upper_bound = float(upper_bound)

    def bracket(self, step: float = 1e-2, factor: float = 2.0) -> tuple[float, float]:
        """
        Walk downhill from the lower bound until the objective rises again.

        The search interval is replaced by the bracket found.

        Parameters
        ----------
        step : float, default 1e-2
            Step between trial points.
        factor : float, default 2.0
            Growth factor applied to the step after every downhill move.

        Returns
        -------
        tuple[float, float]
            New ``(lower_bound, upper_bound)``.
        """
        f = self.scalar_objective
        a, b = self.lower_bound, self.lower_bound + step
        fa, fb = f(a), f(b)
        if fb > fa:
            a, b, fa, fb = b, a, fb, fa
            step = -step
        for _ in range(self.max_iterations):
            c = b + step
            fc = f(c)
            if fc > fb:
                break
            a, b, fa, fb = b, c, fb, fc
            step *= factor
        else:
            c = b
        self.lower_bound, self.upper_bound = (a, c) if a < c else (c, a)
        return self.lower_bound, self.upper_bound

    def _optimize(self) -> None:
        zeps = MACHINE_EPSILON * 1e-3
        a, b = self.lower_bound, self.upper_bound
        x = w = v = 0.5 * (a + b)
        fx = fw = fv = self.evaluate([x])
        d = e = 0.0

        for _ in range(self.max_iterations):
            self.iterations += 1
            xm = 0.5 * (a + b)
            tol1 = self.relative_tolerance * abs(x) + zeps
            tol2 = 2.0 * tol1
            if abs(x - xm) <= tol2 - 0.5 * (b - a):
                self.update_status(OptimizationStatus.SUCCESS)
                return

            if abs(e) > tol1:
                # trial parabolic fit through x, v and w
                r = (x - w) * (fx - fv)
                q = (x - v) * (fx - fw)
                p = (x - v) * q - (x - w) * r
                q = 2.0 * (q - r)
                if q > 0.0:
                    p = -p
                q = abs(q)
                etemp, e = e, d
                if abs(p) >= abs(0.5 * q * etemp) or p <= q * (a - x) or p >= q * (b - x):
                    e = a - x if x >= xm else b - x
                    d = GOLDEN_SECTION * e
                else:
                    d = p / q
                    u = x + d
                    if u - a < tol2 or b - u < tol2:
                        d = copysign(tol1, xm - x)
            else:
                e = a - x if x >= xm else b - x
                d = GOLDEN_SECTION * e

            u = x + d if abs(d) >= tol1 else x + copysign(tol1, d)
            fu = self.evaluate([u])
            if fu <= fx:
                if u >= x:
                    a = x
                else:
                    b = x
                v, w, x = w, x, u
                fv, fw, fx = fw, fx, fu
            else:
                if u < x:
                    a = u
                else:
                    b = u
                if fu <= fw or w == x:
                    v, w = w, u
                    fv, fw = fw, fu
                elif fu <= fv or v in (x, w):
                    v, fv = u, fu

        self.update_status(OptimizationStatus.MAXIMUM_ITERATIONS_REACHED)


__all__ = ["BrentSearch"]
