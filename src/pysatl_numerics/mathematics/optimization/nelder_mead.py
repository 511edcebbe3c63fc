"""
Downhill simplex minimization.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING

import numpy as np

from pysatl_numerics.mathematics.optimization.optimizer import (
    OptimizationStatus,
    Optimizer,
    check_bounds,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pysatl_numerics.types import ObjectiveFunc

REFLECTION = 1.0
CONTRACTION = 0.5
EXPANSION = 2.0


class NelderMead(Optimizer):
    """
    Nelder-Mead simplex search inside a box.

    Parameters
    ----------
    objective : Callable[[ndarray], float]
        Function to optimize.
    number_of_parameters : int
        Dimension of the search space.
    initial_values, lower_bounds, upper_bounds : Sequence[float]
        Starting point and box constraints; every trial vertex is clamped to
        the box.

    Notes
    -----
    The initial simplex perturbs one coordinate of the start per vertex by 5 %
    (or by ``0.00025`` when the coordinate is zero). Convergence is declared
    when the best and worst vertices pass :meth:`Optimizer.check_convergence`.
    """

    def __init__(
        self,
        objective: ObjectiveFunc,
        number_of_parameters: int,
        initial_values: Sequence[float],
        lower_bounds: Sequence[float],
        upper_bounds: Sequence[float],
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

    def _repair(self, point: np.ndarray) -> np.ndarray:
        return np.clip(point, self.lower_bounds, self.upper_bounds)

    def _optimize(self) -> None:
        n = self.number_of_parameters
        simplex = np.tile(self.initial_values, (n + 1, 1))
        for i in range(1, n + 1):
            value = simplex[i, i - 1]
            simplex[i, i - 1] = value + 0.00025 if value == 0.0 else value * 1.05
        simplex = np.array([self._repair(vertex) for vertex in simplex])
        f = np.array([self.evaluate(vertex) for vertex in simplex])

        while self.iterations < self.max_iterations:
            order = np.argsort(f, kind="stable")
            ilo, inhi, ihi = order[0], order[-2], order[-1]
            if self.check_convergence(float(f[ihi]), float(f[ilo])):
                self.update_status(OptimizationStatus.SUCCESS)
                return
            self.iterations += 1

            centroid = (simplex.sum(axis=0) - simplex[ihi]) / n
            reflected = self._repair((1.0 + REFLECTION) * centroid - REFLECTION * simplex[ihi])
            f_reflected = self.evaluate(reflected)

            if f_reflected <= f[ilo]:
                expanded = self._repair(EXPANSION * reflected + (1.0 - EXPANSION) * centroid)
                f_expanded = self.evaluate(expanded)
                if f_expanded < f[ilo]:
                    simplex[ihi], f[ihi] = expanded, f_expanded
                else:
                    simplex[ihi], f[ihi] = reflected, f_reflected
            elif f_reflected >= f[inhi]:
                if f_reflected < f[ihi]:
                    simplex[ihi], f[ihi] = reflected, f_reflected
                contracted = self._repair(
                    CONTRACTION * simplex[ihi] + (1.0 - CONTRACTION) * centroid
                )
                f_contracted = self.evaluate(contracted)
                if f_contracted < f[ihi]:
                    simplex[ihi], f[ihi] = contracted, f_contracted
                else:
                    # shrink towards the best vertex
                    for i in range(n + 1):
                        if i != ilo:
                            simplex[i] = self._repair(0.5 * (simplex[i] + simplex[ilo]))
                            f[i] = self.evaluate(simplex[i])
            else:
                simplex[ihi], f[ihi] = reflected, f_reflected

        self.update_status(OptimizationStatus.MAXIMUM_ITERATIONS_REACHED)


__all__ = ["NelderMead"]
