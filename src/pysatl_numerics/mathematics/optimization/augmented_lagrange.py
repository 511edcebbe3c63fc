"""
Augmented Lagrangian method for general nonlinear constraints.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import inf, isfinite
from typing import TYPE_CHECKING

import numpy as np

from pysatl_numerics.errors import OptimizationError
from pysatl_numerics.mathematics.optimization.constraints import ConstraintType
from pysatl_numerics.mathematics.optimization.optimizer import (
    OptimizationStatus,
    Optimizer,
    ParameterSet,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import NDArray

    from pysatl_numerics.mathematics.optimization.constraints import Constraint
    from pysatl_numerics.types import ObjectiveFunc

RHO_MIN = 1e-6
RHO_MAX = 10.0
MULTIPLIER_LIMIT = 1e20
# Birgin & Martinez update constants
PENALTY_DECREASE = 0.5
PENALTY_GROWTH = 10.0


class AugmentedLagrange(Optimizer):
    """
    Birgin-Martínez augmented Lagrangian wrapper around an inner optimizer.

    Each outer iteration minimizes the augmented Lagrangian with
    ``inner_optimizer`` and then updates the multipliers and the penalty
    weight ``rho``.

    Parameters
    ----------
    objective : Callable[[ndarray], float]
        Primary objective.
    inner_optimizer : Optimizer
        Unconstrained (box-bounded) optimizer. Its objective is replaced by the
        augmented Lagrangian.
    constraints : Sequence[Constraint]
        At least one constraint.

    Raises
    ------
    ValueError
        If no constraints are given or the inner optimizer is itself an
        :class:`AugmentedLagrange`.
    """

    def __init__(
        self,
        objective: ObjectiveFunc,
        inner_optimizer: Optimizer,
        constraints: Sequence[Constraint],
    ) -> None:
        super().__init__(objective, inner_optimizer.number_of_parameters)
        if not constraints:
            raise ValueError("There must be at least one constraint.")
        if isinstance(inner_optimizer, AugmentedLagrange):
            raise ValueError("The inner optimizer cannot also be an augmented Lagrange optimizer.")

        self.constraints = tuple(constraints)
        self.inner_optimizer = inner_optimizer
        self.inner_optimizer.objective = self._augmented_lagrangian
        self.rho = 1.0

        # position of every constraint inside its multiplier vector
        self._slots: list[int] = []
        counts = dict.fromkeys(ConstraintType, 0)
        for c in self.constraints:
            self._slots.append(counts[c.type])
            counts[c.type] += 1
        self.lambda_ = np.zeros(counts[ConstraintType.EQUAL_TO])
        self.mu = np.zeros(counts[ConstraintType.LESSER_THAN_OR_EQUAL_TO])
        self.nu = np.zeros(counts[ConstraintType.GREATER_THAN_OR_EQUAL_TO])

    def _multipliers(self, kind: ConstraintType) -> NDArray[np.float64]:
        if kind is ConstraintType.EQUAL_TO:
            return self.lambda_
        if kind is ConstraintType.LESSER_THAN_OR_EQUAL_TO:
            return self.mu
        return self.nu

    def _augmented_lagrangian(self, x: NDArray[np.float64]) -> float:
        phi = self._scale * float(self.objective(x))
        half_rho = 0.5 * self.rho
        for constraint, slot in zip(self.constraints, self._slots, strict=True):
            c = constraint.violation(x)
            multiplier = self._multipliers(constraint.type)[slot]
            if constraint.type is ConstraintType.EQUAL_TO or c > 0.0:
                phi += half_rho * (c + multiplier / self.rho) ** 2
        return phi

    def _measure(self, x: NDArray[np.float64]) -> tuple[float, float, bool]:
        """Return ``(penalty, sum of squared violations, feasible)`` at ``x``."""
        penalty = squared = 0.0
        feasible = True
        for constraint in self.constraints:
            c = constraint.violation(x)
            if constraint.type is ConstraintType.EQUAL_TO:
                penalty += abs(c)
                squared += c * c
            elif c > 0.0:
                penalty += c
                squared += c * c
            feasible = feasible and constraint.is_satisfied(x)
        return penalty, squared, feasible

    def _inner_minimum(self) -> NDArray[np.float64]:
        self.inner_optimizer.minimize()
        best = self.inner_optimizer.best_parameter_set
        if best is None:
            raise OptimizationError(
                OptimizationStatus.FAILURE,
                f"{type(self.inner_optimizer).__name__} evaluated no point of the augmented Lagrangian",
            )
        return best.values.copy()

    def _optimize(self) -> None:
        self.lambda_[:] = 0.0
        self.mu[:] = 0.0
        self.nu[:] = 0.0
        self.rho = 1.0

        current = self._inner_minimum()

        min_fitness = self.evaluate(current)
        min_penalty, squared, min_feasible = self._measure(current)
        # starting rho suggested by Birgin & Martinez
        num = 2.0 * abs(min_fitness)
        if num < 1e-300:
            self.rho = RHO_MIN
        elif squared < 1e-300:
            self.rho = RHO_MAX
        else:
            self.rho = min(max(num / squared, RHO_MIN), RHO_MAX)
        best = ParameterSet(current, min_fitness)

        icm = inf
        while self.iterations < self.max_iterations:
            previous_icm = icm
            if hasattr(self.inner_optimizer, "initial_values"):
                self.inner_optimizer.initial_values = current
            current = self._inner_minimum()
            fitness = self.evaluate(current)

            icm = 0.0
            for constraint, slot in zip(self.constraints, self._slots, strict=True):
                c = constraint.violation(current)
                multipliers = self._multipliers(constraint.type)
                updated = multipliers[slot] + self.rho * c
                if constraint.type is ConstraintType.EQUAL_TO:
                    icm = max(icm, abs(c))
                    multipliers[slot] = min(max(-MULTIPLIER_LIMIT, updated), MULTIPLIER_LIMIT)
                else:
                    icm = max(icm, abs(max(c, -multipliers[slot] / self.rho)))
                    multipliers[slot] = min(max(0.0, updated), MULTIPLIER_LIMIT)
            penalty, _, feasible = self._measure(current)

            if icm > PENALTY_DECREASE * previous_icm:
                self.rho *= PENALTY_GROWTH

            improved = not min_feasible or penalty < min_penalty or fitness < min_fitness
            if (feasible and improved) or (not min_feasible and penalty < min_penalty):
                if feasible and self.check_convergence(min_fitness, fitness):
                    best = ParameterSet(current, fitness)
                    self._finish(best)
                    self.update_status(OptimizationStatus.SUCCESS)
                    return
                best = ParameterSet(current, fitness)
                min_fitness, min_penalty, min_feasible = fitness, penalty, feasible
            elif icm == 0.0:
                self._finish(best)
                self.update_status(OptimizationStatus.SUCCESS)
                return
            self.iterations += 1

        self._finish(best)
        self.update_status(OptimizationStatus.MAXIMUM_ITERATIONS_REACHED)

    def _finish(self, best: ParameterSet) -> None:
        # the feasible incumbent wins over infeasible points with lower fitness
        if isfinite(best.fitness):
            self.best_parameter_set = best.clone()


__all__ = ["AugmentedLagrange"]
