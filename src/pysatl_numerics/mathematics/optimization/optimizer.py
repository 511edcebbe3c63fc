"""
Optimizer framework.

This module defines the common state machine shared by every optimizer:
evaluation bookkeeping, best-so-far tracking, convergence tests, bound repair
and failure reporting. Concrete algorithms only implement
:meth:`Optimizer._optimize`.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from math import isfinite, nan
from typing import TYPE_CHECKING

import numpy as np

from pysatl_numerics.errors import OptimizationError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import NDArray

    from pysatl_numerics.types import ObjectiveFunc

logger = logging.getLogger(__name__)


class OptimizationStatus(Enum):
    """
    Terminal and initial states of an optimizer run.

    Attributes
    ----------
    NONE
        The optimizer has not been run yet.
    SUCCESS
        The convergence criterion was met.
    MAXIMUM_ITERATIONS_REACHED
        The iteration budget was spent before convergence.
    MAXIMUM_FUNCTION_EVALUATIONS_REACHED
        The evaluation budget was spent before convergence.
    FAILURE
        The run was aborted by an error or a non-finite objective.
    """

    NONE = auto()
    SUCCESS = auto()
    MAXIMUM_ITERATIONS_REACHED = auto()
    MAXIMUM_FUNCTION_EVALUATIONS_REACHED = auto()
    FAILURE = auto()


@dataclass(slots=True)
class ParameterSet:
    """
    A point of the search space together with its fitness.

    Parameters
    ----------
    values : ndarray
        Parameter vector.
    fitness : float, default nan
        Objective value at ``values``.
    weight : float, default 0.0
        Optional weight used by population-based methods.
    """

    values: NDArray[np.float64] = field(default_factory=lambda: np.empty(0))
    fitness: float = nan
    weight: float = 0.0

    def clone(self) -> ParameterSet:
        """Return an independent copy."""
        return ParameterSet(self.values.copy(), self.fitness, self.weight)


class _EvaluationBudgetExhausted(Exception):
    """Internal signal that unwinds an algorithm once evaluations run out."""


class Optimizer(ABC):
    """
    Base class for numerical optimizers.

    Parameters
    ----------
    objective : Callable[[ndarray], float]
        Function to optimize.
    number_of_parameters : int
        Dimension of the search space.

    Attributes
    ----------
    max_iterations : int
        Iteration budget, default 10000.
    max_function_evaluations : int
        Evaluation budget, default ``sys.maxsize``.
    absolute_tolerance, relative_tolerance : float
        Convergence tolerances, default 1e-8.
    report_failure : bool
        Raise :class:`OptimizationError` on any non-successful terminal status.
    record_traces : bool
        Keep every evaluated point in :attr:`parameter_set_trace`.
    """

    def __init__(self, objective: ObjectiveFunc, number_of_parameters: int) -> None:
        if number_of_parameters < 1:
            raise ValueError("The number of parameters must be at least 1.")
        self.objective = objective
        self.number_of_parameters = number_of_parameters

        self.max_iterations: int = 10000
        self.max_function_evaluations: int = sys.maxsize
        self.absolute_tolerance: float = 1e-8
        self.relative_tolerance: float = 1e-8
        self.report_failure: bool = True
        self.record_traces: bool = True

        self.status = OptimizationStatus.NONE
        self.iterations = 0
        self.function_evaluations = 0
        self.best_parameter_set: ParameterSet | None = None
        self.parameter_set_trace: list[ParameterSet] = []
        self._scale = 1.0
        self._track_best = True

    def minimize(self) -> ParameterSet:
        """
        Minimize the objective.

        Returns
        -------
        ParameterSet
            Best point found.

        Raises
        ------
        OptimizationError
            If the run does not succeed and :attr:`report_failure` is set.
        """
        return self._run(1.0)

    def maximize(self) -> ParameterSet:
        """
        Maximize the objective by minimizing its negation.

        The fitness of :attr:`best_parameter_set` is reported in the sign of
        the original objective.
        """
        return self._run(-1.0)

    def validate_settings(self) -> None:
        """
        Check the optimizer configuration.

        Raises
        ------
        ValueError
            If budgets are below 10 or tolerances are outside ``(0, 1]``.
        """
        if self.max_iterations < 10:
            raise ValueError("The maximum number of iterations must be at least 10.")
        if self.max_function_evaluations < 10:
            raise ValueError("The maximum number of function evaluations must be at least 10.")
        if not 0.0 < self.absolute_tolerance <= 1.0:
            raise ValueError("The absolute tolerance must be in (0, 1].")
        if not 0.0 < self.relative_tolerance <= 1.0:
            raise ValueError("The relative tolerance must be in (0, 1].")

    def evaluate(self, values: Sequence[float] | NDArray[np.float64]) -> float:
        """
        Evaluate the (scaled) objective and update the bookkeeping.

        Parameters
        ----------
        values : array_like
            Point to evaluate.

        Returns
        -------
        float
            Objective value in minimization sign.
        """
        if self.function_evaluations >= self.max_function_evaluations:
            self.update_status(OptimizationStatus.MAXIMUM_FUNCTION_EVALUATIONS_REACHED)
            raise _EvaluationBudgetExhausted

        x = np.array(values, dtype=float)
        fitness = self._scale * float(self.objective(x))
        self.function_evaluations += 1

        if self._track_best and (
            self.best_parameter_set is None
            or fitness <= self.best_parameter_set.fitness
            or not isfinite(self.best_parameter_set.fitness)
        ):
            self.best_parameter_set = ParameterSet(x.copy(), fitness)
        if self.record_traces:
            self.parameter_set_trace.append(ParameterSet(x.copy(), self._scale * fitness))
        return fitness

    def check_convergence(self, old_value: float, new_value: float) -> bool:
        """
        Relative change test guarded by the absolute tolerance.

        Non-finite values never converge.
        """
        if not (isfinite(old_value) and isfinite(new_value)):
            return False
        delta = 2.0 * abs(new_value - old_value)
        scale = abs(new_value) + abs(old_value) + self.absolute_tolerance
        return delta / scale < self.relative_tolerance

    @staticmethod
    def repair_parameter(value: float, lower: float, upper: float) -> float:
        """Clamp ``value`` into ``[lower, upper]``."""
        return min(max(value, lower), upper)

    def update_status(self, status: OptimizationStatus, cause: BaseException | None = None) -> None:
        """
        Set the terminal status and report unsuccessful runs.

        Raises
        ------
        OptimizationError
            If ``status`` is not a success and :attr:`report_failure` is set.
        """
        self.status = status
        if status in (OptimizationStatus.SUCCESS, OptimizationStatus.NONE):
            return

        message = f"{type(self).__name__} terminated with status {status.name}"
        if cause is not None:
            message += f": {cause}"
        if self.report_failure:
            raise OptimizationError(status, message) from cause
        logger.warning(message)

    def _run(self, scale: float) -> ParameterSet:
        self.validate_settings()
        self.status = OptimizationStatus.NONE
        self.iterations = 0
        self.function_evaluations = 0
        self.best_parameter_set = None
        self.parameter_set_trace = []
        self._scale = scale

        logger.debug("Starting %s over %d parameter(s)", type(self).__name__, self.number_of_parameters)
        try:
            self._optimize()
            best = self.best_parameter_set
            if self.status is OptimizationStatus.SUCCESS and (
                best is None or not isfinite(best.fitness)
            ):
                self.update_status(OptimizationStatus.FAILURE)
        except _EvaluationBudgetExhausted:
            pass
        except OptimizationError as e:
            # errors raised by nested optimizers end this run as a failure
            if self.status is not OptimizationStatus.NONE:
                raise
            self.update_status(OptimizationStatus.FAILURE, e)
        except Exception as e:
            self.update_status(OptimizationStatus.FAILURE, e)
        finally:
            if self.best_parameter_set is not None:
                self.best_parameter_set.fitness *= scale
            logger.debug(
                "%s finished: status=%s iterations=%d evaluations=%d best=%s",
                type(self).__name__,
                self.status.name,
                self.iterations,
                self.function_evaluations,
                None if self.best_parameter_set is None else self.best_parameter_set.fitness,
            )

        if self.best_parameter_set is None:
            return ParameterSet(np.full(self.number_of_parameters, nan))
        return self.best_parameter_set

    @abstractmethod
    def _optimize(self) -> None:
        """Run the algorithm, calling :meth:`evaluate` and :meth:`update_status`."""


def check_bounds(
    number_of_parameters: int,
    lower_bounds: Sequence[float],
    upper_bounds: Sequence[float],
    initial_values: Sequence[float] | None = None,
    strict: bool = False,
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64] | None]:
    """
    Validate box constraints shared by the bounded optimizers.

    Parameters
    ----------
    number_of_parameters : int
        Expected length of every sequence.
    lower_bounds, upper_bounds : Sequence[float]
        Box constraints.
    initial_values : Sequence[float], optional
        Starting point that must lie inside the box.
    strict : bool, default False
        Require ``lower < upper`` instead of ``lower <= upper``.

    Returns
    -------
    tuple[ndarray, ndarray, ndarray | None]
        Bounds and initial values as float arrays.

    Raises
    ------
    ValueError
        If lengths differ, bounds are inverted, or the start lies outside.
    """
    lower = np.array(lower_bounds, dtype=float)
    upper = np.array(upper_bounds, dtype=float)
    initial = None if initial_values is None else np.array(initial_values, dtype=float)

    sizes = {lower.size, upper.size} | ({initial.size} if initial is not None else set())
    if sizes != {number_of_parameters}:
        raise ValueError(
            "The initial values and lower and upper bounds must be the same length "
            "as the number of parameters."
        )
    inverted = upper <= lower if strict else upper < lower
    if np.any(inverted):
        raise ValueError("The upper bound cannot be less than the lower bound.")
    if initial is not None and np.any((initial < lower) | (initial > upper)):
        raise ValueError("The initial values must be between the upper and lower bounds.")
    return lower, upper, initial


__all__ = [
    "OptimizationStatus",
    "Optimizer",
    "ParameterSet",
    "check_bounds",
]
