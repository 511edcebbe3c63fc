"""
Estimation capabilities of univariate families.

Capabilities are runtime-checkable protocols, so callers test them with
``isinstance`` instead of relying on a class hierarchy.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from typing import TYPE_CHECKING, Protocol, TypeAlias, runtime_checkable

from pysatl_numerics.errors import EstimationError, OptimizationError
from pysatl_numerics.mathematics.optimization.nelder_mead import NelderMead

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import ArrayLike, NDArray

    from pysatl_numerics.distributions.univariate.base import UnivariateDistribution

logger = logging.getLogger(__name__)

ParameterBounds: TypeAlias = tuple[list[float], list[float], list[float]]
"""``(initial values, lower bounds, upper bounds)`` of an MLE search."""


@runtime_checkable
class MaximumLikelihoodEstimation(Protocol):
    """Family fitted by maximizing the log-likelihood."""

    def get_parameter_constraints(self, sample: NDArray[np.float64]) -> ParameterBounds:
        """Initial values and box bounds for the likelihood search."""
        ...

    def mle(self, sample: ArrayLike) -> tuple[float, ...]:
        """Maximum likelihood parameters for ``sample``."""
        ...


@runtime_checkable
class MomentEstimation(Protocol):
    """Family fitted from its product moments."""

    def parameters_from_moments(self, moments: tuple[float, ...]) -> tuple[float, ...]:
        """Parameters from ``(mean, standard deviation, skewness, kurtosis)``."""
        ...


@runtime_checkable
class LinearMomentEstimation(Protocol):
    """Family fitted from its L-moments."""

    def parameters_from_linear_moments(self, moments: tuple[float, ...]) -> tuple[float, ...]:
        """Parameters from ``(λ1, λ2, τ3, τ4)``."""
        ...


def fit_maximum_likelihood(
    distribution: UnivariateDistribution, sample: NDArray[np.float64]
) -> tuple[float, ...]:
    """
    Maximize the log-likelihood of ``sample`` with Nelder-Mead.

    The search runs on a clone, inside the bounds returned by the family's
    ``get_parameter_constraints``; ``distribution`` is not modified.

    Raises
    ------
    EstimationError
        If the optimizer does not converge.
    """
    if not isinstance(distribution, MaximumLikelihoodEstimation):
        raise EstimationError(f"{type(distribution).__name__} is not MLE-capable.")
    initials, lowers, uppers = distribution.get_parameter_constraints(sample)
    trial = distribution.clone()
    trial.report_failure = False

    def log_likelihood(values: NDArray[np.float64]) -> float:
        trial.set_parameters(values)
        return trial.log_likelihood(sample)

    solver = NelderMead(log_likelihood, len(initials), initials, lowers, uppers)
    try:
        best = solver.maximize()
    except OptimizationError as e:
        raise EstimationError(
            f"Maximum likelihood estimation of {type(distribution).__name__} failed: {e}"
        ) from e
    logger.debug(
        "MLE of %s converged after %d evaluations", type(distribution).__name__, solver.function_evaluations
    )
    return tuple(float(v) for v in best.values)


__all__ = [
    "LinearMomentEstimation",
    "MaximumLikelihoodEstimation",
    "MomentEstimation",
    "ParameterBounds",
    "fit_maximum_likelihood",
]
